"""
FastAPI application factory and main app configuration.
"""

import logging
import sys
import traceback
import uuid
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.routers import actions, chat, dashboard, health
from .api.schemas.common import ErrorResponse
from .application.actions.handlers.base import HandlerContext
from .application.actions.registry import build_dispatcher
from .application.conversation.mode_store import ModePreferenceStore
from .application.conversation.router import ConversationRouter
from .application.linking.mention_linker import EntityMentionLinker
from .application.ports.repositories.clinic_repositories import ClinicRepositories
from .application.services.dashboard import DashboardState
from .application.store import EntityStore
from .core.config import Settings, get_settings
from .core.container import Container, ServiceNames
from .core.exceptions import (
    BackendFailureError,
    ConfigurationError,
    EntityNotFoundError,
    NotConnectedError,
    SundaiException,
    TranscriptionFailureError,
    ValidationFailedError,
)
from .core.structured_logger import configure_logging
from .domain.enums import AssistantMode
from .domain.errors import DomainError

logger = logging.getLogger("sundai")

_STATUS_BY_EXCEPTION = (
    (ValidationFailedError, 422),
    (EntityNotFoundError, 404),
    (NotConnectedError, 503),
    (BackendFailureError, 502),
    (TranscriptionFailureError, 502),
    (ConfigurationError, 503),
)


def _log(msg: str, level: int = logging.INFO) -> None:
    print(msg, flush=True)
    logger.log(level, msg)


async def _build_repositories(settings: Settings) -> ClinicRepositories:
    if settings.database.backend == "mongo":
        from .adapters.db.mongo.connection import init_mongo

        return await init_mongo(settings.database)

    from .adapters.db.memory.repositories import InMemoryClinicRepositories

    _log("⚠️  Using in-memory persistence (MONGO_BACKEND=memory)", logging.WARNING)
    return InMemoryClinicRepositories()


def _build_backends(settings: Settings, overrides: dict) -> dict:
    """Assistant, retrieval, audio services; absent ones stay None."""
    backends = {
        "assistant": overrides.get("assistant"),
        "retrieval": overrides.get("retrieval"),
        "audio": overrides.get("audio"),
    }

    if backends["retrieval"] is None and "retrieval" not in overrides:
        from .adapters.external.retrieval_service_http import HttpRetrievalService

        backends["retrieval"] = HttpRetrievalService(settings.retrieval)

    if settings.azure_openai.is_configured:
        from .core.ai_client import AzureAIClient

        client = AzureAIClient(settings.azure_openai)
        if backends["assistant"] is None and "assistant" not in overrides:
            from .adapters.external.assistant_service_openai import OpenAIAssistantService

            backends["assistant"] = OpenAIAssistantService(client, settings.assistant)
        if backends["audio"] is None and "audio" not in overrides:
            from .adapters.external.audio_service_openai import WhisperAudioService

            backends["audio"] = WhisperAudioService(client, settings.audio)
    elif not overrides:
        _log("⚠️  Azure OpenAI not configured; tool-mode chat and voice input disabled", logging.WARNING)

    return backends


async def build_container(settings: Settings, **overrides: Any) -> Container:
    """
    Wire every service of the application.

    Keyword overrides (``repositories``, ``mode_store``, ``assistant``,
    ``retrieval``, ``audio``, ``backup``) replace the adapters chosen from settings; an
    override of ``None`` disables that backend.
    """
    container = Container()
    container.register_singleton(ServiceNames.SETTINGS, settings)

    repositories = overrides.get("repositories") or await _build_repositories(settings)
    store = EntityStore(repositories, page_size=settings.database.page_size)
    if await store.load():
        _log("✅ Entity cache loaded")
    else:
        _log(f"⚠️  Database not reachable at startup: {store.last_error}", logging.WARNING)

    view = DashboardState(store, repositories)
    await view.load()
    dispatcher = build_dispatcher(HandlerContext(repositories=repositories, store=store, view=view))
    linker = EntityMentionLinker(store, view)

    backends = _build_backends(settings, overrides)
    mode_store = overrides.get("mode_store") or ModePreferenceStore(
        settings.assistant.preference_file, AssistantMode(settings.assistant.default_mode)
    )
    conversation = ConversationRouter(
        dispatcher,
        store,
        linker,
        mode_store,
        assistant=backends["assistant"],
        retrieval=backends["retrieval"],
        audio=backends["audio"],
        min_audio_bytes=settings.audio.min_bytes,
    )

    backup = overrides.get("backup")
    if backup is None and "backup" not in overrides:
        from .adapters.backup.json_backup_service import JsonBackupService

        backup = JsonBackupService(repositories, settings.backup)

    container.register_singleton(ServiceNames.REPOSITORIES, repositories)
    container.register_singleton(ServiceNames.ENTITY_STORE, store)
    container.register_singleton(ServiceNames.DASHBOARD, view)
    container.register_singleton(ServiceNames.DISPATCHER, dispatcher)
    container.register_singleton(ServiceNames.LINKER, linker)
    container.register_singleton(ServiceNames.ROUTER, conversation)
    for name, service in (
        (ServiceNames.ASSISTANT, backends["assistant"]),
        (ServiceNames.RETRIEVAL, backends["retrieval"]),
        (ServiceNames.AUDIO, backends["audio"]),
        (ServiceNames.BACKUP, backup),
    ):
        if service is not None:
            container.register_singleton(name, service)
    return container


def _make_lifespan(overrides: dict):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        settings = get_settings()
        configure_logging(settings.logging)
        try:
            _log("=" * 60)
            _log(f"🚀 Starting {settings.app_name} v{settings.app_version}")
            _log(f"   Environment: {settings.app_env}")
            _log(f"   Persistence: {settings.database.backend}")
            _log("=" * 60)

            app.state.container = await build_container(settings, **overrides)
            _log("✅ Application startup completed successfully")
        except Exception as e:
            error_sep = "=" * 60
            _log(error_sep, logging.ERROR)
            _log("❌ CRITICAL: Application startup failed", logging.ERROR)
            _log(f"Error: {e}", logging.ERROR)
            _log(f"Error type: {type(e).__name__}", logging.ERROR)
            _log(f"Traceback:\n{traceback.format_exc()}", logging.ERROR)
            _log(error_sep, logging.ERROR)
            sys.stderr.flush()
            raise

        yield

        # Shutdown
        _log(f"🛑 Shutting down {settings.app_name}")
        repositories = app.state.container.get_or_none(ServiceNames.REPOSITORIES)
        if repositories is not None:
            await repositories.close()

    return lifespan


def create_app(**overrides: Any) -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Conversational assistant for the clinic dashboard",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=_make_lifespan(overrides),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["*"],
        max_age=600,
    )

    @app.middleware("http")
    async def request_id_and_logging(request: Request, call_next):
        request.state.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        logger.info(f"🌐 {request.method} {request.url.path}")
        response = await call_next(request)
        response.headers["X-Request-ID"] = request.state.request_id
        logger.info(f"   Response: {response.status_code}")
        return response

    app.include_router(health.router)
    app.include_router(chat.router)
    app.include_router(actions.router)
    app.include_router(dashboard.router)

    def _error_response(request: Request, status_code: int, error: str, message: str, details: Optional[dict]):
        req_id = getattr(request.state, "request_id", None)
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=error,
                message=message,
                request_id=req_id or "",
                details=details or {},
            ).model_dump(),
        )

    @app.exception_handler(SundaiException)
    async def sundai_error_handler(request: Request, exc: SundaiException):
        status_code = next((code for cls, code in _STATUS_BY_EXCEPTION if isinstance(exc, cls)), 500)
        logger.error(f"SundaiException: {exc.error_code} ({status_code}) {exc.message}")
        return _error_response(request, status_code, exc.error_code or "INTERNAL_ERROR", exc.message, exc.details)

    # Global exception handler for domain errors
    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        return _error_response(request, 400, exc.error_code or "DOMAIN_ERROR", exc.message, exc.details)

    # Global exception handler for validation errors
    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return _error_response(request, 422, "VALIDATION_ERROR", str(exc), {})

    @app.exception_handler(RequestValidationError)
    async def pydantic_error_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
            for err in exc.errors()
        ]
        return _error_response(request, 422, "INVALID_INPUT", "Request validation failed", {"errors": errors})

    @app.get("/")
    async def root():
        return {"service": settings.app_name, "version": settings.app_version, "status": "running"}

    return app


app = create_app()
