"""FastAPI dependency providers.

Every service is built once at startup (see ``sundai.app``) and lives in the
container attached to ``app.state``.
"""

from typing import Optional

from fastapi import Request

from ..application.actions.registry import Dispatcher
from ..application.conversation.router import ConversationRouter
from ..application.linking.mention_linker import EntityMentionLinker
from ..application.ports.repositories.clinic_repositories import ClinicRepositories
from ..application.ports.services.backup_service import BackupService
from ..application.services.dashboard import DashboardState
from ..application.store import EntityStore
from ..core.container import Container, ServiceNames


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_repositories(request: Request) -> ClinicRepositories:
    return get_container(request).get(ServiceNames.REPOSITORIES)


def get_entity_store(request: Request) -> EntityStore:
    return get_container(request).get(ServiceNames.ENTITY_STORE)


def get_dashboard(request: Request) -> DashboardState:
    return get_container(request).get(ServiceNames.DASHBOARD)


def get_dispatcher(request: Request) -> Dispatcher:
    return get_container(request).get(ServiceNames.DISPATCHER)


def get_linker(request: Request) -> EntityMentionLinker:
    return get_container(request).get(ServiceNames.LINKER)


def get_conversation_router(request: Request) -> ConversationRouter:
    return get_container(request).get(ServiceNames.ROUTER)


def get_backup_service(request: Request) -> Optional[BackupService]:
    return get_container(request).get_or_none(ServiceNames.BACKUP)
