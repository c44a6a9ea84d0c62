"""
Settings loading and the service container.
"""

import json
import logging

import pytest

from sundai.core.config import (
    AzureOpenAISettings,
    DatabaseSettings,
    LoggingSettings,
    get_settings,
    reset_settings,
)
from sundai.core.container import Container, ServiceNames
from sundai.core.exceptions import ConfigurationError
from sundai.core.structured_logger import JSONFormatter, configure_logging


@pytest.fixture(autouse=True)
def fresh_settings():
    reset_settings()
    yield
    reset_settings()


def test_defaults(monkeypatch):
    monkeypatch.delenv("MONGO_BACKEND", raising=False)
    assert DatabaseSettings().backend == "memory"
    assert AzureOpenAISettings(endpoint="", api_key="").is_configured is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("MONGO_BACKEND", "Mongo")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("RAG_BASE_URL", "http://rag.internal:9000")

    settings = get_settings()

    assert settings.database.backend == "mongo"
    assert settings.logging.level == "DEBUG"
    assert settings.retrieval.base_url == "http://rag.internal:9000"
    assert get_settings() is settings


@pytest.mark.parametrize(
    "name, value",
    [
        ("MONGO_BACKEND", "postgres"),
        ("MONGO_URI", "http://localhost"),
        ("AZURE_OPENAI_ENDPOINT", "https://example.com"),
        ("ASSISTANT_DEFAULT_MODE", "chat"),
        ("LOG_FORMAT", "xml"),
    ],
)
def test_invalid_values_are_rejected(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        get_settings()


def test_logging_settings_normalize_case():
    settings = LoggingSettings(level="warning", format="JSON")
    assert (settings.level, settings.format) == ("WARNING", "json")


def test_container_singletons_and_factories():
    container = Container()
    container.register_singleton(ServiceNames.SETTINGS, "settings")
    built = []
    container.register_factory(ServiceNames.LINKER, lambda: built.append(1) or object())

    assert container.get(ServiceNames.SETTINGS) == "settings"
    assert container.get(ServiceNames.LINKER) is container.get(ServiceNames.LINKER)
    assert built == [1]
    assert container.has(ServiceNames.LINKER)

    with pytest.raises(ConfigurationError):
        container.get(ServiceNames.BACKUP)
    assert container.get_or_none(ServiceNames.BACKUP) is None

    container.clear()
    assert not container.has(ServiceNames.SETTINGS)


def test_json_log_lines_carry_event_fields():
    record = logging.LogRecord("sundai.test", logging.INFO, __file__, 1, "🏁 done", None, None)
    record.extra_data = {"action": "list_patients", "ok": True}

    line = json.loads(JSONFormatter().format(record))

    assert line["message"] == "🏁 done"
    assert line["level"] == "INFO"
    assert line["action"] == "list_patients"
    assert line["ok"] is True


def test_configure_logging_is_idempotent():
    logger = configure_logging(LoggingSettings(level="debug", format="json"))
    handlers = list(logger.handlers)

    assert configure_logging(LoggingSettings(level="info")) is logger
    assert logger.handlers == handlers
    assert logger.level == logging.INFO
