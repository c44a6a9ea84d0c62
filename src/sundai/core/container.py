"""
Dependency injection container for the SundAI application.

A lightweight registry of named services built once at startup and read by
the API dependency providers.
"""

from typing import Any, Callable, Dict, Optional

from .exceptions import ConfigurationError


class Container:
    """Lightweight dependency injection container."""

    def __init__(self) -> None:
        self._factories: Dict[str, Callable[[], Any]] = {}
        self._singletons: Dict[str, Any] = {}

    def register_singleton(self, name: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[name] = instance

    def register_factory(self, name: str, factory: Callable[[], Any]) -> None:
        """Register a factory function; its product is cached on first use."""
        self._factories[name] = factory

    def get(self, name: str) -> Any:
        """Get a service by name."""
        if name in self._singletons:
            return self._singletons[name]

        if name in self._factories:
            instance = self._factories[name]()
            self._singletons[name] = instance
            return instance

        raise ConfigurationError(f"Service '{name}' not found")

    def get_or_none(self, name: str) -> Optional[Any]:
        """Get a service by name, return None if not found."""
        try:
            return self.get(name)
        except ConfigurationError:
            return None

    def has(self, name: str) -> bool:
        """Check if a service is registered."""
        return name in self._factories or name in self._singletons

    def clear(self) -> None:
        """Clear all registered services."""
        self._factories.clear()
        self._singletons.clear()


class ServiceNames:
    """Service names used throughout the application."""

    SETTINGS = "settings"

    # Persistence and state
    REPOSITORIES = "repositories"
    ENTITY_STORE = "entity_store"
    DASHBOARD = "dashboard"

    # Conversation core
    DISPATCHER = "dispatcher"
    LINKER = "linker"
    ROUTER = "conversation_router"

    # External services
    ASSISTANT = "assistant_service"
    RETRIEVAL = "retrieval_service"
    AUDIO = "audio_service"
    BACKUP = "backup_service"
