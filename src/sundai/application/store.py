"""
In-process cache of the four clinic record collections.

The store is never the system of record: handlers write through the
repositories and then call ``refresh``. Each collection is held as a tuple
and replaced by a single assignment, so readers always see either the old
or the new snapshot.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from ..core.utils.string_utils import contains_ci
from ..domain.enums import EntityKind
from .ports.repositories.clinic_repositories import ClinicRepositories

logger = logging.getLogger(__name__)

# Field searched by default for each kind
PRIMARY_TEXT_FIELD: Dict[EntityKind, str] = {
    EntityKind.PATIENT: "name",
    EntityKind.APPOINTMENT: "patient_name",
    EntityKind.DEADLINE: "title",
    EntityKind.INVENTORY: "name",
}

Predicate = Callable[[Any], bool]


class EntityStore:
    """Snapshot cache of patients, appointments, deadlines and inventory."""

    def __init__(self, repositories: ClinicRepositories, page_size: int = 1000) -> None:
        self._repositories = repositories
        self._page_size = page_size
        self._collections: Dict[EntityKind, Tuple[Any, ...]] = {kind: () for kind in EntityKind}
        self.connected = False
        self.last_error: Optional[str] = None

    async def load(self) -> bool:
        """Initial load. An unreachable repository leaves every collection empty."""
        try:
            available = await self._repositories.is_available()
        except Exception as e:
            logger.warning(f"⚠️ Persistence probe failed: {e}")
            available = False

        if not available:
            self.connected = False
            self.last_error = "Database not connected"
            self._collections = {kind: () for kind in EntityKind}
            logger.warning("⚠️ Persistence unavailable at startup, starting with empty collections")
            return False

        return await self.refresh()

    async def refresh(self, kind: Optional[EntityKind] = None) -> bool:
        """
        Re-fetch one kind (or all kinds) from persistence.

        On failure the previous snapshot is kept, ``last_error`` is set and
        False is returned.
        """
        kinds = [kind] if kind is not None else list(EntityKind)
        fresh: Dict[EntityKind, Tuple[Any, ...]] = {}
        try:
            for k in kinds:
                records = await self._repositories.for_kind(k).find_all(
                    limit=self._page_size, offset=0
                )
                fresh[k] = tuple(records)
        except Exception as e:
            self.connected = False
            self.last_error = str(e)
            logger.error(f"❌ Refresh of {', '.join(k.value for k in kinds)} failed: {e}")
            return False

        self._collections = {**self._collections, **fresh}
        self.connected = True
        self.last_error = None
        logger.debug(
            "Store refreshed: " + ", ".join(f"{k.value}={len(v)}" for k, v in fresh.items())
        )
        return True

    def all(self, kind: EntityKind) -> Tuple[Any, ...]:
        return self._collections[kind]

    def count(self, kind: EntityKind) -> int:
        return len(self._collections[kind])

    def find(
        self, kind: EntityKind, predicate: Predicate, first: bool = True
    ) -> Union[Optional[Any], List[Any]]:
        """First match (or None) when ``first``; otherwise every match."""
        snapshot = self._collections[kind]
        if first:
            return next((record for record in snapshot if predicate(record)), None)
        return [record for record in snapshot if predicate(record)]

    def find_by_id(self, kind: EntityKind, entity_id: Optional[str]) -> Optional[Any]:
        if entity_id is None:
            return None
        wanted = str(entity_id)
        return self.find(kind, lambda record: record.id == wanted)

    def search(
        self, kind: EntityKind, term: str, fields: Optional[Sequence[str]] = None
    ) -> List[Any]:
        """Case-insensitive substring search over the given (or primary) text fields."""
        fields = fields or (PRIMARY_TEXT_FIELD[kind],)
        return self.find(
            kind,
            lambda record: _matches_any(record, fields, term),
            first=False,
        )

    def as_context(self, kinds: Iterable[EntityKind]) -> Dict[str, List[Dict[str, Any]]]:
        """Plain-dict view of some collections, keyed by view name."""
        return {
            kind.view_name: [record.to_record() for record in self._collections[kind]]
            for kind in kinds
        }


def _matches_any(record: Any, fields: Sequence[str], term: str) -> bool:
    return any(contains_ci(getattr(record, field, "") or "", term) for field in fields)
