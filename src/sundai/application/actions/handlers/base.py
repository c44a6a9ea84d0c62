"""
Shared machinery for action handlers.

A handler resolves its raw parameters once, runs its business logic and
returns an Outcome. Failures raised inside ``run`` are converted into
``❌``-prefixed outcomes here so no exception reaches the conversation.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Type

from ....core.exceptions import EntityNotFoundError, SundaiException, ValidationFailedError
from ....core.utils.datetime_utils import format_display_date
from ....core.utils.string_utils import parse_int
from ....domain.enums import EntityKind
from ....domain.errors import DomainError
from ...dto.outcome import Outcome
from ...ports.repositories.clinic_repositories import ClinicRepositories
from ...ports.services.dashboard_view import DashboardView
from ...store import EntityStore
from ..params import resolve_params

logger = logging.getLogger(__name__)

LIST_CAPS: Dict[EntityKind, int] = {
    EntityKind.PATIENT: 10,
    EntityKind.INVENTORY: 10,
    EntityKind.APPOINTMENT: 8,
    EntityKind.DEADLINE: 8,
}


@dataclass
class HandlerContext:
    """Collaborators every handler borrows."""

    repositories: ClinicRepositories
    store: EntityStore
    view: DashboardView


class ActionHandler(ABC):
    """One domain action behind the ``execute(params) -> Outcome`` interface."""

    # Canonical action name, set by subclasses
    action: str = ""
    kind: Optional[EntityKind] = None
    mutating: bool = False
    params_class: Optional[Type] = None
    # Used in "Failed to <verb>: ..." messages
    verb: str = "complete the action"

    def __init__(self, context: HandlerContext) -> None:
        self._context = context

    @property
    def repositories(self) -> ClinicRepositories:
        return self._context.repositories

    @property
    def store(self) -> EntityStore:
        return self._context.store

    @property
    def view(self) -> DashboardView:
        return self._context.view

    async def execute(self, params: Optional[Dict[str, Any]] = None) -> Outcome:
        try:
            resolved = resolve_params(self.params_class, params) if self.params_class else (params or {})
            return await self.run(resolved)
        except (SundaiException, DomainError) as e:
            logger.info(f"⚠️ {self.action} rejected: {e.message}")
            return Outcome.failure(e.message)
        except Exception as e:
            logger.error(f"❌ {self.action} failed: {e}", exc_info=True)
            return Outcome.failure(f"Failed to {self.verb}: {e}")

    @abstractmethod
    async def run(self, params: Any) -> Outcome:
        """Business logic against already-resolved parameters."""
        pass

    async def after_write(self, kind: EntityKind, dates: Iterable[Optional[str]] = ()) -> None:
        """Store refresh, then dependent view refreshes, in that order."""
        if not await self.store.refresh(kind):
            logger.warning(f"⚠️ Store refresh for {kind.value} failed after write: {self.store.last_error}")
        await self.view.refresh_stats()
        if kind.is_dated:
            await self.view.refresh_calendar()
            displayed = self.view.displayed_schedule_date
            if displayed and displayed in {d for d in dates if d}:
                await self.view.refresh_schedule()
        await self.view.refresh_list(kind)

    async def ensure_written(self, kind: EntityKind, written: bool, term: Any) -> None:
        """Raise NotFound when the repository no longer holds the resolved record."""
        if written:
            return
        logger.warning(f"⚠️ {kind.value} '{term}' vanished before {self.action}, refreshing snapshot")
        await self.store.refresh(kind)
        raise EntityNotFoundError(kind.value, str(term))

    async def fresh_snapshot(self, kind: EntityKind) -> Tuple[Any, ...]:
        """Refresh one kind best-effort and return its snapshot (stale on failure)."""
        await self.store.refresh(kind)
        return self.store.all(kind)

    def resolve_target(
        self,
        kind: EntityKind,
        entity_id: Optional[str],
        term: Optional[str],
        narrow: Optional[Any] = None,
    ) -> Tuple[Any, bool]:
        """
        Resolve loose identifying parameters to one cached record.

        The id wins when given; otherwise the first case-insensitive substring
        match on the primary text field is taken. Ambiguity is not reported.

        Returns:
            (record, resolved_by_id)
        """
        if entity_id:
            record = self.store.find_by_id(kind, entity_id)
            if record is None:
                raise EntityNotFoundError(kind.value, entity_id)
            return record, True

        if not term:
            raise ValidationFailedError(f"{kind.value.capitalize()} name or id is required.")

        matches = self.store.search(kind, term)
        if narrow is not None:
            matches = [record for record in matches if narrow(record)]
        if not matches:
            raise EntityNotFoundError(kind.value, term)
        if len(matches) > 1:
            logger.debug(f"{len(matches)} {kind.value} records match '{term}', using the first")
        return matches[0], False

    async def resolve_patient(
        self, entity_id: Optional[str], number: Any, name: Optional[str]
    ) -> Tuple[Any, bool]:
        """Resolve a patient by id, then patient number, then name.

        The flag is True when the name was not needed for the lookup.
        """
        if entity_id:
            return self.resolve_target(EntityKind.PATIENT, entity_id, None)
        if number is not None:
            patient_number = to_int(number, "Patient number")
            patient = self.store.find(
                EntityKind.PATIENT, lambda record: record.patient_number == patient_number
            )
            if patient is None:
                patient = await self.repositories.patients.find_by_number(patient_number)
            if patient is None:
                raise EntityNotFoundError("patient", f"#{patient_number}")
            return patient, True
        return self.resolve_target(EntityKind.PATIENT, None, name)


def require(value: Any, message: str) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationFailedError(message)
    return value


def to_int(value: Any, field: str) -> Optional[int]:
    """Parse an optional integer parameter, rejecting non-numeric input."""
    if value is None:
        return None
    parsed = parse_int(value)
    if parsed is None:
        raise ValidationFailedError(f"{field} must be a whole number, got '{value}'.")
    return parsed


def to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "y")
    return bool(value)


def show_date(value: Optional[str]) -> str:
    """DD/MM/YYYY for display, '' when unset."""
    return format_display_date(value) if value else ""


def details(header: str, rows: Sequence[Tuple[str, Any]]) -> str:
    """Bullet list of label/value rows, skipping empty values."""
    lines = [f"• {label}: {value}" for label, value in rows if value not in (None, "")]
    return header + "\n" + "\n".join(lines)


def capped(lines: List[str], cap: int) -> str:
    """Join the first ``cap`` lines and note how many were left out."""
    text = "\n".join(lines[:cap])
    if len(lines) > cap:
        text += f"\n... +{len(lines) - cap} more"
    return text


def merge(record: Any, changes: Dict[str, Any]) -> Tuple[Any, Dict[str, Any]]:
    """Apply changes to a copy of ``record``; returns it with the normalized changes."""
    merged = replace(record, **changes)
    return merged, {key: getattr(merged, key) for key in changes}
