"""
Entity mention linking for rendered chat messages.

Known patients, appointments, deadlines and inventory items mentioned in a
message are wrapped in navigable anchors. Existing markup and every anchor
inserted so far are swapped for placeholder tokens while scanning, so a later
pattern can never match inside an earlier annotation.
"""

import logging
import re
from typing import Any, Callable, Dict, List, Optional

from ...core.exceptions import EntityNotFoundError
from ...core.utils.datetime_utils import format_display_date, parse_date
from ...core.utils.string_utils import escape_html
from ...domain.enums import EntityKind
from ..ports.services.dashboard_view import DashboardView
from ..store import EntityStore

logger = logging.getLogger(__name__)

LINK_MARKER = "entity-link"
MIN_NAME_LENGTH = 3
MIN_TITLE_LENGTH = 4

_TAG = re.compile(r"<[^>]+>")
# Delimiters and index digits are private-use characters, never part of a
# name, date or markup, so no mention pattern can match inside a token
_OPEN, _CLOSE = "\ue000", "\ue001"
_DIGIT_BASE = 0xE010
_TOKEN = re.compile(_OPEN + "([\ue010-\ue019]+)" + _CLOSE)


class _Placeholders:
    """Indexed stash of text fragments hidden from the scanners."""

    def __init__(self) -> None:
        self._fragments: List[str] = []

    def hide(self, fragment: str) -> str:
        self._fragments.append(fragment)
        index = "".join(chr(_DIGIT_BASE + int(d)) for d in str(len(self._fragments) - 1))
        return f"{_OPEN}{index}{_CLOSE}"

    def restore(self, text: str) -> str:
        def fragment(match: "re.Match[str]") -> str:
            index = int("".join(str(ord(c) - _DIGIT_BASE) for c in match.group(1)))
            return self._fragments[index]

        return _TOKEN.sub(fragment, text)


def _anchor(kind: EntityKind, entity_id: Any, label: str, **data: str) -> str:
    extra = "".join(f' data-{key}="{escape_html(str(value))}"' for key, value in data.items())
    return (
        f'<a href="#" class="{LINK_MARKER} {kind.value}-link" data-type="{kind.value}" '
        f'data-id="{escape_html(str(entity_id))}"{extra}>{label}</a>'
    )


def _whole(pattern: str) -> "re.Pattern[str]":
    return re.compile(rf"(?<!\w){pattern}(?!\w)", re.IGNORECASE)


class EntityMentionLinker:
    """Annotates entity mentions found in the store's current snapshot."""

    def __init__(self, store: EntityStore, view: Optional[DashboardView] = None) -> None:
        self._store = store
        self._view = view

    def link(self, text: str) -> str:
        """Annotate mentions; text already carrying annotations is returned unchanged."""
        if not text or LINK_MARKER in text:
            return text

        placeholders = _Placeholders()
        linked = _TAG.sub(lambda m: placeholders.hide(m.group(0)), text)

        def wrap(pattern: "re.Pattern[str]", make: Callable[[str], str]) -> None:
            nonlocal linked
            linked = pattern.sub(lambda m: placeholders.hide(make(m.group(0))), linked)

        for patient in self._store.all(EntityKind.PATIENT):
            name = patient.name or ""
            if len(name) >= MIN_NAME_LENGTH:
                wrap(
                    _whole(re.escape(escape_html(name))),
                    lambda label, p=patient, n=name: _anchor(EntityKind.PATIENT, p.id, label, name=n),
                )

        for patient in self._store.all(EntityKind.PATIENT):
            if patient.patient_number:
                number = int(patient.patient_number)
                label_name = patient.name or f"Patient #{number}"
                wrap(
                    _whole(rf"(?:patient\s*)?#{number}"),
                    lambda label, p=patient, n=label_name: _anchor(EntityKind.PATIENT, p.id, label, name=n),
                )

        for appointment in self._store.all(EntityKind.APPOINTMENT):
            if parse_date(appointment.date) is None:
                continue
            shown = format_display_date(appointment.date)
            wrap(
                re.compile(rf"(?<![\w/]){re.escape(shown)}(?![\w/])"),
                lambda label, a=appointment: _anchor(EntityKind.APPOINTMENT, a.id, label, date=a.date),
            )

        for deadline in self._store.all(EntityKind.DEADLINE):
            title = deadline.title or ""
            if len(title) >= MIN_TITLE_LENGTH:
                wrap(
                    _whole(re.escape(escape_html(title))),
                    lambda label, d=deadline, t=title: _anchor(EntityKind.DEADLINE, d.id, label, title=t),
                )

        for item in self._store.all(EntityKind.INVENTORY):
            name = item.name or ""
            if len(name) >= MIN_NAME_LENGTH:
                wrap(
                    _whole(re.escape(escape_html(name))),
                    lambda label, i=item, n=name: _anchor(EntityKind.INVENTORY, i.id, label, name=n),
                )

        return placeholders.restore(linked)

    def activate(self, kind: EntityKind, entity_id: str) -> Any:
        """Switch the dashboard to the record's view and open its editor."""
        record = self._store.find_by_id(kind, entity_id)
        if record is None:
            raise EntityNotFoundError(kind.value, str(entity_id))
        if self._view is not None:
            self._view.open_editor(kind, record)
        logger.info(f"🔗 Opening {kind.value} {entity_id}")
        return record

    def mentions(self, html: str) -> List[Dict[str, str]]:
        """(type, id) pairs of the annotations in rendered HTML, in order."""
        return [
            {"type": m.group(1), "id": m.group(2)}
            for m in re.finditer(r'data-type="([^"]+)" data-id="([^"]*)"', html)
        ]
