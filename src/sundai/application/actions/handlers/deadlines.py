"""Deadline action handlers."""

from typing import Any, Dict, List

from ....core.exceptions import ValidationFailedError
from ....core.utils.datetime_utils import is_upcoming, normalize_date
from ....domain.entities.deadline import Deadline
from ....domain.enums import EntityKind, Priority
from ...dto.outcome import Outcome
from ..params import DeadlineParams
from .base import LIST_CAPS, ActionHandler, capped, details, merge, require, show_date
from .appointments import CALENDAR_HINT


def _deadline_rows(deadline: Deadline):
    return [
        ("Title", deadline.title),
        ("Due", show_date(deadline.date)),
        ("Priority", f"{deadline.priority_emoji} {deadline.priority}"),
        ("Description", deadline.description),
    ]


def _line(deadline: Deadline) -> str:
    return f"{deadline.priority_emoji} {show_date(deadline.date)} - {deadline.title}"


class _DeadlineHandler(ActionHandler):
    kind = EntityKind.DEADLINE
    params_class = DeadlineParams


class CreateDeadlineHandler(_DeadlineHandler):
    action = "create_deadline"
    mutating = True
    verb = "create deadline"

    async def run(self, p: DeadlineParams) -> Outcome:
        title = require(p.title or p.description, "Deadline title is required.")
        day = normalize_date(require(p.date, "Deadline date is required."))
        deadline = Deadline(
            title=title,
            date=day,
            due_date=day,
            priority=p.priority or Priority.MEDIUM.value,
            description=p.description or "",
        )

        created = await self.repositories.deadlines.create(deadline)
        await self.after_write(EntityKind.DEADLINE, [created.date])

        message = details("✅ Deadline created successfully!\n\n📋 **Details:**", _deadline_rows(created))
        return Outcome.success(message + CALENDAR_HINT, created.to_record())


class UpdateDeadlineHandler(_DeadlineHandler):
    action = "update_deadline"
    mutating = True
    verb = "update deadline"

    async def run(self, p: DeadlineParams) -> Outcome:
        deadline, by_id = self.resolve_target(EntityKind.DEADLINE, p.id, p.title)

        candidates = {
            "title": p.new_title or (p.title if by_id else None),
            "date": p.new_date or (p.date if by_id else None),
            "priority": p.new_priority or (p.priority if by_id else None),
            "description": p.new_description or (p.description if by_id else None),
        }
        changes: Dict[str, Any] = {key: value for key, value in candidates.items() if value is not None}
        if not changes:
            raise ValidationFailedError(f'No changes supplied for deadline "{deadline.title}".')

        merged, changes = merge(deadline, changes)
        if "date" in changes:
            changes["due_date"] = merged.due_date
        written = await self.repositories.deadlines.update(deadline.id, changes)
        await self.ensure_written(EntityKind.DEADLINE, written, deadline.title)
        await self.after_write(EntityKind.DEADLINE, [deadline.date, merged.date])

        message = details("✅ Deadline updated successfully!\n\n📋 **Updated:**", _deadline_rows(merged))
        return Outcome.success(message, merged.to_record())


class DeleteDeadlineHandler(_DeadlineHandler):
    action = "delete_deadline"
    mutating = True
    verb = "delete deadline"

    async def run(self, p: DeadlineParams) -> Outcome:
        deadline, _ = self.resolve_target(EntityKind.DEADLINE, p.id, p.title)

        deleted = await self.repositories.deadlines.delete(deadline.id)
        await self.ensure_written(EntityKind.DEADLINE, deleted, deadline.title)
        await self.after_write(EntityKind.DEADLINE, [deadline.date])

        message = details(
            "✅ Deadline deleted successfully!\n\n📋 **Deleted:**",
            [("Title", deadline.title), ("Due", show_date(deadline.date))],
        )
        return Outcome.success(message, {"id": deadline.id})


class ListDeadlinesHandler(_DeadlineHandler):
    action = "list_deadlines"
    verb = "list deadlines"

    async def run(self, p: DeadlineParams) -> Outcome:
        deadlines = await self.fresh_snapshot(EntityKind.DEADLINE)
        if not deadlines:
            return Outcome.success("⏰ **Deadlines:** None set.", [])

        upcoming: List[Deadline] = sorted(
            (d for d in deadlines if is_upcoming(d.date)), key=lambda d: d.date
        )
        data = [d.to_record() for d in upcoming]
        if not upcoming:
            return Outcome.success("⏰ **Deadlines:** No upcoming deadlines.", data)

        lines = [_line(d) for d in upcoming]
        message = f"⏰ **Upcoming Deadlines ({len(upcoming)}):**\n" + capped(
            lines, LIST_CAPS[EntityKind.DEADLINE]
        )
        return Outcome.success(message, data)


class SearchDeadlinesHandler(_DeadlineHandler):
    action = "search_deadlines"
    verb = "search deadlines"

    async def run(self, p: DeadlineParams) -> Outcome:
        query = require(p.query, "A search term is required.")
        await self.store.refresh(EntityKind.DEADLINE)
        matches = sorted(
            self.store.search(EntityKind.DEADLINE, query, ("title", "description")),
            key=lambda d: d.date,
        )
        data = [d.to_record() for d in matches]
        if not matches:
            return Outcome.success(f'🔍 **Search "{query}":** No deadlines found.', data)

        message = f'🔍 **Found {len(matches)} deadlines for "{query}":**\n' + "\n".join(
            _line(d) for d in matches
        )
        return Outcome.success(message, data)


class GetDeadlineHandler(_DeadlineHandler):
    action = "get_deadline"
    verb = "get deadline"

    async def run(self, p: DeadlineParams) -> Outcome:
        deadline, _ = self.resolve_target(EntityKind.DEADLINE, p.id, p.title)
        return Outcome.success(details("⏰ **Deadline Details:**", _deadline_rows(deadline)), deadline.to_record())


class GetDeadlinesByDateHandler(_DeadlineHandler):
    action = "get_deadlines_by_date"
    verb = "get deadlines"

    async def run(self, p: DeadlineParams) -> Outcome:
        day = normalize_date(require(p.date, "A date is required."))
        deadlines = await self.fresh_snapshot(EntityKind.DEADLINE)
        matches = [d for d in deadlines if d.date == day]
        data = [d.to_record() for d in matches]
        label = show_date(day)

        if not matches:
            return Outcome.success(f"⏰ **Deadlines for {label}:** None set.", data)

        lines = [
            f"{d.priority_emoji} {d.title}" + (f" - {d.description}" if d.description else "")
            for d in matches
        ]
        message = f"⏰ **Deadlines for {label} ({len(matches)}):**\n" + "\n".join(lines)
        return Outcome.success(message, data)


DEADLINE_HANDLERS = (
    CreateDeadlineHandler,
    UpdateDeadlineHandler,
    DeleteDeadlineHandler,
    ListDeadlinesHandler,
    SearchDeadlinesHandler,
    GetDeadlineHandler,
    GetDeadlinesByDateHandler,
)
