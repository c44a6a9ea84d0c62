"""
Action registry and dispatcher.

Canonical action names map to handler instances; synonyms used by assistant
backends are resolved through ``ACTION_ALIASES`` before the lookup.
"""

import logging
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Type

from ...core.exceptions import NotConnectedError
from ...core.structured_logger import log_event
from ..dto.outcome import Outcome
from ..ports.repositories.clinic_repositories import ClinicRepositories
from .handlers.appointments import APPOINTMENT_HANDLERS
from .handlers.base import ActionHandler, HandlerContext
from .handlers.deadlines import DEADLINE_HANDLERS
from .handlers.general import GENERAL_HANDLERS
from .handlers.inventory import INVENTORY_HANDLERS
from .handlers.patients import PATIENT_HANDLERS
from .params import pick

logger = logging.getLogger(__name__)

DEFAULT_PROCESSED_MESSAGE = "I've processed your request. Is there anything else?"

# Keys that make an unknown action look like a scheduling request
PATIENT_NAME_KEYS = ("patientName", "patient", "patient_name")
DATE_KEYS = ("date", "appointmentDate", "appointment_date")


class ActionName(str, Enum):
    """Canonical action identifiers."""

    CREATE_PATIENT = "create_patient"
    UPDATE_PATIENT = "update_patient"
    DELETE_PATIENT = "delete_patient"
    LIST_PATIENTS = "list_patients"
    SEARCH_PATIENTS = "search_patients"
    GET_PATIENT = "get_patient"
    ADD_PATIENT_NOTE = "add_patient_note"
    GET_PATIENT_NOTES = "get_patient_notes"

    CREATE_APPOINTMENT = "create_appointment"
    UPDATE_APPOINTMENT = "update_appointment"
    DELETE_APPOINTMENT = "delete_appointment"
    LIST_APPOINTMENTS = "list_appointments"
    SEARCH_APPOINTMENTS = "search_appointments"
    GET_APPOINTMENT = "get_appointment"
    GET_APPOINTMENTS_BY_DATE = "get_appointments_by_date"

    CREATE_DEADLINE = "create_deadline"
    UPDATE_DEADLINE = "update_deadline"
    DELETE_DEADLINE = "delete_deadline"
    LIST_DEADLINES = "list_deadlines"
    SEARCH_DEADLINES = "search_deadlines"
    GET_DEADLINE = "get_deadline"
    GET_DEADLINES_BY_DATE = "get_deadlines_by_date"

    CREATE_INVENTORY_ITEM = "create_inventory_item"
    UPDATE_INVENTORY_ITEM = "update_inventory_item"
    DELETE_INVENTORY_ITEM = "delete_inventory_item"
    LIST_INVENTORY_ITEMS = "list_inventory_items"
    SEARCH_INVENTORY = "search_inventory"
    GET_INVENTORY_ITEM = "get_inventory_item"
    GET_LOW_STOCK = "get_low_stock"

    ANSWER_QUESTION = "answer_question"


ACTION_ALIASES: Dict[str, ActionName] = {
    "edit_patient": ActionName.UPDATE_PATIENT,
    "get_patients": ActionName.LIST_PATIENTS,
    "find_patient": ActionName.SEARCH_PATIENTS,
    "edit_appointment": ActionName.UPDATE_APPOINTMENT,
    "cancel_appointment": ActionName.DELETE_APPOINTMENT,
    "get_appointments": ActionName.LIST_APPOINTMENTS,
    "schedule_appointment": ActionName.CREATE_APPOINTMENT,
    "book_appointment": ActionName.CREATE_APPOINTMENT,
    "get_appointments_for_date": ActionName.GET_APPOINTMENTS_BY_DATE,
    "edit_deadline": ActionName.UPDATE_DEADLINE,
    "list_upcoming_deadlines": ActionName.LIST_DEADLINES,
    "get_deadlines": ActionName.LIST_DEADLINES,
    "get_deadline_details": ActionName.GET_DEADLINE,
    "get_deadlines_for_date": ActionName.GET_DEADLINES_BY_DATE,
    "add_inventory_item": ActionName.CREATE_INVENTORY_ITEM,
    "edit_inventory_item": ActionName.UPDATE_INVENTORY_ITEM,
    "remove_inventory_item": ActionName.DELETE_INVENTORY_ITEM,
    "get_inventory": ActionName.LIST_INVENTORY_ITEMS,
    "list_inventory": ActionName.LIST_INVENTORY_ITEMS,
    "list_low_stock": ActionName.GET_LOW_STOCK,
}


def canonical_action(name: Optional[str]) -> Optional[ActionName]:
    """Canonical action for a requested name or alias, None when unknown."""
    key = (name or "").strip().lower()
    if key in ACTION_ALIASES:
        return ACTION_ALIASES[key]
    try:
        return ActionName(key)
    except ValueError:
        return None


class ActionRegistry:
    """Canonical action name to handler instance."""

    def __init__(self) -> None:
        self._handlers: Dict[ActionName, ActionHandler] = {}

    def register(self, handler: ActionHandler) -> None:
        self._handlers[ActionName(handler.action)] = handler

    def lookup(self, name: Optional[str]) -> Optional[ActionHandler]:
        action = canonical_action(name)
        return self._handlers.get(action) if action is not None else None

    def names(self) -> List[str]:
        return [action.value for action in self._handlers]

    def __contains__(self, action: ActionName) -> bool:
        return action in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)


class Dispatcher:
    """Routes ``(name, params)`` to a handler and never raises."""

    def __init__(self, registry: ActionRegistry, repositories: ClinicRepositories) -> None:
        self._registry = registry
        self._repositories = repositories

    @property
    def registry(self) -> ActionRegistry:
        return self._registry

    async def dispatch(self, name: Optional[str], params: Optional[Dict[str, Any]] = None) -> Outcome:
        params = params if isinstance(params, dict) else {}
        handler = self._registry.lookup(name)

        if handler is None:
            if pick(params, *PATIENT_NAME_KEYS) is not None and pick(params, *DATE_KEYS) is not None:
                logger.info(f"🔄 Unknown action '{name}' with appointment data, creating appointment")
                handler = self._registry.lookup(ActionName.CREATE_APPOINTMENT.value)
            else:
                logger.warning(f"Unknown action '{name}', returning acknowledgement")
                text = pick(params, "response", "message")
                return Outcome.success(text if isinstance(text, str) else DEFAULT_PROCESSED_MESSAGE)

        logger.info(f"🔧 Executing action: {handler.action}")
        if handler.mutating and not await self._is_available():
            return Outcome.failure(NotConnectedError().message)

        try:
            outcome = await handler.execute(params)
        except Exception as e:
            logger.error(f"❌ Action {handler.action} raised: {e}", exc_info=True)
            outcome = Outcome.failure(f"Error: {e}")

        log_event(logger, logging.INFO, f"🏁 {handler.action} finished", action=handler.action, ok=outcome.ok)
        return outcome

    async def _is_available(self) -> bool:
        try:
            return await self._repositories.is_available()
        except Exception as e:
            logger.error(f"❌ Database connectivity check failed: {e}")
            return False


HANDLER_CLASSES: Iterable[Type[ActionHandler]] = (
    PATIENT_HANDLERS + APPOINTMENT_HANDLERS + DEADLINE_HANDLERS + INVENTORY_HANDLERS + GENERAL_HANDLERS
)


def build_dispatcher(context: HandlerContext) -> Dispatcher:
    """Register every handler against one shared context."""
    registry = ActionRegistry()
    for handler_class in HANDLER_CLASSES:
        registry.register(handler_class(context))
    return Dispatcher(registry, context.repositories)
