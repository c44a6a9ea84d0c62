"""
Shared fixtures: in-memory repositories, a recording dashboard view and fake
backend services. Nothing here touches the network or a database.
"""

from datetime import date, timedelta
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio

from sundai.adapters.db.memory.repositories import InMemoryClinicRepositories
from sundai.application.actions.handlers.base import HandlerContext
from sundai.application.actions.registry import build_dispatcher
from sundai.application.conversation.mode_store import ModePreferenceStore
from sundai.application.linking.mention_linker import EntityMentionLinker
from sundai.application.ports.services.assistant_service import AssistantService
from sundai.application.ports.services.audio_service import AudioService
from sundai.application.ports.services.backup_service import BackupService
from sundai.application.ports.services.dashboard_view import DashboardView
from sundai.application.ports.services.retrieval_service import RetrievalService
from sundai.application.store import EntityStore
from sundai.core.utils.datetime_utils import today_iso
from sundai.domain.entities.appointment import Appointment
from sundai.domain.entities.deadline import Deadline
from sundai.domain.entities.inventory_item import InventoryItem
from sundai.domain.entities.patient import Patient
from sundai.domain.enums import AssistantMode, EntityKind


def days_from_today(days: int) -> str:
    return (date.today() + timedelta(days=days)).isoformat()


class RecordingView(DashboardView):
    """Dashboard view that records every refresh together with what the store held."""

    def __init__(self, store: EntityStore) -> None:
        self._store = store
        self.schedule_date: Optional[str] = today_iso()
        self.calls: List[Any] = []
        self.editor: Optional[Dict[str, Any]] = None

    @property
    def displayed_schedule_date(self) -> Optional[str]:
        return self.schedule_date

    @property
    def names(self) -> List[str]:
        return [call[0] for call in self.calls]

    async def refresh_stats(self) -> None:
        self.calls.append(("stats", {kind: self._store.count(kind) for kind in EntityKind}))

    async def refresh_calendar(self) -> None:
        self.calls.append(("calendar", None))

    async def refresh_schedule(self) -> None:
        self.calls.append(("schedule", self.schedule_date))

    async def refresh_list(self, kind: EntityKind) -> None:
        self.calls.append(("list", kind))

    def open_editor(self, kind: EntityKind, record: Any) -> None:
        self.editor = {"kind": kind, "id": record.id}


class FakeAssistant(AssistantService):
    """Returns queued replies in order and records what it was asked."""

    def __init__(self, *replies: Any) -> None:
        self.replies = list(replies)
        self.calls: List[Dict[str, Any]] = []
        self.error: Optional[Exception] = None

    async def chat_with_llm(self, message, history, context):
        self.calls.append({"message": message, "history": history, "context": context})
        if self.error is not None:
            raise self.error
        return self.replies.pop(0) if self.replies else {"response": "ok"}


class FakeRetrieval(RetrievalService):
    def __init__(self, response: Optional[Dict[str, Any]] = None) -> None:
        self.response = response or {"success": True, "answer": "From the docs.", "sources": []}
        self.start_calls = 0
        self.questions: List[str] = []
        self.error: Optional[Exception] = None

    async def start_server(self) -> Dict[str, Any]:
        self.start_calls += 1
        return {"success": True}

    async def query(self, question: str) -> Dict[str, Any]:
        self.questions.append(question)
        if self.error is not None:
            raise self.error
        return self.response


class FakeAudio(AudioService):
    def __init__(self, transcription: Any = "list patients", saved: Optional[Dict[str, Any]] = None) -> None:
        self.transcription = transcription
        self.saved = saved or {"success": True, "filepath": "/tmp/recording.webm"}
        self.saved_sizes: List[int] = []

    async def save_audio(self, audio: bytes) -> Dict[str, Any]:
        self.saved_sizes.append(len(audio))
        return self.saved

    async def transcribe_audio(self, filepath: str) -> Any:
        return self.transcription


class FakeBackup(BackupService):
    def __init__(self, result: Optional[Dict[str, Any]] = None) -> None:
        self.result = result or {"success": True, "path": "/tmp/backup.json", "counts": {"patients": 0}}
        self.calls = 0

    async def backup_data(self) -> Dict[str, Any]:
        self.calls += 1
        return self.result


@pytest.fixture
def repositories():
    return InMemoryClinicRepositories()


@pytest.fixture
def store(repositories):
    return EntityStore(repositories)


@pytest.fixture
def view(store):
    return RecordingView(store)


@pytest.fixture
def context(repositories, store, view):
    return HandlerContext(repositories=repositories, store=store, view=view)


@pytest.fixture
def dispatcher(context):
    return build_dispatcher(context)


@pytest.fixture
def linker(store, view):
    return EntityMentionLinker(store, view)


@pytest.fixture
def mode_store(tmp_path):
    return ModePreferenceStore(tmp_path / "assistant_mode.json", AssistantMode.TOOL)


@pytest_asyncio.fixture
async def seeded(repositories, store):
    """A small clinic: two patients, appointments, deadlines and stock."""
    alice = await repositories.patients.create(
        Patient(name="Alice Martin", dob="1985-03-14", phone="0612345678")
    )
    bob = await repositories.patients.create(Patient(name="Bob Stone", dob="1990-07-01"))
    await repositories.appointments.create(
        Appointment(date=today_iso(), patient_id=alice.id, patient_name=alice.name, time="09:30")
    )
    await repositories.appointments.create(
        Appointment(date=days_from_today(3), patient_id=bob.id, patient_name=bob.name, time="14:00", type="follow-up")
    )
    await repositories.deadlines.create(
        Deadline(title="Submit insurance claims", date=days_from_today(5), priority="high")
    )
    await repositories.deadlines.create(Deadline(title="Renew license", date=days_from_today(-2)))
    await repositories.inventory.create(InventoryItem(name="Gloves", quantity=5, min_stock=10, unit="boxes"))
    await repositories.inventory.create(InventoryItem(name="Syringes", quantity=200, min_stock=50))
    await store.refresh()
    return {"alice": alice, "bob": bob}
