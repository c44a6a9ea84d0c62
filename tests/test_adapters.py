"""
External adapters: backup file, Whisper transcription, the chat assistant and
the retrieval HTTP client.
"""

import json
from pathlib import Path
from types import SimpleNamespace

import pytest
import pytest_asyncio
from aiohttp import test_utils, web

from sundai.adapters.backup.json_backup_service import JsonBackupService
from sundai.adapters.external.assistant_service_openai import OpenAIAssistantService
from sundai.adapters.external.audio_service_openai import WhisperAudioService
from sundai.adapters.external.retrieval_service_http import HttpRetrievalService
from sundai.core.config import AssistantSettings, AudioSettings, BackupSettings, RetrievalSettings
from sundai.core.exceptions import BackendFailureError
from sundai.domain.entities.patient import Patient


class FakeAIClient:
    """Stands in for AzureAIClient."""

    def __init__(self, content="", text="", error=None):
        self.content = content
        self.text = text
        self.error = error
        self.chat_calls = []

    async def chat(self, messages, **kwargs):
        self.chat_calls.append({"messages": messages, **kwargs})
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    async def transcribe_whisper(self, file, **kwargs):
        if self.error is not None:
            raise self.error
        assert file.read()
        return SimpleNamespace(text=self.text)


@pytest.mark.asyncio
async def test_backup_writes_every_collection(repositories, tmp_path):
    await repositories.patients.create(Patient(name="Ann Lee"))
    service = JsonBackupService(repositories, BackupSettings(directory=str(tmp_path)))

    result = await service.backup_data()

    assert result["success"] is True
    assert result["counts"] == {"patients": 1, "appointments": 0, "deadlines": 0, "inventory": 0}
    written = json.loads(Path(result["path"]).read_text(encoding="utf-8"))
    assert written["patients"][0]["name"] == "Ann Lee"


@pytest.mark.asyncio
async def test_backup_reports_unreachable_database(repositories, tmp_path):
    repositories.set_available(False)
    service = JsonBackupService(repositories, BackupSettings(directory=str(tmp_path)))

    result = await service.backup_data()

    assert result["success"] is False
    assert "Database not connected" in result["error"]
    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_whisper_saves_transcribes_and_cleans_up(tmp_path):
    service = WhisperAudioService(FakeAIClient(text=" list patients "), AudioSettings(temp_dir=str(tmp_path)))

    saved = await service.save_audio(b"\x1a\x45\xdf\xa3" * 500)
    assert saved["success"] is True
    assert Path(saved["filepath"]).exists()

    result = await service.transcribe_audio(saved["filepath"])

    assert result == {"success": True, "transcription": "list patients", "error": None}
    assert not Path(saved["filepath"]).exists()


@pytest.mark.asyncio
async def test_whisper_rejects_oversized_recordings(tmp_path):
    service = WhisperAudioService(FakeAIClient(), AudioSettings(temp_dir=str(tmp_path), max_size_mb=1))

    saved = await service.save_audio(b"0" * (2 * 1024 * 1024))

    assert saved["success"] is False
    assert "too large" in saved["error"]


@pytest.mark.asyncio
async def test_whisper_failure_is_reported(tmp_path):
    service = WhisperAudioService(FakeAIClient(error=RuntimeError("429")), AudioSettings(temp_dir=str(tmp_path)))
    saved = await service.save_audio(b"0" * 2000)

    result = await service.transcribe_audio(saved["filepath"])

    assert result == {"success": False, "error": "Transcription failed: 429"}
    assert not Path(saved["filepath"]).exists()


@pytest.mark.asyncio
async def test_assistant_sends_context_and_returns_raw_json():
    client = FakeAIClient(content=' {"tool": "list_patients", "parameters": {}} ')
    service = OpenAIAssistantService(client, AssistantSettings())

    raw = await service.chat_with_llm("who is booked?", [], {"patients": [{"name": "Ann Lee"}]})

    assert raw == '{"tool": "list_patients", "parameters": {}}'
    call = client.chat_calls[0]
    assert call["response_format"] == {"type": "json_object"}
    system, user = call["messages"]
    assert system["role"] == "system"
    assert "- create_patient" in system["content"]
    assert "Ann Lee" in system["content"]
    assert user == {"role": "user", "content": "who is booked?"}


@pytest.mark.asyncio
async def test_assistant_transport_failure():
    service = OpenAIAssistantService(FakeAIClient(error=RuntimeError("timeout")), AssistantSettings())

    with pytest.raises(BackendFailureError) as exc_info:
        await service.chat_with_llm("hi", [], {})

    assert exc_info.value.message == "Assistant service error: timeout"


@pytest_asyncio.fixture
async def rag_server():
    hits = {"health": 0, "questions": []}

    async def health(request):
        hits["health"] += 1
        return web.json_response({"status": "ok"})

    async def query(request):
        body = await request.json()
        hits["questions"].append(body["question"])
        if body["question"] == "explode":
            return web.Response(status=500, text="index missing")
        return web.json_response({"answer": "Use form A.", "sources": ["policy.pdf"]})

    app = web.Application()
    app.router.add_get("/health", health)
    app.router.add_post("/query", query)
    server = test_utils.TestServer(app)
    await server.start_server()
    yield f"http://{server.host}:{server.port}", hits
    await server.close()


@pytest.mark.asyncio
async def test_retrieval_client_round_trip(rag_server):
    base_url, hits = rag_server
    service = HttpRetrievalService(RetrievalSettings(base_url=base_url + "/"))

    assert await service.start_server() == {"success": True}
    assert await service.start_server() == {"success": True}
    assert hits["health"] == 1

    result = await service.query("Which form?")
    assert result == {"answer": "Use form A.", "sources": ["policy.pdf"], "success": True}
    assert hits["questions"] == ["Which form?"]


@pytest.mark.asyncio
async def test_retrieval_client_http_error(rag_server):
    base_url, _ = rag_server
    service = HttpRetrievalService(RetrievalSettings(base_url=base_url))

    result = await service.query("explode")

    assert result == {"success": False, "error": "HTTP 500: index missing"}


@pytest.mark.asyncio
async def test_retrieval_client_unreachable_server():
    service = HttpRetrievalService(RetrievalSettings(base_url="http://127.0.0.1:1", request_timeout_seconds=5))

    started = await service.start_server()
    assert started["success"] is False

    with pytest.raises(BackendFailureError):
        await service.query("anyone there?")
