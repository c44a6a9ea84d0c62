"""
Conversation router.

Sends each user message to the tool-mode assistant or the retrieval backend
depending on the selected mode, turns the reply into either displayed text or
a dispatched action, and keeps the chat transcript.
"""

import itertools
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from ...core.exceptions import TranscriptionFailureError
from ...domain.enums import AssistantMode, EntityKind
from ..actions.registry import Dispatcher
from ..dto.outcome import FAILURE_MARKER
from ..linking.markdown import format_markdown
from ..linking.mention_linker import EntityMentionLinker
from ..ports.services.assistant_service import AssistantService
from ..ports.services.audio_service import AudioService
from ..ports.services.retrieval_service import RetrievalService
from ..store import EntityStore
from .mode_store import ModePreferenceStore
from .parser import ErrorReply, TextReply, ToolCall, parse_assistant_reply

logger = logging.getLogger(__name__)

# Inventory is not sent to the assistant
CONTEXT_KINDS = (EntityKind.PATIENT, EntityKind.APPOINTMENT, EntityKind.DEADLINE)

ACTION_COMPLETED = "✅ Action completed successfully."
ACTION_FAILED = f"{FAILURE_MARKER} Action failed."
ASSISTANT_UNAVAILABLE = (
    f"{FAILURE_MARKER} I'm having trouble connecting to the AI service. "
    "Please make sure the backend is running and try again."
)
RETRIEVAL_UNAVAILABLE = "RAG API not available. Please make sure the backend is running."
RETRIEVAL_HINT = "Please make sure the RAG server is running and models are loaded."
NO_ANSWER = "No answer provided."
TRANSCRIBING = "🎤 Transcribing..."
AUDIO_TOO_SHORT = "Recording too short - please speak longer."
NO_SPEECH = "No speech detected"

_message_ids = itertools.count(1)


@dataclass(frozen=True)
class Source:
    """A document cited by the retrieval backend."""

    title: str
    url: Optional[str] = None


@dataclass
class ChatMessage:
    """One transcript entry."""

    role: str
    text: str
    html: str = ""
    pending: bool = False
    sources: List[Source] = field(default_factory=list)
    links: List[Dict[str, str]] = field(default_factory=list)
    id: int = field(default_factory=lambda: next(_message_ids))
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_failure(self) -> bool:
        return self.text.startswith(FAILURE_MARKER)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "role": self.role,
            "text": self.text,
            "html": self.html,
            "pending": self.pending,
            "sources": [{"title": s.title, "url": s.url} for s in self.sources],
            "links": list(self.links),
            "created_at": self.created_at.isoformat(),
        }


def normalize_sources(raw: Any) -> List[Source]:
    """Sources may be plain labels or {title, url} objects; order is kept."""
    sources: List[Source] = []
    for entry in raw or []:
        if isinstance(entry, dict):
            sources.append(Source(title=entry.get("title") or "Untitled", url=entry.get("url") or None))
        elif entry:
            sources.append(Source(title=str(entry)))
    return sources


def normalize_transcription(result: Any) -> Tuple[str, Optional[str]]:
    """Text and error from the shapes a transcription backend may return."""
    if isinstance(result, str):
        return result.strip(), None
    if isinstance(result, dict):
        if isinstance(result.get("text"), str) and result["text"].strip():
            return result["text"].strip(), None
        if result.get("success") and isinstance(result.get("transcription"), str):
            return result["transcription"].strip(), None
        return "", result.get("error")
    return "", None


class ConversationRouter:
    """Tool-mode / retrieval-mode conversation state machine."""

    def __init__(
        self,
        dispatcher: Dispatcher,
        store: EntityStore,
        linker: EntityMentionLinker,
        mode_store: ModePreferenceStore,
        assistant: Optional[AssistantService] = None,
        retrieval: Optional[RetrievalService] = None,
        audio: Optional[AudioService] = None,
        min_audio_bytes: int = 1000,
    ) -> None:
        self._dispatcher = dispatcher
        self._store = store
        self._linker = linker
        self._mode_store = mode_store
        self._assistant = assistant
        self._retrieval = retrieval
        self._audio = audio
        self._min_audio_bytes = min_audio_bytes
        self._mode = mode_store.load()
        self._transcript: List[ChatMessage] = []

    @property
    def mode(self) -> AssistantMode:
        return self._mode

    @property
    def transcript(self) -> List[ChatMessage]:
        return list(self._transcript)

    async def set_mode(self, mode: AssistantMode) -> ChatMessage:
        """Persist the new mode and announce it; retrieval mode warms up its server."""
        self._mode = mode
        self._mode_store.save(mode)
        logger.info(f"🔄 AI Mode changed to: {mode.value}")
        announcement = self._add_assistant(
            f"🔄 **Switched to {mode.label}**\n\n{mode.description}\n\nHow can I help you?"
        )
        if mode is AssistantMode.RETRIEVAL:
            await self._start_retrieval_server()
        return announcement

    async def handle_message(self, text: str) -> Optional[ChatMessage]:
        """Run one conversational turn; returns the assistant's reply message."""
        message = (text or "").strip()
        if not message:
            return None

        self._transcript.append(ChatMessage(role="user", text=message, html=format_markdown(message)))
        mode = self._mode
        placeholder = self._add_placeholder(f"●●● Processing with {mode.label}...")
        try:
            if mode is AssistantMode.RETRIEVAL:
                return await self._retrieval_turn(message)
            return await self._tool_turn(message)
        except Exception as e:
            logger.error(f"Chat error: {e}", exc_info=True)
            return self._add_assistant(f"{FAILURE_MARKER} Error: {e}")
        finally:
            self._remove(placeholder)

    async def handle_audio(self, audio: bytes) -> Optional[ChatMessage]:
        """Transcribe a recording and feed the text through ``handle_message``."""
        if len(audio or b"") < self._min_audio_bytes:
            return self._add_assistant(f"{FAILURE_MARKER} {AUDIO_TOO_SHORT}")
        if self._audio is None:
            return self._add_assistant(f"{FAILURE_MARKER} Voice input is not configured.")

        placeholder = self._add_placeholder(TRANSCRIBING)
        try:
            transcript = await self._transcribe(audio)
        except TranscriptionFailureError as e:
            logger.warning(f"⚠️ Could not transcribe: {e.message}")
            return self._add_assistant(f"{FAILURE_MARKER} {e.message}")
        except Exception as e:
            logger.error(f"Transcription error: {e}", exc_info=True)
            return self._add_assistant(f"{FAILURE_MARKER} Transcription failed: {e}")
        finally:
            self._remove(placeholder)

        logger.info(f"🎤 Transcribed: {transcript[:50]}")
        return await self.handle_message(transcript)

    async def _transcribe(self, audio: bytes) -> str:
        saved = await self._audio.save_audio(audio)
        if not saved or not saved.get("success"):
            raise TranscriptionFailureError((saved or {}).get("error") or "Failed to save audio")

        result = await self._audio.transcribe_audio(saved["filepath"])
        text, error = normalize_transcription(result)
        if not text:
            raise TranscriptionFailureError(error or NO_SPEECH)
        return text

    async def _retrieval_turn(self, question: str) -> ChatMessage:
        if self._retrieval is None:
            return self._retrieval_error(RETRIEVAL_UNAVAILABLE)

        await self._start_retrieval_server()
        try:
            response = await self._retrieval.query(question)
        except Exception as e:
            logger.error(f"❌ RAG Agent error: {e}")
            return self._retrieval_error(str(e) or "Failed to query RAG agent")

        if not isinstance(response, dict) or not response.get("success"):
            error = (response or {}).get("error") if isinstance(response, dict) else None
            return self._retrieval_error(error or "Failed to get response from RAG agent")

        return self._add_assistant(
            response.get("answer") or NO_ANSWER, sources=normalize_sources(response.get("sources"))
        )

    def _retrieval_error(self, error: str) -> ChatMessage:
        return self._add_assistant(f"{FAILURE_MARKER} **Error:** {error}\n\n{RETRIEVAL_HINT}")

    async def _start_retrieval_server(self) -> None:
        if self._retrieval is None:
            return
        try:
            result = await self._retrieval.start_server()
            if not (result or {}).get("success"):
                logger.warning(f"⚠️ RAG server start result: {result}")
        except Exception as e:
            logger.error(f"❌ Failed to start RAG server: {e}")

    async def _tool_turn(self, message: str) -> ChatMessage:
        if self._assistant is None:
            return self._add_assistant(ASSISTANT_UNAVAILABLE)

        raw = await self._assistant.chat_with_llm(message, [], self._store.as_context(CONTEXT_KINDS))
        reply = parse_assistant_reply(raw)

        if isinstance(reply, ToolCall):
            logger.info(f"🔧 Assistant proposed {reply.name}")
            outcome = await self._dispatcher.dispatch(reply.name, reply.parameters)
            text = outcome.message or (ACTION_COMPLETED if outcome.ok else ACTION_FAILED)
            return self._add_assistant(text)
        if isinstance(reply, ErrorReply):
            return self._add_assistant(f"{FAILURE_MARKER} {reply.error}")
        return self._add_assistant(reply.text)

    def _add_placeholder(self, text: str) -> ChatMessage:
        placeholder = ChatMessage(role="assistant", text=text, html=text, pending=True)
        self._transcript.append(placeholder)
        return placeholder

    def _remove(self, message: ChatMessage) -> None:
        self._transcript = [m for m in self._transcript if m.id != message.id]

    def _add_assistant(self, text: str, sources: Optional[List[Source]] = None) -> ChatMessage:
        html = self._linker.link(format_markdown(text))
        reply = ChatMessage(
            role="assistant",
            text=text,
            html=html,
            sources=sources or [],
            links=self._linker.mentions(html),
        )
        self._transcript.append(reply)
        return reply
