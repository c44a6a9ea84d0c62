"""
Two-stage parsing of assistant backend replies.

Stage one decodes the outer envelope (a dict, or a string that may hold
JSON). Stage two looks inside the envelope's text field, which some backends
use to carry a second, JSON-encoded action proposal. Only one level of
nesting is unwrapped.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

NO_OP_TOOL = "answer_question"
GENERIC_ACKNOWLEDGEMENT = "I processed your request. Is there anything else I can help with?"
EMPTY_REPLY = "Request processed."

TEXT_KEYS = ("response", "message")
PARAMETER_TEXT_KEYS = ("response", "answer", "message")


@dataclass(frozen=True)
class ToolCall:
    """An action proposal to dispatch."""

    name: str
    parameters: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TextReply:
    """Text to show as-is."""

    text: str


@dataclass(frozen=True)
class ErrorReply:
    """The backend reported a failure."""

    error: str


AssistantReply = Union[ToolCall, TextReply, ErrorReply]


def parse_assistant_reply(raw: Any) -> AssistantReply:
    """Classify a raw backend reply as a tool call, plain text or an error."""
    if isinstance(raw, dict):
        return _from_envelope(raw, nested=False)
    if raw is None:
        return TextReply(GENERIC_ACKNOWLEDGEMENT)
    if not isinstance(raw, str):
        return TextReply(str(raw))

    envelope = decode_object(raw)
    if envelope is None:
        return TextReply(raw.strip() or EMPTY_REPLY)
    return _from_envelope(envelope, nested=False)


def decode_object(text: str) -> Optional[Dict[str, Any]]:
    """JSON object encoded in ``text``, or None when it holds anything else."""
    stripped = text.strip()
    if not stripped.startswith("{"):
        return None
    try:
        decoded = json.loads(stripped)
    except ValueError:
        return None
    return decoded if isinstance(decoded, dict) else None


def _tool_call(envelope: Dict[str, Any]) -> Optional[ToolCall]:
    tool = envelope.get("tool")
    if not isinstance(tool, str) or not tool.strip() or tool.strip().lower() == NO_OP_TOOL:
        return None
    parameters = envelope.get("parameters")
    return ToolCall(name=tool.strip(), parameters=parameters if isinstance(parameters, dict) else {})


def _text_field(envelope: Dict[str, Any]) -> Any:
    for key in TEXT_KEYS:
        value = envelope.get(key)
        if value:
            return value
    parameters = envelope.get("parameters")
    if isinstance(parameters, dict):
        for key in PARAMETER_TEXT_KEYS:
            value = parameters.get(key)
            if value:
                return value
    return None


def _from_envelope(envelope: Dict[str, Any], nested: bool) -> AssistantReply:
    call = _tool_call(envelope)
    if call is not None:
        return call

    text = _text_field(envelope)
    if text is not None:
        inner = text if isinstance(text, dict) else (decode_object(text) if isinstance(text, str) else None)
        if inner is not None:
            if nested:
                # A second level of encoding is not unwrapped
                return TextReply(GENERIC_ACKNOWLEDGEMENT)
            return _from_envelope(inner, nested=True)
        return TextReply(str(text))

    if envelope.get("success") is False:
        return ErrorReply(str(envelope.get("error") or "The assistant could not process the request."))
    return TextReply(GENERIC_ACKNOWLEDGEMENT)
