"""Freeform question handler."""

from typing import Any, Dict

from ...dto.outcome import Outcome
from .base import ActionHandler

DEFAULT_ANSWER = "How can I help you? I can create appointments, manage patients, set deadlines, and more."

ANSWER_KEYS = ("response", "answer", "message")


class AnswerQuestionHandler(ActionHandler):
    """Passes the backend's answer through verbatim."""

    action = "answer_question"
    verb = "answer"

    async def run(self, params: Dict[str, Any]) -> Outcome:
        for key in ANSWER_KEYS:
            value = params.get(key)
            if isinstance(value, str) and value.strip():
                return Outcome.success(value)
        return Outcome.success(DEFAULT_ANSWER)


GENERAL_HANDLERS = (AnswerQuestionHandler,)
