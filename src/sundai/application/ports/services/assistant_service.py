"""
Assistant backend interface for tool-mode conversations.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Union


class AssistantService(ABC):
    """Abstract language-model backend that proposes actions."""

    @abstractmethod
    async def chat_with_llm(
        self,
        message: str,
        history: List[Dict[str, str]],
        context: Dict[str, List[Dict[str, Any]]],
    ) -> Union[str, Dict[str, Any]]:
        """
        Ask the assistant backend about a user message.

        Args:
            message: The user's message
            history: Prior turns (role/content pairs)
            context: Named record lists the backend may ground on

        Returns:
            Either a (possibly JSON-encoded) string or a dict with optional
            keys tool, parameters, response, message, success, error
        """
        pass
