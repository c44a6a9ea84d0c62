"""
Azure OpenAI implementation of the tool-mode assistant backend.

The model is asked to answer in JSON: either a tool call
``{"tool": <action>, "parameters": {...}}`` or a plain reply
``{"response": "..."}``. Parsing and dispatch happen in the router.
"""

import json
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Union

from sundai.application.actions.registry import ActionName
from sundai.application.ports.services.assistant_service import AssistantService
from sundai.core.ai_client import AzureAIClient
from sundai.core.config import AssistantSettings, get_settings
from sundai.core.exceptions import BackendFailureError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are the assistant of a medical clinic dashboard.
Today is {today}. You can act on patients, appointments, deadlines and inventory.

Reply with ONE JSON object and nothing else:
- to run an action: {{"tool": "<action>", "parameters": {{...}}}}
- to answer directly: {{"response": "<markdown text>"}}

Available actions:
{actions}

Parameters use camelCase (patientName, patientNumber, newDate, minStock, ...).
Dates are YYYY-MM-DD. When updating, put new values in newX keys
(newName, newDate, newTime, newTitle, newQuantity ...).

Current clinic data:
{context}
"""


def build_system_prompt(context: Dict[str, List[Dict[str, Any]]]) -> str:
    actions = "\n".join(f"- {name.value}" for name in ActionName)
    return SYSTEM_PROMPT.format(
        today=date.today().isoformat(),
        actions=actions,
        context=json.dumps(context, default=str, ensure_ascii=False),
    )


class OpenAIAssistantService(AssistantService):
    """Chat completion backend that proposes dashboard actions."""

    def __init__(
        self, client: Optional[AzureAIClient] = None, settings: Optional[AssistantSettings] = None
    ) -> None:
        self._client = client or AzureAIClient()
        self._settings = settings or get_settings().assistant

    async def chat_with_llm(
        self,
        message: str,
        history: List[Dict[str, str]],
        context: Dict[str, List[Dict[str, Any]]],
    ) -> Union[str, Dict[str, Any]]:
        messages: List[Dict[str, str]] = [{"role": "system", "content": build_system_prompt(context)}]
        messages.extend(history)
        messages.append({"role": "user", "content": message})

        try:
            response = await self._client.chat(
                messages,
                temperature=self._settings.temperature,
                max_tokens=self._settings.max_tokens,
                response_format={"type": "json_object"},
            )
        except Exception as e:
            logger.error(f"❌ Assistant call failed: {e}")
            raise BackendFailureError("Assistant", str(e))

        content = (response.choices[0].message.content or "").strip()
        logger.debug(f"Assistant raw reply: {content[:200]}")
        return content
