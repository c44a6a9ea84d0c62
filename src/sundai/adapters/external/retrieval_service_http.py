"""
HTTP client for the document-retrieval (RAG) server.
"""

import logging
from typing import Any, Dict, Optional

import aiohttp

from sundai.application.ports.services.retrieval_service import RetrievalService
from sundai.core.config import RetrievalSettings, get_settings
from sundai.core.exceptions import BackendFailureError

logger = logging.getLogger(__name__)


class HttpRetrievalService(RetrievalService):
    """Talks to a RAG server exposing ``/health`` and ``/query``."""

    def __init__(self, settings: Optional[RetrievalSettings] = None) -> None:
        self._settings = settings or get_settings().retrieval
        self._base_url = self._settings.base_url.rstrip("/")
        self._ready = False

    def _timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(total=self._settings.request_timeout_seconds)

    async def start_server(self) -> Dict[str, Any]:
        """Check the server is up; repeated calls after success are no-ops."""
        if self._ready:
            return {"success": True}
        try:
            async with aiohttp.ClientSession(timeout=self._timeout()) as session:
                async with session.get(f"{self._base_url}/health") as response:
                    if response.status != 200:
                        return {"success": False, "error": f"RAG server returned HTTP {response.status}"}
        except aiohttp.ClientError as e:
            logger.warning(f"⚠️ RAG server not reachable at {self._base_url}: {e}")
            return {"success": False, "error": str(e)}

        self._ready = True
        logger.info(f"✅ RAG server ready at {self._base_url}")
        return {"success": True}

    async def query(self, question: str) -> Dict[str, Any]:
        try:
            async with aiohttp.ClientSession(timeout=self._timeout()) as session:
                async with session.post(f"{self._base_url}/query", json={"question": question}) as response:
                    if response.status != 200:
                        body = await response.text()
                        return {"success": False, "error": f"HTTP {response.status}: {body[:200]}"}
                    payload = await response.json(content_type=None)
        except aiohttp.ClientError as e:
            raise BackendFailureError("Retrieval", str(e) or type(e).__name__)

        if not isinstance(payload, dict):
            return {"success": False, "error": "Malformed response from RAG server"}
        payload.setdefault("success", True)
        return payload
