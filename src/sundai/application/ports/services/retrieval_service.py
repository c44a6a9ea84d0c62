"""
Retrieval backend interface for retrieval-mode conversations.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class RetrievalService(ABC):
    """Abstract document-retrieval (RAG) backend."""

    @abstractmethod
    async def start_server(self) -> Dict[str, Any]:
        """Start the retrieval server if needed. Idempotent; returns {success}."""
        pass

    @abstractmethod
    async def query(self, question: str) -> Dict[str, Any]:
        """
        Answer a question from indexed documents.

        Returns:
            Dict with success, answer, sources (strings or {title, url}) and error
        """
        pass
