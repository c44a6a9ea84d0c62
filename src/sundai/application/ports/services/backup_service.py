"""
Backup collaborator interface.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class BackupService(ABC):
    """Abstract service that snapshots all clinic data."""

    @abstractmethod
    async def backup_data(self) -> Dict[str, Any]:
        """Write a backup; returns {success, error} plus adapter details."""
        pass
