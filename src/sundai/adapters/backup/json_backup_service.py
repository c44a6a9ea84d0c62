"""
Backup of all clinic collections as one JSON document on disk.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from sundai.application.ports.repositories.clinic_repositories import ClinicRepositories
from sundai.application.ports.services.backup_service import BackupService
from sundai.core.config import BackupSettings, get_settings
from sundai.domain.enums import EntityKind

logger = logging.getLogger(__name__)

BACKUP_PAGE_SIZE = 100000


class JsonBackupService(BackupService):
    """Writes ``backup_<timestamp>.json`` with every record of every kind."""

    def __init__(self, repositories: ClinicRepositories, settings: Optional[BackupSettings] = None) -> None:
        self._repositories = repositories
        self._settings = settings or get_settings().backup

    async def backup_data(self) -> Dict[str, Any]:
        try:
            snapshot: Dict[str, Any] = {"created_at": datetime.utcnow().isoformat()}
            counts: Dict[str, int] = {}
            for kind in EntityKind:
                records = await self._repositories.for_kind(kind).find_all(limit=BACKUP_PAGE_SIZE)
                snapshot[kind.view_name] = [r.to_record() for r in records]
                counts[kind.view_name] = len(records)

            directory = Path(self._settings.directory)
            directory.mkdir(parents=True, exist_ok=True)
            path = directory / f"backup_{datetime.utcnow().strftime('%Y%m%d_%H%M%S_%f')}.json"
            path.write_text(json.dumps(snapshot, default=str, indent=2, ensure_ascii=False), encoding="utf-8")
        except Exception as e:
            logger.error(f"❌ Backup failed: {e}")
            return {"success": False, "error": str(e)}

        logger.info(f"💾 Backup written to {path}")
        return {"success": True, "path": str(path), "counts": counts}
