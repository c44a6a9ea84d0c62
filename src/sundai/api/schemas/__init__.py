"""
API request and response schemas.
"""

from .actions import ActionRequest, ActionResult
from .chat import ChatMessageSchema, ChatRequest, ModeRequest, ModeResponse, SourceSchema
from .common import ApiResponse, ErrorResponse
from .dashboard import (
    BackupResult,
    CalendarCounts,
    DashboardSnapshot,
    DashboardStats,
    LinkActivation,
    SchedulePanel,
)

__all__ = [
    "ActionRequest",
    "ActionResult",
    "ApiResponse",
    "BackupResult",
    "CalendarCounts",
    "ChatMessageSchema",
    "ChatRequest",
    "DashboardSnapshot",
    "DashboardStats",
    "ErrorResponse",
    "LinkActivation",
    "ModeRequest",
    "ModeResponse",
    "SchedulePanel",
    "SourceSchema",
]
