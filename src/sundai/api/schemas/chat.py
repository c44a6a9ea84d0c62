"""
Chat schemas: messages, transcript and assistant mode.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, validator

from ...domain.enums import AssistantMode


class ChatRequest(BaseModel):
    """A user message for the conversation router."""

    message: str = Field(..., description="User message text")

    @validator("message")
    def validate_message(cls, v):
        if not v or not v.strip():
            raise ValueError("Message cannot be empty")
        return v.strip()


class SourceSchema(BaseModel):
    title: str
    url: Optional[str] = None


class ChatMessageSchema(BaseModel):
    """One transcript entry as rendered for the client."""

    id: int
    role: str = Field(..., description="user or assistant")
    text: str = Field(..., description="Raw message text")
    html: str = Field("", description="Rendered markup with entity links")
    pending: bool = False
    sources: List[SourceSchema] = Field(default_factory=list)
    links: List[Dict[str, str]] = Field(default_factory=list, description="Linked entities (type, id)")
    created_at: datetime


class ModeRequest(BaseModel):
    mode: AssistantMode = Field(..., description="mcp (tool actions) or rag (document retrieval)")


class ModeResponse(BaseModel):
    mode: AssistantMode
    label: str
    description: str
