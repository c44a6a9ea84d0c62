"""
Direct action dispatch schemas.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ActionRequest(BaseModel):
    """Parameters for one action, in the same shape the assistant sends."""

    parameters: Dict[str, Any] = Field(default_factory=dict, description="Action parameters")


class ActionResult(BaseModel):
    action: str = Field(..., description="Requested action name")
    ok: bool = Field(..., description="Whether the action succeeded")
    message: str = Field(..., description="Human-readable result text")
    html: str = Field("", description="Result rendered with entity links")
    data: Optional[Any] = None
