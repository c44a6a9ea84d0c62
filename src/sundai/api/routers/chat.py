"""
Conversation endpoints: messages, voice input, assistant mode and transcript.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, File, Request, UploadFile

from ...application.conversation.router import ConversationRouter
from ...core.exceptions import ValidationFailedError
from ..deps import get_conversation_router
from ..schemas.chat import ChatMessageSchema, ChatRequest, ModeRequest, ModeResponse
from ..schemas.common import ApiResponse
from ..utils.responses import ok

router = APIRouter(prefix="/chat", tags=["chat"])
logger = logging.getLogger(__name__)


def _mode_payload(conversation: ConversationRouter) -> ModeResponse:
    mode = conversation.mode
    return ModeResponse(mode=mode, label=mode.label, description=mode.description)


@router.post("", response_model=ApiResponse[ChatMessageSchema])
async def send_message(
    request: Request,
    body: ChatRequest,
    conversation: ConversationRouter = Depends(get_conversation_router),
):
    """Run one conversational turn and return the assistant's reply."""
    reply = await conversation.handle_message(body.message)
    return ok(request, data=reply.to_dict(), message="OK")


@router.post("/voice", response_model=ApiResponse[ChatMessageSchema])
async def send_voice(
    request: Request,
    audio: UploadFile = File(..., description="Recorded audio"),
    conversation: ConversationRouter = Depends(get_conversation_router),
):
    """Transcribe a recording and run it as a conversational turn."""
    content = await audio.read()
    logger.info(f"🎤 Received recording {audio.filename} ({len(content)} bytes)")
    reply = await conversation.handle_audio(content)
    if reply is None:
        raise ValidationFailedError("No speech detected")
    return ok(request, data=reply.to_dict(), message="OK")


@router.get("/mode", response_model=ApiResponse[ModeResponse])
async def get_mode(request: Request, conversation: ConversationRouter = Depends(get_conversation_router)):
    return ok(request, data=_mode_payload(conversation), message="OK")


@router.put("/mode", response_model=ApiResponse[ChatMessageSchema])
async def set_mode(
    request: Request,
    body: ModeRequest,
    conversation: ConversationRouter = Depends(get_conversation_router),
):
    """Switch the assistant mode; the reply is the announcement message."""
    announcement = await conversation.set_mode(body.mode)
    return ok(request, data=announcement.to_dict(), message=f"Mode set to {body.mode.value}")


@router.get("/transcript", response_model=ApiResponse[List[ChatMessageSchema]])
async def get_transcript(request: Request, conversation: ConversationRouter = Depends(get_conversation_router)):
    return ok(request, data=[m.to_dict() for m in conversation.transcript], message="OK")
