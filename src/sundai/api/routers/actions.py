"""
Direct action dispatch, bypassing the assistant backend.
"""

from fastapi import APIRouter, Depends, Request

from ...application.actions.registry import Dispatcher
from ...application.linking.markdown import format_markdown
from ...application.linking.mention_linker import EntityMentionLinker
from ..deps import get_dispatcher, get_linker
from ..schemas.actions import ActionRequest, ActionResult
from ..schemas.common import ApiResponse
from ..utils.responses import ok

router = APIRouter(prefix="/actions", tags=["actions"])


@router.get("", response_model=ApiResponse[list])
async def list_actions(request: Request, dispatcher: Dispatcher = Depends(get_dispatcher)):
    """Canonical names of the registered actions."""
    return ok(request, data=dispatcher.registry.names(), message="OK")


@router.post("/{name}", response_model=ApiResponse[ActionResult])
async def dispatch_action(
    request: Request,
    name: str,
    body: ActionRequest,
    dispatcher: Dispatcher = Depends(get_dispatcher),
    linker: EntityMentionLinker = Depends(get_linker),
):
    """
    Execute one action by name (aliases accepted).

    Failed actions still answer 200 with ``ok=false``; the message carries the reason.
    """
    outcome = await dispatcher.dispatch(name, body.parameters)
    result = ActionResult(
        action=name,
        ok=outcome.ok,
        message=outcome.message,
        html=linker.link(format_markdown(outcome.message)),
        data=outcome.data,
    )
    return ok(request, data=result, message="OK" if outcome.ok else "ACTION_FAILED")
