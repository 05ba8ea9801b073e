from __future__ import annotations

from fastapi import APIRouter, HTTPException

from .errors import (
    ChatValidationError,
    EmptyUpstreamReplyError,
    UpstreamBusyError,
    UpstreamFailureError,
)
from .schemas import ChatError, ChatReply, ChatRequest
from .service import relay_chat

router = APIRouter(prefix="/api", tags=["chat"])


def _raise_http_error(exc: Exception) -> None:
    if isinstance(exc, ChatValidationError):
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if isinstance(exc, UpstreamBusyError):
        raise HTTPException(status_code=429, detail=str(exc)) from exc
    if isinstance(exc, (EmptyUpstreamReplyError, UpstreamFailureError)):
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    raise exc


@router.post(
    "/chat",
    response_model=ChatReply,
    responses={
        400: {"model": ChatError},
        429: {"model": ChatError},
        502: {"model": ChatError},
    },
)
async def post_chat(payload: ChatRequest) -> ChatReply:
    try:
        reply = await relay_chat(payload)
    except Exception as exc:
        _raise_http_error(exc)
    return ChatReply(reply=reply)
