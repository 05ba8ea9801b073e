from .errors import (
    ChatDomainError,
    ChatValidationError,
    EmptyUpstreamReplyError,
    UpstreamBusyError,
    UpstreamFailureError,
)
from .schemas import MAX_MESSAGE_LENGTH, ChatError, ChatReply, ChatRequest, ValidatedChat
from .service import relay_chat, validate_chat_request

__all__ = [
    "ChatDomainError",
    "ChatError",
    "ChatReply",
    "ChatRequest",
    "ChatValidationError",
    "EmptyUpstreamReplyError",
    "MAX_MESSAGE_LENGTH",
    "UpstreamBusyError",
    "UpstreamFailureError",
    "ValidatedChat",
    "relay_chat",
    "validate_chat_request",
]
