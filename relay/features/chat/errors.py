from __future__ import annotations


class ChatDomainError(Exception):
    """Base exception for chat relay operations."""


class ChatValidationError(ChatDomainError):
    pass


class UpstreamBusyError(ChatDomainError):
    pass


class UpstreamFailureError(ChatDomainError):
    pass


class EmptyUpstreamReplyError(UpstreamFailureError):
    pass
