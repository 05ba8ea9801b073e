from .client import GENERIC_FAILURE_MESSAGE, TOO_LONG_MESSAGE, UNREACHABLE_MESSAGE, ChatWidget
from .inputs import (
    MAX_PENDING_FILES,
    FileCandidate,
    check_candidate,
    from_clipboard_image,
    from_path,
    upload_size_estimate,
)
from .state import ChatLine, PendingAttachment, WidgetState

__all__ = [
    "ChatLine",
    "ChatWidget",
    "FileCandidate",
    "GENERIC_FAILURE_MESSAGE",
    "MAX_PENDING_FILES",
    "PendingAttachment",
    "TOO_LONG_MESSAGE",
    "UNREACHABLE_MESSAGE",
    "WidgetState",
    "check_candidate",
    "from_clipboard_image",
    "from_path",
    "upload_size_estimate",
]
