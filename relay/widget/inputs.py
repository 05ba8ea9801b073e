from __future__ import annotations

import math
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable

import aiofiles

from relay.features.attachments import ALLOWED_MIME_TYPES, IMAGE_MIME_TYPES, MAX_FILE_SIZE_BYTES

from .state import WidgetState

MAX_PENDING_FILES = 5

_CLIPBOARD_EXTENSIONS = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


@dataclass(frozen=True)
class FileCandidate:
    name: str
    mime_type: str
    size: int
    read: Callable[[], Awaitable[bytes]]


def from_path(path: str | Path) -> FileCandidate:
    resolved = Path(path)
    guessed, _ = mimetypes.guess_type(resolved.name)

    async def _read() -> bytes:
        async with aiofiles.open(resolved, "rb") as handle:
            return await handle.read()

    return FileCandidate(
        name=resolved.name,
        mime_type=(guessed or "application/octet-stream").lower(),
        size=resolved.stat().st_size,
        read=_read,
    )


def from_clipboard_image(data: bytes, mime_type: str, *, index: int = 1) -> FileCandidate:
    extension = _CLIPBOARD_EXTENSIONS.get(mime_type, "")

    async def _read() -> bytes:
        return data

    return FileCandidate(
        name=f"pasted-image-{index}{extension}",
        mime_type=mime_type,
        size=len(data),
        read=_read,
    )


def is_clipboard_image(mime_type: str) -> bool:
    return mime_type in IMAGE_MIME_TYPES


def upload_size_estimate(size: int) -> int:
    """Decoded size the relay will estimate for ``size`` bytes once base64 encoded.

    Padding makes this up to two bytes larger than ``size``.
    """
    return (4 * math.ceil(size / 3)) * 3 // 4


def check_candidate(candidate: FileCandidate, state: WidgetState) -> str | None:
    """Return an inline error for a rejected file, or None when it may be read.

    These checks only spare the user a round trip; the relay validates again.
    """
    if candidate.mime_type not in ALLOWED_MIME_TYPES:
        return f"'{candidate.name}' is not a supported file type."
    if upload_size_estimate(candidate.size) > MAX_FILE_SIZE_BYTES:
        return f"'{candidate.name}' is larger than {MAX_FILE_SIZE_BYTES // (1024 * 1024)} MB."
    if state.attachment_count() >= MAX_PENDING_FILES:
        return f"You can attach up to {MAX_PENDING_FILES} files."
    return None
