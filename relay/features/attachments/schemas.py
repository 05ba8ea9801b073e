from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

AttachmentMediaType = Literal["image", "pdf", "text"]

IMAGE_MIME_TYPES = frozenset({"image/png", "image/jpeg", "image/gif", "image/webp"})
PDF_MIME_TYPE = "application/pdf"
TEXT_MIME_TYPES = frozenset({"text/plain", "text/csv"})
ALLOWED_MIME_TYPES = frozenset({*IMAGE_MIME_TYPES, PDF_MIME_TYPE, *TEXT_MIME_TYPES})

MAX_FILES_PER_REQUEST = 5
MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024
MAX_DOCUMENT_CHARS = 8_000

# One content part sent upstream: {"type": "text", ...} or {"type": "image_url", ...}.
ContentPart = dict[str, Any]


class AttachmentPayload(BaseModel):
    """A user file as transported in the chat request body (base64 data)."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    name: str = Field(min_length=1)
    mime_type: str = Field(min_length=1, alias="mimeType")
    data: str = Field(min_length=1)

    @property
    def media_type(self) -> AttachmentMediaType:
        return media_type_for(self.mime_type)

    @property
    def estimated_size_bytes(self) -> int:
        return estimate_decoded_size(self.data)


def media_type_for(mime_type: str) -> AttachmentMediaType:
    if mime_type in IMAGE_MIME_TYPES:
        return "image"
    if mime_type == PDF_MIME_TYPE:
        return "pdf"
    return "text"


def estimate_decoded_size(encoded: str) -> int:
    # Matches the client-side cap: encoded length scaled by 3/4, padding ignored.
    return len(encoded) * 3 // 4
