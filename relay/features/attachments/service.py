from __future__ import annotations

import base64
import binascii
import io
import logging
from typing import Any, Iterable

from pydantic import ValidationError
from pypdf import PdfReader

from relay.features.shared.text import clean_document_text, clip_text

from .errors import AttachmentValidationError
from .schemas import (
    ALLOWED_MIME_TYPES,
    MAX_DOCUMENT_CHARS,
    MAX_FILE_SIZE_BYTES,
    MAX_FILES_PER_REQUEST,
    AttachmentPayload,
    ContentPart,
)

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = f"\n\n[... truncated: document exceeds {MAX_DOCUMENT_CHARS} characters ...]"
PDF_NO_TEXT_NOTE = "This PDF has no extractable text. It may be a scanned or image-only document."
PDF_UNREADABLE_NOTE = "This PDF could not be read. It may be corrupted or password-protected."
TEXT_UNREADABLE_NOTE = "This file could not be read."
IMAGE_DETAIL = "auto"


def validate_attachments(records: Iterable[Any]) -> list[AttachmentPayload]:
    """Validate every raw file record, failing on the first invalid one.

    Nothing is decoded or extracted here, so a rejected request never
    reaches normalization.
    """
    items = list(records)
    if len(items) > MAX_FILES_PER_REQUEST:
        raise AttachmentValidationError(
            f"You can attach up to {MAX_FILES_PER_REQUEST} files per message."
        )

    attachments: list[AttachmentPayload] = []
    for raw in items:
        try:
            attachment = AttachmentPayload.model_validate(raw)
        except ValidationError as exc:
            raise AttachmentValidationError(
                "Each file must include a name, mimeType and data."
            ) from exc
        if attachment.mime_type not in ALLOWED_MIME_TYPES:
            raise AttachmentValidationError(f"Unsupported file type for '{attachment.name}'.")
        if attachment.estimated_size_bytes > MAX_FILE_SIZE_BYTES:
            raise AttachmentValidationError(
                f"File '{attachment.name}' exceeds the {MAX_FILE_SIZE_BYTES // (1024 * 1024)} MB size limit."
            )
        attachments.append(attachment)
    return attachments


def wrap_document(name: str, text: str) -> str:
    # Clip before dropping NULs so the ceiling counts the text as decoded.
    body = clip_text(text, max_chars=MAX_DOCUMENT_CHARS, marker=TRUNCATION_MARKER).replace("\x00", "")
    return f"[Document: {name}]\n{body}\n[End of document: {name}]"


def _text_part(text: str) -> ContentPart:
    return {"type": "text", "text": text}


def _image_part(attachment: AttachmentPayload) -> ContentPart:
    return {
        "type": "image_url",
        "image_url": {
            "url": f"data:{attachment.mime_type};base64,{attachment.data}",
            "detail": IMAGE_DETAIL,
        },
    }


def _decode_base64(data: str) -> bytes:
    return base64.b64decode(data, validate=True)


def extract_pdf_text(data: bytes) -> str:
    reader = PdfReader(io.BytesIO(data))
    if reader.is_encrypted:
        # Empty user password covers "owner-only" protected files.
        reader.decrypt("")
    chunks: list[str] = []
    total = 0
    for page in reader.pages:
        text = (page.extract_text() or "").strip()
        if not text:
            continue
        chunks.append(text)
        total += len(text)
        if total > MAX_DOCUMENT_CHARS:
            break
    return clean_document_text("\n\n".join(chunks))


def _pdf_part(attachment: AttachmentPayload) -> ContentPart:
    try:
        text = extract_pdf_text(_decode_base64(attachment.data))
    except Exception:
        logger.warning("PDF extraction failed for %r.", attachment.name, exc_info=True)
        return _text_part(wrap_document(attachment.name, PDF_UNREADABLE_NOTE))
    if not text:
        logger.info("PDF %r has no extractable text.", attachment.name)
        return _text_part(wrap_document(attachment.name, PDF_NO_TEXT_NOTE))
    return _text_part(wrap_document(attachment.name, text))


def _document_part(attachment: AttachmentPayload) -> ContentPart:
    try:
        raw = _decode_base64(attachment.data)
    except (binascii.Error, ValueError):
        logger.warning("Text attachment %r is not valid base64.", attachment.name)
        return _text_part(wrap_document(attachment.name, TEXT_UNREADABLE_NOTE))
    return _text_part(wrap_document(attachment.name, raw.decode("utf-8", errors="replace")))


def build_attachment_part(attachment: AttachmentPayload) -> ContentPart:
    if attachment.media_type == "image":
        return _image_part(attachment)
    if attachment.media_type == "pdf":
        return _pdf_part(attachment)
    return _document_part(attachment)


def build_content_parts(attachments: Iterable[AttachmentPayload]) -> list[ContentPart]:
    return [build_attachment_part(item) for item in attachments]


def build_user_content(
    message: str | None,
    attachments: list[AttachmentPayload],
) -> str | list[ContentPart]:
    """Shape the user turn for the completion API.

    Without attachments the message goes up as a bare string; with attachments
    it becomes a part list, message first.
    """
    if not attachments:
        return message or ""
    content: list[ContentPart] = []
    if message:
        content.append(_text_part(message))
    content.extend(build_content_parts(attachments))
    return content


def has_image_parts(content: str | list[ContentPart]) -> bool:
    if isinstance(content, str):
        return False
    return any(part.get("type") == "image_url" for part in content)
