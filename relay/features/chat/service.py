from __future__ import annotations

import logging

from relay.features.attachments import (
    AttachmentValidationError,
    build_user_content,
    has_image_parts,
    validate_attachments,
)

from . import upstream
from .errors import ChatValidationError
from .schemas import MAX_MESSAGE_LENGTH, ChatRequest, ValidatedChat

logger = logging.getLogger(__name__)


def validate_chat_request(payload: ChatRequest) -> ValidatedChat:
    message = (payload.message or "").strip() or None
    files = payload.files or []

    if message is None and not files:
        raise ChatValidationError("A message or at least one file is required.")
    if message is not None and len(message) > MAX_MESSAGE_LENGTH:
        raise ChatValidationError(f"Message must be {MAX_MESSAGE_LENGTH} characters or fewer.")

    try:
        attachments = validate_attachments(files)
    except AttachmentValidationError as exc:
        raise ChatValidationError(str(exc)) from exc
    return ValidatedChat(message=message, attachments=attachments)


async def relay_chat(payload: ChatRequest) -> str:
    validated = validate_chat_request(payload)
    user_content = build_user_content(validated.message, validated.attachments)
    has_images = has_image_parts(user_content)
    logger.debug(
        "Relaying chat request (message_chars=%d, attachments=%d, images=%s).",
        len(validated.message or ""),
        len(validated.attachments),
        has_images,
    )
    return await upstream.complete_chat(user_content, has_images=has_images)
