from .errors import AttachmentValidationError
from .schemas import (
    ALLOWED_MIME_TYPES,
    IMAGE_MIME_TYPES,
    MAX_DOCUMENT_CHARS,
    MAX_FILE_SIZE_BYTES,
    MAX_FILES_PER_REQUEST,
    AttachmentMediaType,
    AttachmentPayload,
    ContentPart,
    estimate_decoded_size,
    media_type_for,
)
from .service import (
    PDF_NO_TEXT_NOTE,
    PDF_UNREADABLE_NOTE,
    TEXT_UNREADABLE_NOTE,
    TRUNCATION_MARKER,
    build_attachment_part,
    build_content_parts,
    build_user_content,
    extract_pdf_text,
    has_image_parts,
    validate_attachments,
    wrap_document,
)

__all__ = [
    "ALLOWED_MIME_TYPES",
    "AttachmentMediaType",
    "AttachmentPayload",
    "AttachmentValidationError",
    "ContentPart",
    "IMAGE_MIME_TYPES",
    "MAX_DOCUMENT_CHARS",
    "MAX_FILES_PER_REQUEST",
    "MAX_FILE_SIZE_BYTES",
    "PDF_NO_TEXT_NOTE",
    "PDF_UNREADABLE_NOTE",
    "TEXT_UNREADABLE_NOTE",
    "TRUNCATION_MARKER",
    "build_attachment_part",
    "build_content_parts",
    "build_user_content",
    "estimate_decoded_size",
    "extract_pdf_text",
    "has_image_parts",
    "media_type_for",
    "validate_attachments",
    "wrap_document",
]
