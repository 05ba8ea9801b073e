from __future__ import annotations


class AttachmentValidationError(Exception):
    """Raised when an attachment record fails request-level validation."""
