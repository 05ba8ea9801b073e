from __future__ import annotations

import re

_NEWLINE_RE = re.compile(r"\r\n?")


def clean_document_text(value: str) -> str:
    """Drop NUL bytes and normalize CR/CRLF line endings to LF."""
    return _NEWLINE_RE.sub("\n", value.replace("\x00", "")).strip()


def clip_text(value: str, *, max_chars: int, marker: str) -> str:
    if len(value) <= max_chars:
        return value
    return f"{value[:max_chars]}{marker}"


__all__ = [
    "clean_document_text",
    "clip_text",
]
