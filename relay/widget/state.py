from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

ChatLineKind = Literal["user", "bot", "error", "typing"]

SEND_LABEL = "Send"
SENDING_LABEL = "Sending…"
TYPING_TEXT = "Thinking…"


@dataclass(frozen=True)
class PendingAttachment:
    id: str
    name: str
    mime_type: str
    size: int
    data: str

    def to_payload(self) -> dict[str, str]:
        return {"name": self.name, "mimeType": self.mime_type, "data": self.data}


@dataclass
class ChatLine:
    kind: ChatLineKind
    text: str
    attachment_names: list[str] = field(default_factory=list)


@dataclass
class WidgetState:
    draft: str = ""
    pending: list[PendingAttachment] = field(default_factory=list)
    # Files accepted but still being read; keyed by the id they will get.
    reading: dict[str, tuple[str, int]] = field(default_factory=dict)
    is_sending: bool = False
    controls_enabled: bool = True
    send_label: str = SEND_LABEL
    transcript: list[ChatLine] = field(default_factory=list)

    def attachment_count(self) -> int:
        return len(self.pending) + len(self.reading)

    def has_file(self, name: str, size: int) -> bool:
        if any(item.name == name and item.size == size for item in self.pending):
            return True
        return (name, size) in self.reading.values()
