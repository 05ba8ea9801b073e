from __future__ import annotations

import asyncio
import base64
import html
import logging
from itertools import count
from pathlib import Path
from typing import Any, Iterable

import httpx

from relay.features.chat import MAX_MESSAGE_LENGTH

from .inputs import FileCandidate, check_candidate, from_clipboard_image, from_path, is_clipboard_image
from .state import (
    SEND_LABEL,
    SENDING_LABEL,
    TYPING_TEXT,
    ChatLine,
    ChatLineKind,
    PendingAttachment,
    WidgetState,
)

logger = logging.getLogger(__name__)

UNREACHABLE_MESSAGE = "Unable to reach the server. Please check your connection and try again."
GENERIC_FAILURE_MESSAGE = "Something went wrong. Please try again."
TOO_LONG_MESSAGE = f"Please keep your message under {MAX_MESSAGE_LENGTH} characters."


class ChatWidget:
    """Headless chat widget: pending attachments, one in-flight send, transcript.

    Rendering is a list of ``ChatLine`` entries in ``state.transcript``;
    ``render_html`` turns it into the markup the embedded widget shows.
    """

    def __init__(
        self,
        api_url: str,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 60.0,
    ) -> None:
        self.api_url = api_url
        self.state = WidgetState()
        self._http_client = http_client
        self._timeout = timeout
        self._ids = count(1)
        self._paste_index = count(1)

    def _show(self, kind: ChatLineKind, text: str, attachment_names: list[str] | None = None) -> ChatLine:
        line = ChatLine(kind=kind, text=text, attachment_names=list(attachment_names or []))
        self.state.transcript.append(line)
        return line

    def _hide_typing(self) -> None:
        self.state.transcript = [line for line in self.state.transcript if line.kind != "typing"]

    def _set_loading(self, loading: bool) -> None:
        self.state.is_sending = loading
        self.state.controls_enabled = not loading
        self.state.send_label = SENDING_LABEL if loading else SEND_LABEL

    def render_html(self) -> str:
        rendered: list[str] = []
        for line in self.state.transcript:
            text = html.escape(line.text)
            if line.attachment_names:
                names = ", ".join(html.escape(name) for name in line.attachment_names)
                text = f"{text}<span class=\"chat-attachments\">{names}</span>"
            rendered.append(f"<div class=\"chat-msg chat-{line.kind}\">{text}</div>")
        return "\n".join(rendered)

    def _path_candidates(self, paths: Iterable[str | Path]) -> list[FileCandidate]:
        candidates: list[FileCandidate] = []
        for path in paths:
            try:
                candidates.append(from_path(path))
            except OSError:
                logger.warning("Could not open %s.", path, exc_info=True)
                self._show("error", f"Could not read '{Path(path).name}'.")
        return candidates

    async def pick_files(self, paths: Iterable[str | Path]) -> list[PendingAttachment]:
        return await self.add_files(self._path_candidates(paths))

    async def drop_files(self, paths: Iterable[str | Path]) -> list[PendingAttachment]:
        return await self.add_files(self._path_candidates(paths))

    async def paste(self, items: Iterable[tuple[bytes, str]]) -> list[PendingAttachment]:
        candidates = [
            from_clipboard_image(data, mime_type, index=next(self._paste_index))
            for data, mime_type in items
            if is_clipboard_image(mime_type)
        ]
        return await self.add_files(candidates)

    async def add_files(self, candidates: Iterable[FileCandidate]) -> list[PendingAttachment]:
        accepted: list[tuple[str, FileCandidate]] = []
        for candidate in candidates:
            if self.state.has_file(candidate.name, candidate.size):
                continue
            error = check_candidate(candidate, self.state)
            if error is not None:
                self._show("error", error)
                continue
            file_id = f"file-{next(self._ids)}"
            self.state.reading[file_id] = (candidate.name, candidate.size)
            accepted.append((file_id, candidate))

        results = await asyncio.gather(*(self._read(file_id, item) for file_id, item in accepted))
        return [item for item in results if item is not None]

    async def _read(self, file_id: str, candidate: FileCandidate) -> PendingAttachment | None:
        try:
            raw = await candidate.read()
        except OSError:
            logger.warning("Could not read %r.", candidate.name, exc_info=True)
            self.state.reading.pop(file_id, None)
            self._show("error", f"Could not read '{candidate.name}'.")
            return None

        if self.state.reading.pop(file_id, None) is None:
            # Removed while the read was in progress.
            return None
        attachment = PendingAttachment(
            id=file_id,
            name=candidate.name,
            mime_type=candidate.mime_type,
            size=candidate.size,
            data=base64.b64encode(raw).decode("ascii"),
        )
        self.state.pending.append(attachment)
        return attachment

    def remove_attachment(self, file_id: str) -> bool:
        if self.state.reading.pop(file_id, None) is not None:
            return True
        before = len(self.state.pending)
        self.state.pending = [item for item in self.state.pending if item.id != file_id]
        return len(self.state.pending) != before

    async def handle_key(self, key: str, *, shift: bool = False) -> bool:
        if key == "Enter" and not shift:
            await self.send()
            return True
        return False

    async def send(self) -> ChatLine | None:
        if self.state.is_sending:
            return None

        message = self.state.draft.strip()
        if not message and not self.state.pending:
            return None
        if len(message) > MAX_MESSAGE_LENGTH:
            return self._show("error", TOO_LONG_MESSAGE)

        files = list(self.state.pending)
        self.state.pending.clear()
        self.state.draft = ""

        self._show("user", message, [item.name for item in files])
        self._set_loading(True)
        self._show("typing", TYPING_TEXT)

        payload: dict[str, Any] = {"message": message}
        if files:
            payload["files"] = [item.to_payload() for item in files]

        try:
            kind, text = await self._post(payload)
        finally:
            self._hide_typing()
            self._set_loading(False)
        return self._show(kind, text)

    async def _post(self, payload: dict[str, Any]) -> tuple[ChatLineKind, str]:
        try:
            if self._http_client is not None:
                response = await self._http_client.post(self.api_url, json=payload)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(self.api_url, json=payload)
        except (httpx.HTTPError, httpx.InvalidURL):
            logger.warning("Chat request to %s failed.", self.api_url, exc_info=True)
            return "error", UNREACHABLE_MESSAGE

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        reply = data.get("reply")
        if response.is_success and isinstance(reply, str) and reply:
            return "bot", reply
        error = data.get("error")
        if isinstance(error, str) and error:
            return "error", error
        return "error", GENERIC_FAILURE_MESSAGE
