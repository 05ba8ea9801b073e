#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import shlex

from relay.widget import ChatWidget

_PREFIX = {
    "user": "you",
    "bot": "bot",
    "error": "!!",
    "typing": "..",
}


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Talk to a running chat relay from the terminal.",
    )
    parser.add_argument(
        "--url",
        default="http://localhost:3001/api/chat",
        help="Chat endpoint URL (default: %(default)s).",
    )
    return parser.parse_args()


def _print_new_lines(widget: ChatWidget, seen: int) -> int:
    lines = widget.state.transcript
    for line in lines[seen:]:
        suffix = f"  [{', '.join(line.attachment_names)}]" if line.attachment_names else ""
        print(f"{_PREFIX[line.kind]}> {line.text}{suffix}")
    return len(lines)


async def run(url: str) -> None:
    widget = ChatWidget(url)
    seen = 0
    print("Commands: /attach <path>..., /remove <id>, /files, /quit")
    while True:
        try:
            raw = await asyncio.to_thread(input, "> ")
        except EOFError:
            break

        command, _, rest = raw.strip().partition(" ")
        if command == "/quit":
            break
        if command == "/attach":
            await widget.pick_files(shlex.split(rest))
        elif command == "/remove":
            if not widget.remove_attachment(rest.strip()):
                print(f"No pending file '{rest.strip()}'.")
        elif command == "/files":
            for item in widget.state.pending:
                print(f"  {item.id}: {item.name} ({item.mime_type}, {item.size} bytes)")
        else:
            widget.state.draft = raw
            await widget.handle_key("Enter")
        seen = _print_new_lines(widget, seen)


def main() -> None:
    args = parse_args()
    asyncio.run(run(args.url))


if __name__ == "__main__":
    main()
