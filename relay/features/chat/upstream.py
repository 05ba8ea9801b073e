from __future__ import annotations

import asyncio
import logging
from typing import Any

import openai
from langchain_core.messages import HumanMessage, SystemMessage

from relay.agents.models import get_chat_model
from relay.core.config import get_settings
from relay.features.attachments import ContentPart

from .errors import EmptyUpstreamReplyError, UpstreamBusyError, UpstreamFailureError
from .prompts import SYSTEM_PROMPT

logger = logging.getLogger(__name__)


def output_token_ceiling(*, has_images: bool) -> int:
    settings = get_settings()
    if has_images:
        return settings.max_output_tokens_with_images
    return settings.max_output_tokens


def reply_text(message: Any) -> str:
    content = getattr(message, "content", None)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: list[str] = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") in {"text", "output_text"}:
                parts.append(str(block.get("text") or ""))
        return "".join(parts)
    return ""


async def complete_chat(user_content: str | list[ContentPart], *, has_images: bool) -> str:
    """Send one completion request and return the reply text verbatim."""
    model = get_chat_model(output_token_ceiling(has_images=has_images))
    messages = [
        SystemMessage(content=SYSTEM_PROMPT),
        HumanMessage(content=user_content),
    ]
    try:
        result = await model.ainvoke(messages)
    except openai.RateLimitError as exc:
        logger.warning("Upstream completion API is rate limiting requests: %s", exc)
        raise UpstreamBusyError("AI service is busy. Please try again shortly.") from exc
    except openai.AuthenticationError as exc:
        logger.error("Upstream completion API rejected the configured credential.")
        raise UpstreamFailureError("Something went wrong. Please try again later.") from exc
    except (openai.APITimeoutError, asyncio.TimeoutError) as exc:
        logger.error("Upstream completion API timed out.")
        raise UpstreamFailureError("Something went wrong. Please try again later.") from exc
    except Exception as exc:
        logger.error("Upstream completion call failed.", exc_info=True)
        raise UpstreamFailureError("Something went wrong. Please try again later.") from exc

    reply = reply_text(result)
    if not reply.strip():
        logger.error("Upstream completion API returned an empty reply.")
        raise EmptyUpstreamReplyError("No response received from AI service.")
    return reply
