from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable

from langchain_openai import ChatOpenAI

from relay.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelSpec:
    name: str
    build_model: Callable[[int], Any]


def openai_model_spec(settings: Settings | None = None) -> ModelSpec:
    resolved = settings or get_settings()

    def _build_model(max_tokens: int) -> ChatOpenAI:
        model_kwargs: dict[str, Any] = {
            "model": resolved.openai_model,
            "api_key": resolved.openai_api_key.get_secret_value(),
            "temperature": resolved.openai_temperature,
            "max_tokens": max_tokens,
            "timeout": resolved.upstream_timeout_seconds,
            # A failed send is retried by the user, never by the relay.
            "max_retries": 0,
        }
        if resolved.openai_base_url:
            model_kwargs["base_url"] = resolved.openai_base_url
        return ChatOpenAI(**model_kwargs)

    return ModelSpec(name=resolved.openai_model, build_model=_build_model)


@lru_cache(maxsize=4)
def get_chat_model(max_tokens: int) -> ChatOpenAI:
    spec = openai_model_spec()
    logger.info("Building chat model %s with max_tokens=%d.", spec.name, max_tokens)
    return spec.build_model(max_tokens)
