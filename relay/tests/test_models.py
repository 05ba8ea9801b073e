from __future__ import annotations

import importlib

import pytest

from relay.core.config import Settings

models = importlib.import_module("relay.agents.models")


def test_openai_model_spec_disables_retries(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("OPENAI_MODEL", "gpt-4o-mini")
    monkeypatch.setenv("UPSTREAM_TIMEOUT_SECONDS", "12")
    settings = Settings(_env_file=None)

    spec = models.openai_model_spec(settings)
    model = spec.build_model(800)

    assert spec.name == "gpt-4o-mini"
    assert model.max_retries == 0
    assert model.max_tokens == 800
    assert model.request_timeout == 12


def test_get_chat_model_logs_model_name(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture):
    built: list[int] = []
    spec = models.ModelSpec(name="gpt-test", build_model=lambda max_tokens: built.append(max_tokens) or object())
    monkeypatch.setattr(models, "openai_model_spec", lambda: spec)
    models.get_chat_model.cache_clear()
    caplog.set_level("INFO", logger="relay.agents.models")

    try:
        first = models.get_chat_model(1200)
        second = models.get_chat_model(1200)
    finally:
        models.get_chat_model.cache_clear()

    assert first is second
    assert built == [1200]
    assert "Building chat model gpt-test with max_tokens=1200." in caplog.text
