from __future__ import annotations

import base64
import importlib

import httpx
import openai
import pytest
from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage

from relay.features.attachments import PDF_NO_TEXT_NOTE

upstream = importlib.import_module("relay.features.chat.upstream")
main = importlib.import_module("relay.main")

_PNG = base64.b64encode(b"\x89PNG\r\n\x1a\n" + b"\x00" * 16).decode("ascii")


class _StubModel:
    def __init__(self, reply: str = "General guidance only, not legal advice.", exc: Exception | None = None):
        self.reply = reply
        self.exc = exc
        self.calls: list[list] = []

    async def ainvoke(self, messages):
        self.calls.append(messages)
        if self.exc is not None:
            raise self.exc
        return AIMessage(content=self.reply)


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    main.chat_rate_limiter.reset()
    yield
    main.chat_rate_limiter.reset()


@pytest.fixture
def stub_model(monkeypatch: pytest.MonkeyPatch) -> _StubModel:
    model = _StubModel()
    monkeypatch.setattr(upstream, "get_chat_model", lambda _max_tokens: model)
    return model


@pytest.fixture
def client() -> TestClient:
    return TestClient(main.app)


def _image(name="photo.png"):
    return {"name": name, "mimeType": "image/png", "data": _PNG}


def test_chat_with_message_only_sends_bare_string(client: TestClient, stub_model: _StubModel):
    response = client.post("/api/chat", json={"message": "What visa do I need to work in NZ?"})

    assert response.status_code == 200
    assert response.json() == {"reply": "General guidance only, not legal advice."}
    [messages] = stub_model.calls
    assert messages[1].content == "What visa do I need to work in NZ?"


def test_chat_with_single_image_sends_content_part_array(client: TestClient, stub_model: _StubModel):
    response = client.post("/api/chat", json={"message": "", "files": [_image()]})

    assert response.status_code == 200
    assert response.json()["reply"]
    [messages] = stub_model.calls
    content = messages[1].content
    assert isinstance(content, list)
    assert len(content) == 1
    assert content[0]["type"] == "image_url"
    assert content[0]["image_url"]["url"] == f"data:image/png;base64,{_PNG}"


def test_chat_requires_message_or_files(client: TestClient, stub_model: _StubModel):
    response = client.post("/api/chat", json={"message": "", "files": []})

    assert response.status_code == 400
    assert response.json() == {"error": "A message or at least one file is required."}
    assert stub_model.calls == []


def test_chat_rejects_empty_body(client: TestClient, stub_model: _StubModel):
    response = client.post("/api/chat", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "A message or at least one file is required."}


def test_chat_rejects_six_files_without_upstream_call(client: TestClient, stub_model: _StubModel):
    files = [_image(f"photo-{index}.png") for index in range(6)]
    response = client.post("/api/chat", json={"message": "Check these", "files": files})

    assert response.status_code == 400
    assert response.json() == {"error": "You can attach up to 5 files per message."}
    assert stub_model.calls == []


def test_chat_rejects_long_message(client: TestClient, stub_model: _StubModel):
    response = client.post("/api/chat", json={"message": "a" * 1001})

    assert response.status_code == 400
    assert response.json() == {"error": "Message must be 1000 characters or fewer."}
    assert stub_model.calls == []


def test_chat_rejects_disallowed_type_without_partial_processing(
    client: TestClient,
    stub_model: _StubModel,
    monkeypatch: pytest.MonkeyPatch,
):
    service = importlib.import_module("relay.features.attachments.service")
    built: list[str] = []
    original = service.build_attachment_part

    def _tracking_build(attachment):
        built.append(attachment.name)
        return original(attachment)

    monkeypatch.setattr(service, "build_attachment_part", _tracking_build)
    files = [_image(), {"name": "run.sh", "mimeType": "application/x-sh", "data": "AAAA"}]
    response = client.post("/api/chat", json={"message": "hi", "files": files})

    assert response.status_code == 400
    assert response.json() == {"error": "Unsupported file type for 'run.sh'."}
    assert built == []
    assert stub_model.calls == []


def test_chat_rejects_malformed_file_record(client: TestClient, stub_model: _StubModel):
    response = client.post("/api/chat", json={"files": [{"name": "x.png"}]})
    assert response.status_code == 400
    assert response.json() == {"error": "Each file must include a name, mimeType and data."}


def test_chat_rejects_non_string_message(client: TestClient, stub_model: _StubModel):
    response = client.post("/api/chat", json={"message": 42})
    assert response.status_code == 400
    assert response.json() == {"error": 'The "message" field must be a string.'}


def test_chat_rejects_non_list_files(client: TestClient, stub_model: _StubModel):
    response = client.post("/api/chat", json={"message": "hi", "files": "photo.png"})
    assert response.status_code == 400
    assert response.json() == {"error": 'The "files" field must be a list.'}


def test_chat_rejects_invalid_json(client: TestClient, stub_model: _StubModel):
    response = client.post(
        "/api/chat",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Request body must be a JSON object."}


def test_chat_degrades_unreadable_pdf_instead_of_failing(
    client: TestClient,
    stub_model: _StubModel,
    monkeypatch: pytest.MonkeyPatch,
):
    service = importlib.import_module("relay.features.attachments.service")
    monkeypatch.setattr(service, "extract_pdf_text", lambda _data: "")
    pdf = {"name": "scan.pdf", "mimeType": "application/pdf", "data": base64.b64encode(b"%PDF").decode()}

    response = client.post("/api/chat", json={"message": "Summarise", "files": [pdf]})

    assert response.status_code == 200
    content = stub_model.calls[0][1].content
    assert content[0] == {"type": "text", "text": "Summarise"}
    assert PDF_NO_TEXT_NOTE in content[1]["text"]


def test_chat_maps_upstream_rate_limit_to_429(client: TestClient, monkeypatch: pytest.MonkeyPatch):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    exc = openai.RateLimitError("slow down", response=httpx.Response(429, request=request), body=None)
    monkeypatch.setattr(upstream, "get_chat_model", lambda _max_tokens: _StubModel(exc=exc))

    response = client.post("/api/chat", json={"message": "Hello"})

    assert response.status_code == 429
    assert response.json() == {"error": "AI service is busy. Please try again shortly."}


def test_chat_hides_upstream_failure_details(client: TestClient, monkeypatch: pytest.MonkeyPatch):
    exc = RuntimeError("upstream exploded at 10.0.0.3 with key sk-secret")
    monkeypatch.setattr(upstream, "get_chat_model", lambda _max_tokens: _StubModel(exc=exc))

    response = client.post("/api/chat", json={"message": "Hello"})

    assert response.status_code == 502
    assert response.json() == {"error": "Something went wrong. Please try again later."}
    assert "sk-secret" not in response.text


def test_chat_reports_empty_upstream_reply(client: TestClient, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(upstream, "get_chat_model", lambda _max_tokens: _StubModel(reply=""))

    response = client.post("/api/chat", json={"message": "Hello"})

    assert response.status_code == 502
    assert response.json() == {"error": "No response received from AI service."}


def test_repeated_requests_make_independent_upstream_calls(client: TestClient, stub_model: _StubModel):
    payload = {"message": "What is the Skilled Migrant Category?"}
    first = client.post("/api/chat", json=payload)
    second = client.post("/api/chat", json=payload)

    assert first.status_code == second.status_code == 200
    assert first.json() == second.json()
    assert len(stub_model.calls) == 2
    assert stub_model.calls[0] is not stub_model.calls[1]


def test_health_reports_service_name(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": main.settings.service_name}


def test_unknown_route_returns_not_found(client: TestClient):
    response = client.get("/api/nope")
    assert response.status_code == 404
    assert response.json() == {"error": "Not found."}


def test_chat_route_documents_error_body(client: TestClient):
    operation = client.get("/openapi.json").json()["paths"]["/api/chat"]["post"]
    for status in ("400", "429", "502"):
        schema = operation["responses"][status]["content"]["application/json"]["schema"]
        assert schema == {"$ref": "#/components/schemas/ChatError"}
