"""Tests for the HTTP surface (FastAPI TestClient)."""

import json

from tavern_logger.config import DEFAULT_MOCK_RESPONSE

NOVA_MESSAGES = [
    {"role": "system", "content": "<Nova>Name: Nova\nPersonality: bold</Nova>"},
    {"role": "user", "content": "Sam: hi Nova"},
    {"role": "assistant", "content": "Nova: hello Sam"},
]


# ── Health / auth ───────────────────────────────────────────


def test_health_needs_no_auth(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_missing_key_rejected(client):
    resp = client.get("/v1/models")
    assert resp.status_code == 401
    assert resp.json() == {"error": {"message": "Invalid API key", "type": "invalid_request_error"}}


def test_wrong_key_rejected(client):
    resp = client.post(
        "/v1/chat/completions",
        json={"messages": NOVA_MESSAGES},
        headers={"Authorization": "Bearer nope"},
    )
    assert resp.status_code == 401


def test_models(client, auth):
    resp = client.get("/v1/models", headers=auth)
    assert resp.status_code == 200
    assert resp.json()["data"][0]["id"] == "mock-model-1"


# ── Chat completions ───────────────────────────────────────


def test_chat_returns_mock_completion(client, auth):
    resp = client.post("/v1/chat/completions", json={"model": "x", "messages": NOVA_MESSAGES}, headers=auth)
    assert resp.status_code == 200
    data = resp.json()
    assert data["object"] == "chat.completion"
    assert data["id"].startswith("mock-")
    assert data["choices"][0]["message"]["content"] == DEFAULT_MOCK_RESPONSE


def test_chat_writes_character_log(client, auth, logs_dir):
    client.post("/v1/chat/completions", json={"messages": NOVA_MESSAGES}, headers=auth)

    log_text = (logs_dir / "request_nova.log").read_text()
    assert log_text.startswith("LOG FILE FOR CHARACTER: Nova")
    assert "{{user}}: hi Nova" in log_text
    assert "Nova: hello {{user}}" in log_text
    assert json.loads((logs_dir / "request_nova_raw.json").read_text()) == NOVA_MESSAGES


def test_chat_header_written_once_per_app(client, auth, logs_dir):
    for _ in range(3):
        client.post("/v1/chat/completions", json={"messages": NOVA_MESSAGES}, headers=auth)

    log_text = (logs_dir / "request_nova.log").read_text()
    assert log_text.count("LOG FILE FOR CHARACTER") == 1
    assert log_text.count("==== Request at ") == 3


def test_chat_accepts_content_parts(client, auth, logs_dir):
    messages = [{"role": "system", "content": [{"type": "text", "text": "<Lumi>Name: Lumi</Lumi>"}]}]
    resp = client.post("/v1/chat/completions", json={"messages": messages}, headers=auth)
    assert resp.status_code == 200
    assert (logs_dir / "request_lumi.log").is_file()


def test_chat_without_messages(client, auth):
    resp = client.post("/v1/chat/completions", json={"model": "x"}, headers=auth)
    assert resp.status_code == 400
    assert resp.json() == {
        "error": {"message": "Messages array is required", "type": "invalid_request_error"},
    }


def test_chat_messages_not_a_list(client, auth):
    resp = client.post("/v1/chat/completions", json={"messages": "hello"}, headers=auth)
    assert resp.status_code == 400
    assert resp.json()["error"]["type"] == "invalid_request_error"


def test_chat_accepts_tool_role(client, auth, logs_dir):
    messages = [*NOVA_MESSAGES, {"role": "tool", "content": "x", "tool_call_id": "1"}]
    resp = client.post("/v1/chat/completions", json={"messages": messages}, headers=auth)

    assert resp.status_code == 200
    assert json.loads((logs_dir / "request_nova_raw.json").read_text()) == messages
    assert "### TOOL" not in (logs_dir / "request_nova.log").read_text()


def test_chat_message_not_an_object(client, auth):
    resp = client.post("/v1/chat/completions", json={"messages": ["hello"]}, headers=auth)
    assert resp.status_code == 400
    assert resp.json()["error"]["message"].startswith("Invalid request")


def test_chat_lone_surrogate_still_completes(client, auth, logs_dir):
    # \ud800 escaped in the JSON text decodes to an unpaired surrogate
    body = (
        '{"messages": ['
        '{"role": "system", "content": "<Nova>Name: Nova</Nova>"},'
        '{"role": "user", "content": [{"type": "text", "text": "Sam: hi \\ud800"}]}'
        "]}"
    )
    resp = client.post(
        "/v1/chat/completions",
        content=body,
        headers={**auth, "Content-Type": "application/json"},
    )

    assert resp.status_code == 200
    assert "{{user}}: hi ?" in (logs_dir / "request_nova.log").read_text(encoding="utf-8")


def test_chat_storage_failure_still_succeeds(client, auth, logs_dir, monkeypatch):
    from tavern_logger.storage import LogStore

    def broken(self, path, data):
        raise OSError("disk full")

    monkeypatch.setattr(LogStore, "write_json", broken)
    resp = client.post("/v1/chat/completions", json={"messages": NOVA_MESSAGES}, headers=auth)
    assert resp.status_code == 200
    assert "disk full" in (logs_dir / "error-log.log").read_text()


# ── Error shapes / middleware ──────────────────────────────


def test_unexpected_error_is_500(client, auth, monkeypatch):
    async def boom(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr("tavern_logger.routes.completions.run_pipeline", boom)
    resp = client.post("/v1/chat/completions", json={"messages": NOVA_MESSAGES}, headers=auth)
    assert resp.status_code == 500
    assert resp.json() == {"error": {"message": "Internal server error", "type": "server_error"}}


def test_unknown_route_uses_error_shape(client):
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert "message" in resp.json()["error"]


def test_cors_header(client):
    resp = client.get("/health", headers={"Origin": "http://example.com"})
    assert resp.headers["access-control-allow-origin"] == "*"
