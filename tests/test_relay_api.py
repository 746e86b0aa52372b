"""Relay HTTP API tests"""

import asyncio
import json

import pytest
from fastapi.testclient import TestClient

from src.journal.models import JournalEntry
from src.mindful_journal.config import Config
from src.server.app import create_app
from src.server.dependencies import get_relay
from src.summary_relay import SummaryRelay
from src.summary_relay.providers.base import LLMProvider

SUMMARY = {
    "weekly_summary": "You showed up for yourself this week.",
    "emotional_patterns": ["Calmer after exercise"],
    "weekly_themes": ["health"],
    "limiting_beliefs": [],
    "strengths_and_progress": ["Consistency"],
    "coaching_insights": [],
    "reflection_questions": ["What helped most?"],
    "next_week_focus": ["Sleep earlier"],
}


class StubProvider(LLMProvider):
    name = "stub"

    def __init__(self, reply="", error=None, delay=0.0):
        self.reply = reply
        self.error = error
        self.delay = delay

    async def complete_json(self, system_prompt, user_prompt):
        return await self._answer()

    async def converse(self, message):
        return await self._answer()

    async def _answer(self):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.reply


def create_test_client(provider: LLMProvider, timeout: float = 5.0) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_relay] = lambda: SummaryRelay(provider, timeout=timeout)
    return TestClient(app)


def entries_payload():
    return [
        JournalEntry.new(mood="good", highlights="Yoga", tags=["health"]).to_dict(),
        JournalEntry.new(mood="okay", challenges="Slept badly").to_dict(),
    ]


def test_health():
    client = create_test_client(StubProvider())
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_summary_relays_model_json():
    client = create_test_client(StubProvider(reply=json.dumps(SUMMARY)))

    resp = client.post("/api/summary", json=entries_payload())

    assert resp.status_code == 200
    assert resp.json() == SUMMARY


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"entries": []},
        "just text",
        [{"id": "1", "mood": "good"}],
    ],
)
def test_summary_rejects_invalid_payload(payload):
    client = create_test_client(StubProvider(reply=json.dumps(SUMMARY)))

    resp = client.post("/api/summary", json=payload)

    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid or empty journal data"}


def test_summary_rejects_malformed_body():
    client = create_test_client(StubProvider(reply=json.dumps(SUMMARY)))

    resp = client.post(
        "/api/summary", content="not json", headers={"Content-Type": "application/json"}
    )

    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid or empty journal data"}


def test_summary_non_json_reply_is_500():
    client = create_test_client(StubProvider(reply="Sorry, I can't do that."))

    resp = client.post("/api/summary", json=entries_payload())

    assert resp.status_code == 500
    assert resp.json() == {"error": "Invalid JSON response from AI"}


def test_summary_upstream_failure_is_500():
    client = create_test_client(StubProvider(error=RuntimeError("quota exhausted")))

    resp = client.post("/api/summary", json=entries_payload())

    assert resp.status_code == 500
    assert "error" in resp.json()


def test_summary_timeout_is_504():
    client = create_test_client(StubProvider(reply="{}", delay=1.0), timeout=0.01)

    resp = client.post("/api/summary", json=entries_payload())

    assert resp.status_code == 504
    assert "timed out" in resp.json()["error"]


def test_chat_reply():
    client = create_test_client(StubProvider(reply="Be gentle with yourself."))

    resp = client.post("/api/chat", json={"message": "Rough day"})

    assert resp.status_code == 200
    assert resp.json() == {"reply": "Be gentle with yourself."}


@pytest.mark.parametrize("payload", [{}, {"message": ""}, {"message": "   "}, {"message": 42}])
def test_chat_rejects_invalid_message(payload):
    client = create_test_client(StubProvider(reply="hi"))

    resp = client.post("/api/chat", json=payload)

    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid message format"}


def test_chat_upstream_failure_is_500():
    client = create_test_client(StubProvider(error=RuntimeError("boom")))

    resp = client.post("/api/chat", json={"message": "hello"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to generate response"}


def test_cors_headers_present():
    client = create_test_client(StubProvider())

    resp = client.get("/health", headers={"Origin": "http://localhost:5173"})

    assert resp.headers.get("access-control-allow-origin") in ("*", "http://localhost:5173")


def test_cors_restricted_to_configured_origins():
    config = Config()
    config.server.cors_origins = ["http://localhost:5173"]
    app = create_app(config)
    app.dependency_overrides[get_relay] = lambda: SummaryRelay(StubProvider())
    client = TestClient(app)

    allowed = client.get("/health", headers={"Origin": "http://localhost:5173"})
    denied = client.get("/health", headers={"Origin": "http://evil.example"})

    assert allowed.headers.get("access-control-allow-origin") == "http://localhost:5173"
    assert "access-control-allow-origin" not in denied.headers
