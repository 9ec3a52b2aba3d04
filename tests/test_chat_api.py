"""HTTP tests for the study copilot chat."""

from __future__ import annotations

import json

from fastapi.testclient import TestClient

from syntra.config.settings import OpenAIConfig
from syntra.main import create_app
from syntra.models.session import Session, SessionStatus
from syntra.pipelines.chat import COPILOT_SYSTEM_PROMPT, select_sessions
from syntra.services.llm_client import ChatCompletionClient
from syntra.services.session_store import SessionStore

from conftest import FakeChatClient, FakeTranscriber


def _seeded_store(n: int = 3) -> SessionStore:
    store = SessionStore()
    for i in range(n):
        store.add(
            Session(
                audio_location=f"/tmp/audio-{i}.m4a",
                title=f"Lecture {i}",
                transcript=f"Transcript {i}",
                status=SessionStatus.READY,
                progress=100,
            )
        )
    return store


def _client(test_settings, chat, store=None) -> TestClient:
    app = create_app(
        test_settings,
        transcriber=FakeTranscriber(),
        chat_client=chat,
        store=store,
        configure_logging=False,
    )
    return TestClient(app)


def test_chat_reply_embeds_sessions(test_settings):
    chat = FakeChatClient(reply="Photosynthesis happens in chloroplasts.")
    store = _seeded_store()

    with _client(test_settings, chat, store) as client:
        response = client.post("/api/syntra/chat", json={"message": "  What is photosynthesis? "})

    assert response.status_code == 200
    assert response.json() == {"reply": "Photosynthesis happens in chloroplasts."}
    messages = chat.calls[0]["messages"]
    assert messages[0] == {"role": "system", "content": COPILOT_SYSTEM_PROMPT}
    payload = json.loads(messages[1]["content"])
    assert payload["message"] == "What is photosynthesis?"
    assert {s["title"] for s in payload["sessions"]} == {"Lecture 0", "Lecture 1", "Lecture 2"}
    assert set(payload["sessions"][0]) == {"id", "title", "status", "createdAt", "transcript", "insights"}


def test_chat_filters_by_session_ids(test_settings):
    chat = FakeChatClient(reply="ok")
    store = _seeded_store()
    wanted = store.list()[1].id

    with _client(test_settings, chat, store) as client:
        client.post("/api/syntra/chat", json={"message": "Recap", "sessionIds": [wanted]})

    payload = json.loads(chat.calls[0]["messages"][1]["content"])
    assert [s["id"] for s in payload["sessions"]] == [wanted]


def test_select_sessions_caps_context():
    sessions = _seeded_store(12).list()

    assert len(select_sessions(sessions, None, 10)) == 10
    assert select_sessions(sessions, ["nope"], 10) == []


def test_empty_message_is_rejected(test_settings):
    chat = FakeChatClient()
    with _client(test_settings, chat) as client:
        response = client.post("/api/syntra/chat", json={"message": "   "})

    assert response.status_code == 400
    assert response.json()["detail"] == "Message is required"
    assert chat.calls == []


def test_streaming_reply_uses_server_sent_events(test_settings):
    chat = FakeChatClient(deltas=["Light ", "reactions"])
    with _client(test_settings, chat) as client:
        response = client.post("/api/syntra/chat", json={"message": "Explain", "stream": True})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")
    assert response.text == "data: Light \n\ndata: reactions\n\ndata: [DONE]\n\n"


def test_multiline_delta_keeps_event_framing(test_settings):
    chat = FakeChatClient(deltas=["Step one\nStep two", "\n"])
    with _client(test_settings, chat) as client:
        response = client.post("/api/syntra/chat", json={"message": "Steps?", "stream": True})

    assert response.text == (
        "data: Step one\ndata: Step two\n\n"
        "data: \ndata: \n\n"
        "data: [DONE]\n\n"
    )


def test_missing_api_key_is_reported(test_settings):
    chat = ChatCompletionClient(OpenAIConfig(api_key=None))
    with _client(test_settings, chat) as client:
        plain = client.post("/api/syntra/chat", json={"message": "Hi"})
        streamed = client.post("/api/syntra/chat", json={"message": "Hi", "stream": True})

    assert plain.status_code == 500
    assert plain.json()["detail"] == "Missing OPENAI_API_KEY"
    assert streamed.status_code == 500
