"""Session state machine, short-transcript guard and reprocessing."""

from __future__ import annotations

import asyncio
import copy
from pathlib import Path

import pytest

from syntra.models.session import Session, SessionStatus
from syntra.pipelines.session import (
    FALLBACK_ACTION_ITEMS,
    FALLBACK_SUMMARY,
    InsightsGenerator,
    SessionPipeline,
)
from syntra.services.errors import ProviderError
from syntra.services.session_registry import SessionRegistry
from syntra.services.session_store import SessionStore
from syntra.services.storage import LocalUploadStorage

from conftest import LECTURE_TRANSCRIPT, VALID_INSIGHTS, FakeChatClient, FakeTranscriber, fenced


def _build(tmp_path: Path, transcriber: FakeTranscriber, chat: FakeChatClient):
    store = SessionStore()
    pipeline = SessionPipeline(
        store,
        LocalUploadStorage(tmp_path),
        transcriber,
        InsightsGenerator(chat),
    )
    return store, pipeline, SessionRegistry(store, pipeline)


def _run_create(registry: SessionRegistry, audio_file: Path) -> Session:
    async def scenario() -> Session:
        session = registry.create(str(audio_file), audio_filename=audio_file.name)
        assert session.status is SessionStatus.PROCESSING
        await registry.drain()
        return session

    return asyncio.run(scenario())


def test_lecture_transcript_reaches_ready(tmp_path, audio_file):
    transcriber = FakeTranscriber(LECTURE_TRANSCRIPT)
    chat = FakeChatClient()
    store, _, registry = _build(tmp_path, transcriber, chat)
    created: list[Session] = []
    observed = []

    def snapshot():
        observed.append((created[0].status, created[0].progress))

    transcriber.on_call = snapshot
    chat.on_call = snapshot

    async def scenario():
        created.append(registry.create(str(audio_file), audio_filename=audio_file.name))
        await registry.drain()

    asyncio.run(scenario())
    session = created[0]

    assert observed == [
        (SessionStatus.PROCESSING, 10),
        (SessionStatus.TRANSCRIBED, 60),
    ]
    assert session.status is SessionStatus.READY
    assert session.progress == 100
    assert session.transcript == LECTURE_TRANSCRIPT
    assert session.insights.key_concepts
    assert session.insights.action_items
    assert session.processed_at is not None
    assert session.error is None
    assert transcriber.payloads == [b"fake-audio-bytes"]
    assert len(chat.calls) == 1
    assert store.get(session.id) is session


@pytest.mark.parametrize("transcript", ["um", "", "   ", "x" * 19, "  short but padded  "])
def test_short_transcript_uses_fallback_without_model_call(tmp_path, audio_file, transcript):
    chat = FakeChatClient()
    _, _, registry = _build(tmp_path, FakeTranscriber(transcript), chat)

    session = _run_create(registry, audio_file)

    assert chat.calls == []
    assert session.status is SessionStatus.READY
    assert session.progress == 100
    assert session.insights.summary == FALLBACK_SUMMARY
    assert session.insights.key_concepts == []
    assert session.insights.flashcards == []
    assert session.insights.action_items == list(FALLBACK_ACTION_ITEMS)
    assert session.processed_at is not None


def test_twenty_character_transcript_invokes_generation(tmp_path, audio_file):
    chat = FakeChatClient()
    _, _, registry = _build(tmp_path, FakeTranscriber("y" * 20), chat)

    session = _run_create(registry, audio_file)

    assert len(chat.calls) == 1
    assert session.status is SessionStatus.READY


def test_transcription_failure_marks_session_failed(tmp_path, audio_file):
    error = ProviderError("Transcription failed: network unreachable")
    chat = FakeChatClient()
    _, _, registry = _build(tmp_path, FakeTranscriber(error=error), chat)

    session = _run_create(registry, audio_file)

    assert session.status is SessionStatus.FAILED
    assert session.progress == 0
    assert "network unreachable" in session.error
    assert session.insights is None
    assert session.processed_at is None
    assert chat.calls == []


def test_fenced_schema_violation_fails_with_schema_error(tmp_path, audio_file):
    payload = copy.deepcopy(VALID_INSIGHTS)
    payload["keyConcepts"] = [f"Concept {i}" for i in range(7)]
    _, _, registry = _build(tmp_path, FakeTranscriber(), FakeChatClient(reply=fenced(payload)))

    session = _run_create(registry, audio_file)

    assert session.status is SessionStatus.FAILED
    assert session.progress == 0
    assert "schema validation" in session.error
    assert "invalid JSON" not in session.error
    assert session.error_details[0]["path"] == "keyConcepts"
    assert session.insights is None
    assert session.transcript == LECTURE_TRANSCRIPT


def test_unparseable_reply_fails_with_parse_error(tmp_path, audio_file):
    _, _, registry = _build(tmp_path, FakeTranscriber(), FakeChatClient(reply="not json at all"))

    session = _run_create(registry, audio_file)

    assert session.status is SessionStatus.FAILED
    assert "invalid JSON" in session.error
    assert session.error_details is None


def test_missing_audio_fails_the_run(tmp_path):
    transcriber = FakeTranscriber()
    _, _, registry = _build(tmp_path, transcriber, FakeChatClient())

    session = _run_create(registry, tmp_path / "gone.m4a")

    assert session.status is SessionStatus.FAILED
    assert "Audio file not found" in session.error
    assert transcriber.calls == 0


def test_pipeline_propagates_failures_to_its_caller(tmp_path, audio_file):
    store, pipeline, _ = _build(
        tmp_path,
        FakeTranscriber(error=ProviderError("Transcription failed: quota")),
        FakeChatClient(),
    )
    session = store.add(Session(audio_location=str(audio_file)))

    with pytest.raises(ProviderError):
        asyncio.run(pipeline.process(session.id, session.attempt))
    assert session.status is SessionStatus.PROCESSING
    assert session.progress == 10


def test_reprocess_resets_and_reruns_on_same_audio(tmp_path, audio_file):
    transcriber = FakeTranscriber("um")
    chat = FakeChatClient()
    store, _, registry = _build(tmp_path, transcriber, chat)
    session = _run_create(registry, audio_file)
    assert session.insights.summary == FALLBACK_SUMMARY

    transcriber.transcript = LECTURE_TRANSCRIPT

    async def scenario():
        again = registry.reprocess(session.id)
        assert again is session
        assert (again.status, again.progress, again.transcript, again.insights) == (
            SessionStatus.PROCESSING,
            0,
            "",
            None,
        )
        assert again.processed_at is None
        await registry.drain()

    asyncio.run(scenario())

    assert session.attempt == 2
    assert session.status is SessionStatus.READY
    assert session.insights.summary == VALID_INSIGHTS["summary"]
    assert transcriber.payloads == [b"fake-audio-bytes", b"fake-audio-bytes"]
    assert store.count() == 1


@pytest.mark.parametrize("stale_outcome", ["error", "transcript"])
def test_superseded_run_never_overwrites_newer_attempt(tmp_path, audio_file, stale_outcome):
    transcriber = FakeTranscriber(LECTURE_TRANSCRIPT)
    chat = FakeChatClient()
    _, _, registry = _build(tmp_path, transcriber, chat)
    gate: dict[str, asyncio.Event] = {}

    async def block_first_call():
        if transcriber.calls == 1:
            await gate["first"].wait()

    transcriber.on_call = block_first_call

    async def scenario() -> Session:
        gate["first"] = asyncio.Event()
        session = registry.create(str(audio_file))
        await asyncio.sleep(0)
        assert transcriber.calls == 1

        registry.reprocess(session.id)
        for _ in range(50):
            if session.status is SessionStatus.READY:
                break
            await asyncio.sleep(0)
        assert session.status is SessionStatus.READY

        if stale_outcome == "error":
            transcriber.error = ProviderError("Transcription failed: stale run")
        else:
            transcriber.transcript = "A different transcript from the superseded run"
        gate["first"].set()
        await registry.drain()
        return session

    session = asyncio.run(scenario())

    assert session.attempt == 2
    assert session.status is SessionStatus.READY
    assert session.error is None
    assert session.progress == 100
    assert session.transcript == LECTURE_TRANSCRIPT
    assert len(chat.calls) == 1


def test_pipeline_stages_are_ordered():
    stages = SessionPipeline.describe()

    assert [stage.order for stage in stages] == [1, 2, 3, 4]
    assert stages[0].module == "syntra.services.transcribe"
    assert stages[-1].name == "Completion"
