"""
Tests for status update orchestration and the status store.
"""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from modules.status_updates.models import (
    ActorStatusUpdate,
    AnimateStatusUpdate,
    FileStatusUpdate,
    PipelineStatusUpdate,
    SpeechStatusUpdate,
)
from modules.status_updates.process import (
    apply_actor_status,
    apply_animate_status,
    apply_file_status,
    apply_pipeline_status,
    apply_speech_status,
)
from modules.status_updates.store import StatusStore
from shared.errors import PersistenceError, RefundError
from shared.logging import get_pipeline_id

NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


class FakeStore:
    """Records calls in order; failures are switched on per test."""

    def __init__(self, fail_update=False, fail_refund=False, fail_pipeline=False):
        self.calls = []
        self.fail_update = fail_update
        self.fail_refund = fail_refund
        self.fail_pipeline = fail_pipeline

    async def update_pipeline(self, pipeline_id, data):
        self.calls.append(("update_pipeline", pipeline_id, data))
        if self.fail_update or self.fail_pipeline:
            raise PersistenceError("write failed", pipeline_id=pipeline_id)

    async def update_file(self, file_id, data):
        self.calls.append(("update_file", file_id, data))
        if self.fail_update:
            raise PersistenceError("write failed")

    async def update_actor(self, actor_id, data):
        self.calls.append(("update_actor", actor_id, data))
        if self.fail_update:
            raise PersistenceError("write failed")

    async def refund_credits(self, user_id, amount, description):
        self.calls.append(("refund_credits", user_id, amount, description))
        if self.fail_refund:
            raise RefundError("rpc failed")


def _calls(store, name):
    return [call for call in store.calls if call[0] == name]


@pytest.mark.asyncio
async def test_completed_script_updates_pipeline():
    store = FakeStore()
    update = PipelineStatusUpdate.from_payload(
        {"pipeline_id": "P", "stage": "script", "status": "completed", "script_text": "hi"}
    )

    await apply_pipeline_status(update, store, now=NOW)

    assert len(store.calls) == 1
    _, pipeline_id, data = store.calls[0]
    assert pipeline_id == "P"
    assert data["script_output"]["text"] == "hi"
    assert data["script_complete"] is True
    assert data["status"] == "draft"


@pytest.mark.asyncio
async def test_failed_stage_refunds_then_updates():
    store = FakeStore()
    update = PipelineStatusUpdate.from_payload({
        "pipeline_id": "P",
        "stage": "voice",
        "status": "failed",
        "user_id": "U",
        "credits_cost": 5,
        "error_message": "boom",
    })

    await apply_pipeline_status(update, store, now=NOW)

    assert [call[0] for call in store.calls] == ["refund_credits", "update_pipeline"]
    _, user_id, amount, description = store.calls[0]
    assert user_id == "U"
    assert amount == 5
    assert "voice" in description
    assert "boom" in description

    data = store.calls[1][2]
    assert data == {"status": "draft"}
    assert not any(key.endswith("_complete") or key.endswith("_output") for key in data)


@pytest.mark.asyncio
async def test_failed_without_cost_does_not_refund():
    store = FakeStore()
    update = PipelineStatusUpdate.from_payload(
        {"pipeline_id": "P", "stage": "voice", "status": "failed", "user_id": "U"}
    )

    await apply_pipeline_status(update, store, now=NOW)

    assert _calls(store, "refund_credits") == []
    assert len(_calls(store, "update_pipeline")) == 1


@pytest.mark.asyncio
async def test_refund_failure_is_swallowed():
    store = FakeStore(fail_refund=True)
    update = PipelineStatusUpdate.from_payload({
        "pipeline_id": "P",
        "stage": "script",
        "status": "failed",
        "user_id": "U",
        "credits_cost": 5,
    })

    await apply_pipeline_status(update, store, now=NOW)

    assert len(_calls(store, "update_pipeline")) == 1


@pytest.mark.asyncio
async def test_pipeline_persistence_error_propagates():
    store = FakeStore(fail_update=True)
    update = PipelineStatusUpdate.from_payload(
        {"pipeline_id": "P", "stage": "script", "status": "processing"}
    )

    with pytest.raises(PersistenceError):
        await apply_pipeline_status(update, store, now=NOW)

    assert get_pipeline_id() is None


@pytest.mark.asyncio
async def test_failed_file_updates_then_refunds():
    store = FakeStore()
    update = FileStatusUpdate.from_payload({
        "file_id": "F",
        "status": "failed",
        "user_id": "U",
        "credits_cost": "2.5",
    })

    await apply_file_status(update, store, now=NOW)

    assert [call[0] for call in store.calls] == ["update_file", "refund_credits"]
    _, user_id, amount, description = store.calls[1]
    assert user_id == "U"
    assert amount == Decimal("2.5")
    assert "F" in description


@pytest.mark.asyncio
async def test_file_update_failure_skips_refund():
    store = FakeStore(fail_update=True)
    update = FileStatusUpdate.from_payload(
        {"file_id": "F", "status": "failed", "user_id": "U", "credits_cost": 1}
    )

    with pytest.raises(PersistenceError):
        await apply_file_status(update, store, now=NOW)

    assert _calls(store, "refund_credits") == []


def _mock_db():
    db = MagicMock()
    query = MagicMock()
    query.select.return_value = query
    query.update.return_value = query
    query.eq.return_value = query
    query.limit.return_value = query
    query.execute = AsyncMock(return_value=MagicMock(data=[]))
    db.table.return_value = query
    db.rpc = AsyncMock()
    return db, query


@pytest.mark.asyncio
async def test_store_refund_calls_rpc():
    db, _ = _mock_db()
    store = StatusStore(db)

    await store.refund_credits("U", Decimal("5"), "Pipeline voice generation failed: boom")

    db.rpc.assert_awaited_once_with("refund_credits", {
        "p_user_id": "U",
        "p_amount": 5.0,
        "p_description": "Pipeline voice generation failed: boom",
    })


@pytest.mark.asyncio
async def test_store_refund_wraps_persistence_error():
    db, _ = _mock_db()
    db.rpc.side_effect = PersistenceError("rpc down")
    store = StatusStore(db)

    with pytest.raises(RefundError):
        await store.refund_credits("U", Decimal("5"), "x")


@pytest.mark.asyncio
async def test_store_update_pipeline_tags_error():
    db, query = _mock_db()
    query.execute.side_effect = PersistenceError("write failed")
    store = StatusStore(db)

    with pytest.raises(PersistenceError) as exc_info:
        await store.update_pipeline("P", {"status": "draft"})

    assert exc_info.value.pipeline_id == "P"
    db.table.assert_called_with("pipelines")
    query.eq.assert_called_with("id", "P")


@pytest.mark.asyncio
async def test_store_update_actor():
    db, query = _mock_db()
    store = StatusStore(db)

    await store.update_actor("A", {"progress": 30})

    db.table.assert_called_with("actors")
    query.update.assert_called_with({"progress": 30})
    query.eq.assert_called_with("id", "A")


@pytest.mark.asyncio
async def test_speech_completed_updates_file_and_pipeline():
    store = FakeStore()
    update = SpeechStatusUpdate.from_payload({
        "file_id": "F",
        "pipeline_id": "P",
        "status": "completed",
        "audio_url": "https://cdn/a.mp3",
        "audio_duration": 9,
    })

    await apply_speech_status(update, store, now=NOW)

    assert [call[:2] for call in store.calls] == [("update_file", "F"), ("update_pipeline", "P")]
    file_data = store.calls[0][2]
    assert file_data["generation_status"] == "completed"
    pipeline_data = store.calls[1][2]
    assert pipeline_data["voice_output"]["url"] == "https://cdn/a.mp3"
    assert pipeline_data["voice_complete"] is True
    assert pipeline_data["status"] == "draft"


@pytest.mark.asyncio
async def test_speech_pipeline_failure_does_not_fail_call():
    store = FakeStore(fail_pipeline=True)
    update = SpeechStatusUpdate.from_payload(
        {"file_id": "F", "pipeline_id": "P", "status": "completed", "audio_url": "u"}
    )

    await apply_speech_status(update, store, now=NOW)

    assert [call[0] for call in store.calls] == ["update_file", "update_pipeline"]


@pytest.mark.asyncio
async def test_speech_failed_refunds_after_file_update():
    store = FakeStore()
    update = SpeechStatusUpdate.from_payload({
        "file_id": "F",
        "pipeline_id": "P",
        "status": "failed",
        "user_id": "U",
        "credits_cost": "0.5",
        "error_message": "quota",
    })

    await apply_speech_status(update, store, now=NOW)

    assert [call[0] for call in store.calls] == ["update_file", "refund_credits"]
    assert store.calls[1][3] == "Speech generation failed: quota"


@pytest.mark.asyncio
async def test_speech_file_failure_propagates():
    store = FakeStore(fail_update=True)
    update = SpeechStatusUpdate.from_payload(
        {"file_id": "F", "status": "failed", "user_id": "U", "credits_cost": 1}
    )

    with pytest.raises(PersistenceError):
        await apply_speech_status(update, store, now=NOW)

    assert _calls(store, "refund_credits") == []


@pytest.mark.asyncio
async def test_animate_updates_file_and_matching_pipeline():
    store = FakeStore()
    update = AnimateStatusUpdate.from_payload(
        {"file_id": "F", "status": "completed", "video_url": "https://cdn/v.mp4"}
    )

    await apply_animate_status(update, store, now=NOW)

    assert [call[:2] for call in store.calls] == [("update_file", "F"), ("update_pipeline", "F")]
    assert store.calls[1][2]["final_video_output"]["url"] == "https://cdn/v.mp4"
    assert store.calls[1][2]["status"] == "completed"


@pytest.mark.asyncio
async def test_animate_failed_refunds():
    store = FakeStore()
    update = AnimateStatusUpdate.from_payload(
        {"file_id": "F", "status": "failed", "user_id": "U", "credits_cost": 0.75}
    )

    await apply_animate_status(update, store, now=NOW)

    assert [call[0] for call in store.calls] == ["update_file", "update_pipeline", "refund_credits"]
    assert store.calls[2][3] == "Animation failed: Unknown error"


@pytest.mark.asyncio
async def test_actor_failed_refunds():
    store = FakeStore()
    update = ActorStatusUpdate.from_payload({
        "actor_id": "A",
        "status": "failed",
        "user_id": "U",
        "credits_cost": 0.5,
        "error_message": "sora timeout",
    })

    await apply_actor_status(update, store)

    assert [call[0] for call in store.calls] == ["update_actor", "refund_credits"]
    assert store.calls[1][3] == "Actor creation failed: sora timeout"


@pytest.mark.asyncio
async def test_actor_processing_without_progress_writes_nothing():
    store = FakeStore()
    update = ActorStatusUpdate.from_payload({"actor_id": "A", "status": "processing"})

    await apply_actor_status(update, store)

    assert store.calls == []
    assert get_pipeline_id() is None
