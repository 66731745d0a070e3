from __future__ import annotations

import asyncio

import pytest

from campaign_studio.streaming import ConversationStore, InMemoryCheckpointStore, PlaybackController
from campaign_studio.workflows import CampaignExecutor


class RecordingManager:
    """Stands in for ConnectionManager and keeps every message sent"""

    def __init__(self):
        self.sent: list[dict] = []

    async def send_message(self, client_id: str, message: dict):
        self.sent.append(message)

    def get_facets(self, client_id: str):
        return {"data_sources": [], "channels": ["Email"]}


def _executor(store: InMemoryCheckpointStore) -> CampaignExecutor:
    controller = PlaybackController(store, ConversationStore(), json_delay=0, text_delay=0)
    return CampaignExecutor(controller=controller)


def test_stop_before_playback_starts_still_pauses() -> None:
    store = InMemoryCheckpointStore()
    executor = _executor(store)
    manager = RecordingManager()

    token = executor.track_token("client-1")
    assert executor.stop("client-1") is True
    asyncio.run(executor.process_campaign("client-1", "Flash sale 20% off", manager, token))

    paused = manager.sent[-1]
    assert paused["type"] == "playback_state"
    assert paused["state"] == "paused"
    assert paused["conversation_id"] in store
    assert store.get(paused["conversation_id"]).byte_index_in_json == 0
    assert "client-1" not in executor.client_tokens


def test_stop_all_reaches_requests_still_compiling() -> None:
    store = InMemoryCheckpointStore()
    executor = _executor(store)
    manager = RecordingManager()

    token = executor.track_token("client-1")
    executor.stop_all()
    asyncio.run(executor.process_campaign("client-1", "Flash sale 20% off", manager, token))

    assert manager.sent[-1]["type"] == "system"
    assert manager.sent[-1]["message"] == "Playback stopped."
    assert executor.client_conversations["client-1"] not in store


def test_unexpected_resume_failure_is_reported(monkeypatch: pytest.MonkeyPatch) -> None:
    executor = _executor(InMemoryCheckpointStore())
    manager = RecordingManager()

    async def broken_resume(*args, **kwargs):
        raise RuntimeError("disk unavailable")

    monkeypatch.setattr(executor.controller, "resume", broken_resume)
    asyncio.run(executor.resume_campaign("client-1", manager))

    assert manager.sent[-1]["type"] == "error"
    assert "disk unavailable" in manager.sent[-1]["message"]
    assert manager.sent[-1]["disable_input"] is False
    assert executor.client_tokens == {}
