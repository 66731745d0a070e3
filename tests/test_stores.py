from __future__ import annotations

import json
from pathlib import Path

from campaign_studio.assembler import compile_prompt
from campaign_studio.models import ChatMessage, Checkpoint
from campaign_studio.streaming import ConversationStore, InMemoryCheckpointStore, JsonFileCheckpointStore, latest_snapshots


def _checkpoint() -> Checkpoint:
    return Checkpoint(
        byte_index_in_json=3,
        partial_json_text='{\n ',
        stream_token="stream-1700000000000",
        payload=compile_prompt("Flash sale 20% off, email"),
        original_input="Flash sale 20% off, email",
    )


def _message(message_id: str, content: str, role: str = "system") -> ChatMessage:
    return ChatMessage(id=message_id, role=role, content=content, timestamp="2025-09-30T10:00:00+00:00")


def test_file_store_round_trip(tmp_path: Path) -> None:
    store = JsonFileCheckpointStore(tmp_path)
    checkpoint = _checkpoint()

    store.set("chat_1", checkpoint)
    assert store.get("chat_1") == checkpoint
    record = json.loads((tmp_path / "chat_1.json").read_text(encoding="utf-8"))
    assert record["byteIndexInJson"] == 3
    assert record["streamToken"] == "stream-1700000000000"

    store.delete("chat_1")
    assert store.get("chat_1") is None
    store.delete("chat_1")


def test_file_store_overwrites_previous_checkpoint(tmp_path: Path) -> None:
    store = JsonFileCheckpointStore(tmp_path)
    store.set("chat_1", _checkpoint())
    store.set("chat_1", _checkpoint().model_copy(update={"byte_index_in_json": 9}))

    assert store.get("chat_1").byte_index_in_json == 9
    assert [p.name for p in tmp_path.iterdir()] == ["chat_1.json"]


def test_corrupt_checkpoint_is_discarded(tmp_path: Path) -> None:
    store = JsonFileCheckpointStore(tmp_path)
    (tmp_path / "chat_1.json").write_text('{"byteIndexInJson": "not a number"', encoding="utf-8")
    (tmp_path / "chat_2.json").write_bytes(b"\xff\xfe\x00garbage")

    assert store.get("chat_1") is None
    assert store.get("chat_2") is None
    assert not (tmp_path / "chat_1.json").exists()
    assert not (tmp_path / "chat_2.json").exists()


def test_unsafe_conversation_ids_stay_in_directory(tmp_path: Path) -> None:
    store = JsonFileCheckpointStore(tmp_path / "checkpoints")
    store.set("../escape/me", _checkpoint())

    assert store.get("../escape/me") is not None
    assert [p.parent for p in (tmp_path / "checkpoints").iterdir()] == [tmp_path / "checkpoints"]


def test_memory_store_discards_foreign_records() -> None:
    store = InMemoryCheckpointStore()
    store.put_raw("chat_1", '{"unexpected": true}')

    assert store.get("chat_1") is None
    assert "chat_1" not in store


def test_latest_snapshots_keeps_last_per_stream_token() -> None:
    messages = [
        _message("user-1", "hi", role="user"),
        _message("stream-100-0", "{"),
        _message("stream-100-5", '{\n  "c'),
        _message("explanation-200-0", "📊"),
        _message("explanation-200-10", "📊 **Campaign"),
    ]

    visible = latest_snapshots(messages)

    assert [m.id for m in visible] == ["user-1", "stream-100-5", "explanation-200-10"]


def test_first_user_message_names_conversation() -> None:
    store = ConversationStore()
    conversation_id = store.create_conversation()
    assert store.title(conversation_id) == "New Chat"

    store.append(_message("stream-1-0", "{"), conversation_id)
    assert store.title(conversation_id) == "New Chat"

    text = "Flash sale 20% off for repeat customers across every channel we have"
    store.append(_message("user-1", text, role="user"), conversation_id)
    store.append(_message("user-2", "second", role="user"), conversation_id)

    assert store.title(conversation_id) == text[:50] + "..."
    assert len(store.messages(conversation_id)) == 3


def test_conversation_ids_are_distinct() -> None:
    store = ConversationStore()
    first = store.create_conversation()
    second = store.create_conversation()

    assert first != second
    store.delete_conversation(first)
    assert store.conversation_ids() == [second]
