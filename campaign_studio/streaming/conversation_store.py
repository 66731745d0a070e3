"""
Append-only conversation log

Playback publishes successive snapshots of the same reveal as separate
messages that share a stream token. The log keeps every snapshot; readers
collapse them with `latest_snapshots`.
"""

import time
from datetime import datetime, timezone
from typing import Dict, List, Optional

from ..models import ChatMessage


NEW_CONVERSATION_TITLE = "New Chat"
STREAM_TOKEN_PREFIXES = ("stream-", "explanation-")


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def stream_token_of(message_id: str) -> Optional[str]:
    """Return the stream token of a snapshot id like 'stream-1700000000000-35', or None"""
    if not message_id.startswith(STREAM_TOKEN_PREFIXES):
        return None
    return "-".join(message_id.split("-")[:2])


def latest_snapshots(messages: List[ChatMessage]) -> List[ChatMessage]:
    """
    Collapse streaming snapshots so that only the most recent one per stream
    token remains; other messages are kept in order.
    """
    last_index: Dict[str, int] = {}
    for index, message in enumerate(messages):
        token = stream_token_of(message.id)
        if token is not None:
            last_index[token] = index

    return [
        message
        for index, message in enumerate(messages)
        if (token := stream_token_of(message.id)) is None or last_index[token] == index
    ]


class ConversationStore:
    """In-process conversation log keyed by conversation id"""

    def __init__(self):
        self._messages: Dict[str, List[ChatMessage]] = {}
        self._titles: Dict[str, str] = {}

    def create_conversation(self) -> str:
        conversation_id = f"chat_{time.time_ns() // 1_000_000}"
        while conversation_id in self._messages:
            conversation_id += "_"
        self._messages[conversation_id] = []
        self._titles[conversation_id] = NEW_CONVERSATION_TITLE
        return conversation_id

    def append(self, message: ChatMessage, conversation_id: str):
        """
        Append a message to a conversation, creating it on first use.

        The first user message names a conversation that is still untitled.
        """
        self._messages.setdefault(conversation_id, []).append(message)
        title = self._titles.setdefault(conversation_id, NEW_CONVERSATION_TITLE)
        if title == NEW_CONVERSATION_TITLE and message.role == "user":
            self._titles[conversation_id] = message.content[:50] + "..."

    def messages(self, conversation_id: str) -> List[ChatMessage]:
        return list(self._messages.get(conversation_id, []))

    def visible_messages(self, conversation_id: str) -> List[ChatMessage]:
        return latest_snapshots(self.messages(conversation_id))

    def title(self, conversation_id: str) -> str:
        return self._titles.get(conversation_id, NEW_CONVERSATION_TITLE)

    def conversation_ids(self) -> List[str]:
        return list(self._messages)

    def delete_conversation(self, conversation_id: str):
        self._messages.pop(conversation_id, None)
        self._titles.pop(conversation_id, None)
