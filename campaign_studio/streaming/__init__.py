"""
Resumable playback of compiled campaigns
"""

from .cancellation import CancellationToken
from .checkpoint_store import CheckpointStore, InMemoryCheckpointStore, JsonFileCheckpointStore
from .conversation_store import ConversationStore, latest_snapshots
from .controller import (
    NoCheckpointError,
    PlaybackController,
    PlaybackError,
    PlaybackInProgressError,
    PlaybackResult,
    PlaybackState,
)

__all__ = [
    "CancellationToken",
    "CheckpointStore",
    "InMemoryCheckpointStore",
    "JsonFileCheckpointStore",
    "ConversationStore",
    "latest_snapshots",
    "NoCheckpointError",
    "PlaybackController",
    "PlaybackError",
    "PlaybackInProgressError",
    "PlaybackResult",
    "PlaybackState",
]
