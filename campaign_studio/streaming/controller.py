"""
Playback controller: reveals a compiled campaign character by character

The payload JSON is revealed first, then the explanation. A stop request is
observed at the top of each character step; the controller then writes a
checkpoint so the same reveal can continue later, in this process or after a
restart, appending to the text already shown.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Dict, Optional

from ..assembler import serialize_payload
from ..explainer import explain
from ..models import CampaignPayload, ChatMessage, Checkpoint
from ..utils.ids import new_stream_token
from ..utils.settings import PlaybackSettings
from .cancellation import CancellationToken
from .checkpoint_store import CheckpointStore
from .conversation_store import ConversationStore, utc_timestamp


PublishFn = Callable[[ChatMessage], Awaitable[None]]


class PlaybackState(str, Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    PAUSED = "paused"
    COMPLETED = "completed"


class PlaybackError(Exception):
    pass


class PlaybackInProgressError(PlaybackError):
    """A playback is already streaming for this conversation"""


class NoCheckpointError(PlaybackError):
    """Resume was requested but there is nothing to resume"""


@dataclass
class PlaybackResult:
    state: PlaybackState
    json_text: str
    explanation_text: str
    checkpoint: Optional[Checkpoint] = None


@dataclass(frozen=True)
class _Artifact:
    token: str
    delay: float
    publish_every: int


class PlaybackController:
    """
    Runs at most one reveal per conversation and owns its checkpoint.

    Args:
        checkpoint_store: Where paused playbacks are persisted
        conversation_store: Receives every published snapshot
        json_delay: Seconds per payload character
        text_delay: Seconds per explanation character
        json_publish_every: Publish a payload snapshot every N characters
        text_publish_every: Publish an explanation snapshot every N characters
        sleep: Awaitable delay function
    """

    def __init__(
        self,
        checkpoint_store: CheckpointStore,
        conversation_store: ConversationStore,
        json_delay: float = 0.02,
        text_delay: float = 0.015,
        json_publish_every: int = 5,
        text_publish_every: int = 10,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.checkpoint_store = checkpoint_store
        self.conversation_store = conversation_store
        self.json_delay = json_delay
        self.text_delay = text_delay
        self.json_publish_every = json_publish_every
        self.text_publish_every = text_publish_every
        self._sleep = sleep
        self._states: Dict[str, PlaybackState] = {}
        self._tokens: Dict[str, CancellationToken] = {}

    @classmethod
    def from_settings(
        cls,
        settings: PlaybackSettings,
        checkpoint_store: CheckpointStore,
        conversation_store: ConversationStore,
    ) -> "PlaybackController":
        return cls(
            checkpoint_store,
            conversation_store,
            json_delay=settings.json_char_delay_ms / 1000,
            text_delay=settings.text_char_delay_ms / 1000,
            json_publish_every=settings.json_publish_every,
            text_publish_every=settings.text_publish_every,
        )

    def state(self, conversation_id: str) -> PlaybackState:
        return self._states.get(conversation_id, PlaybackState.IDLE)

    def select_conversation(self, conversation_id: str) -> Optional[Checkpoint]:
        """
        Load the checkpoint of a conversation being switched to.

        An unreadable or inconsistent checkpoint is discarded and the
        conversation is treated as idle.
        """
        if self.state(conversation_id) == PlaybackState.STREAMING:
            return None
        checkpoint = self._load_checkpoint(conversation_id)
        self._states[conversation_id] = PlaybackState.PAUSED if checkpoint else PlaybackState.IDLE
        return checkpoint

    def stop(self, conversation_id: str) -> bool:
        """Pause the active playback of a conversation; returns False if none is running"""
        token = self._tokens.get(conversation_id)
        if token is None:
            return False
        token.stop()
        return True

    def stop_all(self):
        """Global stop: cancel every active playback without keeping checkpoints"""
        for conversation_id, token in list(self._tokens.items()):
            print(f"[Playback] Global stop for {conversation_id}")
            token.abort()

    def discard(self, conversation_id: str):
        """Drop the paused (or streaming) playback of a conversation so it is idle again"""
        token = self._tokens.get(conversation_id)
        if token is not None:
            token.abort()
        self.checkpoint_store.delete(conversation_id)
        self._states[conversation_id] = PlaybackState.IDLE

    async def play(
        self,
        conversation_id: str,
        payload: CampaignPayload,
        original_input: str,
        token: Optional[CancellationToken] = None,
        publish: Optional[PublishFn] = None,
        explanation: Optional[str] = None,
    ) -> PlaybackResult:
        """
        Reveal a freshly compiled payload and then its explanation.

        Args:
            conversation_id: Conversation receiving the snapshots
            payload: Compiled campaign payload
            original_input: The text the payload was compiled from
            token: Cancellation token; a new one is created if omitted
            publish: Optional async callback invoked with every snapshot
            explanation: Narrative already generated for this payload; generated here if omitted

        Returns:
            PlaybackResult in state COMPLETED, PAUSED (with checkpoint) or IDLE (global stop)
        """
        checkpoint = Checkpoint(
            stream_token=new_stream_token("stream"),
            payload=payload,
            original_input=original_input,
        )
        return await self._run(conversation_id, checkpoint, token, publish, explanation)

    async def resume(
        self,
        conversation_id: str,
        token: Optional[CancellationToken] = None,
        publish: Optional[PublishFn] = None,
    ) -> PlaybackResult:
        """Continue a paused playback from its checkpoint"""
        self._ensure_not_streaming(conversation_id)
        checkpoint = self._load_checkpoint(conversation_id)
        if checkpoint is None:
            self._states[conversation_id] = PlaybackState.IDLE
            raise NoCheckpointError(f"No paused playback for conversation {conversation_id}")
        print(f"[Playback] Resuming {conversation_id} at json={checkpoint.byte_index_in_json} "
              f"explanation={checkpoint.byte_index_in_explanation}")
        return await self._run(conversation_id, checkpoint, token, publish)

    def _load_checkpoint(self, conversation_id: str) -> Optional[Checkpoint]:
        """
        Read a checkpoint and check it against the texts it continues.

        A record whose offsets or partial texts do not line up with the
        payload JSON and its explanation is discarded like an unreadable one.
        """
        checkpoint = self.checkpoint_store.get(conversation_id)
        if checkpoint is None:
            return None

        json_text = serialize_payload(checkpoint.payload)
        consistent = (
            checkpoint.byte_index_in_json <= len(json_text)
            and json_text.startswith(checkpoint.partial_json_text)
        )
        if consistent and checkpoint.byte_index_in_json < len(json_text):
            # Paused in the JSON: the explanation has not started
            consistent = not (checkpoint.partial_explanation_text or checkpoint.explanation_token)
        elif consistent:
            explanation = explain(checkpoint.payload, checkpoint.original_input)
            consistent = (
                checkpoint.byte_index_in_explanation <= len(explanation)
                and explanation.startswith(checkpoint.partial_explanation_text)
            )

        if not consistent:
            print(f"✗ Discarding inconsistent checkpoint for {conversation_id}")
            self.checkpoint_store.delete(conversation_id)
            return None
        return checkpoint

    def _ensure_not_streaming(self, conversation_id: str):
        if self.state(conversation_id) == PlaybackState.STREAMING:
            raise PlaybackInProgressError(f"Playback already streaming for conversation {conversation_id}")

    async def _run(
        self,
        conversation_id: str,
        checkpoint: Checkpoint,
        token: Optional[CancellationToken],
        publish: Optional[PublishFn],
        explanation: Optional[str] = None,
    ) -> PlaybackResult:
        self._ensure_not_streaming(conversation_id)
        token = token or CancellationToken()
        self._tokens[conversation_id] = token
        self._states[conversation_id] = PlaybackState.STREAMING

        try:
            json_text = serialize_payload(checkpoint.payload)
            json_artifact = _Artifact(checkpoint.stream_token, self.json_delay, self.json_publish_every)
            json_index, shown_json = await self._reveal(
                conversation_id, json_text, checkpoint.byte_index_in_json,
                checkpoint.partial_json_text, json_artifact, token, publish,
            )
            if json_index < len(json_text):
                paused = checkpoint.model_copy(update={
                    "byte_index_in_json": json_index,
                    "partial_json_text": shown_json,
                    "byte_index_in_explanation": 0,
                    "partial_explanation_text": "",
                    "explanation_token": "",
                })
                return self._interrupt(conversation_id, token, paused, shown_json, "")

            if explanation is None:
                explanation = explain(checkpoint.payload, checkpoint.original_input)
            explanation_token = checkpoint.explanation_token or new_stream_token("explanation")
            text_artifact = _Artifact(explanation_token, self.text_delay, self.text_publish_every)
            text_index, shown_text = await self._reveal(
                conversation_id, explanation, checkpoint.byte_index_in_explanation,
                checkpoint.partial_explanation_text, text_artifact, token, publish,
            )
            if text_index < len(explanation):
                paused = checkpoint.model_copy(update={
                    "byte_index_in_json": len(json_text),
                    "partial_json_text": shown_json,
                    "byte_index_in_explanation": text_index,
                    "partial_explanation_text": shown_text,
                    "explanation_token": explanation_token,
                })
                return self._interrupt(conversation_id, token, paused, shown_json, shown_text)

            self.checkpoint_store.delete(conversation_id)
            self._states[conversation_id] = PlaybackState.COMPLETED
            print(f"[Playback] ✓ Completed {conversation_id}")
            return PlaybackResult(PlaybackState.COMPLETED, shown_json, shown_text)
        finally:
            self._tokens.pop(conversation_id, None)
            if self._states.get(conversation_id) == PlaybackState.STREAMING:
                self._states[conversation_id] = PlaybackState.IDLE

    async def _reveal(
        self,
        conversation_id: str,
        text: str,
        start: int,
        shown: str,
        artifact: _Artifact,
        token: CancellationToken,
        publish: Optional[PublishFn],
    ) -> tuple[int, str]:
        """
        Reveal text[start:] one character per step, appending to what was already shown.

        Returns the index reached (len(text) when complete) and the text shown so far.
        """
        last = len(text) - 1
        for index in range(start, len(text)):
            if token.stop_requested:
                return index, shown
            shown += text[index]
            await self._sleep(artifact.delay)

            if index % artifact.publish_every == 0 or index == last:
                message = ChatMessage(
                    id=f"{artifact.token}-{index}",
                    role="system",
                    content=shown,
                    timestamp=utc_timestamp(),
                    streaming=not (index == last or token.stop_requested),
                )
                self.conversation_store.append(message, conversation_id)
                if publish is not None:
                    await publish(message)
        return len(text), shown

    def _interrupt(
        self,
        conversation_id: str,
        token: CancellationToken,
        checkpoint: Checkpoint,
        shown_json: str,
        shown_text: str,
    ) -> PlaybackResult:
        if token.aborted:
            # Global stop: the pause is not kept
            self.checkpoint_store.delete(conversation_id)
            self._states[conversation_id] = PlaybackState.IDLE
            return PlaybackResult(PlaybackState.IDLE, shown_json, shown_text)

        self.checkpoint_store.set(conversation_id, checkpoint)
        self._states[conversation_id] = PlaybackState.PAUSED
        print(f"[Playback] Paused {conversation_id} at json={checkpoint.byte_index_in_json} "
              f"explanation={checkpoint.byte_index_in_explanation}")
        return PlaybackResult(PlaybackState.PAUSED, shown_json, shown_text, checkpoint)
