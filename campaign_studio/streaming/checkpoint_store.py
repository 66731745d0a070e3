"""
Checkpoint stores for resumable playback

A store keeps at most one checkpoint per conversation. Records are written
whole and read whole; a record that cannot be parsed is treated as absent
and removed.
"""

import os
import re
from pathlib import Path
from typing import Dict, Optional
from pydantic import ValidationError

from ..models import Checkpoint


class CheckpointStore:
    """Interface for checkpoint persistence keyed by conversation id"""

    def get(self, conversation_id: str) -> Optional[Checkpoint]:
        raise NotImplementedError

    def set(self, conversation_id: str, checkpoint: Checkpoint):
        raise NotImplementedError

    def delete(self, conversation_id: str):
        raise NotImplementedError

    def _decode(self, conversation_id: str, raw: str) -> Optional[Checkpoint]:
        try:
            return Checkpoint.model_validate_json(raw)
        except ValidationError as e:
            print(f"✗ Discarding unreadable checkpoint for {conversation_id}: {e.error_count()} error(s)")
            self.delete(conversation_id)
            return None


class InMemoryCheckpointStore(CheckpointStore):
    """Process-local store; records are kept serialized like the file store"""

    def __init__(self):
        self._records: Dict[str, str] = {}

    def get(self, conversation_id: str) -> Optional[Checkpoint]:
        raw = self._records.get(conversation_id)
        if raw is None:
            return None
        return self._decode(conversation_id, raw)

    def set(self, conversation_id: str, checkpoint: Checkpoint):
        self._records[conversation_id] = checkpoint.model_dump_json(by_alias=True, exclude_none=True)

    def delete(self, conversation_id: str):
        self._records.pop(conversation_id, None)

    def put_raw(self, conversation_id: str, raw: str):
        """Store an arbitrary record as-is (used to simulate foreign or damaged data)"""
        self._records[conversation_id] = raw

    def __contains__(self, conversation_id: str) -> bool:
        return conversation_id in self._records


class JsonFileCheckpointStore(CheckpointStore):
    """
    Durable store: one JSON file per conversation under a directory.

    Writes go to a temporary file which then replaces the record, so a
    reader never sees a half-written checkpoint.
    """

    def __init__(self, directory):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, conversation_id: str) -> Path:
        safe_id = re.sub(r"[^A-Za-z0-9_.-]", "_", conversation_id)
        return self.directory / f"{safe_id}.json"

    def get(self, conversation_id: str) -> Optional[Checkpoint]:
        path = self._path(conversation_id)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError:
            print(f"✗ Discarding undecodable checkpoint for {conversation_id}")
            self.delete(conversation_id)
            return None
        return self._decode(conversation_id, raw)

    def set(self, conversation_id: str, checkpoint: Checkpoint):
        path = self._path(conversation_id)
        tmp_path = path.with_name(path.name + ".tmp")
        tmp_path.write_text(checkpoint.model_dump_json(by_alias=True, exclude_none=True), encoding="utf-8")
        os.replace(tmp_path, path)

    def delete(self, conversation_id: str):
        self._path(conversation_id).unlink(missing_ok=True)
