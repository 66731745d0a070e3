"""
Cooperative cancellation token for playback operations
"""


class CancellationToken:
    """
    Stop signal observed by the playback loop at each step boundary.

    `stop()` pauses the playback and keeps a checkpoint so it can be resumed.
    `abort()` is the global stop: the playback is cancelled and nothing is kept.
    """

    def __init__(self):
        self._stopped = False
        self._aborted = False

    @property
    def stop_requested(self) -> bool:
        return self._stopped or self._aborted

    @property
    def aborted(self) -> bool:
        return self._aborted

    def stop(self):
        self._stopped = True

    def abort(self):
        self._aborted = True

    def __repr__(self) -> str:
        return f"CancellationToken(stopped={self._stopped}, aborted={self._aborted})"
