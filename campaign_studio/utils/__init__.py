"""
Utility helpers for campaign studio
"""

from .ids import monotonic_ms, new_campaign_id, new_stream_token
from .settings import PlaybackSettings, get_playback_settings

__all__ = [
    "monotonic_ms",
    "new_campaign_id",
    "new_stream_token",
    "PlaybackSettings",
    "get_playback_settings",
]
