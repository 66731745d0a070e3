"""
Utility functions for runtime configuration
"""

import os
from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


class PlaybackSettings(BaseModel):
    """Playback pacing and persistence settings"""
    checkpoint_dir: str = ".checkpoints"
    json_char_delay_ms: int = 20
    text_char_delay_ms: int = 15
    json_publish_every: int = 5
    text_publish_every: int = 10
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]


def _int_env(name: str, default: int, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def get_playback_settings() -> PlaybackSettings:
    """
    Read playback settings from the environment.
    
    Returns:
        PlaybackSettings instance
    
    Environment Variables:
        CHECKPOINT_DIR: Directory for paused playback checkpoints (default: ".checkpoints")
        JSON_CHAR_DELAY_MS: Delay per payload character in ms (default: 20)
        TEXT_CHAR_DELAY_MS: Delay per explanation character in ms (default: 15)
        JSON_PUBLISH_EVERY: Publish a payload snapshot every N characters (default: 5)
        TEXT_PUBLISH_EVERY: Publish an explanation snapshot every N characters (default: 10)
        CORS_ORIGINS: Comma-separated origins allowed by the API server
    """
    defaults = PlaybackSettings()
    origins = os.getenv("CORS_ORIGINS")
    
    return PlaybackSettings(
        checkpoint_dir=os.getenv("CHECKPOINT_DIR", defaults.checkpoint_dir),
        json_char_delay_ms=_int_env("JSON_CHAR_DELAY_MS", defaults.json_char_delay_ms),
        text_char_delay_ms=_int_env("TEXT_CHAR_DELAY_MS", defaults.text_char_delay_ms),
        json_publish_every=_int_env("JSON_PUBLISH_EVERY", defaults.json_publish_every, minimum=1),
        text_publish_every=_int_env("TEXT_PUBLISH_EVERY", defaults.text_publish_every, minimum=1),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()] if origins else defaults.cors_origins,
    )
