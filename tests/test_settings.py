from __future__ import annotations

import pytest

from campaign_studio.streaming import ConversationStore, InMemoryCheckpointStore, PlaybackController
from campaign_studio.utils.settings import get_playback_settings


SETTINGS_VARS = (
    "CHECKPOINT_DIR",
    "JSON_CHAR_DELAY_MS",
    "TEXT_CHAR_DELAY_MS",
    "JSON_PUBLISH_EVERY",
    "TEXT_PUBLISH_EVERY",
    "CORS_ORIGINS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in SETTINGS_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = get_playback_settings()

    assert settings.checkpoint_dir == ".checkpoints"
    assert settings.json_char_delay_ms == 20
    assert settings.text_char_delay_ms == 15
    assert settings.json_publish_every == 5
    assert settings.text_publish_every == 10


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHECKPOINT_DIR", "/tmp/cp")
    monkeypatch.setenv("JSON_CHAR_DELAY_MS", "0")
    monkeypatch.setenv("TEXT_PUBLISH_EVERY", "3")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")

    settings = get_playback_settings()
    controller = PlaybackController.from_settings(settings, InMemoryCheckpointStore(), ConversationStore())

    assert settings.checkpoint_dir == "/tmp/cp"
    assert settings.cors_origins == ["https://a.example", "https://b.example"]
    assert controller.json_delay == 0
    assert controller.text_delay == 0.015
    assert controller.text_publish_every == 3


@pytest.mark.parametrize("name,value", [("JSON_CHAR_DELAY_MS", "fast"), ("JSON_PUBLISH_EVERY", "0")])
def test_invalid_values_name_the_variable(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError, match=name):
        get_playback_settings()
