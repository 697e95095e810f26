from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from encore.core.config import DEFAULT_CONFIG, SettingsManager


def test_defaults_without_file(tmp_path: Path) -> None:
    settings = SettingsManager(config_path=tmp_path / "settings.yaml")

    assert settings.get_default_speed() == 1.0
    assert settings.get_ms_per_word() == 250.0
    assert settings.get_advance_pause_ms() == 1000.0
    assert settings.get_words_per_screen() == 20
    assert settings.get_message_limit() == 500
    assert settings.get_audio_enabled() is True
    assert settings.get_audio_device() is None
    assert settings.get_language() == "en"
    assert settings.get_diagnostics_log_level() == "WARNING"
    assert settings.get_raw() == DEFAULT_CONFIG


def test_settings_round_trip(tmp_path: Path) -> None:
    config_path = tmp_path / "settings.yaml"
    settings = SettingsManager(config_path=config_path)
    settings.set_default_speed(1.5)
    settings.set_ms_per_word(300)
    settings.set_advance_pause_ms(400)
    settings.set_audio_enabled(False)
    settings.set_audio_device("sd:3")
    settings.set_diagnostics_log_level("debug")
    settings.set_language("pl")
    settings.save()

    reloaded = SettingsManager(config_path=config_path)

    assert reloaded.get_default_speed() == 1.5
    assert reloaded.get_ms_per_word() == 300.0
    assert reloaded.get_advance_pause_ms() == 400.0
    assert reloaded.get_audio_enabled() is False
    assert reloaded.get_audio_device() == "sd:3"
    assert reloaded.get_diagnostics_log_level() == "DEBUG"
    assert reloaded.get_language() == "pl"


def test_partial_file_is_merged_with_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "settings.yaml"
    config_path.write_text(yaml.safe_dump({"playback": {"words_per_screen": 12}}), encoding="utf-8")

    settings = SettingsManager(config_path=config_path)

    assert settings.get_words_per_screen() == 12
    assert settings.get_ms_per_word() == 250.0
    assert settings.get_message_limit() == 500


def test_invalid_values_fall_back_to_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "settings.yaml"
    config_path.write_text(
        yaml.safe_dump(
            {
                "playback": {
                    "default_speed": 3.0,
                    "ms_per_word": -5,
                    "advance_pause_ms": "later",
                    "words_per_screen": 0,
                },
                "transcript": {"message_limit": "many"},
                "diagnostics": {"log_level": "chatty"},
            }
        ),
        encoding="utf-8",
    )

    settings = SettingsManager(config_path=config_path)

    assert settings.get_default_speed() == 1.0
    assert settings.get_ms_per_word() == 250.0
    assert settings.get_advance_pause_ms() == 1000.0
    assert settings.get_words_per_screen() == 20
    assert settings.get_message_limit() == 500
    assert settings.get_diagnostics_log_level() == "WARNING"


def test_unsupported_default_speed_rejected(tmp_path: Path) -> None:
    settings = SettingsManager(config_path=tmp_path / "settings.yaml")

    with pytest.raises(ValueError):
        settings.set_default_speed(1.25)


def test_config_path_from_environment(tmp_path: Path, monkeypatch) -> None:
    override = tmp_path / "custom" / "encore.yaml"
    monkeypatch.setenv("ENCORE_CONFIG_PATH", str(override))

    settings = SettingsManager(config_path=tmp_path / "ignored.yaml")

    assert settings.config_path == override


def test_config_dir_from_environment(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("ENCORE_CONFIG_DIR", str(tmp_path))

    settings = SettingsManager()

    assert settings.config_path == tmp_path / "settings.yaml"
