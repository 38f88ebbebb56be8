from __future__ import annotations

import datetime as dt

import pytest

import project_config


def test_dotted_lookup() -> None:
    assert project_config.get_section("games.signal-lock.code_length") == 4
    assert project_config.get_section("daily.epoch") == dt.date(2026, 1, 1)


def test_missing_path_uses_default_or_raises() -> None:
    assert project_config.get_section("games.signal-lock.missing", 7) == 7
    with pytest.raises(KeyError):
        project_config.get_section("nowhere.at.all")


def test_environment_points_at_another_file(tmp_path, monkeypatch) -> None:
    alt = tmp_path / "alt.toml"
    alt.write_text('[games.solo]\nkind = "color"\nmax_guesses = 3\n', encoding="utf-8")
    monkeypatch.setenv("DAILY_PUZZLES_CONFIG", str(alt))
    project_config.reload()
    try:
        assert project_config.get_section("games.solo.max_guesses") == 3
        assert project_config.get_section("games.signal-lock", None) is None
    finally:
        monkeypatch.delenv("DAILY_PUZZLES_CONFIG")
        project_config.reload()


def test_missing_file_is_reported(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("DAILY_PUZZLES_CONFIG", str(tmp_path / "absent.toml"))
    project_config.reload()
    try:
        with pytest.raises(RuntimeError):
            project_config.get_config()
    finally:
        monkeypatch.delenv("DAILY_PUZZLES_CONFIG")
        project_config.reload()
