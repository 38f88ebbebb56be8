from __future__ import annotations

import datetime as dt

import pytest

from engine.possibility import FeedbackMode
from games.registry import RegistryError, get_game, list_games, load_puzzle_table


def test_catalogue_lists_every_game() -> None:
    assert list_games() == ["chroma", "daily-path", "link-five", "signal-break", "signal-lock", "spellcast"]


def test_code_game_definition() -> None:
    game = get_game("signal-lock", profile="dev", env={})
    assert game.kind == "code"
    assert game.alphabet_size == 10
    assert game.code_length == 4
    assert game.max_guesses == 8
    assert game.feedback_mode is FeedbackMode.POSITIONAL
    assert game.label("exact") == "locked"
    assert game.decision_source == "config"


def test_symbol_game_compares_counts() -> None:
    game = get_game("signal-break", profile="dev", env={})
    assert game.feedback_mode is FeedbackMode.COUNTS
    assert game.symbol_index("diamond") == 3


def test_symbol_lookup_is_case_insensitive() -> None:
    game = get_game("spellcast", profile="dev", env={})
    assert game.symbol_index("gale") == 2
    with pytest.raises(ValueError):
        game.symbol_index("Thunder")


def test_game_epoch_override() -> None:
    assert get_game("link-five", profile="dev", env={}).epoch == dt.date(2026, 2, 9)
    assert get_game("chroma", profile="dev", env={}).epoch == dt.date(2026, 1, 1)


def test_profile_block_merges_over_base() -> None:
    dev = get_game("chroma", profile="dev", env={})
    prod = get_game("chroma", profile="prod", env={})
    assert dev.max_guesses == 10
    assert dev.decision_source == "profile"
    assert prod.max_guesses == 6
    assert prod.decision_source == "config"


def test_environment_overrides_config() -> None:
    game = get_game("signal-lock", profile="dev", env={"PUZZLE_SIGNAL_LOCK_MAX_GUESSES": "3"})
    assert game.max_guesses == 3
    assert game.decision_source == "env"


def test_environment_keys_are_case_insensitive() -> None:
    game = get_game("link-five", profile="dev", env={"puzzle_link_five_max_guesses": "2"})
    assert game.max_guesses == 2


@pytest.mark.parametrize("raw", ["many", "0", "-1"])
def test_invalid_environment_override(raw: str) -> None:
    with pytest.raises(RegistryError):
        get_game("signal-lock", profile="dev", env={"PUZZLE_SIGNAL_LOCK_MAX_GUESSES": raw})


def test_unknown_game_or_profile() -> None:
    with pytest.raises(RegistryError):
        get_game("hot-cold", profile="dev", env={})
    with pytest.raises(RegistryError):
        get_game("signal-lock", profile="staging", env={})


@pytest.mark.parametrize("key", ["signal-lock", "signal-break", "spellcast", "link-five", "chroma"])
def test_every_table_loads_and_validates(key: str) -> None:
    game = get_game(key, profile="ci", env={})
    assert len(load_puzzle_table(game)) == 5


def test_path_game_has_no_table() -> None:
    with pytest.raises(RegistryError):
        load_puzzle_table(get_game("daily-path", profile="dev", env={}))
