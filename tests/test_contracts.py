from __future__ import annotations

import copy
import math

import pytest

from contracts import ManagedValidationError, assert_valid, validate
from contracts.jsoncanon import canonical_digest, canonical_dump

GAME = {"alphabet": ["0", "1", "2", "3", "4", "5", "6", "7", "8", "9"], "code_length": 4}

CODE_TABLE = {
    "game": "signal-lock",
    "puzzles": [
        {"id": 1, "secret": ["3", "8", "1", "6"], "hint": "Somewhere between dusk and dawn"},
        {"id": 2, "secret": ["7", "2", "9", "4"]},
    ],
}

CHAIN_TABLE = {
    "game": "link-five",
    "puzzles": [
        {
            "id": 1,
            "chain": ["RAIN", "DROP", "KICK", "BACK", "STAGE"],
            "decoys": ["COAT", "FALL", "BOW"],
            "connections": ["raindrop", "dropkick", "kickback", "backstage"],
        }
    ],
}


def _codes(issues) -> list:
    return [issue.code for issue in issues]


def test_valid_table_passes() -> None:
    report = validate(CODE_TABLE, "code", GAME, profile="dev")
    assert report.ok
    assert report.errors == [] and report.warnings == []
    assert_valid(CODE_TABLE, "code", GAME, profile="ci")


def test_schema_violation_reports_path() -> None:
    table = copy.deepcopy(CODE_TABLE)
    table["puzzles"][1]["secret"] = "7294"
    report = validate(table, "code", GAME, profile="dev")
    assert not report.ok
    assert _codes(report.errors) == ["schema.violation"]
    assert report.errors[0].path == "$.puzzles[1].secret"


def test_secret_length_and_symbols_are_checked() -> None:
    table = copy.deepcopy(CODE_TABLE)
    table["puzzles"][0]["secret"] = ["3", "8", "1"]
    table["puzzles"][1]["secret"] = ["7", "2", "9", "X"]
    report = validate(table, "code", GAME, profile="dev")
    assert _codes(report.errors) == ["invariant.secret.length", "invariant.secret.symbol"]


def test_duplicate_secret_is_a_warning_outside_ci() -> None:
    table = copy.deepcopy(CODE_TABLE)
    table["puzzles"][1]["secret"] = ["3", "8", "1", "6"]
    report = validate(table, "code", GAME, profile="dev")
    assert report.ok
    assert _codes(report.warnings) == ["table.secret.repeated"]
    assert_valid(table, "code", GAME, profile="dev")
    with pytest.raises(ManagedValidationError) as info:
        assert_valid(table, "code", GAME, profile="ci")
    assert info.value.report.warnings


def test_duplicate_ids_are_errors() -> None:
    table = copy.deepcopy(CODE_TABLE)
    table["puzzles"][1]["id"] = 1
    with pytest.raises(ManagedValidationError):
        assert_valid(table, "code", GAME, profile="dev")


def test_chain_words_must_be_distinct() -> None:
    table = copy.deepcopy(CHAIN_TABLE)
    table["puzzles"][0]["decoys"] = ["COAT", "RAIN", "BOW"]
    report = validate(table, "chain", {"code_length": 5}, profile="dev")
    assert _codes(report.errors) == ["invariant.chain.repeated_word"]


def test_chain_connections_must_join_neighbours() -> None:
    table = copy.deepcopy(CHAIN_TABLE)
    table["puzzles"][0]["connections"][2] = "kickstand"
    report = validate(table, "chain", {"code_length": 5}, profile="dev")
    assert report.ok
    assert _codes(report.warnings) == ["table.connection.mismatch"]


def test_prod_profile_skips_cosmetic_rules() -> None:
    table = copy.deepcopy(CHAIN_TABLE)
    table["puzzles"][0]["connections"][2] = "kickstand"
    report = validate(table, "chain", {"code_length": 5}, profile="prod")
    assert report.warnings == []


def test_colour_out_of_range_fails_schema() -> None:
    table = {"game": "chroma", "puzzles": [{"id": 1, "name": "Ember", "target": {"h": 400, "s": 85, "l": 55}}]}
    report = validate(table, "color", profile="dev")
    assert not report.ok
    assert report.errors[0].path == "$.puzzles[0].target.h"


def test_unknown_table_kind() -> None:
    report = validate(CODE_TABLE, "riddle", profile="dev")
    assert _codes(report.errors) == ["schema.not_found"]


def test_unknown_profile_is_rejected() -> None:
    with pytest.raises(ValueError):
        validate(CODE_TABLE, "code", GAME, profile="staging")


def test_canonical_dump_sorts_keys() -> None:
    assert canonical_dump({"b": [1, (2, 3)], "a": "x"}) == b'{"a":"x","b":[1,[2,3]]}'
    assert canonical_digest({"a": 1, "b": 2}) == canonical_digest({"b": 2, "a": 1})
    assert canonical_digest({"a": 1}).startswith("sha256-")


def test_canonical_dump_rejects_floats() -> None:
    with pytest.raises(TypeError):
        canonical_dump({"value": math.pi})
