"""Central registry of puzzle table invariants.

Each rule receives the decoded table, the game definition it belongs to and
the active profile.  Rules assume the schema stage already passed for the
fields they read and skip entries whose shape is wrong.
"""

from __future__ import annotations


from collections import Counter
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping

from .errors import ValidationIssue, make_error, make_warning
from .profiles import ProfileConfig

RuleCheck = Callable[[dict, Mapping[str, Any], ProfileConfig], Iterable[ValidationIssue]]


@dataclass(frozen=True)
class InvariantRule:
    name: str
    check: RuleCheck


def _entries(table: dict) -> List[tuple[int, dict]]:
    puzzles = table.get("puzzles")
    if not isinstance(puzzles, list):
        return []
    return [(i, p) for i, p in enumerate(puzzles) if isinstance(p, dict)]


def _unique_ids(table: dict, _game: Mapping[str, Any], _profile: ProfileConfig) -> Iterable[ValidationIssue]:
    issues: List[ValidationIssue] = []
    ids = [p.get("id") for _, p in _entries(table)]
    for value, count in Counter(ids).items():
        if count > 1:
            issues.append(make_error("table.ids.duplicate", f"id {value!r} appears {count} times", "$.puzzles"))
    if not issues and ids != list(range(1, len(ids) + 1)):
        issues.append(make_warning("table.ids.not_sequential", "ids should run 1..n in order", "$.puzzles"))
    return issues


# ---------- code tables ----------


def _secret_length(table: dict, game: Mapping[str, Any], _profile: ProfileConfig) -> Iterable[ValidationIssue]:
    length = game.get("code_length")
    issues: List[ValidationIssue] = []
    for i, puzzle in _entries(table):
        secret = puzzle.get("secret")
        if isinstance(secret, list) and length is not None and len(secret) != length:
            issues.append(
                make_error(
                    "invariant.secret.length",
                    f"secret has {len(secret)} symbols, expected {length}",
                    f"$.puzzles[{i}].secret",
                )
            )
    return issues


def _secret_symbols(table: dict, game: Mapping[str, Any], _profile: ProfileConfig) -> Iterable[ValidationIssue]:
    alphabet = set(game.get("alphabet", ()))
    issues: List[ValidationIssue] = []
    for i, puzzle in _entries(table):
        for j, symbol in enumerate(puzzle.get("secret") or ()):
            if symbol not in alphabet:
                issues.append(
                    make_error(
                        "invariant.secret.symbol",
                        f"{symbol!r} is not in the game alphabet",
                        f"$.puzzles[{i}].secret[{j}]",
                    )
                )
    return issues


def _duplicate_secrets(table: dict, _game: Mapping[str, Any], _profile: ProfileConfig) -> Iterable[ValidationIssue]:
    seen: Dict[tuple, int] = {}
    issues: List[ValidationIssue] = []
    for i, puzzle in _entries(table):
        key = tuple(puzzle.get("secret") or ())
        if key in seen:
            issues.append(
                make_warning(
                    "table.secret.repeated",
                    f"secret repeats puzzle at index {seen[key]}",
                    f"$.puzzles[{i}].secret",
                )
            )
        else:
            seen[key] = i
    return issues


# ---------- chain tables ----------


def _chain_length(table: dict, game: Mapping[str, Any], _profile: ProfileConfig) -> Iterable[ValidationIssue]:
    length = game.get("code_length")
    issues: List[ValidationIssue] = []
    for i, puzzle in _entries(table):
        chain = puzzle.get("chain")
        if isinstance(chain, list) and length is not None and len(chain) != length:
            issues.append(
                make_error(
                    "invariant.chain.length",
                    f"chain has {len(chain)} words, expected {length}",
                    f"$.puzzles[{i}].chain",
                )
            )
    return issues


def _distinct_words(table: dict, _game: Mapping[str, Any], _profile: ProfileConfig) -> Iterable[ValidationIssue]:
    issues: List[ValidationIssue] = []
    for i, puzzle in _entries(table):
        words = list(puzzle.get("chain") or ()) + list(puzzle.get("decoys") or ())
        repeated = sorted(w for w, n in Counter(words).items() if n > 1)
        if repeated:
            issues.append(
                make_error(
                    "invariant.chain.repeated_word",
                    f"words appear more than once: {', '.join(repeated)}",
                    f"$.puzzles[{i}]",
                )
            )
    return issues


def _connection_count(table: dict, _game: Mapping[str, Any], _profile: ProfileConfig) -> Iterable[ValidationIssue]:
    issues: List[ValidationIssue] = []
    for i, puzzle in _entries(table):
        chain = puzzle.get("chain") or ()
        connections = puzzle.get("connections") or ()
        if len(connections) != max(0, len(chain) - 1):
            issues.append(
                make_error(
                    "invariant.chain.connections",
                    f"{len(chain)} words need {max(0, len(chain) - 1)} connections, got {len(connections)}",
                    f"$.puzzles[{i}].connections",
                )
            )
    return issues


def _connection_words(table: dict, _game: Mapping[str, Any], _profile: ProfileConfig) -> Iterable[ValidationIssue]:
    issues: List[ValidationIssue] = []
    for i, puzzle in _entries(table):
        chain = puzzle.get("chain") or ()
        for j, (left, right, joined) in enumerate(zip(chain, chain[1:], puzzle.get("connections") or ())):
            compact = str(joined).replace("-", "").replace(" ", "").upper()
            if compact != f"{left}{right}":
                issues.append(
                    make_warning(
                        "table.connection.mismatch",
                        f"{joined!r} does not join {left} and {right}",
                        f"$.puzzles[{i}].connections[{j}]",
                    )
                )
    return issues


# ---------- colour tables ----------


def _target_range(table: dict, _game: Mapping[str, Any], _profile: ProfileConfig) -> Iterable[ValidationIssue]:
    limits = {"h": 360, "s": 100, "l": 100}
    issues: List[ValidationIssue] = []
    for i, puzzle in _entries(table):
        target = puzzle.get("target")
        if not isinstance(target, dict):
            continue
        for channel, upper in limits.items():
            value = target.get(channel)
            if not isinstance(value, int) or not 0 <= value <= upper:
                issues.append(
                    make_error(
                        "invariant.target.range",
                        f"{channel} must be an integer in [0, {upper}]",
                        f"$.puzzles[{i}].target.{channel}",
                    )
                )
    return issues


def _distinct_names(table: dict, _game: Mapping[str, Any], _profile: ProfileConfig) -> Iterable[ValidationIssue]:
    names = [p.get("name") for _, p in _entries(table)]
    return [
        make_warning("table.name.repeated", f"name {name!r} is used {count} times", "$.puzzles")
        for name, count in Counter(names).items()
        if count > 1
    ]


_RULES: Dict[str, List[InvariantRule]] = {
    "code": [
        InvariantRule("unique_ids", _unique_ids),
        InvariantRule("secret_length", _secret_length),
        InvariantRule("secret_symbols", _secret_symbols),
        InvariantRule("duplicate_secrets", _duplicate_secrets),
    ],
    "chain": [
        InvariantRule("unique_ids", _unique_ids),
        InvariantRule("chain_length", _chain_length),
        InvariantRule("distinct_words", _distinct_words),
        InvariantRule("connection_count", _connection_count),
        InvariantRule("connection_words", _connection_words),
    ],
    "color": [
        InvariantRule("unique_ids", _unique_ids),
        InvariantRule("target_range", _target_range),
        InvariantRule("distinct_names", _distinct_names),
    ],
}


def run_invariants(
    table: dict,
    table_kind: str,
    game: Mapping[str, Any],
    profile: ProfileConfig,
) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    for rule in _RULES.get(table_kind, []):
        if profile.is_invariant_enabled(table_kind, rule.name):
            issues.extend(rule.check(table, game, profile))
    return issues


RULES = _RULES

__all__ = [
    "InvariantRule",
    "RULES",
    "run_invariants",
]
