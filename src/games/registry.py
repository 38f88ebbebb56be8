"""Game catalogue resolution.

Every game is declared under ``[games.<key>]`` in ``config.toml``.  A
definition is resolved by layering, in order: the base block, the
``by_profile.<profile>`` block and ``PUZZLE_<KEY>_<FIELD>`` environment
overrides (``KEY`` upper-cased with dashes as underscores).
"""

from __future__ import annotations

import datetime as _dt
import json
import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from contracts import assert_valid, get_profile
from engine.daily_seed import DEFAULT_EPOCH
from engine.possibility import FeedbackMode
from project_config import get_section

_LOGGER = logging.getLogger(__name__)

DATA_ROOT = Path(__file__).resolve().parent / "data"
SUPPORTED_KINDS = {"path", "code", "chain", "color"}

_DEF_PROFILE = "dev"
_DEF_LABELS = {"exact": "exact", "present": "present", "absent": "absent"}
_ENV_FIELDS = ("MAX_GUESSES",)


class RegistryError(RuntimeError):
    """Raised when a game definition cannot be resolved."""


@dataclass(frozen=True)
class GameSpec:
    """Resolved definition of one daily game."""

    key: str
    kind: str
    title: str
    max_guesses: int
    epoch: _dt.date
    profile: str
    decision_source: str
    alphabet: Tuple[str, ...] = ()
    code_length: int = 0
    feedback_mode: FeedbackMode = FeedbackMode.POSITIONAL
    track_possibilities: bool = False
    puzzles: Optional[str] = None
    labels: Dict[str, str] = field(default_factory=lambda: dict(_DEF_LABELS))
    config: Dict[str, Any] = field(default_factory=dict)

    @property
    def alphabet_size(self) -> int:
        return len(self.alphabet)

    def label(self, mark: str) -> str:
        return self.labels.get(mark, mark)

    def symbol_index(self, symbol: str) -> int:
        """Index of ``symbol`` in the alphabet, case-insensitively."""
        wanted = str(symbol).strip().lower()
        for i, candidate in enumerate(self.alphabet):
            if candidate.lower() == wanted:
                return i
        raise ValueError(f"{symbol!r} is not a symbol of {self.key}")

    def contract_context(self) -> Dict[str, Any]:
        return {"alphabet": list(self.alphabet), "code_length": self.code_length}


def _normalise_env(env: Mapping[str, str]) -> Dict[str, str]:
    return {str(k).upper(): str(v) for k, v in env.items()}


def _env_prefix(key: str) -> str:
    return "PUZZLE_" + key.upper().replace("-", "_")


def list_games() -> List[str]:
    games = get_section("games", {})
    return sorted(games) if isinstance(games, dict) else []


def _extract_policy(key: str, profile: str) -> Tuple[Dict[str, Any], str]:
    games = get_section("games", {})
    block = games.get(key) if isinstance(games, dict) else None
    if not isinstance(block, dict):
        raise RegistryError(f"Game '{key}' is not declared under [games]")

    policy: Dict[str, Any] = {k: v for k, v in block.items() if k != "by_profile"}
    source = "config"
    by_profile = block.get("by_profile")
    if isinstance(by_profile, dict):
        profile_block = by_profile.get(profile)
        if isinstance(profile_block, dict):
            policy.update(profile_block)
            source = "profile"
    return policy, source


def _apply_env(key: str, policy: Dict[str, Any], env: Mapping[str, str], source: str) -> str:
    prefix = _env_prefix(key)
    for name in _ENV_FIELDS:
        raw = env.get(f"{prefix}_{name}")
        if not raw:
            continue
        try:
            value = int(raw)
        except ValueError as exc:
            raise RegistryError(f"{prefix}_{name} must be an integer, got {raw!r}") from exc
        if value <= 0:
            raise RegistryError(f"{prefix}_{name} must be positive, got {value}")
        policy[name.lower()] = value
        source = "env"
    return source


def get_game(
    key: str,
    profile: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
) -> GameSpec:
    """Resolve the game declared as ``[games.<key>]``."""

    profile = (profile or os.environ.get("PUZZLE_PROFILE") or _DEF_PROFILE).lower()
    try:
        get_profile(profile)
    except ValueError as exc:
        raise RegistryError(str(exc)) from exc
    env_map = _normalise_env(os.environ if env is None else env)
    policy, source = _extract_policy(key, profile)
    source = _apply_env(key, policy, env_map, source)

    kind = str(policy.get("kind", ""))
    if kind not in SUPPORTED_KINDS:
        raise RegistryError(f"Game '{key}' has unsupported kind {kind!r}")

    max_guesses = int(policy.get("max_guesses", 0))
    if max_guesses <= 0:
        raise RegistryError(f"Game '{key}' needs a positive max_guesses")

    epoch = policy.get("epoch", DEFAULT_EPOCH)
    if isinstance(epoch, str):
        epoch = _dt.date.fromisoformat(epoch)

    alphabet = tuple(str(symbol) for symbol in policy.get("alphabet", ()))
    if len(set(alphabet)) != len(alphabet):
        raise RegistryError(f"Game '{key}' repeats a symbol in its alphabet")

    try:
        feedback_mode = FeedbackMode(policy.get("feedback_mode", FeedbackMode.POSITIONAL.value))
    except ValueError as exc:
        raise RegistryError(f"Game '{key}' has unknown feedback_mode") from exc

    labels = dict(_DEF_LABELS)
    labels.update(policy.get("labels", {}))

    spec = GameSpec(
        key=key,
        kind=kind,
        title=str(policy.get("title", key)),
        max_guesses=max_guesses,
        epoch=epoch,
        profile=profile,
        decision_source=source,
        alphabet=alphabet,
        code_length=int(policy.get("code_length", 0)),
        feedback_mode=feedback_mode,
        track_possibilities=bool(policy.get("track_possibilities", False)),
        puzzles=policy.get("puzzles"),
        labels=labels,
        config=policy,
    )
    _LOGGER.debug("resolved game %s (profile=%s, source=%s)", key, profile, source)
    return spec


@lru_cache(maxsize=None)
def _read_table(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def read_puzzle_table(game: GameSpec) -> Dict[str, Any]:
    """Return the decoded table of ``game`` without validating it."""

    if not game.puzzles:
        raise RegistryError(f"Game '{game.key}' has no puzzle table")
    path = DATA_ROOT / game.puzzles
    if not path.is_file():
        raise RegistryError(f"Puzzle table {game.puzzles!r} for '{game.key}' is missing")
    return _read_table(path)


def load_puzzle_table(game: GameSpec, profile: Optional[str] = None) -> List[Dict[str, Any]]:
    """Load and validate the puzzle table of ``game``.

    Raises :class:`RegistryError` for games without a table and
    :class:`contracts.ManagedValidationError` when the table is invalid.
    """

    table = read_puzzle_table(game)
    assert_valid(table, game.kind, game.contract_context(), profile=profile or game.profile)
    if table.get("game") != game.key:
        _LOGGER.warning("table %s declares game %r, expected %r", game.puzzles, table.get("game"), game.key)
    return [dict(entry) for entry in table["puzzles"]]


__all__ = [
    "DATA_ROOT",
    "GameSpec",
    "RegistryError",
    "get_game",
    "list_games",
    "load_puzzle_table",
    "read_puzzle_table",
]
