"""Today's puzzle for each game in the catalogue."""

from __future__ import annotations

import datetime as _dt
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from contracts.jsoncanon import canonical_digest
from engine.chain import word_bank, word_bank_seed
from engine.chroma import HSL
from engine.daily_seed import DateLike, calendar_seed, derive_daily_seed
from engine.hamiltonian import DEFAULT_MAX_STEPS, Cell, Path, generate_hamiltonian_path

from .registry import GameSpec, RegistryError, get_game, list_games, load_puzzle_table

_LOGGER = logging.getLogger(__name__)

PATH_GAME = "daily-path"


@dataclass(frozen=True)
class DailyPuzzle:
    """Table entry selected for one game on one day."""

    game: GameSpec
    date: _dt.date
    index: int
    entry: Dict[str, Any]
    answer: Any

    @property
    def puzzle_id(self) -> int:
        return int(self.entry.get("id", self.index + 1))

    def public_view(self) -> Dict[str, Any]:
        """Everything a player may see before solving."""
        view = {
            "game": self.game.key,
            "title": self.game.title,
            "date": self.date.isoformat(),
            "puzzle_id": self.puzzle_id,
            "max_guesses": self.game.max_guesses,
        }
        for key in ("title", "hint", "clue"):
            if key in self.entry:
                view["puzzle_title" if key == "title" else key] = self.entry[key]
        if self.game.kind == "code":
            view["alphabet"] = list(self.game.alphabet)
            view["code_length"] = self.game.code_length
        elif self.game.kind == "chain":
            view["word_bank"] = word_bank(
                self.entry["chain"], self.entry["decoys"], self._word_bank_seed()
            )
            view["chain_length"] = len(self.entry["chain"])
        return view

    def to_dict(self, reveal: bool = False) -> Dict[str, Any]:
        data = self.public_view()
        data["digest"] = self.digest()
        if reveal:
            data["answer"] = _answer_payload(self.answer)
        return data

    def digest(self) -> str:
        return canonical_digest(
            {"game": self.game.key, "date": self.date, "index": self.index, "answer": _answer_payload(self.answer)}
        )

    def _word_bank_seed(self) -> int:
        cfg = self.game.config.get("word_bank", {})
        return word_bank_seed(
            self.index,
            stride=int(cfg.get("seed_stride", 9973)),
            offset=int(cfg.get("seed_offset", 42)),
        )


def _answer_payload(answer: Any) -> Any:
    if isinstance(answer, HSL):
        return {"h": answer.h, "s": answer.s, "l": answer.l}
    return list(answer)


def _as_date(today: Optional[DateLike]) -> _dt.date:
    if today is None:
        return _dt.date.today()
    if isinstance(today, _dt.datetime):
        return today.date()
    return today


def _answer_for(game: GameSpec, entry: Mapping[str, Any]) -> Any:
    if game.kind == "code":
        return tuple(game.symbol_index(symbol) for symbol in entry["secret"])
    if game.kind == "chain":
        return tuple(entry["chain"])
    if game.kind == "color":
        return HSL.from_mapping(entry["target"])
    raise RegistryError(f"Game '{game.key}' of kind {game.kind!r} has no puzzle table")


def daily_puzzle(
    key: str,
    today: Optional[DateLike] = None,
    profile: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
) -> DailyPuzzle:
    """Select the table entry for ``today`` (defaults to the local date).

    The index is the day offset from the game's epoch reduced with a true
    modulo, so the rotation repeats every ``len(table)`` days in both
    directions.
    """

    game = get_game(key, profile=profile, env=env)
    table = load_puzzle_table(game)
    date = _as_date(today)
    index = derive_daily_seed(date, game.epoch, len(table))
    entry = table[index]
    _LOGGER.debug("%s on %s -> puzzle index %d", key, date, index)
    return DailyPuzzle(game=game, date=date, index=index, entry=entry, answer=_answer_for(game, entry))


@dataclass(frozen=True)
class DailyPathPuzzle:
    """Solution of the grid path game for one day."""

    date: _dt.date
    seed: int
    grid_size: int
    max_guesses: int
    path: Path

    @property
    def start(self) -> Cell:
        return self.path[0]

    @property
    def end(self) -> Cell:
        return self.path[-1]

    def digest(self) -> str:
        return canonical_digest(
            {"date": self.date, "seed": self.seed, "grid_size": self.grid_size, "path": self.path}
        )

    def to_dict(self, reveal: bool = False) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "game": PATH_GAME,
            "date": self.date.isoformat(),
            "seed": self.seed,
            "grid_size": self.grid_size,
            "max_guesses": self.max_guesses,
            "start": list(self.start),
            "end": list(self.end),
            "digest": self.digest(),
        }
        if reveal:
            data["path"] = [list(cell) for cell in self.path]
        return data


def daily_path_puzzle(
    today: Optional[DateLike] = None,
    profile: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
) -> DailyPathPuzzle:
    """Generate the grid path for ``today`` from its ``YYYYMMDD`` seed."""

    game = get_game(PATH_GAME, profile=profile, env=env)
    date = _as_date(today)
    grid_size = int(game.config.get("grid_size", 5))
    search: Mapping[str, Any] = game.config.get("search", {})
    seed = calendar_seed(date)
    path = generate_hamiltonian_path(
        grid_size, seed, max_steps=int(search.get("max_steps", DEFAULT_MAX_STEPS))
    )
    return DailyPathPuzzle(
        date=date, seed=seed, grid_size=grid_size, max_guesses=game.max_guesses, path=path
    )


def daily_answers(today: Optional[DateLike] = None) -> Tuple[Tuple[str, str], ...]:
    """``(game, digest)`` for every game on ``today``; used by smoke checks."""

    out = []
    for key in list_games():
        game = get_game(key)
        if game.kind == "path":
            out.append((key, daily_path_puzzle(today).digest()))
        else:
            out.append((key, daily_puzzle(key, today).digest()))
    return tuple(out)


__all__ = [
    "DailyPathPuzzle",
    "DailyPuzzle",
    "PATH_GAME",
    "daily_answers",
    "daily_puzzle",
    "daily_path_puzzle",
]
