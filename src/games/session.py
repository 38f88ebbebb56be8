"""Play sessions: guess limits, win/lose state and per-game hints.

Sessions own the append-only guess history of one player on one puzzle.
They validate input, call the engines and never rewrite past entries.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from contracts.errors import GuessValidationError, IllegalMoveError, SessionClosedError, make_error
from engine.chain import evaluate_chain, hints_revealed, word_statuses
from engine.chroma import HSL, ColorEvaluation, evaluate_color
from engine.hamiltonian import Cell, GridScore, PathBuilder, score_grid_attempt
from engine.mastermind import CodeEvaluation, Mark, evaluate_code, signal_strength
from engine.possibility import (
    GuessRecord,
    SymbolStatus,
    count_remaining_possibilities,
    symbol_knowledge,
)

from .daily import DailyPathPuzzle, DailyPuzzle
from .registry import GameSpec

_LOGGER = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


class _Session:
    """Shared bookkeeping for every game."""

    def __init__(self, max_guesses: int) -> None:
        if max_guesses <= 0:
            raise ValueError("max_guesses must be positive")
        self.max_guesses = max_guesses
        self.status = SessionStatus.PLAYING
        self._attempts = 0

    @property
    def attempts_used(self) -> int:
        return self._attempts

    @property
    def attempts_left(self) -> int:
        return self.max_guesses - self._attempts

    @property
    def is_over(self) -> bool:
        return self.status is not SessionStatus.PLAYING

    def _require_open(self) -> None:
        if self.is_over:
            raise SessionClosedError(f"session already {self.status.value}")

    def _record_attempt(self, won: bool) -> None:
        self._attempts += 1
        if won:
            self.status = SessionStatus.WON
        elif self._attempts >= self.max_guesses:
            self.status = SessionStatus.LOST
        if self.is_over:
            _LOGGER.debug("%s %s after %d attempt(s)", type(self).__name__, self.status.value, self._attempts)


class CodeBreakerSession(_Session):
    """Digit, symbol, rune and word-chain games.

    Code games accept guesses as alphabet indices or symbol names; the word
    chain game accepts words.
    """

    def __init__(self, game: GameSpec, answer: Sequence[Any], puzzle: Optional[DailyPuzzle] = None) -> None:
        if game.kind not in ("code", "chain"):
            raise ValueError(f"{game.key} is not a code-breaking game")
        super().__init__(game.max_guesses)
        self.game = game
        self.puzzle = puzzle
        self._answer = tuple(answer)
        self._history: List[GuessRecord] = []

    @classmethod
    def from_daily(cls, puzzle: DailyPuzzle) -> "CodeBreakerSession":
        return cls(puzzle.game, puzzle.answer, puzzle)

    @property
    def history(self) -> Tuple[GuessRecord, ...]:
        return tuple(self._history)

    def _coerce(self, guess: Sequence[Any]) -> Tuple[Any, ...]:
        if self.game.kind == "chain":
            return tuple(guess)
        out = []
        for i, symbol in enumerate(guess):
            if not isinstance(symbol, str):
                out.append(symbol)
                continue
            try:
                out.append(self.game.symbol_index(symbol))
            except ValueError as exc:
                raise GuessValidationError(
                    "Guess rejected", [make_error("guess.symbol", str(exc), f"$.guess[{i}]")]
                ) from exc
        return tuple(out)

    def submit(self, guess: Sequence[Any]) -> CodeEvaluation:
        self._require_open()
        if self.game.kind == "chain":
            evaluation = evaluate_chain(list(guess), self._answer)
            coerced = tuple(str(w).strip().upper() for w in guess)
        else:
            coerced = self._coerce(guess)
            evaluation = evaluate_code(
                coerced, self._answer, self.game.alphabet_size, self.game.code_length
            )
        self._history.append(GuessRecord(guess=coerced, evaluation=evaluation))
        self._record_attempt(evaluation.is_solved)
        return evaluation

    def remaining_possibilities(self) -> Optional[int]:
        """Codes still consistent with the history, or ``None`` when not tracked."""
        if self.game.kind != "code" or not self.game.track_possibilities:
            return None
        return count_remaining_possibilities(
            self._history, self.game.alphabet_size, self.game.code_length, self.game.feedback_mode
        )

    def symbol_knowledge(self) -> Tuple[SymbolStatus, ...]:
        return symbol_knowledge(self._history, self.game.alphabet_size)

    def signal_strength(self) -> int:
        """Gauge for the most recent guess; ``0`` before the first one."""
        if not self._history:
            return 0
        weights = self.game.config.get("signal", {})
        return signal_strength(
            self._history[-1].evaluation,
            exact_weight=int(weights.get("exact_weight", 25)),
            present_weight=int(weights.get("present_weight", 5)),
        )

    def word_statuses(self) -> Dict[str, Mark]:
        return word_statuses(self._history)

    def hints_revealed(self) -> int:
        connections = self.puzzle.entry.get("connections", ()) if self.puzzle else ()
        return hints_revealed(len(self._history), len(connections))

    def labelled(self, evaluation: CodeEvaluation) -> List[str]:
        return [self.game.label(mark.value) for mark in evaluation.feedback]


class PathSession(_Session):
    """Grid path game: trace a full path, submit, and read the segment score."""

    def __init__(self, solution: Sequence[Cell], grid_size: int, max_guesses: int) -> None:
        super().__init__(max_guesses)
        self.solution = tuple(solution)
        self.grid_size = grid_size
        self.builder = PathBuilder(self.solution[0], grid_size)
        self._scores: List[GridScore] = []

    @classmethod
    def from_daily(cls, puzzle: DailyPathPuzzle) -> "PathSession":
        return cls(puzzle.path, puzzle.grid_size, puzzle.max_guesses)

    @property
    def scores(self) -> Tuple[GridScore, ...]:
        return tuple(self._scores)

    def select(self, cell: Cell) -> None:
        self._require_open()
        self.builder.select(cell)

    def reset(self) -> None:
        self._require_open()
        self.builder.reset()

    def submit(self, cells: Optional[Sequence[Cell]] = None) -> GridScore:
        """Score the traced path, optionally tracing ``cells`` first.

        Only a path covering every cell can be submitted.  A rejected
        ``cells`` trace leaves the current trace untouched; a miss clears it
        back to the start cell.
        """
        self._require_open()
        if cells is not None:
            trace = [(int(c[0]), int(c[1])) for c in cells]
            if trace and trace[0] == self.builder.start:
                trace = trace[1:]
            builder = PathBuilder(self.builder.start, self.grid_size)
            builder.extend(trace)
        else:
            builder = self.builder
        if not builder.is_full:
            raise IllegalMoveError(
                f"path covers {len(builder.cells)} of {self.grid_size * self.grid_size} cells"
            )
        self.builder = builder
        score = score_grid_attempt(self.solution, self.builder.cells)
        self._scores.append(score)
        self._record_attempt(score.is_win)
        if not score.is_win:
            self.builder.reset()
        return score


class ChromaSession(_Session):
    """Colour game: each guess reports per-channel hints and a closeness score."""

    def __init__(self, target: HSL, max_guesses: int) -> None:
        super().__init__(max_guesses)
        self._target = target.validate("$.target")
        self._history: List[ColorEvaluation] = []

    @classmethod
    def from_daily(cls, puzzle: DailyPuzzle) -> "ChromaSession":
        return cls(puzzle.answer, puzzle.game.max_guesses)

    @property
    def history(self) -> Tuple[ColorEvaluation, ...]:
        return tuple(self._history)

    @property
    def best_closeness(self) -> int:
        return max((e.closeness for e in self._history), default=0)

    def submit(self, guess: HSL) -> ColorEvaluation:
        self._require_open()
        evaluation = evaluate_color(guess, self._target)
        self._history.append(evaluation)
        self._record_attempt(evaluation.is_win)
        return evaluation


__all__ = [
    "ChromaSession",
    "CodeBreakerSession",
    "PathSession",
    "SessionStatus",
]
