"""Brute-force possibility space over ``alphabet_size ** length`` codes.

Every candidate is re-scored against each recorded guess; a candidate
survives only if it would have produced the recorded feedback every time.
The cost is ``O(K**L * len(history) * L)``, which stays small for the games
in the catalogue (1,296 codes for six symbols, 10,000 for ten digits).
Larger alphabets or longer codes need constraint propagation instead.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Sequence, Tuple

from contracts.errors import GuessValidationError, make_error

from .mastermind import CodeEvaluation, Mark, evaluation_from_marks, score_code, validate_code

_LOGGER = logging.getLogger(__name__)


class FeedbackMode(str, Enum):
    """How a candidate's feedback is compared against the recorded one."""

    POSITIONAL = "positional"
    COUNTS = "counts"


class SymbolStatus(str, Enum):
    EXACT = "exact"
    PRESENT = "present"
    ELIMINATED = "eliminated"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class GuessRecord:
    """One entry of the append-only guess history."""

    guess: Tuple[int, ...]
    evaluation: CodeEvaluation

    @classmethod
    def from_marks(cls, guess: Sequence[int], marks: Iterable[Mark | str]) -> "GuessRecord":
        return cls(guess=tuple(guess), evaluation=evaluation_from_marks(marks))


def as_record(entry: GuessRecord | Tuple[Sequence[int], object]) -> GuessRecord:
    """Accept a :class:`GuessRecord` or a ``(guess, feedback)`` pair."""

    if isinstance(entry, GuessRecord):
        return entry
    guess, feedback = entry
    if isinstance(feedback, CodeEvaluation):
        return GuessRecord(guess=tuple(guess), evaluation=feedback)
    return GuessRecord.from_marks(guess, feedback)  # type: ignore[arg-type]


def _matches(candidate: CodeEvaluation, recorded: CodeEvaluation, mode: FeedbackMode) -> bool:
    if mode is FeedbackMode.COUNTS:
        return candidate.counts() == recorded.counts()
    return candidate.feedback == recorded.feedback


def is_consistent(
    candidate: Sequence[int],
    history: Sequence[GuessRecord],
    mode: FeedbackMode = FeedbackMode.POSITIONAL,
) -> bool:
    for record in history:
        if not _matches(score_code(record.guess, candidate), record.evaluation, mode):
            return False
    return True


def _checked(record: GuessRecord, index: int, alphabet_size: int, length: int) -> GuessRecord:
    guess = validate_code(record.guess, alphabet_size, length, path=f"$.history[{index}].guess")
    if record.evaluation.length != length:
        raise GuessValidationError(
            "History entry rejected",
            [
                make_error(
                    "feedback.length",
                    f"expected {length} marks, got {record.evaluation.length}",
                    f"$.history[{index}].feedback",
                )
            ],
        )
    return GuessRecord(guess=guess, evaluation=record.evaluation)


def iter_consistent_codes(
    history: Sequence[GuessRecord],
    alphabet_size: int,
    length: int,
    mode: FeedbackMode = FeedbackMode.POSITIONAL,
) -> Iterator[Tuple[int, ...]]:
    """Yield every code consistent with ``history`` in mixed-radix order.

    Each recorded guess must be a valid code of ``length`` symbols with
    feedback of the same length, else :class:`GuessValidationError`.
    """

    mode = FeedbackMode(mode)
    records = [_checked(as_record(entry), i, alphabet_size, length) for i, entry in enumerate(history)]
    for candidate in itertools.product(range(alphabet_size), repeat=length):
        if is_consistent(candidate, records, mode):
            yield candidate


def count_remaining_possibilities(
    history: Sequence[GuessRecord],
    alphabet_size: int,
    length: int,
    mode: FeedbackMode = FeedbackMode.POSITIONAL,
) -> int:
    """Number of codes still consistent with every recorded guess.

    An empty history returns the full space size without enumerating it.  A
    history that no code can satisfy returns ``0``.
    """

    if alphabet_size <= 0 or length < 0:
        raise ValueError("alphabet_size must be positive and length non-negative")
    if not history:
        return alphabet_size ** length

    count = sum(1 for _ in iter_consistent_codes(history, alphabet_size, length, mode))
    if count == 0:
        _LOGGER.debug("history of %d guesses admits no code", len(history))
    return count


def symbol_knowledge(history: Sequence[GuessRecord], alphabet_size: int) -> Tuple[SymbolStatus, ...]:
    """Best status each symbol has earned across the history.

    ``exact`` beats ``present``, which beats ``eliminated`` (seen only as
    absent).  Symbols never guessed stay ``unknown``.
    """

    seen: List[set] = [set() for _ in range(alphabet_size)]
    for record in map(as_record, history):
        for symbol, mark in zip(record.guess, record.evaluation.feedback):
            if 0 <= symbol < alphabet_size:
                seen[symbol].add(mark)

    statuses = []
    for marks in seen:
        if Mark.EXACT in marks:
            statuses.append(SymbolStatus.EXACT)
        elif Mark.PRESENT in marks:
            statuses.append(SymbolStatus.PRESENT)
        elif Mark.ABSENT in marks:
            statuses.append(SymbolStatus.ELIMINATED)
        else:
            statuses.append(SymbolStatus.UNKNOWN)
    return tuple(statuses)


__all__ = [
    "FeedbackMode",
    "GuessRecord",
    "SymbolStatus",
    "as_record",
    "count_remaining_possibilities",
    "is_consistent",
    "iter_consistent_codes",
    "symbol_knowledge",
]
