"""Mastermind scoring shared by every code-breaking game.

Codes are sequences of hashable symbols.  The digit, shape and rune games
encode their symbols as alphabet indices; the word chain game scores words
directly.  Feedback follows the classic two-pass rules:

1. left to right, a guess position equal to the secret at the same position
   is ``exact`` and both occurrences are consumed;
2. left to right over the remaining guess positions, the first unconsumed
   secret occurrence of the same symbol is consumed and the position is
   ``present``; otherwise it is ``absent``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Hashable, Iterable, List, Optional, Sequence, Tuple

from contracts.errors import GuessValidationError, ValidationIssue, make_error

Code = Tuple[Hashable, ...]


class Mark(str, Enum):
    """Per-position feedback tag."""

    EXACT = "exact"
    PRESENT = "present"
    ABSENT = "absent"

    @classmethod
    def parse(cls, token: str) -> "Mark":
        """Accept the full value or its first letter, case-insensitively."""
        key = token.strip().lower()
        for mark in cls:
            if key in (mark.value, mark.value[0]):
                return mark
        raise ValueError(f"Unknown feedback mark: {token!r}")


@dataclass(frozen=True)
class CodeEvaluation:
    """Feedback for one guess plus its derived counts."""

    feedback: Tuple[Mark, ...]
    exact_count: int
    present_count: int

    @property
    def length(self) -> int:
        return len(self.feedback)

    @property
    def absent_count(self) -> int:
        return self.length - self.exact_count - self.present_count

    @property
    def is_solved(self) -> bool:
        return self.exact_count == self.length

    def counts(self) -> Tuple[int, int]:
        return self.exact_count, self.present_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "feedback": [mark.value for mark in self.feedback],
            "exact_count": self.exact_count,
            "present_count": self.present_count,
        }


def evaluation_from_marks(marks: Iterable[Mark | str]) -> CodeEvaluation:
    """Rebuild a :class:`CodeEvaluation` from recorded marks."""

    feedback = tuple(m if isinstance(m, Mark) else Mark.parse(m) for m in marks)
    return CodeEvaluation(
        feedback=feedback,
        exact_count=sum(1 for m in feedback if m is Mark.EXACT),
        present_count=sum(1 for m in feedback if m is Mark.PRESENT),
    )


def validate_code(
    code: Sequence[Any],
    alphabet_size: int,
    length: int,
    *,
    path: str = "$.guess",
) -> Tuple[int, ...]:
    """Return ``code`` as a tuple of indices or raise :class:`GuessValidationError`."""

    issues: List[ValidationIssue] = []
    if isinstance(code, (str, bytes)) or not isinstance(code, Sequence):
        raise GuessValidationError(
            "Guess must be a sequence of symbol indices",
            [make_error("guess.type", "expected a sequence", path)],
        )
    if len(code) != length:
        issues.append(
            make_error("guess.length", f"expected {length} symbols, got {len(code)}", path)
        )
    for i, symbol in enumerate(code):
        if isinstance(symbol, bool) or not isinstance(symbol, int):
            issues.append(make_error("guess.symbol", f"{symbol!r} is not a symbol index", f"{path}[{i}]"))
        elif not 0 <= symbol < alphabet_size:
            issues.append(
                make_error(
                    "guess.symbol",
                    f"{symbol} is outside the alphabet of size {alphabet_size}",
                    f"{path}[{i}]",
                )
            )
    if issues:
        raise GuessValidationError("Guess rejected", issues)
    return tuple(code)


def score_code(guess: Sequence[Hashable], secret: Sequence[Hashable]) -> CodeEvaluation:
    """Two-pass scoring without input checks; ``guess`` and ``secret`` share a length."""

    n = len(secret)
    feedback = [Mark.ABSENT] * n
    secret_used = [False] * n
    guess_used = [False] * n

    exact = 0
    for i in range(n):
        if guess[i] == secret[i]:
            feedback[i] = Mark.EXACT
            secret_used[i] = True
            guess_used[i] = True
            exact += 1

    present = 0
    for i in range(n):
        if guess_used[i]:
            continue
        for j in range(n):
            if not secret_used[j] and guess[i] == secret[j]:
                feedback[i] = Mark.PRESENT
                secret_used[j] = True
                present += 1
                break

    return CodeEvaluation(feedback=tuple(feedback), exact_count=exact, present_count=present)


def evaluate_code(
    guess: Sequence[Hashable],
    secret: Sequence[Hashable],
    alphabet_size: Optional[int] = None,
    length: Optional[int] = None,
) -> CodeEvaluation:
    """Score ``guess`` against ``secret``.

    When ``alphabet_size`` is given both codes are checked as index codes of
    ``length`` symbols (``length`` defaults to the secret's length) and a
    :class:`GuessValidationError` is raised for malformed input.  Without an
    alphabet the symbols may be any hashable values, which is how the word
    chain game scores its guesses.
    """

    expected = len(secret) if length is None else length
    if alphabet_size is not None:
        guess = validate_code(guess, alphabet_size, expected)
        secret = validate_code(secret, alphabet_size, expected, path="$.secret")
    elif len(guess) != expected or len(secret) != expected:
        raise GuessValidationError(
            "Guess rejected",
            [make_error("guess.length", f"expected {expected} symbols, got {len(guess)}", "$.guess")],
        )
    return score_code(guess, secret)


def signal_strength(
    evaluation: CodeEvaluation,
    exact_weight: int = 25,
    present_weight: int = 5,
) -> int:
    """Gauge value in ``[0, 100]`` for one evaluation."""

    return min(100, evaluation.exact_count * exact_weight + evaluation.present_count * present_weight)


__all__ = [
    "Code",
    "CodeEvaluation",
    "Mark",
    "evaluate_code",
    "evaluation_from_marks",
    "score_code",
    "signal_strength",
    "validate_code",
]
