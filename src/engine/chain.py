"""Word-chain scoring: a five-word compound chain graded like a code."""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from contracts.errors import GuessValidationError, make_error

from .mastermind import CodeEvaluation, Mark, score_code
from .possibility import GuessRecord, as_record
from .rng import integer_shuffle

_PRIORITY = {Mark.ABSENT: 0, Mark.PRESENT: 1, Mark.EXACT: 2}


def normalise_word(word: str) -> str:
    return word.strip().upper()


def evaluate_chain(guess: Sequence[str], chain: Sequence[str]) -> CodeEvaluation:
    """Score a proposed chain word by word.

    Words are compared case-insensitively; a word repeated in the guess only
    earns ``present`` as many times as it occurs in the chain.
    """

    if len(guess) != len(chain):
        raise GuessValidationError(
            "Chain rejected",
            [make_error("guess.length", f"expected {len(chain)} words, got {len(guess)}", "$.guess")],
        )
    issues = [
        make_error("guess.word", "empty word", f"$.guess[{i}]")
        for i, word in enumerate(guess)
        if not isinstance(word, str) or not word.strip()
    ]
    if issues:
        raise GuessValidationError("Chain rejected", issues)
    return score_code([normalise_word(w) for w in guess], [normalise_word(w) for w in chain])


def word_bank(chain: Sequence[str], decoys: Sequence[str], seed: int) -> List[str]:
    """Chain words and decoys in a fixed per-puzzle order."""

    return integer_shuffle([*chain, *decoys], seed)


def word_bank_seed(puzzle_index: int, stride: int = 9973, offset: int = 42) -> int:
    return puzzle_index * stride + offset


def word_statuses(history: Iterable[GuessRecord]) -> Dict[str, Mark]:
    """Best mark each guessed word has received so far.

    ``exact`` outranks ``present``, which outranks ``absent``; a later, weaker
    mark never demotes a word.
    """

    best: Dict[str, Mark] = {}
    for record in map(as_record, history):
        for word, mark in zip(record.guess, record.evaluation.feedback):
            key = normalise_word(str(word))
            if key not in best or _PRIORITY[mark] > _PRIORITY[best[key]]:
                best[key] = mark
    return best


def hints_revealed(guess_count: int, connection_count: int) -> int:
    """One compound-word hint per guess made, capped at the number of links."""

    return max(0, min(guess_count, connection_count))


__all__ = [
    "evaluate_chain",
    "hints_revealed",
    "normalise_word",
    "word_bank",
    "word_bank_seed",
    "word_statuses",
]
