from __future__ import annotations

import datetime as dt

import pytest

from contracts.errors import GuessValidationError, IllegalMoveError, SessionClosedError
from engine.chroma import HSL
from engine.mastermind import Mark
from games import ChromaSession, CodeBreakerSession, PathSession, SessionStatus, daily_puzzle

NEW_YEAR = dt.date(2026, 1, 1)
SQUARE = ((0, 0), (0, 1), (1, 1), (1, 0))


def _signal_lock(**kwargs) -> CodeBreakerSession:
    return CodeBreakerSession.from_daily(daily_puzzle("signal-lock", NEW_YEAR, **kwargs))


def test_code_guess_feedback_and_labels() -> None:
    session = _signal_lock()
    evaluation = session.submit([1, 2, 3, 4])
    assert evaluation.feedback == (Mark.PRESENT, Mark.ABSENT, Mark.PRESENT, Mark.ABSENT)
    assert session.labelled(evaluation) == ["drifting", "static", "drifting", "static"]
    assert session.signal_strength() == 10
    assert session.attempts_left == 7
    assert session.status is SessionStatus.PLAYING


def test_symbol_names_win_and_close_the_session() -> None:
    session = _signal_lock()
    assert session.signal_strength() == 0
    assert session.submit(["3", "8", "1", "6"]).is_solved
    assert session.status is SessionStatus.WON
    assert session.signal_strength() == 100
    with pytest.raises(SessionClosedError):
        session.submit([3, 8, 1, 6])


def test_running_out_of_guesses_loses() -> None:
    session = _signal_lock(env={"PUZZLE_SIGNAL_LOCK_MAX_GUESSES": "2"})
    session.submit([0, 0, 0, 0])
    assert session.status is SessionStatus.PLAYING
    session.submit([9, 9, 9, 9])
    assert session.status is SessionStatus.LOST
    assert session.is_over
    with pytest.raises(SessionClosedError):
        session.submit([3, 8, 1, 6])


def test_rejected_guess_keeps_the_attempt() -> None:
    session = _signal_lock()
    with pytest.raises(GuessValidationError) as info:
        session.submit(["3", "8", "X", "6"])
    assert info.value.issues[0].path == "$.guess[2]"
    with pytest.raises(GuessValidationError):
        session.submit([3, 8, 1])
    assert session.attempts_used == 0
    assert session.history == ()


def test_remaining_possibilities_shrink() -> None:
    session = _signal_lock()
    assert session.remaining_possibilities() == 10 ** 4
    session.submit([1, 2, 3, 4])
    remaining = session.remaining_possibilities()
    assert 0 < remaining < 10 ** 4


def test_untracked_game_reports_no_count() -> None:
    session = CodeBreakerSession.from_daily(daily_puzzle("spellcast", NEW_YEAR))
    session.submit(["ember", "frost", "gale", "stone"])
    assert session.remaining_possibilities() is None


def test_counts_mode_game_keeps_more_candidates() -> None:
    session = CodeBreakerSession.from_daily(daily_puzzle("signal-break", NEW_YEAR))
    session.submit(["circle", "triangle", "square", "diamond"])
    remaining = session.remaining_possibilities()
    assert remaining is not None and remaining > 0


def test_chain_session_reveals_hints_per_guess() -> None:
    puzzle = daily_puzzle("link-five", dt.date(2026, 2, 10))
    session = CodeBreakerSession.from_daily(puzzle)
    assert session.hints_revealed() == 0
    evaluation = session.submit(["back", "side", "fire", "door", "up"])
    assert evaluation.feedback == (Mark.EXACT, Mark.PRESENT, Mark.PRESENT, Mark.ABSENT, Mark.EXACT)
    assert session.hints_revealed() == 1
    statuses = session.word_statuses()
    assert statuses["BACK"] is Mark.EXACT
    assert statuses["DOOR"] is Mark.ABSENT
    assert session.submit(["BACK", "FIRE", "SIDE", "LINE", "UP"]).is_solved
    assert session.status is SessionStatus.WON


def test_path_session_requires_a_full_trace() -> None:
    session = PathSession(SQUARE, 2, max_guesses=3)
    session.select((0, 1))
    with pytest.raises(IllegalMoveError):
        session.submit()
    assert session.attempts_used == 0


def test_path_session_scores_and_resets_on_a_miss() -> None:
    session = PathSession(SQUARE, 2, max_guesses=3)
    score = session.submit([(0, 0), (1, 0), (1, 1), (0, 1)])
    assert (score.correct_segments, score.total_segments) == (2, 3)
    assert score.percent == 67
    assert session.builder.cells == ((0, 0),)
    assert session.submit(SQUARE[1:]).is_win
    assert session.status is SessionStatus.WON
    assert [s.percent for s in session.scores] == [67, 100]


def test_rejected_trace_keeps_the_current_one() -> None:
    session = PathSession(SQUARE, 2, max_guesses=3)
    session.select((0, 1))
    with pytest.raises(IllegalMoveError):
        session.submit([(0, 0), (1, 1)])
    with pytest.raises(IllegalMoveError):
        session.submit([(0, 0), (1, 0)])
    assert session.builder.cells == ((0, 0), (0, 1))
    assert session.attempts_used == 0


def test_path_session_rejects_illegal_moves() -> None:
    session = PathSession(SQUARE, 2, max_guesses=3)
    with pytest.raises(IllegalMoveError):
        session.select((1, 1))


def test_chroma_session_wins_on_target() -> None:
    puzzle = daily_puzzle("chroma", dt.date(2026, 1, 5))
    session = ChromaSession.from_daily(puzzle)
    assert session.max_guesses == 10
    first = session.submit(HSL(340, 70, 20))
    assert not first.is_win
    assert session.submit(HSL(340, 70, 48)).closeness == 100
    assert session.best_closeness == 100
    assert session.status is SessionStatus.WON
