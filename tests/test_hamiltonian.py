from __future__ import annotations

import pytest

from contracts.errors import IllegalMoveError
from engine.hamiltonian import (
    PathBuilder,
    generate_hamiltonian_path,
    is_hamiltonian_path,
    neighbours,
    path_segments,
    score_grid_attempt,
    segment_key,
    snake_path,
)
from engine.rng import SeededRng

SQUARE = ((0, 0), (0, 1), (1, 1), (1, 0))


def test_same_seed_same_path() -> None:
    assert generate_hamiltonian_path(5, 20260209) == generate_hamiltonian_path(5, 20260209)


@pytest.mark.parametrize("grid_size", [1, 2, 3, 4, 5])
def test_result_is_always_a_hamiltonian_path(grid_size: int) -> None:
    for seed in (1, 7, 20260101, 20260209):
        path = generate_hamiltonian_path(grid_size, seed)
        assert is_hamiltonian_path(path, grid_size)


def test_start_cell_comes_from_the_seeded_stream() -> None:
    rng = SeededRng(20260209)
    expected = (rng.randrange(4), rng.randrange(4))
    # Every cell of an even grid starts some Hamiltonian path.
    assert generate_hamiltonian_path(4, 20260209)[0] == expected


def test_odd_grids_never_start_on_minority_colour() -> None:
    for seed in range(1, 40):
        path = generate_hamiltonian_path(3, seed)
        assert sum(path[0]) % 2 == 0


def test_exhausted_budget_falls_back_to_snake() -> None:
    assert generate_hamiltonian_path(4, 123, max_steps=1) == snake_path(4)


def test_single_cell_grid() -> None:
    assert generate_hamiltonian_path(1, 99) == ((0, 0),)


def test_rejects_empty_grid() -> None:
    with pytest.raises(ValueError):
        generate_hamiltonian_path(0, 1)


def test_snake_path_alternates_direction() -> None:
    assert snake_path(3) == (
        (0, 0), (0, 1), (0, 2),
        (1, 2), (1, 1), (1, 0),
        (2, 0), (2, 1), (2, 2),
    )
    assert is_hamiltonian_path(snake_path(6), 6)


def test_neighbour_order_is_up_down_left_right() -> None:
    assert neighbours((1, 1), 3) == [(0, 1), (2, 1), (1, 0), (1, 2)]
    assert neighbours((0, 0), 3) == [(1, 0), (0, 1)]


def test_is_hamiltonian_path_rejects_gaps_and_repeats() -> None:
    assert not is_hamiltonian_path(((0, 0), (1, 1), (0, 1), (1, 0)), 2)
    assert not is_hamiltonian_path(((0, 0), (0, 1), (0, 0), (1, 0)), 2)
    assert not is_hamiltonian_path(((0, 0), (0, 1), (1, 1)), 2)


def test_segment_key_is_direction_free() -> None:
    assert segment_key((1, 2), (1, 1)) == segment_key((1, 1), (1, 2)) == ((1, 1), (1, 2))


def test_full_match_wins() -> None:
    path = generate_hamiltonian_path(5, 20260209)
    score = score_grid_attempt(path, path)
    assert score.correct_segments == score.total_segments == 24
    assert score.is_win
    assert score.percent == 100


def test_reversed_attempt_scores_the_same() -> None:
    path = generate_hamiltonian_path(5, 42)
    assert score_grid_attempt(path, tuple(reversed(path))).is_win


def test_partial_match_counts_shared_segments() -> None:
    attempt = ((0, 0), (1, 0), (1, 1), (0, 1))
    score = score_grid_attempt(SQUARE, attempt)
    assert (score.correct_segments, score.total_segments) == (2, 3)
    assert not score.is_win
    assert score.percent == 67


def test_short_attempt_has_no_segments() -> None:
    score = score_grid_attempt(SQUARE, ((0, 0),))
    assert score.correct_segments == 0
    assert score.total_segments == 3
    assert path_segments(((0, 0),)) == frozenset()


def test_builder_extends_and_undoes() -> None:
    builder = PathBuilder((0, 0), 2)
    builder.select((0, 1))
    builder.select((1, 1))
    assert builder.cells == ((0, 0), (0, 1), (1, 1))
    builder.select((1, 1))
    assert builder.last == (0, 1)
    builder.extend([(1, 1), (1, 0)])
    assert builder.is_full


def test_builder_rejects_illegal_moves() -> None:
    builder = PathBuilder((0, 0), 3)
    with pytest.raises(IllegalMoveError):
        builder.select((1, 1))
    with pytest.raises(IllegalMoveError):
        builder.select((0, 0))
    builder.select((0, 1))
    with pytest.raises(IllegalMoveError):
        builder.select((0, 0))
    with pytest.raises(IllegalMoveError):
        builder.select((-1, 1))


def test_builder_reset_returns_to_start() -> None:
    builder = PathBuilder((1, 1), 3)
    builder.extend([(0, 1), (0, 0)])
    builder.reset()
    assert builder.cells == ((1, 1),)
    assert builder.can_extend((0, 1))


def test_builder_start_must_be_on_grid() -> None:
    with pytest.raises(IllegalMoveError):
        PathBuilder((3, 0), 3)
