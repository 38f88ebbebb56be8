# hamiltonian.py
# Daily Path solutions: a seeded Hamiltonian path over an N x N grid, found by
# randomized backtracking with a deterministic snake fallback, plus the
# order-independent segment scoring used to grade a player's trace.

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple

from contracts.errors import IllegalMoveError
from project_config import get_section

from .rng import SeededRng

_LOGGER = logging.getLogger(__name__)

Cell = Tuple[int, int]
Path = Tuple[Cell, ...]
Segment = Tuple[Cell, Cell]

PATH_CONFIG = get_section("games.daily-path", {})
SEARCH_CONFIG = PATH_CONFIG.get("search", {})
DEFAULT_GRID_SIZE = int(PATH_CONFIG.get("grid_size", 5))
DEFAULT_MAX_STEPS = int(SEARCH_CONFIG.get("max_steps", 1_000_000))

# ---------- Grid helpers ----------


def neighbours(cell: Cell, grid_size: int) -> List[Cell]:
    """In-bounds orthogonal neighbours in up, down, left, right order."""
    r, c = cell
    out = []
    for nr, nc in ((r - 1, c), (r + 1, c), (r, c - 1), (r, c + 1)):
        if 0 <= nr < grid_size and 0 <= nc < grid_size:
            out.append((nr, nc))
    return out


def is_adjacent(a: Cell, b: Cell) -> bool:
    return abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1


def snake_path(grid_size: int) -> Path:
    """Boustrophedon walk: rows top to bottom, alternating direction."""
    cells = []
    for r in range(grid_size):
        cols = range(grid_size) if r % 2 == 0 else range(grid_size - 1, -1, -1)
        for c in cols:
            cells.append((r, c))
    return tuple(cells)


def is_hamiltonian_path(path: Sequence[Cell], grid_size: int) -> bool:
    """True when ``path`` covers every cell once and moves one step at a time."""
    if len(path) != grid_size * grid_size:
        return False
    for r, c in path:
        if not (0 <= r < grid_size and 0 <= c < grid_size):
            return False
    if len(set(path)) != len(path):
        return False
    return all(is_adjacent(path[i], path[i + 1]) for i in range(len(path) - 1))


# ---------- Solution generator ----------


def generate_hamiltonian_path(
    grid_size: int = DEFAULT_GRID_SIZE,
    seed: int = 0,
    *,
    max_steps: Optional[int] = DEFAULT_MAX_STEPS,
) -> Path:
    """Return a reproducible Hamiltonian path for ``seed``.

    The start cell is drawn from the seeded stream (row first, then column).
    Each time the search enters a cell, the unvisited neighbours are shuffled
    with the same stream, so the branch order is a pure function of the seed.
    Backtracking runs on an explicit stack whose random-number consumption
    matches the recursive formulation step for step.

    ``max_steps`` caps the number of cells placed during the search; when the
    cap is hit, or every branch is exhausted, the snake path is returned.
    """
    if grid_size <= 0:
        raise ValueError("grid_size must be a positive integer")

    rng = SeededRng(seed)
    total = grid_size * grid_size
    start = (rng.randrange(grid_size), rng.randrange(grid_size))

    path: List[Cell] = [start]
    visited = {start}

    def open_options(cell: Cell) -> List[Cell]:
        options = [n for n in neighbours(cell, grid_size) if n not in visited]
        rng.shuffle(options)
        return options

    def search() -> bool:
        if len(path) == total:
            return True
        # On odd grids every path alternates colours and has one more cell of
        # the (r + c) even colour, so it can only start on an even cell.
        if grid_size % 2 == 1 and sum(start) % 2 == 1:
            _LOGGER.debug("start %s has minority parity; no path exists", start)
            return False

        # Each frame holds the shuffled options of the cell at the same depth
        # in ``path`` and the index of the next option to try.
        stack = [[open_options(start), 0]]
        steps = 0
        while stack:
            frame = stack[-1]
            options, idx = frame
            if idx >= len(options):
                stack.pop()
                if stack:
                    visited.discard(path.pop())
                continue
            frame[1] = idx + 1

            steps += 1
            if max_steps is not None and steps > max_steps:
                _LOGGER.info("search budget of %d steps exhausted for seed %r", max_steps, seed)
                return False

            nxt = options[idx]
            visited.add(nxt)
            path.append(nxt)
            if len(path) == total:
                return True
            stack.append([open_options(nxt), 0])
        return False

    if search():
        return tuple(path)

    _LOGGER.info("falling back to snake path for grid %d and seed %r", grid_size, seed)
    return snake_path(grid_size)


# ---------- Attempt scoring ----------


def segment_key(a: Cell, b: Cell) -> Segment:
    """Canonical, direction-free key for the edge between ``a`` and ``b``."""
    return (a, b) if a <= b else (b, a)


def path_segments(path: Sequence[Cell]) -> FrozenSet[Segment]:
    return frozenset(segment_key(path[i], path[i + 1]) for i in range(len(path) - 1))


@dataclass(frozen=True)
class GridScore:
    """How many of the solution's segments an attempt reproduced."""

    correct_segments: int
    total_segments: int

    @property
    def is_win(self) -> bool:
        return self.correct_segments == self.total_segments

    @property
    def percent(self) -> int:
        if self.total_segments == 0:
            return 100
        # Halves round up, matching the gauge the scores were tuned against.
        return int(self.correct_segments * 100 / self.total_segments + 0.5)

    def to_dict(self) -> dict:
        return {
            "correct_segments": self.correct_segments,
            "total_segments": self.total_segments,
        }


def score_grid_attempt(solution_path: Sequence[Cell], attempt_path: Sequence[Cell]) -> GridScore:
    """Count the solution segments present in ``attempt_path``.

    Segments are unordered, so tracing the solution backwards scores the same
    as tracing it forwards.
    """
    solution = path_segments(solution_path)
    attempt = path_segments(attempt_path)
    return GridScore(
        correct_segments=len(solution & attempt),
        total_segments=max(0, len(solution_path) - 1),
    )


# ---------- Player trace ----------


class PathBuilder:
    """Mutable trace of a player's path, anchored at the solution start.

    Selecting the current last cell again removes it (the start cell is never
    removed).  Any other selection must be an unvisited, in-bounds neighbour
    of the last cell.
    """

    def __init__(self, start: Cell, grid_size: int = DEFAULT_GRID_SIZE) -> None:
        if not (0 <= start[0] < grid_size and 0 <= start[1] < grid_size):
            raise IllegalMoveError(f"start cell {start} lies outside a {grid_size}x{grid_size} grid")
        self.grid_size = grid_size
        self.start = start
        self._cells: List[Cell] = [start]
        self._visited = {start}

    @property
    def cells(self) -> Path:
        return tuple(self._cells)

    @property
    def last(self) -> Cell:
        return self._cells[-1]

    @property
    def is_full(self) -> bool:
        return len(self._cells) == self.grid_size * self.grid_size

    def can_extend(self, cell: Cell) -> bool:
        r, c = cell
        if not (0 <= r < self.grid_size and 0 <= c < self.grid_size):
            return False
        return cell not in self._visited and is_adjacent(self.last, cell)

    def select(self, cell: Cell) -> None:
        """Extend the trace with ``cell`` or undo when it is the last cell."""
        cell = (int(cell[0]), int(cell[1]))
        if len(self._cells) > 1 and cell == self.last:
            self._visited.discard(self._cells.pop())
            return
        if cell in self._visited:
            raise IllegalMoveError(f"cell {cell} is already part of the path")
        if not self.can_extend(cell):
            raise IllegalMoveError(f"cell {cell} is not adjacent to {self.last}")
        self._cells.append(cell)
        self._visited.add(cell)

    def extend(self, cells: Iterable[Cell]) -> None:
        for cell in cells:
            self.select(cell)

    def reset(self) -> None:
        self._cells = [self.start]
        self._visited = {self.start}


__all__ = [
    "Cell",
    "DEFAULT_GRID_SIZE",
    "DEFAULT_MAX_STEPS",
    "GridScore",
    "Path",
    "PathBuilder",
    "Segment",
    "generate_hamiltonian_path",
    "is_adjacent",
    "is_hamiltonian_path",
    "neighbours",
    "path_segments",
    "score_grid_attempt",
    "segment_key",
    "snake_path",
]
