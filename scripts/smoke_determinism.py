#!/usr/bin/env python3
"""Smoke-test deterministic behaviour of the daily puzzle derivation."""

from __future__ import annotations

import datetime as dt
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from engine.hamiltonian import is_hamiltonian_path
from games.daily import daily_answers, daily_path_puzzle

DAY = dt.date(2026, 3, 14)
NEXT_DAY = DAY + dt.timedelta(days=1)


def main() -> int:
    first = dict(daily_answers(DAY))
    second = dict(daily_answers(DAY))
    for key, digest in first.items():
        if second[key] != digest:
            print(f"determinism failed for {key}: {digest} vs {second[key]}")
            return 1

    third = dict(daily_answers(NEXT_DAY))
    for key, digest in first.items():
        if third[key] == digest:
            print(f"next day produced identical {key}: {digest}")
            return 1

    puzzle = daily_path_puzzle(DAY)
    if not is_hamiltonian_path(puzzle.path, puzzle.grid_size):
        print(f"path for {DAY} is not a Hamiltonian path")
        return 1

    print("Determinism smoke-test passed.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
