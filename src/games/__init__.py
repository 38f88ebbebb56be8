"""Daily game catalogue, puzzle selection and play sessions."""

from __future__ import annotations

from .daily import DailyPathPuzzle, DailyPuzzle, daily_path_puzzle, daily_puzzle
from .registry import GameSpec, RegistryError, get_game, list_games, load_puzzle_table
from .session import ChromaSession, CodeBreakerSession, PathSession, SessionStatus

__all__ = [
    "ChromaSession",
    "CodeBreakerSession",
    "DailyPathPuzzle",
    "DailyPuzzle",
    "GameSpec",
    "PathSession",
    "RegistryError",
    "SessionStatus",
    "daily_path_puzzle",
    "daily_puzzle",
    "get_game",
    "list_games",
    "load_puzzle_table",
]
