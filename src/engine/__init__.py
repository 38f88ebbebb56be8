"""Deterministic puzzle engines: seeded streams, path search and code scoring."""

from .chroma import HSL, ColorEvaluation, closeness, evaluate_color, hue_delta
from .daily_seed import calendar_seed, derive_daily_seed
from .hamiltonian import (
    GridScore,
    PathBuilder,
    generate_hamiltonian_path,
    is_hamiltonian_path,
    score_grid_attempt,
)
from .mastermind import CodeEvaluation, Mark, evaluate_code, signal_strength
from .possibility import (
    FeedbackMode,
    GuessRecord,
    count_remaining_possibilities,
    iter_consistent_codes,
    symbol_knowledge,
)
from .rng import SeededRng

__all__ = [
    "HSL",
    "CodeEvaluation",
    "ColorEvaluation",
    "FeedbackMode",
    "GridScore",
    "GuessRecord",
    "Mark",
    "PathBuilder",
    "SeededRng",
    "calendar_seed",
    "closeness",
    "count_remaining_possibilities",
    "derive_daily_seed",
    "evaluate_code",
    "evaluate_color",
    "generate_hamiltonian_path",
    "hue_delta",
    "is_hamiltonian_path",
    "iter_consistent_codes",
    "score_grid_attempt",
    "signal_strength",
    "symbol_knowledge",
]
