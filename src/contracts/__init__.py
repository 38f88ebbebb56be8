"""Puzzle table contracts: schemas, invariants and shared error types."""

from __future__ import annotations

from .errors import ManagedValidationError, ValidationIssue, ValidationReport
from .profiles import ProfileConfig, get_profile
from .validator import assert_valid, validate

__all__ = [
    "ManagedValidationError",
    "ValidationIssue",
    "ValidationReport",
    "ProfileConfig",
    "assert_valid",
    "get_profile",
    "validate",
]
