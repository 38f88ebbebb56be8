"""Shared error types for puzzle inputs and puzzle tables."""

from __future__ import annotations


from dataclasses import dataclass
from typing import List, Sequence

SEVERITY_ERROR = "ERROR"
SEVERITY_WARN = "WARN"


@dataclass(frozen=True)
class ValidationIssue:
    """Single finding produced by an input check or a table rule."""

    code: str
    msg: str
    path: str
    severity: str


@dataclass(frozen=True)
class ValidationReport:
    """Aggregate result of validating one puzzle table."""

    ok: bool
    errors: List[ValidationIssue]
    warnings: List[ValidationIssue]


def make_error(code: str, msg: str, path: str) -> ValidationIssue:
    """Construct an error-level :class:`ValidationIssue`."""

    return ValidationIssue(code=code, msg=msg, path=path, severity=SEVERITY_ERROR)


def make_warning(code: str, msg: str, path: str) -> ValidationIssue:
    """Construct a warning-level :class:`ValidationIssue`."""

    return ValidationIssue(code=code, msg=msg, path=path, severity=SEVERITY_WARN)


def _summarise(message: str, issues: Sequence[ValidationIssue]) -> str:
    if not issues:
        return message
    details = "; ".join(f"{issue.path}: {issue.msg}" for issue in issues)
    return f"{message} ({details})"


class GuessValidationError(ValueError):
    """A guess was rejected before it reached the evaluator."""

    def __init__(self, message: str, issues: Sequence[ValidationIssue] = ()) -> None:
        super().__init__(_summarise(message, issues))
        self.issues = list(issues)


class ManagedValidationError(ValueError):
    """A puzzle table failed schema or invariant validation."""

    def __init__(self, message: str, report: ValidationReport) -> None:
        super().__init__(_summarise(message, report.errors))
        self.report = report


class IllegalMoveError(ValueError):
    """A grid trace was extended with a cell it cannot accept."""


class SessionClosedError(RuntimeError):
    """A submission arrived after the session was won or lost."""


__all__ = [
    "SEVERITY_ERROR",
    "SEVERITY_WARN",
    "GuessValidationError",
    "IllegalMoveError",
    "ManagedValidationError",
    "SessionClosedError",
    "ValidationIssue",
    "ValidationReport",
    "make_error",
    "make_warning",
]
