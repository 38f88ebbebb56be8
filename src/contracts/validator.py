"""Public facade for puzzle table validation."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Mapping, Tuple

import jsonschema

from . import loader, profiles, rulebook
from .errors import (
    SEVERITY_WARN,
    ManagedValidationError,
    ValidationIssue,
    ValidationReport,
    make_error,
)
from .profiles import ProfileConfig

_LOGGER = logging.getLogger(__name__)


def _choose_profile(profile: str | ProfileConfig | None) -> ProfileConfig:
    if isinstance(profile, ProfileConfig):
        return profile
    if profile in (None, "", "auto"):
        env = os.environ.get("PUZZLE_VALIDATION_PROFILE")
        return profiles.get_profile(env)
    return profiles.get_profile(str(profile))


def _jsonschema_path(error: jsonschema.ValidationError) -> str:
    components: List[str] = ["$"]
    for part in error.absolute_path:
        if isinstance(part, int):
            components.append(f"[{part}]")
        else:
            components.append(f".{part}")
    return "".join(components)


def _schema_stage(table: Any, table_kind: str) -> List[ValidationIssue]:
    if not isinstance(table, dict):
        return [make_error("type.mismatch", "Puzzle table must be a JSON object", "$")]
    try:
        validator = loader.compiled_validator(table_kind)
    except KeyError:
        return [make_error("schema.not_found", f"Unknown puzzle table kind {table_kind}", "$")]

    errors = sorted(validator.iter_errors(table), key=lambda e: [str(p) for p in e.absolute_path])
    return [make_error("schema.violation", error.message, _jsonschema_path(error)) for error in errors]


def _apply_overrides(
    profile: ProfileConfig, table_kind: str, issues: List[ValidationIssue]
) -> Tuple[List[ValidationIssue], List[ValidationIssue]]:
    errors: List[ValidationIssue] = []
    warnings: List[ValidationIssue] = []
    for issue in issues:
        adjusted = profile.apply_overrides(table_kind, issue)
        if adjusted.severity == SEVERITY_WARN:
            warnings.append(adjusted)
        else:
            errors.append(adjusted)
    return errors, warnings


def validate(
    table: Dict[str, Any],
    table_kind: str,
    game: Mapping[str, Any] | None = None,
    profile: str | ProfileConfig | None = None,
) -> ValidationReport:
    """Check ``table`` against its schema and the invariants of ``game``.

    ``game`` carries the fields the invariants need (``alphabet``,
    ``code_length``).  Invariants only run when the schema stage is clean so
    rules never see malformed entries.
    """

    profile_cfg = _choose_profile(profile)
    game = game or {}
    all_errors: List[ValidationIssue] = []
    all_warnings: List[ValidationIssue] = []

    if profile_cfg.check_schema:
        schema_errors, schema_warnings = _apply_overrides(
            profile_cfg, table_kind, _schema_stage(table, table_kind)
        )
        all_errors.extend(schema_errors)
        all_warnings.extend(schema_warnings)

    if profile_cfg.check_invariants and not all_errors and isinstance(table, dict):
        invariant_issues = rulebook.run_invariants(table, table_kind, game, profile_cfg)
        inv_errors, inv_warnings = _apply_overrides(profile_cfg, table_kind, invariant_issues)
        all_errors.extend(inv_errors)
        all_warnings.extend(inv_warnings)

    if all_errors:
        _LOGGER.warning(
            "%s table %r failed validation with %d error(s)",
            table_kind,
            table.get("game") if isinstance(table, dict) else None,
            len(all_errors),
        )
    return ValidationReport(ok=not all_errors, errors=all_errors, warnings=all_warnings)


def assert_valid(
    table: Dict[str, Any],
    table_kind: str,
    game: Mapping[str, Any] | None = None,
    profile: str | ProfileConfig | None = None,
) -> None:
    profile_cfg = _choose_profile(profile)
    report = validate(table, table_kind, game, profile=profile_cfg)
    if report.ok and not (profile_cfg.warn_as_error and report.warnings):
        return
    issues = report.errors[:]
    if profile_cfg.warn_as_error:
        issues.extend(report.warnings)
    codes = ", ".join(issue.code for issue in issues[:5])
    if len(issues) > 5:
        codes += ", …"
    raise ManagedValidationError(f"Validation failed for {table_kind} table: {codes}", report)


__all__ = [
    "ManagedValidationError",
    "assert_valid",
    "validate",
]
