"""Validation severity profiles (dev/ci/prod)."""

from __future__ import annotations


from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Mapping

from .errors import SEVERITY_ERROR, ValidationIssue


@dataclass(frozen=True)
class ProfileConfig:
    """Profile toggles that govern which table checks are executed."""

    name: str
    check_schema: bool = True
    check_invariants: bool = True
    warn_as_error: bool = False
    invariant_rules: Mapping[str, FrozenSet[str]] = field(default_factory=dict)
    severity_overrides: Mapping[str, Mapping[str, str]] = field(default_factory=dict)

    def is_invariant_enabled(self, table_kind: str, rule_name: str) -> bool:
        rules = self.invariant_rules.get(table_kind)
        return rules is None or rule_name in rules

    def apply_overrides(self, table_kind: str, issue: ValidationIssue) -> ValidationIssue:
        overrides: Dict[str, str] = {}
        overrides.update(self.severity_overrides.get("*", {}))
        overrides.update(self.severity_overrides.get(table_kind, {}))
        desired = overrides.get(issue.code)
        if desired and desired != issue.severity:
            return replace(issue, severity=desired)
        return issue


_ALL_RULES = {
    "code": frozenset({"unique_ids", "secret_length", "secret_symbols", "duplicate_secrets"}),
    "chain": frozenset(
        {"unique_ids", "chain_length", "distinct_words", "connection_count", "connection_words"}
    ),
    "color": frozenset({"unique_ids", "target_range", "distinct_names"}),
}

# Cosmetic checks stay out of the request path.
_PROD_RULES = {
    "code": frozenset({"secret_length", "secret_symbols"}),
    "chain": frozenset({"chain_length", "distinct_words", "connection_count"}),
    "color": frozenset({"target_range"}),
}

_PROFILES: Dict[str, ProfileConfig] = {
    "dev": ProfileConfig(name="dev", invariant_rules=_ALL_RULES),
    "ci": ProfileConfig(
        name="ci",
        warn_as_error=True,
        invariant_rules=_ALL_RULES,
        severity_overrides={"*": {"table.ids.not_sequential": SEVERITY_ERROR}},
    ),
    "prod": ProfileConfig(name="prod", invariant_rules=_PROD_RULES),
}


def get_profile(name: str | None) -> ProfileConfig:
    """Return the profile matching *name* (defaults to ``dev``)."""

    if not name:
        name = "dev"
    key = name.lower()
    if key not in _PROFILES:
        raise ValueError(f"Unknown validation profile: {name}")
    return _PROFILES[key]


__all__ = ["ProfileConfig", "get_profile"]
