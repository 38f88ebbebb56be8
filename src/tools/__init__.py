"""Operational tooling for the daily puzzles."""
