"""Commit ledger — per-team GitHub contribution metrics."""

__version__ = "0.1.0"
