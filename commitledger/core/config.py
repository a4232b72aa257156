"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_DATABASE_URL = "postgresql+asyncpg://localhost/commitledger"
DEFAULT_INSTITUTION_DOMAIN = "ncsu.edu"
DEFAULT_METRIC_SOURCE = "Github"


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, supplied once at startup."""

    github_token: str | None = None
    database_url: str = DEFAULT_DATABASE_URL
    # Known non-student identities (names or emails) kept out of metrics.
    collaborators: frozenset[str] = field(default_factory=frozenset)
    institution_domain: str = DEFAULT_INSTITUTION_DOMAIN
    metric_source: str = DEFAULT_METRIC_SOURCE
    max_pages: int = 50
    max_concurrency: int = 5
    request_timeout: float = 30.0


def _env_int(key: str, default: int) -> int:
    value = int(os.environ.get(key, default))
    if value < 1:
        raise ValueError(f"{key} must be >= 1, got {value}")
    return value


def _env_float(key: str, default: float) -> float:
    value = float(os.environ.get(key, default))
    if value <= 0:
        raise ValueError(f"{key} must be > 0, got {value}")
    return value


def parse_collaborators(raw: str | None) -> frozenset[str]:
    """Split a comma-separated identity list, dropping blanks."""
    if not raw:
        return frozenset()
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


def load_settings() -> Settings:
    """Build :class:`Settings` from ``COMMITLEDGER_*`` environment variables.

    ``GITHUB_TOKEN`` is honoured when ``COMMITLEDGER_GITHUB_TOKEN`` is unset.
    Raises ``ValueError`` for non-numeric or out-of-range numeric values.
    """
    token = (
        os.environ.get("COMMITLEDGER_GITHUB_TOKEN") or os.environ.get("GITHUB_TOKEN") or ""
    ).strip()
    return Settings(
        github_token=token or None,
        database_url=os.environ.get("COMMITLEDGER_DATABASE_URL", DEFAULT_DATABASE_URL),
        collaborators=parse_collaborators(os.environ.get("COMMITLEDGER_COLLABORATORS")),
        institution_domain=os.environ.get(
            "COMMITLEDGER_INSTITUTION_DOMAIN", DEFAULT_INSTITUTION_DOMAIN
        ).lower(),
        metric_source=os.environ.get("COMMITLEDGER_METRIC_SOURCE", DEFAULT_METRIC_SOURCE),
        max_pages=_env_int("COMMITLEDGER_MAX_PAGES", 50),
        max_concurrency=_env_int("COMMITLEDGER_MAX_CONCURRENCY", 5),
        request_timeout=_env_float("COMMITLEDGER_REQUEST_TIMEOUT", 30.0),
    )
