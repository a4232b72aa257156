"""Per-author, per-date commit accounting for one team run."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

DATE_LENGTH = 10  # "YYYY-MM-DD"


def truncate_date(timestamp: str | None) -> str:
    """Day bucket of an ISO-8601 timestamp.

    The first ten characters are taken as-is, with no timezone
    normalization: ``2024-02-01T23:30:00-05:00`` lands on 2024-02-01.
    """
    return (timestamp or "")[:DATE_LENGTH]


class AuthorDateAccountant:
    """Accumulates commit counts for a single team run.

    Commits by excluded identities (matched on name or email) are dropped
    silently. The first email seen for an author name is kept; later
    emails for the same name are ignored.
    """

    def __init__(self, excluded: Iterable[str] = ()) -> None:
        self._excluded = frozenset(excluded)
        self._emails: dict[str, str] = {}
        self._counts: dict[str, defaultdict[str, int]] = {}
        self._dates: set[str] = set()

    def is_excluded(self, author_name: str | None, author_email: str | None) -> bool:
        return author_name in self._excluded or author_email in self._excluded

    def record(self, author_name: str | None, author_email: str | None, date: str) -> bool:
        """Count one commit. Returns False if it was discarded.

        Commits without a date (GitHub may report a null timestamp) are
        discarded like excluded ones.
        """
        if not date:
            return False
        if self.is_excluded(author_name, author_email):
            return False
        name = author_name or ""
        self._emails.setdefault(name, author_email or "")
        self._counts.setdefault(name, defaultdict(int))[date] += 1
        self._dates.add(date)
        return True

    @property
    def authors(self) -> dict[str, str]:
        """Author name → first-seen email."""
        return dict(self._emails)

    @property
    def commits_by_author(self) -> dict[str, dict[str, int]]:
        return {name: dict(sorted(days.items())) for name, days in self._counts.items()}

    def author_totals(self) -> dict[str, int]:
        return {name: sum(days.values()) for name, days in self._counts.items()}

    def sorted_dates(self) -> list[str]:
        return sorted(self._dates)
