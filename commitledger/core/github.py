"""GitHub submission-link parsing and classification."""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import urlparse

GITHUB_HOSTS = frozenset({"github.com", "www.github.com"})
PULL_MARKER = "pull"


@dataclass(frozen=True)
class SubmissionLink:
    """A parsed submission URL.

    ``pull_number`` is ``None`` for repository links.
    """

    url: str
    owner: str
    repository: str
    pull_number: int | None = None

    @property
    def is_pull_request(self) -> bool:
        return self.pull_number is not None


@dataclass
class ClassifiedLinks:
    """Submission links split by kind, in submission order."""

    pull_requests: list[str] = field(default_factory=list)
    repositories: list[str] = field(default_factory=list)


def _split(url: str) -> tuple[str, list[str]] | None:
    """Return ``(host, path_segments)`` or None if *url* has no host."""
    url = url.strip()
    if not url:
        return None
    if "://" not in url:
        url = f"https://{url}"
    parsed = urlparse(url)
    host = (parsed.hostname or "").lower()
    if not host:
        return None
    segments = [s for s in parsed.path.split("/") if s]
    return host, segments


def is_github_link(url: str) -> bool:
    split = _split(url)
    return split is not None and split[0] in GITHUB_HOSTS


def is_pull_request_link(url: str) -> bool:
    """True when *url* is on github.com and its third path segment is ``pull``.

    Matching is done on parsed path segments, so a repository named
    ``pull-tools`` is not mistaken for a pull request.
    """
    split = _split(url)
    if split is None or split[0] not in GITHUB_HOSTS:
        return False
    segments = split[1]
    return len(segments) >= 3 and segments[2] == PULL_MARKER


def parse_submission_link(url: str) -> SubmissionLink:
    """Parse a github.com pull-request or repository URL.

    Handles:
      - https://github.com/owner/repo
      - https://github.com/owner/repo.git
      - https://github.com/owner/repo/pull/12 (trailing segments such as
        ``/files`` are ignored)
      - github.com/owner/repo (scheme omitted)

    Raises ValueError if the URL cannot be parsed.
    """
    split = _split(url)
    if split is None or split[0] not in GITHUB_HOSTS:
        raise ValueError(f"not a GitHub link: {url!r}")
    segments = split[1]

    if len(segments) >= 3 and segments[2] == PULL_MARKER:
        if len(segments) < 4 or not segments[3].isdigit():
            raise ValueError(f"cannot parse pull request number: {url!r}")
        return SubmissionLink(
            url=url,
            owner=segments[0],
            repository=segments[1],
            pull_number=int(segments[3]),
        )

    if len(segments) != 2:
        raise ValueError(f"cannot parse GitHub repo URL: {url!r}")
    owner, repo = segments
    if repo.endswith(".git"):
        repo = repo[:-4]
    if not repo:
        raise ValueError(f"cannot parse GitHub repo URL: {url!r}")
    return SubmissionLink(url=url, owner=owner, repository=repo)


def classify_links(links: list[str]) -> ClassifiedLinks:
    """Partition a team's submitted links into pull-request and repository links.

    Links outside github.com are dropped. When at least one pull-request link
    is present, repository links are ignored entirely: pull-request data
    supersedes repository history.
    """
    result = ClassifiedLinks()
    repositories: list[str] = []
    for link in links:
        if is_pull_request_link(link):
            result.pull_requests.append(link)
        elif is_github_link(link):
            repositories.append(link)

    if not result.pull_requests:
        result.repositories = repositories
    return result
