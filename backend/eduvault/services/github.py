from __future__ import annotations
import asyncio
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable
import httpx
import structlog
from eduvault.config import settings

log = structlog.get_logger()

ACTIVITY_WEEKS = 15
ACTIVITY_TRIES = 3
ACTIVITY_RETRY_DELAY = 1.5

_REPO_RE = re.compile(r"github\.com/([^/\s]+)/([^/\s?#]+)")


@dataclass
class RepoMetadata:
    title: str
    description: str = ""
    stars: int = 0
    forks: int = 0
    last_commit_at: datetime | None = None
    topics: list[str] = field(default_factory=list)


def parse_github_url(url: str | None) -> tuple[str, str] | None:
    """(owner, repo) from any github.com repository URL, or None."""
    if not url:
        return None
    m = _REPO_RE.search(url)
    if not m:
        return None
    repo = m.group(2)
    if repo.endswith(".git"):
        repo = repo[:-4]
    if not repo:
        return None
    return m.group(1), repo


def _parse_ts(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def pad_weeks(totals: list[int], weeks: int = ACTIVITY_WEEKS) -> list[int]:
    recent = totals[-weeks:]
    return [0] * (weeks - len(recent)) + recent


class GitHubClient:
    """Read-only calls against the public GitHub REST API. Failures never raise."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        retry_delay: float = ACTIVITY_RETRY_DELAY,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.base_url = (base_url or settings.github_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.github_timeout_seconds
        self._transport = transport
        self.retry_delay = retry_delay
        self._sleep = sleep

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={"Accept": "application/vnd.github.v3+json"},
            transport=self._transport,
        )

    async def fetch_metadata(self, owner: str, repo: str) -> RepoMetadata | None:
        try:
            async with self._client() as client:
                r = await client.get(f"/repos/{owner}/{repo}")
                r.raise_for_status()
                data = r.json()
        except (httpx.HTTPError, ValueError) as e:
            log.warning("github_metadata_failed", repo=f"{owner}/{repo}", error=str(e))
            return None
        return RepoMetadata(
            title=data.get("name") or repo,
            description=data.get("description") or "",
            stars=int(data.get("stargazers_count") or 0),
            forks=int(data.get("forks_count") or 0),
            last_commit_at=_parse_ts(data.get("pushed_at")),
            topics=list(data.get("topics") or []),
        )

    async def fetch_commit_activity(self, owner: str, repo: str) -> list[int]:
        """
        Weekly commit totals for the last ACTIVITY_WEEKS weeks, oldest first.
        GitHub answers 202 while it computes the stats, so retry a few times
        before settling for an all-zero graph.
        """
        async with self._client() as client:
            for attempt in range(ACTIVITY_TRIES):
                try:
                    r = await client.get(f"/repos/{owner}/{repo}/stats/commit_activity")
                    if r.status_code == 200:
                        weeks = r.json()
                        if isinstance(weeks, list):
                            return pad_weeks([int(w.get("total") or 0) for w in weeks])
                    else:
                        log.info("github_stats_pending", repo=f"{owner}/{repo}", status=r.status_code)
                except (httpx.HTTPError, ValueError) as e:
                    log.warning("github_stats_failed", repo=f"{owner}/{repo}", error=str(e))
                if attempt < ACTIVITY_TRIES - 1:
                    await self._sleep(self.retry_delay)
        return [0] * ACTIVITY_WEEKS


def get_github_client() -> GitHubClient:
    return GitHubClient()
