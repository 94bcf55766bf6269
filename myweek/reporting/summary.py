"""Aggregate filtered events into the categories shown in the summary."""

from __future__ import annotations

import dataclasses
import typing as typ

from myweek.github.errors import MalformedEventError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from myweek.github.models import GitHubEvent

CREATE_EVENT = "CreateEvent"
PUSH_EVENT = "PushEvent"


@dataclasses.dataclass(frozen=True, slots=True)
class ActivitySummary:
    """Categories derived from one run's events.

    Attributes
    ----------
    repos_created
        Names of repositories created, in feed order, duplicates kept.
    commits_pushed
        Total pushed commits per repository name. Iteration follows first
        appearance in the feed, but no order is guaranteed to callers.

    """

    repos_created: tuple[str, ...] = ()
    commits_pushed: dict[str, int] = dataclasses.field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        """Return True when every category is empty."""
        return not self.repos_created and not self.commits_pushed


def repos_created(events: cabc.Iterable[GitHubEvent]) -> tuple[str, ...]:
    """Return the names of repositories created by ``CreateEvent`` events."""
    return tuple(
        event.repo_name
        for event in events
        if event.event_type == CREATE_EVENT
        and event.payload_field("ref_type") == "repository"
    )


def _commit_count(event: GitHubEvent) -> int:
    """Return the number of commits carried by a push event.

    ``payload.commits`` is counted when present; otherwise the integer
    ``payload.size`` is used.
    """
    payload = event.payload
    commits = payload.get("commits")
    if isinstance(commits, list):
        return len(commits)
    size = payload.get("size")
    if isinstance(size, int) and not isinstance(size, bool):
        return size
    raise MalformedEventError.missing_field("payload.commits", event_id=event.event_id)


def commits_pushed(events: cabc.Iterable[GitHubEvent]) -> dict[str, int]:
    """Return pushed commit totals grouped by repository name."""
    totals: dict[str, int] = {}
    for event in events:
        if event.event_type != PUSH_EVENT:
            continue
        repo = event.repo_name
        totals[repo] = totals.get(repo, 0) + _commit_count(event)
    return totals


def summarize_events(events: cabc.Sequence[GitHubEvent]) -> ActivitySummary:
    """Build every summary category from the filtered events."""
    return ActivitySummary(
        repos_created=repos_created(events),
        commits_pushed=commits_pushed(events),
    )
