"""Markdown renderer for the weekly activity summary.

Each non-empty category becomes a level-1 heading, a blank line, one bullet
per item and two trailing blank lines. Empty categories are omitted, so a
week without activity renders to no lines at all.

Usage
-----
>>> from myweek.reporting.summary import ActivitySummary
>>> render_summary_markdown(ActivitySummary(commits_pushed={"octo/reef": 5}))
['# Commits pushed to repos', '', '* `octo/reef`: 5 commits', '', '']

"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .summary import ActivitySummary

REPOS_CREATED_HEADING = "Repos created"
COMMITS_PUSHED_HEADING = "Commits pushed to repos"


def _render_section(
    lines: list[str],
    heading: str,
    items: cabc.Iterable[str],
) -> None:
    """Append a bulleted section if items are non-empty."""
    bullets = [f"* {item}" for item in items]
    if not bullets:
        return
    lines.append(f"# {heading}")
    lines.append("")
    lines.extend(bullets)
    lines.extend(["", ""])


def render_summary_markdown(summary: ActivitySummary) -> list[str]:
    """Render the summary categories as Markdown lines.

    Sections appear in a fixed order: repositories created, then commits
    pushed.
    """
    lines: list[str] = []
    _render_section(lines, REPOS_CREATED_HEADING, summary.repos_created)
    _render_section(
        lines,
        COMMITS_PUSHED_HEADING,
        (
            f"`{repo}`: {count} commits"
            for repo, count in summary.commits_pushed.items()
        ),
    )
    return lines
