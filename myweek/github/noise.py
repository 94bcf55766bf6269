"""Noise filtering for the weekly activity summary.

Events are first cut at the run's cutoff, then every configured exclusion
rule drops the events it matches. Each step returns a new tuple, so the
caller's sequence is never modified and output order is input order.
"""

from __future__ import annotations

import dataclasses
import fnmatch
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import datetime as dt

    from .models import GitHubEvent
    from .rules import ExclusionRule, PayloadValue


@dataclasses.dataclass(frozen=True, slots=True)
class CompiledExclusionRule:
    """An exclusion rule ready for evaluation against events.

    Matchers short-circuit in the order type, repository, payload; payload
    fields are therefore only read from events of the rule's type.
    """

    rule_id: str
    event_type: str | None = None
    repo_pattern: str | None = None
    payload: tuple[tuple[str, PayloadValue], ...] = ()

    def matches(self, event: GitHubEvent) -> bool:
        """Return True when the event satisfies every configured matcher."""
        return (
            self._matches_type(event)
            and self._matches_repo(event)
            and self._matches_payload(event)
        )

    def _matches_type(self, event: GitHubEvent) -> bool:
        if self.event_type is None:
            return True
        return event.event_type == self.event_type

    def _matches_repo(self, event: GitHubEvent) -> bool:
        if self.repo_pattern is None:
            return True
        return fnmatch.fnmatchcase(event.repo_name, self.repo_pattern)

    def _matches_payload(self, event: GitHubEvent) -> bool:
        return all(
            _same_value(event.payload_field(name), expected)
            for name, expected in self.payload
        )


def _same_value(actual: object, expected: PayloadValue) -> bool:
    """Compare payload values without bool/int/float coercion."""
    return type(actual) is type(expected) and actual == expected


def compile_exclusion_rule(rule: ExclusionRule) -> CompiledExclusionRule:
    """Compile one rule descriptor, treating blank matchers as unset."""
    event_type = rule.event_type.strip() if rule.event_type else None
    repo = rule.repo.strip() if rule.repo else None
    return CompiledExclusionRule(
        rule_id=rule.id,
        event_type=event_type or None,
        repo_pattern=repo or None,
        payload=tuple(rule.payload.items()),
    )


def drop_before(
    events: cabc.Sequence[GitHubEvent], cutoff: dt.datetime
) -> tuple[GitHubEvent, ...]:
    """Drop events created strictly before ``cutoff``."""
    return tuple(event for event in events if event.created_at >= cutoff)


def drop_matching(
    events: cabc.Sequence[GitHubEvent], rule: CompiledExclusionRule
) -> tuple[GitHubEvent, ...]:
    """Drop every event matched by ``rule``."""
    return tuple(event for event in events if not rule.matches(event))


def filter_events(
    events: cabc.Sequence[GitHubEvent],
    *,
    cutoff: dt.datetime | None,
    rules: cabc.Sequence[ExclusionRule] = (),
) -> tuple[GitHubEvent, ...]:
    """Return the events that survive the cutoff and every exclusion rule.

    The dropped set is the union of the events before ``cutoff`` and the
    events matched by each rule, independent of rule order.
    """
    kept = tuple(events) if cutoff is None else drop_before(events, cutoff)
    for rule in rules:
        kept = drop_matching(kept, compile_exclusion_rule(rule))
    return kept
