"""Unit tests for cutoff and exclusion rule filtering."""

from __future__ import annotations

import datetime as dt

import pytest

from myweek.github.errors import MalformedEventError
from myweek.github.models import GitHubEvent
from myweek.github.noise import (
    compile_exclusion_rule,
    drop_before,
    drop_matching,
    filter_events,
)
from myweek.github.rules import ExclusionRule
from tests.helpers.github_events import (
    BASE_TIME,
    create_repo_event,
    event_record,
    issue_comment_event,
    push_event,
)

_CUTOFF = BASE_TIME - dt.timedelta(days=7)

CRAN_COMMENTS = ExclusionRule(
    id="cran-issue-comments", event_type="IssueCommentEvent", repo="cran/*"
)
PAK_NIGHTLY = ExclusionRule(
    id="pak-nightly-build",
    event_type="PushEvent",
    payload={"ref": "refs/heads/packages"},
)
MIRROR_PUSHES = ExclusionRule(id="mirror-pushes", repo="*/mirror")


def _ids(events: tuple[GitHubEvent, ...]) -> list[str | None]:
    return [event.event_id for event in events]


@pytest.fixture
def feed() -> tuple[GitHubEvent, ...]:
    """Return a mixed feed, newest first."""
    return (
        push_event("r-lib/pak", 3, ref="refs/heads/packages"),
        issue_comment_event("cran/dplyr"),
        push_event("octo/reef", 2, created_at=BASE_TIME - dt.timedelta(days=1)),
        create_repo_event("octo/kelp", created_at=BASE_TIME - dt.timedelta(days=2)),
        issue_comment_event("octo/reef", created_at=BASE_TIME - dt.timedelta(days=3)),
        push_event("octo/mirror", 1, created_at=BASE_TIME - dt.timedelta(days=4)),
        push_event("octo/reef", 1, created_at=_CUTOFF),
        push_event("octo/reef", 4, created_at=_CUTOFF - dt.timedelta(seconds=1)),
    )


class TestDropBefore:
    """Tests for the cutoff filter."""

    def test_keeps_events_at_or_after_cutoff(
        self, feed: tuple[GitHubEvent, ...]
    ) -> None:
        """Only events strictly before the cutoff are dropped."""
        kept = drop_before(feed, _CUTOFF)

        assert _ids(kept) == _ids(feed[:-1])

    def test_every_kept_event_is_within_the_window(
        self, feed: tuple[GitHubEvent, ...]
    ) -> None:
        """No kept event predates the cutoff."""
        assert all(event.created_at >= _CUTOFF for event in drop_before(feed, _CUTOFF))

    def test_input_is_not_modified(self, feed: tuple[GitHubEvent, ...]) -> None:
        """A new tuple is returned."""
        events = list(feed)

        drop_before(events, _CUTOFF)

        assert len(events) == len(feed)


class TestExclusionRules:
    """Tests for compiled exclusion rules."""

    def test_type_and_repo_glob(self, feed: tuple[GitHubEvent, ...]) -> None:
        """Comments on cran/* are dropped, comments elsewhere are kept."""
        kept = drop_matching(feed, compile_exclusion_rule(CRAN_COMMENTS))

        assert feed[1] not in kept
        assert feed[4] in kept, "Comments outside cran/* should survive."

    def test_type_and_payload(self, feed: tuple[GitHubEvent, ...]) -> None:
        """Pushes to refs/heads/packages are dropped."""
        kept = drop_matching(feed, compile_exclusion_rule(PAK_NIGHTLY))

        assert _ids(kept) == _ids(feed[1:])

    def test_repo_glob_is_case_sensitive(self) -> None:
        """Globs follow case-sensitive fnmatch semantics."""
        rule = compile_exclusion_rule(ExclusionRule(id="cran", repo="cran/*"))

        assert rule.matches(issue_comment_event("cran/dplyr")) is True
        assert rule.matches(issue_comment_event("CRAN/dplyr")) is False

    def test_type_mismatch_skips_payload_check(self) -> None:
        """Payload fields are not read from events of another type."""
        rule = compile_exclusion_rule(PAK_NIGHTLY)
        comment = GitHubEvent(
            record=event_record("IssueCommentEvent", "r-lib/pak", payload={})
        )

        assert rule.matches(comment) is False

    def test_missing_payload_field_on_matching_type_raises(self) -> None:
        """A candidate event lacking a payload field the rule reads is malformed."""
        rule = compile_exclusion_rule(PAK_NIGHTLY)
        push = GitHubEvent(record=event_record("PushEvent", "r-lib/pak", payload={}))

        with pytest.raises(MalformedEventError) as exc_info:
            rule.matches(push)

        assert exc_info.value.field == "payload.ref"

    def test_blank_matchers_are_treated_as_unset(self) -> None:
        """Whitespace-only matchers match everything."""
        compiled = compile_exclusion_rule(
            ExclusionRule(id="blank", event_type=" ", repo="", payload={"a": 1})
        )

        assert compiled.event_type is None
        assert compiled.repo_pattern is None
        assert compiled.payload == (("a", 1),)

    def test_payload_values_compare_with_their_json_type(self) -> None:
        """Booleans, integers and floats never match one another."""
        forced = compile_exclusion_rule(
            ExclusionRule(id="forced", event_type="PushEvent", payload={"forced": True})
        )
        single = compile_exclusion_rule(
            ExclusionRule(id="single", event_type="PushEvent", payload={"size": 1})
        )

        def _push(**payload: object) -> GitHubEvent:
            return GitHubEvent(
                record=event_record("PushEvent", "octo/reef", payload=payload)
            )

        assert forced.matches(_push(forced=True)) is True
        assert forced.matches(_push(forced=1)) is False, (
            "Integer 1 should not match a boolean true matcher."
        )
        assert single.matches(_push(size=1)) is True
        assert single.matches(_push(size=1.0)) is False
        assert single.matches(_push(size=True)) is False


class TestFilterEvents:
    """Tests for the composed filter."""

    def test_applies_cutoff_then_rules(self, feed: tuple[GitHubEvent, ...]) -> None:
        """The result is the window minus every rule's matches."""
        kept = filter_events(
            feed, cutoff=_CUTOFF, rules=(CRAN_COMMENTS, PAK_NIGHTLY, MIRROR_PUSHES)
        )

        assert _ids(kept) == _ids((feed[2], feed[3], feed[4], feed[6]))

    def test_output_preserves_input_order(
        self, feed: tuple[GitHubEvent, ...]
    ) -> None:
        """Kept events appear in the order they were given."""
        kept = filter_events(feed, cutoff=_CUTOFF, rules=(MIRROR_PUSHES,))

        positions = [feed.index(event) for event in kept]
        assert positions == sorted(positions)

    def test_is_idempotent(self, feed: tuple[GitHubEvent, ...]) -> None:
        """Filtering filtered events changes nothing."""
        rules = (CRAN_COMMENTS, PAK_NIGHTLY)
        once = filter_events(feed, cutoff=_CUTOFF, rules=rules)

        assert filter_events(once, cutoff=_CUTOFF, rules=rules) == once

    def test_rule_order_does_not_matter(self, feed: tuple[GitHubEvent, ...]) -> None:
        """Rules are independent: any order drops the same events."""
        forward = filter_events(
            feed, cutoff=_CUTOFF, rules=(CRAN_COMMENTS, PAK_NIGHTLY, MIRROR_PUSHES)
        )
        backward = filter_events(
            feed, cutoff=_CUTOFF, rules=(MIRROR_PUSHES, PAK_NIGHTLY, CRAN_COMMENTS)
        )

        assert forward == backward

    def test_non_matching_rule_changes_nothing(
        self, feed: tuple[GitHubEvent, ...]
    ) -> None:
        """A rule with no matches leaves the windowed events intact."""
        rule = ExclusionRule(id="nothing", event_type="GollumEvent")

        kept = filter_events(feed, cutoff=_CUTOFF, rules=(rule,))

        assert kept == drop_before(feed, _CUTOFF)

    def test_without_cutoff_only_rules_apply(
        self, feed: tuple[GitHubEvent, ...]
    ) -> None:
        """A None cutoff skips the window step."""
        kept = filter_events(feed, cutoff=None, rules=(PAK_NIGHTLY,))

        assert _ids(kept) == _ids(feed[1:])

    def test_no_rules_keeps_the_window(self, feed: tuple[GitHubEvent, ...]) -> None:
        """With no rules configured only the cutoff applies."""
        assert filter_events(feed, cutoff=_CUTOFF) == drop_before(feed, _CUTOFF)
