"""Exclusion rule descriptors and their YAML loader.

Rules are plain data: each names an event type, a repository glob and/or
exact payload field values. They are authored in a YAML file such as::

    rules:
      - id: cran-issue-comments
        event_type: IssueCommentEvent
        repo: "cran/*"
      - id: pak-nightly-build
        event_type: PushEvent
        payload:
          ref: refs/heads/packages

"""

from __future__ import annotations

from pathlib import Path

import msgspec
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

YAML_VERSION = (1, 2)

PayloadValue = str | int | bool


class ExclusionRule(msgspec.Struct, kw_only=True, frozen=True):
    """Descriptor for events to drop from the summary.

    Attributes
    ----------
    id
        Unique identifier used in logs and validation messages.
    description
        Optional note on why the events are noise.
    event_type
        Exact event ``type`` to match, e.g. ``PushEvent``.
    repo
        Case-sensitive glob matched against ``repo.name``.
    payload
        Payload fields and the exact values they must hold.

    """

    id: str
    description: str | None = None
    event_type: str | None = None
    repo: str | None = None
    payload: dict[str, PayloadValue] = msgspec.field(default_factory=dict)

    @property
    def has_matchers(self) -> bool:
        """Return True when at least one matcher is configured."""
        return bool(self.event_type or self.repo or self.payload)


class ExclusionRuleSet(msgspec.Struct, kw_only=True):
    """Top-level document of a rules file."""

    rules: list[ExclusionRule] = msgspec.field(default_factory=list)


class ExclusionRuleError(ValueError):
    """Raised when exclusion rules cannot be loaded or fail validation."""

    def __init__(self, issues: list[str]) -> None:
        """Capture validation issues whilst preserving the aggregated message."""
        super().__init__("\n".join(issues))
        self.issues = issues


def validate_rules(rules: list[ExclusionRule]) -> tuple[ExclusionRule, ...]:
    """Return the rules as a tuple, or raise listing every problem found."""
    issues: list[str] = []
    seen: set[str] = set()
    for index, rule in enumerate(rules):
        if not rule.id.strip():
            issues.append(f"rule #{index + 1} has an empty id")
        elif rule.id in seen:
            issues.append(f"rule {rule.id!r} is defined more than once")
        seen.add(rule.id)
        if not rule.has_matchers:
            issues.append(
                f"rule {rule.id!r} has no matchers and would drop every event"
            )
    if issues:
        raise ExclusionRuleError(issues)
    return tuple(rules)


def load_exclusion_rules(path: Path | str) -> tuple[ExclusionRule, ...]:
    """Parse and validate a YAML exclusion rules file."""
    yaml = _yaml()
    path_obj = Path(path)

    try:
        loaded = yaml.load(path_obj.read_text(encoding="utf-8"))
    except (OSError, YAMLError) as exc:
        raise ExclusionRuleError([f"failed to parse YAML: {exc}"]) from exc

    if loaded is None:
        return ()

    try:
        rule_set = msgspec.convert(loaded, type=ExclusionRuleSet)
    except msgspec.ValidationError as exc:
        raise ExclusionRuleError([f"schema validation failed: {exc}"]) from exc

    return validate_rules(rule_set.rules)


def _yaml() -> YAML:
    yaml = YAML(typ="safe")
    yaml.version = YAML_VERSION
    yaml.allow_duplicate_keys = False
    return yaml
