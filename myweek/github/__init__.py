"""GitHub activity feed retrieval, pagination and noise filtering."""

from __future__ import annotations

from .client import GitHubRESTClient, GitHubRESTConfig, PageFetcher
from .feed import fetch_user_events
from .models import GitHubEvent, Page, PageMetadata, RateLimit
from .noise import filter_events
from .pagination import CreatedSince, fetch_conditionally, merge_pages, paginate
from .rules import ExclusionRule, ExclusionRuleError, load_exclusion_rules

__all__ = [
    "CreatedSince",
    "ExclusionRule",
    "ExclusionRuleError",
    "GitHubEvent",
    "GitHubRESTClient",
    "GitHubRESTConfig",
    "Page",
    "PageFetcher",
    "PageMetadata",
    "RateLimit",
    "fetch_conditionally",
    "fetch_user_events",
    "filter_events",
    "load_exclusion_rules",
    "merge_pages",
    "paginate",
]
