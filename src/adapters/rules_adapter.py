"""
Rules adapter - exposes the analytics section of rules.yaml as AnalyticsRulesPort.
"""

from __future__ import annotations

from src.rules.models import AnalyticsRules


class AnalyticsRulesAdapter:
    """Implements AnalyticsRulesPort over validated rules."""

    def __init__(self, rules: AnalyticsRules) -> None:
        self._rules = rules

    def get_time_ranges(self) -> dict[str, int]:
        return dict(self._rules.time_ranges)

    def get_trend_days(self) -> int:
        return self._rules.trend_days

    def get_country_limit(self) -> int:
        return self._rules.country_limit

    def get_segment_bounds(self) -> tuple[tuple[str, float], ...]:
        return tuple((s.name, s.min_seconds) for s in self._rules.engagement_segments)
