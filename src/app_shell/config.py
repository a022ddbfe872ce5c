import logging
import os
from pathlib import Path

from src.rules.models import Rules

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when rules or environment are not fit for startup."""


def validate_ops_rules(rules: Rules, base_dir: Path) -> None:
    """
    Validate operational requirements before startup (fail-fast).
    """
    problems: list[str] = []

    # 1. Required env
    missing = [env_var for env_var in rules.ops.required_env if env_var not in os.environ]
    if missing:
        problems.append(f"Missing required environment variables: {', '.join(missing)}")

    # 2. Analytics time ranges must include the default
    analytics = rules.analytics
    if analytics.default_time_range not in analytics.time_ranges:
        problems.append(
            f"Default time range {analytics.default_time_range!r} "
            f"is not one of: {', '.join(analytics.time_ranges)}"
        )

    # 3. Engagement segments must be non-empty, start at 0, strictly increasing
    bounds = [s.min_seconds for s in analytics.engagement_segments]
    if not bounds:
        problems.append("At least one engagement segment is required")
    elif bounds[0] != 0:
        problems.append("First engagement segment must start at 0 seconds")
    elif any(b <= a for a, b in zip(bounds, bounds[1:])):
        problems.append("Engagement segment bounds must be strictly increasing")

    # 4. Migrations directory present when a data dir is required
    if rules.ops.data_dir_required and not (base_dir / "migrations").is_dir():
        problems.append(f"Migrations directory not found under {base_dir}")

    if problems:
        for problem in problems:
            logger.critical(problem)
        raise ConfigurationError("; ".join(problems))

    logger.info("Configuration validated.")
