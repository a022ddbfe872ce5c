from pydantic import BaseModel, Field, field_validator


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class EngagementSegmentRule(BaseModel):
    name: str
    min_seconds: float = Field(ge=0)


class AnalyticsRules(BaseModel):
    time_ranges: dict[str, int]
    default_time_range: str
    bucket_type: str = "day"
    trend_days: int = Field(default=7, ge=1)
    country_limit: int = Field(default=6, ge=1)
    engagement_segments: list[EngagementSegmentRule]

    @field_validator("time_ranges")
    @classmethod
    def _positive_days(cls, v: dict[str, int]) -> dict[str, int]:
        for key, days in v.items():
            if days <= 0:
                raise ValueError(f"time range {key!r} must be a positive number of days")
        return v

    @field_validator("bucket_type")
    @classmethod
    def _known_bucket(cls, v: str) -> str:
        if v not in ("day", "hour"):
            raise ValueError("bucket_type must be 'day' or 'hour'")
        return v


class WritingRules(BaseModel):
    gateway_url: str
    model: str
    api_key_env: str
    timeout_seconds: float = 60.0


class OpsRules(BaseModel):
    data_dir_required: bool
    required_env: list[str]


class Rules(BaseModel):
    project: ProjectRules
    analytics: AnalyticsRules
    writing: WritingRules
    ops: OpsRules
