"""Pydantic models describing activities, recommendations and API payloads."""
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model exposing camelCase field names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Activity(CamelModel):
    """A tracked workout submitted for analysis."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str | None = None
    user_id: str | None = None
    type: str
    duration_minutes: int = Field(default=0, ge=0)
    calories_burned: int = Field(default=0, ge=0)
    additional_metrics: dict[str, Any] | str | None = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Recommendation(CamelModel):
    """AI-derived feedback for a single activity."""

    activity_id: str | None = None
    user_id: str | None = None
    activity_type: str | None = None
    recommendation_text: str = ""
    improvements: list[str] = Field(min_length=1)
    suggestions: list[str] = Field(min_length=1)
    safety_notes: list[str] = Field(min_length=1)
    created_at: datetime = Field(default_factory=_utcnow)


class NormalizeRequest(CamelModel):
    """Schema for replaying a captured upstream response through the normalizer."""

    activity: Activity
    raw_response: str | None = None


class PromptResponse(BaseModel):
    """Schema for the rendered analysis prompt."""

    prompt: str
