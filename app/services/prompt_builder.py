"""Render the analysis instruction sent to the text-generation upstream."""
from __future__ import annotations

import json
from typing import Any

from app.models.schemas import Activity


RESPONSE_SCHEMA_EXAMPLE = """{
  "analysis": {
    "overall": "Overall analysis here",
    "pace": "Pace analysis here",
    "heartRate": "Heart rate analysis here",
    "caloriesBurned": "Calories analysis here"
  },
  "improvements": [
    {
      "area": "Area name",
      "recommendation": "Detailed recommendation"
    }
  ],
  "suggestions": [
    {
      "workout": "Workout name",
      "description": "Detailed workout description"
    }
  ],
  "safety": [
    "Safety point 1",
    "Safety point 2"
  ]
}"""

PROMPT_TEMPLATE = """Analyze this fitness activity and provide detailed recommendations in the following EXACT JSON format:
{schema}

Analyze this activity:
Activity Type: {activity_type}
Duration: {duration} minutes
Calories Burned: {calories}
Additional Metrics: {metrics}

Provide detailed analysis focusing on performance, improvements, next workout suggestions, and safety guidelines.
Ensure the response follows the EXACT JSON format shown above.
"""


def format_additional_metrics(metrics: dict[str, Any] | str | None) -> str:
    """Render free-form metrics deterministically (sorted keys for mappings)."""
    if metrics is None:
        return "None provided"
    if isinstance(metrics, str):
        return metrics.strip() or "None provided"
    return json.dumps(metrics, sort_keys=True, default=str)


def build_activity_prompt(activity: Activity) -> str:
    """Build the instruction asking for a JSON analysis of ``activity``."""
    return PROMPT_TEMPLATE.format(
        schema=RESPONSE_SCHEMA_EXAMPLE,
        activity_type=activity.type,
        duration=activity.duration_minutes,
        calories=activity.calories_burned,
        metrics=format_additional_metrics(activity.additional_metrics),
    )


class PromptBuilder:
    """Stateless wrapper so the prompt step can be swapped in services and tests."""

    def build(self, activity: Activity) -> str:
        return build_activity_prompt(activity)
