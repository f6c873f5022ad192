"""Tests for the analysis prompt."""
import json

from app.models.schemas import Activity
from app.services.prompt_builder import (
    RESPONSE_SCHEMA_EXAMPLE,
    PromptBuilder,
    build_activity_prompt,
    format_additional_metrics,
)


def test_prompt_embeds_activity_attributes(activity):
    prompt = build_activity_prompt(activity)

    assert "Activity Type: RUNNING" in prompt
    assert "Duration: 45 minutes" in prompt
    assert "Calories Burned: 520" in prompt
    assert 'Additional Metrics: {"avgHeartRate": 148, "distanceKm": 8.2}' in prompt


def test_prompt_contains_schema_and_instruction(activity):
    prompt = build_activity_prompt(activity)

    assert RESPONSE_SCHEMA_EXAMPLE in prompt
    assert prompt.startswith("Analyze this fitness activity")
    assert "Ensure the response follows the EXACT JSON format shown above." in prompt


def test_schema_example_is_valid_json():
    schema = json.loads(RESPONSE_SCHEMA_EXAMPLE)

    assert set(schema["analysis"]) == {"overall", "pace", "heartRate", "caloriesBurned"}
    assert set(schema["improvements"][0]) == {"area", "recommendation"}
    assert set(schema["suggestions"][0]) == {"workout", "description"}
    assert all(isinstance(item, str) for item in schema["safety"])


def test_prompt_is_deterministic():
    first = Activity(type="CYCLING", additional_metrics={"b": 2, "a": 1})
    second = Activity(type="CYCLING", additional_metrics={"a": 1, "b": 2})

    assert build_activity_prompt(first) == build_activity_prompt(second)
    assert PromptBuilder().build(first) == build_activity_prompt(first)


def test_format_additional_metrics():
    assert format_additional_metrics(None) == "None provided"
    assert format_additional_metrics("   ") == "None provided"
    assert format_additional_metrics("felt strong") == "felt strong"
    assert format_additional_metrics({"z": 1, "a": [1, 2]}) == '{"a": [1, 2], "z": 1}'
