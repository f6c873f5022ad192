"""Turn loosely-structured upstream responses into ``Recommendation`` records.

The upstream is asked for a fixed JSON schema but nothing guarantees it
answers that way: the analysis may arrive wrapped in one of several chat
envelopes, fenced in markdown, surrounded by prose, or not at all. The
normalizer walks an ordered set of extraction stages and, whatever happens,
hands back a usable recommendation. The worst case is the canned default.
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from app.models.schemas import Activity, Recommendation
from app.services.json_tree import (
    MISSING,
    as_list,
    decode_first_value,
    is_present,
    lookup,
    text_at,
    text_value,
)


logger = logging.getLogger(__name__)


DEFAULT_RECOMMENDATION_TEXT = "Unable to generate detailed analysis"
DEFAULT_IMPROVEMENTS = ("Continue with your current routine",)
DEFAULT_SUGGESTIONS = ("Consider consulting a fitness professional",)
DEFAULT_SAFETY_NOTES = (
    "Always warm up before exercise",
    "Stay hydrated",
    "Listen to your body",
)

NO_IMPROVEMENTS = "No specific improvements provided"
NO_SUGGESTIONS = "No specific suggestions provided"
NO_SAFETY_NOTES = "Follow general safety guidelines"

# (key in "analysis", label prefix) in output order
ANALYSIS_SECTIONS = (
    ("overall", "Overall:"),
    ("pace", "Pace:"),
    ("heartRate", "Heart Rate:"),
    ("caloriesBurned", "Calories:"),
)

DIRECT_PAYLOAD_KEYS = ("analysis", "improvements", "suggestions")

_JSON_FENCE = re.compile(r"```json\s*", re.IGNORECASE)
_LEADING_FENCE = re.compile(r"^\s*```\s*")
_TRAILING_FENCE = re.compile(r"```\s*$")


class FailureKind(str, Enum):
    """Why a response could not be turned into a tailored recommendation."""

    EMPTY_RESPONSE = "empty_response"
    UNPARSABLE_ENVELOPE = "unparsable_envelope"
    NO_PAYLOAD_LOCATED = "no_payload_located"
    UNPARSABLE_PAYLOAD = "unparsable_payload"
    MISSING_ACTIVITY = "missing_activity"
    UNEXPECTED_FAILURE = "unexpected_failure"


@dataclass(frozen=True)
class StageResult:
    """Value produced by a pipeline stage, or the reason it failed."""

    value: Any = None
    failure: FailureKind | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: Any) -> "StageResult":
        return cls(value=value)

    @classmethod
    def fail(cls, failure: FailureKind) -> "StageResult":
        return cls(failure=failure)


@dataclass(frozen=True)
class NormalizationOutcome:
    """A recommendation together with how it was obtained."""

    recommendation: Recommendation
    failure: FailureKind | None = None
    envelope: str | None = None

    @property
    def used_fallback(self) -> bool:
        return self.failure is not None


# --- Envelope strategies -----------------------------------------------------
# Each takes (parsed root, original raw text) and returns the payload text or
# None. They are tried in ENVELOPE_STRATEGIES order.

def candidates_envelope(root: Any, raw_text: str) -> str | None:
    """``candidates[0].content.parts[0].text``"""
    return text_at(root, "candidates", 0, "content", "parts", 0, "text")


def choices_envelope(root: Any, raw_text: str) -> str | None:
    """``choices[0].message.content``, falling back to ``choices[0].text``."""
    content = text_at(root, "choices", 0, "message", "content")
    if content is not None:
        return content
    return text_at(root, "choices", 0, "text")


def direct_payload(root: Any, raw_text: str) -> str | None:
    """The root already is the analysis object."""
    if isinstance(root, dict) and any(key in root for key in DIRECT_PAYLOAD_KEYS):
        return json.dumps(root)
    return None


def content_blocks_envelope(root: Any, raw_text: str) -> str | None:
    """Messages API body: first ``content[i].text`` string.

    Runs before ``raw_json_text``, so a body such as
    ``{"content": [{"text": "hello"}]}`` yields ``"hello"`` as the payload
    (which then fails to parse and produces the default) instead of being
    treated as a raw JSON payload with sentinel-filled fields.
    """
    for block in as_list(lookup(root, "content")):
        text = text_at(block, "text")
        if text is not None:
            return text
    return None


def raw_json_text(root: Any, raw_text: str) -> str | None:
    """Last resort: the raw response itself looks like JSON."""
    stripped = raw_text.strip()
    if stripped.startswith(("{", "[")):
        return stripped
    return None


EnvelopeStrategy = Callable[[Any, str], "str | None"]

ENVELOPE_STRATEGIES: tuple[tuple[str, EnvelopeStrategy], ...] = (
    ("candidates", candidates_envelope),
    ("choices", choices_envelope),
    ("direct", direct_payload),
    ("content_blocks", content_blocks_envelope),
    ("raw", raw_json_text),
)


# --- Stages ------------------------------------------------------------------

def parse_envelope(raw_text: str) -> StageResult:
    """Decode the top-level response, recovering an embedded fragment if needed.

    Fragment recovery starts at ``min(max(find("{"), 0), max(find("["), 0))``
    and gives up when that index is 0. Because an absent bracket clamps to 0,
    text containing only one kind of bracket is never recovered.
    """
    root = decode_first_value(raw_text)
    if root is not MISSING:
        return StageResult.success(root)

    trimmed = raw_text.strip()
    start = min(max(trimmed.find("{"), 0), max(trimmed.find("["), 0))
    if start <= 0:
        return StageResult.fail(FailureKind.UNPARSABLE_ENVELOPE)

    root = decode_first_value(trimmed[start:])
    if root is MISSING:
        return StageResult.fail(FailureKind.UNPARSABLE_ENVELOPE)
    return StageResult.success(root)


def locate_payload(root: Any, raw_text: str) -> StageResult:
    """Run the envelope strategies in order; value is ``(name, payload_text)``."""
    for name, strategy in ENVELOPE_STRATEGIES:
        payload = strategy(root, raw_text)
        if payload is not None and payload.strip():
            return StageResult.success((name, payload))
    return StageResult.fail(FailureKind.NO_PAYLOAD_LOCATED)


def strip_markdown_fences(payload: str) -> str:
    """Remove ```` ```json ```` markers and a trailing ```` ``` ```` fence."""
    cleaned = _JSON_FENCE.sub("", payload)
    cleaned = _LEADING_FENCE.sub("", cleaned)
    cleaned = _TRAILING_FENCE.sub("", cleaned)
    return cleaned.strip()


def parse_payload(payload: str) -> StageResult:
    value = decode_first_value(strip_markdown_fences(payload))
    if value is MISSING:
        return StageResult.fail(FailureKind.UNPARSABLE_PAYLOAD)
    return StageResult.success(value)


def build_analysis_text(analysis: Any) -> str:
    sections = []
    for key, label in ANALYSIS_SECTIONS:
        value = lookup(analysis, key)
        if is_present(value):
            sections.append(f"{label}{text_value(value)}\n\n")
    return "".join(sections).strip()


def _paired_entries(items: Any, first: str, second: str, sentinel: str) -> list[str]:
    entries = [
        f"{text_value(lookup(item, first))}: {text_value(lookup(item, second))}"
        for item in as_list(items)
    ]
    return entries or [sentinel]


def extract_improvements(payload: Any) -> list[str]:
    return _paired_entries(lookup(payload, "improvements"), "area", "recommendation", NO_IMPROVEMENTS)


def extract_suggestions(payload: Any) -> list[str]:
    return _paired_entries(lookup(payload, "suggestions"), "workout", "description", NO_SUGGESTIONS)


def extract_safety_notes(payload: Any) -> list[str]:
    notes = [text_value(item) for item in as_list(lookup(payload, "safety"))]
    return notes or [NO_SAFETY_NOTES]


def default_recommendation(activity: Activity | None) -> Recommendation:
    """Canned recommendation used whenever a tailored one cannot be produced."""
    return Recommendation(
        activity_id=activity.id if activity is not None else None,
        user_id=activity.user_id if activity is not None else None,
        activity_type=activity.type if activity is not None else None,
        recommendation_text=DEFAULT_RECOMMENDATION_TEXT,
        improvements=list(DEFAULT_IMPROVEMENTS),
        suggestions=list(DEFAULT_SUGGESTIONS),
        safety_notes=list(DEFAULT_SAFETY_NOTES),
    )


class ResponseNormalizer:
    """Convert raw upstream text into a ``Recommendation`` without ever raising."""

    def normalize(self, activity: Activity | None, raw_text: str | None) -> Recommendation:
        return self.normalize_with_outcome(activity, raw_text).recommendation

    def normalize_with_outcome(
        self,
        activity: Activity | None,
        raw_text: str | None,
    ) -> NormalizationOutcome:
        """Normalize and report which envelope matched or why the default was used."""
        try:
            return self._normalize(activity, raw_text)
        except Exception:
            logger.exception(
                "Unexpected error while processing AI response for activity %s",
                _activity_label(activity),
            )
            return self._fallback(activity, FailureKind.UNEXPECTED_FAILURE)

    def _normalize(self, activity: Activity | None, raw_text: str | None) -> NormalizationOutcome:
        label = _activity_label(activity)

        if activity is None:
            logger.warning("No activity supplied; returning default recommendation")
            return self._fallback(activity, FailureKind.MISSING_ACTIVITY)

        if raw_text is None or not raw_text.strip():
            logger.warning("AI response is empty for activity %s", label)
            return self._fallback(activity, FailureKind.EMPTY_RESPONSE)

        envelope = parse_envelope(raw_text)
        if not envelope.ok:
            logger.warning(
                "Unable to parse AI response as JSON and no JSON fragment found for activity %s",
                label,
            )
            return self._fallback(activity, envelope.failure)

        located = locate_payload(envelope.value, raw_text)
        if not located.ok:
            logger.warning(
                "Unable to locate JSON content in AI response for activity %s. Raw response: %s",
                label,
                raw_text,
            )
            return self._fallback(activity, located.failure)
        envelope_name, payload_text = located.value
        logger.debug("Located payload via %s envelope for activity %s", envelope_name, label)

        parsed = parse_payload(payload_text)
        if not parsed.ok:
            logger.warning(
                "Cleaned AI content is not valid JSON for activity %s. Content: %s",
                label,
                payload_text,
            )
            return self._fallback(activity, parsed.failure)

        payload = parsed.value
        recommendation = Recommendation(
            activity_id=activity.id,
            user_id=activity.user_id,
            activity_type=activity.type,
            recommendation_text=build_analysis_text(lookup(payload, "analysis")),
            improvements=extract_improvements(payload),
            suggestions=extract_suggestions(payload),
            safety_notes=extract_safety_notes(payload),
        )
        return NormalizationOutcome(recommendation=recommendation, envelope=envelope_name)

    @staticmethod
    def _fallback(activity: Activity | None, failure: FailureKind) -> NormalizationOutcome:
        return NormalizationOutcome(recommendation=default_recommendation(activity), failure=failure)


def _activity_label(activity: Activity | None) -> str:
    if activity is None or activity.id is None:
        return "unknown"
    return activity.id


_default_normalizer = ResponseNormalizer()


def normalize(activity: Activity | None, raw_text: str | None) -> Recommendation:
    """Module-level shortcut for ``ResponseNormalizer().normalize``."""
    return _default_normalizer.normalize(activity, raw_text)
