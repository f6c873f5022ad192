"""Replay a captured upstream response through the normalizer (or ask the live upstream)."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.logging_config import configure_logging
from app.models.schemas import Activity
from app.services.activity_ai_service import ActivityAIService
from app.services.response_normalizer import ResponseNormalizer


logger = logging.getLogger("scripts.replay_response")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Normalize an upstream response into a recommendation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Normalize a saved response body for a running activity
  python scripts/replay_response.py --activity activity.json --response body.json

  # Ask the configured upstream for a fresh analysis
  python scripts/replay_response.py --activity activity.json --live
        """
    )
    parser.add_argument(
        "--activity",
        type=Path,
        required=True,
        help="Path to a JSON file describing the activity"
    )
    parser.add_argument(
        "--response",
        type=Path,
        help="Path to a captured raw upstream response body"
    )
    parser.add_argument(
        "--live",
        action="store_true",
        help="Call the upstream instead of reading --response"
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    configure_logging()

    activity = Activity.model_validate_json(args.activity.read_text(encoding="utf-8"))

    if args.live:
        recommendation = ActivityAIService().generate_recommendation(activity)
    elif args.response is not None:
        raw_response = args.response.read_text(encoding="utf-8")
        outcome = ResponseNormalizer().normalize_with_outcome(activity, raw_response)
        if outcome.used_fallback:
            logger.warning("Fell back to default recommendation: %s", outcome.failure.value)
        else:
            logger.info("Payload located via %s envelope", outcome.envelope)
        recommendation = outcome.recommendation
    else:
        logger.error("Either --response or --live is required")
        return 2

    print(json.dumps(recommendation.model_dump(mode="json", by_alias=True), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
