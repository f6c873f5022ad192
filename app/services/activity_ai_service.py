"""Generate recommendations for activities via the text-generation upstream."""
from __future__ import annotations

import logging

from app.models.schemas import Activity, Recommendation
from app.services.llm_client import LLMClient, TextGenerationClient
from app.services.prompt_builder import PromptBuilder
from app.services.response_normalizer import ResponseNormalizer


logger = logging.getLogger(__name__)


class ActivityAIService:
    """Prompt the upstream about an activity and normalize whatever comes back."""

    def __init__(
        self,
        client: TextGenerationClient | None = None,
        prompt_builder: PromptBuilder | None = None,
        normalizer: ResponseNormalizer | None = None,
    ) -> None:
        self.client = client if client is not None else LLMClient()
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.normalizer = normalizer or ResponseNormalizer()

    def generate_recommendation(self, activity: Activity) -> Recommendation:
        """
        Build the analysis prompt, ask the upstream and normalize the answer.

        Upstream transport errors propagate to the caller. Anything wrong with
        the response content yields the default recommendation instead.
        """
        prompt = self.prompt_builder.build(activity)
        logger.info("Requesting AI analysis for activity %s (type=%s)", activity.id, activity.type)
        raw_response = self.client.ask(prompt)
        logger.debug("Response from AI for activity %s: %s", activity.id, raw_response)

        outcome = self.normalizer.normalize_with_outcome(activity, raw_response)
        if outcome.used_fallback:
            logger.info(
                "Default recommendation used for activity %s (reason=%s)",
                activity.id,
                outcome.failure.value,
            )
        else:
            logger.info(
                "Recommendation generated for activity %s via %s envelope",
                activity.id,
                outcome.envelope,
            )
        return outcome.recommendation
