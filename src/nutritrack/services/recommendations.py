"""Meal recommendations from the text-generation collaborator."""

import logging
import re
from dataclasses import dataclass
from typing import Protocol

from nutritrack.domain.nutrition import MacroProfile

_logger = logging.getLogger(__name__)

MAX_SUGGESTION_LENGTH = 80
MAX_SUGGESTION_WORDS = 8

_LIST_MARKER = re.compile(r"^(?:[-*•]|\d+[.)])\s+")

_UNUSABLE_ANSWERS = {"none", "n/a", "no recommendation", "no data available"}

# Sentence punctuation or refusal wording means prose, not a food name.
_PROSE = re.compile(
    r"[?!;:]|\.\s"
    r"|\b(?:sorry|apologi[sz]e|cannot|can't|unable|as an ai)\b"
    r"|^(?:i|i'm|i'd|here's|here is|sure|certainly)\b",
    re.IGNORECASE,
)


class RecommendationClient(Protocol):
    """Interface for LLM text generation."""

    async def generate(self, *, model: str, prompt: str) -> str:
        """Return generated text for a prompt."""


@dataclass
class RecommendationRequester:
    """Asks the LLM for a single food that fits the remaining goals."""

    client: RecommendationClient
    model: str

    async def recommend(self, remaining: MacroProfile, meal_label: str) -> str | None:
        """Return one suggested food, or None when no usable answer is available."""
        prompt = build_prompt(remaining, meal_label)
        try:
            raw = await self.client.generate(model=self.model, prompt=prompt)
        except Exception as exc:
            _logger.warning("Recommendation request failed: %s", exc)
            return None
        suggestion = parse_suggestion(raw)
        if suggestion is None:
            _logger.warning("Recommendation output unusable: %r", raw)
        return suggestion


def build_prompt(remaining: MacroProfile, meal_label: str) -> str:
    """Build the natural-language request for one food suggestion."""
    return (
        "You are NutriTrack, a nutrition assistant. "
        f"Suggest exactly one food or dish for {meal_label}. "
        "The user still needs today: "
        f"{remaining.calories:.0f} kcal, "
        f"{remaining.protein_g:.0f}g protein, "
        f"{remaining.carbs_g:.0f}g carbs, "
        f"{remaining.fat_g:.0f}g fat. "
        "Reply with the food name only, no explanation."
    )


def parse_suggestion(raw: object) -> str | None:
    """Extract a short food name from free-form model output."""
    if not isinstance(raw, str):
        return None
    lines = [line.strip() for line in raw.strip().splitlines() if line.strip()]
    if not lines:
        return None
    suggestion = _LIST_MARKER.sub("", lines[0]).strip("\"'`* ").rstrip(".")
    if not suggestion or len(suggestion) > MAX_SUGGESTION_LENGTH:
        return None
    if suggestion.lower() in _UNUSABLE_ANSWERS:
        return None
    if _PROSE.search(suggestion) or len(suggestion.split()) > MAX_SUGGESTION_WORDS:
        return None
    return suggestion
