"""Coarse sentiment scoring for vendor sentiment labels"""

from typing import Any, Iterable, Optional

POSITIVE = "POSITIVE"
NEGATIVE = "NEGATIVE"
NEUTRAL = "NEUTRAL"

# Per-segment scores are half the weight of the webinar-wide average
LABEL_SCORES = {POSITIVE: 0.5, NEGATIVE: -0.5}
OVERALL_WEIGHTS = {POSITIVE: 1, NEGATIVE: -1}


def score_label(label: Optional[str]) -> float:
    """Map a sentiment label to +0.5 / -0.5 / 0 (anything unrecognised is 0)"""
    if not label:
        return 0.0
    return LABEL_SCORES.get(label, 0.0)


def _label_of(result: Any) -> Optional[str]:
    if isinstance(result, dict):
        return result.get("sentiment")
    return getattr(result, "sentiment", None)


def overall_sentiment(results: Iterable[Any]) -> float:
    """Average sentiment across vendor results, each counted as +1 / -1 / 0

    Returns 0 for no results. Note that an all-NEUTRAL input also yields 0,
    so the two cases cannot be told apart from the value alone.
    """
    labels = [_label_of(result) for result in results or []]
    if not labels:
        return 0.0

    total = sum(OVERALL_WEIGHTS.get(label, 0) for label in labels)
    return total / len(labels)
