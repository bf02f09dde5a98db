"""Webinar insight extraction from a completed vendor transcript"""

from typing import Any, Dict, List

from ..models import KeyMoment, WebinarInsights
from .sentiment import overall_sentiment

MAX_KEYWORDS = 10
MAX_KEY_MOMENTS = 5


def _utterances(result: Dict[str, Any]) -> List[Dict[str, Any]]:
    return result.get("utterances") or []


def _highlights(result: Dict[str, Any]) -> List[Dict[str, Any]]:
    highlights = result.get("auto_highlights_result") or {}
    if isinstance(highlights, list):
        return highlights
    return highlights.get("results") or []


def _highlight_start_ms(highlight: Dict[str, Any]) -> float:
    """Start offset of a highlight; vendor spans carry it under 'timestamps'"""
    if highlight.get("start") is not None:
        return highlight["start"]
    timestamps = highlight.get("timestamps") or []
    if timestamps:
        return timestamps[0].get("start") or 0
    return 0


def count_questions(text: str) -> int:
    return (text or "").count("?")


def calculate_engagement_score(result: Dict[str, Any]) -> float:
    """min(1, utterances * distinct speakers / 500)"""
    utterances = _utterances(result)
    speaker_count = len({u.get("speaker") for u in utterances})
    return min(1.0, (len(utterances) * speaker_count) / 500)


def calculate_audience_participation(result: Dict[str, Any]) -> float:
    """Speakers beyond the presenter, five or more counting as full participation"""
    speakers = {u.get("speaker") for u in _utterances(result)}
    return max(0.0, min(1.0, (len(speakers) - 1) / 5))


def extract_key_moments(result: Dict[str, Any]) -> List[KeyMoment]:
    return [
        KeyMoment(
            timestamp=_highlight_start_ms(highlight) / 1000,
            description=highlight.get("text", ""),
            type="highlight",
        )
        for highlight in _highlights(result)[:MAX_KEY_MOMENTS]
    ]


def generate_insights(webinar_id: str, result: Dict[str, Any]) -> WebinarInsights:
    """Build WebinarInsights from a completed vendor transcript payload

    Args:
        webinar_id: Webinar the transcript belongs to
        result: Vendor transcript JSON (status 'completed')

    Returns:
        WebinarInsights ready to be upserted
    """
    return WebinarInsights(
        webinar_id=webinar_id,
        overall_sentiment=overall_sentiment(result.get("sentiment_analysis_results") or []),
        question_count=count_questions(result.get("text")),
        top_keywords=[h.get("text", "") for h in _highlights(result)[:MAX_KEYWORDS]],
        engagement_score=calculate_engagement_score(result),
        key_moments=extract_key_moments(result),
        audience_participation=calculate_audience_participation(result),
        average_confidence=result.get("confidence"),
    )
