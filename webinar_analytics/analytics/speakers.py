"""Per-speaker aggregation of transcript segments"""

import logging
from typing import Dict, List, Sequence

from ..models import SpeakerAnalytics, SpeakerAnalyticsResponse, TranscriptSegment
from .time_format import format_duration, round_half_up

logger = logging.getLogger(__name__)


def aggregate_speakers(segments: Sequence[TranscriptSegment]) -> List[SpeakerAnalytics]:
    """Fold segments into one SpeakerAnalytics per speaker label

    Speakers keep first-seen order until the final sort, so ties on
    total_time come out in the order the speakers first spoke. Segments
    without a label are grouped under "Unknown Speaker".

    Args:
        segments: Segments ordered by start_time

    Returns:
        SpeakerAnalytics sorted by total_time, longest first. Empty when
        there are no segments.
    """
    if not segments:
        return []

    speakers: Dict[str, SpeakerAnalytics] = {}

    for segment in segments:
        name = segment.speaker_label
        record = speakers.get(name)
        if record is None:
            record = SpeakerAnalytics(name=name)
            speakers[name] = record

        record.total_time += segment.duration
        record.turns += 1
        record.total_confidence += segment.confidence if segment.confidence is not None else 0.0
        record.segments.append(segment)

        if segment.sentiment is not None:
            record.sentiment_scores.append(segment.sentiment)

    total_duration = sum(record.total_time for record in speakers.values())

    for record in speakers.values():
        record.avg_confidence = round_half_up(record.total_confidence / record.turns * 100)
        record.avg_sentiment = (
            sum(record.sentiment_scores) / len(record.sentiment_scores)
            if record.sentiment_scores
            else 0.0
        )
        # Rounded per speaker, so the percentages need not add up to exactly 100
        record.speaking_percentage = (
            round_half_up(record.total_time / total_duration * 100) if total_duration > 0 else 0
        )
        record.formatted_time = format_duration(record.total_time)

    logger.debug(f"Aggregated {len(segments)} segments into {len(speakers)} speakers")

    return sorted(speakers.values(), key=lambda record: record.total_time, reverse=True)


def build_speaker_analytics(segments: Sequence[TranscriptSegment]) -> SpeakerAnalyticsResponse:
    """Speaker records plus totals, as returned by the speaker analytics endpoint"""
    speakers = aggregate_speakers(segments)
    total_duration = sum(segment.duration for segment in segments)

    return SpeakerAnalyticsResponse(
        speakers=speakers,
        total_speakers=len(speakers),
        total_duration=format_duration(total_duration),
    )
