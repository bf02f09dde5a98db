"""Engagement timeline over fixed-width intervals"""

from typing import List, Sequence

from ..models import EngagementTimelinePoint, TranscriptSegment
from .time_format import format_timestamp

DEFAULT_INTERVAL_SECONDS = 300


def engagement_score(speaker_count: int, segment_count: int) -> float:
    """Interaction heuristic capped at 1. Not a probability."""
    return min(1.0, (speaker_count * segment_count) / 10)


def build_engagement_timeline(
    segments: Sequence[TranscriptSegment], interval_seconds: int = DEFAULT_INTERVAL_SECONDS
) -> List[EngagementTimelinePoint]:
    """Bucket segments by start time into intervals and score each bucket

    Intervals are [time, time + interval_seconds) from 0 up to the latest
    end_time. Intervals with no segments are omitted rather than zero-filled.

    Args:
        segments: Segments ordered by start_time
        interval_seconds: Bucket width (default: 5 minutes)

    Returns:
        Timeline points ordered by time
    """
    if interval_seconds <= 0:
        raise ValueError("interval_seconds must be positive")

    timeline = []
    total_duration = max((segment.end_time for segment in segments), default=0)

    time = 0
    while time < total_duration:
        interval_end = time + interval_seconds
        bucket = [s for s in segments if time <= s.start_time < interval_end]

        if bucket:
            with_sentiment = [s.sentiment for s in bucket if s.sentiment is not None]
            avg_sentiment = sum(with_sentiment) / len(with_sentiment) if with_sentiment else 0.0

            speaker_count = len({s.speaker_label for s in bucket})
            avg_confidence = sum(
                s.confidence if s.confidence is not None else 0.0 for s in bucket
            ) / len(bucket)

            timeline.append(
                EngagementTimelinePoint(
                    time=format_timestamp(time),
                    time_seconds=time,
                    sentiment=avg_sentiment,
                    speaker_count=speaker_count,
                    confidence=avg_confidence,
                    engagement=engagement_score(speaker_count, len(bucket)),
                    segment_count=len(bucket),
                )
            )

        time = interval_end

    return timeline
