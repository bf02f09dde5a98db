"""Pure analytics over transcript segments"""

from .time_format import format_timestamp, format_duration, round_half_up
from .sentiment import score_label, overall_sentiment
from .speakers import aggregate_speakers, build_speaker_analytics
from .timeline import build_engagement_timeline, engagement_score
from .transcript_formatter import build_download, render_transcript_text
from .insights import generate_insights

__all__ = [
    "format_timestamp",
    "format_duration",
    "round_half_up",
    "score_label",
    "overall_sentiment",
    "aggregate_speakers",
    "build_speaker_analytics",
    "build_engagement_timeline",
    "engagement_score",
    "build_download",
    "render_transcript_text",
    "generate_insights",
]
