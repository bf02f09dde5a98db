"""Data models for webinar transcripts and analytics"""

from .transcript import UNKNOWN_SPEAKER, TranscriptStatus, TranscriptSegment, Transcript
from .webinar import (
    User,
    Principal,
    Presenter,
    Webinar,
    LiveTranscription,
    AttendedType,
    EngagementLevel,
    Attendee,
    Attendance,
    KeyMoment,
    WebinarInsights,
)
from .analytics import (
    SpeakerAnalytics,
    SpeakerAnalyticsResponse,
    EngagementTimelinePoint,
    DownloadWebinarInfo,
    DownloadSegment,
    DownloadTranscriptInfo,
    DownloadInsights,
    TranscriptDownload,
    WebinarAnalyticsData,
    AnalyticsResult,
)

__all__ = [
    "UNKNOWN_SPEAKER",
    "TranscriptStatus",
    "TranscriptSegment",
    "Transcript",
    "User",
    "Principal",
    "Presenter",
    "Webinar",
    "LiveTranscription",
    "AttendedType",
    "EngagementLevel",
    "Attendee",
    "Attendance",
    "KeyMoment",
    "WebinarInsights",
    "SpeakerAnalytics",
    "SpeakerAnalyticsResponse",
    "EngagementTimelinePoint",
    "DownloadWebinarInfo",
    "DownloadSegment",
    "DownloadTranscriptInfo",
    "DownloadInsights",
    "TranscriptDownload",
    "WebinarAnalyticsData",
    "AnalyticsResult",
]
