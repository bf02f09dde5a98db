"""Derived analytics models and the result envelope"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from .transcript import Transcript, TranscriptSegment
from .webinar import Attendance, LiveTranscription, Webinar, WebinarInsights


class SpeakerAnalytics(BaseModel):
    """Aggregated speaking metrics for one speaker"""

    name: str = Field(..., description="Speaker label")
    total_time: float = Field(0.0, description="Seconds spoken")
    turns: int = Field(0, description="Number of segments")
    total_confidence: float = Field(0.0, description="Sum of segment confidences")
    avg_confidence: int = Field(0, description="Mean confidence as an integer percentage")
    speaking_percentage: int = Field(0, description="Share of total speaking time, rounded per speaker")
    avg_sentiment: float = Field(0.0, description="Mean of present sentiment scores, 0 when none")
    formatted_time: str = Field("0m", description="total_time rendered as 'Xh Ym' / 'Ym'")
    sentiment_scores: List[float] = Field(default_factory=list, description="Present sentiment scores")
    segments: List[TranscriptSegment] = Field(default_factory=list, description="Segments in input order")


class SpeakerAnalyticsResponse(BaseModel):
    speakers: List[SpeakerAnalytics] = Field(default_factory=list)
    total_speakers: int = 0
    total_duration: str = "0m"


class EngagementTimelinePoint(BaseModel):
    """One non-empty interval of the engagement timeline"""

    time: str = Field(..., description="Interval start as a display timestamp")
    time_seconds: int = Field(..., description="Interval start in seconds")
    sentiment: float = Field(0.0, description="Mean present sentiment in the interval")
    speaker_count: int = Field(..., description="Distinct speakers in the interval")
    confidence: float = Field(0.0, description="Mean confidence (absent counts as 0)")
    engagement: float = Field(..., ge=0.0, le=1.0, description="min(1, speakers * segments / 10)")
    segment_count: int = Field(..., description="Segments starting in the interval")


class DownloadWebinarInfo(BaseModel):
    title: str
    presenter: Optional[str] = None
    date: Optional[datetime] = None
    duration: Optional[int] = None


class DownloadSegment(BaseModel):
    timestamp: str
    speaker: str
    text: str
    confidence: int


class DownloadTranscriptInfo(BaseModel):
    full_text: Optional[str] = None
    segments: List[DownloadSegment] = Field(default_factory=list)
    confidence: int = 0
    processing_time: Optional[float] = None


class DownloadInsights(BaseModel):
    highlights: List[Dict[str, Any]] = Field(default_factory=list)
    sentiment: List[Dict[str, Any]] = Field(default_factory=list)


class TranscriptDownload(BaseModel):
    """Structured transcript export plus its rendered text document"""

    webinar: DownloadWebinarInfo
    transcript: DownloadTranscriptInfo
    insights: Optional[DownloadInsights] = None
    document: str = ""


class WebinarAnalyticsData(BaseModel):
    webinar: Webinar
    transcript: Optional[Transcript] = None
    insights: Optional[WebinarInsights] = None
    live_transcriptions: List[LiveTranscription] = Field(default_factory=list)
    attendance_data: List[Attendance] = Field(default_factory=list)


class AnalyticsResult(BaseModel):
    """Uniform result envelope: {status: 200, data} or {status: 4xx/5xx, message}"""

    status: int = Field(..., description="HTTP-style status code")
    data: Optional[Any] = Field(None, description="Payload on success")
    message: Optional[str] = Field(None, description="Error or informational message")

    @classmethod
    def success(cls, data: Any = None, message: Optional[str] = None) -> "AnalyticsResult":
        return cls(status=200, data=data, message=message)

    @classmethod
    def failure(cls, status: int, message: str) -> "AnalyticsResult":
        return cls(status=status, message=message)

    @property
    def ok(self) -> bool:
        return self.status < 400

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dict with only the keys meaningful for this status"""
        result = {"status": self.status}
        if self.ok:
            result["data"] = self.model_dump(mode="json", include={"data"})["data"]
            if self.message:
                result["message"] = self.message
        else:
            result["message"] = self.message
        return result
