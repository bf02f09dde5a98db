"""Webinar, user, attendance and insight models"""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


class User(BaseModel):
    """Local user row linked to an identity-provider account"""

    id: str = Field(..., description="User ID")
    external_id: Optional[str] = Field(None, description="Identity-provider user ID")
    email: str = Field(..., description="Email address")
    name: Optional[str] = Field(None, description="Display name")
    profile_image: Optional[str] = Field(None, description="Profile image URL")


class Principal(BaseModel):
    """Authenticated identity as reported by the identity provider"""

    id: str = Field(..., description="Identity-provider user ID")
    email: str = Field(..., description="Primary email address")
    name: Optional[str] = Field(None, description="Full name")
    image_url: Optional[str] = Field(None, description="Avatar URL")


class Presenter(BaseModel):
    """Public view of the webinar's owner"""

    id: str
    name: Optional[str] = None
    profile_image: Optional[str] = None


class Webinar(BaseModel):
    """A webinar owned by a single presenter"""

    id: str = Field(..., description="Webinar ID")
    title: str = Field(..., description="Webinar title")
    description: Optional[str] = Field(None, description="Webinar description")
    start_time: Optional[datetime] = Field(None, description="Scheduled start")
    presenter_id: str = Field(..., description="Owning presenter's user ID")
    presenter: Optional[Presenter] = Field(None, description="Presenter details")
    transcript_language: Optional[str] = Field(None, description="Language code for transcription")
    live_transcription_enabled: bool = Field(False, description="Whether live captions are on")


class LiveTranscription(BaseModel):
    """One streamed turn captured during a live webinar"""

    id: str = Field(..., description="Row ID")
    webinar_id: str = Field(..., description="Webinar ID")
    turn_order: int = Field(..., description="Turn sequence number")
    text: str = Field(..., description="Turn text")
    is_formatted: bool = Field(False, description="Whether the vendor formatted the turn")
    end_of_turn: bool = Field(False, description="Whether the turn was final")
    end_of_turn_confidence: Optional[float] = Field(None, description="End-of-turn confidence")
    timestamp: float = Field(..., description="Unix timestamp in seconds")
    speaker: Optional[str] = Field(None, description="Speaker label if known")


class AttendedType(str, Enum):
    ATTENDED = "ATTENDED"
    NOT_ATTENDED = "NOT_ATTENDED"
    LEFT_EARLY = "LEFT_EARLY"


class EngagementLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    VERY_HIGH = "VERY_HIGH"


class Attendee(BaseModel):
    id: str
    name: Optional[str] = None
    email: str


class Attendance(BaseModel):
    """Attendance row joined with the attendee's identity"""

    id: str = Field(..., description="Row ID")
    webinar_id: str = Field(..., description="Webinar ID")
    attended_type: AttendedType = Field(AttendedType.ATTENDED, description="Attendance outcome")
    engagement_level: Optional[EngagementLevel] = Field(None, description="Coarse engagement bucket")
    time_spoken: Optional[float] = Field(None, description="Seconds spoken")
    questions_asked: Optional[int] = Field(None, description="Questions asked")
    sentiment_score: Optional[float] = Field(None, description="Attendee sentiment")
    user: Attendee = Field(..., description="Attendee identity")


class KeyMoment(BaseModel):
    """A salient moment derived from a vendor highlight"""

    timestamp: float = Field(..., description="Offset in seconds")
    description: str = Field(..., description="Highlight text")
    type: str = Field("highlight", description="Moment type")


class WebinarInsights(BaseModel):
    """Per-webinar insight summary produced by the transcription pipeline"""

    id: Optional[str] = Field(None, description="Row ID")
    webinar_id: str = Field(..., description="Webinar ID")
    overall_sentiment: float = Field(0.0, ge=-1.0, le=1.0, description="Mean sentiment (-1 to 1)")
    question_count: int = Field(0, description="Number of '?' in the transcript text")
    top_keywords: List[str] = Field(default_factory=list, max_length=10, description="Top highlight phrases")
    engagement_score: float = Field(0.0, ge=0.0, le=1.0, description="Interaction heuristic (0-1)")
    key_moments: List[KeyMoment] = Field(default_factory=list, max_length=5, description="Key moments")
    audience_participation: float = Field(0.0, ge=0.0, le=1.0, description="Speaker-spread heuristic (0-1)")
    average_confidence: Optional[float] = Field(None, description="Vendor overall confidence")
