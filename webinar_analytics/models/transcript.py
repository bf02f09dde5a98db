"""Transcript data models"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, computed_field


UNKNOWN_SPEAKER = "Unknown Speaker"


class TranscriptStatus(str, Enum):
    """Lifecycle of a transcript record"""

    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class TranscriptSegment(BaseModel):
    """A contiguous span of speech attributed to one speaker"""

    id: Optional[str] = Field(None, description="Segment row ID")
    text: str = Field(..., description="The text content of this segment")
    start_time: float = Field(..., description="Start time in seconds")
    end_time: float = Field(..., description="End time in seconds")
    speaker: Optional[str] = Field(None, description="Speaker label, None when diarization gave none")
    confidence: Optional[float] = Field(None, ge=0.0, le=1.0, description="Recognition confidence (0-1)")
    sentiment: Optional[float] = Field(None, description="Numeric sentiment score (-1 to 1)")

    @computed_field
    @property
    def duration(self) -> float:
        """Speaking time, never negative"""
        return max(0.0, self.end_time - self.start_time)

    @property
    def speaker_label(self) -> str:
        """Speaker label with missing labels mapped to the unknown-speaker sentinel"""
        return self.speaker if self.speaker is not None else UNKNOWN_SPEAKER


class Transcript(BaseModel):
    """Completed (or in-flight) transcript for a webinar"""

    id: str = Field(..., description="Transcript row ID")
    webinar_id: str = Field(..., description="Owning webinar ID")
    status: TranscriptStatus = Field(TranscriptStatus.PROCESSING, description="Processing status")
    assembly_ai_id: Optional[str] = Field(None, description="Vendor transcript ID")
    transcript_text: Optional[str] = Field(None, description="Full transcript text")
    confidence: Optional[float] = Field(None, description="Overall confidence (0-1)")
    audio_duration: Optional[int] = Field(None, description="Audio duration in seconds")
    processing_time: Optional[float] = Field(None, description="Vendor processing time in seconds")
    auto_highlights: Optional[Any] = Field(None, description="Vendor highlight payload (list or {'results': [...]})")
    sentiment_results: List[Dict[str, Any]] = Field(default_factory=list, description="Vendor sentiment results")
    segments: List[TranscriptSegment] = Field(default_factory=list, description="Segments ordered by start time")
    created_at: Optional[datetime] = Field(None, description="Record creation timestamp")

    @computed_field
    @property
    def segment_count(self) -> int:
        """Number of stored segments"""
        return len(self.segments)

    @property
    def highlights(self) -> List[Dict[str, Any]]:
        """Highlight spans whether the vendor payload is a list or wrapped in 'results'"""
        if not self.auto_highlights:
            return []
        if isinstance(self.auto_highlights, list):
            return self.auto_highlights
        if isinstance(self.auto_highlights, dict):
            return self.auto_highlights.get("results") or []
        return []
