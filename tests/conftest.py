"""Shared fixtures for all tests."""

import sys
from pathlib import Path
from datetime import datetime
from unittest.mock import patch

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from webinar_analytics.models import Presenter, Transcript, TranscriptSegment, Webinar


# ── Sample data factories ──────────────────────────────────────────


@pytest.fixture
def sample_segments():
    """Segments of a short three-speaker webinar, ordered by start time."""
    return [
        TranscriptSegment(text="Welcome everyone.", start_time=0.0, end_time=30.0,
                          speaker="A", confidence=0.9, sentiment=0.5),
        TranscriptSegment(text="Thanks for having me.", start_time=30.0, end_time=40.0,
                          speaker="B", confidence=0.8, sentiment=None),
        TranscriptSegment(text="Let's dive in.", start_time=40.0, end_time=100.0,
                          speaker="A", confidence=0.95, sentiment=0.0),
        TranscriptSegment(text="Any questions?", start_time=320.0, end_time=330.0,
                          speaker="C", confidence=None, sentiment=-0.5),
    ]


@pytest.fixture
def sample_webinar():
    return Webinar(
        id="web-1",
        title="Quarterly Product Update",
        start_time=datetime(2024, 3, 5, 17, 0),
        presenter_id="user-1",
        presenter=Presenter(id="user-1", name="Dana Presenter"),
        transcript_language="en",
    )


@pytest.fixture
def sample_transcript(sample_segments):
    return Transcript(
        id="tr-1",
        webinar_id="web-1",
        status="COMPLETED",
        transcript_text="Welcome everyone. Thanks for having me. Let's dive in. Any questions?",
        confidence=0.87,
        audio_duration=3661,
        auto_highlights={"status": "success", "results": [
            {"text": "product roadmap", "rank": 0.09, "count": 3, "timestamps": [{"start": 41000, "end": 42500}]},
            {"text": "pricing", "rank": 0.05, "count": 2, "timestamps": [{"start": 90000, "end": 90800}]},
        ]},
        sentiment_results=[{"sentiment": "POSITIVE", "text": "Welcome everyone."}],
        segments=sample_segments,
    )


@pytest.fixture
def vendor_result():
    """Completed AssemblyAI transcript payload."""
    return {
        "id": "aai-123",
        "status": "completed",
        "text": "Hello and welcome. Can everyone hear me? Great. Any questions?",
        "confidence": 0.92,
        "audio_duration": 125.6,
        "utterances": [
            {"text": "Hello and welcome.", "start": 0, "end": 2500, "confidence": 0.95,
             "speaker": "A", "sentiment": "POSITIVE"},
            {"text": "Can everyone hear me?", "start": 2500, "end": 4000, "confidence": 0.9,
             "speaker": "A"},
            {"text": "Great. Any questions?", "start": 4000, "end": 6000, "confidence": 0.88,
             "speaker": "B", "sentiment": "NEGATIVE"},
        ],
        "auto_highlights_result": {"status": "success", "results": [
            {"text": "welcome", "rank": 0.1, "count": 1, "timestamps": [{"start": 1000, "end": 1500}]},
        ]},
        "sentiment_analysis_results": [
            {"sentiment": "POSITIVE", "text": "Hello and welcome."},
            {"sentiment": "NEUTRAL", "text": "Can everyone hear me?"},
            {"sentiment": "POSITIVE", "text": "Great."},
        ],
    }


@pytest.fixture
def temp_db(tmp_path):
    """Force SQLite mode with a temp file and create the schema."""
    db_path = tmp_path / "test.db"
    with patch("webinar_analytics.storage.database.DATABASE_URL", None):
        with patch("webinar_analytics.storage.database.DATABASE_PATH", db_path):
            from webinar_analytics.storage import database
            database.init_database()
            yield database
