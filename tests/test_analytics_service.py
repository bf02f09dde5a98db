"""Tests for webinar_analytics/processors/analytics_service.py with a mocked storage layer."""

from unittest.mock import MagicMock

import pytest

from webinar_analytics.models import LiveTranscription


def _make_service(webinar=None, **kwargs):
    """Create an AnalyticsService whose storage returns `webinar` for the ownership check."""
    from webinar_analytics.processors.analytics_service import AnalyticsService

    mock_storage = MagicMock()
    mock_storage.get_webinar_for_presenter.return_value = webinar
    service = AnalyticsService(storage=mock_storage, **kwargs)
    return service, mock_storage


OPERATIONS = [
    "get_analytics",
    "get_speaker_analytics",
    "get_engagement_timeline",
    "get_transcript_for_download",
]


class TestAccessControl:
    @pytest.mark.parametrize("operation", OPERATIONS)
    def test_unauthenticated(self, operation):
        service, mock_storage = _make_service()
        result = getattr(service, operation)("web-1", None)

        assert result.to_dict() == {"status": 401, "message": "Unauthorized"}
        mock_storage.get_webinar_for_presenter.assert_not_called()

    @pytest.mark.parametrize("operation", OPERATIONS)
    def test_not_owner(self, operation):
        service, mock_storage = _make_service(webinar=None)
        result = getattr(service, operation)("web-1", "user-2")

        assert result.to_dict() == {"status": 404, "message": "Webinar not found or access denied"}
        mock_storage.get_webinar_for_presenter.assert_called_once_with("web-1", "user-2")
        mock_storage.get_transcript_segments.assert_not_called()
        mock_storage.get_transcript.assert_not_called()


class TestStorageFailures:
    @pytest.mark.parametrize("operation,message", [
        ("get_analytics", "Failed to fetch analytics data"),
        ("get_speaker_analytics", "Failed to calculate speaker analytics"),
        ("get_engagement_timeline", "Failed to generate engagement timeline"),
        ("get_transcript_for_download", "Failed to prepare transcript for download"),
    ])
    def test_exception_becomes_500(self, operation, message):
        service, mock_storage = _make_service()
        mock_storage.get_webinar_for_presenter.side_effect = RuntimeError("db down")

        result = getattr(service, operation)("web-1", "user-1")
        assert result.to_dict() == {"status": 500, "message": message}


class TestGetAnalytics:
    def test_assembles_payload(self, sample_webinar, sample_transcript):
        service, mock_storage = _make_service(sample_webinar, live_transcription_limit=25)
        mock_storage.get_transcript.return_value = sample_transcript
        mock_storage.get_insights.return_value = None
        mock_storage.get_live_transcriptions.return_value = [
            LiveTranscription(id="lt-1", webinar_id="web-1", turn_order=1, text="Hi", timestamp=1.0),
        ]
        mock_storage.get_attendance.return_value = []

        result = service.get_analytics("web-1", "user-1")

        assert result.status == 200
        assert result.data.webinar.title == "Quarterly Product Update"
        assert result.data.transcript.segment_count == 4
        assert result.data.insights is None
        assert len(result.data.live_transcriptions) == 1
        mock_storage.get_live_transcriptions.assert_called_once_with("web-1", limit=25)

    def test_serializes(self, sample_webinar):
        service, mock_storage = _make_service(sample_webinar)
        mock_storage.get_transcript.return_value = None
        mock_storage.get_insights.return_value = None
        mock_storage.get_live_transcriptions.return_value = []
        mock_storage.get_attendance.return_value = []

        payload = service.get_analytics("web-1", "user-1").to_dict()
        assert payload["status"] == 200
        assert payload["data"]["webinar"]["id"] == "web-1"
        assert payload["data"]["transcript"] is None
        assert payload["data"]["attendance_data"] == []


class TestGetSpeakerAnalytics:
    def test_no_segments(self, sample_webinar):
        service, mock_storage = _make_service(sample_webinar)
        mock_storage.get_transcript_segments.return_value = []

        result = service.get_speaker_analytics("web-1", "user-1")
        assert result.to_dict() == {
            "status": 200,
            "data": {"speakers": [], "total_speakers": 0, "total_duration": "0m"},
        }

    def test_speakers_ranked(self, sample_webinar, sample_segments):
        service, mock_storage = _make_service(sample_webinar)
        mock_storage.get_transcript_segments.return_value = sample_segments

        data = service.get_speaker_analytics("web-1", "user-1").data
        assert [s.name for s in data.speakers] == ["A", "B", "C"]
        assert data.total_speakers == 3
        assert data.total_duration == "1m"
        mock_storage.get_transcript_segments.assert_called_once_with("web-1")


class TestGetEngagementTimeline:
    def test_uses_configured_interval(self, sample_webinar, sample_segments):
        service, mock_storage = _make_service(sample_webinar, timeline_interval_seconds=60)
        mock_storage.get_transcript_segments.return_value = sample_segments

        result = service.get_engagement_timeline("web-1", "user-1")
        assert result.status == 200
        # A's 40-100s segment starts in the first minute, so 1:00 stays empty
        assert [p.time for p in result.data] == ["0:00", "5:00"]
        assert result.data[0].segment_count == 3

    def test_empty(self, sample_webinar):
        service, mock_storage = _make_service(sample_webinar)
        mock_storage.get_transcript_segments.return_value = []

        assert service.get_engagement_timeline("web-1", "user-1").to_dict() == {"status": 200, "data": []}


class TestGetTranscriptForDownload:
    def test_with_transcript(self, sample_webinar, sample_transcript):
        service, mock_storage = _make_service(sample_webinar)
        mock_storage.get_transcript.return_value = sample_transcript

        result = service.get_transcript_for_download("web-1", "user-1")
        assert result.status == 200
        assert result.data.transcript.confidence == 87
        assert "[0:00] A: Welcome everyone." in result.data.document

    def test_without_transcript_is_placeholder(self, sample_webinar):
        service, mock_storage = _make_service(sample_webinar)
        mock_storage.get_transcript.return_value = None

        result = service.get_transcript_for_download("web-1", "user-1")
        assert result.status == 200
        assert result.data.transcript.segments == []
        assert "No transcript available for this webinar." in result.data.document
