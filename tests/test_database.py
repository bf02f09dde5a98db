"""Tests for webinar_analytics/storage/database.py using a temp SQLite file."""

from datetime import datetime

import pytest

from webinar_analytics.models import KeyMoment, TranscriptSegment, TranscriptStatus, WebinarInsights


@pytest.fixture
def presenter(temp_db):
    return temp_db.create_user("dana@example.com", external_id="idp-1", name="Dana Presenter")


@pytest.fixture
def webinar_id(temp_db, presenter):
    return temp_db.create_webinar(
        "Quarterly Product Update", presenter.id, start_time=datetime(2024, 3, 5, 17, 0),
        transcript_language="en",
    )


class TestUsers:
    def test_create_and_lookup(self, temp_db, presenter):
        assert temp_db.get_user_by_external_id("idp-1").id == presenter.id
        assert temp_db.get_user_by_email("dana@example.com").name == "Dana Presenter"

    def test_lookup_not_found(self, temp_db):
        assert temp_db.get_user_by_external_id("nobody") is None
        assert temp_db.get_user_by_email("nobody@example.com") is None

    def test_relink_external_id(self, temp_db, presenter):
        user = temp_db.update_user_external_id("dana@example.com", "idp-2", name="Dana P.")
        assert user.id == presenter.id
        assert user.external_id == "idp-2"
        assert temp_db.get_user_by_external_id("idp-1") is None


class TestWebinars:
    def test_owner_can_read(self, temp_db, presenter, webinar_id):
        webinar = temp_db.get_webinar_for_presenter(webinar_id, presenter.id)
        assert webinar.title == "Quarterly Product Update"
        assert webinar.start_time == datetime(2024, 3, 5, 17, 0)
        assert webinar.presenter.name == "Dana Presenter"
        assert webinar.live_transcription_enabled is False

    def test_other_user_cannot_read(self, temp_db, webinar_id):
        other = temp_db.create_user("sam@example.com")
        assert temp_db.get_webinar_for_presenter(webinar_id, other.id) is None

    def test_missing_webinar(self, temp_db, presenter):
        assert temp_db.get_webinar_for_presenter("missing", presenter.id) is None

    def test_enable_live_transcription(self, temp_db, presenter, webinar_id):
        temp_db.set_live_transcription_enabled(webinar_id, True)
        assert temp_db.get_webinar_for_presenter(webinar_id, presenter.id).live_transcription_enabled is True


class TestTranscripts:
    def _complete(self, db, transcript_id, segments):
        db.complete_transcript(
            transcript_id,
            assembly_ai_id="aai-1",
            transcript_text="Hello. Questions?",
            confidence=0.9,
            audio_duration=120,
            auto_highlights={"status": "success", "results": [{"text": "hello"}]},
            sentiment_results=[{"sentiment": "POSITIVE", "text": "Hello."}],
            segments=segments,
            processing_time=1.5,
        )

    def test_no_transcript(self, temp_db, webinar_id):
        assert temp_db.get_transcript(webinar_id) is None
        assert temp_db.get_transcript_segments(webinar_id) == []

    def test_complete_and_read(self, temp_db, webinar_id):
        transcript_id = temp_db.create_transcript(webinar_id)
        self._complete(temp_db, transcript_id, [
            TranscriptSegment(text="Questions?", start_time=5.0, end_time=6.0, speaker="B", sentiment=0.0),
            TranscriptSegment(text="Hello.", start_time=0.0, end_time=2.0, speaker="A", confidence=0.9),
        ])

        transcript = temp_db.get_transcript(webinar_id)
        assert transcript.id == transcript_id
        assert transcript.status == TranscriptStatus.COMPLETED
        assert transcript.audio_duration == 120
        assert transcript.highlights == [{"text": "hello"}]
        assert transcript.sentiment_results[0]["sentiment"] == "POSITIVE"
        # Segments come back ordered by start time
        assert [s.text for s in transcript.segments] == ["Hello.", "Questions?"]
        assert transcript.segments[0].confidence == 0.9
        assert transcript.segments[1].confidence is None

    def test_create_resets_previous(self, temp_db, webinar_id):
        first = temp_db.create_transcript(webinar_id)
        self._complete(temp_db, first, [TranscriptSegment(text="Old", start_time=0, end_time=1)])

        second = temp_db.create_transcript(webinar_id)
        transcript = temp_db.get_transcript(webinar_id)
        assert transcript.id == second
        assert transcript.status == TranscriptStatus.PROCESSING
        assert transcript.segments == []

    def test_mark_failed(self, temp_db, webinar_id):
        transcript_id = temp_db.create_transcript(webinar_id)
        temp_db.mark_transcript_failed(transcript_id)
        assert temp_db.get_transcript(webinar_id).status == TranscriptStatus.FAILED


class TestInsights:
    def test_upsert_replaces_all_fields(self, temp_db, webinar_id):
        temp_db.upsert_insights(WebinarInsights(
            webinar_id=webinar_id, overall_sentiment=0.5, question_count=2,
            top_keywords=["a"], key_moments=[KeyMoment(timestamp=1.0, description="a")],
            audience_participation=0.2, average_confidence=0.9,
        ))
        temp_db.upsert_insights(WebinarInsights(
            webinar_id=webinar_id, overall_sentiment=-0.5, question_count=7,
            top_keywords=["b", "c"], key_moments=[], audience_participation=0.6,
        ))

        insights = temp_db.get_insights(webinar_id)
        assert insights.overall_sentiment == -0.5
        assert insights.question_count == 7
        assert insights.top_keywords == ["b", "c"]
        assert insights.key_moments == []
        assert insights.audience_participation == 0.6
        assert insights.average_confidence is None

    def test_missing_insights(self, temp_db, webinar_id):
        assert temp_db.get_insights(webinar_id) is None


class TestLiveTranscriptionsAndAttendance:
    def test_live_turns_ordered_and_limited(self, temp_db, webinar_id):
        for order in (3, 1, 2):
            temp_db.add_live_transcription(webinar_id, order, f"turn {order}", timestamp=1700000000.0 + order)

        turns = temp_db.get_live_transcriptions(webinar_id, limit=2)
        assert [t.turn_order for t in turns] == [1, 2]
        assert turns[0].end_of_turn is False

    def test_attendance_joined_with_user(self, temp_db, webinar_id):
        attendee = temp_db.create_user("sam@example.com", name="Sam")
        temp_db.add_attendance(webinar_id, attendee.id, engagement_level="HIGH", questions_asked=2)

        rows = temp_db.get_attendance(webinar_id)
        assert len(rows) == 1
        assert rows[0].user.name == "Sam"
        assert rows[0].engagement_level.value == "HIGH"
        assert rows[0].questions_asked == 2
