"""Tests for webinar_analytics/analytics/insights.py."""

import pytest

from webinar_analytics.analytics.insights import (
    calculate_audience_participation,
    calculate_engagement_score,
    count_questions,
    extract_key_moments,
    generate_insights,
)


class TestGenerateInsights:
    def test_from_vendor_result(self, vendor_result):
        insights = generate_insights("web-1", vendor_result)

        assert insights.webinar_id == "web-1"
        assert insights.overall_sentiment == pytest.approx(2 / 3)
        assert insights.question_count == 2
        assert insights.top_keywords == ["welcome"]
        assert insights.engagement_score == pytest.approx(3 * 2 / 500)
        assert insights.audience_participation == pytest.approx(0.2)
        assert insights.average_confidence == 0.92
        assert len(insights.key_moments) == 1
        assert insights.key_moments[0].timestamp == 1.0
        assert insights.key_moments[0].description == "welcome"
        assert insights.key_moments[0].type == "highlight"

    def test_empty_result(self):
        insights = generate_insights("web-1", {"status": "completed"})
        assert insights.overall_sentiment == 0
        assert insights.question_count == 0
        assert insights.top_keywords == []
        assert insights.engagement_score == 0
        assert insights.key_moments == []
        assert insights.audience_participation == 0


class TestHelpers:
    def test_count_questions(self):
        assert count_questions("Why? How?? Done.") == 3
        assert count_questions(None) == 0

    def test_engagement_capped(self):
        utterances = [{"speaker": s} for s in ("A", "B", "C", "D", "E") for _ in range(40)]
        assert calculate_engagement_score({"utterances": utterances}) == 1.0

    def test_audience_participation_capped(self):
        utterances = [{"speaker": f"S{i}"} for i in range(10)]
        assert calculate_audience_participation({"utterances": utterances}) == 1.0

    def test_single_speaker_has_no_participation(self):
        assert calculate_audience_participation({"utterances": [{"speaker": "A"}]}) == 0.0

    def test_key_moments_limited_to_five(self):
        highlights = [{"text": f"h{i}", "start": i * 1000} for i in range(8)]
        moments = extract_key_moments({"auto_highlights_result": {"results": highlights}})
        assert [m.description for m in moments] == ["h0", "h1", "h2", "h3", "h4"]
        assert moments[3].timestamp == 3.0

    def test_keywords_limited_to_ten(self, vendor_result):
        vendor_result["auto_highlights_result"]["results"] = [{"text": f"k{i}"} for i in range(12)]
        insights = generate_insights("web-1", vendor_result)
        assert len(insights.top_keywords) == 10
