"""Access-controlled webinar analytics"""

import logging
from typing import Optional

from ..analytics import build_download, build_engagement_timeline, build_speaker_analytics
from ..config import config
from ..errors import NotFoundOrUnauthorized, Unauthenticated
from ..models import AnalyticsResult, Webinar, WebinarAnalyticsData
from ..storage import database

logger = logging.getLogger(__name__)


class AnalyticsService:
    """Read-only analytics for webinars, visible only to the owning presenter"""

    def __init__(
        self,
        storage=None,
        timeline_interval_seconds: Optional[int] = None,
        live_transcription_limit: Optional[int] = None,
    ):
        """Initialize analytics service

        Args:
            storage: Storage collaborator (default: the database module)
            timeline_interval_seconds: Engagement timeline bucket width
            live_transcription_limit: Maximum live caption turns returned
        """
        self.storage = storage or database
        self.timeline_interval_seconds = timeline_interval_seconds or config.timeline_interval_seconds
        self.live_transcription_limit = live_transcription_limit or config.live_transcription_limit

    def _verify_access(self, webinar_id: str, caller_id: Optional[str]) -> Webinar:
        """Return the webinar if caller_id owns it

        Raises:
            Unauthenticated: No caller
            NotFoundOrUnauthorized: Missing webinar or owned by someone else
        """
        if not caller_id:
            raise Unauthenticated()

        webinar = self.storage.get_webinar_for_presenter(webinar_id, caller_id)
        if webinar is None:
            raise NotFoundOrUnauthorized()
        return webinar

    def get_analytics(self, webinar_id: str, caller_id: Optional[str]) -> AnalyticsResult:
        """Webinar, transcript, insights, live captions and attendance in one payload"""
        try:
            webinar = self._verify_access(webinar_id, caller_id)

            data = WebinarAnalyticsData(
                webinar=webinar,
                transcript=self.storage.get_transcript(webinar_id),
                insights=self.storage.get_insights(webinar_id),
                live_transcriptions=self.storage.get_live_transcriptions(
                    webinar_id, limit=self.live_transcription_limit
                ),
                attendance_data=self.storage.get_attendance(webinar_id),
            )
            return AnalyticsResult.success(data)

        except (Unauthenticated, NotFoundOrUnauthorized) as e:
            return AnalyticsResult.failure(e.status, str(e))
        except Exception:
            logger.exception(f"Error fetching webinar analytics for {webinar_id}")
            return AnalyticsResult.failure(500, "Failed to fetch analytics data")

    def get_speaker_analytics(self, webinar_id: str, caller_id: Optional[str]) -> AnalyticsResult:
        """Speaking time, turns, confidence and sentiment per speaker"""
        try:
            self._verify_access(webinar_id, caller_id)

            segments = self.storage.get_transcript_segments(webinar_id)
            return AnalyticsResult.success(build_speaker_analytics(segments))

        except (Unauthenticated, NotFoundOrUnauthorized) as e:
            return AnalyticsResult.failure(e.status, str(e))
        except Exception:
            logger.exception(f"Error calculating speaker analytics for {webinar_id}")
            return AnalyticsResult.failure(500, "Failed to calculate speaker analytics")

    def get_engagement_timeline(self, webinar_id: str, caller_id: Optional[str]) -> AnalyticsResult:
        """Engagement per time interval, omitting intervals nobody spoke in"""
        try:
            self._verify_access(webinar_id, caller_id)

            segments = self.storage.get_transcript_segments(webinar_id)
            timeline = build_engagement_timeline(segments, self.timeline_interval_seconds)
            return AnalyticsResult.success(timeline)

        except (Unauthenticated, NotFoundOrUnauthorized) as e:
            return AnalyticsResult.failure(e.status, str(e))
        except Exception:
            logger.exception(f"Error generating engagement timeline for {webinar_id}")
            return AnalyticsResult.failure(500, "Failed to generate engagement timeline")

    def get_transcript_for_download(self, webinar_id: str, caller_id: Optional[str]) -> AnalyticsResult:
        """Structured transcript export with a rendered text document

        A webinar without a transcript still succeeds, with a placeholder body.
        """
        try:
            webinar = self._verify_access(webinar_id, caller_id)

            transcript = self.storage.get_transcript(webinar_id)
            return AnalyticsResult.success(build_download(webinar, transcript))

        except (Unauthenticated, NotFoundOrUnauthorized) as e:
            return AnalyticsResult.failure(e.status, str(e))
        except Exception:
            logger.exception(f"Error preparing transcript download for {webinar_id}")
            return AnalyticsResult.failure(500, "Failed to prepare transcript for download")
