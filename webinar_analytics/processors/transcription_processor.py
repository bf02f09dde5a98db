"""Recording transcription pipeline and live caption intake"""

import time
import logging
from typing import Any, Dict, List, Optional

from ..analytics import generate_insights, score_label
from ..api.assemblyai_client import AssemblyAIClient, TranscriptionConfig
from ..config import config
from ..errors import NotFoundOrUnauthorized, Unauthenticated
from ..models import AnalyticsResult, TranscriptSegment, Webinar
from ..storage import database

logger = logging.getLogger(__name__)

REQUIRED_LIVE_FIELDS = ("webinar_id", "text", "turn_order")


def segments_from_utterances(utterances: List[Dict[str, Any]]) -> List[TranscriptSegment]:
    """Convert vendor utterances (millisecond offsets) into segments (seconds)

    Args:
        utterances: Vendor utterance dicts with text, start, end, confidence,
            speaker and an optional sentiment label

    Returns:
        TranscriptSegment list in vendor order
    """
    return [
        TranscriptSegment(
            text=utterance.get("text", ""),
            start_time=utterance["start"] / 1000,
            end_time=utterance["end"] / 1000,
            confidence=utterance.get("confidence"),
            speaker=utterance.get("speaker"),
            sentiment=score_label(utterance.get("sentiment")),
        )
        for utterance in utterances or []
    ]


class TranscriptionProcessor:
    """Produce transcripts, segments and insights for webinar recordings"""

    def __init__(self, storage=None, transcription_client: Optional[AssemblyAIClient] = None):
        """Initialize transcription processor

        Args:
            storage: Storage collaborator (default: the database module)
            transcription_client: AssemblyAI client
        """
        self.storage = storage or database
        self.transcription_client = transcription_client or AssemblyAIClient()

    def _verify_access(self, webinar_id: str, caller_id: Optional[str]) -> Webinar:
        if not caller_id:
            raise Unauthenticated()

        webinar = self.storage.get_webinar_for_presenter(webinar_id, caller_id)
        if webinar is None:
            raise NotFoundOrUnauthorized()
        return webinar

    def _store_results(self, transcript_id: str, webinar_id: str, result: Dict[str, Any], elapsed: float):
        segments = segments_from_utterances(result.get("utterances"))
        audio_duration = result.get("audio_duration")

        self.storage.complete_transcript(
            transcript_id,
            assembly_ai_id=result.get("id"),
            transcript_text=result.get("text"),
            confidence=result.get("confidence"),
            audio_duration=round(audio_duration) if audio_duration is not None else None,
            auto_highlights=result.get("auto_highlights_result") or [],
            sentiment_results=result.get("sentiment_analysis_results") or [],
            segments=segments,
            processing_time=round(elapsed, 2),
        )
        self.storage.upsert_insights(generate_insights(webinar_id, result))

        logger.info(f"Stored transcript {transcript_id} with {len(segments)} segments")

    def process_webinar_recording(
        self, webinar_id: str, caller_id: Optional[str], recording_url: str
    ) -> AnalyticsResult:
        """Transcribe a recording and store transcript, segments and insights

        A vendor-side failure marks the transcript FAILED but still returns 200
        with the transcript ID, so the caller can inspect its status.
        """
        try:
            webinar = self._verify_access(webinar_id, caller_id)

            transcript_id = self.storage.create_transcript(webinar_id)

            transcription_config = TranscriptionConfig(
                language_code=webinar.transcript_language or config.default_language,
            )

            started = time.monotonic()
            result = self.transcription_client.transcribe(recording_url, transcription_config)
            elapsed = time.monotonic() - started

            if result.get("status") == "completed":
                self._store_results(transcript_id, webinar_id, result, elapsed)
            else:
                logger.warning(
                    f"Transcription for webinar {webinar_id} failed: {result.get('error', 'unknown error')}"
                )
                self.storage.mark_transcript_failed(transcript_id)

            return AnalyticsResult.success(
                {"transcript_id": transcript_id}, message="Transcription processing completed"
            )

        except (Unauthenticated, NotFoundOrUnauthorized) as e:
            return AnalyticsResult.failure(e.status, str(e))
        except Exception:
            logger.exception(f"Error processing webinar recording for {webinar_id}")
            return AnalyticsResult.failure(500, "Failed to process recording")

    def start_live_transcription(self, webinar_id: str, caller_id: Optional[str]) -> AnalyticsResult:
        """Turn on live captions for a webinar"""
        try:
            self._verify_access(webinar_id, caller_id)
            self.storage.set_live_transcription_enabled(webinar_id, True)
            return AnalyticsResult.success(message="Live transcription enabled")

        except (Unauthenticated, NotFoundOrUnauthorized) as e:
            return AnalyticsResult.failure(e.status, str(e))
        except Exception:
            logger.exception(f"Error starting live transcription for {webinar_id}")
            return AnalyticsResult.failure(500, "Failed to start live transcription")

    def save_live_transcription(self, caller_id: Optional[str], payload: Dict[str, Any]) -> AnalyticsResult:
        """Store one streamed caption turn

        Args:
            caller_id: Authenticated user ID
            payload: webinar_id, turn_order, text and optional is_formatted,
                end_of_turn, end_of_turn_confidence, timestamp, speaker
        """
        try:
            if not caller_id:
                raise Unauthenticated()

            payload = payload or {}
            missing = [
                field for field in REQUIRED_LIVE_FIELDS
                if payload.get(field) is None or payload.get(field) == ""
            ]
            if missing:
                return AnalyticsResult.failure(400, "Missing required fields")

            webinar_id = payload["webinar_id"]
            self._verify_access(webinar_id, caller_id)

            row_id = self.storage.add_live_transcription(
                webinar_id=webinar_id,
                turn_order=int(payload["turn_order"]),
                text=payload["text"],
                timestamp=payload.get("timestamp") or time.time(),
                is_formatted=bool(payload.get("is_formatted", False)),
                end_of_turn=bool(payload.get("end_of_turn", False)),
                end_of_turn_confidence=payload.get("end_of_turn_confidence"),
                speaker=payload.get("speaker"),
            )
            return AnalyticsResult.success({"id": row_id})

        except (Unauthenticated, NotFoundOrUnauthorized) as e:
            return AnalyticsResult.failure(e.status, str(e))
        except Exception:
            logger.exception("Error saving live transcription")
            return AnalyticsResult.failure(500, "Failed to save live transcription")
