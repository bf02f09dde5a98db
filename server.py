"""Webinar Analytics - Flask web application exposing analytics and transcription APIs."""

import logging
from typing import Optional

from flask import Flask, Response, jsonify, request

from webinar_analytics.api.assemblyai_client import AssemblyAIClient
from webinar_analytics.auth import on_authenticate_user
from webinar_analytics.config import config
from webinar_analytics.models import AnalyticsResult, Principal
from webinar_analytics.processors.analytics_service import AnalyticsService
from webinar_analytics.processors.transcription_processor import TranscriptionProcessor
from webinar_analytics.storage import database

logging.basicConfig(
    level=config.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = Flask(__name__)

analytics_service = AnalyticsService()
transcription_processor = TranscriptionProcessor()
assemblyai_client = AssemblyAIClient()


# ============================================
# IDENTITY
# ============================================

def current_principal() -> Optional[Principal]:
    """Principal forwarded by the authenticating proxy, None if anonymous."""
    user_id = request.headers.get("X-Auth-User-Id")
    email = request.headers.get("X-Auth-User-Email")
    if not user_id or not email:
        return None

    return Principal(
        id=user_id,
        email=email,
        name=request.headers.get("X-Auth-User-Name"),
        image_url=request.headers.get("X-Auth-User-Image"),
    )


def current_user_id() -> Optional[str]:
    """Local user ID of the caller, None if unauthenticated."""
    auth = on_authenticate_user(current_principal())
    return auth.user.id if auth.user else None


def envelope_response(result: AnalyticsResult):
    """Map a result envelope onto an HTTP response with the same status."""
    return jsonify(result.to_dict()), result.status


# ============================================
# HEALTH
# ============================================

@app.route("/health")
def health():
    """Health check endpoint."""
    return jsonify({"status": "healthy"})


# ============================================
# ANALYTICS API
# ============================================

@app.route("/api/webinars/<webinar_id>/analytics", methods=["GET"])
def webinar_analytics(webinar_id):
    """Webinar, transcript, insights, live captions and attendance."""
    return envelope_response(analytics_service.get_analytics(webinar_id, current_user_id()))


@app.route("/api/webinars/<webinar_id>/speakers", methods=["GET"])
def speaker_analytics(webinar_id):
    """Per-speaker speaking time and sentiment."""
    return envelope_response(analytics_service.get_speaker_analytics(webinar_id, current_user_id()))


@app.route("/api/webinars/<webinar_id>/timeline", methods=["GET"])
def engagement_timeline(webinar_id):
    """Engagement per 5-minute interval."""
    return envelope_response(analytics_service.get_engagement_timeline(webinar_id, current_user_id()))


@app.route("/api/webinars/<webinar_id>/transcript", methods=["GET"])
def transcript_export(webinar_id):
    """Structured transcript export."""
    return envelope_response(
        analytics_service.get_transcript_for_download(webinar_id, current_user_id())
    )


@app.route("/api/webinars/<webinar_id>/transcript/download", methods=["GET"])
def transcript_download(webinar_id):
    """Download the transcript as a plain-text file."""
    result = analytics_service.get_transcript_for_download(webinar_id, current_user_id())
    if not result.ok:
        return envelope_response(result)

    filename = f"webinar-{webinar_id}-transcript.txt"
    return Response(
        result.data.document,
        mimetype="text/plain",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


# ============================================
# TRANSCRIPTION API
# ============================================

@app.route("/api/webinars/<webinar_id>/transcription", methods=["POST"])
def process_recording(webinar_id):
    """Transcribe a webinar recording and generate insights."""
    data = request.get_json(silent=True) or {}
    recording_url = (data.get("recording_url") or "").strip()

    if not recording_url:
        return jsonify({"status": 400, "message": "recording_url is required"}), 400

    result = transcription_processor.process_webinar_recording(
        webinar_id, current_user_id(), recording_url
    )
    return envelope_response(result)


@app.route("/api/webinars/<webinar_id>/live-transcription/start", methods=["POST"])
def start_live_transcription(webinar_id):
    """Enable live captions for a webinar."""
    return envelope_response(
        transcription_processor.start_live_transcription(webinar_id, current_user_id())
    )


@app.route("/api/live-transcription", methods=["POST"])
def save_live_transcription():
    """Save one streamed caption turn."""
    data = request.get_json(silent=True) or {}
    return envelope_response(transcription_processor.save_live_transcription(current_user_id(), data))


@app.route("/api/assemblyai/token", methods=["GET"])
def streaming_token():
    """Short-lived token for client-side live streaming."""
    user_id = current_user_id()
    if not user_id:
        return jsonify({"error": "Unauthorized - Authentication required"}), 401

    try:
        token = assemblyai_client.create_streaming_token(config.streaming_token_ttl_seconds)
    except ValueError as e:
        logger.error(f"AssemblyAI configuration error: {e}")
        return jsonify({"error": "AssemblyAI configuration error"}), 500
    except Exception as e:
        logger.error(f"Error creating AssemblyAI token: {e}")
        return jsonify({"error": "Failed to create authentication token"}), 500

    return jsonify({
        "token": token,
        "expires_in": config.streaming_token_ttl_seconds,
        "user_id": user_id,
    })


if __name__ == "__main__":
    config.validate()
    database.init_database()
    app.run(host="0.0.0.0", port=config.port, debug=config.debug)
