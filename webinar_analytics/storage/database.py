"""Relational storage for webinars, transcripts, insights and attendance.
Uses PostgreSQL when DATABASE_URL is set, otherwise falls back to SQLite."""

import os
import json
import uuid
import logging
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..models import (
    Attendance,
    LiveTranscription,
    Presenter,
    Transcript,
    TranscriptSegment,
    TranscriptStatus,
    User,
    Webinar,
    WebinarInsights,
)

logger = logging.getLogger(__name__)

# Check if we have a PostgreSQL URL
DATABASE_URL = os.getenv("DATABASE_URL")

if DATABASE_URL:
    import psycopg2
    import psycopg2.extras
    logger.info("Using PostgreSQL database")
else:
    import sqlite3
    logger.info("Using SQLite database (local)")

# SQLite database file location (only used locally)
DATABASE_PATH = Path(os.getenv("DATABASE_PATH", "./webinars.db"))

_POSTGRES_TYPES = {"bool": "BOOLEAN", "float": "DOUBLE PRECISION", "json": "JSONB"}
_SQLITE_TYPES = {"bool": "INTEGER", "float": "REAL", "json": "TEXT"}

_SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        external_id TEXT UNIQUE,
        email TEXT UNIQUE NOT NULL,
        name TEXT,
        profile_image TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS webinars (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        description TEXT,
        start_time TIMESTAMP,
        presenter_id TEXT NOT NULL REFERENCES users (id),
        transcript_language TEXT,
        live_transcription_enabled {bool} DEFAULT FALSE,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS webinar_transcripts (
        id TEXT PRIMARY KEY,
        webinar_id TEXT UNIQUE NOT NULL REFERENCES webinars (id),
        status TEXT NOT NULL,
        assembly_ai_id TEXT,
        transcript_text TEXT,
        confidence {float},
        audio_duration INTEGER,
        processing_time {float},
        auto_highlights {json},
        sentiment_results {json},
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS transcript_segments (
        id TEXT PRIMARY KEY,
        transcript_id TEXT NOT NULL REFERENCES webinar_transcripts (id),
        text TEXT NOT NULL,
        start_time {float} NOT NULL,
        end_time {float} NOT NULL,
        speaker TEXT,
        confidence {float},
        sentiment {float}
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS webinar_insights (
        id TEXT PRIMARY KEY,
        webinar_id TEXT UNIQUE NOT NULL REFERENCES webinars (id),
        overall_sentiment {float},
        question_count INTEGER,
        top_keywords {json},
        engagement_score {float},
        key_moments {json},
        audience_participation {float},
        average_confidence {float}
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS live_transcriptions (
        id TEXT PRIMARY KEY,
        webinar_id TEXT NOT NULL REFERENCES webinars (id),
        turn_order INTEGER NOT NULL,
        text TEXT NOT NULL,
        is_formatted {bool} DEFAULT FALSE,
        end_of_turn {bool} DEFAULT FALSE,
        end_of_turn_confidence {float},
        timestamp {float} NOT NULL,
        speaker TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS attendance (
        id TEXT PRIMARY KEY,
        webinar_id TEXT NOT NULL REFERENCES webinars (id),
        user_id TEXT NOT NULL REFERENCES users (id),
        attended_type TEXT NOT NULL,
        engagement_level TEXT,
        time_spoken {float},
        questions_asked INTEGER,
        sentiment_score {float}
    )
    """,
]


def get_connection():
    """Get a database connection."""
    if DATABASE_URL:
        conn = psycopg2.connect(DATABASE_URL)
        conn.autocommit = False
        return conn
    else:
        DATABASE_PATH.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(DATABASE_PATH), check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn


@contextmanager
def _cursor():
    """Yield a cursor, committing on success and always closing the connection."""
    conn = get_connection()
    try:
        cursor = conn.cursor()
        yield cursor
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def _placeholder():
    """Return the correct placeholder for the current database."""
    return "%s" if DATABASE_URL else "?"


def _new_id() -> str:
    return str(uuid.uuid4())


def _to_json(value: Any) -> Optional[str]:
    return json.dumps(value) if value is not None else None


def _from_json(value: Any) -> Any:
    # psycopg2 already decodes JSONB columns
    if value is None or not isinstance(value, str):
        return value
    return json.loads(value)


def _timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def init_database():
    """Create tables if they don't exist."""
    types = _POSTGRES_TYPES if DATABASE_URL else _SQLITE_TYPES
    with _cursor() as cursor:
        for statement in _SCHEMA:
            cursor.execute(statement.format(**types))
    logger.info("Database schema ready")


def _row_to_dict(cursor, row):
    """Convert a row to a dict, works for both PostgreSQL and SQLite."""
    if DATABASE_URL:
        columns = [desc[0] for desc in cursor.description]
        return dict(zip(columns, row))
    else:
        return dict(row)


def _fetch_one(query: str, params: tuple) -> Optional[Dict[str, Any]]:
    with _cursor() as cursor:
        cursor.execute(query, params)
        row = cursor.fetchone()
        return _row_to_dict(cursor, row) if row else None


def _fetch_all(query: str, params: tuple) -> List[Dict[str, Any]]:
    with _cursor() as cursor:
        cursor.execute(query, params)
        return [_row_to_dict(cursor, row) for row in cursor.fetchall()]


# ============================================
# USERS
# ============================================

def create_user(
    email: str,
    external_id: Optional[str] = None,
    name: Optional[str] = None,
    profile_image: Optional[str] = None,
) -> User:
    """Create a user and return it."""
    p = _placeholder()
    user = User(
        id=_new_id(), external_id=external_id, email=email, name=name, profile_image=profile_image
    )
    with _cursor() as cursor:
        cursor.execute(
            f"INSERT INTO users (id, external_id, email, name, profile_image) "
            f"VALUES ({p}, {p}, {p}, {p}, {p})",
            (user.id, user.external_id, user.email, user.name, user.profile_image),
        )
    return user


def get_user_by_external_id(external_id: str) -> Optional[User]:
    p = _placeholder()
    row = _fetch_one(
        f"SELECT id, external_id, email, name, profile_image FROM users WHERE external_id = {p}",
        (external_id,),
    )
    return User(**row) if row else None


def get_user_by_email(email: str) -> Optional[User]:
    p = _placeholder()
    row = _fetch_one(
        f"SELECT id, external_id, email, name, profile_image FROM users WHERE email = {p}",
        (email,),
    )
    return User(**row) if row else None


def update_user_external_id(
    email: str, external_id: str, name: Optional[str] = None, profile_image: Optional[str] = None
) -> Optional[User]:
    """Relink an existing user (matched by email) to a new identity-provider ID."""
    p = _placeholder()
    with _cursor() as cursor:
        cursor.execute(
            f"UPDATE users SET external_id = {p}, name = {p}, profile_image = {p} WHERE email = {p}",
            (external_id, name, profile_image, email),
        )
    return get_user_by_email(email)


# ============================================
# WEBINARS
# ============================================

def create_webinar(
    title: str,
    presenter_id: str,
    start_time: Optional[datetime] = None,
    description: Optional[str] = None,
    transcript_language: Optional[str] = None,
) -> str:
    """Create a webinar and return its ID."""
    p = _placeholder()
    webinar_id = _new_id()
    with _cursor() as cursor:
        cursor.execute(
            f"INSERT INTO webinars (id, title, description, start_time, presenter_id, transcript_language) "
            f"VALUES ({p}, {p}, {p}, {p}, {p}, {p})",
            (webinar_id, title, description, _timestamp(start_time), presenter_id, transcript_language),
        )
    return webinar_id


def get_webinar_for_presenter(webinar_id: str, presenter_id: str) -> Optional[Webinar]:
    """Get a webinar only if it is owned by the given presenter."""
    p = _placeholder()
    row = _fetch_one(
        f"""
        SELECT w.id, w.title, w.description, w.start_time, w.presenter_id,
               w.transcript_language, w.live_transcription_enabled,
               u.name AS presenter_name, u.profile_image AS presenter_image
        FROM webinars w
        LEFT JOIN users u ON u.id = w.presenter_id
        WHERE w.id = {p} AND w.presenter_id = {p}
        """,
        (webinar_id, presenter_id),
    )
    if not row:
        return None

    presenter = Presenter(
        id=row["presenter_id"],
        name=row.pop("presenter_name"),
        profile_image=row.pop("presenter_image"),
    )
    return Webinar(**row, presenter=presenter)


def set_live_transcription_enabled(webinar_id: str, enabled: bool = True):
    p = _placeholder()
    with _cursor() as cursor:
        cursor.execute(
            f"UPDATE webinars SET live_transcription_enabled = {p} WHERE id = {p}",
            (enabled, webinar_id),
        )


# ============================================
# TRANSCRIPTS
# ============================================

def create_transcript(webinar_id: str, status: TranscriptStatus = TranscriptStatus.PROCESSING) -> str:
    """Create (or reset) the transcript record for a webinar and return its ID."""
    p = _placeholder()
    transcript_id = _new_id()
    with _cursor() as cursor:
        existing = None
        cursor.execute(f"SELECT id FROM webinar_transcripts WHERE webinar_id = {p}", (webinar_id,))
        row = cursor.fetchone()
        if row:
            existing = _row_to_dict(cursor, row)["id"]

        if existing:
            cursor.execute(f"DELETE FROM transcript_segments WHERE transcript_id = {p}", (existing,))
            cursor.execute(f"DELETE FROM webinar_transcripts WHERE id = {p}", (existing,))

        cursor.execute(
            f"INSERT INTO webinar_transcripts (id, webinar_id, status) VALUES ({p}, {p}, {p})",
            (transcript_id, webinar_id, status.value),
        )
    return transcript_id


def complete_transcript(
    transcript_id: str,
    assembly_ai_id: Optional[str],
    transcript_text: Optional[str],
    confidence: Optional[float],
    audio_duration: Optional[int],
    auto_highlights: Any,
    sentiment_results: List[Dict[str, Any]],
    segments: List[TranscriptSegment],
    processing_time: Optional[float] = None,
):
    """Store vendor results and segments, and mark the transcript COMPLETED."""
    p = _placeholder()
    with _cursor() as cursor:
        cursor.execute(
            f"""
            UPDATE webinar_transcripts
            SET status = {p}, assembly_ai_id = {p}, transcript_text = {p}, confidence = {p},
                audio_duration = {p}, processing_time = {p}, auto_highlights = {p}, sentiment_results = {p}
            WHERE id = {p}
            """,
            (
                TranscriptStatus.COMPLETED.value,
                assembly_ai_id,
                transcript_text,
                confidence,
                audio_duration,
                processing_time,
                _to_json(auto_highlights),
                _to_json(sentiment_results),
                transcript_id,
            ),
        )
        for segment in segments:
            cursor.execute(
                f"INSERT INTO transcript_segments "
                f"(id, transcript_id, text, start_time, end_time, speaker, confidence, sentiment) "
                f"VALUES ({p}, {p}, {p}, {p}, {p}, {p}, {p}, {p})",
                (
                    segment.id or _new_id(),
                    transcript_id,
                    segment.text,
                    segment.start_time,
                    segment.end_time,
                    segment.speaker,
                    segment.confidence,
                    segment.sentiment,
                ),
            )


def mark_transcript_failed(transcript_id: str):
    p = _placeholder()
    with _cursor() as cursor:
        cursor.execute(
            f"UPDATE webinar_transcripts SET status = {p} WHERE id = {p}",
            (TranscriptStatus.FAILED.value, transcript_id),
        )


def get_transcript_segments(webinar_id: str) -> List[TranscriptSegment]:
    """Get all segments of a webinar's transcript, ordered by start time."""
    p = _placeholder()
    rows = _fetch_all(
        f"""
        SELECT s.id, s.text, s.start_time, s.end_time, s.speaker, s.confidence, s.sentiment
        FROM transcript_segments s
        JOIN webinar_transcripts t ON t.id = s.transcript_id
        WHERE t.webinar_id = {p}
        ORDER BY s.start_time
        """,
        (webinar_id,),
    )
    return [TranscriptSegment(**row) for row in rows]


def get_transcript(webinar_id: str) -> Optional[Transcript]:
    """Get the transcript of a webinar with its ordered segments."""
    p = _placeholder()
    row = _fetch_one(
        f"""
        SELECT id, webinar_id, status, assembly_ai_id, transcript_text, confidence,
               audio_duration, processing_time, auto_highlights, sentiment_results, created_at
        FROM webinar_transcripts WHERE webinar_id = {p}
        """,
        (webinar_id,),
    )
    if not row:
        return None

    row["auto_highlights"] = _from_json(row["auto_highlights"])
    row["sentiment_results"] = _from_json(row["sentiment_results"]) or []
    return Transcript(**row, segments=get_transcript_segments(webinar_id))


# ============================================
# INSIGHTS
# ============================================

def upsert_insights(insights: WebinarInsights):
    """Insert or replace the insights row of a webinar."""
    p = _placeholder()
    with _cursor() as cursor:
        cursor.execute(
            f"""
            INSERT INTO webinar_insights
                (id, webinar_id, overall_sentiment, question_count, top_keywords,
                 engagement_score, key_moments, audience_participation, average_confidence)
            VALUES ({p}, {p}, {p}, {p}, {p}, {p}, {p}, {p}, {p})
            ON CONFLICT (webinar_id) DO UPDATE SET
                overall_sentiment = excluded.overall_sentiment,
                question_count = excluded.question_count,
                top_keywords = excluded.top_keywords,
                engagement_score = excluded.engagement_score,
                key_moments = excluded.key_moments,
                audience_participation = excluded.audience_participation,
                average_confidence = excluded.average_confidence
            """,
            (
                insights.id or _new_id(),
                insights.webinar_id,
                insights.overall_sentiment,
                insights.question_count,
                _to_json(insights.top_keywords),
                insights.engagement_score,
                _to_json([moment.model_dump() for moment in insights.key_moments]),
                insights.audience_participation,
                insights.average_confidence,
            ),
        )


def get_insights(webinar_id: str) -> Optional[WebinarInsights]:
    p = _placeholder()
    row = _fetch_one(
        f"""
        SELECT id, webinar_id, overall_sentiment, question_count, top_keywords,
               engagement_score, key_moments, audience_participation, average_confidence
        FROM webinar_insights WHERE webinar_id = {p}
        """,
        (webinar_id,),
    )
    if not row:
        return None

    row["top_keywords"] = _from_json(row["top_keywords"]) or []
    row["key_moments"] = _from_json(row["key_moments"]) or []
    return WebinarInsights(**row)


# ============================================
# LIVE TRANSCRIPTION
# ============================================

def add_live_transcription(
    webinar_id: str,
    turn_order: int,
    text: str,
    timestamp: float,
    is_formatted: bool = False,
    end_of_turn: bool = False,
    end_of_turn_confidence: Optional[float] = None,
    speaker: Optional[str] = None,
) -> str:
    """Store one live caption turn and return its ID."""
    p = _placeholder()
    row_id = _new_id()
    with _cursor() as cursor:
        cursor.execute(
            f"INSERT INTO live_transcriptions "
            f"(id, webinar_id, turn_order, text, is_formatted, end_of_turn, "
            f"end_of_turn_confidence, timestamp, speaker) "
            f"VALUES ({p}, {p}, {p}, {p}, {p}, {p}, {p}, {p}, {p})",
            (
                row_id,
                webinar_id,
                turn_order,
                text,
                is_formatted,
                end_of_turn,
                end_of_turn_confidence,
                timestamp,
                speaker,
            ),
        )
    return row_id


def get_live_transcriptions(webinar_id: str, limit: int = 100) -> List[LiveTranscription]:
    """Get live caption turns ordered by turn order, capped at `limit`."""
    p = _placeholder()
    rows = _fetch_all(
        f"""
        SELECT id, webinar_id, turn_order, text, is_formatted, end_of_turn,
               end_of_turn_confidence, timestamp, speaker
        FROM live_transcriptions WHERE webinar_id = {p}
        ORDER BY turn_order
        LIMIT {p}
        """,
        (webinar_id, limit),
    )
    return [LiveTranscription(**row) for row in rows]


# ============================================
# ATTENDANCE
# ============================================

def add_attendance(
    webinar_id: str,
    user_id: str,
    attended_type: str = "ATTENDED",
    engagement_level: Optional[str] = None,
    time_spoken: Optional[float] = None,
    questions_asked: Optional[int] = None,
    sentiment_score: Optional[float] = None,
) -> str:
    p = _placeholder()
    row_id = _new_id()
    with _cursor() as cursor:
        cursor.execute(
            f"INSERT INTO attendance "
            f"(id, webinar_id, user_id, attended_type, engagement_level, time_spoken, "
            f"questions_asked, sentiment_score) "
            f"VALUES ({p}, {p}, {p}, {p}, {p}, {p}, {p}, {p})",
            (
                row_id,
                webinar_id,
                user_id,
                attended_type,
                engagement_level,
                time_spoken,
                questions_asked,
                sentiment_score,
            ),
        )
    return row_id


def get_attendance(webinar_id: str) -> List[Attendance]:
    """Get all attendance rows of a webinar joined with the attendee."""
    p = _placeholder()
    rows = _fetch_all(
        f"""
        SELECT a.id, a.webinar_id, a.attended_type, a.engagement_level, a.time_spoken,
               a.questions_asked, a.sentiment_score,
               u.id AS user_id, u.name AS user_name, u.email AS user_email
        FROM attendance a
        JOIN users u ON u.id = a.user_id
        WHERE a.webinar_id = {p}
        """,
        (webinar_id,),
    )
    attendance = []
    for row in rows:
        user = {"id": row.pop("user_id"), "name": row.pop("user_name"), "email": row.pop("user_email")}
        attendance.append(Attendance(**row, user=user))
    return attendance
