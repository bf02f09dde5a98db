"""Transcript export: structured payload and flat text document"""

from typing import List, Optional

from ..models import (
    DownloadInsights,
    DownloadSegment,
    DownloadTranscriptInfo,
    DownloadWebinarInfo,
    Transcript,
    TranscriptDownload,
    Webinar,
)
from .time_format import format_duration, format_timestamp, round_half_up

MAX_HIGHLIGHTS = 10
RULE_WIDTH = 60
NO_TRANSCRIPT_TEXT = "No transcript available for this webinar."


def build_download(webinar: Webinar, transcript: Optional[Transcript]) -> TranscriptDownload:
    """Assemble the structured export and render its text document

    Args:
        webinar: Webinar the transcript belongs to
        transcript: Transcript with segments, or None if none was produced

    Returns:
        TranscriptDownload with the `document` field filled in
    """
    presenter_name = webinar.presenter.name if webinar.presenter else None

    webinar_info = DownloadWebinarInfo(
        title=webinar.title,
        presenter=presenter_name,
        date=webinar.start_time,
        duration=transcript.audio_duration if transcript else None,
    )

    if transcript is None:
        download = TranscriptDownload(
            webinar=webinar_info,
            transcript=DownloadTranscriptInfo(),
        )
    else:
        segments = [
            DownloadSegment(
                timestamp=format_timestamp(segment.start_time),
                speaker=segment.speaker_label,
                text=segment.text,
                confidence=round_half_up((segment.confidence or 0.0) * 100),
            )
            for segment in transcript.segments
        ]

        highlights = transcript.highlights
        insights = None
        if highlights:
            insights = DownloadInsights(
                highlights=highlights,
                sentiment=transcript.sentiment_results or [],
            )

        download = TranscriptDownload(
            webinar=webinar_info,
            transcript=DownloadTranscriptInfo(
                full_text=transcript.transcript_text,
                segments=segments,
                confidence=round_half_up((transcript.confidence or 0.0) * 100),
                processing_time=transcript.processing_time,
            ),
            insights=insights,
        )

    download.document = render_transcript_text(download)
    return download


def _header_lines(download: TranscriptDownload) -> List[str]:
    webinar = download.webinar
    date = webinar.date.strftime("%Y-%m-%d %H:%M") if webinar.date else "N/A"
    duration = format_duration(webinar.duration) if webinar.duration is not None else "N/A"

    return [
        "=" * RULE_WIDTH,
        webinar.title,
        "=" * RULE_WIDTH,
        f"Presenter: {webinar.presenter or 'Unknown'}",
        f"Date: {date}",
        f"Duration: {duration}",
        f"Confidence: {download.transcript.confidence}%",
        "",
    ]


def _body_lines(download: TranscriptDownload) -> List[str]:
    lines = ["TRANSCRIPT", "-" * RULE_WIDTH]

    if download.transcript.segments:
        for segment in download.transcript.segments:
            lines.append(f"[{segment.timestamp}] {segment.speaker}: {segment.text}")
    elif download.transcript.full_text:
        lines.append(download.transcript.full_text)
    else:
        lines.append(NO_TRANSCRIPT_TEXT)

    lines.append("")
    return lines


def _highlight_lines(download: TranscriptDownload) -> List[str]:
    # No insights means no section at all, not an empty header
    if download.insights is None or not download.insights.highlights:
        return []

    lines = ["HIGHLIGHTS", "-" * RULE_WIDTH]
    for i, highlight in enumerate(download.insights.highlights[:MAX_HIGHLIGHTS], 1):
        text = highlight.get("text", "") if isinstance(highlight, dict) else str(highlight)
        lines.append(f"{i}. {text}")
    lines.append("")
    return lines


def render_transcript_text(download: TranscriptDownload) -> str:
    """Render the export as a plain-text document"""
    lines = _header_lines(download) + _body_lines(download) + _highlight_lines(download)
    return "\n".join(lines).rstrip("\n") + "\n"
