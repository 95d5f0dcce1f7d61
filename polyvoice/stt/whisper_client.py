"""
polyvoice/stt/whisper_client.py
================================
OpenAI Whisper Transcription Client — PolyVoice

Responsibility:
    - Send the uploaded media to OpenAI Whisper (language auto-detected)
    - Return the detected language, total duration and time-aligned
      segments exactly as received

This module does NOT:
    - Trim text or drop empty segments (see nlp/segment_normalizer.py)
    - Attribute speakers (see nlp/speaker_attribution.py)
    - Decode or extract audio from the container
"""

import io
import logging
from typing import Any

from polyvoice import config
from polyvoice.openai_client import collaborator_error, create_client
from polyvoice.schemas import TranscriptionResult, TranscriptSegment

logger = logging.getLogger("polyvoice.stt.whisper_client")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def transcribe(
    media_bytes: bytes,
    file_name: str | None,
    mime_type: str | None = None,
) -> TranscriptionResult:
    """
    Transcribe media using OpenAI Whisper.

    No language is forced; Whisper detects it. Segment-level timestamps
    are requested through ``verbose_json``.

    Args:
        media_bytes: Raw uploaded video/audio bytes.
        file_name:   Original file name (Whisper infers the format from it).
        mime_type:   Declared MIME type, used for logging only.

    Returns:
        TranscriptionResult with raw, un-normalized segments.

    Raises:
        CollaboratorError: If the client cannot be built or the call fails.
    """
    media_file = io.BytesIO(media_bytes)
    media_file.name = file_name or "upload.mp4"

    logger.info(
        "Sending to Whisper: %s, %d bytes, type=%s",
        media_file.name, len(media_bytes), mime_type,
    )

    async with create_client("transcription") as client:
        try:
            response = await client.audio.transcriptions.create(
                model=config.TRANSCRIPTION_MODEL,
                file=media_file,
                response_format="verbose_json",
                timestamp_granularities=["segment"],
            )
        except Exception as exc:
            raise collaborator_error("transcription", exc) from exc

    result = parse_transcription(response)
    logger.info(
        "Transcription completed: language=%s, duration=%.2fs, segments=%d",
        result.language, result.duration, len(result.segments),
    )
    return result


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------


def parse_transcription(response: Any) -> TranscriptionResult:
    """Convert a ``verbose_json`` response (object or dict) to a TranscriptionResult."""
    raw_segments = _field(response, "segments") or []
    segments = tuple(_parse_segment(seg) for seg in raw_segments)

    return TranscriptionResult(
        segments=segments,
        language=_field(response, "language") or "auto-detected",
        duration=float(_field(response, "duration") or 0.0),
        text=_field(response, "text") or "",
    )


def _parse_segment(seg: Any) -> TranscriptSegment:
    # Text is kept as-is (possibly None); normalization happens downstream
    return TranscriptSegment(
        text=_field(seg, "text"),
        start=float(_field(seg, "start") or 0.0),
        end=float(_field(seg, "end") or 0.0),
    )


def _field(obj: Any, name: str) -> Any:
    """Handle both dict and object attribute access patterns."""
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)
