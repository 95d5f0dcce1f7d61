"""
polyvoice/media/validator.py
=============================
Request Validator — PolyVoice boundary

Responsibility:
    - Validate the target language (required, non-empty)
    - Validate the voice type (male | female, default male)
    - Validate media is present and non-empty
    - Validate media type (video MIME type or known video extension)
    - Validate media size against the configured limit

Every failure raises InputError before the pipeline calls any collaborator.

This module does NOT:
    - Decode, extract or re-encode audio
    - Call any external API
"""

import logging

from polyvoice import config
from polyvoice.errors import InputError
from polyvoice.schemas import ConversionRequest, VoiceType

logger = logging.getLogger("polyvoice.media.validator")


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

ALLOWED_MIME_TYPES: set[str] = {
    "video/mp4",
    "video/avi",
    "video/mov",
    "video/wmv",
    "video/flv",
    "video/webm",
    "video/mkv",
    "video/3gp",
    "video/quicktime",
    "video/x-msvideo",
    "video/x-ms-wmv",
}

ALLOWED_EXTENSIONS: set[str] = {
    ".mp4", ".avi", ".mov", ".wmv", ".flv", ".webm", ".mkv", ".3gp",
}


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_target_language(target_language: str | None) -> str:
    """Return the stripped target language or raise InputError."""
    if target_language is None or not target_language.strip():
        raise InputError("No target language provided", field="targetLanguage")
    return target_language.strip()


def validate_voice_type(voice_type: str | None) -> VoiceType:
    """Parse the voice type; missing or blank means male."""
    if voice_type is None or not voice_type.strip():
        return VoiceType.MALE
    try:
        return VoiceType(voice_type.strip().lower())
    except ValueError:
        raise InputError(
            f"Invalid voice type '{voice_type}'. Allowed: male, female",
            field="voiceType",
        )


def validate_media_present(media_bytes: bytes | None) -> None:
    """
    Raises:
        InputError: If no media was uploaded or it has no content.
    """
    if media_bytes is None:
        raise InputError("No video file provided", field="video")
    if len(media_bytes) == 0:
        raise InputError("Video file is empty.", field="video")


def validate_media_type(mime_type: str | None, file_name: str | None) -> None:
    """
    Accept any ``video/*`` MIME type, a known video MIME type, or a file
    name with a known video extension.

    Raises:
        InputError: If none of the above match.
    """
    mime = (mime_type or "").lower()
    if mime in ALLOWED_MIME_TYPES or mime.startswith("video/"):
        return
    if file_name and _extract_extension(file_name) in ALLOWED_EXTENSIONS:
        return

    raise InputError(
        "Invalid file type. Please upload MP4, AVI, MOV, WMV, FLV, WebM, MKV, or 3GP files. "
        f"Received type: {mime_type or 'unknown'}",
        field="video",
    )


def validate_media_size(media_bytes: bytes) -> None:
    """
    Raises:
        InputError: If media exceeds ``config.MAX_UPLOAD_BYTES``.
    """
    if len(media_bytes) > config.MAX_UPLOAD_BYTES:
        limit_mb = config.MAX_UPLOAD_BYTES // (1024 * 1024)
        raise InputError(f"File size must be less than {limit_mb}MB", field="video")


def validate_request(request: ConversionRequest) -> tuple[str, VoiceType]:
    """
    Full boundary validation for one conversion request.

    Steps:
        1. Target language
        2. Voice type
        3. Media present and non-empty
        4. Media type
        5. Media size

    Returns:
        (target_language, voice_type) normalized for the pipeline.

    Raises:
        InputError: On the first failing check.
    """
    target_language = validate_target_language(request.target_language)
    voice_type = validate_voice_type(request.voice_type)
    validate_media_present(request.media_bytes)
    validate_media_type(request.mime_type, request.file_name)
    validate_media_size(request.media_bytes)

    logger.info(
        "Request valid: file=%s, type=%s, size=%d bytes, target=%s, voice=%s",
        request.file_name, request.mime_type, len(request.media_bytes),
        target_language, voice_type.value,
    )
    return target_language, voice_type


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _extract_extension(filename: str) -> str:
    """Return lowercase file extension including the dot, e.g. '.mp4'."""
    dot_index = filename.rfind(".")
    if dot_index == -1:
        return ""
    return filename[dot_index:].lower()
