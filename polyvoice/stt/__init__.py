# polyvoice/stt/__init__.py
# ==========================
# Speech-to-Text Layer — PolyVoice
#
# Transcription collaborator: media bytes → detected language, duration and
# timestamped segments (OpenAI Whisper, language auto-detected).
#
# Public API:
#   transcribe(media_bytes, file_name, mime_type) → TranscriptionResult

from polyvoice.stt.whisper_client import transcribe  # noqa: F401

__all__ = ["transcribe"]
