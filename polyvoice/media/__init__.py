# polyvoice/media/__init__.py
# ============================
# Media Boundary Layer — PolyVoice
#
# Validates uploaded media and request parameters before a run starts.
# No decoding or audio extraction happens here; the transcription service
# accepts the container directly.

from polyvoice.media.validator import validate_request  # noqa: F401

__all__ = ["validate_request"]
