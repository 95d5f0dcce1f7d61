"""
polyvoice/errors.py
====================
Error Taxonomy — PolyVoice

    InputError          — request rejected before the pipeline starts
    CollaboratorError   — transcription / translation / synthesis failed;
                          the run is aborted and no partial result exists
    DegradedResultWarning — non-fatal; translation came back empty and the
                          original text was used instead

The core never retries. The API layer maps these to HTTP responses.
"""


class PolyVoiceError(Exception):
    """Base class for classified pipeline failures."""

    kind = "error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class InputError(PolyVoiceError):
    """Raised when the conversion request fails validation."""

    kind = "input_error"

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class CollaboratorError(PolyVoiceError):
    """Raised when an external collaborator call fails."""

    kind = "collaborator_error"

    # stage: transcription | translation | synthesis | configuration
    # reason: rate_limited | invalid_media | media_too_large | not_configured | upstream
    def __init__(self, stage: str, message: str, reason: str = "upstream"):
        self.stage = stage
        self.reason = reason
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "message": self.message,
            "stage": self.stage,
            "reason": self.reason,
        }


class DegradedResultWarning(UserWarning):
    """Emitted when a turn's translation is empty and the source text is kept."""
