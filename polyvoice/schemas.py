"""
polyvoice/schemas.py
=====================
Data Types — PolyVoice

Every record that flows through the pipeline is a frozen dataclass.
Records are created once by the stage that owns them and never mutated:

    TranscriptSegment   — raw timestamped text from the transcription service
    TranscriptionResult — segments + detected language + total duration
    SpeakerTurn         — consecutive segments attributed to one speaker
    ProcessedTurn       — a SpeakerTurn with its translation and audio
    ConversionResult    — the final aggregate of one run
    ConversionRequest   — the boundary input for one run
"""

import base64
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Speaker(str, Enum):
    """Closed two-party speaker model."""

    SPEAKER_1 = "Speaker 1"
    SPEAKER_2 = "Speaker 2"

    def other(self) -> "Speaker":
        return Speaker.SPEAKER_2 if self is Speaker.SPEAKER_1 else Speaker.SPEAKER_1


class VoiceType(str, Enum):
    MALE = "male"
    FEMALE = "female"


class Voice(str, Enum):
    """Speech-synthesis voice identifiers."""

    ONYX = "onyx"
    ECHO = "echo"
    NOVA = "nova"
    SHIMMER = "shimmer"


# ---------------------------------------------------------------------------
# Transcription
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TranscriptSegment:
    """A single time-aligned text segment (no speaker info)."""

    text: str | None
    start: float
    end: float


@dataclass(frozen=True)
class TranscriptionResult:
    """Full response of the transcription service."""

    segments: tuple[TranscriptSegment, ...]
    language: str = "auto-detected"
    duration: float = 0.0
    text: str = ""


# ---------------------------------------------------------------------------
# Turns
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SpeakerTurn:
    """Consecutive segments attributed to one inferred speaker."""

    speaker: Speaker
    text: str
    start_time: float
    end_time: float

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    def to_dict(self) -> dict:
        return {
            "speaker": self.speaker.value,
            "text": self.text,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "duration": self.duration,
        }


@dataclass(frozen=True)
class ProcessedTurn:
    """A SpeakerTurn after translation and speech synthesis."""

    turn: SpeakerTurn
    translated_text: str
    voice: Voice
    audio_bytes: bytes
    translation_fallback: bool = False

    @property
    def speaker(self) -> Speaker:
        return self.turn.speaker

    @property
    def audio_byte_length(self) -> int:
        return len(self.audio_bytes)

    def to_dict(self) -> dict:
        data = self.turn.to_dict()
        data.update({
            "translatedText": self.translated_text,
            "voice": self.voice.value,
            "audioSize": self.audio_byte_length,
            "audioData": base64.b64encode(self.audio_bytes).decode("ascii"),
        })
        return data


# ---------------------------------------------------------------------------
# Run input / output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConversionRequest:
    """Everything needed to start one run."""

    media_bytes: bytes | None
    file_name: str | None
    mime_type: str | None
    target_language: str | None
    voice_type: str | None = VoiceType.MALE.value


PROCESSING_STEPS: tuple[str, ...] = (
    "Video audio extracted",
    "Multiple speakers identified and separated",
    "Each speaker transcribed individually",
    "Text translated to target language per speaker",
    "Different AI voices assigned to each speaker",
    "Audio generated and combined",
    "Ready for video assembly",
)


@dataclass(frozen=True)
class ConversionResult:
    """Final artifact of one run. Created once, never mutated."""

    text: str
    original_text: str
    target_language: str
    source_language: str
    duration: float
    word_count: int
    audio_bytes: bytes
    audio_format: str
    turns: tuple[ProcessedTurn, ...]
    file_name: str | None = None
    file_size: int = 0
    warnings: tuple[str, ...] = ()
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def audio_byte_length(self) -> int:
        return len(self.audio_bytes)

    def to_dict(self) -> dict:
        """Serialize to the API response shape (audio as base64)."""
        return {
            "text": self.text,
            "originalText": self.original_text,
            "language": self.target_language,
            "originalLanguage": self.source_language,
            "duration": self.duration,
            "wordCount": self.word_count,
            "fileName": self.file_name,
            "fileSize": self.file_size,
            "audioData": base64.b64encode(self.audio_bytes).decode("ascii"),
            "audioFormat": self.audio_format,
            "timestamp": self.created_at.isoformat(),
            "speakerSegments": [t.to_dict() for t in self.turns],
            "processingSteps": list(PROCESSING_STEPS),
            "warnings": list(self.warnings),
        }
