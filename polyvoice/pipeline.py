"""
polyvoice/pipeline.py
======================
Pipeline Orchestrator — PolyVoice

Responsibility:
    1. Validate the request (before any collaborator call)
    2. Transcribe the media
    3. Normalize segments and attribute speaker turns
    4. Process turns STRICTLY in order (turn i+1 starts after turn i)
    5. Concatenate per-turn audio byte-for-byte
    6. Join "{speaker}: {text}" blocks for translated and original text
    7. Count words of the combined translated text
    8. Assemble and return the ConversionResult

The run is atomic for the caller: either a complete ConversionResult is
returned or an exception propagates. ProcessedTurns produced before a
failure live only in this function's frame and are discarded with it.

Turns are processed one at a time, in turn order. Do not parallelize.

This layer MUST NOT:
    - Retry collaborator calls
    - Keep state between runs
    - Re-encode or mix audio
"""

import logging
from collections.abc import Sequence

from polyvoice import config
from polyvoice.media.validator import validate_request
from polyvoice.nlp import segments_to_turns
from polyvoice.schemas import (
    ConversionRequest,
    ConversionResult,
    ProcessedTurn,
    SpeakerTurn,
    TranscriptionResult,
    VoiceType,
)
from polyvoice.stt.whisper_client import transcribe
from polyvoice.turn_processor import fallback_message, process_turn

logger = logging.getLogger("polyvoice.pipeline")

TURN_SEPARATOR = "\n\n"


# =====================================================================
# Aggregation helpers
# =====================================================================


def combine_audio(turns: Sequence[ProcessedTurn]) -> bytes:
    """Concatenate encoded audio in turn order. No silence, no re-encoding."""
    return b"".join(t.audio_bytes for t in turns)


def combine_text(turns: Sequence[ProcessedTurn], translated: bool = True) -> str:
    """Join ``"{speaker}: {text}"`` blocks with a blank line between turns."""
    return TURN_SEPARATOR.join(
        f"{t.speaker.value}: {t.translated_text if translated else t.turn.text}"
        for t in turns
    )


def count_words(text: str) -> int:
    """Number of non-empty whitespace-separated tokens."""
    return len([word for word in text.split() if word])


def assemble_result(
    processed: Sequence[ProcessedTurn],
    transcription: TranscriptionResult,
    target_language: str,
    file_name: str | None = None,
    file_size: int = 0,
) -> ConversionResult:
    """Build the final ConversionResult from fully processed turns."""
    translated_text = combine_text(processed, translated=True)
    original_text = combine_text(processed, translated=False)

    return ConversionResult(
        text=translated_text,
        original_text=original_text,
        target_language=target_language,
        source_language=transcription.language,
        duration=transcription.duration,
        word_count=count_words(translated_text),
        audio_bytes=combine_audio(processed),
        audio_format=config.AUDIO_FORMAT,
        turns=tuple(processed),
        file_name=file_name,
        file_size=file_size,
        warnings=tuple(
            fallback_message(t.turn) for t in processed if t.translation_fallback
        ),
    )


# =====================================================================
# Main orchestration
# =====================================================================


async def process_turns(
    turns: Sequence[SpeakerTurn],
    target_language: str,
    voice_type: VoiceType,
) -> list[ProcessedTurn]:
    """Process each turn after the previous one has finished."""
    processed: list[ProcessedTurn] = []
    for index, turn in enumerate(turns, start=1):
        logger.info("Turn %d/%d (%s)", index, len(turns), turn.speaker.value)
        processed.append(await process_turn(turn, target_language, voice_type))
    return processed


async def run_pipeline(request: ConversionRequest) -> ConversionResult:
    """
    Execute one end-to-end conversion run.

    Args:
        request: Media bytes, file name, MIME type, target language and
            voice type.

    Returns:
        Complete ConversionResult.

    Raises:
        InputError: Request failed validation; no collaborator was called.
        CollaboratorError: A collaborator call failed; the run is aborted.
    """
    target_language, voice_type = validate_request(request)

    # ==================================================================
    # STEP 1 — Transcription
    # ==================================================================
    logger.info("=" * 60)
    logger.info("STEP 1: Transcription")
    logger.info("=" * 60)

    transcription = await transcribe(
        request.media_bytes, request.file_name, request.mime_type,
    )

    # ==================================================================
    # STEP 2 — Segment normalization + speaker attribution
    # ==================================================================
    logger.info("=" * 60)
    logger.info("STEP 2: Speaker Attribution")
    logger.info("=" * 60)

    turns = segments_to_turns(list(transcription.segments))
    logger.info("Speaker turns identified: %d", len(turns))

    # ==================================================================
    # STEP 3 — Per-turn translation + synthesis (sequential)
    # ==================================================================
    logger.info("=" * 60)
    logger.info("STEP 3: Translation + Speech Synthesis")
    logger.info("=" * 60)

    processed = await process_turns(turns, target_language, voice_type)

    # ==================================================================
    # FINAL — Assembly
    # ==================================================================
    result = assemble_result(
        processed,
        transcription,
        target_language,
        file_name=request.file_name,
        file_size=len(request.media_bytes),
    )

    logger.info(
        "Conversion result: %d words, %.2fs duration, audio: %d bytes, turns: %d",
        result.word_count, result.duration, result.audio_byte_length, len(result.turns),
    )
    return result
