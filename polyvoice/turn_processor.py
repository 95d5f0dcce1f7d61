"""
polyvoice/turn_processor.py
============================
Turn Processor — PolyVoice

Responsibility:
    For ONE speaker turn, strictly in this order:
        1. Translate the turn's text into the target language
           (empty translation → keep the original text, warn, continue)
        2. Pick the voice from a fixed speaker × voice-type table
        3. Synthesize speech for the translated text with that voice
    and return a ProcessedTurn.

Voice table (deterministic, never randomized):

    voice type | Speaker 1 | Speaker 2
    -----------+-----------+----------
    male       | onyx      | echo
    female     | nova      | shimmer

Any collaborator failure propagates as CollaboratorError and aborts the
whole run. There is no per-turn retry or skip.
"""

import logging
import warnings

from polyvoice import config
from polyvoice.errors import DegradedResultWarning
from polyvoice.nlp.translator import translate_text
from polyvoice.schemas import ProcessedTurn, Speaker, SpeakerTurn, Voice, VoiceType
from polyvoice.tts.speech_client import synthesize_speech

logger = logging.getLogger("polyvoice.turn_processor")


VOICE_TABLE: dict[VoiceType, dict[Speaker, Voice]] = {
    VoiceType.MALE: {
        Speaker.SPEAKER_1: Voice.ONYX,
        Speaker.SPEAKER_2: Voice.ECHO,
    },
    VoiceType.FEMALE: {
        Speaker.SPEAKER_1: Voice.NOVA,
        Speaker.SPEAKER_2: Voice.SHIMMER,
    },
}


def select_voice(speaker: Speaker, voice_type: VoiceType | str) -> Voice:
    """
    Look up the voice for a speaker.

    Raises:
        ValueError: For a voice type or speaker outside the two-party table.
    """
    voices = VOICE_TABLE[VoiceType(voice_type)]
    try:
        return voices[Speaker(speaker)]
    except KeyError:
        raise ValueError(f"No voice defined for speaker {speaker!r}")


def fallback_message(turn: SpeakerTurn) -> str:
    return (
        f"Empty translation for {turn.speaker.value} "
        f"({turn.start_time:.2f}s–{turn.end_time:.2f}s); original text used."
    )


async def process_turn(
    turn: SpeakerTurn,
    target_language: str,
    voice_type: VoiceType | str = VoiceType.MALE,
) -> ProcessedTurn:
    """
    Translate and voice one speaker turn.

    Args:
        turn: Turn produced by the attribution engine.
        target_language: Target language name or code.
        voice_type: ``male`` or ``female``.

    Returns:
        ProcessedTurn with translated text, voice and audio bytes.

    Raises:
        CollaboratorError: If translation or synthesis fails.
    """
    logger.info("Processing %s: %r", turn.speaker.value, turn.text[:50])

    # Step 1: translate (synthesis needs the result, so this completes first)
    translated = await translate_text(turn.text, target_language)
    fallback = not translated
    if fallback:
        message = fallback_message(turn)
        logger.warning(message)
        warnings.warn(message, DegradedResultWarning, stacklevel=2)
        translated = turn.text

    # Step 2: voice
    voice = select_voice(turn.speaker, voice_type)

    # Step 3: synthesize
    audio_bytes = await synthesize_speech(translated, voice, config.AUDIO_FORMAT)

    logger.info(
        "Completed %s: voice=%s, %d bytes",
        turn.speaker.value, voice.value, len(audio_bytes),
    )
    return ProcessedTurn(
        turn=turn,
        translated_text=translated,
        voice=voice,
        audio_bytes=audio_bytes,
        translation_fallback=fallback,
    )
