"""
polyvoice/tts/speech_client.py
===============================
OpenAI Speech Synthesis Client — PolyVoice

Responsibility:
    - Synthesize speech for one translated turn with a given voice
    - Request a compressed encoding (mp3 by default)
    - Return the encoded audio bytes unchanged

This module does NOT:
    - Choose the voice (see turn_processor.select_voice)
    - Concatenate or re-encode audio
"""

import logging

from polyvoice import config
from polyvoice.openai_client import collaborator_error, create_client
from polyvoice.schemas import Voice

logger = logging.getLogger("polyvoice.tts.speech_client")


async def synthesize_speech(
    text: str,
    voice: Voice,
    audio_format: str | None = None,
) -> bytes:
    """
    Generate speech audio for ``text``.

    Args:
        text: Text to speak (already translated).
        voice: Voice identifier.
        audio_format: Requested encoding; defaults to ``config.AUDIO_FORMAT``.

    Returns:
        Encoded audio bytes.

    Raises:
        CollaboratorError: If the client cannot be built or the call fails.
    """
    async with create_client("synthesis") as client:
        try:
            response = await client.audio.speech.create(
                model=config.TTS_MODEL,
                voice=Voice(voice).value,
                input=text,
                response_format=audio_format or config.AUDIO_FORMAT,
            )
            audio_bytes = response.content
        except Exception as exc:
            raise collaborator_error("synthesis", exc) from exc

    logger.debug("Synthesized %d bytes with voice=%s.", len(audio_bytes), Voice(voice).value)
    return audio_bytes
