"""
polyvoice/nlp/translator.py
============================
Translator — PolyVoice translation collaborator

Responsibility:
    - Translate one speaker turn's text into the target language via an
      OpenAI chat completion
    - Preserve meaning and tone; return the translation only, no commentary
    - Return an empty string when the model returns no content (the turn
      processor decides what to do with that)

This module does NOT:
    - Fall back to the source text (see turn_processor.py)
    - Batch turns together; each turn is translated on its own
    - Retry failed calls
"""

import logging
from typing import Any

from polyvoice import config
from polyvoice.openai_client import collaborator_error, create_client

logger = logging.getLogger("polyvoice.nlp.translator")


# ---------------------------------------------------------------------------
# Prompt
# ---------------------------------------------------------------------------


def build_system_prompt(target_language: str) -> str:
    return (
        f"You are a professional translator. Translate the following text to {target_language}. "
        "Maintain the original meaning, tone, and context. "
        "Return only the translated text without any additional commentary."
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def translate_text(text: str, target_language: str) -> str:
    """
    Translate ``text`` into ``target_language``.

    Args:
        text: Source text of one speaker turn.
        target_language: Target language name or code (e.g. "Spanish", "es").

    Returns:
        Translated text, stripped. Empty string if the model returned
        no choices or no content.

    Raises:
        CollaboratorError: If the client cannot be built or the call fails.
    """
    async with create_client("translation") as client:
        try:
            response = await client.chat.completions.create(
                model=config.TRANSLATION_MODEL,
                messages=[
                    {"role": "system", "content": build_system_prompt(target_language)},
                    {"role": "user", "content": text},
                ],
                temperature=config.TRANSLATION_TEMPERATURE,
                max_tokens=config.TRANSLATION_MAX_TOKENS,
            )
        except Exception as exc:
            raise collaborator_error("translation", exc) from exc

    return _extract_content(response)


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------


def _extract_content(response: Any) -> str:
    choices = getattr(response, "choices", None) or []
    if not choices:
        logger.warning("Translation response had no choices.")
        return ""

    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if not isinstance(content, str):
        return ""
    return content.strip()
