"""
polyvoice/config.py
====================
Runtime Configuration — PolyVoice

Responsibility:
    - Load ``.env`` and expose environment-driven settings as module constants
    - Resolve the OpenAI credential (``OPENAI_API_KEY``, then ``OPENAI_KEY``)
    - Report which settings are present without ever exposing secret values

This module does NOT:
    - Create OpenAI clients (see openai_client.py)
    - Validate user input (see media/validator.py)
"""

import os

from dotenv import load_dotenv

load_dotenv()


# ---------------------------------------------------------------------------
# Collaborator models
# ---------------------------------------------------------------------------

TRANSCRIPTION_MODEL: str = os.getenv("POLYVOICE_TRANSCRIPTION_MODEL", "whisper-1")
TRANSLATION_MODEL: str = os.getenv("POLYVOICE_TRANSLATION_MODEL", "gpt-3.5-turbo")
TRANSLATION_TEMPERATURE: float = float(os.getenv("POLYVOICE_TRANSLATION_TEMPERATURE", "0.3"))
TRANSLATION_MAX_TOKENS: int = int(os.getenv("POLYVOICE_TRANSLATION_MAX_TOKENS", "1000"))
TTS_MODEL: str = os.getenv("POLYVOICE_TTS_MODEL", "tts-1")

# Compressed encoding requested from speech synthesis
AUDIO_FORMAT: str = os.getenv("POLYVOICE_AUDIO_FORMAT", "mp3")


# ---------------------------------------------------------------------------
# Limits
# ---------------------------------------------------------------------------

MAX_UPLOAD_BYTES: int = int(os.getenv("POLYVOICE_MAX_UPLOAD_MB", "100")) * 1024 * 1024

_timeout_env = os.getenv("POLYVOICE_OPENAI_TIMEOUT", "").strip()
OPENAI_TIMEOUT: float | None = float(_timeout_env) if _timeout_env else None


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------

_API_KEY_ENV_VARS: tuple[str, ...] = ("OPENAI_API_KEY", "OPENAI_KEY")


def get_openai_api_key() -> str | None:
    """Return the first non-empty OpenAI key found in the environment."""
    for name in _API_KEY_ENV_VARS:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    return None


def describe() -> dict:
    """Non-secret configuration summary for status endpoints."""
    return {
        "hasOpenAIKey": get_openai_api_key() is not None,
        "transcriptionModel": TRANSCRIPTION_MODEL,
        "translationModel": TRANSLATION_MODEL,
        "ttsModel": TTS_MODEL,
        "audioFormat": AUDIO_FORMAT,
        "maxUploadBytes": MAX_UPLOAD_BYTES,
    }


def openai_env_var_names() -> list[str]:
    """Names (never values) of OpenAI-related variables that are set."""
    return sorted(name for name in os.environ if "OPENAI" in name)
