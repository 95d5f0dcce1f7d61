"""
main.py
========
Central entry point for the PolyVoice application.

Run with:
    uvicorn main:app --reload

Settings come from the environment, or from a ``.env`` file in the working
directory:

    OPENAI_API_KEY                     required (OPENAI_KEY also accepted)
    LOG_LEVEL                          root log level, default INFO
    POLYVOICE_TRANSCRIPTION_MODEL      default whisper-1
    POLYVOICE_TRANSLATION_MODEL        default gpt-3.5-turbo
    POLYVOICE_TRANSLATION_TEMPERATURE  default 0.3
    POLYVOICE_TRANSLATION_MAX_TOKENS   default 1000
    POLYVOICE_TTS_MODEL                default tts-1
    POLYVOICE_AUDIO_FORMAT             default mp3
    POLYVOICE_MAX_UPLOAD_MB            upload limit, default 100
    POLYVOICE_OPENAI_TIMEOUT           SDK request timeout in seconds, unset by default

A missing key does not stop the server from starting; conversions fail with
a 500 ``not_configured`` error and GET /api/v1/convert-video reports
``hasOpenAIKey: false``.
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()  # Load .env before any module reads env vars

# Configure logging for the entire application
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# Suppress OpenAI SDK internal HTTP/transport logs so only pipeline logs show.
for _openai_logger_name in (
    "openai",
    "openai._base_client",
    "httpx",
    "httpcore",
    "httpcore.http11",
    "httpcore.connection",
):
    logging.getLogger(_openai_logger_name).setLevel(logging.CRITICAL)

from polyvoice.api.upload import app  # noqa: F401, E402

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=True)
