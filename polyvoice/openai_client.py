"""
polyvoice/openai_client.py
===========================
Shared OpenAI client utility — PolyVoice

Provides:
    - ``create_client()`` — a fresh ``AsyncOpenAI`` client per call, so no
      client state is shared between runs; use it as ``async with`` so its
      connection pool is closed when the call returns
    - ``collaborator_error(stage, exc)`` — classify an SDK failure into a
      ``CollaboratorError`` the API layer can map to an HTTP status

Usage in any collaborator module::

    from polyvoice.openai_client import create_client, collaborator_error

    async with create_client("translation") as client:
        try:
            response = await client.chat.completions.create(...)
        except Exception as exc:
            raise collaborator_error("translation", exc) from exc

This module does NOT:
    - Retry failed calls (no retries anywhere in the core)
    - Throttle, pool or batch requests across runs
"""

import logging

from openai import AsyncOpenAI

from polyvoice import config
from polyvoice.errors import CollaboratorError

logger = logging.getLogger("polyvoice.openai_client")


# ---------------------------------------------------------------------------
# Classification tables
# ---------------------------------------------------------------------------

_RATE_LIMIT_TYPES: set[str] = {"RateLimitError"}
_RATE_LIMIT_STATUS_CODES: set[int] = {429}
_TOO_LARGE_STATUS_CODES: set[int] = {413}

# Substrings the API puts in its error messages
_INVALID_MEDIA_MARKERS: tuple[str, ...] = ("Invalid file format", "could not be decoded")
_TOO_LARGE_MARKERS: tuple[str, ...] = ("File size", "Maximum content size")
_RATE_LIMIT_MARKERS: tuple[str, ...] = ("Rate limit", "rate limit")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def create_client(stage: str) -> AsyncOpenAI:
    """
    Build an ``AsyncOpenAI`` client from the configured credential.

    Args:
        stage: Collaborator stage requesting the client (for error context).

    Raises:
        CollaboratorError: If no API key is configured.
    """
    api_key = config.get_openai_api_key()
    if not api_key:
        raise CollaboratorError(
            stage,
            "OpenAI API key not configured. Please add OPENAI_API_KEY to environment variables.",
            reason="not_configured",
        )

    kwargs: dict = {"api_key": api_key}
    if config.OPENAI_TIMEOUT is not None:
        kwargs["timeout"] = config.OPENAI_TIMEOUT
    return AsyncOpenAI(**kwargs)


def classify_openai_error(exc: Exception) -> str:
    """Return the ``CollaboratorError.reason`` for an SDK exception."""
    exc_type = type(exc).__name__
    exc_str = str(exc)
    status_code = getattr(exc, "status_code", None)

    if exc_type in _RATE_LIMIT_TYPES or status_code in _RATE_LIMIT_STATUS_CODES:
        return "rate_limited"
    if status_code in _TOO_LARGE_STATUS_CODES:
        return "media_too_large"

    # Fallback: look for known phrases in the message
    if any(marker in exc_str for marker in _RATE_LIMIT_MARKERS):
        return "rate_limited"
    if any(marker in exc_str for marker in _INVALID_MEDIA_MARKERS):
        return "invalid_media"
    if any(marker in exc_str for marker in _TOO_LARGE_MARKERS):
        return "media_too_large"

    return "upstream"


def collaborator_error(stage: str, exc: Exception) -> CollaboratorError:
    """Wrap an SDK exception raised during ``stage``."""
    if isinstance(exc, CollaboratorError):
        return exc

    reason = classify_openai_error(exc)
    logger.error("OpenAI %s call failed (%s): %s", stage, reason, exc)
    return CollaboratorError(stage, f"OpenAI {stage} failed: {exc}", reason=reason)
