"""
polyvoice/api/upload.py
========================
API Upload Endpoint — PolyVoice

Responsibility:
    - Expose POST /api/v1/convert-video (multipart/form-data)
        video:          uploaded video file
        targetLanguage: required
        voiceType:      "male" | "female" (default "male")
    - Delegate the run to polyvoice.pipeline.run_pipeline
    - Cancel the run if the client disconnects
    - Map classified errors to structured JSON:
        {"error": {"kind": ..., "message": ...}}
    - Expose GET /api/v1/convert-video and GET /api/v1/debug status checks

A failed run never returns a partial result.
"""

import asyncio
import logging
from datetime import datetime, timezone

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from polyvoice import config
from polyvoice.errors import CollaboratorError, InputError
from polyvoice.pipeline import run_pipeline
from polyvoice.schemas import ConversionRequest

logger = logging.getLogger("polyvoice.api")

# How often the pending run checks for a client disconnect
DISCONNECT_POLL_SECONDS: float = 1.0

_COLLABORATOR_STATUS: dict[str, int] = {
    "rate_limited": 429,
    "invalid_media": 400,
    "media_too_large": 400,
    "not_configured": 500,
}


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

app = FastAPI(
    title="PolyVoice",
    description="Multi-speaker video speech translation and dubbing.",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _error_response(status_code: int, error: dict) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error})


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class ClientDisconnected(Exception):
    """Raised when the caller goes away before the run finishes."""


async def _run_until_disconnect(request: Request, conversion: ConversionRequest):
    """
    Run the pipeline as a task and cancel it if the client disconnects.

    Cancelling the task cancels the collaborator call in flight; the
    partial run is discarded.
    """
    task = asyncio.create_task(run_pipeline(conversion))
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=DISCONNECT_POLL_SECONDS)
            if done:
                return task.result()
            if await request.is_disconnected():
                task.cancel()
                raise ClientDisconnected()
    finally:
        if not task.done():
            task.cancel()


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/api/v1/convert-video")
async def conversion_status():
    """Liveness and configuration presence (never secret values)."""
    return {
        "message": "Video Conversion API is working",
        "timestamp": _timestamp(),
        "config": config.describe(),
    }


@app.get("/api/v1/debug")
async def debug_environment():
    """Which OpenAI-related environment variables are set, by name only."""
    return {
        "status": "success",
        "message": "Debug endpoint working",
        "environment": {
            "hasOpenAIKey": config.get_openai_api_key() is not None,
            "openAIEnvVars": config.openai_env_var_names(),
        },
        "timestamp": _timestamp(),
    }


@app.post("/api/v1/convert-video")
async def convert_video(
    request: Request,
    video: UploadFile | None = File(None),
    target_language: str | None = Form(None, alias="targetLanguage"),
    voice_type: str | None = Form("male", alias="voiceType"),
):
    """
    Accept a video and run the full conversion pipeline.

    Returns ConversionResult.to_dict() on success, or a structured error.
    """
    if config.get_openai_api_key() is None:
        logger.error("OpenAI API key not configured")
        return _error_response(500, CollaboratorError(
            "configuration",
            "OpenAI API key not configured. Please add OPENAI_API_KEY to environment variables.",
            reason="not_configured",
        ).to_dict())

    media_bytes = None
    file_name = None
    mime_type = None
    if video is not None:
        file_name = video.filename
        mime_type = video.content_type
        try:
            media_bytes = await video.read()
        except Exception as exc:
            logger.warning("Failed to read uploaded file: %s", exc)
            return _error_response(
                400, InputError("Failed to read uploaded file.", field="video").to_dict(),
            )
        logger.info(
            "Video file received: %s, size: %d bytes, type: %s",
            file_name, len(media_bytes), mime_type,
        )

    conversion = ConversionRequest(
        media_bytes=media_bytes,
        file_name=file_name,
        mime_type=mime_type,
        target_language=target_language,
        voice_type=voice_type,
    )

    try:
        result = await _run_until_disconnect(request, conversion)
    except InputError as exc:
        logger.info("Rejected request: %s", exc.message)
        return _error_response(400, exc.to_dict())
    except CollaboratorError as exc:
        status_code = _COLLABORATOR_STATUS.get(exc.reason, 502)
        logger.error("Collaborator failure in %s: %s", exc.stage, exc.message)
        return _error_response(status_code, exc.to_dict())
    except ClientDisconnected:
        logger.warning("Client disconnected; run cancelled, no result returned.")
        return _error_response(499, {
            "kind": "cancelled",
            "message": "Client disconnected before the conversion finished.",
        })
    except Exception as exc:
        logger.error("Pipeline unexpected error: %s", exc, exc_info=True)
        return _error_response(500, {
            "kind": "internal_error",
            "message": "Failed to convert video language. Please try again.",
        })

    return JSONResponse(status_code=200, content=result.to_dict())
