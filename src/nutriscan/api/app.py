"""FastAPI application factory."""

import asyncio
import base64
import logging
from collections.abc import AsyncIterator, Awaitable
from contextlib import asynccontextmanager
from typing import TypeVar

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from nutriscan.api.models import AnalyzeFoodRequest, TextToSpeechRequest
from nutriscan.app_logging import configure_logging
from nutriscan.containers import AppContainer
from nutriscan.domain.errors import (
    InvalidImageError,
    NutritionUnavailable,
    PipelineError,
    SpeechError,
)
from nutriscan.domain.profiles import LanguageTag, ProfileMode
from nutriscan.services.images import decode_data_url
from nutriscan.services.summary import build_summary

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]

_ANALYZE_FAILED = "Failed to analyze food image"
_INVALID_BODY = "Invalid request body"
_ANALYZE_PATH = "/analyze-food"
_DISCONNECT_POLL_SECONDS = 0.5
# Non-standard status used by nginx for requests the client abandoned.
_CLIENT_CLOSED_REQUEST = 499

_T = TypeVar("_T")


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=CORS_ALLOW_HEADERS,
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_body(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Keep malformed bodies inside each endpoint's error contract."""
        logger.warning(
            "Rejected malformed body for %s: %s", request.url.path, exc.errors()
        )
        if request.url.path == _ANALYZE_PATH:
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, _INVALID_BODY)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"error": _INVALID_BODY}
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.options(_ANALYZE_PATH)
    @app.options("/text-to-speech")
    async def preflight() -> Response:
        """Answer bare OPTIONS requests with an empty 200."""
        return Response(status_code=status.HTTP_200_OK)

    @app.post(_ANALYZE_PATH)
    async def analyze_food(body: AnalyzeFoodRequest, request: Request) -> Response:
        """Identify the food in an image and return its nutrition."""
        state_container: AppContainer = request.app.state.container
        profile = ProfileMode.parse(body.profile_mode)
        language = LanguageTag.parse(body.language)
        logger.info(
            "Analyzing food image for profile=%s language=%s",
            profile or body.profile_mode,
            language,
        )
        try:
            image = decode_data_url(body.image_data)
            resolution = await run_unless_disconnected(
                request,
                state_container.pipeline.resolve_food(image, profile, language),
            )
        except InvalidImageError as exc:
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))
        except NutritionUnavailable as exc:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={
                    "error": exc.error,
                    "details": exc.message,
                    "foodName": exc.label,
                },
            )
        except PipelineError as exc:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"error": exc.error, "details": exc.message},
            )
        except Exception as exc:
            logger.exception("Error in analyze-food")
            return _error(
                status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or "Unknown error"
            )

        if resolution is None:
            logger.info("Client disconnected, analysis cancelled")
            return Response(status_code=_CLIENT_CLOSED_REQUEST)
        payload = resolution.result.to_payload()
        payload["summary"] = build_summary(resolution.result, profile)
        logger.info(
            "Resolved food=%s after %s attempts",
            resolution.result.food_name,
            len(resolution.attempts),
        )
        return JSONResponse(content=payload)

    @app.post("/text-to-speech")
    async def text_to_speech(
        body: TextToSpeechRequest, request: Request
    ) -> JSONResponse:
        """Translate text if needed and return base64 MP3 audio."""
        state_container: AppContainer = request.app.state.container
        try:
            audio = await state_container.speech_service.speak(
                body.text, body.language, body.voice
            )
        except SpeechError as exc:
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)}
            )
        except Exception as exc:
            logger.exception("Error in text-to-speech")
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"error": str(exc) or "Unknown error"},
            )
        return JSONResponse(
            content={"audioContent": base64.b64encode(audio).decode("ascii")}
        )

    return app


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "details": _ANALYZE_FAILED},
    )


async def run_unless_disconnected(
    request: Request,
    awaitable: Awaitable[_T],
    poll_seconds: float = _DISCONNECT_POLL_SECONDS,
) -> _T | None:
    """Await the work, cancelling it and returning None if the client leaves."""
    task = asyncio.ensure_future(awaitable)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=poll_seconds)
            if done:
                return task.result()
            if await request.is_disconnected():
                task.cancel()
                await asyncio.wait({task})
                return None
    finally:
        if not task.done():
            task.cancel()
