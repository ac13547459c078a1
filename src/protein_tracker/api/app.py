"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from protein_tracker.api.models import AnalyzeRequest, ErrorResponse
from protein_tracker.app_logging import configure_logging
from protein_tracker.containers import AppContainer
from protein_tracker.domain.errors import AnalysisError

FALLBACK_ERROR = "Failed to analyze image"


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(RequestValidationError)
    async def invalid_body(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            ErrorResponse(error="Invalid request body").model_dump(), status_code=400
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post(
        "/api/analyze",
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    async def analyze(payload: AnalyzeRequest, request: Request) -> JSONResponse:
        """Analyze a meal photo and return the model's protein estimate."""
        state_container: AppContainer = request.app.state.container
        try:
            result = await state_container.analysis_service.analyze(
                image=payload.image, api_key=payload.api_key
            )
        except AnalysisError as exc:
            if exc.status_code >= 500:  # noqa: PLR2004
                logger.exception("Analysis error")
            return JSONResponse(
                ErrorResponse(error=exc.message).model_dump(),
                status_code=exc.status_code,
            )
        except Exception as exc:
            logger.exception("Analysis error")
            return JSONResponse(
                ErrorResponse(error=str(exc) or FALLBACK_ERROR).model_dump(),
                status_code=500,
            )
        return JSONResponse(result)

    return app
