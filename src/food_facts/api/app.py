"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from food_facts.api.scan import router as scan_router
from food_facts.api.usda import router as usda_router
from food_facts.app_logging import configure_logging
from food_facts.containers import AppContainer
from food_facts.errors import FetchFailedError, FoodFactsError, InvalidInputError

_ERROR_STATUS = {
    InvalidInputError.kind: status.HTTP_400_BAD_REQUEST,
    FetchFailedError.kind: status.HTTP_502_BAD_GATEWAY,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(logging.DEBUG if container.settings.debug else logging.INFO)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"])

    app.include_router(usda_router)
    app.include_router(scan_router)

    @app.exception_handler(FoodFactsError)
    async def food_facts_error(request: Request, exc: FoodFactsError) -> JSONResponse:
        status_code = _ERROR_STATUS.get(
            exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        else:
            logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status_code,
            content={"error": exc.kind, "detail": str(exc)},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": InvalidInputError.kind,
                "detail": jsonable_encoder(exc.errors()),
            },
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
