"""Entry point for the file metadata query service."""

import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, Response, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from common.constants import SERVICE_HOST, SERVICE_PORT
from common.logging_config import register_secret, setup_logging
from metasearch.config import Settings
from metasearch.exceptions import MetadataServiceError, MissingOnchainRecord
from metasearch.routes.file_routes import router as file_router
from metasearch.schemas.common import ErrorResponse

logger = setup_logging('metasearch')


def _internal_error() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse.internal().model_dump()
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Pre-built settings; when omitted they are read from the
                  environment on startup

    Returns:
        Configured FastAPI app
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Load configuration once, before the first request is served.
        """
        if app.state.settings is None:
            app.state.settings = Settings.from_env()
        register_secret(logger, app.state.settings.store_key)
        logger.info(f"Metasearch starting with {app.state.settings!r}")
        if app.state.settings.enrich_with_chain:
            logger.info("On-chain reconciliation enabled")
        else:
            logger.info("On-chain reconciliation disabled, serving indexed records as-is")
        yield
        logger.info("Metasearch shutting down...")

    app = FastAPI(
        title="Metasearch",
        description="Keyword lookup of file metadata reconciled with on-chain records",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """
        Middleware to log all HTTP requests and responses.
        """
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.time()

        logger.info(
            f"Request started: {request.method} {request.url.path} [request_id={request_id}]"
        )

        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                f"Unhandled error: {request.method} {request.url.path} [request_id={request_id}]",
                exc_info=True
            )
            response = _internal_error()

        duration = time.time() - start_time

        logger.info(
            f"Request completed: {request.method} {request.url.path} "
            f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
        )

        response.headers["X-Request-ID"] = request_id

        return response

    # Outermost middleware; fallback 500s get CORS headers too
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def unmapped_route_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            logger.warning(f"Rejected unmapped request: {request.method} {request.url.path}")
            return Response(status_code=status.HTTP_403_FORBIDDEN)
        return await http_exception_handler(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.warning(
            f"Invalid query: {exc.errors()} [request_id={request_id}] path={request.url.path}"
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse.invalid_query().model_dump()
        )

    @app.exception_handler(MissingOnchainRecord)
    async def missing_onchain_record_handler(request: Request, exc: MissingOnchainRecord):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.warning(
            f"Missing on-chain record: {exc} [request_id={request_id}] path={request.url.path}"
        )
        return _internal_error()

    @app.exception_handler(MetadataServiceError)
    async def metadata_service_error_handler(request: Request, exc: MetadataServiceError):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.error(
            f"{type(exc).__name__}: {exc} [request_id={request_id}] path={request.url.path}",
            exc_info=True
        )
        return _internal_error()

    @app.exception_handler(OSError)
    async def io_error_handler(request: Request, exc: OSError):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.error(
            f"IO error: {exc} [request_id={request_id}] path={request.url.path}",
            exc_info=True
        )
        return _internal_error()

    app.include_router(file_router)

    return app


app = create_app()


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "metasearch.main:app",
        host=SERVICE_HOST,
        port=SERVICE_PORT
    )


if __name__ == "__main__":
    main()
