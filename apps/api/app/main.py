from __future__ import annotations

import time
import uuid
from typing import Optional

from fastapi import FastAPI, Request

from api_errors.config import AppConfig, build_message_source, load_app_config
from api_errors.handler import GlobalExceptionHandler
from api_errors.logging_utils import configure_logger
from api_errors.messages import MessageSource

from .errors import REQUEST_ID_HEADER
from .exception_handlers import register_exception_handlers
from .openapi_examples import standard_error_responses
from .routes.error_catalog import logger as error_catalog_logger
from .routes.error_catalog import router as error_catalog_router
from .routes.health import router as health_router


logger = configure_logger(__name__)

# Do not emit request completion logs for health endpoints
HEALTHCHECK_PATHS = {"/v1/health"}


def create_app(
    config: Optional[AppConfig] = None,
    message_source: Optional[MessageSource] = None,
) -> FastAPI:
    """
    Build the API with error translation wired in.

    Args:
        config: Configuration; loaded from the environment when omitted.
        message_source: Resolver for error texts; built from `config` when omitted.
    """
    if config is None:
        config = load_app_config()

    configure_logger(__name__, config.log_level_value)
    configure_logger(error_catalog_logger.name, config.log_level_value)

    if message_source is None:
        message_source = build_message_source(config)

    handler = GlobalExceptionHandler(
        message_source,
        logger=configure_logger("api_errors.handler", config.log_level_value),
    )

    app = FastAPI(
        title="API Errors",
        version="0.1.0",
        description="Centralized, localized error responses",
        responses=standard_error_responses(),
    )
    app.state.config = config
    app.state.locale_config = config.locale
    app.state.message_source = message_source
    app.state.exception_handler = handler

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        """
        Attach a request id and emit structured lifecycle logs.
        """
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        start = time.perf_counter()
        response = None

        try:
            response = await call_next(request)
            return response

        finally:
            duration_ms = round((time.perf_counter() - start) * 1000.0, 2)
            status_code = getattr(response, "status_code", None)
            path = request.url.path

            if path not in HEALTHCHECK_PATHS:
                logger.info(
                    "Request completed",
                    extra={
                        "event": "request.completed",
                        "request_id": request_id,
                        "method": request.method,
                        "path": path,
                        "status_code": status_code,
                        "duration_ms": duration_ms,
                    },
                )

            if response is not None:
                response.headers[REQUEST_ID_HEADER] = request_id

    register_exception_handlers(app, handler, config.locale)

    app.include_router(health_router, prefix="/v1")
    app.include_router(error_catalog_router, prefix="/v1")

    logger.info(
        "Application created",
        extra={"event": "app.created", "locale": config.locale.default_locale},
    )
    return app


app = create_app()
