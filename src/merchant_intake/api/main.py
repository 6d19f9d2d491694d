from __future__ import annotations

import logging
import sys

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from merchant_intake.api.http_logging import install_http_logging
from merchant_intake.api.routes.health import router as health_router
from merchant_intake.api.routes.lead import router as lead_router
from merchant_intake.api.utils import error_body, new_request_id
from merchant_intake.utils import env_str

logger = logging.getLogger("merchant_intake.api")


def _setup_logging() -> None:
    # Leave an already configured root logger (uvicorn, gunicorn, pytest) alone.
    if logging.root.handlers:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(env_str("LOG_LEVEL", "INFO").upper())


def create_app() -> FastAPI:
    # Load `.env` + `.env.local` when present (local dev convenience).
    load_dotenv(".env", override=False)
    load_dotenv(".env.local", override=False)
    _setup_logging()

    app = FastAPI(title="merchant-intake-service", version="0.1.0")

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = new_request_id("err")
        logger.error("500 server_error requestId=%s path=%s err=%r", request_id, request.url.path, exc, exc_info=exc)
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("server_error", "Server error", request_id),
        )

    # Unversioned health is convenient for deployments and uptime checks.
    app.include_router(health_router)

    # The browser form posts to /api/lead; /v1 is the same handler.
    app.include_router(lead_router)
    app.include_router(lead_router, prefix="/v1", include_in_schema=False)

    install_http_logging(app)
    return app


app = create_app()
