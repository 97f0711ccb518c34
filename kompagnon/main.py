"""
FastAPI application bootstrap with: \n
- Lifespan-managed logging setup, optional schema creation and engine disposal \n
- CORS configured for the front-ends \n
- Request logging (`METHOD path status`) \n
- 400 answers for request validation errors \n
- Authentication and health routes \n

Environment contract (from `settings`): \n
- INIT_MODE: if 'runtime', create the database tables during app startup. \n
- FRONTEND_URL: allowed CORS origins (comma separated). \n

Run with ``uvicorn kompagnon.main:app``.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from kompagnon.api.fast_api import router
from kompagnon.database.config.config import settings
from kompagnon.database.config.connection_engine import connection_engine
from kompagnon.database.core.schema import create_schema
from kompagnon.errors import ERRORS
from kompagnon.logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    App lifespan manager.

    Notes
    ------------
    - On startup: configure logging; if INIT_MODE == 'runtime', create missing tables.
    - On shutdown: dispose the engine's connection pool.
    """
    configure_logging()
    if settings.INIT_MODE == "runtime":
        await create_schema()
    else:
        logger.info("Skipping schema creation (INIT_MODE=%s)", settings.INIT_MODE)

    try:
        yield
    finally:
        await connection_engine.dispose()
        logger.info("App shutting down, connection pool disposed")


app = FastAPI(title="Kompagnon API", lifespan=lifespan)
"""Instantiates the FastAPI application object (OpenAPI docs served at /docs)."""

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every request once its response status is known."""
    response = await call_next(request)
    logger.info(
        "%s %s %s",
        request.method,
        request.url.path,
        response.status_code,
        extra={"request_path": request.url.path, "status_code": response.status_code},
    )
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Answer schema violations with 400 and one entry per failing field."""
    details = [
        {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
        for error in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"message": ERRORS["USER"]["INVALID_BODY"], "details": details})


app.include_router(router)
