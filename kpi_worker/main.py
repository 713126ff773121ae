"""FastAPI app entry point."""

import logging
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from . import config
from .responses import json_response, with_cors

structlog.configure(
    wrapper_class=structlog.make_filtering_bound_logger(
        getattr(logging, config.LOG_LEVEL.upper(), logging.INFO)
    ),
)
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Missing credentials only fail requests; just flag them here
    if not config.SHEETS_API_KEY or not config.SHEET_ID:
        logger.warning("sheets_credentials_missing")
    yield


app = FastAPI(title="KPI Dashboard Summary", lifespan=lifespan, redirect_slashes=False,
              docs_url=None, redoc_url=None, openapi_url=None)

from .api import router as api_router

app.include_router(api_router)

_ERRORS = {404: "Not found"}


@app.middleware("http")
async def cors(request: Request, call_next):
    if request.method == "OPTIONS":
        return with_cors(Response(status_code=204))
    response = await call_next(request)
    return with_cors(response)


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    return json_response({"error": _ERRORS.get(exc.status_code, exc.detail)}, exc.status_code)
