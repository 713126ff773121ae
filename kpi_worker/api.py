"""GET /dashboard-summary - cached KPI summary for one region and window."""

import structlog
from fastapi import APIRouter, Depends, Request
from starlette.responses import Response

from .cache import EdgeCache, get_cache
from .config import CACHE_CONTROL, DEFAULT_REGION, DEFAULT_WINDOW, SUMMARY_PATH
from .normalize import (
    build_payload, cache_key, normalize_region, normalize_window, select_row,
)
from .responses import json_response, with_cors
from .sheets import SheetsClient, get_sheets_client

logger = structlog.get_logger(__name__)

router = APIRouter()

SUMMARY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"]


# OPTIONS never reaches the router, see main.cors
@router.api_route(SUMMARY_PATH, methods=SUMMARY_METHODS)
async def dashboard_summary(
    request: Request,
    cache: EdgeCache = Depends(get_cache),
    sheets: SheetsClient = Depends(get_sheets_client),
) -> Response:
    try:
        region = normalize_region(request.query_params.get("region") or DEFAULT_REGION)
        window_days = normalize_window(request.query_params.get("window") or str(DEFAULT_WINDOW))
        origin = f"{request.url.scheme}://{request.url.netloc}"
        key = cache_key(origin, region, window_days)

        cached = await cache.match(key)
        if cached is not None:
            logger.debug("kpi_cache_hit", key=key)
            return with_cors(cached)

        logger.info("kpi_cache_miss", region=region, window_days=window_days)
        rows = await sheets.fetch_kpi_rows()
        row = select_row(rows, window_days, region)
        if row is None:
            return json_response(
                {"error": "No KPI row found", "region": region, "window_days": window_days},
                404,
            )

        payload = build_payload(row, window_days, region)
        response = json_response(payload.model_dump(), 200)
        response.headers["Cache-Control"] = CACHE_CONTROL
        await cache.put(key, response)
        return response
    except Exception as exc:
        logger.error("kpi_worker_failure", error=str(exc), error_type=type(exc).__name__)
        return json_response({"error": "Worker failure", "detail": str(exc)}, 500)
