"""KPI rows from the Google Sheets values API."""

from urllib.parse import quote

import httpx
import structlog

from . import config
from .models import SheetValues

logger = structlog.get_logger(__name__)


class SheetsError(RuntimeError):
    pass


class SheetsConfigError(SheetsError):
    pass


class SheetsUpstreamError(SheetsError):
    pass


def rows_from_values(values: list[list]) -> list[dict[str, str]]:
    """Zip each data row against the header row; missing cells become ""."""
    if len(values) < 2:
        return []
    headers = [str(h) for h in values[0]]
    rows = []
    for raw in values[1:]:
        row = {}
        for idx, h in enumerate(headers):
            cell = raw[idx] if idx < len(raw) else None
            row[h] = "" if cell is None or cell == "" else str(cell)
        rows.append(row)
    return rows


class SheetsClient:
    def __init__(self, api_key: str, sheet_id: str, *,
                 base_url: str = config.SHEETS_BASE_URL,
                 cell_range: str = config.SHEETS_RANGE,
                 timeout: float = config.UPSTREAM_TIMEOUT_S,
                 transport: httpx.AsyncBaseTransport | None = None):
        self.api_key = api_key
        self.sheet_id = sheet_id
        self.base_url = base_url.rstrip("/")
        self.cell_range = cell_range
        self.timeout = timeout
        self._transport = transport

    def values_url(self) -> str:
        return f"{self.base_url}/{self.sheet_id}/values/{quote(self.cell_range, safe='')}"

    async def fetch_kpi_rows(self) -> list[dict[str, str]]:
        if not self.api_key or not self.sheet_id:
            raise SheetsConfigError("Missing SHEETS_API_KEY or SHEET_ID env variable")

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.get(
                self.values_url(),
                params={"key": self.api_key},
                headers={"Accept": "application/json"},
            )

        if not resp.is_success:
            logger.warning("sheets_fetch_failed", status=resp.status_code, range=self.cell_range)
            raise SheetsUpstreamError(f"Sheets API failed ({resp.status_code})")

        data = SheetValues.model_validate(resp.json())
        rows = rows_from_values(data.values or [])
        logger.debug("sheets_rows_fetched", rows=len(rows))
        return rows


def get_sheets_client() -> SheetsClient:
    # Read per request so missing credentials fail the request, not startup
    return SheetsClient(config.SHEETS_API_KEY, config.SHEET_ID)
