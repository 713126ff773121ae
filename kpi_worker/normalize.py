"""Query normalization and lenient parsing of KPI sheet cells.

Sheet cells are filled by an external process, so nothing here raises on bad
cell data: numbers fall back to 0, JSON cells to ``[]`` and timestamps to the
current time.
"""

import json
import math
from datetime import datetime, timezone

from dateutil import parser as date_parser

from .config import (
    ALLOWED_REGIONS, DEFAULT_REGION, DEFAULT_WINDOW, LONG_WINDOW, SUMMARY_PATH,
)
from .models import KpiPayload, Kpis

_RADIX_PREFIXES = ("0x", "0o", "0b")


def _to_number(value) -> float | None:
    """Loose numeric parse: blank is 0, garbage is None."""
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if not text:
        return 0.0
    if "_" in text:
        return None
    try:
        if text[:2].lower() in _RADIX_PREFIXES:
            return float(int(text, 0))
        return float(text)
    except (ValueError, OverflowError):
        return None


def normalize_region(value: str | None) -> str:
    return value if value in ALLOWED_REGIONS else DEFAULT_REGION


def normalize_window(value: str | None) -> int:
    return LONG_WINDOW if _to_number(value) == LONG_WINDOW else DEFAULT_WINDOW


def num(value) -> int | float:
    n = _to_number(value)
    if n is None or not math.isfinite(n):
        return 0
    return int(n) if n.is_integer() else n


def _reject_constant(name):
    raise ValueError(f"non-standard JSON constant {name}")


def _finite_float(text):
    # Overflowing literals like 1e400 can't be rendered back to JSON
    value = float(text)
    return value if math.isfinite(value) else None


def parse_json_cell(text):
    if not text:
        return []
    try:
        return json.loads(text, parse_constant=_reject_constant, parse_float=_finite_float)
    except (ValueError, TypeError):
        return []


def _fmt_iso(dt: datetime) -> str:
    dt = dt.astimezone(timezone.utc)
    return f"{dt:%Y-%m-%dT%H:%M:%S}.{dt.microsecond // 1000:03d}Z"


def _parse_datetime(text: str) -> datetime:
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        # Sheets hands back formatted values such as "1/15/2024"
        return date_parser.parse(text)


def to_iso(value: str | None) -> str:
    """ISO-8601 UTC with milliseconds; unparseable input means "now"."""
    try:
        dt = _parse_datetime(str(value).strip())
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return _fmt_iso(dt)
    except (ValueError, TypeError, OverflowError):
        return _fmt_iso(datetime.now(timezone.utc))


def cache_key(origin: str, region: str, window_days: int) -> str:
    return f"{origin}{SUMMARY_PATH}?region={region}&window={window_days}"


def select_row(rows: list[dict], window_days: int, region: str) -> dict | None:
    want = str(window_days)
    return next(
        (r for r in rows if r.get("window_days") == want and r.get("region") == region),
        None,
    )


def build_payload(row: dict, window_days: int, region: str) -> KpiPayload:
    return KpiPayload(
        as_of=to_iso(row.get("as_of")),
        window_days=window_days,
        region=region,
        kpis=Kpis(
            total_postings=num(row.get("total_postings")),
            pct_change_prev_window=num(row.get("pct_change_prev_window")),
            top_skills=parse_json_cell(row.get("top_skills_json")),
            fastest_growing=parse_json_cell(row.get("fastest_growing_json")),
            top_job_families=parse_json_cell(row.get("job_families_json")),
            region_split=parse_json_cell(row.get("region_split_json")),
            gap_chart=parse_json_cell(row.get("gap_chart_json")),
        ),
    )
