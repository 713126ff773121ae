from typing import Any

from pydantic import BaseModel, Field

from .config import SOURCE_NOTE, SOURCES


class SheetValues(BaseModel):
    values: list[list[Any]] | None = None


class Kpis(BaseModel):
    total_postings: int | float = 0
    pct_change_prev_window: int | float = 0
    top_skills: Any = []
    fastest_growing: Any = []
    top_job_families: Any = []
    region_split: Any = []
    gap_chart: Any = []


class SummaryMeta(BaseModel):
    sources: list[str] = Field(default_factory=lambda: list(SOURCES))
    note: str = SOURCE_NOTE


class KpiPayload(BaseModel):
    as_of: str
    window_days: int
    region: str
    kpis: Kpis
    meta: SummaryMeta = SummaryMeta()
