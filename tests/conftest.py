import httpx
import pytest
from fastapi.testclient import TestClient

from kpi_worker.cache import MemoryEdgeCache, get_cache
from kpi_worker.main import app
from kpi_worker.sheets import SheetsClient, get_sheets_client

HEADER = [
    "window_days", "region", "as_of", "total_postings", "pct_change_prev_window",
    "top_skills_json", "fastest_growing_json", "job_families_json",
    "region_split_json", "gap_chart_json",
]
ROW_ALL_30 = ["30", "all", "2024-01-01T00:00:00Z", "1000", "5.5", "[]", "[]", "[]", "[]", "[]"]


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeUpstream:
    """Stands in for the Sheets values endpoint and records every call."""

    def __init__(self):
        self.values = [HEADER, ROW_ALL_30]
        self.status_code = 200
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"error": {"code": self.status_code}})
        return httpx.Response(200, json={"values": self.values})

    def client(self, api_key="test-key", sheet_id="sheet-123") -> SheetsClient:
        return SheetsClient(api_key, sheet_id, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return MemoryEdgeCache(clock=clock)


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def client(cache, upstream):
    app.dependency_overrides[get_cache] = lambda: cache
    app.dependency_overrides[get_sheets_client] = lambda: upstream.client()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
