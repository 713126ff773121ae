import os

SHEETS_API_KEY = os.environ.get("SHEETS_API_KEY", "")
SHEET_ID = os.environ.get("SHEET_ID", "")
SHEETS_BASE_URL = os.environ.get("SHEETS_BASE_URL", "https://sheets.googleapis.com/v4/spreadsheets")
SHEETS_RANGE = "kpis!A:J"
UPSTREAM_TIMEOUT_S = float(os.environ.get("UPSTREAM_TIMEOUT_S", "10"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

SUMMARY_PATH = "/dashboard-summary"
ALLOWED_REGIONS = ("all", "KY", "OH", "IN")
DEFAULT_REGION = "all"
DEFAULT_WINDOW = 30
LONG_WINDOW = 90
CACHE_TTL_S = 300  # 5 minutes
CACHE_CONTROL = f"public, max-age={CACHE_TTL_S}, s-maxage={CACHE_TTL_S}"

SOURCES = ["USAJOBS", "Adzuna"]
SOURCE_NOTE = "Aggregated from Sheets"
