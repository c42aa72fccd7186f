"""
Configuration
=============
All settings come from the environment. A `.env` file in the working
directory is loaded first; variables already set in the environment win.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

PACKAGE_DIR = Path(__file__).resolve().parent

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Upstream wait-time provider
WAIT_TIME_PROVIDER    = os.getenv("WAIT_TIME_PROVIDER", "queue_times")
QUEUE_TIMES_BASE_URL  = os.getenv("QUEUE_TIMES_BASE_URL", "https://queue-times.com").rstrip("/")
HTTP_TIMEOUT_SECONDS  = float(os.getenv("HTTP_TIMEOUT_SECONDS", "15"))
USER_AGENT            = os.getenv("USER_AGENT", "WaitWise/1.0 (+https://example.com)")

# Wait-time cache and aggregation
WAIT_CACHE_TTL_SECONDS = float(os.getenv("WAIT_CACHE_TTL_SECONDS", "60"))
TOP_WAITS_LIMIT        = int(os.getenv("TOP_WAITS_LIMIT", "8"))

# Reference data (bundled by default, override to extend without a redeploy)
ALIASES_PATH = Path(os.getenv("ALIASES_PATH", str(PACKAGE_DIR / "data" / "aliases.json")))
PARKS_PATH   = Path(os.getenv("PARKS_PATH",   str(PACKAGE_DIR / "data" / "parks.json")))
CATALOG_REFRESH_HOURS = int(os.getenv("CATALOG_REFRESH_HOURS", "24"))

# Web search
TAVILY_API_KEY     = os.getenv("TAVILY_API_KEY", "")
TAVILY_BASE_URL    = os.getenv("TAVILY_BASE_URL", "https://api.tavily.com").rstrip("/")
SEARCH_MAX_RESULTS = int(os.getenv("SEARCH_MAX_RESULTS", "5"))

# Context assembly
CONTEXT_FIELD_MAX_CHARS = int(os.getenv("CONTEXT_FIELD_MAX_CHARS", "500"))
CONTEXT_MAX_CHARS       = int(os.getenv("CONTEXT_MAX_CHARS", "6000"))

# LLM chat collaborator (OpenAI-compatible)
LLM_BASE_URL = os.getenv("LLM_BASE_URL", "https://api.openai.com/v1").rstrip("/")
LLM_API_KEY  = os.getenv("LLM_API_KEY", "")
LLM_MODEL    = os.getenv("LLM_MODEL", "gpt-4o-mini")

# Static bearer token for the HTTP API. Empty disables the check.
API_BEARER_TOKEN = os.getenv("API_BEARER_TOKEN", "")
