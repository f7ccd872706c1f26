"""
ghproject-cli shared configuration, constants, and module-level state.
Standalone module — no imports from other project files.
"""

import os

# ---------------------------------------------------------------------------
# .env path and helpers
# ---------------------------------------------------------------------------

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
_PROJECT_ROOT = os.path.dirname(_PACKAGE_DIR)

ENV_PATH = os.path.join(_PROJECT_ROOT, ".env")

# Keys that may also come from the process environment (CI, containers).
KNOWN_ENV_KEYS = (
    "GITHUB_TOKEN",
    "GHPROJECT_ORG",
    "GHPROJECT_NUMBER",
    "GHPROJECT_IS_ORG",
    "GHPROJECT_STATUS_FIELD",
    "GHPROJECT_MIN_MATCH_SCORE",
    "GHPROJECT_CACHE_TTL_SECONDS",
    "GHPROJECT_HTTP_TIMEOUT_SECONDS",
    "GHPROJECT_HTTP_MAX_RETRIES",
    "GHPROJECT_HTTP_RETRY_BASE_SECONDS",
    "GHPROJECT_HTTP_RETRY_MAX_SECONDS",
    "GHPROJECT_HTTP_MAX_RESPONSE_BYTES",
    "GHPROJECT_HTTP_LOG",
    "GHPROJECT_HTTP_LOG_SAMPLE_RATE",
    "GHPROJECT_MCP_RESPONSE_MODE",
)


def load_env():
    """Read KEY=VALUE pairs from .env, then fill gaps from os.environ."""
    env = {}
    if os.path.exists(ENV_PATH):
        with open(ENV_PATH) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, val = line.split("=", 1)
                    env[key.strip()] = val.strip()
    for key in KNOWN_ENV_KEYS:
        if key not in env and os.environ.get(key):
            env[key] = os.environ[key]
    return env


def _env_bool(key, default=False):
    """Parse common boolean env formats."""
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(key, default):
    """Parse integer env values with fallback."""
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(key, default):
    """Parse float env values with fallback."""
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

VERSION = "0.3.0"
CONTRACT_SCHEMA_VERSION = "1.0"

GRAPHQL_URL = "https://api.github.com/graphql"
REST_URL = "https://api.github.com"

REQUIRED_SCOPES = ("repo", "project")
ITEMS_PAGE_SIZE = 100
VALID_FORMATS = ("json", "table")
VALID_MCP_RESPONSE_MODES = {"legacy", "envelope"}

# ---------------------------------------------------------------------------
# Module-level state (loaded from .env)
# ---------------------------------------------------------------------------

env = load_env()

GITHUB_TOKEN = env.get("GITHUB_TOKEN", "")
ORG = env.get("GHPROJECT_ORG", "")
PROJECT_NUMBER = _env_int("GHPROJECT_NUMBER", 0)
IS_ORG = _env_bool("GHPROJECT_IS_ORG", True)
STATUS_FIELD_NAME = env.get("GHPROJECT_STATUS_FIELD", "") or "Status"

MIN_MATCH_SCORE = min(1.0, max(0.0, _env_float("GHPROJECT_MIN_MATCH_SCORE", 0.3)))
CACHE_TTL_SECONDS = max(0.0, _env_float("GHPROJECT_CACHE_TTL_SECONDS", 3600.0))

HTTP_TIMEOUT_SECONDS = _env_int("GHPROJECT_HTTP_TIMEOUT_SECONDS", 30)
HTTP_MAX_RETRIES = _env_int("GHPROJECT_HTTP_MAX_RETRIES", 2)
HTTP_RETRY_BASE_SECONDS = _env_float("GHPROJECT_HTTP_RETRY_BASE_SECONDS", 1.0)
HTTP_RETRY_MAX_SECONDS = _env_float("GHPROJECT_HTTP_RETRY_MAX_SECONDS", 30.0)
HTTP_MAX_RESPONSE_BYTES = _env_int("GHPROJECT_HTTP_MAX_RESPONSE_BYTES", 5_000_000)
HTTP_LOG_ENABLED = _env_bool("GHPROJECT_HTTP_LOG", False)
HTTP_LOG_SAMPLE_RATE = min(1.0, max(0.0, _env_float("GHPROJECT_HTTP_LOG_SAMPLE_RATE", 1.0)))

MCP_RESPONSE_MODE = env.get("GHPROJECT_MCP_RESPONSE_MODE", "legacy").strip().lower()
if MCP_RESPONSE_MODE not in VALID_MCP_RESPONSE_MODES:
    MCP_RESPONSE_MODE = "legacy"

# ---------------------------------------------------------------------------
# Runtime flags (set by the CLI global flags)
# ---------------------------------------------------------------------------

RUNTIME_DRY_RUN = False
RUNTIME_QUIET = False
RUNTIME_VERBOSE = False
