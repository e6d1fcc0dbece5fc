"""hookdash configuration."""
import os
from pathlib import Path


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    value = os.getenv(name)
    if not value or not value.strip():
        return default
    return Path(value).expanduser()


# Log storage
LOG_DIR = _env_path("HOOKDASH_LOG_DIR", Path.home() / ".claude" / "logs")
LOG_PREFIX = "hook-events"
CURRENT_LOG_FILE = f"{LOG_PREFIX}.jsonl"

# Session classification
LIVE_THRESHOLD_SECONDS = _env_int("HOOKDASH_LIVE_THRESHOLD_SECONDS", 5 * 60)

# Ingestion truncation limits
PROMPT_MAX_CHARS = _env_int("HOOKDASH_PROMPT_MAX_CHARS", 500)
SUMMARY_MAX_CHARS = _env_int("HOOKDASH_SUMMARY_MAX_CHARS", 200)
ERROR_MAX_CHARS = _env_int("HOOKDASH_ERROR_MAX_CHARS", 300)

# Observability
OTEL_ENABLED = _env_bool("HOOKDASH_OTEL_ENABLED", False)
OTEL_ENDPOINT = os.getenv("HOOKDASH_OTEL_ENDPOINT", "http://localhost:4318")
OTEL_SERVICE_NAME = os.getenv("HOOKDASH_OTEL_SERVICE_NAME", "hookdash")
PROM_PORT = _env_int("HOOKDASH_PROM_PORT", 9464)

# Server settings
HOST = os.getenv("HOOKDASH_HOST", "127.0.0.1")
PORT = _env_int("HOOKDASH_PORT", 7777)

# CORS
FRONTEND_ORIGIN = os.getenv("HOOKDASH_FRONTEND_ORIGIN", "http://localhost:5173")
