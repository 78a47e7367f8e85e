import os
from dataclasses import dataclass
from typing import Mapping, Optional

from elktest.logs import parse_level

LOG_FORMATS = ("text", "json")


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"
    log_format: str = "text"
    api_prefix: str = "/api"
    # None means no upper bound on /generate-logs?count=
    generate_logs_max: Optional[int] = None


def _int_var(environ: Mapping[str, str], name: str, default: Optional[int]) -> Optional[int]:
    raw = environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def load_settings(environ: Mapping[str, str] = os.environ) -> Settings:
    """Read service settings from environment variables."""
    log_level = environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    try:
        parse_level(log_level)
    except ValueError:
        raise ConfigError(f"LOG_LEVEL has unknown level {log_level!r}") from None

    log_format = environ.get("LOG_FORMAT", "text").strip().lower() or "text"
    if log_format not in LOG_FORMATS:
        raise ConfigError(f"LOG_FORMAT must be one of {', '.join(LOG_FORMATS)}, got {log_format!r}")

    api_prefix = environ.get("API_PREFIX", "/api").strip().rstrip("/")
    if api_prefix and not api_prefix.startswith("/"):
        api_prefix = "/" + api_prefix

    port = _int_var(environ, "PORT", 8080)
    limit = _int_var(environ, "GENERATE_LOGS_MAX", None)
    if limit is not None and limit < 0:
        raise ConfigError(f"GENERATE_LOGS_MAX must not be negative, got {limit}")

    return Settings(
        host=environ.get("HOST", "0.0.0.0"),
        port=port,
        log_level=log_level,
        log_format=log_format,
        api_prefix=api_prefix,
        generate_logs_max=limit,
    )
