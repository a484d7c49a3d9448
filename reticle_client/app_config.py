"""Runtime configuration shared by the settings window and the overlay client."""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

STORE_ENV_VAR = "RETICLE_OVERLAY_STORE"
POLL_ENV_VAR = "RETICLE_OVERLAY_POLL_MS"
DEBUG_ENV_VAR = "RETICLE_OVERLAY_DEBUG"
LOG_RETENTION_ENV_VAR = "RETICLE_OVERLAY_LOG_RETENTION"

DEFAULT_POLL_MS = 250
MIN_POLL_MS = 50
LOG_RETENTION_MIN = 1
LOG_RETENTION_MAX = 20
DEFAULT_LOG_RETENTION = 5


def default_store_path() -> Path:
    config_home = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return config_home / "reticle-overlay" / "settings.json"


def _coerce_flag(value: Optional[str]) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _coerce_int(value: Optional[str], fallback: int, *, minimum: int, maximum: Optional[int] = None) -> int:
    try:
        numeric = int(str(value).strip()) if value is not None else fallback
    except (TypeError, ValueError):
        numeric = fallback
    numeric = max(minimum, numeric)
    if maximum is not None:
        numeric = min(maximum, numeric)
    return numeric


@dataclass(frozen=True)
class AppConfig:
    store_path: Path
    poll_interval_ms: int = DEFAULT_POLL_MS
    debug: bool = False
    log_retention: int = DEFAULT_LOG_RETENTION

    def with_store(self, store_path: Optional[str]) -> "AppConfig":
        if not store_path:
            return self
        return replace(self, store_path=Path(store_path).expanduser().resolve())


def load_app_config(env: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Resolve configuration from environment variables, clamping out-of-range values."""
    source = os.environ if env is None else env
    raw_store = source.get(STORE_ENV_VAR)
    store_path = Path(raw_store).expanduser() if raw_store else default_store_path()
    return AppConfig(
        store_path=store_path,
        poll_interval_ms=_coerce_int(source.get(POLL_ENV_VAR), DEFAULT_POLL_MS, minimum=MIN_POLL_MS),
        debug=_coerce_flag(source.get(DEBUG_ENV_VAR)),
        log_retention=_coerce_int(
            source.get(LOG_RETENTION_ENV_VAR),
            DEFAULT_LOG_RETENTION,
            minimum=LOG_RETENTION_MIN,
            maximum=LOG_RETENTION_MAX,
        ),
    )
