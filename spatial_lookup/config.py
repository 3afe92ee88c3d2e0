from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigError
from .index import DEFAULT_NODE_CAPACITY


ENV_PREFIX = "SPATIAL_LOOKUP_"

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8080
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class LookupConfig:
    geojson_path: Optional[str] = None
    attribute: Optional[str] = None
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    node_capacity: int = DEFAULT_NODE_CAPACITY
    query_crs: Optional[str] = None
    data_crs: Optional[str] = None
    log_level: str = DEFAULT_LOG_LEVEL


def _read_setting(key: str) -> Optional[str]:
    val = os.getenv(ENV_PREFIX + key)
    if val is None or val.strip() == "":
        return None
    return val.strip()


def _read_int(key: str, default: int) -> int:
    val = _read_setting(key)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError as e:
        raise ConfigError(f"{ENV_PREFIX}{key} must be an integer, got {val!r}") from e


def config_from_env() -> LookupConfig:
    """Read every SPATIAL_LOOKUP_* variable; unset ones keep their defaults."""
    return LookupConfig(
        geojson_path=_read_setting("FILE"),
        attribute=_read_setting("PROPERTY"),
        host=_read_setting("HOST") or DEFAULT_HOST,
        port=_read_int("PORT", DEFAULT_PORT),
        node_capacity=_read_int("NODE_CAPACITY", DEFAULT_NODE_CAPACITY),
        query_crs=_read_setting("QUERY_CRS"),
        data_crs=_read_setting("DATA_CRS"),
        log_level=(_read_setting("LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
    )


def load_config() -> LookupConfig:
    """Like config_from_env(), but the data file and property are required."""
    cfg = config_from_env()

    missing = []
    if not cfg.geojson_path:
        missing.append(ENV_PREFIX + "FILE")
    if not cfg.attribute:
        missing.append(ENV_PREFIX + "PROPERTY")

    if missing:
        raise ConfigError("missing settings: " + ", ".join(missing) + ". Set them as environment variables.")

    return cfg
