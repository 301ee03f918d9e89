# config.py

import logging
import os
import yaml
from pathlib import Path
from typing import Optional
from player.core.state import Config
from player.errors import ConfigError


logger = logging.getLogger(__name__)

_INT_KEYS = {"port", "advance_decrement_ms", "default_timeout_ms", "chunk_size"}
_FLOAT_KEYS = {"resync_interval_s"}
_BOOL_KEYS = {"shuffle"}


def _as_bool(v: object) -> bool:
    if isinstance(v, bool):
        return v
    return str(v).strip().lower() in {"1", "true", "yes", "on"}


def _coerce(key: str, value: object) -> object:
    if key in _INT_KEYS:
        return int(value)  # type: ignore[arg-type]
    if key in _FLOAT_KEYS:
        return float(value)  # type: ignore[arg-type]
    if key in _BOOL_KEYS:
        return _as_bool(value)
    if key == "videos":
        if isinstance(value, str):
            return [p for p in value.split(os.pathsep) if p]
        return [str(p) for p in (value or [])]  # type: ignore[union-attr]
    return str(value)


def load_config(profile: str = "default", path: Optional[Path] = None) -> Config:
    """Load the player Config with YAML and env overrides.

    Only the fields defined in player.core.state.Config are accepted. The YAML
    file defaults to configs/<profile>.yaml and is skipped when missing or
    malformed; an explicit ``path`` that cannot be read raises ConfigError.
    """

    # Base defaults aligned with state.Config
    cfg_map: dict[str, object] = {
        "profile": profile,
        "service_name": "MMM-VideoServerPlayer",
        "host": "127.0.0.1",
        "port": 8090,
        "resync_interval_s": 1.0,
        "advance_decrement_ms": 50,
        "default_timeout_ms": 1,
        "chunk_size": 64 * 1024,
        "videos": [],
        "shuffle": False,
        "log_level": "INFO",
    }

    # Optional YAML overrides; only accept known keys
    yaml_path = Path(path) if path is not None else Path("configs") / f"{profile}.yaml"
    yaml_config: object = {}
    if path is not None:
        try:
            with open(yaml_path, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot load config file: {e}", path=str(yaml_path)) from e
    elif yaml_path.exists():
        try:
            with open(yaml_path, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError):
            # Ignore YAML issues; stick to defaults
            logger.warning("Ignoring unreadable config file %s", yaml_path)
            yaml_config = {}
    if isinstance(yaml_config, dict):
        for k in list(cfg_map.keys()):
            if k == "profile":
                continue
            if k in yaml_config and yaml_config[k] is not None:
                try:
                    cfg_map[k] = _coerce(k, yaml_config[k])
                except (TypeError, ValueError):
                    logger.warning("Ignoring invalid config value %s=%r", k, yaml_config[k])

    # Environment overrides
    env_overrides = {
        "service_name": os.getenv("VIDEOSERVER_SERVICE_NAME"),
        "host": os.getenv("VIDEOSERVER_HOST"),
        "port": os.getenv("VIDEOSERVER_PORT"),
        "resync_interval_s": os.getenv("VIDEOSERVER_RESYNC_INTERVAL"),
        "advance_decrement_ms": os.getenv("VIDEOSERVER_ADVANCE_DECREMENT_MS"),
        "chunk_size": os.getenv("VIDEOSERVER_CHUNK_SIZE"),
        "videos": os.getenv("VIDEOSERVER_VIDEOS"),
        "shuffle": os.getenv("VIDEOSERVER_SHUFFLE"),
        "log_level": os.getenv("VIDEOSERVER_LOG_LEVEL"),
    }
    for k, v in env_overrides.items():
        if v is None:
            continue
        try:
            cfg_map[k] = _coerce(k, v)
        except (TypeError, ValueError):
            continue

    return Config(**cfg_map)  # type: ignore[arg-type]
