import collections.abc
import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).parent
CONFIG_ENV_PREFIX = "MWB_CONFIG__"

# Later layers win; overrides.toml is optional and usually not committed.
_FILE_LAYERS = ("defaults.toml", "overrides.toml")

_config_cache: Optional[Dict[str, Any]] = None


def _merge_into(base: Dict[str, Any], layer: collections.abc.Mapping) -> Dict[str, Any]:
    """Recursively merge ``layer`` into ``base``; nested tables are merged key by key."""
    for key, value in layer.items():
        current = base.get(key)
        if isinstance(value, collections.abc.Mapping) and isinstance(current, collections.abc.Mapping):
            base[key] = _merge_into(dict(current), value)
        else:
            base[key] = value
    return base


def _read_layer(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.debug(f"Config layer [{path.name}] not present, skipping")
        return {}
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError:
        logger.error(f"Could not decode {path.name}, skipping.", exc_info=True)
        return {}


def _coerce_env_value(raw: str):
    lowered = raw.strip().lower()
    if lowered in {"true", "yes", "on"}:
        return True
    if lowered in {"false", "no", "off"}:
        return False
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        return raw


def _env_overrides(prefix: str = CONFIG_ENV_PREFIX) -> Dict[str, Any]:
    """
    Builds a nested dict from variables such as MWB_CONFIG__SCRAPER__BASE_URL.
    """
    overrides: Dict[str, Any] = {}
    for key, raw in os.environ.items():
        if not key.startswith(prefix):
            continue
        path = [part.lower() for part in key[len(prefix):].split("__") if part]
        if not path:
            continue
        node = overrides
        for part in path[:-1]:
            node = node.setdefault(part, {})
        node[path[-1]] = _coerce_env_value(raw)
    return overrides


def get_config(force_reload: bool = False) -> Dict[str, Any]:
    """
    Merged configuration: TOML layers first, then MWB_CONFIG__* variables.
    Cached until ``force_reload`` is passed.
    """
    global _config_cache
    if _config_cache is not None and not force_reload:
        return _config_cache

    merged: Dict[str, Any] = {}
    for name in _FILE_LAYERS:
        merged = _merge_into(merged, _read_layer(CONFIG_DIR / name))

    env_layer = _env_overrides()
    if env_layer:
        logger.debug(f"Applying {len(env_layer)} config section(s) from environment")
        merged = _merge_into(merged, env_layer)

    _config_cache = merged
    return merged


def load_config() -> Dict[str, Any]:
    """Returns the cached configuration, loading it on first use."""
    return get_config()


def reload_config() -> Dict[str, Any]:
    """Drops the cache and reads every source again."""
    return get_config(force_reload=True)


def get_config_section(path: str, default=None):
    """Value at a dotted path such as ``scraper.base_url``, or ``default``."""
    node: Any = get_config()
    for key in path.split("."):
        if not isinstance(node, dict) or key not in node:
            return default
        node = node[key]
    return default if node is None else node


def flatten_to_env(config: collections.abc.Mapping, parent: str = "") -> Dict[str, str]:
    """
    Flattens a nested config into SECTION__KEY style names (without prefix).
    """
    flat: Dict[str, str] = {}
    for key, value in config.items():
        name = f"{parent}__{key.upper()}" if parent else key.upper()
        if isinstance(value, collections.abc.Mapping):
            flat.update(flatten_to_env(value, name))
        elif isinstance(value, bool):
            flat[name] = "true" if value else "false"
        else:
            flat[name] = str(value)
    return flat
