"""
Configuration loading.

- defaults below
- optional YAML overlay, path from ``PNGMSG_CONFIG`` or passed explicitly
- ``${ENV_VAR}`` placeholders resolved from the environment
"""
import copy
import os
from pathlib import Path

import yaml

from png_errors import ConfigError

CONFIG_ENV_VAR = "PNGMSG_CONFIG"

DEFAULTS = {
    "logging": {
        "level": "WARNING",
        "json": False,
    },
    "print": {
        "preview_chars": 64,
        "detect_encoding": True,
    },
}


def _merge(base, overlay):
    for key, value in overlay.items():
        # unknown keys are dropped
        if key not in base:
            continue
        if isinstance(base[key], dict):
            if not isinstance(value, dict):
                raise ConfigError(f"section {key!r} must be a mapping")
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def _resolve(obj):
    if isinstance(obj, dict):
        return {k: _resolve(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_resolve(item) for item in obj]
    if isinstance(obj, str) and obj.startswith("${") and obj.endswith("}"):
        return os.getenv(obj[2:-1], obj)
    return obj


def _as_bool(value):
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _check(cfg):
    try:
        cfg["print"]["preview_chars"] = int(cfg["print"]["preview_chars"])
    except (TypeError, ValueError):
        raise ConfigError(
            f"print.preview_chars must be an integer, "
            f"got {cfg['print']['preview_chars']!r}"
        ) from None
    if cfg["print"]["preview_chars"] < 0:
        raise ConfigError("print.preview_chars must not be negative")
    cfg["print"]["detect_encoding"] = _as_bool(cfg["print"]["detect_encoding"])
    cfg["logging"]["json"] = _as_bool(cfg["logging"]["json"])
    return cfg


def load_config(path=None):
    cfg = copy.deepcopy(DEFAULTS)

    if path is None:
        path = os.getenv(CONFIG_ENV_VAR)
    if not path:
        return cfg

    with open(Path(path), "r", encoding="utf-8") as f:
        try:
            overlay = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"cannot parse {path}: {e}") from e

    if overlay is None:
        return cfg
    if not isinstance(overlay, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")

    return _check(_merge(cfg, _resolve(overlay)))
