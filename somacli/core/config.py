from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from somacli.core.paths import config_dir

log = logging.getLogger(__name__)

DEFAULTS: dict[str, Any] = {
    "channels_url": "https://somafm.com/channels.json",
    "cache_ttl": 86400,
    "http_timeout": 15,
    "format": "aac",
    "quality": "highest",
    "show_track": False,
    "show_info": False,
    "notify": False,
    "poll_interval": 1.0,
    "stop_timeout": 5.0,
    "ffplay_bin": "ffplay",
    "ffprobe_bin": "ffprobe",
    "log_level": "WARNING",
}

# Environment wins over the config file for the external binaries.
ENV_OVERRIDES = {
    "ffplay_bin": "FFPLAY_BIN",
    "ffprobe_bin": "FFPROBE_BIN",
}


def config_path() -> Path:
    return config_dir() / "somacli.json"


def _read_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text())
    except (OSError, ValueError) as e:
        log.warning("Ignoring unreadable config %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        log.warning("Ignoring config %s: expected a JSON object", path)
        return {}
    return data


def load(path: Path | None = None) -> dict[str, Any]:
    """
    Merge the defaults, the JSON config file and the environment.

    Unknown keys in the file are dropped.
    """
    cfg = dict(DEFAULTS)
    data = _read_file(path or config_path())
    cfg.update({k: v for k, v in data.items() if k in DEFAULTS})

    for key, var in ENV_OVERRIDES.items():
        value = os.environ.get(var)
        if value:
            cfg[key] = value

    return cfg
