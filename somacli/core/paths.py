from pathlib import Path
import os

APP_NAME = "somacli"


def cache_dir() -> Path:
    # Not created here; writers mkdir on demand.
    base = os.environ.get("XDG_CACHE_HOME")
    if base:
        return Path(base) / APP_NAME
    return Path.home() / ".cache" / APP_NAME


def config_dir() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(base) / APP_NAME


def channels_cache_path() -> Path:
    return cache_dir() / "channels.json"
