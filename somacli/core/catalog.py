from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Callable, List

import requests

from somacli.core import paths
from somacli.core.errors import NetworkError, ParseError
from somacli.core.models import Station, stations_from_json

log = logging.getLogger(__name__)

CHANNELS_URL = "https://somafm.com/channels.json"
CACHE_TTL = 24 * 60 * 60


def _atomic_write(path: Path, data: Any) -> None:
    tmp = path.with_suffix(".tmp")
    tmp.write_text(json.dumps(data))
    tmp.replace(path)


class StationCatalog:
    """
    The SomaFM channel directory, cached on disk.

    The cache holds the raw ``channels`` array and is considered fresh
    for ``ttl`` seconds after the file was last written.
    """

    def __init__(
        self,
        url: str = CHANNELS_URL,
        *,
        cache_path: Path | None = None,
        ttl: float = CACHE_TTL,
        timeout: float = 15,
        session: requests.Session | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.url = url
        self.ttl = ttl
        self.timeout = timeout
        self._cache_path = cache_path
        self._session = session or requests.Session()
        self._clock = clock

    @property
    def cache_path(self) -> Path:
        if self._cache_path is None:
            self._cache_path = paths.channels_cache_path()
        return self._cache_path

    # ------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------

    def _load_cache(self) -> List[Station] | None:
        path = self.cache_path
        try:
            age = self._clock() - path.stat().st_mtime
        except FileNotFoundError:
            return None
        except OSError as e:
            log.debug("Cannot stat cache %s: %s", path, e)
            return None

        if age >= self.ttl:
            log.debug("Cache %s is stale (%.0fs old)", path, age)
            return None

        try:
            return stations_from_json(json.loads(path.read_text()))
        except (OSError, ValueError, ParseError) as e:
            log.debug("Ignoring corrupt cache %s: %s", path, e)
            return None

    def _save_cache(self, channels: list) -> None:
        try:
            self.cache_path.parent.mkdir(parents=True, exist_ok=True)
            _atomic_write(self.cache_path, channels)
        except OSError as e:
            log.debug("Could not write cache %s: %s", self.cache_path, e)

    # ------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------

    def fetch(self) -> List[Station]:
        log.info("Fetching stations from %s", self.url)
        try:
            r = self._session.get(self.url, timeout=self.timeout)
        except requests.RequestException as e:
            raise NetworkError(f"Error fetching stations: {e}") from e

        if r.status_code != 200:
            raise NetworkError(
                f"Error fetching stations: {r.status_code}", r.status_code
            )

        try:
            data = r.json()
        except ValueError as e:
            raise ParseError(f"Malformed station directory: {e}") from e
        if not isinstance(data, dict):
            raise ParseError("Malformed station directory: expected an object")

        channels = data.get("channels") or []
        stations = stations_from_json(channels)
        self._save_cache(channels)
        log.info("Loaded %d stations", len(stations))
        return stations

    def get_stations(self, refresh: bool = False) -> List[Station]:
        if not refresh:
            cached = self._load_cache()
            if cached is not None:
                return cached
        return self.fetch()
