from __future__ import annotations

import logging
import os
import re
import subprocess
import threading
from typing import Any, Callable, Optional

import requests

from somacli.core.errors import (
    NetworkError,
    ProcessError,
    SomaError,
    StreamResolutionError,
)
from somacli.core.probe import StreamProbe

log = logging.getLogger(__name__)

_STREAM_URL = re.compile(r"http\S+")


def ffplay_bin() -> str:
    return os.environ.get("FFPLAY_BIN", "ffplay")


def extract_stream_url(text: str) -> Optional[str]:
    m = _STREAM_URL.search(text)
    return m.group(0) if m else None


class StreamPlayer:
    """
    Owns at most one ffplay process.

    ``play`` resolves a playlist URL to the real stream, replaces any running
    process with a new one and returns without waiting for it. When track
    display is on, a watcher thread polls ffprobe for ``StreamTitle`` until
    the process exits or ``stop`` is called.
    """

    def __init__(
        self,
        *,
        session: requests.Session | None = None,
        probe: StreamProbe | None = None,
        binary: str | None = None,
        echo: Callable[[str], Any] = print,
        notifier: Callable[[str, str], Any] | None = None,
        popen: Callable[..., Any] = subprocess.Popen,
        poll_interval: float = 1.0,
        stop_timeout: float = 5.0,
        timeout: float = 15,
    ):
        self._session = session or requests.Session()
        self.probe = probe or StreamProbe()
        self.binary = binary or ffplay_bin()
        self._echo = echo
        self._notify = notifier
        self._popen = popen
        self.poll_interval = poll_interval
        self.stop_timeout = stop_timeout
        self.timeout = timeout

        self._lock = threading.Lock()
        self._proc: Any = None
        self._stopped = threading.Event()
        self._watcher: threading.Thread | None = None
        self._watch_stop: threading.Event | None = None

    # ------------------------------------------------------------
    # Stream resolution / metadata
    # ------------------------------------------------------------

    def resolve_stream(self, playlist_url: str) -> str:
        try:
            with self._session.get(playlist_url, stream=True, timeout=self.timeout) as r:
                if r.status_code != 200:
                    raise NetworkError(
                        f"Error streaming music: {r.status_code}", r.status_code
                    )
                for line in r.iter_lines(decode_unicode=True):
                    if isinstance(line, bytes):
                        line = line.decode("utf-8", errors="replace")
                    url = extract_stream_url(line)
                    if url:
                        log.debug("Resolved %s -> %s", playlist_url, url)
                        return url
        except requests.RequestException as e:
            raise NetworkError(f"Error streaming music: {e}") from e

        raise StreamResolutionError("Unable to extract stream URL.")

    def show_info(self, stream_url: str) -> None:
        try:
            tags = self.probe.probe_tags(stream_url)
        except SomaError as e:
            log.warning("Failed to retrieve stream information: %s", e)
            return

        self._echo("Stream Information:")
        for key, value in tags.items():
            self._echo(f"{key}: {value}")

    def _watch(self, proc: Any, stream_url: str, stop: threading.Event) -> None:
        last_title = ""
        while not stop.is_set() and proc.poll() is None:
            try:
                title = self.probe.stream_title(stream_url)
            except SomaError as e:
                log.warning("Failed to retrieve stream information: %s", e)
            else:
                if title and title != last_title and not stop.is_set():
                    last_title = title
                    self._echo(f"StreamTitle: {title}")
                    if self._notify:
                        self._notify("StreamTitle", title)
            stop.wait(self.poll_interval)

    # ------------------------------------------------------------
    # Process lifecycle
    # ------------------------------------------------------------

    def _spawn(self, stream_url: str) -> Any:
        args = [self.binary, "-nodisp", "-autoexit", stream_url]
        log.debug("spawn: %s", " ".join(args))
        try:
            return self._popen(
                args,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            raise ProcessError(f"Failed to start {self.binary}: {e}") from e

    def _stop_locked(self) -> None:
        self._stopped.set()

        if self._watch_stop is not None:
            self._watch_stop.set()

        proc = self._proc
        if proc is not None and proc.poll() is None:
            proc.terminate()
            try:
                proc.wait(timeout=self.stop_timeout)
            except subprocess.TimeoutExpired:
                log.warning("Player did not exit, killing it")
                proc.kill()
                proc.wait()

        watcher = self._watcher
        if watcher is not None and watcher is not threading.current_thread():
            watcher.join(timeout=self.stop_timeout)
        self._watcher = None
        self._watch_stop = None

    # ------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------

    def play(
        self,
        stream_url: str,
        station_name: str,
        show_track: bool = False,
        show_info: bool = False,
    ) -> None:
        url = self.resolve_stream(stream_url)

        if show_info:
            self.show_info(url)

        self._echo(f"Now playing: {station_name}")
        if self._notify:
            self._notify("Now playing", station_name)

        with self._lock:
            self._stop_locked()
            self._proc = self._spawn(url)
            self._stopped.clear()

            if show_track:
                stop = threading.Event()
                self._watch_stop = stop
                self._watcher = threading.Thread(
                    target=self._watch,
                    args=(self._proc, url, stop),
                    name="somacli-track",
                    daemon=True,
                )
                self._watcher.start()

    def stop(self) -> None:
        with self._lock:
            self._stop_locked()

    def is_running(self) -> bool:
        proc = self._proc
        return proc is not None and proc.poll() is None

    def wait(self) -> None:
        """Block until playback ends on its own or ``stop`` is called."""
        while self.is_running():
            if self._stopped.wait(self.poll_interval):
                break
