from __future__ import annotations

import json
import logging
import os
import subprocess
from typing import Any, Callable, Dict, Optional

from somacli.core.errors import ParseError, ProcessError

log = logging.getLogger(__name__)


def ffprobe_bin() -> str:
    return os.environ.get("FFPROBE_BIN", "ffprobe")


class StreamProbe:
    """
    Thin wrapper over ``ffprobe -print_format json``.
    """

    def __init__(
        self,
        binary: str | None = None,
        *,
        runner: Callable[..., Any] = subprocess.run,
        timeout: float | None = None,
    ):
        self.binary = binary or ffprobe_bin()
        self._run = runner
        self.timeout = timeout

    def _command(self, url: str, entries: str) -> list[str]:
        return [
            self.binary,
            "-v",
            "quiet",
            "-print_format",
            "json",
            "-show_entries",
            entries,
            url,
        ]

    def probe_tags(self, url: str, entries: str = "format_tags") -> Dict[str, str]:
        cmd = self._command(url, entries)
        log.debug("probe: %s", " ".join(cmd))
        try:
            proc = self._run(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                timeout=self.timeout,
                check=False,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise ProcessError(f"Failed to run {self.binary}: {e}") from e

        if proc.returncode != 0:
            raise ProcessError(
                f"Failed to retrieve stream information ({self.binary} exited {proc.returncode})"
            )

        try:
            info = json.loads(proc.stdout.decode("utf-8", errors="replace") or "{}")
        except ValueError as e:
            raise ParseError(f"Malformed {self.binary} output: {e}") from e
        if not isinstance(info, dict):
            raise ParseError(f"Malformed {self.binary} output: expected an object")

        tags = (info.get("format") or {}).get("tags") or {}
        return {str(k): str(v) for k, v in tags.items()}

    def stream_title(self, url: str) -> Optional[str]:
        tags = self.probe_tags(url, "format_tags=StreamTitle")
        return tags.get("StreamTitle")
