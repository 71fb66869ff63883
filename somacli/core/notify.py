import logging
import subprocess

log = logging.getLogger(__name__)


def notify(title: str, body: str, timeout: float = 2.0):
    try:
        subprocess.run(
            ["notify-send", title, body],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            timeout=timeout,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as e:
        log.debug("notify-send failed: %s", e)
