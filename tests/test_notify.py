import subprocess

from somacli.core import notify


def test_notify_waits_for_notify_send(monkeypatch):
    calls = []

    def run(cmd, **kwargs):
        calls.append((cmd, kwargs))

    monkeypatch.setattr(notify.subprocess, "run", run)

    notify.notify("Now playing", "Drone Zone")

    assert calls[0][0] == ["notify-send", "Now playing", "Drone Zone"]
    assert calls[0][1]["timeout"] == 2.0


def test_notify_failures_are_ignored(monkeypatch):
    def run(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

    monkeypatch.setattr(notify.subprocess, "run", run)
    notify.notify("Now playing", "Drone Zone")


def test_missing_notify_send_is_ignored(monkeypatch):
    def run(cmd, **kwargs):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(notify.subprocess, "run", run)
    notify.notify("Now playing", "Drone Zone")
