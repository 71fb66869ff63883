from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from somacli.core.errors import ParseError


@dataclass(frozen=True)
class Playlist:
    format: str
    quality: str
    url: str

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Playlist":
        if not isinstance(d, dict):
            raise ParseError(f"Malformed playlist entry: {d!r}")
        return cls(
            format=str(d.get("format") or ""),
            quality=str(d.get("quality") or ""),
            url=str(d.get("url") or ""),
        )


@dataclass(frozen=True)
class Station:
    title: str
    description: str = ""
    playlists: tuple[Playlist, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Station":
        if not isinstance(d, dict):
            raise ParseError(f"Malformed station entry: {d!r}")
        playlists = d.get("playlists") or []
        if not isinstance(playlists, list):
            raise ParseError(f"Malformed playlists for {d.get('title')!r}")
        return cls(
            title=str(d.get("title") or ""),
            description=str(d.get("description") or ""),
            playlists=tuple(Playlist.from_dict(p) for p in playlists),
        )


def stations_from_json(channels: Any) -> list[Station]:
    if not isinstance(channels, list):
        raise ParseError("Expected a list of channels")
    return [Station.from_dict(ch) for ch in channels]
