from __future__ import annotations

from typing import Optional, Sequence

from somacli.core.models import Playlist

QUALITY_RANK = {"highest": 3, "high": 2, "low": 1}
FORMATS = ("aac", "mp3")
QUALITIES = tuple(QUALITY_RANK)


def quality_rank(quality: str) -> int:
    return QUALITY_RANK.get(quality, 0)


def best_playlist(
    playlists: Sequence[Playlist], format: str, quality: str
) -> Optional[str]:
    """
    Pick a playlist URL: format and quality first, then format alone,
    then whatever comes first. None only when there is nothing to pick.
    """
    rank = quality_rank(quality)

    for pl in playlists:
        if pl.format == format and quality_rank(pl.quality) == rank:
            return pl.url

    for pl in playlists:
        if pl.format == format:
            return pl.url

    if playlists:
        return playlists[0].url
    return None
