from __future__ import annotations

from difflib import SequenceMatcher
from typing import Optional, Sequence

from somacli.core.models import Station


def similarity(a: str, b: str) -> float:
    # autojunk off: titles are short and every character counts.
    return SequenceMatcher(None, a.lower(), b.lower(), autojunk=False).ratio()


def best_match(stations: Sequence[Station], name: str) -> Optional[Station]:
    best: Optional[Station] = None
    best_score = 0.0

    for st in stations:
        score = similarity(st.title, name)
        if score > best_score:
            best, best_score = st, score

    return best
