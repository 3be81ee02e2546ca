"""
Score aggregation and tier classification.

Pure helpers shared by the album, tier-list and avatar views. Means are never
rounded here; ``display_score`` is the only place a score gets rounded, and
tier classification always works on the raw mean.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence


@dataclass(frozen=True)
class Tier:
    name: str
    min: float
    max: float
    color: str

    def contains(self, score: float) -> bool:
        return self.min <= score <= self.max


# ── Closed-closed bands, best first ──
TIERS: List[Tier] = [
    Tier("S", 9, 10, "bg-red-500"),
    Tier("A", 8, 8.9, "bg-orange-500"),
    Tier("B", 7, 7.9, "bg-yellow-500"),
    Tier("C", 6, 6.9, "bg-green-500"),
    Tier("D", 5, 5.9, "bg-blue-500"),
    Tier("E", 3, 4.9, "bg-indigo-500"),
    Tier("F", 0, 2.9, "bg-purple-500"),
]


def _score_of(record: Any) -> float:
    if isinstance(record, (int, float)):
        return record
    if isinstance(record, dict):
        return record["score"]
    return record.score


def average_score(records: Iterable[Any]) -> float:
    """
    Arithmetic mean of the ``score`` of each record.

    Records may be ORM rows, dicts with a ``score`` key, or bare numbers.
    An empty collection averages to 0.
    """
    scores = [_score_of(r) for r in records]
    if not scores:
        return 0
    return sum(scores) / len(scores)


def display_score(mean: Optional[float]) -> Optional[float]:
    """Round a mean to one decimal place for presentation."""
    if mean is None:
        return None
    return round(float(mean), 1)


def classify(mean: float) -> Optional[str]:
    """Return the tier name whose band contains ``mean``, or None."""
    for tier in TIERS:
        if tier.contains(mean):
            return tier.name
    return None


def group_by_tier(albums: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Bucket albums into every tier, best tier first.

    Each album is a dict with a ``ratings`` list. Unrated albums are left out
    of every tier; albums keep their input order inside a tier. The grouped
    albums carry ``average_rating`` rounded for display.
    """
    groups: Dict[str, List[Dict[str, Any]]] = {tier.name: [] for tier in TIERS}

    for album in albums:
        ratings = album.get("ratings") or []
        if not ratings:
            continue
        mean = average_score(ratings)
        name = classify(mean)
        if name is None:
            continue
        groups[name].append({**album, "average_rating": display_score(mean)})

    return [
        {
            "name": tier.name,
            "min": tier.min,
            "max": tier.max,
            "color": tier.color,
            "albums": groups[tier.name],
        }
        for tier in TIERS
    ]


def filter_albums(
    albums: Sequence[Dict[str, Any]],
    search: str = "",
    artist: str = "",
    min_rating: float = 0,
    max_rating: float = 10,
) -> List[Dict[str, Any]]:
    """
    Album-list filter: case-insensitive search over name/artist, exact artist
    match, and an inclusive range on the mean rating (unrated albums count
    as 0).
    """
    needle = search.strip().lower()
    filtered = []
    for album in albums:
        if needle and needle not in album["name"].lower() and needle not in album["artist"].lower():
            continue
        if artist and album["artist"] != artist:
            continue
        mean = average_score(album.get("ratings") or [])
        if not (min_rating <= mean <= max_rating):
            continue
        filtered.append(album)
    return filtered
