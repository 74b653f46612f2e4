"""Result ordering for provider discovery.

All sorts are stable and return new lists; inputs are never mutated.
"""

from src.core.schemas import RankedProvider


def sort_by_priority(ranked: list[RankedProvider]) -> list[RankedProvider]:
    """Default ordering.

    Verified before unverified, then rated before unrated, then higher
    average rating, then newer created_at.
    """
    newest_first = sorted(ranked, key=lambda r: r.provider.created_at, reverse=True)
    return sorted(newest_first, key=_priority_key)


def sort_by_rating(ranked: list[RankedProvider]) -> list[RankedProvider]:
    """Descending by average rating; unrated providers compare as 0."""
    return sorted(ranked, key=lambda r: r.provider.average_rating or 0.0, reverse=True)


def sort_by_distance(ranked: list[RankedProvider]) -> list[RankedProvider]:
    """Ascending by distance; providers without a distance go last."""
    return sorted(
        ranked,
        key=lambda r: (r.distance_km is None, r.distance_km if r.distance_km is not None else 0.0),
    )


def _priority_key(ranked: RankedProvider) -> tuple[bool, bool, float]:
    p = ranked.provider
    rated = p.average_rating is not None
    return (not p.is_verified, not rated, -(p.average_rating or 0.0))
