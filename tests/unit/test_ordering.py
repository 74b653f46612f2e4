"""Tests for result ordering helpers."""

from datetime import datetime, timedelta

from src.core.schemas import Provider, RankedProvider
from src.discovery.ordering import sort_by_distance, sort_by_priority, sort_by_rating


def _ranked(
    provider_id: str,
    *,
    verified: bool = False,
    rating: float | None = None,
    age_days: int = 0,
    distance_km: float | None = None,
) -> RankedProvider:
    return RankedProvider(
        provider=Provider(
            id=provider_id,
            name=provider_id,
            is_verified=verified,
            average_rating=rating,
            review_count=1 if rating is not None else 0,
            created_at=datetime(2026, 6, 1) - timedelta(days=age_days),
        ),
        distance_km=distance_km,
    )


def _ids(ranked: list[RankedProvider]) -> list[str]:
    return [r.provider.id for r in ranked]


class TestSortByPriority:
    def test_full_key_order(self) -> None:
        ranked = [
            _ranked("unverified-unrated"),
            _ranked("unverified-rated", rating=5.0),
            _ranked("verified-unrated-old", verified=True, age_days=9),
            _ranked("verified-unrated-new", verified=True, age_days=1),
            _ranked("verified-low", verified=True, rating=3.0),
            _ranked("verified-high", verified=True, rating=4.5),
        ]
        assert _ids(sort_by_priority(ranked)) == [
            "verified-high",
            "verified-low",
            "verified-unrated-new",
            "verified-unrated-old",
            "unverified-rated",
            "unverified-unrated",
        ]

    def test_input_not_mutated(self) -> None:
        ranked = [_ranked("a"), _ranked("b", verified=True)]
        sort_by_priority(ranked)
        assert _ids(ranked) == ["a", "b"]


class TestSortByRating:
    def test_ties_keep_input_order(self) -> None:
        ranked = [_ranked("a", rating=4.0), _ranked("b"), _ranked("c", rating=4.0)]
        assert _ids(sort_by_rating(ranked)) == ["a", "c", "b"]


class TestSortByDistance:
    def test_missing_distance_last(self) -> None:
        ranked = [
            _ranked("none"),
            _ranked("far", distance_km=12.0),
            _ranked("zero", distance_km=0.0),
        ]
        assert _ids(sort_by_distance(ranked)) == ["zero", "far", "none"]
