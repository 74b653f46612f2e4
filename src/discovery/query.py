"""Provider discovery query: filter, order and paginate a provider snapshot.

Data flow:
  1. Active-only filter
  2. Location: geo radius membership when coordinates are given, else city
  3. Category (group or leaf)
  4. Text search
  5. Sort (distance / rating / priority)
  6. Paginate

Pure over already-fetched data: no I/O besides the distance lookup, no
state kept between calls.
"""

import logging
from collections.abc import Sequence

from src.core.schemas import DiscoveryFilters, DiscoveryResult, Provider, RankedProvider
from src.discovery.filters import (
    ActiveOnlyFilter,
    CategoryFilter,
    CityFilter,
    Filter,
    GeoRadiusFilter,
    SearchTextFilter,
    run_filter_chain,
)
from src.discovery.geo import DistanceLookup, HaversineDistanceLookup
from src.discovery.ordering import sort_by_distance, sort_by_priority, sort_by_rating

logger = logging.getLogger(__name__)


def discover_providers(
    providers: Sequence[Provider],
    filters: DiscoveryFilters | None = None,
    distance_lookup: DistanceLookup | None = None,
) -> DiscoveryResult:
    """Run a discovery query over a provider snapshot.

    Args:
        providers: Flat provider records from the data layer.
        filters: Filter/sort/pagination options; None means no filters.
        distance_lookup: Radius lookup consulted when both coordinates are set.
            Defaults to a haversine lookup over the snapshot's coordinates.

    Returns:
        DiscoveryResult with the requested page and the pre-slice total.
    """
    filters = filters or DiscoveryFilters()

    distances: dict[str, float] | None = None
    if filters.geo_active:
        lookup = distance_lookup or HaversineDistanceLookup(providers)
        distances = _distance_map(lookup, filters.latitude, filters.longitude, filters.radius_km)

    chain = _build_filters(filters, distances)
    ranked = [RankedProvider(provider=p) for p in providers]
    filtered = run_filter_chain(ranked, chain)

    ordered = _sort(filtered, filters, distances is not None)
    total = len(ordered)
    page = _paginate(ordered, filters.page, filters.page_size)

    logger.info(
        "Discovery: %d providers in, %d matched, %d returned (order=%s)",
        len(providers), total, len(page), filters.order_by,
    )
    return DiscoveryResult(results=page, total=total)


def page_window(page: int, total_pages: int) -> list[int | None]:
    """Page numbers for a pagination nav; None marks an ellipsis gap.

    Shows the first and last page plus the current page's neighbours, e.g.
    page 5 of 10 -> [1, None, 4, 5, 6, None, 10].
    """
    visible = [p for p in range(1, total_pages + 1) if p in (1, total_pages) or abs(p - page) <= 1]
    window: list[int | None] = []
    for i, p in enumerate(visible):
        if i > 0 and p - visible[i - 1] > 1:
            window.append(None)
        window.append(p)
    return window


def _distance_map(
    lookup: DistanceLookup,
    latitude: float,
    longitude: float,
    radius_km: float,
) -> dict[str, float]:
    """Collect provider_id -> distance_km, dropping hits beyond the radius."""
    distances: dict[str, float] = {}
    for hit in lookup(latitude, longitude, radius_km):
        if hit.distance_km > radius_km:
            continue
        previous = distances.get(hit.provider_id)
        if previous is None or hit.distance_km < previous:
            distances[hit.provider_id] = hit.distance_km
    return distances


def _build_filters(
    filters: DiscoveryFilters,
    distances: dict[str, float] | None,
) -> list[Filter]:
    """Build the filter chain; geo membership replaces the city filter."""
    location: Filter = (
        GeoRadiusFilter(distances) if distances is not None else CityFilter(filters.city)
    )
    return [
        ActiveOnlyFilter(),
        location,
        CategoryFilter(filters.category_slug),
        SearchTextFilter(filters.search),
    ]


def _sort(
    ranked: list[RankedProvider],
    filters: DiscoveryFilters,
    has_distances: bool,
) -> list[RankedProvider]:
    if filters.order_by == "distance" and has_distances:
        return sort_by_distance(ranked)
    if filters.order_by == "rating":
        return sort_by_rating(ranked)
    return sort_by_priority(ranked)


def _paginate(
    ranked: list[RankedProvider],
    page: int | None,
    page_size: int | None,
) -> list[RankedProvider]:
    if not page or not page_size:
        return ranked
    start = (page - 1) * page_size
    return ranked[start:start + page_size]
