"""Filter chain for provider discovery.

Filter order:
  1. ActiveOnlyFilter   : inactive providers never reach the results
  2. GeoRadiusFilter    : keep providers in the distance map, attach distance
     or CityFilter      : exact city match, only when geo is inactive
  3. CategoryFilter     : group or leaf slug
  4. SearchTextFilter   : name, description or category name, case-insensitive
"""

import logging
from collections.abc import Callable, Mapping

from src.core.schemas import RankedProvider
from src.core.taxonomy import GroupSelector, LeafSelector, resolve_category

logger = logging.getLogger(__name__)

# A filter is a callable that takes ranked providers and returns a subset.
Filter = Callable[[list[RankedProvider]], list[RankedProvider]]


class ActiveOnlyFilter:
    """Remove providers whose profile is not active."""

    def __call__(self, ranked: list[RankedProvider]) -> list[RankedProvider]:
        result = [r for r in ranked if r.provider.is_active]
        removed = len(ranked) - len(result)
        if removed:
            logger.debug("ActiveOnlyFilter: removed %d inactive providers", removed)
        return result


class GeoRadiusFilter:
    """Keep only providers present in the distance map and attach their distance.

    Map entries for unknown provider ids are ignored.
    """

    def __init__(self, distances: Mapping[str, float]) -> None:
        self._distances = distances

    def __call__(self, ranked: list[RankedProvider]) -> list[RankedProvider]:
        result = [
            r.model_copy(update={"distance_km": self._distances[r.provider.id]})
            for r in ranked
            if r.provider.id in self._distances
        ]
        removed = len(ranked) - len(result)
        if removed:
            logger.debug("GeoRadiusFilter: removed %d providers outside radius", removed)
        return result


class CityFilter:
    """Keep providers whose city matches exactly. Empty city is a no-op."""

    def __init__(self, city: str | None) -> None:
        self._city = city or None

    def __call__(self, ranked: list[RankedProvider]) -> list[RankedProvider]:
        if self._city is None:
            return ranked
        result = [r for r in ranked if r.provider.city == self._city]
        removed = len(ranked) - len(result)
        if removed:
            logger.debug("CityFilter: removed %d providers not in '%s'", removed, self._city)
        return result


class CategoryFilter:
    """Keep providers holding the requested leaf category, or any category of a group.

    A slug that is neither a group nor a held leaf category matches nothing.
    """

    def __init__(self, category_slug: str | None) -> None:
        self._selector = resolve_category(category_slug) if category_slug else None

    def __call__(self, ranked: list[RankedProvider]) -> list[RankedProvider]:
        if self._selector is None:
            return ranked
        result = [r for r in ranked if self._matches(r)]
        removed = len(ranked) - len(result)
        if removed:
            logger.debug("CategoryFilter: removed %d providers", removed)
        return result

    def _matches(self, ranked: RankedProvider) -> bool:
        held = {c.slug for c in ranked.provider.categories}
        selector = self._selector
        if isinstance(selector, GroupSelector):
            return not held.isdisjoint(selector.slugs)
        if isinstance(selector, LeafSelector):
            return selector.slug in held
        return False


class SearchTextFilter:
    """Case-insensitive substring match on name, description or any category name.

    An empty or whitespace-only term is a no-op. Any other term is matched
    as given, surrounding whitespace included.
    """

    def __init__(self, search: str | None) -> None:
        term = search or ""
        self._term = term.casefold() if term.strip() else ""

    def __call__(self, ranked: list[RankedProvider]) -> list[RankedProvider]:
        if not self._term:
            return ranked
        result = [r for r in ranked if self._matches(r)]
        removed = len(ranked) - len(result)
        if removed:
            logger.debug("SearchTextFilter: removed %d providers", removed)
        return result

    def _matches(self, ranked: RankedProvider) -> bool:
        p = ranked.provider
        term = self._term
        if term in p.name.casefold():
            return True
        if p.description and term in p.description.casefold():
            return True
        return any(term in c.name.casefold() for c in p.categories)


def run_filter_chain(
    ranked: list[RankedProvider],
    filters: list[Filter],
) -> list[RankedProvider]:
    """Apply filters in order, returning the surviving providers."""
    result = ranked
    for f in filters:
        result = f(result)
    return result
