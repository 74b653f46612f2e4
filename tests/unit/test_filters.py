"""Tests for the discovery filter chain: each filter in isolation + full chain."""

from src.core.schemas import Category, Provider, RankedProvider
from src.discovery.filters import (
    ActiveOnlyFilter,
    CategoryFilter,
    CityFilter,
    GeoRadiusFilter,
    SearchTextFilter,
    run_filter_chain,
)


def _ranked(
    provider_id: str = "1",
    *,
    name: str = "João Silva",
    description: str = "",
    city: str = "Recife",
    slugs: tuple[str, ...] = (),
    is_active: bool = True,
) -> RankedProvider:
    return RankedProvider(
        provider=Provider(
            id=provider_id,
            name=name,
            description=description,
            city=city,
            categories=[Category(id=s, name=s.replace("-", " ").title(), slug=s) for s in slugs],
            is_active=is_active,
        )
    )


# ---------------------------------------------------------------------------
# ActiveOnlyFilter
# ---------------------------------------------------------------------------


class TestActiveOnlyFilter:
    def test_removes_inactive(self) -> None:
        result = ActiveOnlyFilter()([_ranked("1"), _ranked("2", is_active=False)])
        assert [r.provider.id for r in result] == ["1"]

    def test_empty_list(self) -> None:
        assert ActiveOnlyFilter()([]) == []


# ---------------------------------------------------------------------------
# GeoRadiusFilter
# ---------------------------------------------------------------------------


class TestGeoRadiusFilter:
    def test_keeps_members_and_attaches_distance(self) -> None:
        f = GeoRadiusFilter({"1": 2.5})
        result = f([_ranked("1"), _ranked("2")])
        assert len(result) == 1
        assert result[0].distance_km == 2.5

    def test_empty_map_removes_all(self) -> None:
        assert GeoRadiusFilter({})([_ranked("1")]) == []

    def test_input_not_mutated(self) -> None:
        original = _ranked("1")
        GeoRadiusFilter({"1": 1.0})([original])
        assert original.distance_km is None


# ---------------------------------------------------------------------------
# CityFilter
# ---------------------------------------------------------------------------


class TestCityFilter:
    def test_exact_match(self) -> None:
        result = CityFilter("Recife")([_ranked("1"), _ranked("2", city="Olinda")])
        assert [r.provider.id for r in result] == ["1"]

    def test_none_is_noop(self) -> None:
        assert len(CityFilter(None)([_ranked("1"), _ranked("2", city="Olinda")])) == 2

    def test_empty_string_is_noop(self) -> None:
        assert len(CityFilter("")([_ranked("1")])) == 1


# ---------------------------------------------------------------------------
# CategoryFilter
# ---------------------------------------------------------------------------


class TestCategoryFilter:
    def test_leaf(self) -> None:
        f = CategoryFilter("encanador")
        result = f([_ranked("1", slugs=("encanador",)), _ranked("2", slugs=("eletricista",))])
        assert [r.provider.id for r in result] == ["1"]

    def test_group(self) -> None:
        f = CategoryFilter("pets")
        result = f([
            _ranked("1", slugs=("dog-walker",)),
            _ranked("2", slugs=("eletricista", "veterinario")),
            _ranked("3", slugs=("pintor",)),
        ])
        assert [r.provider.id for r in result] == ["1", "2"]

    def test_group_slug_is_not_a_leaf(self) -> None:
        """A provider literally tagged with the group slug is not a group member."""
        f = CategoryFilter("pets")
        assert f([_ranked("1", slugs=("pets",))]) == []

    def test_unknown_slug_matches_nothing(self) -> None:
        assert CategoryFilter("nope")([_ranked("1", slugs=("pintor",))]) == []

    def test_none_is_noop(self) -> None:
        assert len(CategoryFilter(None)([_ranked("1")])) == 1


# ---------------------------------------------------------------------------
# SearchTextFilter
# ---------------------------------------------------------------------------


class TestSearchTextFilter:
    def test_name(self) -> None:
        assert len(SearchTextFilter("SILVA")([_ranked("1")])) == 1

    def test_description(self) -> None:
        f = SearchTextFilter("hidráulica")
        assert len(f([_ranked("1", description="Serviços de Hidráulica")])) == 1

    def test_category_name(self) -> None:
        f = SearchTextFilter("banho")
        assert len(f([_ranked("1", slugs=("banho-tosa",))])) == 1

    def test_no_match(self) -> None:
        assert SearchTextFilter("xyz")([_ranked("1")]) == []

    def test_whitespace_is_noop(self) -> None:
        assert len(SearchTextFilter("  ")([_ranked("1")])) == 1

    def test_surrounding_whitespace_is_part_of_term(self) -> None:
        assert SearchTextFilter("silva ")([_ranked("1", name="João Silva")]) == []
        assert len(SearchTextFilter("joão ")([_ranked("1", name="João Silva")])) == 1


# ---------------------------------------------------------------------------
# Full chain
# ---------------------------------------------------------------------------


class TestRunFilterChain:
    def test_full_chain(self) -> None:
        ranked = [
            _ranked("inactive", slugs=("pintor",), is_active=False),
            _ranked("other-city", city="Olinda", slugs=("pintor",)),
            _ranked("wrong-category", slugs=("manicure",)),
            _ranked("wrong-name", name="Maria Souza", slugs=("pintor",)),
            _ranked("ok", slugs=("pintor",)),
        ]
        filters = [
            ActiveOnlyFilter(),
            CityFilter("Recife"),
            CategoryFilter("construcao-reformas"),
            SearchTextFilter("silva"),
        ]
        result = run_filter_chain(ranked, filters)
        assert [r.provider.id for r in result] == ["ok"]

    def test_empty_chain_passes_all(self) -> None:
        ranked = [_ranked("1"), _ranked("2")]
        assert run_filter_chain(ranked, []) == ranked
