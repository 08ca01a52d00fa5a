"""Tests for the catalog query state model."""

from urllib.parse import urlencode

from intcat.catalog.state import (
    CatalogQueryState,
    SortOrder,
    StatusFilter,
    known_targets,
    parse_catalog_state,
    resolve_target,
    state_to_query_string,
    state_to_search_params,
    target_counts,
)
from intcat.registry.models import IntegrationEntry


def _entry(name: str, targets: list[str]) -> IntegrationEntry:
    return IntegrationEntry(id=name.lower(), name=name, integration_targets=targets)


def test_defaults():
    state = parse_catalog_state("")
    assert state == CatalogQueryState(q="", target="all", status=StatusFilter.ALL, sort=SortOrder.TRUST, inactive=False)
    assert state.is_default
    assert parse_catalog_state(None) == CatalogQueryState()
    assert parse_catalog_state({}) == CatalogQueryState()


def test_serialize_and_parse():
    original = CatalogQueryState(
        q="netbox",
        target="forward",
        status=StatusFilter.STALE,
        sort=SortOrder.RECENT,
        inactive=True,
    )
    params = state_to_search_params(original)
    assert urlencode(params) == "q=netbox&target=forward&status=stale&sort=recent&inactive=1"
    assert state_to_query_string(original) == "q=netbox&target=forward&status=stale&sort=recent&inactive=1"
    assert parse_catalog_state(params) == original
    assert parse_catalog_state(state_to_query_string(original)) == original


def test_default_state_serializes_to_nothing():
    assert state_to_search_params(CatalogQueryState()) == {}
    assert state_to_query_string(CatalogQueryState()) == ""


def test_parser_falls_back_for_invalid_values():
    parsed = parse_catalog_state("status=bad&sort=bad&inactive=0")
    assert parsed.status == StatusFilter.ALL
    assert parsed.sort == SortOrder.TRUST
    assert parsed.inactive is False


def test_parser_trims_and_normalizes():
    parsed = parse_catalog_state({"q": "  net box ", "target": "   ", "status": " fresh ", "sort": "name "})
    assert parsed.q == "net box"
    assert parsed.target == "all"
    assert parsed.status == StatusFilter.FRESH
    assert parsed.sort == SortOrder.NAME


def test_inactive_accepts_only_one_or_true():
    assert parse_catalog_state("inactive=1").inactive is True
    assert parse_catalog_state("inactive=true").inactive is True
    assert parse_catalog_state("inactive=TRUE").inactive is False
    assert parse_catalog_state("inactive=yes").inactive is False
    assert parse_catalog_state("inactive=").inactive is False


def test_parser_takes_first_repeated_value_and_ignores_unknown_keys():
    parsed = parse_catalog_state("?sort=name&sort=recent&page=3&id=x")
    assert parsed.sort == SortOrder.NAME
    assert parsed == CatalogQueryState(sort=SortOrder.NAME)


def test_query_string_encodes_spaces_and_symbols():
    state = CatalogQueryState(q="cloud sync & more")
    query = state_to_query_string(state)
    assert query == "q=cloud+sync+%26+more"
    assert parse_catalog_state(query) == state


def test_round_trip_over_all_enum_combinations():
    for status in StatusFilter:
        for sort in SortOrder:
            for inactive in (False, True):
                for q, target in (("", "all"), ("netbox", "aws"), ("a b", "forward")):
                    state = CatalogQueryState(q=q, target=target, status=status, sort=sort, inactive=inactive)
                    assert parse_catalog_state(state_to_search_params(state)) == state


def test_resolve_target_against_entries():
    entries = [_entry("A", ["aws", "forward"]), _entry("B", ["gcp"])]
    assert known_targets(entries) == {"aws", "forward", "gcp"}
    assert resolve_target("gcp", entries) == "gcp"
    assert resolve_target("azure", entries) == "all"
    assert resolve_target("all", []) == "all"


def test_target_counts_orders_by_count_then_name():
    entries = [_entry("A", ["aws", "forward"]), _entry("B", ["forward", "gcp"]), _entry("C", ["aws"])]
    assert target_counts(entries) == [("aws", 2), ("forward", 2), ("gcp", 1)]


def test_plain_string_fields_are_coerced_to_enums():
    state = CatalogQueryState(status="stale", sort="recent")
    assert state.status is StatusFilter.STALE
    assert state.sort is SortOrder.RECENT
    assert state_to_search_params(state) == {"status": "stale", "sort": "recent"}

    fallback = CatalogQueryState(status="bogus", sort="")
    assert fallback.status is StatusFilter.ALL
    assert fallback.sort is SortOrder.TRUST
    assert fallback.is_default
