"""Tests for the tracked currency set (load, convert, add, delete, filter, rows)."""

import logging

import pytest

from conftest import COUNTRIES, StaticSource
from converter_hub.core.converter import DEFAULT_CODES, TrackedSet
from converter_hub.core.currencies import CurrencyCatalog
from converter_hub.core.exceptions import (
    AlreadyTrackedError,
    ConverterError,
    CurrencyNotFoundError,
    DivisionByZeroError,
    IndexOutOfRangeError,
    NotTrackedError,
)
from converter_hub.infra.database import JsonSelectionStore


@pytest.fixture
def tracked(catalog, store):
    ts = TrackedSet(catalog, store)
    yield ts
    ts.close()


@pytest.fixture
def empty_set(catalog, store):
    ts = TrackedSet(catalog, store, default_codes=())
    yield ts
    ts.close()


def _assert_sorted(ts: TrackedSet) -> None:
    codes = [e.code for e in ts.ordered]
    assert codes == sorted(codes)


def _values(ts: TrackedSet) -> dict:
    return {code: e.display_value for code, e in ts.tracked.items()}


def test_first_run_seeds_default_set_and_persists(tracked, store) -> None:
    assert tracked.tracked_codes() == sorted(DEFAULT_CODES)
    for code in DEFAULT_CODES:
        assert tracked.tracked[code].display_value == tracked.catalog.get(code).rate
    _assert_sorted(tracked)
    tracked.flush()
    assert sorted(store.list_all()) == sorted(DEFAULT_CODES)


def test_seed_skips_codes_missing_from_catalog(store) -> None:
    small = CurrencyCatalog.build(
        StaticSource({"base": "USD", "rates": {"EUR": 0.9}}), StaticSource(COUNTRIES)
    )
    ts = TrackedSet(small, store)
    try:
        assert ts.tracked_codes() == ["EUR", "USD"]
        ts.flush()
        assert sorted(store.list_all()) == ["EUR", "USD"]
    finally:
        ts.close()


def test_load_uses_persisted_codes(catalog, store) -> None:
    store.insert("JPY")
    store.insert("SEK")
    store.insert("XAU")  # unsupported, silently dropped
    ts = TrackedSet(catalog, store)
    try:
        assert ts.tracked_codes() == ["JPY", "SEK"]
        assert ts.tracked["JPY"].display_value == 150.0
    finally:
        ts.close()


def test_add_then_convert_scenario(empty_set) -> None:
    empty_set.add("USD")
    empty_set.add("EUR")
    assert _values(empty_set) == {"USD": 1.0, "EUR": 0.9}

    empty_set.convert("USD", 10)
    assert empty_set.tracked["USD"].display_value == 10.0
    assert empty_set.tracked["EUR"].display_value == pytest.approx(9.0)


def test_convert_keeps_all_entries_proportional(tracked) -> None:
    tracked.convert("RUB", 1234.5)
    assert tracked.tracked["RUB"].display_value == 1234.5
    ratios = [
        e.display_value / tracked.catalog.get(code).rate
        for code, e in tracked.tracked.items()
    ]
    assert ratios == pytest.approx([ratios[0]] * len(ratios))


def test_convert_anchors_on_catalog_rate(tracked) -> None:
    tracked.convert("USD", 10)
    tracked.convert("EUR", 9)
    # 9 EUR is still 10 USD: anchoring does not compound
    assert tracked.tracked["USD"].display_value == pytest.approx(10.0)


def test_convert_rejects_untracked_and_bad_values(tracked) -> None:
    with pytest.raises(NotTrackedError):
        tracked.convert("JPY", 1)
    with pytest.raises(ConverterError):
        tracked.convert("USD", float("inf"))


def test_convert_with_zero_rate_anchor_is_rejected(store) -> None:
    zero = CurrencyCatalog.build(
        StaticSource({"base": "USD", "rates": {"EUR": 0.0}}), StaticSource(COUNTRIES)
    )
    ts = TrackedSet(zero, store)
    try:
        before = _values(ts)
        with pytest.raises(DivisionByZeroError):
            ts.convert("EUR", 5)
        assert isinstance(DivisionByZeroError("EUR"), ZeroDivisionError)
        assert _values(ts) == before
    finally:
        ts.close()


def test_add_rescales_into_current_ratio(tracked, store) -> None:
    tracked.convert("USD", 100)
    tracked.add("JPY")
    assert tracked.tracked["JPY"].display_value == pytest.approx(15000.0)
    assert tracked.tracked["USD"].display_value == pytest.approx(100.0)
    _assert_sorted(tracked)
    tracked.flush()
    assert "JPY" in store.list_all()


def test_add_errors(tracked) -> None:
    with pytest.raises(CurrencyNotFoundError):
        tracked.add("XAU")
    with pytest.raises(AlreadyTrackedError):
        tracked.add("usd")


def test_add_then_delete_restores_key_set(tracked, store) -> None:
    before = set(tracked.tracked)
    tracked.add("SEK")
    tracked.delete("SEK")
    assert set(tracked.tracked) == before
    assert "SEK" not in [e.code for e in tracked.ordered]
    _assert_sorted(tracked)
    tracked.flush()
    assert "SEK" not in store.list_all()


def test_delete_unknown_code_fails_and_changes_nothing(tracked) -> None:
    before = _values(tracked)
    with pytest.raises(NotTrackedError):
        tracked.delete("XYZ")
    assert _values(tracked) == before
    assert tracked.count == len(before)


def test_filter_by_code_and_country(tracked) -> None:
    tracked.filter("r")
    codes = [e.code for e in tracked.ordered]
    # code contains "R", or country contains "r" in any case
    assert codes == ["AUD", "EUR", "RUB", "UAH"]

    tracked.filter("kingdom")
    assert [e.code for e in tracked.ordered] == ["GBP"]
    assert len(tracked) == len(DEFAULT_CODES)


def test_filter_empty_reproduces_full_set(tracked) -> None:
    tracked.filter("zzz")
    assert tracked.count == 0
    tracked.filter("")
    rows = [tracked.present(i) for i in range(tracked.count)]
    assert [r.code for r in rows] == tracked.tracked_codes()


def test_mutations_respect_active_filter(tracked) -> None:
    tracked.filter("sw")
    assert tracked.count == 0
    tracked.add("SEK")
    assert [e.code for e in tracked.ordered] == ["SEK"]


def test_present_formats_values(empty_set) -> None:
    empty_set.add("USD")
    empty_set.add("EUR")
    empty_set.convert("USD", 5)
    row = empty_set.present(1)
    assert (row.code, row.country, row.formatted_value) == ("USD", "United States", "5")

    empty_set.convert("USD", 5.25)
    assert empty_set.present(1).formatted_value == "5.25"


def test_present_out_of_range(tracked) -> None:
    with pytest.raises(IndexOutOfRangeError):
        tracked.present(tracked.count)
    with pytest.raises(IndexOutOfRangeError):
        tracked.present(-1)


def test_get_rate_respects_filter(tracked) -> None:
    tracked.convert("USD", 2)
    assert tracked.get_rate("EUR") == "1.8"
    tracked.filter("pound")
    with pytest.raises(NotTrackedError):
        tracked.get_rate("EUR")


def test_available_currencies_marks_tracked(tracked) -> None:
    entries = tracked.available_currencies
    codes = [e.code for e in entries]
    assert codes == tracked.catalog.codes()
    on = {e.code for e in entries if e.on}
    assert on == set(DEFAULT_CODES)


def test_unreadable_selection_is_logged_and_defaults_used(catalog, tmp_path, caplog) -> None:
    path = tmp_path / "sel.json"
    path.write_text("{oops", encoding="utf-8")
    caplog.set_level(logging.ERROR, logger="converter_hub.converter")

    with TrackedSet(catalog, JsonSelectionStore(path)) as ts:
        assert ts.tracked_codes() == sorted(DEFAULT_CODES)
        ts.flush()

    assert "Cannot read saved selection" in caplog.text
    # the corrupted file is left for inspection, not overwritten by the seed
    assert path.read_text(encoding="utf-8") == "{oops"


def test_mutations_after_close_stay_in_memory(tracked, store) -> None:
    tracked.close()
    tracked.add("JPY")
    tracked.delete("USD")
    assert "JPY" in tracked
    assert "USD" not in tracked
    stored = store.list_all()
    assert "JPY" not in stored
    assert "USD" in stored


def test_context_manager_closes_writer(catalog, store) -> None:
    with TrackedSet(catalog, store) as ts:
        ts.add("SEK")
    assert "SEK" in store.list_all()
    ts.add("JPY")
    assert "JPY" not in store.list_all()
