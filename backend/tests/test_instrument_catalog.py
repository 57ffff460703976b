from __future__ import annotations

from datetime import date

import pytest

from payofflab.meta.instrument_catalog import (
    create_stock,
    default_price,
    futures_expiries,
    get_instrument,
    instruments_by_family,
    nearby_strikes,
    resolve_instrument,
    round_to_strike,
    search_stocks,
    strike_interval_for_price,
)


def test_lookup_by_symbol():
    spx = get_instrument("spx")
    assert spx is not None
    assert spx.multiplier == 100
    assert spx.strike_interval == 5
    assert spx.family == "SPX"
    assert get_instrument("ZZZ") is None


def test_family_members_and_asset_classes():
    ndx = instruments_by_family("NDX")
    assert [i.symbol for i in ndx] == ["NDX", "QQQ", "NQ", "MNQ"]
    assert [i.asset_class for i in ndx] == ["index", "etf", "future", "micro-future"]


@pytest.mark.parametrize(
    "price,interval",
    [(10, 0.5), (24.99, 0.5), (25, 1.0), (150, 1.0), (300, 2.5), (750, 5.0), (2500, 10.0), (5850, 25.0)],
)
def test_strike_interval_tiers(price, interval):
    assert strike_interval_for_price(price) == interval


def test_round_to_strike_and_ladder():
    assert round_to_strike(5851.0, 5) == 5850.0
    assert round_to_strike(5852.5, 5) == 5855.0
    assert nearby_strikes(5850.0, 5, 2) == [5840.0, 5845.0, 5850.0, 5855.0, 5860.0]
    # non-positive strikes are dropped
    assert nearby_strikes(1.0, 0.5, 3) == [0.5, 1.0, 1.5, 2.0, 2.5]


def test_stocks():
    s = create_stock("aapl", "Apple Inc.", price=300.0)
    assert s.symbol == "AAPL"
    assert s.multiplier == 100
    assert s.tick_size == 0.01
    assert s.strike_interval == 2.5
    assert s.asset_class == "stock"
    assert s.family is None

    assert [x.symbol for x in search_stocks("nvid")] == ["NVDA"]
    assert [x.symbol for x in search_stocks("TSLA")] == ["TSLA"]
    assert search_stocks("   ") == []


def test_resolve_instrument():
    assert resolve_instrument("es").symbol == "ES"
    rivn = resolve_instrument("rivn")
    assert rivn.asset_class == "stock"
    assert resolve_instrument("RIVN", price=12.0).strike_interval == 0.5
    with pytest.raises(KeyError):
        resolve_instrument("NOPE")


def test_default_prices():
    assert default_price("SPX") == 5850.0
    assert default_price("NQ") == 20500.0
    assert default_price("AAPL") == 150.0


def test_futures_expiries_roll_after_third_friday():
    exp = futures_expiries(date(2026, 10, 18), count=4)
    assert [e["code"] for e in exp] == ["Z6", "H7", "M7", "U7"]
    assert exp[0]["label"] == "Dec 2026"
    assert exp[0]["expiry"] == "2026-12-18"

    assert futures_expiries(date(2026, 12, 19), count=1)[0]["code"] == "H7"
    # expiry day itself is still listed
    assert futures_expiries(date(2026, 3, 20), count=1)[0]["code"] == "H6"
