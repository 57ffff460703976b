from __future__ import annotations

import pytest

from payofflab.meta.instrument_catalog import get_instrument
from payofflab.services.legs import Leg
from payofflab.services.margin import (
    calculate_margin_requirement,
    pair_spreads,
    resolve_margin_type,
)


def _leg(leg_id, side, strike, *, symbol="SPX", option_type="call", premium=0.0, quantity=1, leg_kind="option"):
    return Leg(
        leg_id=leg_id,
        instrument=get_instrument(symbol),
        side=side,
        strike=strike,
        quantity=quantity,
        option_type=option_type,
        premium=premium,
        leg_kind=leg_kind,
    )


def test_empty_position():
    res = calculate_margin_requirement([], 5850.0)
    assert res.margin == 0.0
    assert res.margin_type == "long-only"
    assert res.breakdown == []


def test_long_only_is_premium_paid():
    legs = [_leg("L1", "long", 5850.0, premium=20.0, quantity=2)]
    res = calculate_margin_requirement(legs, 5850.0)
    assert res.margin_type == "long-only"
    assert res.margin == pytest.approx(20.0 * 2 * 100)
    assert [l.description for l in res.breakdown] == ["Long options (premium paid)"]


def test_naked_short_put():
    legs = [_leg("S1", "short", 5800.0, option_type="put", premium=15.0)]
    res = calculate_margin_requirement(legs, 5850.0)

    # method1 = 20% * 585000 + 1500 - 5000 OTM; method2 = 10% * 580000 + 1500
    assert res.margin_type == "naked"
    assert res.margin == pytest.approx(113500.0)
    assert len(res.breakdown) == 1
    assert res.breakdown[0].description == "Naked put SPX 5800"


def test_naked_uses_strike_floor_when_far_otm():
    # Deep OTM call: 20% * 585000 + 100 - 150000 < 10% * 7350 * 100 + 100
    legs = [_leg("S1", "short", 7350.0, premium=1.0)]
    res = calculate_margin_requirement(legs, 5850.0)
    assert res.margin == pytest.approx(73600.0)


def test_vertical_call_spread_margin_is_strike_width():
    legs = [
        _leg("S1", "short", 5900.0, premium=10.0),
        _leg("L1", "long", 5950.0, premium=5.0),
    ]
    res = calculate_margin_requirement(legs, 5850.0)
    assert res.margin_type == "spread"
    assert res.margin == 50.0 * 1 * 100
    assert [l.description for l in res.breakdown] == ["CALL spread (5900/5950)"]


def test_spread_pairs_across_family_members():
    legs = [
        _leg("S1", "short", 5900.0, premium=10.0),
        _leg("L1", "long", 5950.0, symbol="ES", premium=5.0),
    ]
    res = calculate_margin_requirement(legs, 5850.0)
    assert res.margin_type == "spread"
    # width x qty x the short leg's multiplier
    assert res.margin == pytest.approx(5000.0)


def test_quantity_mismatch_does_not_pair():
    legs = [
        _leg("S1", "short", 5900.0, premium=10.0),
        _leg("L1", "long", 5950.0, premium=5.0, quantity=2),
    ]
    res = calculate_margin_requirement(legs, 5850.0)
    assert res.margin_type == "naked"
    assert [l.description for l in res.breakdown] == ["Naked call SPX 5900", "Long call SPX 5950"]


def test_other_family_does_not_pair():
    legs = [
        _leg("S1", "short", 5900.0, premium=10.0),
        _leg("L1", "long", 20600.0, symbol="NDX", premium=5.0),
    ]
    res = calculate_margin_requirement(legs, 5850.0)
    assert res.margin_type == "naked"


def test_naked_overrides_spread_and_breakdown_order():
    legs = [
        _leg("LP", "long", 5700.0, option_type="put", premium=4.0, quantity=2),
        _leg("SC", "short", 5900.0, premium=10.0),
        _leg("SP", "short", 5800.0, option_type="put", premium=15.0),
        _leg("LC", "long", 5950.0, premium=5.0),
    ]
    res = calculate_margin_requirement(legs, 5850.0)

    assert res.margin_type == "naked"
    assert [l.description for l in res.breakdown] == [
        "CALL spread (5900/5950)",
        "Naked put SPX 5800",
        "Long put SPX 5700",
    ]
    assert res.breakdown[2].amount == pytest.approx(4.0 * 2 * 100)
    assert res.margin == pytest.approx(sum(l.amount for l in res.breakdown), abs=0.01)


def test_greedy_pairing_takes_first_eligible_long():
    short = _leg("S1", "short", 5900.0, premium=10.0)
    far = _leg("L1", "long", 6000.0, premium=2.0)
    near = _leg("L2", "long", 5950.0, premium=5.0)

    assert pair_spreads([short], [far, near]) == [(0, 0)]

    res = calculate_margin_requirement([short, far, near], 5850.0)
    assert res.breakdown[0].description == "CALL spread (5900/6000)"
    assert res.breakdown[0].amount == pytest.approx(10000.0)
    assert res.breakdown[1].description == "Long call SPX 5950"


def test_identical_legs_are_paired_independently():
    short = _leg("S1", "short", 5900.0, premium=10.0)
    short_again = _leg("S2", "short", 5900.0, premium=10.0)
    long = _leg("L1", "long", 5950.0, premium=5.0)

    res = calculate_margin_requirement([short, short_again, long], 5850.0)
    assert [l.description for l in res.breakdown] == ["CALL spread (5900/5950)", "Naked call SPX 5900"]
    assert res.margin_type == "naked"


def test_fractional_strikes_print_without_trailing_zero():
    legs = [
        _leg("S1", "short", 587.5, symbol="SPY", premium=2.0),
        _leg("L1", "long", 592.5, symbol="SPY", premium=1.0),
    ]
    res = calculate_margin_requirement(legs, 585.0)
    assert res.breakdown[0].description == "CALL spread (587.5/592.5)"
    assert res.margin == pytest.approx(500.0)


def test_short_future_is_margined_without_otm_credit():
    legs = [_leg("F1", "short", 5850.0, symbol="ES", leg_kind="future")]
    res = calculate_margin_requirement(legs, 5850.0)

    # 20% of 5850 x 50
    assert res.margin == pytest.approx(58500.0)
    assert res.margin_type == "naked"
    assert res.breakdown[0].description == "Naked future ES 5850"


def test_future_never_pairs_with_an_option():
    legs = [
        _leg("F1", "short", 5850.0, symbol="ES", leg_kind="future"),
        _leg("L1", "long", 5900.0, symbol="ES", premium=30.0),
    ]
    res = calculate_margin_requirement(legs, 5850.0)
    assert [l.description for l in res.breakdown] == ["Naked future ES 5850", "Long call ES 5900"]


def test_margin_type_priority():
    assert resolve_margin_type({"long-only"}) == "long-only"
    assert resolve_margin_type({"long-only", "spread"}) == "spread"
    assert resolve_margin_type({"long-only", "spread", "naked"}) == "naked"
    assert resolve_margin_type({"cash-secured", "long-only"}) == "cash-secured"
    assert resolve_margin_type(set()) == "long-only"


def test_unpaired_long_future_adds_zero_line():
    legs = [
        _leg("S1", "short", 5800.0, option_type="put", premium=15.0),
        _leg("F1", "long", 5850.0, symbol="ES", leg_kind="future"),
    ]
    res = calculate_margin_requirement(legs, 5850.0)
    assert [(l.description, l.amount) for l in res.breakdown] == [
        ("Naked put SPX 5800", pytest.approx(113500.0)),
        ("Long future ES 5850", 0.0),
    ]
    assert res.margin == pytest.approx(113500.0)
