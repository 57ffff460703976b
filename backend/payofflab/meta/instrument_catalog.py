from __future__ import annotations

"""Static instrument + stock catalog used by both the engine and the API.

This is reference data only (no market data). Multipliers are dollars per
1.0 point of the underlying, per contract.
"""

import math
from dataclasses import dataclass, replace
from datetime import date
from typing import Literal

AssetClass = Literal["index", "etf", "future", "micro-future", "stock"]


@dataclass(frozen=True)
class Instrument:
    symbol: str
    name: str
    asset_class: AssetClass
    multiplier: float
    tick_size: float
    strike_interval: float
    family: str | None = None


INSTRUMENTS: tuple[Instrument, ...] = (
    # SPX family
    Instrument("SPX", "S&P 500 Index", "index", 100, 0.01, 5, family="SPX"),
    Instrument("SPY", "SPDR S&P 500 ETF", "etf", 100, 0.01, 1, family="SPX"),
    Instrument("XSP", "Mini-SPX Index", "index", 100, 0.01, 1, family="SPX"),
    Instrument("ES", "E-mini S&P 500 Future", "future", 50, 0.25, 5, family="SPX"),
    Instrument("MES", "Micro E-mini S&P 500", "micro-future", 5, 0.25, 5, family="SPX"),
    # NDX family
    Instrument("NDX", "Nasdaq 100 Index", "index", 100, 0.01, 25, family="NDX"),
    Instrument("QQQ", "Invesco QQQ ETF", "etf", 100, 0.01, 1, family="NDX"),
    Instrument("NQ", "E-mini Nasdaq 100 Future", "future", 20, 0.25, 25, family="NDX"),
    Instrument("MNQ", "Micro E-mini Nasdaq 100", "micro-future", 2, 0.25, 25, family="NDX"),
)

_BY_SYMBOL: dict[str, Instrument] = {i.symbol: i for i in INSTRUMENTS}

FAMILIES: tuple[str, ...] = ("SPX", "NDX")

DEFAULT_PRICES: dict[str, float] = {
    "SPX": 5850.0,
    "SPY": 585.0,
    "XSP": 585.0,
    "ES": 5850.0,
    "MES": 5850.0,
    "NDX": 20500.0,
    "QQQ": 505.0,
    "NQ": 20500.0,
    "MNQ": 20500.0,
}

STOCK_DEFAULT_PRICE = 150.0


def get_instrument(symbol: str) -> Instrument | None:
    return _BY_SYMBOL.get(symbol.strip().upper())


def instruments_by_family(family: str) -> list[Instrument]:
    return [i for i in INSTRUMENTS if i.family == family]


def default_price(symbol: str) -> float:
    return DEFAULT_PRICES.get(symbol.strip().upper(), STOCK_DEFAULT_PRICE)


# ----------------------
# Strike helpers
# ----------------------


def strike_interval_for_price(price: float) -> float:
    """Listed-strike spacing for an underlying trading at `price` (CBOE-style tiers)."""
    if price < 25:
        return 0.5
    if price < 200:
        return 1.0
    if price < 500:
        return 2.5
    if price < 1000:
        return 5.0
    if price < 5000:
        return 10.0
    return 25.0


def round_to_strike(price: float, strike_interval: float) -> float:
    if strike_interval <= 0:
        return float(price)
    # Half-up, so 5852.5 on a 5-wide grid lands on 5855 like the UI does.
    return float(math.floor(price / strike_interval + 0.5) * strike_interval)


def nearby_strikes(current_price: float, strike_interval: float, count: int = 10) -> list[float]:
    atm = round_to_strike(current_price, strike_interval)
    strikes = [atm + i * strike_interval for i in range(-count, count + 1)]
    return [s for s in strikes if s > 0]


# ----------------------
# Stocks
# ----------------------


def create_stock(symbol: str, name: str, price: float | None = None) -> Instrument:
    interval = strike_interval_for_price(price) if price is not None else 1.0
    return Instrument(
        symbol=symbol.strip().upper(),
        name=name,
        asset_class="stock",
        multiplier=100,
        tick_size=0.01,
        strike_interval=interval,
    )


POPULAR_STOCKS: tuple[Instrument, ...] = (
    create_stock("AAPL", "Apple Inc."),
    create_stock("TSLA", "Tesla Inc."),
    create_stock("GOOGL", "Alphabet Inc."),
    create_stock("MSFT", "Microsoft Corp."),
    create_stock("AMZN", "Amazon.com Inc."),
    create_stock("NVDA", "NVIDIA Corp."),
    create_stock("META", "Meta Platforms Inc."),
    create_stock("AMD", "Advanced Micro Devices"),
)

STOCK_GROUPS: dict[str, dict[str, object]] = {
    "tech": {
        "name": "Tech Giants",
        "stocks": [
            create_stock("AAPL", "Apple Inc."),
            create_stock("MSFT", "Microsoft Corp."),
            create_stock("GOOGL", "Alphabet Inc."),
            create_stock("META", "Meta Platforms Inc."),
        ],
    },
    "ev": {
        "name": "EV & Auto",
        "stocks": [
            create_stock("TSLA", "Tesla Inc."),
            create_stock("RIVN", "Rivian Automotive"),
            create_stock("F", "Ford Motor Co."),
            create_stock("GM", "General Motors"),
        ],
    },
    "semiconductors": {
        "name": "Semiconductors",
        "stocks": [
            create_stock("NVDA", "NVIDIA Corp."),
            create_stock("AMD", "Advanced Micro Devices"),
            create_stock("INTC", "Intel Corp."),
            create_stock("TSM", "Taiwan Semiconductor"),
        ],
    },
    "finance": {
        "name": "Financials",
        "stocks": [
            create_stock("JPM", "JPMorgan Chase"),
            create_stock("BAC", "Bank of America"),
            create_stock("GS", "Goldman Sachs"),
            create_stock("MS", "Morgan Stanley"),
        ],
    },
}


def _preset_stocks() -> dict[str, Instrument]:
    out: dict[str, Instrument] = {s.symbol: s for s in POPULAR_STOCKS}
    for group in STOCK_GROUPS.values():
        for s in group["stocks"]:  # type: ignore[union-attr]
            out.setdefault(s.symbol, s)
    return out


def search_stocks(query: str) -> list[Instrument]:
    """Match preset stocks by symbol or name (case-insensitive substring)."""
    q = query.strip().lower()
    if not q:
        return []
    return [s for s in POPULAR_STOCKS if q in s.symbol.lower() or q in s.name.lower()]


def resolve_instrument(symbol: str, price: float | None = None) -> Instrument:
    """Look up a built-in instrument or a preset stock.

    A price, when given, re-derives a stock's strike interval from the price tier.
    Raises KeyError for symbols the catalog does not know.
    """
    key = symbol.strip().upper()
    inst = _BY_SYMBOL.get(key)
    if inst is not None:
        return inst
    stock = _preset_stocks().get(key)
    if stock is None:
        raise KeyError(f"unknown instrument symbol: {symbol}")
    if price is not None:
        return replace(stock, strike_interval=strike_interval_for_price(price))
    return stock


# ----------------------
# Futures expiries
# ----------------------

QUARTERLY_MONTH_CODES: tuple[tuple[int, str], ...] = ((3, "H"), (6, "M"), (9, "U"), (12, "Z"))

_MONTH_NAMES = {3: "Mar", 6: "Jun", 9: "Sep", 12: "Dec"}


def _third_friday(year: int, month: int) -> date:
    first = date(year, month, 1)
    offset = (4 - first.weekday()) % 7
    return date(year, month, 1 + offset + 14)


def futures_expiries(today: date | None = None, count: int = 4) -> list[dict[str, str]]:
    """Next `count` quarterly equity-index futures contracts.

    Codes follow exchange notation without the root (e.g. "Z6" for Dec 2026);
    a contract stays listed through its third-Friday expiry.
    """
    today = today or date.today()
    out: list[dict[str, str]] = []
    year = today.year
    while len(out) < count:
        for month, code in QUARTERLY_MONTH_CODES:
            if len(out) >= count:
                break
            expiry = _third_friday(year, month)
            if expiry < today:
                continue
            out.append(
                {
                    "code": f"{code}{year % 10}",
                    "label": f"{_MONTH_NAMES[month]} {year}",
                    "expiry": expiry.isoformat(),
                }
            )
        year += 1
    return out


def instrument_to_dict(inst: Instrument) -> dict[str, object]:
    return {
        "symbol": inst.symbol,
        "name": inst.name,
        "family": inst.family,
        "asset_class": inst.asset_class,
        "multiplier": inst.multiplier,
        "tick_size": inst.tick_size,
        "strike_interval": inst.strike_interval,
    }
