"""Market cap <-> tick conversions for the launch pool.

The new token is always priced as token0 against the paired token, so a tick is
``floor(log_1.0001(price))`` with ``price`` expressed in paired base units per
token base unit. Ticks are floored onto the spacing grid, which only ever moves
the starting price below the requested market cap.

Two variants are kept on purpose:

- ``tick_from_market_cap_legacy``: WETH-only, no decimal handling. Pools created
  by older factory generations were initialised this way.
- ``tick_from_market_cap``: decimal-aware, used for any paired token.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from token_launch.core.constants import DEFAULT_SUPPLY, TOKEN_DECIMALS
from token_launch.core.constants.base import (
    DEFAULT_TICK_SPACING,
    MARKET_CAP_PRICE_FACTOR,
    MAX_TICK,
    MIN_TICK,
    TICK_BASE,
)
from token_launch.core.errors import InvalidValuation, ValidationError
from token_launch.core.types import Position


@dataclass(frozen=True)
class TickResult:
    tick: int
    tick_spacing: int
    price: float
    paired_decimals: int
    adjustment_factor: float = 1.0


def _check_valuation(value: float, field: str) -> float:
    if isinstance(value, bool):
        raise InvalidValuation(value, field)
    try:
        v = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidValuation(value, field) from exc
    if not math.isfinite(v) or v <= 0:
        raise InvalidValuation(value, field)
    return v


def _check_decimals(decimals: int, field: str) -> int:
    if isinstance(decimals, bool) or int(decimals) != decimals or decimals < 0:
        raise ValidationError(field, f"decimals must be a non-negative integer, got {decimals!r}")
    return int(decimals)


def price_to_tick(price: float) -> int:
    """Convert price (token1/token0) to tick (rounds down)."""
    if price <= 0:
        raise InvalidValuation(price, "price")
    return math.floor(math.log(price) / math.log(TICK_BASE))


def tick_to_price(tick: int) -> float:
    return TICK_BASE**tick


def round_tick_down(tick: int, spacing: int) -> int:
    """Round tick down (toward negative infinity) to nearest multiple of spacing."""
    if spacing <= 0:
        raise ValidationError("tick_spacing", f"tick spacing must be positive, got {spacing}")
    # Python's // floors toward -inf, which is exactly what we want
    return (tick // spacing) * spacing


def check_tick_bounds(tick: int, field: str = "tick") -> int:
    if tick < MIN_TICK or tick > MAX_TICK:
        raise ValidationError(field, f"tick {tick} out of range [{MIN_TICK}, {MAX_TICK}]")
    return tick


def decimal_adjustment_factor(token_decimals: int, paired_decimals: int) -> float:
    """Factor to divide a same-decimals price by.

    Pairing an 18-decimal token with an 8-decimal token gives 10**10.
    """
    if token_decimals == paired_decimals:
        return 1
    return 10 ** (token_decimals - paired_decimals)


def market_cap_to_price(
    market_cap: float,
    *,
    token_decimals: int = TOKEN_DECIMALS,
    paired_decimals: int | None = None,
    supply: int = DEFAULT_SUPPLY,
) -> float:
    """Price in paired base units per token base unit for a given market cap.

    ``supply`` is the total supply in token base units.
    """
    mc = _check_valuation(market_cap, "market_cap")
    token_decimals = _check_decimals(token_decimals, "token_decimals")
    if paired_decimals is None:
        paired_decimals = token_decimals
    paired_decimals = _check_decimals(paired_decimals, "paired_decimals")
    if supply <= 0:
        raise ValidationError("supply", "supply must be positive")

    per_unit = 10**token_decimals / supply
    return mc * per_unit / decimal_adjustment_factor(token_decimals, paired_decimals)


def tick_from_market_cap_legacy(market_cap: float) -> TickResult:
    price = _check_valuation(market_cap, "market_cap") * MARKET_CAP_PRICE_FACTOR
    tick = round_tick_down(price_to_tick(price), DEFAULT_TICK_SPACING)
    return TickResult(
        tick=check_tick_bounds(tick, "market_cap"),
        tick_spacing=DEFAULT_TICK_SPACING,
        price=price,
        paired_decimals=TOKEN_DECIMALS,
    )


def tick_from_market_cap(
    market_cap: float,
    *,
    token_decimals: int = TOKEN_DECIMALS,
    paired_decimals: int | None = None,
    tick_spacing: int = DEFAULT_TICK_SPACING,
    supply: int = DEFAULT_SUPPLY,
) -> TickResult:
    if paired_decimals is None:
        paired_decimals = token_decimals
    price = market_cap_to_price(
        market_cap,
        token_decimals=token_decimals,
        paired_decimals=paired_decimals,
        supply=supply,
    )
    tick = round_tick_down(price_to_tick(price), tick_spacing)
    return TickResult(
        tick=check_tick_bounds(tick, "market_cap"),
        tick_spacing=tick_spacing,
        price=price,
        paired_decimals=int(paired_decimals),
        adjustment_factor=decimal_adjustment_factor(
            int(token_decimals), int(paired_decimals)
        ),
    )


def positions_from_market_cap_ranges(
    ranges: list[tuple[float, float, int]],
    *,
    token_decimals: int = TOKEN_DECIMALS,
    paired_decimals: int | None = None,
    tick_spacing: int = DEFAULT_TICK_SPACING,
    supply: int = DEFAULT_SUPPLY,
) -> list[Position]:
    """(start_market_cap, end_market_cap, position_bps) ranges -> positions.

    Both bounds are floored onto the grid so a range starting at the launch
    market cap lands exactly on the starting tick.
    """
    if not ranges:
        raise ValidationError("ranges", "at least one market cap range is required")

    positions: list[Position] = []
    for i, (start, end, bps) in enumerate(ranges):
        start_v = _check_valuation(start, f"ranges.{i}.start")
        end_v = _check_valuation(end, f"ranges.{i}.end")
        if start_v >= end_v:
            raise ValidationError(
                f"ranges.{i}", f"start market cap {start} must be below end {end}"
            )
        lower = tick_from_market_cap(
            start_v,
            token_decimals=token_decimals,
            paired_decimals=paired_decimals,
            tick_spacing=tick_spacing,
            supply=supply,
        ).tick
        upper = tick_from_market_cap(
            end_v,
            token_decimals=token_decimals,
            paired_decimals=paired_decimals,
            tick_spacing=tick_spacing,
            supply=supply,
        ).tick
        if upper <= lower:
            upper = lower + tick_spacing
        positions.append(Position(tick_lower=lower, tick_upper=upper, position_bps=int(bps)))
    return positions


def ticks_to_market_cap(
    tick_lower: int,
    tick_upper: int,
    *,
    token_decimals: int = TOKEN_DECIMALS,
    paired_decimals: int | None = None,
    supply: int = DEFAULT_SUPPLY,
) -> tuple[float, float]:
    if paired_decimals is None:
        paired_decimals = token_decimals
    factor = decimal_adjustment_factor(token_decimals, paired_decimals)
    supply_tokens = supply / 10**token_decimals
    lo, hi = sorted((tick_lower, tick_upper))
    return (
        tick_to_price(lo) * factor * supply_tokens,
        tick_to_price(hi) * factor * supply_tokens,
    )
