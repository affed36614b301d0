"""Basis-point partition checks shared by positions, rewards and extensions.

The sum check only looks at a list of integer shares and a policy, so the same
code path validates liquidity positions, reward splits and extension carve-outs.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from token_launch.core.constants import BPS_DENOMINATOR
from token_launch.core.constants.base import DEFAULT_TICK_SPACING, MAX_TICK, MIN_TICK
from token_launch.core.errors import AllocationSumError, ValidationError
from token_launch.core.types import Position, SplitEntry
from token_launch.core.utils.addresses import checksum, is_zero_address


class SumPolicy(str, Enum):
    EXACT = "exact"
    AT_MOST = "at_most"


@dataclass(frozen=True)
class BpsViolation:
    """Why a share list was rejected.

    ``index`` is None when no single entry is to blame (a set-level shortfall).
    """

    index: int | None
    expected: int
    actual: int
    message: str | None = None

    @property
    def delta(self) -> int:
        return self.actual - self.expected


def is_valid_bps(value: object) -> bool:
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and 0 <= value <= BPS_DENOMINATOR
    )


def percentage_to_bps(percentage: float) -> int:
    bps = round(float(percentage) * 100)
    if not is_valid_bps(bps):
        raise ValidationError("percentage", f"{percentage}% is outside 0-100")
    return bps


def bps_to_percentage(bps: int) -> float:
    return bps / 100


def find_bps_violation(
    shares: Sequence[int],
    *,
    policy: SumPolicy = SumPolicy.EXACT,
    total: int = BPS_DENOMINATOR,
) -> BpsViolation | None:
    running = 0
    for i, share in enumerate(shares):
        if not is_valid_bps(share):
            return BpsViolation(
                index=i,
                expected=total,
                actual=running,
                message=f"entry {i}: share {share!r} is not an integer in [0, {BPS_DENOMINATOR}]",
            )
        running += share
        if running > total:
            # blame the entry that pushed the running sum over the limit
            rest = sum(s for s in shares[i + 1 :] if is_valid_bps(s))
            return BpsViolation(index=i, expected=total, actual=running + rest)

    if policy is SumPolicy.EXACT and running != total:
        return BpsViolation(index=None, expected=total, actual=running)
    return None


def check_bps_shares(
    shares: Sequence[int],
    *,
    policy: SumPolicy = SumPolicy.EXACT,
    total: int = BPS_DENOMINATOR,
    field: str | None = None,
) -> None:
    violation = find_bps_violation(shares, policy=policy, total=total)
    if violation is None:
        return
    raise AllocationSumError(
        field,
        expected=violation.expected,
        actual=violation.actual,
        index=violation.index,
        message=violation.message,
    )


def validate_position_set(
    positions: Sequence[Position],
    *,
    tick_spacing: int = DEFAULT_TICK_SPACING,
    field: str = "positions",
) -> None:
    if not positions:
        raise ValidationError(field, "at least one position is required")

    for i, pos in enumerate(positions):
        where = f"{field}.{i}"
        if pos.tick_lower >= pos.tick_upper:
            raise ValidationError(
                where,
                f"tick_lower {pos.tick_lower} must be below tick_upper {pos.tick_upper}",
            )
        if pos.tick_lower % tick_spacing or pos.tick_upper % tick_spacing:
            raise ValidationError(
                where, f"ticks must be multiples of tick spacing {tick_spacing}"
            )
        if pos.tick_lower < MIN_TICK or pos.tick_upper > MAX_TICK:
            raise ValidationError(where, "ticks out of range")
        if pos.position_bps == 0:
            raise ValidationError(where, "position_bps must be greater than 0")

    check_bps_shares([p.position_bps for p in positions], field=field)


def validate_split_set(
    entries: Sequence[SplitEntry],
    *,
    policy: SumPolicy = SumPolicy.EXACT,
    total: int = BPS_DENOMINATOR,
    allow_duplicates: bool = False,
    field: str = "rewards",
) -> list[SplitEntry]:
    """Validate a reward or carve-out split and return it with checksummed addresses."""
    if not entries:
        raise ValidationError(field, "at least one entry is required")

    out: list[SplitEntry] = []
    seen: set[tuple[str, str, int]] = set()
    for i, entry in enumerate(entries):
        where = f"{field}.{i}"
        recipient = checksum(entry.recipient, f"{where}.recipient")
        admin = checksum(entry.admin, f"{where}.admin")
        if is_zero_address(recipient):
            raise ValidationError(f"{where}.recipient", "recipient cannot be the zero address")
        if is_zero_address(admin):
            raise ValidationError(f"{where}.admin", "admin cannot be the zero address")

        key = (recipient, admin, int(entry.preference))
        if key in seen and not allow_duplicates:
            raise ValidationError(
                where, f"duplicate entry for recipient {recipient} and admin {admin}"
            )
        seen.add(key)
        out.append(
            SplitEntry(
                recipient=recipient,
                admin=admin,
                bps=entry.bps,
                preference=entry.preference,
            )
        )

    check_bps_shares([e.bps for e in out], policy=policy, total=total, field=field)
    return out
