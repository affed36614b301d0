"""Plain value types shared by the launch planning modules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum


class RewardToken(IntEnum):
    """Which side of the pool a reward recipient is paid in.

    Values are the locker's on-chain ``FeeIn`` enum.
    """

    BOTH = 0
    PAIRED = 1
    TOKEN = 2


class FeeModule(str, Enum):
    STATIC = "static"
    DYNAMIC = "dynamic"


@dataclass(frozen=True)
class Position:
    """Liquidity range [tick_lower, tick_upper) holding ``position_bps`` of supply."""

    tick_lower: int
    tick_upper: int
    position_bps: int


@dataclass(frozen=True)
class SplitEntry:
    recipient: str
    admin: str
    bps: int
    preference: RewardToken = RewardToken.BOTH


@dataclass(frozen=True)
class ExtensionAllocation:
    """One extension carve-out in the encoded deployment call."""

    name: str
    extension: str
    bps: int
    msg_value: int
    data: bytes

    def as_abi_tuple(self) -> tuple:
        return (self.extension, int(self.msg_value), int(self.bps), bytes(self.data))
