from __future__ import annotations

import pytest

from token_launch.core.errors import AllocationSumError, InvalidAddress, ValidationError
from token_launch.core.types import Position, RewardToken, SplitEntry
from token_launch.core.utils.allocation import (
    SumPolicy,
    bps_to_percentage,
    check_bps_shares,
    find_bps_violation,
    is_valid_bps,
    percentage_to_bps,
    validate_position_set,
    validate_split_set,
)

ALICE = "0x1111111111111111111111111111111111111111"
BOB = "0x2222222222222222222222222222222222222222"
CAROL = "0x3333333333333333333333333333333333333333"


def test_exact_partition_passes():
    check_bps_shares([5000, 3000, 2000])
    assert find_bps_violation([5000, 3000, 2000]) is None


def test_shortfall_of_one_bps():
    with pytest.raises(AllocationSumError) as exc_info:
        check_bps_shares([5000, 3000, 1999], field="positions")
    err = exc_info.value
    assert err.shortfall == 1
    assert err.overshoot == 0
    assert err.delta == -1
    assert err.index is None
    assert err.expected == 10000
    assert err.actual == 9999
    assert err.field == "positions"
    assert "1 bps short" in str(err)


def test_overshoot_blames_entry():
    violation = find_bps_violation([6000, 3000, 2000])
    assert violation is not None
    assert violation.index == 2
    assert violation.actual == 11000
    assert violation.delta == 1000


def test_at_most_allows_residual():
    check_bps_shares([2000, 3000], policy=SumPolicy.AT_MOST, total=9000)
    check_bps_shares([], policy=SumPolicy.AT_MOST, total=9000)


def test_at_most_rejects_over_cap():
    with pytest.raises(AllocationSumError) as exc_info:
        check_bps_shares([5000, 4500], policy=SumPolicy.AT_MOST, total=9000)
    assert exc_info.value.overshoot == 500
    assert exc_info.value.index == 1


def test_invalid_share_rejected():
    violation = find_bps_violation([5000, -1, 5001])
    assert violation is not None
    assert violation.index == 1
    with pytest.raises(AllocationSumError, match="entry 1"):
        check_bps_shares([5000, 10001])


def test_bps_helpers():
    assert is_valid_bps(0)
    assert is_valid_bps(10000)
    assert not is_valid_bps(10001)
    assert not is_valid_bps(1.5)
    assert not is_valid_bps(True)
    assert percentage_to_bps(12.5) == 1250
    assert bps_to_percentage(1250) == 12.5
    with pytest.raises(ValidationError):
        percentage_to_bps(101)


class TestPositionSet:
    def test_valid(self):
        validate_position_set(
            [
                Position(-230400, -120000, 5000),
                Position(-230400, -200000, 3000),
                Position(-200000, -120000, 2000),
            ]
        )

    def test_empty(self):
        with pytest.raises(ValidationError):
            validate_position_set([])

    def test_inverted_range(self):
        with pytest.raises(ValidationError, match=r"positions\.0"):
            validate_position_set([Position(-120000, -230400, 10000)])

    def test_misaligned(self):
        with pytest.raises(ValidationError, match="tick spacing"):
            validate_position_set([Position(-230401, -120000, 10000)])

    def test_zero_bps(self):
        with pytest.raises(ValidationError, match=r"positions\.1"):
            validate_position_set(
                [Position(-230400, -120000, 10000), Position(-230400, -120000, 0)]
            )

    def test_sum(self):
        with pytest.raises(AllocationSumError):
            validate_position_set(
                [Position(-230400, -120000, 5000), Position(-230400, -120000, 4999)]
            )


class TestSplitSet:
    def test_checksums_addresses(self):
        out = validate_split_set(
            [SplitEntry(ALICE, ALICE, 6000), SplitEntry(BOB, CAROL, 4000)]
        )
        assert [e.recipient for e in out] == [ALICE, BOB]
        assert out[1].admin == CAROL

    def test_duplicate_triplet_rejected(self):
        with pytest.raises(ValidationError, match="duplicate"):
            validate_split_set(
                [SplitEntry(ALICE, BOB, 5000), SplitEntry(ALICE.lower(), BOB, 5000)]
            )

    def test_duplicate_allowed_when_schema_permits(self):
        out = validate_split_set(
            [SplitEntry(ALICE, BOB, 5000), SplitEntry(ALICE, BOB, 5000)],
            allow_duplicates=True,
        )
        assert len(out) == 2

    def test_different_preference_is_not_duplicate(self):
        validate_split_set(
            [
                SplitEntry(ALICE, BOB, 5000, RewardToken.PAIRED),
                SplitEntry(ALICE, BOB, 5000, RewardToken.TOKEN),
            ]
        )

    def test_bad_address(self):
        with pytest.raises(InvalidAddress, match=r"rewards\.0\.recipient"):
            validate_split_set([SplitEntry("0x1234", ALICE, 10000)])

    def test_zero_admin(self):
        with pytest.raises(ValidationError, match="zero address"):
            validate_split_set(
                [SplitEntry(ALICE, "0x0000000000000000000000000000000000000000", 10000)]
            )

    def test_sum_must_be_exact(self):
        with pytest.raises(AllocationSumError):
            validate_split_set([SplitEntry(ALICE, ALICE, 9000)])
