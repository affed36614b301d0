from __future__ import annotations

from decimal import Decimal

import pydantic
import pytest

from token_launch.core.constants.base import DEFAULT_TICK_SPACING, DEFAULT_VANITY_SUFFIX
from token_launch.core.deployment.models import (
    DynamicFeeSpec,
    StaticFeeSpec,
    V4LaunchConfig,
    V31LaunchConfig,
    parse_launch_config,
)
from token_launch.core.errors import ValidationError

ADMIN = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


def test_dispatches_on_generation():
    v4 = parse_launch_config(
        {"generation": "v4", "name": "A", "symbol": "A", "tokenAdmin": ADMIN}
    )
    legacy = parse_launch_config({"generation": "v3_1", "name": "B", "symbol": "B"})
    assert isinstance(v4, V4LaunchConfig)
    assert isinstance(legacy, V31LaunchConfig)


def test_defaults():
    cfg = parse_launch_config(
        {"generation": "v4", "name": "A", "symbol": "A", "tokenAdmin": ADMIN}
    )
    assert cfg.chain_id == 8453
    assert cfg.vanity is False
    assert cfg.vanity_suffix == DEFAULT_VANITY_SUFFIX
    assert cfg.pool.tick_spacing == DEFAULT_TICK_SPACING
    assert cfg.fees is None

    legacy = parse_launch_config({"generation": "v3_1", "name": "B", "symbol": "B"})
    assert legacy.rewards.creator_reward == 40
    assert legacy.pool.initial_market_cap == 10
    assert legacy.dev_buy.eth_amount == Decimal(0)


def test_parsed_models_pass_through():
    cfg = V4LaunchConfig(name="A", symbol="A", token_admin=ADMIN)
    assert parse_launch_config(cfg) is cfg


def test_fee_union_is_tagged():
    cfg = parse_launch_config(
        {
            "generation": "v4",
            "name": "A",
            "symbol": "A",
            "tokenAdmin": ADMIN,
            "fees": {"type": "static", "feeBps": 100},
        }
    )
    assert isinstance(cfg.fees, StaticFeeSpec)

    cfg = parse_launch_config(
        {
            "generation": "v4",
            "name": "A",
            "symbol": "A",
            "tokenAdmin": ADMIN,
            "fees": {
                "type": "dynamic",
                "baseFeeBps": 100,
                "maxFeeBps": 500,
                "decayBps": 7500,
                "referenceWindowSeconds": 30,
                "resetWindowSeconds": 120,
                "resetThresholdBps": 200,
                "controlNumerator": 500_000_000,
            },
        }
    )
    assert isinstance(cfg.fees, DynamicFeeSpec)


@pytest.mark.parametrize(
    ("config", "field"),
    [
        ({"name": "A", "symbol": "A"}, "generation"),
        ({"generation": "v4", "symbol": "A", "tokenAdmin": ADMIN}, "name"),
        ({"generation": "v4", "name": "A", "symbol": "A"}, "token_admin"),
        (
            {
                "generation": "v4",
                "name": "A",
                "symbol": "A",
                "tokenAdmin": ADMIN,
                "fees": {"type": "static", "feeBps": 5000},
            },
            "fees.static.fee_bps",
        ),
        (
            {
                "generation": "v3_1",
                "name": "A",
                "symbol": "A",
                "rewards": {"creatorReward": 101},
            },
            "rewards.creator_reward",
        ),
    ],
)
def test_errors_carry_field_path(config, field):
    with pytest.raises(ValidationError) as exc:
        parse_launch_config(config)
    assert exc.value.field == field


def test_frozen():
    cfg = V4LaunchConfig(name="A", symbol="A", token_admin=ADMIN)
    with pytest.raises(pydantic.ValidationError):
        cfg.name = "B"
