from __future__ import annotations

from typing import Any

from web3 import Web3
from web3.exceptions import Web3Exception

from token_launch.core.deployment.plan import DeploymentPlan
from token_launch.core.errors import ValidationError
from token_launch.core.utils.addresses import checksum

# Offline instance: only used for ABI encoding
_WEB3 = Web3()


def encode_plan_calldata(plan: DeploymentPlan) -> str:
    contract = _WEB3.eth.contract(address=checksum(plan.factory, "factory"), abi=plan.abi)
    try:
        return contract.encode_abi(plan.function_name, list(plan.args))
    except (ValueError, TypeError, Web3Exception) as exc:
        raise ValidationError(
            "plan", f"Failed to encode {plan.function_name}: {exc}"
        ) from exc


def build_deploy_transaction(plan: DeploymentPlan, from_address: str) -> dict[str, Any]:
    """Unsigned transaction for the factory call; gas and nonce are left to the sender."""
    return {
        "chainId": int(plan.chain_id),
        "from": checksum(from_address, "from_address"),
        "to": checksum(plan.factory, "factory"),
        "data": encode_plan_calldata(plan),
        "value": int(plan.value),
    }
