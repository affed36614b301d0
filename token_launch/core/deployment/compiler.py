from __future__ import annotations

from typing import Any

from loguru import logger

from token_launch.core.constants.deployments import (
    ContractCatalogue,
    Generation,
    load_catalogue,
)
from token_launch.core.deployment.models import (
    V4LaunchConfig,
    V31LaunchConfig,
    parse_launch_config,
)
from token_launch.core.deployment.plan import DeploymentPlan
from token_launch.core.deployment.v3 import compile_v3_1
from token_launch.core.deployment.v4 import compile_v4
from token_launch.core.resolver import DeploymentAddressResolver


class DeploymentCompiler:
    """Turns a launch config into a ready-to-sign factory call.

    Every check runs before anything is assembled, so a config either yields a
    complete ``DeploymentPlan`` or raises. Only vanity salt search touches the
    network.
    """

    def __init__(
        self,
        catalogue: ContractCatalogue | None = None,
        resolver: DeploymentAddressResolver | None = None,
    ):
        self.catalogue = catalogue if catalogue is not None else load_catalogue()
        self.resolver = resolver or DeploymentAddressResolver()

    async def compile(
        self,
        config: V4LaunchConfig | V31LaunchConfig | dict[str, Any],
        *,
        requestor_address: str | None = None,
    ) -> DeploymentPlan:
        parsed = parse_launch_config(config)
        schema = self.catalogue.get(parsed.generation, parsed.chain_id)
        logger.debug(
            f"Compiling {parsed.generation} launch of {parsed.symbol} "
            f"against factory {schema.factory}"
        )
        if schema.generation is Generation.V4:
            return await compile_v4(parsed, schema, self.resolver)
        return await compile_v3_1(parsed, schema, self.resolver, requestor_address)
