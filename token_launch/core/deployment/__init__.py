from token_launch.core.deployment.compiler import DeploymentCompiler
from token_launch.core.deployment.models import (
    LaunchConfig,
    V4LaunchConfig,
    V31LaunchConfig,
    parse_launch_config,
)
from token_launch.core.deployment.plan import DeploymentPlan

__all__ = [
    "DeploymentCompiler",
    "DeploymentPlan",
    "LaunchConfig",
    "V31LaunchConfig",
    "V4LaunchConfig",
    "parse_launch_config",
]
