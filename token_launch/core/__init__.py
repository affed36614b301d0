from token_launch.core.deployment import DeploymentCompiler, DeploymentPlan
from token_launch.core.errors import LaunchError

__all__ = [
    "DeploymentCompiler",
    "DeploymentPlan",
    "LaunchError",
]
