__version__ = "0.1.0"

from token_launch.core import (
    DeploymentCompiler,
    DeploymentPlan,
    LaunchError,
)

__all__ = [
    "__version__",
    "DeploymentCompiler",
    "DeploymentPlan",
    "LaunchError",
]
