from .plan import BuildArtifact, DeploymentStrategy, DeploymentType
from .select import inspect_artifact, resolve_strategy

__all__ = [
    "BuildArtifact",
    "DeploymentStrategy",
    "DeploymentType",
    "inspect_artifact",
    "resolve_strategy",
]
