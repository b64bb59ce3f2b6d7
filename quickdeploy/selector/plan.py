from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from ..analyzer.registry import FrameworkId


class DeploymentType(str, Enum):
    STATIC = "static"
    SSR = "ssr"
    HYBRID = "hybrid"
    PLATFORM_ADAPTER = "platform-adapter"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class BuildArtifact:
    root: Path                      # project directory
    output_dir: Path                # build output, absolute
    server_entry: Optional[str]     # relative to output_dir
    has_static_index: bool

    @property
    def has_server_entry(self) -> bool:
        return self.server_entry is not None


@dataclass(frozen=True)
class DeploymentStrategy:
    deployment_type: DeploymentType
    framework: FrameworkId
    artifact_dir: Path
    server_entry: Optional[Path]
    asset_dir: Optional[Path]
    compatibility_flags: Tuple[str, ...]
    assets_binding: Optional[str]
    isolation_required: bool

    # Paths relative to artifact_dir that must not be copied into an isolated deploy
    excluded_paths: Tuple[str, ...] = ()
    warnings: List[str] = field(default_factory=list)
    rationale: List[str] = field(default_factory=list)
