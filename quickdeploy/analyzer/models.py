from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple

from .registry import FrameworkId


@dataclass(frozen=True)
class ProjectProbe:
    root: Path
    manifest_path: Optional[Path]
    project_name: str

    # Merged dependencies + devDependencies, name -> version
    dependencies: Dict[str, str] = field(default_factory=dict)
    scripts: Dict[str, str] = field(default_factory=dict)

    # Relative paths that exist under root
    config_files: Tuple[str, ...] = ()
    lock_files: Tuple[str, ...] = ()
    monorepo_markers: Tuple[str, ...] = ()

    @property
    def has_manifest(self) -> bool:
        return self.manifest_path is not None

    @property
    def is_monorepo_root(self) -> bool:
        return bool(self.monorepo_markers)

    def has_dependency(self, name: str) -> bool:
        return name in self.dependencies

    def has_file(self, relative: str) -> bool:
        return relative in self.config_files


@dataclass(frozen=True)
class DetectionResult:
    framework: FrameworkId
    score: int
    signals: Tuple[str, ...]
    root: Path
    output_dir: Optional[str]
    package_manager: str
    build_command: str
    dev_command: str
    project_name: str

    # Every scored variant and its score, for diagnostics
    scores: Tuple[Tuple[str, int], ...] = ()
