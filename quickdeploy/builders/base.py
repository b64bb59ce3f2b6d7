"""
Base builder interface and common helpers.

A builder owns the external, framework-specific part of the pipeline: adding
the Cloudflare adapter package (one call), running the build and locating the
output directory. It never decides how the output is deployed.
"""

import logging
import shlex
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from ..analyzer.models import DetectionResult
from ..analyzer.packages import add_dev_dependency_command
from ..analyzer.registry import FrameworkId, FrameworkVariant, get_variant
from ..analyzer.walk import is_nonempty_dir
from ..errors import BuildError
from ..process import run_command
from ..selector import BuildArtifact, inspect_artifact

logger = logging.getLogger(__name__)


@dataclass
class BuildContext:
    """Everything a builder needs for one run."""
    root: Path
    detection: DetectionResult
    env: Dict[str, str] = field(default_factory=dict)
    output_dir: Optional[str] = None    # user override; skips candidate search
    dependencies: Dict[str, str] = field(default_factory=dict)

    @property
    def package_manager(self) -> str:
        return self.detection.package_manager


class Builder(ABC):
    """Abstract base class for framework builders."""

    framework: FrameworkId = FrameworkId.UNKNOWN

    def __init__(self):
        self.variant: FrameworkVariant = get_variant(self.framework)

    def configure(self, ctx: BuildContext) -> None:
        """Add the variant's Cloudflare adapter package unless the project already has it."""
        adapter = self.variant.adapter
        if not adapter:
            return
        if adapter in ctx.dependencies:
            logger.info(f"{adapter} already installed")
            return
        logger.info(f"Installing {adapter}...")
        run_command(add_dev_dependency_command(ctx.package_manager, adapter), cwd=ctx.root)
        logger.info(f"✅ {adapter} installed")

    @abstractmethod
    def build(self, ctx: BuildContext) -> BuildArtifact:
        """
        Build the project and describe its output.

        Raises:
            BuildError: If the build fails or leaves no output
        """

    def run_build_script(self, ctx: BuildContext, command: Optional[List[str]] = None) -> None:
        command = command or shlex.split(ctx.detection.build_command)
        if not command:
            return
        logger.info(f"Building {self.variant.name} project ({' '.join(command)})...")
        run_command(command, cwd=ctx.root, env=ctx.env)
        logger.info("Build completed")

    def output_candidates(self, ctx: BuildContext) -> List[str]:
        if ctx.output_dir:
            return [ctx.output_dir]
        return list(self.variant.output_candidates)

    def locate_output(self, ctx: BuildContext) -> BuildArtifact:
        logger.info("Locating build output...")
        candidates = self.output_candidates(ctx)
        for candidate in candidates:
            if is_nonempty_dir(ctx.root / candidate):
                logger.info(f"Using {candidate}/ directory")
                return inspect_artifact(candidate, ctx.root)
        raise BuildError(f"No build output found. Checked: {', '.join(candidates)}",
                         hint="Check the build output above for errors")
