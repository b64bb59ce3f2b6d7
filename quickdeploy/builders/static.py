import logging

from ..analyzer.registry import FrameworkId
from ..errors import BuildError
from ..selector import BuildArtifact, inspect_artifact
from .base import Builder, BuildContext

logger = logging.getLogger(__name__)


class StaticBuilder(Builder):
    """Plain HTML site: nothing to install or build."""

    framework = FrameworkId.STATIC

    def configure(self, ctx: BuildContext) -> None:
        return None

    def build(self, ctx: BuildContext) -> BuildArtifact:
        output = ctx.output_dir or ctx.detection.output_dir or "."
        if not (ctx.root / output).is_dir():
            raise BuildError(f"Static output directory not found: {output}")
        logger.info(f"No build needed, deploying {output}/")
        return inspect_artifact(output, ctx.root)
