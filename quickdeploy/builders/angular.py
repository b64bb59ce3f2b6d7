from typing import List

from ..analyzer.registry import FrameworkId
from ..analyzer.walk import list_subdirs
from ..selector import BuildArtifact
from .base import Builder, BuildContext


class AngularBuilder(Builder):
    """Angular SSR; the CLI writes dist/<project>/server and dist/<project>/browser."""

    framework = FrameworkId.ANGULAR

    def output_candidates(self, ctx: BuildContext) -> List[str]:
        if ctx.output_dir:
            return [ctx.output_dir]
        projects = [f"dist/{name}" for name in list_subdirs(ctx.root / "dist")]
        return projects + list(self.variant.output_candidates)

    def build(self, ctx: BuildContext) -> BuildArtifact:
        self.run_build_script(ctx)
        return self.locate_output(ctx)
