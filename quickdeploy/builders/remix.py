from ..analyzer.registry import FrameworkId
from ..selector import BuildArtifact
from .base import Builder, BuildContext


class RemixBuilder(Builder):
    framework = FrameworkId.REMIX

    def build(self, ctx: BuildContext) -> BuildArtifact:
        self.run_build_script(ctx)
        return self.locate_output(ctx)
