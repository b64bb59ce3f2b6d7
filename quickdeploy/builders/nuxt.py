from ..analyzer.registry import FrameworkId
from ..selector import BuildArtifact
from .base import Builder, BuildContext


class NuxtBuilder(Builder):
    """Nuxt 3; Nitro writes server/ and public/ under .output."""

    framework = FrameworkId.NUXT

    def build(self, ctx: BuildContext) -> BuildArtifact:
        self.run_build_script(ctx)
        return self.locate_output(ctx)
