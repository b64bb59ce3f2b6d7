from ..analyzer.registry import FrameworkId
from ..selector import BuildArtifact
from .base import Builder, BuildContext


class SvelteKitBuilder(Builder):
    """SvelteKit with @sveltejs/adapter-cloudflare; the adapter writes .svelte-kit/cloudflare."""

    framework = FrameworkId.SVELTEKIT

    def build(self, ctx: BuildContext) -> BuildArtifact:
        self.run_build_script(ctx)
        return self.locate_output(ctx)
