"""
React builders: plain Vite single-page apps and React Router v7 framework mode.
"""

from ..analyzer.registry import FrameworkId
from ..selector import BuildArtifact
from .base import Builder, BuildContext


class ReactViteBuilder(Builder):
    framework = FrameworkId.REACT_VITE

    def build(self, ctx: BuildContext) -> BuildArtifact:
        self.run_build_script(ctx)
        return self.locate_output(ctx)


class ReactRouterBuilder(Builder):
    # build/server/index.js + build/client/
    framework = FrameworkId.REACT_ROUTER

    def build(self, ctx: BuildContext) -> BuildArtifact:
        self.run_build_script(ctx)
        return self.locate_output(ctx)
