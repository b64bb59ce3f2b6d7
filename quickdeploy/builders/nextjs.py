"""
Next.js builder using the OpenNext Cloudflare adapter.
"""

import logging

from ..analyzer.packages import exec_command
from ..analyzer.registry import FrameworkId
from ..process import run_command
from ..selector import BuildArtifact
from .base import Builder, BuildContext

logger = logging.getLogger(__name__)


class NextJSBuilder(Builder):
    framework = FrameworkId.NEXTJS

    def configure(self, ctx: BuildContext) -> None:
        adapter = self.variant.adapter
        if adapter in ctx.dependencies:
            logger.info(f"{adapter} already installed")
            return
        logger.info("Installing OpenNext Cloudflare adapter...")
        # runtime dependency, not a dev dependency
        if ctx.package_manager == "npm":
            command = ["npm", "install", adapter]
        else:
            command = [ctx.package_manager, "add", adapter]
        run_command(command, cwd=ctx.root)
        logger.info("✅ OpenNext Cloudflare adapter installed")

    def build(self, ctx: BuildContext) -> BuildArtifact:
        logger.info("Building Next.js project with OpenNext...")
        self.run_build_script(ctx, exec_command(ctx.package_manager, "opennextjs-cloudflare", "build"))
        return self.locate_output(ctx)
