"""
Astro builder.

`astro check` runs as part of most Astro build scripts and fails on content
collection typing errors that do not affect the output, so those failures are
retried once with `astro build` directly.
"""

import logging

from ..analyzer.packages import exec_command
from ..analyzer.registry import FrameworkId
from ..errors import CommandError
from ..process import run_command
from ..selector import BuildArtifact
from .base import Builder, BuildContext

logger = logging.getLogger(__name__)

CONTENT_COLLECTION_ERRORS = [
    "No overload matches this call",
    "does not satisfy the constraint",
    "getCollection",
    "CollectionEntry",
    "ts(2769)",
    "ts(2339)",
    "ts(2344)",
    "ts(2322)",
    "does not exist or is empty",
    "Cannot read properties of undefined (reading 'data')",
]


def is_content_collection_error(output: str) -> bool:
    return any(pattern in output for pattern in CONTENT_COLLECTION_ERRORS)


class AstroBuilder(Builder):
    framework = FrameworkId.ASTRO

    def build(self, ctx: BuildContext) -> BuildArtifact:
        try:
            self.run_build_script(ctx)
        except CommandError as e:
            if not is_content_collection_error(e.output):
                raise
            logger.warning("Content collection type errors detected, building without type check...")
            run_command(exec_command(ctx.package_manager, "astro", "build"), cwd=ctx.root, env=ctx.env)
            logger.info("✅ Build succeeded without type checking")
        return self.locate_output(ctx)
