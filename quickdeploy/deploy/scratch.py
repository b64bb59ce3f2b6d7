"""
Scratch directories for isolated deployments.

An isolated deploy runs wrangler from a fresh, empty directory holding only the
copied artifact and a generated manifest, so config files in the project root
cannot conflict with it.
"""

import logging
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from ..errors import DeployError
from ..selector import DeploymentStrategy

logger = logging.getLogger(__name__)

STAGED_ARTIFACT_DIR = "dist"

# Skipped at any depth
STAGING_IGNORED = ("node_modules", ".git")


@contextmanager
def scratch_directory(prefix: str = "quick-deploy-") -> Iterator[Path]:
    """Create an empty directory and remove it on every exit path."""
    path = Path(tempfile.mkdtemp(prefix=prefix))
    logger.debug(f"Created scratch directory {path}")
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)
        logger.debug(f"Removed scratch directory {path}")


def stage_artifact(source: Path, dest: Path, excluded: Iterable[str] = ()) -> List[str]:
    """
    Copy the contents of source into dest, skipping excluded top-level entries
    and STAGING_IGNORED directories.

    Returns:
        Names of the top-level entries that were copied

    Raises:
        DeployError: If any entry cannot be copied
    """
    skip = {e.strip("/") for e in excluded} | set(STAGING_IGNORED)
    ignore = shutil.ignore_patterns(*STAGING_IGNORED)
    copied: List[str] = []
    for entry in sorted(source.iterdir()):
        if entry.name in skip:
            logger.debug(f"Skipping {entry.name}")
            continue
        target = dest / entry.name
        try:
            if entry.is_dir():
                shutil.copytree(entry, target, ignore=ignore)
            else:
                shutil.copy2(entry, target)
        except (OSError, shutil.Error) as e:
            raise DeployError(f"Could not stage {entry.name} for deployment: {e}",
                              hint=f"Check the permissions of {source}") from e
        copied.append(entry.name)
    return copied


def rebase_strategy(strategy: DeploymentStrategy, new_artifact_dir: Path) -> DeploymentStrategy:
    """Return strategy with every path moved from its artifact_dir to new_artifact_dir."""
    old = strategy.artifact_dir

    def move(path: Optional[Path]) -> Optional[Path]:
        if path is None:
            return None
        return new_artifact_dir / path.relative_to(old)

    return replace(
        strategy,
        artifact_dir=new_artifact_dir,
        server_entry=move(strategy.server_entry),
        asset_dir=move(strategy.asset_dir),
    )
