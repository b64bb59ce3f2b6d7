"""
Read-only snapshot of a project directory.

Everything the detector needs is gathered here once so that scoring never touches
the filesystem twice. Probing must never create, modify or delete anything.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List

from ..errors import ManifestMalformed
from .models import ProjectProbe
from .registry import list_variants
from .walk import exists_any, read_json

logger = logging.getLogger(__name__)

MANIFEST_NAME = "package.json"

MONOREPO_MARKERS = ["pnpm-workspace.yaml", "turbo.json", "lerna.json"]

LOCK_FILES = ["pnpm-lock.yaml", "yarn.lock", "bun.lockb", "bun.lock", "package-lock.json"]


def _known_paths() -> List[str]:
    paths: List[str] = []
    for variant in list_variants():
        for name in variant.config_files + variant.static_markers:
            if name not in paths:
                paths.append(name)
    return paths


def _names(mapping) -> Dict[str, str]:
    if not isinstance(mapping, dict):
        return {}
    return {str(k): str(v) for k, v in mapping.items()}


def probe_project(root: str | Path) -> ProjectProbe:
    """
    Build a ProjectProbe for root.

    A missing package.json is not an error (static sites have none); an
    unreadable or unparsable one is.

    Raises:
        ManifestMalformed: If package.json exists but cannot be read or parsed
    """
    root_path = Path(root).resolve()
    manifest = root_path / MANIFEST_NAME

    dependencies: Dict[str, str] = {}
    scripts: Dict[str, str] = {}
    name = root_path.name

    if manifest.is_file():
        try:
            pkg = read_json(manifest)
        except (OSError, ValueError) as e:
            raise ManifestMalformed(str(manifest), str(e)) from e
        dependencies = {**_names(pkg.get("dependencies")), **_names(pkg.get("devDependencies"))}
        scripts = _names(pkg.get("scripts"))
        if isinstance(pkg.get("name"), str) and pkg["name"].strip():
            name = pkg["name"].strip()
        manifest_path = manifest
    else:
        manifest_path = None
        logger.debug(f"No {MANIFEST_NAME} in {root_path}")

    found = exists_any(root_path, _known_paths())
    locks = exists_any(root_path, LOCK_FILES)
    markers = exists_any(root_path, MONOREPO_MARKERS)

    return ProjectProbe(
        root=root_path,
        manifest_path=manifest_path,
        project_name=name,
        dependencies=dependencies,
        scripts=scripts,
        config_files=tuple(p for p, ok in found.items() if ok),
        lock_files=tuple(p for p, ok in locks.items() if ok),
        monorepo_markers=tuple(p for p, ok in markers.items() if ok),
    )
