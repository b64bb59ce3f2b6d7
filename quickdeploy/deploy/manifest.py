"""
Generation of the wrangler.json manifest for a resolved strategy.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..selector import DeploymentStrategy

MANIFEST_NAME = "wrangler.json"

EXISTING_MANIFESTS = ["wrangler.json", "wrangler.jsonc", "wrangler.toml"]


def _rel(path: Path, base: Path) -> str:
    rel = os.path.relpath(path, base)
    return rel.replace(os.sep, "/")


def build_manifest(
    strategy: DeploymentStrategy,
    name: str,
    compatibility_date: str,
    base_dir: Path,
    extra_flags: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """
    Build the manifest dict for strategy.

    Paths are written relative to base_dir, the directory wrangler runs in.
    A hybrid strategy has no server entry, which makes the manifest assets-only.
    """
    manifest: Dict[str, Any] = {
        "name": name,
        "compatibility_date": compatibility_date,
    }

    if strategy.server_entry is not None:
        manifest["main"] = _rel(strategy.server_entry, base_dir)
    if strategy.asset_dir is not None:
        assets: Dict[str, Any] = {"directory": _rel(strategy.asset_dir, base_dir)}
        if strategy.assets_binding and strategy.server_entry is not None:
            assets["binding"] = strategy.assets_binding
        manifest["assets"] = assets

    flags = list(strategy.compatibility_flags)
    for flag in extra_flags or []:
        if flag not in flags:
            flags.append(flag)
    if flags:
        manifest["compatibility_flags"] = flags

    manifest["observability"] = {"enabled": True}
    return manifest


def write_manifest(directory: Path, manifest: Dict[str, Any]) -> Path:
    path = directory / MANIFEST_NAME
    with open(path, "w", encoding="utf-8") as f:
        json.dump(manifest, f, indent=2)
        f.write("\n")
    return path


def existing_manifest(directory: Path) -> Optional[Path]:
    for name in EXISTING_MANIFESTS:
        if (directory / name).is_file():
            return directory / name
    return None
