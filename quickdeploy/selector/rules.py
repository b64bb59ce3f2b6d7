"""
Artifact layout signatures and the fixed per-topology platform settings.
"""

from typing import Dict, Optional, Tuple

from .plan import DeploymentType

# Checked in order; a directory entry (_worker.js/) is tried before the single-file form
SERVER_ENTRY_CANDIDATES = [
    "_worker.js/index.js",
    "_worker.js",
    "server/index.mjs",
    "server/index.js",
    "server/server.mjs",
]

STATIC_INDEX = "index.html"

# Emitted next to _worker.js for platform routing; would re-enable the worker if copied
ROUTES_MANIFEST = "_routes.json"

ASSET_SUBDIRS = ["client", "public", "browser"]

# deployment type -> (compatibility flags, assets binding)
PLATFORM_SETTINGS: Dict[DeploymentType, Tuple[Tuple[str, ...], Optional[str]]] = {
    DeploymentType.STATIC: ((), None),
    DeploymentType.HYBRID: ((), None),
    DeploymentType.SSR: (("nodejs_compat",), "ASSETS"),
    DeploymentType.PLATFORM_ADAPTER: (("nodejs_compat", "global_fetch_strictly_public"), "ASSETS"),
    DeploymentType.UNKNOWN: ((), None),
}


def platform_settings(deployment_type: DeploymentType) -> Tuple[Tuple[str, ...], Optional[str]]:
    return PLATFORM_SETTINGS[deployment_type]


def excluded_for_hybrid(server_entry: str) -> Tuple[str, ...]:
    """Top-level paths to strip from a hybrid artifact: the worker and its routes file."""
    top = server_entry.split("/", 1)[0]
    return (top, ROUTES_MANIFEST)
