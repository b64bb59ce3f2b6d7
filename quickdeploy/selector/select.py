"""
Deployment strategy resolution.

Rules are tried in priority order and the first match wins. Hybrid must come
before pure SSR because both layouts carry a server entry.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from ..analyzer.registry import DeployHint, FrameworkVariant
from ..errors import BuildArtifactIncomplete
from .plan import BuildArtifact, DeploymentStrategy, DeploymentType
from .rules import (
    ASSET_SUBDIRS,
    SERVER_ENTRY_CANDIDATES,
    STATIC_INDEX,
    excluded_for_hybrid,
    platform_settings,
)

logger = logging.getLogger(__name__)


def inspect_artifact(output_dir: str | Path, root: str | Path) -> BuildArtifact:
    """Describe a build output directory without modifying it."""
    root_path = Path(root).resolve()
    out = Path(output_dir)
    if not out.is_absolute():
        out = root_path / out
    out = out.resolve()

    server_entry: Optional[str] = None
    for candidate in SERVER_ENTRY_CANDIDATES:
        if (out / candidate).is_file():
            server_entry = candidate
            break

    return BuildArtifact(
        root=root_path,
        output_dir=out,
        server_entry=server_entry,
        has_static_index=(out / STATIC_INDEX).is_file(),
    )


def _asset_dir_for_ssr(artifact: BuildArtifact) -> Path:
    for name in ASSET_SUBDIRS:
        candidate = artifact.output_dir / name
        if candidate.is_dir() and any(candidate.iterdir()):
            return candidate
    return artifact.output_dir


def _strategy(deployment_type: DeploymentType, variant: FrameworkVariant, artifact_dir: Path,
              server_entry: Optional[Path], asset_dir: Optional[Path], isolation_required: bool,
              rationale: List[str], excluded=(), warnings: Optional[List[str]] = None) -> DeploymentStrategy:
    flags, binding = platform_settings(deployment_type)
    return DeploymentStrategy(
        deployment_type=deployment_type,
        framework=variant.id,
        artifact_dir=artifact_dir,
        server_entry=server_entry,
        asset_dir=asset_dir,
        compatibility_flags=flags,
        assets_binding=binding,
        isolation_required=isolation_required,
        excluded_paths=tuple(excluded),
        warnings=warnings or [],
        rationale=rationale,
    )


def resolve_strategy(artifact: BuildArtifact, variant: FrameworkVariant) -> DeploymentStrategy:
    """
    Classify a build artifact into a deployment topology.

    Args:
        artifact: Inspected build output
        variant: Framework variant that produced it

    Returns:
        DeploymentStrategy with the fixed platform settings for its type

    Raises:
        BuildArtifactIncomplete: An OpenNext-style variant has no adapter entry
            file, whether or not the adapter output directory exists
    """
    out = artifact.output_dir

    if artifact.has_server_entry and artifact.has_static_index:
        logger.info("Detected hybrid build (static + server) - using isolated assets deployment")
        return _strategy(
            DeploymentType.HYBRID, variant, out,
            server_entry=None,
            asset_dir=out,
            isolation_required=True,
            excluded=excluded_for_hybrid(artifact.server_entry),
            rationale=[f"{artifact.server_entry} and {STATIC_INDEX} both present at build root"],
        )

    if artifact.has_server_entry:
        adapter_managed = variant.deploy_hint is DeployHint.ADAPTER
        logger.info(f"Detected server build - using emitted entry {artifact.server_entry}")
        return _strategy(
            DeploymentType.SSR, variant, out,
            server_entry=out / artifact.server_entry,
            asset_dir=_asset_dir_for_ssr(artifact),
            isolation_required=not adapter_managed,
            rationale=[f"{artifact.server_entry} present without {STATIC_INDEX}"],
        )

    if variant.deploy_hint is DeployHint.OPENNEXT and variant.adapter_output:
        # the adapter output is the only deployable layout; .next/ and out/ are not checked
        adapter_dir = artifact.root / variant.adapter_output
        entry = adapter_dir / variant.adapter_entry
        if not entry.is_file():
            raise BuildArtifactIncomplete(variant.adapter_output, variant.adapter_entry)
        logger.info(f"Detected {variant.adapter} output in {variant.adapter_output}/")
        assets = adapter_dir / variant.adapter_assets if variant.adapter_assets else None
        return _strategy(
            DeploymentType.PLATFORM_ADAPTER, variant, adapter_dir,
            server_entry=entry,
            asset_dir=assets,
            isolation_required=False,
            rationale=[f"{variant.adapter_output}/{variant.adapter_entry} emitted by {variant.adapter}"],
        )

    if artifact.has_static_index:
        logger.info("Detected static build - using assets deployment")
        return _strategy(
            DeploymentType.STATIC, variant, out,
            server_entry=None,
            asset_dir=out,
            isolation_required=False,
            rationale=[f"{STATIC_INDEX} present, no server entry"],
        )

    warning = f"Unknown build structure in {out} - attempting assets deployment"
    logger.warning(warning)
    return _strategy(
        DeploymentType.UNKNOWN, variant, out,
        server_entry=None,
        asset_dir=out,
        isolation_required=False,
        rationale=["no server entry, no static index"],
        warnings=[warning],
    )
