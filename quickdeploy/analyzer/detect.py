"""
Framework detection by weighted heuristic scoring.

Every registered variant is scored against a single ProjectProbe: the first
matching config file adds W_CONFIG and every matched manifest dependency adds
its fixed weight from the registry. The strictly highest non-zero score wins;
equal scores resolve to the variant declared first in the registry. When every
variant scores zero the project is checked for a plain static site.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple

import yaml

from ..errors import MonorepoAmbiguous, NoFrameworkDetected
from .models import DetectionResult, ProjectProbe
from .packages import adapt_command, detect_package_manager
from .probe import probe_project
from .registry import (
    W_CONFIG,
    FrameworkId,
    FrameworkVariant,
    dependency_weight,
    get_variant,
    scored_variants,
    supported_frameworks,
)
from .walk import list_subdirs, read_text

logger = logging.getLogger(__name__)

SUBPROJECT_DIRS = ["examples", "packages"]

STATIC_MARKER_SCORE = 1


def score_variant(variant: FrameworkVariant, probe: ProjectProbe) -> Tuple[int, List[str]]:
    score = 0
    signals: List[str] = []

    for dep in variant.dependencies:
        if probe.has_dependency(dep):
            score += dependency_weight(variant.id, dep)
            signals.append(f"dependency:{dep}")

    for config_file in variant.config_files:
        if probe.has_file(config_file):
            score += W_CONFIG
            signals.append(f"config:{config_file}")
            break

    return score, signals


def rank_variants(probe: ProjectProbe) -> List[Tuple[FrameworkVariant, int, List[str]]]:
    """Score every scored variant, keeping registry order."""
    return [(v, *score_variant(v, probe)) for v in scored_variants()]


def _pick_best(ranked: List[Tuple[FrameworkVariant, int, List[str]]]):
    best = None
    for entry in ranked:
        # strict comparison: on a tie the earlier registry entry stays
        if entry[1] > 0 and (best is None or entry[1] > best[1]):
            best = entry
    return best


def detect_static(probe: ProjectProbe) -> Optional[Tuple[str, str]]:
    """
    Look for a root HTML entry file in the usual places.

    Returns:
        (output_dir, marker) for the first match, or None
    """
    static = get_variant(FrameworkId.STATIC)
    for marker in static.static_markers:
        if (probe.root / marker).is_file():
            parent = str(Path(marker).parent.as_posix())
            return parent, marker
    return None


def _workspace_globs(root: Path, markers: Tuple[str, ...]) -> List[str]:
    globs: List[str] = []
    if "pnpm-workspace.yaml" in markers:
        try:
            data = yaml.safe_load(read_text(root / "pnpm-workspace.yaml") or "{}") or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not parse pnpm-workspace.yaml: {e}")
            data = {}
        if isinstance(data, dict) and isinstance(data.get("packages"), list):
            globs.extend(str(p) for p in data["packages"])
    if "lerna.json" in markers:
        try:
            data = json.loads(read_text(root / "lerna.json") or "{}")
        except (OSError, ValueError) as e:
            logger.warning(f"Could not parse lerna.json: {e}")
            data = {}
        if isinstance(data, dict) and isinstance(data.get("packages"), list):
            globs.extend(str(p) for p in data["packages"])
    return globs


def find_subprojects(root: str | Path, markers: Tuple[str, ...] = ()) -> List[str]:
    """
    List sub-project directories of a monorepo root, relative to root.

    Direct children of examples/ and packages/ come first, followed by any
    extra directories matched by the workspace globs.
    """
    root_path = Path(root)
    candidates: List[str] = []
    for parent in SUBPROJECT_DIRS:
        for name in list_subdirs(root_path / parent):
            candidates.append(f"{parent}/{name}")

    for pattern in _workspace_globs(root_path, markers):
        if pattern.startswith("!"):
            continue
        for match in sorted(root_path.glob(pattern.rstrip("/"))):
            if not match.is_dir() or "node_modules" in match.parts:
                continue
            rel = match.relative_to(root_path).as_posix()
            if rel not in candidates and rel != ".":
                candidates.append(rel)
    return candidates


def _result(probe: ProjectProbe, variant: FrameworkVariant, score: int, signals: List[str],
            output_dir: Optional[str], scores=()) -> DetectionResult:
    package_manager = detect_package_manager(probe.lock_files)
    if variant.id is FrameworkId.STATIC:
        # no package manager involved for a plain static site
        build_command, dev_command = variant.build_command, variant.dev_command
    else:
        build_command = adapt_command(variant.build_command, package_manager)
        dev_command = adapt_command(variant.dev_command, package_manager)
    return DetectionResult(
        framework=variant.id,
        score=score,
        signals=tuple(signals),
        root=probe.root,
        output_dir=output_dir,
        package_manager=package_manager,
        build_command=build_command,
        dev_command=dev_command,
        project_name=probe.project_name,
        scores=tuple(scores),
    )


def _static_or_fail(probe: ProjectProbe, scores=()) -> DetectionResult:
    logger.info("Checking for static site...")
    found = detect_static(probe)
    if found is None:
        raise NoFrameworkDetected(str(probe.root), supported_frameworks(),
                                  manifest_missing=not probe.has_manifest)
    output_dir, marker = found
    logger.info(f"Detected static site ({marker})")
    return _result(probe, get_variant(FrameworkId.STATIC), STATIC_MARKER_SCORE,
                   [f"static:{marker}"], output_dir, scores)


def detect(root: str | Path, framework: Optional[str] = None) -> DetectionResult:
    """
    Classify the project at root into exactly one framework variant.

    Args:
        root: Project directory
        framework: Optional explicit framework id that skips scoring

    Returns:
        DetectionResult for the chosen variant

    Raises:
        ManifestMalformed: package.json exists but cannot be parsed
        MonorepoAmbiguous: root is a workspace root; carries candidate sub-projects
        NoFrameworkDetected: nothing deployable was recognised
    """
    logger.info("Detecting framework...")
    probe = probe_project(root)

    if not probe.has_manifest:
        if framework and FrameworkId(framework) is not FrameworkId.STATIC:
            logger.warning(f"Framework '{framework}' requested but {probe.root} has no package.json")
        return _static_or_fail(probe)

    if probe.is_monorepo_root:
        candidates = find_subprojects(probe.root, probe.monorepo_markers)
        logger.warning(f"Detected monorepo root ({', '.join(probe.monorepo_markers)})")
        raise MonorepoAmbiguous(str(probe.root), probe.monorepo_markers, candidates)

    if framework:
        variant = get_variant(framework)
        if variant.id is FrameworkId.STATIC:
            return _static_or_fail(probe)
        logger.info(f"Using framework override: {variant.name}")
        output_dir = variant.output_candidates[0] if variant.output_candidates else None
        return _result(probe, variant, 0, ["override"], output_dir)

    ranked = rank_variants(probe)
    scores = [(v.id.value, s) for v, s, _ in ranked]
    for v, s, sig in ranked:
        if s:
            logger.debug(f"{v.name}: score {s} ({', '.join(sig)})")

    best = _pick_best(ranked)
    if best is None:
        return _static_or_fail(probe, scores)

    variant, score, signals = best
    logger.info(f"Detected {variant.name} (score: {score})")
    output_dir = variant.output_candidates[0] if variant.output_candidates else None
    return _result(probe, variant, score, signals, output_dir, scores)
