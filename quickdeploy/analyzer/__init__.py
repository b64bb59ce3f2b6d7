from __future__ import annotations

from .detect import detect, find_subprojects
from .models import DetectionResult, ProjectProbe
from .probe import probe_project
from .registry import DeployHint, FrameworkId, FrameworkVariant, get_variant, list_variants

__all__ = [
    "detect",
    "find_subprojects",
    "probe_project",
    "DetectionResult",
    "ProjectProbe",
    "DeployHint",
    "FrameworkId",
    "FrameworkVariant",
    "get_variant",
    "list_variants",
]
