from __future__ import annotations

from typing import Any, Dict, List

from .models import DetectionResult
from .registry import get_variant


def detection_to_dict(result: DetectionResult) -> Dict[str, Any]:
    return {
        "framework": result.framework.value,
        "name": get_variant(result.framework).name,
        "score": result.score,
        "signals": list(result.signals),
        "root": str(result.root),
        "output_dir": result.output_dir,
        "package_manager": result.package_manager,
        "build_command": result.build_command,
        "dev_command": result.dev_command,
        "dev_port": get_variant(result.framework).dev_port,
        "project_name": result.project_name,
        "scores": {name: score for name, score in result.scores},
    }


def render_detection(result: DetectionResult) -> str:
    variant = get_variant(result.framework)
    lines: List[str] = []
    lines.append(f"Framework: {variant.name} ({result.framework.value})")
    lines.append(f"Project: {result.project_name}")
    lines.append(f"Root: {result.root}")
    lines.append(f"Score: {result.score}")
    lines.append(f"Package manager: {result.package_manager}")
    lines.append(f"Build command: {result.build_command or '-'}")
    lines.append(f"Dev command: {result.dev_command or '-'}")
    if variant.dev_port:
        lines.append(f"Dev server port: {variant.dev_port}")
    lines.append(f"Output directory: {result.output_dir or '-'}")
    if result.signals:
        lines.append("")
        lines.append("Signals:")
        for s in result.signals:
            lines.append(f"- {s}")
    nonzero = [(name, score) for name, score in result.scores if score]
    if len(nonzero) > 1:
        lines.append("")
        lines.append("Other candidates:")
        for name, score in sorted(nonzero, key=lambda x: x[1], reverse=True):
            if name != result.framework.value:
                lines.append(f"- {name}: {score}")
    return "\n".join(lines)
