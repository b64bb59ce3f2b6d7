from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List


def read_text(path: str | Path, limit_bytes: int = 1_000_000) -> str:
    p = Path(path)
    try:
        if p.stat().st_size > limit_bytes:
            return ""  # too large, skip content
    except OSError:
        return ""

    for enc in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            with open(p, "r", encoding=enc) as f:
                return f.read()
        except UnicodeDecodeError:
            continue
    return ""


def read_json(path: str | Path) -> dict:
    """
    Parse a JSON object from path.

    Raises:
        ValueError: If the file is not valid JSON or not an object
    """
    text = read_text(path)
    data = json.loads(text.lstrip("\ufeff") or "null")
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object at the top level")
    return data


def exists_any(root: str | Path, names: List[str] | tuple) -> Dict[str, bool]:
    root_path = Path(root)
    return {name: (root_path / name).exists() for name in names}


def is_nonempty_dir(path: str | Path) -> bool:
    p = Path(path)
    return p.is_dir() and any(p.iterdir())


def list_subdirs(path: str | Path) -> List[str]:
    p = Path(path)
    if not p.is_dir():
        return []
    return sorted(child.name for child in p.iterdir() if child.is_dir() and not child.name.startswith("."))
