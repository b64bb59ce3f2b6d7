"""
Package manager selection from lock files and command adaptation.
"""

from __future__ import annotations

from typing import Iterable, List

LOCK_PRIORITY = [
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
    ("bun.lockb", "bun"),
    ("bun.lock", "bun"),
]

INSTALL_COMMANDS = {
    "npm": ["npm", "install"],
    "pnpm": ["pnpm", "install"],
    "yarn": ["yarn", "install"],
    "bun": ["bun", "install"],
}

# Tried once when the primary install fails; peer dependency conflicts are the usual cause
INSTALL_FALLBACKS = {
    "npm": ["npm", "install", "--legacy-peer-deps"],
}


def detect_package_manager(lock_files: Iterable[str]) -> str:
    present = set(lock_files)
    for lock, manager in LOCK_PRIORITY:
        if lock in present:
            return manager
    return "npm"


def adapt_command(command: str, package_manager: str) -> str:
    """
    Rewrite an ``npm run <script>`` command for another package manager.

    Commands that do not start with ``npm run`` (e.g. ``npx ...``) are returned unchanged.
    """
    if not command or not command.startswith("npm run "):
        return command
    script = command[len("npm run "):]
    if package_manager == "pnpm":
        return f"pnpm run {script}"
    if package_manager == "yarn":
        return f"yarn {script}"
    if package_manager == "bun":
        return f"bun run {script}"
    return command


def add_dev_dependency_command(package_manager: str, package: str) -> List[str]:
    if package_manager == "npm":
        return ["npm", "install", "--save-dev", package]
    return [package_manager, "add", "-D", package]


def exec_command(package_manager: str, binary: str, *args: str) -> List[str]:
    """Command that runs a package binary (``npx astro build`` and friends)."""
    runners = {
        "npm": ["npx"],
        "pnpm": ["pnpm", "exec"],
        "yarn": ["yarn"],
        "bun": ["bunx"],
    }
    return runners.get(package_manager, ["npx"]) + [binary, *args]
