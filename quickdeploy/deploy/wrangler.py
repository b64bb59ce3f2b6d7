"""
Wrangler invocation for a resolved deployment strategy.

Isolated strategies are deployed from a scratch directory that holds only the
staged artifact and a generated wrangler.json. Everything else is deployed in
place from the project root.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from ..analyzer.registry import DeployHint, get_variant
from ..errors import CommandError, DeployError
from ..process import has_command, run_command
from ..selector import DeploymentStrategy, DeploymentType
from .manifest import build_manifest, existing_manifest, write_manifest
from .scratch import STAGED_ARTIFACT_DIR, rebase_strategy, scratch_directory, stage_artifact

logger = logging.getLogger(__name__)

WORKERS_URL_PATTERN = re.compile(r"https://[^\s]*\.workers\.dev")

ASSETS_IGNORE_FILE = ".assetsignore"

WRANGLER_INSTALL_COMMAND = ["npm", "install", "-g", "wrangler@latest"]


@dataclass
class DeployTarget:
    """Name and runtime settings of the Worker being deployed."""
    name: str
    compatibility_date: str
    extra_flags: List[str] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)


@dataclass
class DeployResult:
    url: Optional[str]
    output: str
    isolated: bool
    manifest: Optional[Dict] = None


def extract_url(output: str) -> Optional[str]:
    match = WORKERS_URL_PATTERN.search(output)
    return match.group(0) if match else None


def ensure_wrangler(root: Path) -> None:
    """Install wrangler globally if it is not on PATH."""
    if has_command("wrangler"):
        logger.debug("wrangler found on PATH")
        return
    logger.info("Installing Wrangler CLI...")
    try:
        run_command(WRANGLER_INSTALL_COMMAND, cwd=root)
    except CommandError as e:
        raise DeployError("Failed to install Wrangler CLI",
                          hint="Install it manually: npm install -g wrangler") from e
    logger.info("✅ Wrangler CLI installed")


def check_auth(root: Path) -> None:
    """
    Verify wrangler is logged in.

    Raises:
        DeployError: If `wrangler whoami` fails or reports no login
    """
    logger.info("Checking Cloudflare authentication...")
    try:
        result = run_command(["wrangler", "whoami"], cwd=root, echo=False)
    except CommandError as e:
        raise DeployError("Not authenticated with Cloudflare",
                          hint="Run: wrangler login") from e
    if "not authenticated" in result.output.lower():
        raise DeployError("Not authenticated with Cloudflare", hint="Run: wrangler login")
    logger.info("✅ Authenticated with Cloudflare")


def write_assets_ignore(strategy: DeploymentStrategy) -> Optional[Path]:
    """
    Keep the server entry and routing manifest out of the uploaded assets.

    Only needed when the asset directory is also the artifact root, which is
    where a server entry lives.
    """
    if strategy.server_entry is None or strategy.asset_dir != strategy.artifact_dir:
        return None
    top = strategy.server_entry.relative_to(strategy.artifact_dir).parts[0]
    path = strategy.asset_dir / ASSETS_IGNORE_FILE
    path.write_text(f"{top}\n_routes.json\n", encoding="utf-8")
    logger.debug(f"Wrote {path}")
    return path


def _run_deploy(command: List[str], cwd: Path, target: DeployTarget) -> str:
    logger.info("Deploying to Cloudflare...")
    try:
        return run_command(command, cwd=cwd, env=target.env).output
    except CommandError as e:
        raise DeployError(f"Deployment failed: {e.message}",
                          hint="Check the wrangler output above") from e


def deploy_isolated(strategy: DeploymentStrategy, target: DeployTarget) -> DeployResult:
    """Stage the artifact into a scratch directory and deploy it from there."""
    with scratch_directory() as scratch:
        staged_dir = scratch / STAGED_ARTIFACT_DIR
        staged_dir.mkdir()
        copied = stage_artifact(strategy.artifact_dir, staged_dir, strategy.excluded_paths)
        logger.info(f"Staged {len(copied)} entries for isolated deployment")

        staged = rebase_strategy(strategy, staged_dir)
        write_assets_ignore(staged)
        manifest = build_manifest(staged, target.name, target.compatibility_date, scratch,
                                  target.extra_flags)
        write_manifest(scratch, manifest)

        output = _run_deploy(["wrangler", "deploy"], scratch, target)
    return DeployResult(url=extract_url(output), output=output, isolated=True, manifest=manifest)


def deploy_in_place(strategy: DeploymentStrategy, root: Path, target: DeployTarget) -> DeployResult:
    """Deploy from the project root, writing wrangler.json only when a Worker entry is involved."""
    if strategy.server_entry is None:
        asset_dir = strategy.asset_dir or strategy.artifact_dir
        command = [
            "wrangler", "deploy",
            f"--assets={asset_dir}",
            "--name", target.name,
            "--compatibility-date", target.compatibility_date,
        ]
        output = _run_deploy(command, root, target)
        return DeployResult(url=extract_url(output), output=output, isolated=False)

    variant = get_variant(strategy.framework)
    existing = existing_manifest(root)
    manifest = None
    if existing is not None and variant.deploy_hint is DeployHint.ADAPTER:
        logger.info(f"Using existing {existing.name}")
    else:
        write_assets_ignore(strategy)
        manifest = build_manifest(strategy, target.name, target.compatibility_date, root,
                                  target.extra_flags)
        path = write_manifest(root, manifest)
        logger.info(f"Wrote {path.name}")

    output = _run_deploy(["wrangler", "deploy"], root, target)
    return DeployResult(url=extract_url(output), output=output, isolated=False, manifest=manifest)


def deploy_strategy(strategy: DeploymentStrategy, root: Path, target: DeployTarget,
                    strict: bool = False) -> DeployResult:
    """
    Deploy a resolved strategy with wrangler.

    Args:
        strategy: Output of resolve_strategy
        root: Project directory
        target: Worker name and runtime settings
        strict: Refuse to deploy an unrecognised build layout

    Returns:
        DeployResult with the workers.dev URL when wrangler printed one

    Raises:
        DeployError: On authentication or deployment failure, or an unknown
            layout in strict mode
    """
    root = Path(root).resolve()
    if strict and strategy.deployment_type is DeploymentType.UNKNOWN:
        raise DeployError(f"Unrecognised build layout in {strategy.artifact_dir}",
                          hint="Pass --output-dir to point at the build output, or drop --strict")

    ensure_wrangler(root)
    check_auth(root)

    if strategy.isolation_required:
        result = deploy_isolated(strategy, target)
    else:
        result = deploy_in_place(strategy, root, target)

    if result.url:
        logger.info(f"✅ Deployed to {result.url}")
    else:
        logger.warning("Deployment finished but no workers.dev URL was found in the output")
    return result
