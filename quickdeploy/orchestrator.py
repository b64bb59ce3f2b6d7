"""
Pipeline orchestration: detect, configure, build, resolve and deploy.

Each operation takes the project root explicitly and never changes the process
working directory. Failures are returned as data on DeployOutcome.
"""

import logging
import re
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .analyzer import DetectionResult, detect, probe_project
from .analyzer.packages import INSTALL_COMMANDS, INSTALL_FALLBACKS
from .analyzer.registry import FrameworkId
from .builders import BuildContext, get_builder
from .config import QuickDeployConfig, load_config, resolve_config_path, today, worker_name, write_config
from .deploy import DeployTarget, deploy_strategy, run_smoke_test
from .errors import CommandError, ConfigError, ExitCodes, QuickDeployError, UnsupportedEnvironment
from .process import has_command, run_command
from .selector import DeploymentStrategy, resolve_strategy

logger = logging.getLogger(__name__)

CLEAN_DIRS = ["dist", "build", "out", ".next", ".output", ".open-next", ".svelte-kit"]

MIN_NODE_MAJOR = 18


@dataclass
class DeployOptions:
    subproject: Optional[str] = None
    framework: Optional[str] = None
    output_dir: Optional[str] = None
    config_path: Optional[str] = None
    skip_deps: bool = False
    skip_verify: bool = False
    strict: bool = False


@dataclass
class DeployOutcome:
    success: bool
    message: str
    exit_code: int = ExitCodes.OK
    error_kind: Optional[str] = None
    hint: Optional[str] = None
    url: Optional[str] = None
    root: Optional[Path] = None
    detection: Optional[DetectionResult] = None
    strategy: Optional[DeploymentStrategy] = None
    candidates: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def failed(cls, error: QuickDeployError, **kwargs) -> "DeployOutcome":
        return cls(
            success=False,
            message=error.message,
            exit_code=error.exit_code,
            error_kind=error.kind,
            hint=error.hint,
            candidates=list(getattr(error, "candidates", [])),
            **kwargs,
        )


def resolve_subproject(root: Path, subproject: Optional[str]) -> Path:
    """Return the directory to operate on, validating an explicit sub-project."""
    if not subproject:
        return root
    target = (root / subproject).resolve()
    if not target.is_dir():
        raise ConfigError(f"Sub-project not found: {subproject}",
                          hint=f"Paths are relative to {root}")
    return target


def detect_project(root: Path, subproject: Optional[str] = None,
                   framework: Optional[str] = None) -> DetectionResult:
    """
    Detect the project at root, redirecting into subproject when given.

    A monorepo root without a sub-project raises MonorepoAmbiguous.
    """
    target = resolve_subproject(root, subproject)
    if target != root:
        logger.info(f"Using sub-project {subproject}")
    return detect(target, framework=framework)


def node_version(root: Path) -> Optional[str]:
    """Return the `node --version` string, or None when node is missing or fails."""
    try:
        result = run_command(["node", "--version"], cwd=root, check=False, echo=False)
    except CommandError:
        return None
    version = result.output.strip()
    return version if result.ok and version else None


def node_major(version: str) -> Optional[int]:
    match = re.match(r"v?(\d+)\.", version.strip())
    return int(match.group(1)) if match else None


def check_node_version(root: Path) -> str:
    """
    Require Node.js MIN_NODE_MAJOR or later; wrangler and the framework CLIs need it.

    Raises:
        UnsupportedEnvironment: If node is missing, unparsable or too old
    """
    version = node_version(root)
    if version is None:
        raise UnsupportedEnvironment("Node.js not found")
    major = node_major(version)
    if major is None:
        raise UnsupportedEnvironment(f"Could not parse Node.js version: {version}")
    if major < MIN_NODE_MAJOR:
        raise UnsupportedEnvironment(f"Node.js {MIN_NODE_MAJOR} or later is required (found {version})")
    logger.debug(f"Node.js {version}")
    return version


def install_dependencies(root: Path, package_manager: str) -> None:
    """
    Install project dependencies, retrying once with the fallback command.

    Raises:
        CommandError: If both the primary and fallback install fail
    """
    command = INSTALL_COMMANDS.get(package_manager, INSTALL_COMMANDS["npm"])
    logger.info(f"Installing dependencies with {package_manager}...")
    try:
        run_command(command, cwd=root)
    except CommandError:
        fallback = INSTALL_FALLBACKS.get(package_manager)
        if fallback is None:
            raise
        logger.warning(f"{' '.join(command)} failed, retrying with {' '.join(fallback)}")
        run_command(fallback, cwd=root)
    logger.info("✅ Dependencies installed")


def _deploy_target(config: QuickDeployConfig, detection: DetectionResult) -> DeployTarget:
    overrides = config.wrangler
    name = overrides.name or config.project_name or detection.project_name
    return DeployTarget(
        name=worker_name(name),
        compatibility_date=overrides.compatibility_date or config.compatibility_date or today(),
        extra_flags=list(overrides.compatibility_flags),
        env=dict(config.environment_variables),
    )


def run_deploy(root: Path, options: Optional[DeployOptions] = None) -> DeployOutcome:
    """
    Run the full deployment pipeline for the project at root.

    Args:
        root: Project directory
        options: Pipeline options; defaults run every step

    Returns:
        DeployOutcome; on failure it carries the error kind and exit code
    """
    options = options or DeployOptions()
    root = Path(root).resolve()
    detection = None
    strategy = None

    try:
        target_root = resolve_subproject(root, options.subproject)
        config = load_config(target_root, options.config_path)
        framework = options.framework or config.framework
        detection = detect(target_root, framework=framework)
        check_node_version(target_root)

        deps = probe_project(target_root).dependencies
        if not options.skip_deps and detection.package_manager and (target_root / "package.json").is_file():
            install_dependencies(target_root, detection.package_manager)

        builder = get_builder(detection.framework)
        ctx = BuildContext(
            root=target_root,
            detection=detection,
            env=dict(config.environment_variables),
            output_dir=options.output_dir or config.output_dir,
            dependencies=dict(deps),
        )
        builder.configure(ctx)
        artifact = builder.build(ctx)

        strategy = resolve_strategy(artifact, builder.variant)
        logger.info(f"Deployment type: {strategy.deployment_type.value}")

        result = deploy_strategy(strategy, target_root, _deploy_target(config, detection),
                                 strict=options.strict)
    except QuickDeployError as e:
        logger.error(f"❌ {e.message}")
        return DeployOutcome.failed(e, root=root, detection=detection, strategy=strategy)

    warnings = list(strategy.warnings)
    if result.url and not options.skip_verify:
        smoke = run_smoke_test(result.url)
        if not smoke.success:
            warnings.append(smoke.message)
    elif not result.url:
        warnings.append("Deployed, but no workers.dev URL was found in the wrangler output")

    return DeployOutcome(
        success=True,
        message=f"Deployed {detection.project_name} ({detection.framework.value})",
        url=result.url,
        root=target_root,
        detection=detection,
        strategy=strategy,
        warnings=warnings,
    )


def run_detect(root: Path, subproject: Optional[str] = None,
               framework: Optional[str] = None) -> DetectionResult:
    return detect_project(Path(root).resolve(), subproject, framework)


def run_init(root: Path, path: Optional[str] = None, force: bool = False) -> Path:
    """
    Write a config file pre-filled from detection.

    Raises:
        ConfigError: If the file exists and force is not set
    """
    root = Path(root).resolve()
    config_path = resolve_config_path(root, path)
    if config_path.exists() and not force:
        raise ConfigError(f"{config_path.name} already exists", hint="Use --force to overwrite it")

    config = QuickDeployConfig()
    try:
        detection = detect(root)
        config.project_name = detection.project_name
        config.framework = detection.framework.value
        config.output_dir = detection.output_dir
    except QuickDeployError as e:
        logger.warning(f"Detection failed, writing defaults: {e.message}")
    config.compatibility_date = today()

    write_config(config_path, config)
    logger.info(f"✅ Wrote {config_path}")
    return config_path


def run_doctor(root: Path) -> Dict[str, Any]:
    """Report detection plus the availability of the required external tools."""
    root = Path(root).resolve()
    report: Dict[str, Any] = {"root": str(root), "tools": {}}

    report["warnings"] = []

    try:
        detection = detect(root)
        report["framework"] = detection.framework.value
        report["package_manager"] = detection.package_manager
        scripts = probe_project(root).scripts
        if detection.framework is not FrameworkId.STATIC and "build" not in scripts:
            report["warnings"].append("package.json has no \"build\" script")
    except QuickDeployError as e:
        report["framework"] = None
        report["package_manager"] = None
        report["error"] = {"kind": e.kind, "message": e.message, "hint": e.hint}

    version = node_version(root)
    major = node_major(version) if version else None
    report["node_version"] = version
    report["node_supported"] = major is not None and major >= MIN_NODE_MAJOR

    tools = ["node", "npm", "wrangler"]
    pm = report.get("package_manager")
    if pm and pm not in tools:
        tools.append(pm)
    for tool in tools:
        report["tools"][tool] = has_command(tool)

    if report["tools"]["wrangler"]:
        try:
            result = run_command(["wrangler", "whoami"], cwd=root, check=False, echo=False)
            report["authenticated"] = result.ok and "not authenticated" not in result.output.lower()
        except CommandError:
            report["authenticated"] = False
    else:
        report["authenticated"] = False
    return report


def run_clean(root: Path) -> List[str]:
    """Remove build output directories; returns the names that were removed."""
    root = Path(root).resolve()
    removed = []
    for name in CLEAN_DIRS:
        path = root / name
        if path.is_dir():
            shutil.rmtree(path)
            removed.append(name)
            logger.info(f"Removed {name}/")
    return removed
