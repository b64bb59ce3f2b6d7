"""
Click CLI for quick-deploy.
"""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .analyzer.registry import FrameworkId
from .analyzer.report import detection_to_dict, render_detection
from .config import LOG_LEVEL_ENV_VAR
from .errors import ExitCodes, MonorepoAmbiguous, QuickDeployError
from .orchestrator import DeployOptions, DeployOutcome, run_clean, run_deploy, run_detect, run_doctor, run_init

FRAMEWORK_CHOICES = [f.value for f in FrameworkId if f is not FrameworkId.UNKNOWN]


def _configure_logging(verbose: bool) -> None:
    if verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, os.environ.get(LOG_LEVEL_ENV_VAR, "INFO").upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _fail(error_message: str, hint: Optional[str], exit_code: int) -> None:
    click.echo(f"✗ {error_message}", err=True)
    if hint:
        click.echo(f"  {hint}", err=True)
    sys.exit(exit_code)


def _root(path: str) -> Path:
    return Path(path).resolve()


@click.group()
@click.version_option(__version__, prog_name="quick-deploy")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def main(verbose: bool):
    """
    quick-deploy - detect, build and deploy web projects to Cloudflare Workers.
    """
    _configure_logging(verbose)


@main.command("deploy")
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False))
@click.option("--subproject", help="Sub-project to deploy when PATH is a monorepo root")
@click.option("--framework", type=click.Choice(FRAMEWORK_CHOICES), help="Skip detection and use this framework")
@click.option("--output-dir", help="Build output directory, relative to the project")
@click.option("--config", "config_path", help="Path to quick-deploy.config.json")
@click.option("--skip-deps", is_flag=True, help="Do not install dependencies")
@click.option("--no-verify", "skip_verify", is_flag=True, help="Skip the post-deploy smoke check")
@click.option("--strict", is_flag=True, help="Fail on an unrecognised build layout instead of deploying it as assets")
def deploy_cmd(path, subproject, framework, output_dir, config_path, skip_deps, skip_verify, strict):
    """Deploy the project at PATH (default: current directory)."""
    options = DeployOptions(
        subproject=subproject,
        framework=framework,
        output_dir=output_dir,
        config_path=config_path,
        skip_deps=skip_deps,
        skip_verify=skip_verify,
        strict=strict,
    )
    outcome = run_deploy(_root(path), options)

    if outcome.error_kind == MonorepoAmbiguous.kind and outcome.candidates and sys.stdin.isatty():
        choice = click.prompt(
            "This is a monorepo. Which sub-project should be deployed?",
            type=click.Choice(outcome.candidates),
            default=outcome.candidates[0],
        )
        options.subproject = choice
        outcome = run_deploy(_root(path), options)

    _report_outcome(outcome)


def _report_outcome(outcome: DeployOutcome) -> None:
    if not outcome.success:
        if outcome.candidates:
            click.echo("Sub-projects:", err=True)
            for candidate in outcome.candidates:
                click.echo(f"  - {candidate}", err=True)
        _fail(outcome.message, outcome.hint, outcome.exit_code)

    for warning in outcome.warnings:
        click.echo(f"⚠ {warning}", err=True)
    click.echo(f"✓ {outcome.message}")
    if outcome.url:
        click.echo(f"  {outcome.url}")


@main.command("detect")
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False))
@click.option("--subproject", help="Sub-project to inspect when PATH is a monorepo root")
@click.option("--json", "output_json", is_flag=True, help="Output machine-readable JSON")
def detect_cmd(path, subproject, output_json):
    """Show which framework quick-deploy detects at PATH."""
    try:
        result = run_detect(_root(path), subproject)
    except MonorepoAmbiguous as e:
        if output_json:
            click.echo(json.dumps({"error": e.kind, "message": e.message, "candidates": e.candidates}))
            sys.exit(e.exit_code)
        for candidate in e.candidates:
            click.echo(f"  - {candidate}", err=True)
        _fail(e.message, e.hint, e.exit_code)
    except QuickDeployError as e:
        if output_json:
            click.echo(json.dumps({"error": e.kind, "message": e.message}))
            sys.exit(e.exit_code)
        _fail(e.message, e.hint, e.exit_code)

    if output_json:
        click.echo(json.dumps(detection_to_dict(result), indent=2))
    else:
        click.echo(render_detection(result))


@main.command("init")
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False))
@click.option("--config", "config_path", help="Where to write the config file")
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
def init_cmd(path, config_path, force):
    """Write a quick-deploy.config.json for the project at PATH."""
    try:
        written = run_init(_root(path), config_path, force=force)
    except QuickDeployError as e:
        _fail(e.message, e.hint, e.exit_code)
    click.echo(f"✓ Wrote {written}")


@main.command("doctor")
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False))
def doctor_cmd(path):
    """Check detection and the external tools a deploy needs."""
    report = run_doctor(_root(path))

    if report.get("framework"):
        click.echo(f"✓ Framework: {report['framework']} ({report['package_manager']})")
    else:
        error = report.get("error", {})
        click.echo(f"✗ Framework: {error.get('message', 'not detected')}")
    for warning in report.get("warnings", []):
        click.echo(f"! {warning}")

    node = report.get("node_version") or "not found"
    click.echo(f"{'✓' if report['node_supported'] else '✗'} Node.js {node} (18 or later required)")
    for tool, available in report["tools"].items():
        click.echo(f"{'✓' if available else '✗'} {tool}")
    click.echo(f"{'✓' if report['authenticated'] else '✗'} Cloudflare authentication")

    healthy = (report.get("framework") and report["node_supported"]
               and report["tools"].get("wrangler") and report["authenticated"])
    sys.exit(ExitCodes.OK if healthy else ExitCodes.FAILURE)


@main.command("clean")
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False))
def clean_cmd(path):
    """Remove build output directories."""
    removed = run_clean(_root(path))
    if removed:
        click.echo(f"✓ Removed {', '.join(removed)}")
    else:
        click.echo("Nothing to clean")


if __name__ == "__main__":
    main()
