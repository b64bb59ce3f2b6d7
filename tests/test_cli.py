import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from quickdeploy.cli import main
from quickdeploy.config import CONFIG_ENV_VAR, CONFIG_FILE_NAME
from quickdeploy.errors import ExitCodes
from quickdeploy.orchestrator import DeployOutcome
from quickdeploy.process import CommandResult


@pytest.fixture
def runner(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    return CliRunner()


def write_pkg(root, deps):
    (root / "package.json").write_text(json.dumps({"name": "site", "dependencies": deps}))


def test_detect_text_output(runner, tmp_path):
    write_pkg(tmp_path, {"astro": "4.0.0"})
    result = runner.invoke(main, ["detect", str(tmp_path)])
    assert result.exit_code == 0
    assert "Framework: Astro (astro)" in result.output
    assert "dependency:astro" in result.output
    assert "Dev server port: 4321" in result.output


def test_detect_json_output(runner, tmp_path):
    write_pkg(tmp_path, {"next": "14.0.0"})
    result = runner.invoke(main, ["detect", str(tmp_path), "--json"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["framework"] == "nextjs"
    assert data["build_command"] == "npx opennextjs-cloudflare build"
    assert data["dev_port"] == 3000


def test_detect_no_framework_exit_code(runner, tmp_path):
    result = runner.invoke(main, ["detect", str(tmp_path)])
    assert result.exit_code == ExitCodes.NO_FRAMEWORK
    assert "✗" in result.output


def test_detect_monorepo_exit_code_differs(runner, tmp_path):
    write_pkg(tmp_path, {})
    (tmp_path / "pnpm-workspace.yaml").write_text("packages:\n  - 'apps/*'\n")
    (tmp_path / "apps" / "web").mkdir(parents=True)
    result = runner.invoke(main, ["detect", str(tmp_path), "--json"])
    assert result.exit_code == ExitCodes.MONOREPO
    assert result.exit_code != ExitCodes.NO_FRAMEWORK
    assert json.loads(result.output)["candidates"] == ["apps/web"]


def test_detect_malformed_manifest(runner, tmp_path):
    (tmp_path / "package.json").write_text("{oops")
    result = runner.invoke(main, ["detect", str(tmp_path)])
    assert result.exit_code == ExitCodes.MANIFEST_MALFORMED


def test_deploy_reports_success(runner, tmp_path):
    outcome = DeployOutcome(success=True, message="Deployed site (astro)",
                            url="https://site.someone.workers.dev", warnings=["slow"])
    with patch("quickdeploy.cli.run_deploy", return_value=outcome) as mock_deploy:
        result = runner.invoke(main, ["deploy", str(tmp_path), "--skip-deps", "--strict", "--framework", "astro"])
    assert result.exit_code == 0
    assert "https://site.someone.workers.dev" in result.output
    options = mock_deploy.call_args.args[1]
    assert options.skip_deps is True
    assert options.strict is True
    assert options.framework == "astro"


def test_deploy_failure_maps_exit_code(runner, tmp_path):
    outcome = DeployOutcome(success=False, message="Build finished but .open-next has no worker.js",
                            exit_code=ExitCodes.ARTIFACT_INCOMPLETE, error_kind="artifact_incomplete",
                            hint="Check the contents of .open-next")
    with patch("quickdeploy.cli.run_deploy", return_value=outcome):
        result = runner.invoke(main, ["deploy", str(tmp_path)])
    assert result.exit_code == ExitCodes.ARTIFACT_INCOMPLETE
    assert "✗ Build finished" in result.output
    assert "Check the contents" in result.output


def test_deploy_monorepo_without_tty_lists_candidates(runner, tmp_path):
    write_pkg(tmp_path, {})
    (tmp_path / "turbo.json").write_text("{}")
    (tmp_path / "examples" / "one").mkdir(parents=True)
    result = runner.invoke(main, ["deploy", str(tmp_path)])
    assert result.exit_code == ExitCodes.MONOREPO
    assert "examples/one" in result.output


def test_deploy_rejects_unknown_framework_choice(runner, tmp_path):
    result = runner.invoke(main, ["deploy", str(tmp_path), "--framework", "gatsby"])
    assert result.exit_code == 2


def test_init_and_clean(runner, tmp_path):
    write_pkg(tmp_path, {"astro": "4.0.0"})
    result = runner.invoke(main, ["init", str(tmp_path)])
    assert result.exit_code == 0
    assert json.loads((tmp_path / CONFIG_FILE_NAME).read_text())["framework"] == "astro"

    result = runner.invoke(main, ["init", str(tmp_path)])
    assert result.exit_code == ExitCodes.CONFIG_INVALID

    (tmp_path / "dist").mkdir()
    result = runner.invoke(main, ["clean", str(tmp_path)])
    assert result.exit_code == 0
    assert "dist" in result.output
    assert not (tmp_path / "dist").exists()


def test_doctor(runner, tmp_path):
    write_pkg(tmp_path, {"astro": "4.0.0"})
    with patch("quickdeploy.orchestrator.has_command", return_value=False), \
            patch("quickdeploy.orchestrator.node_version", return_value="v20.11.0"):
        result = runner.invoke(main, ["doctor", str(tmp_path)])
    assert result.exit_code == ExitCodes.FAILURE
    assert "Framework: astro" in result.output
    assert "✗ wrangler" in result.output
    assert "✓ Node.js v20.11.0" in result.output
    assert "no \"build\" script" in result.output


def test_doctor_fails_on_old_node(runner, tmp_path):
    write_pkg(tmp_path, {"astro": "4.0.0"})
    with patch("quickdeploy.orchestrator.has_command", return_value=True), \
            patch("quickdeploy.orchestrator.node_version", return_value="v16.20.0"), \
            patch("quickdeploy.orchestrator.run_command", return_value=CommandResult([], 0, "you@example.com")):
        result = runner.invoke(main, ["doctor", str(tmp_path)])
    assert result.exit_code == ExitCodes.FAILURE
    assert "✗ Node.js v16.20.0" in result.output
    assert "✓ wrangler" in result.output
    assert "✓ Cloudflare authentication" in result.output


def test_doctor_healthy(runner, tmp_path):
    (tmp_path / "package.json").write_text(json.dumps({
        "name": "site", "dependencies": {"astro": "4.0.0"}, "scripts": {"build": "astro build"}}))
    with patch("quickdeploy.orchestrator.has_command", return_value=True), \
            patch("quickdeploy.orchestrator.node_version", return_value="v20.11.0"), \
            patch("quickdeploy.orchestrator.run_command", return_value=CommandResult([], 0, "you@example.com")):
        result = runner.invoke(main, ["doctor", str(tmp_path)])
    assert result.exit_code == ExitCodes.OK
    assert "build\" script" not in result.output
