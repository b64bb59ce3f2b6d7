import json

import pytest

from quickdeploy.analyzer.packages import (
    adapt_command,
    add_dev_dependency_command,
    detect_package_manager,
    exec_command,
)
from quickdeploy.config import (
    CONFIG_ENV_VAR,
    CONFIG_FILE_NAME,
    QuickDeployConfig,
    load_config,
    worker_name,
    write_config,
)
from quickdeploy.errors import ConfigError


class TestPackageManagers:

    def test_lock_file_priority(self):
        assert detect_package_manager(["yarn.lock", "pnpm-lock.yaml"]) == "pnpm"
        assert detect_package_manager(["bun.lockb"]) == "bun"
        assert detect_package_manager(["package-lock.json"]) == "npm"
        assert detect_package_manager([]) == "npm"

    @pytest.mark.parametrize("pm,expected", [
        ("npm", "npm run build"),
        ("pnpm", "pnpm run build"),
        ("yarn", "yarn build"),
        ("bun", "bun run build"),
    ])
    def test_adapt_command(self, pm, expected):
        assert adapt_command("npm run build", pm) == expected

    def test_adapt_command_leaves_other_commands(self):
        assert adapt_command("npx opennextjs-cloudflare build", "pnpm") == "npx opennextjs-cloudflare build"
        assert adapt_command("", "yarn") == ""

    def test_add_dev_dependency(self):
        assert add_dev_dependency_command("npm", "@astrojs/cloudflare") == \
            ["npm", "install", "--save-dev", "@astrojs/cloudflare"]
        assert add_dev_dependency_command("pnpm", "@astrojs/cloudflare") == \
            ["pnpm", "add", "-D", "@astrojs/cloudflare"]

    def test_exec_command(self):
        assert exec_command("npm", "astro", "build") == ["npx", "astro", "build"]
        assert exec_command("pnpm", "astro", "build") == ["pnpm", "exec", "astro", "build"]
        assert exec_command("bun", "astro") == ["bunx", "astro"]


class TestConfig:

    def test_missing_default_file_gives_defaults(self, tmp_path, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        config = load_config(tmp_path)
        assert config.project_name is None
        assert config.environment_variables == {}

    def test_camel_case_keys(self, tmp_path, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        (tmp_path / CONFIG_FILE_NAME).write_text(json.dumps({
            "projectName": "site",
            "framework": "astro",
            "outputDir": "dist",
            "environmentVariables": {"API_URL": "https://example.com", "RETRIES": 3},
            "wrangler": {"compatibility_flags": ["nodejs_compat"]},
        }))
        config = load_config(tmp_path)
        assert config.project_name == "site"
        assert config.output_dir == "dist"
        assert config.environment_variables == {"API_URL": "https://example.com", "RETRIES": "3"}
        assert config.wrangler.compatibility_flags == ["nodejs_compat"]

    def test_unknown_framework_is_invalid(self, tmp_path, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        (tmp_path / CONFIG_FILE_NAME).write_text(json.dumps({"framework": "gatsby"}))
        with pytest.raises(ConfigError) as exc:
            load_config(tmp_path)
        assert exc.value.exit_code == 7

    def test_invalid_json(self, tmp_path, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        (tmp_path / CONFIG_FILE_NAME).write_text("{")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_explicit_missing_path_is_an_error(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path, "nope.json")

    def test_env_var_path(self, tmp_path, monkeypatch):
        other = tmp_path / "ci.json"
        other.write_text(json.dumps({"projectName": "from-env"}))
        monkeypatch.setenv(CONFIG_ENV_VAR, str(other))
        assert load_config(tmp_path).project_name == "from-env"

    def test_write_config_uses_camel_case(self, tmp_path):
        path = tmp_path / CONFIG_FILE_NAME
        write_config(path, QuickDeployConfig(project_name="site", output_dir="dist"))
        data = json.loads(path.read_text())
        assert data["projectName"] == "site"
        assert data["outputDir"] == "dist"
        assert "framework" not in data

    @pytest.mark.parametrize("raw,expected", [
        ("My Site", "my-site"),
        ("@scope/pkg", "scope-pkg"),
        ("___", "quick-deploy-app"),
    ])
    def test_worker_name(self, raw, expected):
        assert worker_name(raw) == expected
