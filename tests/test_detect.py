import json
from pathlib import Path
from unittest.mock import patch

import pytest

from quickdeploy.analyzer import detect, find_subprojects, probe_project
from quickdeploy.analyzer.detect import rank_variants, score_variant
from quickdeploy.analyzer.registry import FrameworkId, get_variant
from quickdeploy.errors import ManifestMalformed, MonorepoAmbiguous, NoFrameworkDetected


def write_pkg(root: Path, deps=None, dev_deps=None, name="app", scripts=None):
    pkg = {"name": name, "dependencies": deps or {}, "devDependencies": dev_deps or {}}
    if scripts:
        pkg["scripts"] = scripts
    (root / "package.json").write_text(json.dumps(pkg))


FLAGSHIPS = [
    ("nextjs", {"next": "14.0.0"}),
    ("astro", {"astro": "4.0.0"}),
    ("sveltekit", {"@sveltejs/kit": "2.0.0"}),
    ("nuxt", {"nuxt": "3.0.0"}),
    ("angular", {"@angular/core": "17.0.0"}),
    ("react-router", {"react-router": "7.0.0"}),
    ("remix", {"@remix-run/node": "2.0.0"}),
    ("react-vite", {"vite": "5.0.0", "react": "18.0.0"}),
]


@pytest.mark.parametrize("framework,deps", FLAGSHIPS)
def test_flagship_dependency_alone_detects_variant(tmp_path, framework, deps):
    write_pkg(tmp_path, deps=deps)
    result = detect(tmp_path)
    assert result.framework.value == framework
    assert result.score > 0
    assert all(s.startswith("dependency:") for s in result.signals)


@pytest.mark.parametrize("framework,deps", FLAGSHIPS[:-1])
def test_meta_framework_beats_build_tool(tmp_path, framework, deps):
    write_pkg(tmp_path, deps={**deps, "react": "18.0.0"}, dev_deps={"vite": "5.0.0"})
    (tmp_path / "vite.config.ts").write_text("export default {}")
    result = detect(tmp_path)
    assert result.framework.value == framework


def test_config_file_counts_once(tmp_path):
    write_pkg(tmp_path, deps={"astro": "4.0.0"})
    (tmp_path / "astro.config.mjs").write_text("")
    (tmp_path / "astro.config.ts").write_text("")
    score, signals = score_variant(get_variant("astro"), probe_project(tmp_path))
    assert score == 250
    assert signals == ["dependency:astro", "config:astro.config.mjs"]


def test_config_file_alone_detects_variant(tmp_path):
    write_pkg(tmp_path)
    (tmp_path / "svelte.config.js").write_text("export default {}")
    result = detect(tmp_path)
    assert result.framework is FrameworkId.SVELTEKIT
    assert result.signals == ("config:svelte.config.js",)


def test_tie_resolves_to_earlier_registry_entry(tmp_path):
    # next and astro both weigh 150; nextjs is declared first
    write_pkg(tmp_path, deps={"next": "14.0.0", "astro": "4.0.0"})
    assert detect(tmp_path).framework is FrameworkId.NEXTJS


def test_higher_score_wins_over_registry_order(tmp_path):
    write_pkg(tmp_path, deps={"next": "14.0.0", "astro": "4.0.0"})
    (tmp_path / "astro.config.mjs").write_text("")
    assert detect(tmp_path).framework is FrameworkId.ASTRO


def test_detection_is_idempotent_and_read_only(tmp_path):
    write_pkg(tmp_path, deps={"nuxt": "3.0.0"})
    (tmp_path / "nuxt.config.ts").write_text("")
    before = sorted(p.name for p in tmp_path.iterdir())
    first = detect(tmp_path)
    second = detect(tmp_path)
    assert first == second
    assert sorted(p.name for p in tmp_path.iterdir()) == before


def test_no_manifest_with_root_index_is_static(tmp_path):
    (tmp_path / "index.html").write_text("<html></html>")
    result = detect(tmp_path)
    assert result.framework is FrameworkId.STATIC
    assert result.output_dir == "."
    assert result.build_command == ""


def test_no_manifest_with_public_index(tmp_path):
    (tmp_path / "public").mkdir()
    (tmp_path / "public" / "index.html").write_text("<html></html>")
    result = detect(tmp_path)
    assert result.framework is FrameworkId.STATIC
    assert result.output_dir == "public"


def test_manifest_without_framework_falls_back_to_static(tmp_path):
    write_pkg(tmp_path, deps={"lodash": "4.0.0"})
    (tmp_path / "index.html").write_text("<html></html>")
    result = detect(tmp_path)
    assert result.framework is FrameworkId.STATIC


def test_empty_directory_raises_no_framework(tmp_path):
    with pytest.raises(NoFrameworkDetected) as exc:
        detect(tmp_path)
    assert exc.value.manifest_missing is True
    assert exc.value.exit_code == 3
    assert "Next.js" in exc.value.message


def test_unrecognised_manifest_raises_no_framework(tmp_path):
    write_pkg(tmp_path, deps={"express": "4.0.0"})
    with pytest.raises(NoFrameworkDetected) as exc:
        detect(tmp_path)
    assert exc.value.manifest_missing is False


def test_malformed_manifest(tmp_path):
    (tmp_path / "package.json").write_text("{not json")
    with pytest.raises(ManifestMalformed) as exc:
        detect(tmp_path)
    assert exc.value.exit_code == 5


def test_unreadable_manifest_is_malformed(tmp_path):
    write_pkg(tmp_path, deps={"astro": "4.0.0"})
    with patch("quickdeploy.analyzer.walk.open", side_effect=PermissionError(13, "Permission denied"), create=True):
        with pytest.raises(ManifestMalformed) as exc:
            probe_project(tmp_path)
    assert "Permission denied" in exc.value.reason
    assert exc.value.exit_code == 5


def test_manifest_must_be_an_object(tmp_path):
    (tmp_path / "package.json").write_text("[]")
    with pytest.raises(ManifestMalformed):
        detect(tmp_path)


def test_monorepo_root_lists_examples(tmp_path):
    write_pkg(tmp_path, deps={"next": "14.0.0"})
    (tmp_path / "turbo.json").write_text("{}")
    (tmp_path / "examples" / "one").mkdir(parents=True)
    with pytest.raises(MonorepoAmbiguous) as exc:
        detect(tmp_path)
    assert exc.value.candidates == ["examples/one"]
    assert exc.value.exit_code == 4
    assert "examples/one" in exc.value.hint


def test_monorepo_without_candidates(tmp_path):
    write_pkg(tmp_path)
    (tmp_path / "lerna.json").write_text("{}")
    with pytest.raises(MonorepoAmbiguous) as exc:
        detect(tmp_path)
    assert exc.value.candidates == []


def test_find_subprojects_reads_pnpm_workspace(tmp_path):
    (tmp_path / "pnpm-workspace.yaml").write_text("packages:\n  - 'apps/*'\n  - '!apps/ignored'\n")
    (tmp_path / "apps" / "web").mkdir(parents=True)
    (tmp_path / "packages" / "ui").mkdir(parents=True)
    (tmp_path / "packages" / ".cache").mkdir()
    found = find_subprojects(tmp_path, ("pnpm-workspace.yaml",))
    assert found == ["packages/ui", "apps/web"]


def test_find_subprojects_tolerates_bad_yaml(tmp_path):
    (tmp_path / "pnpm-workspace.yaml").write_text("packages: [unclosed\n")
    (tmp_path / "examples" / "demo").mkdir(parents=True)
    assert find_subprojects(tmp_path, ("pnpm-workspace.yaml",)) == ["examples/demo"]


def test_subproject_is_detected_on_its_own(tmp_path):
    (tmp_path / "turbo.json").write_text("{}")
    sub = tmp_path / "examples" / "blog"
    sub.mkdir(parents=True)
    write_pkg(sub, deps={"astro": "4.0.0"})
    assert detect(sub).framework is FrameworkId.ASTRO


def test_framework_override_skips_scoring(tmp_path):
    write_pkg(tmp_path, deps={"next": "14.0.0"})
    result = detect(tmp_path, framework="astro")
    assert result.framework is FrameworkId.ASTRO
    assert result.signals == ("override",)
    assert result.score == 0


def test_package_manager_adapts_commands(tmp_path):
    write_pkg(tmp_path, deps={"astro": "4.0.0"})
    (tmp_path / "pnpm-lock.yaml").write_text("")
    result = detect(tmp_path)
    assert result.package_manager == "pnpm"
    assert result.build_command == "pnpm run build"
    assert result.dev_command == "pnpm run dev"


def test_project_name_from_manifest(tmp_path):
    write_pkg(tmp_path, deps={"astro": "4.0.0"}, name="my-site")
    assert detect(tmp_path).project_name == "my-site"


def test_rank_variants_keeps_registry_order(tmp_path):
    write_pkg(tmp_path, deps={"vite": "5.0.0"})
    ranked = rank_variants(probe_project(tmp_path))
    assert [v.id for v, _, _ in ranked][0] is FrameworkId.ANGULAR
    assert dict((v.id, s) for v, s, _ in ranked)[FrameworkId.REACT_VITE] == 20
