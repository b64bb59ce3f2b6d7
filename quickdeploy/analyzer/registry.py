"""
Registry of supported framework variants.

The table is closed and ordered: declaration order is the tie-break order used
by the detector when two variants reach the same score.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple


class FrameworkId(str, Enum):
    NEXTJS = "nextjs"
    ASTRO = "astro"
    SVELTEKIT = "sveltekit"
    NUXT = "nuxt"
    REACT_VITE = "react-vite"
    REACT_ROUTER = "react-router"
    REMIX = "remix"
    ANGULAR = "angular"
    STATIC = "static"
    UNKNOWN = "unknown"


class DeployHint(str, Enum):
    STATIC = "static"
    SSR = "ssr"
    OPENNEXT = "opennext"
    ADAPTER = "adapter"


@dataclass(frozen=True)
class FrameworkVariant:
    id: FrameworkId
    name: str
    config_files: Tuple[str, ...] = ()
    dependencies: Tuple[str, ...] = ()
    static_markers: Tuple[str, ...] = ()
    build_command: str = "npm run build"
    dev_command: str = "npm run dev"
    dev_port: Optional[int] = None
    output_candidates: Tuple[str, ...] = ("dist",)
    deploy_hint: DeployHint = DeployHint.STATIC
    adapter: Optional[str] = None           # package added by the configure step
    adapter_output: Optional[str] = None    # directory the adapter writes, relative to the project
    adapter_entry: Optional[str] = None     # file the adapter promises inside adapter_output
    adapter_assets: Optional[str] = None


W_CONFIG = 100

# Flagship dependencies weigh at least 150; shared build-tool dependencies weigh 20
# so that vite + react + vite.config (140) never outscores a flagship on its own.
DEPENDENCY_WEIGHTS: Dict[FrameworkId, Dict[str, int]] = {
    FrameworkId.ANGULAR: {"@angular/core": 200, "@angular/cli": 200},
    FrameworkId.NUXT: {"nuxt": 180, "@nuxt/kit": 75},
    FrameworkId.NEXTJS: {"next": 150},
    FrameworkId.ASTRO: {"astro": 150},
    FrameworkId.SVELTEKIT: {"@sveltejs/kit": 150, "svelte": 75},
    FrameworkId.REACT_ROUTER: {"react-router": 200, "@react-router/dev": 200},
    FrameworkId.REMIX: {"@remix-run/node": 150, "@remix-run/react": 150},
    FrameworkId.REACT_VITE: {"vite": 20, "react": 20},
}

FLAGSHIP_MIN_WEIGHT = 150


_VARIANTS: Tuple[FrameworkVariant, ...] = (
    FrameworkVariant(
        id=FrameworkId.ANGULAR,
        name="Angular",
        config_files=("angular.json",),
        dependencies=("@angular/core", "@angular/cli"),
        dev_port=4200,
        output_candidates=("dist",),
        deploy_hint=DeployHint.SSR,
        adapter="xhr2",
    ),
    FrameworkVariant(
        id=FrameworkId.NUXT,
        name="Nuxt",
        config_files=("nuxt.config.ts", "nuxt.config.js"),
        dependencies=("nuxt", "@nuxt/kit"),
        dev_port=3000,
        output_candidates=(".output", ".output/public", "dist"),
        deploy_hint=DeployHint.SSR,
    ),
    FrameworkVariant(
        id=FrameworkId.NEXTJS,
        name="Next.js",
        config_files=("next.config.js", "next.config.mjs", "next.config.ts"),
        dependencies=("next",),
        build_command="npx opennextjs-cloudflare build",
        dev_port=3000,
        output_candidates=(".open-next",),
        deploy_hint=DeployHint.OPENNEXT,
        adapter="@opennextjs/cloudflare",
        adapter_output=".open-next",
        adapter_entry="worker.js",
        adapter_assets="assets",
    ),
    FrameworkVariant(
        id=FrameworkId.ASTRO,
        name="Astro",
        config_files=("astro.config.mjs", "astro.config.js", "astro.config.ts"),
        dependencies=("astro",),
        dev_port=4321,
        output_candidates=("dist",),
        deploy_hint=DeployHint.ADAPTER,
        adapter="@astrojs/cloudflare",
    ),
    FrameworkVariant(
        id=FrameworkId.SVELTEKIT,
        name="SvelteKit",
        config_files=("svelte.config.js",),
        dependencies=("svelte", "@sveltejs/kit"),
        dev_port=5173,
        output_candidates=(".svelte-kit/cloudflare", "build", "dist"),
        deploy_hint=DeployHint.ADAPTER,
        adapter="@sveltejs/adapter-cloudflare",
    ),
    FrameworkVariant(
        id=FrameworkId.REACT_ROUTER,
        name="React Router",
        config_files=("react-router.config.ts", "react-router.config.js"),
        dependencies=("react-router", "@react-router/dev"),
        dev_port=3000,
        output_candidates=("build",),
        deploy_hint=DeployHint.SSR,
    ),
    FrameworkVariant(
        id=FrameworkId.REMIX,
        name="Remix",
        config_files=("remix.config.js",),
        dependencies=("@remix-run/node", "@remix-run/react"),
        dev_port=3000,
        output_candidates=("build", "dist", ".remix"),
        deploy_hint=DeployHint.SSR,
    ),
    FrameworkVariant(
        id=FrameworkId.REACT_VITE,
        name="React (Vite)",
        config_files=("vite.config.js", "vite.config.ts", "vite.config.mjs"),
        dependencies=("vite", "react"),
        dev_port=5173,
        output_candidates=("dist", "build"),
        deploy_hint=DeployHint.STATIC,
        adapter="@cloudflare/vite-plugin",
    ),
    FrameworkVariant(
        id=FrameworkId.STATIC,
        name="Static site",
        static_markers=(
            "index.html",
            "public/index.html",
            "dist/index.html",
            "build/index.html",
            "_site/index.html",
            "out/index.html",
        ),
        build_command="",
        dev_command="",
        dev_port=8080,
        output_candidates=(".",),
        deploy_hint=DeployHint.STATIC,
    ),
    FrameworkVariant(
        id=FrameworkId.UNKNOWN,
        name="Unknown",
        build_command="",
        dev_command="",
        output_candidates=(),
        deploy_hint=DeployHint.STATIC,
    ),
)

_BY_ID: Dict[FrameworkId, FrameworkVariant] = {v.id: v for v in _VARIANTS}


def list_variants() -> Tuple[FrameworkVariant, ...]:
    """Return every registered variant in declaration (tie-break) order."""
    return _VARIANTS


def scored_variants() -> List[FrameworkVariant]:
    """Variants that take part in scoring; the static and unknown fallbacks do not."""
    return [v for v in _VARIANTS if v.id not in (FrameworkId.STATIC, FrameworkId.UNKNOWN)]


def get_variant(framework) -> FrameworkVariant:
    """
    Look up a variant by id or id string.

    Raises:
        ValueError: If the framework is not registered
    """
    return _BY_ID[FrameworkId(framework)]


def dependency_weight(framework: FrameworkId, dependency: str) -> int:
    return DEPENDENCY_WEIGHTS.get(framework, {}).get(dependency, 0)


def supported_frameworks() -> List[str]:
    return [v.name for v in _VARIANTS if v.id is not FrameworkId.UNKNOWN]
