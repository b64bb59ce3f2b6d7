"""
Builder dispatch keyed by framework id.

The table must cover every deployable FrameworkId; a missing entry fails at import.
"""

from typing import Dict, Type

from ..analyzer.registry import FrameworkId
from ..errors import BuildError
from .angular import AngularBuilder
from .astro import AstroBuilder
from .base import Builder
from .nextjs import NextJSBuilder
from .nuxt import NuxtBuilder
from .react import ReactRouterBuilder, ReactViteBuilder
from .remix import RemixBuilder
from .static import StaticBuilder
from .sveltekit import SvelteKitBuilder

BUILDERS: Dict[FrameworkId, Type[Builder]] = {
    FrameworkId.NEXTJS: NextJSBuilder,
    FrameworkId.ASTRO: AstroBuilder,
    FrameworkId.SVELTEKIT: SvelteKitBuilder,
    FrameworkId.NUXT: NuxtBuilder,
    FrameworkId.REACT_VITE: ReactViteBuilder,
    FrameworkId.REACT_ROUTER: ReactRouterBuilder,
    FrameworkId.REMIX: RemixBuilder,
    FrameworkId.ANGULAR: AngularBuilder,
    FrameworkId.STATIC: StaticBuilder,
}

_missing = [f.value for f in FrameworkId if f is not FrameworkId.UNKNOWN and f not in BUILDERS]
if _missing:
    raise RuntimeError(f"No builder registered for: {', '.join(_missing)}")


def get_builder(framework: FrameworkId) -> Builder:
    """
    Return a builder for framework.

    Raises:
        BuildError: If framework has no builder (only FrameworkId.UNKNOWN)
    """
    builder_cls = BUILDERS.get(FrameworkId(framework))
    if builder_cls is None:
        raise BuildError(f"Unsupported framework: {framework}")
    return builder_cls()
