"""
Deployment of resolved strategies to Cloudflare Workers.
"""

from .manifest import build_manifest, write_manifest
from .scratch import scratch_directory, stage_artifact
from .smoke import SmokeTestResult, run_smoke_test
from .wrangler import DeployResult, DeployTarget, deploy_strategy, extract_url

__all__ = [
    "build_manifest",
    "write_manifest",
    "scratch_directory",
    "stage_artifact",
    "SmokeTestResult",
    "run_smoke_test",
    "DeployResult",
    "DeployTarget",
    "deploy_strategy",
    "extract_url",
]
