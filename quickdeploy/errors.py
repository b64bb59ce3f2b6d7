"""
Error taxonomy for detection, resolution and deployment failures.

Every error carries a machine-readable ``kind`` and the CLI exit code it maps to,
so scripts can tell "nothing to deploy here" apart from "deploy a sub-project instead".
"""

from typing import List, Optional, Sequence


class ExitCodes:
    OK = 0
    FAILURE = 1
    NO_FRAMEWORK = 3
    MONOREPO = 4
    MANIFEST_MALFORMED = 5
    ARTIFACT_INCOMPLETE = 6
    CONFIG_INVALID = 7


class QuickDeployError(Exception):
    """Base class for all failures surfaced to the caller."""

    kind = "error"
    exit_code = ExitCodes.FAILURE
    hint: Optional[str] = None

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if hint is not None:
            self.hint = hint


class ManifestMalformed(QuickDeployError):
    kind = "manifest_malformed"
    exit_code = ExitCodes.MANIFEST_MALFORMED

    def __init__(self, path: str, reason: str):
        super().__init__(f"Could not parse {path}: {reason}",
                         hint="Fix the JSON syntax in package.json and try again")
        self.path = path
        self.reason = reason


class MonorepoAmbiguous(QuickDeployError):
    kind = "monorepo_ambiguous"
    exit_code = ExitCodes.MONOREPO

    def __init__(self, root: str, markers: Sequence[str], candidates: Sequence[str]):
        marker_list = ", ".join(markers)
        if candidates:
            hint = "Re-run with --subproject <path>, e.g. --subproject " + candidates[0]
        else:
            hint = "This looks like framework source code; create a project and deploy it instead"
        super().__init__(f"{root} is a monorepo root ({marker_list}); choose a sub-project to deploy",
                         hint=hint)
        self.root = root
        self.markers: List[str] = list(markers)
        self.candidates: List[str] = list(candidates)


class NoFrameworkDetected(QuickDeployError):
    kind = "no_framework"
    exit_code = ExitCodes.NO_FRAMEWORK

    def __init__(self, root: str, supported: Sequence[str], manifest_missing: bool = False):
        reason = "no package.json and no index.html found" if manifest_missing else "no supported framework found"
        super().__init__(f"Nothing to deploy in {root}: {reason}. Supported: {', '.join(supported)}",
                         hint="Run quick-deploy from a web project directory, or create one "
                              "(npm create astro@latest, npx create-next-app@latest, npm create vite@latest)")
        self.root = root
        self.supported: List[str] = list(supported)
        self.manifest_missing = manifest_missing


class BuildArtifactIncomplete(QuickDeployError):
    kind = "artifact_incomplete"
    exit_code = ExitCodes.ARTIFACT_INCOMPLETE

    def __init__(self, directory: str, expected: str):
        super().__init__(f"Build finished but {directory} has no {expected}",
                         hint=f"Check the contents of {directory}; the adapter should have emitted {expected}")
        self.directory = directory
        self.expected = expected


class BuildError(QuickDeployError):
    kind = "build_failed"


class CommandError(QuickDeployError):
    kind = "command_failed"

    def __init__(self, command: Sequence[str], returncode: Optional[int], output: str = ""):
        shown = " ".join(command)
        if returncode is None:
            message = f"Command not found: {shown}"
        else:
            message = f"Command failed with exit code {returncode}: {shown}"
        super().__init__(message)
        self.command = list(command)
        self.returncode = returncode
        self.output = output


class DeployError(QuickDeployError):
    kind = "deploy_failed"


class ConfigError(QuickDeployError):
    kind = "config_invalid"
    exit_code = ExitCodes.CONFIG_INVALID


class UnsupportedEnvironment(QuickDeployError):
    kind = "environment_unsupported"

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message, hint=hint or "Install Node.js 18 or later from https://nodejs.org")
