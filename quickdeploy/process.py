"""
Subprocess helpers for the external tools (package managers, framework CLIs, wrangler).
"""

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import click

from .errors import CommandError

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    command: List[str]
    returncode: int
    output: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def has_command(name: str) -> bool:
    return shutil.which(name) is not None


def run_command(
    command: List[str],
    cwd: Path,
    env: Optional[Dict[str, str]] = None,
    check: bool = True,
    echo: bool = True,
) -> CommandResult:
    """
    Run a command, streaming its output line by line.

    Args:
        command: Program and arguments
        cwd: Working directory; the process cwd is never changed
        env: Extra environment variables layered over os.environ
        check: Raise CommandError on a non-zero exit code
        echo: Print output lines as they arrive

    Returns:
        CommandResult with the combined stdout/stderr

    Raises:
        CommandError: If the program is missing, or exits non-zero with check=True
    """
    logger.debug(f"Running {' '.join(command)} in {cwd}")
    merged_env = {**os.environ, **(env or {})}

    try:
        process = subprocess.Popen(
            command,
            cwd=str(cwd),
            env=merged_env,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            bufsize=1,
        )
    except FileNotFoundError as e:
        raise CommandError(command, None) from e

    output_lines = []
    for line in process.stdout:
        line = line.rstrip()
        output_lines.append(line)
        if echo:
            click.echo(line)
    process.wait()

    result = CommandResult(command=list(command), returncode=process.returncode,
                           output="\n".join(output_lines))
    if check and not result.ok:
        # keep the tail; the full output was already streamed
        raise CommandError(command, process.returncode, "\n".join(output_lines[-40:]))
    return result
