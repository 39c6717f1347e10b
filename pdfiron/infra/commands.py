"""
External command runner.

Every external process pdfiron starts goes through run_command(). It waits
for the process, captures stdout/stderr as text (undecodable bytes are
replaced rather than failing) and maps the ways a launch can go wrong onto
the error taxonomy in errors.py.
"""

import os
import subprocess
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Sequence, Union

from pdfiron.infra.config.schemas import BinaryName
from pdfiron.infra.errors import ExecutableNotFound, ExternalToolFailed, SpawnFailed

if TYPE_CHECKING:
    from pdfiron.infra.pipeline.logger import PipelineLogger


@dataclass(frozen=True)
class CommandResult:
    binary: str
    args: List[str]
    returncode: int
    stdout: str
    stderr: str
    duration_seconds: float


def _not_found(binary: Union[str, BinaryName]) -> ExecutableNotFound:
    if isinstance(binary, BinaryName):
        return ExecutableNotFound(
            binary.name,
            tool=binary.tool,
            arg=binary.arg,
            env=binary.env,
            source=binary.source,
        )
    return ExecutableNotFound(binary)


def run_command(
    binary: Union[str, BinaryName],
    args: Sequence[Union[str, os.PathLike]],
    logger: Optional['PipelineLogger'] = None,
) -> CommandResult:
    """
    Run one external tool to completion.

    Args:
        binary: Executable name, or a BinaryName carrying override information
        args: Arguments (paths are converted with str())
        logger: Receives the command line and captured stdout at debug level

    Returns:
        CommandResult with the decoded output

    Raises:
        ExecutableNotFound: binary isn't on PATH
        SpawnFailed: any other OS error while starting the process
        ExternalToolFailed: the process exited non-zero
    """
    name = binary.name if isinstance(binary, BinaryName) else binary
    argv = [str(arg) for arg in args]

    if logger and logger.is_enabled_for("DEBUG"):
        logger.debug(f"Running {name} {' '.join(argv)}", binary=name)

    start_time = time.time()
    try:
        completed = subprocess.run(
            [name, *argv],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            stdin=subprocess.DEVNULL,
        )
    except FileNotFoundError as e:
        raise _not_found(binary) from e
    except OSError as e:
        raise SpawnFailed(name, e) from e
    elapsed_time = time.time() - start_time

    stdout = completed.stdout.decode('utf-8', errors='replace')
    stderr = completed.stderr.decode('utf-8', errors='replace')

    if completed.returncode != 0:
        raise ExternalToolFailed(name, completed.returncode, stdout, stderr)

    if logger and stdout.strip():
        logger.debug(stdout.strip(), binary=name, duration_seconds=round(elapsed_time, 3))

    return CommandResult(
        binary=name,
        args=argv,
        returncode=completed.returncode,
        stdout=stdout,
        stderr=stderr,
        duration_seconds=elapsed_time,
    )
