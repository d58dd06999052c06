"""Invocation of the native compiler toolchain.

Commands are run as blocking child processes. Their outcome is returned as a
:class:`CommandResult` value; only :class:`ToolchainInvoker` turns an
unsuccessful result into a :class:`ToolchainFailure`.
"""

from __future__ import annotations

import pathlib
import subprocess
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Union

from tonpack.core.logging_manager import get_logger
from tonpack.utils.exceptions import ToolchainFailure


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one child process.

    Attributes:
        command: Command line that was run
        returncode: Exit status, None if the process could not be launched
        output: Combined stdout and stderr
        launched: Whether the executable could be started at all
    """

    command: List[str]
    returncode: Optional[int]
    output: str = ""
    launched: bool = True

    @property
    def ok(self) -> bool:
        return self.launched and self.returncode == 0


def run_command(
        command: Sequence[str],
        cwd: Optional[Union[str, pathlib.Path]] = None,
        logger: Optional[Any] = None,
) -> CommandResult:
    """Run a command to completion and capture its output.

    Args:
        command: Program and arguments
        cwd: Working directory for the child process
        logger: Logger receiving each output line at debug level

    Returns:
        CommandResult describing the run
    """
    logger = logger or get_logger("tonpack.toolchain")
    command = list(command)
    lines: List[str] = []

    try:
        process = subprocess.Popen(
            command,
            cwd=str(cwd) if cwd is not None else None,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            bufsize=1,
        )
    except OSError as e:
        return CommandResult(command=command, returncode=None, output=str(e), launched=False)

    with process:
        for line in process.stdout:
            line = line.rstrip("\n")
            lines.append(line)
            logger.debug(line, command=command[0])
        process.wait()

    return CommandResult(command=command, returncode=process.returncode, output="\n".join(lines))


class ToolchainInvoker:
    """Runs the dependency refresh and release build commands.

    Attributes:
        update_command: Dependency lock refresh command, skipped in dev mode
        build_command: Release build command
        cwd: Working directory for both commands
        dev_mode: Whether to skip the dependency refresh
    """

    def __init__(
            self,
            update_command: Sequence[str],
            build_command: Sequence[str],
            cwd: Union[str, pathlib.Path] = ".",
            dev_mode: bool = False,
            logger: Optional[Any] = None,
    ) -> None:
        self.update_command = list(update_command)
        self.build_command = list(build_command)
        self.cwd = pathlib.Path(cwd)
        self.dev_mode = dev_mode
        self.logger = logger or get_logger("tonpack.toolchain")

    def _run(self, command: List[str]) -> CommandResult:
        self.logger.info("Running toolchain command", command=" ".join(command), cwd=str(self.cwd))
        result = run_command(command, cwd=self.cwd, logger=self.logger)

        if not result.launched:
            raise ToolchainFailure(
                f"Could not launch '{' '.join(command)}': {result.output}",
                command=command,
                output=result.output,
            )
        if result.returncode != 0:
            raise ToolchainFailure(
                f"'{' '.join(command)}' exited with status {result.returncode}",
                command=command,
                returncode=result.returncode,
                output=result.output,
            )
        return result

    def invoke(self) -> List[CommandResult]:
        """Refresh dependencies (unless in dev mode) and build in release mode.

        Returns:
            Results of the commands that were run

        Raises:
            ToolchainFailure: If a command cannot be launched or exits non-zero
        """
        results = []
        if self.dev_mode:
            self.logger.info("Development mode, skipping dependency refresh")
        else:
            results.append(self._run(self.update_command))
        results.append(self._run(self.build_command))
        return results
