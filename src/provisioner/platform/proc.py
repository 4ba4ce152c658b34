"""
Process execution.

Runs package managers, the sudoers checker and ansible-playbook, always
as an argument vector and never through a shell.
"""

import os
import shlex
import subprocess
from typing import Optional, Mapping, Sequence


class ProcessResult:
    """Result of a process execution."""

    def __init__(
        self,
        returncode: int,
        stdout: str,
        stderr: str,
        command: Sequence[str],
    ):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.command = list(command)

    @property
    def success(self) -> bool:
        """Check if process exited successfully."""
        return self.returncode == 0

    @property
    def failed(self) -> bool:
        """Check if process failed."""
        return self.returncode != 0

    def __repr__(self) -> str:
        return f"ProcessResult(returncode={self.returncode}, stdout={len(self.stdout)} chars)"


def quote_command(args: Sequence[str]) -> str:
    """Quote a command sequence for display or copy-paste into a shell."""
    return " ".join(shlex.quote(str(arg)) for arg in args)


def run(
    cmd: Sequence[str],
    *,
    cwd: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    check: bool = False,
    capture_output: bool = True,
    encoding: str = "utf-8",
) -> ProcessResult:
    """
    Run a command and return the result.

    Args:
        cmd: Argument vector
        cwd: Working directory
        env: Environment variables (merged with current env)
        check: Raise exception on non-zero exit
        capture_output: Capture stdout/stderr; when False the child
            writes straight to the terminal

    Returns:
        ProcessResult with returncode, stdout, stderr

    Raises:
        FileNotFoundError: If the program does not exist
        subprocess.CalledProcessError: If check=True and process fails
    """
    run_env = dict(os.environ)
    if env:
        run_env.update(env)

    kwargs: dict = {
        "cwd": cwd,
        "env": run_env,
    }

    if capture_output:
        kwargs["stdout"] = subprocess.PIPE
        kwargs["stderr"] = subprocess.PIPE

    try:
        result = subprocess.run(list(cmd), **kwargs)
    except FileNotFoundError as e:
        raise FileNotFoundError(f"Command not found: {cmd[0]}") from e

    stdout = ""
    stderr = ""
    if capture_output:
        stdout = result.stdout.decode(encoding, errors="replace") if result.stdout else ""
        stderr = result.stderr.decode(encoding, errors="replace") if result.stderr else ""

    proc_result = ProcessResult(
        returncode=result.returncode,
        stdout=stdout,
        stderr=stderr,
        command=cmd,
    )

    if check and proc_result.failed:
        raise subprocess.CalledProcessError(
            result.returncode,
            cmd,
            result.stdout,
            result.stderr,
        )

    return proc_result


def launch_failure_status(error: OSError) -> int:
    """Shell-style exit status for a program that could not be started."""
    return 127 if isinstance(error, FileNotFoundError) else 126
