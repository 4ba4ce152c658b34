# Copyright (c) 2024 Workstation Provisioner Contributors
# MIT License

"""
ansible-playbook invocation.

The playbook always runs as the invoking user via ``sudo -u``, never as
root, with the project inventory and one extra-vars file.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, TYPE_CHECKING

from provisioner.errors import ExternalToolFailure, MissingFileError
from provisioner.platform import fs, proc

if TYPE_CHECKING:
    from provisioner.console import Console
    from provisioner.context import ProvisionContext

ANSIBLE_PLAYBOOK = "ansible-playbook"


def build_command(
    extra_vars_path: Path,
    playbook_path: Path,
    inventory_path: Path,
    run_as_user: str,
    verbosity: int = 1,
) -> List[str]:
    """Build the argv that runs the playbook as ``run_as_user``."""
    argv = [
        "sudo", "-u", run_as_user,
        ANSIBLE_PLAYBOOK,
        "-i", str(inventory_path),
        str(playbook_path),
        "-e", f"@{extra_vars_path}",
    ]
    if verbosity > 0:
        argv.append("-" + "v" * verbosity)
    return argv


def check_inputs(extra_vars_path: Path, playbook_path: Path, inventory_path: Path) -> None:
    """Raise MissingFileError for the first input that does not exist."""
    for kind, path in (
        ("Playbook", playbook_path),
        ("Inventory", inventory_path),
        ("Extra vars file", extra_vars_path),
    ):
        if not fs.is_file(path):
            raise MissingFileError(kind, str(path))


def run(
    extra_vars_path: Path,
    playbook_path: Path,
    inventory_path: Path,
    run_as_user: str,
    console: "Console",
    verbosity: int = 1,
) -> None:
    """
    Run the playbook.

    Raises:
        MissingFileError: Before anything is started, if an input is absent
        ExternalToolFailure: If ansible-playbook exits non-zero
    """
    check_inputs(extra_vars_path, playbook_path, inventory_path)

    console.info("Running Ansible playbook...")
    console.info(f"  Playbook: {playbook_path}")
    console.info(f"  Inventory: {inventory_path}")
    console.info(f"  Extra vars: {extra_vars_path}")

    argv = build_command(extra_vars_path, playbook_path, inventory_path, run_as_user, verbosity)
    console.command(proc.quote_command(argv))
    try:
        result = proc.run(argv, capture_output=False)
    except OSError as e:
        raise ExternalToolFailure(str(e), argv, proc.launch_failure_status(e)) from e

    if result.failed:
        raise ExternalToolFailure("Playbook run failed", argv, result.returncode)

    console.success("Playbook completed successfully")


def run_for(ctx: "ProvisionContext", extra_vars: str, console: "Console") -> None:
    """Run the project's playbook with an extra-vars file given on the command line."""
    run(
        ctx.resolve(extra_vars),
        ctx.playbook_path,
        ctx.inventory_path,
        ctx.user,
        console,
        verbosity=ctx.ansible_verbosity,
    )


def available_extra_vars(ctx: "ProvisionContext") -> List[str]:
    """List extra-vars files under os_vars, relative to the project directory."""
    if not ctx.os_vars_dir.is_dir():
        return []
    found = []
    for path in sorted(ctx.os_vars_dir.glob("*.yml")):
        if path.is_file():
            try:
                found.append(str(path.relative_to(ctx.project_dir)))
            except ValueError:
                found.append(str(path))
    return found


def manual_command(ctx: "ProvisionContext") -> str:
    """The command a user can run by hand once the host is prepared."""
    return (
        f'{ANSIBLE_PLAYBOOK} -i {ctx.inventory_path.name} {ctx.playbook_path.name} '
        f'-e "@{ctx.os_vars_dir.name}/<your-os>_extra-vars.yml"'
    )
