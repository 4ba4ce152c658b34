# Copyright (c) 2024 Workstation Provisioner Contributors
# MIT License

"""
Temporary passwordless sudo for the invoking user.

The grant is a single sudoers.d rule.  It is written, checked with the
sudoers syntax checker and only kept when the check passes; any failure
between writing and checking removes it again.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from jinja2 import Environment, StrictUndefined

from provisioner.errors import FileAccessError, InvalidGrantSyntaxError, UnknownUserError
from provisioner.platform import fs, proc, users

if TYPE_CHECKING:
    from provisioner.console import Console
    from provisioner.context import ProvisionContext

GRANT_MODE = 0o440

GRANT_TEMPLATE = "{{ user }} ALL=(ALL) NOPASSWD: ALL\n"

_env = Environment(undefined=StrictUndefined, keep_trailing_newline=True, autoescape=False)


def render_grant(user: str) -> str:
    """Render the sudoers rule for one user."""
    return _env.from_string(GRANT_TEMPLATE).render(user=user)


class ElevationManager:
    """Creates and removes the temporary sudoers grant."""

    def __init__(self, ctx: "ProvisionContext", console: "Console") -> None:
        self.ctx = ctx
        self.console = console

    @property
    def path(self) -> str:
        return str(self.ctx.sudoers_file)

    def grant(self, user: str) -> None:
        """
        Grant passwordless sudo to ``user``.

        Raises:
            UnknownUserError: If the user does not exist
            InvalidGrantSyntaxError: If the checker rejects the file
            FileAccessError: If the grant cannot be written
        """
        self.console.info(f"Configuring passwordless sudo for user: {user}")

        if not users.user_exists(user):
            raise UnknownUserError(user)

        committed = False
        try:
            try:
                fs.write_private_file(self.path, render_grant(user), GRANT_MODE)
            except OSError as e:
                raise FileAccessError("write", self.path, e) from e
            self._validate()
            committed = True
        finally:
            if not committed:
                fs.remove_if_exists(self.path)

        self.console.success(f"Sudoers configured: {self.path}")
        self.console.warn(f"Remember to remove this after provisioning: sudo rm {self.path}")

    def _validate(self) -> None:
        argv = (*self.ctx.sudoers_checker, self.path)
        self.console.command(proc.quote_command(argv))
        try:
            result = proc.run(argv)
        except OSError as e:
            raise InvalidGrantSyntaxError(self.path, str(e)) from e

        if result.failed:
            output = (result.stderr or result.stdout).strip()
            raise InvalidGrantSyntaxError(self.path, output or None)

    def revoke(self) -> bool:
        """Remove the grant if present. Returns True if a file was removed."""
        try:
            removed = fs.remove_if_exists(self.path)
        except OSError as e:
            raise FileAccessError("remove", self.path, e) from e
        if removed:
            self.console.success(f"Removed temporary sudoers file: {self.path}")
        return removed
