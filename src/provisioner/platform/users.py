"""
User and privilege lookups.

Resolves the account a provisioning run acts on behalf of.  When the
command is started through sudo, that is the caller behind sudo rather
than root.
"""

import os
import pwd
from typing import Mapping, Optional


def get_current_user() -> str:
    """Get the username of the running process."""
    return pwd.getpwuid(os.getuid()).pw_name


def get_invoking_user(environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Get the user who invoked the command.

    Prefers SUDO_USER, then USER, then the account of the running process.
    """
    env = os.environ if environ is None else environ
    return env.get("SUDO_USER") or env.get("USER") or get_current_user()


def user_exists(username: str) -> bool:
    """Check if a user exists on the system."""
    try:
        pwd.getpwnam(username)
        return True
    except KeyError:
        return False


def is_root() -> bool:
    """Check if running with an effective uid of 0."""
    return os.geteuid() == 0
