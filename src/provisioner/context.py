# Copyright (c) 2024 Workstation Provisioner Contributors
# MIT License

"""
Provisioning context and request.

Process-wide facts (who we act for, where the project lives, where the
grant file goes) are collected once into a ``ProvisionContext`` and
passed explicitly to every step.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from provisioner.errors import ConfigError, UnknownUserError
from provisioner.platform import users

SUDOERS_FILE = "/etc/sudoers.d/ansible-provision"
OS_RELEASE_FILE = "/etc/os-release"
SETTINGS_FILE = "provision.yml"

PLAYBOOK_NAME = "setup.yml"
INVENTORY_NAME = "inventory.yml"
OS_VARS_DIR = "os_vars"

# Keys accepted in provision.yml and the context field each one sets
_PATH_SETTINGS = {
    "playbook": "playbook_path",
    "inventory": "inventory_path",
    "os_vars_dir": "os_vars_dir",
    "sudoers_file": "sudoers_file",
    "os_release": "os_release_path",
}


@dataclass(frozen=True)
class ProvisioningRequest:
    """What the caller asked for on the command line."""

    extra_vars_path: Optional[str] = None
    skip_packages: bool = False
    skip_sudoers: bool = False
    cleanup_only: bool = False
    verbose: bool = False


@dataclass(frozen=True)
class ProvisionContext:
    """
    Everything the provisioning steps need to know about the host.

    Attributes:
        project_dir: Directory holding the playbook, inventory and os_vars
        user: Account the playbook runs as and the grant is issued to
        sudoers_file: Location of the temporary grant
        os_release_path: Distribution descriptor to classify
        playbook_path: Playbook passed to ansible-playbook
        inventory_path: Inventory passed to ansible-playbook
        os_vars_dir: Directory scanned for extra-vars files in the help text
        sudoers_checker: Argument prefix that validates a sudoers file
        ansible_verbosity: Number of ``-v`` flags given to ansible-playbook
    """

    project_dir: Path
    user: str
    sudoers_file: Path = Path(SUDOERS_FILE)
    os_release_path: Path = Path(OS_RELEASE_FILE)
    playbook_path: Optional[Path] = None
    inventory_path: Optional[Path] = None
    os_vars_dir: Optional[Path] = None
    sudoers_checker: Tuple[str, ...] = ("visudo", "-c", "-f")
    ansible_verbosity: int = 1

    def __post_init__(self) -> None:
        # Frozen: defaults derived from project_dir are set via object.__setattr__
        if self.playbook_path is None:
            object.__setattr__(self, "playbook_path", self.project_dir / PLAYBOOK_NAME)
        if self.inventory_path is None:
            object.__setattr__(self, "inventory_path", self.project_dir / INVENTORY_NAME)
        if self.os_vars_dir is None:
            object.__setattr__(self, "os_vars_dir", self.project_dir / OS_VARS_DIR)

    def resolve(self, path: str | os.PathLike[str]) -> Path:
        """Make a path absolute relative to the project directory."""
        p = Path(path)
        if p.is_absolute():
            return p
        return self.project_dir / p

    @classmethod
    def from_environment(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        project_dir: Optional[str | os.PathLike[str]] = None,
    ) -> "ProvisionContext":
        """
        Build the context from environment variables and provision.yml.

        PROVISION_PROJECT_DIR selects the project (default: current
        directory) and PROVISION_CONFIG points at an alternative
        settings file.
        """
        env = os.environ if environ is None else environ

        if project_dir is None:
            project_dir = env.get("PROVISION_PROJECT_DIR") or os.getcwd()
        base = Path(project_dir).resolve()

        try:
            user = users.get_invoking_user(env)
        except KeyError:
            # No USER and no passwd entry for our uid
            raise UnknownUserError(f"uid {os.getuid()}")
        ctx = cls(project_dir=base, user=user)

        settings_path = env.get("PROVISION_CONFIG")
        if settings_path:
            source = ctx.resolve(settings_path)
            settings = load_settings(source, required=True)
        else:
            source = base / SETTINGS_FILE
            settings = load_settings(source, required=False)

        return ctx.with_settings(settings, source=str(source))

    def with_settings(
        self,
        settings: Mapping[str, Any],
        source: str = SETTINGS_FILE,
    ) -> "ProvisionContext":
        """Return a copy with values from a settings mapping applied."""
        changes: Dict[str, Any] = {}
        for key, attr in _PATH_SETTINGS.items():
            if settings.get(key):
                changes[attr] = self.resolve(str(settings[key]))

        if "ansible_verbosity" in settings:
            try:
                verbosity = int(settings["ansible_verbosity"])
            except (TypeError, ValueError):
                raise ConfigError(
                    source,
                    f"ansible_verbosity must be an integer, got {settings['ansible_verbosity']!r}",
                )
            changes["ansible_verbosity"] = max(verbosity, 0)

        return replace(self, **changes) if changes else self


def load_settings(path: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load a YAML settings mapping.

    A missing optional file yields an empty mapping.
    """
    if not path.is_file():
        if required:
            raise ConfigError(str(path), "file not found")
        return {}

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(str(path), str(e)) from e
    except OSError as e:
        raise ConfigError(str(path), e.strerror or str(e)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(str(path), "expected a mapping at the top level")

    unknown = {str(key) for key in data} - set(_PATH_SETTINGS) - {"ansible_verbosity"}
    if unknown:
        raise ConfigError(str(path), f"unknown keys: {', '.join(sorted(unknown))}")

    return data
