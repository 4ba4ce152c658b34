# Copyright (c) 2024 Workstation Provisioner Contributors
# MIT License

"""
Provisioner: workstation bootstrap for Ansible-driven setup.

Prepares a Linux host so the project's Ansible playbook can configure it:

    - Detects the distribution family from /etc/os-release
    - Installs the bootstrap package set with apt, dnf, pacman or zypper
    - Grants temporary passwordless sudo to the invoking user
    - Runs ansible-playbook as that user, then revokes the grant

This package exposes the CLI entry point and release metadata.
"""

from __future__ import annotations

from provisioner.release import __version__, __author__, __codename__

__all__ = [
    "__version__",
    "__author__",
    "__codename__",
]
