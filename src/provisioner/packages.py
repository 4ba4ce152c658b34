# Copyright (c) 2024 Workstation Provisioner Contributors
# MIT License

"""
Bootstrap package installation.

Each family maps to a fixed sequence of package-manager invocations: a
repository refresh followed by one install of the bootstrap set.  Package
names differ between families; the installed capabilities do not.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple, TYPE_CHECKING

from provisioner.errors import PackageManagerError
from provisioner.osinfo import DistributionIdentity, OSFamily
from provisioner.platform import proc

if TYPE_CHECKING:
    from provisioner.console import Console


@dataclass(frozen=True)
class InstallStep:
    """
    One package-manager invocation.

    Attributes:
        description: Progress line printed before running
        command: Package-manager argv without package names
        packages: Package names appended to the command
        allow_failure: Continue when the command exits non-zero
        skip_for: Distribution ids that do not need this step
    """

    description: str
    command: Tuple[str, ...]
    packages: Tuple[str, ...] = ()
    allow_failure: bool = False
    skip_for: Tuple[str, ...] = ()

    @property
    def argv(self) -> Tuple[str, ...]:
        return self.command + self.packages

    def applies_to(self, identity: Optional[DistributionIdentity]) -> bool:
        return identity is None or identity.id not in self.skip_for


DEBIAN_PACKAGES = (
    "ansible",
    "ansible-lint",
    "git",
    "python3",
    "python3-pip",
    "python3-venv",
    "curl",
    "wget",
    "jq",
    "tree",
    "sshpass",
    "coreutils",
    "ca-certificates",
    "gnupg",
    "lsb-release",
    "software-properties-common",
)

RHEL_PACKAGES = (
    "ansible",
    "ansible-lint",
    "git",
    "python3",
    "python3-pip",
    "curl",
    "wget",
    "jq",
    "tree",
    "sshpass",
    "coreutils",
    "ca-certificates",
)

ARCH_PACKAGES = (
    "ansible",
    "ansible-lint",
    "git",
    "python",
    "python-pip",
    "curl",
    "wget",
    "jq",
    "tree",
    "sshpass",
    "coreutils",
    "ca-certificates",
)

# ansible-lint is not packaged for openSUSE
SUSE_PACKAGES = (
    "ansible",
    "git",
    "python3",
    "python3-pip",
    "curl",
    "wget",
    "jq",
    "tree",
    "sshpass",
    "coreutils",
    "ca-certificates",
)


INSTALL_PLANS: Dict[OSFamily, Tuple[InstallStep, ...]] = {
    OSFamily.DEBIAN: (
        InstallStep("Updating apt cache...", ("apt-get", "update", "-qq")),
        InstallStep("Installing packages...", ("apt-get", "install", "-y"), DEBIAN_PACKAGES),
    ),
    OSFamily.RHEL: (
        InstallStep(
            "Installing EPEL repository (if needed)...",
            ("dnf", "install", "-y"),
            ("epel-release",),
            allow_failure=True,
            skip_for=("fedora",),
        ),
        InstallStep("Installing packages...", ("dnf", "install", "-y"), RHEL_PACKAGES),
    ),
    OSFamily.ARCH: (
        InstallStep("Updating pacman database...", ("pacman", "-Sy", "--noconfirm")),
        InstallStep(
            "Installing packages...",
            ("pacman", "-S", "--noconfirm", "--needed"),
            ARCH_PACKAGES,
        ),
    ),
    OSFamily.SUSE: (
        InstallStep("Refreshing zypper repositories...", ("zypper", "refresh")),
        InstallStep("Installing packages...", ("zypper", "install", "-y"), SUSE_PACKAGES),
    ),
}


def plan_for(
    family: OSFamily,
    identity: Optional[DistributionIdentity] = None,
) -> Tuple[InstallStep, ...]:
    """Return the steps that apply to a family (and distribution, if given)."""
    return tuple(step for step in INSTALL_PLANS[family] if step.applies_to(identity))


def install(
    family: OSFamily,
    console: "Console",
    identity: Optional[DistributionIdentity] = None,
) -> None:
    """
    Install the bootstrap package set for a family.

    Raises:
        PackageManagerError: On the first step that fails without
            allow_failure; its exit status becomes the process exit code
    """
    for step in plan_for(family, identity):
        console.info(step.description)
        console.command(proc.quote_command(step.argv))
        try:
            result = proc.run(step.argv, capture_output=False)
        except OSError as e:
            if step.allow_failure:
                console.warn(str(e))
                continue
            raise PackageManagerError(str(e), step.argv, proc.launch_failure_status(e)) from e

        if result.failed:
            if step.allow_failure:
                console.warn(f"{step.argv[0]} exited with status {result.returncode}, continuing")
                continue
            raise PackageManagerError(
                f"Package manager command failed: {proc.quote_command(step.argv)}",
                step.argv,
                result.returncode,
            )

    console.success("Packages installed successfully")
