# Copyright (c) 2024 Workstation Provisioner Contributors
# MIT License

"""
Distribution detection.

Reads the os-release descriptor and maps it to one of the package-manager
families the installer knows how to drive.
"""

from __future__ import annotations

import enum
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Tuple, TYPE_CHECKING

from provisioner.errors import UnsupportedOSError
from provisioner.platform import fs

if TYPE_CHECKING:
    from provisioner.console import Console
    from provisioner.context import ProvisionContext


class OSFamily(str, enum.Enum):
    """Package-manager family of a distribution."""

    DEBIAN = "debian"
    RHEL = "rhel"
    ARCH = "arch"
    SUSE = "suse"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class DistributionIdentity:
    """Identity fields from /etc/os-release."""

    id: str
    id_like: Tuple[str, ...] = ()
    version: str = ""
    pretty_name: str = ""

    @property
    def display_name(self) -> str:
        return self.pretty_name or self.id


KNOWN_DISTRIBUTIONS: Dict[str, OSFamily] = {
    "ubuntu": OSFamily.DEBIAN,
    "pop": OSFamily.DEBIAN,
    "linuxmint": OSFamily.DEBIAN,
    "elementary": OSFamily.DEBIAN,
    "zorin": OSFamily.DEBIAN,
    "debian": OSFamily.DEBIAN,
    "fedora": OSFamily.RHEL,
    "rhel": OSFamily.RHEL,
    "centos": OSFamily.RHEL,
    "rocky": OSFamily.RHEL,
    "almalinux": OSFamily.RHEL,
    "oracle": OSFamily.RHEL,
    "arch": OSFamily.ARCH,
    "manjaro": OSFamily.ARCH,
    "endeavouros": OSFamily.ARCH,
    "sles": OSFamily.SUSE,
}

# opensuse-leap, opensuse-tumbleweed, ...
_SUSE_ID_PREFIX = "opensuse"

# ID_LIKE fallback, checked in this order
ID_LIKE_KEYWORDS: Tuple[Tuple[OSFamily, Tuple[str, ...]], ...] = (
    (OSFamily.DEBIAN, ("debian", "ubuntu")),
    (OSFamily.RHEL, ("rhel", "fedora")),
    (OSFamily.ARCH, ("arch",)),
    (OSFamily.SUSE, ("suse",)),
)


def _unquote(value: str) -> str:
    try:
        parts = shlex.split(value)
    except ValueError:
        return value.strip("\"'")
    return " ".join(parts)


def parse_os_release(content: str) -> DistributionIdentity:
    """Parse os-release text into a DistributionIdentity."""
    fields: Dict[str, str] = {}
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        fields[key.strip()] = _unquote(value.strip())

    os_id = fields.get("ID") or "unknown"
    return DistributionIdentity(
        id=os_id,
        id_like=tuple(fields.get("ID_LIKE", "").split()),
        version=fields.get("VERSION_ID", ""),
        pretty_name=fields.get("PRETTY_NAME") or os_id,
    )


def read_distribution_identity(path: str | Path) -> DistributionIdentity:
    """Read and parse an os-release file."""
    if not fs.is_file(path):
        raise UnsupportedOSError(f"Cannot detect OS: {path} not found")
    try:
        content = fs.read_file(path)
    except (OSError, UnicodeDecodeError) as e:
        reason = e.strerror if isinstance(e, OSError) and e.strerror else str(e)
        raise UnsupportedOSError(f"Cannot detect OS: cannot read {path}: {reason}") from e
    return parse_os_release(content)


def classify(identity: DistributionIdentity) -> OSFamily:
    """
    Map a distribution identity to its family.

    The primary id is looked up first; ID_LIKE is only consulted when the
    id is not a known distribution.

    Raises:
        UnsupportedOSError: If neither id nor ID_LIKE match a family
    """
    os_id = identity.id.lower()
    family = KNOWN_DISTRIBUTIONS.get(os_id)
    if family is not None:
        return family
    if os_id.startswith(_SUSE_ID_PREFIX):
        return OSFamily.SUSE

    id_like = " ".join(identity.id_like).lower()
    for family, keywords in ID_LIKE_KEYWORDS:
        if any(keyword in id_like for keyword in keywords):
            return family

    raise UnsupportedOSError(
        f"Unsupported OS: {identity.id} (ID_LIKE: {' '.join(identity.id_like)})"
    )


def detect(ctx: "ProvisionContext", console: "Console") -> Tuple[DistributionIdentity, OSFamily]:
    """Read the host's identity, classify it and report the result."""
    identity = read_distribution_identity(ctx.os_release_path)
    family = classify(identity)
    console.info(f"Detected OS: {identity.display_name}")
    console.info(f"OS Family: {family}")
    return identity, family
