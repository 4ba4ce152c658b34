"""
Shared fixtures for provisioner tests.
"""

import io
from pathlib import Path
from typing import List

import pytest

from provisioner.console import Console
from provisioner.context import ProvisionContext
from provisioner.platform import proc


class RecordingRunner:
    """Stands in for proc.run and records every argv it receives."""

    def __init__(self, returncodes=None):
        self.calls: List[List[str]] = []
        self.returncodes = dict(returncodes or {})

    def __call__(self, cmd, **kwargs):
        argv = [str(a) for a in cmd]
        self.calls.append(argv)
        rc = self.returncodes.get(argv[0], 0)
        return proc.ProcessResult(returncode=rc, stdout="", stderr="", command=argv)

    def programs(self) -> List[str]:
        return [argv[0] for argv in self.calls]


@pytest.fixture(autouse=True)
def _no_color(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    monkeypatch.delenv("PROVISION_CONFIG", raising=False)
    monkeypatch.delenv("PROVISION_PROJECT_DIR", raising=False)


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A project checkout with playbook, inventory and one os_vars file."""
    root = tmp_path / "project"
    (root / "os_vars").mkdir(parents=True)
    (root / "setup.yml").write_text("- hosts: localhost\n  roles: []\n")
    (root / "inventory.yml").write_text("all:\n  hosts:\n    localhost:\n")
    (root / "os_vars" / "fedora_42_extra-vars.yml").write_text("packages: []\n")
    return root


@pytest.fixture
def os_release(tmp_path: Path) -> Path:
    path = tmp_path / "os-release"
    path.write_text(
        'NAME="Fedora Linux"\n'
        "ID=fedora\n"
        'VERSION_ID=42\n'
        'PRETTY_NAME="Fedora Linux 42 (Workstation Edition)"\n'
    )
    return path


@pytest.fixture
def ctx(project_dir: Path, tmp_path: Path, os_release: Path) -> ProvisionContext:
    sudoers_dir = tmp_path / "sudoers.d"
    sudoers_dir.mkdir()
    return ProvisionContext(
        project_dir=project_dir,
        user="alice",
        sudoers_file=sudoers_dir / "ansible-provision",
        os_release_path=os_release,
    )


@pytest.fixture
def console():
    return Console(out=io.StringIO(), err=io.StringIO(), color=False)


@pytest.fixture
def runner(monkeypatch) -> RecordingRunner:
    fake = RecordingRunner()
    monkeypatch.setattr(proc, "run", fake)
    return fake
