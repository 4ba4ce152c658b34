"""Unit tests for the provisioning context and settings file."""

from pathlib import Path

import pytest

from provisioner.context import ProvisionContext, load_settings
from provisioner.errors import ConfigError, UnknownUserError
from provisioner.platform import users


class TestDefaults:
    """Paths derived from the project directory."""

    def test_project_relative_defaults(self, tmp_path):
        ctx = ProvisionContext(project_dir=tmp_path, user="alice")
        assert ctx.playbook_path == tmp_path / "setup.yml"
        assert ctx.inventory_path == tmp_path / "inventory.yml"
        assert ctx.os_vars_dir == tmp_path / "os_vars"
        assert ctx.sudoers_file == Path("/etc/sudoers.d/ansible-provision")
        assert ctx.os_release_path == Path("/etc/os-release")

    def test_resolve_relative(self, tmp_path):
        ctx = ProvisionContext(project_dir=tmp_path, user="alice")
        assert ctx.resolve("os_vars/x.yml") == tmp_path / "os_vars" / "x.yml"

    def test_resolve_absolute(self, tmp_path):
        ctx = ProvisionContext(project_dir=tmp_path, user="alice")
        assert ctx.resolve("/srv/vars.yml") == Path("/srv/vars.yml")

    def test_resolve_keeps_tilde(self, tmp_path):
        ctx = ProvisionContext(project_dir=tmp_path, user="alice")
        assert ctx.resolve("~/vars.yml") == tmp_path / "~" / "vars.yml"


class TestFromEnvironment:
    """Building the context from the process environment."""

    def test_sudo_user_wins(self, project_dir):
        ctx = ProvisionContext.from_environment(
            environ={"SUDO_USER": "alice", "USER": "root", "PROVISION_PROJECT_DIR": str(project_dir)},
        )
        assert ctx.user == "alice"
        assert ctx.project_dir == project_dir.resolve()

    def test_user_fallback(self, project_dir):
        ctx = ProvisionContext.from_environment(environ={"USER": "bob"}, project_dir=project_dir)
        assert ctx.user == "bob"

    def test_settings_file_applied(self, project_dir):
        (project_dir / "provision.yml").write_text(
            "playbook: playbooks/main.yml\n"
            "sudoers_file: /tmp/grant\n"
            "ansible_verbosity: 2\n"
        )
        ctx = ProvisionContext.from_environment(environ={"USER": "bob"}, project_dir=project_dir)
        assert ctx.playbook_path == project_dir.resolve() / "playbooks" / "main.yml"
        assert ctx.sudoers_file == Path("/tmp/grant")
        assert ctx.ansible_verbosity == 2
        assert ctx.inventory_path == project_dir.resolve() / "inventory.yml"

    def test_unresolvable_user(self, project_dir, monkeypatch):
        def no_entry(environ=None):
            raise KeyError("getpwuid(): uid not found")

        monkeypatch.setattr(users, "get_invoking_user", no_entry)
        with pytest.raises(UnknownUserError, match="uid "):
            ProvisionContext.from_environment(environ={}, project_dir=project_dir)

    def test_bad_verbosity_names_custom_settings_file(self, project_dir):
        (project_dir / "custom.yml").write_text("ansible_verbosity: loud\n")
        with pytest.raises(ConfigError) as exc_info:
            ProvisionContext.from_environment(
                environ={"USER": "bob", "PROVISION_CONFIG": "custom.yml"},
                project_dir=project_dir,
            )
        assert "custom.yml" in str(exc_info.value)
        assert "provision.yml" not in str(exc_info.value)

    def test_explicit_settings_file_must_exist(self, project_dir):
        with pytest.raises(ConfigError, match="file not found"):
            ProvisionContext.from_environment(
                environ={"USER": "bob", "PROVISION_CONFIG": "missing.yml"},
                project_dir=project_dir,
            )


class TestLoadSettings:
    """Parsing provision.yml."""

    def test_missing_optional_file(self, tmp_path):
        assert load_settings(tmp_path / "provision.yml") == {}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "provision.yml"
        path.write_text("")
        assert load_settings(path) == {}

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "provision.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_settings(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "provision.yml"
        path.write_text("playbook: [unclosed\n")
        with pytest.raises(ConfigError):
            load_settings(path)

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "provision.yml"
        path.write_text("galaxy: true\n")
        with pytest.raises(ConfigError, match="unknown keys: galaxy"):
            load_settings(path)

    def test_bad_verbosity(self, tmp_path):
        ctx = ProvisionContext(project_dir=tmp_path, user="alice")
        with pytest.raises(ConfigError, match="ansible_verbosity"):
            ctx.with_settings({"ansible_verbosity": "loud"})
