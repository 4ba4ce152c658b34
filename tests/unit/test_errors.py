"""Unit tests for error classes and exit codes."""

from provisioner.errors import (
    ExitCode,
    ExternalToolFailure,
    FileAccessError,
    InvalidGrantSyntaxError,
    MissingFileError,
    NotRootError,
    PackageManagerError,
    ProvisionError,
    UnknownUserError,
)


class TestExitCodes:
    """Exit codes reported by each error."""

    def test_fatal_errors_exit_one(self):
        for error in (
            NotRootError(),
            UnknownUserError("x"),
            InvalidGrantSyntaxError("/etc/sudoers.d/x"),
            MissingFileError("Playbook", "/p"),
        ):
            assert error.exit_code == ExitCode.GENERIC_ERROR

    def test_child_status_is_propagated(self):
        assert PackageManagerError("apt failed", ["apt-get"], 100).exit_code == 100
        assert ExternalToolFailure("failed", ["ansible-playbook"], 2).exit_code == 2

    def test_signal_status_maps_to_one(self):
        assert ExternalToolFailure("killed", ["ansible-playbook"], -9).exit_code == 1


class TestMessages:
    """Error text."""

    def test_details_rendered(self):
        error = ProvisionError("top", details="more")
        assert str(error) == "top\n  Details: more"

    def test_missing_file_message(self):
        assert str(MissingFileError("Inventory", "/x/inventory.yml")) == "Inventory not found: /x/inventory.yml"

    def test_file_access_message(self):
        error = FileAccessError("remove", "/etc/sudoers.d/x", IsADirectoryError(21, "Is a directory"))
        assert str(error) == "Cannot remove /etc/sudoers.d/x: Is a directory"
        assert error.exit_code == ExitCode.GENERIC_ERROR
