"""Unit tests for user lookups."""

from provisioner.platform import users


class TestInvokingUser:
    """Resolution of the user behind sudo."""

    def test_sudo_user_preferred(self):
        assert users.get_invoking_user({"SUDO_USER": "alice", "USER": "root"}) == "alice"

    def test_user_fallback(self):
        assert users.get_invoking_user({"USER": "bob"}) == "bob"

    def test_process_account_fallback(self):
        assert users.get_invoking_user({}) == users.get_current_user()


class TestLookups:
    """Account lookups against the passwd database."""

    def test_current_user_exists(self):
        assert users.user_exists(users.get_current_user())

    def test_unknown_user(self):
        assert not users.user_exists("no-such-user-provisioner-test")

    def test_root_exists(self):
        assert users.user_exists("root")
