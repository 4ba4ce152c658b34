"""
Platform layer for host-level operations.

Thin wrappers around processes, accounts, files and the terminal so the
provisioning steps can be exercised without touching the real host.
"""
