# Copyright (c) 2024 Workstation Provisioner Contributors
# MIT License

"""
Provision CLI

Prepares the host for the Ansible workstation playbook and optionally runs it.

Usage:
    sudo provision
    sudo provision -e os_vars/kubuntu_25.10_extra-vars.yml
    sudo provision --cleanup
"""

from __future__ import annotations

import argparse
import sys
from typing import List, NoReturn, Optional

from provisioner import osinfo, packages, playbook
from provisioner.console import Console
from provisioner.context import ProvisionContext, ProvisioningRequest
from provisioner.elevation import ElevationManager
from provisioner.errors import ExitCode, NotRootError, ProvisionError, UnknownOptionError
from provisioner.platform import users


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting with status 2."""

    def error(self, message: str) -> NoReturn:
        raise UnknownOptionError(message)


def create_parser(ctx: Optional[ProvisionContext] = None) -> argparse.ArgumentParser:
    """Create the argument parser."""
    epilog = """
Examples:
  # Just install dependencies and configure sudoers
  sudo provision

  # Install deps and run playbook with extra vars
  sudo provision -e os_vars/kubuntu_25.10_extra-vars.yml

  # Cleanup after provisioning
  sudo provision --cleanup
"""
    if ctx is not None:
        files = playbook.available_extra_vars(ctx)
        if files:
            epilog += "\nAvailable extra-vars files:\n"
            epilog += "".join(f"  - {name}\n" for name in files)

    parser = _ArgumentParser(
        prog="provision",
        usage="sudo %(prog)s [OPTIONS]",
        description="Prepare system for Ansible workstation provisioning.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
        add_help=False,
        allow_abbrev=False,
    )

    parser.add_argument(
        "-h", "--help",
        action="store_true",
        help="Show this help message",
    )

    parser.add_argument(
        "-e", "--extra-vars",
        dest="extra_vars",
        metavar="FILE",
        default=None,
        help="Run playbook with specified extra-vars file",
    )

    parser.add_argument(
        "-c", "--cleanup",
        action="store_true",
        help="Remove temporary sudoers file and exit",
    )

    parser.add_argument(
        "-s", "--skip-packages",
        dest="skip_packages",
        action="store_true",
        help="Skip package installation",
    )

    parser.add_argument(
        "-n", "--no-sudoers",
        dest="skip_sudoers",
        action="store_true",
        help="Skip sudoers configuration",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Echo every command before running it",
    )

    return parser


def parse_request(parsed: argparse.Namespace) -> ProvisioningRequest:
    """Build the request from parsed arguments."""
    if parsed.extra_vars is not None and not parsed.extra_vars.strip():
        raise UnknownOptionError("Missing argument for --extra-vars")
    return ProvisioningRequest(
        extra_vars_path=parsed.extra_vars,
        skip_packages=parsed.skip_packages,
        skip_sudoers=parsed.skip_sudoers,
        cleanup_only=parsed.cleanup,
        verbose=parsed.verbose,
    )


def provision(request: ProvisioningRequest, ctx: ProvisionContext, console: Console) -> int:
    """Run the provisioning flow. Errors propagate as ProvisionError."""
    if not users.is_root():
        raise NotRootError()

    elevation = ElevationManager(ctx, console)

    if request.cleanup_only:
        elevation.revoke()
        return ExitCode.SUCCESS

    console.banner("Workstation Provisioning Setup")

    identity, family = osinfo.detect(ctx, console)

    if not request.skip_packages:
        packages.install(family, console, identity)
    else:
        console.info("Skipping package installation")

    if not request.skip_sudoers:
        elevation.grant(ctx.user)
    else:
        console.info("Skipping sudoers configuration")

    if request.extra_vars_path:
        playbook.run_for(ctx, request.extra_vars_path, console)
        elevation.revoke()
    else:
        console.blank()
        console.info("Setup complete. To run the playbook manually:")
        console.blank()
        console.line(f"    {playbook.manual_command(ctx)}")
        console.blank()
        console.warn("Don't forget to cleanup after provisioning:")
        console.blank()
        console.line(f"    sudo rm {ctx.sudoers_file}")
        console.blank()

    return ExitCode.SUCCESS


def main(args: List[str] | None = None) -> int:
    """Main entrypoint for the provision CLI."""
    console = Console()
    try:
        # Help must work even when the context cannot be built
        ctx: Optional[ProvisionContext] = None
        ctx_error: Optional[ProvisionError] = None
        try:
            ctx = ProvisionContext.from_environment()
        except ProvisionError as e:
            ctx_error = e

        parser = create_parser(ctx)
        parsed = parser.parse_args(args)

        if parsed.help:
            parser.print_help()
            return ExitCode.SUCCESS

        if ctx_error is not None:
            raise ctx_error

        request = parse_request(parsed)
        console.verbose = request.verbose
        return provision(request, ctx, console)

    except ProvisionError as e:
        console.error(str(e))
        return e.exit_code
    except OSError as e:
        console.error(str(e))
        return ExitCode.GENERIC_ERROR
    except KeyboardInterrupt:
        console.blank()
        console.error("Interrupted")
        return ExitCode.KEYBOARD_INTERRUPT


if __name__ == "__main__":
    sys.exit(main())
