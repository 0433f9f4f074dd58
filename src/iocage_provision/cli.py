# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

"""Create a VNET networked ZFS-backed FreeBSD jail with iocage.

Suitable defaults are computed for the default gateway and base release to reduce
the number of arguments in the common case. The optional --ssh flag installs and
starts an SSH service for remote management. The optional --user option creates
a user in the new jail by copying the account from the host system."""

import argparse
import os

from textwrap import dedent

from iocage_provision import __version__
from iocage_provision.actions.provision import provision_jail
from iocage_provision.errors import CommandFailed, ValidationError
from iocage_provision.models import ProvisionRequest
from iocage_provision.paths import COMMAND_NAME, get_config_path
from iocage_provision.settings import load_settings
from iocage_provision.utils import console
from iocage_provision.utils.config_parser import ConfigReadError

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 3
EXIT_EXECUTION_ERROR = 4

EPILOG = f"""examples:
  {COMMAND_NAME} ferris 192.168.0.100/24
  {COMMAND_NAME} --ssh --user jdoe homebase 10.0.0.25/24
  {COMMAND_NAME} -g 10.1.0.254 -R 13.2-RELEASE db 10.1.0.20/16"""


def build_parser():
    parser = argparse.ArgumentParser(
        prog=COMMAND_NAME,
        description=__doc__,
        allow_abbrev=False,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("name", metavar="NAME", help="name for the jail instance")
    parser.add_argument(
        "address",
        metavar="ADDRESS",
        help="IP address and prefix length for the jail instance, e.g. 10.200.0.50/24",
    )
    parser.add_argument(
        "-g",
        "--gateway",
        metavar="GATEWAY",
        help="default gateway (default: first host address of the network)",
    )
    parser.add_argument(
        "-R",
        "--release",
        metavar="RELEASE",
        help="FreeBSD release for the jail (default: release running on the host)",
    )
    parser.add_argument(
        "-s",
        "--ssh",
        action="store_true",
        help="install, enable and start an SSH service",
    )
    parser.add_argument(
        "-u",
        "--user",
        metavar="USER",
        help="user to create in the jail, copied from the host system",
    )
    parser.add_argument(
        "-t",
        "--thickjail",
        dest="thick_jail",
        action="store_true",
        default=None,
        help="create a thick jail (a full copy of the release)",
    )
    parser.add_argument(
        "-c",
        "--config",
        metavar="X",
        help="path to config file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="show the commands being run and their output",
    )

    return parser


def print_failure(result):
    error = result.error
    console.error(str(error))

    if not isinstance(error, CommandFailed):
        return

    console.eprint(f"\nCommand: {error.step.command_line()}")
    if error.stderr.strip():
        console.eprint("Output:")
        console.eoutput(error.stderr)

    if error.succeeded:
        console.eprint("\nSteps completed before the failure:")
        for step in error.succeeded:
            console.eprint(f"  {step.description}")

    name = result.request.name
    if result.cleanup is None:
        console.eprint(
            dedent(
                f"""
            Jail {name} may be left partially provisioned.
            Inspect it, or remove it with: iocage destroy {name}"""
            )
        )
    elif result.cleanup.ok:
        console.eprint(f"\nJail {name} has been destroyed.")
    else:
        console.error(f"Failed to destroy jail {name}:")
        console.eoutput(result.cleanup.stderr)


def print_summary(summary):
    print()
    print(f"Name:    {summary.name}")
    print(f"Address: {summary.address}")
    print(f"Gateway: {summary.gateway}")
    print(f"Release: {summary.release}")
    print(f"SSH:     {'enabled' if summary.ssh else 'disabled'}")
    print(f"User:    {summary.user or '-'}")


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    console.set_verbosity(args.verbose)
    console.debug(f"parsed cli arguments; args={vars(args)}")

    if os.getuid() != 0:
        console.fail("Run this script as root...")

    config_path, required = get_config_path(args.config)
    try:
        settings = load_settings(config_path, required)
    except ConfigReadError as e:
        console.fail(str(e))
    console.debug(f"settings={settings}")

    request = ProvisionRequest(
        name=args.name,
        address=args.address,
        gateway=args.gateway,
        release=args.release,
        user=args.user,
        ssh=args.ssh,
        thick_jail=args.thick_jail,
    )

    result = provision_jail(request, settings=settings)

    if result.ok:
        print_summary(result.summary)
        return EXIT_OK

    print_failure(result)

    if isinstance(result.error, ValidationError):
        return EXIT_VALIDATION_ERROR
    return EXIT_EXECUTION_ERROR
