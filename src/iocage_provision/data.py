# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

DEFAULT_CONFIG = """# Command used to drive the jails
iocage=iocage

# VNET interface inside the jail which gets the address
interface=vnet0

# Properties set on every jail after the network properties
# Each property on its own (indented) line, e.g. allow_raw_sockets=1
properties=resolver=none
    boot=on

# Create thick jails (a full copy of the release), --thickjail always does
thickjail=0

# Package and rc service installed when passing --ssh
ssh_package=openssh-portable
ssh_service=openssh

# Install sudo and allow the wheel group password-less sudo for a copied --user
user_sudo=1

# Destroy the jail when a provisioning step fails
# When disabled the partially provisioned jail is left for manual inspection
destroy_on_failure=0"""

# Shells of the FreeBSD base system, any other login shell is installed as a package
BASE_SHELLS = frozenset(["sh", "csh", "tcsh", "nologin"])

SUDOERS_DROP_IN = "/usr/local/etc/sudoers.d/wheel"
SUDOERS_RULE = "%wheel ALL=(ALL) NOPASSWD: ALL"
