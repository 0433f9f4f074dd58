# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

import os

from pathlib import Path

COMMAND_NAME = "iocage-provision"
CONFIG_ENV_NAME = "IOCAGE_PROVISION_CONFIG"
SYSTEM_CONFIG_PATH = Path("/usr/local/etc/iocage-provision.conf")


def get_user_config_path() -> Path:
    # Look in the home of the user who invoked sudo, not in the home of root
    username = ""
    if os.getuid() == 0 and "SUDO_USER" in os.environ:
        username = os.environ["SUDO_USER"]
    return Path(f"~{username}/.config/iocage-provision.conf").expanduser()


def get_config_path(selected=None):
    """
    Determine which config file to read.
    Returns a (path, required) tuple, path is None when there is no config file.
    """
    # first choice: --config argument
    if selected:
        return Path(selected), True

    # next: IOCAGE_PROVISION_CONFIG environment variable
    if CONFIG_ENV_NAME in os.environ:
        return Path(os.environ[CONFIG_ENV_NAME]), True

    # next: system wide config, then config of the invoking user
    for candidate in [SYSTEM_CONFIG_PATH, get_user_config_path()]:
        if candidate.is_file():
            return candidate, False

    return None, False
