# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

from dataclasses import dataclass
from typing import Tuple

from iocage_provision.utils.config_parser import ConfigReadError, parse_config_file


@dataclass(frozen=True)
class Settings:
    iocage: str = "iocage"
    interface: str = "vnet0"
    properties: Tuple[str, ...] = ("resolver=none", "boot=on")
    thick_jail: bool = False
    ssh_package: str = "openssh-portable"
    ssh_service: str = "openssh"
    user_sudo: bool = True
    destroy_on_failure: bool = False

    @classmethod
    def from_config(cls, config):
        return cls(
            iocage=config.my_get("iocage"),
            interface=config.my_get("interface"),
            properties=tuple(config.my_getlines("properties")),
            thick_jail=config.my_getboolean("thickjail"),
            ssh_package=config.my_get("ssh_package"),
            ssh_service=config.my_get("ssh_service"),
            user_sudo=config.my_getboolean("user_sudo"),
            destroy_on_failure=config.my_getboolean("destroy_on_failure"),
        )


def load_settings(config_path=None, required=False):
    config = parse_config_file(config_path, required)
    try:
        return Settings.from_config(config)
    except ValueError as e:
        message = f"Invalid value in config file {config_path}: {e}"
        raise ConfigReadError(message) from e
