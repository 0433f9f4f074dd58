# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

import configparser
import io

from iocage_provision.data import DEFAULT_CONFIG

# Used in parser getters to indicate the default behavior when a specific
# option is not found. Created to enable `None` as a valid fallback value.
_UNSET = object()


class KeyValueParser(configparser.ConfigParser):
    """Simple parser based on ConfigParser.
    Reads a file containing key/value pairs and/or comments, without
    section headers. Values can span multiple lines, as long as they
    are indented deeper than the first line of the value.
    """

    def __init__(self, *args, **kwargs):
        # Set defaults if not specified by user
        if "interpolation" not in kwargs:
            kwargs["interpolation"] = None
        if "allow_no_value" not in kwargs:
            kwargs["allow_no_value"] = True
        if "comment_prefixes" not in kwargs:
            kwargs["comment_prefixes"] = "#"

        super().__init__(*args, **kwargs)

        # Dummy section name
        self._section_name = "a"
        self.add_section(self._section_name)

    def _read(self, fp, fpname):
        # Prepend the dummy section header, values are merged into the existing section
        lines = io.StringIO(f"[{self._section_name}]\n" + fp.read())
        return super()._read(lines, fpname)

    def read_default_string(self, string, source="<string>"):
        return super()._read(io.StringIO("[DEFAULT]\n" + string), source)

    # Return value for specified option key
    def my_get(self, option, fallback=_UNSET):
        return super().get(self._section_name, option, fallback=fallback)

    # Return value converted to boolean for specified option key
    def my_getboolean(self, option, fallback=_UNSET):
        return super().getboolean(self._section_name, option, fallback=fallback)

    # Return the non-empty lines of a (multi-line) value
    def my_getlines(self, option):
        lines = self.my_get(option).splitlines()
        return [line.strip() for line in lines if line.strip()]


class ConfigReadError(Exception):
    pass


def parse_config_file(config_path=None, required=False):
    """
    Read the config file on top of the default config.
    A missing file falls back to the defaults, unless required is set.
    """
    config = KeyValueParser()
    # Read default config to fallback to default values
    # for keys not found in the config file
    config.read_default_string(DEFAULT_CONFIG)

    if config_path is None:
        return config

    try:
        with open(config_path, "r") as fp:
            config.read_file(fp)
    except FileNotFoundError:
        if required:
            raise ConfigReadError(f"Unable to find config file: {config_path}.")
    except (OSError, configparser.Error) as e:
        raise ConfigReadError(f"Unable to read config file {config_path}: {e}") from e

    return config
