# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

import grp
import os
import platform
import pwd
import subprocess

from collections import namedtuple

HostUser = namedtuple("HostUser", ["name", "uid", "gid", "home", "shell"])
CommandResult = namedtuple("CommandResult", ["returncode", "stdout", "stderr"])


class SystemHost:
    """
    Read-only access to the account database and identification of this host.
    """

    def get_user(self, name):
        try:
            entry = pwd.getpwnam(name)
        except KeyError:
            return None
        return HostUser(
            entry.pw_name, entry.pw_uid, entry.pw_gid, entry.pw_dir, entry.pw_shell
        )

    def get_group_name(self, gid):
        try:
            return grp.getgrgid(gid).gr_name
        except KeyError:
            return None

    def get_group_ids(self, name, gid):
        return os.getgrouplist(name, gid)

    def read_file(self, path):
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def release(self):
        # Same as uname -r, e.g. 13.2-RELEASE-p4
        return platform.release()


class SubprocessRunner:
    """
    Run commands from an argument vector, never through a shell.
    """

    def __init__(self, env=None):
        self.env = env

    def run(self, argv, stdin=None):
        env = {
            **os.environ,
            # iocage is a Python program and buffers output when not on a tty
            "PYTHONUNBUFFERED": "true",
            **(self.env or {}),
        }
        result = subprocess.run(
            list(argv),
            input=stdin,
            stdin=None if stdin is not None else subprocess.DEVNULL,
            capture_output=True,
            text=True,
            env=env,
        )
        return CommandResult(result.returncode, result.stdout, result.stderr)
