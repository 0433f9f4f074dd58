# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

import pytest

from iocage_provision.utils.host import CommandResult, HostUser

JDOE_KEYS = """# laptop
ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAAIFakeKeyOne jdoe@laptop

ssh-rsa AAAAB3NzaC1yc2EAAAADAQABAAABAQFakeKeyTwo jdoe@desktop
"""


class FakeHost:
    def __init__(self, users=(), groups=None, memberships=None, files=None, release=None):
        self.users = {user.name: user for user in users}
        self.groups = groups or {}
        self.memberships = memberships or {}
        self.files = files or {}
        self._release = release
        self.release_calls = 0

    def get_user(self, name):
        return self.users.get(name)

    def get_group_name(self, gid):
        return self.groups.get(gid)

    def get_group_ids(self, name, gid):
        return [gid, *self.memberships.get(name, [])]

    def read_file(self, path):
        content = self.files.get(path)
        if content is None:
            raise FileNotFoundError(path)
        if isinstance(content, Exception):
            raise content
        return content

    def release(self):
        self.release_calls += 1
        if self._release is None:
            raise AssertionError("host release should not have been read")
        return self._release


class FakeRunner:
    """
    Records commands and succeeds, unless a failure is set up for the n-th call.
    """

    def __init__(self, failures=None, stdout="ok\n", stderr=""):
        self.failures = failures or {}
        self.stdout = stdout
        self.stderr = stderr
        self.calls = []

    @property
    def argvs(self):
        return [argv for argv, _ in self.calls]

    def run(self, argv, stdin=None):
        index = len(self.calls)
        self.calls.append((tuple(argv), stdin))

        failure = self.failures.get(index)
        if isinstance(failure, Exception):
            raise failure
        if failure is not None:
            returncode, stderr = failure
            return CommandResult(returncode, "", stderr)

        return CommandResult(0, self.stdout, self.stderr)


def jdoe():
    return HostUser("jdoe", 1001, 1001, "/home/jdoe", "/usr/local/bin/bash")


@pytest.fixture
def host():
    return FakeHost(
        users=[jdoe()],
        groups={0: "wheel", 5: "operator", 1001: "jdoe"},
        memberships={"jdoe": [0, 5]},
        files={"/home/jdoe/.ssh/authorized_keys": JDOE_KEYS},
        release="13.2-RELEASE-p4",
    )


@pytest.fixture
def runner():
    return FakeRunner()
