# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

import os.path

from iocage_provision.errors import (
    CredentialReadFailed,
    GroupResolutionFailed,
    UnknownUser,
)
from iocage_provision.models import UserRecord

AUTHORIZED_KEYS_PATH = ".ssh/authorized_keys"


def resolve_group_name(host, gid):
    name = host.get_group_name(gid)
    if name is None:
        raise GroupResolutionFailed(gid)
    return name


def parse_authorized_keys(text):
    """
    Return the keys in an authorized_keys file, one per non-blank, non-comment line.
    """
    return tuple(
        line.strip()
        for line in text.splitlines()
        if line.strip() and not line.strip().startswith("#")
    )


def read_authorized_keys(host, home):
    path = os.path.join(home, AUTHORIZED_KEYS_PATH)
    try:
        text = host.read_file(path)
    except FileNotFoundError:
        return ()
    except (OSError, UnicodeDecodeError) as e:
        raise CredentialReadFailed(path, e) from e

    return parse_authorized_keys(text)


def lookup_user(username, host):
    """
    Take a snapshot of a host account, its groups and its authorized keys.
    Nothing on the host is modified.
    """
    user = host.get_user(username)
    if user is None:
        raise UnknownUser(username)

    primary_group = resolve_group_name(host, user.gid)
    groups = sorted(
        {
            resolve_group_name(host, gid)
            for gid in host.get_group_ids(user.name, user.gid)
            if gid != user.gid
        }
    )

    return UserRecord(
        name=user.name,
        uid=user.uid,
        gid=user.gid,
        home=user.home,
        shell=user.shell,
        primary_group=primary_group,
        groups=tuple(groups),
        keys=read_authorized_keys(host, user.home),
    )
