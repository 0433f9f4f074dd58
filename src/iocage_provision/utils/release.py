# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

import re

from iocage_provision.errors import InvalidRelease, ReleaseDetectionFailed

# Release labels accepted by iocage fetch, e.g. 13.2-RELEASE or 14.0-RC1
RELEASE_PATTERN = re.compile(r"^\d+\.\d+-(RELEASE|RC\d+|BETA\d+|ALPHA\d+)$")


def normalize_release(host_release):
    """
    Turn a uname release string into a release label.
    E.g. 13.2-RELEASE-p4 becomes 13.2-RELEASE and 12.1-STABLE becomes 12.1-RELEASE.
    """
    fields = [
        "RELEASE" if field == "STABLE" else field
        for field in host_release.strip().split("-")
    ]
    return "-".join(fields[:2])


def default_release(host):
    host_release = host.release()
    release = normalize_release(host_release)

    if not RELEASE_PATTERN.match(release):
        raise ReleaseDetectionFailed(
            f"Unable to derive a release from host release {host_release!r}, "
            "pass a release explicitly."
        )

    return release


def resolve_release(release_override=None, host=None):
    """
    Return the base release for the jail.
    The host is only consulted when no release was given.
    """
    if release_override:
        if not RELEASE_PATTERN.match(release_override):
            raise InvalidRelease(
                f"Invalid release {release_override}, expected e.g. 13.2-RELEASE."
            )
        return release_override

    return default_release(host)
