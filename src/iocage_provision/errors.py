# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only


class ProvisioningError(Exception):
    """
    Base class for errors an operator is expected to act upon.
    """


class ValidationError(ProvisioningError):
    """
    Raised before any external command has been issued.
    Safe to correct the input and try again.
    """


class InvalidName(ValidationError):
    pass


class InvalidAddress(ValidationError):
    pass


class NetworkTooSmall(ValidationError):
    pass


class InvalidRelease(ValidationError):
    pass


class ReleaseDetectionFailed(ValidationError):
    pass


class UnknownUser(ValidationError):
    def __init__(self, username):
        self.username = username
        super().__init__(f"System user not found: {username}.")


class GroupResolutionFailed(ValidationError):
    def __init__(self, gid):
        self.gid = gid
        super().__init__(f"System group id not found: {gid}.")


class CredentialReadFailed(ValidationError):
    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to read {path}: {reason}.")


class ExecutionError(ProvisioningError):
    """
    Raised after external state may already have changed.
    """


class CommandFailed(ExecutionError):
    def __init__(self, step, exit_status, stderr, succeeded=()):
        self.step = step
        self.exit_status = exit_status
        self.stderr = stderr
        # Steps which completed before this one, in execution order
        self.succeeded = tuple(succeeded)
        super().__init__(
            f"{step.description} failed with exit status {exit_status}."
        )


class InternalError(Exception):
    """
    Invariant violation inside the provisioner itself. Not meant to be handled.
    """
