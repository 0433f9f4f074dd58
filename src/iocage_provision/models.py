# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

from __future__ import annotations

import shlex

from dataclasses import dataclass, field
from enum import Enum
from ipaddress import IPv4Address, IPv4Interface, IPv6Address, IPv6Interface
from typing import Optional, Tuple, Union

from iocage_provision.utils.state import State

IPInterface = Union[IPv4Interface, IPv6Interface]
IPAddress = Union[IPv4Address, IPv6Address]


@dataclass(frozen=True)
class ProvisionRequest:
    """
    Provisioning input as handed over by the CLI.
    Only presence or absence of the optional values has been decided here.
    """

    name: str
    address: str
    gateway: Optional[str] = None
    release: Optional[str] = None
    user: Optional[str] = None
    ssh: bool = False
    # None means: use the configured default
    thick_jail: Optional[bool] = None


@dataclass(frozen=True)
class UserRecord:
    name: str
    uid: int
    gid: int
    home: str
    shell: str
    primary_group: str
    groups: Tuple[str, ...] = ()
    keys: Tuple[str, ...] = ()


@dataclass(frozen=True)
class JailSpec:
    name: str
    address: IPInterface
    gateway: IPAddress
    release: str
    ssh: bool = False
    thick_jail: bool = False
    user: Optional[UserRecord] = None


class StepKind(Enum):
    CREATE_JAIL = "create-jail"
    SET_PROPERTY = "set-property"
    START_JAIL = "start-jail"
    INSTALL_PACKAGE = "install-package"
    CONFIGURE_SUDO = "configure-sudo"
    ENABLE_SERVICE = "enable-service"
    START_SERVICE = "start-service"
    CREATE_GROUP = "create-group"
    CREATE_USER = "create-user"
    INSTALL_AUTHORIZED_KEY = "install-authorized-key"
    DESTROY_JAIL = "destroy-jail"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class Step:
    kind: StepKind
    argv: Tuple[str, ...]
    description: str
    stdin: Optional[str] = None

    def command_line(self):
        return shlex.join(self.argv)


@dataclass(frozen=True)
class Plan:
    steps: Tuple[Step, ...] = ()

    def __iter__(self):
        return iter(self.steps)

    def __len__(self):
        return len(self.steps)

    def __getitem__(self, index):
        return self.steps[index]

    def kinds(self):
        return [step.kind for step in self.steps]


@dataclass(frozen=True)
class StepOutcome:
    step: Step
    exit_status: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self):
        return self.exit_status == 0


@dataclass(frozen=True)
class ProvisionSummary:
    name: str
    address: IPInterface
    gateway: IPAddress
    release: str
    ssh: bool
    user: Optional[str]

    @classmethod
    def from_spec(cls, spec: JailSpec) -> ProvisionSummary:
        return cls(
            name=spec.name,
            address=spec.address,
            gateway=spec.gateway,
            release=spec.release,
            ssh=spec.ssh,
            user=spec.user.name if spec.user else None,
        )


@dataclass
class ProvisionResult:
    """
    Everything known about one provisioning attempt, successful or not.
    """

    request: ProvisionRequest
    state: State = State.VALIDATING
    spec: Optional[JailSpec] = None
    plan: Optional[Plan] = None
    outcomes: list = field(default_factory=list)
    error: Optional[Exception] = None
    cleanup: Optional[StepOutcome] = None
    summary: Optional[ProvisionSummary] = None

    @property
    def ok(self):
        return self.state is State.DONE

    @property
    def succeeded_steps(self):
        return [outcome.step for outcome in self.outcomes if outcome.ok]

    def check(self):
        """
        Raise the error which caused provisioning to fail, if any.
        """
        if self.error is not None:
            raise self.error
        return self
