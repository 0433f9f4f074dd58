# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

import re

from iocage_provision.errors import CommandFailed, InternalError, InvalidName
from iocage_provision.errors import ValidationError
from iocage_provision.models import JailSpec, ProvisionResult, ProvisionSummary
from iocage_provision.models import StepKind
from iocage_provision.settings import Settings
from iocage_provision.utils import console
from iocage_provision.utils.accounts import lookup_user
from iocage_provision.utils.address import resolve_address
from iocage_provision.utils.executor import StepExecutor
from iocage_provision.utils.host import SubprocessRunner, SystemHost
from iocage_provision.utils.planner import build_cleanup, build_plan
from iocage_provision.utils.release import resolve_release
from iocage_provision.utils.state import Event, State, transition


def check_jail_name_valid(jail_name):
    """
    Raise InvalidName unless the name is usable as an iocage jail name.
    """
    if re.match(r"^[a-zA-Z0-9][a-zA-Z0-9_-]{0,63}$", jail_name):
        return

    raise InvalidName(
        f"Invalid jail name {jail_name!r}. A valid name consists of: "
        "alphanumeric characters, dashes and underscores, "
        "starts with an alphanumeric character and has at most 64 characters."
    )


def resolve_spec(request, host, settings):
    """
    Resolve everything a jail needs from the request.
    Either all values resolve or a ValidationError is raised, nothing is run.
    """
    address, gateway = resolve_address(request.address, request.gateway)
    release = resolve_release(request.release, host)

    user = None
    if request.user:
        user = lookup_user(request.user, host)

    thick_jail = request.thick_jail
    if thick_jail is None:
        thick_jail = settings.thick_jail

    return JailSpec(
        name=request.name,
        address=address,
        gateway=gateway,
        release=release,
        ssh=request.ssh,
        thick_jail=thick_jail,
        user=user,
    )


class Orchestrator:
    """
    Provision one jail: validate, resolve, plan, then run the plan until done
    or until the first step fails.
    """

    def __init__(self, host=None, runner=None, settings=None):
        self.host = host or SystemHost()
        self.settings = settings or Settings()
        self.executor = StepExecutor(runner or SubprocessRunner())

    def _advance(self, result, event):
        result.state = transition(result.state, event)

    def _fail(self, result, error):
        result.error = error
        self._advance(result, Event.FAILED)
        return result

    def provision(self, request):
        result = ProvisionResult(request)

        try:
            check_jail_name_valid(request.name)
            self._advance(result, Event.VALIDATED)
            result.spec = resolve_spec(request, self.host, self.settings)
        except ValidationError as e:
            return self._fail(result, e)
        self._advance(result, Event.RESOLVED)

        try:
            result.plan = build_plan(result.spec, self.settings)
        except InternalError:
            raise
        except Exception as e:
            raise InternalError(f"Failed to plan jail {request.name}: {e}") from e
        self._advance(result, Event.PLANNED)

        console.section(f"Provisioning a jail named '{request.name}'")

        for step in result.plan:
            outcome = self.executor.execute(step)
            result.outcomes.append(outcome)

            if not outcome.ok:
                error = CommandFailed(
                    step,
                    outcome.exit_status,
                    outcome.stderr,
                    succeeded=[o.step for o in result.outcomes[:-1]],
                )
                self._fail(result, error)
                self._cleanup(result)
                return result

            self._advance(result, Event.STEP_SUCCEEDED)

        self._advance(result, Event.PLAN_COMPLETED)
        result.summary = ProvisionSummary.from_spec(result.spec)

        console.section(f"Jail '{request.name}' provisioned successfully")

        return result

    def _cleanup(self, result):
        """
        Destroy the partially provisioned jail, only when configured to do so.
        """
        if not self.settings.destroy_on_failure:
            return

        created = any(
            outcome.ok and outcome.step.kind is StepKind.CREATE_JAIL
            for outcome in result.outcomes
        )
        if not created:
            return

        console.warn(f"Destroying partially provisioned jail {result.spec.name}")
        cleanup = build_cleanup(result.spec, self.settings)
        result.cleanup = self.executor.execute(cleanup)


def provision_jail(request, host=None, runner=None, settings=None):
    """
    Create, start and set up a new FreeBSD jail via iocage.

    A failed result may leave behind a jail in an inconsistent state which needs to
    be cleaned up out of band, unless destroy_on_failure is configured.
    """
    return Orchestrator(host, runner, settings).provision(request)
