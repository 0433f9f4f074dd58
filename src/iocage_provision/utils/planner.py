# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

import os.path

from iocage_provision.data import BASE_SHELLS, SUDOERS_DROP_IN, SUDOERS_RULE
from iocage_provision.errors import InternalError
from iocage_provision.models import Plan, Step, StepKind

# Scripts run with sh -c inside the jail. Values are passed as positional
# arguments ($1, $2, ...) and are never part of the script text itself.
ENSURE_GROUP_SCRIPT = 'pw groupshow "$1" >/dev/null 2>&1 || pw groupadd -n "$1"'
ENSURE_GROUP_WITH_GID_SCRIPT = (
    'pw groupshow "$1" >/dev/null 2>&1 || pw groupadd -n "$1" -g "$2"'
)
SUDO_CONFIG_SCRIPT = 'mkdir -p "$(dirname "$1")" && printf "%s\\n" "$2" >"$1"'
AUTHORIZED_KEY_SCRIPT = "\n".join(
    [
        "set -eu",
        'install -d -m 700 -o "$1" "$2/.ssh"',
        'cat >>"$2/.ssh/authorized_keys"',
        'chown "$1" "$2/.ssh/authorized_keys"',
        'chmod 600 "$2/.ssh/authorized_keys"',
    ]
)


class PlanBuilder:
    """
    Collects the steps for one jail. Steps can only be appended.
    """

    def __init__(self, spec, settings):
        self.spec = spec
        self.settings = settings
        self._steps = []

    def iocage(self, *args):
        return (self.settings.iocage, *args)

    def jail_exec(self, *args):
        return self.iocage("exec", self.spec.name, *args)

    def jail_sh(self, script, *args):
        return self.jail_exec("sh", "-c", script, "sh", *args)

    def add(self, kind, argv, description, stdin=None):
        self._steps.append(Step(kind, tuple(argv), description, stdin))

    def build(self):
        return Plan(tuple(self._steps))


def network_properties(spec, settings):
    address = spec.address
    if address.version == 4:
        address_key, router_key = "ip4_addr", "defaultrouter"
    else:
        address_key, router_key = "ip6_addr", "defaultrouter6"

    return [
        "vnet=on",
        f"{address_key}={settings.interface}|{address.with_prefixlen}",
        f"{router_key}={spec.gateway}",
    ]


def add_jail_steps(plan, spec, settings):
    argv = plan.iocage("create", "--name", spec.name, "--release", spec.release)
    if spec.thick_jail:
        argv += ("--thickjail",)
    plan.add(
        StepKind.CREATE_JAIL, argv, f"Create jail {spec.name} from {spec.release}"
    )

    for prop in network_properties(spec, settings) + list(settings.properties):
        plan.add(
            StepKind.SET_PROPERTY,
            plan.iocage("set", prop, spec.name),
            f"Set {prop} on jail {spec.name}",
        )

    plan.add(
        StepKind.START_JAIL,
        plan.iocage("start", spec.name),
        f"Start jail {spec.name}",
    )


def add_package_step(plan, package):
    plan.add(
        StepKind.INSTALL_PACKAGE,
        plan.iocage("pkg", plan.spec.name, "install", "-y", package),
        f"Install package {package}",
    )


def add_ssh_steps(plan, settings):
    service = settings.ssh_service
    add_package_step(plan, settings.ssh_package)
    plan.add(
        StepKind.ENABLE_SERVICE,
        plan.jail_exec("sysrc", f"{service}_enable=YES"),
        f"Enable service {service}",
    )
    # The jail is already running, so the service won't be started at boot
    plan.add(
        StepKind.START_SERVICE,
        plan.jail_exec("service", service, "start"),
        f"Start service {service}",
    )


def add_user_steps(plan, user, settings):
    groups = list(user.groups)

    if settings.user_sudo:
        add_package_step(plan, "sudo")
        plan.add(
            StepKind.CONFIGURE_SUDO,
            plan.jail_sh(SUDO_CONFIG_SCRIPT, SUDOERS_DROP_IN, SUDOERS_RULE),
            "Prepare sudo config",
        )
        if "wheel" not in groups and user.primary_group != "wheel":
            groups.append("wheel")

    shell = os.path.basename(user.shell)
    if shell and shell not in BASE_SHELLS:
        add_package_step(plan, shell)

    plan.add(
        StepKind.CREATE_GROUP,
        plan.jail_sh(ENSURE_GROUP_WITH_GID_SCRIPT, user.primary_group, str(user.gid)),
        f"Create group {user.primary_group}",
    )
    for group in user.groups:
        plan.add(
            StepKind.CREATE_GROUP,
            plan.jail_sh(ENSURE_GROUP_SCRIPT, group),
            f"Create group {group}",
        )

    argv = plan.jail_exec(
        "pw", "useradd", "-n", user.name, "-u", str(user.uid), "-g", user.primary_group
    )
    if groups:
        argv += ("-G", ",".join(groups))
    argv += ("-d", user.home, "-m", "-s", user.shell)
    plan.add(StepKind.CREATE_USER, argv, f"Create user {user.name}")

    for number, key in enumerate(user.keys, start=1):
        plan.add(
            StepKind.INSTALL_AUTHORIZED_KEY,
            plan.jail_sh(AUTHORIZED_KEY_SCRIPT, user.name, user.home),
            f"Install authorized key {number} of {len(user.keys)} for {user.name}",
            stdin=key + "\n",
        )


def check_plan(plan):
    """
    Raise InternalError if the step order doesn't respect the jail lifecycle.
    """
    kinds = plan.kinds()
    if not kinds or kinds[0] is not StepKind.CREATE_JAIL:
        raise InternalError("Plan must start by creating the jail.")

    if StepKind.START_JAIL not in kinds:
        raise InternalError("Plan must start the jail.")

    start = kinds.index(StepKind.START_JAIL)
    if any(kind is not StepKind.SET_PROPERTY for kind in kinds[1:start]):
        raise InternalError("Only properties may be set before starting the jail.")


def build_plan(spec, settings):
    """
    Expand a jail spec into the ordered steps needed to provision it.
    The same spec and settings always give the same plan.
    """
    plan = PlanBuilder(spec, settings)

    add_jail_steps(plan, spec, settings)

    if spec.ssh:
        add_ssh_steps(plan, settings)

    if spec.user is not None:
        add_user_steps(plan, spec.user, settings)

    result = plan.build()
    check_plan(result)
    return result


def build_cleanup(spec, settings):
    return Step(
        StepKind.DESTROY_JAIL,
        (settings.iocage, "destroy", "--force", spec.name),
        f"Destroy jail {spec.name}",
    )
