# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

from enum import Enum

from iocage_provision.errors import InternalError


class State(Enum):
    VALIDATING = "validating"
    RESOLVING = "resolving"
    PLANNING = "planning"
    EXECUTING = "executing"
    DONE = "done"
    FAILED = "failed"


class Event(Enum):
    VALIDATED = "validated"
    RESOLVED = "resolved"
    PLANNED = "planned"
    STEP_SUCCEEDED = "step-succeeded"
    PLAN_COMPLETED = "plan-completed"
    # Validation, resolution or step failure
    FAILED = "failed"


TERMINAL_STATES = frozenset([State.DONE, State.FAILED])

_TRANSITIONS = {
    (State.VALIDATING, Event.VALIDATED): State.RESOLVING,
    (State.VALIDATING, Event.FAILED): State.FAILED,
    (State.RESOLVING, Event.RESOLVED): State.PLANNING,
    (State.RESOLVING, Event.FAILED): State.FAILED,
    (State.PLANNING, Event.PLANNED): State.EXECUTING,
    (State.EXECUTING, Event.STEP_SUCCEEDED): State.EXECUTING,
    (State.EXECUTING, Event.PLAN_COMPLETED): State.DONE,
    (State.EXECUTING, Event.FAILED): State.FAILED,
}


def transition(state, event):
    """
    Return the state which follows state when event happens.
    """
    if state in TERMINAL_STATES:
        raise InternalError(f"State {state.value} is final, got {event.value}.")
    try:
        return _TRANSITIONS[(state, event)]
    except KeyError:
        raise InternalError(
            f"Illegal transition from {state.value} on {event.value}."
        ) from None
