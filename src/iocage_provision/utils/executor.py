# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

from iocage_provision.models import StepOutcome
from iocage_provision.utils import console

# Exit status a shell reports for a command which could not be found or run
EXIT_NOT_RUNNABLE = 127


class StepExecutor:
    """
    Run steps through a command runner and classify the outcome.
    Steps are run once, there are no retries.
    """

    def __init__(self, runner):
        self.runner = runner

    def execute(self, step):
        console.info(step.description)
        console.debug(f"running; cmd={step.command_line()}")

        try:
            result = self.runner.run(step.argv, stdin=step.stdin)
        except OSError as e:
            # E.g. iocage is not installed
            return StepOutcome(step, EXIT_NOT_RUNNABLE, "", f"{step.argv[0]}: {e}")

        outcome = StepOutcome(step, result.returncode, result.stdout, result.stderr)

        console.output(outcome.stdout)
        # The stderr of a failed step is reported by the caller
        if outcome.ok:
            console.eoutput(outcome.stderr)

        return outcome
