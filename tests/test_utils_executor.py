# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

from conftest import FakeRunner
from iocage_provision.models import Step, StepKind
from iocage_provision.utils import console
from iocage_provision.utils.executor import EXIT_NOT_RUNNABLE, StepExecutor

START = Step(StepKind.START_JAIL, ("iocage", "start", "ferris"), "Start jail ferris")


def test_successful_step(capsys):
    runner = FakeRunner(stdout="* Starting ferris\n")
    outcome = StepExecutor(runner).execute(START)

    assert outcome.ok
    assert outcome.exit_status == 0
    assert outcome.stdout == "* Starting ferris\n"
    assert outcome.step is START
    assert runner.calls == [(START.argv, None)]
    assert "Start jail ferris" in capsys.readouterr().out


def test_failed_step_keeps_stderr_verbatim():
    stderr = "  ferris was not found!\n\tPlease check the name\n"
    runner = FakeRunner(failures={0: (1, stderr)})
    outcome = StepExecutor(runner).execute(START)

    assert not outcome.ok
    assert outcome.exit_status == 1
    assert outcome.stderr == stderr


def test_failed_step_is_not_retried():
    runner = FakeRunner(failures={0: (3, "boom")})
    StepExecutor(runner).execute(START)
    assert len(runner.calls) == 1


def test_stdin_is_passed_to_command():
    step = Step(
        StepKind.INSTALL_AUTHORIZED_KEY,
        ("iocage", "exec", "ferris", "sh", "-c", "cat", "sh"),
        "Install key",
        stdin="ssh-ed25519 AAAA\n",
    )
    runner = FakeRunner()
    StepExecutor(runner).execute(step)
    assert runner.calls == [(step.argv, "ssh-ed25519 AAAA\n")]


def test_command_which_cannot_run():
    runner = FakeRunner(failures={0: FileNotFoundError(2, "No such file or directory")})
    outcome = StepExecutor(runner).execute(START)

    assert not outcome.ok
    assert outcome.exit_status == EXIT_NOT_RUNNABLE
    assert outcome.stderr.startswith("iocage: ")
    assert "No such file or directory" in outcome.stderr


def test_output_is_indented(capsys):
    runner = FakeRunner(stdout="line one\nline two\n", stderr="warning: no swap\n")
    StepExecutor(runner).execute(START)

    captured = capsys.readouterr()
    assert "  - Start jail ferris\n        line one\n        line two\n" in captured.out
    assert "        warning: no swap\n" in captured.err
    # The command line is a debug message
    assert "iocage start ferris" not in captured.err


def test_stderr_of_failed_step_is_left_to_caller(capsys):
    runner = FakeRunner(failures={0: (1, "ferris was not found\n")})
    StepExecutor(runner).execute(START)
    assert "ferris was not found" not in capsys.readouterr().err


def test_verbose_shows_command_line(capsys, monkeypatch):
    monkeypatch.setattr(console, "_verbosity", 1)
    StepExecutor(FakeRunner()).execute(START)
    assert "iocage start ferris" in capsys.readouterr().err
