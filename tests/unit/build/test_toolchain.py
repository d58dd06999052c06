"""Unit tests for toolchain invocation."""

import sys
from unittest import mock

import pytest

from tonpack.build.toolchain import CommandResult, ToolchainInvoker, run_command
from tonpack.utils.exceptions import ToolchainFailure

PY = sys.executable


class TestRunCommand:
    def test_success_captures_output(self, tmp_path):
        result = run_command([PY, "-c", "print('compiling'); print('finished')"], cwd=tmp_path)

        assert result.ok
        assert result.launched
        assert result.returncode == 0
        assert result.output.splitlines() == ["compiling", "finished"]

    def test_nonzero_exit_is_a_result(self, tmp_path):
        result = run_command([PY, "-c", "import sys; sys.stderr.write('error[E0425]\\n'); sys.exit(101)"], cwd=tmp_path)

        assert not result.ok
        assert result.launched
        assert result.returncode == 101
        assert "error[E0425]" in result.output

    def test_missing_executable(self, tmp_path):
        result = run_command(["tonpack-no-such-command", "build"], cwd=tmp_path)

        assert not result.ok
        assert not result.launched
        assert result.returncode is None

    def test_runs_in_cwd(self, tmp_path):
        run_command([PY, "-c", "open('marker', 'w').close()"], cwd=tmp_path)
        assert (tmp_path / "marker").exists()


class TestToolchainInvoker:
    @mock.patch("tonpack.build.toolchain.run_command")
    def test_update_then_build(self, mock_run, tmp_path):
        mock_run.side_effect = lambda command, cwd, logger: CommandResult(command, 0)
        invoker = ToolchainInvoker(["cargo", "update"], ["cargo", "build", "--release"], cwd=tmp_path)

        results = invoker.invoke()

        assert [r.command for r in results] == [["cargo", "update"], ["cargo", "build", "--release"]]
        assert all(call.kwargs["cwd"] == tmp_path for call in mock_run.call_args_list)

    @mock.patch("tonpack.build.toolchain.run_command")
    def test_dev_mode_skips_update(self, mock_run):
        mock_run.side_effect = lambda command, cwd, logger: CommandResult(command, 0)
        invoker = ToolchainInvoker(["cargo", "update"], ["cargo", "build", "--release"], dev_mode=True)

        results = invoker.invoke()

        assert [r.command for r in results] == [["cargo", "build", "--release"]]

    @mock.patch("tonpack.build.toolchain.run_command")
    def test_update_failure_skips_build(self, mock_run):
        mock_run.return_value = CommandResult(["cargo", "update"], 1, "failed to fetch registry")
        invoker = ToolchainInvoker(["cargo", "update"], ["cargo", "build", "--release"])

        with pytest.raises(ToolchainFailure) as excinfo:
            invoker.invoke()

        assert mock_run.call_count == 1
        assert excinfo.value.command == ["cargo", "update"]
        assert excinfo.value.returncode == 1
        assert excinfo.value.output == "failed to fetch registry"

    def test_build_failure(self, tmp_path):
        invoker = ToolchainInvoker(
            [PY, "-c", "pass"], [PY, "-c", "import sys; sys.exit(3)"], cwd=tmp_path
        )

        with pytest.raises(ToolchainFailure) as excinfo:
            invoker.invoke()

        assert excinfo.value.returncode == 3
        assert "exited with status 3" in str(excinfo.value)
        assert excinfo.value.step == "toolchain"

    def test_launch_failure(self, tmp_path):
        invoker = ToolchainInvoker(["tonpack-no-such-command"], [PY, "-c", "pass"], cwd=tmp_path)

        with pytest.raises(ToolchainFailure) as excinfo:
            invoker.invoke()

        assert excinfo.value.returncode is None
        assert "Could not launch" in str(excinfo.value)
