"""Tests for LocalKubectlRunner and FabricKubectlRunner."""

import subprocess

import pytest
from unittest.mock import MagicMock, patch
from invoke.exceptions import CommandTimedOut

from rewind.domain.errors import ClusterOperationError
from rewind.domain.value_objects.control_plane_host import ControlPlaneHost
from rewind.infrastructure.adapters.fabric_runner import FabricKubectlRunner
from rewind.infrastructure.adapters.kubectl_runner import CommandResult, LocalKubectlRunner


class TestCommandResult:
    def test_ok(self):
        assert CommandResult(0).ok
        assert not CommandResult(1).ok


class TestLocalKubectlRunner:
    @pytest.mark.asyncio
    async def test_run(self):
        runner = LocalKubectlRunner("/usr/local/bin/kubectl")
        completed = MagicMock(returncode=0, stdout="{}", stderr="")

        with patch("subprocess.run", return_value=completed) as mock_run:
            result = await runner.run(["get", "pods"], stdin="data", timeout=10)

        assert result == CommandResult(0, stdout="{}", stderr="")
        mock_run.assert_called_once_with(
            ["/usr/local/bin/kubectl", "get", "pods"],
            input="data",
            capture_output=True,
            text=True,
            timeout=10,
        )

    @pytest.mark.asyncio
    async def test_non_zero_exit_is_returned(self):
        runner = LocalKubectlRunner()
        completed = MagicMock(returncode=1, stdout="", stderr="NotFound")

        with patch("subprocess.run", return_value=completed):
            result = await runner.run(["get", "svc", "web"])

        assert not result.ok
        assert result.stderr == "NotFound"

    @pytest.mark.asyncio
    async def test_kubectl_missing(self):
        runner = LocalKubectlRunner()
        with patch("subprocess.run", side_effect=FileNotFoundError):
            with pytest.raises(ClusterOperationError, match="'kubectl' not found"):
                await runner.run(["version"])

    @pytest.mark.asyncio
    async def test_timeout(self):
        runner = LocalKubectlRunner()
        with patch(
            "subprocess.run",
            side_effect=subprocess.TimeoutExpired("kubectl", 5),
        ):
            with pytest.raises(ClusterOperationError, match="timed out"):
                await runner.run(["rollout", "status", "deploy/web"], timeout=5)


class TestFabricKubectlRunner:
    def test_get_connection(self):
        runner = FabricKubectlRunner(ControlPlaneHost("10.0.0.1", user="ops", port=2222))
        with patch(
            "rewind.infrastructure.adapters.fabric_runner.Connection"
        ) as mock_conn_cls:
            first = runner._get_connection()
            second = runner._get_connection()

        assert first is second
        mock_conn_cls.assert_called_once_with(
            host="10.0.0.1",
            user="ops",
            port=2222,
            connect_timeout=30,
            connect_kwargs={"allow_agent": True, "look_for_keys": True},
        )

    @pytest.mark.asyncio
    async def test_run_quotes_arguments(self):
        runner = FabricKubectlRunner(ControlPlaneHost("10.0.0.1"))
        mock_conn = MagicMock()
        mock_conn.run.return_value = MagicMock(exited=0, stdout="ok", stderr="")
        runner._connection = mock_conn

        result = await runner.run(["get", "pods", "--selector=app=web shop"], timeout=15)

        assert result == CommandResult(0, stdout="ok", stderr="")
        args, kwargs = mock_conn.run.call_args
        assert args[0] == "kubectl get pods '--selector=app=web shop'"
        assert kwargs["hide"] is True
        assert kwargs["warn"] is True
        assert kwargs["in_stream"] is False
        assert kwargs["timeout"] == 15

    @pytest.mark.asyncio
    async def test_stdin_is_streamed(self):
        runner = FabricKubectlRunner(ControlPlaneHost("10.0.0.1"))
        mock_conn = MagicMock()
        mock_conn.run.return_value = MagicMock(exited=0, stdout="", stderr="")
        runner._connection = mock_conn

        await runner.run(["apply", "--filename=-"], stdin='{"kind": "Service"}')

        in_stream = mock_conn.run.call_args.kwargs["in_stream"]
        assert in_stream.read() == '{"kind": "Service"}'

    @pytest.mark.asyncio
    async def test_command_timeout(self):
        runner = FabricKubectlRunner(ControlPlaneHost("10.0.0.1"))
        mock_conn = MagicMock()
        mock_conn.run.side_effect = CommandTimedOut(MagicMock(), 5)
        runner._connection = mock_conn

        with pytest.raises(ClusterOperationError, match="timed out"):
            await runner.run(["version"], timeout=5)

    @pytest.mark.asyncio
    async def test_ssh_failure(self):
        runner = FabricKubectlRunner(ControlPlaneHost("10.0.0.1"))
        mock_conn = MagicMock()
        mock_conn.run.side_effect = OSError("No route to host")
        runner._connection = mock_conn

        with pytest.raises(ClusterOperationError, match="No route to host"):
            await runner.run(["version"])

    def test_close(self):
        runner = FabricKubectlRunner(ControlPlaneHost("10.0.0.1"))
        mock_conn = MagicMock()
        runner._connection = mock_conn

        runner.close()

        mock_conn.close.assert_called_once()
        assert runner._connection is None
