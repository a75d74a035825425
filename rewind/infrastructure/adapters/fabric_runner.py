"""
Fabric Runner

Architectural Intent:
- KubectlRunner executing kubectl on a remote control-plane node over SSH
- Used when the cluster API is only reachable from inside the cluster network

Security:
- SSH connections use connect_timeout, allow_agent, look_for_keys
- Every argument is shell-quoted before being sent to the remote shell
"""

import asyncio
import io
import logging
import shlex
from typing import Optional, Sequence
from fabric import Connection
from invoke.exceptions import CommandTimedOut
from rewind.domain.errors import ClusterOperationError
from rewind.domain.value_objects.control_plane_host import ControlPlaneHost
from rewind.infrastructure.adapters.kubectl_runner import CommandResult, KubectlRunner

logger = logging.getLogger(__name__)


class FabricKubectlRunner(KubectlRunner):
    """KubectlRunner over Fabric/SSH."""

    def __init__(
        self,
        host: ControlPlaneHost,
        kubectl_path: str = "kubectl",
        connect_timeout: int = 30,
    ):
        self.host = host
        self.kubectl_path = kubectl_path
        self.connect_timeout = connect_timeout
        self._connection: Optional[Connection] = None

    def _get_connection(self) -> Connection:
        if self._connection is None:
            self._connection = Connection(
                host=self.host.host,
                user=self.host.user,
                port=self.host.port,
                connect_timeout=self.connect_timeout,
                connect_kwargs={
                    "allow_agent": True,
                    "look_for_keys": True,
                },
            )
        return self._connection

    async def run(
        self,
        args: Sequence[str],
        stdin: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> CommandResult:
        command = shlex.join([self.kubectl_path, *args])

        def _run() -> CommandResult:
            logger.debug("running on %s: %s", self.host, command)
            try:
                result = self._get_connection().run(
                    command,
                    hide=True,
                    warn=True,
                    in_stream=io.StringIO(stdin) if stdin is not None else False,
                    timeout=timeout,
                )
            except CommandTimedOut as e:
                raise ClusterOperationError(
                    f"kubectl on {self.host} timed out after {timeout}s"
                ) from e
            except Exception as e:
                raise ClusterOperationError(
                    f"unable to run kubectl on {self.host}: {e}"
                ) from e
            return CommandResult(
                returncode=result.exited,
                stdout=result.stdout,
                stderr=result.stderr,
            )

        return await asyncio.get_event_loop().run_in_executor(None, _run)

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None
