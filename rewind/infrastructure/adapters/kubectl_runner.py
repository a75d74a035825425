"""
Kubectl Runner

Architectural Intent:
- Executes kubectl invocations for KubectlClusterClient
- LocalKubectlRunner runs kubectl on this machine via subprocess
- FabricKubectlRunner (fabric_runner.py) runs it on a control-plane node
- Blocking subprocess calls run in the default executor
"""

import asyncio
import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence
from rewind.domain.errors import ClusterOperationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class KubectlRunner(ABC):
    @abstractmethod
    async def run(
        self,
        args: Sequence[str],
        stdin: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> CommandResult:
        """
        Runs kubectl with ``args``. A non-zero exit is returned, not raised;
        failing to run kubectl at all raises ClusterOperationError.
        """
        pass


class LocalKubectlRunner(KubectlRunner):
    def __init__(self, kubectl_path: str = "kubectl"):
        self.kubectl_path = kubectl_path

    async def run(
        self,
        args: Sequence[str],
        stdin: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> CommandResult:
        command = [self.kubectl_path, *args]

        def _run() -> CommandResult:
            logger.debug("running %s", " ".join(command))
            try:
                completed = subprocess.run(
                    command,
                    input=stdin,
                    capture_output=True,
                    text=True,
                    timeout=timeout,
                )
            except FileNotFoundError as e:
                raise ClusterOperationError(
                    f"'{self.kubectl_path}' not found"
                ) from e
            except subprocess.TimeoutExpired as e:
                raise ClusterOperationError(
                    f"kubectl {args[0] if args else ''} timed out after {timeout}s"
                ) from e
            return CommandResult(
                returncode=completed.returncode,
                stdout=completed.stdout,
                stderr=completed.stderr,
            )

        return await asyncio.get_event_loop().run_in_executor(None, _run)
