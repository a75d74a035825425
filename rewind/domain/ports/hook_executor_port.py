"""
Hook Executor Port

Architectural Intent:
- Port interface for running the lifecycle hooks of a release
- Implemented by ClusterHookExecutor
"""

from abc import ABC, abstractmethod
from rewind.domain.entities.hook import HookEvent
from rewind.domain.entities.release import Release


class HookExecutorPort(ABC):
    """
    Port interface for running lifecycle hooks.
    """

    @abstractmethod
    async def exec(self, release: Release, event: HookEvent, timeout: float) -> None:
        """
        Runs every hook of ``release`` bound to ``event``, in weight order.
        Raises HookExecutionError when a hook fails or times out.
        """
        pass
