"""
Rollback DTOs

Architectural Intent:
- Input contract of the rollback engine and its produced outcome
- Boundary validation of timeouts and retention; the requested revision is
  validated by the engine itself so that it is reported as InvalidRevisionError
"""

from dataclasses import dataclass
from typing import Optional
from rewind.domain.entities.release import Release, ReleaseStatus
from rewind.domain.value_objects.resource_object import ClusterResult

DEFAULT_TIMEOUT_SECONDS = 300.0


@dataclass(frozen=True)
class RollbackConfiguration:
    # 0 means the revision before the current one
    revision: int = 0
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    wait: bool = False
    wait_for_jobs: bool = False
    disable_hooks: bool = False
    dry_run: bool = False
    server_dry_run: bool = False
    recreate: bool = False
    force: bool = False
    cleanup_on_fail: bool = False
    # Forwarded to the release store; 0 keeps every revision
    max_history: int = 0

    def __post_init__(self) -> None:
        if self.timeout < 0:
            raise ValueError(f"timeout cannot be negative, got {self.timeout}")
        if self.max_history < 0:
            raise ValueError(f"max_history cannot be negative, got {self.max_history}")

    @property
    def persists(self) -> bool:
        """Whether this rollback writes to the release store at all."""
        return not (self.dry_run or self.server_dry_run)


@dataclass(frozen=True)
class RollbackOutcome:
    release: Release
    result: Optional[ClusterResult] = None

    @property
    def succeeded(self) -> bool:
        return self.release.status is ReleaseStatus.DEPLOYED
