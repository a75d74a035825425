"""Release aggregate and its hook bindings."""

from rewind.domain.entities.hook import Hook, HookDeletePolicy, HookEvent
from rewind.domain.entities.release import ChartRef, Release, ReleaseStatus

__all__ = [
    "Hook",
    "HookEvent",
    "HookDeletePolicy",
    "ChartRef",
    "Release",
    "ReleaseStatus",
]
