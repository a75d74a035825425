"""
Hook Module

Architectural Intent:
- A hook is a manifest bound to one or more lifecycle events of a release
- Hooks have no lifecycle of their own; they live inside the owning Release
- Execution order within an event is (weight, name)
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any


class HookEvent(Enum):
    PRE_INSTALL = "pre-install"
    POST_INSTALL = "post-install"
    PRE_DELETE = "pre-delete"
    POST_DELETE = "post-delete"
    PRE_UPGRADE = "pre-upgrade"
    POST_UPGRADE = "post-upgrade"
    PRE_ROLLBACK = "pre-rollback"
    POST_ROLLBACK = "post-rollback"
    TEST = "test"

    def __str__(self) -> str:
        return self.value


class HookDeletePolicy(Enum):
    BEFORE_HOOK_CREATION = "before-hook-creation"
    HOOK_SUCCEEDED = "hook-succeeded"
    HOOK_FAILED = "hook-failed"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Hook:
    name: str
    kind: str
    manifest: str
    events: tuple[HookEvent, ...] = ()
    path: str = ""
    weight: int = 0
    delete_policies: tuple[HookDeletePolicy, ...] = ()

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Hook name cannot be empty")

    def bound_to(self, event: HookEvent) -> bool:
        return event in self.events

    def effective_delete_policies(self) -> tuple[HookDeletePolicy, ...]:
        """Declared policies, or before-hook-creation when none are declared."""
        return self.delete_policies or (HookDeletePolicy.BEFORE_HOOK_CREATION,)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind,
            "path": self.path,
            "manifest": self.manifest,
            "events": [e.value for e in self.events],
            "weight": self.weight,
            "delete_policies": [p.value for p in self.delete_policies],
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Hook":
        return Hook(
            name=data["name"],
            kind=data.get("kind", ""),
            path=data.get("path", ""),
            manifest=data.get("manifest", ""),
            events=tuple(HookEvent(e) for e in data.get("events", ())),
            weight=int(data.get("weight", 0)),
            delete_policies=tuple(
                HookDeletePolicy(p) for p in data.get("delete_policies", ())
            ),
        )
