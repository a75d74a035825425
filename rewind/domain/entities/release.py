"""
Release Module

Architectural Intent:
- Release is the consistency boundary for one revision of a named deployment
- Releases are immutable snapshots; every status change returns a new instance
  so callers and the engine never alias the same mutable record
- Status changes go through explicit transition methods that enforce the
  rollback state machine (pending -> deployed | failed, deployed -> superseded)

Serialization:
- to_dict()/from_dict() give the JSON form used by persistent stores
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from datetime import datetime, UTC
from enum import Enum
from typing import Any, Optional
from rewind.domain.entities.hook import Hook


class ReleaseStatus(Enum):
    UNKNOWN = "unknown"
    DEPLOYED = "deployed"
    UNINSTALLED = "uninstalled"
    SUPERSEDED = "superseded"
    FAILED = "failed"
    UNINSTALLING = "uninstalling"
    PENDING_INSTALL = "pending-install"
    PENDING_UPGRADE = "pending-upgrade"
    PENDING_ROLLBACK = "pending-rollback"

    def is_pending(self) -> bool:
        return self in (
            ReleaseStatus.PENDING_INSTALL,
            ReleaseStatus.PENDING_UPGRADE,
            ReleaseStatus.PENDING_ROLLBACK,
        )

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ChartRef:
    name: str
    version: str = ""
    app_version: str = ""

    def __str__(self) -> str:
        return f"{self.name}-{self.version}" if self.version else self.name


@dataclass(frozen=True)
class Release:
    name: str
    revision: int
    namespace: str = "default"
    chart: Optional[ChartRef] = None
    config: dict[str, Any] = field(default_factory=dict)
    manifest: str = ""
    hooks: tuple[Hook, ...] = ()
    status: ReleaseStatus = ReleaseStatus.UNKNOWN
    first_deployed: Optional[datetime] = None
    last_deployed: Optional[datetime] = None
    description: str = ""
    notes: str = ""

    def __post_init__(self) -> None:
        if self.revision < 1:
            raise ValueError(f"Release revision must be positive, got {self.revision}")

    def __repr__(self) -> str:
        return (
            f"Release(name={self.name}, revision={self.revision}, "
            f"namespace={self.namespace}, status={self.status})"
        )

    # -- Transitions ---------------------------------------------------------

    def with_status(
        self, status: ReleaseStatus, description: Optional[str] = None
    ) -> "Release":
        if description is None:
            return replace(self, status=status)
        return replace(self, status=status, description=description)

    def supersede(self) -> "Release":
        return self.with_status(ReleaseStatus.SUPERSEDED)

    def deploy(self) -> "Release":
        if not self.status.is_pending():
            raise ValueError(
                f"Release {self.name} v{self.revision} can only be deployed "
                f"from a pending status, not {self.status}"
            )
        return self.with_status(ReleaseStatus.DEPLOYED)

    def fail(self, description: str) -> "Release":
        if not self.status.is_pending():
            raise ValueError(
                f"Release {self.name} v{self.revision} can only fail "
                f"from a pending status, not {self.status}"
            )
        return self.with_status(ReleaseStatus.FAILED, description)

    def rollback_draft(
        self, source: "Release", now: Optional[datetime] = None
    ) -> "Release":
        """Next revision of this release carrying the content of ``source``."""
        return Release(
            name=self.name,
            namespace=self.namespace,
            revision=self.revision + 1,
            chart=source.chart,
            config=dict(source.config),
            manifest=source.manifest,
            hooks=source.hooks,
            status=ReleaseStatus.PENDING_ROLLBACK,
            first_deployed=self.first_deployed,
            last_deployed=now or datetime.now(UTC),
            # Overridden on failure.
            description=f"Rollback to {source.revision}",
            notes=source.notes,
        )

    # -- Serialization -------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "namespace": self.namespace,
            "revision": self.revision,
            "chart": (
                {
                    "name": self.chart.name,
                    "version": self.chart.version,
                    "app_version": self.chart.app_version,
                }
                if self.chart
                else None
            ),
            "config": self.config,
            "manifest": self.manifest,
            "hooks": [h.to_dict() for h in self.hooks],
            "status": self.status.value,
            "first_deployed": _iso(self.first_deployed),
            "last_deployed": _iso(self.last_deployed),
            "description": self.description,
            "notes": self.notes,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Release":
        chart = data.get("chart")
        return Release(
            name=data["name"],
            namespace=data.get("namespace", "default"),
            revision=int(data["revision"]),
            chart=ChartRef(**chart) if chart else None,
            config=dict(data.get("config") or {}),
            manifest=data.get("manifest", ""),
            hooks=tuple(Hook.from_dict(h) for h in data.get("hooks", ())),
            status=ReleaseStatus(data.get("status", "unknown")),
            first_deployed=_parse_iso(data.get("first_deployed")),
            last_deployed=_parse_iso(data.get("last_deployed")),
            description=data.get("description", ""),
            notes=data.get("notes", ""),
        )


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse_iso(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None
