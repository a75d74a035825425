"""
Rollback Events

Published by the rollback engine through the EventBusPort:
- RollbackStartedEvent: target draft resolved and about to be applied
- ReleaseSupersededEvent: a previously deployed revision was superseded
- RollbackFailedEvent: the target revision ended FAILED
- RollbackCompletedEvent: the target revision ended DEPLOYED
"""

from dataclasses import dataclass
from typing import Any
from rewind.domain.events.event_base import DomainEvent


def release_aggregate_id(name: str, revision: int) -> str:
    return f"{name}.v{revision}"


@dataclass(frozen=True)
class RollbackStartedEvent(DomainEvent):
    release_name: str = ""
    from_revision: int = 0
    to_revision: int = 0

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            release_name=self.release_name,
            from_revision=self.from_revision,
            to_revision=self.to_revision,
        )
        return data


@dataclass(frozen=True)
class ReleaseSupersededEvent(DomainEvent):
    release_name: str = ""
    revision: int = 0

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(release_name=self.release_name, revision=self.revision)
        return data


@dataclass(frozen=True)
class RollbackFailedEvent(DomainEvent):
    release_name: str = ""
    revision: int = 0
    reason: str = ""

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            release_name=self.release_name,
            revision=self.revision,
            reason=self.reason,
        )
        return data


@dataclass(frozen=True)
class RollbackCompletedEvent(DomainEvent):
    release_name: str = ""
    revision: int = 0

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(release_name=self.release_name, revision=self.revision)
        return data
