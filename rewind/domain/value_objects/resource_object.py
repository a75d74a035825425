"""
Resource Object Value Objects

Architectural Intent:
- ResourceObject is one cluster resource descriptor built from a manifest
- ObjectSet is the ordered, immutable set of descriptors of one manifest
- ClusterResult partitions an applied diff into created/updated/deleted
- Every UpdatedObject carries the live snapshot taken before the update;
  a missing snapshot is a programming defect and is rejected on construction
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Optional


@dataclass(frozen=True)
class ResourceObject:
    """
    Value Object representing a single cluster resource descriptor.
    """
    api_version: str
    kind: str
    name: str
    namespace: str = ""
    body: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not self.kind:
            raise ValueError("Resource kind cannot be empty")
        if not self.name:
            raise ValueError("Resource name cannot be empty")

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.kind, self.namespace, self.name)

    @property
    def labels(self) -> dict[str, str]:
        return dict(self.body.get("metadata", {}).get("labels") or {})

    @property
    def match_labels(self) -> dict[str, str]:
        """Pod selector labels of a workload, empty for non-workloads."""
        selector = (self.body.get("spec") or {}).get("selector") or {}
        if isinstance(selector, dict) and "matchLabels" in selector:
            return dict(selector["matchLabels"] or {})
        return {}

    def __str__(self) -> str:
        if self.namespace:
            return f"{self.kind}/{self.name} (namespace {self.namespace})"
        return f"{self.kind}/{self.name}"

    @staticmethod
    def from_body(
        body: dict[str, Any], default_namespace: str = ""
    ) -> "ResourceObject":
        metadata = body.get("metadata") or {}
        return ResourceObject(
            api_version=str(body.get("apiVersion", "")),
            kind=str(body.get("kind", "")),
            name=str(metadata.get("name", "")),
            namespace=str(metadata.get("namespace") or default_namespace),
            body=body,
        )


@dataclass(frozen=True)
class ObjectSet:
    """
    Ordered immutable set of resource descriptors.
    """
    objects: tuple[ResourceObject, ...] = ()

    def __iter__(self) -> Iterator[ResourceObject]:
        return iter(self.objects)

    def __len__(self) -> int:
        return len(self.objects)

    def __bool__(self) -> bool:
        return bool(self.objects)

    def keys(self) -> set[tuple[str, str, str]]:
        return {obj.key for obj in self.objects}

    def get(self, key: tuple[str, str, str]) -> Optional[ResourceObject]:
        for obj in self.objects:
            if obj.key == key:
                return obj
        return None

    def difference(self, other: "ObjectSet") -> "ObjectSet":
        """Objects in this set whose key is absent from ``other``."""
        other_keys = other.keys()
        return ObjectSet(tuple(o for o in self.objects if o.key not in other_keys))

    def filter_kinds(self, *kinds: str) -> "ObjectSet":
        return ObjectSet(tuple(o for o in self.objects if o.kind in kinds))

    @staticmethod
    def of(objects: Iterable[ResourceObject]) -> "ObjectSet":
        return ObjectSet(tuple(objects))


@dataclass(frozen=True)
class UpdatedObject:
    """
    An updated resource paired with its pre-update live snapshot.
    """
    target: ResourceObject
    live: ResourceObject

    def __post_init__(self) -> None:
        if self.live is None:
            raise ValueError(
                f"Updated object {self.target} has no pre-update snapshot"
            )


@dataclass(frozen=True)
class ClusterResult:
    """
    Outcome of reconciling one object set toward another.
    """
    created: ObjectSet = field(default_factory=ObjectSet)
    updated: tuple[UpdatedObject, ...] = ()
    deleted: ObjectSet = field(default_factory=ObjectSet)

    @property
    def updated_objects(self) -> ObjectSet:
        return ObjectSet(tuple(u.target for u in self.updated))

    def summary(self) -> str:
        return (
            f"{len(self.created)} created, {len(self.updated)} updated, "
            f"{len(self.deleted)} deleted"
        )
