"""Immutable value objects of the rollback domain."""

from rewind.domain.value_objects.release_name import ReleaseName
from rewind.domain.value_objects.resource_object import (
    ClusterResult,
    ObjectSet,
    ResourceObject,
    UpdatedObject,
)
from rewind.domain.value_objects.control_plane_host import ControlPlaneHost

__all__ = [
    "ReleaseName",
    "ResourceObject",
    "ObjectSet",
    "UpdatedObject",
    "ClusterResult",
    "ControlPlaneHost",
]
