"""
Cluster Client Port

Architectural Intent:
- Port interface for building and reconciling resource objects on a cluster
- Server-side dry run is a capability: server_dry_run_client() returns
  (client, supported) instead of callers probing concrete adapter types
- Adapters raise ClusterOperationError (with the partial ClusterResult for
  update) and ManifestError for unparsable manifests
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple
from rewind.domain.value_objects.resource_object import ClusterResult, ObjectSet


class ClusterClientPort(ABC):
    """
    Port interface for cluster access.
    """

    @abstractmethod
    async def is_reachable(self) -> None:
        """
        Raises ClusterOperationError if the cluster cannot be contacted.
        """
        pass

    @abstractmethod
    async def build(self, manifest: str) -> ObjectSet:
        """
        Parses a manifest into resource objects.
        """
        pass

    @abstractmethod
    async def update(
        self, current: ObjectSet, target: ObjectSet, force: bool = False
    ) -> ClusterResult:
        """
        Reconciles the live cluster from ``current`` toward ``target``.
        With force, conflicting resources are replaced rather than patched.
        """
        pass

    @abstractmethod
    async def create(self, objects: ObjectSet) -> ClusterResult:
        """
        Creates objects that are expected not to exist yet.
        """
        pass

    @abstractmethod
    async def wait(self, objects: ObjectSet, timeout: float) -> None:
        """
        Waits until workloads are ready. Raises ClusterOperationError on timeout.
        """
        pass

    @abstractmethod
    async def wait_with_jobs(self, objects: ObjectSet, timeout: float) -> None:
        """
        Like wait(), additionally waiting for Jobs to complete.
        """
        pass

    @abstractmethod
    async def delete(self, objects: ObjectSet) -> Tuple[int, List[Exception]]:
        """
        Deletes objects, returning the number deleted and per-object errors.
        """
        pass

    @abstractmethod
    async def select_pods(
        self, namespace: str, selector: Dict[str, str]
    ) -> ObjectSet:
        """
        Lists pods in a namespace matching all selector labels.
        """
        pass

    def server_dry_run_client(self) -> Tuple[Optional["ClusterClientPort"], bool]:
        """
        Returns a variant of this client that only submits server-side dry
        runs, and whether the capability is supported at all.
        """
        return None, False
