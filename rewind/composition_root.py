"""
Composition Root

Architectural Intent:
- Single place where adapters and the rollback use case are wired together
- No adapter instantiation should occur outside this module (except tests)

Design Decisions:
- Simple dataclass container instead of a DI framework
- The SQLite store opens its database lazily, so building the container
  performs no I/O
"""

from dataclasses import dataclass
from typing import Optional
from rewind.application.use_cases.rollback_release import RollbackRelease
from rewind.domain.events.event_base import DomainEvent
from rewind.domain.ports.release_store_port import ReleaseStorePort
from rewind.domain.value_objects.control_plane_host import ControlPlaneHost
from rewind.infrastructure.adapters.cluster_hook_executor import ClusterHookExecutor
from rewind.infrastructure.adapters.fabric_runner import FabricKubectlRunner
from rewind.infrastructure.adapters.kubectl_adapter import KubectlClusterClient
from rewind.infrastructure.adapters.kubectl_runner import KubectlRunner, LocalKubectlRunner
from rewind.infrastructure.config import KubeConfig, RewindConfig, StoreConfig
from rewind.infrastructure.event_bus import EventBus, log_event
from rewind.infrastructure.repositories import InMemoryReleaseStore, SQLiteReleaseStore


@dataclass
class RewindContainer:
    """DI container holding all wired dependencies."""

    config: RewindConfig
    release_store: ReleaseStorePort
    cluster_client: KubectlClusterClient
    hook_executor: ClusterHookExecutor
    event_bus: EventBus
    rollback: RollbackRelease


def create_runner(kube: KubeConfig) -> KubectlRunner:
    if kube.control_plane:
        return FabricKubectlRunner(
            ControlPlaneHost.parse(kube.control_plane), kubectl_path=kube.kubectl_path
        )
    return LocalKubectlRunner(kube.kubectl_path)


def create_release_store(store: StoreConfig, max_history: int = 0) -> ReleaseStorePort:
    if store.backend == "memory":
        return InMemoryReleaseStore(max_history=max_history)
    if store.backend == "sqlite":
        return SQLiteReleaseStore(store.db_path, max_history=max_history)
    raise ValueError(f"Unknown release store backend: {store.backend!r}")


def create_container(config: Optional[RewindConfig] = None) -> RewindContainer:
    """Create and wire all dependencies."""
    config = config or RewindConfig()

    release_store = create_release_store(config.store, config.rollback.max_history)
    cluster_client = KubectlClusterClient(
        create_runner(config.kube),
        namespace=config.kube.namespace,
        kubeconfig=config.kube.kubeconfig,
        context=config.kube.context,
    )
    hook_executor = ClusterHookExecutor(cluster_client)
    event_bus = EventBus()
    event_bus.subscribe(DomainEvent, log_event)

    rollback = RollbackRelease(release_store, cluster_client, hook_executor, event_bus)

    return RewindContainer(
        config=config,
        release_store=release_store,
        cluster_client=cluster_client,
        hook_executor=hook_executor,
        event_bus=event_bus,
        rollback=rollback,
    )
