"""
Domain Ports Package

Architectural Intent:
- Port interfaces for the collaborators of the rollback engine
- Ports define what the engine needs, adapters implement how
"""

from rewind.domain.ports.release_store_port import ReleaseStorePort
from rewind.domain.ports.cluster_client_port import ClusterClientPort
from rewind.domain.ports.hook_executor_port import HookExecutorPort
from rewind.domain.ports.event_bus_port import EventBusPort

__all__ = [
    "ReleaseStorePort",
    "ClusterClientPort",
    "HookExecutorPort",
    "EventBusPort",
]
