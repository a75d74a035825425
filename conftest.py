"""Global test configuration.

Shared fixtures: release factory, in-memory release store and mocked
cluster/hook ports with sensible defaults.
"""

from datetime import datetime, UTC
from unittest.mock import MagicMock

import pytest

from rewind.domain.entities.release import ChartRef, Release, ReleaseStatus
from rewind.domain.ports.cluster_client_port import ClusterClientPort
from rewind.domain.ports.hook_executor_port import HookExecutorPort
from rewind.domain.value_objects.resource_object import ClusterResult, ObjectSet
from rewind.infrastructure.repositories.memory_release_store import InMemoryReleaseStore

FIRST_DEPLOYED = datetime(2024, 1, 1, tzinfo=UTC)

MANIFEST_TEMPLATE = """\
apiVersion: apps/v1
kind: Deployment
metadata:
  name: {name}
spec:
  selector:
    matchLabels:
      app: {name}
  template:
    metadata:
      labels:
        app: {name}
    spec:
      containers:
        - name: web
          image: "registry.local/{name}:{revision}"
---
apiVersion: v1
kind: Service
metadata:
  name: {name}
spec:
  selector:
    app: {name}
"""


def make_release(
    name: str = "app",
    revision: int = 1,
    status: ReleaseStatus = ReleaseStatus.SUPERSEDED,
    **overrides,
) -> Release:
    fields = dict(
        name=name,
        revision=revision,
        namespace="default",
        chart=ChartRef(name=name, version=f"1.{revision}.0"),
        config={"replicas": revision},
        manifest=MANIFEST_TEMPLATE.format(name=name, revision=revision),
        status=status,
        first_deployed=FIRST_DEPLOYED,
        last_deployed=FIRST_DEPLOYED,
        description="Upgrade complete" if revision > 1 else "Install complete",
        notes=f"notes for {revision}",
    )
    fields.update(overrides)
    return Release(**fields)


@pytest.fixture
def release_factory():
    return make_release


@pytest.fixture
def store():
    return InMemoryReleaseStore()


@pytest.fixture
def seed(store):
    """Stores ``count`` revisions of a release; only the last one is DEPLOYED."""

    async def _seed(name: str = "app", count: int = 5) -> InMemoryReleaseStore:
        for revision in range(1, count + 1):
            status = (
                ReleaseStatus.DEPLOYED if revision == count else ReleaseStatus.SUPERSEDED
            )
            await store.create(make_release(name, revision, status))
        return store

    return _seed


@pytest.fixture
def cluster():
    client = MagicMock(spec=ClusterClientPort)
    client.server_dry_run_client.return_value = (None, False)
    client.build.return_value = ObjectSet()
    client.update.return_value = ClusterResult()
    client.delete.return_value = (0, [])
    client.select_pods.return_value = ObjectSet()
    return client


@pytest.fixture
def hooks():
    return MagicMock(spec=HookExecutorPort)
