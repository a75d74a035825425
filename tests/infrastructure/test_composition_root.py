"""Tests for composition root DI container."""

import pytest
from rewind.composition_root import (
    RewindContainer,
    create_container,
    create_release_store,
    create_runner,
)
from rewind.infrastructure.adapters.fabric_runner import FabricKubectlRunner
from rewind.infrastructure.adapters.kubectl_runner import LocalKubectlRunner
from rewind.infrastructure.config import KubeConfig, RewindConfig, StoreConfig
from rewind.infrastructure.repositories import InMemoryReleaseStore, SQLiteReleaseStore


class TestCompositionRoot:
    def test_create_container(self):
        container = create_container(RewindConfig(store=StoreConfig(backend="memory")))

        assert isinstance(container, RewindContainer)
        assert container.release_store is not None
        assert container.cluster_client is not None
        assert container.hook_executor is not None
        assert container.event_bus is not None
        assert container.rollback is not None

    def test_rollback_uses_wired_ports(self):
        container = create_container(RewindConfig(store=StoreConfig(backend="memory")))

        assert container.rollback.release_store is container.release_store
        assert container.rollback.cluster_client is container.cluster_client
        assert container.rollback.hook_executor is container.hook_executor
        assert container.rollback.event_bus is container.event_bus

    def test_hooks_run_on_same_cluster(self):
        container = create_container(RewindConfig(store=StoreConfig(backend="memory")))
        assert container.hook_executor.cluster is container.cluster_client

    def test_kube_settings_reach_client(self):
        config = RewindConfig(
            kube=KubeConfig(namespace="prod", context="east", kubeconfig="/etc/kc"),
            store=StoreConfig(backend="memory"),
        )
        client = create_container(config).cluster_client
        assert client.namespace == "prod"
        assert client.context == "east"
        assert client.kubeconfig == "/etc/kc"
        assert not client.server_dry_run


class TestFactories:
    def test_local_runner_by_default(self):
        runner = create_runner(KubeConfig(kubectl_path="/opt/kubectl"))
        assert isinstance(runner, LocalKubectlRunner)
        assert runner.kubectl_path == "/opt/kubectl"

    def test_fabric_runner_for_control_plane(self):
        runner = create_runner(KubeConfig(control_plane="ops@10.0.0.5:2222"))
        assert isinstance(runner, FabricKubectlRunner)
        assert runner.host.user == "ops"
        assert runner.host.port == 2222

    def test_memory_store(self):
        store = create_release_store(StoreConfig(backend="memory"), max_history=4)
        assert isinstance(store, InMemoryReleaseStore)
        assert store.max_history == 4

    def test_sqlite_store(self, tmp_path):
        store = create_release_store(
            StoreConfig(backend="sqlite", db_path=str(tmp_path / "r.db"))
        )
        assert isinstance(store, SQLiteReleaseStore)

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown release store backend"):
            create_release_store(StoreConfig(backend="etcd"))
