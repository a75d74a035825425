"""
Rollback Release Use Case

Architectural Intent:
- Orchestrates rolling a release back to a prior revision
- Resolves the designated revision, materializes the next revision as a
  PENDING_ROLLBACK draft, reconciles the cluster toward its manifest, runs
  the rollback hooks, waits for readiness and records the final statuses
- Delegates persistence, cluster access and hooks to ports

Failure policy:
- Apply failure: current is SUPERSEDED, target FAILED, both recorded; with
  cleanup_on_fail the objects created by the failed apply are deleted and a
  deletion failure is reported together with the original apply error
- Wait failure: only the target is FAILED and recorded; current is left as
  it was and nothing that was applied is deleted
- Server dry run never writes to the release store
"""

import asyncio
import logging
from datetime import datetime, UTC
from typing import Awaitable, Callable, NoReturn, Optional, Tuple, TypeVar
from rewind.application.dtos.rollback_dtos import RollbackConfiguration, RollbackOutcome
from rewind.domain.entities.hook import HookEvent
from rewind.domain.entities.release import Release
from rewind.domain.errors import (
    ApplyError,
    BuildManifestError,
    CleanupError,
    ClusterCapabilityError,
    ClusterOperationError,
    ClusterUnreachableError,
    HookExecutionError,
    InvalidReleaseNameError,
    InvalidRevisionError,
    ManifestError,
    ReleaseNotFoundError,
    StoreError,
    WaitTimeoutError,
)
from rewind.domain.events import (
    DomainEvent,
    ReleaseSupersededEvent,
    RollbackCompletedEvent,
    RollbackFailedEvent,
    RollbackStartedEvent,
    release_aggregate_id,
)
from rewind.domain.ports.cluster_client_port import ClusterClientPort
from rewind.domain.ports.event_bus_port import EventBusPort
from rewind.domain.ports.hook_executor_port import HookExecutorPort
from rewind.domain.ports.release_store_port import ReleaseStorePort
from rewind.domain.value_objects.release_name import is_valid_release_name
from rewind.domain.value_objects.resource_object import ClusterResult, ObjectSet

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Workload kinds whose pods are recreated after an update
RECREATABLE_KINDS = ("Deployment", "StatefulSet", "DaemonSet", "ReplicaSet")


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RollbackRelease:
    def __init__(
        self,
        release_store: ReleaseStorePort,
        cluster_client: ClusterClientPort,
        hook_executor: HookExecutorPort,
        event_bus: Optional[EventBusPort] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.release_store = release_store
        self.cluster_client = cluster_client
        self.hook_executor = hook_executor
        self.event_bus = event_bus
        self.clock = clock

    # -- Public entry point --------------------------------------------------

    async def run(self, name: str, config: RollbackConfiguration) -> RollbackOutcome:
        """Rolls ``name`` back and persists the final target status once."""
        self._validate(name, config)
        cluster = await self._preflight(name, config)

        self.release_store.max_history = config.max_history

        logger.info("preparing rollback of %s", name)
        current, target, designated = await self._resolve(name, config)

        if config.persists:
            logger.info("creating rolled back release for %s", name)
            await self.release_store.create(target)

        logger.info("performing rollback of %s", name)
        target, result = await self.execute(
            current, target, config, cluster=cluster, designated_revision=designated
        )

        if config.persists:
            logger.info("updating status for rolled back release for %s", name)
            await self.release_store.update(target)

        return RollbackOutcome(release=target, result=result)

    # -- Resolution ----------------------------------------------------------

    async def resolve_target(
        self, name: str, config: RollbackConfiguration
    ) -> Tuple[Release, Release]:
        """Returns the current release and the unsaved draft replacing it."""
        current, target, _ = await self._resolve(name, config)
        return current, target

    async def _resolve(
        self, name: str, config: RollbackConfiguration
    ) -> Tuple[Release, Release, int]:
        self._validate(name, config)

        current = await self.release_store.last(name)

        designated = config.revision
        if designated == 0:
            designated = current.revision - 1

        logger.info(
            "rolling back %s (current: v%d, target: v%d)",
            name,
            current.revision,
            designated,
        )

        previous = await self.release_store.get(name, designated)
        return current, current.rollback_draft(previous, now=self.clock()), designated

    @staticmethod
    def _validate(name: str, config: RollbackConfiguration) -> None:
        if not is_valid_release_name(name):
            raise InvalidReleaseNameError(
                f"Release name is invalid: {name}", release_name=name
            )
        if config.revision < 0:
            raise InvalidRevisionError(
                f"invalid release revision {config.revision}: "
                "revision must be a non-negative number",
                release_name=name,
                revision=config.revision,
            )

    # -- Execution -----------------------------------------------------------

    async def execute(
        self,
        current: Release,
        target: Release,
        config: RollbackConfiguration,
        cluster: Optional[ClusterClientPort] = None,
        designated_revision: Optional[int] = None,
    ) -> Tuple[Release, Optional[ClusterResult]]:
        """Applies ``target`` over ``current`` and returns the final target.

        ``cluster`` is the client returned by a previous pre-flight check;
        when omitted the pre-flight check runs here.
        """
        context = {
            "release_name": target.name,
            "revision": (
                designated_revision
                if designated_revision is not None
                else target.revision
            ),
        }

        if cluster is None:
            cluster = await self._preflight(target.name, config)

        if config.dry_run:
            logger.info("dry run for %s", target.name)
            return target, None

        current_objects = await self._build(cluster, current.manifest, "current", context)
        target_objects = await self._build(cluster, target.manifest, "target", context)

        await self._publish(
            RollbackStartedEvent(
                aggregate_id=release_aggregate_id(target.name, target.revision),
                release_name=target.name,
                from_revision=current.revision,
                to_revision=context["revision"],
            )
        )

        if not config.server_dry_run:
            if config.disable_hooks:
                logger.info("rollback hooks disabled for %s", target.name)
            else:
                await self._exec_hook(target, HookEvent.PRE_ROLLBACK, config, context)

        try:
            result = await cluster.update(current_objects, target_objects, config.force)
        except ClusterOperationError as e:
            await self._fail_apply(current, target, config, cluster, e, context)

        if config.server_dry_run:
            return target.deploy(), result

        if config.recreate:
            await self._recreate(cluster, result)

        if config.wait:
            await self._wait(cluster, target, target_objects, config, context)

        if not config.disable_hooks:
            await self._exec_hook(target, HookEvent.POST_ROLLBACK, config, context)

        await self._supersede_deployed(target.name)

        target = target.deploy()
        await self._publish(
            RollbackCompletedEvent(
                aggregate_id=release_aggregate_id(target.name, target.revision),
                release_name=target.name,
                revision=target.revision,
            )
        )
        return target, result

    async def _preflight(
        self, name: str, config: RollbackConfiguration
    ) -> ClusterClientPort:
        cluster = self.cluster_client

        if config.server_dry_run:
            dry_run_client, supported = cluster.server_dry_run_client()
            if not supported or dry_run_client is None:
                raise ClusterCapabilityError(
                    "the cluster client doesn't support server dry run",
                    release_name=name,
                )
            cluster = dry_run_client

        if not config.dry_run:
            try:
                await cluster.is_reachable()
            except ClusterOperationError as e:
                raise ClusterUnreachableError(
                    f"cluster unreachable: {e}", release_name=name
                ) from e

        return cluster

    async def _build(
        self, cluster: ClusterClientPort, manifest: str, side: str, context: dict
    ) -> ObjectSet:
        try:
            return await cluster.build(manifest)
        except (ManifestError, ClusterOperationError) as e:
            raise BuildManifestError(
                f"unable to build kubernetes objects from {side} release manifest: {e}",
                side=side,
                **context,
            ) from e

    async def _exec_hook(
        self,
        target: Release,
        event: HookEvent,
        config: RollbackConfiguration,
        context: dict,
    ) -> None:
        try:
            await self._bounded(
                self.hook_executor.exec(target, event, config.timeout), config.timeout
            )
        except asyncio.TimeoutError as e:
            raise HookExecutionError(
                f"{event} hook for {target.name} timed out after {config.timeout}s",
                kind=event.value,
                **context,
            ) from e
        except ClusterOperationError as e:
            raise HookExecutionError(
                f"{event} hook for {target.name} failed: {e}",
                kind=event.value,
                **context,
            ) from e

    async def _fail_apply(
        self,
        current: Release,
        target: Release,
        config: RollbackConfiguration,
        cluster: ClusterClientPort,
        error: ClusterOperationError,
        context: dict,
    ) -> NoReturn:
        result = error.result or ClusterResult()
        message = f'Rollback "{target.name}" failed: {error}'
        logger.warning("warning: %s", message)

        current = current.supersede()
        target = target.fail(message)
        apply_error = ApplyError(message, release=target, result=result, **context)

        if not config.server_dry_run:
            await self._record(current)
            await self._record(target)
            await self._publish_failure(target, message)
            if config.cleanup_on_fail:
                logger.info(
                    "cleanup on fail set, cleaning up %d resources", len(result.created)
                )
                try:
                    _, errors = await cluster.delete(result.created)
                except ClusterOperationError as e:
                    errors = [e]
                if errors:
                    raise CleanupError(apply_error, errors) from error
                logger.info("resource cleanup complete")

        raise apply_error from error

    async def _recreate(self, cluster: ClusterClientPort, result: ClusterResult) -> None:
        """Deletes the pods of updated workloads so they restart.

        Not required for the rollback to succeed, so failures are only logged.
        """
        errors: list[Exception] = []
        for workload in result.updated_objects.filter_kinds(*RECREATABLE_KINDS):
            selector = workload.match_labels
            if not selector:
                continue
            try:
                pods = await cluster.select_pods(workload.namespace, selector)
            except ClusterOperationError as e:
                errors.append(e)
                continue
            logger.debug("recreating %d pods of %s", len(pods), workload)
            try:
                _, delete_errors = await cluster.delete(pods)
            except ClusterOperationError as e:
                errors.append(e)
                continue
            errors.extend(delete_errors)

        if errors:
            logger.error(
                "unable to recreate pods: %s", ", ".join(str(e) for e in errors)
            )

    async def _wait(
        self,
        cluster: ClusterClientPort,
        target: Release,
        objects: ObjectSet,
        config: RollbackConfiguration,
        context: dict,
    ) -> None:
        waiter = cluster.wait_with_jobs if config.wait_for_jobs else cluster.wait
        try:
            await self._bounded(waiter(objects, config.timeout), config.timeout)
        except (ClusterOperationError, asyncio.TimeoutError) as e:
            cause = str(e) or f"timed out after {config.timeout}s"
            message = f'Release "{target.name}" failed: {cause}'
            failed = target.fail(message)
            await self._record(failed)
            await self._publish_failure(failed, message)
            raise WaitTimeoutError(
                f"release {target.name} failed: {cause}", release=failed, **context
            ) from e

    async def _supersede_deployed(self, name: str) -> None:
        for release in await self.release_store.deployed_all(name):
            logger.info("superseding previous deployment %d", release.revision)
            await self._record(release.supersede())
            await self._publish(
                ReleaseSupersededEvent(
                    aggregate_id=release_aggregate_id(name, release.revision),
                    release_name=name,
                    revision=release.revision,
                )
            )

    # -- Helpers -------------------------------------------------------------

    async def _record(self, release: Release) -> None:
        """Persists a status change; store failures here are logged only."""
        try:
            await self.release_store.update(release)
        except (StoreError, ReleaseNotFoundError) as e:
            logger.warning(
                "warning: failed to update release %s v%d: %s",
                release.name,
                release.revision,
                e,
            )

    async def _publish(self, event: DomainEvent) -> None:
        if self.event_bus is not None:
            await self.event_bus.publish([event])

    async def _publish_failure(self, release: Release, reason: str) -> None:
        await self._publish(
            RollbackFailedEvent(
                aggregate_id=release_aggregate_id(release.name, release.revision),
                release_name=release.name,
                revision=release.revision,
                reason=reason,
            )
        )

    @staticmethod
    async def _bounded(awaitable: Awaitable[T], timeout: float) -> T:
        if timeout > 0:
            return await asyncio.wait_for(awaitable, timeout)
        return await awaitable
