"""
Cluster Hook Executor

Architectural Intent:
- HookExecutorPort adapter that runs hooks as cluster resources
- Hooks bound to an event run one at a time ordered by (weight, name)
- Each hook is built, created, and waited on (Jobs must complete)

Deletion policies:
- before-hook-creation (default): a previous instance is deleted first
- hook-succeeded / hook-failed: the hook resources are deleted afterwards
"""

import logging
from typing import List
from rewind.domain.entities.hook import Hook, HookDeletePolicy, HookEvent
from rewind.domain.entities.release import Release
from rewind.domain.errors import ClusterOperationError, HookExecutionError, ManifestError
from rewind.domain.ports.cluster_client_port import ClusterClientPort
from rewind.domain.ports.hook_executor_port import HookExecutorPort
from rewind.domain.value_objects.resource_object import ObjectSet

logger = logging.getLogger(__name__)


class ClusterHookExecutor(HookExecutorPort):
    def __init__(self, cluster: ClusterClientPort):
        self.cluster = cluster

    async def exec(self, release: Release, event: HookEvent, timeout: float) -> None:
        hooks = sorted(
            (h for h in release.hooks if h.bound_to(event)),
            key=lambda h: (h.weight, h.name),
        )
        if not hooks:
            logger.debug("no %s hooks for %s", event, release.name)
            return
        for hook in hooks:
            await self._run(release, hook, event, timeout)

    async def _run(
        self, release: Release, hook: Hook, event: HookEvent, timeout: float
    ) -> None:
        try:
            objects = await self.cluster.build(hook.manifest)
        except (ManifestError, ClusterOperationError) as e:
            raise self._error(
                release, hook, event,
                f"unable to build kubernetes object for {event} hook "
                f"{hook.path or hook.name}: {e}",
            ) from e

        policies = hook.effective_delete_policies()

        if HookDeletePolicy.BEFORE_HOOK_CREATION in policies:
            errors = await self._delete(objects)
            if errors:
                raise self._error(
                    release, hook, event,
                    f"unable to delete previous {event} hook {hook.name}: "
                    + ", ".join(str(e) for e in errors),
                )

        logger.info("executing %s hook %s for %s", event, hook.name, release.name)
        try:
            await self.cluster.create(objects)
            await self.cluster.wait_with_jobs(objects, timeout)
        except ClusterOperationError as e:
            if HookDeletePolicy.HOOK_FAILED in policies:
                for error in await self._delete(objects):
                    logger.warning("failed to delete hook %s: %s", hook.name, error)
            raise self._error(
                release, hook, event, f"{event} hook {hook.name} failed: {e}"
            ) from e

        if HookDeletePolicy.HOOK_SUCCEEDED in policies:
            errors = await self._delete(objects)
            if errors:
                raise self._error(
                    release, hook, event,
                    f"unable to delete succeeded hook {hook.name}: "
                    + ", ".join(str(e) for e in errors),
                )

    async def _delete(self, objects: ObjectSet) -> List[Exception]:
        _, errors = await self.cluster.delete(objects)
        return errors

    @staticmethod
    def _error(
        release: Release, hook: Hook, event: HookEvent, message: str
    ) -> HookExecutionError:
        return HookExecutionError(
            message,
            kind=event.value,
            hook=hook.name,
            release_name=release.name,
            revision=release.revision,
        )
