"""
Kubectl Adapter

Architectural Intent:
- Infrastructure adapter implementing ClusterClientPort via the kubectl CLI
- Objects are submitted as JSON on stdin, one kubectl call per object
- update() creates missing objects, applies (or force-replaces) existing
  ones and deletes objects only present in the current set; a failure
  carries the partial ClusterResult so callers can clean up what was created
- The server dry-run variant adds --dry-run=server to every mutating call
"""

import asyncio
import json
import logging
from typing import Dict, List, Optional, Sequence, Tuple
from rewind.domain.errors import ClusterOperationError
from rewind.domain.ports.cluster_client_port import ClusterClientPort
from rewind.domain.value_objects.resource_object import (
    ClusterResult,
    ObjectSet,
    ResourceObject,
    UpdatedObject,
)
from rewind.infrastructure.adapters.kubectl_runner import CommandResult, KubectlRunner
from rewind.infrastructure.adapters.manifest import parse_manifest

logger = logging.getLogger(__name__)

ROLLOUT_KINDS = ("Deployment", "StatefulSet", "DaemonSet")


def _resource_type(obj: ResourceObject) -> str:
    """TYPE[.VERSION.GROUP] form understood by kubectl."""
    group, _, version = obj.api_version.rpartition("/")
    if group:
        return f"{obj.kind}.{version}.{group}"
    return obj.kind


def _namespace_args(obj: ResourceObject) -> List[str]:
    return ["--namespace", obj.namespace] if obj.namespace else []


def _error_text(result: CommandResult) -> str:
    return (result.stderr or result.stdout).strip() or f"exit status {result.returncode}"


def _decode(result: CommandResult, what: str) -> dict:
    try:
        return json.loads(result.stdout)
    except ValueError as e:
        raise ClusterOperationError(f"unreadable kubectl output for {what}: {e}") from e


class KubectlClusterClient(ClusterClientPort):
    def __init__(
        self,
        runner: KubectlRunner,
        namespace: str = "default",
        kubeconfig: str = "",
        context: str = "",
        server_dry_run: bool = False,
    ):
        self.runner = runner
        self.namespace = namespace
        self.kubeconfig = kubeconfig
        self.context = context
        self.server_dry_run = server_dry_run

    def server_dry_run_client(self) -> Tuple[Optional[ClusterClientPort], bool]:
        client = KubectlClusterClient(
            self.runner,
            namespace=self.namespace,
            kubeconfig=self.kubeconfig,
            context=self.context,
            server_dry_run=True,
        )
        return client, True

    async def _kubectl(
        self,
        *args: str,
        stdin: Optional[str] = None,
        mutating: bool = False,
        timeout: Optional[float] = None,
    ) -> CommandResult:
        command: List[str] = list(args)
        if self.kubeconfig:
            command += ["--kubeconfig", self.kubeconfig]
        if self.context:
            command += ["--context", self.context]
        if mutating and self.server_dry_run:
            command.append("--dry-run=server")
        return await self.runner.run(command, stdin=stdin, timeout=timeout)

    async def is_reachable(self) -> None:
        result = await self._kubectl("version", "--output=json")
        if not result.ok:
            raise ClusterOperationError(
                f"kubernetes cluster unreachable: {_error_text(result)}"
            )

    async def build(self, manifest: str) -> ObjectSet:
        return parse_manifest(manifest, self.namespace)

    async def _get_live(self, obj: ResourceObject) -> Optional[ResourceObject]:
        result = await self._kubectl(
            "get", _resource_type(obj), obj.name, *_namespace_args(obj), "--output=json"
        )
        if not result.ok:
            if "NotFound" in result.stderr:
                return None
            raise ClusterOperationError(
                f"unable to get {obj}: {_error_text(result)}"
            )
        return ResourceObject.from_body(_decode(result, str(obj)), obj.namespace)

    async def _submit(self, verb: Sequence[str], obj: ResourceObject) -> CommandResult:
        return await self._kubectl(
            *verb,
            "--filename=-",
            *_namespace_args(obj),
            stdin=json.dumps(obj.body),
            mutating=True,
        )

    async def _delete_one(self, obj: ResourceObject) -> CommandResult:
        return await self._kubectl(
            "delete",
            _resource_type(obj),
            obj.name,
            *_namespace_args(obj),
            "--ignore-not-found",
            "--wait=false",
            mutating=True,
        )

    async def update(
        self, current: ObjectSet, target: ObjectSet, force: bool = False
    ) -> ClusterResult:
        created: List[ResourceObject] = []
        updated: List[UpdatedObject] = []
        deleted: List[ResourceObject] = []

        def partial() -> ClusterResult:
            return ClusterResult(
                created=ObjectSet.of(created),
                updated=tuple(updated),
                deleted=ObjectSet.of(deleted),
            )

        try:
            for obj in target:
                live = await self._get_live(obj)
                if live is None:
                    result = await self._submit(["create"], obj)
                    if not result.ok:
                        raise ClusterOperationError(
                            f"failed to create {obj}: {_error_text(result)}"
                        )
                    created.append(obj)
                    continue

                verb = ["replace", "--force"] if force else ["apply"]
                result = await self._submit(verb, obj)
                if not result.ok:
                    raise ClusterOperationError(
                        f"failed to update {obj}: {_error_text(result)}"
                    )
                updated.append(UpdatedObject(target=obj, live=live))

            for obj in current.difference(target):
                result = await self._delete_one(obj)
                if not result.ok:
                    raise ClusterOperationError(
                        f"failed to delete {obj}: {_error_text(result)}"
                    )
                deleted.append(obj)
        except ClusterOperationError as e:
            # runner failures (missing kubectl, timeouts) surface here too
            raise ClusterOperationError(str(e), result=partial()) from e

        logger.debug("update finished: %s", partial().summary())
        return partial()

    async def create(self, objects: ObjectSet) -> ClusterResult:
        created: List[ResourceObject] = []
        for obj in objects:
            try:
                result = await self._submit(["create"], obj)
            except ClusterOperationError as e:
                raise ClusterOperationError(
                    str(e), result=ClusterResult(created=ObjectSet.of(created))
                ) from e
            if not result.ok:
                raise ClusterOperationError(
                    f"failed to create {obj}: {_error_text(result)}",
                    result=ClusterResult(created=ObjectSet.of(created)),
                )
            created.append(obj)
        return ClusterResult(created=ObjectSet.of(created))

    async def delete(self, objects: ObjectSet) -> Tuple[int, List[Exception]]:
        count = 0
        errors: List[Exception] = []
        for obj in objects:
            try:
                result = await self._delete_one(obj)
            except ClusterOperationError as e:
                errors.append(e)
                continue
            if result.ok:
                count += 1
            else:
                errors.append(
                    ClusterOperationError(f"failed to delete {obj}: {_error_text(result)}")
                )
        return count, errors

    async def wait(self, objects: ObjectSet, timeout: float) -> None:
        await self._wait(objects, timeout, with_jobs=False)

    async def wait_with_jobs(self, objects: ObjectSet, timeout: float) -> None:
        await self._wait(objects, timeout, with_jobs=True)

    async def _wait(self, objects: ObjectSet, timeout: float, with_jobs: bool) -> None:
        loop = asyncio.get_event_loop()
        deadline = loop.time() + timeout
        logger.debug("waiting up to %ss for %d resources", timeout, len(objects))

        for obj in objects:
            if obj.kind in ROLLOUT_KINDS:
                args = ["rollout", "status", f"{_resource_type(obj)}/{obj.name}"]
            elif with_jobs and obj.kind == "Job":
                args = ["wait", "--for=condition=complete", f"{_resource_type(obj)}/{obj.name}"]
            else:
                continue

            if timeout <= 0:
                # rollout status reads 0 as no timeout, wait reads negative as a week
                timeout_flag = "--timeout=0s" if args[0] == "rollout" else "--timeout=-1s"
            else:
                timeout_flag = f"--timeout={max(1, int(deadline - loop.time()))}s"
            result = await self._kubectl(*args, *_namespace_args(obj), timeout_flag)
            if not result.ok:
                raise ClusterOperationError(
                    f"{obj} not ready: {_error_text(result)}"
                )

    async def select_pods(
        self, namespace: str, selector: Dict[str, str]
    ) -> ObjectSet:
        label_selector = ",".join(f"{k}={v}" for k, v in sorted(selector.items()))
        result = await self._kubectl(
            "get", "pods", "--namespace", namespace,
            f"--selector={label_selector}", "--output=json",
        )
        if not result.ok:
            raise ClusterOperationError(
                f"unable to list pods for {label_selector}: {_error_text(result)}"
            )
        items = _decode(result, f"pods {label_selector}").get("items") or []
        return ObjectSet.of(ResourceObject.from_body(item, namespace) for item in items)
