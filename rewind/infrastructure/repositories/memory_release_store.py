"""
In-Memory Release Store

Architectural Intent:
- ReleaseStorePort adapter keeping releases in a dict keyed by (name, revision)
- Used by dry runs, tests and the "memory" store backend
- Releases are immutable, so stored values are never aliased mutably
"""

import logging
from typing import Dict, List, Tuple
from rewind.domain.entities.release import Release, ReleaseStatus
from rewind.domain.errors import ReleaseExistsError, ReleaseNotFoundError
from rewind.domain.ports.release_store_port import ReleaseStorePort
from rewind.infrastructure.repositories.retention import revisions_to_prune

logger = logging.getLogger(__name__)


class InMemoryReleaseStore(ReleaseStorePort):
    def __init__(self, max_history: int = 0):
        self.max_history = max_history
        self._releases: Dict[Tuple[str, int], Release] = {}

    async def get(self, name: str, revision: int) -> Release:
        try:
            return self._releases[(name, revision)]
        except KeyError:
            raise ReleaseNotFoundError(
                f"release: {name} revision {revision} not found",
                release_name=name,
                revision=revision,
            ) from None

    async def last(self, name: str) -> Release:
        releases = await self.history(name)
        if not releases:
            raise ReleaseNotFoundError(
                f"release: {name} not found", release_name=name
            )
        return releases[-1]

    async def create(self, release: Release) -> None:
        key = (release.name, release.revision)
        if key in self._releases:
            raise ReleaseExistsError(
                f"release: {release.name} revision {release.revision} already exists",
                release_name=release.name,
                revision=release.revision,
            )
        self._releases[key] = release
        self._prune(release)

    async def update(self, release: Release) -> None:
        key = (release.name, release.revision)
        if key not in self._releases:
            raise ReleaseNotFoundError(
                f"release: {release.name} revision {release.revision} not found",
                release_name=release.name,
                revision=release.revision,
            )
        self._releases[key] = release

    async def deployed_all(self, name: str) -> List[Release]:
        return [
            r for r in await self.history(name) if r.status is ReleaseStatus.DEPLOYED
        ]

    async def history(self, name: str) -> List[Release]:
        return sorted(
            (r for (n, _), r in self._releases.items() if n == name),
            key=lambda r: r.revision,
        )

    def _prune(self, created: Release) -> None:
        releases = [r for (n, _), r in self._releases.items() if n == created.name]
        for revision in revisions_to_prune(releases, self.max_history, created.revision):
            logger.debug("pruning %s v%d beyond max history", created.name, revision)
            del self._releases[(created.name, revision)]
