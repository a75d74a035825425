"""
Release Store Port

Architectural Intent:
- Port interface for versioned persistence of release records
- Implemented by InMemoryReleaseStore and SQLiteReleaseStore
- Creating an existing (name, revision) fails; this is the only
  concurrency guard between rollbacks of the same release
"""

from abc import ABC, abstractmethod
from typing import List
from rewind.domain.entities.release import Release


class ReleaseStorePort(ABC):
    """
    Port interface for versioned release persistence.
    """

    max_history: int = 0

    @abstractmethod
    async def get(self, name: str, revision: int) -> Release:
        """
        Returns the given revision. Raises ReleaseNotFoundError if absent.
        """
        pass

    @abstractmethod
    async def last(self, name: str) -> Release:
        """
        Returns the highest revision of a release.
        Raises ReleaseNotFoundError if the release has no revisions.
        """
        pass

    @abstractmethod
    async def create(self, release: Release) -> None:
        """
        Stores a new revision. Raises ReleaseExistsError if already stored.
        Applies the max_history retention cap when it is positive.
        """
        pass

    @abstractmethod
    async def update(self, release: Release) -> None:
        """
        Replaces a stored revision. Raises ReleaseNotFoundError if absent.
        """
        pass

    @abstractmethod
    async def deployed_all(self, name: str) -> List[Release]:
        """
        Returns every revision currently DEPLOYED, empty if there are none.
        """
        pass

    @abstractmethod
    async def history(self, name: str) -> List[Release]:
        """
        Returns all stored revisions ordered by revision.
        """
        pass
