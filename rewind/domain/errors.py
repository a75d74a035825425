"""
Domain Error Taxonomy

Architectural Intent:
- Every terminal rollback failure is a RewindError carrying enough context
  (release name, designated revision, underlying cause) to reconstruct what
  was attempted
- Apply and wait failures also carry the failed target release snapshot and
  the (possibly partial) cluster result, since releases are immutable values
- Adapter-level failures (ClusterOperationError, ManifestError) are translated
  by the engine with ``raise ... from`` so the cause chain is preserved
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Optional, Sequence

if TYPE_CHECKING:
    from rewind.domain.entities.release import Release
    from rewind.domain.value_objects.resource_object import ClusterResult


class RewindError(Exception):
    """Base class for rollback failures."""

    def __init__(
        self,
        message: str,
        *,
        release_name: Optional[str] = None,
        revision: Optional[int] = None,
        release: Optional["Release"] = None,
        result: Optional["ClusterResult"] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.release_name = release_name
        self.revision = revision
        self.release = release
        self.result = result

    def __str__(self) -> str:
        return self.message


class InvalidReleaseNameError(RewindError):
    """Raised when a release name is not a valid identifier."""


class InvalidRevisionError(RewindError):
    """Raised when a negative revision is requested."""


class ReleaseNotFoundError(RewindError):
    """Raised when the current or designated revision does not exist."""


class StoreError(RewindError):
    """Raised by release stores for persistence failures."""


class ReleaseExistsError(StoreError):
    """Raised when creating a revision that is already stored."""


class ClusterUnreachableError(RewindError):
    """Raised when the cluster control plane cannot be contacted."""


class ClusterCapabilityError(RewindError):
    """Raised when a requested cluster client capability is unsupported."""


class BuildManifestError(RewindError):
    """Raised when a manifest cannot be built into an object set."""

    def __init__(self, message: str, *, side: str, **context) -> None:
        super().__init__(message, **context)
        self.side = side


class HookExecutionError(RewindError):
    """Raised when a lifecycle hook fails."""

    def __init__(
        self, message: str, *, kind: str, hook: Optional[str] = None, **context
    ) -> None:
        super().__init__(message, **context)
        self.kind = kind
        self.hook = hook


class ApplyError(RewindError):
    """Raised when reconciling the cluster toward the target manifest fails."""


class CleanupError(RewindError):
    """Raised when cleanup after an apply failure itself fails.

    The original ApplyError is kept on ``apply_error`` and its text is part
    of the message; it is never replaced.
    """

    def __init__(
        self,
        apply_error: ApplyError,
        deletion_errors: Sequence[BaseException],
    ) -> None:
        joined = ", ".join(str(e) for e in deletion_errors)
        super().__init__(
            "an error occurred while cleaning up resources. "
            f"original rollback error: {apply_error}: "
            f"unable to cleanup resources: {joined}",
            release_name=apply_error.release_name,
            revision=apply_error.revision,
            release=apply_error.release,
            result=apply_error.result,
        )
        self.apply_error = apply_error
        self.deletion_errors = tuple(deletion_errors)


class WaitTimeoutError(RewindError):
    """Raised when applied resources do not become ready in time."""


# -- Adapter-level errors ----------------------------------------------------


class ClusterOperationError(Exception):
    """Raised by cluster client adapters when a cluster call fails.

    ``result`` carries whatever was already applied when the failure happened.
    """

    def __init__(
        self, message: str, result: Optional["ClusterResult"] = None
    ) -> None:
        super().__init__(message)
        self.result = result


class ManifestError(ValueError):
    """Raised by cluster client adapters when a manifest cannot be parsed."""
