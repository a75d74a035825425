"""Data transfer objects crossing the application boundary."""

from rewind.application.dtos.rollback_dtos import (
    DEFAULT_TIMEOUT_SECONDS,
    RollbackConfiguration,
    RollbackOutcome,
)

__all__ = ["DEFAULT_TIMEOUT_SECONDS", "RollbackConfiguration", "RollbackOutcome"]
