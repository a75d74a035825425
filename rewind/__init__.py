"""Rewind: transactional rollback of versioned cluster releases."""

__version__ = "0.1.0"
