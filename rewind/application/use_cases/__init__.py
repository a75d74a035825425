"""Use cases orchestrating domain ports."""
