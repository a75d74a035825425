"""Application layer: use cases and their boundary DTOs."""
