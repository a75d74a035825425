"""Cluster and hook adapters."""
