"""Kubernetes client wrappers."""
