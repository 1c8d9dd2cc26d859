"""Kubernetes operator that keeps Camunda Cloud Zeebe clusters converged."""

__version__ = "0.1.0"
