"""Kubernetes operator for Camunda 8 SaaS clusters and API clients."""

__version__ = "0.1.0"
