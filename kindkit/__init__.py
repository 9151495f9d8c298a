"""Cluster configuration, terminal logging, spinners, process running and error helpers for a local Kubernetes cluster tool."""

__version__ = "0.11.0a0"