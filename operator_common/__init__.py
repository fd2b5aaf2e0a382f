"""Helpers for cluster operators: conditions, env vars, affinity, annotations, deployments, inventories."""

__version__ = "0.1.0"

__all__ = [
    "affinity",
    "annotations",
    "ansible_inventory",
    "cluster",
    "condition_types",
    "conditions",
    "deployment",
    "env",
]