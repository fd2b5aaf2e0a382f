"""Deployment readiness checks."""

from __future__ import annotations

from typing import Any, Mapping


def is_ready(deployment: Mapping[str, Any]) -> bool:
    """Return whether a Deployment manifest has reached its requested state.

    The requested replicas must equal the ready replicas, no rollout may be in
    progress (status replicas equal ready replicas), and the observed
    generation must match the object's generation.
    """
    spec = deployment.get("spec") or {}
    status = deployment.get("status") or {}
    metadata = deployment.get("metadata") or {}
    replicas = spec.get("replicas")
    ready_replicas = status.get("readyReplicas", 0)
    return (
        replicas is not None
        and replicas == ready_replicas
        and status.get("replicas", 0) == ready_replicas
        and metadata.get("generation", 0) == status.get("observedGeneration", 0)
    )