"""Pod affinity rules."""

from __future__ import annotations

from typing import Any, Iterable


def distribute_pods(
    selector_key: str,
    selector_values: Iterable[str],
    topology_key: str,
) -> dict[str, Any]:
    """Return an affinity that prefers not to run matching pods on the same topology domain.

    ``topology_key`` is usually ``kubernetes.io/hostname``.
    """
    return {
        "podAntiAffinity": {
            "preferredDuringSchedulingIgnoredDuringExecution": [
                {
                    "podAffinityTerm": {
                        "labelSelector": {
                            "matchExpressions": [
                                {
                                    "key": selector_key,
                                    "operator": "In",
                                    "values": list(selector_values),
                                }
                            ]
                        },
                        "topologyKey": topology_key,
                    },
                    "weight": 100,
                }
            ]
        }
    }