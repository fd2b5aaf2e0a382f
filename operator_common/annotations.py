"""Pod annotations for network attachment definitions."""

from __future__ import annotations

import json
from typing import Iterable

NETWORK_ATTACHMENT_ANNOT = "k8s.v1.cni.cncf.io/networks"

_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _encode_json(value: object) -> str:
    text = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return "".join(_HTML_ESCAPES.get(ch, ch) for ch in text)


def get_nad_annotation(namespace: str, nads: Iterable[str]) -> dict[str, str]:
    """Return the pod annotation attaching the given network attachment definitions.

    Deprecated in favour of network-specific annotation helpers.
    """
    networks = [{"Name": nad, "Namespace": namespace} for nad in nads]
    return {NETWORK_ATTACHMENT_ANNOT: _encode_json(networks)}