"""Container environment variables and setters that update them."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Callable, Mapping

Setter = Callable[["EnvVar"], None]


@dataclass
class FieldRef:
    """Selects a field of the pod, such as ``status.podIP``."""

    field_path: str = ""


@dataclass
class EnvVarSource:
    """Source of an environment variable's value."""

    field_ref: FieldRef | None = None


@dataclass
class EnvVar:
    """A container environment variable."""

    name: str
    value: str = ""
    value_from: EnvVarSource | None = None


def set_value(value: str) -> Setter:
    """Return a setter giving a variable a literal value."""

    def setter(env: EnvVar) -> None:
        env.value = value
        env.value_from = None

    return setter


def downward_api(field: str) -> Setter:
    """Return a setter taking a variable's value from a pod field, e.g. ``status.podIP``."""

    def setter(env: EnvVar) -> None:
        if env.value_from is None:
            env.value_from = EnvVarSource()
        env.value = ""
        if env.value_from.field_ref is None:
            env.value_from.field_ref = FieldRef()
        env.value_from.field_ref.field_path = field

    return setter


def sort_setter_map_by_key(setters: Mapping[str, Setter]) -> list[tuple[str, Setter]]:
    """Return the (name, setter) pairs of ``setters`` sorted by name."""
    return sorted(setters.items(), key=lambda item: item[0])


def merge_envs(envs: list[EnvVar], new_envs: Mapping[str, Setter]) -> list[EnvVar]:
    """Return ``envs`` with each setter of ``new_envs`` applied.

    Existing variables are updated in their place; new ones are appended in
    name order so the result is stable.
    """
    merged = [copy.deepcopy(env) for env in envs]
    for name, setter in sort_setter_map_by_key(new_envs):
        target = next((env for env in merged if env.name == name), None)
        if target is None:
            target = EnvVar(name)
            merged.append(target)
        setter(target)
    return merged