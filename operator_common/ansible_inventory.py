"""Ansible inventory model with YAML serialisation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

import yaml


class InventoryError(ValueError):
    """Raised when an inventory document cannot be parsed."""


class _InventoryDumper(yaml.SafeDumper):
    """Safe dumper that indents block sequences under their parent key."""

    def increase_indent(self, flow: bool = False, indentless: bool = False) -> None:
        super().increase_indent(flow, False)


def _sorted_mapping(mapping: Mapping[Any, Any]) -> dict[Any, Any]:
    return dict(sorted(mapping.items(), key=lambda item: str(item[0])))


@dataclass
class Host:
    """An ansible host and its variables."""

    name: str
    vars: dict[str, Any] = field(default_factory=dict)

    def _to_data(self) -> dict[str, Any]:
        return _sorted_mapping(self.vars)


@dataclass
class Group:
    """An ansible group holding variables, hosts and child groups."""

    name: str
    vars: dict[str, Any] = field(default_factory=dict)
    hosts: dict[str, Host] = field(default_factory=dict)
    children: dict[str, Group] = field(default_factory=dict)

    def add_host(self, name: str) -> Host:
        """Create a host called ``name`` in this group and return it."""
        host = Host(name)
        self.hosts[name] = host
        return host

    def add_child(self, group: Group) -> Group:
        """Add ``group`` as a child of this group and return it."""
        self.children[group.name] = group
        return group

    def _to_data(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.vars:
            data["vars"] = _sorted_mapping(self.vars)
        if self.hosts:
            data["hosts"] = {
                name: host._to_data() for name, host in sorted(self.hosts.items())
            }
        if self.children:
            data["children"] = {
                name: child._to_data()
                for name, child in sorted(self.children.items())
            }
        return data


@dataclass
class Inventory:
    """A parsed ansible inventory: a set of top-level groups."""

    groups: dict[str, Group] = field(default_factory=dict)

    def add_group(self, name: str) -> Group:
        """Create a top-level group called ``name`` and return it."""
        group = Group(name)
        self.groups[name] = group
        return group

    def marshal_yaml(self) -> str:
        """Serialise the inventory into an ansible YAML inventory document."""
        data = {name: group._to_data() for name, group in sorted(self.groups.items())}
        return yaml.dump(
            data,
            Dumper=_InventoryDumper,
            default_flow_style=False,
            sort_keys=False,
            indent=4,
            allow_unicode=True,
            width=2**31 - 1,
        )


def _as_mapping(value: Any, what: str) -> dict[Any, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise InventoryError(f"{what} must be a mapping, got {type(value).__name__}")
    return value


def _group_from_data(name: str, data: Any) -> Group:
    body = _as_mapping(data, f"group {name!r}")
    group = Group(name, vars={str(k): v for k, v in _as_mapping(body.get("vars"), f"vars of group {name!r}").items()})
    for host_name, host_vars in _as_mapping(body.get("hosts"), f"hosts of group {name!r}").items():
        host_name = str(host_name)
        host_body = _as_mapping(host_vars, f"host {host_name!r}")
        group.hosts[host_name] = Host(host_name, {str(k): v for k, v in host_body.items()})
    for child_name, child_data in _as_mapping(body.get("children"), f"children of group {name!r}").items():
        child_name = str(child_name)
        group.children[child_name] = _group_from_data(child_name, child_data)
    return group


def unmarshal_yaml(data: str | bytes) -> Inventory:
    """Parse a YAML inventory document into an :class:`Inventory`."""
    try:
        document = yaml.safe_load(data)
    except yaml.YAMLError as exc:
        raise InventoryError(f"invalid inventory YAML: {exc}") from exc
    inventory = Inventory()
    for name, group_data in _as_mapping(document, "inventory").items():
        name = str(name)
        inventory.groups[name] = _group_from_data(name, group_data)
    return inventory