# operator-common

Small helpers shared by cluster operators. They cover status conditions,
container environment variables, pod affinity rules, network attachment
annotations, deployment readiness and Ansible inventories. The only
dependency is PyYAML.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

### `operator_common.condition_types`

- `Condition` is a dataclass. Its fields are `type`, `status`, `severity`,
  `last_transition_time`, `reason` and `message`. `last_transition_time` is
  `None` until the condition is set on a list. `copy()` returns an independent
  copy.
- `ConditionStatus` has the values `TRUE`, `FALSE` and `UNKNOWN`.
- `Severity` has the values `ERROR`, `WARNING`, `INFO` and `NONE` (the empty string).
- Constants cover the common condition types (`READY_CONDITION`,
  `DB_READY_CONDITION`, ...), reasons (`REQUESTED_REASON`, `ERROR_REASON`, ...)
  and message templates (`READY_INIT_MESSAGE`, `DB_READY_ERROR_MESSAGE`, ...).

### `operator_common.conditions`

`Conditions` is an ordered list of `Condition` entries. The Ready condition is
always kept first and the others follow, sorted by type. The list supports
iteration, `len()`, indexing and equality.

- `init(cl)` resets the list to one Unknown Ready condition, then sets each
  condition in `cl`.
- `set(c)` adds a condition or updates an existing one. A condition that has no
  transition time is stamped with the current UTC time, truncated to the
  second. An existing condition is replaced only when its state changes, so an
  unchanged state keeps its transition time.
- `remove(t)` and `reset()` delete conditions.
- `get(t)` returns a copy of the condition, or `None`. `has(t)` reports
  whether it exists.
- `mark_true`, `mark_false` and `mark_unknown` set a condition. The message is
  formatted with `%` from the extra arguments.
- `is_true`, `is_false` and `is_unknown` test a condition's status.
  `is_unknown` also returns true when the condition is missing.
- `all_sub_condition_is_true()` checks every condition except Ready.
- `sort()` orders the list by type with Ready first.
  `sort_by_last_transition_time()` orders it from latest to earliest.
- `mirror(t)` returns a condition of type `t` that reflects the overall state.
  A True Ready condition is mirrored as it is. Otherwise the latest condition
  of the most severe group is used, in this order: False (Error, Warning,
  Info), Unknown, True. It raises `ValueError` when that condition has an
  invalid status.

Module-level helpers:

- `true_condition`, `false_condition` and `unknown_condition` build conditions.
- `create_list(*conditions)` builds a list and skips `None` entries.
- `has_same_state(i, j)` compares two conditions on everything except the
  transition time.
- `is_error(c)` is true for a False condition whose reason is `Error` or
  `BackoffLimitExceeded`.
- `get_higher_prio_condition(a, b)` returns the condition that takes
  precedence.
- `restore_last_transition_times(conditions, saved)` copies transition times
  back wherever the state has not changed.

### `operator_common.env`

- `EnvVar`, `EnvVarSource` and `FieldRef` are dataclasses that describe a
  container environment variable.
- `set_value(value)` and `downward_api(field)` return setters that update an
  `EnvVar`.
- `sort_setter_map_by_key(setters)` returns the `(name, setter)` pairs sorted
  by name.
- `merge_envs(envs, setters)` returns a new list. Existing variables are
  updated in place in that list, and new ones are appended in name order. The
  input list is not modified.

### `operator_common.affinity`

`distribute_pods(selector_key, selector_values, topology_key)` returns an
affinity manifest as a dict. It holds a preferred pod anti-affinity term with
weight 100.

### `operator_common.annotations`

`get_nad_annotation(namespace, nads)` returns a dict with one key,
`NETWORK_ATTACHMENT_ANNOT`. Its value is a compact JSON list of
`{"Name": ..., "Namespace": ...}` objects.

### `operator_common.deployment`

`is_ready(deployment)` takes a Deployment manifest as a mapping. It is true
when all of the following hold:

- the requested replicas equal the ready replicas;
- the status replicas equal the ready replicas;
- the observed generation matches the generation.

### `operator_common.cluster`

This module holds shared label and file-name constants, such as
`APP_SELECTOR` and `CUSTOM_SERVICE_CONFIG_FILE_NAME`.
`get_dns_cluster_domain()` returns `"cluster.local"`.

### `operator_common.ansible_inventory`

- `Inventory`, `Group` and `Host` build an Ansible inventory, using
  `add_group`, `add_host` and `add_child`.
- `Inventory.marshal_yaml()` writes the inventory as YAML with four-space
  indentation and sorted names. Empty sections are left out.
- `unmarshal_yaml(data)` reads a YAML inventory back into an `Inventory`. It
  raises `InventoryError` on invalid YAML, or when a section is not a mapping.

## Examples

```python
from operator_common.conditions import Conditions
from operator_common.condition_types import Severity

conditions = Conditions()
conditions.init(None)
conditions.mark_false("DBReady", "Error", Severity.ERROR, "DB create job error occurred %s", "timeout")
print(conditions.mirror("Ready").message)  # DB create job error occurred timeout
```

```python
from operator_common.ansible_inventory import Inventory

inventory = Inventory()
group = inventory.add_group("all")
group.add_host("node-1").vars["ansible_host"] = "node-1.example.com"
print(inventory.marshal_yaml())
```

## What this package does not do

The package only builds and inspects plain Python data. It does not connect
to a cluster, and it does not create, patch, fetch or delete any resources.
Manifests such as affinities and deployments are plain dicts. Sending them to
a cluster is up to the caller.