"""Condition lists: setting, querying, ordering and mirroring conditions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Iterator

from operator_common.condition_types import (
    ERROR_REASON,
    JOB_REASON_BACKOFF_LIMIT_EXCEEDED,
    READY_CONDITION,
    READY_INIT_MESSAGE,
    READY_REASON,
    REQUESTED_REASON,
    Condition,
    ConditionStatus,
    Severity,
)

_GROUP_COUNT = 6
_TRUE_GROUP = 4


def _format(message_format: str, args: tuple) -> str:
    return message_format % args if args else message_format


def _now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


def _time_key(moment: datetime | None) -> float:
    if moment is None:
        return float("-inf")
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.timestamp()


def _not_before(i: Condition, j: Condition) -> bool:
    """True when ``i`` did not transition before ``j``."""
    return _time_key(i.last_transition_time) >= _time_key(j.last_transition_time)


def _group_order(c: Condition) -> int:
    if c.status == ConditionStatus.FALSE:
        if c.severity == Severity.ERROR:
            return 0
        if c.severity == Severity.WARNING:
            return 1
        if c.severity == Severity.INFO:
            return 2
        return 5
    if c.status == ConditionStatus.UNKNOWN:
        return 3
    if c.status == ConditionStatus.TRUE:
        return 4
    return 5


@dataclass
class _ConditionGroup:
    status: str
    severity: str
    conditions: list[Condition] = field(default_factory=list)


def has_same_state(i: Condition, j: Condition) -> bool:
    """Return whether two conditions agree in everything but transition time."""
    return (
        i.type == j.type
        and i.status == j.status
        and i.reason == j.reason
        and i.severity == j.severity
        and i.message == j.message
    )


def true_condition(t: str, message_format: str, *args: object) -> Condition:
    """Return a condition of type ``t`` with status True."""
    return Condition(
        type=t,
        status=ConditionStatus.TRUE,
        reason=READY_REASON,
        severity=Severity.NONE,
        message=_format(message_format, args),
    )


def false_condition(
    t: str, reason: str, severity: Severity | str, message_format: str, *args: object
) -> Condition:
    """Return a condition of type ``t`` with status False."""
    return Condition(
        type=t,
        status=ConditionStatus.FALSE,
        reason=reason,
        severity=severity,
        message=_format(message_format, args),
    )


def unknown_condition(t: str, reason: str, message_format: str, *args: object) -> Condition:
    """Return a condition of type ``t`` with status Unknown."""
    return Condition(
        type=t,
        status=ConditionStatus.UNKNOWN,
        reason=reason,
        severity=Severity.NONE,
        message=_format(message_format, args),
    )


class Conditions:
    """An ordered list of conditions describing the state of an API resource."""

    def __init__(self, items: Iterable[Condition] = ()) -> None:
        self._items: list[Condition] = [c.copy() for c in items]

    def __iter__(self) -> Iterator[Condition]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> Condition:
        return self._items[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Conditions):
            return self._items == other._items
        return NotImplemented

    def __repr__(self) -> str:
        return f"Conditions({self._items!r})"

    def init(self, cl: Iterable[Condition] | None = None) -> None:
        """Reset to a single Unknown Ready condition, then set each of ``cl``."""
        self.reset()
        self.set(unknown_condition(READY_CONDITION, REQUESTED_REASON, READY_INIT_MESSAGE))
        if cl is not None:
            for c in list(cl):
                self.set(c.copy())

    def set(self, c: Condition | None) -> None:
        """Add or update a condition and keep the list sorted.

        A condition without a transition time gets the current time (this is
        recorded on ``c`` itself). An existing condition of the same type is
        only replaced when its state differs, so its transition time is kept
        otherwise.
        """
        if c is None:
            return
        if c.last_transition_time is None:
            c.last_transition_time = _now()
        for index, existing in enumerate(self._items):
            if existing.type == c.type:
                if not has_same_state(existing, c):
                    self._items[index] = c.copy()
                break
        else:
            self._items.append(c.copy())
        self.sort()

    def remove(self, t: str) -> None:
        """Remove the condition of type ``t`` if present."""
        self._items = [c for c in self._items if c.type != t]

    def reset(self) -> None:
        """Remove all conditions."""
        self._items = []

    def get(self, t: str) -> Condition | None:
        """Return a copy of the condition of type ``t``, or None."""
        for c in self._items:
            if c.type == t:
                return c.copy()
        return None

    def has(self, t: str) -> bool:
        """Return whether a condition of type ``t`` exists."""
        return any(c.type == t for c in self._items)

    def mark_true(self, t: str, message_format: str, *args: object) -> None:
        """Set the condition of type ``t`` to True."""
        self.set(true_condition(t, message_format, *args))

    def mark_false(
        self, t: str, reason: str, severity: Severity | str, message_format: str, *args: object
    ) -> None:
        """Set the condition of type ``t`` to False."""
        self.set(false_condition(t, reason, severity, message_format, *args))

    def mark_unknown(self, t: str, reason: str, message_format: str, *args: object) -> None:
        """Set the condition of type ``t`` to Unknown."""
        self.set(unknown_condition(t, reason, message_format, *args))

    def is_true(self, t: str) -> bool:
        """Return whether the condition of type ``t`` exists and is True."""
        c = self.get(t)
        return c is not None and c.status == ConditionStatus.TRUE

    def is_false(self, t: str) -> bool:
        """Return whether the condition of type ``t`` exists and is False."""
        c = self.get(t)
        return c is not None and c.status == ConditionStatus.FALSE

    def is_unknown(self, t: str) -> bool:
        """Return whether the condition of type ``t`` is Unknown or missing."""
        c = self.get(t)
        return c is None or c.status == ConditionStatus.UNKNOWN

    def all_sub_condition_is_true(self) -> bool:
        """Return whether every condition other than Ready is True."""
        return all(
            c.status == ConditionStatus.TRUE
            for c in self._items
            if c.type != READY_CONDITION
        )

    def sort(self) -> None:
        """Order the Ready condition first, then the others by type."""
        self._items.sort(key=lambda c: (c.type != READY_CONDITION, c.type))

    def sort_by_last_transition_time(self) -> None:
        """Order conditions from the latest transition to the earliest."""
        self._items.sort(key=lambda c: _time_key(c.last_transition_time), reverse=True)

    def _condition_groups(self) -> list[_ConditionGroup | None]:
        groups: list[_ConditionGroup | None] = [None] * _GROUP_COUNT
        for c in self._items:
            for group in groups:
                if group is not None and group.status == c.status and group.severity == c.severity:
                    group.conditions.append(c.copy())
                    break
            else:
                groups[_group_order(c)] = _ConditionGroup(c.status, c.severity, [c.copy()])
        return groups

    def mirror(self, t: str) -> Condition | None:
        """Return a condition of type ``t`` reflecting the overall state.

        A True Ready condition is mirrored as is. Otherwise the latest
        condition of the most severe group is mirrored, in the order False
        (Error, Warning, Info), Unknown, True. Raises ValueError on a
        condition with an invalid status.
        """
        if not self._items:
            return None
        groups = self._condition_groups()

        true_group = groups[_TRUE_GROUP]
        if true_group is not None:
            ready = Conditions(true_group.conditions)
            if ready.is_true(READY_CONDITION):
                c = ready.get(READY_CONDITION)
                mirrored = true_condition(t, c.message)
                mirrored.last_transition_time = c.last_transition_time
                return mirrored

        for group in groups:
            if group is None or not group.conditions:
                continue
            ordered = Conditions(group.conditions)
            ordered.sort_by_last_transition_time()
            c = ordered[0]
            if c.status == ConditionStatus.TRUE:
                mirrored = true_condition(t, c.message)
            elif c.status == ConditionStatus.FALSE:
                mirrored = false_condition(t, c.reason, c.severity, c.message)
            elif c.status == ConditionStatus.UNKNOWN:
                mirrored = unknown_condition(t, c.reason, c.message)
            else:
                raise ValueError(
                    f"Condition {c!r} has invalid status value '{c.status}'. "
                    "The only valid values are True, False, Unknown"
                )
            mirrored.last_transition_time = c.last_transition_time
            return mirrored

        return Condition(type="", status="")


def create_list(*args: Condition | None) -> Conditions:
    """Return a condition list of copies of the given non-None conditions."""
    return Conditions(c for c in args if c is not None)


def is_error(condition: Condition | None) -> bool:
    """Return whether a condition is False with an error or backoff reason."""
    if condition is None:
        return False
    return condition.status == ConditionStatus.FALSE and condition.reason in (
        ERROR_REASON,
        JOB_REASON_BACKOFF_LIMIT_EXCEEDED,
    )


def get_higher_prio_condition(
    cond1: Condition | None, cond2: Condition | None
) -> Condition | None:
    """Return whichever condition takes precedence.

    Precedence follows status and severity; with equal priority the one with
    the later transition time wins. A missing condition loses to a present one.
    """
    if cond1 is None:
        return cond2
    if cond2 is None:
        return cond1
    order1 = _group_order(cond1)
    order2 = _group_order(cond2)
    if order1 < order2:
        return cond1
    if order1 == order2 and _not_before(cond1, cond2):
        return cond1
    return cond2


def restore_last_transition_times(conditions: Conditions, saved_conditions: Conditions) -> None:
    """Copy transition times from ``saved_conditions`` where the state is unchanged."""
    for c in conditions:
        saved = saved_conditions.get(c.type)
        if saved is not None and has_same_state(c, saved):
            c.last_transition_time = saved.last_transition_time