from datetime import datetime, timezone

import pytest

from operator_common.condition_types import (
    ERROR_REASON,
    READY_CONDITION,
    READY_INIT_MESSAGE,
    READY_MESSAGE,
    REQUESTED_REASON,
    Condition,
    ConditionStatus,
    Severity,
)
from operator_common.conditions import (
    Conditions,
    create_list,
    false_condition,
    get_higher_prio_condition,
    has_same_state,
    is_error,
    restore_last_transition_times,
    true_condition,
    unknown_condition,
)


def unknown_ready():
    return unknown_condition(READY_CONDITION, REQUESTED_REASON, READY_INIT_MESSAGE)


def true_ready():
    return true_condition(READY_CONDITION, READY_MESSAGE)


def unknown_a():
    return unknown_condition("a", "reason unknownA", "message unknownA")


def false_a():
    return false_condition("a", "reason falseA", Severity.INFO, "message falseA")


def true_a():
    return true_condition("a", "message trueA")


def unknown_b():
    return unknown_condition("b", "reason unknownB", "message unknownB")


def false_b():
    return false_condition("b", "reason falseB", Severity.INFO, "message falseB")


def false_b_error():
    return false_condition("b", "reason falseBError", Severity.ERROR, "message falseBError")


def true_b():
    return true_condition("b", "message trueB")


def false_info():
    return false_condition("falseInfo", "reason falseInfo", Severity.INFO, "message falseInfo")


def false_warning():
    return false_condition(
        "falseWarning", "reason falseWarning", Severity.WARNING, "message falseWarning"
    )


def false_error():
    return false_condition("falseError", "reason falseError", Severity.ERROR, "message falseError")


def _dt(year, month, day):
    return datetime(year, month, day, 10, 0, 0, tzinfo=timezone.utc)


def assert_same_conditions(actual, expected):
    actual = list(actual)
    expected = list(expected)
    assert len(actual) == len(expected), (actual, expected)
    for a, e in zip(actual, expected):
        assert has_same_state(a, e), (a, e)


@pytest.mark.parametrize(
    "given, want",
    [
        ([None], [unknown_ready()]),
        ([unknown_a()], [unknown_ready(), unknown_a()]),
        ([unknown_a(), unknown_b()], [unknown_ready(), unknown_a(), unknown_b()]),
        ([unknown_b(), unknown_a()], [unknown_ready(), unknown_a(), unknown_b()]),
        ([unknown_a(), unknown_a()], [unknown_ready(), unknown_a()]),
    ],
)
def test_init(given, want):
    conditions = Conditions([true_condition("foo", "to be removed on Init()")])
    conditions.init(create_list(*given))
    assert_same_conditions(conditions, want)


def test_set():
    conditions = Conditions()
    conditions.init(None)
    assert_same_conditions(conditions, [unknown_ready()])

    steps = [
        (None, [unknown_ready()]),
        (unknown_b(), [unknown_ready(), unknown_b()]),
        (unknown_a(), [unknown_ready(), unknown_a(), unknown_b()]),
        (unknown_a(), [unknown_ready(), unknown_a(), unknown_b()]),
        (false_a(), [unknown_ready(), false_a(), unknown_b()]),
        (true_ready(), [true_ready(), false_a(), unknown_b()]),
    ]
    for condition, want in steps:
        conditions.set(condition)
        assert_same_conditions(conditions, want)

    time1 = _dt(2022, 8, 9)
    time2 = _dt(2022, 8, 10)
    b1 = false_b()
    b1.last_transition_time = time1
    b2 = false_b()
    b2.last_transition_time = time2

    conditions.set(b1)
    assert conditions.get("b").last_transition_time == time1

    conditions.set(b2)
    assert conditions.get("b").last_transition_time == time1


def test_set_assigns_time_when_missing():
    conditions = Conditions()
    c = unknown_a()
    conditions.set(c)
    stored = conditions.get("a")
    assert stored.last_transition_time is not None
    assert stored.last_transition_time.microsecond == 0


@pytest.mark.parametrize(
    "given, remove_type, expected",
    [
        ([unknown_ready(), unknown_a(), unknown_b()], "a", [unknown_ready(), unknown_b()]),
        ([unknown_ready(), unknown_a(), unknown_b()], READY_CONDITION, [unknown_a(), unknown_b()]),
        ([unknown_ready(), unknown_a()], "b", [unknown_ready(), unknown_a()]),
        ([], "a", []),
    ],
)
def test_remove(given, remove_type, expected):
    conditions = create_list(*given)
    conditions.remove(remove_type)
    assert_same_conditions(conditions, expected)


@pytest.mark.parametrize("given", [[], [unknown_ready(), unknown_a(), unknown_b()]])
def test_reset(given):
    conditions = create_list(*given)
    conditions.reset()
    assert len(conditions) == 0


def test_has_same_state():
    base = false_info()
    assert has_same_state(base, base.copy())

    other = base.copy()
    other.last_transition_time = datetime(1900, 11, 10, 23, 0, 0, tzinfo=timezone.utc)
    assert has_same_state(base, other)

    other = base.copy()
    other.type = "another type"
    assert not has_same_state(base, other)

    other = base.copy()
    other.status = ConditionStatus.TRUE
    assert not has_same_state(base, other)

    other = base.copy()
    other.severity = Severity.WARNING
    assert not has_same_state(base, other)

    other = base.copy()
    other.reason = "another reason"
    assert not has_same_state(base, other)

    other = base.copy()
    other.message = "another message"
    assert not has_same_state(base, other)


def test_sort_orders_ready_first_then_by_type():
    conditions = create_list(true_b(), true_a(), true_ready())
    conditions.sort()
    assert [c.type for c in conditions] == [READY_CONDITION, "a", "b"]


def test_get_and_has():
    conditions = Conditions()
    conditions.init(None)
    assert_same_conditions(conditions, [unknown_ready()])
    assert conditions.has(READY_CONDITION)
    assert has_same_state(conditions.get(READY_CONDITION), unknown_ready())
    assert conditions.get("notExistingCond") is None
    assert not conditions.has("notExistingCond")

    conditions.set(unknown_a())
    assert conditions.has(READY_CONDITION)
    assert conditions.has("a")
    assert has_same_state(conditions.get("a"), unknown_a())


def test_is_methods():
    conditions = Conditions()
    conditions.init(create_list(true_a(), false_info(), unknown_b()))
    assert_same_conditions(
        conditions, [unknown_ready(), true_a(), unknown_b(), false_info()]
    )

    assert conditions.is_true("a")
    assert not conditions.is_true("falseInfo")
    assert not conditions.is_true("unknownB")

    assert not conditions.is_false("a")
    assert conditions.is_false("falseInfo")
    assert not conditions.is_false("unknownB")

    assert not conditions.is_unknown("a")
    assert not conditions.is_unknown("falseInfo")
    assert conditions.is_unknown("unknownB")


def test_all_sub_condition_is_true():
    conditions = Conditions()
    conditions.init(None)
    assert_same_conditions(conditions, [unknown_ready()])

    steps = [
        (None, True),
        (unknown_b(), False),
        (unknown_a(), False),
        (true_a(), False),
        (true_b(), True),
    ]
    for condition, want in steps:
        conditions.set(condition)
        assert conditions.all_sub_condition_is_true() is want


def test_mark_methods():
    conditions = Conditions()
    conditions.init(None)
    assert_same_conditions(conditions, [unknown_ready()])
    assert conditions.get(READY_CONDITION).severity == ""

    conditions.mark_true(READY_CONDITION, READY_MESSAGE)
    assert has_same_state(conditions.get(READY_CONDITION), true_ready())
    assert conditions.get(READY_CONDITION).severity == ""

    conditions.mark_false("falseError", "reason falseError", Severity.ERROR, "message falseError")
    assert has_same_state(conditions.get("falseError"), false_error())

    conditions.mark_true("falseError", "now True")
    assert conditions.get("falseError").severity == ""

    conditions.mark_unknown("a", "reason unknownA", "message unknownA")
    assert has_same_state(conditions.get("a"), unknown_a())


def test_mark_formats_message_arguments():
    conditions = Conditions()
    conditions.mark_false("x", ERROR_REASON, Severity.ERROR, "error occurred %s", "boom")
    assert conditions.get("x").message == "error occurred boom"


def test_sort_by_last_transition_time():
    a = false_a()
    a.last_transition_time = _dt(2020, 8, 9)
    b = false_b()
    b.last_transition_time = _dt(2020, 8, 10)
    err = false_error()
    err.last_transition_time = _dt(2020, 8, 11)

    conditions = Conditions()
    conditions.init(create_list(b, err, a))
    conditions.sort_by_last_transition_time()

    assert_same_conditions(conditions, [unknown_ready(), err, b, a])


def test_mirror():
    a_true = true_a()
    a_true.last_transition_time = _dt(2020, 8, 9)
    b_false = false_b()
    b_false.last_transition_time = _dt(2020, 8, 10)

    conditions = Conditions()
    conditions.init(None)
    target = conditions.mirror("targetConditon")
    ready = unknown_ready()
    assert (target.status, target.severity, target.reason, target.message) == (
        ready.status, ready.severity, ready.reason, ready.message
    )
    assert target.type == "targetConditon"

    conditions.set(a_true)
    assert_same_conditions(conditions, [unknown_ready(), a_true])
    target = conditions.mirror("targetConditon")
    assert (target.status, target.severity, target.reason, target.message) == (
        ready.status, ready.severity, ready.reason, ready.message
    )

    conditions.set(b_false)
    assert_same_conditions(conditions, [unknown_ready(), a_true, b_false])
    target = conditions.mirror("targetConditon")
    assert (target.status, target.severity, target.reason, target.message) == (
        b_false.status, b_false.severity, b_false.reason, b_false.message
    )

    b_error = false_b_error()
    conditions.set(b_error)
    assert_same_conditions(conditions, [unknown_ready(), a_true, b_error])
    target = conditions.mirror("targetConditon")
    assert (target.status, target.severity, target.reason, target.message) == (
        b_error.status, b_error.severity, b_error.reason, b_error.message
    )

    conditions.mark_true(READY_CONDITION, READY_MESSAGE)
    conditions.set(unknown_a())
    assert_same_conditions(conditions, [true_ready(), unknown_a(), b_error])
    target = conditions.mirror("targetConditon")
    expected = true_ready()
    assert (target.status, target.severity, target.reason, target.message) == (
        expected.status, expected.severity, expected.reason, expected.message
    )


def test_mirror_empty_returns_none():
    assert Conditions().mirror("target") is None


def test_mirror_invalid_status():
    conditions = Conditions()
    conditions.init([Condition(type="a", status="FooBar", reason="", severity=Severity.NONE)])
    conditions.remove(READY_CONDITION)
    with pytest.raises(ValueError, match=r"has invalid status value 'FooBar'\."):
        conditions.mirror("targetConditon")


def test_is_error():
    assert is_error(None) is False
    assert is_error(false_b_error()) is False
    assert is_error(false_b()) is False
    assert is_error(true_b()) is False
    assert is_error(
        false_condition("errorReason", ERROR_REASON, Severity.ERROR, "message Error")
    ) is True
    assert is_error(
        false_condition("job", "BackoffLimitExceeded", Severity.ERROR, "message")
    ) is True


def test_get_higher_prio_condition():
    assert get_higher_prio_condition(None, None) is None

    assert has_same_state(get_higher_prio_condition(unknown_a(), None), unknown_a())
    assert has_same_state(get_higher_prio_condition(None, unknown_a()), unknown_a())
    assert has_same_state(get_higher_prio_condition(unknown_a(), true_a()), unknown_a())
    assert has_same_state(get_higher_prio_condition(false_a(), unknown_a()), false_a())
    assert has_same_state(get_higher_prio_condition(false_a(), true_a()), false_a())
    assert has_same_state(get_higher_prio_condition(false_info(), false_error()), false_error())
    assert has_same_state(
        get_higher_prio_condition(false_warning(), false_error()), false_error()
    )
    assert has_same_state(
        get_higher_prio_condition(false_warning(), false_info()), false_warning()
    )

    warning1 = false_warning()
    warning1.last_transition_time = _dt(2020, 8, 9)
    warning1.message = "warning1"
    warning2 = false_warning()
    warning2.last_transition_time = _dt(2020, 8, 10)
    warning2.message = "warning2"
    assert has_same_state(get_higher_prio_condition(warning1, warning2), warning2)


TIME1 = _dt(2022, 8, 9)
TIME2 = _dt(2022, 8, 10)


@pytest.mark.parametrize(
    "field_name, new_value, want",
    [
        ("type", "X", TIME1),
        ("status", ConditionStatus.UNKNOWN, TIME1),
        ("reason", "reason X", TIME1),
        ("severity", Severity.WARNING, TIME1),
        ("message", "message X", TIME1),
        (None, None, TIME2),
    ],
)
def test_restore_last_transition_times(field_name, new_value, want):
    test_cond = false_a()
    test_cond.last_transition_time = TIME1
    conditions = create_list(test_cond)

    saved = test_cond.copy()
    if field_name is not None:
        setattr(saved, field_name, new_value)
    saved.last_transition_time = TIME2
    saved_conditions = create_list(saved)

    restore_last_transition_times(conditions, saved_conditions)

    assert conditions.get(test_cond.type).last_transition_time == want


def test_create_list_skips_none_and_copies():
    original = true_a()
    conditions = create_list(None, original, None)
    assert len(conditions) == 1
    original.message = "changed"
    assert conditions[0].message == "message trueA"