import pytest

from ogshell.environment import Environment, parse_entry


def test_parse_entry_splits_at_first_equals():
    assert parse_entry("PATH=/bin:/usr/bin") == ("PATH", "/bin:/usr/bin")
    assert parse_entry("A=b=c") == ("A", "b=c")


def test_parse_entry_without_equals_has_empty_value():
    assert parse_entry("LONELY") == ("LONELY", "")


def test_from_environ_keeps_order():
    env = Environment.from_environ(["ZED=1", "ALPHA=2", "MID=3"])
    assert list(env) == ["ZED", "ALPHA", "MID"]
    assert env.to_array() == ["ZED=1", "ALPHA=2", "MID=3"]


def test_from_environ_mapping():
    env = Environment.from_environ({"HOME": "/home/user", "SHELL": "ogs"})
    assert env.get("HOME") == "/home/user"
    assert env.get("SHELL") == "ogs"
    assert len(env) == 2


def test_get_requires_exact_key():
    env = Environment([("HOME", "/home/user")])
    assert env.get("HOM") is None
    assert env.get("HOMES") is None
    assert env.get("HOME") == "/home/user"


def test_none_value_becomes_empty_string():
    env = Environment([("EMPTY", None)])
    assert env.get("EMPTY") == ""


def test_add_sorts_bytewise():
    env = Environment.from_environ(["b=1", "a=2"])
    env.add("Z", "3")
    env.add("AB", "4")
    env.add("A", "5")
    keys = list(env)
    assert keys == sorted(keys)
    assert keys.index("A") < keys.index("AB")
    assert keys.index("Z") < keys.index("a")


def test_remove_reports_result():
    env = Environment([("X", "1"), ("Y", "2")])
    assert env.remove("X") is True
    assert env.remove("X") is False
    assert list(env) == ["Y"]


def test_change_without_value_keeps_existing():
    env = Environment([("KEEP", "old")])
    env.change("KEEP", None)
    assert env.get("KEEP") == "old"
    assert len(env) == 1


def test_change_without_value_creates_empty():
    env = Environment()
    env.change("NEW")
    assert env.get("NEW") == ""
    assert len(env) == 1


def test_change_replaces_value_once():
    env = Environment([("B", "1"), ("A", "old")])
    env.change("A", "new")
    assert env.get("A") == "new"
    assert env.items().count(("A", "new")) == 1
    assert list(env) == ["A", "B"]


def test_items_is_a_copy():
    env = Environment([("K", "v")])
    items = env.items()
    items.append(("other", "x"))
    assert env.items() == [("K", "v")]


@pytest.mark.parametrize("entry", ["A=1", "KEY=with=equals", "E="])
def test_to_array_round_trip(entry):
    env = Environment.from_environ([entry])
    assert env.to_array() == [entry]