from __future__ import annotations

from release_channel.channel.completion import PENDING, Completion, Immediate, coerce_result


def test_coerce_result() -> None:
    assert coerce_result(None) is PENDING
    assert coerce_result(PENDING) is PENDING
    assert coerce_result("1.0.0") == Immediate("1.0.0")
    assert coerce_result(False) == Immediate(False)
    assert coerce_result(Immediate(None)) == Immediate(None)


def test_completion_is_single_shot() -> None:
    seen: list[object] = []
    dupes: list[object] = []
    done = Completion(seen.append, on_duplicate=dupes.append)

    assert done.done is False
    assert done("a") is True
    assert done("b") is False

    assert seen == ["a"]
    assert dupes == ["b"]
    assert done.value == "a"


def test_settle_immediate_and_pending() -> None:
    seen: list[object] = []

    done = Completion(seen.append)
    assert done.settle(PENDING) is False
    assert done.settle(None) is False
    assert seen == []

    assert done.settle(Immediate(None)) is True
    assert seen == [None]


def test_completion_without_callback() -> None:
    done = Completion()
    assert done(42) is True
    assert done.value == 42
