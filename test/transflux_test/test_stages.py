"""
Unit tests for the stage catalogue and the stage protocol
"""

from __future__ import annotations

import logging
import math
from typing import Any

import pytest

from transflux import transduce
from transflux.core import EMPTY, TERMINATE, AtomicStage, Produced, Signal, Stage
from transflux.stages import (
    Drop,
    DropWhile,
    Filter,
    Map,
    MapCat,
    Partition,
    PartitionAll,
    Remove,
    Replace,
    Take,
    TakeWhile,
)

log = logging.getLogger(__name__)


def _double(x: int) -> int:
    return x * 2


def _is_even(x: int) -> bool:
    return x % 2 == 0


def _duplicate(x: int) -> list[int]:
    return [x, x]


class CountingStage(AtomicStage[int, int]):
    """
    Passes on elements, terminates at a given element, and counts its invocations.
    """

    def __init__(self, stop_at: int) -> None:
        self.stop_at = stop_at
        self.n_steps = 0
        self.n_flushes = 0

    def _step(self, element: int) -> Signal[int]:
        self.n_steps += 1
        if element == self.stop_at:
            return TERMINATE
        return Produced(element)

    def _flush(self) -> Signal[int]:
        self.n_flushes += 1
        return TERMINATE


def test_map() -> None:
    stage = Map(_double)
    for x in [0, 1, -5, 21]:
        assert stage.step(x) == Produced(x * 2)
    assert not stage.is_terminated
    assert stage.flush() is TERMINATE
    assert stage.is_terminated
    assert stage.step(1) is TERMINATE


def test_filter() -> None:
    stage = Filter(_is_even)
    assert stage.step(2) == Produced(2)
    assert stage.step(3) is EMPTY
    assert stage.step(0) == Produced(0)
    assert stage.flush() is TERMINATE
    assert stage.flush() is TERMINATE


def test_remove() -> None:
    assert transduce(Remove(_is_even), range(7)) == [1, 3, 5]


def test_replace() -> None:
    assert transduce(Replace({"a": "x", "c": "z"}), "abcd") == ["x", "b", "z", "d"]


def test_mapcat() -> None:
    assert transduce(MapCat(_duplicate), [1, 2, 3]) == [1, 1, 2, 2, 3, 3]
    assert transduce(MapCat(lambda x: range(x)), [0, 3, 0, 2]) == [0, 1, 2, 0, 1]

    # one value per step; the remaining values are delivered later
    stage = MapCat(_duplicate)
    assert stage.step(1) == Produced(1)
    assert stage.step(2) == Produced(1)
    assert stage.flush() == Produced(2)
    assert stage.flush() == Produced(2)
    assert stage.flush() is TERMINATE


@pytest.mark.parametrize("n_elements", [0, 1, 5, 6, 7, 12, 13])
@pytest.mark.parametrize("size", [1, 2, 6])
def test_partition_flush(n_elements: int, size: int) -> None:
    batches_all = transduce(PartitionAll(size), range(n_elements))
    assert len(batches_all) == math.ceil(n_elements / size)
    if n_elements % size:
        assert len(batches_all[-1]) == n_elements % size
    assert [x for batch in batches_all for x in batch] == list(range(n_elements))

    batches_complete = transduce(Partition(size), range(n_elements))
    assert len(batches_complete) == n_elements // size
    assert all(len(batch) == size for batch in batches_complete)
    assert batches_complete == batches_all[: n_elements // size]


def test_partition_steps() -> None:
    stage = PartitionAll(2)
    assert stage.step(1) is EMPTY
    assert stage.step(2) == Produced([1, 2])
    assert stage.step(3) is EMPTY
    assert stage.flush() == Produced([3])
    assert stage.flush() is TERMINATE
    assert stage.flush() is TERMINATE
    assert stage.step(4) is TERMINATE

    stage = Partition(2)
    assert stage.step(1) is EMPTY
    assert stage.step(2) == Produced([1, 2])
    assert stage.step(3) is EMPTY
    assert stage.flush() is TERMINATE
    assert stage.step(4) is TERMINATE


def test_partition_batches_are_independent() -> None:
    stage = PartitionAll(2)
    stage.step(1)
    first = stage.step(2)
    stage.step(3)
    second = stage.flush()
    assert isinstance(first, Produced) and isinstance(second, Produced)
    assert first.value == [1, 2]
    assert second.value == [3]


def test_partition_examples() -> None:
    source = [1, 2, 3, 4, 5, 6, 7]
    assert transduce(Partition(2), source) == [[1, 2], [3, 4], [5, 6]]
    assert transduce(PartitionAll(2), source) == [[1, 2], [3, 4], [5, 6], [7]]


def test_take() -> None:
    assert transduce(Take(5), [1, 2, 3, 4, 5, 6, 7]) == [1, 2, 3, 4, 5]
    assert transduce(Take(10), [1, 2]) == [1, 2]

    stage = Take(2)
    assert stage.step("a") == Produced("a")
    assert stage.step("b") == Produced("b")
    assert stage.step("c") is TERMINATE
    assert stage.step("d") is TERMINATE
    assert stage.flush() is TERMINATE

    stage = Take(0)
    assert stage.step("a") is TERMINATE
    assert stage.is_terminated


def test_take_while() -> None:
    assert transduce(TakeWhile(lambda x: x < 4), [1, 2, 3, 4, 1, 2]) == [1, 2, 3]
    assert transduce(TakeWhile(lambda x: x < 4), [5, 1]) == []


def test_drop() -> None:
    assert transduce(Drop(3), range(6)) == [3, 4, 5]
    assert transduce(Drop(0), range(3)) == [0, 1, 2]
    assert transduce(Drop(10), range(3)) == []


def test_drop_while() -> None:
    assert transduce(DropWhile(lambda x: x < 3), [1, 2, 3, 1, 4]) == [3, 1, 4]


@pytest.mark.parametrize(
    "factory, args, error",
    [
        (Partition, (0,), ValueError),
        (PartitionAll, (0,), ValueError),
        (PartitionAll, (-3,), ValueError),
        (PartitionAll, ("2",), TypeError),
        (PartitionAll, (True,), TypeError),
        (PartitionAll, (2.0,), TypeError),
        (Take, (-1,), ValueError),
        (Drop, (-1,), ValueError),
        (Take, (None,), TypeError),
        (Map, (3,), TypeError),
        (MapCat, ("f",), TypeError),
        (Filter, (None,), TypeError),
        (Remove, (1,), TypeError),
        (TakeWhile, (1,), TypeError),
        (DropWhile, (1,), TypeError),
        (Replace, ([("a", "b")],), TypeError),
    ],
)
def test_construction_errors(
    factory: type[Stage[Any, Any]], args: tuple[Any, ...], error: type[Exception]
) -> None:
    with pytest.raises(error):
        factory(*args)


def test_terminal_idempotence() -> None:
    stage = CountingStage(stop_at=3)
    assert stage.step(1) == Produced(1)
    assert stage.step(3) is TERMINATE
    assert stage.is_terminated

    # the subclass is not invoked again once it terminated
    for x in range(5):
        assert stage.step(x) is TERMINATE
        assert stage.flush() is TERMINATE
    assert stage.n_steps == 2
    assert stage.n_flushes == 0


@pytest.mark.parametrize(
    "stage",
    [
        Map(_double),
        MapCat(_duplicate),
        Filter(_is_even),
        Remove(_is_even),
        Partition(3),
        PartitionAll(3),
        Take(4),
        TakeWhile(lambda x: x < 6),
        Drop(2),
        DropWhile(lambda x: x < 2),
        Replace({1: 100}),
    ],
)
def test_single_signal_per_call(stage: Stage[int, Any]) -> None:
    results: list[Signal[Any]] = [stage.step(x) for x in range(10)]
    while not stage.is_terminated:
        results.append(stage.flush())
    assert all(
        signal is TERMINATE or signal is EMPTY or isinstance(signal, Produced)
        for signal in results
    )
    # once terminated, always terminated
    index_terminated = next(i for i, s in enumerate(results) if s.is_terminate)
    assert all(s.is_terminate for s in results[index_terminated:])


def test_none_is_an_element() -> None:
    assert transduce(Map(lambda x: x is None), [None, 1, None]) == [True, False, True]
    assert transduce(PartitionAll(2), [None, None, None]) == [[None, None], [None]]


def test_repr() -> None:
    assert repr(Partition(3)) == "Partition(size=3)"
    assert repr(PartitionAll(2)) == "PartitionAll(size=2)"
    assert repr(Take(5)) == "Take(count=5)"
    assert repr(Map(_double)) == "Map(function=_double)"
    assert repr(Filter(_is_even)) == "Filter(predicate=_is_even)"
    assert str(Drop(1)) == "Drop(count=1)"
