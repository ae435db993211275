"""Tests for the memoizing lazy sequence cache."""

from __future__ import annotations

import threading
import time
from itertools import islice

import pytest

from sharedcode.lazy.cache import CachedSequence, Deferred, DeferredState, LazyCache, wrap


class _CountingIterator:
    """Single-pass iterator that records how often it was advanced."""

    def __init__(self, items: list[object], delay: float = 0.0) -> None:
        self._items = list(items)
        self._pos = 0
        self._delay = delay
        self.advance_count = 0

    def __iter__(self) -> "_CountingIterator":
        return self

    def __next__(self) -> object:
        self.advance_count += 1
        if self._delay:
            time.sleep(self._delay)
        if self._pos >= len(self._items):
            raise StopIteration
        item = self._items[self._pos]
        self._pos += 1
        return item


class _Abort(BaseException):
    pass


def test_wrap_does_not_advance_producer() -> None:
    """Wrapping alone must not pull anything from the producer."""
    producer = _CountingIterator(["a", "b", "c"])
    cached = wrap(producer)

    assert isinstance(cached, CachedSequence)
    assert LazyCache is CachedSequence
    assert producer.advance_count == 0
    assert cached.materialized_count == 0


def test_repeated_traversals_advance_producer_once_per_position() -> None:
    """N full traversals advance the producer exactly len + 1 times."""
    producer = _CountingIterator(["a", "b", "c"])
    cached = wrap(producer)

    for _ in range(5):
        assert list(cached) == ["a", "b", "c"]

    assert producer.advance_count == 4
    assert cached.materialized_count == 3


def test_interleaved_consumers_see_same_order() -> None:
    """Independent iterators over one cache share production and preserve order."""
    producer = _CountingIterator([1, 2, 3])
    cached = wrap(producer)
    first = iter(cached)
    second = iter(cached)

    assert next(first) == 1
    assert next(second) == 1
    assert next(second) == 2
    assert producer.advance_count == 2
    assert next(first) == 2
    assert producer.advance_count == 2

    assert list(first) == [3]
    assert list(second) == [3]
    assert producer.advance_count == 4


def test_partial_traversal_is_lazy() -> None:
    """Taking a prefix pulls only that prefix from the producer."""
    producer = _CountingIterator(list(range(10)))
    cached = wrap(producer)

    assert list(islice(cached, 2)) == [0, 1]
    assert producer.advance_count == 2
    assert cached.materialized_count == 2
    assert list(islice(cached, 4)) == [0, 1, 2, 3]
    assert producer.advance_count == 4


def test_concurrent_consumers_never_double_advance() -> None:
    """Threads racing over unforced nodes still advance each position once."""
    items = list(range(20))
    producer = _CountingIterator(items, delay=0.001)
    cached = wrap(producer)
    barrier = threading.Barrier(8)
    results: list[list[int]] = []
    lock = threading.Lock()

    def consume() -> None:
        barrier.wait()
        seen = list(cached)
        with lock:
            results.append(seen)

    threads = [threading.Thread(target=consume) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results == [items] * 8
    assert producer.advance_count == len(items) + 1


def test_head_and_tail_navigation() -> None:
    """Nodes expose head, tail and exhaustion explicitly."""
    cached = wrap("ab")

    assert cached.is_exhausted is False
    assert cached.head == "a"
    tail = cached.tail
    assert tail is not None
    assert tail.head == "b"
    last = tail.tail
    assert last is not None
    assert last.is_exhausted is True
    assert last.tail is None
    with pytest.raises(IndexError, match="empty cached sequence"):
        _ = last.head


def test_tail_forces_own_position_first() -> None:
    """Reaching for the tail before the head still keeps positions aligned."""
    cached = wrap(iter("xyz"))

    tail = cached.tail
    assert tail is not None
    assert tail.head == "y"
    assert cached.head == "x"
    assert list(cached) == ["x", "y", "z"]


def test_empty_source() -> None:
    """An empty producer gives an empty, repeatable sequence."""
    producer = _CountingIterator([])
    cached = wrap(producer)

    assert list(cached) == []
    assert list(cached) == []
    assert cached.is_exhausted is True
    assert producer.advance_count == 1


def test_producer_fault_is_memoized() -> None:
    """A producer error is re-raised on every access without re-advancing."""
    calls = {"count": 0}

    def faulty():
        calls["count"] += 1
        yield 1
        calls["count"] += 1
        raise RuntimeError("boom")

    cached = wrap(faulty())

    with pytest.raises(RuntimeError, match="boom") as first:
        list(cached)
    with pytest.raises(RuntimeError, match="boom") as second:
        list(cached)

    assert second.value is first.value
    assert calls["count"] == 2
    assert list(islice(cached, 1)) == [1]


def test_long_sequence_traversal() -> None:
    """Traversal is iterative, so long sources do not hit recursion limits."""
    cached = wrap(range(50_000))

    assert sum(cached) == sum(range(50_000))
    assert sum(cached) == sum(range(50_000))


def test_deferred_computes_once() -> None:
    """A deferred value calls its factory only on first force."""
    calls: list[int] = []

    def factory() -> int:
        calls.append(1)
        return 42

    deferred = Deferred(factory)
    assert deferred.state is DeferredState.UNFORCED
    assert deferred.force() == 42
    assert deferred.force() == 42
    assert deferred.state is DeferredState.FORCED
    assert calls == [1]


def test_deferred_rejects_reentrant_force() -> None:
    """Forcing a deferred value from its own factory faults instead of deadlocking."""
    deferred: Deferred[int] = Deferred(lambda: deferred.force())

    with pytest.raises(RuntimeError, match="own factory"):
        deferred.force()
    assert deferred.state is DeferredState.FAULTED


def test_deferred_base_exception_leaves_value_retryable() -> None:
    """Non-Exception interrupts are not memoized."""
    attempts: list[int] = []

    def factory() -> str:
        attempts.append(1)
        if len(attempts) == 1:
            raise _Abort()
        return "ok"

    deferred = Deferred(factory)
    with pytest.raises(_Abort):
        deferred.force()
    assert deferred.state is DeferredState.UNFORCED
    assert deferred.force() == "ok"
    assert len(attempts) == 2


def _traceback_depth(exc: BaseException) -> int:
    depth = 0
    tb = exc.__traceback__
    while tb is not None:
        depth += 1
        tb = tb.tb_next
    return depth


def test_repeated_fault_keeps_traceback_bounded() -> None:
    """Re-raising a stored fault does not grow its traceback."""

    def faulty():
        yield 1
        raise RuntimeError("boom")

    cached = wrap(faulty())
    depths: list[int] = []
    for _ in range(50):
        with pytest.raises(RuntimeError, match="boom") as exc_info:
            list(cached)
        depths.append(_traceback_depth(exc_info.value))

    assert len(set(depths)) == 1


def test_concurrent_consumers_share_one_fault() -> None:
    """Threads racing into a faulting position all see the same error, produced once."""
    calls = {"count": 0}
    count_lock = threading.Lock()

    def faulty():
        for item in range(3):
            with count_lock:
                calls["count"] += 1
            time.sleep(0.001)
            yield item
        with count_lock:
            calls["count"] += 1
        time.sleep(0.001)
        raise RuntimeError("boom")

    cached = wrap(faulty())
    barrier = threading.Barrier(8)
    errors: list[BaseException] = []
    prefixes: list[list[int]] = []
    lock = threading.Lock()

    def consume() -> None:
        barrier.wait()
        seen: list[int] = []
        try:
            for item in cached:
                seen.append(item)
        except RuntimeError as exc:
            with lock:
                errors.append(exc)
                prefixes.append(seen)

    threads = [threading.Thread(target=consume) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(errors) == 8
    assert all(error is errors[0] for error in errors)
    assert prefixes == [[0, 1, 2]] * 8
    assert calls["count"] == 4
