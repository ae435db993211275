"""Memoizing lazy sequence cache over single-pass producers."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from enum import Enum
from threading import RLock
from types import TracebackType
from typing import Any, Generic, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class DeferredState(Enum):
    """Lifecycle states of a deferred value."""

    UNFORCED = "unforced"
    FORCING = "forcing"
    FORCED = "forced"
    FAULTED = "faulted"


class Deferred(Generic[T]):
    """A value computed on first access, then fixed for every later access.

    The first caller of :meth:`force` runs the factory under a lock; concurrent
    callers block until it finishes. A result or an ``Exception`` raised by the
    factory is stored and replayed without calling the factory again.
    """

    __slots__ = ("_factory", "_lock", "_state", "_value", "_error", "_traceback")

    def __init__(self, factory: Callable[[], T]) -> None:
        """Initialize an unforced deferred value around ``factory``."""
        self._factory: Callable[[], T] | None = factory
        self._lock = RLock()
        self._state = DeferredState.UNFORCED
        self._value: T | None = None
        self._error: Exception | None = None
        self._traceback: TracebackType | None = None

    @property
    def state(self) -> DeferredState:
        """Return the current lifecycle state."""
        return self._state

    @property
    def is_forced(self) -> bool:
        """Return True once a value or a fault has been recorded."""
        return self._state in (DeferredState.FORCED, DeferredState.FAULTED)

    def force(self) -> T:
        """Return the value, computing it on first access."""
        if not self.is_forced:
            with self._lock:
                if self._state is DeferredState.FORCING:
                    raise RuntimeError("deferred value was forced from inside its own factory")
                if self._state is DeferredState.UNFORCED:
                    self._run_factory_locked()

        if self._state is DeferredState.FAULTED:
            assert self._error is not None
            raise self._error.with_traceback(self._traceback)
        return self._value  # type: ignore[return-value]

    def _run_factory_locked(self) -> None:
        factory = self._factory
        assert factory is not None
        self._state = DeferredState.FORCING
        try:
            value = factory()
        except Exception as exc:
            logger.debug("deferred factory %r faulted; memoizing %s", factory, type(exc).__name__)
            self._error = exc
            self._traceback = exc.__traceback__
            self._factory = None
            self._state = DeferredState.FAULTED
            return
        except BaseException:
            # KeyboardInterrupt and friends leave the value retryable.
            self._state = DeferredState.UNFORCED
            raise
        self._value = value
        self._factory = None
        self._state = DeferredState.FORCED


_Step = tuple[bool, Any]


class CachedSequence(Generic[T]):
    """Multi-pass, memoized view over a single-pass iterator.

    Each node advances the shared iterator at most once. The next node is only
    created after this node's step has been forced, so the iterator is always
    advanced strictly in order no matter how consumers interleave.
    """

    __slots__ = ("_iterator", "_step", "_tail", "__weakref__")

    def __init__(self, iterator: Iterator[T]) -> None:
        """Initialize a node over ``iterator`` without advancing it."""
        self._iterator: Iterator[T] | None = iterator
        self._step: Deferred[_Step] = Deferred(self._advance)
        self._tail: Deferred[CachedSequence[T] | None] = Deferred(self._next_node)

    def _advance(self) -> _Step:
        iterator = self._iterator
        assert iterator is not None
        try:
            item = next(iterator)
        except StopIteration:
            self._iterator = None
            return True, None
        return False, item

    def _next_node(self) -> CachedSequence[T] | None:
        exhausted, _ = self._step.force()
        if exhausted:
            return None
        iterator = self._iterator
        assert iterator is not None
        self._iterator = None
        return CachedSequence(iterator)

    @property
    def is_exhausted(self) -> bool:
        """Return True when this position has no element."""
        exhausted, _ = self._step.force()
        return exhausted

    @property
    def head(self) -> T:
        """Return the element at this position."""
        exhausted, item = self._step.force()
        if exhausted:
            raise IndexError("head of an empty cached sequence")
        return item

    @property
    def tail(self) -> CachedSequence[T] | None:
        """Return the sequence after this position, or None when exhausted."""
        return self._tail.force()

    @property
    def materialized_count(self) -> int:
        """Return how many elements have been pulled so far, without pulling more."""
        count = 0
        node: CachedSequence[T] | None = self
        while node is not None and node._step.state is DeferredState.FORCED:
            exhausted, _ = node._step.force()
            if exhausted:
                break
            count += 1
            if node._tail.state is not DeferredState.FORCED:
                break
            node = node._tail.force()
        return count

    def __iter__(self) -> Iterator[T]:
        node: CachedSequence[T] | None = self
        while node is not None:
            exhausted, item = node._step.force()
            if exhausted:
                return
            yield item
            node = node._tail.force()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(materialized={self.materialized_count})"


LazyCache = CachedSequence


def wrap(source: Iterable[T]) -> CachedSequence[T]:
    """Wrap a single-pass source so it can be iterated repeatedly.

    Only ``iter(source)`` is called here; no element is produced until a
    consumer asks for one.
    """
    return CachedSequence(iter(source))
