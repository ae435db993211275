"""Function memoization helper."""

from __future__ import annotations

import functools
from collections.abc import Callable, Hashable
from threading import RLock
from typing import Generic, TypeVar

K = TypeVar("K", bound=Hashable)
R = TypeVar("R")


class Memoized(Generic[K, R]):
    """Single-argument function wrapper that computes each key at most once.

    Meant for plain functions. Looking it up through an instance raises
    ``TypeError``, since the bound instance would replace the cache key.
    """

    def __init__(self, function: Callable[[K], R]) -> None:
        """Initialize the wrapper with an empty cache."""
        if not callable(function):
            raise TypeError("function must be callable")
        self._function = function
        self._lock = RLock()
        self._cache: dict[K, R] = {}
        functools.update_wrapper(self, function)

    def __call__(self, key: K) -> R:
        """Return the cached result for ``key``, computing it on first use."""
        if key in self._cache:
            return self._cache[key]
        with self._lock:
            if key not in self._cache:
                self._cache[key] = self._function(key)
            return self._cache[key]

    def __get__(self, instance: object, owner: type | None = None) -> Memoized[K, R]:
        if instance is not None:
            raise TypeError(f"memoize does not support methods; {self.__name__} was looked up on an instance")
        return self

    def cache_size(self) -> int:
        """Return the number of cached results."""
        return len(self._cache)


def memoize(function: Callable[[K], R]) -> Memoized[K, R]:
    """Return a memoized version of a single-argument function."""
    return Memoized(function)
