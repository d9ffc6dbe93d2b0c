"""Restartable query results."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Generic, TypeVar

T = TypeVar("T")


class Restartable(Generic[T]):
    """A finite result that can be iterated any number of times.

    Nothing is read until iteration starts, and every new iteration
    re-reads the store, so a second pass sees records appended since.
    """

    def __init__(self, source: Callable[[], Iterator[T]]) -> None:
        self._source = source

    def __iter__(self) -> Iterator[T]:
        return self._source()
