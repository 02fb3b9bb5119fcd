"""Binary min-heap ordered by a caller-supplied comparison function.

The same structure backs both passenger class queues (ordered by arrival
time) and the event heap (ordered by event time). Elements that compare equal
under the comparator come out in insertion order, so every run over the same
input is reproducible.

``update`` and ``remove`` locate their element by a key extracted with the
``key`` function given at construction. Both are linear scans and are not
used on the simulation hot path.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterator
from itertools import count
from typing import Generic, TypeVar

T = TypeVar("T")

LessThan = Callable[[T, T], bool]
"""Returns True when the first argument must come out before the second."""


def _identity(item):
    return item


class PriorityQueue(Generic[T]):
    """Min-heap with an injected ordering and FIFO tie-breaking.

    Args:
        less: Strict ordering function, ``less(a, b)`` is True when ``a``
            should be popped before ``b``.
        key: Extracts the identity used by ``update`` and ``remove``.
            Defaults to the element itself.
    """

    def __init__(self, less: LessThan, key: Callable[[T], Hashable] | None = None):
        self._less = less
        self._key = key or _identity
        self._heap: list[tuple[T, int]] = []
        self._insertion = count()

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    @property
    def count(self) -> int:
        return len(self._heap)

    def is_empty(self) -> bool:
        return not self._heap

    def push(self, item: T) -> None:
        self._heap.append((item, next(self._insertion)))
        self._sift_up(len(self._heap) - 1)

    def pop(self) -> T | None:
        """Remove and return the minimal element, or None when empty."""
        if not self._heap:
            return None
        last = len(self._heap) - 1
        if last != 0:
            self._swap(0, last)
        item, _ = self._heap.pop()
        self._sift_down(0)
        return item

    def peek(self) -> T | None:
        if not self._heap:
            return None
        return self._heap[0][0]

    def update(self, item: T) -> T | None:
        """Replace the first element whose key matches ``item``'s key.

        The replacement keeps the original insertion order for tie-breaking.
        Returns the replaced element, or None if no element matched.
        """
        wanted = self._key(item)
        for index, (current, seq) in enumerate(self._heap):
            if self._key(current) == wanted:
                self._heap[index] = (item, seq)
                self._restore(index)
                return current
        return None

    def remove(self, key: Hashable) -> T | None:
        """Remove and return the first element with the given key, or None."""
        for index, (current, _) in enumerate(self._heap):
            if self._key(current) == key:
                last = self._heap.pop()
                if index < len(self._heap):
                    self._heap[index] = last
                    self._restore(index)
                return current
        return None

    def drain(self) -> Iterator[T]:
        """Pop elements in order until the queue is empty."""
        while self._heap:
            yield self.pop()

    def clear(self) -> None:
        self._heap.clear()

    # --- heap maintenance ---

    def _before(self, i: int, j: int) -> bool:
        a, a_seq = self._heap[i]
        b, b_seq = self._heap[j]
        if self._less(a, b):
            return True
        if self._less(b, a):
            return False
        return a_seq < b_seq

    def _swap(self, i: int, j: int) -> None:
        self._heap[i], self._heap[j] = self._heap[j], self._heap[i]

    def _restore(self, index: int) -> None:
        # A replaced element may need to move in either direction.
        if not self._sift_down(index):
            self._sift_up(index)

    def _sift_up(self, index: int) -> bool:
        moved = False
        while index > 0:
            parent = (index - 1) >> 1
            if not self._before(index, parent):
                break
            self._swap(index, parent)
            index = parent
            moved = True
        return moved

    def _sift_down(self, index: int) -> bool:
        moved = False
        size = len(self._heap)
        while True:
            left = 2 * index + 1
            right = left + 1
            smallest = index
            if left < size and self._before(left, smallest):
                smallest = left
            if right < size and self._before(right, smallest):
                smallest = right
            if smallest == index:
                return moved
            self._swap(index, smallest)
            index = smallest
            moved = True

    def __repr__(self) -> str:
        return f"PriorityQueue(size={len(self._heap)})"
