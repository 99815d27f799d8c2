"""
Indexed binary heap used as the open set / frontier by the planners.

Unlike a plain heapq list, every item's position in the heap is tracked so
an item can be re-keyed or removed in O(log n) without a linear scan.
"""
from typing import Any, Dict, Hashable, List, Optional


class IndexedPriorityQueue:
    """
    Min-priority queue keyed by arbitrary comparable keys.

    Keys are usually floats or tuples (compared lexicographically). Items
    with equal keys come out in insertion order. Each item appears at most
    once; enqueueing an item that is already queued re-keys it.
    """

    def __init__(self):
        self._heap: List[list] = []  # entries: [key, sequence, item]
        self._index: Dict[Hashable, int] = {}  # item -> position in heap
        self._counter = 0

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __contains__(self, item: Hashable) -> bool:
        return item in self._index

    @property
    def count(self) -> int:
        return len(self._heap)

    def enqueue(self, item: Hashable, key: Any) -> None:
        """Add item with key, or replace the key of an already queued item."""
        if item in self._index:
            self.remove(item)

        entry = [key, self._counter, item]
        self._counter += 1
        self._heap.append(entry)
        position = len(self._heap) - 1
        self._index[item] = position
        self._sift_up(position)

    def dequeue(self) -> Hashable:
        """Remove and return the item with the smallest key."""
        if not self._heap:
            raise IndexError("dequeue from an empty priority queue")
        item = self._heap[0][2]
        self._remove_at(0)
        return item

    def peek(self) -> Hashable:
        if not self._heap:
            raise IndexError("peek at an empty priority queue")
        return self._heap[0][2]

    def peek_key(self) -> Any:
        """Get the smallest key without removing its item."""
        if not self._heap:
            raise IndexError("peek at an empty priority queue")
        return self._heap[0][0]

    def key_of(self, item: Hashable) -> Optional[Any]:
        """Key an item was queued with, or None if it is not queued."""
        position = self._index.get(item)
        if position is None:
            return None
        return self._heap[position][0]

    def remove(self, item: Hashable) -> bool:
        """
        Remove an item if present.

        Returns:
            True if the item was queued, False otherwise
        """
        position = self._index.get(item)
        if position is None:
            return False
        self._remove_at(position)
        return True

    def clear(self) -> None:
        self._heap.clear()
        self._index.clear()
        self._counter = 0

    def _remove_at(self, position: int) -> None:
        entry = self._heap[position]
        del self._index[entry[2]]

        last = self._heap.pop()
        if position == len(self._heap):
            return  # Removed the tail entry

        self._heap[position] = last
        self._index[last[2]] = position
        # The moved entry may need to travel either way
        self._sift_up(position)
        self._sift_down(self._index[last[2]])

    def _less(self, a: int, b: int) -> bool:
        left = self._heap[a]
        right = self._heap[b]
        if left[0] == right[0]:
            return left[1] < right[1]
        return left[0] < right[0]

    def _swap(self, a: int, b: int) -> None:
        heap = self._heap
        heap[a], heap[b] = heap[b], heap[a]
        self._index[heap[a][2]] = a
        self._index[heap[b][2]] = b

    def _sift_up(self, position: int) -> None:
        while position > 0:
            parent = (position - 1) // 2
            if not self._less(position, parent):
                break
            self._swap(position, parent)
            position = parent

    def _sift_down(self, position: int) -> None:
        size = len(self._heap)
        while True:
            left = 2 * position + 1
            right = left + 1
            smallest = position
            if left < size and self._less(left, smallest):
                smallest = left
            if right < size and self._less(right, smallest):
                smallest = right
            if smallest == position:
                break
            self._swap(position, smallest)
            position = smallest

    def __repr__(self) -> str:
        return f"IndexedPriorityQueue(count={len(self._heap)})"
