"""Core data structures shared by the hierarchical clustering algorithms."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, List, MutableSequence


class MetricMethod(IntEnum):
    """Linkage methods working on a stored dissimilarity matrix."""

    SINGLE = 0
    COMPLETE = 1
    AVERAGE = 2
    WEIGHTED = 3
    WARD = 4
    WARD_D = 4
    CENTROID = 5
    MEDIAN = 6
    WARD_D2 = 7


@dataclass
class MergeStep:
    """One merge of two nodes at a given cluster distance."""

    node1: int
    node2: int
    dist: float

    def __lt__(self, other: "MergeStep") -> bool:
        return self.dist < other.dist


class ClusterResult:
    """Sequence of merge steps produced by a linkage algorithm."""

    def __init__(self) -> None:
        self._steps: List[MergeStep] = []

    def append(self, node1: int, node2: int, dist: float) -> None:
        self._steps.append(MergeStep(node1, node2, dist))

    def __getitem__(self, idx):
        return self._steps[idx]

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[MergeStep]:
        return iter(self._steps)

    # The post-processing functions below are monotone, so they keep the
    # sorted order of the distances intact.

    def sqrt(self) -> None:
        for step in self._steps:
            step.dist = math.sqrt(step.dist)

    def sqrt_double(self) -> None:
        for step in self._steps:
            step.dist = math.sqrt(2 * step.dist)

    def power(self, p: float) -> None:
        q = 1 / p
        for step in self._steps:
            step.dist = step.dist ** q

    def plus_one(self) -> None:
        for step in self._steps:
            step.dist += 1

    def divide(self, denom: float) -> None:
        for step in self._steps:
            step.dist /= denom


class DoublyLinkedList:
    """The integer range [0, size) with constant-time removal.

    Traverse active indices with ``i = lst.start`` and ``i = lst.succ[i]``
    while ``i < size``.
    """

    def __init__(self, size: int) -> None:
        self.size = size
        self.start = 0
        self.succ = [0] * (size + 1)
        self._pred = [0] * (size + 1)
        for i in range(size):
            self._pred[i + 1] = i
            self.succ[i] = i + 1

    def remove(self, idx: int) -> None:
        """Remove an index from the list and mark it inactive."""
        if idx == self.start:
            self.start = self.succ[idx]
        else:
            self.succ[self._pred[idx]] = self.succ[idx]
            self._pred[self.succ[idx]] = self._pred[idx]
        self.succ[idx] = 0

    def is_inactive(self, idx: int) -> bool:
        return self.succ[idx] == 0


class UnionFind:
    """Union-find over node labels; a node with parent 0 is a root."""

    def __init__(self, size: int) -> None:
        self._parent = [0] * (2 * size - 1 if size > 0 else 0)
        self._next_parent = size

    def find(self, idx: int) -> int:
        parent = self._parent
        if parent[idx] != 0:
            p = idx
            idx = parent[idx]
            if parent[idx] != 0:
                while True:
                    idx = parent[idx]
                    if parent[idx] == 0:
                        break
                # Path compression: point every visited node at the root.
                while True:
                    nxt = parent[p]
                    parent[p] = idx
                    p = nxt
                    if parent[p] == idx:
                        break
        return idx

    def union(self, node1: int, node2: int) -> None:
        """Make both nodes children of a freshly numbered parent node."""
        self._parent[node1] = self._next_parent
        self._parent[node2] = self._next_parent
        self._next_parent += 1


class BinaryMinHeap:
    """Index heap over an external list of values.

    The values themselves are not reordered; the heap keeps index lists so
    that ``values[argmin()]`` is the smallest value among the heap members.
    Values are updated in place through ``update`` and friends.
    """

    def __init__(self, values: MutableSequence[float], size: int) -> None:
        if size > len(values):
            raise ValueError("heap size exceeds number of values")
        self._values = values
        self._size = size
        self._index = list(range(size))
        self._rank = list(range(len(values)))

    def __len__(self) -> int:
        return self._size

    def heapify(self) -> None:
        """Arrange the index lists so that they satisfy the heap condition."""
        for idx in range(self._size // 2 - 1, -1, -1):
            self._update_geq(idx)

    def argmin(self) -> int:
        return self._index[0]

    def heap_pop(self) -> None:
        """Remove the minimal element."""
        self._size -= 1
        self._index[0] = self._index[self._size]
        self._rank[self._index[0]] = 0
        self._update_geq(0)

    def remove(self, idx: int) -> None:
        """Remove the element with value index ``idx``."""
        self._size -= 1
        index, rank = self._index, self._rank
        rank[index[self._size]] = rank[idx]
        index[rank[idx]] = index[self._size]
        if self._h(self._size) <= self._values[idx]:
            self._update_leq(rank[idx])
        else:
            self._update_geq(rank[idx])

    def replace(self, idxold: int, idxnew: int, val: float) -> None:
        """Put value index ``idxnew`` with value ``val`` in place of ``idxold``."""
        self._rank[idxnew] = self._rank[idxold]
        self._index[self._rank[idxnew]] = idxnew
        if val <= self._values[idxold]:
            self.update_leq(idxnew, val)
        else:
            self.update_geq(idxnew, val)

    def update(self, idx: int, val: float) -> None:
        if val <= self._values[idx]:
            self.update_leq(idx, val)
        else:
            self.update_geq(idx, val)

    def update_leq(self, idx: int, val: float) -> None:
        """Set a value that is not larger than the old one."""
        self._values[idx] = val
        self._update_leq(self._rank[idx])

    def update_geq(self, idx: int, val: float) -> None:
        """Set a value that is not smaller than the old one."""
        self._values[idx] = val
        self._update_geq(self._rank[idx])

    def _h(self, i: int) -> float:
        return self._values[self._index[i]]

    def _update_leq(self, i: int) -> None:
        while i > 0:
            j = (i - 1) >> 1
            if not self._h(i) < self._h(j):
                break
            self._swap(i, j)
            i = j

    def _update_geq(self, i: int) -> None:
        size = self._size
        while True:
            j = 2 * i + 1
            if j >= size:
                break
            if self._h(j) >= self._h(i):
                j += 1
                if j >= size or self._h(j) >= self._h(i):
                    break
            elif j + 1 < size and self._h(j + 1) < self._h(j):
                j += 1
            self._swap(i, j)
            i = j

    def _swap(self, i: int, j: int) -> None:
        index, rank = self._index, self._rank
        index[i], index[j] = index[j], index[i]
        rank[index[i]] = i
        rank[index[j]] = j


def condensed_index(n: int, row: int, col: int) -> int:
    """Position of entry (row, col), row < col, in a condensed n×n matrix."""
    if not 0 <= row < col < n:
        raise IndexError(f"invalid condensed matrix entry ({row}, {col}) for n={n}")
    return (((2 * n - 3 - row) * row) >> 1) + col - 1