"""Generic stored-matrix linkage algorithm for all distance update formulas."""

from __future__ import annotations

import math
from typing import List, Optional, Sequence

from .structures import (
    BinaryMinHeap,
    ClusterResult,
    DoublyLinkedList,
    MetricMethod,
    condensed_index,
)

_GENERIC_METHODS = frozenset(
    {
        MetricMethod.SINGLE,
        MetricMethod.COMPLETE,
        MetricMethod.AVERAGE,
        MetricMethod.WEIGHTED,
        MetricMethod.WARD,
        MetricMethod.CENTROID,
        MetricMethod.MEDIAN,
    }
)

_SIZED_METHODS = frozenset(
    {MetricMethod.AVERAGE, MetricMethod.WARD, MetricMethod.CENTROID}
)


def generic_linkage(
    n: int,
    distances: Sequence[float],
    method: MetricMethod,
    members: Optional[Sequence[float]] = None,
) -> ClusterResult:
    """Hierarchical clustering with the generic algorithm (Müllner).

    ``distances`` is the condensed upper triangle of the n×n dissimilarity
    matrix and is not modified. ``members`` gives the initial cluster sizes
    used by average, Ward and centroid linkage; it defaults to one per
    observation. Merge steps are returned in merge order and name nodes by
    label: singletons are 0..n-1, the cluster made in step i is n+i.
    """
    method = MetricMethod(method)
    if method not in _GENERIC_METHODS:
        raise ValueError("Invalid method.")
    if n < 0:
        raise ValueError("number of observations must not be negative")
    expected = n * (n - 1) // 2
    if len(distances) != expected:
        raise ValueError(
            f"condensed distance matrix for {n} observations needs {expected} "
            f"entries, got {len(distances)}"
        )
    if members is None:
        sizes = [1.0] * n
    else:
        if len(members) != n:
            raise ValueError("members must hold one entry per observation")
        sizes = [float(m) for m in members]

    result = ClusterResult()
    if n < 2:
        return result

    dist: List[float] = list(distances)
    n_1 = n - 1

    def pos(a: int, b: int) -> int:
        return condensed_index(n, a, b)

    def at(a: int, b: int) -> float:
        return dist[condensed_index(n, a, b)]

    # Nearest neighbour of each row among the rows of higher index.
    n_nghbr = [0] * n_1
    mindist = [0.0] * n_1
    for i in range(n_1):
        minimum = math.inf
        idx = i + 1
        for j in range(i + 1, n):
            value = at(i, j)
            if value < minimum:
                minimum = value
                idx = j
        mindist[i] = minimum
        n_nghbr[i] = idx

    row_repr = list(range(n))
    active = DoublyLinkedList(n)
    heap = BinaryMinHeap(mindist, n_1)
    heap.heapify()

    for step in range(n_1):
        idx1 = heap.argmin()
        if method != MetricMethod.SINGLE:
            # mindist is a lower bound; recompute stale entries until the
            # smallest one is exact.
            while mindist[idx1] < at(idx1, n_nghbr[idx1]):
                j = active.succ[idx1]
                n_nghbr[idx1] = j
                minimum = at(idx1, j)
                j = active.succ[j]
                while j < n:
                    if at(idx1, j) < minimum:
                        minimum = at(idx1, j)
                        n_nghbr[idx1] = j
                    j = active.succ[j]
                heap.update_geq(idx1, minimum)
                idx1 = heap.argmin()

        heap.heap_pop()
        idx2 = n_nghbr[idx1]

        node1 = row_repr[idx1]
        node2 = row_repr[idx2]

        size1 = size2 = 0.0
        if method in _SIZED_METHODS:
            size1 = sizes[idx1]
            size2 = sizes[idx2]
            sizes[idx2] += sizes[idx1]
        result.append(node1, node2, mindist[idx1])

        active.remove(idx1)
        row_repr[idx2] = n + step

        if method == MetricMethod.SINGLE:
            _update_single(n, dist, active, heap, mindist, n_nghbr, idx1, idx2, pos)
        elif method == MetricMethod.COMPLETE:
            _update_complete(n, dist, active, n_nghbr, idx1, idx2, pos)
        else:
            formula = _formula(method, size1, size2, mindist[idx1], sizes)
            always_redirect = method in (MetricMethod.CENTROID, MetricMethod.MEDIAN)
            _update_general(
                n, dist, active, heap, mindist, n_nghbr, idx1, idx2, pos,
                formula, always_redirect,
            )

    return result


def _formula(method, size1, size2, min_dist, sizes):
    """Return an update function f(row, new_value, old_value) -> value."""
    if method == MetricMethod.AVERAGE:
        s = size1 / (size1 + size2)
        t = size2 / (size1 + size2)
        return lambda _row, a, b: s * a + t * b
    if method == MetricMethod.WEIGHTED:
        return lambda _row, a, b: (a + b) * 0.5
    if method == MetricMethod.WARD:
        def ward(row, a, b):
            v = sizes[row]
            return ((v + size1) * a - v * min_dist + (v + size2) * b) / (size1 + size2 + v)
        return ward
    if method == MetricMethod.CENTROID:
        s = size1 / (size1 + size2)
        t = size2 / (size1 + size2)
        stc = s * t * min_dist
        return lambda _row, a, b: s * a - stc + t * b
    c_4 = min_dist * 0.25
    return lambda _row, a, b: (a + b) * 0.5 - c_4


def _update_single(n, dist, active, heap, mindist, n_nghbr, idx1, idx2, pos):
    j = active.start
    while j < idx1:
        target = pos(j, idx2)
        source = dist[pos(j, idx1)]
        if dist[target] > source:
            dist[target] = source
        if n_nghbr[j] == idx1:
            n_nghbr[j] = idx2
        j = active.succ[j]
    while j < idx2:
        target = pos(j, idx2)
        source = dist[pos(idx1, j)]
        if dist[target] > source:
            dist[target] = source
        if dist[target] < mindist[j]:
            heap.update_leq(j, dist[target])
            n_nghbr[j] = idx2
        j = active.succ[j]
    if idx2 < n - 1:
        minimum = mindist[idx2]
        j = active.succ[idx2]
        while j < n:
            target = pos(idx2, j)
            source = dist[pos(idx1, j)]
            if dist[target] > source:
                dist[target] = source
            if dist[target] < minimum:
                n_nghbr[idx2] = j
                minimum = dist[target]
            j = active.succ[j]
        heap.update_leq(idx2, minimum)


def _update_complete(n, dist, active, n_nghbr, idx1, idx2, pos):
    j = active.start
    while j < idx1:
        target = pos(j, idx2)
        source = dist[pos(j, idx1)]
        if dist[target] < source:
            dist[target] = source
        if n_nghbr[j] == idx1:
            n_nghbr[j] = idx2
        j = active.succ[j]
    while j < idx2:
        target = pos(j, idx2)
        source = dist[pos(idx1, j)]
        if dist[target] < source:
            dist[target] = source
        j = active.succ[j]
    j = active.succ[idx2]
    while j < n:
        target = pos(idx2, j)
        source = dist[pos(idx1, j)]
        if dist[target] < source:
            dist[target] = source
        j = active.succ[j]


def _update_general(
    n, dist, active, heap, mindist, n_nghbr, idx1, idx2, pos, formula, always_redirect
):
    j = active.start
    while j < idx1:
        target = pos(j, idx2)
        dist[target] = formula(j, dist[pos(j, idx1)], dist[target])
        if always_redirect and dist[target] < mindist[j]:
            heap.update_leq(j, dist[target])
            n_nghbr[j] = idx2
        elif n_nghbr[j] == idx1:
            n_nghbr[j] = idx2
        j = active.succ[j]
    while j < idx2:
        target = pos(j, idx2)
        dist[target] = formula(j, dist[pos(idx1, j)], dist[target])
        if dist[target] < mindist[j]:
            heap.update_leq(j, dist[target])
            n_nghbr[j] = idx2
        j = active.succ[j]
    if idx2 < n - 1:
        j = active.succ[idx2]
        n_nghbr[idx2] = j
        target = pos(idx2, j)
        dist[target] = formula(j, dist[pos(idx1, j)], dist[target])
        minimum = dist[target]
        j = active.succ[j]
        while j < n:
            target = pos(idx2, j)
            dist[target] = formula(j, dist[pos(idx1, j)], dist[target])
            if dist[target] < minimum:
                minimum = dist[target]
                n_nghbr[idx2] = j
            j = active.succ[j]
        heap.update(idx2, minimum)