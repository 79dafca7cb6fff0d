"""Stored-matrix linkage algorithms: MST single linkage and the NN-chain."""

from __future__ import annotations

import math
from typing import Iterator, List, Optional, Sequence, Tuple

from .structures import ClusterResult, DoublyLinkedList, MetricMethod, condensed_index

_NN_CHAIN_METHODS = frozenset(
    {
        MetricMethod.SINGLE,
        MetricMethod.COMPLETE,
        MetricMethod.AVERAGE,
        MetricMethod.WEIGHTED,
        MetricMethod.WARD,
    }
)


def _check_distances(n: int, distances: Sequence[float]) -> None:
    if n < 0:
        raise ValueError("number of observations must not be negative")
    expected = n * (n - 1) // 2
    if len(distances) != expected:
        raise ValueError(
            f"condensed distance matrix for {n} observations needs {expected} "
            f"entries, got {len(distances)}"
        )


def mst_linkage_core(n: int, distances: Sequence[float]) -> ClusterResult:
    """Single linkage clustering via the minimum spanning tree (Rohlf).

    ``distances`` is the condensed upper triangle of the n×n dissimilarity
    matrix. The merge steps name point indices and come out unsorted.
    """
    _check_distances(n, distances)
    result = ClusterResult()
    if n < 2:
        return result

    active = DoublyLinkedList(n)
    d = [0.0] * n

    idx2 = 1
    minimum = math.inf
    for i in range(1, n):
        d[i] = distances[i - 1]
        if d[i] < minimum:
            minimum = d[i]
            idx2 = i
    result.append(0, idx2, minimum)

    for _ in range(1, n - 1):
        prev_node = idx2
        active.remove(prev_node)

        idx2 = active.succ[0]
        minimum = d[idx2]
        i = idx2
        while i < prev_node:
            tmp = distances[condensed_index(n, i, prev_node)]
            if tmp < d[i]:
                d[i] = tmp
            if d[i] < minimum:
                minimum = d[i]
                idx2 = i
            i = active.succ[i]
        while i < n:
            tmp = distances[condensed_index(n, prev_node, i)]
            if d[i] > tmp:
                d[i] = tmp
            if d[i] < minimum:
                minimum = d[i]
                idx2 = i
            i = active.succ[i]
        result.append(prev_node, idx2, minimum)

    return result


def _update_targets(
    n: int, active: DoublyLinkedList, idx1: int, idx2: int
) -> Iterator[Tuple[int, int, int]]:
    """Yield (row, position of D(row, idx2), position of D(row, idx1)).

    ``idx1`` must already be removed from ``active`` and be below ``idx2``.
    """
    i = active.start
    while i < idx1:
        yield i, condensed_index(n, i, idx2), condensed_index(n, i, idx1)
        i = active.succ[i]
    while i < idx2:
        yield i, condensed_index(n, i, idx2), condensed_index(n, idx1, i)
        i = active.succ[i]
    i = active.succ[idx2]
    while i < n:
        yield i, condensed_index(n, idx2, i), condensed_index(n, idx1, i)
        i = active.succ[i]


def nn_chain_core(
    n: int,
    distances: Sequence[float],
    method: MetricMethod,
    members: Optional[Sequence[float]] = None,
) -> ClusterResult:
    """Nearest-neighbour-chain clustering (Murtagh).

    Works for single, complete, average, weighted and Ward linkage.
    ``members`` gives the initial cluster sizes used by average and Ward
    linkage; it defaults to one per observation. The inputs are not
    modified. Merge steps name row indices, where the higher index of a
    merged pair represents the new cluster; steps come out unsorted.
    """
    method = MetricMethod(method)
    if method not in _NN_CHAIN_METHODS:
        raise ValueError("Invalid method.")
    _check_distances(n, distances)
    result = ClusterResult()
    if n < 2:
        return result

    dist: List[float] = list(distances)
    if members is None:
        sizes = [1.0] * n
    else:
        if len(members) != n:
            raise ValueError("members must hold one entry per observation")
        sizes = [float(m) for m in members]

    active = DoublyLinkedList(n)
    chain = [0] * n
    tip = 0

    def at(a: int, b: int) -> float:
        return dist[condensed_index(n, a, b)]

    for _ in range(n - 1):
        if tip <= 3:
            idx1 = active.start
            chain[0] = idx1
            tip = 1
            idx2 = active.succ[idx1]
            minimum = at(idx1, idx2)
            i = active.succ[idx2]
            while i < n:
                if at(idx1, i) < minimum:
                    minimum = at(idx1, i)
                    idx2 = i
                i = active.succ[i]
        else:
            tip -= 3
            idx1 = chain[tip - 1]
            idx2 = chain[tip]
            minimum = at(idx1, idx2) if idx1 < idx2 else at(idx2, idx1)

        while True:
            chain[tip] = idx2
            i = active.start
            while i < idx2:
                if at(i, idx2) < minimum:
                    minimum = at(i, idx2)
                    idx1 = i
                i = active.succ[i]
            i = active.succ[idx2]
            while i < n:
                if at(idx2, i) < minimum:
                    minimum = at(idx2, i)
                    idx1 = i
                i = active.succ[i]

            idx2 = idx1
            idx1 = chain[tip]
            tip += 1
            if idx2 == chain[tip - 2]:
                break

        result.append(idx1, idx2, minimum)

        if idx1 > idx2:
            idx1, idx2 = idx2, idx1

        size1 = size2 = 0.0
        if method in (MetricMethod.AVERAGE, MetricMethod.WARD):
            size1 = sizes[idx1]
            size2 = sizes[idx2]
            sizes[idx2] += sizes[idx1]

        active.remove(idx1)

        if method == MetricMethod.SINGLE:
            for _row, target, source in _update_targets(n, active, idx1, idx2):
                if dist[target] > dist[source]:
                    dist[target] = dist[source]
        elif method == MetricMethod.COMPLETE:
            for _row, target, source in _update_targets(n, active, idx1, idx2):
                if dist[target] < dist[source]:
                    dist[target] = dist[source]
        elif method == MetricMethod.AVERAGE:
            s = size1 / (size1 + size2)
            t = size2 / (size1 + size2)
            for _row, target, source in _update_targets(n, active, idx1, idx2):
                dist[target] = s * dist[source] + t * dist[target]
        elif method == MetricMethod.WEIGHTED:
            for _row, target, source in _update_targets(n, active, idx1, idx2):
                dist[target] = (dist[source] + dist[target]) * 0.5
        else:  # Ward
            for row, target, source in _update_targets(n, active, idx1, idx2):
                v = sizes[row]
                dist[target] = (
                    (v + size1) * dist[source] - v * minimum + (v + size2) * dist[target]
                ) / (size1 + size2 + v)

    return result