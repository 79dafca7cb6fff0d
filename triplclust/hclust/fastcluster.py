"""Hierarchical clustering front end with dendrogram output in R convention.

Merge steps are returned as a list of ``(m1, m2)`` pairs. A negative entry
``-k`` names the singleton observation ``k`` (counted from one). A positive
entry ``k`` names the cluster made in merge step ``k`` (counted from one).
"""

from __future__ import annotations

from enum import IntEnum
from typing import List, Sequence, Tuple

from .generic import generic_linkage
from .linkage import mst_linkage_core, nn_chain_core
from .structures import ClusterResult, MetricMethod, UnionFind

Merge = List[Tuple[int, int]]


class HclustMethod(IntEnum):
    """Linkage methods offered by :func:`hclust_fast`."""

    SINGLE = 0
    COMPLETE = 1
    AVERAGE = 2
    MEDIAN = 3


def order_nodes(n: int, merge: Sequence[Tuple[int, int]], node_size: Sequence[int]) -> List[int]:
    """Return the leaf order (one-based observation numbers) of a dendrogram.

    ``node_size[i]`` is the number of observations in the cluster made in
    merge step ``i`` (counted from zero).
    """
    if n < 2:
        return list(range(1, n + 1))
    if len(merge) != n - 1 or len(node_size) != n - 1:
        raise ValueError(f"a dendrogram of {n} observations has {n - 1} merge steps")

    order = [0] * n
    stack: List[Tuple[int, int]] = [(0, n - 2)]
    while stack:
        pos, parent = stack.pop()
        first, second = merge[parent]
        if first < 0:
            order[pos] = -first
            pos += 1
        else:
            stack.append((pos, first - 1))
            pos += node_size[first - 1]
        if second < 0:
            order[pos] = -second
        else:
            stack.append((pos, second - 1))
    return order


def generate_r_dendrogram(
    result: ClusterResult, n: int, is_sorted: bool
) -> Tuple[Merge, List[float], List[int]]:
    """Convert linkage output into ``(merge, height, order)``.

    When ``is_sorted`` is false the steps name point indices and may come in
    any order; they are then stably sorted by distance and the cluster
    identities are resolved with a union-find structure. When it is true
    the steps are taken as they are and name node labels directly
    (singletons 0..n-1, cluster of step i is n+i).
    """
    if len(result) != max(n - 1, 0):
        raise ValueError(f"a clustering of {n} observations has {max(n - 1, 0)} merge steps")
    if n < 2:
        return [], [], list(range(1, n + 1))

    steps = list(result) if is_sorted else sorted(result, key=lambda step: step.dist)
    nodes = None if is_sorted else UnionFind(n)

    merge: Merge = []
    height: List[float] = []
    node_size: List[int] = []

    def size_of(node: int) -> int:
        return 1 if node < n else node_size[node - n]

    def r_label(node: int) -> int:
        return -node - 1 if node < n else node - n + 1

    for step in steps:
        if nodes is None:
            node1, node2 = step.node1, step.node2
        else:
            node1 = nodes.find(step.node1)
            node2 = nodes.find(step.node2)
            nodes.union(node1, node2)
        if node1 > node2:
            node1, node2 = node2, node1
        merge.append((r_label(node1), r_label(node2)))
        height.append(step.dist)
        node_size.append(size_of(node1) + size_of(node2))

    return merge, height, order_nodes(n, merge, node_size)


def hclust_fast(
    n: int, distances: Sequence[float], method: HclustMethod
) -> Tuple[Merge, List[float]]:
    """Cluster ``n`` observations given their condensed distance matrix.

    Returns ``(merge, height)`` in R hclust convention, where ``height[i]``
    is the cluster distance of merge step ``i``. Raises ``ValueError`` for
    an unknown method.
    """
    try:
        method = HclustMethod(method)
    except ValueError:
        raise ValueError(f"invalid clustering method: {method!r}") from None

    if method == HclustMethod.SINGLE:
        result = mst_linkage_core(n, distances)
    elif method == HclustMethod.COMPLETE:
        result = nn_chain_core(n, distances, MetricMethod.COMPLETE)
    elif method == HclustMethod.AVERAGE:
        result = nn_chain_core(n, distances, MetricMethod.AVERAGE, [1.0] * n)
    else:
        result = generic_linkage(n, distances, MetricMethod.MEDIAN)

    merge, height, _order = generate_r_dendrogram(
        result, n, is_sorted=method == HclustMethod.MEDIAN
    )
    return merge, height


def cutree_k(n: int, merge: Sequence[Tuple[int, int]], nclust: int) -> List[int]:
    """Label the ``n`` observations with cluster numbers 0..nclust-1.

    The dendrogram is cut so that ``nclust`` clusters remain. If ``nclust``
    is below 2 or above ``n`` every observation gets label 0.
    """
    if nclust > n or nclust < 2:
        return [0] * n

    # Number of the last merge step each observation took part in.
    last_merge = [0] * n
    for k in range(1, n - nclust + 1):
        m1, m2 = merge[k - 1]
        if m1 < 0 and m2 < 0:
            last_merge[-m1 - 1] = k
            last_merge[-m2 - 1] = k
        elif m1 < 0 or m2 < 0:
            if m1 < 0:
                single, cluster = -m1, m2
            else:
                single, cluster = -m2, m1
            last_merge = [k if step == cluster else step for step in last_merge]
            last_merge[single - 1] = k
        else:
            last_merge = [k if step in (m1, m2) else step for step in last_merge]

    labels: List[int] = []
    cluster_label = {}
    next_label = 0
    for step in last_merge:
        if step == 0:
            labels.append(next_label)
            next_label += 1
        else:
            if step not in cluster_label:
                cluster_label[step] = next_label
                next_label += 1
            labels.append(cluster_label[step])
    return labels


def cutree_cdist(
    n: int, merge: Sequence[Tuple[int, int]], height: Sequence[float], cdist: float
) -> List[int]:
    """Label observations, stopping the merging at cluster distance ``cdist``."""
    k = next((i for i, h in enumerate(height[: max(n - 1, 0)]) if h >= cdist), max(n - 1, 0))
    return cutree_k(n, merge, n - k)