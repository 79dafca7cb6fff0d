"""Triplet clustering and propagation of triplet cluster labels to points."""

from __future__ import annotations

import math
from enum import IntEnum
from typing import List, Sequence, Set, Tuple

from .hclust.fastcluster import HclustMethod, cutree_k, hclust_fast

Cluster = List[int]
ClusterGroup = List[Cluster]

DEBUG_CDIST_FILE = "debug_cdist.csv"


class Linkage(IntEnum):
    """Linkage methods for the triplet clustering."""

    SINGLE = 0
    COMPLETE = 1
    AVERAGE = 2


_HCLUST_METHOD = {
    Linkage.SINGLE: HclustMethod.SINGLE,
    Linkage.COMPLETE: HclustMethod.COMPLETE,
    Linkage.AVERAGE: HclustMethod.AVERAGE,
}


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; NaN for an empty sequence."""
    if not values:
        return math.nan
    return sum(values) / len(values)


def sd(values: Sequence[float]) -> float:
    """Sample standard deviation; NaN for fewer than two values."""
    m = len(values)
    if m < 2:
        return math.nan
    mean_val = mean(values)
    total = sum((mean_val - v) * (mean_val - v) for v in values)
    return math.sqrt(total / (m - 1.0))


def _automatic_cut(cdists: Sequence[float]) -> int:
    """Index of the first merge whose distance is unexpectedly large."""
    steps = len(cdists)
    for k in range((steps) // 2, steps):
        prev = cdists[k - 1] if k > 0 else 0.0
        if (prev > 0.0 or cdists[k] > 1.0e-8) and cdists[k] > prev + 2 * sd(cdists[: k + 1]):
            return k
    return steps


def compute_hc(
    n: int,
    distances: Sequence[float],
    t: float,
    tauto: bool = False,
    method: Linkage = Linkage.SINGLE,
    verbose: int = 0,
) -> ClusterGroup:
    """Cluster ``n`` triplets hierarchically from their condensed distances.

    The dendrogram is cut at distance ``t``, or where the merge distance
    jumps unexpectedly when ``tauto`` is set. Returns the clusters as lists
    of triplet indices.
    """
    if n <= 0:
        return []
    hmethod = _HCLUST_METHOD[Linkage(method)]
    merge, cdists = hclust_fast(n, distances, hmethod)
    steps = n - 1

    if tauto:
        k = _automatic_cut(cdists)
        if verbose:
            if k < steps:
                prev = cdists[k - 1] if k > 0 else 0.0
                automatic_t = (prev + cdists[k]) / 2.0
            else:
                automatic_t = cdists[k - 1] if k > 0 else 0.0
            print(f"[Info] optimal cdist threshold: {automatic_t}")
    else:
        k = next((i for i, d in enumerate(cdists) if d >= t), steps)

    cluster_size = n - k
    labels = cutree_k(n, merge, cluster_size)
    result: ClusterGroup = [[] for _ in range(cluster_size)]
    for i, label in enumerate(labels):
        result[label].append(i)

    if verbose > 1:
        try:
            with open(DEBUG_CDIST_FILE, "w", encoding="ascii") as out:
                out.writelines(f"{d:f}\n" for d in cdists)
        except OSError:
            print(f"[Error] could not write file '{DEBUG_CDIST_FILE}'")

    return result


def cleanup_cluster_group(cl_group: Sequence[Cluster], m: int, verbose: int = 0) -> ClusterGroup:
    """Return the clusters of ``cl_group`` holding at least ``m`` triplets."""
    kept = [list(cluster) for cluster in cl_group if len(cluster) >= m]
    if verbose > 0:
        print(f"[Info] in pruning removed clusters: {len(cl_group) - len(kept)}")
    return kept


def cluster_triplets_to_points(
    triplets: Sequence[Tuple[int, int, int]], cl_group: Sequence[Cluster]
) -> ClusterGroup:
    """Replace triplet indices by the sorted, distinct point indices they span.

    Each triplet is a sequence of its three point indices.
    """
    return [
        sorted({point for index in cluster for point in triplets[index]})
        for cluster in cl_group
    ]


def add_clusters(
    n_points: int, cl_group: Sequence[Cluster], gnuplot: bool = False
) -> Tuple[List[Set[int]], ClusterGroup]:
    """Assign cluster ids to points.

    Returns the set of cluster ids of each of the ``n_points`` points and
    the cluster group. With ``gnuplot`` set, points shared by several
    clusters are taken out of them and gathered into extra clusters, one
    per distinct combination of cluster ids, appended at the end.
    """
    cluster_ids: List[Set[int]] = [set() for _ in range(n_points)]
    for i, cluster in enumerate(cl_group):
        for point in cluster:
            cluster_ids[point].add(i)

    group = [list(cluster) for cluster in cl_group]
    if gnuplot:
        vertices: ClusterGroup = []
        for i, ids in enumerate(cluster_ids):
            if len(ids) <= 1:
                continue
            found = False
            for vertex in vertices:
                if cluster_ids[vertex[0]] == ids:
                    vertex.append(i)
                    found = True
            if not found:
                vertices.append([i])
            for cid in ids:
                group[cid] = [p for p in group[cid] if p != i]
        group.extend(vertices)

    return cluster_ids, group