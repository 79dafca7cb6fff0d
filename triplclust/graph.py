"""Minimum spanning trees over point clusters and splitting clusters at gaps."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence


@dataclass(frozen=True)
class _Edge:
    src: int
    dest: int
    weight: float


def _squared_distance(p: Sequence[float], q: Sequence[float]) -> float:
    return sum((b - a) * (b - a) for a, b in zip(p, q))


def _create_edges(cloud: Sequence[Sequence[float]], cluster: Sequence[int]) -> List[_Edge]:
    """All vertex pairs of ``cluster``, weighted by squared distance, lightest first."""
    edges = [
        _Edge(v1, v2, _squared_distance(cloud[cluster[v1]], cloud[cluster[v2]]))
        for v1 in range(len(cluster))
        for v2 in range(v1 + 1, len(cluster))
    ]
    edges.sort(key=lambda edge: edge.weight)
    return edges


def _minimum_spanning_tree(edges: Sequence[_Edge], vcount: int) -> List[_Edge]:
    """Kruskal's algorithm on edges that are already sorted by weight."""
    groups = list(range(vcount))
    tree: List[_Edge] = []
    for edge in edges:
        group_a = groups[edge.src]
        group_b = groups[edge.dest]
        if group_a != group_b:
            groups = [group_a if g == group_b else g for g in groups]
            tree.append(edge)
    return tree


def _connected_component(
    start: int,
    visited: List[bool],
    cluster: Sequence[int],
    adj: Sequence[Sequence[int]],
) -> List[int]:
    component: List[int] = []
    stack = [start]
    while stack:
        v = stack.pop()
        visited[v] = True
        component.append(cluster[v])
        stack.extend(w for w in adj[v] if not visited[w])
    return component


def max_step(
    cluster: Sequence[int],
    cloud: Sequence[Sequence[float]],
    dmax: float,
    min_size: int = 1,
) -> List[List[int]]:
    """Split ``cluster`` at gaps wider than ``dmax``.

    ``cluster`` holds indices into ``cloud``. The minimum spanning tree of
    the cluster is built, every tree edge longer than ``dmax`` is removed,
    and the connected components that remain are returned as lists of point
    indices. Every component is returned whatever its size; ``min_size`` is
    accepted for callers that filter afterwards.
    """
    vcount = len(cluster)
    edges = _create_edges(cloud, cluster)
    dmax2 = dmax * dmax
    tree = [edge for edge in _minimum_spanning_tree(edges, vcount) if edge.weight <= dmax2]

    adj: List[List[int]] = [[] for _ in range(vcount)]
    for edge in tree:
        adj[edge.src].append(edge.dest)
        adj[edge.dest].append(edge.src)

    visited = [False] * vcount
    new_clusters: List[List[int]] = []
    for v in range(vcount):
        if not visited[v]:
            new_clusters.append(_connected_component(v, visited, cluster, adj))
    return new_clusters