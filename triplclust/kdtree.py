"""A k-d tree for nearest neighbour and range searches over points."""

from __future__ import annotations

import heapq
import sys
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple, Union

CoordPoint = Tuple[float, ...]
Predicate = Callable[["KdNode"], bool]


class DistanceType(IntEnum):
    """Distance measures a :class:`KdTree` can use."""

    MAXIMUM = 0
    MANHATTAN = 1
    EUCLIDEAN = 2


@dataclass
class KdNode:
    """A point in the tree together with an arbitrary payload."""

    point: Sequence[float]
    data: Any = None

    def __post_init__(self) -> None:
        self.point = tuple(float(x) for x in self.point)


def _copy_weights(weights: Optional[Iterable[float]]) -> Optional[Tuple[float, ...]]:
    return None if weights is None else tuple(float(w) for w in weights)


class MaximumDistance:
    """Maximum distance (L-infinity norm), optionally weighted per axis."""

    def __init__(self, weights: Optional[Iterable[float]] = None) -> None:
        self.weights = _copy_weights(weights)

    def distance(self, p: Sequence[float], q: Sequence[float]) -> float:
        if self.weights is None:
            return max(abs(a - b) for a, b in zip(p, q))
        return max(w * abs(a - b) for w, a, b in zip(self.weights, p, q))

    def coordinate_distance(self, x: float, y: float, dim: int) -> float:
        if self.weights is None:
            return abs(x - y)
        return self.weights[dim] * abs(x - y)


class ManhattanDistance:
    """Manhattan distance (L1 norm), optionally weighted per axis."""

    def __init__(self, weights: Optional[Iterable[float]] = None) -> None:
        self.weights = _copy_weights(weights)

    def distance(self, p: Sequence[float], q: Sequence[float]) -> float:
        if self.weights is None:
            return sum(abs(a - b) for a, b in zip(p, q))
        return sum(w * abs(a - b) for w, a, b in zip(self.weights, p, q))

    def coordinate_distance(self, x: float, y: float, dim: int) -> float:
        if self.weights is None:
            return abs(x - y)
        return self.weights[dim] * abs(x - y)


class EuclideanDistance:
    """Squared Euclidean distance, optionally weighted per axis."""

    def __init__(self, weights: Optional[Iterable[float]] = None) -> None:
        self.weights = _copy_weights(weights)

    def distance(self, p: Sequence[float], q: Sequence[float]) -> float:
        if self.weights is None:
            return sum((a - b) * (a - b) for a, b in zip(p, q))
        return sum(w * (a - b) * (a - b) for w, a, b in zip(self.weights, p, q))

    def coordinate_distance(self, x: float, y: float, dim: int) -> float:
        if self.weights is None:
            return (x - y) * (x - y)
        return self.weights[dim] * (x - y) * (x - y)


DistanceMeasure = Union[MaximumDistance, ManhattanDistance, EuclideanDistance]


class _TreeNode:
    __slots__ = ("dataindex", "cutdim", "point", "loson", "hison", "lobound", "upbound")

    def __init__(self, cutdim: int, lobound: List[float], upbound: List[float]) -> None:
        self.dataindex = 0
        self.cutdim = cutdim
        self.point: CoordPoint = ()
        self.loson: Optional[_TreeNode] = None
        self.hison: Optional[_TreeNode] = None
        self.lobound = lobound
        self.upbound = upbound


class KdTree:
    """k-d tree over a collection of :class:`KdNode` objects.

    With the Euclidean measure, reported distances are squared distances.
    """

    def __init__(
        self,
        nodes: Iterable[Union[KdNode, Sequence[float]]],
        distance_type: int = DistanceType.EUCLIDEAN,
    ) -> None:
        self.allnodes: List[KdNode] = [
            node if isinstance(node, KdNode) else KdNode(node) for node in nodes
        ]
        if not self.allnodes:
            raise ValueError("a k-d tree needs at least one node")
        self.dimension = len(self.allnodes[0].point)
        if self.dimension == 0:
            raise ValueError("points must have at least one coordinate")
        if any(len(node.point) != self.dimension for node in self.allnodes):
            raise ValueError("all points must have the same dimension")

        self.distance_type: int = distance_type
        self._distance: DistanceMeasure = EuclideanDistance()
        self.set_distance(distance_type)

        self._lobound = [min(coords) for coords in zip(*(n.point for n in self.allnodes))]
        self._upbound = [max(coords) for coords in zip(*(n.point for n in self.allnodes))]
        self.root = self._build_tree(0, 0, len(self.allnodes))

        self._heap: List[Tuple[float, int]] = []
        self._predicate: Optional[Predicate] = None

    def set_distance(
        self, distance_type: int, weights: Optional[Iterable[float]] = None
    ) -> None:
        """Choose the distance measure: 0 maximum, 1 Manhattan, else Euclidean."""
        self.distance_type = distance_type
        if distance_type == DistanceType.MAXIMUM:
            self._distance = MaximumDistance(weights)
        elif distance_type == DistanceType.MANHATTAN:
            self._distance = ManhattanDistance(weights)
        else:
            self._distance = EuclideanDistance(weights)

    def _build_tree(self, depth: int, a: int, b: int) -> _TreeNode:
        node = _TreeNode(depth % self.dimension, list(self._lobound), list(self._upbound))
        if b - a <= 1:
            node.dataindex = a
            node.point = tuple(self.allnodes[a].point)
            return node

        m = (a + b) // 2
        cutdim = node.cutdim
        self.allnodes[a:b] = sorted(self.allnodes[a:b], key=lambda n: n.point[cutdim])
        node.point = tuple(self.allnodes[m].point)
        cutval = node.point[cutdim]
        node.dataindex = m
        if m - a > 0:
            saved = self._upbound[cutdim]
            self._upbound[cutdim] = cutval
            node.loson = self._build_tree(depth + 1, a, m)
            self._upbound[cutdim] = saved
        if b - m > 1:
            saved = self._lobound[cutdim]
            self._lobound[cutdim] = cutval
            node.hison = self._build_tree(depth + 1, m + 1, b)
            self._lobound[cutdim] = saved
        return node

    def _check_point(self, point: Sequence[float]) -> CoordPoint:
        coords = tuple(float(x) for x in point)
        if len(coords) != self.dimension:
            raise ValueError("point must be of same dimension as kdtree")
        return coords

    def _admissible(self, index: int) -> bool:
        return self._predicate is None or bool(self._predicate(self.allnodes[index]))

    def k_nearest_neighbors(
        self,
        point: Sequence[float],
        k: int,
        predicate: Optional[Predicate] = None,
    ) -> Tuple[List[KdNode], List[float]]:
        """Return the ``k`` nearest nodes and their distances, nearest first.

        ``predicate`` may reject nodes; fewer than ``k`` results can come back.
        """
        if k < 1:
            return [], []
        coords = self._check_point(point)
        self._predicate = predicate
        self._heap = []
        try:
            if k > len(self.allnodes):
                for i, node in enumerate(self.allnodes):
                    if self._admissible(i):
                        heapq.heappush(
                            self._heap, (-self._distance.distance(node.point, coords), i)
                        )
            else:
                self._neighbor_search(coords, self.root, k)
            ordered = sorted((-neg, i) for neg, i in self._heap)
        finally:
            self._heap = []
            self._predicate = None
        return [self.allnodes[i] for _, i in ordered], [d for d, _ in ordered]

    def range_nearest_neighbors(self, point: Sequence[float], r: float) -> List[KdNode]:
        """Return all nodes within distance ``r`` of ``point``."""
        coords = self._check_point(point)
        if self.distance_type == DistanceType.EUCLIDEAN:
            # The Euclidean measure yields squared distances.
            r *= r
        found: List[int] = []
        self._range_search(coords, self.root, r, found)
        return [self.allnodes[i] for i in found]

    def _top_distance(self) -> float:
        return -self._heap[0][0]

    def _neighbor_search(self, point: CoordPoint, node: _TreeNode, k: int) -> bool:
        """Search the subtree; True when no nearer neighbour can exist elsewhere."""
        curdist = self._distance.distance(point, node.point)
        if self._admissible(node.dataindex):
            if len(self._heap) < k:
                heapq.heappush(self._heap, (-curdist, node.dataindex))
            elif curdist < self._top_distance():
                heapq.heapreplace(self._heap, (-curdist, node.dataindex))

        lower_side = point[node.cutdim] < node.point[node.cutdim]
        near, far = (node.loson, node.hison) if lower_side else (node.hison, node.loson)
        if near is not None and self._neighbor_search(point, near, k):
            return True

        dist = sys.float_info.max if len(self._heap) < k else self._top_distance()
        if far is not None and self._bounds_overlap_ball(point, dist, far):
            if self._neighbor_search(point, far, k):
                return True

        if len(self._heap) == k:
            dist = self._top_distance()
        return self._ball_within_bounds(point, dist, node)

    def _range_search(
        self, point: CoordPoint, node: _TreeNode, r: float, found: List[int]
    ) -> None:
        if self._distance.distance(point, node.point) <= r:
            found.append(node.dataindex)
        for child in (node.loson, node.hison):
            if child is not None and self._bounds_overlap_ball(point, r, child):
                self._range_search(point, child, r, found)

    def _bounds_overlap_ball(self, point: CoordPoint, dist: float, node: _TreeNode) -> bool:
        distsum = 0.0
        for i, x in enumerate(point):
            if x < node.lobound[i]:
                distsum += self._distance.coordinate_distance(x, node.lobound[i], i)
                if distsum > dist:
                    return False
            elif x > node.upbound[i]:
                distsum += self._distance.coordinate_distance(x, node.upbound[i], i)
                if distsum > dist:
                    return False
        return True

    def _ball_within_bounds(self, point: CoordPoint, dist: float, node: _TreeNode) -> bool:
        coordinate_distance = self._distance.coordinate_distance
        return not any(
            coordinate_distance(x, node.lobound[i], i) <= dist
            or coordinate_distance(x, node.upbound[i], i) <= dist
            for i, x in enumerate(point)
        )