"""The characteristic length of a point cloud from nearest-neighbour distances."""

from __future__ import annotations

import math
from typing import List, Sequence

from .kdtree import KdTree


def compute_mean_square_distance(cloud: Sequence[Sequence[float]], k: int = 1) -> List[float]:
    """Mean squared distance of every point to its ``k`` nearest neighbours.

    The point itself is not counted as a neighbour. A point without any
    neighbour gets NaN.
    """
    tree = KdTree(cloud)
    msd: List[float] = []
    for point in cloud:
        # The nearest hit is the point itself, so ask for one more.
        _nodes, squared = tree.k_nearest_neighbors(point, k + 1)
        neighbours = squared[1:]
        msd.append(sum(neighbours) / len(neighbours) if neighbours else math.nan)
    return msd


def first_quartile(cloud: Sequence[Sequence[float]]) -> float:
    """First quartile of the squared nearest-neighbour distances in ``cloud``."""
    msd = sorted(compute_mean_square_distance(cloud, 1))
    return msd[len(msd) // 4]