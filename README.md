# triplclust

Building blocks for clustering 3D point clouds into tracks. The package is
pure Python and depends on nothing outside the standard library.

## Modules

- `triplclust.hclust.structures` – data structures used by the linkage
  algorithms: `MetricMethod`, `MergeStep`, `ClusterResult`,
  `DoublyLinkedList`, `UnionFind`, `BinaryMinHeap` and `condensed_index`.
- `triplclust.hclust.linkage` – `mst_linkage_core` (single linkage through the
  minimum spanning tree) and `nn_chain_core` (nearest-neighbour chain for
  single, complete, average, weighted and Ward linkage).
- `triplclust.hclust.generic` – `generic_linkage`, which handles single,
  complete, average, weighted, Ward, centroid and median linkage.
- `triplclust.hclust.fastcluster` – `hclust_fast` (methods `HclustMethod.SINGLE`,
  `COMPLETE`, `AVERAGE`, `MEDIAN`) returning the dendrogram in R `hclust`
  convention, plus `generate_r_dendrogram`, `order_nodes`, `cutree_k` and
  `cutree_cdist`.
- `triplclust.kdtree` – `KdTree` with k-nearest-neighbour and range search
  under the maximum, Manhattan or Euclidean measure (`DistanceType`), with
  optional per-axis weights.
- `triplclust.dnn` – `compute_mean_square_distance` and `first_quartile`, the
  characteristic length of a cloud from nearest-neighbour distances.
- `triplclust.graph` – `max_step`, which splits a cluster at gaps using its
  minimum spanning tree.
- `triplclust.cluster` – `compute_hc`, `cleanup_cluster_group`,
  `cluster_triplets_to_points` and `add_clusters` for clustering triplets and
  carrying their labels over to points.

Invalid input raises `ValueError` (wrong size of a condensed matrix, unknown
method, points of mismatched dimension, an empty k-d tree).

## Installation

```
pip install .
```

With the test dependencies:

```
pip install ".[test]"
```

## Usage

### Hierarchical clustering

`hclust_fast` takes the condensed upper triangle of a distance matrix; for
four points this is `d01 d02 d03 d12 d13 d23`. It returns the merge steps as
`(m1, m2)` pairs, where `-k` is observation `k` (counted from one) and a
positive `k` is the cluster made in merge step `k`, together with the merge
heights.

```python
from triplclust.hclust.fastcluster import HclustMethod, cutree_cdist, cutree_k, hclust_fast

distances = [1.0, 5.0, 6.0, 4.5, 5.5, 1.2]
merge, height = hclust_fast(4, distances, HclustMethod.SINGLE)
# merge  == [(-1, -2), (-3, -4), (1, 2)]
# height == [1.0, 1.2, 4.5]

cutree_k(4, merge, 2)                # [0, 0, 1, 1]
cutree_cdist(4, merge, height, 2.0)  # [0, 0, 1, 1]
```

`cutree_k` gives every observation label 0 when the requested number of
clusters is below 2 or above the number of observations.

### Nearest-neighbour search

```python
from triplclust.kdtree import DistanceType, KdNode, KdTree

tree = KdTree([KdNode([0.0, 0.0, 0.0]), KdNode([1.0, 0.0, 0.0]), KdNode([5.0, 5.0, 5.0])])

nodes, distances = tree.k_nearest_neighbors([0.1, 0.0, 0.0], 2)
# nearest first; with the Euclidean measure the distances are squared

inside = tree.range_nearest_neighbors([0.0, 0.0, 0.0], 1.5)

tree.set_distance(DistanceType.MANHATTAN, weights=[1.0, 2.0, 1.0])
```

`KdTree` also accepts plain coordinate sequences instead of `KdNode` objects.
`k_nearest_neighbors` takes an optional predicate that rejects nodes, in which
case fewer than `k` results may come back. For range searches with the
Euclidean measure the radius is squared internally.

### Characteristic length

```python
from triplclust.dnn import compute_mean_square_distance, first_quartile

cloud = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (3.0, 0.0, 0.0), (6.0, 0.0, 0.0)]
msd = compute_mean_square_distance(cloud, 1)
q1 = first_quartile(cloud)
```

### Splitting a cluster at gaps

```python
from triplclust.graph import max_step

cloud = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (10.0, 0.0, 0.0), (11.0, 0.0, 0.0)]
max_step([0, 1, 2, 3], cloud, dmax=2.0)
# [[0, 1], [2, 3]]
```

Every connected component is returned whatever its size; the `min_size`
argument is accepted but does not filter.

### Clustering triplets

`compute_hc` clusters `n` items from their condensed distance matrix, cutting
the dendrogram at distance `t`, or, with `tauto=True`, where the merge
distance makes an unexpectedly large jump. It returns lists of item indices.

```python
from triplclust.cluster import (
    Linkage,
    add_clusters,
    cleanup_cluster_group,
    cluster_triplets_to_points,
    compute_hc,
)

groups = compute_hc(4, distances, t=2.0, tauto=False, method=Linkage.SINGLE)
# [[0, 1], [2, 3]]
groups = cleanup_cluster_group(groups, 2)

triplets = [(0, 1, 2), (1, 2, 3), (5, 6, 7), (6, 7, 8)]
point_clusters = cluster_triplets_to_points(triplets, groups)
# [[0, 1, 2, 3], [5, 6, 7, 8]]

cluster_ids, group = add_clusters(9, point_clusters, gnuplot=False)
```

With `verbose` set, `compute_hc` and `cleanup_cluster_group` print
information lines; with `verbose > 1`, `compute_hc` also writes the merge
distances to `debug_cdist.csv` in the working directory. With `gnuplot=True`,
`add_clusters` moves points shared by several clusters into extra clusters
appended at the end, one per distinct combination of cluster ids.

## What the package does not do

There is no command-line program. The package does not read or write point
cloud files, does not build triplets from a cloud, and has no distance
measure between triplets: `compute_hc` expects the condensed distance matrix
to be supplied by the caller.

## Running the tests

```
pytest
```