import math
import random

import pytest

from triplclust.hclust.generic import generic_linkage
from triplclust.hclust.linkage import mst_linkage_core, nn_chain_core
from triplclust.hclust.structures import MetricMethod


def _points(seed, count):
    rng = random.Random(seed)
    return [(rng.uniform(0, 10), rng.uniform(0, 10)) for _ in range(count)]


def _condensed(points, squared=False):
    out = []
    for i, p in enumerate(points):
        for q in points[i + 1:]:
            d2 = (p[0] - q[0]) ** 2 + (p[1] - q[1]) ** 2
            out.append(d2 if squared else math.sqrt(d2))
    return out


def _check_labels(n, result):
    """Every node appears exactly once and only after it was created."""
    used = set()
    for step_no, step in enumerate(result):
        for node in (step.node1, step.node2):
            assert 0 <= node < n + step_no
            assert node not in used
            used.add(node)
    assert used == set(range(2 * n - 2))


ALL_METHODS = [
    MetricMethod.SINGLE,
    MetricMethod.COMPLETE,
    MetricMethod.AVERAGE,
    MetricMethod.WEIGHTED,
    MetricMethod.WARD,
    MetricMethod.CENTROID,
    MetricMethod.MEDIAN,
]


def test_line_single_linkage():
    # points on a line at 0, 1 and 4
    result = generic_linkage(3, [1.0, 4.0, 3.0], MetricMethod.SINGLE)
    steps = [(s.node1, s.node2, s.dist) for s in result]
    assert steps == [(0, 1, 1.0), (3, 2, 3.0)]


def test_line_complete_linkage():
    result = generic_linkage(3, [1.0, 4.0, 3.0], MetricMethod.COMPLETE)
    assert [s.dist for s in result] == [1.0, 4.0]


@pytest.mark.parametrize("method", ALL_METHODS)
def test_two_points(method):
    result = generic_linkage(2, [2.5], method)
    assert len(result) == 1
    assert (result[0].node1, result[0].node2, result[0].dist) == (0, 1, 2.5)


@pytest.mark.parametrize("n", [0, 1])
def test_trivial_sizes(n):
    assert len(generic_linkage(n, [], MetricMethod.AVERAGE)) == 0


@pytest.mark.parametrize("method", ALL_METHODS)
@pytest.mark.parametrize("seed", [1, 2, 3])
def test_labels_and_step_count(method, seed):
    points = _points(seed, 12)
    squared = method in (MetricMethod.CENTROID, MetricMethod.MEDIAN, MetricMethod.WARD)
    result = generic_linkage(12, _condensed(points, squared), method)
    assert len(result) == 11
    _check_labels(12, result)


@pytest.mark.parametrize("seed", [4, 5, 6])
def test_single_matches_mst(seed):
    points = _points(seed, 15)
    d = _condensed(points)
    generic = sorted(s.dist for s in generic_linkage(15, d, MetricMethod.SINGLE))
    mst = sorted(s.dist for s in mst_linkage_core(15, d))
    assert generic == pytest.approx(mst)


@pytest.mark.parametrize(
    "method",
    [MetricMethod.COMPLETE, MetricMethod.AVERAGE, MetricMethod.WEIGHTED, MetricMethod.WARD],
)
@pytest.mark.parametrize("seed", [7, 8])
def test_matches_nn_chain(method, seed):
    points = _points(seed, 14)
    d = _condensed(points, squared=method == MetricMethod.WARD)
    generic = sorted(s.dist for s in generic_linkage(14, d, method))
    chain = sorted(s.dist for s in nn_chain_core(14, d, method))
    assert generic == pytest.approx(chain)


@pytest.mark.parametrize(
    "method", [MetricMethod.SINGLE, MetricMethod.COMPLETE, MetricMethod.AVERAGE]
)
def test_monotone_heights(method):
    d = _condensed(_points(9, 20))
    heights = [s.dist for s in generic_linkage(20, d, method)]
    assert heights == sorted(heights)


def test_input_not_modified():
    d = _condensed(_points(10, 8))
    members = [1.0] * 8
    copy_d, copy_m = list(d), list(members)
    generic_linkage(8, d, MetricMethod.CENTROID, members)
    assert d == copy_d
    assert members == copy_m


def test_invalid_method():
    with pytest.raises(ValueError):
        generic_linkage(3, [1.0, 2.0, 3.0], MetricMethod.WARD_D2)


def test_wrong_matrix_length():
    with pytest.raises(ValueError):
        generic_linkage(4, [1.0, 2.0], MetricMethod.SINGLE)


def test_members_length_mismatch():
    with pytest.raises(ValueError):
        generic_linkage(3, [1.0, 2.0, 3.0], MetricMethod.AVERAGE, [1.0, 1.0])