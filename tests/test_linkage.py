import itertools
import math
import random

import pytest

from triplclust.hclust.linkage import mst_linkage_core, nn_chain_core
from triplclust.hclust.structures import MetricMethod


def _condensed(points):
    return [
        math.dist(p, q) for p, q in itertools.combinations(points, 2)
    ]


def _random_points(seed, count):
    rng = random.Random(seed)
    return [(rng.uniform(0, 10), rng.uniform(0, 10)) for _ in range(count)]


LINE = [(0.0,), (1.0,), (3.0,)]


def _replay(result, points, combine):
    """Replay NN-chain merges and check each height against the members."""
    clusters = {i: {i} for i in range(len(points))}
    for step in result:
        a, b = sorted((step.node1, step.node2))
        pairs = [math.dist(points[p], points[q]) for p in clusters[a] for q in clusters[b]]
        assert step.dist == pytest.approx(combine(pairs))
        clusters[b] = clusters[a] | clusters[b]
        del clusters[a]
    assert list(clusters.values()) == [set(range(len(points)))]


def test_mst_line_example():
    result = mst_linkage_core(3, _condensed(LINE))
    steps = [(s.node1, s.node2, s.dist) for s in result]
    assert steps == [(0, 1, 1.0), (1, 2, 2.0)]


def test_mst_step_count():
    points = _random_points(1, 12)
    assert len(mst_linkage_core(12, _condensed(points))) == 11


def test_mst_does_not_modify_input():
    dists = _condensed(_random_points(2, 6))
    copy = list(dists)
    mst_linkage_core(6, dists)
    assert dists == copy


def test_mst_small_inputs_give_no_steps():
    assert len(mst_linkage_core(1, [])) == 0
    assert len(mst_linkage_core(0, [])) == 0


def test_mst_wrong_length_raises():
    with pytest.raises(ValueError):
        mst_linkage_core(4, [1.0, 2.0])


@pytest.mark.parametrize("seed", [3, 4, 5])
def test_mst_matches_nn_chain_single(seed):
    points = _random_points(seed, 15)
    dists = _condensed(points)
    mst_heights = sorted(s.dist for s in mst_linkage_core(15, dists))
    chain_heights = sorted(s.dist for s in nn_chain_core(15, dists, MetricMethod.SINGLE))
    assert mst_heights == pytest.approx(chain_heights)


def test_nn_chain_single_line_pairs():
    result = nn_chain_core(3, _condensed(LINE), MetricMethod.SINGLE)
    assert {result[0].node1, result[0].node2} == {0, 1}
    assert sorted(s.dist for s in result) == [1.0, 2.0]


def test_nn_chain_complete_line():
    result = nn_chain_core(3, _condensed(LINE), MetricMethod.COMPLETE)
    assert sorted(s.dist for s in result) == [1.0, 3.0]


def test_nn_chain_average_line():
    result = nn_chain_core(3, _condensed(LINE), MetricMethod.AVERAGE)
    assert sorted(s.dist for s in result) == pytest.approx([1.0, 2.5])


@pytest.mark.parametrize("seed", [6, 7])
def test_nn_chain_single_replay(seed):
    points = _random_points(seed, 10)
    result = nn_chain_core(10, _condensed(points), MetricMethod.SINGLE)
    _replay(result, points, min)


@pytest.mark.parametrize("seed", [8, 9])
def test_nn_chain_complete_replay(seed):
    points = _random_points(seed, 10)
    result = nn_chain_core(10, _condensed(points), MetricMethod.COMPLETE)
    _replay(result, points, max)


@pytest.mark.parametrize("seed", [10, 11])
def test_nn_chain_average_replay(seed):
    points = _random_points(seed, 10)
    result = nn_chain_core(10, _condensed(points), MetricMethod.AVERAGE)
    _replay(result, points, lambda pairs: sum(pairs) / len(pairs))


def test_complete_heights_dominate_single():
    points = _random_points(12, 9)
    dists = _condensed(points)
    single = sorted(s.dist for s in nn_chain_core(9, dists, MetricMethod.SINGLE))
    complete = sorted(s.dist for s in nn_chain_core(9, dists, MetricMethod.COMPLETE))
    assert single[0] == pytest.approx(complete[0])
    assert single[-1] <= complete[-1]


def test_ward_heights_are_monotone_when_sorted_by_merge():
    points = _random_points(13, 12)
    sq = [d * d for d in _condensed(points)]
    result = nn_chain_core(12, sq, MetricMethod.WARD)
    heights = sorted(s.dist for s in result)
    assert len(result) == 11
    assert heights[0] == pytest.approx(min(sq))
    assert all(h >= 0 for h in heights)


def test_weighted_first_merge_is_closest_pair():
    points = _random_points(14, 8)
    dists = _condensed(points)
    result = nn_chain_core(8, dists, MetricMethod.WEIGHTED)
    assert min(s.dist for s in result) == pytest.approx(min(dists))
    assert len(result) == 7


def test_nn_chain_does_not_modify_inputs():
    dists = _condensed(_random_points(15, 7))
    members = [1.0] * 7
    copy = list(dists)
    nn_chain_core(7, dists, MetricMethod.AVERAGE, members)
    assert dists == copy
    assert members == [1.0] * 7


def test_nn_chain_invalid_method():
    with pytest.raises(ValueError):
        nn_chain_core(3, _condensed(LINE), MetricMethod.CENTROID)


def test_nn_chain_wrong_length():
    with pytest.raises(ValueError):
        nn_chain_core(3, [1.0], MetricMethod.SINGLE)


def test_nn_chain_wrong_members_length():
    with pytest.raises(ValueError):
        nn_chain_core(3, _condensed(LINE), MetricMethod.AVERAGE, [1.0])


def test_nn_chain_single_point():
    assert len(nn_chain_core(1, [], MetricMethod.COMPLETE)) == 0