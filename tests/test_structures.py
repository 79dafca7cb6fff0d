import itertools
import math

import pytest

from triplclust.hclust.structures import (
    BinaryMinHeap,
    ClusterResult,
    DoublyLinkedList,
    MergeStep,
    MetricMethod,
    UnionFind,
    condensed_index,
)


def _active(lst, size):
    out = []
    i = lst.start
    while i < size:
        out.append(i)
        i = lst.succ[i]
    return out


def test_metric_method_aliases():
    assert MetricMethod.WARD_D is MetricMethod.WARD
    assert MetricMethod(7) is MetricMethod.WARD_D2


def test_condensed_index_documented_layout():
    assert [condensed_index(4, r, c) for r, c in itertools.combinations(range(4), 2)] == [
        0, 1, 2, 3, 4, 5
    ]


@pytest.mark.parametrize("n", [2, 3, 7, 12])
def test_condensed_index_is_sequential(n):
    pairs = list(itertools.combinations(range(n), 2))
    assert [condensed_index(n, r, c) for r, c in pairs] == list(range(len(pairs)))


@pytest.mark.parametrize("row,col", [(1, 1), (2, 1), (0, 4), (-1, 2)])
def test_condensed_index_rejects_invalid(row, col):
    with pytest.raises(IndexError):
        condensed_index(4, row, col)


def test_cluster_result_append_and_access():
    res = ClusterResult()
    res.append(0, 2, 1.5)
    res.append(1, 3, 0.5)
    assert len(res) == 2
    assert res[0] == MergeStep(0, 2, 1.5)
    assert [s.node2 for s in res] == [2, 3]


def test_cluster_result_postprocessing():
    res = ClusterResult()
    res.append(0, 1, 4.0)
    res.sqrt()
    assert res[0].dist == 2.0
    res.sqrt_double()
    assert res[0].dist == 2.0
    res.plus_one()
    assert res[0].dist == 3.0
    res.divide(3.0)
    assert res[0].dist == 1.0


def test_cluster_result_power_inverts_exponent():
    res = ClusterResult()
    res.append(0, 1, 9.0)
    res.power(2)
    assert math.isclose(res[0].dist, 3.0)


def test_merge_step_orders_by_distance():
    steps = [MergeStep(5, 6, 2.0), MergeStep(0, 1, 1.0), MergeStep(2, 3, 3.0)]
    assert [s.dist for s in sorted(steps)] == [1.0, 2.0, 3.0]


def test_doubly_linked_list_remove():
    lst = DoublyLinkedList(5)
    assert _active(lst, 5) == [0, 1, 2, 3, 4]
    lst.remove(2)
    assert _active(lst, 5) == [0, 1, 3, 4]
    assert lst.is_inactive(2)
    lst.remove(0)
    assert lst.start == 1
    assert _active(lst, 5) == [1, 3, 4]
    assert lst.is_inactive(0)
    assert not lst.is_inactive(3)


def test_union_find_assigns_new_parents():
    uf = UnionFind(3)
    uf.union(0, 1)
    assert uf.find(0) == 3
    assert uf.find(1) == 3
    assert uf.find(2) == 2
    uf.union(3, 2)
    assert uf.find(0) == 4
    assert uf.find(2) == 4
    assert uf.find(4) == 4


def test_heap_pops_in_value_order():
    values = [5.0, 3.0, 8.0, 1.0, 4.0]
    heap = BinaryMinHeap(values, len(values))
    heap.heapify()
    order = []
    while len(heap):
        order.append(heap.argmin())
        heap.heap_pop()
    assert order == sorted(range(5), key=lambda i: values[i])


def test_heap_update_leq_and_geq():
    values = [5.0, 3.0, 8.0, 1.0, 4.0]
    heap = BinaryMinHeap(values, len(values))
    heap.heapify()
    heap.update_leq(2, 0.5)
    assert heap.argmin() == 2
    assert values[2] == 0.5
    heap.update_geq(2, 10.0)
    assert heap.argmin() == 3
    heap.update(3, 20.0)
    assert heap.argmin() == 1


def test_heap_remove():
    values = [5.0, 3.0, 8.0, 1.0, 4.0]
    heap = BinaryMinHeap(values, len(values))
    heap.heapify()
    heap.remove(3)
    assert len(heap) == 4
    order = []
    while len(heap):
        order.append(heap.argmin())
        heap.heap_pop()
    assert order == [1, 4, 0, 2]


def test_heap_replace_with_new_index():
    values = [5.0, 3.0, 8.0, 0.0]
    heap = BinaryMinHeap(values, 3)
    heap.heapify()
    heap.replace(1, 3, 9.0)
    order = []
    while len(heap):
        order.append(heap.argmin())
        heap.heap_pop()
    assert order == [0, 2, 3]


def test_heap_rejects_oversized():
    with pytest.raises(ValueError):
        BinaryMinHeap([1.0], 2)