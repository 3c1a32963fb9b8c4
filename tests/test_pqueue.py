import pytest

from arena import NodeArena
from pqueue import MinPriorityQueue


def test_queue_extracts_by_weight_then_insertion_order():
    arena = NodeArena()
    q = MinPriorityQueue(arena)
    for sym, weight in [(1, 5), (2, 3), (3, 5), (4, 3)]:
        q.insert(arena.allocate(symbol=sym, weight=weight))
    assert q.size() == 4
    order = [arena[q.extract_min()].symbol for _ in range(4)]
    assert order == [2, 4, 1, 3]
    assert len(q) == 0


def test_queue_leaf_precedes_later_equal_internal_node():
    arena = NodeArena()
    q = MinPriorityQueue(arena)
    leaf = arena.allocate(symbol=7, weight=4)
    q.insert(leaf)
    internal = arena.allocate(weight=4, left=leaf, right=leaf)
    q.insert(internal)
    assert q.extract_min() == leaf
    assert q.extract_min() == internal


def test_queue_extract_from_empty_raises():
    q = MinPriorityQueue(NodeArena())
    with pytest.raises(IndexError):
        q.extract_min()
