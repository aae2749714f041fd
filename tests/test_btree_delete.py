# tests/test_btree_delete.py
import random

import pytest

from ordered_index.db.btree import BTree


def _tree(keys, order=4, split="overflow"):
    bt = BTree(order=order, split=split)
    for k in keys:
        bt.insert(k, f"r{k}")
    return bt


def test_delete_missing_key_returns_false():
    bt = _tree([10, 20, 30, 40, 50])
    before = bt.dump()
    assert bt.delete(99) is False
    assert bt.delete(25) is False
    assert bt.dump() == before
    assert len(bt) == 5


def test_delete_from_leaf_without_underflow():
    bt = _tree([10, 20, 30, 40, 50])
    assert bt.delete(40) is True
    assert bt.search(40) is None
    assert bt.dump() == "[30]\n  [10, 20]\n  [50]"
    bt.check_invariants()


def test_underflow_borrows_from_left_sibling():
    bt = _tree([10, 20, 30, 40, 50])
    bt.delete(40)
    bt.delete(50)
    # la hoja derecha queda vacía y toma prestado a través del separador
    assert bt.dump() == "[20]\n  [10]\n  [30]"
    assert bt.search(30) == "r30"
    bt.check_invariants()


def test_underflow_borrows_from_right_sibling():
    bt = _tree([10, 20, 30, 40, 50])
    bt.delete(10)
    bt.delete(20)
    assert bt.dump() == "[40]\n  [30]\n  [50]"
    bt.check_invariants()


def test_delete_internal_key_uses_predecessor_and_merges():
    bt = _tree([10, 20, 30, 40, 50])
    bt.delete(40)
    bt.delete(50)
    # raíz [20] con hojas [10] y [30]
    assert bt.delete(20) is True
    # el predecesor 10 sube, la hoja vacía se fusiona y la raíz se reduce
    assert bt.root.leaf
    assert bt.root.keys == [10, 30]
    assert bt.height == 1
    assert [r for _, r in bt.traverse()] == ["r10", "r30"]
    bt.check_invariants()


def test_delete_everything_leaves_empty_leaf_root():
    keys = list(range(100))
    bt = _tree(keys, order=3)
    random.Random(5).shuffle(keys)
    for k in keys:
        assert bt.delete(k)
    assert len(bt) == 0
    assert bt.root.leaf and bt.root.keys == []
    assert list(bt.traverse()) == []
    bt.check_invariants()
    bt.insert(1, "again")
    assert bt.search(1) == "again"


@pytest.mark.parametrize("order,split", [
    (3, "overflow"), (4, "overflow"), (5, "overflow"), (8, "overflow"),
    (4, "preemptive"), (6, "preemptive"),
])
def test_random_mixed_operations_keep_invariants(order, split):
    rng = random.Random(order * 17 + len(split))
    bt = BTree(order=order, split=split)
    present = {}
    for step in range(1500):
        k = rng.randrange(400)
        if rng.random() < 0.6:
            if k in present:
                continue
            bt.insert(k, -k)
            present[k] = -k
        else:
            assert bt.delete(k) is (k in present)
            present.pop(k, None)
        if step % 50 == 0:
            bt.check_invariants()
    bt.check_invariants()
    assert len(bt) == len(present)
    assert list(bt.traverse()) == sorted(present.items())
    for k, v in present.items():
        assert bt.search(k) == v


def test_height_shrinks_after_mass_delete():
    bt = _tree(range(200), order=4)
    tall = bt.height
    for k in range(0, 190):
        bt.delete(k)
    assert bt.height < tall
    assert list(bt) == list(range(190, 200))
    bt.check_invariants()


def test_delete_then_reinsert_same_key():
    bt = _tree(range(30), order=4)
    assert bt.delete(15)
    assert 15 not in bt
    bt.insert(15, "nuevo")
    assert bt.search(15) == "nuevo"
    bt.check_invariants()
