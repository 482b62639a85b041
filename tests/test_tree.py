import pytest

from scopetally.outcomes import Outcome
from scopetally.tree import ResultTree, ScopeClosedError


def test_passes_are_counted_not_stored():
    node = ResultTree("suite")
    for _ in range(1000):
        node.add(Outcome.passed())

    assert node.pass_count == 1000
    assert node.children == []


def test_non_pass_outcomes_and_subtrees_keep_insertion_order():
    node = ResultTree("suite")
    broken = Outcome.broken("pending")
    child = ResultTree("child")
    fail = Outcome.failed("x == 1")

    node.add(broken)
    node.add(child)
    node.add(Outcome.passed())
    node.add(fail)

    assert node.children == [broken, child, fail]
    assert list(node.subtrees()) == [child]
    assert list(node.outcomes()) == [broken, fail]


def test_add_to_closed_test_set_raises():
    node = ResultTree("suite")
    node.close()

    with pytest.raises(ScopeClosedError, match="suite"):
        node.add(Outcome.passed())
    assert node.pass_count == 0


def test_iter_outcomes_walks_depth_first_with_owner():
    root = ResultTree("root")
    a = ResultTree("a")
    b = ResultTree("b")
    first = Outcome.failed("first")
    second = Outcome.errored("second")
    third = Outcome.broken("third")

    a.add(first)
    root.add(a)
    root.add(second)
    b.add(third)
    root.add(b)

    assert list(root.iter_outcomes()) == [(a, first), (root, second), (b, third)]
