from lifedash.reconcile import reconcile


def test_first_draw_enters_everything():
    join = reconcile([], ["A", "B"])
    assert join.entered == ("A", "B")
    assert join.updated == () and join.exited == ()


def test_diff_groups_are_disjoint():
    join = reconcile(["A", "B", "C"], ["C", "D", "A"])
    assert join.entered == ("D",)
    assert join.updated == ("C", "A")
    assert join.exited == ("B",)
    assert join.changed == 2
    assert str(join) == "1 entered, 2 updated, 1 exited"


def test_unchanged_keys():
    join = reconcile(["A", "B"], ["B", "A"])
    assert join.changed == 0
