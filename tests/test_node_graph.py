from gltfkit.utils.node_graph import SharedChild, find_cycle, find_shared_child


def test_tree_has_no_shared_child_or_cycle():
    children = [[1, 2], [3], None, []]
    assert find_shared_child(children) is None
    assert find_cycle(children) is None


def test_shared_child_reports_both_parents():
    children = [[2], [2], []]
    assert find_shared_child(children) == SharedChild(child=2, first_parent=0, second_parent=1)


def test_duplicate_within_one_parent_is_not_shared():
    assert find_shared_child([[1, 1], []]) is None


def test_self_loop_is_a_cycle():
    assert find_cycle([[0]]) == [0, 0]


def test_cycle_path_starts_at_reentered_node():
    # 0 -> 1 -> 2 -> 3 -> 1
    children = [[1], [2], [3], [1]]
    assert find_cycle(children) == [1, 2, 3, 1]


def test_cycle_reachable_only_from_later_root():
    children = [[], [2], [1]]
    assert find_cycle(children) == [1, 2, 1]


def test_diamond_is_acyclic():
    # 0 -> 1 -> 3, 0 -> 2 -> 3
    children = [[1, 2], [3], [3], []]
    assert find_cycle(children) is None
    assert find_shared_child(children) == SharedChild(child=3, first_parent=1, second_parent=2)


def test_deep_chain_does_not_recurse():
    depth = 20000
    children = [[i + 1] for i in range(depth)] + [[]]
    assert find_cycle(children) is None
    children[-1] = [0]
    cycle = find_cycle(children)
    assert cycle[0] == 0 and cycle[-1] == 0 and len(cycle) == depth + 2
