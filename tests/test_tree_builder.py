import json

from treelogic.polymer import collapse
from treelogic.tree_builder import (
    node_name,
    polymer_to_d3,
    count_units,
    count_ignored,
    max_depth,
    forest_stats,
    tree_to_json,
)


def test_node_names():
    assert node_name({"unit": None, "ignored": False, "children": []}) == "root"
    assert node_name({"unit": "c", "ignored": True, "children": []}) == "(c)"
    assert node_name({"unit": "Q", "ignored": False, "children": []}) == "Q"


def test_polymer_to_d3():
    tree = polymer_to_d3(collapse("aAcx", ignored="c"))
    assert tree == [
        {"name": "root", "children": [
            {"name": "a", "children": [{"name": "A"}]},
            {"name": "(c)"},
        ]},
        {"name": "x"},
    ]


def test_counts():
    forest = collapse("abBAcC", ignored="c")
    assert count_units(forest) == 6
    assert count_ignored(forest) == 2
    # root -> a -> b -> B
    assert max_depth(forest) == 3


def test_depth_of_flat_forest():
    assert max_depth(collapse("xyz", include_root=False)) == 0
    assert max_depth([]) == -1


def test_forest_stats():
    stats = forest_stats(collapse("dabAcCaCBAcCcaDA"))
    assert stats["trunk"] == 10
    assert stats["units"] == 16
    assert stats["ignored"] == 0


def test_d3_export_of_deep_chain():
    tree = polymer_to_d3(collapse("a" * 3000 + "A" * 3000))
    node = tree[0]
    levels = 0
    while "children" in node:
        node = node["children"][0]
        levels += 1
    assert levels == 3001
    assert node == {"name": "A"}


def test_tree_to_json_matches_json_module():
    payload = {
        "success": True,
        "forest": collapse("aAcx", ignored="c"),
        "missing": None,
        "values": [1, 2.5, "q\"uote", "ü"],
        "empty": {},
        "none": [],
    }
    assert json.loads(tree_to_json(payload)) == payload


def test_tree_to_json_handles_deep_nesting():
    value = []
    for _ in range(5000):
        value = [value]
    assert tree_to_json(value) == "[" * 5001 + "]" * 5001
