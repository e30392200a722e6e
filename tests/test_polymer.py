import pytest

from treelogic.polymer import (
    parse_polymer,
    units_react,
    collapse,
    collapsed_len,
    shortest_collapse,
    collapse_frames,
)
from treelogic.tree_builder import count_units

EXAMPLE = "dabAcCaCBAcCcaDA"


def units(nodes):
    return [n["unit"] for n in nodes]


def test_parse_polymer_strips_newline():
    assert parse_polymer(EXAMPLE + "\n") == EXAMPLE
    assert parse_polymer(None) == ""


def test_units_react():
    assert units_react("a", "A")
    assert units_react("B", "b")
    assert not units_react("a", "a")
    assert not units_react("a", "B")
    assert not units_react("a", None)
    assert not units_react(None, "a")


def test_empty_input_is_just_root():
    forest = collapse("")
    assert len(forest) == 1
    assert forest[0]["unit"] is None
    assert forest[0]["children"] == []
    assert collapse("", include_root=False) == []


def test_reaction_nests_earlier_unit_as_parent():
    forest = collapse("aA")
    assert len(forest) == 1
    root = forest[0]
    assert units(root["children"]) == ["a"]
    a = root["children"][0]
    assert units(a["children"]) == ["A"]
    assert a["children"][0]["children"] == []


def test_full_collapse_leaves_only_root():
    forest = collapse("abBA")
    assert len(forest) == 1
    assert collapsed_len("abBA") == 0

    a = forest[0]["children"][0]
    assert units(a["children"]) == ["b", "A"]
    assert units(a["children"][0]["children"]) == ["B"]


def test_same_case_does_not_react():
    forest = collapse("aa")
    assert units(forest) == [None, "a", "a"]
    assert all(n["children"] == [] for n in forest)


def test_ignored_units_become_leaves_of_stack_top():
    forest = collapse("acCA", ignored="c")
    # c and C are both ignored, so a and A still meet and react
    assert len(forest) == 1
    a = forest[0]["children"][0]
    assert a["unit"] == "a"
    assert [(n["unit"], n["ignored"]) for n in a["children"]] == [
        ("c", True), ("C", True), ("A", False)]


def test_ignored_is_case_insensitive():
    assert collapse("xC", ignored="c") == collapse("xC", ignored="C")


def test_ignored_on_empty_stack_hangs_off_root():
    forest = collapse("cab", ignored="C")
    root = forest[0]
    assert root["children"] == [{"unit": "c", "ignored": True, "children": []}]
    assert units(forest[1:]) == ["a", "b"]


def test_ignored_never_reacts():
    forest = collapse("cC", ignored="c")
    assert len(forest) == 1
    assert len(forest[0]["children"]) == 2


def test_non_letters_are_plain_units():
    assert units(collapse("1-1", include_root=False)) == ["1", "-", "1"]


@pytest.mark.parametrize("polymer, ignored", [
    ("", None),
    ("aA", None),
    ("abBA", None),
    (EXAMPLE, None),
    (EXAMPLE, "c"),
    (EXAMPLE, "a"),
    ("xyzZYXxyz", "y"),
])
def test_every_unit_appears_once(polymer, ignored):
    assert count_units(collapse(polymer, ignored)) == len(polymer)


def test_collapse_is_repeatable():
    first = collapse(EXAMPLE, "a")
    second = collapse(EXAMPLE, "a")
    assert first == second

    first[0]["children"].clear()
    assert collapse(EXAMPLE, "a") == second


def test_prefix_structure_survives_longer_input():
    prefix = "dabAcCaCBA"
    suffix = "xyz"
    short = collapse(prefix)
    full = collapse(prefix + suffix)
    assert full[:len(short)] == short
    assert units(full[len(short):]) == ["x", "y", "z"]


def test_example_collapsed_len():
    assert collapsed_len(EXAMPLE) == 10
    assert units(collapse(EXAMPLE, include_root=False)) == list("dabCBAcaDA")


def test_example_ignored_len():
    assert collapsed_len(EXAMPLE, "a") == 6
    assert collapsed_len(EXAMPLE, "b") == 8
    assert collapsed_len(EXAMPLE, "c") == 4
    assert collapsed_len(EXAMPLE, "d") == 6


def test_shortest_collapse():
    assert shortest_collapse(EXAMPLE) == ("c", 4)
    assert shortest_collapse("") == (None, 0)


def test_shortest_collapse_tie_goes_to_first_letter():
    # either removal leaves a single unit
    assert shortest_collapse("aB") == ("a", 1)


def test_frames_cover_whole_polymer():
    frames = list(collapse_frames("abcdefghij", start=1, step=3))
    assert [n for n, _ in frames] == [1, 4, 7, 10]
    assert frames[-1][1] == collapse("abcdefghij")


def test_frames_accelerate():
    frames = list(collapse_frames("abcdefghij", start=0, step=1, accel=1))
    assert [n for n, _ in frames] == [0, 1, 3, 6, 10]


def test_frames_match_prefix_collapse():
    for n, forest in collapse_frames(EXAMPLE, "c", start=2, step=5):
        assert forest == collapse(EXAMPLE[:n], "c")


def test_frames_empty_polymer():
    assert list(collapse_frames("")) == [(0, collapse(""))]


def test_frames_reject_bad_step():
    with pytest.raises(ValueError):
        list(collapse_frames(EXAMPLE, step=0))
    with pytest.raises(ValueError):
        list(collapse_frames(EXAMPLE, accel=-1))
