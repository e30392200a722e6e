# treelogic/tree_builder.py
"""
Utility functions to summarise a collapsed polymer forest and convert it
into a D3-compatible JSON format.
"""

import json
from typing import Any, Dict, List


# -------------------------------------------------------
# 1. Node naming
# -------------------------------------------------------

def node_name(node: Dict[str, Any]) -> str:
    """
    Display name of a polymer node:
        root sentinel  -> "root"
        ignored leaf   -> "(c)"
        structural     -> the unit itself
    """
    unit = node.get("unit")
    if unit is None:
        return "root"
    if node.get("ignored"):
        return f"({unit})"
    return unit


# -------------------------------------------------------
# 2. Convert into clean D3 hierarchical format
# -------------------------------------------------------

def flatten_node(node: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert one polymer node (and its subtree) into the D3 structure.

    Output format:
    {
        "name": "a",
        "children": [ ... ]
    }

    Reacted chains nest thousands of levels deep, so the copy is made with an
    explicit stack.
    """
    out = {"name": node_name(node)}
    stack = [(node, out)]
    while stack:
        src, dst = stack.pop()
        children = src.get("children", [])
        if not children:
            continue
        dst["children"] = []
        for child in children:
            entry = {"name": node_name(child)}
            dst["children"].append(entry)
            stack.append((child, entry))
    return out


def polymer_to_d3(forest: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Convert a whole forest (trunk nodes in order) for D3 visualization."""
    return [flatten_node(node) for node in forest]


# -------------------------------------------------------
# 3. Forest statistics
# -------------------------------------------------------

def _walk(nodes):
    stack = list(reversed(nodes))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.get("children", [])))


def count_units(forest: List[Dict[str, Any]]) -> int:
    """Structural nodes plus ignored leaves, not counting the root sentinel."""
    return sum(1 for node in _walk(forest) if node.get("unit") is not None)


def count_ignored(forest: List[Dict[str, Any]]) -> int:
    return sum(1 for node in _walk(forest) if node.get("ignored"))


def max_depth(forest: List[Dict[str, Any]]) -> int:
    """
    Deepest nesting level. Trunk nodes sit at depth 0, so a forest where
    nothing reacted has depth 0 and an empty forest has depth -1.
    """
    deepest = -1
    stack = [(node, 0) for node in forest]
    while stack:
        node, depth = stack.pop()
        deepest = max(deepest, depth)
        for child in node.get("children", []):
            stack.append((child, depth + 1))
    return deepest


def forest_stats(forest: List[Dict[str, Any]]) -> Dict[str, int]:
    """Summary numbers sent alongside the tree."""
    trunk = [node for node in forest if node.get("unit") is not None]
    return {
        "trunk": len(trunk),
        "units": count_units(forest),
        "ignored": count_ignored(forest),
        "depth": max_depth(forest),
    }


# -------------------------------------------------------
# 4. JSON text for deep trees
# -------------------------------------------------------

class _Raw:
    """Literal JSON punctuation queued on the encoder stack."""
    __slots__ = ("text",)

    def __init__(self, text: str):
        self.text = text


def tree_to_json(value: Any) -> str:
    """
    Serialize dicts / lists / scalars to JSON text without recursion.

    json.dumps walks nested containers recursively and fails on reaction
    chains a few thousand levels deep; here the containers are unrolled onto
    an explicit stack and json.dumps only ever sees scalars.
    """
    parts: List[str] = []
    stack: List[Any] = [value]
    while stack:
        item = stack.pop()
        if isinstance(item, _Raw):
            parts.append(item.text)
        elif isinstance(item, dict):
            parts.append("{")
            stack.append(_Raw("}"))
            entries = list(item.items())
            for i in range(len(entries) - 1, -1, -1):
                key, val = entries[i]
                stack.append(val)
                stack.append(_Raw(("," if i else "") + json.dumps(str(key)) + ":"))
        elif isinstance(item, (list, tuple)):
            parts.append("[")
            stack.append(_Raw("]"))
            for i in range(len(item) - 1, -1, -1):
                stack.append(item[i])
                if i:
                    stack.append(_Raw(","))
        else:
            parts.append(json.dumps(item))
    return "".join(parts)


__all__ = [
    "node_name",
    "flatten_node",
    "polymer_to_d3",
    "count_units",
    "count_ignored",
    "max_depth",
    "forest_stats",
    "tree_to_json",
]
