"""
license_tree.py

Decoder for the "license file" tree format: a flat list of integers where each
node is written as

    child_count metadata_count <children...> <metadata...>

Example: "2 3 0 3 10 11 12 1 1 0 1 99 2 1 1 2"

Returned node shape:
    { "children": [ ... ], "metadata": [1, 1, 2] }
"""

import logging
import time
from typing import Any, Dict, Iterator, List

logger = logging.getLogger(__name__)

LicenseNode = Dict[str, Any]


class LicenseError(ValueError):
    """Raised when a license string cannot be decoded into a tree."""


def _parse_entries(text: str) -> List[int]:
    entries = []
    for pos, word in enumerate((text or "").split()):
        try:
            value = int(word)
        except ValueError:
            raise LicenseError(f"Entry {pos} is not an integer: {word!r}")
        if value < 0:
            raise LicenseError(f"Entry {pos} is negative: {value}")
        entries.append(value)
    return entries


def _take(entries: Iterator[int], what: str) -> int:
    try:
        return next(entries)
    except StopIteration:
        raise LicenseError(f"License ended early while reading {what}.")


def _new_frame(entries: Iterator[int]) -> list:
    num_child = _take(entries, "a child count")
    num_metadata = _take(entries, "a metadata count")
    # [node, children still to read, metadata count]
    return [{"children": [], "metadata": []}, num_child, num_metadata]


def _read_tree(entries: Iterator[int]) -> LicenseNode:
    """Read one node and everything under it, without recursion."""
    root = _new_frame(entries)
    stack = [root]
    while stack:
        frame = stack[-1]
        node, remaining, num_metadata = frame
        if remaining:
            frame[1] -= 1
            child = _new_frame(entries)
            node["children"].append(child[0])
            stack.append(child)
            continue
        node["metadata"] = [_take(entries, "metadata") for _ in range(num_metadata)]
        stack.pop()
    return root[0]


def parse_license(text: str) -> LicenseNode:
    """
    Decode a license string into its root node.

    Raises LicenseError for empty input, non-integer or negative entries,
    truncated input and trailing entries that belong to no node.
    """
    parse_start = time.perf_counter()

    entries = _parse_entries(text)
    if not entries:
        raise LicenseError("License is empty.")

    it = iter(entries)
    root = _read_tree(it)

    leftover = sum(1 for _ in it)
    if leftover:
        raise LicenseError(f"{leftover} trailing entries after the root node.")

    elapsed = (time.perf_counter() - parse_start) * 1000.0
    logger.info("license tree ready -- %d entries -- %.1f ms", len(entries), elapsed)
    return root


def sum_metadata(node: LicenseNode) -> int:
    """Sum of every metadata entry in the subtree."""
    total = 0
    stack = [node]
    while stack:
        n = stack.pop()
        total += sum(n["metadata"])
        stack.extend(n["children"])
    return total


def node_value(node: LicenseNode) -> int:
    """
    Value of a node:
      - a leaf is worth the sum of its metadata;
      - otherwise each metadata entry is a 1-based child index, and the node is
        worth the sum of the referenced children's values. Indices that do not
        point at a child count as 0.

    Children are valued before their parent using an explicit stack.
    """
    values: Dict[int, int] = {}
    stack = [(node, False)]
    while stack:
        n, expanded = stack.pop()
        children = n["children"]
        if not children:
            values[id(n)] = sum(n["metadata"])
            continue
        if not expanded:
            stack.append((n, True))
            stack.extend((c, False) for c in children)
            continue

        subvals = [values[id(c)] for c in children]
        total = 0
        for i in n["metadata"]:
            if 1 <= i <= len(subvals):
                total += subvals[i - 1]
        values[id(n)] = total
    return values[id(node)]


__all__ = ["LicenseError", "parse_license", "sum_metadata", "node_value"]
