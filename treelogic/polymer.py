"""
polymer.py

Polymer chain reduction.

A polymer is a string of units; a lowercase and an uppercase copy of the same
letter "react" and annihilate each other when they end up adjacent. Instead of
throwing the reacted units away, `collapse` keeps them as history: the unit that
gets popped off the stack takes its partner as its last child and is then
nested under whatever unit is exposed below it. Every input unit therefore
shows up exactly once in the result.

Node shape (plain dicts, serialized by tree_builder.tree_to_json):
    {
      "unit": "a",          # None for the synthetic root
      "ignored": False,     # True for units filtered out by the ignored rule
      "children": [ ... ]   # units eliminated underneath this one, in order
    }

Functions:
- parse_polymer(text)
- units_react(a, b)
- collapse(sequence, ignored=None, include_root=True)
- timed_collapse(sequence, ignored=None, include_root=True)
- collapsed_len(sequence, ignored=None)
- shortest_collapse(sequence)
- collapse_frames(sequence, ignored=None, start=1, step=8, accel=0)
"""

import logging
import time
from typing import Any, Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

Node = Dict[str, Any]


def parse_polymer(text: str) -> str:
    """Loaded files usually end with a newline; the newline is not a unit."""
    return (text or "").strip()


def units_react(a: Optional[str], b: Optional[str]) -> bool:
    """Return True if a and b are the same letter with opposite case."""
    if a is None or b is None:
        return False
    return a != b and a.lower() == b.lower()


def _new_node(unit: Optional[str], ignored: bool = False) -> Node:
    return {"unit": unit, "ignored": ignored, "children": []}


# -------------------------------------------------------
# Core reduction
# -------------------------------------------------------

def collapse(sequence: str, ignored: Optional[str] = None,
             include_root: bool = True) -> List[Node]:
    """
    Reduce `sequence` in a single left-to-right pass and return the forest.

    The returned list is the final stack, bottom first. The synthetic root
    (unit None) is the first entry unless include_root is False.

    ignored: a single unit (either case). Its occurrences become ignored
    leaves under the current stack top and never take part in a reaction.
    """
    ignored_key = ignored.lower() if ignored else None

    root = _new_node(None)
    stack = [root]
    for u in sequence:
        top = stack[-1]
        if ignored_key is not None and u.lower() == ignored_key:
            top["children"].append(_new_node(u, ignored=True))
        elif units_react(u, top["unit"]):
            # the partner ends the popped unit's history
            last = stack.pop()
            last["children"].append(_new_node(u))
            stack[-1]["children"].append(last)
        else:
            stack.append(_new_node(u))

    if include_root:
        return stack
    return stack[1:]


def collapsed_len(sequence: str, ignored: Optional[str] = None) -> int:
    """Number of units left standing after the reduction."""
    return len(collapse(sequence, ignored, include_root=False))


def timed_collapse(sequence: str, ignored: Optional[str] = None,
                   include_root: bool = True) -> List[Node]:
    """collapse() with a log line saying how long it took."""
    collapse_start = time.perf_counter()
    nodes = collapse(sequence, ignored, include_root=include_root)
    elapsed = (time.perf_counter() - collapse_start) * 1000.0
    logger.info("polymer ready -- %d trunk nodes -- %.1f ms", len(nodes), elapsed)
    return nodes


# -------------------------------------------------------
# Puzzle statistics
# -------------------------------------------------------

def shortest_collapse(sequence: str) -> Tuple[Optional[str], int]:
    """
    Try removing each letter present in the polymer and report which one
    produces the shortest collapsed chain.

    Returns (letter, length). Ties go to the alphabetically first letter.
    An empty polymer gives (None, 0).
    """
    letters = sorted({u.lower() for u in sequence if u.isalpha()})
    if not letters:
        return None, collapsed_len(sequence)

    best_unit = None
    best_len = -1
    for letter in letters:
        n = collapsed_len(sequence, letter)
        if best_unit is None or n < best_len:
            best_unit, best_len = letter, n
    return best_unit, best_len


# -------------------------------------------------------
# Animation helper
# -------------------------------------------------------

def collapse_frames(sequence: str, ignored: Optional[str] = None,
                    start: int = 1, step: int = 8,
                    accel: int = 0) -> Iterator[Tuple[int, List[Node]]]:
    """
    Yield (n, forest) for growing prefixes of the polymer.

    n starts at `start` and grows by `step`; `step` itself grows by `accel`
    after every frame. The final frame always covers the whole polymer.
    """
    if step < 1:
        raise ValueError("step must be at least 1")
    if accel < 0:
        raise ValueError("accel must not be negative")

    total = len(sequence)
    n = max(0, start)
    while n < total:
        yield n, collapse(sequence[:n], ignored)
        n += step
        step += accel
    yield total, collapse(sequence, ignored)


__all__ = [
    "parse_polymer",
    "units_react",
    "collapse",
    "collapsed_len",
    "timed_collapse",
    "shortest_collapse",
    "collapse_frames",
]
