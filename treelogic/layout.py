"""
layout.py

Walk a polymer forest or a license tree with a Turtle and return a Drawing.

Polymer view
------------
Trunk nodes (depth 0) are drawn in the base color, everything that reacted
away hangs off them as green subtrees. An ignored unit is drawn as a short
line followed by a small disc. After each node the turtle turns by
base_angle * subtree_angle_mult**depth and shrinks by
base_scale * subtree_scale_mult**depth, so deeper subtrees curl differently
from the trunk.

License view
------------
Part 1 draws every child followed by the node's metadata as a row of discs.
Part 2 follows the metadata entries as child references, which is how the
node value is computed; broken references can be drawn as short stubs.
License chains can nest as deeply as reaction chains, so both views walk
their trees with explicit work stacks.
"""

import math
from typing import Any, Dict, List

from treelogic.turtle import Drawing, Turtle


def _scaled(base: float, mult: float, depth: int) -> float:
    """base * mult**depth, or inf once that no longer fits in a float."""
    try:
        return base * (mult ** depth)
    except OverflowError:
        return math.inf


def _start(params: Dict[str, Any]) -> Turtle:
    drawing = Drawing(params["width"], params["height"], params["background_color"])
    turtle = Turtle(drawing)
    turtle.line_width = params["base_weight"]
    turtle.translate(params["width"] / 2.0, params["height"] / 2.0)
    turtle.scale(params["zoom"])
    turtle.translate(params["start_x"], params["start_y"])
    return turtle


# -------------------------------------------------------
# Polymer
# -------------------------------------------------------

def polymer_layout(forest: List[Dict[str, Any]], params: Dict[str, Any]) -> Drawing:
    """
    Lay out a collapsed polymer.

    Subtrees can nest thousands of levels deep on real inputs, so the walk
    uses an explicit work stack rather than recursion.
    """
    turtle = _start(params)
    turtle.fill_color = params["removed_color"]

    step = params["step_size"]
    base_angle = params["base_angle"]
    base_scale = params["base_scale"]
    angle_mult = params["subtree_angle_mult"]
    scale_mult = params["subtree_scale_mult"]

    work = [("node", node, 0) for node in reversed(forest)]
    while work:
        item = work.pop()
        kind = item[0]

        if kind == "restore":
            turtle.restore()
            continue

        if kind == "advance":
            depth = item[1]
            turn = _scaled(base_angle, angle_mult, depth)
            if math.isfinite(turn):
                turtle.rotate(turn)
            s = _scaled(base_scale, scale_mult, depth)
            if math.isfinite(s):
                turtle.scale(s)
            continue

        _, node, depth = item
        turtle.stroke_color = params["base_color"] if depth == 0 else params["subtree_color"]

        if node.get("ignored"):
            turtle.forward_line(step * 2 / 3)
            turtle.forward_circle(step / 3)
        else:
            turtle.forward_line(step)

        work.append(("advance", depth))

        children = node.get("children", [])
        if children:
            turtle.save()
            turtle.rotate(params["branch_angle"])
            turtle.scale(params["branch_scale"])
            work.append(("restore",))
            for child in reversed(children):
                work.append(("node", child, depth + 1))

    return turtle.drawing


# -------------------------------------------------------
# License tree
# -------------------------------------------------------

def _draw_metadata(turtle: Turtle, metadata: List[int], params: Dict[str, Any]):
    turtle.scale(params["metadata_scale"])
    for v in metadata:
        turtle.forward_circle(2 * v)


def _open_branch(turtle: Turtle, params: Dict[str, Any]):
    turtle.forward_line(params["step_size"])
    turtle.save()
    turtle.rotate(params["branch_angle"])
    turtle.scale(params["branch_scale"])


def _close_branch(turtle: Turtle, params: Dict[str, Any]):
    turtle.restore()
    turtle.rotate(params["base_angle"])
    turtle.scale(params["base_scale"])


def _draw_license_part1(turtle: Turtle, root: Dict[str, Any], params: Dict[str, Any]):
    work = [("node", root)]
    while work:
        kind, node = work.pop()
        if kind == "close":
            _close_branch(turtle, params)
        elif kind == "tail":
            turtle.forward_line(params["step_size"])
            _draw_metadata(turtle, node["metadata"], params)
        elif kind == "child":
            _open_branch(turtle, params)
            work.append(("close", None))
            work.append(("node", node))
        else:
            work.append(("tail", node))
            for subn in reversed(node["children"]):
                work.append(("child", subn))


def _draw_license_part2(turtle: Turtle, root: Dict[str, Any], params: Dict[str, Any]):
    work = [("node", root)]
    while work:
        kind, node = work.pop()
        if kind == "close":
            _close_branch(turtle, params)
            continue
        if kind == "stub":
            _open_branch(turtle, params)
            turtle.forward_line(params["step_size"] / 2)
            work.append(("close", None))
            continue
        if kind == "child":
            _open_branch(turtle, params)
            work.append(("close", None))
            work.append(("node", node))
            continue

        children = node["children"]
        if not children:
            _draw_metadata(turtle, node["metadata"], params)
            continue
        for i in reversed(node["metadata"]):
            if 1 <= i <= len(children):
                work.append(("child", children[i - 1]))
            elif params["metadata_stubs"]:
                work.append(("stub", None))


def license_layout(root: Dict[str, Any], params: Dict[str, Any]) -> Drawing:
    """Lay out a decoded license tree."""
    turtle = _start(params)
    turtle.rotate(params["start_angle"])
    turtle.stroke_color = params["base_color"]
    turtle.fill_color = params["metadata_color"]

    if params["metadata_part2"]:
        _draw_license_part2(turtle, root, params)
    else:
        _draw_license_part1(turtle, root, params)
    return turtle.drawing


__all__ = ["polymer_layout", "license_layout"]
