"""
turtle.py

A small save/restore transform stack in the style of a 2D canvas context.

The layout code walks a tree and moves the turtle with translate / rotate /
scale; `forward_line` and `forward_circle` record primitives in device
coordinates on a Drawing. All transform state lives here, the trees being
drawn are only read.
"""

import math
from typing import List, Tuple

import numpy as np

Segment = Tuple[float, float, float, float, str, float]
Disc = Tuple[float, float, float, str]


class Drawing:
    """Primitives in device coordinates (pixels, y pointing down)."""

    def __init__(self, width: int, height: int, background: str):
        self.width = width
        self.height = height
        self.background = background
        self.segments: List[Segment] = []
        self.discs: List[Disc] = []

    def __len__(self):
        return len(self.segments) + len(self.discs)


class Turtle:
    def __init__(self, drawing: Drawing):
        self.drawing = drawing
        self.matrix = np.identity(3)
        self._saved: List[np.ndarray] = []

        self.stroke_color = "#000000"
        self.fill_color = "#000000"
        self.line_width = 1.0

    # ---------------------------------------------------
    # state stack
    # ---------------------------------------------------
    def save(self):
        self._saved.append(self.matrix.copy())

    def restore(self):
        if not self._saved:
            raise RuntimeError("restore() without matching save()")
        self.matrix = self._saved.pop()

    # ---------------------------------------------------
    # transforms (applied in the current local frame)
    # ---------------------------------------------------
    def translate(self, dx: float, dy: float):
        t = np.array([[1.0, 0.0, dx],
                      [0.0, 1.0, dy],
                      [0.0, 0.0, 1.0]])
        self.matrix = self.matrix @ t

    def rotate(self, theta: float):
        c, s = math.cos(theta), math.sin(theta)
        r = np.array([[c, -s, 0.0],
                      [s, c, 0.0],
                      [0.0, 0.0, 1.0]])
        self.matrix = self.matrix @ r

    def scale(self, sx: float, sy: float = None):
        if sy is None:
            sy = sx
        m = np.array([[sx, 0.0, 0.0],
                      [0.0, sy, 0.0],
                      [0.0, 0.0, 1.0]])
        self.matrix = self.matrix @ m

    # ---------------------------------------------------
    # queries
    # ---------------------------------------------------
    def position(self) -> Tuple[float, float]:
        return float(self.matrix[0, 2]), float(self.matrix[1, 2])

    def unit_scale(self) -> float:
        """How long one local unit is in device pixels."""
        return math.sqrt(abs(np.linalg.det(self.matrix[:2, :2])))

    # ---------------------------------------------------
    # drawing
    # ---------------------------------------------------
    def forward_line(self, dist: float):
        x0, y0 = self.position()
        self.translate(dist, 0.0)
        x1, y1 = self.position()
        width = self.line_width * self.unit_scale()
        self.drawing.segments.append((x0, y0, x1, y1, self.stroke_color, width))

    def forward_circle(self, dist: float):
        """Disc of diameter `dist` just ahead of the turtle, then step past it."""
        self.translate(dist / 2.0, 0.0)
        cx, cy = self.position()
        radius = dist / 2.0 * self.unit_scale()
        self.drawing.discs.append((cx, cy, radius, self.fill_color))
        self.translate(dist / 2.0, 0.0)
