# treelogic/render.py
import io
import logging
import time

import matplotlib
matplotlib.use("Agg")  # headless backend for servers
import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection
from matplotlib.patches import Circle

from treelogic.turtle import Drawing

logger = logging.getLogger(__name__)


def render_png(drawing: Drawing, dpi: int = 100) -> bytes:
    """
    Rasterize a Drawing to PNG bytes.

    The figure covers exactly drawing.width x drawing.height pixels with no
    axes, and the y axis points down like a canvas.
    """
    render_start = time.perf_counter()

    fig = plt.figure(figsize=(drawing.width / dpi, drawing.height / dpi), dpi=dpi)
    fig.patch.set_facecolor(drawing.background)
    ax = fig.add_axes([0, 0, 1, 1])
    ax.set_axis_off()
    ax.set_facecolor(drawing.background)
    ax.set_xlim(0, drawing.width)
    ax.set_ylim(drawing.height, 0)

    if drawing.segments:
        lines = [((x0, y0), (x1, y1)) for x0, y0, x1, y1, _, _ in drawing.segments]
        colors = [s[4] for s in drawing.segments]
        # linewidths are in points; one device pixel is 72/dpi points
        widths = [s[5] * 72.0 / dpi for s in drawing.segments]
        ax.add_collection(LineCollection(lines, colors=colors, linewidths=widths,
                                         capstyle="round"))

    for cx, cy, r, color in drawing.discs:
        ax.add_patch(Circle((cx, cy), r, facecolor=color, edgecolor="none"))

    buf = io.BytesIO()
    fig.savefig(buf, format="png", dpi=dpi, facecolor=fig.get_facecolor())
    plt.close(fig)

    elapsed = (time.perf_counter() - render_start) * 1000.0
    logger.info("rendered %d primitives -- %.1f ms", len(drawing), elapsed)
    return buf.getvalue()


__all__ = ["render_png"]
