from treelogic.turtle import Drawing
from treelogic.polymer import collapse
from treelogic.params import parse_params
from treelogic.layout import polymer_layout
from treelogic.render import render_png

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def test_empty_drawing_renders():
    data = render_png(Drawing(64, 32, "#f0f0f0"))
    assert data.startswith(PNG_SIGNATURE)


def test_polymer_renders_at_requested_size():
    params = parse_params("polymer", {"width": "120", "height": "90"})
    drawing = polymer_layout(collapse("dabAcCaCBAcCcaDA", "c"), params)
    data = render_png(drawing, dpi=100)
    assert data.startswith(PNG_SIGNATURE)
    # IHDR: width and height are the first two big-endian ints after the chunk tag
    width = int.from_bytes(data[16:20], "big")
    height = int.from_bytes(data[20:24], "big")
    assert (width, height) == (120, 90)
