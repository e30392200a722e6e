import logging

from flask import Flask, Response, render_template, request, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

import config
from treelogic.polymer import parse_polymer, timed_collapse, collapsed_len, shortest_collapse, collapse_frames
from treelogic.license_tree import parse_license, sum_metadata, node_value
from treelogic.tree_builder import polymer_to_d3, forest_stats, tree_to_json
from treelogic.params import parse_params, parse_bool, defaults_for
from treelogic.layout import polymer_layout, license_layout
from treelogic.render import render_png

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = Flask(__name__, template_folder=str(config.TEMPLATES_DIR))
CORS(app, origins=config.CORS_ORIGINS)

MAX_FRAMES = 500


class InputError(ValueError):
    """Raised when a request carries a missing, oversized or malformed input."""


# =====================================================================
#  HELPERS
# =====================================================================
def _fail(message, status=400):
    logger.warning("rejected request to %s: %s", request.path, message)
    return jsonify({"success": False, "message": message}), status


def _json_body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InputError("Request body must be a JSON object.")
    return data


def _uploaded_text(field):
    """Text of an uploaded file, or None when no file was picked."""
    upload = request.files.get(field)
    if upload is None or upload.filename == "":
        return None
    logger.info("reading file %s", upload.filename)
    try:
        return upload.read().decode("utf-8")
    except UnicodeDecodeError:
        raise InputError(f"Uploaded file '{upload.filename}' is not UTF-8 text.")


def _check_text(name, text, example):
    if text is None or (isinstance(text, str) and text.strip() == ""):
        return example
    if not isinstance(text, str):
        raise InputError(f"'{name}' must be a string.")
    if len(text) > config.MAX_INPUT_LENGTH:
        raise InputError(f"'{name}' is too long ({len(text)} characters, limit {config.MAX_INPUT_LENGTH}).")
    return text


def _read_polymer(text):
    return parse_polymer(_check_text("polymer", text, config.EXAMPLE_POLYMER))


def _read_license(text):
    return _check_text("license", text, config.EXAMPLE_LICENSE)


def _read_ignored(value):
    if value is None or value == "":
        return None
    if not isinstance(value, str) or len(value) != 1:
        raise InputError(f"'ignored' must be a single unit (got {value!r}).")
    return value


def _read_int(data, name, default):
    raw = data.get(name, default)
    if isinstance(raw, bool):
        raise InputError(f"'{name}' must be an integer.")
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise InputError(f"'{name}' must be an integer (got {raw!r}).")


def _tree_response(payload):
    """JSON reply for payloads holding trees; these nest too deep for jsonify."""
    return Response(tree_to_json(payload), mimetype="application/json")


def _png(data):
    resp = Response(data, mimetype="image/png")
    resp.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
    return resp


# =====================================================================
#  HOME PAGE
# =====================================================================
@app.route("/")
def index():
    return render_template(
        "index.html",
        polymer_params=defaults_for("polymer"),
        license_params=defaults_for("license"),
        example_polymer=config.EXAMPLE_POLYMER,
        example_license=config.EXAMPLE_LICENSE,
        default_ignored=config.DEFAULT_IGNORED,
    )


# =====================================================================
#  1. COLLAPSE A POLYMER
# =====================================================================
@app.route("/collapse", methods=["POST"])
def collapse_polymer():
    try:
        data = _json_body()
        polymer = _read_polymer(data.get("polymer"))
        ignored = _read_ignored(data.get("ignored"))
        include_root = parse_bool("include_root", data.get("include_root", True))

        forest = timed_collapse(polymer, ignored, include_root=include_root)

        return _tree_response({
            "success": True,
            "forest": forest,
            "tree": polymer_to_d3(forest),
            "stats": forest_stats(forest),
        })

    except ValueError as e:
        return _fail(f"Collapse Error: {str(e)}")


# =====================================================================
#  2. POLYMER STATISTICS
# =====================================================================
@app.route("/polymer/stats", methods=["POST"])
def polymer_stats():
    try:
        data = _json_body()
        polymer = _read_polymer(data.get("polymer"))

        unit, length = shortest_collapse(polymer)

        return jsonify({
            "success": True,
            "length": len(polymer),
            "collapsed_len": collapsed_len(polymer),
            "shortest": {"unit": unit, "length": length},
        })

    except ValueError as e:
        return _fail(f"Stats Error: {str(e)}")


# =====================================================================
#  3. ANIMATION FRAMES
# =====================================================================
@app.route("/polymer/frames", methods=["POST"])
def polymer_frames():
    try:
        data = _json_body()
        polymer = _read_polymer(data.get("polymer"))
        ignored = _read_ignored(data.get("ignored"))
        start = _read_int(data, "start", 1)
        step = _read_int(data, "step", 8)
        accel = _read_int(data, "accel", 0)

        frames = []
        for n, forest in collapse_frames(polymer, ignored, start=start, step=step, accel=accel):
            if len(frames) >= MAX_FRAMES:
                raise InputError(f"Too many frames (limit {MAX_FRAMES}); use a larger step.")
            stats = forest_stats(forest)
            frames.append({"n": n, "trunk": stats["trunk"], "units": stats["units"]})

        return jsonify({"success": True, "frames": frames})

    except ValueError as e:
        return _fail(f"Frames Error: {str(e)}")


@app.route("/polymer.png", methods=["GET", "POST"])
def polymer_png():
    try:
        text = _uploaded_text("polymer_file")
        if text is None:
            text = request.values.get("polymer")
        polymer = _read_polymer(text)
        ignored = _read_ignored(request.values.get("ignored", config.DEFAULT_IGNORED))
        params = parse_params("polymer", request.values, max_image_size=config.MAX_IMAGE_SIZE)
    except ValueError as e:
        return _fail(f"Polymer Error: {str(e)}")

    forest = timed_collapse(polymer, ignored)
    drawing = polymer_layout(forest, params)
    return _png(render_png(drawing, dpi=config.DPI))


# =====================================================================
#  4. LICENSE TREE
# =====================================================================
@app.route("/license", methods=["POST"])
def license_tree():
    try:
        data = _json_body()
        root = parse_license(_read_license(data.get("license")))

        return _tree_response({
            "success": True,
            "tree": root,
            "sum_metadata": sum_metadata(root),
            "value": node_value(root),
        })

    except ValueError as e:
        return _fail(f"License Error: {str(e)}")


@app.route("/license.png", methods=["GET", "POST"])
def license_png():
    try:
        text = _uploaded_text("license_file")
        if text is None:
            text = request.values.get("license")
        root = parse_license(_read_license(text))
        params = parse_params("license", request.values, max_image_size=config.MAX_IMAGE_SIZE)
    except ValueError as e:
        return _fail(f"License Error: {str(e)}")

    drawing = license_layout(root, params)
    return _png(render_png(drawing, dpi=config.DPI))


# =====================================================================
#  RENDER DEFAULTS
# =====================================================================
@app.route("/defaults/<kind>")
def defaults(kind):
    try:
        return jsonify({"success": True, "params": defaults_for(kind)})
    except ValueError as e:
        return _fail(str(e), status=404)


# =====================================================================
#  ERRORS
# =====================================================================
@app.errorhandler(Exception)
def unexpected_error(e):
    if isinstance(e, HTTPException):
        return e
    logger.exception("unhandled error on %s", request.path)
    return jsonify({"success": False, "message": "Internal error."}), 500


# =====================================================================
#  HEALTH CHECK
# =====================================================================
@app.route("/ping")
def ping():
    return jsonify({"status": "OK", "message": "Server running"})


# =====================================================================
#  RUN
# =====================================================================
if __name__ == "__main__":
    app.run(debug=config.DEBUG)
