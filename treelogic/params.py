"""
Render parameters for the two tree views.

Every slider / color picker on the page maps onto one key below. Values arrive
as strings (query string or form fields) and are validated here, before any
drawing happens.
"""

import re
from typing import Any, Dict, Mapping, Optional

_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

_TRUE_WORDS = ("1", "true", "on", "yes")
_FALSE_WORDS = ("0", "false", "off", "no")

MIN_IMAGE_SIZE = 16


class ParamError(ValueError):
    """Raised when a render parameter has an unusable value."""


# holiday wreath
POLYMER_DEFAULTS: Dict[str, Any] = {
    "base_weight": 2.0,
    "start_x": 0.0,
    "start_y": -250.0,
    "zoom": 0.64,
    "step_size": 20.0,
    "base_angle": 0.07,
    "base_scale": 0.9999,
    "branch_angle": -0.4,
    "branch_scale": 0.9,
    "subtree_angle_mult": -1.6,
    "subtree_scale_mult": 0.98,
    "background_color": "#f8f0e0",
    "base_color": "#804818",
    "subtree_color": "#008000",
    "removed_color": "#ff0000",
    "width": 800,
    "height": 800,
}

# Tree #1
LICENSE_DEFAULTS: Dict[str, Any] = {
    "base_weight": 2.0,
    "start_x": 0.0,
    "start_y": 50.0,
    "zoom": 4.0,
    "step_size": 20.0,
    "start_angle": -1.57,
    "base_angle": -0.3,
    "base_scale": 0.85,
    "branch_angle": 0.4,
    "branch_scale": 0.8,
    "metadata_scale": 1.0,
    "metadata_part2": True,
    "metadata_stubs": False,
    "base_color": "#808080",
    "metadata_color": "#ff0000",
    "background_color": "#f0f0f0",
    "width": 800,
    "height": 800,
}

DEFAULTS = {
    "polymer": POLYMER_DEFAULTS,
    "license": LICENSE_DEFAULTS,
}


def defaults_for(kind: str) -> Dict[str, Any]:
    """Return a fresh copy of the defaults for 'polymer' or 'license'."""
    try:
        return dict(DEFAULTS[kind])
    except KeyError:
        raise ParamError(f"Unknown view kind '{kind}'. Expected one of: {', '.join(DEFAULTS)}.")


# -------------------------------------------------------
# Field parsers
# -------------------------------------------------------

def _parse_float(name: str, raw: Any) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ParamError(f"'{name}' must be a number (got {raw!r}).")
    if value != value or value in (float("inf"), float("-inf")):
        raise ParamError(f"'{name}' must be a finite number (got {raw!r}).")
    return value


def parse_bool(name: str, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    word = str(raw).strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ParamError(f"'{name}' must be a boolean (got {raw!r}).")


def _parse_color(name: str, raw: Any) -> str:
    if not isinstance(raw, str) or not _COLOR_RE.match(raw.strip()):
        raise ParamError(f"'{name}' must be a color like #a0b0c0 (got {raw!r}).")
    return raw.strip().lower()


def _parse_size(name: str, raw: Any, max_size: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ParamError(f"'{name}' must be a whole number of pixels (got {raw!r}).")
    if not MIN_IMAGE_SIZE <= value <= max_size:
        raise ParamError(f"'{name}' must be between {MIN_IMAGE_SIZE} and {max_size} (got {value}).")
    return value


# -------------------------------------------------------
# Main public function
# -------------------------------------------------------

def parse_params(kind: str, values: Optional[Mapping[str, Any]] = None,
                 max_image_size: int = 4096) -> Dict[str, Any]:
    """
    Merge user supplied values over the defaults for `kind`.

    Empty strings keep the default, unknown keys are ignored. The type of each
    default decides how the raw value is parsed.

    Raises ParamError naming the first bad field.
    """
    params = defaults_for(kind)
    if not values:
        return params

    for name, default in params.items():
        raw = values.get(name)
        if raw is None or (isinstance(raw, str) and raw.strip() == ""):
            continue

        if name in ("width", "height"):
            params[name] = _parse_size(name, raw, max_image_size)
        elif isinstance(default, bool):
            params[name] = parse_bool(name, raw)
        elif name.endswith("_color"):
            params[name] = _parse_color(name, raw)
        else:
            params[name] = _parse_float(name, raw)

    if params["zoom"] <= 0:
        raise ParamError("'zoom' must be greater than zero.")
    if params["step_size"] < 0:
        raise ParamError("'step_size' must not be negative.")
    if params["base_weight"] < 0:
        raise ParamError("'base_weight' must not be negative.")

    return params


__all__ = [
    "ParamError",
    "POLYMER_DEFAULTS",
    "LICENSE_DEFAULTS",
    "defaults_for",
    "parse_bool",
    "parse_params",
]
