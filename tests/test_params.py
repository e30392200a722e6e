import pytest

from treelogic.params import ParamError, POLYMER_DEFAULTS, defaults_for, parse_params


def test_defaults_are_copies():
    params = defaults_for("polymer")
    params["zoom"] = 99
    assert POLYMER_DEFAULTS["zoom"] == 0.64


def test_unknown_kind():
    with pytest.raises(ParamError):
        defaults_for("spiral")


def test_no_values_gives_defaults():
    assert parse_params("license") == defaults_for("license")


def test_values_override_defaults():
    params = parse_params("polymer", {
        "zoom": "1.5",
        "base_color": "#ABC",
        "width": "320",
        "branch_angle": "",
        "polymer": "aA",
    })
    assert params["zoom"] == 1.5
    assert params["base_color"] == "#abc"
    assert params["width"] == 320
    assert params["branch_angle"] == POLYMER_DEFAULTS["branch_angle"]
    assert "polymer" not in params


@pytest.mark.parametrize("raw, expected", [
    ("on", True), ("true", True), ("1", True),
    ("off", False), ("no", False), (False, False),
])
def test_boolean_values(raw, expected):
    assert parse_params("license", {"metadata_stubs": raw})["metadata_stubs"] is expected


@pytest.mark.parametrize("values", [
    {"zoom": "abc"},
    {"zoom": "0"},
    {"zoom": "nan"},
    {"step_size": "-1"},
    {"base_color": "red"},
    {"width": "8"},
    {"height": "100000"},
    {"width": "12.5"},
    {"metadata_part2": "maybe"},
])
def test_bad_values(values):
    with pytest.raises(ParamError) as exc:
        parse_params("license", values)
    assert list(values)[0] in str(exc.value)


def test_image_limit_is_configurable():
    assert parse_params("polymer", {"width": "600"}, max_image_size=600)["width"] == 600
    with pytest.raises(ParamError):
        parse_params("polymer", {"width": "601"}, max_image_size=600)
