import pytest

import hingeboxgen as gen


def test_defaults():
    p = gen.BoxParams()
    assert p.as_dict() == {
        "width": 80.0,
        "depth": 50.0,
        "height": 40.0,
        "thickness": 3.0,
        "kerf": 0.12,
        "tab_width": 10.0,
        "margin": 12.0,
        "add_right_hole": True,
    }
    assert p.bottom_depth == 44.0
    assert gen.BoxParams.from_dict({}) == p


def test_camel_case_aliases():
    p = gen.BoxParams.from_dict({"tabWidth": "8", "addRightHole": "no", "wallThickness": 4, "interPanelMargin": 6})
    assert p.tab_width == 8.0
    assert p.add_right_hole is False
    assert p.thickness == 4.0
    assert p.margin == 6.0


def test_box_parameter_names_are_accepted():
    p = gen.BoxParams.from_dict({"nominalTabWidth": 5, "wallThickness": 2.5, "interPanelMargin": 9})
    assert p.tab_width == 5.0
    assert p.thickness == 2.5
    assert p.margin == 9.0


def test_unknown_and_null_keys_are_ignored():
    p = gen.BoxParams.from_dict({"width": None, "colour": "red", "depth": "60.5"})
    assert p.width == 80.0
    assert p.depth == 60.5


@pytest.mark.parametrize("raw,expected", [
    (True, True), (False, False), (0, False), (1, True),
    ("yes", True), ("On", True), ("false", False), ("", False),
])
def test_boolean_coercion(raw, expected):
    assert gen.BoxParams.from_dict({"add_right_hole": raw}).add_right_hole is expected


def test_unreadable_boolean_names_field():
    with pytest.raises(gen.InvalidParameterError) as ei:
        gen.BoxParams.from_dict({"addRightHole": "maybe"})
    assert ei.value.field == "add_right_hole"


@pytest.mark.parametrize("value", ["wide", [1], True])
def test_non_numeric_value_names_field(value):
    with pytest.raises(gen.InvalidParameterError) as ei:
        gen.BoxParams.from_dict({"width": value})
    assert ei.value.field == "width"
    assert ei.value.value == value
    assert str(ei.value).startswith("width:")


def test_invalid_parameter_is_a_value_error():
    assert issubclass(gen.InvalidParameterError, ValueError)


def test_validate_params():
    p = gen.BoxParams(kerf=0.0)
    assert gen.validate_params(p) is p
    with pytest.raises(gen.InvalidParameterError) as ei:
        gen.validate_params(gen.BoxParams(thickness=0.0))
    assert ei.value.field == "thickness"
    assert ei.value.reason == "must be > 0"


def test_coerce_params():
    p = gen.BoxParams()
    assert gen.coerce_params(p) is p
    assert gen.coerce_params({"width": 81}) == gen.BoxParams(width=81.0)
    with pytest.raises(TypeError):
        gen.coerce_params([("width", 81)])
    with pytest.raises(TypeError):
        gen.BoxParams.from_dict("width=81")


def test_bottom_depth_never_below_one():
    assert gen.BoxParams(depth=6.0, thickness=3.0).bottom_depth == 1.0
    assert gen.BoxParams(depth=100.0, thickness=3.0).bottom_depth == 94.0


def test_edge_roles():
    roles = gen.EdgeRoles(top=gen.EdgeRole.MALE)
    assert roles.role("top") == "male"
    assert roles.as_dict() == {"top": "male", "right": "plain", "bottom": "plain", "left": "plain"}
    assert gen.EdgeRoles.uniform(gen.EdgeRole.FEMALE).left == "female"
    with pytest.raises(ValueError):
        gen.EdgeRoles(top="tongue")
    with pytest.raises(ValueError):
        roles.role("front")


def test_mating_edges_pair_male_with_female():
    for (m_name, m_side), (f_name, f_side) in gen.MATING_EDGES:
        assert gen.PANEL_EDGES[m_name].role(m_side) == gen.EdgeRole.MALE
        assert gen.PANEL_EDGES[f_name].role(f_side) == gen.EdgeRole.FEMALE
    assert len({pair[1] for pair in gen.MATING_EDGES}) == len(gen.MATING_EDGES)


@pytest.mark.parametrize("value", ["no", 1, None])
def test_validate_params_rejects_non_bool_hole_flag(value):
    with pytest.raises(gen.InvalidParameterError) as ei:
        gen.validate_params(gen.BoxParams(add_right_hole=value))
    assert ei.value.field == "add_right_hole"


def test_builder_rejects_non_bool_hole_flag(counting_kernel):
    with pytest.raises(gen.InvalidParameterError):
        gen.BoxModelBuilder(counting_kernel).build(gen.BoxParams(add_right_hole="no"))
    assert sum(counting_kernel.calls.values()) == 0
