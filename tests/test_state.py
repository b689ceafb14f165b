import pytest

from plotcalc.evaluator import evaluate
from plotcalc.parser import parse
from plotcalc.state import (
    EXPRESSION_COLORS,
    INPUT_LIMIT,
    Expression,
    Viewport,
    Workspace,
    close_parentheses,
    grid_values,
    parse_expression,
    sample_curve,
    truncate_label,
)


def test_viewport_corners_map_to_screen_edges():
    vp = Viewport()
    assert vp.world_to_screen_x(vp.x_min) == vp.screen_x
    assert vp.world_to_screen_x(vp.x_max) == vp.screen_x + vp.screen_w
    assert vp.world_to_screen_y(vp.y_min) == vp.screen_y + vp.screen_h
    assert vp.world_to_screen_y(vp.y_max) == vp.screen_y


def test_screen_to_world_round_trip():
    vp = Viewport()
    assert vp.screen_to_world_x(vp.screen_x) == pytest.approx(vp.x_min)
    assert vp.screen_to_world_y(vp.screen_y) == pytest.approx(vp.y_max)
    for wx in (-7.5, 0.0, 3.25):
        assert vp.screen_to_world_x(vp.world_to_screen_x(wx)) == pytest.approx(wx, abs=0.05)
        assert vp.screen_to_world_y(vp.world_to_screen_y(wx)) == pytest.approx(wx, abs=0.05)


def test_zoom_in_keeps_centre_and_shrinks_range():
    vp = Viewport(x_min=-4, x_max=8, y_min=0, y_max=10)
    vp.zoom_in()
    assert (vp.x_min + vp.x_max) / 2 == pytest.approx(2)
    assert vp.x_max - vp.x_min == pytest.approx(12 * 0.75)
    assert vp.y_max - vp.y_min == pytest.approx(10 * 0.75)


def test_zoom_out_undoes_zoom_in():
    vp = Viewport(x_min=-4, x_max=8, y_min=0, y_max=10)
    vp.zoom_in()
    vp.zoom_out()
    assert (vp.x_min, vp.x_max, vp.y_min, vp.y_max) == pytest.approx((-4, 8, 0, 10))


def test_pan_and_reset():
    vp = Viewport()
    vp.pan(vp.screen_w, vp.screen_h)
    assert vp.x_min == pytest.approx(-10 - 20)
    assert vp.y_min == pytest.approx(-10 + 20)
    assert vp.x_max - vp.x_min == pytest.approx(20)
    vp.reset()
    assert (vp.x_min, vp.x_max, vp.y_min, vp.y_max) == (-10, 10, -10, 10)


def test_workspace_starts_with_one_active_empty_expression():
    ws = Workspace()
    assert len(ws.expressions) == 1
    assert ws.active == 0
    assert ws.expressions[0].text == ""
    assert ws.expressions[0].color == EXPRESSION_COLORS[0]
    assert ws.expressions[0].is_visible


def test_add_expression_cycles_colors_and_activates():
    ws = Workspace()
    for _ in range(len(EXPRESSION_COLORS)):
        ws.add_expression()
    assert ws.expressions[1].color == EXPRESSION_COLORS[1]
    assert ws.expressions[len(EXPRESSION_COLORS)].color == EXPRESSION_COLORS[0]
    assert ws.active == len(ws.expressions) - 1
    assert ws.buffer == ""


def test_type_text_filters_and_limits():
    ws = Workspace()
    ws.type_text("\tx^2\n")
    assert ws.expressions[0].text == "x^2"
    ws.type_text("a" * 400)
    assert len(ws.buffer) == INPUT_LIMIT
    assert ws.expressions[0].text == ws.buffer


def test_backspace_removes_last_character():
    ws = Workspace()
    ws.type_text("x+1")
    ws.backspace()
    assert ws.expressions[0].text == "x+"
    ws.backspace()
    ws.backspace()
    ws.backspace()
    assert ws.buffer == ""


def test_commit_closes_parentheses_and_parses():
    ws = Workspace()
    ws.type_text("sin(x")
    ast = ws.commit()
    assert ws.expressions[0].text == "sin(x)"
    assert evaluate(ast, 0.0) == 0.0
    assert ws.last_expressions == ["sin(x)"]


def test_commit_strips_left_hand_side():
    ws = Workspace()
    ws.type_text("y=2x")
    ast = ws.commit()
    assert ws.expressions[0].text == "2x"
    assert evaluate(ast, 3.0) == 6.0


def test_commit_of_invalid_text_leaves_no_tree():
    ws = Workspace()
    ws.type_text("(")
    assert ws.commit() is None
    assert ws.expressions[0].ast is None
    ws.backspace()
    ws.backspace()
    assert ws.commit() is None


def test_select_loads_text_for_editing():
    ws = Workspace()
    ws.type_text("x")
    ws.add_expression()
    ws.select(0)
    assert ws.active == 0
    ws.type_text("+1")
    assert ws.expressions[0].text == "x+1"
    assert ws.expressions[1].text == ""


def test_delete_active_moves_to_previous():
    ws = Workspace()
    ws.add_expression()
    ws.add_expression()
    removed = ws.delete_expression(2)
    assert removed.color == EXPRESSION_COLORS[2]
    assert ws.active == 1
    assert len(ws.expressions) == 2


def test_delete_last_leaves_no_active_and_ignores_typing():
    ws = Workspace()
    ws.delete_expression(0)
    assert ws.active == -1
    ws.type_text("x")
    assert ws.commit() is None
    assert ws.expressions == []


def test_toggle_visibility():
    ws = Workspace()
    assert ws.toggle_visibility(0) is False
    assert ws.expressions[0].is_visible is False
    assert ws.toggle_visibility(0) is True


def test_parse_expression_on_expression():
    expr = Expression("f(x)=x^2", EXPRESSION_COLORS[0])
    ast = parse_expression(expr)
    assert expr.text == "x^2"
    assert evaluate(ast, 3.0) == 9.0
    trailing = Expression("sin(", EXPRESSION_COLORS[0])
    assert parse_expression(trailing) is None


def test_close_parentheses():
    assert close_parentheses("((x", 255) == "((x))"
    assert close_parentheses("x)", 255) == "x)"
    assert close_parentheses("(((", 4) == "((()"


def test_grid_values_skip_zero():
    assert list(grid_values(-2.5, 2.5)) == [-2.0, -1.0, 1.0, 2.0]
    assert list(grid_values(0.5, 0.9)) == []


def test_truncate_label():
    assert truncate_label("") == "(empty)"
    assert truncate_label("x^2") == "x^2"
    long_text = "x+" * 30
    assert truncate_label(long_text) == long_text[:35] + "..."


def test_sample_curve_identity_is_one_run():
    vp = Viewport()
    runs = sample_curve(parse("x"), vp, 1000)
    assert len(runs) == 1
    assert len(runs[0]) == 1001
    xs = [p[0] for p in runs[0]]
    assert xs == sorted(xs)


def test_sample_curve_breaks_at_pole():
    vp = Viewport()
    runs = sample_curve(parse("1/x"), vp, 1000)
    assert len(runs) == 2
    zero = vp.world_to_screen_x(0)
    assert all(p[0] < zero for p in runs[0])
    assert all(p[0] > zero for p in runs[1])


def test_sample_curve_skips_undefined_points():
    vp = Viewport()
    runs = sample_curve(parse("sqrt(x)"), vp, 100)
    zero = vp.world_to_screen_x(0)
    assert len(runs) == 1
    assert all(p[0] >= zero for p in runs[0])