"""The interactive graphing window: input handling, drawing and the entry point."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame  # noqa: E402

from plotcalc.state import (  # noqa: E402
    EXPRESSION_HEIGHT,
    EXPRESSION_MARGIN,
    GRAPH_HEIGHT,
    GRAPH_WIDTH,
    GRAPH_X,
    GRAPH_Y,
    HEADER_HEIGHT,
    LEFT_PANEL_WIDTH,
    WINDOW_HEIGHT,
    WINDOW_WIDTH,
    Color,
    Viewport,
    Workspace,
    grid_values,
    sample_curve,
    truncate_label,
)

TITLE = "Graphing Calculator"
FPS = 60
ROW_PITCH = EXPRESSION_HEIGHT + EXPRESSION_MARGIN
ROW_LEFT = 10
ROW_WIDTH = LEFT_PANEL_WIDTH - 20
SETTINGS_Y = WINDOW_HEIGHT - 200
ADD_BUTTON_LIMIT = WINDOW_HEIGHT - 100

DESMOS_BLUE: Color = (21, 101, 192, 255)
PANEL_BG: Color = (248, 249, 250, 255)
EXPRESSION_BG: Color = (255, 255, 255, 255)
BORDER_COLOR: Color = (228, 230, 235, 255)
TEXT_COLOR: Color = (55, 53, 47, 255)
PLACEHOLDER_COLOR: Color = (156, 163, 175, 255)
GRAPH_BG: Color = (255, 255, 255, 255)
GRID_COLOR: Color = (230, 230, 230, 255)
AXIS_COLOR: Color = (180, 180, 180, 255)
LEGEND_BG: Color = (240, 240, 240, 200)
WHITE: Color = (255, 255, 255, 255)
BACKGROUND: Color = (245, 245, 245, 255)

_Rect = tuple[float, float, float, float]

_ZOOM_IN_RECT: _Rect = (80, SETTINGS_Y + 35, 25, 25)
_ZOOM_OUT_RECT: _Rect = (110, SETTINGS_Y + 35, 25, 25)
_RESET_RECT: _Rect = (140, SETTINGS_Y + 35, 50, 25)


def _contains(rect: _Rect, x: float, y: float) -> bool:
    """Point-in-rectangle test with the right and bottom edges excluded."""
    left, top, width, height = rect
    return left <= x < left + width and top <= y < top + height


def _over(x: float, y: float, left: float, top: float, width: float, height: float) -> bool:
    """Point-in-rectangle test with all edges included."""
    return left <= x <= left + width and top <= y <= top + height


def _eye_rect(row_top: int) -> _Rect:
    return (LEFT_PANEL_WIDTH - 40, row_top + 10, 30, 30)


def _delete_rect(row_top: int) -> _Rect:
    return (LEFT_PANEL_WIDTH - 70, row_top + 10, 25, 30)


def add_button_top(count: int) -> int:
    """Top edge of the row slot after count expressions, where the add button sits."""
    return HEADER_HEIGHT + 20 + count * ROW_PITCH


def row_index_at(x: float, y: float, count: int) -> int | None:
    """Index of the expression row under the point, or None."""
    if not ROW_LEFT <= x <= LEFT_PANEL_WIDTH - 10:
        return None
    for index in range(count):
        top = add_button_top(index)
        if top <= y <= top + EXPRESSION_HEIGHT:
            return index
    return None


def icon_hit(x: float, y: float, count: int) -> tuple[str, int] | None:
    """Which row icon is under the point: ('visibility', i), ('delete', i) or None."""
    for index in range(count):
        top = add_button_top(index)
        if _contains(_eye_rect(top), x, y):
            return ("visibility", index)
        if _contains(_delete_rect(top), x, y):
            return ("delete", index)
    return None


def _add_button_hit(x: float, y: float, count: int) -> bool:
    top = add_button_top(count)
    return top < ADD_BUTTON_LIMIT and _over(x, y, ROW_LEFT, top, ROW_WIDTH, EXPRESSION_HEIGHT)


@dataclass
class _PanState:
    dragging: bool = False
    last: tuple[int, int] = (0, 0)


class _Fonts:
    """Fonts cached by pixel size."""

    def __init__(self) -> None:
        self._cache: dict[int, pygame.font.Font] = {}

    def __call__(self, size: int) -> pygame.font.Font:
        font = self._cache.get(size)
        if font is None:
            font = pygame.font.Font(None, size + 6)
            self._cache[size] = font
        return font


def _text(surface: pygame.Surface, fonts: _Fonts, text: str, x: float, y: float,
          size: int, color: Color) -> None:
    surface.blit(fonts(size).render(text, True, color), (int(x), int(y)))


def _text_width(fonts: _Fonts, text: str, size: int) -> int:
    return fonts(size).size(text)[0]


def _rounded(surface: pygame.Surface, rect: _Rect, color: Color, width: int = 0) -> None:
    left, top, w, h = rect
    radius = max(int(min(w, h) * 0.2), 2)
    pygame.draw.rect(surface, color, pygame.Rect(int(left), int(top), int(w), int(h)),
                     width, border_radius=radius)


def _handle_pan(viewport: Viewport, pan: _PanState, mouse: tuple[int, int]) -> None:
    buttons = pygame.mouse.get_pressed()
    keys = pygame.key.get_pressed()
    if buttons[1] or (buttons[0] and keys[pygame.K_LCTRL]):
        if not pan.dragging:
            pan.dragging = True
        else:
            viewport.pan(mouse[0] - pan.last[0], mouse[1] - pan.last[1])
        pan.last = mouse
    else:
        pan.dragging = False


def _handle_click(workspace: Workspace, x: int, y: int) -> None:
    viewport = workspace.viewport
    if _contains(_ZOOM_IN_RECT, x, y):
        viewport.zoom_in()
    elif _contains(_ZOOM_OUT_RECT, x, y):
        viewport.zoom_out()
    elif _contains(_RESET_RECT, x, y):
        viewport.reset()

    selected = row_index_at(x, y, len(workspace.expressions))
    if selected is not None:
        workspace.select(selected)

    hit = icon_hit(x, y, len(workspace.expressions))
    if hit is not None:
        kind, index = hit
        if kind == "visibility":
            workspace.toggle_visibility(index)
        else:
            workspace.delete_expression(index)

    if _add_button_hit(x, y, len(workspace.expressions)):
        workspace.add_expression()


def _draw_header(surface: pygame.Surface, fonts: _Fonts) -> None:
    pygame.draw.rect(surface, DESMOS_BLUE, pygame.Rect(0, 0, WINDOW_WIDTH, HEADER_HEIGHT))
    _text(surface, fonts, TITLE, 20, 20, 24, WHITE)
    pygame.draw.line(surface, BORDER_COLOR, (0, HEADER_HEIGHT), (WINDOW_WIDTH, HEADER_HEIGHT))


def _draw_eye(surface: pygame.Surface, rect: _Rect, visible: bool) -> None:
    left, top, _, _ = rect
    box = pygame.Rect(int(left + 5), int(top + 9), 20, 12)
    pygame.draw.ellipse(surface, TEXT_COLOR, box, 2)
    if visible:
        pygame.draw.circle(surface, TEXT_COLOR, box.center, 3)
    else:
        pygame.draw.line(surface, TEXT_COLOR, (box.left, box.bottom + 2), (box.right, box.top - 2), 2)


def _draw_delete(surface: pygame.Surface, rect: _Rect) -> None:
    left, top, _, _ = rect
    x0, y0 = int(left + 6), int(top + 9)
    pygame.draw.line(surface, TEXT_COLOR, (x0, y0), (x0 + 12, y0 + 12), 2)
    pygame.draw.line(surface, TEXT_COLOR, (x0, y0 + 12), (x0 + 12, y0), 2)


def _draw_add_button(surface: pygame.Surface, fonts: _Fonts, top: int, mouse: tuple[int, int]) -> None:
    color = DESMOS_BLUE
    if _over(mouse[0], mouse[1], ROW_LEFT, top, ROW_WIDTH, EXPRESSION_HEIGHT):
        color = (int(color[0] * 0.9), int(color[1] * 0.9), int(color[2] * 0.9), color[3])
    _rounded(surface, (ROW_LEFT, top, ROW_WIDTH, EXPRESSION_HEIGHT), color)
    label = "Add Expression"
    width = _text_width(fonts, label, 18)
    _text(surface, fonts, label, ROW_LEFT + (ROW_WIDTH - width) // 2, top + 15, 18, WHITE)


def _draw_left_panel(surface: pygame.Surface, fonts: _Fonts, workspace: Workspace,
                     mouse: tuple[int, int]) -> None:
    pygame.draw.rect(surface, PANEL_BG,
                     pygame.Rect(0, HEADER_HEIGHT, LEFT_PANEL_WIDTH, WINDOW_HEIGHT - HEADER_HEIGHT))
    pygame.draw.line(surface, BORDER_COLOR, (LEFT_PANEL_WIDTH, HEADER_HEIGHT),
                     (LEFT_PANEL_WIDTH, WINDOW_HEIGHT))
    mx, my = mouse

    for index, expr in enumerate(workspace.expressions):
        top = add_button_top(index)
        row = (ROW_LEFT, top, ROW_WIDTH, EXPRESSION_HEIGHT)
        hover = _over(mx, my, *row)
        active = workspace.active == index
        _rounded(surface, row, WHITE if active or hover else EXPRESSION_BG)
        if active or hover:
            _rounded(surface, row, BORDER_COLOR, 1)

        pygame.draw.circle(surface, expr.color, (25, top + EXPRESSION_HEIGHT // 2), 8)
        if expr.text:
            _text(surface, fonts, expr.text, 45, top + 15, 18, TEXT_COLOR)
        else:
            _text(surface, fonts, "Enter an equation...", 45, top + 15, 18, PLACEHOLDER_COLOR)

        eye = _eye_rect(top)
        if _contains(eye, mx, my):
            _rounded(surface, eye, BORDER_COLOR)
        _draw_eye(surface, eye, expr.is_visible)

        delete = _delete_rect(top)
        if _contains(delete, mx, my):
            _rounded(surface, delete, BORDER_COLOR)
        _draw_delete(surface, delete)

    _draw_add_button(surface, fonts, add_button_top(len(workspace.expressions)), mouse)

    pygame.draw.line(surface, BORDER_COLOR, (10, SETTINGS_Y), (LEFT_PANEL_WIDTH - 10, SETTINGS_Y))
    _text(surface, fonts, "Settings", 20, SETTINGS_Y + 10, 16, TEXT_COLOR)
    _text(surface, fonts, "Zoom:", 20, SETTINGS_Y + 40, 14, TEXT_COLOR)
    for rect, label, dx, size in (
        (_ZOOM_IN_RECT, "+", 8, 16),
        (_ZOOM_OUT_RECT, "-", 9, 16),
        (_RESET_RECT, "Reset", 8, 12),
    ):
        _rounded(surface, rect, BORDER_COLOR if _contains(rect, mx, my) else EXPRESSION_BG)
        _text(surface, fonts, label, rect[0] + dx, rect[1] + 5, size, TEXT_COLOR)


def _draw_grid(surface: pygame.Surface, fonts: _Fonts, viewport: Viewport) -> None:
    bottom = GRAPH_Y + GRAPH_HEIGHT
    right = GRAPH_X + GRAPH_WIDTH
    xs = list(grid_values(viewport.x_min, viewport.x_max))
    ys = list(grid_values(viewport.y_min, viewport.y_max))

    for x in xs:
        sx = viewport.world_to_screen_x(x)
        pygame.draw.line(surface, GRID_COLOR, (sx, GRAPH_Y), (sx, bottom))
    for y in ys:
        sy = viewport.world_to_screen_y(y)
        pygame.draw.line(surface, GRID_COLOR, (GRAPH_X, sy), (right, sy))

    zero_x = viewport.world_to_screen_x(0)
    zero_y = viewport.world_to_screen_y(0)
    if GRAPH_X <= zero_x <= right:
        pygame.draw.line(surface, AXIS_COLOR, (zero_x, GRAPH_Y), (zero_x, bottom))
    if GRAPH_Y <= zero_y <= bottom:
        pygame.draw.line(surface, AXIS_COLOR, (GRAPH_X, zero_y), (right, zero_y))

    offset, size = 5, 12
    for x in xs:
        label = f"{x:.0f}"
        sx = viewport.world_to_screen_x(x)
        _text(surface, fonts, label, sx - _text_width(fonts, label, size) // 2,
              zero_y + offset, size, TEXT_COLOR)
    for y in ys:
        sy = viewport.world_to_screen_y(y)
        _text(surface, fonts, f"{y:.0f}", zero_x + offset, sy - size // 2, size, TEXT_COLOR)


def _draw_legend(surface: pygame.Surface, fonts: _Fonts, workspace: Workspace) -> None:
    expressions = workspace.expressions
    if not expressions:
        return
    left = GRAPH_X + GRAPH_WIDTH - 310
    top = GRAPH_Y + 10
    width = 300
    height = len(expressions) * (EXPRESSION_HEIGHT // 2) + 20
    panel = pygame.Surface((width, height), pygame.SRCALPHA)
    panel.fill(LEGEND_BG)
    surface.blit(panel, (left, top))
    pygame.draw.rect(surface, BORDER_COLOR, pygame.Rect(left, top, width, height), 1)

    y = top + 10
    for expr in expressions:
        if not expr.is_visible:
            continue
        pygame.draw.rect(surface, expr.color, pygame.Rect(left + 10, y + 5, 20, 20))
        _text(surface, fonts, truncate_label(expr.text), left + 40, y + 10, 16, TEXT_COLOR)
        y += EXPRESSION_HEIGHT // 2


def _draw_graph_area(surface: pygame.Surface, fonts: _Fonts, workspace: Workspace) -> None:
    viewport = workspace.viewport
    viewport.screen_x, viewport.screen_y = GRAPH_X, GRAPH_Y
    viewport.screen_w, viewport.screen_h = GRAPH_WIDTH, GRAPH_HEIGHT

    area = pygame.Rect(GRAPH_X, GRAPH_Y, GRAPH_WIDTH, GRAPH_HEIGHT)
    pygame.draw.rect(surface, GRAPH_BG, area)
    pygame.draw.rect(surface, BORDER_COLOR, area, 1)
    _draw_grid(surface, fonts, viewport)

    for expr in workspace.expressions:
        if not expr.is_visible or expr.ast is None:
            continue
        for run in sample_curve(expr.ast, viewport):
            pygame.draw.lines(surface, expr.color, False, run, 3)

    _draw_legend(surface, fonts, workspace)


def run_ui() -> None:
    """Open the graphing window and run it until it is closed."""
    pygame.init()
    try:
        screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        pygame.display.set_caption(TITLE)
        clock = pygame.time.Clock()
        fonts = _Fonts()
        workspace = Workspace()
        pan = _PanState()
        pygame.key.start_text_input()

        running = True
        while running:
            clicked = False
            typed: list[str] = []
            backspace = enter = False
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    clicked = True
                elif event.type == pygame.TEXTINPUT:
                    typed.append(event.text)
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_BACKSPACE:
                        backspace = True
                    elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                        enter = True
            if not running:
                break

            mouse = pygame.mouse.get_pos()
            _handle_pan(workspace.viewport, pan, mouse)
            if clicked:
                _handle_click(workspace, *mouse)

            if workspace.active_expression is not None:
                workspace.type_text("".join(typed))
                if backspace:
                    workspace.backspace()
                if enter:
                    workspace.commit()

            screen.fill(BACKGROUND)
            _draw_header(screen, fonts)
            _draw_left_panel(screen, fonts, workspace, mouse)
            _draw_graph_area(screen, fonts, workspace)
            pygame.display.flip()
            clock.tick(FPS)
    finally:
        pygame.quit()


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point: start the graphing window."""
    parser = argparse.ArgumentParser(prog="plotcalc", description="Interactive graphing calculator.")
    parser.parse_args(argv)
    run_ui()
    return 0