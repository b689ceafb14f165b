"""Expression list, viewport geometry and curve sampling behind the graphing window."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator
from dataclasses import dataclass, field

from plotcalc.evaluator import evaluate
from plotcalc.parser import ASTNode, ParseError, parse

logger = logging.getLogger(__name__)

Color = tuple[int, int, int, int]

WINDOW_WIDTH = 1200
WINDOW_HEIGHT = 800
LEFT_PANEL_WIDTH = 350
HEADER_HEIGHT = 60
EXPRESSION_HEIGHT = 50
EXPRESSION_MARGIN = 8

GRAPH_X = LEFT_PANEL_WIDTH + 20
GRAPH_Y = HEADER_HEIGHT + 20
GRAPH_WIDTH = WINDOW_WIDTH - LEFT_PANEL_WIDTH - 40
GRAPH_HEIGHT = WINDOW_HEIGHT - HEADER_HEIGHT - 40

INPUT_LIMIT = 255
LABEL_LIMIT = 35
DEFAULT_SAMPLES = 1000
ZOOM_FACTOR = 0.75
DEFAULT_RANGE = (-10.0, 10.0)

EXPRESSION_COLORS: tuple[Color, ...] = (
    (194, 48, 48, 255),
    (31, 120, 180, 255),
    (51, 160, 44, 255),
    (227, 26, 28, 255),
    (255, 127, 0, 255),
    (106, 61, 154, 255),
    (177, 89, 40, 255),
    (166, 206, 227, 255),
)


@dataclass
class Expression:
    """One entry of the expression list and its parsed tree."""

    text: str
    color: Color
    is_active: bool = False
    is_visible: bool = True
    ast: ASTNode | None = None


@dataclass
class Viewport:
    """A world rectangle mapped onto a rectangle of screen pixels."""

    x_min: float = DEFAULT_RANGE[0]
    x_max: float = DEFAULT_RANGE[1]
    y_min: float = DEFAULT_RANGE[0]
    y_max: float = DEFAULT_RANGE[1]
    screen_x: int = GRAPH_X
    screen_y: int = GRAPH_Y
    screen_w: int = GRAPH_WIDTH
    screen_h: int = GRAPH_HEIGHT

    def screen_to_world_x(self, px: float) -> float:
        return self.x_min + (px - self.screen_x) / self.screen_w * (self.x_max - self.x_min)

    def world_to_screen_x(self, wx: float) -> int:
        frac = (wx - self.x_min) / (self.x_max - self.x_min)
        return self.screen_x + int(frac * self.screen_w)

    def screen_to_world_y(self, py: float) -> float:
        frac = (self.screen_y + self.screen_h - py) / self.screen_h
        return self.y_min + frac * (self.y_max - self.y_min)

    def world_to_screen_y(self, wy: float) -> int:
        frac = (wy - self.y_min) / (self.y_max - self.y_min)
        return self.screen_y + self.screen_h - int(frac * self.screen_h)

    def _scale(self, factor: float) -> None:
        xc = (self.x_min + self.x_max) / 2
        yc = (self.y_min + self.y_max) / 2
        xr = (self.x_max - self.x_min) * factor
        yr = (self.y_max - self.y_min) * factor
        self.x_min, self.x_max = xc - xr / 2, xc + xr / 2
        self.y_min, self.y_max = yc - yr / 2, yc + yr / 2

    def zoom_in(self) -> None:
        """Shrink both ranges around their centre."""
        self._scale(ZOOM_FACTOR)

    def zoom_out(self) -> None:
        """Grow both ranges around their centre."""
        self._scale(1 / ZOOM_FACTOR)

    def reset(self) -> None:
        """Return to the default world rectangle."""
        self.x_min, self.x_max = DEFAULT_RANGE
        self.y_min, self.y_max = DEFAULT_RANGE

    def pan(self, dx: float, dy: float) -> None:
        """Drag the view by a mouse movement given in screen pixels."""
        wx = dx / self.screen_w * (self.x_max - self.x_min)
        wy = -dy / self.screen_h * (self.y_max - self.y_min)
        self.x_min -= wx
        self.x_max -= wx
        self.y_min -= wy
        self.y_max -= wy


def parse_expression(expr: Expression) -> ASTNode | None:
    """Strip any left-hand side, parse the text and store the tree on expr."""
    expr.ast = None
    _, eq, rhs = expr.text.partition("=")
    if eq:
        expr.text = rhs
    if not expr.text or expr.text.endswith("("):
        return None
    try:
        expr.ast = parse(expr.text)
    except ParseError as exc:
        logger.error("Parse error in %r: %s", expr.text, exc)
        expr.ast = None
    return expr.ast


def close_parentheses(text: str, limit: int = INPUT_LIMIT) -> str:
    """Append ')' until parentheses balance or the text reaches limit."""
    missing = text.count("(") - text.count(")")
    room = max(limit - len(text), 0)
    return text + ")" * max(min(missing, room), 0)


def grid_values(low: float, high: float) -> Iterator[float]:
    """Yield the whole numbers in [low, high], leaving out zero."""
    start = float(math.ceil(low))
    k = 0
    while (value := start + k) <= high:
        if abs(value) >= 1e-6:
            yield value
        k += 1


def truncate_label(text: str) -> str:
    """Shorten a legend label, naming empty entries."""
    if not text:
        return "(empty)"
    if len(text) > LABEL_LIMIT:
        return text[:LABEL_LIMIT] + "..."
    return text


def sample_curve(
    ast: ASTNode, viewport: Viewport, num_points: int = DEFAULT_SAMPLES
) -> list[list[tuple[int, int]]]:
    """Sample y = f(x) across the view; return connected runs of screen points."""
    runs: list[list[tuple[int, int]]] = []
    current: list[tuple[int, int]] = []

    def finish() -> None:
        nonlocal current
        if len(current) >= 2:
            runs.append(current)
        current = []

    step = (viewport.x_max - viewport.x_min) / num_points
    for i in range(num_points + 1):
        wx = viewport.x_min + i * step
        try:
            wy = evaluate(ast, wx)
        except (ValueError, ArithmeticError):
            finish()
            continue
        if not math.isfinite(wy) or wy < viewport.y_min - 1 or wy > viewport.y_max + 1:
            finish()
            continue
        current.append((viewport.world_to_screen_x(wx), viewport.world_to_screen_y(wy)))
    finish()
    return runs


@dataclass
class Workspace:
    """The list of expressions, the one being edited and its input line."""

    expressions: list[Expression] = field(default_factory=list)
    active: int = -1
    buffer: str = ""
    last_expressions: list[str] = field(default_factory=list)
    viewport: Viewport = field(default_factory=Viewport)

    def __post_init__(self) -> None:
        if not self.expressions:
            self.expressions.append(Expression("", EXPRESSION_COLORS[0]))
            self.active = 0

    @property
    def active_expression(self) -> Expression | None:
        if 0 <= self.active < len(self.expressions):
            return self.expressions[self.active]
        return None

    def add_expression(self) -> Expression:
        """Append an empty expression, make it active and clear the input."""
        color = EXPRESSION_COLORS[len(self.expressions) % len(EXPRESSION_COLORS)]
        expr = Expression("", color)
        self.expressions.append(expr)
        self.active = len(self.expressions) - 1
        self.buffer = ""
        return expr

    def delete_expression(self, index: int) -> Expression:
        """Remove the expression at index and return it."""
        removed = self.expressions.pop(index)
        if self.active == index:
            self.active = index - 1 if self.expressions else -1
        if self.active >= len(self.expressions):
            self.active = len(self.expressions) - 1
        return removed

    def toggle_visibility(self, index: int) -> bool:
        """Flip whether the expression at index is drawn; return the new state."""
        expr = self.expressions[index]
        expr.is_visible = not expr.is_visible
        return expr.is_visible

    def select(self, index: int) -> None:
        """Make the expression at index active and load its text for editing."""
        self.active = index
        self.buffer = self.expressions[index].text[:INPUT_LIMIT]

    def type_text(self, text: str) -> None:
        """Append printable characters to the input line of the active expression."""
        expr = self.active_expression
        if expr is None:
            return
        for ch in text:
            if len(self.buffer) >= INPUT_LIMIT:
                break
            if 32 <= ord(ch) < 127:
                self.buffer += ch
                expr.text = self.buffer

    def backspace(self) -> None:
        """Remove the last character of the input line."""
        expr = self.active_expression
        if expr is None or not self.buffer:
            return
        self.buffer = self.buffer[:-1]
        expr.text = self.buffer

    def commit(self) -> ASTNode | None:
        """Balance parentheses, parse the active expression and return its tree."""
        expr = self.active_expression
        if expr is None:
            return None
        self.buffer = close_parentheses(self.buffer, INPUT_LIMIT)
        expr.text = self.buffer
        ast = parse_expression(expr)
        self.last_expressions = [e.text for e in self.expressions]
        return ast