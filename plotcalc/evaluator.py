"""Numeric evaluation of expression syntax trees at a given x."""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence

from plotcalc.parser import ASTNode, NodeType

_EPSILON = 1e-12

_CONSTANTS = {
    "pi": math.pi,
    "e": math.e,
    "tau": 2 * math.pi,
    "phi": 1.61803398875,
    "gamma": 0.5772156649,
}


class EvaluationError(ValueError):
    """Raised when an expression has no value at the requested point."""


def _safe(fn: Callable[..., float], *args: float) -> float:
    """Apply a math function with IEEE results instead of exceptions."""
    try:
        return fn(*args)
    except ValueError:
        return math.nan
    except OverflowError:
        return math.inf


def _is_odd_integer(value: float) -> bool:
    return math.isfinite(value) and value == math.floor(value) and value % 2 == 1


def _pow(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        if base == 0:
            # Pole: zero raised to a negative power.
            if _is_odd_integer(exponent):
                return math.copysign(math.inf, base)
            return math.inf
        return math.nan


def _floor(value: float) -> float:
    if not math.isfinite(value):
        return value
    return math.copysign(float(math.floor(value)), value) if value == 0 else float(math.floor(value))


def _ceil(value: float) -> float:
    if not math.isfinite(value):
        return value
    result = float(math.ceil(value))
    return math.copysign(result, value) if result == 0 else result


def _round_half_away(value: float) -> float:
    if not math.isfinite(value):
        return value
    magnitude = abs(value)
    whole = math.floor(magnitude)
    if magnitude - whole >= 0.5:
        whole += 1
    return math.copysign(float(whole), value)


def _reciprocal(value: float) -> float:
    if value == 0:
        return math.copysign(math.inf, value)
    return 1.0 / value


def _degrees_mod_180(radians: float) -> float:
    return _safe(math.fmod, radians * 180.0 / math.pi, 180.0)


def _tan(a: float) -> float:
    if abs(_degrees_mod_180(a) - 90.0) < _EPSILON:
        raise EvaluationError("tan undefined at 90 + k*180 degrees")
    return _safe(math.tan, a)


def _cot(a: float) -> float:
    if abs(_degrees_mod_180(a)) < _EPSILON:
        raise EvaluationError("cot undefined at k*180 degrees")
    return _reciprocal(_safe(math.tan, a))


def _sec(a: float) -> float:
    cosine = _safe(math.cos, a)
    if abs(cosine) < _EPSILON:
        raise EvaluationError("sec undefined at 90 + k*180 degrees")
    return _reciprocal(cosine)


def _csc(a: float) -> float:
    sine = _safe(math.sin, a)
    if abs(sine) < _EPSILON:
        raise EvaluationError("csc undefined at k*180 degrees")
    return _reciprocal(sine)


def _sqrt(a: float) -> float:
    if a < 0:
        raise EvaluationError("sqrt of negative")
    return _safe(math.sqrt, a)


def _logarithm(fn: Callable[[float], float], label: str) -> Callable[[float], float]:
    def apply(a: float) -> float:
        if a <= 0:
            raise EvaluationError(f"{label} of non-positive")
        return _safe(fn, a)

    return apply


def _sign(a: float) -> float:
    return float((a > 0) - (a < 0))


_Function = Callable[[str, Sequence[float]], float]


def _first_argument(fn: Callable[[float], float]) -> _Function:
    """Wrap a one-argument function; extra arguments are ignored."""

    def apply(name: str, args: Sequence[float]) -> float:
        if not args:
            raise EvaluationError(f"{name} needs an argument")
        return fn(args[0])

    return apply


def _pow_function(name: str, args: Sequence[float]) -> float:
    if len(args) != 2:
        raise EvaluationError("pow requires 2 args")
    return _pow(args[0], args[1])


def _atan2_function(name: str, args: Sequence[float]) -> float:
    if len(args) != 2:
        raise EvaluationError("atan2 needs 2 args")
    return math.atan2(args[0], args[1])


def _max_function(name: str, args: Sequence[float]) -> float:
    if not args:
        raise EvaluationError("max needs args")
    best, *rest = args
    for value in rest:
        if best < value:
            best = value
    return best


def _min_function(name: str, args: Sequence[float]) -> float:
    if not args:
        raise EvaluationError("min needs args")
    best, *rest = args
    for value in rest:
        if value < best:
            best = value
    return best


_FUNCTIONS: dict[str, _Function] = {
    "sin": _first_argument(lambda a: _safe(math.sin, a)),
    "cos": _first_argument(lambda a: _safe(math.cos, a)),
    "tan": _first_argument(_tan),
    "cot": _first_argument(_cot),
    "sec": _first_argument(_sec),
    "csc": _first_argument(_csc),
    "sqrt": _first_argument(_sqrt),
    # "mod" shares the one-argument absolute value; its second argument is ignored.
    "abs": _first_argument(abs),
    "mod": _first_argument(abs),
    "sign": _first_argument(_sign),
    "floor": _first_argument(_floor),
    "ceil": _first_argument(_ceil),
    "round": _first_argument(_round_half_away),
    # "log" is the natural logarithm of its first argument, whatever follows.
    "log": _first_argument(_logarithm(math.log, "log")),
    "ln": _first_argument(_logarithm(math.log, "log")),
    "log10": _first_argument(_logarithm(math.log10, "log10")),
    "log2": _first_argument(_logarithm(math.log2, "log2")),
    "exp": _first_argument(lambda a: _safe(math.exp, a)),
    "pow": _pow_function,
    "atan2": _atan2_function,
    "max": _max_function,
    "min": _min_function,
}


def _number(text: str) -> float:
    try:
        return float(text)
    except ValueError:
        raise EvaluationError(f"Invalid number: {text}") from None


def _variable(name: str, x: float) -> float:
    key = name.lower()
    if key == "x":
        return x
    try:
        return _CONSTANTS[key]
    except KeyError:
        raise EvaluationError(f"Unknown variable: {name}") from None


def _unary(node: ASTNode, x: float) -> float:
    child = evaluate(node.children[0], x)
    if node.value == "-":
        return -child
    if node.value == "+":
        return child
    raise EvaluationError(f"Unknown unary operator: {node.value}")


def _binary(node: ASTNode, x: float) -> float:
    left = evaluate(node.children[0], x)
    right = evaluate(node.children[1], x)
    op = node.value

    if op == "+":
        return left + right
    if op == "-":
        return left - right
    if op == "*":
        return left * right
    if op == "/":
        if abs(right) < _EPSILON:
            raise EvaluationError("Divide by zero")
        return left / right
    if op == "^":
        if left == 0 and right < 0:
            raise EvaluationError("Zero to negative power")
        if left < 0 and _floor(right) != right:
            raise EvaluationError("Negative base with non-integer exponent")
        return _pow(left, right)
    raise EvaluationError(f"Unknown binary operator: {op}")


def _call(node: ASTNode, x: float) -> float:
    name = node.value.lower()
    args = [evaluate(arg, x) for arg in node.children]
    function = _FUNCTIONS.get(name)
    if function is None:
        raise EvaluationError(f"Unknown function: {name}")
    return function(name, args)


def evaluate(node: ASTNode | None, x: float) -> float:
    """Compute the value of a syntax tree with the variable x bound to x."""
    if node is None:
        raise EvaluationError("Null node in AST")

    if node.type is NodeType.NUMBER:
        return _number(node.value)
    if node.type is NodeType.VARIABLE:
        return _variable(node.value, x)
    if node.type is NodeType.UNARY_OP:
        return _unary(node, x)
    if node.type is NodeType.BINARY_OP:
        return _binary(node, x)
    if node.type is NodeType.FUNCTION:
        return _call(node, x)
    raise EvaluationError("Unsupported AST node type.")