# plotcalc

A small graphing calculator. Type expressions in `x` into the left panel,
press Enter, and the curves `y = f(x)` are drawn on a grid that you can pan
and zoom.

## Running

```
pip install .
plotcalc
```

The command takes no options apart from `--help`. Close the window or
press Escape to quit.

## Using the window

- The window opens with one empty row, ready for typing.
- Click **Add Expression** to add a row; the new row becomes the active one.
  Click a row to make it active and edit its text.
- Type an expression such as `sin(x)`, `2x^2 - 3`, `max(x, 0)` or `y = x^2`,
  then press Enter (or keypad Enter). Any left-hand side up to the first `=`
  is dropped. Parentheses left open are closed when you press Enter. Input
  is limited to 255 printable ASCII characters.
- The eye icon on a row hides or shows its curve, and the cross icon deletes
  the row.
- The **+**, **-** and **Reset** buttons under *Settings* zoom the view in,
  zoom it out (by a factor of 0.75 around the centre), or return it to
  -10..10 on both axes.
- Drag with the middle mouse button, or with left Ctrl held and the left
  button, to pan.
- A legend in the top right corner of the graph lists the visible
  expressions, cutting labels longer than 35 characters.

## Expressions

Numbers, `x`, and the constants `pi`, `e`, `tau`, `phi` and `gamma` are
understood; names are not case-sensitive. Writing two terms side by side
multiplies them (`2x`, `3(x+1)`, `(x+1)(x-1)`). Operators are `+ - * / ^`,
with `^` binding right to left, and unary `+` and `-`.

Functions, with angles in radians:

| Function | Meaning |
| --- | --- |
| `sin cos tan cot sec csc` | trigonometric functions |
| `sqrt abs sign floor ceil exp` | as usual |
| `round` | rounds halves away from zero |
| `log`, `ln` | natural logarithm of the first argument |
| `log10`, `log2` | logarithms to base 10 and 2 |
| `mod` | absolute value of the first argument |
| `pow(a, b)` | `a` to the power `b` |
| `atan2(y, x)` | angle of the point `(x, y)` |
| `max(...)`, `min(...)` | largest or smallest of any number of arguments |

The one-argument functions, `log` and `mod` among them, use only their
first argument and ignore any others.

Where a value is undefined (division by zero, `sqrt` of a negative number,
a logarithm of a non-positive number, `tan` at a pole and so on) that point
is left out of the curve, which is broken there.

## As a library

```python
from plotcalc.parser import parse, print_ast
from plotcalc.evaluator import evaluate

tree = parse("2x^2 + 1")
print(evaluate(tree, 3.0))  # 19.0
print_ast(tree)
```

- `plotcalc.parser` provides `tokenize`, `to_postfix`, `build_ast` and
  `parse`, the `Token`/`TokenType` and `ASTNode`/`NodeType` types, and
  `format_ast`/`print_ast` to show a tree. Malformed input raises
  `ParseError`.
- `plotcalc.evaluator.evaluate(node, x)` computes a tree's value and raises
  `EvaluationError` where the value is undefined or a name is unknown.
- `plotcalc.state` holds what the window works on: `Expression`, `Viewport`
  (coordinate mapping, `zoom_in`, `zoom_out`, `reset`, `pan`), `Workspace`
  (the expression list and its input line) and `sample_curve`, which
  returns the connected runs of screen points of a curve.

## What it does not do

Only explicit curves `y = f(x)` are plotted; equations in both `x` and `y`,
user-defined variables and functions are not supported. Expressions are not
saved between sessions.