"""Tokenizer, shunting-yard conversion and syntax-tree builder for expressions."""

from __future__ import annotations

import logging
import re
import string
from dataclasses import dataclass, field
from enum import Enum, IntEnum

logger = logging.getLogger(__name__)

_DIGITS = frozenset(string.digits)
_LETTERS = frozenset(string.ascii_letters)
_SPACES = frozenset(" \t\n\r\v\f")
_FUNCTION_CALL = re.compile(r"(\w+)@(\d+)", re.ASCII)


class ParseError(ValueError):
    """Raised when an expression cannot be turned into a syntax tree."""


class TokenType(Enum):
    NUMBER = 0
    IDENTIFIER = 1
    PLUS = 2
    MINUS = 3
    STAR = 4
    SLASH = 5
    CARET = 6
    LPAREN = 7
    RPAREN = 8
    EQUAL = 9
    COMMA = 10
    END_OF_INPUT = 11
    INVALID = 12
    UMINUS = 13
    UPLUS = 14


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str


class NodeType(IntEnum):
    NUMBER = 0
    VARIABLE = 1
    BINARY_OP = 2
    FUNCTION = 3
    UNARY_OP = 4


@dataclass
class ASTNode:
    """A node of the syntax tree: a number, variable, operator or function call."""

    type: NodeType
    value: str
    children: list[ASTNode] = field(default_factory=list)


_SYMBOLS = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "^": TokenType.CARET,
    "=": TokenType.EQUAL,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ",": TokenType.COMMA,
}

_BINARY_OPERATORS = frozenset(
    {TokenType.PLUS, TokenType.MINUS, TokenType.STAR, TokenType.SLASH, TokenType.CARET}
)

_PRECEDENCE = {
    TokenType.CARET: 3,
    TokenType.STAR: 2,
    TokenType.SLASH: 2,
    TokenType.PLUS: 1,
    TokenType.MINUS: 1,
}

_MULTIPLICAND_TYPES = frozenset({TokenType.NUMBER, TokenType.IDENTIFIER, TokenType.RPAREN})


def _is_operator(token_type: TokenType) -> bool:
    return token_type in _BINARY_OPERATORS


def _precedence(token_type: TokenType) -> int:
    return _PRECEDENCE.get(token_type, 0)


def _needs_implicit_star(prev: Token, ch: str) -> bool:
    if prev.type not in _MULTIPLICAND_TYPES:
        return False
    if not (ch in _DIGITS or ch in _LETTERS or ch == "("):
        return False
    # A name directly followed by "(" is a function call, not a product.
    return not (prev.type is TokenType.IDENTIFIER and ch == "(")


def tokenize(text: str) -> list[Token]:
    """Split text into tokens, inserting '*' for implicit multiplication."""
    tokens: list[Token] = []
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]
        if ch in _SPACES:
            i += 1
            continue

        if tokens and _needs_implicit_star(tokens[-1], ch):
            tokens.append(Token(TokenType.STAR, "*"))

        if ch in _DIGITS or (ch == "." and i + 1 < n and text[i + 1] in _DIGITS):
            start = i
            seen_point = False
            while i < n and (text[i] in _DIGITS or text[i] == "."):
                if text[i] == ".":
                    if seen_point:
                        logger.error("Multiple decimal points in number at position %d", i)
                        break
                    seen_point = True
                i += 1
            tokens.append(Token(TokenType.NUMBER, text[start:i]))
            continue

        if ch in _LETTERS:
            start = i
            while i < n and (text[i] in _LETTERS or text[i] in _DIGITS or text[i] == "_"):
                i += 1
            tokens.append(Token(TokenType.IDENTIFIER, text[start:i]))
            continue

        token_type = _SYMBOLS.get(ch)
        if token_type is None:
            logger.error("Unknown character %r at position %d", ch, i)
            tokens.append(Token(TokenType.INVALID, ch))
        else:
            tokens.append(Token(token_type, ch))
        i += 1

    tokens.append(Token(TokenType.END_OF_INPUT, ""))
    return tokens


def _pop_higher(token: Token, op_stack: list[Token], output: list[Token]) -> None:
    prec = _precedence(token.type)
    right_assoc = token.type is TokenType.CARET
    while op_stack and _is_operator(op_stack[-1].type):
        top = _precedence(op_stack[-1].type)
        if top > prec or (top == prec and not right_assoc):
            output.append(op_stack.pop())
        else:
            break


def _pop_until_lparen(op_stack: list[Token], output: list[Token]) -> None:
    while op_stack and op_stack[-1].type is not TokenType.LPAREN:
        output.append(op_stack.pop())


def to_postfix(tokens: list[Token]) -> list[Token]:
    """Reorder tokens into postfix form; function calls become 'name@argcount'."""
    output: list[Token] = []
    op_stack: list[Token] = []
    arg_counts: list[int] = []

    for i, token in enumerate(tokens):
        prev = tokens[i - 1] if i > 0 else None
        nxt = tokens[i + 1] if i + 1 < len(tokens) else None

        if token.type in (TokenType.NUMBER, TokenType.IDENTIFIER):
            if token.type is TokenType.IDENTIFIER and nxt is not None and nxt.type is TokenType.LPAREN:
                op_stack.append(token)
                arg_counts.append(0)
            else:
                output.append(token)

        elif token.type is TokenType.COMMA:
            _pop_until_lparen(op_stack, output)
            if arg_counts:
                arg_counts[-1] += 1

        elif token.type in (TokenType.PLUS, TokenType.MINUS):
            is_unary = prev is None or prev.type in (TokenType.LPAREN, TokenType.COMMA) or _is_operator(prev.type)
            if is_unary:
                if token.type is TokenType.MINUS:
                    op_stack.append(Token(TokenType.UMINUS, "u-"))
                else:
                    op_stack.append(Token(TokenType.UPLUS, "u+"))
                continue
            _pop_higher(token, op_stack, output)
            op_stack.append(token)

        elif _is_operator(token.type):
            _pop_higher(token, op_stack, output)
            op_stack.append(token)

        elif token.type is TokenType.LPAREN:
            op_stack.append(token)

        elif token.type is TokenType.RPAREN:
            _pop_until_lparen(op_stack, output)
            if not op_stack:
                raise ParseError("Mismatched parentheses")
            op_stack.pop()

            if op_stack and op_stack[-1].type is TokenType.IDENTIFIER:
                count = 0
                if arg_counts:
                    count = arg_counts.pop()
                    if prev is not None and prev.type is not TokenType.LPAREN:
                        count += 1
                name = op_stack.pop().value
                output.append(Token(TokenType.IDENTIFIER, f"{name}@{count}"))

        elif token.type is TokenType.EQUAL:
            output.append(token)

    while op_stack:
        top = op_stack.pop()
        if top.type in (TokenType.LPAREN, TokenType.RPAREN):
            raise ParseError("Mismatched parentheses at end")
        output.append(top)

    return output


def build_ast(postfix: list[Token]) -> ASTNode:
    """Build a syntax tree from tokens in postfix order."""
    stack: list[ASTNode] = []

    for token in postfix:
        if token.type is TokenType.NUMBER:
            stack.append(ASTNode(NodeType.NUMBER, token.value))

        elif token.type is TokenType.IDENTIFIER:
            match = _FUNCTION_CALL.fullmatch(token.value)
            if match is None:
                stack.append(ASTNode(NodeType.VARIABLE, token.value))
                continue
            name, count = match.group(1), int(match.group(2))
            if len(stack) < count:
                raise ParseError(f"Not enough arguments for function '{name}'")
            args = stack[len(stack) - count:] if count else []
            del stack[len(stack) - count:]
            stack.append(ASTNode(NodeType.FUNCTION, name, args))

        elif token.type in (TokenType.UMINUS, TokenType.UPLUS):
            if not stack:
                raise ParseError("Unary operator missing operand")
            symbol = "-" if token.type is TokenType.UMINUS else "+"
            stack.append(ASTNode(NodeType.UNARY_OP, symbol, [stack.pop()]))

        elif _is_operator(token.type):
            if len(stack) < 2:
                raise ParseError(f"Not enough operands for operator '{token.value}'")
            right = stack.pop()
            left = stack.pop()
            stack.append(ASTNode(NodeType.BINARY_OP, token.value, [left, right]))

    if len(stack) != 1:
        raise ParseError(f"Invalid AST. Stack size = {len(stack)}")
    return stack[0]


def parse(text: str) -> ASTNode:
    """Tokenize, reorder and build the syntax tree of an expression."""
    return build_ast(to_postfix(tokenize(text)))


def format_ast(node: ASTNode | None, depth: int = 0) -> str:
    """Render a tree as indented lines of '- value (type)'."""
    if node is None:
        return ""
    lines = [f"{'  ' * depth}- {node.value} ({int(node.type)})\n"]
    lines.extend(format_ast(child, depth + 1) for child in node.children)
    return "".join(lines)


def print_ast(node: ASTNode | None, depth: int = 0) -> None:
    """Print the rendering of format_ast to standard output."""
    print(format_ast(node, depth), end="")