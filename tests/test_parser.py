import pytest

from plotcalc.parser import (
    ASTNode,
    NodeType,
    ParseError,
    Token,
    TokenType,
    build_ast,
    format_ast,
    parse,
    print_ast,
    to_postfix,
    tokenize,
)


def _types(tokens):
    return [t.type for t in tokens]


def _values(tokens):
    return [t.value for t in tokens]


def test_tokenize_always_ends_with_end_of_input():
    for text in ["", "x", "1+2", "  "]:
        tokens = tokenize(text)
        assert tokens[-1] == Token(TokenType.END_OF_INPUT, "")


def test_tokenize_implicit_multiplication_number_and_name():
    assert _types(tokenize("2x")) == [
        TokenType.NUMBER,
        TokenType.STAR,
        TokenType.IDENTIFIER,
        TokenType.END_OF_INPUT,
    ]


def test_tokenize_function_call_has_no_star():
    assert _types(tokenize("sin(x)")) == [
        TokenType.IDENTIFIER,
        TokenType.LPAREN,
        TokenType.IDENTIFIER,
        TokenType.RPAREN,
        TokenType.END_OF_INPUT,
    ]


def test_tokenize_adjacent_parentheses_multiply():
    types = _types(tokenize("(1)(2)"))
    assert types[3] is TokenType.STAR
    assert types.count(TokenType.STAR) == 1


def test_tokenize_whitespace_separates_and_multiplies():
    assert _values(tokenize("x 2")) == ["x", "*", "2", ""]


def test_tokenize_identifier_allows_digits_and_underscore():
    tokens = tokenize("log10(a_1)")
    assert tokens[0] == Token(TokenType.IDENTIFIER, "log10")
    assert tokens[2] == Token(TokenType.IDENTIFIER, "a_1")


def test_tokenize_leading_point_number():
    assert tokenize(".5")[0] == Token(TokenType.NUMBER, ".5")


def test_tokenize_second_decimal_point_starts_new_number():
    assert _values(tokenize("1.2.3")) == ["1.2", ".3", ""]


def test_tokenize_unknown_character_is_invalid():
    tokens = tokenize("2$")
    assert tokens[1] == Token(TokenType.INVALID, "$")


def test_postfix_precedence():
    assert _values(to_postfix(tokenize("1+2*3"))) == ["1", "2", "3", "*", "+"]


def test_postfix_left_associative_subtraction():
    assert _values(to_postfix(tokenize("5-3-1"))) == ["5", "3", "-", "1", "-"]


def test_postfix_power_is_right_associative():
    assert _values(to_postfix(tokenize("2^3^2"))) == ["2", "3", "2", "^", "^"]


def test_postfix_function_argument_counts():
    assert to_postfix(tokenize("max(1,2,3)"))[-1].value == "max@3"
    assert to_postfix(tokenize("sin(x)"))[-1].value == "sin@1"
    assert to_postfix(tokenize("f()"))[-1].value == "f@0"


def test_postfix_unary_minus():
    assert _values(to_postfix(tokenize("-x"))) == ["x", "u-"]
    assert _values(to_postfix(tokenize("+x"))) == ["x", "u+"]


def test_postfix_ignores_end_marker():
    assert TokenType.END_OF_INPUT not in _types(to_postfix(tokenize("x+1")))


@pytest.mark.parametrize("text", ["(1+2", "1+2)", "sin(x", "((x)"])
def test_mismatched_parentheses_raise(text):
    with pytest.raises(ParseError):
        to_postfix(tokenize(text))


def test_parse_binary_tree():
    assert parse("1+2") == ASTNode(
        NodeType.BINARY_OP,
        "+",
        [ASTNode(NodeType.NUMBER, "1"), ASTNode(NodeType.NUMBER, "2")],
    )


def test_parse_function_keeps_argument_order():
    node = parse("atan2(y, x)")
    assert node.type is NodeType.FUNCTION
    assert node.value == "atan2"
    assert [c.value for c in node.children] == ["y", "x"]


def test_parse_nested_function_and_implicit_product():
    node = parse("2sin(x)")
    assert node.type is NodeType.BINARY_OP and node.value == "*"
    assert node.children[1].type is NodeType.FUNCTION
    assert node.children[1].children == [ASTNode(NodeType.VARIABLE, "x")]


def test_parse_unary_applies_after_following_sum():
    node = parse("-x+1")
    assert node.type is NodeType.UNARY_OP
    assert node.children[0].value == "+"


def test_parse_unary_inside_parentheses():
    node = parse("(-x)+1")
    assert node.type is NodeType.BINARY_OP
    assert node.children[0] == ASTNode(NodeType.UNARY_OP, "-", [ASTNode(NodeType.VARIABLE, "x")])


def test_build_ast_empty_raises():
    with pytest.raises(ParseError):
        build_ast([])


def test_build_ast_too_many_operands_raises():
    with pytest.raises(ParseError):
        build_ast([Token(TokenType.NUMBER, "1"), Token(TokenType.NUMBER, "2")])


def test_build_ast_operator_without_operands_raises():
    with pytest.raises(ParseError):
        build_ast([Token(TokenType.NUMBER, "1"), Token(TokenType.PLUS, "+")])


def test_build_ast_unary_without_operand_raises():
    with pytest.raises(ParseError):
        build_ast([Token(TokenType.UMINUS, "u-")])


def test_build_ast_function_missing_arguments_raises():
    with pytest.raises(ParseError):
        build_ast([Token(TokenType.NUMBER, "1"), Token(TokenType.IDENTIFIER, "pow@2")])


def test_parse_incomplete_expression_raises():
    with pytest.raises(ParseError):
        parse("1+")


def test_format_ast_layout():
    assert format_ast(parse("-x")) == "- - (4)\n  - x (1)\n"


def test_format_ast_none_is_empty():
    assert format_ast(None) == ""


def test_format_ast_depth_indents_every_line():
    text = format_ast(parse("1+2"), 1)
    assert all(line.startswith("  ") for line in text.splitlines())
    assert len(text.splitlines()) == 3


def test_print_ast_matches_format(capsys):
    node = parse("max(1,x)")
    print_ast(node)
    assert capsys.readouterr().out == format_ast(node)