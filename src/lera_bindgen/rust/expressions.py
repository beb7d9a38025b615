"""Conversion of Rust literal expressions into DefaultExpr IR nodes."""

import re

from tree_sitter import Node

from lera_bindgen.ir import (
    ArrayLiteral,
    BoolLiteral,
    DefaultExpr,
    FloatLiteral,
    IntLiteral,
    Negation,
    NoneLiteral,
    StrLiteral,
    UnsupportedExpr,
)
from lera_bindgen.rust.base import (
    find_child_by_type,
    get_node_text,
    significant_named_children,
)

_INTEGER_SUFFIXES = (
    "i8",
    "i16",
    "i32",
    "i64",
    "i128",
    "isize",
    "u8",
    "u16",
    "u32",
    "u64",
    "u128",
    "usize",
)
_FLOAT_SUFFIXES = ("f32", "f64")

_INTEGER_PATTERN = re.compile(
    r"^(?P<digits>0x[0-9a-fA-F]+|0o[0-7]+|0b[01]+|[0-9]+)"
    r"(?P<suffix>" + "|".join(_INTEGER_SUFFIXES + _FLOAT_SUFFIXES) + r")?$"
)
_ESCAPE_PATTERN = re.compile(
    r"\\(?:u\{(?P<unicode>[0-9a-fA-F_]+)\}"
    r"|x(?P<hex>[0-9a-fA-F]{2})"
    r"|\n\s*"
    r"|(?P<simple>.))",
    re.DOTALL,
)
_RAW_STRING_PATTERN = re.compile(
    r'^r(?P<hashes>#*)"(?P<body>.*)"(?P=hashes)$', re.DOTALL
)
_SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "0": "\0",
    "\\": "\\",
    "'": "'",
    '"': '"',
}
_RADIX_PREFIXES = {"0x": 16, "0o": 8, "0b": 2}


def convert_expression(node: Node, source_code: str) -> DefaultExpr:
    """Convert an expression node into a DefaultExpr.

    Shapes that have no literal meaning (calls, macros, paths other than
    ``None``, operators other than unary minus) become UnsupportedExpr.

    Args:
        node: Expression node
        source_code: Source the node was parsed from

    Returns:
        DefaultExpr describing the literal

    """
    text = get_node_text(node, source_code)

    match node.type:
        case "boolean_literal":
            return BoolLiteral(text == "true")
        case "integer_literal":
            return _convert_integer(text)
        case "float_literal":
            return FloatLiteral(_normalise_float(text))
        case "string_literal":
            return StrLiteral(_unescape(text[1:-1]))
        case "raw_string_literal":
            match_ = _RAW_STRING_PATTERN.match(text)
            if match_ is None:
                return UnsupportedExpr(node.type)
            return StrLiteral(match_.group("body"))
        case "identifier" if text == "None":
            return NoneLiteral()
        case "unary_expression":
            return _convert_unary(node, source_code, text)
        case "array_expression":
            return _convert_array(node, source_code)
        case "parenthesized_expression":
            children = significant_named_children(node)
            if len(children) != 1:
                return UnsupportedExpr(node.type)
            return convert_expression(children[0], source_code)
        case _:
            return UnsupportedExpr(node.type)


def _convert_integer(text: str) -> DefaultExpr:
    match_ = _INTEGER_PATTERN.match(text.replace("_", ""))
    if match_ is None:
        return UnsupportedExpr("integer_literal")

    digits = match_.group("digits")
    base = _RADIX_PREFIXES.get(digits[:2], 10)
    value = int(digits[2:] if base != 10 else digits, base)

    # 1f32 is lexed as an integer carrying a float suffix
    if match_.group("suffix") in _FLOAT_SUFFIXES:
        return FloatLiteral(f"{value}.0")
    return IntLiteral(str(value))


def _normalise_float(text: str) -> str:
    text = text.replace("_", "")
    for suffix in _FLOAT_SUFFIXES:
        if text.endswith(suffix):
            text = text[: -len(suffix)]
            break
    if text.endswith("."):
        text += "0"
    return text


def _convert_unary(node: Node, source_code: str, text: str) -> DefaultExpr:
    if not text.lstrip().startswith("-"):
        return UnsupportedExpr(node.type)

    operands = significant_named_children(node)
    if len(operands) != 1:
        return UnsupportedExpr(node.type)
    return Negation(convert_expression(operands[0], source_code))


def _convert_array(node: Node, source_code: str) -> DefaultExpr:
    # [value; count] repeats are not literal lists
    if find_child_by_type(node, ";") is not None:
        return UnsupportedExpr("array_repeat_expression")

    elems = tuple(
        convert_expression(child, source_code)
        for child in significant_named_children(node)
        if child.type != "attribute_item"
    )
    return ArrayLiteral(elems)


def _unescape(body: str) -> str:
    def replace(match_: re.Match[str]) -> str:
        if match_.group("unicode") is not None:
            return chr(int(match_.group("unicode").replace("_", ""), 16))
        if match_.group("hex") is not None:
            return chr(int(match_.group("hex"), 16))
        simple = match_.group("simple")
        if simple is None:
            # Line continuation swallows the newline and leading whitespace
            return ""
        return _SIMPLE_ESCAPES.get(simple, simple)

    return _ESCAPE_PATTERN.sub(replace, body)
