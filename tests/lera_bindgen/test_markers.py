"""Tests for marker classification and argument parsing."""

import pytest

from lera_bindgen.errors import MarkerParseError
from lera_bindgen.ir import (
    ArrayLiteral,
    BoolLiteral,
    ExplicitExpr,
    FloatLiteral,
    Infer,
    IntLiteral,
    Negation,
    NoneLiteral,
    StrLiteral,
    UnsupportedExpr,
)
from lera_bindgen.parser import SourceCodeParser
from lera_bindgen.rust.base import preceding_attributes
from lera_bindgen.rust.markers import (
    Marker,
    MarkerKind,
    classify_attribute,
    parse_api_args,
    parse_default_params,
    parse_model_args,
    parse_state_args,
)


def _markers_before_struct(source: str) -> list[Marker | None]:
    root = SourceCodeParser().parse_checked(source, "test.rs")
    struct = next(n for n in root.named_children if n.type == "struct_item")
    return [classify_attribute(a, source) for a in preceding_attributes(struct)]


def _default(body: str) -> ExplicitExpr | Infer:
    entries = parse_default_params(Marker(MarkerKind.DEFAULT_PARAMS, body)).entries
    return entries["p"]


class TestClassifyAttribute:
    """Test recognition of marker attributes."""

    def test_recognises_markers_and_ignores_other_attributes(self):
        """Test that derive attributes are not markers."""
        source = (
            "#[lera::state(samples)]\n"
            "#[derive(Debug)]\n"
            "// a comment between attributes\n"
            "#[lera::model]\n"
            "pub struct S;\n"
        )

        markers = _markers_before_struct(source)

        assert markers == [
            Marker(MarkerKind.STATE, "samples"),
            None,
            Marker(MarkerKind.MODEL, None),
        ]

    def test_path_with_spaces_is_recognised(self):
        """Test that whitespace inside the attribute path is ignored."""
        markers = _markers_before_struct("#[lera :: api]\npub struct S;\n")

        assert markers == [Marker(MarkerKind.API, None)]


class TestMarkerArguments:
    """Test parsing of model, state and api marker arguments."""

    def test_model_state_and_navigating(self):
        """Test that state takes the last path segment."""
        args = parse_model_args(
            Marker(MarkerKind.MODEL, "state = crate::models::CounterState, navigating")
        )

        assert args.state == "CounterState"
        assert args.navigating is True

    def test_model_without_arguments(self):
        """Test that a bare model marker has no state."""
        assert parse_model_args(Marker(MarkerKind.MODEL, None)).state is None

    def test_model_rejects_unknown_argument(self):
        """Test that misspelt flags are reported."""
        with pytest.raises(MarkerParseError, match="Unknown argument 'stat'"):
            parse_model_args(Marker(MarkerKind.MODEL, "stat = S"))

    def test_model_rejects_non_path_state(self):
        """Test that state must name a type."""
        with pytest.raises(MarkerParseError, match="Expected a type name"):
            parse_model_args(Marker(MarkerKind.MODEL, 'state = "S"'))

    def test_state_samples_flag(self):
        """Test the samples flag and its absence."""
        assert parse_state_args(Marker(MarkerKind.STATE, "samples")).samples
        assert not parse_state_args(Marker(MarkerKind.STATE, None)).samples

    def test_api_navigating_flag_with_trailing_comma(self):
        """Test that a trailing comma is accepted."""
        assert parse_api_args(Marker(MarkerKind.API, "navigating,")).navigating

    def test_malformed_arguments_raise(self):
        """Test that arguments that are not Rust expressions are rejected."""
        with pytest.raises(MarkerParseError, match="Malformed arguments"):
            parse_api_args(Marker(MarkerKind.API, "navigating = ="))


class TestDefaultParams:
    """Test parsing of default-parameter markers."""

    def test_entries_keep_declaration_order(self):
        """Test bare names infer and assignments keep their expression."""
        args = parse_default_params(
            Marker(MarkerKind.DEFAULT_PARAMS, 'b = 1, a, c = "x"')
        )

        assert list(args.entries) == ["b", "a", "c"]
        assert args.entries["a"] == Infer()
        assert args.entries["b"] == ExplicitExpr(IntLiteral("1"), "1")
        assert args.entries["c"] == ExplicitExpr(StrLiteral("x"), '"x"')

    def test_duplicate_parameter_raises(self):
        """Test that a parameter may only be listed once."""
        with pytest.raises(MarkerParseError, match="Duplicate parameter 'a'"):
            parse_default_params(Marker(MarkerKind.DEFAULT_PARAMS, "a, a = 1"))

    def test_empty_marker_has_no_entries(self):
        """Test that empty parentheses are accepted."""
        args = parse_default_params(Marker(MarkerKind.DEFAULT_PARAMS, " "))

        assert args.entries == {}


class TestDefaultExpressions:
    """Test conversion of default expressions into literals."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("true", BoolLiteral(True)),
            ("false", BoolLiteral(False)),
            ("1_000", IntLiteral("1000")),
            ("0x1F", IntLiteral("31")),
            ("0b101u8", IntLiteral("5")),
            ("7i64", IntLiteral("7")),
            ("1.5", FloatLiteral("1.5")),
            ("3.25f64", FloatLiteral("3.25")),
            ("-4", Negation(IntLiteral("4"))),
            ("None", NoneLiteral()),
            ("(5)", IntLiteral("5")),
            ("[]", ArrayLiteral(())),
            ("[1, 2]", ArrayLiteral((IntLiteral("1"), IntLiteral("2")))),
        ],
    )
    def test_literal_shapes(self, text, expected):
        """Test each supported literal shape."""
        assert _default(f"p = {text}").expr == expected

    def test_string_escapes_are_decoded(self):
        """Test that Rust escapes become the characters they denote."""
        assert _default(r'p = "a\"b\n\u{41}"').expr == StrLiteral('a"b\nA')

    def test_raw_string_is_taken_verbatim(self):
        """Test that raw strings keep backslashes."""
        assert _default(r'p = r#"C:\dir"#').expr == StrLiteral(r"C:\dir")

    @pytest.mark.parametrize(
        "text",
        ["Vec::new()", "vec![1]", "[0; 4]", "Some(1)", "!true", "1 + 2"],
    )
    def test_non_literal_expressions_are_unsupported(self, text):
        """Test that calls, macros, repeats and operators are not literals."""
        assert isinstance(_default(f"p = {text}").expr, UnsupportedExpr)

    def test_source_text_is_kept_for_diagnostics(self):
        """Test that the raw expression text travels with the default."""
        default = _default("p = Vec::new()")

        assert isinstance(default, ExplicitExpr)
        assert default.text == "Vec::new()"
