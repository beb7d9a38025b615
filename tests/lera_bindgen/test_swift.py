"""Tests for the Swift target."""

from pathlib import Path

import pytest

from lera_bindgen.ir import (
    ArrayLiteral,
    BoolLiteral,
    ExplicitExpr,
    FloatLiteral,
    Infer,
    IntLiteral,
    ListType,
    MapType,
    NamedType,
    Negation,
    NoneLiteral,
    OptionalType,
    OwnedType,
    ParsedMethod,
    ParsedModel,
    ParsedParam,
    ParsedReturnType,
    Primitive,
    PrimitiveKind,
    SemanticType,
    SetType,
    StrLiteral,
    TupleType,
    UnsupportedExpr,
)
from lera_bindgen.parser import SourceCodeParser
from lera_bindgen.rust.types import convert_type
from lera_bindgen.targets.swift import (
    SwiftDefaultValueResolver,
    SwiftTarget,
    SwiftTypeMapper,
)

I8 = Primitive(PrimitiveKind.I8)
I64 = Primitive(PrimitiveKind.I64)
U8 = Primitive(PrimitiveKind.U8)
U32 = Primitive(PrimitiveKind.U32)
F32 = Primitive(PrimitiveKind.F32)
BOOL = Primitive(PrimitiveKind.BOOL)
STRING = Primitive(PrimitiveKind.STRING)


def _model(*methods: ParsedMethod) -> ParsedModel:
    return ParsedModel(
        model_name="Counter",
        state_name="CounterState",
        listener_name="CounterStateChangeListener",
        default_state_fn="newDefaultCounterState",
        samples_state_fn="newCounterStateSamples",
        methods=methods,
        source_path=Path("src/lib.rs"),
    )


def _rust_type(type_text: str) -> SemanticType:
    source = f"fn f(x: {type_text}) {{}}\n"
    root = SourceCodeParser().parse_checked(source, "types.rs")
    parameters = root.named_children[0].child_by_field_name("parameters")
    assert parameters is not None
    type_node = parameters.named_children[0].child_by_field_name("type")
    assert type_node is not None
    return convert_type(type_node, source)


def _explicit(expr, text="expr"):
    return ExplicitExpr(expr, text)


class TestSwiftTypeMapper:
    """Test Swift type names."""

    @pytest.mark.parametrize(
        ("ty", "expected"),
        [
            (I64, "Int64"),
            (Primitive(PrimitiveKind.USIZE), "UInt"),
            (STRING, "String"),
            (ListType(I64), "Array<Int64>"),
            (ListType(U8), "Data"),
            (OwnedType(ListType(U8)), "Data"),
            (SetType(STRING), "Set<String>"),
            (MapType(STRING, ListType(I64)), "Dictionary<String, Array<Int64>>"),
            (OptionalType(NamedType("Item")), "Item?"),
            (OwnedType(NamedType("Item")), "Item"),
            (TupleType(), "Void"),
            (TupleType((I64, STRING)), "(Int64, String)"),
        ],
    )
    def test_map_type(self, ty, expected):
        """Test mapping of each type shape."""
        assert SwiftTypeMapper().map_type(ty) == expected

    @pytest.mark.parametrize(
        ("type_text", "expected"),
        [
            ("HashMap<String, Vec<Option<u32>>>", "Dictionary<String, Array<UInt32?>>"),
            ("Vec<Option<HashSet<String>>>", "Array<Set<String>?>"),
        ],
    )
    def test_nested_rust_types(self, type_text, expected):
        """Test that nested containers and optionals map all the way down."""
        assert SwiftTypeMapper().map_type(_rust_type(type_text)) == expected


class TestSwiftDefaults:
    """Test rendering of default values as Swift literals."""

    @pytest.mark.parametrize(
        ("default", "ty", "expected"),
        [
            (_explicit(IntLiteral("5")), I8, "5"),
            (_explicit(Negation(IntLiteral("5"))), I8, "-5"),
            (_explicit(IntLiteral("2")), F32, "2.0"),
            (_explicit(FloatLiteral("1.5")), Primitive(PrimitiveKind.F64), "1.5"),
            (_explicit(BoolLiteral(True)), BOOL, "true"),
            (_explicit(StrLiteral('say "hi"\n')), STRING, '"say \\"hi\\"\\n"'),
            (_explicit(NoneLiteral()), OptionalType(I64), "nil"),
            (_explicit(IntLiteral("3")), OptionalType(I8), "3"),
            (_explicit(ArrayLiteral(())), ListType(I64), "[]"),
            (_explicit(ArrayLiteral(())), MapType(STRING, I64), "[:]"),
            (_explicit(ArrayLiteral(())), ListType(U8), "Data()"),
            (
                _explicit(ArrayLiteral((IntLiteral("1"), IntLiteral("2")))),
                ListType(I64),
                "[1, 2]",
            ),
            (
                _explicit(ArrayLiteral((IntLiteral("1"), IntLiteral("255")))),
                ListType(U8),
                "Data([1, 255])",
            ),
            (Infer(), I64, "0"),
            (Infer(), F32, "0.0"),
            (Infer(), BOOL, "false"),
            (Infer(), STRING, '""'),
            (Infer(), OptionalType(STRING), "nil"),
            (Infer(), ListType(I64), "[]"),
            (Infer(), SetType(I64), "Set()"),
            (Infer(), MapType(STRING, I64), "[:]"),
            (Infer(), ListType(U8), "Data()"),
        ],
    )
    def test_resolves(self, default, ty, expected):
        """Test each supported default."""
        assert SwiftDefaultValueResolver().resolve(default, ty) == expected

    @pytest.mark.parametrize(
        ("default", "ty"),
        [
            (_explicit(UnsupportedExpr("call_expression")), I64),
            (_explicit(Negation(IntLiteral("1"))), U32),
            (_explicit(FloatLiteral("1.5")), I64),
            (_explicit(StrLiteral("x")), I64),
            (_explicit(BoolLiteral(False)), STRING),
            (_explicit(NoneLiteral()), I64),
            (_explicit(ArrayLiteral((IntLiteral("256"),))), ListType(U8)),
            (_explicit(ArrayLiteral((StrLiteral("a"),))), ListType(I64)),
            (Infer(), NamedType("Item")),
        ],
    )
    def test_unsupported_defaults_resolve_to_none(self, default, ty):
        """Test that defaults that cannot be expressed give None."""
        assert SwiftDefaultValueResolver().resolve(default, ty) is None


class TestSwiftMethodBinder:
    """Test the wrapper methods rendered for Swift."""

    def test_method_with_defaults(self):
        """Test parameter layout, defaults and delegation."""
        method = ParsedMethod(
            rust_name="increment",
            camel_name="increment",
            params=(
                ParsedParam("step", I64, _explicit(IntLiteral("1"))),
                ParsedParam("label_text", STRING),
            ),
            return_type=ParsedReturnType(),
        )

        bound = SwiftTarget().binder.bind(method, _model(method))

        assert bound.text == (
            "\tpublic func increment(\n"
            "\t\tstep: Int64 = 1,\n"
            "\t\tlabelText: String\n"
            "\t) {\n"
            "\t\tmodel.increment(\n"
            "\t\t\tstep: step,\n"
            "\t\t\tlabelText: labelText\n"
            "\t\t)\n"
            "\t}"
        )

    def test_async_throwing_method_with_return(self):
        """Test effects, return type and call prefix order."""
        method = ParsedMethod(
            rust_name="load",
            camel_name="load",
            params=(),
            return_type=ParsedReturnType(
                ty=I64, uses_result=True, error_ty=NamedType("CounterError")
            ),
            is_async=True,
        )

        bound = SwiftTarget().binder.bind(method, _model(method))

        assert bound.throws is True
        assert bound.error_type == "CounterError"
        assert bound.text == (
            "\tpublic func load() async throws -> Int64 {\n"
            "\t\treturn try await model.load()\n"
            "\t}"
        )

    def test_unsupported_default_is_dropped_with_warning(self, caplog):
        """Test that the parameter survives without a default."""
        method = ParsedMethod(
            rust_name="tag",
            camel_name="tag",
            params=(
                ParsedParam(
                    "names",
                    ListType(STRING),
                    _explicit(UnsupportedExpr("call_expression"), "Vec::new()"),
                ),
            ),
            return_type=ParsedReturnType(),
        )

        bound = SwiftTarget().binder.bind(method, _model(method))

        assert bound.params[0].default is None
        assert "\t\tnames: Array<String>\n" in bound.text
        assert "Unsupported default expression `Vec::new()` for `names`" in caplog.text


class TestSwiftTarget:
    """Test the Swift target descriptor."""

    def test_descriptor(self):
        """Test name, extension and template of the target."""
        target = SwiftTarget()

        assert target.name == "swift"
        assert target.file_extension == ".swift"
        assert target.template_name == "view_model.swift.jinja"

    def test_prepare_corpus_is_identity(self):
        """Test that Swift files are not modified before appending."""
        assert SwiftTarget().prepare_corpus("import Foundation\n") == (
            "import Foundation\n"
        )
