"""Language-neutral intermediate representation of lera models.

This module defines the types produced by the model extractor and consumed by
every target language:
- SemanticType: Recursive type tree (primitives, containers, wrappers)
- DefaultExpr: Literal expression declared via ``#[lera::default_params]``
- DefaultValue: Explicit expression or the "infer" sentinel
- ParsedParam, ParsedReturnType, ParsedMethod, ParsedModel: Model surface
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class PrimitiveKind(Enum):
    """Primitive Rust types with explicit width and signedness."""

    BOOL = "bool"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    ISIZE = "isize"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    USIZE = "usize"
    F32 = "f32"
    F64 = "f64"
    STRING = "String"

    @property
    def is_integer(self) -> bool:
        """Whether this is a signed or unsigned integer kind."""
        return self in _SIGNED_INTEGERS or self in _UNSIGNED_INTEGERS

    @property
    def is_unsigned(self) -> bool:
        """Whether this is an unsigned integer kind."""
        return self in _UNSIGNED_INTEGERS

    @property
    def is_float(self) -> bool:
        """Whether this is a floating point kind."""
        return self in (PrimitiveKind.F32, PrimitiveKind.F64)


_SIGNED_INTEGERS = frozenset(
    {
        PrimitiveKind.I8,
        PrimitiveKind.I16,
        PrimitiveKind.I32,
        PrimitiveKind.I64,
        PrimitiveKind.ISIZE,
    }
)
_UNSIGNED_INTEGERS = frozenset(
    {
        PrimitiveKind.U8,
        PrimitiveKind.U16,
        PrimitiveKind.U32,
        PrimitiveKind.U64,
        PrimitiveKind.USIZE,
    }
)


# Semantic types


@dataclass(frozen=True)
class Primitive:
    """A primitive scalar or string."""

    kind: PrimitiveKind


@dataclass(frozen=True)
class ListType:
    """An ordered sequence (``Vec``, ``VecDeque``, slices, arrays)."""

    elem: SemanticType


@dataclass(frozen=True)
class SetType:
    """An unordered set (``HashSet``, ``BTreeSet``)."""

    elem: SemanticType


@dataclass(frozen=True)
class MapType:
    """A key/value map (``HashMap``, ``BTreeMap``)."""

    key: SemanticType
    value: SemanticType


@dataclass(frozen=True)
class OptionalType:
    """An ``Option<T>``."""

    inner: SemanticType


@dataclass(frozen=True)
class ResultType:
    """A ``Result<Ok, Err>`` used as a value type."""

    ok: SemanticType
    err: SemanticType


@dataclass(frozen=True)
class TupleType:
    """A tuple; the empty tuple is the unit type."""

    elems: tuple[SemanticType, ...] = ()


@dataclass(frozen=True)
class OwnedType:
    """Pointer or shared-ownership wrapper (``Arc``, ``Rc``, ``Box``, ``&``).

    Carries no target-visible distinction, mappers unwrap it.
    """

    inner: SemanticType


@dataclass(frozen=True)
class NamedType:
    """Any other type, passed through by its bare identifier."""

    name: str


type SemanticType = (
    Primitive
    | ListType
    | SetType
    | MapType
    | OptionalType
    | ResultType
    | TupleType
    | OwnedType
    | NamedType
)

UNIT = TupleType()


def unwrap_owned(ty: SemanticType) -> SemanticType:
    """Strip every ownership wrapper around a type."""
    while isinstance(ty, OwnedType):
        ty = ty.inner
    return ty


def is_byte_list(ty: SemanticType) -> bool:
    """Check if a type is a (possibly owned) list of ``u8``."""
    ty = unwrap_owned(ty)
    return isinstance(ty, ListType) and unwrap_owned(ty.elem) == Primitive(
        PrimitiveKind.U8
    )


# Default value expressions


@dataclass(frozen=True)
class BoolLiteral:
    """``true`` or ``false``."""

    value: bool


@dataclass(frozen=True)
class IntLiteral:
    """Integer literal normalised to base-10 digits without suffix."""

    digits: str


@dataclass(frozen=True)
class FloatLiteral:
    """Float literal without type suffix or digit separators."""

    text: str


@dataclass(frozen=True)
class StrLiteral:
    """String literal holding its unescaped value."""

    value: str


@dataclass(frozen=True)
class NoneLiteral:
    """The absent optional, ``None``."""


@dataclass(frozen=True)
class ArrayLiteral:
    """Array literal ``[a, b, ...]``."""

    elems: tuple[DefaultExpr, ...] = ()


@dataclass(frozen=True)
class Negation:
    """Unary minus applied to an expression."""

    operand: DefaultExpr


@dataclass(frozen=True)
class UnsupportedExpr:
    """Any expression shape the generator cannot translate."""

    kind: str


type DefaultExpr = (
    BoolLiteral
    | IntLiteral
    | FloatLiteral
    | StrLiteral
    | NoneLiteral
    | ArrayLiteral
    | Negation
    | UnsupportedExpr
)


@dataclass(frozen=True)
class ExplicitExpr:
    """Default declared as ``name = <expr>``."""

    expr: DefaultExpr
    text: str
    """Source text of the expression, for diagnostics."""


@dataclass(frozen=True)
class Infer:
    """Default declared as a bare ``name``; the target synthesises a zero value."""


type DefaultValue = ExplicitExpr | Infer


# Model surface


@dataclass(frozen=True)
class ParsedParam:
    """Parameter metadata extracted from a model method."""

    name: str
    ty: SemanticType
    default: DefaultValue | None = None


@dataclass(frozen=True)
class ParsedReturnType:
    """Return type metadata extracted from a model method.

    For a fallible return, ``ty`` holds the success payload (``None`` when it
    is the unit type) and ``uses_result`` stays set.
    """

    ty: SemanticType | None = None
    uses_result: bool = False
    error_ty: SemanticType | None = None


@dataclass(frozen=True)
class ParsedMethod:
    """Method metadata for a model annotated with ``#[lera::api]``."""

    rust_name: str
    camel_name: str
    params: tuple[ParsedParam, ...]
    return_type: ParsedReturnType
    is_async: bool = False


@dataclass(frozen=True)
class ParsedModel:
    """Parsed representation of a ``#[lera::model]`` struct and its API."""

    model_name: str
    state_name: str
    listener_name: str
    default_state_fn: str
    samples_state_fn: str
    methods: tuple[ParsedMethod, ...]
    source_path: Path
    enable_samples: bool = False
    has_navigator: bool = False


def to_camel_case(snake_case: str) -> str:
    """Convert a snake_case identifier to camelCase.

    Every underscore is dropped and the character after it upper-cased, so a
    name without underscores is returned unchanged.
    """
    result: list[str] = []
    capitalize_next = False

    for ch in snake_case:
        if ch == "_":
            capitalize_next = True
        elif capitalize_next:
            result.append(ch.upper())
            capitalize_next = False
        else:
            result.append(ch)

    return "".join(result)


def listener_name_for(state_name: str) -> str:
    """Name of the state-change listener the model macro exports."""
    return f"{state_name}ChangeListener"


def default_state_fn_for(state_name: str) -> str:
    """Name of the exported default-state constructor."""
    return f"newDefault{state_name}"


def samples_state_fn_for(state_name: str) -> str:
    """Name of the exported sample-state constructor."""
    return f"new{state_name}Samples"
