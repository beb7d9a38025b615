"""Base classes shared by every target language.

This module provides:
- TypeMapper: Maps SemanticType trees to target type names
- DefaultValueResolver: Renders declared defaults as target literals
- MethodBinder: Builds the delegating wrapper for one model method
- BoundParam, BoundMethod: Results of binding, handed to templates
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace

from lera_bindgen.ir import (
    ArrayLiteral,
    BoolLiteral,
    DefaultExpr,
    DefaultValue,
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
    Primitive,
    PrimitiveKind,
    ResultType,
    SemanticType,
    SetType,
    StrLiteral,
    TupleType,
    UnsupportedExpr,
    is_byte_list,
    to_camel_case,
    unwrap_owned,
)

logger = logging.getLogger(__name__)

_STRING_ESCAPES = (
    ("\\", "\\\\"),
    ('"', '\\"'),
    ("\n", "\\n"),
    ("\r", "\\r"),
    ("\t", "\\t"),
)


def escape_string(value: str) -> str:
    """Escape a string for a double-quoted Swift or Kotlin literal."""
    for raw, escaped in _STRING_ESCAPES:
        value = value.replace(raw, escaped)
    return value


class TypeMapper(ABC):
    """Maps SemanticType trees to target-language type names."""

    byte_buffer_type: str
    """Dedicated byte buffer type used for lists of ``u8``."""

    def map_type(self, ty: SemanticType) -> str:
        """Map a type tree to its target type name.

        Args:
            ty: Type to map

        Returns:
            Target type name, e.g. ``Array<Int64>`` or ``List<Long>``

        """
        if is_byte_list(ty):
            return self.byte_buffer_type

        match ty:
            case Primitive(kind=kind):
                return self.map_primitive(kind)
            case ListType(elem=elem):
                return self.list_type(self.map_type(elem))
            case SetType(elem=elem):
                return self.set_type(self.map_type(elem))
            case MapType(key=key, value=value):
                return self.map_type_name(self.map_type(key), self.map_type(value))
            case OptionalType(inner=inner):
                return f"{self.map_type(inner)}?"
            case ResultType(ok=ok, err=err):
                return f"Result<{self.map_type(ok)}, {self.map_type(err)}>"
            case TupleType(elems=()):
                return self.unit_type()
            case TupleType(elems=elems):
                return self.tuple_type([self.map_type(elem) for elem in elems])
            case OwnedType(inner=inner):
                return self.map_type(inner)
            case NamedType(name=name):
                return name

    @abstractmethod
    def map_primitive(self, kind: PrimitiveKind) -> str:
        """Map a primitive kind to its target type name."""

    @abstractmethod
    def list_type(self, elem: str) -> str:
        """Generic list type around a mapped element type."""

    @abstractmethod
    def set_type(self, elem: str) -> str:
        """Generic set type around a mapped element type."""

    @abstractmethod
    def map_type_name(self, key: str, value: str) -> str:
        """Generic map type around mapped key and value types."""

    @abstractmethod
    def unit_type(self) -> str:
        """The void or unit type."""

    @abstractmethod
    def tuple_type(self, elems: list[str]) -> str:
        """Tuple syntax for one or more mapped element types."""


class DefaultValueResolver(ABC):
    """Renders declared parameter defaults as target-language literals.

    Both resolution paths are pure and return None when the default cannot
    be expressed; the caller decides how to report that.
    """

    null_literal: str

    def resolve(self, default: DefaultValue, ty: SemanticType) -> str | None:
        """Render a declared default for a parameter of the given type."""
        match default:
            case ExplicitExpr(expr=expr):
                return self.resolve_explicit(expr, ty)
            case Infer():
                return self.infer(ty)

    def resolve_explicit(self, expr: DefaultExpr, ty: SemanticType) -> str | None:
        """Render an explicit default expression.

        Optional and ownership wrappers are looked through to type literals,
        so ``Option<i8> = 5`` renders like ``i8 = 5``.
        """
        target = _literal_target(ty)

        match expr:
            case BoolLiteral(value=value):
                if target != Primitive(PrimitiveKind.BOOL):
                    return None
                return "true" if value else "false"
            case IntLiteral(digits=digits):
                return self._number(digits, target, is_float=False, negative=False)
            case FloatLiteral(text=text):
                return self._number(text, target, is_float=True, negative=False)
            case Negation(operand=IntLiteral(digits=digits)):
                return self._number(digits, target, is_float=False, negative=True)
            case Negation(operand=FloatLiteral(text=text)):
                return self._number(text, target, is_float=True, negative=True)
            case StrLiteral(value=value):
                if target != Primitive(PrimitiveKind.STRING):
                    return None
                return f'"{escape_string(value)}"'
            case NoneLiteral():
                if not isinstance(unwrap_owned(ty), OptionalType):
                    return None
                return self.null_literal
            case ArrayLiteral(elems=()):
                return self.empty_collection(target)
            case ArrayLiteral(elems=elems):
                return self._array(elems, target)
            case Negation() | UnsupportedExpr():
                return None

    def infer(self, ty: SemanticType) -> str | None:
        """Synthesise the canonical zero value of a type."""
        ty = unwrap_owned(ty)

        match ty:
            case OptionalType():
                return self.null_literal
            case Primitive(kind=PrimitiveKind.BOOL):
                return "false"
            case Primitive(kind=PrimitiveKind.STRING):
                return '""'
            case Primitive(kind=kind) if kind.is_float:
                return self.float_literal("0.0", kind, negative=False)
            case Primitive(kind=kind):
                return self.int_literal("0", kind, negative=False)
            case ListType() | SetType() | MapType():
                return self.empty_collection(ty)
            case _:
                return None

    def _number(
        self, text: str, target: SemanticType, *, is_float: bool, negative: bool
    ) -> str | None:
        if not isinstance(target, Primitive):
            return None
        kind = target.kind

        if kind.is_float:
            if not is_float:
                text = f"{text}.0"
            return self.float_literal(text, kind, negative=negative)
        if kind.is_integer and not is_float:
            if negative and kind.is_unsigned:
                return None
            return self.int_literal(text, kind, negative=negative)
        return None

    def _array(
        self, elems: tuple[DefaultExpr, ...], target: SemanticType
    ) -> str | None:
        if is_byte_list(target):
            values: list[str] = []
            for elem in elems:
                if not isinstance(elem, IntLiteral) or int(elem.digits) > 255:
                    return None
                values.append(elem.digits)
            return self.byte_buffer_literal(values)

        match target:
            case ListType(elem=elem_ty) | SetType(elem=elem_ty):
                rendered: list[str] = []
                for elem in elems:
                    value = self.resolve_explicit(elem, elem_ty)
                    if value is None:
                        return None
                    rendered.append(value)
                if isinstance(target, SetType):
                    return self.set_literal(rendered)
                return self.list_literal(rendered)
            case _:
                return None

    @abstractmethod
    def int_literal(self, digits: str, kind: PrimitiveKind, *, negative: bool) -> str:
        """Integer literal of the given width, with any required suffix."""

    @abstractmethod
    def float_literal(self, text: str, kind: PrimitiveKind, *, negative: bool) -> str:
        """Floating point literal of the given width."""

    @abstractmethod
    def empty_collection(self, ty: SemanticType) -> str | None:
        """Empty literal for a list, set, map or byte buffer type."""

    @abstractmethod
    def list_literal(self, elems: list[str]) -> str:
        """Non-empty list literal."""

    @abstractmethod
    def set_literal(self, elems: list[str]) -> str:
        """Non-empty set literal."""

    @abstractmethod
    def byte_buffer_literal(self, values: list[str]) -> str:
        """Non-empty byte buffer literal from unsigned byte values."""


def _literal_target(ty: SemanticType) -> SemanticType:
    ty = unwrap_owned(ty)
    while isinstance(ty, OptionalType):
        ty = unwrap_owned(ty.inner)
    return ty


@dataclass(frozen=True)
class BoundParam:
    """A wrapper parameter in target syntax."""

    name: str
    type_name: str
    default: str | None = None


@dataclass(frozen=True)
class BoundMethod:
    """A fully bound wrapper method."""

    camel_name: str
    params: tuple[BoundParam, ...]
    return_type: str | None
    is_async: bool
    throws: bool
    error_type: str | None
    text: str
    """Rendered declaration, indented for a class body."""


class MethodBinder(ABC):
    """Synthesises the delegating wrapper of a model method."""

    def __init__(self, mapper: TypeMapper, resolver: DefaultValueResolver) -> None:
        """Initialise the binder.

        Args:
            mapper: Type mapper of the target language
            resolver: Default value resolver of the target language

        """
        self.mapper = mapper
        self.resolver = resolver

    def bind(self, method: ParsedMethod, model: ParsedModel) -> BoundMethod:
        """Bind a parsed method into a wrapper declaration.

        Defaults that cannot be rendered are logged and the parameter is
        emitted without one.
        """
        params = tuple(
            self._bind_param(param, method, model) for param in method.params
        )

        return_type = None
        if method.return_type.ty is not None:
            return_type = self.mapper.map_type(method.return_type.ty)

        error_type = None
        if method.return_type.error_ty is not None:
            error_type = self.mapper.map_type(method.return_type.error_ty)

        bound = BoundMethod(
            camel_name=method.camel_name,
            params=params,
            return_type=return_type,
            is_async=method.is_async,
            throws=method.return_type.uses_result,
            error_type=error_type,
            text="",
        )
        return replace(bound, text=self.render(bound))

    def _bind_param(
        self, param: ParsedParam, method: ParsedMethod, model: ParsedModel
    ) -> BoundParam:
        type_name = self.mapper.map_type(param.ty)
        default: str | None = None

        match param.default:
            case ExplicitExpr(text=text) as explicit:
                default = self.resolver.resolve(explicit, param.ty)
                if default is None:
                    logger.warning(
                        "Unsupported default expression `%s` for `%s` in method "
                        "`%s` (%s)",
                        text,
                        param.name,
                        method.rust_name,
                        model.source_path,
                    )
            case Infer() as infer:
                default = self.resolver.resolve(infer, param.ty)
                if default is None:
                    logger.warning(
                        "Unable to infer default for parameter `%s` of type `%s` "
                        "in method `%s` (%s)",
                        param.name,
                        type_name,
                        method.rust_name,
                        model.source_path,
                    )
            case None:
                pass

        return BoundParam(
            name=self.param_name(param.name), type_name=type_name, default=default
        )

    def param_name(self, rust_name: str) -> str:
        """Target name of a parameter."""
        return to_camel_case(rust_name)

    @abstractmethod
    def render(self, method: BoundMethod) -> str:
        """Render the full wrapper declaration of a bound method."""
