"""Swift target: SwiftUI ``@Observable`` view models."""

from typing import override

from lera_bindgen.ir import (
    ListType,
    MapType,
    PrimitiveKind,
    SemanticType,
    SetType,
    is_byte_list,
    unwrap_owned,
)
from lera_bindgen.targets.base import (
    BoundMethod,
    DefaultValueResolver,
    MethodBinder,
    TypeMapper,
)

_SWIFT_EXTENSION = ".swift"
_SWIFT_TEMPLATE = "view_model.swift.jinja"

_SWIFT_PRIMITIVES: dict[PrimitiveKind, str] = {
    PrimitiveKind.BOOL: "Bool",
    PrimitiveKind.I8: "Int8",
    PrimitiveKind.I16: "Int16",
    PrimitiveKind.I32: "Int32",
    PrimitiveKind.I64: "Int64",
    PrimitiveKind.ISIZE: "Int",
    PrimitiveKind.U8: "UInt8",
    PrimitiveKind.U16: "UInt16",
    PrimitiveKind.U32: "UInt32",
    PrimitiveKind.U64: "UInt64",
    PrimitiveKind.USIZE: "UInt",
    PrimitiveKind.F32: "Float",
    PrimitiveKind.F64: "Double",
    PrimitiveKind.STRING: "String",
}


class SwiftTypeMapper(TypeMapper):
    """Maps semantic types to Swift type names."""

    byte_buffer_type = "Data"

    @override
    def map_primitive(self, kind: PrimitiveKind) -> str:
        return _SWIFT_PRIMITIVES[kind]

    @override
    def list_type(self, elem: str) -> str:
        return f"Array<{elem}>"

    @override
    def set_type(self, elem: str) -> str:
        return f"Set<{elem}>"

    @override
    def map_type_name(self, key: str, value: str) -> str:
        return f"Dictionary<{key}, {value}>"

    @override
    def unit_type(self) -> str:
        return "Void"

    @override
    def tuple_type(self, elems: list[str]) -> str:
        return f"({', '.join(elems)})"


class SwiftDefaultValueResolver(DefaultValueResolver):
    """Renders defaults as Swift literals.

    Swift infers literal types from the parameter type, so numbers carry no
    suffix.
    """

    null_literal = "nil"

    @override
    def infer(self, ty: SemanticType) -> str | None:
        if isinstance(unwrap_owned(ty), SetType):
            return "Set()"
        return super().infer(ty)

    @override
    def int_literal(self, digits: str, kind: PrimitiveKind, *, negative: bool) -> str:
        return f"-{digits}" if negative else digits

    @override
    def float_literal(self, text: str, kind: PrimitiveKind, *, negative: bool) -> str:
        return f"-{text}" if negative else text

    @override
    def empty_collection(self, ty: SemanticType) -> str | None:
        if is_byte_list(ty):
            return "Data()"
        match unwrap_owned(ty):
            case MapType():
                return "[:]"
            case ListType() | SetType():
                return "[]"
            case _:
                return None

    @override
    def list_literal(self, elems: list[str]) -> str:
        return f"[{', '.join(elems)}]"

    @override
    def set_literal(self, elems: list[str]) -> str:
        return f"[{', '.join(elems)}]"

    @override
    def byte_buffer_literal(self, values: list[str]) -> str:
        return f"Data([{', '.join(values)}])"


class SwiftMethodBinder(MethodBinder):
    """Renders ``public func`` wrappers delegating to the exported model."""

    @override
    def render(self, method: BoundMethod) -> str:
        if method.params:
            declarations = ",".join(
                f"\n\t\t{param.name}: {param.type_name}"
                + (f" = {param.default}" if param.default is not None else "")
                for param in method.params
            )
            param_part = f"({declarations}\n\t)"
            arguments = ",".join(
                f"\n\t\t\t{param.name}: {param.name}" for param in method.params
            )
            call_part = f"({arguments}\n\t\t)"
        else:
            param_part = "()"
            call_part = "()"

        effects = ""
        if method.is_async:
            effects += " async"
        if method.throws:
            effects += " throws"

        return_part = ""
        if method.return_type is not None:
            return_part = f" -> {method.return_type}"

        prefix_parts: list[str] = []
        if method.return_type is not None:
            prefix_parts.append("return")
        if method.throws:
            prefix_parts.append("try")
        if method.is_async:
            prefix_parts.append("await")
        call_prefix = "".join(f"{part} " for part in prefix_parts)

        return (
            f"\tpublic func {method.camel_name}{param_part}{effects}{return_part} {{\n"
            f"\t\t{call_prefix}model.{method.camel_name}{call_part}\n"
            "\t}"
        )


class SwiftTarget:
    """Swift target language.

    Generated Swift is appended to the UniFFI output unchanged; Swift needs
    no extra imports beyond what the template declares.
    """

    def __init__(self) -> None:
        """Initialise the Swift mapper, resolver and binder."""
        self._mapper = SwiftTypeMapper()
        self._binder = SwiftMethodBinder(self._mapper, SwiftDefaultValueResolver())

    @property
    def name(self) -> str:
        """Return the canonical target name."""
        return "swift"

    @property
    def file_extension(self) -> str:
        """Return the extension of generated Swift files."""
        return _SWIFT_EXTENSION

    @property
    def template_name(self) -> str:
        """Return the Jinja2 template rendering Swift view models."""
        return _SWIFT_TEMPLATE

    @property
    def binder(self) -> MethodBinder:
        """Return the Swift method binder."""
        return self._binder

    def prepare_corpus(self, corpus: str) -> str:
        """Return the corpus unchanged."""
        return corpus
