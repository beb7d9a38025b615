"""Kotlin target: Jetpack ``ViewModel`` wrappers exposing a ``StateFlow``."""

import re
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

_KOTLIN_EXTENSION = ".kt"
_KOTLIN_TEMPLATE = "view_model.kt.jinja"

KOTLIN_IMPORTS = (
    "import androidx.lifecycle.ViewModel",
    "import kotlinx.coroutines.flow.MutableStateFlow",
    "import kotlinx.coroutines.flow.StateFlow",
    "import kotlinx.coroutines.flow.asStateFlow",
)

_PACKAGE_LINE = re.compile(r"^package [^\n]*\n?", re.MULTILINE)

_KOTLIN_PRIMITIVES: dict[PrimitiveKind, str] = {
    PrimitiveKind.BOOL: "Boolean",
    PrimitiveKind.I8: "Byte",
    PrimitiveKind.I16: "Short",
    PrimitiveKind.I32: "Int",
    PrimitiveKind.I64: "Long",
    PrimitiveKind.ISIZE: "Long",
    PrimitiveKind.U8: "UByte",
    PrimitiveKind.U16: "UShort",
    PrimitiveKind.U32: "UInt",
    PrimitiveKind.U64: "ULong",
    PrimitiveKind.USIZE: "ULong",
    PrimitiveKind.F32: "Float",
    PrimitiveKind.F64: "Double",
    PrimitiveKind.STRING: "String",
}

# Literal suffix per width; casts such as .toByte() apply to the whole number
_KOTLIN_INT_SUFFIXES: dict[PrimitiveKind, str] = {
    PrimitiveKind.I8: ".toByte()",
    PrimitiveKind.I16: ".toShort()",
    PrimitiveKind.I32: "",
    PrimitiveKind.I64: "L",
    PrimitiveKind.ISIZE: "L",
    PrimitiveKind.U8: "u.toUByte()",
    PrimitiveKind.U16: "u.toUShort()",
    PrimitiveKind.U32: "u",
    PrimitiveKind.U64: "UL",
    PrimitiveKind.USIZE: "UL",
}

_KOTLIN_INDENT = "    "


class KotlinTypeMapper(TypeMapper):
    """Maps semantic types to Kotlin type names."""

    byte_buffer_type = "ByteArray"

    @override
    def map_primitive(self, kind: PrimitiveKind) -> str:
        return _KOTLIN_PRIMITIVES[kind]

    @override
    def list_type(self, elem: str) -> str:
        return f"List<{elem}>"

    @override
    def set_type(self, elem: str) -> str:
        return f"Set<{elem}>"

    @override
    def map_type_name(self, key: str, value: str) -> str:
        return f"Map<{key}, {value}>"

    @override
    def unit_type(self) -> str:
        return "Unit"

    @override
    def tuple_type(self, elems: list[str]) -> str:
        """Kotlin has no tuples; use Pair and Triple where they fit."""
        match elems:
            case [single]:
                return single
            case [first, second]:
                return f"Pair<{first}, {second}>"
            case [first, second, third]:
                return f"Triple<{first}, {second}, {third}>"
            case _:
                return "List<Any?>"


class KotlinDefaultValueResolver(DefaultValueResolver):
    """Renders defaults as Kotlin literals with width suffixes."""

    null_literal = "null"

    @override
    def int_literal(self, digits: str, kind: PrimitiveKind, *, negative: bool) -> str:
        suffix = _KOTLIN_INT_SUFFIXES[kind]
        if not negative:
            return f"{digits}{suffix}"
        if suffix.startswith("."):
            return f"(-{digits}){suffix}"
        return f"-{digits}{suffix}"

    @override
    def float_literal(self, text: str, kind: PrimitiveKind, *, negative: bool) -> str:
        suffix = "f" if kind == PrimitiveKind.F32 else ""
        sign = "-" if negative else ""
        return f"{sign}{text}{suffix}"

    @override
    def empty_collection(self, ty: SemanticType) -> str | None:
        if is_byte_list(ty):
            return "byteArrayOf()"
        match unwrap_owned(ty):
            case ListType():
                return "listOf()"
            case SetType():
                return "setOf()"
            case MapType():
                return "mapOf()"
            case _:
                return None

    @override
    def list_literal(self, elems: list[str]) -> str:
        return f"listOf({', '.join(elems)})"

    @override
    def set_literal(self, elems: list[str]) -> str:
        return f"setOf({', '.join(elems)})"

    @override
    def byte_buffer_literal(self, values: list[str]) -> str:
        return f"byteArrayOf({', '.join(f'{value}.toByte()' for value in values)})"


class KotlinMethodBinder(MethodBinder):
    """Renders ``fun`` wrappers delegating to the exported model."""

    @override
    def render(self, method: BoundMethod) -> str:
        indent = _KOTLIN_INDENT
        if method.params:
            declarations = ",\n".join(
                f"{indent * 2}{param.name}: {param.type_name}"
                + (f" = {param.default}" if param.default is not None else "")
                for param in method.params
            )
            param_part = f"(\n{declarations}\n{indent})"
            arguments = ",\n".join(
                f"{indent * 3}{param.name}" for param in method.params
            )
            call_part = f"(\n{arguments}\n{indent * 2})"
        else:
            param_part = "()"
            call_part = "()"

        annotation = ""
        exception = exception_class_name(method.error_type)
        if method.throws and exception is not None:
            annotation = f"@Throws({exception}::class)\n{indent}"

        suspend = "suspend " if method.is_async else ""
        return_part = ""
        call_prefix = ""
        if method.return_type is not None:
            return_part = f": {method.return_type}"
            call_prefix = "return "

        signature = f"{suspend}fun {method.camel_name}{param_part}{return_part}"
        return (
            f"{annotation}{signature} {{\n"
            f"{indent * 2}{call_prefix}model.{method.camel_name}{call_part}\n"
            f"{indent}}}"
        )


def exception_class_name(error_type: str | None) -> str | None:
    """Name of the Kotlin exception UniFFI generates for a Rust error type.

    Only plain identifiers qualify; ``FooError`` becomes ``FooException``.
    """
    if error_type is None or not error_type.isidentifier():
        return None
    if error_type.endswith("Error"):
        return f"{error_type.removesuffix('Error')}Exception"
    return error_type


def ensure_imports(corpus: str) -> str:
    """Insert the view model imports after the package declaration.

    Each import is added at most once; imports already present are skipped.
    Without a package line the imports go at the top of the file.
    """
    missing = [line for line in KOTLIN_IMPORTS if line not in corpus]
    if not missing:
        return corpus

    block = "\n".join(missing) + "\n"
    package = _PACKAGE_LINE.search(corpus)
    if package is None:
        return block + "\n" + corpus

    insert_at = package.end()
    head = corpus[:insert_at]
    if not head.endswith("\n"):
        head += "\n"
    return head + block + corpus[insert_at:]


class KotlinTarget:
    """Kotlin target language."""

    def __init__(self) -> None:
        """Initialise the Kotlin mapper, resolver and binder."""
        self._mapper = KotlinTypeMapper()
        self._binder = KotlinMethodBinder(self._mapper, KotlinDefaultValueResolver())

    @property
    def name(self) -> str:
        """Return the canonical target name."""
        return "kotlin"

    @property
    def file_extension(self) -> str:
        """Return the extension of generated Kotlin files."""
        return _KOTLIN_EXTENSION

    @property
    def template_name(self) -> str:
        """Return the Jinja2 template rendering Kotlin view models."""
        return _KOTLIN_TEMPLATE

    @property
    def binder(self) -> MethodBinder:
        """Return the Kotlin method binder."""
        return self._binder

    def prepare_corpus(self, corpus: str) -> str:
        """Add the imports the generated view models rely on."""
        return ensure_imports(corpus)
