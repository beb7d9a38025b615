"""Conversion of Rust type syntax into SemanticType trees."""

from tree_sitter import Node

from lera_bindgen.ir import (
    UNIT,
    ListType,
    MapType,
    NamedType,
    OptionalType,
    OwnedType,
    Primitive,
    PrimitiveKind,
    ResultType,
    SemanticType,
    SetType,
    TupleType,
)
from lera_bindgen.rust.base import get_node_text, significant_named_children

_PRIMITIVES: dict[str, PrimitiveKind] = {
    "bool": PrimitiveKind.BOOL,
    "i8": PrimitiveKind.I8,
    "i16": PrimitiveKind.I16,
    "i32": PrimitiveKind.I32,
    "i64": PrimitiveKind.I64,
    "isize": PrimitiveKind.ISIZE,
    "u8": PrimitiveKind.U8,
    "u16": PrimitiveKind.U16,
    "u32": PrimitiveKind.U32,
    "u64": PrimitiveKind.U64,
    "usize": PrimitiveKind.USIZE,
    "f32": PrimitiveKind.F32,
    "f64": PrimitiveKind.F64,
    "str": PrimitiveKind.STRING,
    "String": PrimitiveKind.STRING,
}

_LIST_CONTAINERS = frozenset({"Vec", "VecDeque"})
_SET_CONTAINERS = frozenset({"HashSet", "BTreeSet"})
_MAP_CONTAINERS = frozenset({"HashMap", "BTreeMap"})
_OWNERSHIP_WRAPPERS = frozenset({"Arc", "Rc", "Box"})

# Generic argument nodes that carry no type information
_NON_TYPE_ARGUMENTS = frozenset({"lifetime", "type_binding", "block"})


def convert_type(node: Node, source_code: str) -> SemanticType:
    """Convert a type node into a SemanticType.

    Generic containers with the wrong number of type arguments, and any type
    syntax without a dedicated rule, fall back to a NamedType.

    Args:
        node: Type node (``primitive_type``, ``generic_type``, ...)
        source_code: Source the node was parsed from

    Returns:
        SemanticType tree

    """
    match node.type:
        case "primitive_type" | "type_identifier":
            return _named_or_primitive(get_node_text(node, source_code))
        case "scoped_type_identifier":
            return _named_or_primitive(_last_segment(node, source_code))
        case "generic_type":
            return _convert_generic(node, source_code)
        case "reference_type":
            inner = node.child_by_field_name("type")
            if inner is None:
                return NamedType(get_node_text(node, source_code))
            return OwnedType(convert_type(inner, source_code))
        case "array_type":
            element = node.child_by_field_name("element")
            if element is None:
                return NamedType(get_node_text(node, source_code))
            return ListType(convert_type(element, source_code))
        case "tuple_type":
            return TupleType(
                tuple(
                    convert_type(child, source_code)
                    for child in significant_named_children(node)
                )
            )
        case "unit_type":
            return UNIT
        case _:
            return NamedType(get_node_text(node, source_code))


def _named_or_primitive(name: str) -> SemanticType:
    kind = _PRIMITIVES.get(name)
    if kind is not None:
        return Primitive(kind)
    return NamedType(name)


def _last_segment(node: Node, source_code: str) -> str:
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return get_node_text(node, source_code)
    return get_node_text(name_node, source_code)


def _convert_generic(node: Node, source_code: str) -> SemanticType:
    base_node = node.child_by_field_name("type")
    arguments_node = node.child_by_field_name("type_arguments")
    if base_node is None:
        return NamedType(get_node_text(node, source_code))

    if base_node.type == "scoped_type_identifier":
        base = _last_segment(base_node, source_code)
    else:
        base = get_node_text(base_node, source_code)

    arguments: list[SemanticType] = []
    if arguments_node is not None:
        arguments = [
            convert_type(child, source_code)
            for child in significant_named_children(arguments_node)
            if child.type not in _NON_TYPE_ARGUMENTS
        ]

    match base, arguments:
        case (name, [elem]) if name in _LIST_CONTAINERS:
            return ListType(elem)
        case (name, [elem]) if name in _SET_CONTAINERS:
            return SetType(elem)
        case (name, [key, value]) if name in _MAP_CONTAINERS:
            return MapType(key, value)
        case ("Option", [inner]):
            return OptionalType(inner)
        case ("Result", [ok, err]):
            return ResultType(ok, err)
        case (name, [inner]) if name in _OWNERSHIP_WRAPPERS:
            return OwnedType(inner)
        case _:
            return NamedType(base)
