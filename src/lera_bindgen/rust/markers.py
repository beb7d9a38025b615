"""Classification and argument parsing of lera marker attributes.

Every ``#[...]`` attribute the extractor cares about is recognised here and
nowhere else. Arguments are re-parsed with tree-sitter as the body of a Rust
tuple expression, so marker syntax follows Rust expression syntax exactly.
"""

from dataclasses import dataclass, field
from enum import Enum

from tree_sitter import Node

from lera_bindgen.errors import MarkerParseError, ParserError
from lera_bindgen.ir import DefaultValue, ExplicitExpr, Infer
from lera_bindgen.parser import SourceCodeParser
from lera_bindgen.rust.base import (
    find_child_by_type,
    get_node_text,
    significant_named_children,
)
from lera_bindgen.rust.expressions import convert_expression


class MarkerKind(Enum):
    """Marker attributes understood by the generator."""

    MODEL = "lera::model"
    STATE = "lera::state"
    API = "lera::api"
    DEFAULT_PARAMS = "lera::default_params"
    UNIFFI_CONSTRUCTOR = "uniffi::constructor"


_MARKERS_BY_PATH = {kind.value: kind for kind in MarkerKind}

# Wrapper used to parse a marker argument list as a tuple expression
_ARGUMENT_PRELUDE = "const _: () = ("
_ARGUMENT_EPILOGUE = ",);\n"


@dataclass(frozen=True)
class Marker:
    """A recognised marker attribute."""

    kind: MarkerKind
    arguments: str | None
    """Text between the argument parentheses, or None without arguments."""


@dataclass(frozen=True)
class ModelMarkerArgs:
    """Arguments of ``#[lera::model(state = S[, navigating])]``."""

    state: str | None = None
    navigating: bool = False


@dataclass(frozen=True)
class StateMarkerArgs:
    """Arguments of ``#[lera::state]`` / ``#[lera::state(samples)]``."""

    samples: bool = False


@dataclass(frozen=True)
class ApiMarkerArgs:
    """Arguments of ``#[lera::api]`` / ``#[lera::api(navigating)]``."""

    navigating: bool = False


@dataclass(frozen=True)
class DefaultParamsArgs:
    """Arguments of ``#[lera::default_params(...)]`` in declaration order."""

    entries: dict[str, DefaultValue] = field(default_factory=dict)


@dataclass(frozen=True)
class _Argument:
    name: str
    value: Node | None
    source: str


def classify_attribute(node: Node, source_code: str) -> Marker | None:
    """Classify an ``attribute_item`` node.

    Args:
        node: Attribute item node
        source_code: Source the node was parsed from

    Returns:
        The recognised Marker, or None for unrelated attributes

    """
    attribute = find_child_by_type(node, "attribute")
    if attribute is None:
        return None

    children = significant_named_children(attribute)
    if not children:
        return None

    path = "".join(get_node_text(children[0], source_code).split())
    kind = _MARKERS_BY_PATH.get(path)
    if kind is None:
        return None

    arguments_node = attribute.child_by_field_name("arguments")
    arguments: str | None = None
    if arguments_node is not None:
        # Strip the delimiters of the token tree
        arguments = get_node_text(arguments_node, source_code)[1:-1]
    return Marker(kind=kind, arguments=arguments)


def find_marker(markers: list[Marker], kind: MarkerKind) -> Marker | None:
    """Return the first marker of a given kind."""
    for marker in markers:
        if marker.kind == kind:
            return marker
    return None


def parse_model_args(marker: Marker) -> ModelMarkerArgs:
    """Parse the arguments of a model marker.

    Raises:
        MarkerParseError: On unknown flags or a malformed ``state`` value

    """
    state: str | None = None
    navigating = False
    for argument in _parse_arguments(marker):
        match argument.name:
            case "state" if argument.value is not None:
                state = _path_value(argument.name, argument.value, argument.source)
            case "navigating" if argument.value is None:
                navigating = True
            case _:
                raise MarkerParseError(
                    f"Unknown argument '{argument.name}' in #[{marker.kind.value}]"
                )
    return ModelMarkerArgs(state=state, navigating=navigating)


def parse_state_args(marker: Marker) -> StateMarkerArgs:
    """Parse the arguments of a state marker.

    Raises:
        MarkerParseError: On unknown flags

    """
    samples = False
    for argument in _parse_arguments(marker):
        if argument.name == "samples" and argument.value is None:
            samples = True
        else:
            raise MarkerParseError(
                f"Unknown argument '{argument.name}' in #[{marker.kind.value}]"
            )
    return StateMarkerArgs(samples=samples)


def parse_api_args(marker: Marker) -> ApiMarkerArgs:
    """Parse the arguments of an api marker.

    Raises:
        MarkerParseError: On unknown flags

    """
    navigating = False
    for argument in _parse_arguments(marker):
        if argument.name == "navigating" and argument.value is None:
            navigating = True
        else:
            raise MarkerParseError(
                f"Unknown argument '{argument.name}' in #[{marker.kind.value}]"
            )
    return ApiMarkerArgs(navigating=navigating)


def parse_default_params(marker: Marker) -> DefaultParamsArgs:
    """Parse a default-parameters marker into a name to default map.

    A bare ``name`` maps to Infer, ``name = expr`` to ExplicitExpr.

    Raises:
        MarkerParseError: On malformed entries or duplicate names

    """
    entries: dict[str, DefaultValue] = {}
    for argument in _parse_arguments(marker):
        if argument.name in entries:
            raise MarkerParseError(
                f"Duplicate parameter '{argument.name}' in #[{marker.kind.value}]"
            )
        if argument.value is None:
            entries[argument.name] = Infer()
        else:
            entries[argument.name] = ExplicitExpr(
                expr=convert_expression(argument.value, argument.source),
                text=get_node_text(argument.value, argument.source),
            )
    return DefaultParamsArgs(entries=entries)


def _parse_arguments(marker: Marker) -> list[_Argument]:
    if marker.arguments is None:
        return []

    body = marker.arguments.strip().rstrip(",").rstrip()
    if not body:
        return []

    source = f"{_ARGUMENT_PRELUDE}{body}{_ARGUMENT_EPILOGUE}"
    try:
        root = SourceCodeParser().parse_checked(source, f"#[{marker.kind.value}]")
    except ParserError as e:
        raise MarkerParseError(
            f"Malformed arguments in #[{marker.kind.value}({marker.arguments})]: {e}"
        ) from e

    tuple_node = _argument_tuple(root)
    if tuple_node is None:
        raise MarkerParseError(
            f"Malformed arguments in #[{marker.kind.value}({marker.arguments})]"
        )

    arguments: list[_Argument] = []
    for element in significant_named_children(tuple_node):
        match element.type:
            case "identifier" | "primitive_type":
                arguments.append(
                    _Argument(get_node_text(element, source), None, source)
                )
            case "assignment_expression":
                left = element.child_by_field_name("left")
                right = element.child_by_field_name("right")
                if (
                    left is None
                    or right is None
                    or left.type not in ("identifier", "primitive_type")
                ):
                    raise MarkerParseError(
                        f"Expected 'name = value' in #[{marker.kind.value}], "
                        f"got '{get_node_text(element, source)}'"
                    )
                arguments.append(
                    _Argument(get_node_text(left, source), right, source)
                )
            case _:
                raise MarkerParseError(
                    f"Unexpected argument '{get_node_text(element, source)}' "
                    f"in #[{marker.kind.value}]"
                )
    return arguments


def _argument_tuple(root: Node) -> Node | None:
    const_item = find_child_by_type(root, "const_item")
    if const_item is None:
        return None
    value = const_item.child_by_field_name("value")
    if value is None or value.type != "tuple_expression":
        return None
    return value


def _path_value(name: str, value: Node, source: str) -> str:
    text = get_node_text(value, source)
    if value.type not in ("identifier", "scoped_identifier"):
        raise MarkerParseError(f"Expected a type name for '{name}', got '{text}'")
    # state = crate::models::Counter names the struct Counter
    return text.rsplit("::", 1)[-1].strip()
