"""Extraction of lera models from parsed Rust sources.

A model is a struct marked ``#[lera::model(state = S)]``. Its state struct
``S`` must live in the same file and carry ``#[lera::state]``, and exactly
one ``#[lera::api]`` impl block for the model must exist in that file. Every
``pub`` method of the api block becomes a ParsedMethod, except foreign
constructors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from tree_sitter import Node

from lera_bindgen.errors import MarkerParseError, ModelsNotFoundError, StructuralError
from lera_bindgen.ir import (
    UNIT,
    DefaultValue,
    ParsedMethod,
    ParsedModel,
    ParsedParam,
    ParsedReturnType,
    ResultType,
    default_state_fn_for,
    listener_name_for,
    samples_state_fn_for,
    to_camel_case,
)
from lera_bindgen.parser import ParsedSource
from lera_bindgen.rust.base import (
    get_node_text,
    is_async_function,
    is_public,
    item_name,
    preceding_attributes,
)
from lera_bindgen.rust.markers import (
    Marker,
    MarkerKind,
    classify_attribute,
    find_marker,
    parse_api_args,
    parse_default_params,
    parse_model_args,
    parse_state_args,
)
from lera_bindgen.rust.types import convert_type
from lera_bindgen.scanner import SourceScanner
from lera_bindgen.settings import BindgenSettings

logger = logging.getLogger(__name__)

# Constructor the model macro generates for the foreign side
_CONSTRUCTOR_METHOD_NAME = "with_state_and_listener"


@dataclass
class _Item:
    name: str
    node: Node
    markers: list[Marker] = field(default_factory=list)


@dataclass
class _FileItems:
    structs: dict[str, _Item] = field(default_factory=dict)
    struct_order: list[str] = field(default_factory=list)
    impls: list[_Item] = field(default_factory=list)


class ModelExtractor:
    """Builds ParsedModel records from a crate's annotated sources."""

    def __init__(
        self,
        settings: BindgenSettings | None = None,
        scanner: SourceScanner | None = None,
    ) -> None:
        """Initialise the extractor.

        Args:
            settings: Generator settings (defaults apply when omitted)
            scanner: Source scanner, built from settings when omitted

        """
        self._settings = settings or BindgenSettings()
        self._scanner = scanner or SourceScanner(self._settings)

    def extract(self, crate_path: Path) -> list[ParsedModel]:
        """Extract every model of a crate.

        Args:
            crate_path: Root directory of the crate

        Returns:
            Models in sorted file order, then declaration order

        Raises:
            ModelsNotFoundError: If no model marker is found
            ParserError: If a source file or marker fails to parse
            StructuralError: If a model breaks a pairing rule

        """
        models: list[ParsedModel] = []
        for parsed in self._scanner.scan(crate_path):
            models.extend(self.extract_from_source(parsed))

        if not models:
            raise ModelsNotFoundError([self._scanner.source_dir(crate_path)])

        logger.info("Found %d lera models in %s", len(models), crate_path)
        return models

    def extract_from_source(self, parsed: ParsedSource) -> list[ParsedModel]:
        """Extract the models declared in a single parsed file."""
        items = self._collect_items(parsed)
        models: list[ParsedModel] = []

        for struct_name in items.struct_order:
            struct = items.structs[struct_name]
            model_marker = find_marker(struct.markers, MarkerKind.MODEL)
            if model_marker is None:
                continue
            models.append(self._build_model(struct, model_marker, items, parsed))

        return models

    def _collect_items(self, parsed: ParsedSource) -> _FileItems:
        items = _FileItems()
        for node in parsed.root.named_children:
            match node.type:
                case "struct_item":
                    name = item_name(node, parsed.source)
                    if name is None:
                        continue
                    items.structs[name] = _Item(
                        name, node, _markers_of(node, parsed.source)
                    )
                    items.struct_order.append(name)
                case "impl_item":
                    # Trait impls never form the api surface
                    if node.child_by_field_name("trait") is not None:
                        continue
                    self_type = node.child_by_field_name("type")
                    if self_type is None:
                        continue
                    items.impls.append(
                        _Item(
                            _self_type_name(self_type, parsed.source),
                            node,
                            _markers_of(node, parsed.source),
                        )
                    )
        return items

    def _build_model(
        self,
        struct: _Item,
        model_marker: Marker,
        items: _FileItems,
        parsed: ParsedSource,
    ) -> ParsedModel:
        model_name = struct.name
        path = parsed.path

        try:
            model_args = parse_model_args(model_marker)
        except MarkerParseError as e:
            raise MarkerParseError(
                f"Failed to parse #[lera::model] on {model_name} in {path}: {e}"
            ) from e

        state_name = model_args.state
        if state_name is None:
            raise StructuralError(
                f"#[lera::model] on {model_name} in {path} must specify a state, "
                f"e.g. #[lera::model(state = {model_name}State)]",
                model_name,
                path,
            )
        if state_name == model_name:
            raise StructuralError(
                f"model {model_name} in {path} cannot be its own state, "
                "declare a separate #[lera::state] struct",
                model_name,
                path,
            )

        state = items.structs.get(state_name)
        if state is None:
            raise StructuralError(
                f"state struct {state_name} not found in {path}",
                state_name,
                path,
            )
        state_marker = find_marker(state.markers, MarkerKind.STATE)
        if state_marker is None:
            raise StructuralError(
                f"state struct {state_name} must use #[lera::state] in {path}",
                state_name,
                path,
            )
        try:
            state_args = parse_state_args(state_marker)
        except MarkerParseError as e:
            raise MarkerParseError(
                f"Failed to parse #[lera::state] on {state_name} in {path}: {e}"
            ) from e

        api_impls = [
            (impl, marker)
            for impl in items.impls
            if impl.name == model_name
            and (marker := find_marker(impl.markers, MarkerKind.API)) is not None
        ]
        if not api_impls:
            raise StructuralError(
                f"#[lera::api] impl for {model_name} not found in {path}",
                model_name,
                path,
            )
        if len(api_impls) > 1:
            raise StructuralError(
                f"found {len(api_impls)} #[lera::api] impls for {model_name} "
                f"in {path}, merge them into one",
                model_name,
                path,
            )

        api_impl, api_marker = api_impls[0]
        try:
            api_args = parse_api_args(api_marker)
        except MarkerParseError as e:
            raise MarkerParseError(
                f"Failed to parse #[lera::api] on {model_name} in {path}: {e}"
            ) from e

        methods = tuple(self._collect_methods(api_impl.node, parsed))
        logger.debug(
            "Model %s (state %s) with %d methods in %s",
            model_name,
            state_name,
            len(methods),
            path,
        )

        return ParsedModel(
            model_name=model_name,
            state_name=state_name,
            listener_name=listener_name_for(state_name),
            default_state_fn=default_state_fn_for(state_name),
            samples_state_fn=samples_state_fn_for(state_name),
            methods=methods,
            source_path=path,
            enable_samples=state_args.samples,
            has_navigator=model_args.navigating or api_args.navigating,
        )

    def _collect_methods(
        self, impl_node: Node, parsed: ParsedSource
    ) -> list[ParsedMethod]:
        body = impl_node.child_by_field_name("body")
        if body is None:
            return []

        methods: list[ParsedMethod] = []
        for node in body.named_children:
            if node.type != "function_item" or not is_public(node, parsed.source):
                continue

            rust_name = item_name(node, parsed.source)
            if rust_name is None or rust_name == _CONSTRUCTOR_METHOD_NAME:
                continue

            markers = _markers_of(node, parsed.source)
            if find_marker(markers, MarkerKind.UNIFFI_CONSTRUCTOR) is not None:
                continue

            methods.append(self._build_method(node, rust_name, markers, parsed))
        return methods

    def _build_method(
        self,
        node: Node,
        rust_name: str,
        markers: list[Marker],
        parsed: ParsedSource,
    ) -> ParsedMethod:
        defaults: dict[str, DefaultValue] = {}
        default_marker = find_marker(markers, MarkerKind.DEFAULT_PARAMS)
        if default_marker is not None:
            try:
                defaults = parse_default_params(default_marker).entries
            except MarkerParseError as e:
                raise MarkerParseError(
                    f"Failed to parse #[lera::default_params] on {rust_name} "
                    f"in {parsed.path}: {e}"
                ) from e

        params = _parse_parameters(node, defaults, rust_name, parsed)

        unknown = set(defaults) - {param.name for param in params}
        for name in sorted(unknown):
            logger.warning(
                "Default for unknown parameter `%s` in method `%s` (%s)",
                name,
                rust_name,
                parsed.path,
            )

        return ParsedMethod(
            rust_name=rust_name,
            camel_name=to_camel_case(rust_name),
            params=tuple(params),
            return_type=_parse_return_type(node, parsed.source),
            is_async=is_async_function(node, parsed.source),
        )


def parse_models(
    crate_path: Path, settings: BindgenSettings | None = None
) -> list[ParsedModel]:
    """Extract every model of a crate using the given settings."""
    return ModelExtractor(settings).extract(crate_path)


def _markers_of(node: Node, source_code: str) -> list[Marker]:
    markers: list[Marker] = []
    for attribute in preceding_attributes(node):
        marker = classify_attribute(attribute, source_code)
        if marker is not None:
            markers.append(marker)
    return markers


def _self_type_name(node: Node, source_code: str) -> str:
    # impl<T> Foo<T> and impl crate::Foo both name Foo
    if node.type == "generic_type":
        base = node.child_by_field_name("type")
        if base is not None:
            node = base
    if node.type == "scoped_type_identifier":
        name = node.child_by_field_name("name")
        if name is not None:
            node = name
    return get_node_text(node, source_code)


def _parse_parameters(
    node: Node,
    defaults: dict[str, DefaultValue],
    rust_name: str,
    parsed: ParsedSource,
) -> list[ParsedParam]:
    source_code = parsed.source
    parameters = node.child_by_field_name("parameters")
    if parameters is None:
        return []

    params: list[ParsedParam] = []
    for child in parameters.named_children:
        if child.type != "parameter":
            continue

        pattern = child.child_by_field_name("pattern")
        type_node = child.child_by_field_name("type")
        if pattern is None or type_node is None or pattern.type == "self":
            continue

        name = get_node_text(pattern, source_code)
        if name == "self":
            continue
        if pattern.type != "identifier":
            raise StructuralError(
                f"parameter `{name}` of {rust_name} in {parsed.path} must be a plain "
                "name to be forwarded by the view model",
                rust_name,
                parsed.path,
            )

        params.append(
            ParsedParam(
                name=name,
                ty=convert_type(type_node, source_code),
                default=defaults.get(name),
            )
        )
    return params


def _parse_return_type(node: Node, source_code: str) -> ParsedReturnType:
    return_node = node.child_by_field_name("return_type")
    if return_node is None:
        return ParsedReturnType()

    ty = convert_type(return_node, source_code)
    match ty:
        case ResultType(ok=ok, err=err):
            return ParsedReturnType(
                ty=None if ok == UNIT else ok, uses_result=True, error_ty=err
            )
        case _ if ty == UNIT:
            return ParsedReturnType()
        case _:
            return ParsedReturnType(ty=ty)
