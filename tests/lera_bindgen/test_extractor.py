"""Tests for model extraction from Rust crates."""

import logging
from pathlib import Path

import pytest

from lera_bindgen.errors import (
    MarkerParseError,
    ModelsNotFoundError,
    ParserError,
    StructuralError,
)
from lera_bindgen.extractor import ModelExtractor, parse_models
from lera_bindgen.ir import (
    ExplicitExpr,
    Infer,
    IntLiteral,
    NamedType,
    OptionalType,
    Primitive,
    PrimitiveKind,
    StrLiteral,
)
from lera_bindgen.settings import BindgenSettings

MODEL_TEMPLATE = """\
#[lera::state]
pub struct {name}State {{
    pub value: i64,
}}

#[lera::model(state = {name}State)]
pub struct {name} {{
    state: {name}State,
}}

#[lera::api]
impl {name} {{
    pub fn touch(&self) {{}}
}}
"""


def _model_source(name: str) -> str:
    return MODEL_TEMPLATE.format(name=name)


class TestModelExtraction:
    """Test the models and methods extracted from a well-formed crate."""

    def test_counter_model_metadata(self, counter_crate: Path):
        """Test names derived from the model and its state."""
        [model] = ModelExtractor().extract(counter_crate)

        assert model.model_name == "Counter"
        assert model.state_name == "CounterState"
        assert model.listener_name == "CounterStateChangeListener"
        assert model.default_state_fn == "newDefaultCounterState"
        assert model.samples_state_fn == "newCounterStateSamples"
        assert model.enable_samples is True
        assert model.has_navigator is False
        assert model.source_path == counter_crate / "src" / "lib.rs"

    def test_only_public_non_constructor_methods_are_kept(self, counter_crate: Path):
        """Test that constructors, private methods and trait impls are skipped."""
        [model] = ModelExtractor().extract(counter_crate)

        assert [m.rust_name for m in model.methods] == ["increment", "reset", "load"]

    def test_method_parameters_and_defaults(self, counter_crate: Path):
        """Test that receivers are dropped and defaults attached by name."""
        [model] = ModelExtractor().extract(counter_crate)
        increment = model.methods[0]

        assert [p.name for p in increment.params] == ["step", "label"]
        assert increment.params[0].ty == Primitive(PrimitiveKind.I64)
        assert increment.params[0].default == ExplicitExpr(IntLiteral("1"), "1")
        assert increment.params[1].default == ExplicitExpr(StrLiteral("hi"), '"hi"')
        assert increment.return_type.ty is None
        assert not increment.return_type.uses_result

    def test_async_fallible_method(self, counter_crate: Path):
        """Test async detection and Result unwrapping."""
        [model] = ModelExtractor().extract(counter_crate)
        load = model.methods[2]

        assert load.is_async is True
        assert load.params[0].ty == OptionalType(Primitive(PrimitiveKind.U8))
        assert load.params[0].default == Infer()
        assert load.return_type.ty == Primitive(PrimitiveKind.I64)
        assert load.return_type.uses_result is True
        assert load.return_type.error_ty == NamedType("CounterError")

    def test_unit_result_has_no_payload(self, write_crate):
        """Test that Result<(), E> keeps throws but returns nothing."""
        source = _model_source("Saver").replace(
            "pub fn touch(&self) {}",
            "pub fn save_all(&self) -> Result<(), SaveError> { todo!() }",
        )
        crate = write_crate({"lib.rs": source})

        [model] = ModelExtractor().extract(crate)
        method = model.methods[0]

        assert method.camel_name == "saveAll"
        assert method.return_type.ty is None
        assert method.return_type.uses_result is True

    def test_models_in_file_then_declaration_order(self, write_crate):
        """Test that discovery order follows sorted files, then source order."""
        crate = write_crate(
            {
                "b.rs": _model_source("Beta") + _model_source("Alpha"),
                "a.rs": _model_source("Zulu"),
            }
        )

        models = parse_models(crate)

        assert [m.model_name for m in models] == ["Zulu", "Beta", "Alpha"]

    def test_navigating_from_api_marker(self, write_crate):
        """Test that the api marker can request a navigator."""
        source = _model_source("Profile").replace(
            "#[lera::api]", "#[lera::api(navigating)]"
        )
        crate = write_crate({"lib.rs": source})

        [model] = ModelExtractor().extract(crate)

        assert model.has_navigator is True
        assert model.enable_samples is False

    def test_generic_impl_is_matched_by_base_name(self, write_crate):
        """Test that impl blocks on generic or qualified types still match."""
        source = _model_source("Feed").replace("impl Feed", "impl crate::Feed")
        crate = write_crate({"lib.rs": source})

        [model] = ModelExtractor().extract(crate)

        assert [m.rust_name for m in model.methods] == ["touch"]

    def test_crate_relative_source_subdir(self, tmp_path: Path):
        """Test that models are read from the configured subdirectory."""
        models_dir = tmp_path / "models"
        models_dir.mkdir()
        (models_dir / "lib.rs").write_text(_model_source("Cart"), encoding="utf-8")
        settings = BindgenSettings(source_subdir="models")

        [model] = ModelExtractor(settings).extract(tmp_path)

        assert model.model_name == "Cart"

    def test_unknown_default_key_logs_warning(self, write_crate, caplog):
        """Test that defaults for missing parameters are reported."""
        source = _model_source("Note").replace(
            "    pub fn touch",
            "    #[lera::default_params(missing = 1)]\n    pub fn touch",
        )
        crate = write_crate({"lib.rs": source})

        with caplog.at_level(logging.WARNING, logger="lera_bindgen"):
            ModelExtractor().extract(crate)

        assert "Default for unknown parameter `missing`" in caplog.text


class TestExtractionFailures:
    """Test the errors raised for malformed crates."""

    def test_no_models_names_inspected_directory(self, write_crate):
        """Test ModelsNotFoundError when no model marker exists."""
        crate = write_crate({"lib.rs": "pub struct Plain;\n"})

        with pytest.raises(ModelsNotFoundError) as exc_info:
            ModelExtractor().extract(crate)

        assert exc_info.value.inspected_dirs == [crate / "src"]
        assert "No #[lera::model] usages found" in str(exc_info.value)

    def test_missing_source_directory_means_no_models(self, tmp_path: Path):
        """Test that a crate without sources reports no models."""
        with pytest.raises(ModelsNotFoundError):
            ModelExtractor().extract(tmp_path)

    def test_model_without_state(self, write_crate):
        """Test that the state argument is mandatory."""
        source = _model_source("Lonely").replace(
            "#[lera::model(state = LonelyState)]", "#[lera::model]"
        )
        crate = write_crate({"lib.rs": source})

        with pytest.raises(StructuralError, match="must specify a state") as exc_info:
            ModelExtractor().extract(crate)

        assert str(exc_info.value).startswith("ACTIONABLE ERROR: ")
        assert exc_info.value.declaration == "Lonely"

    def test_model_as_its_own_state(self, write_crate):
        """Test that a model cannot name itself as state."""
        source = _model_source("Loop").replace("state = LoopState", "state = Loop")
        crate = write_crate({"lib.rs": source})

        with pytest.raises(StructuralError, match="cannot be its own state"):
            ModelExtractor().extract(crate)

    def test_state_in_another_file(self, write_crate):
        """Test that the state struct must live next to the model."""
        source = _model_source("Split")
        state, model = source.split("#[lera::model", 1)
        crate = write_crate({"a.rs": state, "b.rs": "#[lera::model" + model})

        with pytest.raises(StructuralError, match="SplitState not found"):
            ModelExtractor().extract(crate)

    def test_state_without_marker(self, write_crate):
        """Test that the state struct must carry the state marker."""
        source = _model_source("Bare").replace("#[lera::state]\n", "")
        crate = write_crate({"lib.rs": source})

        with pytest.raises(StructuralError, match="must use #\\[lera::state\\]"):
            ModelExtractor().extract(crate)

    def test_missing_api_impl(self, write_crate):
        """Test that a model needs an api impl block."""
        source = _model_source("Mute").replace("#[lera::api]\n", "")
        crate = write_crate({"lib.rs": source})

        with pytest.raises(StructuralError, match="#\\[lera::api\\] impl for Mute"):
            ModelExtractor().extract(crate)

    def test_duplicate_api_impls(self, write_crate):
        """Test that api methods must live in a single impl block."""
        source = _model_source("Twice") + (
            "\n#[lera::api]\nimpl Twice {\n    pub fn other(&self) {}\n}\n"
        )
        crate = write_crate({"lib.rs": source})

        with pytest.raises(StructuralError, match="found 2 #\\[lera::api\\] impls"):
            ModelExtractor().extract(crate)

    @pytest.mark.parametrize("parameter", ["_: i64", "(a, b): (i32, i32)"])
    def test_parameter_pattern_must_be_a_name(self, write_crate, parameter):
        """Test that unnamed or destructured parameters are rejected."""
        source = _model_source("Shape").replace(
            "pub fn touch(&self)", f"pub fn touch(&self, {parameter})"
        )
        crate = write_crate({"lib.rs": source})

        with pytest.raises(StructuralError, match="of touch in .*lib.rs") as exc_info:
            ModelExtractor().extract(crate)

        assert exc_info.value.declaration == "touch"
        assert exc_info.value.source_path == crate / "src" / "lib.rs"

    def test_malformed_marker_names_file(self, write_crate):
        """Test that marker errors point at the model and file."""
        source = _model_source("Typo").replace("#[lera::api]", "#[lera::api(navigate)]")
        crate = write_crate({"lib.rs": source})

        with pytest.raises(MarkerParseError, match="on Typo in .*lib.rs"):
            ModelExtractor().extract(crate)

    def test_syntax_error_propagates(self, write_crate):
        """Test that a file that does not parse aborts extraction."""
        crate = write_crate({"lib.rs": _model_source("Fine") + "\nimpl {\n"})

        with pytest.raises(ParserError):
            ModelExtractor().extract(crate)
