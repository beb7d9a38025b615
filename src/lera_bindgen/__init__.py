"""View model bindings generator for lera.

This package scans a Rust crate for ``#[lera::model]`` declarations and
appends Swift and Kotlin view model wrappers to the files UniFFI generated
for that crate.

Use in a build script: UniFFI bindgen → post_process_swift / post_process_kotlin
"""

from .emitter import CodeEmitter
from .errors import (
    BindgenError,
    BindingFileError,
    ConfigurationError,
    MarkerParseError,
    ModelsNotFoundError,
    ParserError,
    StructuralError,
    TargetAlreadyRegisteredError,
    TargetNotFoundError,
    TemplateRenderError,
)
from .extractor import ModelExtractor, parse_models
from .ir import ParsedMethod, ParsedModel, ParsedParam, ParsedReturnType
from .post_process import (
    PostProcessor,
    post_process_all,
    post_process_kotlin,
    post_process_swift,
)
from .settings import BindgenSettings
from .targets import KotlinTarget, SwiftTarget, TargetLanguage, TargetRegistry

__all__ = [
    "BindgenError",
    "BindgenSettings",
    "BindingFileError",
    "CodeEmitter",
    "ConfigurationError",
    "KotlinTarget",
    "MarkerParseError",
    "ModelExtractor",
    "ModelsNotFoundError",
    "ParsedMethod",
    "ParsedModel",
    "ParsedParam",
    "ParsedReturnType",
    "ParserError",
    "PostProcessor",
    "StructuralError",
    "SwiftTarget",
    "TargetAlreadyRegisteredError",
    "TargetLanguage",
    "TargetNotFoundError",
    "TargetRegistry",
    "TemplateRenderError",
    "parse_models",
    "post_process_all",
    "post_process_kotlin",
    "post_process_swift",
]
