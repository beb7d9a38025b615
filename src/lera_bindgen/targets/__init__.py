"""Target languages for generated view models."""

from lera_bindgen.targets.base import (
    BoundMethod,
    BoundParam,
    DefaultValueResolver,
    MethodBinder,
    TypeMapper,
)
from lera_bindgen.targets.kotlin import KotlinTarget
from lera_bindgen.targets.protocols import TargetLanguage
from lera_bindgen.targets.registry import TargetRegistry
from lera_bindgen.targets.swift import SwiftTarget

__all__ = [
    "BoundMethod",
    "BoundParam",
    "DefaultValueResolver",
    "KotlinTarget",
    "MethodBinder",
    "SwiftTarget",
    "TargetLanguage",
    "TargetRegistry",
    "TypeMapper",
]
