"""Target language registry.

Provides an explicitly constructed registry with entry point discovery for
target language plugins.
"""

import logging
from importlib.metadata import entry_points
from typing import Self

from lera_bindgen.errors import TargetAlreadyRegisteredError, TargetNotFoundError
from lera_bindgen.targets.kotlin import KotlinTarget
from lera_bindgen.targets.protocols import TargetLanguage
from lera_bindgen.targets.swift import SwiftTarget

logger = logging.getLogger(__name__)

TARGETS_ENTRY_POINT_GROUP = "lera_bindgen.targets"


class TargetRegistry:
    """Registry of target languages.

    Looks targets up by name or by the extension of the file they
    post-process.
    """

    def __init__(self) -> None:
        """Create an empty registry."""
        self._registry: dict[str, TargetLanguage] = {}
        self._extension_map: dict[str, str] = {}  # ".kt" → "kotlin"

    @classmethod
    def with_builtin_targets(cls) -> Self:
        """Create a registry holding the Swift and Kotlin targets."""
        registry = cls()
        registry.register(SwiftTarget())
        registry.register(KotlinTarget())
        return registry

    def discover(self) -> None:
        """Discover and register target plugins from entry points.

        Entry point group: lera_bindgen.targets

        Targets already registered under the same name are left in place.
        Plugins that fail to import are skipped with a warning.
        """
        for ep in entry_points(group=TARGETS_ENTRY_POINT_GROUP):
            if ep.name in self._registry:
                logger.debug("Target '%s' already registered, skipping", ep.name)
                continue
            try:
                target_class = ep.load()
            except ImportError as e:
                logger.warning("Skipping target plugin '%s': %s", ep.name, e)
                continue

            target = target_class()
            if target.name in self._registry:
                continue
            self.register(target)

    def register(self, target: TargetLanguage) -> None:
        """Register a target language.

        Args:
            target: TargetLanguage implementation

        Raises:
            TargetAlreadyRegisteredError: If the target is already registered

        """
        if target.name in self._registry:
            raise TargetAlreadyRegisteredError(
                f"Target '{target.name}' is already registered"
            )

        self._registry[target.name] = target
        self._extension_map[target.file_extension] = target.name

    def get(self, name: str) -> TargetLanguage:
        """Get a target by name.

        Args:
            name: Canonical target name (e.g., 'swift', 'kotlin')

        Returns:
            TargetLanguage implementation

        Raises:
            TargetNotFoundError: If the target is not registered

        """
        if name not in self._registry:
            raise TargetNotFoundError(
                f"Target '{name}' not registered. Available: {self.list_targets()}"
            )
        return self._registry[name]

    def get_by_extension(self, extension: str) -> TargetLanguage:
        """Get a target by generated file extension.

        Args:
            extension: File extension including dot (e.g., '.swift', '.kt')

        Returns:
            TargetLanguage implementation

        Raises:
            TargetNotFoundError: If no target handles the extension

        """
        if extension not in self._extension_map:
            raise TargetNotFoundError(
                f"No target registered for extension '{extension}'"
            )
        return self._registry[self._extension_map[extension]]

    def list_targets(self) -> list[str]:
        """List all registered target names."""
        return list(self._registry.keys())

    def is_registered(self, name: str) -> bool:
        """Check if a target is registered."""
        return name in self._registry
