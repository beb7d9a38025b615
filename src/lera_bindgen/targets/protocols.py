"""Protocols for target language plugins."""

from typing import Protocol, runtime_checkable

from lera_bindgen.targets.base import MethodBinder


@runtime_checkable
class TargetLanguage(Protocol):
    """Protocol for target language plugins.

    Each target must provide:
    - A canonical name (e.g., 'swift', 'kotlin')
    - The extension of the generated file it post-processes
    - The Jinja2 template rendering its view models
    - A method binder producing wrapper declarations
    - A hook preparing the upstream file before view models are appended
    """

    @property
    def name(self) -> str:
        """Canonical target name (e.g., 'swift', 'kotlin')."""
        ...

    @property
    def file_extension(self) -> str:
        """Extension of generated files including dot (e.g., '.kt')."""
        ...

    @property
    def template_name(self) -> str:
        """Template file name inside the package's templates directory."""
        ...

    @property
    def binder(self) -> MethodBinder:
        """Method binder for this target."""
        ...

    def prepare_corpus(self, corpus: str) -> str:
        """Adjust the upstream generated text before the fragment is appended.

        Must be idempotent: preparing an already prepared corpus returns it
        unchanged.
        """
        ...
