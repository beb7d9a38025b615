"""Error classes for lera-bindgen.

This module provides:
- BindgenError: Base exception class for all generator errors
- ConfigurationError: Invalid settings
- ParserError, MarkerParseError: Source and marker argument parse failures
- StructuralError: Marker usage that breaks model/state/api pairing rules
- ModelsNotFoundError: No model markers found in the scanned directories
- BindingFileError: Reading or writing a generated binding file failed
- TargetNotFoundError, TargetAlreadyRegisteredError: Target registry errors
- TemplateRenderError: Jinja2 rendering failure
"""

from pathlib import Path


class BindgenError(Exception):
    """Base exception for all lera-bindgen errors."""

    pass


class ConfigurationError(BindgenError):
    """Raised when generator settings are invalid."""

    pass


class ParserError(BindgenError):
    """Raised when a source file cannot be parsed."""

    pass


class MarkerParseError(ParserError):
    """Raised when the arguments of a marker attribute are malformed."""

    pass


class StructuralError(BindgenError):
    """Raised when a model declaration breaks a pairing invariant.

    The message always names the offending declaration and the file so the
    author knows which marker to add or fix.
    """

    def __init__(self, message: str, declaration: str, source_path: Path) -> None:
        """Initialise structural error with its location.

        Args:
            message: Description of what is wrong and how to fix it
            declaration: Name of the offending declaration
            source_path: File the declaration lives in

        """
        super().__init__(f"ACTIONABLE ERROR: {message}")
        self.declaration = declaration
        self.source_path = source_path


class ModelsNotFoundError(BindgenError):
    """Raised when no model markers are found in any inspected directory."""

    def __init__(self, inspected_dirs: list[Path]) -> None:
        """Initialise with every directory that was inspected.

        Args:
            inspected_dirs: Directories the scanner looked at

        """
        formatted = ", ".join(str(d) for d in inspected_dirs)
        super().__init__(f"No #[lera::model] usages found in any of: {formatted}")
        self.inspected_dirs = inspected_dirs


class BindingFileError(BindgenError):
    """Raised when a generated binding file cannot be read or written."""

    pass


class TargetNotFoundError(BindgenError):
    """Raised when a requested target language is not registered."""

    pass


class TargetAlreadyRegisteredError(BindgenError):
    """Raised when attempting to register a target that already exists."""

    pass


class TemplateRenderError(BindgenError):
    """Raised when a view model template fails to render."""

    pass
