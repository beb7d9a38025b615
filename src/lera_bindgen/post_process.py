"""Post-processing entry points for UniFFI generated bindings.

Build scripts call these after UniFFI has written its Swift or Kotlin file.
Models are parsed once per run, every requested target is transformed in
memory, and files are only written once all transformations succeeded.
Each write goes through a temporary sibling file and ``os.replace``.
"""

import logging
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path

from lera_bindgen.emitter import CodeEmitter
from lera_bindgen.errors import BindingFileError
from lera_bindgen.extractor import ModelExtractor
from lera_bindgen.settings import BindgenSettings
from lera_bindgen.targets.protocols import TargetLanguage
from lera_bindgen.targets.registry import TargetRegistry

logger = logging.getLogger(__name__)

_DEFAULT_ENCODING = "utf-8"


class PostProcessor:
    """Rewrites generated binding files with lera view models appended."""

    def __init__(
        self,
        settings: BindgenSettings | None = None,
        registry: TargetRegistry | None = None,
        emitter: CodeEmitter | None = None,
    ) -> None:
        """Initialise the post-processor.

        Args:
            settings: Generator settings (defaults apply when omitted)
            registry: Target registry (built-in targets when omitted)
            emitter: Code emitter (packaged templates when omitted)

        """
        self._settings = settings or BindgenSettings()
        self._registry = registry or TargetRegistry.with_builtin_targets()
        self._emitter = emitter or CodeEmitter()

    def process(self, crate_path: Path, outputs: Mapping[str, Path]) -> list[Path]:
        """Post-process one generated file per target.

        Args:
            crate_path: Root directory of the Rust crate declaring the models
            outputs: Generated file per target name, e.g. {"swift": path}

        Returns:
            Paths that were rewritten

        Raises:
            BindingFileError: If an input is invalid or a file cannot be
                read or written
            TargetNotFoundError: If a target name is not registered
            BindgenError: If model extraction or rendering fails

        """
        jobs: list[tuple[TargetLanguage, Path]] = []
        for name, generated_path in outputs.items():
            target = self._registry.get(name)
            validate_inputs(generated_path, crate_path, target.file_extension)
            jobs.append((target, generated_path))

        if not jobs:
            return []

        for target, generated_path in jobs:
            logger.info(
                "Starting post processing: %s file: %s, rust crate: %s",
                target.name,
                generated_path,
                crate_path,
            )

        models = ModelExtractor(self._settings).extract(crate_path)

        transformed: list[tuple[Path, str]] = []
        for target, generated_path in jobs:
            corpus = _read(generated_path)
            transformed.append(
                (generated_path, self._emitter.transform(target, corpus, models))
            )

        for generated_path, contents in transformed:
            write_atomic(generated_path, contents)
            logger.info(
                "Replaced %s with post processed contents (%d bytes)",
                generated_path,
                len(contents.encode(_DEFAULT_ENCODING)),
            )

        return [path for path, _ in transformed]


def validate_inputs(generated_path: Path, crate_path: Path, extension: str) -> None:
    """Check the upstream contract of a post-processing call.

    Raises:
        BindingFileError: If the generated file is missing or has the wrong
            extension, or the crate path is not a directory

    """
    if not generated_path.is_file():
        raise BindingFileError(f"Generated file {generated_path} must exist")
    if not crate_path.is_dir():
        raise BindingFileError(f"Crate path {crate_path} must be an existing directory")
    if generated_path.suffix != extension:
        raise BindingFileError(f"Expected {generated_path} to end with {extension}")


def write_atomic(path: Path, contents: str) -> None:
    """Replace a file's contents through a temporary sibling file.

    Raises:
        BindingFileError: If the file cannot be written

    """
    fd, temp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "w", encoding=_DEFAULT_ENCODING, newline="") as handle:
            handle.write(contents)
        os.replace(temp_path, path)
    except OSError as e:
        temp_path.unlink(missing_ok=True)
        raise BindingFileError(f"Failed to write to path {path}: {e}") from e


def post_process_swift(
    generated_path: Path,
    crate_path: Path,
    settings: BindgenSettings | None = None,
) -> None:
    """Append Swift view models to a UniFFI generated ``.swift`` file."""
    PostProcessor(settings).process(crate_path, {"swift": generated_path})


def post_process_kotlin(
    generated_path: Path,
    crate_path: Path,
    settings: BindgenSettings | None = None,
) -> None:
    """Append Kotlin view models to a UniFFI generated ``.kt`` file."""
    PostProcessor(settings).process(crate_path, {"kotlin": generated_path})


def post_process_all(
    crate_path: Path,
    outputs: Mapping[str, Path],
    settings: BindgenSettings | None = None,
) -> list[Path]:
    """Post-process several targets at once, writing nothing if any fails."""
    return PostProcessor(settings).process(crate_path, outputs)


def _read(path: Path) -> str:
    try:
        # newline="" keeps CRLF files byte-identical on rewrite
        with path.open(encoding=_DEFAULT_ENCODING, newline="") as handle:
            return handle.read()
    except (OSError, UnicodeDecodeError) as e:
        raise BindingFileError(f"Failed to read path {path}: {e}") from e
