"""Discovery and parsing of model source files."""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from lera_bindgen.parser import ParsedSource, SourceCodeParser
from lera_bindgen.settings import BindgenSettings

logger = logging.getLogger(__name__)


class SourceScanner:
    """Enumerates and parses the source files of a crate.

    Only the direct listing of the configured source subdirectory is scanned.
    Files are visited in name order so every run discovers models in the
    same order.
    """

    def __init__(self, settings: BindgenSettings | None = None) -> None:
        """Initialise the scanner.

        Args:
            settings: Generator settings (defaults apply when omitted)

        """
        self._settings = settings or BindgenSettings()

    def source_dir(self, crate_path: Path) -> Path:
        """Directory holding the crate's model sources."""
        return crate_path / self._settings.source_subdir

    def list_source_files(self, crate_path: Path) -> list[Path]:
        """List source files in the crate's source directory, sorted by name.

        A missing source directory yields an empty list.
        """
        source_dir = self.source_dir(crate_path)
        if not source_dir.is_dir():
            logger.debug("Source directory %s does not exist, skipping", source_dir)
            return []

        extension = self._settings.source_extension
        return sorted(
            (
                entry
                for entry in source_dir.iterdir()
                if entry.is_file() and entry.suffix == extension
            ),
            key=lambda entry: entry.name,
        )

    def scan(self, crate_path: Path) -> list[ParsedSource]:
        """Parse every source file of a crate.

        Args:
            crate_path: Root directory of the crate

        Returns:
            Parsed sources in sorted file order

        Raises:
            ParserError: If any file fails to parse

        """
        files = self.list_source_files(crate_path)
        logger.debug("Found %d source files under %s", len(files), crate_path)

        workers = self._settings.parse_workers
        if workers == 1 or len(files) <= 1:
            parser = SourceCodeParser()
            return [parser.parse_file(file_path) for file_path in files]

        with ThreadPoolExecutor(max_workers=workers) as executor:
            # map() preserves input order
            return list(executor.map(_parse_file, files))


def _parse_file(file_path: Path) -> ParsedSource:
    # Parsers are not thread-safe, one per task
    return SourceCodeParser().parse_file(file_path)
