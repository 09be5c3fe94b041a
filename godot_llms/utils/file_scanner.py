"""
File scanner for the Godot documentation tree.

Finds the reStructuredText pages to convert:
- only ``.rst`` files that live in a subdirectory (root pages such as
  ``index.rst`` are skipped)
- files and directories whose names start with ``.`` or ``_`` are skipped
  (``_static``, ``_templates``, ``.github``...)
- top-level directories listed in the configured exclusions are skipped
"""

from pathlib import Path
from typing import Iterable, List, Optional, Set
import logging

logger = logging.getLogger(__name__)


class FileScanner:
    """
    Recursively scan a documentation checkout for pages to convert.

    Results are sorted by path so that output order is stable between runs.
    """

    SUPPORTED_EXTENSIONS = {'.rst'}

    def __init__(
        self,
        base_path: Path,
        excluded_directories: Optional[Iterable[str]] = None,
        extensions: Optional[Set[str]] = None
    ):
        """
        Initialize the file scanner.

        Args:
            base_path: Root of the documentation checkout
            excluded_directories: Top-level directory names to skip
            extensions: File extensions to include (default: .rst)

        Raises:
            ValueError: If base_path does not exist or is not a directory
        """
        self.base_path = Path(base_path).resolve()
        self.excluded_directories = set(excluded_directories or [])
        self.extensions = extensions or self.SUPPORTED_EXTENSIONS

        if not self.base_path.exists():
            raise ValueError(f"Directory {self.base_path} does not exist")

        if not self.base_path.is_dir():
            raise ValueError(f"Base path is not a directory: {self.base_path}")

    def scan(self) -> List[Path]:
        """
        Scan the checkout for documentation pages.

        Returns:
            Sorted list of page paths
        """
        logger.info(f"Scanning documentation directory: {self.base_path}")
        logger.debug(f"Excluding directories: {', '.join(sorted(self.excluded_directories))}")

        doc_files = sorted(self._walk_directory(self.base_path, is_subdir=False))

        logger.info(f"Found {len(doc_files)} documentation files")
        return doc_files

    def _walk_directory(self, directory: Path, is_subdir: bool):
        """
        Recursively walk directory, yielding eligible pages.

        Args:
            directory: Directory to walk
            is_subdir: False only for the checkout root

        Yields:
            Paths of eligible files
        """
        for item in directory.iterdir():
            if item.name.startswith(('.', '_')):
                continue

            if item.is_dir():
                if not is_subdir and item.name in self.excluded_directories:
                    logger.info(f"Skipping excluded directory: {item.name}")
                    continue
                yield from self._walk_directory(item, is_subdir=True)

            elif item.is_file() and is_subdir and item.suffix in self.extensions:
                yield item

    def relative_label(self, file_path: Path) -> str:
        """Path of ``file_path`` relative to the checkout, with forward slashes."""
        return Path(file_path).resolve().relative_to(self.base_path).as_posix()


def scan_documentation(docs_path: Path, excluded_directories: Optional[Iterable[str]] = None) -> List[Path]:
    """
    Convenience function to scan a documentation checkout.

    Example:
        >>> pages = scan_documentation(Path("godot-docs"), ["about", "community"])
    """
    return FileScanner(docs_path, excluded_directories).scan()
