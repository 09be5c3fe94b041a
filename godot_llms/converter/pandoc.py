"""
pandoc adapter.

Hands filtered RST to an external ``pandoc`` process through a scratch file
and returns GitHub-flavoured Markdown. The scratch directory is removed on
every exit path.
"""

import asyncio
import logging
import shutil
import tempfile
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

PANDOC_FLAGS = ["-f", "rst", "-t", "gfm", "--strip-comments", "--no-highlight", "--wrap=none"]


class ConversionError(RuntimeError):
    """pandoc could not convert a document."""

    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class PandocConverter:
    """Convert RST text to GFM with pandoc."""

    def __init__(self, pandoc_path: str = "pandoc", extra_args: Optional[List[str]] = None):
        """
        Initialize the converter.

        Args:
            pandoc_path: pandoc executable name or path
            extra_args: Additional command-line arguments appended after PANDOC_FLAGS
        """
        self.pandoc_path = pandoc_path
        self.extra_args = extra_args or []

    def check_available(self) -> bool:
        """Return True if the pandoc executable can be found."""
        return shutil.which(self.pandoc_path) is not None

    def build_command(self, source_file: Path) -> List[str]:
        return [self.pandoc_path, str(source_file), *PANDOC_FLAGS, *self.extra_args]

    async def convert(self, text: str) -> str:
        """
        Convert one document.

        Args:
            text: RST source (already language-filtered)

        Returns:
            GFM Markdown produced by pandoc

        Raises:
            ConversionError: pandoc is missing or exited with a non-zero status
            OSError: the scratch file could not be written or removed
        """
        scratch_dir = Path(tempfile.mkdtemp(prefix="godot_llms_"))

        try:
            source_file = scratch_dir / "document.rst"
            source_file.write_text(text, encoding="utf-8")

            command = self.build_command(source_file)
            logger.debug(f"Running: {' '.join(command)}")

            try:
                process = await asyncio.create_subprocess_exec(
                    *command,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            except FileNotFoundError as e:
                raise ConversionError(f"pandoc executable not found: {self.pandoc_path}") from e

            stdout, stderr = await process.communicate()
            error_text = stderr.decode("utf-8", errors="replace").strip()

            if process.returncode != 0:
                raise ConversionError(
                    f"pandoc exited with status {process.returncode}: {error_text or 'no error output'}",
                    returncode=process.returncode,
                    stderr=error_text,
                )

            if error_text:
                logger.debug(f"pandoc warnings: {error_text}")

            return stdout.decode("utf-8")

        finally:
            shutil.rmtree(scratch_dir)
