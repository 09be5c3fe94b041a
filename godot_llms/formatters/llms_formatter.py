"""
llms.md formatter.

Joins the per-document Markdown produced by the pipeline into a single file.
Each document already starts with its own ``## <relative path>`` header, so
documents are simply separated by a blank line. An optional provenance header
records how the file was produced.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional, Sequence

from godot_llms.schemas import LanguageFilter

logger = logging.getLogger(__name__)

DOCUMENT_SEPARATOR = "\n\n"


def build_header(
    document_count: int,
    excluded_directories: Iterable[str],
    language: LanguageFilter,
    concurrency: int,
    generated_at: Optional[datetime] = None,
) -> str:
    """Provenance header placed above the documents."""
    generated_at = generated_at or datetime.now(timezone.utc)
    language = LanguageFilter(language)

    return (
        "# Godot Documentation - LLM Reference\n"
        "\n"
        "This file contains the complete Godot documentation converted from RST to Markdown format.\n"
        f"Generated on: {generated_at.isoformat()}\n"
        f"Total files processed: {document_count}\n"
        f"Excluded directories: {', '.join(excluded_directories)}\n"
        f"Language filter: {language.value}\n"
        f"Concurrency used: {concurrency} workers\n"
        "\n"
        "---\n"
        "\n"
    )


def combine_documents(documents: Sequence[str], header: Optional[str] = None) -> str:
    """
    Join document Markdown in order.

    Args:
        documents: Self-contained Markdown strings, in output order
        header: Optional text placed before the first document

    Returns:
        Combined Markdown
    """
    combined = DOCUMENT_SEPARATOR.join(documents)
    return f"{header}{combined}" if header else combined


def write_llms_file(output_path: Path, documents: Sequence[str], header: Optional[str] = None) -> Path:
    """
    Write the combined Markdown file.

    Args:
        output_path: Destination file (parent directories are created)
        documents: Self-contained Markdown strings, in output order
        header: Optional provenance header

    Returns:
        The path written
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(combine_documents(documents, header), encoding="utf-8")

    logger.info(f"Wrote {len(documents)} documents to {output_path}")
    return output_path
