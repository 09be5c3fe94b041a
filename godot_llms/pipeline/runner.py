"""
Pipeline runner that orchestrates the per-document conversion workflow.

Each document goes through:
1. Language filtering of code tabs (raw RST)
2. Conversion to GitHub-flavoured Markdown (external converter)
3. Markup cleanup
4. Properties/Methods table reconstruction

Documents are processed in consecutive batches of at most ``concurrency``
documents; a batch is fully drained before the next one starts. A failing
document is logged and left out of the output, it never stops the run.
"""

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn, TimeElapsedColumn

from godot_llms.config import ConverterConfig
from godot_llms.schemas import ConversionSummary, DocumentFailure, DocumentResult
from godot_llms.transform import clean_markup, filter_by_language, reconstruct_tables

logger = logging.getLogger(__name__)

console = Console()


def _first_line(error: BaseException) -> str:
    text = str(error).strip()
    return text.splitlines()[0] if text else type(error).__name__


class DocumentConversionPipeline:
    """Orchestrates filter → convert → clean → reconstruct over many documents."""

    def __init__(
        self,
        config: ConverterConfig,
        converter,
        docs_root: Optional[Path] = None,
        show_progress: bool = True,
    ):
        """
        Initialize the conversion pipeline.

        Args:
            config: Effective converter configuration (language, concurrency)
            converter: Object with ``async convert(text) -> str`` (e.g. PandocConverter)
            docs_root: Directory document labels are made relative to
                       (default: config.godot_docs_path)
            show_progress: Display a rich progress bar while running
        """
        self.config = config
        self.converter = converter
        self.docs_root = Path(docs_root or config.godot_docs_path).resolve()
        self.show_progress = show_progress

    def label_for(self, doc_file: Path) -> str:
        """Header label for a document: its path relative to the docs root."""
        try:
            return Path(doc_file).resolve().relative_to(self.docs_root).as_posix()
        except ValueError:
            return Path(doc_file).name

    async def _process_document_end_to_end(self, doc_file: Path) -> str:
        """
        Run every transformation step for one document.

        Args:
            doc_file: Path to the .rst source

        Returns:
            Final Markdown, starting with the document's own header

        Raises:
            Any error from reading, converting or transforming the document
        """
        raw_text = Path(doc_file).read_text(encoding="utf-8")

        filtered = filter_by_language(raw_text, self.config.language)
        converted = await self.converter.convert(filtered)
        cleaned = clean_markup(converted)
        reconstructed = reconstruct_tables(cleaned)

        header = f"## {self.label_for(doc_file)}"
        return "\n\n".join(part for part in (header, reconstructed) if part)

    async def process_document(self, doc_file: Path) -> DocumentResult:
        """
        Process one document, capturing any failure in the result.

        Args:
            doc_file: Path to the .rst source

        Returns:
            DocumentResult with status "success" or "failed"
        """
        label = self.label_for(doc_file)
        start_time = datetime.now()

        try:
            markdown = await self._process_document_end_to_end(doc_file)
        except Exception as e:
            logger.warning(f"Failed to convert {label}: {_first_line(e)}")
            logger.debug(f"Full error for {label}: {e!r}")
            return DocumentResult(
                source_path=str(doc_file),
                label=label,
                status="failed",
                error=str(e),
                duration_seconds=(datetime.now() - start_time).total_seconds(),
            )

        logger.debug(f"Completed {label}")
        return DocumentResult(
            source_path=str(doc_file),
            label=label,
            status="success",
            markdown=markdown,
            duration_seconds=(datetime.now() - start_time).total_seconds(),
        )

    async def _run_batches(self, doc_files: Sequence[Path], progress: Optional[Progress], task) -> List[DocumentResult]:
        """Process ``doc_files`` in consecutive batches; results keep input order."""
        batch_size = self.config.concurrency
        results: List[DocumentResult] = []

        for offset in range(0, len(doc_files), batch_size):
            batch = doc_files[offset:offset + batch_size]

            async def _tracked(doc_file: Path) -> DocumentResult:
                result = await self.process_document(doc_file)
                if progress is not None:
                    progress.update(task, advance=1)
                return result

            # gather() returns results in argument order, not completion order
            results.extend(await asyncio.gather(*(_tracked(doc) for doc in batch)))

        return results

    async def run(self, doc_files: Sequence[Path]) -> ConversionSummary:
        """
        Convert all documents.

        Args:
            doc_files: Ordered list of .rst paths

        Returns:
            ConversionSummary with successful documents in input order
        """
        overall_start = datetime.now()
        doc_files = list(doc_files)

        logger.info(
            f"Converting {len(doc_files)} documents "
            f"({self.config.concurrency} at a time, language: {self.config.language.value})"
        )

        if self.show_progress and doc_files:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                TimeElapsedColumn(),
                console=console,
            ) as progress:
                task = progress.add_task(f"[cyan]Converting {len(doc_files)} documents", total=len(doc_files))
                results = await self._run_batches(doc_files, progress, task)
        else:
            results = await self._run_batches(doc_files, None, None)

        successful = [r for r in results if r.status == "success"]
        failed = [r for r in results if r.status == "failed"]

        return ConversionSummary(
            attempted=len(results),
            successful=len(successful),
            failed=len(failed),
            documents=[r.markdown for r in successful],
            failures=[DocumentFailure(label=r.label, error=r.error or "") for r in failed],
            duration_seconds=(datetime.now() - overall_start).total_seconds(),
            concurrency=self.config.concurrency,
            language=self.config.language,
        )
