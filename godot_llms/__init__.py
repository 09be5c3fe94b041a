"""
godot-llms - Godot documentation converted into a single llms.md file.

Turns the Godot engine's reStructuredText documentation into one Markdown
file suitable for language-model consumption.

Main Components:
- Transform: Code-tab language filter, markup cleaner, API table reconstruction
- Converter: pandoc subprocess wrapper (RST → GitHub-flavoured Markdown)
- Pipeline: Batch-bounded concurrent conversion of every document
- Repository: Clone/update of the godot-docs checkout (GitPython)
- Formatters: Combine documents into llms.md

Usage:
    import asyncio
    from pathlib import Path
    from godot_llms import DocumentConversionPipeline, PandocConverter, load_config
    from godot_llms.utils import scan_documentation

    config = load_config(overrides={"language": "gdscript"})
    pipeline = DocumentConversionPipeline(config, PandocConverter())
    files = scan_documentation(config.godot_docs_path, config.excluded_directories)
    summary = asyncio.run(pipeline.run(files))
"""

from .schemas import (
    # Options
    LanguageFilter,

    # Extraction
    PropertyRecord,
    MethodRecord,

    # Results
    DocumentResult,
    DocumentFailure,
    ConversionSummary,
    RepositoryInfo,
)

from .config import ConverterConfig, GitConfig, load_config
from .converter import ConversionError, PandocConverter
from .pipeline import DocumentConversionPipeline

__all__ = [
    # Pipeline
    "DocumentConversionPipeline",
    "PandocConverter",
    "ConversionError",

    # Configuration
    "ConverterConfig",
    "GitConfig",
    "load_config",

    # Schemas
    "LanguageFilter",
    "PropertyRecord",
    "MethodRecord",
    "DocumentResult",
    "DocumentFailure",
    "ConversionSummary",
    "RepositoryInfo",
]

__version__ = "0.1.0"
