"""Document conversion pipeline."""

from .runner import DocumentConversionPipeline

__all__ = ["DocumentConversionPipeline"]
