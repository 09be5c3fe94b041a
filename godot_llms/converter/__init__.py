"""Markup converter adapters."""

from .pandoc import PandocConverter, ConversionError, PANDOC_FLAGS

__all__ = ["PandocConverter", "ConversionError", "PANDOC_FLAGS"]
