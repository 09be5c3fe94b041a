"""Text transformation passes: language filtering, cleanup, table reconstruction."""

from .language_filter import filter_by_language, TabScanner
from .cleaner import clean_markup, CleanupRule, RULES
from .tables import reconstruct_tables, parse_property_line, parse_method_line, SectionRule

__all__ = [
    "filter_by_language",
    "TabScanner",
    "clean_markup",
    "CleanupRule",
    "RULES",
    "reconstruct_tables",
    "parse_property_line",
    "parse_method_line",
    "SectionRule",
]
