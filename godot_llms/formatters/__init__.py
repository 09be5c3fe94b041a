"""
Output formatters.

Serialize converted documents into the final llms.md file.
"""

from .llms_formatter import build_header, combine_documents, write_llms_file

__all__ = [
    "build_header",
    "combine_documents",
    "write_llms_file",
]
