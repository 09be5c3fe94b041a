"""Utility functions for godot_llms."""

from .file_scanner import FileScanner, scan_documentation

__all__ = ["FileScanner", "scan_documentation"]
