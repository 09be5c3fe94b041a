"""Repository management for cloning and updating the documentation checkout."""

from .manager import RepositoryManager

__all__ = ["RepositoryManager"]
