"""Repository management for the documentation checkout."""

import logging
from pathlib import Path
from typing import Optional

import git

from godot_llms.config import GitConfig
from godot_llms.schemas import RepositoryInfo

logger = logging.getLogger(__name__)

TROUBLESHOOTING_TIPS = (
    "Ensure git is installed and available in PATH",
    "Check your internet connection",
    "Verify repository URL is accessible",
    "Set git.enabled to false in config to skip git operations",
)


class RepositoryManager:
    """Clones or updates the documentation repository before a run."""

    def __init__(self, repo_path: Path, git_config: Optional[GitConfig] = None):
        """
        Initialize repository manager.

        Args:
            repo_path: Where the checkout lives (or will be cloned to)
            git_config: Repository URL, branch and update policy
        """
        self.repo_path = Path(repo_path)
        self.git_config = git_config or GitConfig()

    def ensure_repository(self) -> RepositoryInfo:
        """Make sure an up-to-date checkout exists at ``repo_path``.

        - Existing git checkout: fetch, checkout and pull the branch when
          auto-update is enabled, otherwise use it as-is.
        - Existing directory that is not a git checkout: error.
        - Missing directory: single-branch clone.

        Returns:
            RepositoryInfo describing the checked-out commit

        Raises:
            RuntimeError: If any git operation fails
        """
        try:
            if self.repo_path.exists():
                repo = self._open_existing()
            else:
                repo = self._clone()

            info = self.describe(repo)
            logger.info(f"Using commit: {info.commit_hash} ({info.commit_date})")
            return info

        except (git.GitError, OSError) as e:
            for tip in TROUBLESHOOTING_TIPS:
                logger.info(f"  - {tip}")
            raise RuntimeError(f"Git operation failed for {self.repo_path}: {e}") from e

    def _open_existing(self) -> git.Repo:
        if not (self.repo_path / ".git").exists():
            raise RuntimeError(
                f"Directory {self.repo_path} exists but is not a git repository; "
                "remove it or change godotDocsPath in your configuration"
            )

        logger.info(f"Documentation repository found at {self.repo_path}")
        repo = git.Repo(self.repo_path)

        if not self.git_config.auto_update:
            logger.info("Using existing repository (auto-update disabled)")
            return repo

        branch = self.git_config.branch
        logger.info(f"Updating repository (branch: {branch})...")
        repo.remotes.origin.fetch()
        repo.git.checkout(branch)
        repo.remotes.origin.pull(branch)
        logger.info("Repository updated successfully")
        return repo

    def _clone(self) -> git.Repo:
        logger.info("Cloning documentation repository...")
        logger.info(f"  Repository: {self.git_config.repository}")
        logger.info(f"  Branch: {self.git_config.branch}")
        logger.info(f"  Destination: {self.repo_path}")

        repo = git.Repo.clone_from(
            self.git_config.repository,
            self.repo_path,
            branch=self.git_config.branch,
            single_branch=True
        )
        logger.info("Repository cloned successfully")
        return repo

    def describe(self, repo: git.Repo) -> RepositoryInfo:
        """Summarize the checked-out commit."""
        commit = repo.head.commit
        try:
            branch = repo.active_branch.name
        except TypeError:
            # Detached HEAD
            branch = None

        return RepositoryInfo(
            path=str(self.repo_path),
            branch=branch,
            commit_hash=commit.hexsha[:8],
            commit_date=commit.committed_datetime.strftime("%Y-%m-%d"),
        )
