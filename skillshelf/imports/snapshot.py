"""Obtain a local, shallow snapshot of a remote skill repository."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

import git
from git.exc import CommandError, GitCommandNotFound

from skillshelf.errors import SkillIOError

logger = logging.getLogger(__name__)


class ISnapshotFetcher(ABC):
    @abstractmethod
    def fetch(self, url: str, destination: Path) -> Path:
        """Materialize ``url`` under ``destination`` and return the snapshot root."""


class GitSnapshotFetcher(ISnapshotFetcher):
    def fetch(self, url: str, destination: Path) -> Path:
        logger.debug("git clone --depth 1 %s %s", url, destination)
        try:
            git.Repo.clone_from(
                url,
                str(destination),
                depth=1,
                single_branch=True,
                no_tags=True,
            )
        except GitCommandNotFound as exc:
            raise SkillIOError(f"git executable not found: {exc}") from exc
        except CommandError as exc:
            detail = (exc.stderr or "").strip() or str(exc)
            raise SkillIOError(f"git clone failed: {detail}") from exc
        except OSError as exc:
            raise SkillIOError(f"Failed to start git: {exc}") from exc
        return destination
