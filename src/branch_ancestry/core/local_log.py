"""Reads branch history from a local clone's reference logs.

Each line of ``.git/logs/refs/heads/<branch>`` records one update of the
branch pointer::

    <old-sha> <new-sha> <name> <email> <timestamp> <tz>\t<subject>

The reader splits lines on single spaces and relies on a fixed count of
seven fields; everything from the seventh field on is the free-text
subject.
"""

import logging
from pathlib import Path
from typing import List, NamedTuple, Optional

import git

from branch_ancestry.core.errors import (
    EmptyLog,
    InsufficientHistory,
    LocalBranchNotFound,
    MalformedLog,
)
from branch_ancestry.models.branch import Branch
from branch_ancestry.models.commit import Commit

logger = logging.getLogger(__name__)

HEADS_LOG_DIR = Path(".git") / "logs" / "refs" / "heads"
MIN_FIELDS = 7
MESSAGE_FIELD = 6


class ReflogEntry(NamedTuple):
    """One well-formed reference log line."""

    old_sha: str
    new_sha: str
    message: str


def parse_line(line: str) -> Optional[ReflogEntry]:
    """Parse a reference log line, returning None when it is too short."""
    fields = line.split(" ")
    if len(fields) < MIN_FIELDS:
        return None
    return ReflogEntry(
        old_sha=fields[0],
        new_sha=fields[1],
        message=" ".join(fields[MESSAGE_FIELD:]),
    )


class LocalLogReader:
    """Reconstructs branch tips and lineage from reference log files."""

    def heads_dir(self, local_repo_path: Path) -> Path:
        """Directory holding one reference log per local branch."""
        return Path(local_repo_path) / HEADS_LOG_DIR

    def log_path(self, local_repo_path: Path, branch_name: str) -> Path:
        """Reference log file of ``branch_name``."""
        return self.heads_dir(local_repo_path) / branch_name

    def list_branches(self, local_repo_path: Path) -> List[str]:
        """Names of all branches that have a reference log, sorted."""
        heads_dir = self.heads_dir(local_repo_path)
        if not heads_dir.is_dir():
            return []
        return sorted(
            path.relative_to(heads_dir).as_posix()
            for path in heads_dir.rglob("*")
            if path.is_file()
        )

    def find_branch_by_name(self, local_repo_path: Path, branch_name: str) -> Branch:
        """Find the commit a local branch currently points to.

        The tip is the new-sha field of the last log line. The branch must
        also show up in the heads log directory listing.
        """
        path = self.log_path(local_repo_path, branch_name)
        if not path.is_file():
            raise LocalBranchNotFound(branch_name, path)

        lines = self._read_lines(path)
        if not lines:
            raise MalformedLog(branch_name, path, "no log entries")

        fields = lines[-1].split(" ")
        if len(fields) < 2 or not fields[1]:
            raise MalformedLog(branch_name, path, "no commit sha in last entry")

        if branch_name not in self.list_branches(local_repo_path):
            raise LocalBranchNotFound(branch_name, path)

        try:
            return Branch(name=branch_name, commit_sha=fields[1])
        except ValueError as e:
            raise MalformedLog(branch_name, path, str(e)) from e

    def get_latest_commit(self, branch: Branch, local_repo_path: Path) -> Commit:
        """Rebuild the latest commit of ``branch`` from its reference log.

        The old-sha of every entry after the first is collected as a parent;
        entries with fewer than seven fields are skipped. The last entry
        supplies the commit's own sha and message and must be well formed.
        """
        path = self.log_path(local_repo_path, branch.name)
        if not path.is_file():
            raise LocalBranchNotFound(branch.name, path)
        if path.stat().st_size == 0:
            raise EmptyLog(branch.name, path)

        lines = self._read_lines(path)
        if len(lines) < 2:
            raise InsufficientHistory(branch.name, path, len(lines))

        parents = []
        for line in lines[1:]:
            entry = parse_line(line)
            if entry is None:
                logger.debug("Skipping malformed entry in %s: %r", path, line)
                continue
            parents.append(entry.old_sha)

        last = parse_line(lines[-1])
        if last is None:
            raise MalformedLog(branch.name, path, "malformed last line")

        try:
            return Commit(message=last.message, sha=last.new_sha, parents=tuple(parents))
        except ValueError as e:
            raise MalformedLog(branch.name, path, str(e)) from e

    def read_entries(self, local_repo_path: Path, branch_name: str) -> List[ReflogEntry]:
        """All well-formed entries of a branch's reference log, oldest first."""
        path = self.log_path(local_repo_path, branch_name)
        if not path.is_file():
            raise LocalBranchNotFound(branch_name, path)
        entries = []
        for line in self._read_lines(path):
            entry = parse_line(line)
            if entry is not None:
                entries.append(entry)
        return entries

    def current_branch(self, local_repo_path: Path) -> str:
        """Name of the branch checked out in the working copy."""
        try:
            repo = git.Repo(local_repo_path)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            raise LocalBranchNotFound("HEAD", Path(local_repo_path)) from e
        try:
            return repo.active_branch.name
        except TypeError as e:
            # Detached HEAD
            raise LocalBranchNotFound("HEAD", Path(local_repo_path)) from e
        finally:
            repo.close()

    def _read_lines(self, path: Path) -> List[str]:
        logger.debug("Reading reference log %s", path)
        text = path.read_text(encoding="utf-8", errors="replace")
        # Only newlines end an entry; subjects may hold other line separators
        lines = text.split("\n")
        if lines[-1] == "":
            lines.pop()
        return lines
