"""Exceptions raised while resolving branch ancestry.

Every failure has its own class carrying the values a caller needs to
react to it, so callers can branch on the type instead of parsing text.
"""

from pathlib import Path
from typing import Optional


class AncestryError(Exception):
    """Base exception for all ancestry resolution failures."""


class TransportError(AncestryError):
    """The HTTP request itself failed (connection refused, timeout, ...)."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Request to {url} failed: {reason}")
        self.url = url
        self.reason = reason


class ApiError(AncestryError):
    """The remote API answered with a non-success status."""

    def __init__(self, url: str, status_code: int, body: str):
        super().__init__(f"API error: {status_code} - {body}")
        self.url = url
        self.status_code = status_code
        self.body = body


class EmptyResponse(AncestryError):
    """The remote API answered with an empty body."""

    def __init__(self, url: str):
        super().__init__(f"Empty response body from {url}")
        self.url = url


class MalformedResponse(AncestryError):
    """The response body could not be decoded into the expected shape."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Malformed response from {url}: {reason}")
        self.url = url
        self.reason = reason


class NotFound(AncestryError):
    """No remote branch with the requested name exists."""

    def __init__(self, branch_name: str, message: Optional[str] = None):
        super().__init__(message or f"Branch '{branch_name}' not found")
        self.branch_name = branch_name


class CommitNotFound(NotFound):
    """The commit a remote branch points to does not exist on the remote."""

    def __init__(self, branch_name: str, sha: str):
        super().__init__(
            branch_name, f"Commit {sha} of branch '{branch_name}' not found"
        )
        self.sha = sha


class LocalBranchNotFound(AncestryError):
    """The local clone has no reference log for the branch."""

    def __init__(self, branch_name: str, path: Path):
        super().__init__(f"Local branch '{branch_name}' not found")
        self.branch_name = branch_name
        self.path = Path(path)


class MalformedLog(AncestryError):
    """A reference log does not have the structure the reader relies on."""

    def __init__(self, branch_name: str, path: Path, reason: str):
        super().__init__(
            f"Malformed reference log for branch '{branch_name}': {reason}"
        )
        self.branch_name = branch_name
        self.path = Path(path)
        self.reason = reason


class EmptyLog(AncestryError):
    """The reference log exists but holds no data."""

    def __init__(self, branch_name: str, path: Path):
        super().__init__(f"Local branch '{branch_name}' does not have any changes")
        self.branch_name = branch_name
        self.path = Path(path)


class InsufficientHistory(AncestryError):
    """The reference log is too short to yield a commit and its parents."""

    def __init__(self, branch_name: str, path: Path, line_count: int):
        super().__init__(
            f"Not enough log entries in branch '{branch_name}' "
            f"(found {line_count}, need at least 2)"
        )
        self.branch_name = branch_name
        self.path = Path(path)
        self.line_count = line_count


class NoCommonAncestor(AncestryError):
    """The two branch tips share no direct parent."""

    def __init__(self, remote_branch: str, local_branch: str):
        super().__init__(
            f"Branches '{remote_branch}' and '{local_branch}' "
            f"do not share a merge base"
        )
        self.remote_branch = remote_branch
        self.local_branch = local_branch
