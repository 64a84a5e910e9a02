"""Merge base resolution across a remote branch and a local branch."""

import logging
from pathlib import Path
from typing import Optional

from branch_ancestry.core.errors import NoCommonAncestor
from branch_ancestry.core.local_log import LocalLogReader
from branch_ancestry.core.remote_client import RemoteMetadataClient
from branch_ancestry.models.branch import Branch

logger = logging.getLogger(__name__)


class AncestryResolver:
    """Finds the commit shared by a remote branch tip and a local branch tip."""

    def __init__(self, remote: RemoteMetadataClient, local: LocalLogReader):
        self.remote = remote
        self.local = local

    def find_merge_base(
        self,
        api_base: str,
        remote_branch: Branch,
        local_branch: Branch,
        owner: str,
        repo: str,
        local_repo_path: Path,
        token: Optional[str] = None,
    ) -> str:
        """Return the first remote parent that is also a local parent.

        Only the direct parents of the two latest commits are compared, so a
        shared ancestor further back is not found. When several parents are
        shared, the order of the remote parent list decides.

        Raises:
            NoCommonAncestor: The two parent lists are disjoint.
        """
        remote_commit = self.remote.get_latest_commit(
            api_base, remote_branch, owner, repo, token
        )
        local_commit = self.local.get_latest_commit(local_branch, local_repo_path)

        local_parents = set(local_commit.parents)
        for sha in remote_commit.parents:
            if sha in local_parents:
                logger.info(
                    "Merge base of %s and %s is %s",
                    remote_branch.name,
                    local_branch.name,
                    sha,
                )
                return sha

        raise NoCommonAncestor(remote_branch.name, local_branch.name)
