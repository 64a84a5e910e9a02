"""Fetches the files changed on a remote branch since its merge base."""

from typing import Optional

from branch_ancestry.core.remote_client import RemoteMetadataClient
from branch_ancestry.models.change_set import ChangeSet


class ChangeSetFetcher:
    """Lists files modified between a merge base and a remote branch tip."""

    def __init__(self, remote: RemoteMetadataClient):
        self.remote = remote

    def fetch(
        self,
        api_base: str,
        merge_base_sha: str,
        head_sha: str,
        token: Optional[str] = None,
    ) -> ChangeSet:
        files = self.remote.find_modified_files(
            api_base, head_sha, merge_base_sha, token
        )
        return ChangeSet(base_sha=merge_base_sha, head_sha=head_sha, files=tuple(files))
