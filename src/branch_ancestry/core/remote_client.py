"""Client for the repository-hosting REST API."""

import json
import logging
from typing import Any, Dict, List, Optional

import httpx

from branch_ancestry.core.errors import (
    ApiError,
    CommitNotFound,
    EmptyResponse,
    MalformedResponse,
    NotFound,
    TransportError,
)
from branch_ancestry.models.branch import Branch
from branch_ancestry.models.commit import Commit

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
ACCEPT_HEADER = "application/vnd.github+json"


class RemoteMetadataClient:
    """Reads branches, commits and comparisons from a GitHub-style API.

    Args:
        http_client: Transport to send requests with. When omitted the client
            creates its own ``httpx.Client`` and closes it in ``close()``.
        timeout: Timeout in seconds for a self-created transport.

    The access token is passed per call and never stored, so one client can
    serve authenticated and anonymous callers at the same time.
    """

    def __init__(
        self,
        http_client: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=timeout)

    def __enter__(self) -> "RemoteMetadataClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_client:
            self._client.close()

    def find_branch_by_name(
        self, api_base: str, branch_name: str, token: Optional[str] = None
    ) -> Branch:
        """Find a branch in the remote branch listing.

        Entries are scanned in the order the API returns them and the first
        one named ``branch_name`` wins.

        Raises:
            NotFound: No entry has that name.
        """
        url = f"{_strip(api_base)}/branches"
        branches = self._get_json(url, token)
        if not isinstance(branches, list):
            raise MalformedResponse(url, "expected a JSON array of branches")

        for entry in branches:
            if not isinstance(entry, dict) or entry.get("name") != branch_name:
                continue
            try:
                return Branch(name=branch_name, commit_sha=entry["commit"]["sha"])
            except (KeyError, TypeError, ValueError) as e:
                raise MalformedResponse(
                    url, f"branch '{branch_name}' has no valid commit sha"
                ) from e

        raise NotFound(branch_name)

    def get_latest_commit(
        self,
        api_base: str,
        branch: Branch,
        owner: str,
        repo: str,
        token: Optional[str] = None,
    ) -> Commit:
        """Fetch the commit a branch points to, with its parents in order.

        Raises:
            CommitNotFound: The API answered 404 for the branch tip.
        """
        url = f"{_strip(api_base)}/commits/{branch.commit_sha}"
        logger.debug(
            "Fetching tip of %s/%s branch %s", owner, repo, branch.name
        )
        payload = self._get_json(url, token, not_found_branch=branch)
        return _decode_commit(url, payload)

    def find_modified_files(
        self,
        api_base: str,
        head_sha: str,
        base_sha: str,
        token: Optional[str] = None,
    ) -> List[str]:
        """List files changed between ``base_sha`` and ``head_sha``."""
        url = f"{_strip(api_base)}/compare/{base_sha}...{head_sha}"
        payload = self._get_json(url, token)
        if not isinstance(payload, dict):
            raise MalformedResponse(url, "expected a JSON object")

        files = payload.get("files", [])
        if not isinstance(files, list):
            raise MalformedResponse(url, "'files' is not an array")
        try:
            return [str(entry["filename"]) for entry in files]
        except (KeyError, TypeError) as e:
            raise MalformedResponse(url, "file entry without a filename") from e

    def _get_json(
        self,
        url: str,
        token: Optional[str],
        not_found_branch: Optional[Branch] = None,
    ) -> Any:
        """GET ``url`` and decode its JSON body, mapping failures to errors."""
        try:
            response = self._client.get(url, headers=_headers(token))
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug("GET %s failed: %s", url, e)
            raise TransportError(url, str(e)) from e

        logger.debug("GET %s -> %s", url, response.status_code)

        if not response.is_success:
            if response.status_code == 404 and not_found_branch is not None:
                raise CommitNotFound(
                    not_found_branch.name, not_found_branch.commit_sha
                )
            raise ApiError(url, response.status_code, response.text)

        if not response.content.strip():
            raise EmptyResponse(url)

        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedResponse(url, f"invalid JSON: {e}") from e


def _decode_commit(url: str, payload: Any) -> Commit:
    if not isinstance(payload, dict):
        raise MalformedResponse(url, "expected a JSON object")
    try:
        return Commit(
            message=payload["commit"]["message"],
            sha=payload["sha"],
            parents=tuple(parent["sha"] for parent in payload["parents"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedResponse(url, f"invalid commit object: {e}") from e


def _headers(token: Optional[str]) -> Dict[str, str]:
    headers = {"Accept": ACCEPT_HEADER}
    if token and token.strip():
        headers["Authorization"] = f"token {token}"
    return headers


def _strip(api_base: str) -> str:
    return api_base.rstrip("/")
