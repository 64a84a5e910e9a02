"""Tests for RemoteMetadataClient against a mocked GitHub API."""

import httpx
import pytest

from branch_ancestry.core.errors import (
    ApiError,
    CommitNotFound,
    EmptyResponse,
    MalformedResponse,
    NotFound,
    TransportError,
)
from branch_ancestry.core.remote_client import RemoteMetadataClient
from branch_ancestry.models.branch import Branch
from branch_ancestry.models.commit import Commit
from reflog_helpers import API

BRANCHES = [
    {"name": "main", "commit": {"sha": "abc123"}},
    {"name": "dev", "commit": {"sha": "def456"}},
]


@pytest.fixture
def client():
    with RemoteMetadataClient() as remote:
        yield remote


def test_find_branch_by_name(httpx_mock, client):
    httpx_mock.add_response(url=f"{API}/branches", json=BRANCHES)

    branch = client.find_branch_by_name(API, "main", "token")

    assert branch == Branch(name="main", commit_sha="abc123")


def test_find_branch_first_match_wins(httpx_mock, client):
    httpx_mock.add_response(
        url=f"{API}/branches",
        json=[
            {"name": "main", "commit": {"sha": "first1"}},
            {"name": "main", "commit": {"sha": "second2"}},
        ],
    )

    assert client.find_branch_by_name(API, "main").commit_sha == "first1"


def test_find_branch_not_found(httpx_mock, client):
    httpx_mock.add_response(
        url=f"{API}/branches", json=[{"name": "main", "commit": {"sha": "abc123"}}]
    )

    with pytest.raises(NotFound) as exc_info:
        client.find_branch_by_name(API, "dev")

    assert exc_info.value.branch_name == "dev"


def test_find_branch_in_empty_list(httpx_mock, client):
    httpx_mock.add_response(url=f"{API}/branches", json=[])

    with pytest.raises(NotFound):
        client.find_branch_by_name(API, "main")


def test_token_sent_as_authorization_header(httpx_mock, client):
    httpx_mock.add_response(
        url=f"{API}/branches",
        match_headers={"Authorization": "token secret"},
        json=BRANCHES,
    )

    client.find_branch_by_name(API, "dev", "secret")


def test_no_authorization_header_without_token(httpx_mock, client):
    httpx_mock.add_response(url=f"{API}/branches", json=BRANCHES)

    client.find_branch_by_name(API, "main")

    request = httpx_mock.get_request()
    assert "Authorization" not in request.headers


def test_blank_token_is_not_sent(httpx_mock, client):
    httpx_mock.add_response(url=f"{API}/branches", json=BRANCHES)

    client.find_branch_by_name(API, "main", "  ")

    assert "Authorization" not in httpx_mock.get_request().headers


def test_trailing_slash_in_api_base(httpx_mock, client):
    httpx_mock.add_response(url=f"{API}/branches", json=BRANCHES)

    assert client.find_branch_by_name(API + "/", "dev").commit_sha == "def456"


def test_api_error_carries_status_and_body(httpx_mock, client):
    httpx_mock.add_response(url=f"{API}/branches", status_code=403, text="rate limited")

    with pytest.raises(ApiError) as exc_info:
        client.find_branch_by_name(API, "main")

    assert exc_info.value.status_code == 403
    assert exc_info.value.body == "rate limited"


def test_transport_error(httpx_mock, client):
    httpx_mock.add_exception(httpx.ConnectError("Connection refused"))

    with pytest.raises(TransportError) as exc_info:
        client.find_branch_by_name(API, "main")

    assert exc_info.value.url == f"{API}/branches"
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


def test_empty_body_is_an_error(httpx_mock, client):
    httpx_mock.add_response(url=f"{API}/branches", content=b"")

    with pytest.raises(EmptyResponse):
        client.find_branch_by_name(API, "main")


def test_invalid_json(httpx_mock, client):
    httpx_mock.add_response(url=f"{API}/branches", content=b"<html>oops</html>")

    with pytest.raises(MalformedResponse):
        client.find_branch_by_name(API, "main")


def test_branch_listing_must_be_an_array(httpx_mock, client):
    httpx_mock.add_response(url=f"{API}/branches", json={"message": "hi"})

    with pytest.raises(MalformedResponse):
        client.find_branch_by_name(API, "main")


def test_matched_branch_without_sha(httpx_mock, client):
    httpx_mock.add_response(url=f"{API}/branches", json=[{"name": "main"}])

    with pytest.raises(MalformedResponse):
        client.find_branch_by_name(API, "main")


def test_get_latest_commit(httpx_mock, client):
    httpx_mock.add_response(
        url=f"{API}/commits/abc123",
        json={
            "sha": "abc123",
            "commit": {"message": "Initial commit"},
            "parents": [{"sha": "p1"}, {"sha": "p2"}],
        },
    )

    commit = client.get_latest_commit(
        API, Branch(name="main", commit_sha="abc123"), "owner", "repo", "token123"
    )

    assert commit == Commit(message="Initial commit", sha="abc123", parents=["p1", "p2"])


def test_get_latest_commit_preserves_parent_order(httpx_mock, client):
    parents = [f"parent{i}" for i in (3, 1, 4, 0, 2)]
    httpx_mock.add_response(
        url=f"{API}/commits/abc123",
        json={
            "sha": "abc123",
            "commit": {"message": "Octopus merge"},
            "parents": [{"sha": sha} for sha in parents],
        },
    )

    commit = client.get_latest_commit(
        API, Branch(name="main", commit_sha="abc123"), "owner", "repo"
    )

    assert list(commit.parents) == parents


def test_get_latest_commit_not_found(httpx_mock, client):
    httpx_mock.add_response(url=f"{API}/commits/abc123", status_code=404, text="Not Found")

    with pytest.raises(CommitNotFound) as exc_info:
        client.get_latest_commit(
            API, Branch(name="main", commit_sha="abc123"), "owner", "repo"
        )

    assert exc_info.value.branch_name == "main"
    assert exc_info.value.sha == "abc123"


def test_get_latest_commit_server_error(httpx_mock, client):
    httpx_mock.add_response(url=f"{API}/commits/abc123", status_code=502, text="Bad Gateway")

    with pytest.raises(ApiError) as exc_info:
        client.get_latest_commit(
            API, Branch(name="main", commit_sha="abc123"), "owner", "repo"
        )

    assert exc_info.value.status_code == 502


def test_get_latest_commit_missing_parents(httpx_mock, client):
    httpx_mock.add_response(
        url=f"{API}/commits/abc123",
        json={"sha": "abc123", "commit": {"message": "m"}},
    )

    with pytest.raises(MalformedResponse):
        client.get_latest_commit(
            API, Branch(name="main", commit_sha="abc123"), "owner", "repo"
        )


def test_find_modified_files(httpx_mock, client):
    httpx_mock.add_response(
        url=f"{API}/compare/def456...abc123",
        json={"files": [{"filename": "file1.txt"}, {"filename": "file2.kt"}]},
    )

    files = client.find_modified_files(API, "abc123", "def456")

    assert files == ["file1.txt", "file2.kt"]


def test_find_modified_files_identical_commits(httpx_mock, client):
    httpx_mock.add_response(
        url=f"{API}/compare/abc123...abc123", json={"status": "identical"}
    )

    assert client.find_modified_files(API, "abc123", "abc123") == []


def test_find_modified_files_entry_without_filename(httpx_mock, client):
    httpx_mock.add_response(
        url=f"{API}/compare/def456...abc123", json={"files": [{"status": "added"}]}
    )

    with pytest.raises(MalformedResponse):
        client.find_modified_files(API, "abc123", "def456")


def test_injected_transport_is_not_closed():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=[]))
    http_client = httpx.Client(transport=transport)

    with RemoteMetadataClient(http_client) as remote:
        with pytest.raises(NotFound):
            remote.find_branch_by_name(API, "main")

    assert not http_client.is_closed
    http_client.close()


def test_invalid_url_is_a_transport_error(client):
    with pytest.raises(TransportError) as exc_info:
        client.find_branch_by_name("https://api.github.com/repos/owner/re\x00po", "main")

    assert isinstance(exc_info.value.__cause__, httpx.InvalidURL)
