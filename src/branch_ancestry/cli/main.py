"""Command line interface for branch ancestry resolution."""

import logging
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from branch_ancestry.core.change_set import ChangeSetFetcher
from branch_ancestry.core.config import (
    DEFAULT_API_URL,
    AncestryConfig,
    load_config,
    save_config,
)
from branch_ancestry.core.errors import AncestryError
from branch_ancestry.core.local_log import LocalLogReader
from branch_ancestry.core.remote_client import RemoteMetadataClient
from branch_ancestry.core.resolver import AncestryResolver
from branch_ancestry.models.branch import Branch

console = Console()


def remote_options(command):
    """Options shared by every command that talks to the remote API."""
    options = [
        click.option(
            "--repo-path",
            type=click.Path(exists=True, file_okay=False),
            default=".",
            help="Path to the local clone",
        ),
        click.option("--owner", help="Repository owner on the remote"),
        click.option("--repo", "repo_name", help="Repository name on the remote"),
        click.option("--api-base", help="Repository API base URL (overrides owner/repo)"),
        click.option(
            "--token",
            envvar="GITHUB_TOKEN",
            help="Access token sent as 'Authorization: token ...'",
        ),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def _resolve_config(
    repo_path: str,
    owner: Optional[str],
    repo_name: Optional[str],
    api_base: Optional[str],
) -> Tuple[Path, AncestryConfig]:
    """Merge command line values over the repository's config file."""
    root = Path(repo_path).resolve()
    config = load_config(root)
    overrides = {
        key: value
        for key, value in (
            ("owner", owner),
            ("repo", repo_name),
            ("explicit_api_base", api_base),
        )
        if value
    }
    return root, config.model_copy(update=overrides)


def _fail(error: Exception) -> None:
    console.print(f"[red]Error: {escape(str(error))}[/red]", highlight=False)
    raise click.Abort() from error


def _local_branch(reader: LocalLogReader, root: Path, name: Optional[str]) -> Branch:
    return reader.find_branch_by_name(root, name or reader.current_branch(root))


@click.group()
@click.version_option(package_name="branch-ancestry")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """Resolve merge bases between remote and local branches."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.option(
    "--repo-path",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    help="Path to the local clone",
)
@click.option("--owner", required=True, help="Repository owner on the remote")
@click.option("--repo", "repo_name", required=True, help="Repository name")
@click.option("--api-url", default=DEFAULT_API_URL, show_default=True)
def init(repo_path: str, owner: str, repo_name: str, api_url: str):
    """Store the remote coordinates of a local clone."""
    root = Path(repo_path).resolve()
    if not (root / ".git").exists():
        console.print("[red]Error: Not a git repository[/red]")
        raise click.Abort()

    path = save_config(root, AncestryConfig(owner=owner, repo=repo_name, api_url=api_url))
    console.print(f"[green]Wrote {path}[/green]")


@main.command("remote-branch")
@click.argument("name")
@remote_options
def remote_branch(name, repo_path, owner, repo_name, api_base, token):
    """Show the commit a remote branch points to."""
    try:
        _, config = _resolve_config(repo_path, owner, repo_name, api_base)
        with RemoteMetadataClient(timeout=config.timeout) as client:
            branch = client.find_branch_by_name(config.api_base, name, token)
    except (AncestryError, ValueError) as e:
        _fail(e)

    console.print(f"{branch.name} {branch.commit_sha}", markup=False, highlight=False)


@main.command("local-branch")
@click.argument("name", required=False)
@click.option(
    "--repo-path",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    help="Path to the local clone",
)
def local_branch(name: Optional[str], repo_path: str):
    """Show a local branch tip and its reference log."""
    reader = LocalLogReader()
    root = Path(repo_path).resolve()
    try:
        branch = _local_branch(reader, root, name)
        entries = reader.read_entries(root, branch.name)
    except AncestryError as e:
        _fail(e)

    console.print(f"{branch.name} {branch.commit_sha}", markup=False, highlight=False)

    table = Table(title=f"Reference log of {branch.name}")
    table.add_column("Old", style="dim")
    table.add_column("New", style="cyan")
    table.add_column("Message")
    for entry in entries:
        table.add_row(entry.old_sha[:12], entry.new_sha[:12], entry.message)
    console.print(table)


@main.command("merge-base")
@click.argument("remote")
@click.argument("local", required=False)
@remote_options
def merge_base(remote, local, repo_path, owner, repo_name, api_base, token):
    """Print the merge base of REMOTE and LOCAL (default: current branch)."""
    try:
        root, config = _resolve_config(repo_path, owner, repo_name, api_base)
        reader = LocalLogReader()
        with RemoteMetadataClient(timeout=config.timeout) as client:
            remote_tip = client.find_branch_by_name(config.api_base, remote, token)
            local_tip = _local_branch(reader, root, local)
            sha = AncestryResolver(client, reader).find_merge_base(
                config.api_base,
                remote_tip,
                local_tip,
                config.owner or "",
                config.repo or "",
                root,
                token,
            )
    except (AncestryError, ValueError) as e:
        _fail(e)

    console.print(sha, markup=False, highlight=False)


@main.command("changed-files")
@click.argument("remote")
@click.argument("local", required=False)
@remote_options
def changed_files(remote, local, repo_path, owner, repo_name, api_base, token):
    """List files changed on REMOTE since its merge base with LOCAL."""
    try:
        root, config = _resolve_config(repo_path, owner, repo_name, api_base)
        reader = LocalLogReader()
        with RemoteMetadataClient(timeout=config.timeout) as client:
            remote_tip = client.find_branch_by_name(config.api_base, remote, token)
            local_tip = _local_branch(reader, root, local)
            base = AncestryResolver(client, reader).find_merge_base(
                config.api_base,
                remote_tip,
                local_tip,
                config.owner or "",
                config.repo or "",
                root,
                token,
            )
            change_set = ChangeSetFetcher(client).fetch(
                config.api_base, base, remote_tip.commit_sha, token
            )
    except (AncestryError, ValueError) as e:
        _fail(e)

    console.print(
        f"[bold]{len(change_set.files)} file(s) changed[/bold] "
        f"between {change_set.base_sha[:12]} and {change_set.head_sha[:12]}",
        highlight=False,
    )
    for path in change_set.files:
        console.print(f"  {path}", markup=False, highlight=False)


if __name__ == "__main__":
    main()
