"""Per-repository configuration stored next to the local clone."""

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ValidationError

CONFIG_FILE_NAME = ".branch-ancestry.json"
DEFAULT_API_URL = "https://api.github.com"


class AncestryConfig(BaseModel):
    """Remote coordinates of a repository.

    Access tokens are deliberately not part of the file.
    """

    owner: Optional[str] = None
    repo: Optional[str] = None
    api_url: str = DEFAULT_API_URL
    explicit_api_base: Optional[str] = None
    timeout: float = 10.0

    @property
    def api_base(self) -> str:
        """Base URL of the repository endpoints."""
        if self.explicit_api_base:
            return self.explicit_api_base.rstrip("/")
        if not self.owner or not self.repo:
            raise ValueError(
                "Repository owner and name are required "
                "(pass --owner/--repo or run 'branch-ancestry init')"
            )
        return f"{self.api_url.rstrip('/')}/repos/{self.owner}/{self.repo}"


def config_path(repo_path: Path) -> Path:
    return Path(repo_path) / CONFIG_FILE_NAME


def load_config(repo_path: Path) -> AncestryConfig:
    """Load the config file of ``repo_path``, or defaults when there is none."""
    path = config_path(repo_path)
    if not path.exists():
        return AncestryConfig()
    try:
        return AncestryConfig(**json.loads(path.read_text()))
    except (json.JSONDecodeError, TypeError, ValidationError) as e:
        raise ValueError(f"Invalid config file {path}: {e}") from e


def save_config(repo_path: Path, config: AncestryConfig) -> Path:
    """Write ``config`` to the config file of ``repo_path``."""
    path = config_path(repo_path)
    path.write_text(json.dumps(config.model_dump(exclude_none=True), indent=2))
    return path
