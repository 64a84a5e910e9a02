"""Commit model shared by the remote and local decoders."""

from typing import Tuple

from pydantic import BaseModel, field_validator

from ._sha import check_sha


class Commit(BaseModel):
    """Represents a commit and its direct parents, in parent order."""

    message: str
    sha: str
    parents: Tuple[str, ...] = ()

    model_config = {"frozen": True}

    @field_validator("sha")
    @classmethod
    def _validate_sha(cls, value: str) -> str:
        return check_sha(value)

    @field_validator("parents")
    @classmethod
    def _validate_parents(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        for parent in value:
            check_sha(parent)
        return value

    @property
    def is_root(self) -> bool:
        """Check if this commit has no parents."""
        return not self.parents

    @property
    def is_merge(self) -> bool:
        """Check if this commit joins two or more lines of history."""
        return len(self.parents) > 1
