"""Branch model."""

from pydantic import BaseModel, field_validator

from ._sha import check_sha


class Branch(BaseModel):
    """A branch name and the commit it pointed to when observed."""

    name: str
    commit_sha: str

    model_config = {"frozen": True}

    @field_validator("commit_sha")
    @classmethod
    def _validate_sha(cls, value: str) -> str:
        return check_sha(value)
