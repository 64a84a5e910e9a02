"""Change set model for files modified between two commits."""

from typing import Iterator, Tuple

from pydantic import BaseModel, field_validator

from ._sha import check_sha


class ChangeSet(BaseModel):
    """Ordered file paths that differ between ``base_sha`` and ``head_sha``."""

    base_sha: str
    head_sha: str
    files: Tuple[str, ...] = ()

    model_config = {"frozen": True}

    @field_validator("base_sha", "head_sha")
    @classmethod
    def _validate_sha(cls, value: str) -> str:
        return check_sha(value)

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)
