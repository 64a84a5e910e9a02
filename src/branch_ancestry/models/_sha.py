"""Shared validation for commit identifiers."""


def check_sha(value: str) -> str:
    """Reject empty identifiers and identifiers containing whitespace."""
    if not value or any(ch.isspace() for ch in value):
        raise ValueError(f"malformed commit sha: {value!r}")
    return value
