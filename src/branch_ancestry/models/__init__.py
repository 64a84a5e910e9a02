"""Data models for branch ancestry resolution."""

from .branch import Branch
from .change_set import ChangeSet
from .commit import Commit

__all__ = ["Branch", "ChangeSet", "Commit"]
