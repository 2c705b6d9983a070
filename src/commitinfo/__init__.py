"""Commit metadata for a commit relative to HEAD."""

from commitinfo.errors import (
    CommitInfoError,
    InvalidInputError,
    InvalidOffsetError,
    MalformedIdentifierError,
    MalformedOutputError,
    QueryFailedError,
    ReferenceNotFoundError,
    RetrievalError,
)
from commitinfo.git.commit import CommitRecord, retrieve_commit
from commitinfo.git.reference import resolve_reference

__all__ = [
    "CommitInfoError",
    "CommitRecord",
    "InvalidInputError",
    "InvalidOffsetError",
    "MalformedIdentifierError",
    "MalformedOutputError",
    "QueryFailedError",
    "ReferenceNotFoundError",
    "RetrievalError",
    "resolve_reference",
    "retrieve_commit",
]
