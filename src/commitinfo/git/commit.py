"""Commit metadata for an offset from HEAD."""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from commitinfo.core.log import Diagnostics
from commitinfo.errors import (
    MalformedIdentifierError,
    MalformedOutputError,
    QueryFailedError,
    ReferenceNotFoundError,
    RetrievalError,
)
from commitinfo.git.query import GitQueryExecutor, QueryExecutor
from commitinfo.git.reference import resolve_reference

# Full SHA, short SHA, subject, author name, author email,
# author date, committer date
COMMIT_FORMAT = "%H|%h|%s|%an|%ae|%ai|%ci"
MESSAGE_FORMAT = "%B"
FIELD_SEPARATOR = "|"
FIELD_COUNT = 7

_SHA_PATTERN = re.compile(r"[0-9a-fA-F]{40}")

# git's wording when a revision does not exist
_NOT_FOUND_MARKERS = ("ambiguous argument", "unknown revision")


class CommitRecord(BaseModel):
    """Metadata of a single commit."""

    sha: str
    short_sha: str
    subject: str
    body: str
    author: str
    author_email: str
    author_date: str
    date: str

    model_config = ConfigDict(frozen=True)

    @property
    def date_iso(self) -> str:
        """Committer date; git already prints it as ISO-8601."""
        return self.date

    def outputs(self) -> dict[str, str]:
        """Step outputs keyed by their published names."""
        return {
            "sha": self.sha,
            "shortSha": self.short_sha,
            "message": self.subject,
            "messageRaw": self.body,
            "author": self.author,
            "authorEmail": self.author_email,
            "date": self.date,
            "dateISO": self.date_iso,
        }


def commit_query_args(reference: str) -> list[str]:
    return ["log", "-1", f"--format={COMMIT_FORMAT}", reference]


def message_query_args(reference: str) -> list[str]:
    return ["log", "-1", f"--format={MESSAGE_FORMAT}", reference]


def git_working_directory(override: Path | None = None) -> Path:
    """Directory git queries run in, always absolute.

    Args:
        override: Directory to use instead of the current one

    Returns:
        Absolute path of override, or of the current directory
    """
    cwd = Path(override) if override else Path.cwd()
    return cwd if cwd.is_absolute() else cwd.resolve()


def parse_commit_line(
    output: str, offset: int, reference: str
) -> list[str]:
    """Split the output of the commit query into its seven fields.

    Args:
        output: stdout of git log with COMMIT_FORMAT
        offset: Requested offset, for error context
        reference: Resolved reference, for error context

    Returns:
        The fields in COMMIT_FORMAT order

    Raises:
        ReferenceNotFoundError: If output is blank
        MalformedOutputError: If there are not exactly seven fields
        MalformedIdentifierError: If the full SHA is not 40 hex chars
    """
    line = output.strip()
    if not line:
        raise ReferenceNotFoundError(offset, reference)

    fields = line.split(FIELD_SEPARATOR)
    if len(fields) != FIELD_COUNT:
        raise MalformedOutputError(offset, reference, line)

    sha = fields[0]
    if not sha or not _SHA_PATTERN.fullmatch(sha):
        raise MalformedIdentifierError(offset, reference, sha)

    return fields


def retrieve_commit(
    offset: int,
    diagnostics: Diagnostics,
    executor: QueryExecutor | None = None,
    working_directory: Path | None = None,
) -> CommitRecord:
    """Get commit information for an offset from HEAD.

    Args:
        offset: Commits back from HEAD (0 = HEAD, 1 = HEAD~1).
            Negative offsets are converted to their absolute value.
        diagnostics: Logger receiving debug output; its verbose flag
            also decides whether git's output is echoed
        executor: Runs the git queries; a GitQueryExecutor if None
        working_directory: Repository to inspect instead of the
            current directory

    Returns:
        CommitRecord for the commit

    Raises:
        ReferenceNotFoundError: If the offset reaches past the root
            commit
        MalformedOutputError: If git log output cannot be split
        MalformedIdentifierError: If git reports a malformed SHA
        RetrievalError: If git fails for any other reason
    """
    reference = resolve_reference(offset)
    diagnostics.debug(
        f"Getting commit info for offset {offset} (git ref: {reference})"
    )

    cwd = git_working_directory(working_directory)
    diagnostics.debug(f"Using git working directory: {cwd}")

    executor = executor or GitQueryExecutor()
    silent = not diagnostics.verbose

    try:
        output = executor.run(
            "git", commit_query_args(reference), cwd, silent=silent
        )
        (sha, short_sha, subject, author, author_email,
         author_date, committer_date) = parse_commit_line(
            output, offset, reference
        )

        body = executor.run(
            "git", message_query_args(reference), cwd, silent=silent
        ).strip()
    except QueryFailedError as e:
        message = str(e)
        if any(marker in message for marker in _NOT_FOUND_MARKERS):
            raise ReferenceNotFoundError(offset, reference) from e
        raise RetrievalError(offset, reference, message) from e

    diagnostics.debug(f"Resolved commit SHA: {sha}")
    diagnostics.debug(f"Short SHA: {short_sha}")
    diagnostics.debug(f"Message: {subject}")
    diagnostics.debug(f"Message (full): {len(body.splitlines())} lines")
    diagnostics.debug(f"Author: {author} <{author_email}>")
    diagnostics.debug(f"Date: {committer_date}")

    return CommitRecord(
        sha=sha,
        short_sha=short_sha,
        subject=subject,
        body=body,
        author=author,
        author_email=author_email,
        author_date=author_date,
        date=committer_date,
    )
