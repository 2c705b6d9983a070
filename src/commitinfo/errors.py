"""Error types raised while resolving commit information."""


class CommitInfoError(Exception):
    """Base class for all commitinfo errors."""


class InvalidOffsetError(CommitInfoError):
    """The raw offset input is not an integer."""

    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(
            f'Invalid offset value: "{raw}". Offset must be an integer.'
        )


class InvalidInputError(CommitInfoError):
    """An action input other than the offset does not validate."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f'Invalid value for input "{name}": {reason}')


class QueryFailedError(CommitInfoError):
    """A git query exited with a non-zero status or could not start.

    The message always carries git's stderr so callers can classify
    the failure by git's own wording.
    """

    def __init__(
        self,
        command: str,
        exit_code: int | None,
        stderr: str = "",
    ):
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr

        detail = stderr.strip() or "no error output"
        if exit_code is None:
            message = f"Command '{command}' could not be run: {detail}"
        else:
            message = (
                f"Command '{command}' failed with exit code "
                f"{exit_code}: {detail}"
            )
        super().__init__(message)


class RetrievalError(CommitInfoError):
    """Commit information could not be retrieved for an offset."""

    def __init__(self, offset: int, reference: str, reason: str):
        self.offset = offset
        self.reference = reference
        self.reason = reason
        super().__init__(self._format())

    def _format(self) -> str:
        return (
            f"Failed to get commit info for offset {self.offset} "
            f"(git ref: {self.reference}): {self.reason}"
        )


class ReferenceNotFoundError(RetrievalError):
    """The reference does not resolve to any commit."""

    def __init__(self, offset: int, reference: str):
        super().__init__(offset, reference, "commit not found")

    def _format(self) -> str:
        return (
            f"Commit not found for offset {self.offset} "
            f"(git ref: {self.reference}). "
            f"Offset may exceed commit history."
        )


class MalformedOutputError(RetrievalError):
    """git log did not return exactly seven delimited fields."""

    def __init__(self, offset: int, reference: str, output: str):
        self.output = output
        super().__init__(
            offset, reference, f"Unexpected git log format: {output}"
        )


class MalformedIdentifierError(RetrievalError):
    """The full commit SHA is missing or not 40 hex characters."""

    def __init__(self, offset: int, reference: str, sha: str):
        self.sha = sha
        super().__init__(
            offset, reference, f"Invalid commit SHA format: {sha}"
        )


__all__ = [
    "CommitInfoError",
    "InvalidInputError",
    "InvalidOffsetError",
    "QueryFailedError",
    "RetrievalError",
    "ReferenceNotFoundError",
    "MalformedOutputError",
    "MalformedIdentifierError",
]
