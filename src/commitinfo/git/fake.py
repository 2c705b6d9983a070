"""Fake QueryExecutor for testing."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from commitinfo.git.query import QueryExecutor


@dataclass(frozen=True)
class QueryCall:
    """Record of a query issued against the fake.

    Attributes:
        program: Executable name
        args: Arguments as passed
        cwd: Working directory
        silent: Whether output echo was suppressed
    """

    program: str
    args: tuple[str, ...]
    cwd: Path
    silent: bool


class FakeQueryExecutor(QueryExecutor):
    """In-memory QueryExecutor returning canned output.

    Constructor Injection:
    ---------------------
    - outputs: Mapping of argument tuple -> stdout text
    - failures: Mapping of argument tuple -> exception to raise

    Arguments not found in either mapping produce empty output, the
    same as git log printing nothing.

    Call Tracking:
    -------------
    - calls: Every QueryCall, in order
    """

    def __init__(
        self,
        *,
        outputs: dict[tuple[str, ...], str] | None = None,
        failures: dict[tuple[str, ...], Exception] | None = None,
    ) -> None:
        self._outputs = outputs if outputs is not None else {}
        self._failures = failures if failures is not None else {}
        self._calls: list[QueryCall] = []

    @property
    def calls(self) -> list[QueryCall]:
        return list(self._calls)

    def run(
        self,
        program: str,
        args: list[str],
        cwd: Path,
        silent: bool = True,
    ) -> str:
        key = tuple(args)
        self._calls.append(QueryCall(program, key, cwd, silent))

        if key in self._failures:
            raise self._failures[key]
        return self._outputs.get(key, "")
