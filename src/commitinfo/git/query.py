"""Running read-only git queries.

Retrieval code talks to git through the QueryExecutor interface so
unit tests can substitute FakeQueryExecutor and never touch a real
repository.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from invoke.exceptions import UnexpectedExit

from commitinfo.core.log import logger
from commitinfo.core.runner import Runner
from commitinfo.errors import QueryFailedError


class QueryExecutor(ABC):
    """Runs a program and returns what it printed on stdout."""

    @abstractmethod
    def run(
        self,
        program: str,
        args: list[str],
        cwd: Path,
        silent: bool = True,
    ) -> str:
        """Run program with args in cwd.

        Args:
            program: Executable name (e.g. "git")
            args: Arguments, passed through unmodified
            cwd: Absolute working directory
            silent: If False, also echo the program's output

        Returns:
            Captured standard output

        Raises:
            QueryFailedError: If the program exits non-zero
        """
        ...


class GitQueryExecutor(QueryExecutor):
    """QueryExecutor backed by a real subprocess."""

    def __init__(self, runner: Runner | None = None):
        self._runner = runner or Runner()

    def run(
        self,
        program: str,
        args: list[str],
        cwd: Path,
        silent: bool = True,
    ) -> str:
        command = Runner.join(program, args)
        logger.trace(f"Running {command} in {cwd}")

        try:
            result = self._runner.execute(command, cwd=cwd, hide=silent)
        except UnexpectedExit as e:
            raise QueryFailedError(
                command, e.result.exited, e.result.stderr
            ) from e
        except OSError as e:
            raise QueryFailedError(command, None, str(e)) from e

        return result.stdout
