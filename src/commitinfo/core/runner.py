"""Subprocess execution on top of invoke."""

import shlex
from pathlib import Path

from invoke import Context, Result


class Runner(Context):
    """invoke.Context that runs one command in a given directory.

    execute() is named so it does not shadow Context.run(), which it
    calls.
    """

    @staticmethod
    def join(program: str, args: list[str]) -> str:
        """Quote program and args into one shell command line."""
        return " ".join(shlex.quote(part) for part in [program, *args])

    def execute(
        self,
        command: str,
        cwd: Path | None = None,
        hide: bool = True,
    ) -> Result:
        """Run command and return its captured result.

        Context.cd() only escapes spaces, so the directory change is
        prefixed here with the path fully quoted.

        Args:
            command: Shell command line
            cwd: Directory to run in; the current one if None
            hide: Capture output only; False also echoes it

        Returns:
            invoke.Result carrying stdout, stderr and exited

        Raises:
            invoke.UnexpectedExit: If the command exits non-zero
        """
        if cwd is not None:
            command = f"cd {shlex.quote(str(cwd))} && {command}"
        return self.run(command, hide=hide, in_stream=False)
