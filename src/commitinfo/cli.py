#!/usr/bin/env python3
"""git-commit-info CLI - metadata of a commit relative to HEAD."""

from pydantic import ValidationError
from pydantic_settings import CliApp, SettingsConfigDict

from commitinfo.action import report_failure, run_action
from commitinfo.core.config import ActionInputs, input_error


class CliInputs(ActionInputs):
    """Look up the commit OFFSET steps back from HEAD and publish
    its SHA, short SHA, subject, full message, author, author
    email and committer date as step outputs.

    Configuration sources (in priority order):
    1. Command-line arguments (--offset 2 --verbose)
    2. Action inputs (INPUT_OFFSET, INPUT_VERBOSE)

    The repository inspected is GIT_WORKING_DIRECTORY when set,
    otherwise the current directory. Outputs go to the file named
    by GITHUB_OUTPUT, or to stdout as ::set-output commands.
    """

    model_config = SettingsConfigDict(
        cli_prog_name="git-commit-info",
        cli_implicit_flags=True,
    )

    def cli_cmd(self):
        """Run the step and exit with its status."""
        raise SystemExit(run_action(self))


def main(args: list[str] | None = None):
    """Main entry point for CLI.

    An INPUT_* variable that fails validation is logged as a step
    error rather than escaping as a traceback.
    """
    try:
        CliApp.run(CliInputs, cli_args=args)
    except ValidationError as e:
        raise SystemExit(report_failure(input_error(e))) from e


if __name__ == "__main__":
    main()
