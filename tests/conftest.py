"""Pytest configuration and fixtures for git-commit-info tests."""

import subprocess
from pathlib import Path

import pytest

from commitinfo.core.log import ConsoleSink, setup_logger

# Variables the runner sets; cleared so a CI runner's own values do
# not leak into tests.
RUNNER_VARIABLES = (
    "INPUT_OFFSET",
    "INPUT_VERBOSE",
    "GIT_WORKING_DIRECTORY",
    "GITHUB_OUTPUT",
    "GITHUB_ACTIONS",
    "RUNNER_DEBUG",
    "ACTIONS_STEP_DEBUG",
    "ACTIONS_RUNNER_DEBUG",
)


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for console-only mode during tests.

    Runs before every test because run_action() installs and then
    closes its own sinks.
    """
    setup_logger(
        run_name="test",
        console=ConsoleSink(level="debug"),
    )


@pytest.fixture(autouse=True)
def clean_runner_environment(monkeypatch):
    """Remove runner variables from the environment."""
    for name in RUNNER_VARIABLES:
        monkeypatch.delenv(name, raising=False)


def run_git(repo: Path, *args: str) -> str:
    """Run git in repo and return stripped stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=repo,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


@pytest.fixture
def git():
    """The run_git helper, for tests that need their own git calls."""
    return run_git


@pytest.fixture
def git_repo(tmp_path):
    """Repository with four commits.

    Returns:
        (repo path, list of SHAs oldest first)
    """
    repo = tmp_path / "repo"
    repo.mkdir()
    run_git(repo, "init", "--quiet")
    run_git(repo, "config", "user.name", "Test User")
    run_git(repo, "config", "user.email", "test@example.com")
    run_git(repo, "config", "commit.gpgsign", "false")

    shas = []
    commits = [
        ("Initial commit", "README.md", "# Test Repository\n"),
        ("Second commit", "file1.txt", "Content 1\n"),
        ("Third commit", "file2.txt", "Content 2\n"),
        ("Fourth commit", "file3.txt", "Content 3\n"),
    ]
    for message, filename, content in commits:
        (repo / filename).write_text(content)
        run_git(repo, "add", filename)
        run_git(repo, "commit", "--quiet", "-m", message)
        shas.append(run_git(repo, "rev-parse", "HEAD"))

    assert run_git(repo, "rev-parse", "HEAD") == shas[-1]
    return repo, shas
