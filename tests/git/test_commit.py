"""Tests for commit record retrieval against a fake executor."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from commitinfo.core.log import Logger
from commitinfo.errors import (
    MalformedIdentifierError,
    MalformedOutputError,
    QueryFailedError,
    ReferenceNotFoundError,
    RetrievalError,
)
from commitinfo.git.commit import (
    CommitRecord,
    commit_query_args,
    git_working_directory,
    message_query_args,
    retrieve_commit,
)
from commitinfo.git.fake import FakeQueryExecutor

SHA = "3f786850e387550fdab836ed7e6dc881de23001b"
COMMIT_LINE = (
    f"{SHA}|3f78685|Title line|Jane Doe|jane@example.com|"
    "2024-05-01 10:00:00 +0200|2024-05-02 11:30:00 +0200\n"
)
MESSAGE = "Title line\n\nExtended description.\n\n"


def fake_for(reference, commit_line=COMMIT_LINE, message=MESSAGE):
    return FakeQueryExecutor(outputs={
        tuple(commit_query_args(reference)): commit_line,
        tuple(message_query_args(reference)): message,
    })


@pytest.fixture
def quiet():
    return Logger(verbose=False)


def test_query_arguments_are_exact():
    assert commit_query_args("HEAD~2") == [
        "log", "-1", "--format=%H|%h|%s|%an|%ae|%ai|%ci", "HEAD~2"
    ]
    assert message_query_args("HEAD") == ["log", "-1", "--format=%B", "HEAD"]


def test_retrieve_head(quiet, tmp_path):
    executor = fake_for("HEAD")

    record = retrieve_commit(0, quiet, executor, tmp_path)

    assert record == CommitRecord(
        sha=SHA,
        short_sha="3f78685",
        subject="Title line",
        body="Title line\n\nExtended description.",
        author="Jane Doe",
        author_email="jane@example.com",
        author_date="2024-05-01 10:00:00 +0200",
        date="2024-05-02 11:30:00 +0200",
    )
    assert record.date_iso == record.date


def test_body_keeps_inner_blank_line(quiet, tmp_path):
    record = retrieve_commit(0, quiet, fake_for("HEAD"), tmp_path)

    assert record.body.splitlines()[0] == record.subject
    assert record.body.splitlines() == [
        "Title line", "", "Extended description."
    ]


def test_two_queries_in_order(quiet, tmp_path):
    executor = fake_for("HEAD~3")

    retrieve_commit(3, quiet, executor, tmp_path)

    calls = executor.calls
    assert [call.program for call in calls] == ["git", "git"]
    assert calls[0].args == tuple(commit_query_args("HEAD~3"))
    assert calls[1].args == tuple(message_query_args("HEAD~3"))


def test_negative_offset_uses_same_reference(quiet, tmp_path):
    executor = fake_for("HEAD~2")

    negative = retrieve_commit(-2, quiet, executor, tmp_path)
    positive = retrieve_commit(2, quiet, executor, tmp_path)

    assert negative == positive
    assert {call.args[-1] for call in executor.calls} == {"HEAD~2"}


def test_output_is_silent_unless_verbose(tmp_path):
    executor = fake_for("HEAD")

    retrieve_commit(0, Logger(verbose=False), executor, tmp_path)
    retrieve_commit(0, Logger(verbose=True), executor, tmp_path)

    assert [call.silent for call in executor.calls] == [
        True, True, False, False
    ]


def test_working_directory_override(quiet, tmp_path):
    executor = fake_for("HEAD")

    retrieve_commit(0, quiet, executor, tmp_path)

    assert all(call.cwd == tmp_path for call in executor.calls)


def test_working_directory_defaults_to_cwd(quiet, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    executor = fake_for("HEAD")

    retrieve_commit(0, quiet, executor)

    assert executor.calls[0].cwd == Path.cwd()


def test_relative_override_is_made_absolute(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    cwd = git_working_directory(Path("nested/repo"))

    assert cwd.is_absolute()
    assert cwd == (tmp_path / "nested" / "repo").resolve()


def test_empty_output_is_not_found(quiet, tmp_path):
    executor = fake_for("HEAD~7", commit_line="  \n")

    with pytest.raises(ReferenceNotFoundError) as exc_info:
        retrieve_commit(7, quiet, executor, tmp_path)

    assert str(exc_info.value) == (
        "Commit not found for offset 7 (git ref: HEAD~7). "
        "Offset may exceed commit history."
    )
    # The message query is never issued
    assert len(executor.calls) == 1


@pytest.mark.parametrize("line", [
    f"{SHA}|3f78685|Title",
    f"{SHA}|3f78685|a|b|Jane|jane@example.com|d1|d2",
])
def test_wrong_field_count(quiet, tmp_path, line):
    executor = fake_for("HEAD", commit_line=line)

    with pytest.raises(MalformedOutputError) as exc_info:
        retrieve_commit(0, quiet, executor, tmp_path)

    assert "Unexpected git log format" in str(exc_info.value)
    assert exc_info.value.offset == 0
    assert exc_info.value.reference == "HEAD"


@pytest.mark.parametrize("sha", [
    "",
    "3f78685",
    SHA + "00",
    "z" * 40,
])
def test_malformed_sha(quiet, tmp_path, sha):
    line = f"{sha}|3f78685|Title|Jane|jane@example.com|d1|d2"
    executor = fake_for("HEAD", commit_line=line)

    with pytest.raises(MalformedIdentifierError) as exc_info:
        retrieve_commit(0, quiet, executor, tmp_path)

    assert f"Invalid commit SHA format: {sha}" in str(exc_info.value)


def test_malformed_errors_are_retrieval_errors():
    assert issubclass(MalformedOutputError, RetrievalError)
    assert issubclass(MalformedIdentifierError, RetrievalError)
    assert issubclass(ReferenceNotFoundError, RetrievalError)


@pytest.mark.parametrize("stderr", [
    "fatal: ambiguous argument 'HEAD~100': unknown revision or path "
    "not in the working tree.",
    "fatal: bad revision: unknown revision HEAD~100",
])
def test_unknown_revision_is_not_found(quiet, tmp_path, stderr):
    args = tuple(commit_query_args("HEAD~100"))
    executor = FakeQueryExecutor(failures={
        args: QueryFailedError("git log", 128, stderr),
    })

    with pytest.raises(ReferenceNotFoundError) as exc_info:
        retrieve_commit(100, quiet, executor, tmp_path)

    assert "offset 100" in str(exc_info.value)
    assert "HEAD~100" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, QueryFailedError)


def test_other_failures_are_wrapped(quiet, tmp_path):
    args = tuple(commit_query_args("HEAD~1"))
    failure = QueryFailedError(
        "git log", 128,
        "fatal: not a git repository (or any of the parent directories)",
    )
    executor = FakeQueryExecutor(failures={args: failure})

    with pytest.raises(RetrievalError) as exc_info:
        retrieve_commit(1, quiet, executor, tmp_path)

    error = exc_info.value
    assert not isinstance(error, ReferenceNotFoundError)
    assert str(error).startswith(
        "Failed to get commit info for offset 1 (git ref: HEAD~1): "
    )
    assert "not a git repository" in str(error)
    assert error.__cause__ is failure


def test_message_query_failure_is_wrapped(quiet, tmp_path):
    executor = FakeQueryExecutor(
        outputs={tuple(commit_query_args("HEAD")): COMMIT_LINE},
        failures={
            tuple(message_query_args("HEAD")): QueryFailedError(
                "git log", 1, "error: something broke"
            ),
        },
    )

    with pytest.raises(RetrievalError, match="something broke"):
        retrieve_commit(0, quiet, executor, tmp_path)


def test_record_is_immutable(quiet, tmp_path):
    record = retrieve_commit(0, quiet, fake_for("HEAD"), tmp_path)

    with pytest.raises(ValidationError):
        record.sha = "0" * 40


def test_outputs_use_published_names(quiet, tmp_path):
    record = retrieve_commit(0, quiet, fake_for("HEAD"), tmp_path)

    assert record.outputs() == {
        "sha": SHA,
        "shortSha": "3f78685",
        "message": "Title line",
        "messageRaw": "Title line\n\nExtended description.",
        "author": "Jane Doe",
        "authorEmail": "jane@example.com",
        "date": "2024-05-02 11:30:00 +0200",
        "dateISO": "2024-05-02 11:30:00 +0200",
    }
