"""Publishing step outputs to the runner."""

from __future__ import annotations

import os
import sys
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TextIO

from commitinfo.core.log import WorkflowCommandSink


class OutputSink(ABC):
    """Destination for named step outputs."""

    @abstractmethod
    def set_output(self, name: str, value: str) -> None:
        """Publish one output."""
        ...

    def set_outputs(self, values: dict[str, str]) -> None:
        for name, value in values.items():
            self.set_output(name, value)


class FileCommandOutputs(OutputSink):
    """Append outputs to the file named by GITHUB_OUTPUT.

    Every value is written in the multi-line form

        name<<DELIMITER
        value
        DELIMITER

    with a fresh random delimiter, so values may contain newlines.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    @staticmethod
    def format_entry(name: str, value: str, delimiter: str) -> str:
        if delimiter in name:
            raise ValueError(
                f"Unexpected input: name should not contain the "
                f"delimiter \"{delimiter}\""
            )
        if delimiter in value:
            raise ValueError(
                f"Unexpected input: value should not contain the "
                f"delimiter \"{delimiter}\""
            )
        return (
            f"{name}<<{delimiter}{os.linesep}"
            f"{value}{os.linesep}"
            f"{delimiter}{os.linesep}"
        )

    def set_output(self, name: str, value: str) -> None:
        entry = self.format_entry(
            name, value, f"ghadelimiter_{uuid.uuid4()}"
        )
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(entry)


class WorkflowCommandOutputs(OutputSink):
    """Print ::set-output commands for runners without GITHUB_OUTPUT."""

    def __init__(self, out: TextIO | None = None):
        self._out = out

    @staticmethod
    def _escape_property(text: str) -> str:
        return (WorkflowCommandSink.escape_data(text)
            .replace(':', '%3A')
            .replace(',', '%2C')
        )

    def set_output(self, name: str, value: str) -> None:
        out = self._out or sys.stdout
        out.write(os.linesep)
        out.write(
            f"::set-output name={self._escape_property(name)}::"
            f"{WorkflowCommandSink.escape_data(value)}{os.linesep}"
        )
        out.flush()


def output_sink_for(output_file: Path | None) -> OutputSink:
    """Pick the output mechanism the runner supports."""
    if output_file:
        return FileCommandOutputs(output_file)
    return WorkflowCommandOutputs()
