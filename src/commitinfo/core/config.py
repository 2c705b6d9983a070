"""Action inputs, runner environment and resolved configuration."""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from commitinfo.errors import InvalidInputError, InvalidOffsetError

# ============================================================
# SETTINGS SOURCES (read from env/CLI)
# ============================================================

class ActionInputs(BaseSettings):
    """Inputs declared by the action.

    The runner exposes each input as an INPUT_<NAME> environment
    variable. An input left out of the workflow arrives as an empty
    string, which is treated the same as an absent one.
    """

    offset: str = Field(
        default="0",
        description=(
            "Number of commits back from HEAD (0 = HEAD, 1 = HEAD~1). "
            "Negative values are treated as their absolute value"
        ),
    )
    verbose: bool = Field(
        default=False,
        description="Log every resolved field and git's own output",
    )

    model_config = SettingsConfigDict(
        env_prefix="INPUT_",
        env_ignore_empty=True,
        extra="ignore",
    )

    @field_validator("offset", mode="before")
    @classmethod
    def _default_blank_offset(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return "0"
        return value


class RunnerEnvironment(BaseSettings):
    """Variables set by the runner (or by tests) around the step."""

    git_working_directory: Path | None = Field(
        default=None,
        description="Repository to inspect instead of the current directory",
    )
    github_output: Path | None = Field(
        default=None,
        description="File the runner reads step outputs from",
    )
    github_actions: bool = Field(
        default=False,
        description="Set to true when running inside GitHub Actions",
    )
    runner_debug: str | None = None
    actions_step_debug: str | None = None
    actions_runner_debug: str | None = None

    model_config = SettingsConfigDict(
        env_ignore_empty=True,
        extra="ignore",
    )

    @field_validator("github_actions", mode="before")
    @classmethod
    def _lenient_flag(cls, value):
        if isinstance(value, str):
            return _parse_flag(value)
        return value

    @property
    def debug_mode(self) -> bool:
        """Whether the runner has debug logging switched on."""
        return any(
            _parse_flag(value)
            for value in (
                self.runner_debug,
                self.actions_step_debug,
                self.actions_runner_debug,
            )
        )


def input_error(error: ValidationError) -> InvalidInputError:
    """The first problem reported by a failed ActionInputs validation."""
    first = error.errors()[0]
    name = ".".join(str(part) for part in first["loc"])
    return InvalidInputError(name, first["msg"])


def read_inputs() -> ActionInputs:
    """Read ActionInputs from INPUT_* variables.

    Raises:
        InvalidInputError: If an input does not validate
    """
    try:
        return ActionInputs()
    except ValidationError as e:
        raise input_error(e) from e


def _parse_flag(value: str | None) -> bool:
    return value is not None and (value.lower() == "true" or value == "1")


# Optional sign, then ASCII digits only
_INTEGER = re.compile(r"[+-]?[0-9]+")


def parse_offset(raw: str) -> int:
    """Parse the raw offset input.

    Args:
        raw: Offset as supplied by the workflow

    Returns:
        The offset as an integer, sign preserved

    Raises:
        InvalidOffsetError: If raw is not an integer
    """
    text = raw.strip()
    if not _INTEGER.fullmatch(text):
        raise InvalidOffsetError(raw)
    return int(text)


# ============================================================
# RESOLVED CONFIGURATION
# ============================================================

class Config(BaseModel):
    """Everything a run needs, parsed and validated."""

    model_config = ConfigDict(frozen=True)

    offset: int = Field(description="Commits back from HEAD")
    verbose: bool = Field(
        default=False,
        description="Verbose input, or runner debug mode",
    )
    debug_mode: bool = Field(
        default=False,
        description="Runner debug logging is switched on",
    )
    github_actions: bool = Field(
        default=False,
        description="Running inside GitHub Actions",
    )
    working_directory: Path | None = Field(
        default=None,
        description=(
            "Repository to inspect; None means the current directory"
        ),
    )
    output_file: Path | None = Field(
        default=None,
        description="GITHUB_OUTPUT file, None to use ::set-output",
    )


def load_config(
    inputs: ActionInputs | None = None,
    environment: RunnerEnvironment | None = None,
) -> Config:
    """Combine action inputs and runner environment into a Config.

    Args:
        inputs: Parsed inputs; read from INPUT_* variables if None
        environment: Runner environment; read from os.environ if None

    Returns:
        Config with the offset parsed

    Raises:
        InvalidInputError: If an INPUT_* variable does not validate
        InvalidOffsetError: If the offset input is not an integer
    """
    inputs = inputs if inputs is not None else read_inputs()
    environment = (
        environment if environment is not None else RunnerEnvironment()
    )

    offset = parse_offset(inputs.offset)
    debug_mode = environment.debug_mode

    return Config(
        offset=offset,
        verbose=inputs.verbose or debug_mode,
        debug_mode=debug_mode,
        github_actions=environment.github_actions,
        working_directory=environment.git_working_directory,
        output_file=environment.github_output,
    )


__all__ = [
    "ActionInputs",
    "Config",
    "input_error",
    "RunnerEnvironment",
    "load_config",
    "parse_offset",
    "read_inputs",
]
