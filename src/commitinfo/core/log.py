"""Logging for git-commit-info.

Records are emitted through logfire. Each destination is a Sink
model that contributes an OpenTelemetry span processor; the Logger
owns its sinks and shuts their processors down when closed.
"""

from __future__ import annotations

import contextlib
import sys
from abc import abstractmethod
from typing import Any, ClassVar, Literal, Protocol

from opentelemetry.proto.logs.v1 import logs_pb2
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import (
    ConsoleSpanExporter,
    SimpleSpanProcessor,
    SpanExporter,
    SpanExportResult,
)
from pydantic import BaseModel, Field, PrivateAttr, model_validator

# OpenTelemetry severity number of each level, most verbose first
LEVELS = {
    'trace': logs_pb2.SEVERITY_NUMBER_TRACE,   # 1
    'debug': logs_pb2.SEVERITY_NUMBER_DEBUG,   # 5
    'info': logs_pb2.SEVERITY_NUMBER_INFO,     # 9
    'warn': logs_pb2.SEVERITY_NUMBER_WARN,     # 13
    'error': logs_pb2.SEVERITY_NUMBER_ERROR,   # 17
    'fatal': logs_pb2.SEVERITY_NUMBER_FATAL,   # 21
}

_current_logger: Logger | None = None


def _discard(*args, **kwargs):  # noqa: ARG001
    pass


class _LoggerProxy:
    """Stands in for the Logger installed by setup_logger().

    Until a logger is installed every call is dropped and verbose
    reads as False.
    """

    def __getattr__(self, name):
        if _current_logger is not None:
            return getattr(_current_logger, name)
        if name == "verbose":
            return False
        return _discard


# Imported by modules that log outside of a run's own Logger
logger = _LoggerProxy()


class Diagnostics(Protocol):
    """What commit retrieval needs from a logger."""

    verbose: bool

    def info(self, msg: str, **kwargs) -> None:
        ...

    def debug(self, msg: str, **kwargs) -> None:
        ...


def severity(level: str | None) -> int:
    """Severity number for a level name; unknown names mean info."""
    return LEVELS.get((level or 'info').lower(), LEVELS['info'])


def level_name(level_num: int) -> str:
    """Name of the most severe level at or below level_num."""
    for name, number in reversed(LEVELS.items()):
        if level_num >= number:
            return name
    return "unknown"


def _span_severity(span) -> int:
    return (span.attributes or {}).get('logfire.level_num', LEVELS['info'])


class LevelFilteringExporter(SpanExporter):
    """Passes spans at or above min_level on to another exporter."""

    def __init__(self, exporter: SpanExporter, min_level: str | None):
        self._exporter = exporter
        self._min_severity = severity(min_level)

    def export(self, spans: list[ReadableSpan]) -> SpanExportResult:
        kept = [s for s in spans if _span_severity(s) >= self._min_severity]
        if not kept:
            return SpanExportResult.SUCCESS
        return self._exporter.export(kept)

    def shutdown(self) -> None:
        self._exporter.shutdown()

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return self._exporter.force_flush(timeout_millis)


class Sink(BaseModel):
    """One destination for log records."""

    enabled: bool = Field(default=True, description="Write to this sink")
    level: str | None = Field(
        default=None,
        description=(
            "Lowest level written; None takes the Logger's level. "
            "Valid: trace, debug, info, warn, error, fatal"
        )
    )

    _processor: Any = PrivateAttr(default=None)

    @staticmethod
    def record_fields(span) -> dict:
        """Level and message of one logfire span."""
        attrs = span.attributes or {}
        return {
            'level': level_name(_span_severity(span)),
            'message': attrs.get("logfire.msg", span.name),
        }

    @abstractmethod
    def create_processor(self):
        """Build the span processor feeding this sink.

        Returns:
            SpanProcessor, or None when logfire itself does the output
        """

    def close(self):
        """Shut down the processor, flushing what it still holds."""
        if self._processor:
            with contextlib.suppress(Exception):
                self._processor.shutdown()
            self._processor = None


class ConsoleSink(Sink):
    """Terminal output rendered by logfire's own console exporter."""

    colors: Literal["auto", "always", "never"] = "auto"

    def options(self):
        from logfire import ConsoleOptions

        return ConsoleOptions(
            min_log_level=self.level or 'info',
            colors=self.colors,
            include_timestamps=True,
        )

    def create_processor(self):
        return None


class WorkflowCommandSink(Sink):
    """GitHub Actions workflow commands on stdout.

    Info records are printed as plain lines. Debug, warning and
    error records become ::debug::, ::warning:: and ::error::
    commands, which the runner hides or annotates accordingly.
    """

    enabled: bool = False
    level: str | None = "debug"

    _out: Any = PrivateAttr(default=None)

    _commands: ClassVar[dict[str, str]] = {
        'trace': 'debug',
        'debug': 'debug',
        'warn': 'warning',
        'error': 'error',
        'fatal': 'error',
    }

    @staticmethod
    def escape_data(text: str) -> str:
        """Escape a message for use inside a workflow command."""
        return (text
            .replace('%', '%25')
            .replace('\r', '%0D')
            .replace('\n', '%0A')
        )

    def format_record(self, span) -> str:
        attrs = span.attributes or {}
        if attrs.get('logfire.span_type', 'log') != 'log':
            return ''

        fields = self.record_fields(span)
        command = self._commands.get(fields['level'])
        if command is None:
            return f"{fields['message']}\n"
        return f"::{command}::{self.escape_data(fields['message'])}\n"

    def create_processor(self):
        # Synchronous, so commands interleave correctly with other stdout
        exporter = ConsoleSpanExporter(
            out=self._out or sys.stdout, formatter=self.format_record
        )
        return SimpleSpanProcessor(
            LevelFilteringExporter(exporter, self.level)
        )


class Logger(BaseModel):
    """Logger writing to a console or to the Actions runner.

    With verbose set, debug() records are logged at info level so they
    show without turning on the runner's debug logging. Use as a
    context manager, or call close(), to flush and release the sinks.
    """

    level: str = Field(
        default="info",
        description="Level for sinks that do not set their own"
    )
    verbose: bool = Field(
        default=False,
        description="Log debug() records at info level"
    )
    console: ConsoleSink = Field(default_factory=ConsoleSink)
    workflow: WorkflowCommandSink = Field(default_factory=WorkflowCommandSink)

    @model_validator(mode='after')
    def _inherit_level(self) -> Logger:
        for sink in self.sinks():
            if sink.level is None:
                sink.level = self.level
        return self

    def sinks(self) -> list[Sink]:
        return [self.console, self.workflow]

    def setup(self, run_name: str):
        """Create the sinks' processors and (re)configure logfire."""
        import logfire

        processors = []
        for sink in self.sinks():
            if not sink.enabled:
                continue
            sink._processor = sink.create_processor()
            if sink._processor is not None:
                processors.append(sink._processor)

        logfire.configure(
            service_name=f"git-commit-info-{run_name}",
            send_to_logfire=False,
            console=self.console.options() if self.console.enabled else False,
            additional_span_processors=processors or None,
        )

    def _emit(self, level: str, msg: str, **kwargs):
        import logfire
        logfire.log(level, msg, attributes=kwargs or None)

    def trace(self, msg: str, **kwargs):
        self._emit('trace', msg, **kwargs)

    def debug(self, msg: str, **kwargs):
        self._emit('info' if self.verbose else 'debug', msg, **kwargs)

    def info(self, msg: str, **kwargs):
        self._emit('info', msg, **kwargs)

    def warn(self, msg: str, **kwargs):
        self._emit('warn', msg, **kwargs)

    def error(self, msg: str, **kwargs):
        self._emit('error', msg, **kwargs)

    def close(self):
        """Flush logfire, then close every sink.

        A sink that fails to close is reported on stderr and does not
        stop the others from closing.
        """
        import logfire

        with contextlib.suppress(Exception):
            logfire.force_flush()
        for sink in self.sinks():
            try:
                sink.close()
            except Exception as e:
                print(f"Warning: Error closing {type(sink).__name__}: {e}",
                      file=sys.stderr)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):  # noqa: U100
        self.close()
        return False


def setup_logger(
    run_name: str,
    verbose: bool = False,
    console: ConsoleSink | None = None,
    workflow: WorkflowCommandSink | None = None,
) -> Logger:
    """Install a new global logger and return it.

    Args:
        run_name: Suffix of the logfire service name
        verbose: Log debug() records at info level
        console: Console sink (default: enabled, info)
        workflow: Workflow command sink (default: disabled)
    """
    global _current_logger

    _current_logger = Logger(
        verbose=verbose,
        console=console or ConsoleSink(),
        workflow=workflow or WorkflowCommandSink(),
    )
    _current_logger.setup(run_name)
    return _current_logger


__all__ = [
    "LEVELS",
    "ConsoleSink",
    "Diagnostics",
    "LevelFilteringExporter",
    "Logger",
    "WorkflowCommandSink",
    "logger",
    "setup_logger",
]
