"""The action step: read inputs, retrieve the commit, set outputs."""

from __future__ import annotations

from commitinfo.core.config import (
    ActionInputs,
    Config,
    RunnerEnvironment,
    load_config,
)
from commitinfo.core.log import (
    ConsoleSink,
    Logger,
    WorkflowCommandSink,
    setup_logger,
)
from commitinfo.errors import CommitInfoError
from commitinfo.git.commit import retrieve_commit
from commitinfo.git.query import QueryExecutor
from commitinfo.outputs import OutputSink, output_sink_for


def configure_logging(
    verbose: bool, environment: RunnerEnvironment
) -> Logger:
    """Set up the global logger for one run.

    Inside GitHub Actions records go to stdout as workflow commands;
    anywhere else they go to logfire's console.
    """
    on_runner = environment.github_actions
    return setup_logger(
        run_name="step",
        verbose=verbose,
        console=ConsoleSink(
            enabled=not on_runner,
            level="debug" if verbose else "info",
        ),
        workflow=WorkflowCommandSink(enabled=on_runner),
    )


def publish_commit_info(
    config: Config,
    log: Logger,
    executor: QueryExecutor | None = None,
    outputs: OutputSink | None = None,
) -> None:
    """Retrieve the configured commit and set every output.

    Raises:
        RetrievalError: If the commit cannot be retrieved; no
            outputs are set in that case
    """
    if config.verbose:
        log.info("🔍 Verbose logging enabled")
    log.debug("Action inputs:")
    log.debug(f"  offset: {config.offset}")
    log.debug(f"  verbose: {config.verbose}")
    log.debug(f"  debug mode: {config.debug_mode}")

    log.info(f"Getting commit info for offset: {config.offset}")
    record = retrieve_commit(
        config.offset,
        log,
        executor=executor,
        working_directory=config.working_directory,
    )

    sink = outputs or output_sink_for(config.output_file)
    sink.set_outputs(record.outputs())

    log.info("✅ Successfully retrieved commit information")
    log.info("📊 Commit Info:")
    log.info(f"   SHA: {record.sha}")
    log.info(f"   Short SHA: {record.short_sha}")
    log.info(f"   Message: {record.subject}")
    log.info(f"   Author: {record.author} <{record.author_email}>")
    log.info(f"   Date: {record.date_iso}")
    log.debug("Action completed successfully")


def report_failure(
    error: CommitInfoError,
    environment: RunnerEnvironment | None = None,
) -> int:
    """Log error the way a failed run does and return the exit code."""
    environment = (
        environment if environment is not None else RunnerEnvironment()
    )
    with configure_logging(environment.debug_mode, environment) as log:
        log.error(str(error))
    return 1


def run_action(
    inputs: ActionInputs | None = None,
    environment: RunnerEnvironment | None = None,
    executor: QueryExecutor | None = None,
    outputs: OutputSink | None = None,
) -> int:
    """Run the step end to end.

    Logging starts before the inputs are read, so an input that fails
    to validate is reported like any other error.

    Args:
        inputs: Action inputs; read from INPUT_* variables if None
        environment: Runner environment; read from os.environ if None
        executor: Runs git queries; a real subprocess executor if None
        outputs: Receives outputs; chosen from GITHUB_OUTPUT if None

    Returns:
        Exit code (0=success, 1=failure)
    """
    environment = (
        environment if environment is not None else RunnerEnvironment()
    )
    verbose = environment.debug_mode or bool(inputs and inputs.verbose)

    with configure_logging(verbose, environment) as log:
        try:
            config = load_config(inputs, environment)
            log.verbose = config.verbose
            publish_commit_info(config, log, executor, outputs)
        except CommitInfoError as e:
            log.error(str(e))
            return 1
    return 0
