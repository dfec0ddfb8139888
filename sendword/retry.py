"""Retry policy for hook executions: config resolution, backoff and the retry loop."""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

logger = logging.getLogger(__name__)

_MAX_EXPONENT = 31
_LOG_FILES = ("stdout.log", "stderr.log")


class BackoffStrategy(enum.Enum):
    """How the delay between retry attempts grows."""

    NONE = "none"
    LINEAR = "linear"
    EXPONENTIAL = "exponential"


class ExecutionStatus(enum.Enum):
    """Lifecycle state of an execution."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of a single run of a hook's command."""

    status: ExecutionStatus
    exit_code: int | None = None


@dataclass(frozen=True)
class RetryConfig:
    """Retry settings as written in configuration, globally or per hook."""

    count: int = 0
    backoff: BackoffStrategy = BackoffStrategy.EXPONENTIAL
    initial_delay: timedelta = timedelta(seconds=1)
    max_delay: timedelta = timedelta(seconds=60)


@dataclass(frozen=True)
class EffectiveRetryConfig:
    """Retry settings resolved for one execution."""

    count: int
    backoff: BackoffStrategy
    initial_delay: timedelta
    max_delay: timedelta


def resolve_retry_config(
    hook_retries: RetryConfig | None, global_config: RetryConfig
) -> EffectiveRetryConfig:
    """Use the hook's retry settings if it has any, else the global ones.

    Hook settings replace the global ones as a whole, not field by field.
    """
    retry = hook_retries if hook_retries is not None else global_config
    return EffectiveRetryConfig(
        count=retry.count,
        backoff=retry.backoff,
        initial_delay=retry.initial_delay,
        max_delay=retry.max_delay,
    )


def _scaled(delay: timedelta, factor: int) -> timedelta:
    try:
        return delay * factor
    except OverflowError:
        return timedelta.max


def calculate_backoff(
    strategy: BackoffStrategy,
    attempt: int,
    initial_delay: timedelta,
    max_delay: timedelta,
) -> timedelta:
    """Delay before the given retry attempt (1-indexed), capped at ``max_delay``."""
    if strategy is BackoffStrategy.NONE:
        delay = timedelta(0)
    elif strategy is BackoffStrategy.LINEAR:
        delay = _scaled(initial_delay, attempt)
    else:
        exponent = min(max(attempt - 1, 0), _MAX_EXPONENT)
        delay = _scaled(initial_delay, 1 << exponent)
    return min(delay, max_delay)


def append_retry_marker(logs_dir: str | Path, execution_id: str, attempt: int) -> None:
    """Append a retry marker to the execution's existing stdout and stderr logs.

    Missing log files are left alone; write errors are ignored.
    """
    marker = f"\n--- RETRY ATTEMPT {attempt} ---\n".encode()
    log_dir = Path(logs_dir) / execution_id
    for filename in _LOG_FILES:
        path = log_dir / filename
        if not path.is_file():
            continue
        try:
            with path.open("ab") as handle:
                handle.write(marker)
        except OSError:
            pass


def _should_retry(result: ExecutionResult) -> bool:
    # Success, time-outs and spawn failures (no exit code) are final.
    return result.status is ExecutionStatus.FAILED and result.exit_code is not None


async def run_with_retries(
    run: Callable[[], Awaitable[ExecutionResult]],
    execution_id: str,
    logs_dir: str | Path,
    retry_config: EffectiveRetryConfig,
    increment_retry_count: Callable[[str], Awaitable[object]],
    reset_to_pending: Callable[[str], Awaitable[object]],
) -> ExecutionResult:
    """Run an execution, retrying failures with a non-zero exit code.

    Before each retry the backoff delay is waited out, a marker is appended to
    the log files, the stored retry count is incremented and the execution is
    reset to pending. Returns the result of the final attempt.
    """
    result = await run()

    for attempt in range(1, retry_config.count + 1):
        if not _should_retry(result):
            break

        delay = calculate_backoff(
            retry_config.backoff,
            attempt,
            retry_config.initial_delay,
            retry_config.max_delay,
        )
        if delay:
            await asyncio.sleep(delay.total_seconds())

        logger.info(
            "retrying execution %s (attempt %d of %d, delay %d ms)",
            execution_id,
            attempt,
            retry_config.count,
            delay // timedelta(milliseconds=1),
        )

        append_retry_marker(logs_dir, execution_id, attempt)

        try:
            await increment_retry_count(execution_id)
        except Exception as exc:
            logger.error("failed to increment retry count for %s: %s", execution_id, exc)

        try:
            await reset_to_pending(execution_id)
        except Exception as exc:
            logger.error("failed to reset execution %s to pending: %s", execution_id, exc)
            break

        result = await run()

    return result