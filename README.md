# sendword

A retry policy for commands started by webhooks. When a command exits with a
non-zero code, it is run again. The number of retries is capped, and an
optional delay can be set between attempts.

Everything lives in the `sendword.retry` module.

## Installation

```
pip install sendword
```

## Configuration

`RetryConfig` holds retry settings, either global or for one hook. It is a
frozen dataclass with these fields and defaults:

- `count`: `0`
- `backoff`: `BackoffStrategy.EXPONENTIAL`
- `initial_delay`: `timedelta(seconds=1)`
- `max_delay`: `timedelta(seconds=60)`

`resolve_retry_config(hook_retries, global_config)` returns an
`EffectiveRetryConfig` with the same four fields. It uses `hook_retries` in
full when that is not `None`, and `global_config` otherwise. The two are never
merged field by field.

## Backoff

`calculate_backoff(strategy, attempt, initial_delay, max_delay)` returns the
delay before retry `attempt`. Attempts count from 1. Delays are
`datetime.timedelta` values.

- `BackoffStrategy.NONE`: no delay.
- `BackoffStrategy.LINEAR`: `initial_delay * attempt`.
- `BackoffStrategy.EXPONENTIAL`: `initial_delay * 2 ** (attempt - 1)`. The
  exponent is capped at 31.

The result is never more than `max_delay`. Very large attempt numbers do not
overflow. They give `max_delay`.

```python
from datetime import timedelta
from sendword.retry import BackoffStrategy, calculate_backoff

calculate_backoff(BackoffStrategy.EXPONENTIAL, 3, timedelta(seconds=1), timedelta(seconds=300))
# timedelta(seconds=4)
```

## Running with retries

`run_with_retries(run, execution_id, logs_dir, retry_config,
increment_retry_count, reset_to_pending)` is a coroutine. Its arguments are:

- `run`: an async callable that runs the command once and returns an
  `ExecutionResult`. An `ExecutionResult` holds a `status`, which is an
  `ExecutionStatus`, and an optional `exit_code`.
- `execution_id` and `logs_dir`: these locate the log files.
- `retry_config`: an `EffectiveRetryConfig`.
- `increment_retry_count` and `reset_to_pending`: async callables. Each is
  called with the execution id.

A retry happens only when the status is `ExecutionStatus.FAILED` and an exit
code is present. None of these runs is retried:

- a successful run;
- a run that timed out (`ExecutionStatus.TIMED_OUT`);
- a failure with no exit code.

Before each retry, the coroutine does these steps in order:

1. It waits out the backoff delay.
2. It appends a `--- RETRY ATTEMPT n ---` marker to `stdout.log` and
   `stderr.log` in `logs_dir/execution_id`. This uses
   `append_retry_marker(logs_dir, execution_id, attempt)`. A log file that
   does not exist is left alone, and write errors are ignored.
3. It calls `increment_retry_count`. If this raises, the error is logged and
   retrying goes on.
4. It calls `reset_to_pending`. If this raises, the error is logged and
   retrying stops.

The coroutine returns the result of the last attempt. Messages are logged
through the standard `logging` module under the `sendword.retry` logger.

## What this package does not do

This package does not run commands, store executions or receive webhooks.
Running the command and updating the stored execution record are the caller's
job. The caller passes these in as the `run`, `increment_retry_count` and
`reset_to_pending` callables.