"""
Switchyard polling: bounded wait for a remote job to finish.

poll(check, attempts=..., interval=..., retries=...)
- Calls `await check(count)` (count starts at 1) until it returns True.
- False means "still running": sleep `interval` seconds and check again. Every
  check counts toward `attempts`, failed ones included; a "still running"
  answer on or after check number `attempts` raises JobTimeoutError.
- JobFailedError raised by check is terminal and propagates immediately.
- Any other exception is transient: the check is retried after `interval`,
  up to `retries` consecutive failures; the next failure propagates. A
  successful check resets the consecutive failure count.
"""
import asyncio

from .faults import CommandError, FaultCode


class JobFailedError(CommandError):
    """
    The remote job reported a terminal error; message is the remote text.
    """
    fault = FaultCode.JOB_FAILED


class JobTimeoutError(CommandError):
    fault = FaultCode.JOB_TIMEOUT


async def poll(check, /, *, attempts, interval, retries=5, sleep=asyncio.sleep):
    """
    Wait for check to report completion.

    returns
    - int: the number of checks performed.

    raises
    - JobFailedError: from check, without retrying.
    - JobTimeoutError: when check number `attempts` (or later) still reports
      the job running.
    - Exception: the transient error that exceeded `retries`.
    """
    if attempts < 1:
        raise ValueError("poll() attempts must be at least 1")

    count = failures = 0
    while True:
        count += 1
        try:
            done = await check(count)
        except JobFailedError:
            raise
        except Exception:
            failures += 1
            if failures > retries:
                raise
            await sleep(interval)
            continue

        failures = 0
        if done:
            return count
        if count >= attempts:
            raise JobTimeoutError(f"job timed out after {count} check(s)")
        await sleep(interval)


__all__ = (
    "JobFailedError",
    "JobTimeoutError",
    "poll",
)
