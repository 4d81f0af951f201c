"""
Retry Executor

Wraps a single transfer attempt in a fixed-count retry loop with a fixed
delay between attempts. Never raises: exceptions from the attempt become
network_error failures.

Every failure reason is retried the same way, including below_minimum and
insufficient_balance. Deciding that those end the run is left to the caller.
"""

import asyncio
from typing import Awaitable, Callable, Optional

from loguru import logger

from .models import FailureReason, TransferAttemptResult, TransferOutcome


AttemptFn = Callable[[], Awaitable[TransferAttemptResult]]
SleepFn = Callable[[float], Awaitable[None]]


async def execute_with_retry(
    attempt_fn: AttemptFn,
    max_retries: int,
    retry_delay: float,
    label: str = "Transfer",
    sleep: SleepFn = asyncio.sleep
) -> TransferOutcome:
    """
    Run attempt_fn up to max_retries times

    Args:
        attempt_fn: Coroutine function performing one attempt
        max_retries: Maximum number of attempts
        retry_delay: Seconds to wait between attempts
        label: Name used in status lines
        sleep: Suspension used for the retry delay

    Returns:
        TransferOutcome of the first success, else of the last failure
    """
    last_result: Optional[TransferAttemptResult] = None
    attempts = 0

    for attempt in range(1, max_retries + 1):
        attempts = attempt
        logger.info(f"🔄 {label} - Attempt {attempt}/{max_retries}")

        try:
            result = await attempt_fn()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            last_result = TransferAttemptResult.failed(FailureReason.NETWORK_ERROR, error_message=str(e))
            if attempt < max_retries:
                logger.warning(f"✗ {label} error: {e}. Retrying in {retry_delay:g} seconds...")
                await sleep(retry_delay)
            continue

        if result.success:
            if attempt > 1:
                logger.info(f"✓ {label} succeeded on attempt {attempt}")
            return TransferOutcome.from_attempt(result, attempts_used=attempt)

        last_result = result

        if attempt < max_retries:
            logger.warning(f"✗ {label} failed ({result.reason.value}). Retrying in {retry_delay:g} seconds...")
            await sleep(retry_delay)

    logger.error(f"✗ {label} failed after {max_retries} attempts")

    if last_result is None:
        last_result = TransferAttemptResult.failed(FailureReason.MAX_RETRIES_EXCEEDED)

    return TransferOutcome.from_attempt(last_result, attempts_used=attempts)
