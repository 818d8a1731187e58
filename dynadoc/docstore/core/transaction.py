"""
Optimistic transactions with retry on conflict.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import time
from collections.abc import Callable
from typing import TypeVar

from ..exceptions import UpdateConflictError
from ..logging_config import get_logger
from .batch_builder import BatchBuilder
from .entity_store import EntityStore

logger = get_logger(__name__)

T = TypeVar("T")

# Called with the submit failure and the number of failures so far
RetryPolicy = Callable[[Exception, int], bool]


def NO_RETRY(error: Exception, failure_count: int) -> bool:
    """Retry policy that never retries."""
    return False


def retry(max_retries: int, pause: float = 0.0) -> RetryPolicy:
    """
    Build a policy retrying update conflicts a fixed number of times.

    Args:
        max_retries: Number of retries after the first attempt
        pause: Seconds to sleep before each retry

    Returns:
        Retry policy
    """

    def policy(error: Exception, failure_count: int) -> bool:
        if not isinstance(error, UpdateConflictError) or failure_count > max_retries:
            return False
        if pause > 0:
            time.sleep(pause)
        return True

    return policy


def transaction(
    store: EntityStore,
    work: Callable[[BatchBuilder], T],
    retry_policy: RetryPolicy = NO_RETRY,
) -> T:
    """
    Run a unit of work against a fresh BatchBuilder and submit it.

    The work is run again from scratch, with a new builder, each time the
    retry policy accepts a submit failure. Exceptions raised by the work
    itself abort the transaction without submitting.

    Args:
        store: Entity store the batch is submitted to
        work: Function declaring modifications and checks on the builder
        retry_policy: Decides whether a failed submit is retried

    Returns:
        The value returned by work on the successful attempt

    Raises:
        UpdateConflictError: If a conflict occurs and the policy gives up
    """
    failure_count = 0

    while True:
        builder = BatchBuilder(store)
        result = work(builder)

        try:
            builder.submit()
            return result
        except Exception as e:
            failure_count += 1
            if not retry_policy(e, failure_count):
                raise
            logger.info(f"Retrying transaction after failure {failure_count}: {e}")
