from __future__ import annotations

import logging
from typing import Callable, TypeVar

from ..core.constants import CONFLICT_RETRY_ATTEMPTS
from ..core.exceptions import ConcurrencyConflict

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_on_conflict(operation: Callable[[], T], *, attempts: int = CONFLICT_RETRY_ATTEMPTS, label: str = "write") -> T:
    """Run a read-modify-write operation, re-running it on a lost update.

    `operation` must re-read its inputs every time it is called.
    """
    attempt = 1
    while True:
        try:
            return operation()
        except ConcurrencyConflict:
            if attempt >= attempts:
                logger.warning("%s: conflict persisted after %d attempt(s)", label, attempt)
                raise
            logger.warning("%s: concurrent update detected, retrying (%d/%d)", label, attempt, attempts)
            attempt += 1
