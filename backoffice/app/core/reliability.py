"""
Reliability utilities for screens that fetch repeatedly.

Includes the request sequence used to fence overlapping fetches.
"""

import logging

logger = logging.getLogger("backoffice.reliability")


class RequestSequence:
    """
    Monotonic request tokens.

    Each fetch takes a token with `issue()`. When its response arrives the
    caller checks `is_current(token)`; only the most recently issued token is
    current, so a slow response to an older request can never overwrite the
    result of a newer one.
    """

    def __init__(self):
        self._latest = 0

    def issue(self) -> int:
        self._latest += 1
        return self._latest

    def is_current(self, token: int) -> bool:
        current = token == self._latest
        if not current:
            logger.debug("Discarding stale response %s (latest is %s)", token, self._latest)
        return current

    @property
    def latest(self) -> int:
        return self._latest
