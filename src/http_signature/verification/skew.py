"""
Clock skew validation for HTTP signatures

The Date header is part of the signed data, so bounding its distance from the
verifier's clock bounds how long a captured request can be replayed.
"""

import logging
import time
from typing import Optional

from ..exceptions import DateUnparsableError, SkewExceededError
from ..signing.types import Clock, DEFAULT_SKEW_SECONDS
from ..signing.utils import parse_http_date, validate_skew_tolerance

logger = logging.getLogger(__name__)


def check_clock_skew(now: float, date_value: Optional[str], tolerance_seconds: int) -> float:
    """
    Check a Date header value against the current time.

    A tolerance of 0 disables the check and returns without looking at the
    date. This removes replay-window protection and is meant for tests only.

    Args:
        now: Current Unix timestamp
        date_value: Date header value
        tolerance_seconds: Allowed distance in seconds, in either direction

    Returns:
        float: Absolute difference in seconds (0.0 when the check is disabled)

    Raises:
        DateUnparsableError: If the date is missing or can't be parsed
        SkewExceededError: If the difference is >= the tolerance
    """
    validate_skew_tolerance(tolerance_seconds)

    if tolerance_seconds == 0:
        return 0.0

    header_time = parse_http_date(date_value)
    if header_time is None:
        raise DateUnparsableError(
            "No Date header was returned (or could be parsed)",
            details={"date": date_value}
        )

    diff = abs(now - header_time)
    if diff >= tolerance_seconds:
        raise SkewExceededError(diff, tolerance_seconds, details={"date": date_value})

    return diff


class ClockSkewValidator:
    """
    Clock skew validator with an injectable clock
    """

    def __init__(self, tolerance_seconds: int = DEFAULT_SKEW_SECONDS, clock: Optional[Clock] = None):
        """
        Initialize the validator.

        Args:
            tolerance_seconds: Allowed skew in seconds; 0 disables the check
            clock: Callable returning the current Unix timestamp
        """
        self.tolerance_seconds = validate_skew_tolerance(tolerance_seconds)
        self.clock = clock or time.time

        if self.tolerance_seconds == 0:
            logger.warning("Clock skew checking is disabled; signed requests can be replayed indefinitely")

    @property
    def enabled(self) -> bool:
        return self.tolerance_seconds > 0

    def validate(self, date_value: Optional[str]) -> float:
        """Check `date_value` against the validator's clock. See check_clock_skew()."""
        return check_clock_skew(self.clock(), date_value, self.tolerance_seconds)
