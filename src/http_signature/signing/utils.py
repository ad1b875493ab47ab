"""
Utility functions for HTTP signatures

This module provides helper functions for header-name normalization, HTTP date
formatting and parsing, Base64 padding and Content-MD5 calculation.
"""

import re
import time
import base64
import hashlib
from datetime import timezone
from email.utils import formatdate, parsedate_to_datetime
from typing import Iterable, List, Optional

from ..exceptions import DuplicateHeaderError, ValidationError
from .types import RequestBody


def pad_base64(value: str) -> str:
    """
    Pad a Base64 string with '=' so its length is a multiple of 4.

    Some peers emit unpadded Base64 digests; this normalizes them.

    Args:
        value: Base64 string, padded or not

    Returns:
        str: Properly padded Base64 string
    """
    remainder = len(value) % 4
    if remainder:
        value += "=" * (4 - remainder)
    return value


def normalize_header_name(name: str) -> str:
    """
    Normalize header name to lowercase for consistent processing.

    Args:
        name: Header name to normalize

    Returns:
        str: Lowercase header name
    """
    return name.lower().strip()


def validate_header_name(name: str) -> bool:
    """
    Validate header name for inclusion in signature.

    Args:
        name: Header name to validate

    Returns:
        bool: True if header name is valid
    """
    if not isinstance(name, str):
        return False

    # RFC 7230 token
    header_name_pattern = re.compile(r'^[!#$%&\'*+\-.0-9A-Z^_`a-z|~]+$')
    return bool(header_name_pattern.match(name))


def normalize_header_list(names: Iterable[str]) -> List[str]:
    """
    Lowercase a header list and reject invalid or repeated names.

    Args:
        names: Header names in signing order

    Returns:
        list: Normalized header names, order preserved

    Raises:
        ValidationError: If the list is empty or a name is not a valid token
        DuplicateHeaderError: If a name appears more than once
    """
    if isinstance(names, str):
        raise ValidationError(
            "Header list must be a sequence of names, not a string",
            details={"headers": names}
        )

    normalized: List[str] = []
    for name in names:
        if not validate_header_name(name):
            raise ValidationError(f"Invalid header name: {name!r}", details={"header": name})

        lowered = normalize_header_name(name)
        if lowered in normalized:
            raise DuplicateHeaderError(
                f"Duplicate header '{lowered}' found in header list",
                details={"header": lowered}
            )
        normalized.append(lowered)

    if not normalized:
        raise ValidationError("Header list cannot be empty")

    return normalized


def validate_skew_tolerance(tolerance_seconds: int) -> int:
    """
    Validate a clock skew tolerance value.

    Raises:
        ValidationError: If the tolerance is not a non-negative integer
    """
    if isinstance(tolerance_seconds, bool) or not isinstance(tolerance_seconds, int) or tolerance_seconds < 0:
        raise ValidationError(
            f"Skew tolerance must be a non-negative integer, got {tolerance_seconds!r}",
            details={"skew": tolerance_seconds}
        )
    return tolerance_seconds


def format_http_date(timestamp: Optional[float] = None) -> str:
    """
    Format timestamp as an RFC 1123 HTTP date.

    Args:
        timestamp: Unix timestamp (uses current time if None)

    Returns:
        str: Date such as "Thu, 05 Jan 2012 21:31:40 GMT"
    """
    if timestamp is None:
        timestamp = time.time()
    return formatdate(timestamp, usegmt=True)


def parse_http_date(value: Optional[str]) -> Optional[float]:
    """
    Parse an HTTP date into a Unix timestamp.

    Understands RFC 1123, RFC 850 and asctime() formats. Dates without a zone
    are taken as GMT.

    Args:
        value: Date header value

    Returns:
        float or None: Unix timestamp, or None if the value can't be parsed
    """
    if not value or not isinstance(value, str):
        return None

    try:
        parsed = parsedate_to_datetime(value.strip())
    except (TypeError, ValueError, IndexError):
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    return parsed.timestamp()


def calculate_content_md5(content: RequestBody) -> str:
    """
    Calculate the Content-MD5 header value for a request body.

    Args:
        content: Request body content (string, bytes, or None)

    Returns:
        str: Base64-encoded MD5 digest
    """
    if content is None:
        content = b""
    elif isinstance(content, str):
        content = content.encode("utf-8")

    digest = hashlib.md5(content).digest()
    return base64.b64encode(digest).decode("ascii")


class PerformanceTimer:
    """Simple performance timer for monitoring signing operations."""

    def __init__(self):
        self.start_time = time.perf_counter()

    def elapsed_ms(self) -> float:
        """Get elapsed time in milliseconds."""
        return (time.perf_counter() - self.start_time) * 1000

    def reset(self) -> None:
        """Reset the timer."""
        self.start_time = time.perf_counter()
