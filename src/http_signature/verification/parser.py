"""
Request parser for HTTP signatures

Reads the Authorization header from an incoming request, checks the Date
header against the clock skew tolerance and decodes the header into a
SignatureContext bound to the request. The context shares the parser's skew
validator. The caller then supplies a key and calls verify() on it.
"""

import logging
from typing import Any, Optional

from ..exceptions import MissingHeaderError
from ..signing.accessors import HeaderAccessor, DEFAULT_ACCESSOR
from ..signing.context import SignatureContext
from ..signing.types import Clock, DEFAULT_SKEW_SECONDS, KeyMaterial, KeyResolver
from .authorization import parse_authorization_header
from .skew import ClockSkewValidator

logger = logging.getLogger(__name__)


class SignatureParser:
    """
    Parser that turns signed requests into signature contexts
    """

    def __init__(
        self,
        header_accessor: Optional[HeaderAccessor] = None,
        skew: int = DEFAULT_SKEW_SECONDS,
        clock: Optional[Clock] = None
    ):
        """
        Initialize the parser.

        Args:
            header_accessor: Accessor for reading request headers
            skew: Allowed clock skew in seconds; 0 disables the check
            clock: Callable returning the current Unix timestamp
        """
        self.header_accessor = header_accessor or DEFAULT_ACCESSOR
        self.skew_validator = ClockSkewValidator(skew, clock)

    @property
    def skew(self) -> int:
        return self.skew_validator.tolerance_seconds

    def parse(
        self,
        request: Any,
        key: Optional[KeyMaterial] = None,
        key_resolver: Optional[KeyResolver] = None
    ) -> SignatureContext:
        """
        Parse the signature from a request.

        Args:
            request: Incoming request
            key: Key material to attach to the returned context
            key_resolver: Key resolver to attach to the returned context

        Returns:
            SignatureContext: Context bound to the request, ready for verify()

        Raises:
            MissingHeaderError: If the request has no Authorization header
            DateUnparsableError: If the Date header is missing or unparsable
            SkewExceededError: If the Date header is outside the tolerance
            MalformedHeaderError: If the Authorization header can't be decoded
            UnsupportedAlgorithmError: If the algorithm is not supported
            DuplicateHeaderError: If the headers parameter repeats a name
        """
        value = self.header_accessor.get(request, "authorization")
        if not value:
            raise MissingHeaderError(
                "No authorization header value found",
                details={"header": "authorization"}
            )

        self.skew_validator.validate(self.header_accessor.get(request, "date"))

        authorization = parse_authorization_header(value)
        logger.debug(
            f"Parsed signature for key ID {authorization.key_id} "
            f"using {authorization.algorithm.value}"
        )

        return SignatureContext.from_authorization(
            authorization,
            skew_validator=self.skew_validator,
            key=key,
            key_resolver=key_resolver,
            header_accessor=self.header_accessor,
            request=request
        )


def parse_request(
    request: Any,
    header_accessor: Optional[HeaderAccessor] = None,
    skew: int = DEFAULT_SKEW_SECONDS,
    clock: Optional[Clock] = None
) -> SignatureContext:
    """
    Convenience function to parse the signature from a request.

    Args:
        request: Incoming request
        header_accessor: Accessor for reading request headers
        skew: Allowed clock skew in seconds
        clock: Callable returning the current Unix timestamp

    Returns:
        SignatureContext: Context bound to the request
    """
    return SignatureParser(header_accessor, skew, clock).parse(request)
