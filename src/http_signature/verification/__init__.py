"""
HTTP Signature - Verification Module

Authorization header parsing, clock skew validation and the parser that turns
a signed request into a SignatureContext ready for verification.
"""

from .authorization import (
    parse_authorization_header,
    parse_parameters,
    split_parameters,
)

from .skew import (
    ClockSkewValidator,
    check_clock_skew,
)

from .parser import (
    SignatureParser,
    parse_request,
)

__all__ = [
    'parse_authorization_header',
    'parse_parameters',
    'split_parameters',
    'ClockSkewValidator',
    'check_clock_skew',
    'SignatureParser',
    'parse_request',
]
