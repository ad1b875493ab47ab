"""
HTTP Signature
Joyent HTTP Signature authentication with RSA and HMAC support
"""

from .version import __version__
from .exceptions import (
    ErrorCodes,
    HttpSignatureError,
    ValidationError,
    UnsupportedAlgorithmError,
    MalformedHeaderError,
    DuplicateHeaderError,
    MissingHeaderError,
    KeyTypeMismatchError,
    InvalidKeyError,
    MissingKeyError,
    MissingRequestError,
    DateUnparsableError,
    SkewExceededError,
)
from .signing import (
    SignableRequest,
    SignatureAlgorithm,
    HeaderAccessor,
    SignableRequestAccessor,
    SignatureContext,
    SignatureConfig,
    SignatureConfigBuilder,
    AuthorizationHeader,
    create_signature_config,
    create_from_profile,
    build_signing_string,
    format_authorization_header,
    get_signature_method,
    calculate_content_md5,
)
from .verification import (
    SignatureParser,
    ClockSkewValidator,
    parse_authorization_header,
    parse_request,
)
from .integration import (
    HTTPSignatureAuth,
    PreparedRequestAccessor,
    create_signing_session,
    sign_prepared_request,
)

__all__ = [
    '__version__',

    # Exceptions
    'ErrorCodes',
    'HttpSignatureError',
    'ValidationError',
    'UnsupportedAlgorithmError',
    'MalformedHeaderError',
    'DuplicateHeaderError',
    'MissingHeaderError',
    'KeyTypeMismatchError',
    'InvalidKeyError',
    'MissingKeyError',
    'MissingRequestError',
    'DateUnparsableError',
    'SkewExceededError',

    # Signing
    'SignableRequest',
    'SignatureAlgorithm',
    'HeaderAccessor',
    'SignableRequestAccessor',
    'SignatureContext',
    'SignatureConfig',
    'SignatureConfigBuilder',
    'AuthorizationHeader',
    'create_signature_config',
    'create_from_profile',
    'build_signing_string',
    'format_authorization_header',
    'get_signature_method',
    'calculate_content_md5',

    # Verification
    'SignatureParser',
    'ClockSkewValidator',
    'parse_authorization_header',
    'parse_request',

    # requests integration
    'HTTPSignatureAuth',
    'PreparedRequestAccessor',
    'create_signing_session',
    'sign_prepared_request',
]
