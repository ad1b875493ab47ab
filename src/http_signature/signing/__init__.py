"""
HTTP Signature - Request Signing Module

Signing string construction, RSA and HMAC signature methods, Authorization
header formatting and the SignatureContext that ties them together.
"""

from .types import (
    SignableRequest,
    SignatureAlgorithm,
    AlgorithmFamily,
    HashAlgorithm,
    REQUEST_LINE,
    ALL_HEADERS,
    DEFAULT_HEADERS,
    DEFAULT_SKEW_SECONDS,
)

from .accessors import (
    HeaderAccessor,
    SignableRequestAccessor,
    DEFAULT_ACCESSOR,
    format_request_line,
)

from .signing_string import (
    SigningStringBuilder,
    build_signing_string,
    expand_header_names,
)

from .methods import (
    SignatureMethod,
    RSASignatureMethod,
    HMACSignatureMethod,
    get_signature_method,
    load_rsa_private_key,
    load_rsa_public_key,
)

from .authorization import (
    AuthorizationHeader,
    format_authorization_header,
)

from .signing_config import (
    SignatureConfig,
    SignatureConfigBuilder,
    HEADER_PROFILES,
    DEFAULT_ALGORITHM,
    create_signature_config,
    create_from_profile,
    get_header_profile,
    list_header_profiles,
)

from .context import SignatureContext

from .utils import (
    pad_base64,
    normalize_header_name,
    normalize_header_list,
    format_http_date,
    parse_http_date,
    calculate_content_md5,
)

# Public API exports
__all__ = [
    # Types
    'SignableRequest',
    'SignatureAlgorithm',
    'AlgorithmFamily',
    'HashAlgorithm',
    'REQUEST_LINE',
    'ALL_HEADERS',
    'DEFAULT_HEADERS',
    'DEFAULT_SKEW_SECONDS',

    # Header access
    'HeaderAccessor',
    'SignableRequestAccessor',
    'DEFAULT_ACCESSOR',
    'format_request_line',

    # Signing string
    'SigningStringBuilder',
    'build_signing_string',
    'expand_header_names',

    # Signature methods
    'SignatureMethod',
    'RSASignatureMethod',
    'HMACSignatureMethod',
    'get_signature_method',
    'load_rsa_private_key',
    'load_rsa_public_key',

    # Authorization header
    'AuthorizationHeader',
    'format_authorization_header',

    # Configuration
    'SignatureConfig',
    'SignatureConfigBuilder',
    'HEADER_PROFILES',
    'DEFAULT_ALGORITHM',
    'create_signature_config',
    'create_from_profile',
    'get_header_profile',
    'list_header_profiles',

    # Context
    'SignatureContext',

    # Utilities
    'pad_base64',
    'normalize_header_name',
    'normalize_header_list',
    'format_http_date',
    'parse_http_date',
    'calculate_content_md5',
]
