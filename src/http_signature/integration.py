"""
requests integration for HTTP signatures

This module lets a requests session sign outgoing requests:

    auth = HTTPSignatureAuth(key_id="Test", key=private_key_pem,
                             headers=["request-line", "host", "date"])
    requests.get("https://example.com/foo", auth=auth)
"""

import logging
from typing import Any, List, Optional, Sequence, Union
from urllib.parse import urlsplit

import requests
from requests.auth import AuthBase
from requests.models import PreparedRequest

from .exceptions import ValidationError
from .signing.accessors import format_request_line
from .signing.context import SignatureContext
from .signing.signing_config import DEFAULT_ALGORITHM, SignatureConfig
from .signing.types import (
    DEFAULT_PROTOCOL,
    DEFAULT_HEADERS,
    KeyMaterial,
    KeyResolver,
    REQUEST_LINE,
    SignatureAlgorithm,
)
from .signing.utils import calculate_content_md5, normalize_header_name
from .verification.skew import ClockSkewValidator

logger = logging.getLogger(__name__)


class PreparedRequestAccessor:
    """
    HeaderAccessor for requests.PreparedRequest objects.

    Args:
        protocol: Protocol version used for the request-line pseudo-header
        include_method: Put the method in front of the request line
    """

    def __init__(self, protocol: str = DEFAULT_PROTOCOL, include_method: bool = True):
        self.protocol = protocol
        self.include_method = include_method

    def get(self, request: PreparedRequest, name: str) -> Optional[str]:
        name = normalize_header_name(name)

        if name == REQUEST_LINE:
            return format_request_line(
                request.method, request.path_url, self.protocol, self.include_method
            )

        value = request.headers.get(name)
        if value is None and name == "host":
            # requests adds Host at the transport layer, after auth has run
            return urlsplit(request.url).netloc or None
        if isinstance(value, bytes):
            value = value.decode("latin-1")
        return value

    def set(self, request: PreparedRequest, name: str, value: str) -> PreparedRequest:
        request.headers[name] = value
        return request

    def names(self, request: PreparedRequest) -> List[str]:
        return [normalize_header_name(name) for name in request.headers.keys()]


class HTTPSignatureAuth(AuthBase):
    """
    requests authentication handler that signs each request.

    Signing errors propagate to the caller; an unsigned request is never sent
    in place of a signed one.
    """

    def __init__(
        self,
        key_id: Optional[str] = None,
        key: Optional[KeyMaterial] = None,
        algorithm: Union[str, SignatureAlgorithm] = DEFAULT_ALGORITHM,
        headers: Optional[Sequence[str]] = None,
        extensions: Optional[str] = None,
        key_resolver: Optional[KeyResolver] = None,
        content_md5: bool = False,
        config: Optional[SignatureConfig] = None,
        header_accessor: Optional[PreparedRequestAccessor] = None
    ):
        """
        Initialize the signing handler.

        Args:
            key_id: Key identifier (ignored when config is given)
            key: Key material (PEM for RSA, secret for HMAC)
            algorithm: Signature algorithm (ignored when config is given)
            headers: Ordered header names to sign (ignored when config is given)
            extensions: Optional extension data (ignored when config is given)
            key_resolver: Callable mapping a key ID to key material
            content_md5: Add a Content-MD5 header from the body before signing
            config: Signature configuration to use instead of the arguments above
            header_accessor: Accessor for prepared requests
        """
        if config is None:
            config = SignatureConfig(
                key_id=key_id,
                algorithm=algorithm,
                headers=list(headers) if headers is not None else list(DEFAULT_HEADERS),
                extensions=extensions
            )

        self.config = config
        self.key = key
        self.key_resolver = key_resolver
        self.content_md5 = content_md5
        self.header_accessor = header_accessor or PreparedRequestAccessor()
        self.skew_validator = ClockSkewValidator(config.skew)

    def create_context(self) -> SignatureContext:
        """Create a new signature context for one request"""
        return SignatureContext.from_config(
            self.config,
            key=self.key,
            key_resolver=self.key_resolver,
            header_accessor=self.header_accessor,
            skew_validator=self.skew_validator
        )

    def __call__(self, request: PreparedRequest) -> PreparedRequest:
        if self.content_md5:
            add_content_md5(request)

        # a context per request keeps concurrent requests from sharing signing state
        signed = self.create_context().sign(request)
        logger.debug(f"Signed {request.method} request to {request.url}")
        return signed


def add_content_md5(request: PreparedRequest) -> PreparedRequest:
    """
    Add a Content-MD5 header computed from a prepared request's body.

    Raises:
        ValidationError: If the body is a stream or file object
    """
    body: Any = request.body
    if body is not None and not isinstance(body, (str, bytes)):
        raise ValidationError(
            "Content-MD5 requires an in-memory request body",
            details={"body_type": type(body).__name__}
        )

    request.headers["Content-MD5"] = calculate_content_md5(body)
    return request


def sign_prepared_request(
    prepared_request: PreparedRequest,
    context: SignatureContext,
    key: Optional[KeyMaterial] = None
) -> PreparedRequest:
    """
    Sign a prepared request with an existing context.

    The context's header accessor must handle PreparedRequest objects.

    Args:
        prepared_request: Prepared request to sign
        context: Signature context
        key: Key material (defaults to the context's key)

    Returns:
        PreparedRequest: Request with Date and Authorization headers added
    """
    return context.sign(prepared_request, key)


def create_signing_session(auth: HTTPSignatureAuth, session: Optional[requests.Session] = None) -> requests.Session:
    """
    Create (or configure) a requests session that signs every request.

    Args:
        auth: Signing handler
        session: Optional existing session to configure

    Returns:
        requests.Session: Session with auth installed
    """
    session = session or requests.Session()
    session.auth = auth
    logger.info(f"Configured request signing for key ID: {auth.config.key_id}")
    return session
