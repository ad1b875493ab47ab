"""
Signature context for signing and verifying HTTP requests

A SignatureContext holds everything needed for one party's side of the
exchange: algorithm, header list, key identifier, key material and the header
accessor used to reach into requests. Signing adds Date (when absent) and
Authorization headers to a request; verification rebuilds the signing string
from a parsed header list and checks the signature.
"""

import logging
from typing import Any, List, Optional, Sequence, Tuple, Union

from ..exceptions import (
    MissingHeaderError,
    MissingKeyError,
    MissingRequestError,
    ValidationError,
)
from .accessors import HeaderAccessor, DEFAULT_ACCESSOR
from .authorization import AuthorizationHeader, format_authorization_header
from .methods import get_signature_method
from .signing_config import DEFAULT_ALGORITHM, SignatureConfig
from .signing_string import SigningStringBuilder, expand_header_names
from .types import (
    DEFAULT_HEADERS,
    DEFAULT_SKEW_SECONDS,
    Clock,
    KeyMaterial,
    KeyResolver,
    SignatureAlgorithm,
)
from .utils import (
    PerformanceTimer,
    format_http_date,
    normalize_header_list,
)

logger = logging.getLogger(__name__)


class SignatureContext:
    """
    Signing and verification state for HTTP signatures

    The algorithm is fixed at construction. The header list may be replaced;
    doing so discards the last signing string. The "all" token is expanded
    against the request on every operation, never cached.
    """

    def __init__(
        self,
        key_id: str,
        algorithm: Union[str, SignatureAlgorithm] = DEFAULT_ALGORITHM,
        headers: Optional[Sequence[str]] = None,
        extensions: Optional[str] = None,
        skew: int = DEFAULT_SKEW_SECONDS,
        key: Optional[KeyMaterial] = None,
        key_resolver: Optional[KeyResolver] = None,
        header_accessor: Optional[HeaderAccessor] = None,
        request: Any = None,
        signature: Optional[str] = None,
        clock: Optional[Clock] = None,
        skew_validator: Any = None
    ):
        """
        Initialize the signature context.

        Args:
            key_id: Key identifier sent in the Authorization header
            algorithm: Signature algorithm (case-insensitive token or enum)
            headers: Ordered header names to sign (defaults to ["date"])
            extensions: Optional opaque extension data
            skew: Allowed clock skew in seconds; 0 disables skew checks
            key: Key material (PEM for RSA, secret for HMAC). Prefer passing
                the key to sign()/verify() so the context doesn't keep it
            key_resolver: Callable mapping a key ID to key material, used when
                no key is given
            header_accessor: Accessor for reading and writing request headers
            request: Request to operate on when sign()/verify() get none
            signature: Existing Base64 signature (set when parsing)
            clock: Callable returning the current Unix timestamp
            skew_validator: Existing ClockSkewValidator to share; skew and
                clock are ignored when given

        Raises:
            ValidationError: If the key ID, headers or skew are invalid
            UnsupportedAlgorithmError: If the algorithm is not supported
            DuplicateHeaderError: If a header appears twice
        """
        if not key_id or not isinstance(key_id, str):
            raise ValidationError("Key ID must be a non-empty string", details={"key_id": key_id})

        self._algorithm = SignatureAlgorithm.from_string(algorithm)
        self._headers = normalize_header_list(headers if headers is not None else DEFAULT_HEADERS)
        self._signing_string: Optional[str] = None
        self._signed_headers: Optional[List[str]] = None

        if skew_validator is None:
            # verification imports this module, so the import can't be at the top
            from ..verification.skew import ClockSkewValidator
            skew_validator = ClockSkewValidator(skew, clock)

        self.key_id = key_id
        self.extensions = extensions
        self.skew_validator = skew_validator
        self.key = key
        self.key_resolver = key_resolver
        self.header_accessor = header_accessor or DEFAULT_ACCESSOR
        self.request = request
        self.signature = signature

    @classmethod
    def from_config(cls, config: SignatureConfig, **kwargs) -> 'SignatureContext':
        """
        Create a context from a SignatureConfig.

        Args:
            config: Validated configuration
            **kwargs: clock, skew_validator, key, key_resolver,
                header_accessor or request

        Returns:
            SignatureContext: New context
        """
        return cls(
            key_id=config.key_id,
            algorithm=config.algorithm,
            headers=config.headers,
            extensions=config.extensions,
            skew=config.skew,
            **kwargs
        )

    @classmethod
    def from_authorization(cls, authorization: AuthorizationHeader, **kwargs) -> 'SignatureContext':
        """
        Create a context from a decoded Authorization header.

        Args:
            authorization: Decoded header
            **kwargs: skew, clock, skew_validator, key, key_resolver,
                header_accessor or request

        Returns:
            SignatureContext: Context holding the received signature
        """
        return cls(
            key_id=authorization.key_id,
            algorithm=authorization.algorithm,
            headers=authorization.headers,
            extensions=authorization.extensions,
            signature=authorization.signature,
            **kwargs
        )

    @property
    def algorithm(self) -> SignatureAlgorithm:
        return self._algorithm

    @property
    def headers(self) -> List[str]:
        return list(self._headers)

    @headers.setter
    def headers(self, value: Sequence[str]) -> None:
        self._headers = normalize_header_list(value)
        self._signing_string = None
        self._signed_headers = None

    @property
    def skew(self) -> int:
        """Allowed clock skew in seconds; 0 means skew checks are disabled"""
        return self.skew_validator.tolerance_seconds

    @property
    def signing_string(self) -> Optional[str]:
        """Signing string from the most recent operation"""
        return self._signing_string

    @property
    def signed_headers(self) -> Optional[List[str]]:
        """Header names used by the most recent operation, with "all" expanded"""
        if self._signed_headers is None:
            return None
        return list(self._signed_headers)

    def _resolve_request(self, request: Any) -> Any:
        request = request if request is not None else self.request
        if request is None:
            raise MissingRequestError("No request is available to sign or verify")
        return request

    def _resolve_key(self, key: Optional[KeyMaterial]) -> KeyMaterial:
        if key is None:
            key = self.key
        if key is None and self.key_resolver is not None:
            key = self.key_resolver(self.key_id)
        if key is None:
            raise MissingKeyError(
                f"No key is available for key ID: {self.key_id}",
                details={"key_id": self.key_id}
            )
        return key

    def update_signing_string(self, request: Any = None) -> str:
        """
        Build the signing string for a request and remember it.

        Args:
            request: Request to read headers from (defaults to self.request)

        Returns:
            str: Signing string

        Raises:
            MissingRequestError: If no request is available
            MissingHeaderError: If a signed header is absent or empty
        """
        request = self._resolve_request(request)
        names, signing_string = self._build_signing_string(request)

        self._signed_headers = names
        self._signing_string = signing_string
        return signing_string

    def _build_signing_string(self, request: Any) -> Tuple[List[str], str]:
        names = expand_header_names(self._headers, request, self.header_accessor)
        return names, SigningStringBuilder(request, names, self.header_accessor).build()

    def check_skew(self, request: Any = None, now: Optional[float] = None) -> float:
        """
        Check the request's Date header against the allowed clock skew.

        Args:
            request: Request to read the Date header from (defaults to self.request)
            now: Current Unix timestamp (defaults to the context's clock)

        Returns:
            float: Absolute difference in seconds (0.0 when skew checks are disabled)

        Raises:
            MissingRequestError: If no request is available
            DateUnparsableError: If the Date header is missing or unparsable
            SkewExceededError: If the Date header is outside the tolerance
        """
        request = self._resolve_request(request)
        date_value = self.header_accessor.get(request, "date")

        if now is None:
            return self.skew_validator.validate(date_value)

        from ..verification.skew import check_clock_skew
        return check_clock_skew(now, date_value, self.skew)

    def update_date_header(self, request: Any = None) -> Any:
        """
        Set the Date header to the current time.

        Returns:
            The request, as returned by the header accessor
        """
        request = self._resolve_request(request)
        return self.header_accessor.set(request, "date", format_http_date())

    def format_authorization(self) -> str:
        """
        Format the Authorization header for the current signature.

        Raises:
            MissingHeaderError: If there is no signature yet
        """
        if not self.signature:
            raise MissingHeaderError(
                "No signature available; sign the request first",
                details={"header": "authorization"}
            )

        return format_authorization_header(
            self.key_id,
            self._algorithm,
            self.signature,
            self._signed_headers or self._headers,
            self.extensions
        )

    def sign(self, request: Any = None, key: Optional[KeyMaterial] = None) -> Any:
        """
        Sign a request and set its Authorization header.

        A Date header with the current time is added first when the request
        has none.

        Args:
            request: Request to sign (defaults to self.request)
            key: Key material (defaults to self.key, then key_resolver)

        Returns:
            The signed request

        Raises:
            MissingRequestError: If no request is available
            MissingKeyError: If no key is available
            MissingHeaderError: If a signed header is absent or empty
            KeyTypeMismatchError: If an RSA public key is given for signing
            InvalidKeyError: If the key cannot be loaded
        """
        timer = PerformanceTimer()
        request = self._resolve_request(request)
        key = self._resolve_key(key)
        method = get_signature_method(self._algorithm)

        if not self.header_accessor.get(request, "date"):
            request = self.update_date_header(request)

        names, signing_string = self._build_signing_string(request)
        signature = method.sign(signing_string, key)
        authorization = format_authorization_header(
            self.key_id, self._algorithm, signature, names, self.extensions
        )

        request = self.header_accessor.set(request, "authorization", authorization)
        self._signed_headers = names
        self._signing_string = signing_string
        self.signature = signature

        logger.debug(
            f"Signed request with key ID {self.key_id} using {self._algorithm.value} "
            f"({timer.elapsed_ms():.2f}ms)"
        )
        return request

    def verify(self, request: Any = None, key: Optional[KeyMaterial] = None) -> bool:
        """
        Verify the context's signature against a request.

        The Date header is checked against the clock skew tolerance before
        the signature.

        Args:
            request: Request to verify (defaults to self.request)
            key: Key material (defaults to self.key, then key_resolver)

        Returns:
            bool: True if the signature matches, False otherwise

        Raises:
            MissingRequestError: If no request is available
            MissingKeyError: If no key is available
            MissingHeaderError: If there is no signature or a signed header
                is absent
            DateUnparsableError: If the Date header is missing or unparsable
            SkewExceededError: If the Date header is outside the tolerance
            KeyTypeMismatchError: If an RSA private key is given for verification
            InvalidKeyError: If the key cannot be loaded
        """
        request = self._resolve_request(request)
        signature = self.signature

        if not signature:
            raise MissingHeaderError(
                "No signature available to verify",
                details={"header": "authorization"}
            )

        self.check_skew(request)

        key = self._resolve_key(key)
        method = get_signature_method(self._algorithm)

        names, signing_string = self._build_signing_string(request)
        valid = method.verify(signing_string, key, signature)

        self._signed_headers = names
        self._signing_string = signing_string

        if valid:
            logger.debug(f"Verified signature for key ID {self.key_id} using {self._algorithm.value}")
        else:
            logger.warning(f"Signature verification failed for key ID {self.key_id}")

        return valid

    def __repr__(self) -> str:
        return (
            f"SignatureContext(key_id='{self.key_id}', algorithm='{self._algorithm.value}', "
            f"headers={self._headers})"
        )
