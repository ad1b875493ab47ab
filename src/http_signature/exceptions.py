"""
Exception classes for the HTTP Signature package
"""

from typing import Optional, Dict, Any


class ErrorCodes:
    """Standard error codes for signing, parsing and verification"""

    # Configuration errors
    INVALID_CONFIG = "INVALID_CONFIG"
    UNSUPPORTED_ALGORITHM = "UNSUPPORTED_ALGORITHM"
    DUPLICATE_HEADER = "DUPLICATE_HEADER"

    # Request errors
    MISSING_REQUEST = "MISSING_REQUEST"
    MISSING_HEADER = "MISSING_HEADER"

    # Key errors
    MISSING_KEY = "MISSING_KEY"
    INVALID_KEY = "INVALID_KEY"
    KEY_TYPE_MISMATCH = "KEY_TYPE_MISMATCH"

    # Authorization header errors
    MALFORMED_HEADER = "MALFORMED_HEADER"

    # Date errors
    DATE_UNPARSABLE = "DATE_UNPARSABLE"
    SKEW_EXCEEDED = "SKEW_EXCEEDED"


class HttpSignatureError(Exception):
    """Base exception for all HTTP Signature errors"""

    default_code = "UNKNOWN_ERROR"

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (code: {self.error_code}, details: {self.details})"
        return f"{self.message} (code: {self.error_code})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message='{self.message}', code='{self.error_code}', details={self.details})"


class ValidationError(HttpSignatureError):
    """Exception raised for invalid configuration values"""
    default_code = ErrorCodes.INVALID_CONFIG


class UnsupportedAlgorithmError(HttpSignatureError):
    """Exception raised when an algorithm token is not one of the supported six"""
    default_code = ErrorCodes.UNSUPPORTED_ALGORITHM


class MalformedHeaderError(HttpSignatureError):
    """Exception raised when an Authorization header cannot be parsed or formatted"""
    default_code = ErrorCodes.MALFORMED_HEADER


class DuplicateHeaderError(HttpSignatureError):
    """Exception raised when a header name appears twice in a header list"""
    default_code = ErrorCodes.DUPLICATE_HEADER


class MissingHeaderError(HttpSignatureError):
    """Exception raised when a header needed for the signing string is absent"""
    default_code = ErrorCodes.MISSING_HEADER


class KeyTypeMismatchError(HttpSignatureError):
    """Exception raised when a private key is given where a public key is required, or vice versa"""
    default_code = ErrorCodes.KEY_TYPE_MISMATCH


class InvalidKeyError(HttpSignatureError):
    """Exception raised when key material cannot be loaded"""
    default_code = ErrorCodes.INVALID_KEY


class MissingKeyError(HttpSignatureError):
    """Exception raised when no key material is available for an operation"""
    default_code = ErrorCodes.MISSING_KEY


class MissingRequestError(HttpSignatureError):
    """Exception raised when no request is available for an operation"""
    default_code = ErrorCodes.MISSING_REQUEST


class DateUnparsableError(HttpSignatureError):
    """Exception raised when the Date header is missing or cannot be parsed"""
    default_code = ErrorCodes.DATE_UNPARSABLE


class SkewExceededError(HttpSignatureError):
    """Exception raised when the Date header is outside the clock skew tolerance"""

    default_code = ErrorCodes.SKEW_EXCEEDED

    def __init__(self, diff_seconds: float, tolerance_seconds: int, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            f"Request is outside of clock skew tolerance: {diff_seconds:.0f} seconds computed, "
            f"{tolerance_seconds} seconds allowed",
            ErrorCodes.SKEW_EXCEEDED,
            {"diff_seconds": diff_seconds, "tolerance_seconds": tolerance_seconds, **(details or {})}
        )
        self.diff_seconds = diff_seconds
        self.tolerance_seconds = tolerance_seconds
