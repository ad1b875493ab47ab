"""
Type definitions for HTTP Signature functionality

This module provides the algorithm enumerations and the request data class
used by the signing string builder, the signature methods and the
Authorization header codec.
"""

from typing import Dict, List, Optional, Union, Callable, Any
from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import urlsplit

from ..exceptions import UnsupportedAlgorithmError


# Pseudo-header names
REQUEST_LINE = "request-line"
ALL_HEADERS = "all"

DEFAULT_HEADERS = ["date"]
DEFAULT_PROTOCOL = "HTTP/1.1"
AUTHORIZATION_SCHEME = "Signature"
DEFAULT_SKEW_SECONDS = 300


class AlgorithmFamily(str, Enum):
    """Signature algorithm families"""
    RSA = "rsa"
    HMAC = "hmac"


class HashAlgorithm(str, Enum):
    """Digest widths used by the signature algorithms"""
    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA512 = "sha512"


class SignatureAlgorithm(str, Enum):
    """Supported signature algorithms"""
    RSA_SHA1 = "rsa-sha1"
    RSA_SHA256 = "rsa-sha256"
    RSA_SHA512 = "rsa-sha512"
    HMAC_SHA1 = "hmac-sha1"
    HMAC_SHA256 = "hmac-sha256"
    HMAC_SHA512 = "hmac-sha512"

    @property
    def family(self) -> AlgorithmFamily:
        return AlgorithmFamily(self.value.split("-", 1)[0])

    @property
    def hash_algorithm(self) -> HashAlgorithm:
        return HashAlgorithm(self.value.split("-", 1)[1])

    @classmethod
    def from_string(cls, value: Union[str, "SignatureAlgorithm"]) -> "SignatureAlgorithm":
        """
        Resolve an algorithm token case-insensitively.

        Args:
            value: Algorithm token such as "RSA-SHA256"

        Returns:
            SignatureAlgorithm: Matching algorithm

        Raises:
            UnsupportedAlgorithmError: If the token is not supported
        """
        if isinstance(value, cls):
            return value

        if isinstance(value, str):
            normalized = value.strip().lower()
            for algorithm in cls:
                if algorithm.value == normalized:
                    return algorithm

        raise UnsupportedAlgorithmError(
            f"{value!r} doesn't match any supported algorithm",
            details={"algorithm": str(value), "supported": [a.value for a in cls]}
        )


@dataclass
class SignableRequest:
    """
    Request that can be signed or verified

    Attributes:
        method: HTTP method (GET, POST, etc.)
        url: Absolute URL or origin-form target ("/foo?bar=baz")
        headers: Request headers; names are stored lowercase
        body: Optional request body (string or bytes)
        protocol: HTTP protocol version used in the request line
    """
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[Union[str, bytes]] = None
    protocol: str = DEFAULT_PROTOCOL

    def __post_init__(self):
        """Validate request after initialization"""
        if not self.url:
            raise ValueError("Request URL cannot be empty")

        if not self.method:
            raise ValueError("Request method cannot be empty")

        if not isinstance(self.headers, dict):
            raise ValueError("Headers must be a dictionary")

        self.method = str(self.method).upper()
        self.headers = {k.lower(): v for k, v in self.headers.items()}

    @property
    def target(self) -> str:
        """Path and query of the request ("/foo?param=value")"""
        parts = urlsplit(self.url)
        path = parts.path or "/"
        return f"{path}?{parts.query}" if parts.query else path

    @property
    def host(self) -> Optional[str]:
        """Host taken from the URL, if the URL is absolute"""
        return urlsplit(self.url).netloc or None

    def add_content_md5(self) -> "SignableRequest":
        """Add a Content-MD5 header computed from the body."""
        from .utils import calculate_content_md5

        self.headers["content-md5"] = calculate_content_md5(self.body)
        return self

    @classmethod
    def from_raw(cls, raw: Union[str, bytes]) -> "SignableRequest":
        """
        Parse a raw HTTP/1.x request message.

        Args:
            raw: Request text, e.g. "GET /foo HTTP/1.1\\r\\nHost: example.com\\r\\n\\r\\n"

        Returns:
            SignableRequest: Parsed request

        Raises:
            ValueError: If the message has no valid request line
        """
        if isinstance(raw, bytes):
            raw = raw.decode("latin-1")

        text = raw.replace("\r\n", "\n")
        head, _, body = text.partition("\n\n")
        lines = head.split("\n")

        request_line = lines[0].split()
        if len(request_line) != 3:
            raise ValueError(f"Invalid request line: {lines[0]!r}")
        method, target, protocol = request_line

        headers: Dict[str, str] = {}
        for line in lines[1:]:
            if not line.strip():
                continue
            name, sep, value = line.partition(":")
            if not sep or not name.strip():
                raise ValueError(f"Invalid header line: {line!r}")
            name = name.strip().lower()
            value = value.strip()
            # Repeated headers are combined as a comma-separated list
            headers[name] = f"{headers[name]}, {value}" if name in headers else value

        return cls(
            method=method,
            url=target,
            headers=headers,
            body=body or None,
            protocol=protocol
        )


# Type aliases for convenience
HeaderDict = Dict[str, str]
RequestBody = Union[str, bytes, None]
KeyMaterial = Any
KeyResolver = Callable[[str], KeyMaterial]
Clock = Callable[[], float]
HeaderList = List[str]
