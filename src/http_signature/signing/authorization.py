"""
Authorization header construction for HTTP signatures

Formats headers of the form:

    Signature keyId="Test",algorithm="rsa-sha256",headers="request-line host date",ext="x" <base64>

Parameters are always written in the order keyId, algorithm, headers, ext.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from ..exceptions import MalformedHeaderError
from .types import AUTHORIZATION_SCHEME, DEFAULT_HEADERS, SignatureAlgorithm


def is_default_header_list(headers: Sequence[str]) -> bool:
    """True if `headers` is exactly the default ["date"] list."""
    return len(headers) == 1 and headers[0].lower() == DEFAULT_HEADERS[0]


def _check_quotable(name: str, value: str) -> None:
    if '"' in value:
        raise MalformedHeaderError(
            f"The {name} parameter cannot contain a double quote",
            details={"parameter": name}
        )


@dataclass
class AuthorizationHeader:
    """
    Decoded Signature Authorization header

    Attributes:
        key_id: Key identifier
        algorithm: Signature algorithm
        signature: Base64 signature
        headers: Signed header names in signing order
        extensions: Optional opaque extension data
    """
    key_id: str
    algorithm: SignatureAlgorithm
    signature: str
    headers: List[str] = field(default_factory=lambda: list(DEFAULT_HEADERS))
    extensions: Optional[str] = None

    def format(self) -> str:
        """Format the Authorization header value. See format_authorization_header()."""
        return format_authorization_header(
            self.key_id,
            self.algorithm,
            self.signature,
            self.headers,
            self.extensions
        )


def format_authorization_header(
    key_id: str,
    algorithm: Union[str, SignatureAlgorithm],
    signature: str,
    headers: Optional[Sequence[str]] = None,
    extensions: Optional[str] = None
) -> str:
    """
    Format a Signature Authorization header value.

    The headers parameter is omitted for the default ["date"] list and ext is
    omitted when there are no extensions.

    Args:
        key_id: Key identifier
        algorithm: Signature algorithm
        signature: Base64 signature
        headers: Signed header names (defaults to ["date"])
        extensions: Optional extension data

    Returns:
        str: Authorization header value

    Raises:
        MalformedHeaderError: If the key ID or signature is empty, or a value
            contains a double quote
        UnsupportedAlgorithmError: If the algorithm is not supported
    """
    algorithm = SignatureAlgorithm.from_string(algorithm)
    headers = list(headers) if headers else list(DEFAULT_HEADERS)

    if not key_id:
        raise MalformedHeaderError("Key ID is required in the Authorization header")
    if not signature:
        raise MalformedHeaderError("Signature is required in the Authorization header")

    _check_quotable("keyId", key_id)

    value = f'{AUTHORIZATION_SCHEME} keyId="{key_id}",algorithm="{algorithm.value}"'

    if not is_default_header_list(headers):
        value += ',headers="' + " ".join(h.lower() for h in headers) + '"'

    if extensions:
        _check_quotable("ext", extensions)
        value += f',ext="{extensions}"'

    return f"{value} {signature}"
