"""
Header accessor capability

The signing engine never touches a request object directly. It reads and writes
headers through a HeaderAccessor, which also resolves the synthetic
"request-line" pseudo-header and enumerates header names for the "all" token.
"""

from typing import Any, List, Optional, Protocol, runtime_checkable

from .types import SignableRequest, REQUEST_LINE
from .utils import normalize_header_name


@runtime_checkable
class HeaderAccessor(Protocol):
    """Protocol for reading and writing request headers"""

    def get(self, request: Any, name: str) -> Optional[str]:
        """Return the value of header `name`, or None if absent"""
        ...

    def set(self, request: Any, name: str, value: str) -> Any:
        """Set header `name` to `value` and return the request"""
        ...

    def names(self, request: Any) -> List[str]:
        """Return the names of all headers present on the request"""
        ...


def format_request_line(method: str, target: str, protocol: str, include_method: bool = True) -> str:
    """
    Build the value of the request-line pseudo-header.

    Args:
        method: HTTP method
        target: Path and query ("/foo?param=value")
        protocol: Protocol version ("HTTP/1.1")
        include_method: False selects the legacy "<target> <protocol>" form

    Returns:
        str: Request line text
    """
    if include_method:
        return f"{method.upper()} {target} {protocol}"
    return f"{target} {protocol}"


class SignableRequestAccessor:
    """
    HeaderAccessor for SignableRequest objects.

    Args:
        include_method: Put the method in front of the request line. Early
            revisions of the signature draft (and their published test
            vectors) sign "<path?query> <protocol>" only; pass False to
            interoperate with them.
    """

    def __init__(self, include_method: bool = True):
        self.include_method = include_method

    def get(self, request: SignableRequest, name: str) -> Optional[str]:
        name = normalize_header_name(name)

        if name == REQUEST_LINE:
            return format_request_line(
                request.method, request.target, request.protocol, self.include_method
            )

        value = request.headers.get(name)
        if value is None and name == "host":
            # Clients send Host from the URL authority
            return request.host
        return value

    def set(self, request: SignableRequest, name: str, value: str) -> SignableRequest:
        request.headers[normalize_header_name(name)] = value
        return request

    def names(self, request: SignableRequest) -> List[str]:
        return list(request.headers.keys())


DEFAULT_ACCESSOR = SignableRequestAccessor()
