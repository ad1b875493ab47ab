"""
Signing string construction for HTTP signatures

The signing string is the newline-joined list of header values, in the order
given by the header list. It is the exact input to the signature algorithm, so
signer and verifier must build it identically.
"""

from typing import Any, List, Optional, Sequence

from ..exceptions import MissingHeaderError
from .accessors import HeaderAccessor, DEFAULT_ACCESSOR
from .types import ALL_HEADERS, REQUEST_LINE
from .utils import normalize_header_name


def expand_header_names(
    header_names: Sequence[str],
    request: Any,
    accessor: HeaderAccessor
) -> List[str]:
    """
    Resolve the "all" token against a request.

    When "all" appears anywhere in the list, the list is replaced by
    request-line followed by every header present on the request, sorted by
    name. The Authorization header is never included since it carries the
    signature itself. Lists without "all" are returned unchanged.

    The result depends on the request's current headers, so callers must
    expand again for every operation.

    Args:
        header_names: Configured header names
        request: Request to read header names from
        accessor: Header accessor for the request

    Returns:
        list: Header names to sign, in order
    """
    names = [normalize_header_name(name) for name in header_names]
    if ALL_HEADERS not in names:
        return names

    present = sorted({
        normalize_header_name(name)
        for name in accessor.names(request)
    } - {"authorization", REQUEST_LINE})

    return [REQUEST_LINE] + present


class SigningStringBuilder:
    """
    Signing string builder for a single sign or verify operation
    """

    def __init__(self, request: Any, header_names: Sequence[str], accessor: Optional[HeaderAccessor] = None):
        """
        Initialize signing string builder.

        Args:
            request: Request whose headers are signed
            header_names: Ordered header names (already expanded)
            accessor: Header accessor for the request
        """
        self.request = request
        self.header_names = list(header_names)
        self.accessor = accessor or DEFAULT_ACCESSOR

    def build(self) -> str:
        """
        Build the signing string.

        Returns:
            str: Header values joined by newlines

        Raises:
            MissingHeaderError: If any header is absent or empty
        """
        return "\n".join(self._header_value(name) for name in self.header_names)

    def _header_value(self, name: str) -> str:
        value = self.accessor.get(self.request, name)

        if value is None or str(value) == "":
            raise MissingHeaderError(
                f"Couldn't get header value for {name}",
                details={"header": name}
            )

        return str(value)


def build_signing_string(
    request: Any,
    header_names: Sequence[str],
    accessor: Optional[HeaderAccessor] = None
) -> str:
    """
    Build the signing string for a request.

    Args:
        request: Request whose headers are signed
        header_names: Ordered header names; "all" is expanded first
        accessor: Header accessor for the request

    Returns:
        str: Signing string

    Raises:
        MissingHeaderError: If a named header is absent or empty
    """
    accessor = accessor or DEFAULT_ACCESSOR
    names = expand_header_names(header_names, request, accessor)
    return SigningStringBuilder(request, names, accessor).build()
