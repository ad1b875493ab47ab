"""
Authorization header parsing for HTTP signatures

Parameters are parsed by name rather than by position, so headers from peers
that reorder parameters or put a space after the commas are accepted.
"""

import re
from typing import Dict, List, Sequence, Tuple

from ..exceptions import (
    DuplicateHeaderError,
    MalformedHeaderError,
    ValidationError,
)
from ..signing.authorization import AuthorizationHeader
from ..signing.types import (
    AUTHORIZATION_SCHEME,
    DEFAULT_HEADERS,
    SignatureAlgorithm,
)
from ..signing.utils import normalize_header_list

_PARAMETER_PATTERN = re.compile(r'^([A-Za-z][A-Za-z0-9_-]*)="([^"]*)"$')


def split_parameters(text: str) -> Tuple[List[str], str]:
    """
    Split the text after the scheme into parameter fields and the signature.

    Commas inside quoted values do not separate fields. Spaces between fields
    are skipped; the first unquoted space after a field ends the list.

    Args:
        text: Header value with the scheme removed

    Returns:
        tuple: (list of 'name="value"' fields, remaining text)

    Raises:
        MalformedHeaderError: If a quoted value is not terminated
    """
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False

    for index, char in enumerate(text):
        if char == '"':
            in_quotes = not in_quotes
            current.append(char)
        elif in_quotes:
            current.append(char)
        elif char == ",":
            fields.append("".join(current))
            current = []
        elif char == " ":
            if not current:
                continue
            fields.append("".join(current))
            return fields, text[index + 1:]
        else:
            current.append(char)

    if in_quotes:
        raise MalformedHeaderError("Unterminated quoted string in Authorization header")

    if current:
        fields.append("".join(current))
    return fields, ""


def parse_parameters(fields: Sequence[str]) -> Dict[str, str]:
    """
    Parse name="value" fields into a dict.

    Raises:
        MalformedHeaderError: If a field is malformed or a name repeats
    """
    params: Dict[str, str] = {}

    for raw in fields:
        match = _PARAMETER_PATTERN.match(raw.strip())
        if not match:
            raise MalformedHeaderError(
                f"Invalid Authorization header parameter: {raw!r}",
                details={"parameter": raw}
            )

        name, value = match.groups()
        if name in params:
            raise MalformedHeaderError(
                f"Parameter '{name}' appears more than once",
                details={"parameter": name}
            )
        params[name] = value

    return params


def parse_authorization_header(value: str) -> AuthorizationHeader:
    """
    Parse a Signature Authorization header value.

    Args:
        value: Header value

    Returns:
        AuthorizationHeader: Decoded parameters and signature; headers default
            to ["date"] when the headers parameter is absent

    Raises:
        MalformedHeaderError: If the scheme, parameters or signature are invalid
        UnsupportedAlgorithmError: If the algorithm is not supported
        DuplicateHeaderError: If the headers parameter repeats a name
    """
    if not value or not isinstance(value, str):
        raise MalformedHeaderError("Authorization header is empty")

    scheme, _, rest = value.strip().partition(" ")
    if scheme != AUTHORIZATION_SCHEME:
        raise MalformedHeaderError(
            f"{scheme!r} does not match required string '{AUTHORIZATION_SCHEME}'",
            details={"scheme": scheme}
        )

    fields, signature = split_parameters(rest)
    params = parse_parameters(fields)
    signature = signature.strip()

    for required in ("keyId", "algorithm"):
        if not params.get(required):
            raise MalformedHeaderError(
                f"Authorization header is missing the {required} parameter",
                details={"parameter": required}
            )

    if not signature or " " in signature:
        raise MalformedHeaderError("Authorization header has no valid signature value")

    algorithm = SignatureAlgorithm.from_string(params["algorithm"])

    header_names = params.get("headers", "").split()
    if not header_names:
        header_names = list(DEFAULT_HEADERS)

    try:
        headers = normalize_header_list(header_names)
    except DuplicateHeaderError:
        raise
    except ValidationError as e:
        raise MalformedHeaderError(
            f"Invalid headers parameter: {e.message}",
            details=e.details
        ) from e

    return AuthorizationHeader(
        key_id=params["keyId"],
        algorithm=algorithm,
        signature=signature,
        headers=headers,
        extensions=params.get("ext") or None
    )
