"""
Configuration management for HTTP signatures

This module provides the signature configuration data class, named header
profiles, a fluent configuration builder and loading from dicts or JSON.
"""

import json
from typing import Any, Dict, List, Optional, Union
from dataclasses import dataclass, field

from ..exceptions import ValidationError
from .types import (
    ALL_HEADERS,
    DEFAULT_HEADERS,
    DEFAULT_SKEW_SECONDS,
    REQUEST_LINE,
    SignatureAlgorithm,
)
from .utils import normalize_header_list, validate_skew_tolerance


DEFAULT_ALGORITHM = SignatureAlgorithm.RSA_SHA256

# Named header lists for common use cases
HEADER_PROFILES: Dict[str, List[str]] = {
    'default': list(DEFAULT_HEADERS),
    'request': [REQUEST_LINE, 'host', 'date'],
    'full': [REQUEST_LINE, 'host', 'date', 'content-type', 'content-md5', 'content-length'],
    'all': [ALL_HEADERS],
}

# Accepted keys for from_dict(), mapped to field names
_CONFIG_KEYS = {
    'algorithm': 'algorithm',
    'key_id': 'key_id',
    'keyId': 'key_id',
    'headers': 'headers',
    'extensions': 'extensions',
    'ext': 'extensions',
    'skew': 'skew',
}


@dataclass
class SignatureConfig:
    """
    Configuration for signing and verifying requests

    Attributes:
        key_id: Key identifier sent in the Authorization header
        algorithm: Signature algorithm
        headers: Ordered header names to sign
        extensions: Optional opaque extension data
        skew: Allowed clock skew in seconds (0 disables the check)
    """
    key_id: str
    algorithm: Union[str, SignatureAlgorithm] = DEFAULT_ALGORITHM
    headers: List[str] = field(default_factory=lambda: list(DEFAULT_HEADERS))
    extensions: Optional[str] = None
    skew: int = DEFAULT_SKEW_SECONDS

    def __post_init__(self):
        """Validate configuration after initialization"""
        if not self.key_id or not isinstance(self.key_id, str):
            raise ValidationError("Key ID must be a non-empty string", details={"key_id": self.key_id})

        self.algorithm = SignatureAlgorithm.from_string(self.algorithm)
        self.headers = normalize_header_list(self.headers)
        self.skew = validate_skew_tolerance(self.skew)

        if self.extensions is not None and not isinstance(self.extensions, str):
            raise ValidationError("Extensions must be a string", details={"extensions": self.extensions})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SignatureConfig':
        """
        Create a configuration from a dict.

        Both snake_case keys and the wire names (keyId, ext) are accepted.
        Headers may be a list or a space-separated string.

        Args:
            data: Configuration values

        Returns:
            SignatureConfig: Validated configuration

        Raises:
            ValidationError: If a key is unknown or a value is invalid
        """
        if not isinstance(data, dict):
            raise ValidationError("Configuration must be a dict")

        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in _CONFIG_KEYS:
                raise ValidationError(
                    f"Unknown configuration key: {key}",
                    details={"allowed_keys": sorted(_CONFIG_KEYS)}
                )
            values[_CONFIG_KEYS[key]] = value

        if isinstance(values.get('headers'), str):
            values['headers'] = values['headers'].split()

        if 'key_id' not in values:
            raise ValidationError("Key ID is required")

        return cls(**values)

    @classmethod
    def from_json(cls, json_string: str) -> 'SignatureConfig':
        """Create a configuration from a JSON object string. See from_dict()."""
        try:
            data = json.loads(json_string)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON configuration: {e}") from e

        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a JSON-serializable dict"""
        return {
            'key_id': self.key_id,
            'algorithm': self.algorithm.value,
            'headers': list(self.headers),
            'extensions': self.extensions,
            'skew': self.skew,
        }


class SignatureConfigBuilder:
    """
    Builder for creating signature configurations with fluent API
    """

    def __init__(self):
        self._algorithm: Union[str, SignatureAlgorithm] = DEFAULT_ALGORITHM
        self._key_id: Optional[str] = None
        self._headers: List[str] = list(DEFAULT_HEADERS)
        self._extensions: Optional[str] = None
        self._skew: int = DEFAULT_SKEW_SECONDS

    def algorithm(self, algorithm: Union[str, SignatureAlgorithm]) -> 'SignatureConfigBuilder':
        """
        Set signature algorithm.

        Args:
            algorithm: Algorithm token or enum member

        Returns:
            SignatureConfigBuilder: Self for method chaining
        """
        self._algorithm = algorithm
        return self

    def key_id(self, key_id: str) -> 'SignatureConfigBuilder':
        """
        Set key identifier.

        Args:
            key_id: Key identifier for the signature

        Returns:
            SignatureConfigBuilder: Self for method chaining
        """
        self._key_id = key_id
        return self

    def headers(self, headers: List[str]) -> 'SignatureConfigBuilder':
        """
        Set headers to include in signature.

        Args:
            headers: Ordered header names

        Returns:
            SignatureConfigBuilder: Self for method chaining
        """
        self._headers = [h.lower() for h in headers]
        return self

    def add_header(self, header: str) -> 'SignatureConfigBuilder':
        """
        Append a header to the signed list if it is not already there.

        Args:
            header: Header name to add

        Returns:
            SignatureConfigBuilder: Self for method chaining
        """
        header_lower = header.lower()
        if header_lower not in self._headers:
            self._headers.append(header_lower)
        return self

    def extensions(self, extensions: Optional[str]) -> 'SignatureConfigBuilder':
        self._extensions = extensions
        return self

    def skew(self, seconds: int) -> 'SignatureConfigBuilder':
        """
        Set allowed clock skew.

        Args:
            seconds: Tolerance in seconds; 0 disables the check (tests only)

        Returns:
            SignatureConfigBuilder: Self for method chaining
        """
        self._skew = seconds
        return self

    def profile(self, profile_name: str) -> 'SignatureConfigBuilder':
        """
        Apply a named header profile.

        Args:
            profile_name: Name of header profile ('default', 'request', 'full', 'all')

        Returns:
            SignatureConfigBuilder: Self for method chaining

        Raises:
            ValidationError: If profile name is invalid
        """
        self._headers = list(get_header_profile(profile_name))
        return self

    def build(self) -> SignatureConfig:
        """
        Build the signature configuration.

        Returns:
            SignatureConfig: Complete signature configuration

        Raises:
            ValidationError: If configuration is invalid
            UnsupportedAlgorithmError: If the algorithm is not supported
            DuplicateHeaderError: If a header appears twice
        """
        if self._key_id is None:
            raise ValidationError("Key ID is required")

        return SignatureConfig(
            key_id=self._key_id,
            algorithm=self._algorithm,
            headers=list(self._headers),
            extensions=self._extensions,
            skew=self._skew
        )


def create_signature_config() -> SignatureConfigBuilder:
    """
    Create a new signature configuration builder.

    Returns:
        SignatureConfigBuilder: New configuration builder
    """
    return SignatureConfigBuilder()


def create_from_profile(
    profile_name: str,
    key_id: str,
    algorithm: Union[str, SignatureAlgorithm] = DEFAULT_ALGORITHM
) -> SignatureConfig:
    """
    Create signature configuration from a header profile.

    Args:
        profile_name: Header profile name
        key_id: Key identifier
        algorithm: Signature algorithm

    Returns:
        SignatureConfig: Complete signature configuration

    Raises:
        ValidationError: If profile or parameters are invalid
    """
    return (create_signature_config()
            .profile(profile_name)
            .key_id(key_id)
            .algorithm(algorithm)
            .build())


def get_header_profile(name: str) -> List[str]:
    """
    Get header list by profile name.

    Raises:
        ValidationError: If profile name is invalid
    """
    if name not in HEADER_PROFILES:
        raise ValidationError(
            f"Unknown header profile: {name}",
            details={"available_profiles": list(HEADER_PROFILES.keys())}
        )

    return list(HEADER_PROFILES[name])


def list_header_profiles() -> List[str]:
    """
    List available header profile names.

    Returns:
        list: List of available profile names
    """
    return list(HEADER_PROFILES.keys())
