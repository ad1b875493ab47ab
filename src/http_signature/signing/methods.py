"""
Signature methods for HTTP signatures

This module implements the two algorithm families using the cryptography
package: RSA (PKCS#1 v1.5) and HMAC, each over SHA-1, SHA-256 or SHA-512.
A method is selected by family and hash width with get_signature_method().
"""

import base64
import binascii
from abc import ABC, abstractmethod
from typing import Any, Dict, Type, Union

from cryptography import x509
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, hmac, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from ..exceptions import InvalidKeyError, KeyTypeMismatchError
from .types import AlgorithmFamily, HashAlgorithm, SignatureAlgorithm
from .utils import pad_base64

HASH_ALGORITHMS: Dict[HashAlgorithm, Type[hashes.HashAlgorithm]] = {
    HashAlgorithm.SHA1: hashes.SHA1,
    HashAlgorithm.SHA256: hashes.SHA256,
    HashAlgorithm.SHA512: hashes.SHA512,
}

_PRIVATE_PEM_MARKER = b"PRIVATE KEY-----"
_PUBLIC_PEM_MARKER = b"PUBLIC KEY-----"
_CERTIFICATE_PEM_MARKER = b"BEGIN CERTIFICATE-----"


def _key_bytes(key: Any) -> bytes:
    if isinstance(key, str):
        return key.encode("utf-8")
    if isinstance(key, (bytes, bytearray)):
        return bytes(key)
    raise InvalidKeyError(
        f"Unsupported key material type: {type(key).__name__}",
        details={"key_type": type(key).__name__}
    )


def _decode_signature(signature: str) -> bytes:
    """Decode a Base64 signature, tolerating missing or excess padding."""
    normalized = pad_base64(signature.strip().rstrip("="))
    return base64.b64decode(normalized, validate=True)


def load_rsa_private_key(key: Any) -> rsa.RSAPrivateKey:
    """
    Load an RSA private key for signing.

    Args:
        key: PEM text/bytes or an RSAPrivateKey

    Returns:
        RSAPrivateKey: Loaded key

    Raises:
        KeyTypeMismatchError: If a public key (or a non-RSA key) is supplied
        InvalidKeyError: If the PEM data cannot be loaded
    """
    if isinstance(key, rsa.RSAPrivateKey):
        return key

    if isinstance(key, rsa.RSAPublicKey):
        raise KeyTypeMismatchError("Signing requires a private key but a public key was supplied")

    pem = _key_bytes(key)
    if _PUBLIC_PEM_MARKER in pem or _CERTIFICATE_PEM_MARKER in pem:
        raise KeyTypeMismatchError("Signing requires a private key but a public key was supplied")

    try:
        loaded = serialization.load_pem_private_key(pem, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise InvalidKeyError(f"Failed to load RSA private key: {e}") from e

    if not isinstance(loaded, rsa.RSAPrivateKey):
        raise KeyTypeMismatchError(
            f"Expected an RSA private key, got {type(loaded).__name__}",
            details={"key_type": type(loaded).__name__}
        )

    return loaded


def load_rsa_public_key(key: Any) -> rsa.RSAPublicKey:
    """
    Load an RSA public key for verification.

    Args:
        key: PEM text/bytes (SubjectPublicKeyInfo, PKCS#1 or an X.509
             certificate) or an RSAPublicKey

    Returns:
        RSAPublicKey: Loaded key

    Raises:
        KeyTypeMismatchError: If a private key (or a non-RSA key) is supplied
        InvalidKeyError: If the PEM data cannot be loaded
    """
    if isinstance(key, rsa.RSAPublicKey):
        return key

    if isinstance(key, rsa.RSAPrivateKey):
        raise KeyTypeMismatchError("Verification requires a public key but a private key was supplied")

    pem = _key_bytes(key)
    if _PRIVATE_PEM_MARKER in pem:
        raise KeyTypeMismatchError("Verification requires a public key but a private key was supplied")

    try:
        if _CERTIFICATE_PEM_MARKER in pem:
            loaded = x509.load_pem_x509_certificate(pem).public_key()
        else:
            loaded = serialization.load_pem_public_key(pem)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise InvalidKeyError(f"Failed to load RSA public key: {e}") from e

    if not isinstance(loaded, rsa.RSAPublicKey):
        raise KeyTypeMismatchError(
            f"Expected an RSA public key, got {type(loaded).__name__}",
            details={"key_type": type(loaded).__name__}
        )

    return loaded


class SignatureMethod(ABC):
    """
    Base class for a signature algorithm family.

    Subclasses sign the signing string into a Base64 signature and verify a
    candidate signature against it.
    """

    family: AlgorithmFamily

    def __init__(self, algorithm: SignatureAlgorithm):
        self.algorithm = algorithm
        self.hash_algorithm = HASH_ALGORITHMS[algorithm.hash_algorithm]

    @abstractmethod
    def sign(self, data: str, key: Any) -> str:
        """Return the Base64 signature of `data`"""

    @abstractmethod
    def verify(self, data: str, key: Any, signature: str) -> bool:
        """Return True if `signature` is valid for `data`"""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(algorithm='{self.algorithm.value}')"


class RSASignatureMethod(SignatureMethod):
    """RSA-SHA{1,256,512} with PKCS#1 v1.5 padding"""

    family = AlgorithmFamily.RSA

    def sign(self, data: str, key: Any) -> str:
        private_key = load_rsa_private_key(key)
        signature = private_key.sign(
            data.encode("utf-8"),
            padding.PKCS1v15(),
            self.hash_algorithm()
        )
        return base64.b64encode(signature).decode("ascii")

    def verify(self, data: str, key: Any, signature: str) -> bool:
        public_key = load_rsa_public_key(key)

        try:
            signature_bytes = _decode_signature(signature)
        except (binascii.Error, ValueError):
            return False

        try:
            public_key.verify(
                signature_bytes,
                data.encode("utf-8"),
                padding.PKCS1v15(),
                self.hash_algorithm()
            )
        except InvalidSignature:
            return False

        return True


class HMACSignatureMethod(SignatureMethod):
    """HMAC-SHA{1,256,512} with a shared secret"""

    family = AlgorithmFamily.HMAC

    def _secret(self, key: Any) -> bytes:
        if isinstance(key, (rsa.RSAPrivateKey, rsa.RSAPublicKey)):
            raise KeyTypeMismatchError(
                f"{self.algorithm.value} requires a shared secret, not an RSA key"
            )
        return _key_bytes(key)

    def _digest(self, data: str, secret: bytes) -> hmac.HMAC:
        h = hmac.HMAC(secret, self.hash_algorithm())
        h.update(data.encode("utf-8"))
        return h

    def sign(self, data: str, key: Any) -> str:
        digest = self._digest(data, self._secret(key)).finalize()
        return pad_base64(base64.b64encode(digest).decode("ascii"))

    def verify(self, data: str, key: Any, signature: str) -> bool:
        h = self._digest(data, self._secret(key))

        try:
            candidate = _decode_signature(signature)
        except (binascii.Error, ValueError):
            return False

        # HMAC.verify compares in constant time
        try:
            h.verify(candidate)
        except InvalidSignature:
            return False

        return True


SIGNATURE_METHODS: Dict[AlgorithmFamily, Type[SignatureMethod]] = {
    AlgorithmFamily.RSA: RSASignatureMethod,
    AlgorithmFamily.HMAC: HMACSignatureMethod,
}


def get_signature_method(algorithm: Union[str, SignatureAlgorithm]) -> SignatureMethod:
    """
    Get the signature method for an algorithm.

    Args:
        algorithm: Algorithm token or enum member

    Returns:
        SignatureMethod: Method bound to the algorithm's hash width

    Raises:
        UnsupportedAlgorithmError: If the algorithm is not supported
    """
    algorithm = SignatureAlgorithm.from_string(algorithm)
    return SIGNATURE_METHODS[algorithm.family](algorithm)
