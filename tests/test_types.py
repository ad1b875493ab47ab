"""
Test suite for request types, utilities and exceptions
"""

import pytest

from http_signature.exceptions import (
    DuplicateHeaderError,
    ErrorCodes,
    HttpSignatureError,
    MissingKeyError,
    SkewExceededError,
    UnsupportedAlgorithmError,
    ValidationError,
)
from http_signature.signing import (
    AlgorithmFamily,
    HashAlgorithm,
    SignableRequest,
    SignatureAlgorithm,
    calculate_content_md5,
    format_http_date,
    normalize_header_list,
    pad_base64,
    parse_http_date,
)

from conftest import TEST_BODY, TEST_CONTENT_MD5, TEST_DATE, TEST_TIMESTAMP


class TestSignatureAlgorithm:
    """Test algorithm enumeration"""

    def test_family_and_hash(self):
        """Test algorithm decomposition"""
        assert SignatureAlgorithm.RSA_SHA512.family == AlgorithmFamily.RSA
        assert SignatureAlgorithm.RSA_SHA512.hash_algorithm == HashAlgorithm.SHA512
        assert SignatureAlgorithm.HMAC_SHA1.family == AlgorithmFamily.HMAC
        assert SignatureAlgorithm.HMAC_SHA1.hash_algorithm == HashAlgorithm.SHA1

    def test_from_string(self):
        """Test case-insensitive lookup"""
        assert SignatureAlgorithm.from_string("Rsa-Sha1") == SignatureAlgorithm.RSA_SHA1
        assert SignatureAlgorithm.from_string(SignatureAlgorithm.HMAC_SHA256) == SignatureAlgorithm.HMAC_SHA256

    def test_from_string_unsupported(self):
        """Test unsupported tokens"""
        for value in ("rsa-sha384", "hmac-md5", "", None):
            with pytest.raises(UnsupportedAlgorithmError):
                SignatureAlgorithm.from_string(value)

    def test_six_algorithms(self):
        """Test the supported set"""
        assert sorted(a.value for a in SignatureAlgorithm) == [
            "hmac-sha1", "hmac-sha256", "hmac-sha512", "rsa-sha1", "rsa-sha256", "rsa-sha512"
        ]


class TestSignableRequest:
    """Test the request data class"""

    def test_normalization(self):
        """Test method and header name normalization"""
        request = SignableRequest(method="post", url="/x", headers={"Content-Type": "text/plain"})

        assert request.method == "POST"
        assert request.headers == {"content-type": "text/plain"}

    def test_target_and_host(self):
        """Test target and host derived from the URL"""
        request = SignableRequest(method="GET", url="https://example.com:8080/a/b?c=d")

        assert request.target == "/a/b?c=d"
        assert request.host == "example.com:8080"

        relative = SignableRequest(method="GET", url="/a")
        assert relative.host is None

    def test_validation(self):
        """Test rejected values"""
        with pytest.raises(ValueError):
            SignableRequest(method="GET", url="")

        with pytest.raises(ValueError):
            SignableRequest(method="", url="/")

        with pytest.raises(ValueError):
            SignableRequest(method="GET", url="/", headers=[("a", "b")])

    def test_add_content_md5(self):
        """Test Content-MD5 from the body"""
        request = SignableRequest(method="POST", url="/", body=TEST_BODY).add_content_md5()
        assert request.headers["content-md5"] == TEST_CONTENT_MD5

    def test_from_raw(self):
        """Test parsing a raw HTTP request"""
        request = SignableRequest.from_raw(
            "PUT /items/7?x=1 HTTP/1.0\r\n"
            "Host: example.com\r\n"
            "Accept: text/plain\r\n"
            "accept: application/json\r\n"
            "\r\n"
            "body text"
        )

        assert request.method == "PUT"
        assert request.target == "/items/7?x=1"
        assert request.protocol == "HTTP/1.0"
        assert request.headers["host"] == "example.com"
        assert request.headers["accept"] == "text/plain, application/json"
        assert request.body == "body text"

    def test_from_raw_bytes_without_body(self):
        """Test raw bytes with LF line endings and no body"""
        request = SignableRequest.from_raw(b"GET / HTTP/1.1\nDate: " + TEST_DATE.encode() + b"\n\n")

        assert request.headers == {"date": TEST_DATE}
        assert request.body is None

    def test_from_raw_invalid(self):
        """Test malformed raw requests"""
        with pytest.raises(ValueError):
            SignableRequest.from_raw("GET /\r\n\r\n")

        with pytest.raises(ValueError):
            SignableRequest.from_raw("GET / HTTP/1.1\r\nNoColonHere\r\n\r\n")


class TestUtilities:
    """Test utility functions"""

    def test_pad_base64(self):
        """Test Base64 padding"""
        assert pad_base64("abcd") == "abcd"
        assert pad_base64("abc") == "abc="
        assert pad_base64("ab") == "ab=="
        assert pad_base64("") == ""

    def test_http_date(self):
        """Test RFC 1123 formatting and parsing"""
        assert format_http_date(TEST_TIMESTAMP) == TEST_DATE
        assert parse_http_date(TEST_DATE) == TEST_TIMESTAMP
        assert format_http_date().endswith(" GMT")

    def test_parse_http_date_invalid(self):
        """Test unparsable dates"""
        assert parse_http_date("") is None
        assert parse_http_date(None) is None
        assert parse_http_date("not a date") is None

    def test_calculate_content_md5(self):
        """Test Content-MD5 values"""
        assert calculate_content_md5(TEST_BODY) == TEST_CONTENT_MD5
        assert calculate_content_md5(TEST_BODY.encode("utf-8")) == TEST_CONTENT_MD5
        assert calculate_content_md5(None) == "1B2M2Y8AsgTpgAmY7PhCfg=="

    def test_normalize_header_list(self):
        """Test header list validation"""
        assert normalize_header_list(["Date", "Request-Line"]) == ["date", "request-line"]

        with pytest.raises(DuplicateHeaderError):
            normalize_header_list(["date", "Date"])

        with pytest.raises(ValidationError):
            normalize_header_list([])

        with pytest.raises(ValidationError):
            normalize_header_list(["bad header"])


class TestExceptions:
    """Test the error taxonomy"""

    def test_error_codes(self):
        """Test default codes and details"""
        error = MissingKeyError("no key", details={"key_id": "k"})

        assert isinstance(error, HttpSignatureError)
        assert error.error_code == ErrorCodes.MISSING_KEY
        assert str(error) == "no key (code: MISSING_KEY, details: {'key_id': 'k'})"

    def test_skew_error(self):
        """Test skew error attributes and message"""
        error = SkewExceededError(301.0, 300)

        assert error.error_code == ErrorCodes.SKEW_EXCEEDED
        assert error.details["diff_seconds"] == 301.0
        assert "301 seconds computed, 300 seconds allowed" in error.message
