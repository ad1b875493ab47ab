"""
Test suite for parsing signed requests
"""

import logging

import pytest

from http_signature.exceptions import (
    DateUnparsableError,
    MalformedHeaderError,
    MissingHeaderError,
    SkewExceededError,
    UnsupportedAlgorithmError,
)
from http_signature.signing import (
    SignableRequest,
    SignableRequestAccessor,
    SignatureAlgorithm,
    SignatureContext,
)
from http_signature.verification import SignatureParser, parse_request

from conftest import HMAC_SECRET, PRIVATE_KEY_PEM, PUBLIC_KEY_PEM, TEST_TIMESTAMP


DEFAULT_AUTHORIZATION = (
    'Signature keyId="Test",algorithm="rsa-sha256" '
    "MDyO5tSvin5FBVdq3gMBTwtVgE8U/JpzSwFvY7gu7Q2tiZ5TvfHzf/RzmRoYwO8PoV1UGaw6IMwWzxDQkcoYOwvG/w4ljQBBoNus"
    "O/mYSvKrbqxUmZi8rNtrMcb82MS33bai5IeLnOGl31W1UbL4qE/wL8U9wCPGRJlCFLsTgD8="
)

FULL_AUTHORIZATION = (
    'Signature keyId="Test",algorithm="rsa-sha256",'
    'headers="request-line host date content-type content-md5 content-length" '
    "gVrKP7wVh1+FmWbNlhj0pNXIe9XmeOA6EcnoOKAvUILnwaMFzaKaam9UmeDPwjC9TdT+jSRqjtyZE49kZcSpYAHxGlPQ4ziXFRfP"
    "prlN/3Xwg3sUOGqbBiS3WFuY3QOOWv4tzc5p70g74U/QvHNNiYMcjoz89vRJhefbFSNwCDs="
)

RAW_REQUEST = (
    "POST /foo?param=value&pet=dog HTTP/1.1\r\n"
    "Host: example.com\r\n"
    "Date: Thu, 05 Jan 2012 21:31:40 GMT\r\n"
    "Content-Type: application/json\r\n"
    "Content-MD5: Sd/dVLAcvNLSq16eXua5uQ==\r\n"
    "Content-Length: 18\r\n"
    f"Authorization: {FULL_AUTHORIZATION}\r\n"
    "\r\n"
    '{"hello": "world"}'
)


class TestSignatureParser:
    """Test SignatureParser.parse()"""

    def setup_method(self):
        """Set up test fixtures"""
        self.clock = lambda: TEST_TIMESTAMP + 10
        self.parser = SignatureParser(clock=self.clock)

    def test_parse_default_vector(self, test_request):
        """Test parsing and verifying the published default signature"""
        test_request.headers["authorization"] = DEFAULT_AUTHORIZATION
        context = self.parser.parse(test_request)

        assert context.key_id == "Test"
        assert context.algorithm == SignatureAlgorithm.RSA_SHA256
        assert context.headers == ["date"]
        assert context.request is test_request
        assert context.skew == 300
        assert context.verify(key=PUBLIC_KEY_PEM)

    def test_parse_full_vector(self, test_request):
        """Test the published all-headers signature with the legacy request line"""
        parser = SignatureParser(
            header_accessor=SignableRequestAccessor(include_method=False),
            clock=self.clock
        )
        test_request.headers["authorization"] = FULL_AUTHORIZATION

        context = parser.parse(test_request)
        assert context.headers == [
            "request-line", "host", "date", "content-type", "content-md5", "content-length"
        ]
        assert context.verify(key=PUBLIC_KEY_PEM)

    def test_full_vector_needs_legacy_request_line(self, test_request):
        """Test that the legacy signature does not match the method-prefixed request line"""
        test_request.headers["authorization"] = FULL_AUTHORIZATION
        assert not self.parser.parse(test_request).verify(key=PUBLIC_KEY_PEM)

    def test_parse_raw_request(self):
        """Test verifying a request parsed from raw HTTP text"""
        parser = SignatureParser(
            header_accessor=SignableRequestAccessor(include_method=False),
            clock=self.clock
        )
        request = SignableRequest.from_raw(RAW_REQUEST)

        assert parser.parse(request).verify(key=PUBLIC_KEY_PEM)

    def test_key_attached(self, test_request):
        """Test passing the key to parse()"""
        test_request.headers["authorization"] = DEFAULT_AUTHORIZATION
        context = self.parser.parse(test_request, key_resolver=lambda key_id: PUBLIC_KEY_PEM)

        assert context.verify()

    def test_missing_authorization(self, test_request):
        """Test that a request without Authorization fails"""
        with pytest.raises(MissingHeaderError):
            self.parser.parse(test_request)

    def test_stale_request(self, test_request):
        """Test that a request outside the skew window fails"""
        test_request.headers["authorization"] = DEFAULT_AUTHORIZATION
        parser = SignatureParser(clock=lambda: TEST_TIMESTAMP + 3600)

        with pytest.raises(SkewExceededError):
            parser.parse(test_request)

    def test_skew_disabled(self, test_request):
        """Test that skew 0 accepts an old request"""
        test_request.headers["authorization"] = DEFAULT_AUTHORIZATION
        parser = SignatureParser(skew=0)

        context = parser.parse(test_request)
        assert context.skew == 0
        assert context.verify(key=PUBLIC_KEY_PEM)

    def test_skew_disabled_warns_once(self, test_request, caplog):
        """Test that a parser with skew 0 logs the disabled warning once"""
        test_request.headers["authorization"] = DEFAULT_AUTHORIZATION

        with caplog.at_level(logging.WARNING, logger="http_signature"):
            parser = SignatureParser(skew=0)
            context = parser.parse(test_request)
            assert context.verify(key=PUBLIC_KEY_PEM)

        assert context.skew_validator is parser.skew_validator
        assert caplog.text.count("disabled") == 1

    def test_context_shares_clock(self, test_request):
        """Test that verify() on a parsed context uses the parser's clock"""
        test_request.headers["authorization"] = DEFAULT_AUTHORIZATION
        context = self.parser.parse(test_request)

        assert context.check_skew() == 10

    def test_unparsable_date(self, test_request):
        """Test that a bad Date header fails before decoding"""
        test_request.headers["authorization"] = DEFAULT_AUTHORIZATION
        test_request.headers["date"] = "the other day"

        with pytest.raises(DateUnparsableError):
            self.parser.parse(test_request)

    def test_missing_date(self, test_request):
        """Test that a missing Date header fails when skew is checked"""
        test_request.headers["authorization"] = DEFAULT_AUTHORIZATION
        del test_request.headers["date"]

        with pytest.raises(DateUnparsableError):
            self.parser.parse(test_request)

    def test_malformed_authorization(self, test_request):
        """Test that decoding errors propagate"""
        test_request.headers["authorization"] = 'Signature keyId="Test" abc='

        with pytest.raises(MalformedHeaderError):
            self.parser.parse(test_request)

        test_request.headers["authorization"] = 'Signature keyId="Test",algorithm="foo-sha1" abc='

        with pytest.raises(UnsupportedAlgorithmError):
            self.parser.parse(test_request)

    def test_hmac_round_trip(self, test_request):
        """Test HMAC with a key resolved at parse time"""
        SignatureContext(
            key_id="shared", algorithm="hmac-sha512", headers=["request-line", "date"], key=HMAC_SECRET
        ).sign(test_request)

        secrets = {"shared": HMAC_SECRET}
        context = self.parser.parse(test_request, key_resolver=secrets.get)
        assert context.verify()


class TestParseRequest:
    """Test the convenience function"""

    def test_parse_request(self, test_request, fixed_clock):
        """Test parse_request() with an injected clock"""
        test_request.headers["authorization"] = DEFAULT_AUTHORIZATION

        context = parse_request(test_request, clock=fixed_clock)
        assert context.verify(key=PUBLIC_KEY_PEM)

    def test_sign_and_parse_now(self):
        """Test a freshly signed request against the real clock"""
        request = SignableRequest(method="GET", url="https://example.com/now")
        SignatureContext(key_id="Test", headers=["request-line", "host", "date"], key=PRIVATE_KEY_PEM).sign(request)

        assert parse_request(request).verify(key=PUBLIC_KEY_PEM)
