"""Tests for service key diagnostics."""

from jose import jwt

from groupix.core.credentials import decode_jwt_payload, describe_service_key


def _service_key(**claims):
    return jwt.encode(claims, "not-the-real-secret", algorithm="HS256")


class TestDecodeJwtPayload:
    def test_returns_claims_without_verification(self):
        token = _service_key(ref="abcd1234", role="service_role")

        assert decode_jwt_payload(token) == {"ref": "abcd1234", "role": "service_role"}

    def test_non_jwt_returns_none(self):
        assert decode_jwt_payload("") is None
        assert decode_jwt_payload("plain-key") is None
        assert decode_jwt_payload("a.b.c") is None


class TestDescribeServiceKey:
    def test_includes_ref_and_role(self):
        token = _service_key(ref="abcd1234", role="service_role")

        assert describe_service_key("Prod", token) == "Prod key ref=abcd1234, role=service_role"

    def test_unknown_claims(self):
        assert describe_service_key("Dev", "not-a-jwt") == "Dev key ref=?, role=?"
        assert describe_service_key("Dev", _service_key(iss="supabase")) == "Dev key ref=?, role=?"
