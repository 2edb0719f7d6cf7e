"""Unit tests for the access/refresh token codec."""

import base64
import json
import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from authcore.infrastructure.auth import (
    ACCESS_TOKEN,
    REFRESH_TOKEN,
    TokenCodec,
    TokenVerificationError,
)


def _claims(**overrides):
    now = datetime.now(timezone.utc)
    claims = {
        "iss": "authcore",
        "sub": "identity-123",
        "iat": now,
        "nbf": now,
        "exp": now + timedelta(minutes=15),
        "jti": str(uuid.uuid4()),
        "type": ACCESS_TOKEN,
        "role": "user",
    }
    claims.update(overrides)
    return {key: value for key, value in claims.items() if value is not None}


def _b64(data: dict) -> str:
    raw = json.dumps(data, default=lambda v: int(v.timestamp())).encode()
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def _unsigned(header: dict, payload: dict) -> str:
    return f"{_b64(header)}.{_b64(payload)}.c2lnbmF0dXJl"


class TestIssue:
    def test_access_token_round_trip(self, token_codec):
        token = token_codec.issue_access("identity-123", "admin")

        claims = token_codec.verify_access(token)

        assert claims.subject == "identity-123"
        assert claims.role == "admin"
        assert claims.token_type == ACCESS_TOKEN
        assert claims.issued_at == claims.not_before
        assert claims.expires_at - claims.issued_at == timedelta(minutes=15)

    def test_refresh_token_carries_no_role(self, token_codec):
        claims = token_codec.verify_refresh(token_codec.issue_refresh("identity-123"))

        assert claims.subject == "identity-123"
        assert claims.role is None
        assert claims.token_type == REFRESH_TOKEN
        assert claims.expires_at - claims.issued_at == timedelta(days=7)

    def test_tokens_issued_in_same_second_differ(self, token_codec):
        assert token_codec.issue_refresh("identity-123") != token_codec.issue_refresh("identity-123")

    def test_expires_in(self, token_codec):
        assert token_codec.expires_in == 900


class TestVerify:
    def _reason(self, verify, token):
        with pytest.raises(TokenVerificationError) as exc_info:
            verify(token)
        return exc_info.value.reason

    def test_refresh_token_rejected_as_access(self, token_codec):
        token = token_codec.issue_refresh("identity-123")
        assert self._reason(token_codec.verify_access, token) == "signature"

    def test_access_token_rejected_as_refresh(self, token_codec):
        token = token_codec.issue_access("identity-123", "user")
        assert self._reason(token_codec.verify_refresh, token) == "signature"

    def test_wrong_type_with_correct_secret(self, token_codec, access_secret):
        token = jwt.encode(_claims(type=REFRESH_TOKEN), access_secret, algorithm="HS256")
        assert self._reason(token_codec.verify_access, token) == "wrong_type"

    def test_expired_token_with_valid_signature(self, token_codec, access_secret):
        past = datetime.now(timezone.utc) - timedelta(hours=1)
        token = jwt.encode(
            _claims(iat=past, nbf=past, exp=past + timedelta(minutes=1)),
            access_secret,
            algorithm="HS256",
        )
        assert self._reason(token_codec.verify_access, token) == "expired"

    def test_not_yet_valid_token(self, token_codec, access_secret):
        future = datetime.now(timezone.utc) + timedelta(hours=1)
        token = jwt.encode(_claims(nbf=future), access_secret, algorithm="HS256")
        assert self._reason(token_codec.verify_access, token) == "not_yet_valid"

    def test_forged_signature(self, token_codec):
        token = jwt.encode(_claims(), "attacker-secret-0123456789abcdef0123", algorithm="HS256")
        assert self._reason(token_codec.verify_access, token) == "signature"

    def test_tampered_payload(self, token_codec):
        header, _, signature = token_codec.issue_access("identity-123", "user").split(".")
        forged_payload = _b64(_claims(role="admin"))
        token = f"{header}.{forged_payload}.{signature}"
        assert self._reason(token_codec.verify_access, token) == "signature"

    @pytest.mark.parametrize("algorithm", ["none", "RS256", "ES256"])
    def test_non_hmac_algorithm_rejected(self, token_codec, algorithm):
        token = _unsigned({"alg": algorithm, "typ": "JWT"}, _claims())
        assert self._reason(token_codec.verify_access, token) == "algorithm"

    def test_other_hmac_algorithm_rejected(self, token_codec, access_secret):
        token = jwt.encode(_claims(), access_secret, algorithm="HS512")
        assert self._reason(token_codec.verify_access, token) == "algorithm"

    @pytest.mark.parametrize("token", ["", "not-a-token", "a.b", "a.b.c"])
    def test_malformed_token(self, token_codec, token):
        assert self._reason(token_codec.verify_access, token) == "malformed"

    @pytest.mark.parametrize("claim", ["exp", "iat", "nbf", "sub", "jti"])
    def test_missing_required_claim(self, token_codec, access_secret, claim):
        token = jwt.encode(_claims(**{claim: None}), access_secret, algorithm="HS256")
        assert self._reason(token_codec.verify_access, token) == "malformed"

    def test_wrong_issuer(self, token_codec, access_secret):
        token = jwt.encode(_claims(iss="someone-else"), access_secret, algorithm="HS256")
        assert self._reason(token_codec.verify_access, token) == "malformed"

    def test_access_token_without_role(self, token_codec, access_secret):
        token = jwt.encode(_claims(role=None), access_secret, algorithm="HS256")
        assert self._reason(token_codec.verify_access, token) == "malformed"


class TestConstruction:
    def test_equal_secrets_rejected(self, access_secret):
        with pytest.raises(ValueError, match="distinct secrets"):
            TokenCodec(access_secret, access_secret, timedelta(minutes=1), timedelta(days=1))

    def test_non_hmac_algorithm_rejected(self, access_secret, refresh_secret):
        with pytest.raises(ValueError, match="Unsupported"):
            TokenCodec(
                access_secret,
                refresh_secret,
                timedelta(minutes=1),
                timedelta(days=1),
                algorithm="RS256",
            )

    def test_from_settings(self, settings):
        codec = TokenCodec.from_settings(settings)

        claims = codec.verify_access(codec.issue_access("identity-123", "user"))

        assert codec.access_ttl == timedelta(minutes=settings.access_token_expire_minutes)
        assert codec.refresh_ttl == timedelta(days=settings.refresh_token_expire_days)
        assert claims.subject == "identity-123"
