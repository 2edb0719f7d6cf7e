"""Token codec for access and refresh tokens.

Issues and verifies signed JWT bearer tokens. Access tokens carry the
identity's role and live briefly; refresh tokens carry only the identity
reference and live longer. The two kinds are signed with distinct secrets,
so a leaked refresh secret cannot forge access tokens and vice versa.

The codec never consults persistence: revocation is enforced by the
credential service.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from authcore.core.config import HMAC_ALGORITHMS, Settings

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


class TokenVerificationError(Exception):
    """Raised when a token fails verification.

    Attributes:
        reason: One of ``malformed``, ``algorithm``, ``signature``, ``expired``,
            ``not_yet_valid``, ``wrong_type``.
    """

    def __init__(self, reason: str, message: str) -> None:
        self.reason = reason
        super().__init__(message)


@dataclass(frozen=True)
class TokenClaims:
    """Verified claims of a bearer token."""

    subject: str
    token_type: str
    issued_at: datetime
    not_before: datetime
    expires_at: datetime
    token_id: str
    role: str | None = None


class TokenCodec:
    """Issue and verify access and refresh tokens."""

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_ttl: timedelta,
        refresh_ttl: timedelta,
        algorithm: str = "HS256",
        issuer: str = "authcore",
    ) -> None:
        """Initialize the codec.

        Args:
            access_secret: Secret for signing access tokens.
            refresh_secret: Secret for signing refresh tokens. Must differ
                from ``access_secret``.
            access_ttl: Lifetime of access tokens.
            refresh_ttl: Lifetime of refresh tokens.
            algorithm: HMAC algorithm used for signing.
            issuer: Value of the ``iss`` claim.
        """
        if access_secret == refresh_secret:
            raise ValueError("Access and refresh tokens must use distinct secrets")
        if algorithm not in HMAC_ALGORITHMS:
            raise ValueError(f"Unsupported signing algorithm: {algorithm}")
        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self._access_ttl = access_ttl
        self._refresh_ttl = refresh_ttl
        self._algorithm = algorithm
        self._issuer = issuer

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenCodec":
        return cls(
            access_secret=settings.jwt_access_secret,
            refresh_secret=settings.jwt_refresh_secret,
            access_ttl=timedelta(minutes=settings.access_token_expire_minutes),
            refresh_ttl=timedelta(days=settings.refresh_token_expire_days),
            algorithm=settings.jwt_algorithm,
            issuer=settings.jwt_issuer,
        )

    @property
    def access_ttl(self) -> timedelta:
        return self._access_ttl

    @property
    def refresh_ttl(self) -> timedelta:
        return self._refresh_ttl

    @property
    def expires_in(self) -> int:
        """Access token lifetime in seconds."""
        return int(self._access_ttl.total_seconds())

    def issue_access(self, identity_id: str, role: str) -> str:
        """Create an access token.

        Args:
            identity_id: The identity's unique identifier.
            role: The identity's role name.

        Returns:
            Encoded JWT access token.
        """
        return self._issue(
            identity_id,
            ACCESS_TOKEN,
            self._access_ttl,
            self._access_secret,
            {"role": role},
        )

    def issue_refresh(self, identity_id: str) -> str:
        """Create a refresh token.

        Args:
            identity_id: The identity's unique identifier.

        Returns:
            Encoded JWT refresh token.
        """
        return self._issue(identity_id, REFRESH_TOKEN, self._refresh_ttl, self._refresh_secret)

    def verify_access(self, token: str) -> TokenClaims:
        """Verify an access token and return its claims.

        Raises:
            TokenVerificationError: If the token is forged, expired, not yet
                valid, malformed, or not an access token.
        """
        claims = self._verify(token, ACCESS_TOKEN, self._access_secret)
        if not isinstance(claims.role, str) or not claims.role:
            raise TokenVerificationError("malformed", "Access token carries no role")
        return claims

    def verify_refresh(self, token: str) -> TokenClaims:
        """Verify a refresh token and return its claims.

        Raises:
            TokenVerificationError: If the token is forged, expired, not yet
                valid, malformed, or not a refresh token.
        """
        return self._verify(token, REFRESH_TOKEN, self._refresh_secret)

    def _issue(
        self,
        identity_id: str,
        token_type: str,
        ttl: timedelta,
        secret: str,
        extra_claims: dict[str, Any] | None = None,
    ) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "iss": self._issuer,
            "sub": identity_id,
            "iat": now,
            "nbf": now,
            "exp": now + ttl,
            "jti": str(uuid.uuid4()),
            "type": token_type,
            **(extra_claims or {}),
        }
        return jwt.encode(payload, secret, algorithm=self._algorithm)

    def _verify(self, token: str, expected_type: str, secret: str) -> TokenClaims:
        # Reject any non-HMAC algorithm before trusting anything in the token.
        try:
            header = jwt.get_unverified_header(token)
        except jwt.InvalidTokenError as e:
            raise TokenVerificationError("malformed", "Malformed token") from e
        algorithm = header.get("alg")
        if algorithm not in HMAC_ALGORITHMS or algorithm != self._algorithm:
            raise TokenVerificationError("algorithm", "Unexpected signing algorithm")

        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self._algorithm],
                issuer=self._issuer,
                options={"require": ["exp", "iat", "nbf", "sub", "jti"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenVerificationError("expired", "Token has expired") from e
        except jwt.ImmatureSignatureError as e:
            raise TokenVerificationError("not_yet_valid", "Token is not yet valid") from e
        except jwt.InvalidSignatureError as e:
            raise TokenVerificationError("signature", "Invalid token signature") from e
        except jwt.InvalidTokenError as e:
            raise TokenVerificationError("malformed", "Invalid token") from e

        if payload.get("type") != expected_type:
            raise TokenVerificationError("wrong_type", f"Expected {expected_type} token")

        return TokenClaims(
            subject=payload["sub"],
            token_type=payload["type"],
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            not_before=datetime.fromtimestamp(payload["nbf"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            token_id=payload["jti"],
            role=payload.get("role"),
        )
