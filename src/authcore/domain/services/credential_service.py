"""Credential lifecycle service.

Turns a verified identity into a pair of bearer tokens, rotates and revokes
refresh tokens, and runs the out-of-band password reset flow. Every mutating
operation commits once through the unit of work; on any failure the pending
writes are rolled back and the error propagates.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from authcore.core.logging import get_logger
from authcore.domain.entities import (
    Identity,
    IdentityRole,
    IdentityStatus,
    PublicIdentity,
    ResetToken,
    SessionToken,
    normalize_email,
)
from authcore.domain.exceptions import (
    AccountNotActiveError,
    AlreadyExistsError,
    DuplicateRecordError,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenAlreadyUsedError,
    TokenExpiredError,
    TokenNotFoundError,
    TokenRevokedError,
    UserNotFoundError,
)
from authcore.domain.ports import (
    IdentityRepository,
    ResetNotifier,
    ResetTokenRepository,
    SessionTokenRepository,
    UnitOfWork,
)
from authcore.domain.services.transaction import transaction
from authcore.infrastructure.auth.password_hasher import PasswordHashingService
from authcore.infrastructure.auth.token_codec import TokenCodec, TokenVerificationError
from authcore.infrastructure.services.reset_notifier import NotificationError

logger = get_logger(__name__)

TOKEN_TYPE = "Bearer"


@dataclass(frozen=True)
class TokenPair:
    """A freshly issued access and refresh token."""

    access_token: str
    refresh_token: str
    token_type: str
    expires_in: int


@dataclass(frozen=True)
class LoginResult:
    """Tokens and sanitized identity returned by a successful login."""

    access_token: str
    refresh_token: str
    token_type: str
    expires_in: int
    identity: PublicIdentity


@dataclass(frozen=True)
class CleanupResult:
    """Number of records removed by a cleanup run."""

    sessions_removed: int
    reset_tokens_removed: int


class CredentialService:
    """Register, authenticate, rotate and reset credentials."""

    def __init__(
        self,
        identity_repo: IdentityRepository,
        session_repo: SessionTokenRepository,
        reset_repo: ResetTokenRepository,
        unit_of_work: UnitOfWork,
        token_codec: TokenCodec,
        password_hasher: PasswordHashingService,
        notifier: ResetNotifier | None = None,
        reset_token_ttl: timedelta = timedelta(hours=1),
    ) -> None:
        """Initialize the credential service.

        Args:
            identity_repo: Store of identities.
            session_repo: Store of issued refresh tokens.
            reset_repo: Store of password reset tokens.
            unit_of_work: Transaction boundary shared by the repositories.
            token_codec: Issues and verifies bearer tokens.
            password_hasher: Hashes and verifies passwords.
            notifier: Delivers reset tokens. When None, reset tokens are
                stored but not sent anywhere.
            reset_token_ttl: Lifetime of password reset tokens.
        """
        self.identity_repo = identity_repo
        self.session_repo = session_repo
        self.reset_repo = reset_repo
        self.unit_of_work = unit_of_work
        self.token_codec = token_codec
        self.password_hasher = password_hasher
        self.notifier = notifier
        self.reset_token_ttl = reset_token_ttl

    async def _issue_session(self, identity: Identity) -> tuple[str, str]:
        access_token = self.token_codec.issue_access(identity.id, identity.role.value)
        refresh_token = self.token_codec.issue_refresh(identity.id)
        await self.session_repo.create(
            SessionToken(
                identity_id=identity.id,
                token=refresh_token,
                expires_at=datetime.now(timezone.utc) + self.token_codec.refresh_ttl,
            )
        )
        return access_token, refresh_token

    async def register(self, email: str, password: str, display_name: str) -> PublicIdentity:
        """Register a new identity with role ``user`` and status ``active``.

        Raises:
            AlreadyExistsError: If the email is already registered, including
                when a concurrent registration wins the race.
        """
        email = normalize_email(email)
        async with transaction(self.unit_of_work):
            if await self.identity_repo.get_by_email(email) is not None:
                logger.info("Registration rejected: email already registered", email=email)
                raise AlreadyExistsError()

            identity = Identity(
                email=email,
                password_hash=self.password_hasher.hash(password),
                display_name=display_name,
                role=IdentityRole.USER,
                status=IdentityStatus.ACTIVE,
            )
            try:
                identity = await self.identity_repo.create(identity)
            except DuplicateRecordError as e:
                raise AlreadyExistsError() from e

        logger.info("Identity registered", identity_id=identity.id, email=email)
        return identity.to_public()

    async def login(self, email: str, password: str) -> LoginResult:
        """Authenticate with email and password and open a session.

        Raises:
            InvalidCredentialsError: If the email is unknown or the password
                is wrong. Both cases are indistinguishable to the caller.
            AccountNotActiveError: If the identity is not active.
        """
        email = normalize_email(email)
        async with transaction(self.unit_of_work):
            identity = await self.identity_repo.get_by_email(email)
            if identity is None:
                self.password_hasher.verify_dummy(password)
                logger.info("Login failed", reason="unknown_email")
                raise InvalidCredentialsError()

            if not self.password_hasher.verify(password, identity.password_hash):
                logger.info("Login failed", reason="wrong_password", identity_id=identity.id)
                raise InvalidCredentialsError()

            if not identity.is_active:
                logger.info(
                    "Login rejected: account not active",
                    identity_id=identity.id,
                    status=identity.status.value,
                )
                raise AccountNotActiveError()

            access_token, refresh_token = await self._issue_session(identity)

            if self.password_hasher.needs_rehash(identity.password_hash):
                identity.password_hash = self.password_hasher.hash(password)
                identity.touch()
                identity = await self.identity_repo.update(identity)
                logger.info("Password digest upgraded", identity_id=identity.id)

        logger.info("Login succeeded", identity_id=identity.id)
        return LoginResult(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type=TOKEN_TYPE,
            expires_in=self.token_codec.expires_in,
            identity=identity.to_public(),
        )

    async def logout(self, identity_id: str, refresh_token: str) -> None:
        """Revoke a refresh token. Unknown or already revoked tokens are ignored."""
        async with transaction(self.unit_of_work):
            revoked = await self.session_repo.revoke(refresh_token)

        if revoked:
            logger.info("Logged out", identity_id=identity_id)
        else:
            logger.info("Logout without an active session", identity_id=identity_id)

    async def refresh(self, refresh_token: str) -> TokenPair:
        """Exchange a refresh token for a new token pair.

        The presented token is revoked in the same transaction that stores
        its replacement, so each refresh token can be used once.

        Raises:
            InvalidTokenError: If the token fails verification or its subject
                does not own the session record.
            TokenNotFoundError: If no session record exists for the token.
            TokenRevokedError: If the token was already used or revoked.
            TokenExpiredError: If the session record has expired.
            UserNotFoundError: If the identity no longer exists.
        """
        try:
            claims = self.token_codec.verify_refresh(refresh_token)
        except TokenVerificationError as e:
            logger.info("Refresh rejected", reason=e.reason)
            raise InvalidTokenError(f"Invalid refresh token: {e}") from e

        async with transaction(self.unit_of_work):
            record = await self.session_repo.get(refresh_token)
            if record is None:
                logger.info("Refresh rejected: unknown token", identity_id=claims.subject)
                raise TokenNotFoundError()

            if record.revoked:
                logger.warning(
                    "Revoked refresh token presented, possible replay",
                    identity_id=record.identity_id,
                )
                raise TokenRevokedError()

            if record.is_expired():
                raise TokenExpiredError("Refresh token has expired")

            if record.identity_id != claims.subject:
                logger.warning(
                    "Refresh token subject does not match its session",
                    identity_id=record.identity_id,
                )
                raise InvalidTokenError("Invalid refresh token")

            identity = await self.identity_repo.get_by_id(claims.subject)
            if identity is None:
                raise UserNotFoundError()

            if not await self.session_repo.revoke(refresh_token):
                logger.warning(
                    "Refresh token rotated concurrently, possible replay",
                    identity_id=record.identity_id,
                )
                raise TokenRevokedError()

            access_token, new_refresh_token = await self._issue_session(identity)

        logger.info("Refresh token rotated", identity_id=identity.id)
        return TokenPair(
            access_token=access_token,
            refresh_token=new_refresh_token,
            token_type=TOKEN_TYPE,
            expires_in=self.token_codec.expires_in,
        )

    async def forgot_password(self, email: str) -> None:
        """Start a password reset.

        Always succeeds, so the caller cannot learn whether the email is
        registered.
        """
        email = normalize_email(email)
        async with transaction(self.unit_of_work):
            identity = await self.identity_repo.get_by_email(email)
            if identity is None:
                logger.info("Password reset requested for unknown email")
                return

            record = ResetToken.generate(
                identity.email,
                expires_in_seconds=int(self.reset_token_ttl.total_seconds()),
            )
            await self.reset_repo.create(record)

        logger.info("Password reset token created", identity_id=identity.id)

        if self.notifier is None:
            logger.warning("No reset notifier configured", identity_id=identity.id)
            return
        try:
            await self.notifier.send_reset_token(record.email, record.token, record.expires_at)
        except NotificationError as e:
            logger.error(
                "Failed to deliver password reset token",
                identity_id=identity.id,
                error=str(e),
            )

    async def _get_reset_record(self, reset_token: str) -> ResetToken:
        record = await self.reset_repo.get(reset_token)
        if record is None:
            raise InvalidTokenError("Invalid reset token")
        if record.is_expired():
            raise TokenExpiredError("Reset token has expired")
        if record.used:
            raise TokenAlreadyUsedError()
        return record

    async def check_reset_token(self, reset_token: str) -> datetime:
        """Validate a reset token without consuming it.

        Returns:
            When the token expires.

        Raises:
            InvalidTokenError: If the token is unknown.
            TokenExpiredError: If the token has expired.
            TokenAlreadyUsedError: If the token was already used.
        """
        record = await self._get_reset_record(reset_token)
        return record.expires_at

    async def reset_password(self, reset_token: str, new_password: str) -> None:
        """Set a new password using a reset token.

        The new digest, the used flag and the revocation of every session of
        the identity are committed together.

        Raises:
            InvalidTokenError: If the token is unknown.
            TokenExpiredError: If the token has expired.
            TokenAlreadyUsedError: If the token was already used.
            UserNotFoundError: If no identity has the token's email.
        """
        async with transaction(self.unit_of_work):
            record = await self._get_reset_record(reset_token)

            identity = await self.identity_repo.get_by_email(record.email)
            if identity is None:
                logger.error("Password reset for missing identity")
                raise UserNotFoundError()

            identity.password_hash = self.password_hasher.hash(new_password)
            identity.touch()
            await self.identity_repo.update(identity)

            if not await self.reset_repo.mark_used(reset_token):
                raise TokenAlreadyUsedError()

            revoked_count = await self.session_repo.revoke_all(identity.id)

        logger.info(
            "Password reset completed",
            identity_id=identity.id,
            sessions_revoked=revoked_count,
        )

    async def cleanup_expired(self) -> CleanupResult:
        """Delete expired or revoked sessions and expired or used reset tokens."""
        async with transaction(self.unit_of_work):
            sessions_removed = await self.session_repo.cleanup_expired()
            reset_tokens_removed = await self.reset_repo.cleanup_expired()

        logger.info(
            "Expired credentials cleaned up",
            sessions_removed=sessions_removed,
            reset_tokens_removed=reset_tokens_removed,
        )
        return CleanupResult(
            sessions_removed=sessions_removed,
            reset_tokens_removed=reset_tokens_removed,
        )
