"""FastAPI dependencies for services and access control.

The access guard only verifies the bearer token; it never touches the
database, so a revoked refresh token does not invalidate access tokens that
were already issued.
"""

from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from typing import Annotated, Awaitable, Callable

from fastapi import Depends, Header, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from authcore.core.config import get_settings
from authcore.core.logging import bind_identity, get_logger
from authcore.domain.entities import IdentityRole
from authcore.domain.ports import ResetNotifier
from authcore.domain.services import CredentialService, IdentityService
from authcore.infrastructure.api.errors import ApiError
from authcore.infrastructure.auth import (
    PasswordHashingService,
    TokenCodec,
    TokenVerificationError,
)
from authcore.infrastructure.persistence import SqlAlchemyUnitOfWork, get_db_session
from authcore.infrastructure.persistence.repositories import (
    IdentityRepository,
    ResetTokenRepository,
    SessionTokenRepository,
)
from authcore.infrastructure.services import LoggingResetNotifier

logger = get_logger(__name__)


@dataclass(frozen=True)
class CurrentIdentity:
    """The authenticated caller, taken from a verified access token."""

    identity_id: str
    role: str


@lru_cache
def get_token_codec() -> TokenCodec:
    return TokenCodec.from_settings(get_settings())


@lru_cache
def get_password_hasher() -> PasswordHashingService:
    return PasswordHashingService.from_settings(get_settings())


def get_reset_notifier() -> ResetNotifier:
    return LoggingResetNotifier(get_settings().password_reset_url)


def build_credential_service(
    session: AsyncSession,
    token_codec: TokenCodec,
    password_hasher: PasswordHashingService,
    notifier: ResetNotifier | None = None,
) -> CredentialService:
    """Wire a credential service around one database session."""
    return CredentialService(
        identity_repo=IdentityRepository(session),
        session_repo=SessionTokenRepository(session),
        reset_repo=ResetTokenRepository(session),
        unit_of_work=SqlAlchemyUnitOfWork(session),
        token_codec=token_codec,
        password_hasher=password_hasher,
        notifier=notifier,
        reset_token_ttl=timedelta(minutes=get_settings().password_reset_expire_minutes),
    )


def build_identity_service(
    session: AsyncSession, password_hasher: PasswordHashingService
) -> IdentityService:
    """Wire an identity service around one database session."""
    return IdentityService(
        identity_repo=IdentityRepository(session),
        session_repo=SessionTokenRepository(session),
        unit_of_work=SqlAlchemyUnitOfWork(session),
        password_hasher=password_hasher,
    )


async def get_credential_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    token_codec: Annotated[TokenCodec, Depends(get_token_codec)],
    password_hasher: Annotated[PasswordHashingService, Depends(get_password_hasher)],
    notifier: Annotated[ResetNotifier, Depends(get_reset_notifier)],
) -> CredentialService:
    return build_credential_service(session, token_codec, password_hasher, notifier)


async def get_identity_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    password_hasher: Annotated[PasswordHashingService, Depends(get_password_hasher)],
) -> IdentityService:
    return build_identity_service(session, password_hasher)


def _unauthorized(message: str) -> ApiError:
    return ApiError(
        status.HTTP_401_UNAUTHORIZED,
        "UNAUTHORIZED",
        message,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_identity(
    request: Request,
    token_codec: Annotated[TokenCodec, Depends(get_token_codec)],
    authorization: Annotated[str | None, Header()] = None,
) -> CurrentIdentity:
    """Extract and verify the caller from the Authorization header.

    The verified identity is stored on ``request.state.identity`` and bound
    into the logging context.

    Raises:
        ApiError: 401 if the header is missing or malformed, or the access
            token fails verification.
    """
    if authorization is None:
        logger.info("Authentication failed: missing Authorization header")
        raise _unauthorized("Missing Authorization header")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.info("Authentication failed: invalid Authorization header format")
        raise _unauthorized("Invalid Authorization header format")

    try:
        claims = token_codec.verify_access(parts[1])
    except TokenVerificationError as e:
        logger.info("Authentication failed: invalid token", reason=e.reason)
        if e.reason == "expired":
            raise _unauthorized("Token has expired") from e
        raise _unauthorized("Invalid or expired token") from e

    identity = CurrentIdentity(identity_id=claims.subject, role=claims.role)
    request.state.identity = identity
    bind_identity(identity.identity_id)
    return identity


AuthenticatedIdentity = Annotated[CurrentIdentity, Depends(get_current_identity)]


def require_roles(*roles: str | IdentityRole) -> Callable[..., Awaitable[CurrentIdentity]]:
    """Build a dependency that admits only callers with one of ``roles``.

    Example:
        @router.get("", dependencies=[Depends(require_roles(IdentityRole.ADMIN))])
    """
    allowed = {role.value if isinstance(role, IdentityRole) else role for role in roles}

    async def check_role(current: AuthenticatedIdentity) -> CurrentIdentity:
        if current.role not in allowed:
            logger.info(
                "Access denied: insufficient role",
                identity_id=current.identity_id,
                role=current.role,
            )
            raise ApiError(status.HTTP_403_FORBIDDEN, "FORBIDDEN", "Insufficient permissions")
        return current

    return check_role


CredentialServiceDep = Annotated[CredentialService, Depends(get_credential_service)]
IdentityServiceDep = Annotated[IdentityService, Depends(get_identity_service)]
