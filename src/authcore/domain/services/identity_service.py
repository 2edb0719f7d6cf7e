"""Identity management service.

Profile reads and updates, password changes for authenticated identities,
the admin listing, and the idempotent admin bootstrap used by the CLI.
"""

import math
from dataclasses import dataclass

from authcore.core.logging import get_logger
from authcore.domain.entities import (
    Identity,
    IdentityRole,
    IdentityStatus,
    PublicIdentity,
    normalize_email,
)
from authcore.domain.exceptions import (
    AlreadyExistsError,
    DuplicateRecordError,
    InvalidCredentialsError,
    UserNotFoundError,
)
from authcore.domain.ports import IdentityRepository, SessionTokenRepository, UnitOfWork
from authcore.domain.services.transaction import transaction
from authcore.infrastructure.auth.password_hasher import PasswordHashingService

logger = get_logger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


@dataclass(frozen=True)
class IdentityPage:
    """One page of a filtered identity listing."""

    items: list[PublicIdentity]
    page: int
    limit: int
    total: int
    total_pages: int


class IdentityService:
    """Service for identity profile and administration operations."""

    def __init__(
        self,
        identity_repo: IdentityRepository,
        session_repo: SessionTokenRepository,
        unit_of_work: UnitOfWork,
        password_hasher: PasswordHashingService,
    ) -> None:
        self.identity_repo = identity_repo
        self.session_repo = session_repo
        self.unit_of_work = unit_of_work
        self.password_hasher = password_hasher

    async def _get_identity(self, identity_id: str) -> Identity:
        identity = await self.identity_repo.get_by_id(identity_id)
        if identity is None:
            raise UserNotFoundError()
        return identity

    async def get_profile(self, identity_id: str) -> PublicIdentity:
        """Get the public profile of an identity.

        Raises:
            UserNotFoundError: If the identity does not exist.
        """
        identity = await self._get_identity(identity_id)
        return identity.to_public()

    async def update_profile(self, identity_id: str, display_name: str) -> PublicIdentity:
        """Change the display name of an identity.

        Raises:
            UserNotFoundError: If the identity does not exist.
        """
        async with transaction(self.unit_of_work):
            identity = await self._get_identity(identity_id)
            identity.display_name = display_name
            identity.touch()
            identity = await self.identity_repo.update(identity)

        logger.info("Profile updated", identity_id=identity_id)
        return identity.to_public()

    async def change_password(
        self, identity_id: str, old_password: str, new_password: str
    ) -> None:
        """Replace the password of an authenticated identity.

        All refresh tokens of the identity are revoked, so other sessions
        have to log in again with the new password.

        Raises:
            UserNotFoundError: If the identity does not exist.
            InvalidCredentialsError: If the old password is wrong.
        """
        async with transaction(self.unit_of_work):
            identity = await self._get_identity(identity_id)
            if not self.password_hasher.verify(old_password, identity.password_hash):
                logger.info("Password change rejected: wrong password", identity_id=identity_id)
                raise InvalidCredentialsError("Invalid old password")

            identity.password_hash = self.password_hasher.hash(new_password)
            identity.touch()
            await self.identity_repo.update(identity)
            revoked_count = await self.session_repo.revoke_all(identity_id)

        logger.info(
            "Password changed",
            identity_id=identity_id,
            sessions_revoked=revoked_count,
        )

    async def list_identities(
        self,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
        search: str | None = None,
        role: IdentityRole | None = None,
        status: IdentityStatus | None = None,
    ) -> IdentityPage:
        """List identities with filtering and pagination.

        Args:
            page: 1-based page number. Values below 1 fall back to 1.
            limit: Page size. Values below 1 fall back to 10.
            search: Substring matched against display name or email.
            role: Only identities with this role.
            status: Only identities with this status.

        Returns:
            The requested page and pagination metadata.
        """
        if page <= 0:
            page = DEFAULT_PAGE
        if limit <= 0:
            limit = DEFAULT_LIMIT

        identities, total = await self.identity_repo.list(
            search=search or None,
            role=role,
            status=status,
            limit=limit,
            offset=(page - 1) * limit,
        )
        return IdentityPage(
            items=[identity.to_public() for identity in identities],
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
        )

    async def create_admin(
        self, email: str, password: str, display_name: str
    ) -> tuple[PublicIdentity, bool]:
        """Create an active admin identity unless the email is already taken.

        Returns:
            Tuple of (identity, created). ``created`` is False when an
            identity with this email already existed; it is returned unchanged.
        """
        email = normalize_email(email)
        existing = await self.identity_repo.get_by_email(email)
        if existing is not None:
            logger.info("Admin bootstrap skipped: email already registered", email=email)
            return existing.to_public(), False

        async with transaction(self.unit_of_work):
            try:
                identity = await self.identity_repo.create(
                    Identity(
                        email=email,
                        password_hash=self.password_hasher.hash(password),
                        display_name=display_name,
                        role=IdentityRole.ADMIN,
                        status=IdentityStatus.ACTIVE,
                    )
                )
            except DuplicateRecordError as e:
                raise AlreadyExistsError() from e

        logger.info("Admin identity created", identity_id=identity.id, email=email)
        return identity.to_public(), True
