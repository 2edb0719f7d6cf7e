"""Identity repository for database operations."""

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from authcore.domain.entities import Identity, IdentityRole, IdentityStatus, normalize_email
from authcore.infrastructure.persistence.errors import as_utc, translate_errors
from authcore.infrastructure.persistence.models import IdentityModel


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards so they match literally (escape character ``\\``)."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class IdentityRepository:
    """Repository for identity database operations.

    Writes are flushed, not committed; the caller owns the transaction.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self._session = session

    @staticmethod
    def _to_entity(model: IdentityModel) -> Identity:
        return Identity(
            id=model.id,
            email=model.email,
            password_hash=model.password_hash,
            display_name=model.display_name,
            role=IdentityRole(model.role),
            status=IdentityStatus(model.status),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )

    async def create(self, identity: Identity) -> Identity:
        """Create a new identity.

        Raises:
            DuplicateRecordError: If the email is already registered.
        """
        model = IdentityModel(
            id=identity.id,
            email=normalize_email(identity.email),
            password_hash=identity.password_hash,
            display_name=identity.display_name,
            role=identity.role.value,
            status=identity.status.value,
            created_at=identity.created_at,
            updated_at=identity.updated_at,
        )
        with translate_errors("create identity"):
            self._session.add(model)
            await self._session.flush()
        return self._to_entity(model)

    async def get_by_id(self, identity_id: str) -> Identity | None:
        """Get an identity by ID."""
        with translate_errors("get identity by id"):
            result = await self._session.execute(
                select(IdentityModel).where(IdentityModel.id == identity_id)
            )
            model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_email(self, email: str) -> Identity | None:
        """Get an identity by email (case-insensitive)."""
        with translate_errors("get identity by email"):
            result = await self._session.execute(
                select(IdentityModel).where(IdentityModel.email == normalize_email(email))
            )
            model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def update(self, identity: Identity) -> Identity:
        """Persist the mutable fields of an existing identity."""
        with translate_errors("update identity"):
            model = await self._session.get(IdentityModel, identity.id)
            if model is None:
                return identity
            model.password_hash = identity.password_hash
            model.display_name = identity.display_name
            model.role = identity.role.value
            model.status = identity.status.value
            model.updated_at = identity.updated_at
            await self._session.flush()
        return self._to_entity(model)

    async def list(
        self,
        *,
        search: str | None = None,
        role: IdentityRole | None = None,
        status: IdentityStatus | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> tuple[list[Identity], int]:
        """Get one page of identities and the total number of matches.

        Args:
            search: Substring matched against display name or email.
            role: Only identities with this role.
            status: Only identities with this status.
            limit: Page size.
            offset: Number of rows to skip.

        Returns:
            Tuple of (identities, total count).
        """
        conditions = []
        if search:
            pattern = f"%{_escape_like(search.strip().lower())}%"
            conditions.append(
                or_(
                    func.lower(IdentityModel.display_name).like(pattern, escape="\\"),
                    IdentityModel.email.like(pattern, escape="\\"),
                )
            )
        if role is not None:
            conditions.append(IdentityModel.role == IdentityRole(role).value)
        if status is not None:
            conditions.append(IdentityModel.status == IdentityStatus(status).value)

        with translate_errors("list identities"):
            count_result = await self._session.execute(
                select(func.count(IdentityModel.id)).where(*conditions)
            )
            total = count_result.scalar_one() or 0

            result = await self._session.execute(
                select(IdentityModel)
                .where(*conditions)
                .order_by(IdentityModel.created_at.desc(), IdentityModel.id)
                .offset(offset)
                .limit(limit)
            )
            models = result.scalars().all()

        return [self._to_entity(model) for model in models], total
