"""Domain exceptions for the credential lifecycle.

Two families live here:

- ``CredentialError`` subclasses are expected, caller-recoverable outcomes
  (bad password, revoked token, ...). The transport layer maps each one to a
  typed response.
- ``PersistenceError`` subclasses come from the store. ``PersistenceUnavailableError``
  is the only fatal kind: services never recover from it, they roll back and
  let it propagate.
"""


class CredentialError(Exception):
    """Base class for recoverable credential lifecycle failures.

    Attributes:
        code: Stable machine-readable error code.
        message: Human-readable message safe to show to clients.
    """

    code = "CREDENTIAL_ERROR"
    default_message = "Credential operation failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class AlreadyExistsError(CredentialError):
    """An identity with this email is already registered."""

    code = "ALREADY_EXISTS"
    default_message = "User with this email already exists"


class InvalidCredentialsError(CredentialError):
    """Email unknown or password wrong. The two cases are never distinguished."""

    code = "INVALID_CREDENTIALS"
    default_message = "Invalid credentials"


class AccountNotActiveError(CredentialError):
    """The identity exists but its status is not active."""

    code = "ACCOUNT_NOT_ACTIVE"
    default_message = "User account is not active"


class InvalidTokenError(CredentialError):
    """A presented token failed verification or is unknown to the reset store."""

    code = "INVALID_TOKEN"
    default_message = "Invalid token"


class TokenNotFoundError(CredentialError):
    """A correctly signed refresh token has no session record."""

    code = "TOKEN_NOT_FOUND"
    default_message = "Refresh token not found"


class TokenRevokedError(CredentialError):
    """The session record for a refresh token has been revoked."""

    code = "TOKEN_REVOKED"
    default_message = "Refresh token has been revoked"


class TokenExpiredError(CredentialError):
    """The stored record for a token is past its expiry."""

    code = "TOKEN_EXPIRED"
    default_message = "Token has expired"


class TokenAlreadyUsedError(CredentialError):
    """A single-use reset token has already been consumed."""

    code = "TOKEN_ALREADY_USED"
    default_message = "Reset token has already been used"


class UserNotFoundError(CredentialError):
    """The identity referenced by a token or record no longer exists."""

    code = "USER_NOT_FOUND"
    default_message = "User not found"


class PersistenceError(Exception):
    """Base class for store-level failures."""


class PersistenceUnavailableError(PersistenceError):
    """The store could not complete an operation (connection lost, timeout, ...)."""

    code = "PERSISTENCE_UNAVAILABLE"


class DuplicateRecordError(PersistenceError):
    """A write violated a uniqueness constraint."""

    code = "DUPLICATE_RECORD"
