"""SQLAlchemy models for authcore tables.

All models inherit from the Base class defined in database.py.
"""

from authcore.infrastructure.persistence.models.identity import IdentityModel
from authcore.infrastructure.persistence.models.reset_token import ResetTokenModel
from authcore.infrastructure.persistence.models.session_token import SessionTokenModel

__all__ = [
    "IdentityModel",
    "ResetTokenModel",
    "SessionTokenModel",
]
