"""Infrastructure layer - external dependencies and implementations.

This layer contains:
- Authentication primitives (Argon2 hashing, JWT codec)
- Database adapters (SQLAlchemy)
- API routes (FastAPI)
- Reset token delivery

The infrastructure layer implements the ports defined in the domain layer.
"""
