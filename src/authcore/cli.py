"""Command-line interface for authcore.

This module provides the CLI commands for running and managing
the authcore service.
"""

import asyncio
from typing import NoReturn

import click

from authcore import __version__
from authcore.core.config import get_settings
from authcore.core.logging import configure_logging, get_logger


@click.group()
@click.version_option(version=__version__, prog_name="authcore")
def cli() -> None:
    """authcore - credential and session lifecycle service.

    Settings are read from ``AUTHCORE_*`` environment variables and ``.env``.
    """


@cli.command()
@click.option("--host", type=str, default=None, help="Host to bind to (overrides config)")
@click.option("--port", type=int, default=None, help="Port to bind to (overrides config)")
@click.option(
    "--workers",
    type=int,
    default=None,
    help="Number of worker processes (overrides config)",
)
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
def serve(host: str | None, port: int | None, workers: int | None, reload: bool) -> None:
    """Start the authcore server."""
    import uvicorn

    settings = get_settings()
    bind_host = host or settings.host
    bind_port = port or settings.port
    bind_workers = workers or settings.workers

    configure_logging(settings)
    logger = get_logger(__name__)
    logger.info(
        "Starting authcore server",
        host=bind_host,
        port=bind_port,
        workers=bind_workers,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "authcore.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        workers=1 if reload else bind_workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command("init-db")
@click.option("--force", is_flag=True, help="Skip confirmation prompt")
def init_db(force: bool) -> None:
    """Create all database tables."""
    from authcore.infrastructure.persistence.database import get_db_manager

    settings = get_settings()
    configure_logging(settings)

    if not force:
        click.confirm(
            "This will create all database tables. Continue?",
            abort=True,
            default=False,
        )

    async def initialize() -> None:
        db = get_db_manager()
        try:
            await db.create_tables()
            click.echo("Database initialized successfully.")
        finally:
            await db.disconnect()

    asyncio.run(initialize())


@cli.command("create-admin")
@click.option("--email", type=str, default=None, help="Admin email (defaults to config)")
@click.option("--password", type=str, default=None, help="Admin password (prompts if not set)")
@click.option("--name", type=str, default=None, help="Admin display name (defaults to config)")
def create_admin(email: str | None, password: str | None, name: str | None) -> None:
    """Create the bootstrap admin identity.

    Does nothing if an identity with the email already exists.
    """
    from authcore.infrastructure.api.dependencies import (
        build_identity_service,
        get_password_hasher,
    )
    from authcore.infrastructure.persistence.database import get_db_manager

    settings = get_settings()
    configure_logging(settings)
    logger = get_logger(__name__)

    email = email or settings.admin_email
    name = name or settings.admin_name
    password = password or settings.admin_password
    if password is None:
        password = click.prompt("Admin password", hide_input=True, confirmation_prompt=True)
    if len(password) < 6:
        click.echo("Error: Password must be at least 6 characters", err=True)
        raise SystemExit(1)

    async def create() -> None:
        db = get_db_manager()
        try:
            async with db.session() as session:
                service = build_identity_service(session, get_password_hasher())
                identity, created = await service.create_admin(email, password, name)
        finally:
            await db.disconnect()

        if created:
            click.echo(f"Admin created: {identity.email} (ID: {identity.id})")
            logger.info("Admin created via CLI", identity_id=identity.id, email=identity.email)
        else:
            click.echo(f"Admin user already exists: {identity.email}")

    asyncio.run(create())


@cli.command("cleanup-tokens")
def cleanup_tokens() -> None:
    """Delete expired or revoked sessions and expired or used reset tokens."""
    from authcore.infrastructure.api.dependencies import (
        build_credential_service,
        get_password_hasher,
        get_token_codec,
    )
    from authcore.infrastructure.persistence.database import get_db_manager

    settings = get_settings()
    configure_logging(settings)

    async def cleanup() -> None:
        db = get_db_manager()
        try:
            async with db.session() as session:
                service = build_credential_service(
                    session, get_token_codec(), get_password_hasher()
                )
                result = await service.cleanup_expired()
        finally:
            await db.disconnect()

        click.echo(
            f"Removed {result.sessions_removed} session tokens "
            f"and {result.reset_tokens_removed} reset tokens."
        )

    asyncio.run(cleanup())


def main() -> NoReturn:
    """Main entry point for the CLI.

    Called by the ``authcore`` console script and ``python -m authcore``.
    """
    cli()


if __name__ == "__main__":
    main()
