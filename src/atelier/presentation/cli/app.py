"""Atelier CLI application using Typer.

Command-line utilities for the Atelier backend: running the API server,
generating deployment secrets and managing admin accounts.
"""

import asyncio
import secrets
from typing import Optional

import typer
import uvicorn
from rich.console import Console

from atelier.domain.shared import EntityValidationError, NotFoundError
from atelier.infrastructure.persistence.sqlalchemy import (
    Database,
    UserRepositorySQLAlchemy,
)
from atelier_config.settings import get_settings

app = typer.Typer(
    name="atelier",
    help="Atelier - fashion business backend CLI",
    no_args_is_help=True,
)
console = Console()


# Create secrets subcommand group
secrets_app = typer.Typer(
    name="secrets",
    help="Secret generation utilities",
    no_args_is_help=True,
)
app.add_typer(secrets_app)

users_app = typer.Typer(
    name="users",
    help="User account administration",
    no_args_is_help=True,
)
app.add_typer(users_app)

db_app = typer.Typer(
    name="db",
    help="Database schema management",
    no_args_is_help=True,
)
app.add_typer(db_app)


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address"),
    port: Optional[int] = typer.Option(None, help="Port"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Run the API server with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "atelier.presentation.api.app:create_app",
        factory=True,
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
    )


@secrets_app.command("generate")
def generate_secrets() -> None:
    """Generate secure secrets for Atelier configuration.

    Generates the two required JWT secrets. They must differ, so that a
    refresh token can never pass as an access token.

    Copy the output to your .env file.
    """
    console.print("\n[bold green]Atelier Secret Generation[/bold green]")
    console.print("=" * 60)
    console.print(
        "\nGenerated secrets for your [bold].env[/bold] configuration file:\n"
    )

    # 64 bytes of randomness each, for HS256
    for name in ("JWT_ACCESS_SECRET", "JWT_REFRESH_SECRET"):
        value = secrets.token_urlsafe(64)
        console.print(f"[cyan]{name}[/cyan]={value}", soft_wrap=True)

    console.print("\n" + "=" * 60)
    console.print(
        "[yellow]Keep these secrets secure and never commit them "
        "to version control![/yellow]"
    )
    console.print(
        "[dim]Copy the above values to your config/.env (production) or "
        "config/.env.dev (local) file.[/dim]\n"
    )


async def _rebuild_schema(drop: bool) -> None:
    database = Database(get_settings().database_url)
    try:
        if drop:
            await database.drop_schema()
        await database.create_schema()
    finally:
        await database.dispose()


@db_app.command("init")
def db_init() -> None:
    """Create all missing tables."""
    asyncio.run(_rebuild_schema(drop=False))
    console.print("[green]Database schema is up to date.[/green]")


@db_app.command("reset")
def db_reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation"),
) -> None:
    """Drop and recreate all tables. Deletes every record."""
    if not yes and not typer.confirm(
        "This deletes all users, clients and styles. Continue?",
        default=False,
    ):
        raise typer.Abort
    asyncio.run(_rebuild_schema(drop=True))
    console.print("[green]Database schema recreated.[/green]")


async def _promote(email: str) -> str:
    database = Database(get_settings().database_url)
    try:
        await database.create_schema()
        async with database.session() as session:
            repo = UserRepositorySQLAlchemy(session)
            user = await repo.find_by_email(email)
            if user is None:
                msg = f"No user with email {email}"
                raise NotFoundError(msg)
            user.promote_to_admin()
            await repo.save(user)
            await session.commit()
            return user.email
    finally:
        await database.dispose()


@users_app.command("promote")
def promote_user(
    email: str = typer.Argument(..., help="Email of the account to promote"),
) -> None:
    """Grant admin rights to an existing account."""
    try:
        promoted = asyncio.run(_promote(email))
    except NotFoundError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(code=1) from e
    except EntityValidationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1) from e
    console.print(f"[green]{promoted} is now an admin.[/green]")


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
