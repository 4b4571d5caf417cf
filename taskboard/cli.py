"""Operator command line: run the server and manage admin accounts."""

from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from ulid import ULID

from .config import Settings, load_settings
from .db import (
    Database,
    create_user,
    find_user_by_username_or_email,
    get_all_users,
    update_user,
    utc_now,
)
from .models import RegisterRequest, UserRole
from .security import hash_password

console = Console()

ROLE_ICONS = {"user": "👤", "admin": "🛡"}

app = typer.Typer(
    name="taskboard",
    help="Taskboard operator commands.",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _load_settings() -> Settings:
    try:
        return load_settings()
    except ValueError as e:
        Console(stderr=True).print(f"[red]{e}[/red]")
        raise typer.Exit(2)


def _open_db(settings: Settings) -> Database:
    db = Database(settings.db_path)
    db.init_schema()
    return db


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Host to bind to"),
    port: Optional[int] = typer.Option(None, help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
) -> None:
    """Run the API server."""
    import uvicorn

    settings = _load_settings()
    uvicorn.run(
        "taskboard.main:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@app.command("create-admin")
def create_admin(
    username: str = typer.Option(..., help="Account username"),
    email: str = typer.Option(..., help="Account email"),
    password: Optional[str] = typer.Option(None, help="Prompted for when omitted"),
) -> None:
    """Create an admin account, or promote the account that owns EMAIL."""
    settings = _load_settings()
    if password is None:
        password = Prompt.ask("[bold cyan]password[/bold cyan]", password=True)
    try:
        data = RegisterRequest(username=username, email=email, password=password)
    except ValidationError as e:
        for err in e.errors():
            field = ".".join(str(p) for p in err["loc"])
            console.print(f"[red]{field}: {err['msg']}[/red]")
        raise typer.Exit(1)

    db = _open_db(settings)
    existing = find_user_by_username_or_email(db, data.username, data.email)
    if existing:
        if existing["email"] != data.email:
            console.print(
                f"[red]Username {data.username} belongs to {existing['email']}[/red]"
            )
            raise typer.Exit(1)
        user = update_user(
            db,
            existing["id"],
            role=UserRole.ADMIN.value,
            is_active=True,
            updated_at=utc_now(),
        )
        action = "Promoted existing account to admin"
    else:
        user = create_user(
            db,
            str(ULID()),
            data.username,
            data.email,
            hash_password(data.password),
            UserRole.ADMIN.value,
            utc_now(),
        )
        action = "Created admin account"

    console.print(
        Panel(
            f"{action}\n[bold]{user['username']}[/bold] <{user['email']}>\n[dim]{user['id']}[/dim]",
            border_style="green",
            padding=(0, 1),
        )
    )


@app.command("list-users")
def list_users(
    role: Optional[UserRole] = typer.Option(None, help="Only show this role"),
    limit: int = typer.Option(50, min=1, help="Maximum rows to show"),
) -> None:
    """Show registered accounts, newest first."""
    db = _open_db(_load_settings())
    users, total = get_all_users(
        db, role=role.value if role else None, limit=limit, offset=0
    )
    if not users:
        console.print("[yellow]No users[/yellow]")
        return

    table = Table(show_header=True, header_style="bold blue")
    table.add_column("ID", style="dim", width=26)
    table.add_column("Username", style="bold", min_width=12)
    table.add_column("Email", min_width=20)
    table.add_column("Role", justify="center", width=10)
    table.add_column("Active", justify="center", width=6)

    for user in users:
        icon = ROLE_ICONS.get(user["role"], "")
        table.add_row(
            user["id"],
            user["username"],
            user["email"],
            f"{icon} {user['role']}",
            "✅" if user["is_active"] else "❌",
        )

    console.print(table)
    console.print(f"[dim]{len(users)} of {total}[/dim]")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
