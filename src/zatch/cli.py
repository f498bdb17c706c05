"""Zatch command line: database setup and tenant administration."""

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, TypeVar

import typer
from rich.console import Console
from rich.table import Table
from sqlalchemy.ext.asyncio import AsyncSession

from zatch import __version__
from zatch.core.database import Base, async_engine, async_session_factory
from zatch.core.errors import AppException, NotFoundError
from zatch.core.logging import configure_logging
from zatch.core.permissions.defaults import seed_default_permissions
from zatch.modules import load_models


console = Console()

app = typer.Typer(
    name="zatch",
    help="Manage the Zatch database, agencies and domains.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

T = TypeVar("T")


def _run(operation: Callable[[AsyncSession], Awaitable[T]]) -> T:
    """Run ``operation`` in a session that commits on success."""

    async def runner() -> T:
        async with async_session_factory() as session:
            result = await operation(session)
            await session.commit()
        await async_engine.dispose()
        return result

    try:
        return asyncio.run(runner())
    except AppException as exc:
        console.print(f"[red]Error:[/red] {exc.message}")
        raise typer.Exit(1) from exc


@app.callback(invoke_without_command=True)
def version_callback(
    version: bool = typer.Option(False, "--version", "-v", help="Show version and exit."),
) -> None:
    """Zatch CLI."""
    configure_logging()
    if version:
        console.print(f"[bold cyan]zatch[/bold cyan] version {__version__}")
        raise typer.Exit()


@app.command("init-db")
def init_db(
    seed: bool = typer.Option(True, help="Also seed the default role permissions."),
) -> None:
    """Create all tables."""
    load_models()

    async def create() -> None:
        async with async_engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        await async_engine.dispose()

    asyncio.run(create())
    console.print(f"[green]Created[/green] {len(Base.metadata.tables)} tables")
    if seed:
        seed_permissions()


@app.command("seed-permissions")
def seed_permissions() -> None:
    """Insert the default role permission grid. Existing rows are kept."""
    load_models()
    created = _run(seed_default_permissions)
    console.print(f"[green]Seeded[/green] {created} role permission rows")


@app.command("create-tenant")
def create_tenant(
    name: str = typer.Argument(..., help="Agency name"),
    owner_email: str | None = typer.Option(None, "--owner", help="E-mail of an existing user to make owner"),
    slug: str | None = typer.Option(None, help="Slug; derived from the name when omitted"),
) -> None:
    """Create an agency."""
    from zatch.modules.tenants.services import TenantService
    from zatch.modules.users.repos import UserRepository

    load_models()

    async def create(session: AsyncSession) -> Any:
        owner_id = None
        if owner_email:
            user = await UserRepository(session).get_by_email(owner_email)
            if user is None:
                raise NotFoundError("User not found", resource="user", resource_id=owner_email)
            owner_id = user.id
        return await TenantService(session).create_tenant(name, owner_id=owner_id, slug=slug)

    tenant = _run(create)
    console.print(f"[green]Created[/green] agency [bold]{tenant.name}[/bold] ({tenant.slug}) id={tenant.id}")


@app.command("set-tenant-status")
def set_tenant_status(
    tenant_slug: str = typer.Argument(..., help="Agency slug"),
    status: str = typer.Argument(..., help="active or inactive"),
) -> None:
    """Activate or deactivate an agency. Inactive agencies resolve to no site."""
    from zatch.modules.tenants.models import TenantStatus
    from zatch.modules.tenants.services import TenantService

    try:
        new_status = TenantStatus(status)
    except ValueError as exc:
        raise typer.BadParameter("status must be active or inactive") from exc
    load_models()

    async def update(session: AsyncSession) -> Any:
        tenant = await _tenant_by_slug(session, tenant_slug)
        return await TenantService(session).set_status(tenant, new_status)

    tenant = _run(update)
    console.print(f"Agency [bold]{tenant.slug}[/bold] is now {tenant.status}")


@app.command("add-domain")
def add_domain(
    tenant_slug: str = typer.Argument(..., help="Agency slug"),
    hostname: str = typer.Argument(..., help="Hostname, e.g. painel.example.com"),
    domain_type: str = typer.Option("public", "--type", help="admin or public"),
    verified: bool = typer.Option(False, help="Mark verified without a DNS check"),
) -> None:
    """Register a hostname for an agency and print its DNS instructions."""
    from zatch.modules.tenants.dns import DnsTxtResolver
    from zatch.modules.tenants.gate import verification_host
    from zatch.modules.tenants.models import DomainType
    from zatch.modules.tenants.schemas import normalize_domain_input
    from zatch.modules.tenants.services import DomainService

    load_models()
    try:
        host = normalize_domain_input(hostname)
        kind = DomainType(domain_type)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    async def create(session: AsyncSession) -> Any:
        tenant = await _tenant_by_slug(session, tenant_slug)
        return await DomainService(session, DnsTxtResolver()).add_domain(
            tenant.id, host, kind, verified=verified
        )

    domain = _run(create)
    console.print(f"[green]Added[/green] {domain.hostname} ({domain.type})")
    if not domain.verified:
        table = Table(title="DNS record to create", show_header=True)
        table.add_column("Type", style="cyan")
        table.add_column("Name")
        table.add_column("Value", style="green")
        table.add_row("TXT", verification_host(domain.hostname), domain.verify_token)
        console.print(table)


@app.command("verify-domain")
def verify_domain(hostname: str = typer.Argument(..., help="Hostname to check")) -> None:
    """Check a domain's TXT record now."""
    from zatch.modules.tenants.dns import DnsTxtResolver
    from zatch.modules.tenants.services import DomainService

    load_models()

    async def verify(session: AsyncSession) -> Any:
        return await DomainService(session, DnsTxtResolver()).verify_by_hostname(hostname)

    result = _run(verify)
    colour = "green" if result.verified else "yellow"
    console.print(f"[{colour}]{result.message}[/{colour}]")
    if not result.verified:
        console.print(f"Expected TXT [bold]{result.expected_host}[/bold] = {result.expected_value}")
        for record in result.found_records:
            console.print(f"  found: {record}")
        raise typer.Exit(1)


@app.command("export-properties")
def export_properties(
    tenant_slug: str = typer.Argument(..., help="Agency slug"),
    output: Path = typer.Option(..., "--output", "-o", help="File to write"),
    fmt: str = typer.Option("csv", "--format", "-f", help="csv or json"),
    include_inactive: bool = typer.Option(False, help="Include inactive listings"),
) -> None:
    """Export an agency's listings to a file."""
    from zatch.core.database.tenant import TenantSession
    from zatch.modules.data.exporter import export_csv, export_json
    from zatch.modules.properties.repos import PropertyRepository

    if fmt not in ("csv", "json"):
        raise typer.BadParameter("format must be csv or json")
    load_models()

    async def export(session: AsyncSession) -> tuple[str, int]:
        tenant = await _tenant_by_slug(session, tenant_slug)
        repo = PropertyRepository(TenantSession(session, tenant.id))
        properties = await repo.list_all(active_only=not include_inactive)
        body = export_json(properties, True) if fmt == "json" else export_csv(properties, True)
        return body, len(properties)

    body, count = _run(export)
    output.write_text(body, encoding="utf-8")
    console.print(f"[green]Exported[/green] {count} listings to {output}")


async def _tenant_by_slug(session: AsyncSession, slug: str) -> Any:
    from zatch.modules.tenants.repos import TenantRepository

    tenant = await TenantRepository(session).get_by_slug(slug)
    if tenant is None:
        raise NotFoundError("Agency not found", resource="tenant", resource_id=slug)
    return tenant


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
