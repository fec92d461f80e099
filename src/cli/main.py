"""CLI principal (Typer).

Comandos:
- `search`, `show`, `brands`, `models`, `recent`: catálogo público.
- `favorites add|remove|list`: favoritos (plan pro, usuario identificado).
- `account status|upgrade|downgrade|reset`: plan y cuota diaria.
- `doctor run|setup-backend`: diagnóstico y configuración.

La CLI solo imprime: toda la lógica vive en `core.services.lookup`.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Optional, TypeVar

import typer
from rich.console import Console

from adapters.rest_store import RestRecordStore
from cli import doctor
from cli.ui_components import (
    build_account_panel,
    build_brands_table,
    build_fault_panel,
    build_faults_table,
    build_models_table,
    print_banner,
)
from core.config import AppSettings
from core.domain.language import Locale
from core.errors import AccessDeniedError, InvalidIdentifierError, TransportError
from core.logging import configure_logging
from core.services.access_control import GateStatus
from core.services.lookup import LookupService, open_lookup_service

T = TypeVar("T")

app = typer.Typer(
    no_args_is_help=True,
    help="Boiler fault-code lookup: search, read resolution steps, manage favorites.",
)
favorites_app = typer.Typer(no_args_is_help=True, help="Saved fault codes (pro plan).")
account_app = typer.Typer(no_args_is_help=True, help="Plan and daily quota.")

app.add_typer(favorites_app, name="favorites")
app.add_typer(account_app, name="account")
app.add_typer(doctor.app, name="doctor")

_console = Console()


@dataclass
class CliOptions:
    locale: Locale | None = None
    user_id: str | None = None
    banner: bool = True


def _options(ctx: typer.Context) -> CliOptions:
    if isinstance(ctx.obj, CliOptions):
        return ctx.obj
    return CliOptions()


@asynccontextmanager
async def _lookup(options: CliOptions) -> AsyncIterator[LookupService]:
    settings = AppSettings()
    configure_logging(settings.log_level, json_logs=settings.log_json)

    remote = RestRecordStore(settings) if settings.remote_configured else None
    try:
        yield await open_lookup_service(
            settings,
            user_id=options.user_id,
            locale=options.locale,
            remote_store=remote,
        )
    finally:
        if remote is not None:
            await remote.aclose()


def _run(coro: Awaitable[T]) -> T:
    """Ejecuta una corrutina y traduce los errores tipados a códigos de salida."""

    try:
        return asyncio.run(coro)  # type: ignore[arg-type]
    except AccessDeniedError as exc:
        _console.print(f"[yellow]{exc}.[/yellow] Upgrade with `faultcode account upgrade`.")
        raise typer.Exit(code=2) from exc
    except InvalidIdentifierError as exc:
        _console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2) from exc
    except TransportError as exc:
        _console.print(f"[red]Backend error:[/red] {exc}")
        raise typer.Exit(code=1) from exc


@app.callback()
def main(
    ctx: typer.Context,
    lang: Optional[str] = typer.Option(None, "--lang", "-l", help="Display language (en/tr)."),
    user: Optional[str] = typer.Option(
        None,
        "--user",
        "-u",
        envvar="FAULTCODE_USER_ID",
        help="User id for account state and favorites.",
    ),
    no_banner: bool = typer.Option(False, "--no-banner", help="Do not print the banner."),
) -> None:
    ctx.obj = CliOptions(
        locale=Locale.parse(lang) if lang else None,
        user_id=user or None,
        banner=not no_banner,
    )


@app.command()
def search(
    ctx: typer.Context,
    query: Optional[str] = typer.Argument(None, help="Code, title or summary text (e.g. E03)."),
    brand: Optional[str] = typer.Option(None, "--brand", "-b", help="Brand id filter."),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model id filter."),
) -> None:
    """Search fault codes, most relevant first."""

    options = _options(ctx)
    if options.banner:
        print_banner(_console)

    async def _search() -> None:
        async with _lookup(options) as service:
            faults = await service.search(query, brand_id=brand, model_id=model)
        if not faults:
            _console.print("[yellow]No fault codes matched.[/yellow]")
            return
        _console.print(build_faults_table(faults, title=f"Results for {query!r}" if query else "Fault codes"))

    _run(_search())


@app.command()
def show(
    ctx: typer.Context,
    fault_id: str = typer.Argument(..., help="Fault code id (see `search`)."),
) -> None:
    """Show a fault code with its resolution steps (counts against the free quota)."""

    options = _options(ctx)

    async def _show() -> None:
        async with _lookup(options) as service:
            result = await service.open_fault(fault_id)
            locale = service.locale
        if result.status is GateStatus.QUOTA_EXCEEDED:
            _console.print(
                "[yellow]Daily quota reached.[/yellow] Upgrade with `faultcode account upgrade` or come back tomorrow."
            )
            raise typer.Exit(code=3)
        if result.status is GateStatus.NOT_FOUND or result.value is None:
            _console.print(f"[red]Fault code not found:[/red] {fault_id}")
            raise typer.Exit(code=1)
        _console.print(build_fault_panel(result.value, locale=locale))
        if result.remaining is not None:
            _console.print(f"[dim]{result.remaining} free reads left today.[/dim]")

    _run(_show())


@app.command()
def brands(
    ctx: typer.Context,
    query: Optional[str] = typer.Argument(None, help="Filter by name or alias."),
) -> None:
    """List boiler brands."""

    options = _options(ctx)

    async def _brands() -> None:
        async with _lookup(options) as service:
            items = await service.list_brands(query)
        _console.print(build_brands_table(items))

    _run(_brands())


@app.command()
def models(
    ctx: typer.Context,
    brand: Optional[str] = typer.Option(None, "--brand", "-b", help="Brand id filter."),
) -> None:
    """List boiler models."""

    options = _options(ctx)

    async def _models() -> None:
        async with _lookup(options) as service:
            items = await service.list_models(brand)
        _console.print(build_models_table(items))

    _run(_models())


@app.command()
def recent(
    ctx: typer.Context,
    limit: int = typer.Option(10, "--limit", "-n", min=1, max=100, help="How many fault codes."),
) -> None:
    """Most recently verified fault codes."""

    options = _options(ctx)

    async def _recent() -> None:
        async with _lookup(options) as service:
            items = await service.recent_faults(limit)
        _console.print(build_faults_table(items, title="Recently verified"))

    _run(_recent())


@favorites_app.command("add")
def favorites_add(ctx: typer.Context, fault_id: str = typer.Argument(...)) -> None:
    """Save a fault code."""

    options = _options(ctx)

    async def _add() -> None:
        async with _lookup(options) as service:
            result = await service.add_favorite(fault_id)
        if result.created:
            _console.print(f"[green]Saved[/green] {fault_id}")
        else:
            _console.print(f"[dim]Already saved[/dim] {fault_id}")

    _run(_add())


@favorites_app.command("remove")
def favorites_remove(ctx: typer.Context, fault_id: str = typer.Argument(...)) -> None:
    """Remove a saved fault code."""

    options = _options(ctx)

    async def _remove() -> None:
        async with _lookup(options) as service:
            result = await service.remove_favorite(fault_id)
        if result.removed:
            _console.print(f"[green]Removed[/green] {fault_id}")
        else:
            _console.print(f"[dim]Not in favorites[/dim] {fault_id}")

    _run(_remove())


@favorites_app.command("list")
def favorites_list(ctx: typer.Context) -> None:
    """List saved fault codes, most recent first."""

    options = _options(ctx)

    async def _list() -> None:
        async with _lookup(options) as service:
            items = await service.list_favorites()
        if not items:
            _console.print("[dim]No favorites yet.[/dim]")
            return
        _console.print(build_faults_table(items, title="Favorites"))

    _run(_list())


@account_app.command("status")
def account_status(ctx: typer.Context) -> None:
    """Show plan and remaining quota."""

    options = _options(ctx)

    async def _status() -> None:
        async with _lookup(options) as service:
            session = service.session
            await session.check_and_reset_quota()
            _console.print(
                build_account_panel(session.state, user_id=session.user_id, remaining=session.remaining())
            )

    _run(_status())


@account_app.command("upgrade")
def account_upgrade(ctx: typer.Context) -> None:
    """Switch to the pro plan (payment is mocked)."""

    options = _options(ctx)

    async def _upgrade() -> None:
        async with _lookup(options) as service:
            state = await service.session.upgrade_to_pro()
        _console.print(f"[green]Plan:[/green] {state.plan.value}")

    _run(_upgrade())


@account_app.command("downgrade")
def account_downgrade(ctx: typer.Context) -> None:
    """Switch back to the free plan (resets today's quota usage)."""

    options = _options(ctx)

    async def _downgrade() -> None:
        async with _lookup(options) as service:
            state = await service.session.downgrade_to_free()
        _console.print(f"[yellow]Plan:[/yellow] {state.plan.value}")

    _run(_downgrade())


@account_app.command("reset")
def account_reset(ctx: typer.Context) -> None:
    """Reset today's quota usage."""

    options = _options(ctx)

    async def _reset() -> None:
        async with _lookup(options) as service:
            state = await service.session.reset_daily_quota()
        _console.print(f"[green]Quota reset:[/green] {state.quota_used}/{state.quota_limit}")

    _run(_reset())


def run() -> None:
    app()


if __name__ == "__main__":
    run()
