"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.rest_store import RestRecordStore
from adapters.static_dataset import load_static_catalog
from core.config import AppSettings, write_user_env_vars
from core.errors import FaultCodeError
from core.interfaces.store import Tables
from core.resources_loader import get_catalog_path
from core.services.lookup import local_user_store_path

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_backend(settings: AppSettings) -> tuple[bool, str]:
    store = RestRecordStore(settings)
    try:
        rows = await store.select(Tables.BRANDS, limit=1)
        return True, f"reachable ({len(rows)} row sample)"
    except FaultCodeError as exc:
        return False, str(exc)
    finally:
        await store.aclose()


async def _check_catalog(settings: AppSettings) -> tuple[bool, str]:
    """Load the static dataset to detect a broken `data_dir` override."""

    try:
        store = load_static_catalog(settings)
        faults = await store.select(Tables.FAULTS)
        brands = await store.select(Tables.BRANDS)
        return True, f"{len(brands)} brands, {len(faults)} fault codes"
    except (OSError, ValueError) as exc:
        return False, str(exc)


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="Faultcode Lookup Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Static catalog
    ok_catalog, detail_catalog = asyncio.run(_check_catalog(settings))
    table.add_row("Static catalog", "OK" if ok_catalog else "FAIL", f"{get_catalog_path(settings)}: {detail_catalog}")

    # Backend (optional)
    ok_backend = True
    if settings.remote_configured:
        ok_backend, detail_backend = asyncio.run(_check_backend(settings))
        table.add_row("Backend", "OK" if ok_backend else "FAIL", detail_backend)
    else:
        table.add_row("Backend", "OPTIONAL", "No backend URL -> static catalog + local user data")

    table.add_row("User data", "OK", str(local_user_store_path(settings)))
    table.add_row("Locale", "OK", settings.default_locale.label())
    table.add_row("Daily quota", "OK", str(settings.daily_quota_limit))

    _console.print(table)

    if not ok_backend:
        _console.print(
            "\n[yellow]Note:[/yellow] Catalog reads fall back to the static dataset while the backend is down;"
            " favorites and account operations will fail until it is reachable."
        )


@app.command(name="setup-backend")
def setup_backend() -> None:
    """Interactive backend setup (stores config in the user config .env)."""

    base_url = typer.prompt("Backend REST URL (e.g. https://<id>.supabase.co/rest/v1)").strip()
    api_key = typer.prompt("Backend API key", hide_input=True, confirmation_prompt=False).strip()

    if not base_url.startswith(("http://", "https://")):
        raise typer.BadParameter("backend URL must start with http:// or https://")

    env_path = write_user_env_vars(
        {
            "FAULTCODE_BACKEND_URL": base_url.rstrip("/"),
            "FAULTCODE_BACKEND_API_KEY": api_key,
        }
    )

    _console.print(f"[green]Saved backend config to:[/green] {env_path}")
