"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from collections.abc import Iterable

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.access import UserAccessState
from core.domain.language import Locale
from core.domain.models import BoilerModel, Brand, FaultCode, FaultDetail, Severity

_SEVERITY_STYLES: dict[Severity, str] = {
    Severity.INFO: "cyan",
    Severity.WARNING: "yellow",
    Severity.CRITICAL: "bold red",
}

# Etiquetas fijas de la UI; el contenido del catálogo ya llega resuelto.
_LABELS: dict[Locale, dict[str, str]] = {
    Locale.ENGLISH: {
        "causes": "Possible causes",
        "steps": "Resolution steps",
        "safety": "Safety",
        "pro": "professional",
        "tools": "Tools",
        "verified": "Last verified",
    },
    Locale.TURKISH: {
        "causes": "Olası nedenler",
        "steps": "Çözüm adımları",
        "safety": "Güvenlik",
        "pro": "profesyonel",
        "tools": "Aletler",
        "verified": "Son doğrulama",
    },
}


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida.

    Por qué aquí:
    - Evita dependencias circulares (main <-> doctor).
    - Permite desactivar banner en modos no interactivos.
    """

    title = Text("FAULTCODE LOOKUP", style="bold cyan")
    subtitle = Text("Boiler fault codes • Causes • Resolution steps", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def severity_text(severity: Severity) -> Text:
    return Text(severity.value, style=_SEVERITY_STYLES.get(severity, "white"))


def build_faults_table(faults: Iterable[FaultCode], *, title: str = "Fault codes") -> Table:
    table = Table(title=title)
    table.add_column("Code", style="bright_green", no_wrap=True)
    table.add_column("Brand", style="cyan", no_wrap=True)
    table.add_column("Title", style="white")
    table.add_column("Severity", no_wrap=True)
    table.add_column("ID", style="dim")
    for fault in faults:
        table.add_row(fault.code, fault.brand_id, fault.title, severity_text(fault.severity), fault.id)
    return table


def build_brands_table(brands: Iterable[Brand]) -> Table:
    table = Table(title="Brands")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Aliases", style="dim")
    table.add_column("Country", style="magenta")
    for brand in brands:
        table.add_row(brand.id, brand.name, ", ".join(brand.aliases), brand.country or "-")
    return table


def build_models_table(models: Iterable[BoilerModel]) -> Table:
    table = Table(title="Boiler models")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Brand", style="white")
    table.add_column("Model", style="white")
    table.add_column("Years", style="dim")
    for model in models:
        table.add_row(model.id, model.brand_id, model.name, model.years.label() if model.years else "-")
    return table


def build_fault_panel(detail: FaultDetail, *, locale: Locale = Locale.ENGLISH) -> Panel:
    """Ficha de avería: resumen, causas, aviso de seguridad y pasos."""

    labels = _LABELS[locale]
    fault = detail.fault

    title = Text.assemble((fault.code, "bold"), " • ", fault.title)
    body = Text()
    body.append(fault.summary.strip() + "\n")

    if fault.safety_notice:
        body.append(f"\n{labels['safety']}: ", style="bold red")
        body.append(fault.safety_notice + "\n")

    if fault.causes:
        body.append(f"\n{labels['causes']}:\n", style="bold")
        for cause in fault.causes:
            body.append(f"- {cause}\n")

    if detail.steps:
        body.append(f"\n{labels['steps']}:\n", style="bold")
        for step in detail.steps:
            body.append(f"{step.order}. {step.text}")
            extras = []
            if step.estimated_minutes is not None:
                extras.append(f"~{step.estimated_minutes} min")
            if step.requires_professional:
                extras.append(labels["pro"])
            if extras:
                body.append(f" ({', '.join(extras)})", style="dim")
            body.append("\n")
            if step.tools:
                body.append(f"   {labels['tools']}: {', '.join(step.tools)}\n", style="dim")

    if fault.last_verified_at is not None:
        body.append(f"\n{labels['verified']}: {fault.last_verified_at.date().isoformat()}", style="dim")

    return Panel(
        body,
        title=title,
        subtitle=severity_text(fault.severity),
        border_style=_SEVERITY_STYLES.get(fault.severity, "white"),
    )


def build_account_panel(state: UserAccessState, *, user_id: str | None, remaining: int | None) -> Panel:
    body = Text()
    body.append("User: ", style="bold")
    body.append(f"{user_id or 'anonymous'}\n")
    body.append("Plan: ", style="bold")
    body.append(state.plan.value, style="green" if state.is_pro else "yellow")
    body.append("\n")
    if remaining is None:
        body.append("Quota: unlimited\n")
    else:
        body.append(f"Quota: {state.quota_used}/{state.quota_limit} used, {remaining} left today\n")
    body.append(f"Last reset: {state.last_reset_date.isoformat()}", style="dim")
    return Panel(body, title=Text("Account", style="bold yellow"), border_style="yellow")
