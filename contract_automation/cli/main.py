"""Main CLI application"""

import asyncio
import json
import logging

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from contract_automation.utils.config import get_settings

app = typer.Typer(
    name="contract-automation",
    help="Template-driven contract generation and dispatch",
    add_completion=False,
)

console = Console(force_terminal=True)


@app.callback()
def main():
    """Configure logging from settings"""
    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command("types")
def types(
    category: str = typer.Option(None, "--category", "-c", help="Only show this category"),
):
    """List available contract types"""
    from contract_automation.services.registry import get_registry

    registry = get_registry()
    configs = registry.by_category(category) if category else registry.list_all()

    if not configs:
        console.print("[yellow]No contract types available[/yellow]")
        return

    table = Table(title="Contract Types")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Category")
    table.add_column("Value range", justify="right")
    table.add_column("Currencies")
    table.add_column("Fields", justify="right")

    for config in configs:
        bounds = config.value_bounds
        table.add_row(
            config.id,
            config.name,
            config.category,
            f"{bounds.min:g} - {bounds.max:g}" if bounds.min is not None and bounds.max is not None else "-",
            ", ".join(config.allowed_currencies),
            str(len(config.required_trigger_fields)),
        )

    console.print(table)
    console.print("\nUse [cyan]python -m contract_automation type <id>[/cyan] to see required fields")


@app.command("type")
def type_detail(
    contract_type: str = typer.Argument(..., help="Contract type id"),
):
    """Show one contract type's configuration"""
    from contract_automation.services.errors import TemplateNotFoundError
    from contract_automation.services.registry import get_registry

    try:
        config = get_registry().require(contract_type)
    except TemplateNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)

    storage = (
        f"{config.storage_hint.location_id} ({config.storage_hint.naming_pattern})"
        if config.storage_hint else "not configured"
    )
    console.print(Panel(
        f"[bold]{config.name}[/bold]\n\n{config.description}\n\n"
        f"Category: {config.category}\n"
        f"Output: {config.output_format}\n"
        f"Storage: {storage}",
        title=f"Contract type: {contract_type}",
        border_style="blue",
    ))

    table = Table(title="Fields")
    table.add_column("Field", style="cyan")
    table.add_column("Required")
    for field in config.required_trigger_fields:
        table.add_row(field, "Yes")
    for field in config.optional_fields:
        table.add_row(field, "No")
    console.print(table)


@app.command("blueprint")
def blueprint(
    contract_type: str = typer.Argument(..., help="Contract type id"),
):
    """Print the automation blueprint for a contract type as JSON"""
    from contract_automation.services.registry import get_registry

    data = get_registry().blueprint(contract_type)
    if data is None:
        console.print(f"[red]Template configuration for '{contract_type}' not found[/red]")
        raise typer.Exit(code=1)
    print(json.dumps(data, ensure_ascii=False, indent=2))


@app.command("generate")
def generate(
    contract_type: str = typer.Option(..., "--type", "-t", help="Contract type id"),
    data: str = typer.Option(..., "--data", "-d", help="JSON contract data"),
    no_dispatch: bool = typer.Option(False, "--no-dispatch", help="Create the contract without calling the webhook"),
):
    """Generate a contract and dispatch it to the automation webhook"""
    from contract_automation.services.errors import ContractRejectedError, PersistenceError
    from contract_automation.services.generation import ContractGenerationService

    try:
        contract_data = json.loads(data)
    except json.JSONDecodeError:
        console.print("[red]Invalid JSON data[/red]")
        raise typer.Exit(code=1)

    service = ContractGenerationService()
    try:
        result = asyncio.run(service.generate(contract_type, contract_data, trigger_dispatch=not no_dispatch))
    except ContractRejectedError as e:
        console.print("[red]Contract validation failed:[/red]")
        for error in e.validation.errors:
            console.print(f"  - {error}", highlight=False)
        raise typer.Exit(code=2)
    except PersistenceError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=3)

    contract = result.contract
    console.print(f"\n[green][OK] Contract {contract.contract_number} created ({contract.status.value})[/green]")

    dispatch = result.dispatch
    if dispatch is None:
        console.print("[dim]Dispatch skipped[/dim]")
    elif dispatch.success:
        console.print(f"[green][OK] Dispatched: HTTP {dispatch.status_code}[/green]")
    else:
        console.print(f"[yellow]Dispatch failed: {dispatch.error_message}[/yellow]")

    for warning in result.enrichment_warnings:
        console.print(f"[yellow]  - {warning}[/yellow]")
    if result.storage_url:
        console.print(f"Storage folder: [cyan]{result.storage_url}[/cyan]")


@app.command("db")
def db_command(
    action: str = typer.Argument(..., help="Action: migrate, status"),
):
    """Manage database connection and schema"""
    from contract_automation.db.supabase import MIGRATION_PATH, get_database

    settings = get_settings()

    if action == "migrate":
        if settings.db_mode == "supabase":
            console.print(f"[blue]SQL migration file:[/blue] {MIGRATION_PATH}")
            console.print(
                "\n[yellow]Run this SQL in Supabase SQL Editor to create tables.[/yellow]"
            )
            console.print(
                "Then run [cyan]python -m contract_automation db status[/cyan] to verify."
            )
        else:
            from contract_automation.db.sqlite import init_db

            init_db()
            console.print("[green]SQLite database initialized.[/green]")

    elif action == "status":
        db = get_database()
        status = db.get_status()
        table = Table(title=f"Database Status ({status['mode']})")
        table.add_column("Key", style="cyan")
        table.add_column("Value", style="green")
        for k, v in status.items():
            table.add_row(str(k), str(v))
        console.print(table)

    else:
        console.print(f"[red]Unknown action: {action}[/red]")
        console.print("Available actions: migrate, status")


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Port"),
):
    """Run the HTTP API"""
    import uvicorn

    from contract_automation.api.app import create_app

    uvicorn.run(create_app(), host=host, port=port, log_level=get_settings().log_level.lower())


if __name__ == "__main__":
    app()
