"""Command-line interface for the Query Routing Engine.

Configuration comes from ROUTER_* environment variables or a .env file, the
same as the HTTP server.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from routing_engine.bootstrap import build_llm, build_query_engine, open_store
from routing_engine.config.settings import Settings
from routing_engine.exceptions import RoutingEngineError
from routing_engine.merging.merger import failure_response
from routing_engine.models.domain import Query, Response, TenantContext
from routing_engine.observability.logger import setup_logging
from routing_engine.pipeline.query_engine import QueryEngine
from routing_engine.storage.seed import seed_store
from routing_engine.storage.sqlite_qa_store import SQLiteQAStore

app = typer.Typer(
    name="routing-engine",
    help="Route questions to knowledge-base retrieval, chart generation or chat.",
    no_args_is_help=True,
)
console = Console()

SHELL_HELP = """[bold]Commands:[/bold]
  help         Show this help message
  tenant <id>  Switch tenant
  tenant       Show the current tenant
  clear        Clear the screen
  exit, quit   Leave the shell
Anything else is sent as a query."""


@dataclass(frozen=True)
class ShellCommand:
    kind: str  # "empty", "help", "tenant", "clear", "exit", "query"
    argument: str | None = None


def parse_shell_command(line: str) -> ShellCommand:
    text = line.strip()
    if not text:
        return ShellCommand("empty")

    head, _, rest = text.partition(" ")
    keyword = head.lower()
    rest = rest.strip()

    if keyword in ("exit", "quit") and not rest:
        return ShellCommand("exit")
    if keyword == "help" and not rest:
        return ShellCommand("help")
    if keyword == "clear" and not rest:
        return ShellCommand("clear")
    if keyword == "tenant" and len(rest.split()) <= 1:
        return ShellCommand("tenant", rest or None)
    return ShellCommand("query", text)


def _settings() -> Settings:
    settings = Settings()
    setup_logging(settings.log_level, settings.json_logs)
    return settings


async def _open_engine(settings: Settings) -> tuple[SQLiteQAStore, QueryEngine]:
    store = await open_store(settings)
    return store, build_query_engine(settings, store, build_llm(settings))


async def _answer(engine: QueryEngine, text: str, tenant: TenantContext) -> Response:
    try:
        return await engine.execute(Query(text=text, tenant=tenant))
    except RoutingEngineError as e:
        return failure_response(e)


def _print_response(response: Response, plain: bool = False) -> None:
    if plain:
        console.print(f"Answer: {response.answer}")
        if response.file_ids:
            console.print(f"Sources: {', '.join(response.file_ids)}")
        if response.chart_spec is not None:
            spec = response.chart_spec
            console.print(f"Chart: {spec.chart_type} '{spec.title}'")
        if response.error:
            console.print(f"Error: {response.error}")
        return

    border = "red" if response.error else "green"
    console.print(Panel(Markdown(response.answer), title="Answer", border_style=border))

    if response.references:
        console.print("[bold]Sources:[/bold]")
        for i, ref in enumerate(response.references, 1):
            console.print(f"  [{i}] [cyan]{ref.file_id}[/cyan] {ref.question}")
            preview = ref.answer[:100].replace("\n", " ")
            if len(ref.answer) > 100:
                preview += "..."
            console.print(f"      [dim]{preview}[/dim]")

    if response.chart_spec is not None:
        spec = response.chart_spec
        table = Table(title=f"{spec.title} ({spec.chart_type})")
        table.add_column("Label", style="cyan")
        table.add_column("Value", justify="right")
        for label, value in zip(spec.labels, spec.data):
            table.add_row(label, f"{value:g}")
        console.print(table)

    if response.error:
        console.print(f"[red]Error: {response.error}[/red]")


async def _ensure_tenant(store: SQLiteQAStore, settings: Settings, tenant_id: str) -> TenantContext:
    try:
        tenant = TenantContext(tenant_id)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None
    if settings.validate_tenants and not await store.tenant_exists(tenant):
        console.print(f"[red]Error: unknown tenant '{tenant_id}'[/red]")
        console.print("[dim]Run 'routing-engine tenants' to list tenants.[/dim]")
        raise typer.Exit(1)
    return tenant


@app.command()
def ask(
    query: str = typer.Argument(..., help="Question or request to route"),
    tenant: str = typer.Option(
        None,
        "--tenant",
        "-t",
        help="Tenant to query (default: ROUTER_DEFAULT_TENANT)",
    ),
    plain: bool = typer.Option(
        False,
        "--plain",
        help="Plain output (no colors/formatting)",
    ),
) -> None:
    """Answer a single query."""
    settings = _settings()

    async def run() -> tuple[Response, bool]:
        try:
            store, engine = await _open_engine(settings)
        except RoutingEngineError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1) from None
        ctx = await _ensure_tenant(store, settings, tenant or settings.default_tenant)
        try:
            return await engine.execute(Query(text=query, tenant=ctx)), False
        except RoutingEngineError as e:
            return failure_response(e), True

    response, failed = asyncio.run(run())
    _print_response(response, plain=plain)
    if failed:
        raise typer.Exit(1)


@app.command()
def shell(
    tenant: str = typer.Option(
        None,
        "--tenant",
        "-t",
        help="Starting tenant (default: ROUTER_DEFAULT_TENANT)",
    ),
) -> None:
    """Interactive query shell."""
    settings = _settings()
    asyncio.run(_shell(settings, tenant or settings.default_tenant))


async def _shell(settings: Settings, tenant_id: str) -> None:
    try:
        store, engine = await _open_engine(settings)
    except RoutingEngineError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None
    current = await _ensure_tenant(store, settings, tenant_id)

    console.print(
        f"[bold]Interactive mode[/bold] on tenant [cyan]{current.tenant_id}[/cyan]. "
        "Type 'help' for commands or 'exit' to quit."
    )
    while True:
        try:
            line = await asyncio.to_thread(console.input, f"[cyan]{current.tenant_id}[/cyan]> ")
        except (EOFError, KeyboardInterrupt):
            console.print()
            break

        command = parse_shell_command(line)
        if command.kind == "empty":
            continue
        if command.kind == "exit":
            break
        if command.kind == "help":
            console.print(SHELL_HELP)
        elif command.kind == "clear":
            console.clear()
        elif command.kind == "tenant":
            if command.argument is None:
                console.print(f"Current tenant: [cyan]{current.tenant_id}[/cyan]")
                continue
            candidate = TenantContext(command.argument)
            if settings.validate_tenants and not await store.tenant_exists(candidate):
                known = ", ".join(await store.list_tenants()) or "none"
                console.print(f"[red]Unknown tenant '{candidate.tenant_id}'.[/red] Known: {known}")
                continue
            current = candidate
            console.print(f"Switched to tenant [cyan]{current.tenant_id}[/cyan]")
        else:
            with console.status("Thinking..."):
                response = await _answer(engine, command.argument or "", current)
            _print_response(response)
    console.print("Goodbye!")


@app.command()
def seed() -> None:
    """Provision the sample tenants and their Q&A records."""
    settings = _settings()

    async def run() -> dict[str, int]:
        store = await open_store(settings)
        return await seed_store(store)

    inserted = asyncio.run(run())
    for tenant_id, count in inserted.items():
        if count:
            console.print(f"[green]Seeded {count} record(s) into {tenant_id}[/green]")
        else:
            console.print(f"[dim]{tenant_id} already seeded[/dim]")


@app.command()
def tenants() -> None:
    """List tenants and their record counts."""
    settings = _settings()

    async def run() -> list[tuple[str, int]]:
        store = await open_store(settings)
        rows = []
        for tenant_id in await store.list_tenants():
            rows.append((tenant_id, await store.count_records(TenantContext(tenant_id))))
        return rows

    rows = asyncio.run(run())
    if not rows:
        console.print("[dim]No tenants. Run 'routing-engine seed' first.[/dim]")
        raise typer.Exit(0)

    table = Table(title=f"Tenants ({len(rows)})")
    table.add_column("Tenant", style="cyan")
    table.add_column("Records", justify="right")
    for tenant_id, count in rows:
        table.add_row(tenant_id, str(count))
    console.print(table)


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind address (default: ROUTER_HOST)"),
    port: int = typer.Option(None, "--port", "-p", help="Port (default: ROUTER_PORT)"),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    from routing_engine.api.app import create_app

    settings = Settings()
    uvicorn.run(
        create_app(settings),
        host=host or settings.host,
        port=port or settings.port,
    )


if __name__ == "__main__":
    app()
