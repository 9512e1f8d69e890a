"""Main CLI application"""

import asyncio
import json
import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from trade_legal_chat.cli.chat_cmd import chat_command
from trade_legal_chat.cli.init_cmd import init_command
from trade_legal_chat.utils.config import get_settings

app = typer.Typer(
    name="trade-legal-chat",
    help="Legal assistance chat for international trade and customs compliance",
    add_completion=False,
)

console = Console()


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")):
    """Configure logging for every command"""
    level = "DEBUG" if verbose else get_settings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


@app.command("init")
def init():
    """Create (SQLite) or verify (Supabase) the chat tables"""
    if not init_command():
        raise typer.Exit(code=1)


@app.command("chat")
def chat(
    message: str = typer.Argument(..., help="Your legal question"),
    user_id: str = typer.Option(..., "--user", "-u", help="User ID"),
    session_id: Optional[str] = typer.Option(None, "--session", "-s", help="Continue this session"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """Ask a legal question (opens a new session unless --session is given)"""
    chat_command(message, user_id, session_id, json_output)


@app.command("sessions")
def sessions(
    user_id: str = typer.Option(..., "--user", "-u", help="User ID"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """List chat sessions of a user"""
    from trade_legal_chat.services.legal_ai import get_legal_ai_service

    result = asyncio.run(get_legal_ai_service().get_chat_sessions(user_id))
    if result.error:
        console.print(f"[red]Error: {result.error}[/red]")
        raise typer.Exit(code=1)

    if json_output:
        print(json.dumps([s.model_dump(mode="json") for s in result.data], ensure_ascii=False, indent=2))
        return

    if not result.data:
        console.print("[yellow]No sessions[/yellow]")
        return

    table = Table(title=f"Chat sessions of {user_id}")
    table.add_column("ID", style="cyan")
    table.add_column("Title", style="green")
    table.add_column("Messages", justify="right")
    table.add_column("Last message")

    for session in result.data:
        table.add_row(
            session.id,
            session.title,
            str(session.message_count),
            session.last_message_at.strftime("%Y-%m-%d %H:%M") if session.last_message_at else "-",
        )

    console.print(table)


@app.command("history")
def history(
    session_id: str = typer.Argument(..., help="Session ID"),
    user_id: str = typer.Option(..., "--user", "-u", help="User ID"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """Replay the messages of a session"""
    from trade_legal_chat.services.legal_ai import get_legal_ai_service

    result = asyncio.run(get_legal_ai_service().get_chat_history(user_id, session_id))
    if result.error:
        console.print(f"[red]Error: {result.error}[/red]")
        raise typer.Exit(code=1)

    if json_output:
        print(json.dumps([m.model_dump(mode="json") for m in result.data], ensure_ascii=False, indent=2))
        return

    for row in result.data:
        turn = row.to_turn()
        if turn.kind == "user":
            console.print(f"[bold blue]User:[/bold blue] {turn.text}")
        else:
            console.print(f"[bold green]AI ({turn.confidence:.2f}):[/bold green] {turn.text}\n")


@app.command("context")
def context(session_id: str = typer.Argument(..., help="Session ID")):
    """Show the saved context facts of a session"""
    from trade_legal_chat.services.legal_ai import get_legal_ai_service

    result = asyncio.run(get_legal_ai_service().get_chat_context(session_id))
    if result.error:
        console.print(f"[red]Error: {result.error}[/red]")
        raise typer.Exit(code=1)

    table = Table(title=f"Context of {session_id}")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_column("Type", style="green")
    table.add_column("Importance", justify="right")
    for fact in result.data:
        table.add_row(fact.context_key, fact.context_value, fact.context_type, str(fact.importance))
    console.print(table)


@app.command("ai-config")
def ai_config(
    create: Optional[str] = typer.Option(None, "--create", help="Create configuration with this name"),
    update: Optional[str] = typer.Option(None, "--update", help="Update configuration by ID"),
    delete: Optional[str] = typer.Option(None, "--delete", help="Delete configuration by ID"),
    activate: Optional[str] = typer.Option(None, "--activate", help="Activate configuration by ID"),
    name: Optional[str] = typer.Option(None, "--name", help="New name (with --update)"),
    description: Optional[str] = typer.Option(None, "--description", help="Description"),
    system_role: Optional[str] = typer.Option(None, "--system-role", help="Prepended to the system prompt"),
    instructions: Optional[str] = typer.Option(None, "--instructions", help="Appended as additional instructions"),
    temperature: Optional[float] = typer.Option(None, "--temperature", min=0.0, max=2.0, help="Sampling temperature"),
    max_tokens: Optional[int] = typer.Option(None, "--max-tokens", min=1, help="Completion token limit"),
    active: Optional[bool] = typer.Option(None, "--active/--inactive", help="Activate or deactivate"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """List, create, update, delete or activate admin AI configurations"""
    from trade_legal_chat.models.ai_config import AIConfiguration, AIConfigurationUpdate
    from trade_legal_chat.services.legal_ai import get_legal_ai_service

    actions = [a for a in (create, update, delete, activate) if a]
    if len(actions) > 1:
        console.print("[red]Error: use only one of --create, --update, --delete, --activate[/red]")
        raise typer.Exit(code=2)

    service = get_legal_ai_service().ai_config
    fields = {
        "name": name,
        "description": description,
        "system_role": system_role,
        "custom_instructions": instructions,
        "temperature": temperature,
        "max_tokens": max_tokens,
        "is_active": active,
    }
    fields = {k: v for k, v in fields.items() if v is not None}

    if create:
        fields.pop("name", None)
        result = asyncio.run(service.create_config(AIConfiguration(name=create, **fields)))
        if not result.ok:
            console.print(f"[red]Error: {result.error}[/red]")
            raise typer.Exit(code=1)
        console.print(f"[green][OK] Created {result.data.id}[/green]")
        return

    if update:
        if not fields:
            console.print("[red]Error: nothing to update[/red]")
            raise typer.Exit(code=2)
        result = asyncio.run(service.update_config(update, AIConfigurationUpdate(**fields)))
        if not result.ok:
            console.print(f"[red]Error: {result.error}[/red]")
            raise typer.Exit(code=1)
        console.print(f"[green][OK] Updated {update}[/green]")
        return

    if delete:
        result = asyncio.run(service.delete_config(delete))
        if not result.ok:
            console.print(f"[red]Error: {result.error}[/red]")
            raise typer.Exit(code=1)
        console.print(f"[green][OK] Deleted {delete}[/green]")
        return

    if activate:
        result = asyncio.run(service.set_active_config(activate))
        if not result.ok:
            console.print(f"[red]Error: {result.error}[/red]")
            raise typer.Exit(code=1)
        console.print(f"[green][OK] Activated {activate}[/green]")
        return

    result = asyncio.run(service.list_configs())
    if result.error:
        console.print(f"[red]Error: {result.error}[/red]")
        raise typer.Exit(code=1)

    if json_output:
        print(json.dumps([c.model_dump(mode="json") for c in result.data], ensure_ascii=False, indent=2))
        return

    if not result.data:
        console.print("[yellow]No AI configurations (defaults in use)[/yellow]")
        return

    table = Table(title="AI configurations")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Active")
    table.add_column("Temperature", justify="right")
    table.add_column("Max tokens", justify="right")
    for config in result.data:
        table.add_row(
            config.id or "",
            config.name,
            "yes" if config.is_active else "",
            "-" if config.temperature is None else f"{config.temperature:g}",
            "-" if config.max_tokens is None else str(config.max_tokens),
        )
    console.print(table)


@app.command("status")
def status():
    """Show chat store status"""
    from trade_legal_chat.db.supabase import get_database

    info = asyncio.run(get_database().get_status())
    for key, value in info.items():
        console.print(f"[cyan]{key}:[/cyan] {value}")


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on code changes"),
):
    """Run the HTTP API"""
    import uvicorn

    uvicorn.run(
        "trade_legal_chat.api.app:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


if __name__ == "__main__":
    app()
