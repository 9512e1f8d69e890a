"""Init command implementation"""

import asyncio

from rich.console import Console
from rich.panel import Panel

from trade_legal_chat.db.supabase import get_database
from trade_legal_chat.utils.config import get_settings

console = Console()


def init_command():
    """Create or verify the chat store schema"""
    settings = get_settings()
    console.print(Panel.fit(
        f"[bold blue]Initializing Trade Legal Chat ({settings.db_mode})[/bold blue]",
        border_style="blue"
    ))

    try:
        asyncio.run(get_database(settings.db_mode).init_db())
    except Exception as e:
        console.print(f"[red]   [FAIL] Failed to initialize store: {e}[/red]")
        return False

    console.print(Panel.fit(
        "[bold green][OK] Initialization complete![/bold green]\n\n"
        "Next steps:\n"
        "1. Ask a question: [cyan]trade-legal-chat chat \"Your question\" --user <id>[/cyan]\n"
        "2. Start the API: [cyan]trade-legal-chat serve[/cyan]",
        border_style="green"
    ))
    return True
