"""Chat command implementation"""

import asyncio
import json
from typing import Optional

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel

from trade_legal_chat.services.legal_ai import get_legal_ai_service

console = Console()


def chat_command(
    message: str,
    user_id: str,
    session_id: Optional[str] = None,
    json_output: bool = False,
):
    """Run one chat turn and display the response"""
    service = get_legal_ai_service()
    result = asyncio.run(service.send_message_with_memory(user_id, message, session_id))

    if json_output:
        print(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return

    console.print(Panel(message, title="Question", border_style="blue"))
    console.print(Panel(
        Markdown(result.response.response),
        title=f"Answer (confidence {result.response.confidence:.2f})",
        border_style="green",
    ))

    if result.response.related_topics:
        console.print(f"[cyan]Related topics:[/cyan] {', '.join(result.response.related_topics)}")
    if result.response.suggestions:
        console.print("[cyan]Suggestions:[/cyan]")
        for suggestion in result.response.suggestions:
            console.print(f"  - {suggestion}")

    if result.new_session_id:
        console.print(
            f"\n[dim]New session: {result.new_session_id} "
            f"(continue with --session {result.new_session_id})[/dim]"
        )
    if result.error:
        console.print(f"[yellow]Warning: {result.error}[/yellow]")

    console.print(
        "\n[dim]General information only; not a substitute for advice from a licensed lawyer.[/dim]"
    )
