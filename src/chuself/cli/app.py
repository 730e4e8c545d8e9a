"""Main CLI application using Typer."""
import asyncio
import os
from datetime import datetime

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..assistant import Assistant, format_memory_results
from ..config import DEFAULT_MODELS
from ..history import Role
from ..instructions import InstructionComposer
from ..llm import SUPPORTED_PROVIDERS, ModelConfig
from ..logging_config import configure_logging
from .providers import (
    get_assistant,
    get_commands,
    get_history,
    get_memory,
    get_model_config,
    get_store,
    save_model_config,
)

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="chuself",
    help="Conversational assistant with multi-provider chat and local memory",
    no_args_is_help=True,
    add_completion=True,
)
history_app = typer.Typer(help="Inspect or clear the conversation history", no_args_is_help=True)
memory_app = typer.Typer(help="Browse and search remembered conversations", no_args_is_help=True)
commands_app = typer.Typer(help="Manage custom instructions", no_args_is_help=True)
config_app = typer.Typer(help="Show or change the model configuration", no_args_is_help=True)
app.add_typer(history_app, name="history")
app.add_typer(memory_app, name="memory")
app.add_typer(commands_app, name="commands")
app.add_typer(config_app, name="config")

# Console for rich output
console = Console()

ROLE_STYLES = {
    Role.USER: "bold yellow",
    Role.ASSISTANT: "bold green",
    Role.SYSTEM: "bold magenta",
}


def _format_time(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp / 1000).strftime("%Y-%m-%d %H:%M")


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Log level (debug, info, warning, error; default: CHUSELF_LOG_LEVEL or warning)"
    )
):
    """Configure logging before any command runs."""
    configure_logging(log_level or os.getenv("CHUSELF_LOG_LEVEL", "warning"))


@app.command()
def chat(
    message: str = typer.Argument(
        None,
        help="Message to send (omit for interactive mode)"
    )
):
    """Chat with the configured model.

    Questions about past conversations ("do you remember...", "what did we
    talk about yesterday") are answered from local memory without a network
    call.
    """
    async def _send(assistant: Assistant, text: str) -> None:
        with console.status("[dim]Thinking...[/dim]"):
            result = await assistant.send(text)
        if result is None:
            return
        style = "red" if result.error else "green"
        console.print(Panel(escape(result.reply.content), title="Assistant", border_style=style))

    async def _chat():
        assistant = get_assistant(get_store(), console)

        if message:
            await _send(assistant, message)
            return

        # Interactive mode
        console.print("[bold cyan]Chuself Chat[/bold cyan]")
        console.print("[dim]Type 'exit', 'quit', or 'q' to leave\n[/dim]")

        while True:
            try:
                user_input = console.input("[bold yellow]You:[/bold yellow] ")

                if not user_input.strip():
                    continue

                if user_input.strip().lower() in ('exit', 'quit', 'q'):
                    console.print("[dim]Goodbye![/dim]")
                    break

                await _send(assistant, user_input)

            except (KeyboardInterrupt, EOFError):
                console.print("\n[dim]Goodbye![/dim]")
                break

    asyncio.run(_chat())


@history_app.command("show")
def history_show(
    limit: int = typer.Option(
        20,
        "--limit",
        "-n",
        help="Number of most recent messages to show"
    )
):
    """Show the most recent messages."""
    messages = get_history(get_store()).messages
    if not messages:
        console.print("[dim]No conversation history.[/dim]")
        return

    for msg in messages[-limit:]:
        style = ROLE_STYLES[msg.role]
        console.print(f"[{style}]{msg.role.value}[/{style}] [dim]{_format_time(msg.timestamp)} ({msg.timestamp})[/dim]")
        console.print(escape(msg.content))
        console.print()


@history_app.command("delete")
def history_delete(
    timestamp: int = typer.Argument(..., help="Timestamp of the message to delete")
):
    """Delete a single message."""
    if get_history(get_store()).delete(timestamp):
        console.print("[green]Message deleted.[/green]")
    else:
        console.print(f"[red]No message with timestamp {timestamp}[/red]")
        raise typer.Exit(code=1)


@history_app.command("clear")
def history_clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation")
):
    """Delete the whole conversation history."""
    if not yes and not typer.confirm("Clear the whole conversation history?"):
        console.print("[dim]Aborted.[/dim]")
        return
    get_history(get_store()).clear()
    console.print("[green]History cleared.[/green]")


@memory_app.command("list")
def memory_list(
    limit: int = typer.Option(
        20,
        "--limit",
        "-n",
        help="Number of most recent memories to show"
    )
):
    """List stored memories, newest first."""
    entries = get_memory(get_store()).get_all()
    if not entries:
        console.print("[dim]No memories stored.[/dim]")
        return

    table = Table(title=f"Memories ({len(entries)} total)")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("When", style="cyan")
    table.add_column("Intent", style="magenta")
    table.add_column("Tags", style="green")
    table.add_column("You said")

    for entry in entries[:limit]:
        table.add_row(
            entry.id,
            _format_time(entry.timestamp),
            entry.intent or "",
            ", ".join(entry.tags),
            escape(entry.user_input[:60] + ("..." if len(entry.user_input) > 60 else "")),
        )

    console.print(table)


@memory_app.command("search")
def memory_search(
    query: str = typer.Argument(..., help="Natural-language query, e.g. 'what did we discuss yesterday about #python'"),
    limit: int = typer.Option(
        5,
        "--limit",
        "-n",
        help="Maximum number of results"
    )
):
    """Search memories by relevance."""
    memory = get_memory(get_store())
    params = memory.parse_natural_language_query(query, limit=limit)
    console.print(f"[dim]Query: {escape(params.query)} tags: {', '.join(params.tags or [])}[/dim]")
    if params.start_date or params.end_date:
        console.print(f"[dim]Range: {params.start_date} .. {params.end_date}[/dim]")

    results = memory.search_text(query, limit=limit)
    console.print(escape(format_memory_results(results)))
    for result in results:
        console.print(f"[dim]{result.entry.id}: score {result.relevance_score:.3f}[/dim]")


@memory_app.command("delete")
def memory_delete(
    entry_id: str = typer.Argument(..., help="ID of the memory to delete")
):
    """Delete a single memory."""
    if get_memory(get_store()).delete(entry_id):
        console.print("[green]Memory deleted.[/green]")
    else:
        console.print(f"[red]No memory with id {entry_id}[/red]")
        raise typer.Exit(code=1)


@memory_app.command("clear")
def memory_clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation")
):
    """Delete every stored memory."""
    if not yes and not typer.confirm("Delete all memories?"):
        console.print("[dim]Aborted.[/dim]")
        return
    get_memory(get_store()).clear()
    console.print("[green]Memories cleared.[/green]")


@commands_app.command("list")
def commands_list():
    """List custom instructions."""
    commands = get_commands(get_store()).load()
    if not commands:
        console.print("[dim]No custom commands.[/dim]")
        return

    table = Table(title="Custom Commands")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Name", style="cyan")
    table.add_column("Condition", style="magenta")
    table.add_column("Instruction")

    for command in commands:
        table.add_row(command.id, escape(command.name), escape(command.condition or "always"), escape(command.instruction))

    console.print(table)


@commands_app.command("add")
def commands_add(
    name: str = typer.Argument(..., help="Short name"),
    instruction: str = typer.Argument(..., help="Text added to the system instruction"),
    condition: str = typer.Option(
        None,
        "--when",
        "-w",
        help="Time condition, e.g. 'before 10am', 'evening', 'at 3pm'"
    )
):
    """Add a custom instruction."""
    command = get_commands(get_store()).add(name, instruction, condition)
    console.print(f"[green]Added command {command.name}[/green] [dim]({command.id})[/dim]")


@commands_app.command("remove")
def commands_remove(
    command_id: str = typer.Argument(..., help="ID of the command to remove")
):
    """Remove a custom instruction."""
    if get_commands(get_store()).remove(command_id):
        console.print("[green]Command removed.[/green]")
    else:
        console.print(f"[red]No command with id {command_id}[/red]")
        raise typer.Exit(code=1)


@commands_app.command("active")
def commands_active():
    """Show the system instruction that would be sent right now."""
    instruction = InstructionComposer().active_instruction(get_commands(get_store()).load(), datetime.now())
    if not instruction:
        console.print("[dim]No instruction is active right now.[/dim]")
        return
    console.print(Panel(escape(instruction), title="Active instruction", border_style="cyan"))


@config_app.command("show")
def config_show():
    """Show the active model configuration."""
    config = get_model_config(get_store(), console)
    if config is None:
        console.print("[dim]No model configured.[/dim]")
        return

    masked = config.api_key[:4] + "..." if config.api_key else "(none)"
    console.print(f"[cyan]Provider:[/cyan] {config.provider.value}")
    console.print(f"[cyan]Model:[/cyan] {config.model_name or '(none)'}")
    console.print(f"[cyan]API key:[/cyan] {masked}")
    if config.endpoint:
        console.print(f"[cyan]Endpoint:[/cyan] {config.endpoint}")


@config_app.command("set")
def config_set(
    provider: str = typer.Argument(..., help=f"Provider ({', '.join(SUPPORTED_PROVIDERS)})"),
    api_key: str = typer.Option(..., "--api-key", "-k", prompt=True, hide_input=True, help="Provider API key"),
    model: str = typer.Option(None, "--model", "-m", help="Model name (default: provider default)"),
    endpoint: str = typer.Option(None, "--endpoint", "-e", help="Endpoint override"),
):
    """Save the model configuration, replacing the previous one."""
    provider = provider.lower()
    if provider not in SUPPORTED_PROVIDERS:
        console.print(f"[red]Error: Unknown provider: {provider}[/red]")
        raise typer.Exit(code=1)

    config = ModelConfig(
        provider=provider,
        model_name=model or DEFAULT_MODELS[provider],
        api_key=api_key,
        endpoint=endpoint,
    )
    save_model_config(get_store(), config)
    console.print(f"[green]Saved {provider} configuration ({config.model_name}).[/green]")


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
