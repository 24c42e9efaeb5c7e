"""TeamSync assistant - terminal entry point."""

import asyncio

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
import structlog
import typer

from shared.logging import setup_logging

from .clients.store import StoreClient
from .config import Settings, get_settings
from .interpreter import Assistant, Reply, ReplyKind
from .intents import HELP_TEXT

logger = structlog.get_logger()

app = typer.Typer(
    name="teamsync-assistant",
    help="Chat assistant for TeamSync projects and tasks",
    add_completion=False,
)
console = Console()

WELCOME = 'Hi! Ask me about your projects and tasks. Type "help" to see commands.'
EXIT_WORDS = {"exit", "quit"}


def _load_settings() -> Settings:
    try:
        settings = get_settings()
    except ValidationError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=2) from None
    setup_logging(
        service_name=settings.service_name,
        log_format=settings.log_format,
        log_level=settings.log_level,
    )
    return settings


def _build_assistant(settings: Settings) -> tuple[Assistant, StoreClient | None]:
    store = StoreClient(settings) if settings.store_configured else None
    return Assistant(store, settings), store


def _print_reply(reply: Reply) -> None:
    if reply.kind == ReplyKind.ANSWER:
        console.print(reply.text, markup=False, highlight=False)
    elif reply.kind == ReplyKind.NOTICE:
        console.print(f"[yellow]{escape(reply.text)}[/yellow]")
    else:
        console.print(f"[bold red]{escape(reply.text)}[/bold red]")


async def _chat(settings: Settings) -> None:
    assistant, store = _build_assistant(settings)
    session = assistant.new_session()
    logger.info("session_started", session_id=session.session_id, signed_in=bool(session.user_id))

    console.print("[bold cyan]TeamSync Assistant[/bold cyan]")
    console.print(WELCOME, markup=False)
    try:
        while True:
            try:
                line = await asyncio.to_thread(console.input, "[bold]> [/bold]")
            except (EOFError, KeyboardInterrupt):
                break
            if line.strip().lower() in EXIT_WORDS:
                break
            if not line.strip():
                continue
            reply = await assistant.submit(session, line)
            if reply is not None:
                _print_reply(reply)
    finally:
        if store is not None:
            await store.close()
        logger.info(
            "session_ended", session_id=session.session_id, messages=len(session.transcript)
        )


async def _ask(settings: Settings, text: str) -> Reply | None:
    assistant, store = _build_assistant(settings)
    try:
        return await assistant.submit(assistant.new_session(), text)
    finally:
        if store is not None:
            await store.close()


@app.command()
def chat():
    """Start an interactive session."""
    settings = _load_settings()
    asyncio.run(_chat(settings))


@app.command()
def ask(text: str = typer.Argument(..., help="Command to run, e.g. 'list projects'")):
    """Run a single command and print the reply."""
    settings = _load_settings()
    reply = asyncio.run(_ask(settings, text))
    if reply is None:
        return
    _print_reply(reply)
    if reply.kind == ReplyKind.ERROR:
        raise typer.Exit(code=1)


@app.command()
def commands():
    """List the commands the assistant understands."""
    console.print(HELP_TEXT, markup=False, highlight=False)


if __name__ == "__main__":
    app()
