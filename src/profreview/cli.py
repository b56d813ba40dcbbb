"""Command-line interface for profreview."""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

from profreview import __version__
from profreview.config import Settings, get_settings
from profreview.errors import ProfReviewError

app = typer.Typer(
    name="profreview",
    help="Question-driven code review: 素人質問で恐縮ですが...",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"profreview version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """profreview - a professor asks faux-naive questions about your code."""
    pass


def _setup_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_time=True, show_path=False)],
    )


def _load_settings(config_file: str | None) -> Settings:
    try:
        return get_settings(config_file=config_file)
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def _read_code(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    if not path.is_file():
        console.print(f"[red]Error:[/red] File not found: {source}")
        raise typer.Exit(1)
    return path.read_text(encoding="utf-8", errors="replace")


@app.command()
def review(
    source: Annotated[
        str,
        typer.Argument(help="File to review, or '-' to read from stdin"),
    ] = "-",
    output: Annotated[
        str | None,
        typer.Option("--output", "-o", help="Output format: markdown or json"),
    ] = None,
    model: Annotated[
        str | None,
        typer.Option("--model", "-m", help="LLM model to use (overrides DEFAULT_MODEL env var)"),
    ] = None,
    profile: Annotated[
        str | None,
        typer.Option("--profile", "-p", help="Reviewer profile: strict or gentle"),
    ] = None,
    max_chars: Annotated[
        int | None,
        typer.Option("--max-chars", help="Truncation limit (overrides the profile)", min=1),
    ] = None,
    remote: Annotated[
        bool,
        typer.Option("--remote", help="Ask a running review endpoint instead of calling the model"),
    ] = False,
    verify: Annotated[
        bool,
        typer.Option("--verify/--no-verify", help="Verify model access before reviewing"),
    ] = False,
    render: Annotated[
        bool,
        typer.Option("--render", help="Render markdown in the terminal"),
    ] = False,
    config_file: Annotated[
        str | None,
        typer.Option("--config", "-f", help="Path to a YAML config file"),
    ] = None,
) -> None:
    """Review a source file and print the professor's questions.

    Examples:
        profreview review app.py
        cat app.py | profreview review -
        profreview review app.py --output json --profile gentle
        profreview review app.py --remote
    """
    settings = _load_settings(config_file)
    _setup_logging(settings)

    # CLI > env > yaml > defaults
    if model:
        settings.default_model = model
    if profile:
        if profile not in ("strict", "gentle"):
            console.print(f"[red]Error:[/red] Unknown profile: {profile}")
            raise typer.Exit(1)
        settings.profile = profile  # type: ignore[assignment]
    if max_chars:
        settings.max_chars = max_chars
    if output:
        if output not in ("markdown", "json"):
            console.print(f"[red]Error:[/red] Unknown output format: {output}")
            raise typer.Exit(1)
        settings.output_format = output  # type: ignore[assignment]

    code = _read_code(source)
    if not code.strip():
        console.print("[red]Error:[/red] No code to review")
        raise typer.Exit(1)

    from profreview.reporters import StdoutReporter

    try:
        if remote:
            from profreview.chat.client import ReviewClient

            async def _remote_review():
                async with ReviewClient(settings=settings) as client:
                    return await client.review(code)

            result = asyncio.run(_remote_review())
        else:
            from profreview.review.pipeline import ReviewPipeline

            settings.log_profile_config()
            pipeline = ReviewPipeline.from_settings(settings)
            if verify:
                from profreview.llm import verify_model_access

                success, message = verify_model_access(settings)
                if not success:
                    console.print(f"[red]Error:[/red] {escape(message)}")
                    raise typer.Exit(1)
            result = pipeline(code)
    except ProfReviewError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(1)

    StdoutReporter(format=settings.output_format, console=console, render=render).report(result)


@app.command()
def chat(
    url: Annotated[
        str | None,
        typer.Option("--url", "-u", help="Chat endpoint base URL (overrides API_BASE_URL)"),
    ] = None,
    local: Annotated[
        bool,
        typer.Option("--local", help="Talk to the model directly instead of an endpoint"),
    ] = False,
    config_file: Annotated[
        str | None,
        typer.Option("--config", "-f", help="Path to a YAML config file"),
    ] = None,
) -> None:
    """Chat with the professor, streaming each reply as it arrives.

    Paste code or answer the questions; an empty line or Ctrl-D quits.
    """
    settings = _load_settings(config_file)
    _setup_logging(settings)
    asyncio.run(_chat_loop(settings, url, local))


async def _chat_loop(settings: Settings, url: str | None, local: bool) -> None:
    from profreview.chat.client import ChatClient
    from profreview.chat.decoder import apply_stream
    from profreview.chat.models import ConversationState
    from profreview.chat.professor import stream_reply

    conversation = ConversationState()
    client = None if local else ChatClient(base_url=url, settings=settings)
    target = settings.effective_model if local else (url or settings.api_base_url)
    console.print(Panel(f"[bold]Professor:[/bold] {target}", title="profreview chat"))

    def show(delta: str) -> None:
        console.print(delta, end="", markup=False, highlight=False)

    try:
        while True:
            try:
                text = console.input("[bold]あなた[/bold] > ")
            except EOFError:
                break
            if not text.strip():
                break

            console.print("[bold green]教授[/bold green] > ", end="")
            try:
                if client is not None:
                    await client.send(conversation, text.strip(), on_delta=show)
                else:
                    conversation.add_user(text.strip())
                    wire = conversation.to_wire()
                    await apply_stream(stream_reply(wire, settings), conversation, on_delta=show)
            except ProfReviewError as e:
                console.print(f"\n[red]Error:[/red] {escape(str(e))}", highlight=False)
                continue
            console.print()
    finally:
        if client is not None:
            await client.close()


@app.command()
def config(
    config_file: Annotated[
        str | None,
        typer.Option("--config", "-f", help="Path to a YAML config file"),
    ] = None,
) -> None:
    """Show current configuration."""
    settings = _load_settings(config_file)

    console.print(Panel("[bold]Current Configuration[/bold]", title="profreview"))

    console.print(f"[bold]Model:[/bold] {settings.effective_model}")
    console.print(f"[bold]Profile:[/bold] {settings.profile}")
    console.print(f"[bold]Max Chars:[/bold] {settings.effective_max_chars}")
    console.print(f"[bold]Truncation Marker:[/bold] {escape(settings.effective_truncation_marker)}")
    console.print(f"[bold]Temperature:[/bold] {settings.effective_temperature}")
    console.print(f"[bold]Output Format:[/bold] {settings.output_format}")
    console.print(f"[bold]API Base URL:[/bold] {settings.api_base_url}")
    console.print(
        f"[bold]OpenAI API Key:[/bold] {'[green]configured[/green]' if settings.openai_api_key else '[dim]not set[/dim]'}"
    )
    console.print(
        f"[bold]Anthropic API Key:[/bold] {'[green]configured[/green]' if settings.anthropic_api_key else '[dim]not set[/dim]'}"
    )
    console.print(
        f"[bold]Gemini API Key:[/bold] {'[green]configured[/green]' if settings.gemini_api_key else '[dim]not set[/dim]'}"
    )


@app.command()
def serve(
    config_file: Annotated[
        str | None,
        typer.Option("--config", "-f", help="Path to a YAML config file"),
    ] = None,
) -> None:
    """Start the profreview MCP server for IDE integration.

    Runs an MCP (Model Context Protocol) server over stdin/stdout exposing
    the review_code tool.
    """
    settings = _load_settings(config_file)

    from profreview.server import run_server

    run_server(settings=settings)


if __name__ == "__main__":
    app()
