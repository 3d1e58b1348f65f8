"""CLI interface for podcaster.

Each command runs one tool through the same resolver the chat agent uses.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from podcaster.agent import Agent, ChatMessage, ToolInvocation
from podcaster.agent.builtins import build_default_registry
from podcaster.config import PodcasterConfig, load_config, merge_cli_overrides
from podcaster.podcasts.store import PodcastStore
from podcaster.shared import AudioGenerator, TextGenerator

app = typer.Typer(
    name="podcaster",
    help="Generate, narrate, list and recommend podcasts.",
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from podcaster import __version__

        console.print(f"podcaster {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log pipeline stages to stderr.")
    ] = False,
    config_path: Annotated[
        Path | None, typer.Option("--config", "-c", help="Path to a .podcaster.toml file.")
    ] = None,
    db_url: Annotated[
        str | None, typer.Option("--db-url", help="SQLAlchemy URL of the podcast store.")
    ] = None,
    base_url: Annotated[
        str | None, typer.Option("--base-url", help="Base URL podcast pages are served from.")
    ] = None,
    model: Annotated[str | None, typer.Option("--model", help="Text model override.")] = None,
) -> None:
    """Podcaster - AI podcast generation agent."""
    if verbose:
        logging.basicConfig(
            level=logging.INFO,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )
    config = load_config(config_path)
    ctx.obj = merge_cli_overrides(config, db_url=db_url, base_url=base_url, model=model)


def _echo(text: str) -> None:
    # Tool output is plain text; brackets in it are not rich markup.
    console.print(text, markup=False, highlight=False, soft_wrap=True)


def _build_agent(config: PodcasterConfig) -> Agent:
    return Agent(
        config,
        store=PodcastStore(config.store.url),
        text=TextGenerator(model=config.llm.model, timeout=config.llm.timeout),
        audio=AudioGenerator(model=config.audio.model, voice=config.audio.voice),
    )


def _run_tool(config: PodcasterConfig, name: str, arguments: dict[str, Any]) -> str:
    agent = _build_agent(config)
    session = agent.open_session("cli")
    invocation = ToolInvocation(name=name, arguments=arguments)
    session.submit(ChatMessage.assistant(invocations=[invocation]))
    return invocation.result or ""


@app.command()
def generate(
    ctx: typer.Context,
    topic: Annotated[str, typer.Argument(help="What the podcast is about.")],
) -> None:
    """Create a podcast page for TOPIC and print its URL."""
    _echo(_run_tool(ctx.obj, "generate-podcast", {"topic": topic}))


@app.command()
def audio(
    ctx: typer.Context,
    topic: Annotated[str, typer.Argument(help="What the podcast is about.")],
    accessible: Annotated[
        bool, typer.Option("--accessible", help="Longer, clearly sectioned script.")
    ] = False,
) -> None:
    """Write, narrate and publish an audio podcast about TOPIC."""
    arguments: dict[str, Any] = {"topic": topic}
    if accessible:
        arguments["accessibilityMode"] = "accessible"
    with console.status("Generating podcast..."):
        output = _run_tool(ctx.obj, "create-audio-podcast", arguments)
    _echo(output)


@app.command(name="list")
def list_cmd(
    ctx: typer.Context,
    limit: Annotated[
        int | None, typer.Option("--limit", "-n", min=1, help="How many podcasts to show.")
    ] = None,
) -> None:
    """List recently generated podcasts."""
    arguments: dict[str, Any] = {} if limit is None else {"limit": limit}
    _echo(_run_tool(ctx.obj, "list-recent", arguments))


@app.command()
def recommend(
    ctx: typer.Context,
    mood: Annotated[str, typer.Argument(help="Your mood or preferred category.")],
) -> None:
    """Recommend a generated podcast for MOOD."""
    _echo(_run_tool(ctx.obj, "recommend", {"mood": mood}))


@app.command()
def tools() -> None:
    """Show the tools available to the chat agent."""
    table = Table(title="Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Gating")
    table.add_column("Description")
    for spec in build_default_registry():
        gating = "confirmation" if spec.requires_confirmation else "auto"
        table.add_row(spec.name, gating, spec.description)
    console.print(table)
