"""Developer CLI for running normalizer plugins against saved payloads."""

import json
import logging
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from intelfeed.config import load_config
from intelfeed.registry import registry, run_plugin

app = typer.Typer(
    name="intelfeed",
    help="Normalize raw intel/news payloads into canonical records.",
)

console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from intelfeed import __version__

        console.print(f"intelfeed {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """intelfeed - normalize heterogeneous feeds into one record shape."""
    pass


def _setup_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


def _read_payload(path: Path) -> Any:
    """JSON when the file parses as JSON, otherwise the raw text (XML, HTML, Markdown)."""
    text = path.read_text(encoding="utf-8")
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


@app.command(name="plugins")
def plugins_cmd() -> None:
    """List the registered normalizer plugins."""
    table = Table(title="Normalizer plugins")
    table.add_column("id", style="cyan", no_wrap=True)
    table.add_column("description")
    table.add_column("enrich", justify="center")
    table.add_column("classify", justify="center")

    for plugin in registry:
        table.add_row(
            plugin.id,
            plugin.description,
            "yes" if plugin.enrich else "-",
            "yes" if plugin.classify else "-",
        )
    console.print(table)


@app.command(name="normalize")
def normalize_cmd(
    plugin_id: Annotated[str, typer.Argument(help="Plugin id, see `intelfeed plugins`.")],
    payload_file: Annotated[
        Path,
        typer.Argument(
            help="File holding the raw payload (JSON, or raw XML/HTML text).",
            exists=True,
            file_okay=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ],
    enrich: Annotated[
        bool,
        typer.Option("--enrich/--no-enrich", help="Run the plugin's enrich step."),
    ] = True,
    classify: Annotated[
        bool,
        typer.Option("--classify/--no-classify", help="Run the classifier rule chain."),
    ] = True,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to an .intelfeed.toml file."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log pipeline decisions to stderr."),
    ] = False,
) -> None:
    """Normalize one saved payload and print the records as JSON."""
    _setup_logging(verbose)

    if registry.get(plugin_id) is None:
        err_console.print(f"[red]Error:[/red] Unknown plugin: {plugin_id}")
        err_console.print("Run `intelfeed plugins` to list the available ids.")
        raise typer.Exit(1)

    settings = load_config(config_path)
    payload = _read_payload(payload_file)
    items = run_plugin(plugin_id, payload, enrich=enrich, classify=classify, settings=settings)

    records = [item.model_dump(mode="json", by_alias=True) for item in items]
    typer.echo(json.dumps(records, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    app()
