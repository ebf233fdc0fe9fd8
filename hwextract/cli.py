"""CLI entry-point: classify and extract listing titles against the configured backend."""

import json
import logging

import typer
from rich.console import Console
from pydantic import ValidationError
from rich.markup import escape

from hwextract.config import get_settings
from hwextract.errors import ExtractionError, StageError
from hwextract.extract import Extractor, product_key
from hwextract.llm import get_backend

app = typer.Typer(help="Server hardware listing extractor")
console = Console()


def _build_extractor(backend: str | None, verbose: bool) -> Extractor:
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.hwx_log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return Extractor(
        get_backend(backend, settings=settings),
        temperature=settings.hwx_llm_temperature,
        max_tokens=settings.hwx_llm_max_tokens,
        timeout=settings.hwx_llm_timeout,
    )


def _parse_specs(specs: list[str]) -> dict[str, str]:
    out: dict[str, str] = {}
    for item in specs:
        key, sep, value = item.partition("=")
        if not sep:
            raise typer.BadParameter(f"expected key=value, got {item!r}", param_hint="--spec")
        out[key.strip()] = value.strip()
    return out


@app.command()
def classify(
    title: str = typer.Argument(..., help="Listing title"),
    backend: str = typer.Option(None, help="Backend: ollama | anthropic | openai_compat (default from env)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Print the component category of a listing title."""
    try:
        extractor = _build_extractor(backend, verbose)
        category = extractor.classify(title)
    except (ExtractionError, ValidationError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    console.print(category.value)


@app.command()
def extract(
    title: str = typer.Argument(..., help="Listing title"),
    category: str = typer.Option(None, help="Skip classification and extract as this category"),
    spec: list[str] = typer.Option(default=[], help="Item specific as key=value (repeatable)"),
    description: str = typer.Option("", help="Listing description (servers only)"),
    backend: str = typer.Option(None, help="Backend: ollama | anthropic | openai_compat (default from env)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Extract validated attributes and the product key for a listing title."""
    specifics = _parse_specs(spec)
    try:
        extractor = _build_extractor(backend, verbose)
        if category:
            record = extractor.extract(category, title, specifics, description=description)
            cat = category
        else:
            cat_enum, record = extractor.classify_and_extract(title, specifics, description=description)
            cat = cat_enum.value
    except StageError as e:
        if e.category is not None:
            console.print(f"[yellow]Classified as {e.category.value}[/yellow]")
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    except (ExtractionError, ValidationError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    console.print_json(json.dumps({
        "component_type": cat,
        "product_key": product_key(cat, record),
        "attributes": record,
    }))


@app.command()
def key(
    category: str = typer.Argument(..., help="Component category"),
    attributes: str = typer.Argument(..., help="Attribute record as a JSON object"),
):
    """Print the product key for an attribute record."""
    try:
        record = json.loads(attributes)
    except json.JSONDecodeError as e:
        console.print(f"[red]Error: invalid JSON: {e}[/red]")
        raise typer.Exit(1)
    console.print(product_key(category, record), markup=False, emoji=False)


if __name__ == "__main__":
    app()
