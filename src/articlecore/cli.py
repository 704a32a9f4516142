"""Command-line interface for ArticleCore."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, BinaryIO, Optional
from uuid import uuid4

import click
import structlog
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from articlecore import __version__
from articlecore.config.config import Config, MonitoringConfig, find_config_file
from articlecore.extractor import ContentExtractor, UnparseableDocumentError, parse, sanitize_title
from articlecore.extractor.models import Article
from articlecore.observability import configure_logging

console = Console()
logger = structlog.get_logger(__name__)


CONFIG_ERRORS = (ValidationError, FileNotFoundError, yaml.YAMLError)


def _load_config(config_path: Optional[Path]) -> Config:
    path = config_path or find_config_file()
    if path is None:
        return Config()
    return Config.from_yaml(path)


def _logging_config(monitoring: MonitoringConfig, log_level: Optional[str]) -> MonitoringConfig:
    """Apply the --log-level override; the CLI stays quiet unless a level was configured."""
    if log_level:
        return monitoring.model_copy(update={"log_level": log_level})
    if "log_level" not in monitoring.model_fields_set:
        return monitoring.model_copy(update={"log_level": "WARNING"})
    return monitoring


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(exists=True, dir_okay=False), help="Configuration file path")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level (overrides monitoring.log_level)",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], log_level: Optional[str]) -> None:
    """ArticleCore - extract readable articles from HTML."""
    ctx.ensure_object(dict)
    ctx.obj["config"] = None
    ctx.obj["config_error"] = None
    try:
        ctx.obj["config"] = _load_config(Path(config) if config else None)
    except CONFIG_ERRORS as e:
        # Reported by the commands that need the configuration
        ctx.obj["config_error"] = e

    monitoring = ctx.obj["config"].monitoring if ctx.obj["config"] is not None else MonitoringConfig()
    configure_logging(_logging_config(monitoring, log_level))


@cli.command()
@click.argument("source", type=click.File("rb"))
@click.option("--url", default=None, help="Source URL, used to select a domain rule")
@click.option(
    "--format",
    "output_format",
    default="json",
    type=click.Choice(["json", "html", "text"]),
    help="Output format",
)
@click.option("--sanitize/--raw", default=True, help="Normalize the title for display")
@click.pass_context
def extract(ctx: click.Context, source: BinaryIO, url: Optional[str], output_format: str, sanitize: bool) -> None:
    """Extract the article from an HTML file (use - for stdin)."""
    config: Optional[Config] = ctx.obj["config"]
    if config is None:
        console.print(f"[red]❌ Invalid configuration: {escape(str(ctx.obj['config_error']))}[/red]")
        sys.exit(2)

    raw = source.read()
    extractor = ContentExtractor(config.extraction)

    async def run() -> Article:
        structlog.contextvars.bind_contextvars(extraction_id=uuid4().hex[:12])
        try:
            html = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise UnparseableDocumentError(f"Document is not valid UTF-8: {e}") from e
        html = await extractor.run_url_specific_operations(html, url)
        return await extractor.extract(html)

    try:
        article = asyncio.run(run())
    except UnparseableDocumentError as e:
        logger.error("extraction_failed", source=getattr(source, "name", "-"), error=str(e))
        console.print(f"[red]❌ Extraction failed: {escape(str(e))}[/red]")
        sys.exit(1)

    title = (
        sanitize_title(
            article.title,
            separators=config.extraction.title_separators,
            max_suffix_words=config.extraction.max_site_suffix_words,
        )
        if sanitize
        else article.title
    )

    # Plain echo: rich would interpret markup-like text in the article
    if output_format == "html":
        click.echo(article.content)
    elif output_format == "text":
        click.echo(title)
        click.echo()
        click.echo(parse(article.content).get_text("\n", strip=True))
    else:
        output: dict[str, Any] = {"title": title, "content": article.content, "url": url}
        click.echo(json.dumps(output, ensure_ascii=False, indent=2))


@cli.command()
def rules() -> None:
    """List the registered domain rules."""
    from articlecore.extractor.domain_rules import default_registry

    table = Table(title="Domain Rules")
    table.add_column("#", style="dim")
    table.add_column("Rule", style="cyan")
    table.add_column("Hosts", style="magenta")
    for index, rule in enumerate(default_registry.rules, start=1):
        hosts = ", ".join(rule.hosts) or ("<predicate>" if rule.predicate else "-")
        table.add_row(str(index), rule.name, hosts)
    console.print(table)


@cli.command()
@click.pass_context
def validate_config(ctx: click.Context) -> None:
    """Validate the current configuration."""
    console.print("[blue]🔍 Validating configuration...[/blue]")
    config: Optional[Config] = ctx.obj["config"]
    if config is None:
        console.print(f"[red]❌ Configuration validation failed: {escape(str(ctx.obj['config_error']))}[/red]")
        sys.exit(1)

    table = Table(title="Extraction Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")
    for key, value in config.extraction.model_dump().items():
        if isinstance(value, (list, dict)):
            value = f"{len(value)} entries"
        table.add_row(key, str(value))
    console.print(table)
    console.print("[green]✅ Configuration is valid![/green]")


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
