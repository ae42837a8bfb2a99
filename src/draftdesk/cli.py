"""CLI entry point for Draftdesk."""

import asyncio
from pathlib import Path
from typing import Any, Optional

import click
import yaml
from rich.console import Console
from rich.table import Table

from draftdesk.config import ConfigManager
from draftdesk.models.article import ArticleForm
from draftdesk.models.seo import SeoAssessment
from draftdesk.services.seo_scoring import assess_article
from draftdesk.utils.logging import configure_logging, get_logger


logger = get_logger(__name__)
console = Console()

SEVERITY_STYLES = {
    "critical": "bold red",
    "warning": "yellow",
    "info": "cyan",
}


def load_article_file(path: Path) -> dict[str, Any]:
    """
    Load a stored article record from a YAML or JSON file.

    Raises:
        click.ClickException: If the file is not a mapping
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise click.ClickException(f"Article file must contain a mapping of fields: {path}")

    logger.info("article_file_loaded", path=str(path), fields=len(data))
    return data


def load_config(config_path: Optional[Path]) -> ConfigManager:
    """
    Load configuration from the given path or ~/.config/draftdesk/config.yaml.

    Raises:
        click.ClickException: If config is missing, has invalid permissions, or validation fails
    """
    try:
        if config_path is None:
            return ConfigManager.load_default()
        return ConfigManager.load_from_path(config_path)
    except (FileNotFoundError, PermissionError) as e:
        raise click.ClickException(str(e))
    except ValueError as e:
        raise click.ClickException(f"Configuration validation failed:\n{e}")


def render_assessment(assessment: SeoAssessment) -> Table:
    """Build a rich table of SEO checks."""
    table = Table(title=f"SEO score: {assessment.score}/100")
    table.add_column("Check")
    table.add_column("Result", justify="center")
    table.add_column("Severity")

    for check in assessment.checks:
        result = "[green]pass[/green]" if check.passed else "[red]fail[/red]"
        severity = f"[{SEVERITY_STYLES[check.severity]}]{check.severity}[/]"
        table.add_row(check.label, result, severity)

    return table


@click.group()
@click.version_option(version="0.1.0", prog_name="draftdesk")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (default: $DRAFTDESK_CONFIG or ~/.config/draftdesk/config.yaml)",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path]):
    """Draftdesk: reconcile human edits and AI suggestions on blog articles."""
    configure_logging()
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@cli.command()
@click.argument("article_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def seo(article_file: Path):
    """
    Print the SEO checklist and score of an article file.

    Example:
        draftdesk seo article.yaml
    """
    article = ArticleForm.from_article(load_article_file(article_file))
    assessment = assess_article(article)
    logger.info("seo_command_completed", path=str(article_file), score=assessment.score)
    console.print(render_assessment(assessment))


async def _run_suggest(config: ConfigManager, article: dict[str, Any], field: str, accept: bool) -> None:
    from draftdesk.services.ai_actions import LLMArticleGenerator
    from draftdesk.services.edit_session import EditSession
    from draftdesk.services.llm_client import LLMClient

    generator = LLMArticleGenerator(LLMClient(config.llm), config.editor)

    async with EditSession(
        article=article, article_id=article.get("id"), ai=generator, editor=config.editor
    ) as session:
        with console.status(f"Generating a suggestion for [bold]{field}[/bold]..."):
            suggestion = await session.draft_actions.handle_regenerate_field(field)

        if suggestion is None:
            last = session.notifier.last
            reason = last.description or last.title if last else "No suggestion was produced."
            raise click.ClickException(reason)

        console.print(f"[bold]Suggested {field}:[/bold] {suggestion}")

        if accept:
            await session.draft_actions.handle_accept_field(field)
            console.print(f"[green]Accepted.[/green] {field} = {getattr(session.working, field)!r}")
            console.print(render_assessment(session.seo_assessment))


@cli.command()
@click.argument("field", type=click.Choice(["title", "seo_title", "excerpt", "seo_description"]))
@click.argument("article_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--accept", is_flag=True, help="Accept the suggestion and show the updated SEO score")
@click.pass_context
def suggest(ctx: click.Context, field: str, article_file: Path, accept: bool):
    """
    Ask the LLM for a new value of FIELD in an article file.

    Examples:
        draftdesk suggest excerpt article.yaml
        draftdesk suggest seo_description article.yaml --accept
    """
    logger.info("suggest_command_started", field=field, path=str(article_file))
    article = load_article_file(article_file)
    config = load_config(ctx.obj["config_path"])

    asyncio.run(_run_suggest(config, article, field, accept))
    logger.info("suggest_command_completed", field=field)


if __name__ == "__main__":
    cli()
