"""CLI entry point for doctriage."""

import logging
import sys
from pathlib import Path

import click
import yaml
from pydantic import ValidationError

from .adapters.extract import PdfPlumberAdapter
from .adapters.registry import create_registry
from .adapters.upload import create_uploader
from .config import Settings, load_settings
from .domain.due_dates import compute_due_dates, parse_competence
from .domain.models import BatchResult, InputFile
from .domain.services import BatchService, iter_batch_files
from .errors import RegistryError
from .ports.upload import UploadPort

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = {".pdf", ".zip", ".png", ".jpg", ".jpeg"}


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def get_settings(ctx: click.Context) -> Settings:
    try:
        return load_settings(ctx.obj["config_path"])
    except ValidationError as e:
        raise click.ClickException(f"Invalid configuration:\n{e}") from e


def validate_competence(ctx: click.Context, param: click.Parameter, value: str) -> str:
    if parse_competence(value) is None:
        raise click.BadParameter("Competence must be MM/YYYY")
    return value.strip()


def collect_files(paths: tuple[Path, ...], recursive: bool) -> list[Path]:
    """Collect supported files from paths (files or directories), in order."""
    files: list[Path] = []
    for path in paths:
        if path.is_file():
            if path.suffix.lower() in SUPPORTED_SUFFIXES:
                files.append(path)
            continue
        pattern = "**/*" if recursive else "*"
        files.extend(
            p
            for p in sorted(path.glob(pattern))
            if p.is_file() and p.suffix.lower() in SUPPORTED_SUFFIXES
        )
    return files


def read_input_files(paths: list[Path]) -> list[InputFile]:
    return [InputFile(name=p.name, content=p.read_bytes()) for p in paths]


def create_batch_service(settings: Settings, uploader: UploadPort | None = None) -> BatchService:
    """Create a BatchService with configured adapters."""
    return BatchService(
        extractor=PdfPlumberAdapter(),
        uploader=uploader,
        keyword_map=settings.classification.category_keywords,
        priority_categories=settings.classification.priority_categories,
        rules=settings.due_dates.rule_table(),
        holidays=settings.due_dates.holiday_table(),
    )


def batch_report(result: BatchResult) -> dict:
    """Plain-data view of a batch result for YAML output."""
    return {
        "total": result.total,
        "accepted": result.accepted,
        "filtered": result.filtered,
        "cancelled": result.cancelled,
        "documents": [
            {
                "file_name": doc.file_name,
                "server_filename": doc.server_filename,
                "company_id": doc.company_id,
                "company_name": doc.company_name,
                "category": doc.category,
                "competence": doc.competence,
                "due_date": doc.due_date.isoformat() if doc.due_date else None,
            }
            for doc in result.documents
        ],
        "filtered_files": [
            {"file_name": r.file_name, "reason": r.reason}
            for r in result.results
            if not r.accepted
        ],
        "errors": list(result.errors),
    }


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option("-c", "--config", type=click.Path(exists=True), help="Config file path")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config: str | None) -> None:
    """Doctriage - accounting document classifier."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config) if config else None


@cli.command("due-dates")
@click.argument("competence", callback=validate_competence)
@click.pass_context
def due_dates(ctx: click.Context, competence: str) -> None:
    """Show due dates of every category for a competence (MM/YYYY)."""
    settings = get_settings(ctx)
    dates = compute_due_dates(
        competence,
        settings.due_dates.rule_table(),
        settings.due_dates.holiday_table(),
    )
    for category, due in dates.items():
        click.echo(f"{category}: {due}")


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.option("--recursive/--no-recursive", default=False, help="Descend into directories")
@click.pass_context
def classify(ctx: click.Context, paths: tuple[Path, ...], recursive: bool) -> None:
    """Detect category and company of files without uploading."""
    settings = get_settings(ctx)
    try:
        companies = create_registry(settings.registry).get_companies()
    except RegistryError as e:
        raise click.ClickException(str(e)) from e

    service = create_batch_service(settings)
    files = read_input_files(collect_files(paths, recursive))

    for file in iter_batch_files(files):
        found = service.classify(file, companies)
        category = found.category or "-"
        company = found.company.name if found.company else "-"
        click.echo(f"{file.name}: category={category} company={company}")


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.option("--competence", required=True, callback=validate_competence, help="MM/YYYY")
@click.option("--category", "categories", multiple=True, help="Only accept this category")
@click.option("--company", "company_ids", multiple=True, type=int, help="Only accept this company id")
@click.option("--recursive/--no-recursive", default=False, help="Descend into directories")
@click.option("--report", type=click.Path(dir_okay=False, path_type=Path), help="Write YAML report")
@click.pass_context
def process(
    ctx: click.Context,
    paths: tuple[Path, ...],
    competence: str,
    categories: tuple[str, ...],
    company_ids: tuple[int, ...],
    recursive: bool,
    report: Path | None,
) -> None:
    """Classify, date and upload a batch of documents."""
    settings = get_settings(ctx)

    files = collect_files(paths, recursive)
    if not files:
        click.echo("No files to process")
        return

    try:
        companies = create_registry(settings.registry).get_companies()
    except RegistryError as e:
        raise click.ClickException(str(e)) from e

    service = create_batch_service(settings, create_uploader(settings.upload))
    result = service.process_batch(
        read_input_files(files),
        competence,
        companies,
        category_filter=categories,
        company_filter=company_ids,
    )

    for doc in result.documents:
        due = doc.due_date.strftime("%d/%m/%Y") if doc.due_date else "-"
        click.echo(f"✓ {doc.file_name}: {doc.company_name} / {doc.category} (due {due})")
    for r in result.results:
        if not r.accepted:
            click.echo(f"✗ {r.file_name}: {r.reason}", err=True)
    for error in result.errors:
        click.echo(f"Error: {error}", err=True)

    click.echo(
        f"\nProcessed: {result.total} total, "
        f"{result.accepted} accepted, {result.filtered} filtered"
    )

    if report:
        report.write_text(
            yaml.dump(batch_report(result), default_flow_style=False, allow_unicode=True),
            encoding="utf-8",
        )
        click.echo(f"Report: {report}")

    if result.accepted == 0 and result.filtered > 0:
        sys.exit(1)


if __name__ == "__main__":
    cli()
