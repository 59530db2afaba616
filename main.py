"""Main module for cronlint, the cron job cost & intelligence auditor."""

import logging
import time
from datetime import datetime, timezone
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from src.audit import DEFAULT_PRICING, AuditEngine, PricingTable
from src.config import settings
from src.output import (
    display_explanation,
    display_report,
    results_to_json,
    save_results,
)
from src.storage import RunHistory, StorageError, load_jobs, load_pricing

__version__ = "0.1.0"

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(message)s",
    handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
)
logger = logging.getLogger(__name__)

app = typer.Typer(
    name="cronlint",
    help="🔍 Аудит cron-заданий: кому нужен AI, кто переплачивает",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)


def _fail(message: str) -> None:
    err_console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(code=1)


def _pricing(pricing_path: Optional[str]) -> PricingTable:
    if not pricing_path:
        return DEFAULT_PRICING
    return load_pricing(pricing_path)


def _run_audit(jobs_path: str, runs_dir: str, hours: int, pricing_path: Optional[str]):
    """Загрузить задания и классифицировать их."""
    try:
        pricing = _pricing(pricing_path)
        jobs = load_jobs(jobs_path)
    except StorageError as e:
        _fail(str(e))

    engine = AuditEngine(pricing=pricing, window_hours=hours)
    return engine.run(jobs, RunHistory(runs_dir), now=datetime.now(timezone.utc))


@app.command()
def audit(
    jobs: str = typer.Option(
        settings.jobs_path,
        "--jobs",
        "-j",
        help="Путь к jobs.json",
    ),
    runs: str = typer.Option(
        settings.runs_dir,
        "--runs",
        "-r",
        help="Директория с историей запусков (<jobId>.jsonl)",
    ),
    format: str = typer.Option(
        settings.output_format,
        "--format",
        "-f",
        help="Формат вывода (text/json)",
    ),
    hours: int = typer.Option(
        settings.window_hours,
        "--hours",
        min=1,
        help="Окно анализа в часах",
    ),
    min_savings: float = typer.Option(
        settings.min_savings,
        "--min-savings",
        min=0.0,
        help="Минимальная экономия в день ($), чтобы показать задание",
    ),
    pricing: Optional[str] = typer.Option(
        settings.pricing_path,
        "--pricing",
        help="JSON с ценами моделей ($ за 1M токенов)",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Сохранить результаты в файл",
    ),
    save_format: str = typer.Option(
        "json",
        "--save-format",
        help="Формат файла (json/csv)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Подробный лог",
    ),
):
    """Классифицировать задания и оценить возможную экономию."""
    start_time = time.perf_counter()
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if format not in ("text", "json"):
        _fail(f"unknown format '{format}' (expected text or json)")
    if save_format not in ("json", "csv"):
        _fail(f"unknown save format '{save_format}' (expected json or csv)")

    results = _run_audit(jobs, runs, hours, pricing)

    if format == "json":
        typer.echo(results_to_json(results))
    else:
        display_report(results, min_savings)

    if output:
        save_results(results, output, save_format, out=err_console)

    logger.debug(f"Audit finished in {time.perf_counter() - start_time:.2f}s")


@app.command()
def explain(
    job_id: str = typer.Argument(..., help="ID задания"),
    jobs: str = typer.Option(settings.jobs_path, "--jobs", "-j", help="Путь к jobs.json"),
    runs: str = typer.Option(settings.runs_dir, "--runs", "-r", help="Директория с историей"),
    hours: int = typer.Option(settings.window_hours, "--hours", min=1, help="Окно анализа в часах"),
    pricing: Optional[str] = typer.Option(settings.pricing_path, "--pricing", help="JSON с ценами"),
):
    """🔎 Объяснить классификацию одного задания."""
    try:
        table = _pricing(pricing)
        all_jobs = load_jobs(jobs)
    except StorageError as e:
        _fail(str(e))

    job = next((j for j in all_jobs if j.id == job_id), None)
    if job is None:
        _fail(f"job '{job_id}' not found in {jobs}")

    engine = AuditEngine(pricing=table, window_hours=hours)
    now = datetime.now(timezone.utc)
    result = engine.classify(job, RunHistory(runs)(job.id, engine.window_start(now)), now)
    display_explanation(result, engine.scorer.explain(job.intent_text))


@app.command()
def info():
    """Информация о приложении."""
    console.print("[bold]cronlint[/bold] — Cron Job Cost & Intelligence Auditor")
    console.print(f"Версия: {__version__}")
    console.print("\nКлассификации:")
    console.print("  • [red]bash-replaceable[/red] - задачу решит shell-скрипт")
    console.print("  • [yellow]frequency-excessive[/yellow] - запускается слишком часто")
    console.print("  • [cyan]model-downgrade[/cyan] - хватит более дешёвой модели")
    console.print("  • [green]right-sized[/green] - всё в порядке")
    console.print("\nИспользование:")
    console.print("  cronlint audit")
    console.print("  cronlint audit --hours 48 --format json")
    console.print("  cronlint audit --jobs ./jobs.json --runs ./runs -o report.csv --save-format csv")
    console.print("  cronlint explain <job-id>")


if __name__ == "__main__":
    app()
