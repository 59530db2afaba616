"""Модуль вывода результатов аудита."""

import json
from pathlib import Path
from typing import Literal, Optional

import pandas as pd
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from src.models import Classification, ClassificationResult


console = Console()

CLASS_STYLES = {
    Classification.BASH_REPLACEABLE: "red",
    Classification.FREQUENCY_EXCESSIVE: "yellow",
    Classification.MODEL_DOWNGRADE: "cyan",
    Classification.RIGHT_SIZED: "green",
}

CLASS_ICONS = {
    Classification.BASH_REPLACEABLE: "🔧",
    Classification.FREQUENCY_EXCESSIVE: "⚡",
    Classification.MODEL_DOWNGRADE: "📉",
    Classification.RIGHT_SIZED: "✅",
}


def _by_savings(results: list[ClassificationResult]) -> list[ClassificationResult]:
    # sorted() is stable, so equal savings keep input order
    return sorted(results, key=lambda r: r.estimated_savings_per_day, reverse=True)


def is_actionable(result: ClassificationResult, min_savings: float) -> bool:
    return (
        result.classification != Classification.RIGHT_SIZED
        and result.estimated_savings_per_day >= min_savings
    )


def split_results(
    results: list[ClassificationResult],
    min_savings: float,
) -> tuple[list[ClassificationResult], list[ClassificationResult]]:
    """Split into (actionable, ok), both sorted by descending daily savings."""
    ordered = _by_savings(results)
    actionable = [r for r in ordered if is_actionable(r, min_savings)]
    ok = [r for r in ordered if not is_actionable(r, min_savings)]
    return actionable, ok


def total_monthly_savings(actionable: list[ClassificationResult]) -> float:
    return sum(r.estimated_savings_per_month for r in actionable)


def display_report(
    results: list[ClassificationResult],
    min_savings: float,
    out: Optional[Console] = None,
) -> None:
    """Отобразить отчёт аудита в терминале."""
    out = out or console
    actionable, ok = split_results(results, min_savings)

    out.print("[bold]🔍 cronlint — Cron Job Audit[/bold]")
    out.rule(style="dim")
    out.print()

    if actionable:
        out.print(f"[bold]⚠️  Action Required ({len(actionable)} jobs)[/bold]")
        out.print()
        for r in actionable:
            style = CLASS_STYLES[r.classification]
            icon = CLASS_ICONS[r.classification]
            out.print(f"{icon} [bold {style}]{escape(r.name)}[/bold {style}] [dim]({escape(r.schedule)})[/dim]")
            out.print(
                f"   [{style}]{r.classification.value}[/{style}] · model: {escape(r.model)} · "
                f"{r.runs_per_day:g} runs/day · ${r.cost_per_day:.2f}/day"
            )
            out.print(f"   💡 {escape(r.recommendation or '')}")
            out.print(f"   💰 Save: [green]${r.estimated_savings_per_month:.2f}/month[/green]")
            out.print()

    if ok:
        out.print(f"[bold]✅ Right-Sized ({len(ok)} jobs)[/bold]")
        for r in ok:
            status = "" if r.enabled else " [dim]\\[disabled][/dim]"
            out.print(f"   {escape(r.name)}{status} · {escape(r.model)} · ${r.cost_per_day:.2f}/day")

    out.print()
    out.print(Panel(
        f"[bold]📊 Total potential savings:[/bold] "
        f"[bold green]${total_monthly_savings(actionable):.2f}/month[/bold green]",
        border_style="dim cyan",
        padding=(0, 2),
    ))


def display_explanation(
    result: ClassificationResult,
    matches: dict[str, list[str]],
    out: Optional[Console] = None,
) -> None:
    """Показать, почему задание получило свою классификацию."""
    out = out or console
    style = CLASS_STYLES[result.classification]

    out.print(f"[bold]{escape(result.name)}[/bold] [dim]({escape(result.id)})[/dim]")
    out.print(f"Verdict: [bold {style}]{result.classification.value}[/bold {style}]")
    if result.recommendation:
        out.print(f"💡 {escape(result.recommendation)}")
    out.print()

    table = Table(title="Intent signals", show_lines=True)
    table.add_column("Family", style="cyan")
    table.add_column("Score", style="yellow", justify="right")
    table.add_column("Matched patterns", style="dim")
    scores = {"bash": result.bash_score, "haiku": result.haiku_score, "ai": result.ai_score}
    for family, patterns in matches.items():
        table.add_row(
            family,
            str(scores.get(family, len(patterns))),
            escape("\n".join(patterns)) or "—",
        )
    out.print(table)

    out.print(
        f"Frequency: {result.runs_per_day:g} runs/day (from {result.frequency_source}) · "
        f"${result.avg_cost_per_run:.4f}/run · ${result.cost_per_day:.4f}/day"
    )


def results_to_records(results: list[ClassificationResult]) -> list[dict]:
    """camelCase dicts in input order."""
    return [r.model_dump(mode="json", by_alias=True) for r in results]


def results_to_json(results: list[ClassificationResult]) -> str:
    return json.dumps(results_to_records(results), ensure_ascii=False, indent=2)


def save_results(
    results: list[ClassificationResult],
    output_path: str,
    format: Literal["json", "csv"] = "json",
    out: Optional[Console] = None,
) -> Path:
    """
    Сохранить результаты аудита в файл.

    Args:
        results: Результаты классификации
        output_path: Путь к файлу
        format: Формат файла (json или csv)
        out: Консоль для сообщения о сохранении (stdout по умолчанию)

    Returns:
        Путь к сохраненному файлу
    """
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if format == "json":
        if not path.suffix:
            path = path.with_suffix(".json")
        path.write_text(results_to_json(results), encoding="utf-8")
    elif format == "csv":
        if not path.suffix:
            path = path.with_suffix(".csv")
        df = pd.DataFrame(results_to_records(results))
        df.to_csv(path, index=False, encoding="utf-8")
    else:
        raise ValueError(f"Unsupported format: {format}")

    (out or console).print(f"[green]Результаты сохранены в {path}[/green]")
    return path
