# Rich console output: summarize a converted SARIF run for terminal display.

from __future__ import annotations

from typing import Optional, Sequence
from urllib.parse import unquote

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from shellcheck_sarif.sarif.models import SarifLog, SarifResult, SarifRule

# SARIF level → Rich style
LEVEL_STYLE = {
    "error": "bold red",
    "warning": "bold yellow",
    "note": "bold blue",
}

DEFAULT_LEVEL_STYLE = "bold white"


def _level_style(level: str) -> str:
    return LEVEL_STYLE.get(level.lower(), DEFAULT_LEVEL_STYLE)


def _result_path(result: SarifResult) -> str:
    if not result.locations:
        return "-"
    return unquote(result.locations[0].physicalLocation.artifactLocation.uri) or "-"


def _result_position(result: SarifResult) -> tuple[int, int]:
    if not result.locations:
        return 0, 0
    region = result.locations[0].physicalLocation.region
    return region.startLine, region.startColumn


def print_results(
    log: SarifLog,
    verbose: bool = False,
    console: Optional[Console] = None,
) -> None:
    """
    Print converted results grouped by file, colored by SARIF level.

    Files and results keep the order they were reported in. If verbose, the
    help link of every rule seen in a file is listed under its table.
    Writes to stderr unless a console is given, so stdout stays free for SARIF.
    """
    if console is None:
        console = Console(stderr=True)

    run = log.run
    if not run.results:
        console.print(
            Panel(
                "[green]No findings to convert.[/green]",
                title="shellcheck-sarif",
                border_style="green",
                box=box.ROUNDED,
            )
        )
        return

    by_file: dict[str, list[SarifResult]] = {}
    for result in run.results:
        by_file.setdefault(_result_path(result), []).append(result)

    rules = run.tool.driver.rules
    for path, file_results in by_file.items():
        console.print()
        console.print(Panel(
            f"[bold cyan]{escape(path)}[/bold cyan]",
            box=box.SIMPLE_HEAD,
            border_style="blue",
            padding=(0, 1),
        ))

        table = Table(
            show_header=True,
            header_style="bold magenta",
            box=box.SIMPLE,
            padding=(0, 1),
            expand=False,
        )
        table.add_column("Line", justify="right", style="dim", width=5)
        table.add_column("Col", justify="right", style="dim", width=4)
        table.add_column("Level", width=8)
        table.add_column("Rule", width=8)
        table.add_column("Fix", width=3)
        table.add_column("Message", style="white")

        for result in file_results:
            line, column = _result_position(result)
            table.add_row(
                str(line),
                str(column),
                Text(result.level.upper(), style=_level_style(result.level)),
                Text(result.ruleId, style="dim"),
                "yes" if result.fixes else "",
                Text(result.message.text),
            )

        console.print(table)

        if verbose:
            seen: set[int] = set()
            for result in file_results:
                if result.ruleIndex in seen:
                    continue
                seen.add(result.ruleIndex)
                rule = rules[result.ruleIndex]
                if rule.helpUri:
                    console.print(f"  [dim][Help][/dim] {rule.id} {escape(rule.helpUri)}")
            if seen:
                console.print()

    _print_rule_table(rules, run.results, console)
    _print_summary(run.results, console)


def _print_rule_table(
    rules: Sequence[SarifRule],
    results: Sequence[SarifResult],
    console: Console,
) -> None:
    """Print one row per rule with its default level and result count."""
    counts = [0] * len(rules)
    for result in results:
        counts[result.ruleIndex] += 1

    table = Table(
        title="Rules",
        show_header=True,
        header_style="bold cyan",
        box=box.ROUNDED,
        padding=(0, 1),
    )
    table.add_column("Rule", style="white")
    table.add_column("Default level", width=13)
    table.add_column("Results", justify="right", width=7)

    for rule, count in zip(rules, counts):
        level = rule.defaultConfiguration.level
        table.add_row(rule.id, Text(level, style=_level_style(level)), str(count))

    console.print()
    console.print(table)


def _print_summary(results: Sequence[SarifResult], console: Console) -> None:
    """Print a compact summary of results by level."""
    by_level: dict[str, int] = {}
    for result in results:
        by_level[result.level] = by_level.get(result.level, 0) + 1

    total = len(results)
    summary_parts = [f"[bold]{total} result{'s' if total != 1 else ''}[/bold]"]
    for level in ("error", "warning", "note"):
        if level in by_level:
            summary_parts.append(f"[{_level_style(level)}]{by_level[level]} {level}[/]")

    console.print()
    console.print(
        Panel(
            " | ".join(summary_parts),
            title="Summary",
            border_style="yellow" if total > 0 else "green",
            box=box.ROUNDED,
        )
    )
