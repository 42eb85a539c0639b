"""
rulecheck CLI - check documents against plain-language rules.

Commands:
    rulecheck preview RULE [RULE...]        Interpret up to 3 rules
    rulecheck validate FILE [--rule R]...   Validate a PDF or text document
    rulecheck serve                         Run the HTTP API
    rulecheck version                       Show version
"""

import asyncio
import logging
import mimetypes
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import EngineConfig
from .engine import ComplianceEngine
from .errors import ConfirmationRequired, InputError
from .models import STATUS_CONFLICT, STATUS_ERROR, STATUS_RECOGNIZED
from .oracle import create_oracle

app = typer.Typer(help="Validate documents against plain-language compliance rules")
console = Console()

STATUS_STYLES = {
    STATUS_RECOGNIZED: "green",
    STATUS_CONFLICT: "red",
    STATUS_ERROR: "red",
}


def _build_engine(use_oracle: bool) -> ComplianceEngine:
    config = EngineConfig.from_env()
    if not use_oracle:
        config.oracle_enabled = False
    oracle = create_oracle() if config.oracle_enabled else None
    return ComplianceEngine(config, oracle=oracle)


def _guess_mime(path: Path) -> str:
    mime_type, _ = mimetypes.guess_type(path.name)
    return mime_type or ""


def _run_confirmed(make_call, assume_yes: bool):
    """Run an engine call, asking for confirmation if rules carry warnings."""
    try:
        return asyncio.run(make_call(assume_yes))
    except ConfirmationRequired as e:
        console.print("[yellow]Some rules need confirmation:[/yellow]")
        for rule, warning in e.warnings:
            console.print(f"  [bold]{rule}[/bold]: {warning}")
        if not typer.confirm("Process these rules anyway?"):
            raise typer.Exit(1)
        return asyncio.run(make_call(True))


# =============================================================================
# PREVIEW
# =============================================================================


@app.command()
def preview(
    rules: list[str] = typer.Argument(..., help="Rules to interpret (at most 3)"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Accept capitalization warnings"),
    oracle: bool = typer.Option(True, "--oracle/--no-oracle", help="Use the LLM oracle if configured"),
):
    """Show how each rule will be interpreted, and any conflicts between them."""
    engine = _build_engine(oracle)
    rules_text = "\n".join(rules)

    try:
        result = _run_confirmed(
            lambda confirm: engine.preview(rules_text, confirm_warnings=confirm), yes
        )
    except InputError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    table = Table(title="Rule Preview")
    table.add_column("Rule", style="bold")
    table.add_column("Status")
    table.add_column("Interpretation")
    for item in result.feedback:
        style = STATUS_STYLES.get(item.status, "yellow")
        table.add_row(item.original_rule, f"[{style}]{item.status}[/{style}]", item.interpretation)
    console.print(table)

    if result.has_conflicts:
        console.print(f"\n[bold red]{len(result.conflicts)} conflict(s) detected[/bold red]")
        for conflict in result.conflicts:
            first, second = conflict.conflicting_rules
            console.print(f'  "{conflict.word}": {first} <-> {second}')


# =============================================================================
# VALIDATE
# =============================================================================


@app.command()
def validate(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="PDF or .txt document"),
    rule: list[str] = typer.Option(None, "--rule", "-r", help="Custom rule (repeatable); defaults apply if omitted"),
    forbidden: Path = typer.Option(None, "--forbidden", "-f", exists=True, dir_okay=False, help=".txt list of forbidden words"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Accept capitalization warnings"),
    oracle: bool = typer.Option(True, "--oracle/--no-oracle", help="Use the LLM oracle if configured"),
):
    """Validate a document. Exits 1 if any rule fails."""
    engine = _build_engine(oracle)

    try:
        text = engine.read_document(file.read_bytes(), _guess_mime(file), file.name)
        words = None
        if forbidden is not None:
            words = engine.read_forbidden_words(
                forbidden.read_bytes(), _guess_mime(forbidden), forbidden.name
            )
        report = _run_confirmed(
            lambda confirm: engine.validate(
                text, rules=rule or None, forbidden_words=words, confirm_warnings=confirm
            ),
            yes,
        )
    except InputError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    table = Table(title=f"Validation: {file.name}")
    table.add_column("Rule", style="bold")
    table.add_column("Result")
    table.add_column("Details")
    for result in report.results:
        status = "[green]PASS[/green]" if result.passed else "[red]FAIL[/red]"
        table.add_row(result.rule, status, result.details or "")
    console.print(table)

    failed = sum(1 for r in report.results if not r.passed)
    if failed:
        console.print(f"\n[bold red]{failed} of {len(report.results)} rule(s) failed.[/bold red]")
        raise typer.Exit(1)
    console.print("\n[bold green]All rules passed![/bold green]")


# =============================================================================
# SERVE / VERSION
# =============================================================================


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(8000, help="Port"),
    log_level: str = typer.Option("info", help="Log level"),
):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    logging.basicConfig(level=log_level.upper())
    console.print(f"[bold blue]rulecheck API[/bold blue] on http://{host}:{port}")
    uvicorn.run(
        "rulecheck.api.gateway:create_app",
        factory=True,
        host=host,
        port=port,
        log_level=log_level,
    )


@app.command()
def version():
    """Show version."""
    console.print(f"rulecheck v{__version__}")


if __name__ == "__main__":
    app()
