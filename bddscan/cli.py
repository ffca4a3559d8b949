from __future__ import annotations

import importlib
import json
import sys
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.table import Table
from dotenv import load_dotenv

from .config import AppConfig
from .errors import BddScanError, ScenarioImportError
from .logging_config import init_logging
from .parsing.discovery import discover_scenarios
from .scanning.conventions import default_matchers, get_text_transform
from .scanning.scanner import default_scanner, scan_scenario


app = typer.Typer(add_completion=False, no_args_is_help=True)
console = Console()


def _load_config(verbose: bool) -> AppConfig:
    load_dotenv(override=False)
    config = AppConfig()
    if verbose:
        config.log_level = "DEBUG"
    init_logging(config.log_level)
    return config


def _load_scenario(target: str, app_dir: str) -> Any:
    module_name, sep, cls_name = target.partition(":")
    if not sep or not module_name or not cls_name:
        raise typer.BadParameter("Target must be <module>:<ClassName>")

    path = str(Path(app_dir).resolve())
    if path not in sys.path:
        sys.path.insert(0, path)

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ScenarioImportError(f"Could not import module '{module_name}': {exc}") from exc
    cls = getattr(module, cls_name, None)
    if not isinstance(cls, type):
        raise ScenarioImportError(f"'{cls_name}' is not a class in module '{module_name}'")
    try:
        return cls()
    except TypeError as exc:
        raise ScenarioImportError(f"Could not instantiate {target} without arguments: {exc}") from exc


@app.command()
def scan(
    target: str = typer.Argument(..., help="Scenario class as <module>:<ClassName>"),
    app_dir: str = typer.Option(".", help="Directory added to the import path before loading the target"),
    case: Optional[str] = typer.Option(None, help="Title case: identity, lower, upper, title or sentence"),
    include_fixtures: Optional[bool] = typer.Option(
        None, "--include-fixtures/--no-include-fixtures", help="Also list Context/Setup/TearDown methods"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print steps as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Scan a scenario class and list its steps without running them."""
    cfg = _load_config(verbose)
    if case:
        cfg.step_text_case = case
    if include_fixtures is not None:
        cfg.include_fixture_steps = include_fixtures

    try:
        transform = get_text_transform(cfg.step_text_case)
    except ValueError as exc:
        raise typer.BadParameter(str(exc))

    try:
        instance = _load_scenario(target, app_dir)
        scanner = default_scanner(transform, include_fixtures=cfg.include_fixture_steps)
        steps = scan_scenario(instance, scanner)
    except BddScanError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1)

    if as_json:
        console.print_json(json.dumps([s.to_dict() for s in steps]))
        return

    table = Table(title=f"Steps in {target}")
    table.add_column("Title")
    table.add_column("Order")
    table.add_column("Asserts")
    table.add_column("Reported")
    for step in steps:
        table.add_row(
            step.title,
            step.execution_order.name.lower(),
            "yes" if step.asserts else "no",
            "yes" if step.should_report else "no",
        )
    console.print(table)
    console.print(f"Found [bold]{len(steps)}[/bold] steps")


@app.command()
def discover(
    path: str = typer.Argument(".", help="Directory to search for scenario classes"),
    include_fixtures: Optional[bool] = typer.Option(
        None, "--include-fixtures/--no-include-fixtures", help="Count Context/Setup/TearDown methods as steps"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Find classes whose methods follow the Given/When/Then naming convention."""
    cfg = _load_config(verbose)
    if include_fixtures is not None:
        cfg.include_fixture_steps = include_fixtures
    root = Path(path).resolve()
    if not root.exists():
        raise typer.BadParameter(f"Path not found: {root}")

    console.print(f"[bold]Discovering scenarios in[/bold] {root}")
    matchers = default_matchers(include_fixtures=cfg.include_fixture_steps)
    symbols = discover_scenarios(root, matchers, ignore_globs=cfg.ignore_globs)

    table = Table(title="Scenarios")
    table.add_column("Target")
    table.add_column("Steps")
    table.add_column("File")
    for s in symbols:
        table.add_row(s.target, str(len(s.step_methods)), s.file_path)
    console.print(table)
    console.print(f"Found [bold]{len(symbols)}[/bold] scenario classes")


if __name__ == "__main__":  # pragma: no cover
    app()
