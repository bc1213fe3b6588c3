"""
CLI entry point for pundit.

Commands:
    inspect     Show which checks a subject type's policy grants or denies
    doctor      Verify that every entry of a policy map loads and is complete

The CLI is a diagnostic aid only. Authorization itself happens through
the Python API.
"""

import json
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from rich.console import Console
from rich.table import Table

from pundit import __version__
from pundit.errors import PunditError
from pundit.policy import (
    PERMISSION_ACTIONS,
    has_scope,
    missing_actions,
    overridden_actions,
)
from pundit.registry import PolicyRegistry, import_object
from pundit.schema import load_config

app = typer.Typer(
    name="pundit",
    help="Inspect and verify convention-based authorization policies.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold]pundit[/bold] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """
    pundit - Convention-based authorization helpers.
    """
    pass


def _load_registry(config_path: Path | None) -> PolicyRegistry:
    if config_path is None:
        return PolicyRegistry()
    try:
        return PolicyRegistry.from_config(load_config(config_path))
    except PunditError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from e


def _check_entry(registry: PolicyRegistry, subject_path: str) -> dict[str, Any]:
    """Resolve one subject type and describe its policy."""
    check: dict[str, Any] = {
        "subject": subject_path,
        "ok": False,
        "policy": None,
        "overridden": [],
        "missing": [],
        "scope": False,
        "message": "",
    }

    try:
        subject_cls = import_object(subject_path)
    except (ImportError, AttributeError) as e:
        check["message"] = f"Cannot import subject: {e}"
        return check

    if not isinstance(subject_cls, type):
        check["message"] = "Subject path does not name a class"
        return check

    check["policy"] = registry.identifier(subject_cls)
    policy = registry.resolve(subject_cls)
    if policy is None:
        check["message"] = f"{check['policy']} is not defined"
        return check

    check["overridden"] = overridden_actions(policy)
    check["missing"] = missing_actions(policy)
    check["scope"] = has_scope(policy)
    if check["missing"]:
        check["message"] = f"Missing checks: {', '.join(check['missing'])}"
    else:
        check["ok"] = True
        check["message"] = "OK"
    return check


@app.command()
def inspect(
    subject_path: Annotated[
        str,
        typer.Argument(help="Import path of the subject class, e.g. app.models.Post"),
    ],
    config_path: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="Path to a policy map YAML file.",
            exists=True,
            readable=True,
            resolve_path=True,
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output results in JSON format.",
        ),
    ] = False,
) -> None:
    """
    Show which checks a subject type's policy overrides.

    Example:
        $ pundit inspect app.models.Post
    """
    registry = _load_registry(config_path)
    check = _check_entry(registry, subject_path)

    if json_output:
        print(json.dumps(check, indent=2))
        raise typer.Exit(code=0 if check["ok"] else 1)

    if check["policy"] is None or (not check["ok"] and not check["missing"]):
        console.print(f"[red]✗[/red] {check['message']}")
        raise typer.Exit(code=1)

    console.print(f"[bold]{check['policy']}[/bold]", soft_wrap=True)
    table = Table()
    table.add_column("Check", style="cyan")
    table.add_column("Behavior")

    for name in PERMISSION_ACTIONS:
        if name in check["missing"]:
            table.add_row(name, "[red]missing[/red]")
        elif name in check["overridden"]:
            table.add_row(name, "[green]overridden[/green]")
        else:
            table.add_row(name, "[dim]default deny[/dim]")
    table.add_row("scope", "[green]defined[/green]" if check["scope"] else "[dim]not defined[/dim]")

    console.print(table)
    raise typer.Exit(code=0 if check["ok"] else 1)


@app.command()
def doctor(
    config_path: Annotated[
        Path,
        typer.Option(
            "--config",
            "-c",
            help="Path to a policy map YAML file.",
            exists=True,
            readable=True,
            resolve_path=True,
        ),
    ],
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output results in JSON format.",
        ),
    ] = False,
) -> None:
    """
    Verify every entry of a policy map.

    Each subject is imported, its policy loaded, and the policy checked
    for all seven standard checks.

    Example:
        $ pundit doctor --config policies.yaml
    """
    registry = _load_registry(config_path)
    checks = [_check_entry(registry, subject) for subject in registry.list_policies()]
    all_ok = all(check["ok"] for check in checks)

    if json_output:
        output = {
            "ok": all_ok,
            "version": __version__,
            "checks": checks,
        }
        print(json.dumps(output, indent=2))
    else:
        console.print(f"[bold]pundit doctor[/bold] v{__version__}")
        console.print()

        if not checks:
            console.print("[yellow]No policies in the policy map.[/yellow]")

        for check in checks:
            icon = "[green]✓[/green]" if check["ok"] else "[red]✗[/red]"
            policy = check["policy"] or ""
            if check["ok"]:
                console.print(f"{icon} {check['subject']}: [dim]{policy}[/dim] - {check['message']}")
            else:
                console.print(f"{icon} {check['subject']}: [dim]{policy}[/dim]")
                console.print(f"    [red]{check['message']}[/red]")

        console.print()
        if all_ok:
            console.print("[green]All checks passed![/green]")
        else:
            console.print("[yellow]Some checks failed. See above for details.[/yellow]")

    raise typer.Exit(code=0 if all_ok else 1)


if __name__ == "__main__":
    app()
