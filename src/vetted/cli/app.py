"""Typer CLI walking through the bundled example entities."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from vetted.config import get_settings
from vetted.domain import RejectionPolicy
from vetted.entity import EntityError, MutationResult, ValidationRejected
from vetted.models import Account, GradedStudent

from .deps import bootstrap, get_registry

app = typer.Typer(help="vetted command-line interface")
demo_app = typer.Typer(help="Walk through the example entities")
app.add_typer(demo_app, name="demo")

console = Console()

_ACCOUNT_OPS = {"deposit", "withdraw"}


@app.callback()
def main(
    env_file: Path | None = typer.Option(None, "--env-file", help="Read settings from this .env"),
) -> None:
    """Validated in-memory entities."""

    bootstrap(env_file)


def _parse_policy(value: str | None) -> RejectionPolicy | None:
    if value is None:
        return None
    try:
        return RejectionPolicy(value.lower())
    except ValueError as exc:
        choices = ", ".join(policy.value for policy in RejectionPolicy)
        raise typer.BadParameter(f"policy must be one of {choices}") from exc


def _parse_step(step: str) -> tuple[str, str]:
    op, sep, amount = step.partition("=")
    op = op.strip().lower()
    if not sep or op not in _ACCOUNT_OPS or not amount.strip():
        raise typer.BadParameter(f"expected deposit=AMOUNT or withdraw=AMOUNT, got {step!r}")
    return op, amount.strip()


def _outcome(result: MutationResult) -> str:
    if result.ok:
        return "ok"
    return f"rejected ({result.reason})"


@app.command("show-settings")
def show_settings() -> None:
    """Print the resolved application settings."""

    settings = get_settings()
    typer.echo("Environment:\t" + settings.environment)
    typer.echo("Rejection Policy:\t" + settings.rejection_policy.value)
    typer.echo("Strict Construction:\t" + str(settings.strict_construction).lower())
    typer.echo("Log Level:\t" + settings.log_level)


@app.command("describe")
def describe(kind: str) -> None:
    """Show the declared fields of a registered entity kind."""

    registry = get_registry()
    try:
        entity_type = registry.get(kind)
    except KeyError as exc:
        known = ", ".join(registry.kinds())
        raise typer.BadParameter(f"unknown kind {kind!r}; known kinds: {known}") from exc

    table = Table(title=f"{entity_type.__name__} fields")
    table.add_column("Field", style="cyan")
    table.add_column("Access", style="magenta")
    table.add_column("Rule", style="green")
    table.add_column("Default", style="yellow")
    for spec in entity_type.fields():
        default = escape(repr(spec.initial())) if spec.has_default else "[dim]required[/dim]"
        table.add_row(spec.name, spec.access.value, escape(spec.describe_rule()), default)
    console.print(table)

    derivations = entity_type.derivations()
    if derivations:
        names = ", ".join(derivation.name for derivation in derivations)
        console.print(f"Derived: {names}")


@demo_app.command("account")
def demo_account(
    account_id: str,
    steps: list[str] | None = typer.Argument(None, help="deposit=AMOUNT or withdraw=AMOUNT"),
    opening: str = typer.Option("0", help="Opening balance"),
    overdraft: str = typer.Option("0", help="Permitted overdraft"),
    policy: str | None = typer.Option(None, help="silent or raise"),
) -> None:
    """Apply deposits and withdrawals in order, reporting each outcome."""

    parsed = [_parse_step(step) for step in steps or []]
    try:
        account = Account(
            account_id,
            balance=opening,
            overdraft_limit=overdraft,
            policy=_parse_policy(policy),
        )
    except EntityError as exc:
        typer.echo(f"Cannot open account: {exc}")
        raise typer.Exit(code=1) from exc

    typer.echo(f"Opened {account.account_id} with balance {account.balance}")
    for op, amount in parsed:
        try:
            result = getattr(account, op)(amount)
        except ValidationRejected as exc:
            result = exc.result
        typer.echo(f"{op} {amount}: {_outcome(result)}, balance {account.balance}")
    typer.echo(f"Final balance: {account.balance}")


@demo_app.command("student")
def demo_student(
    name: str,
    scores: list[float] | None = typer.Option(None, "--score", "-s", help="Score to record"),
    policy: str | None = typer.Option(None, help="silent or raise"),
) -> None:
    """Record scores for a student and print the derived summary."""

    try:
        student = GradedStudent(name=name, policy=_parse_policy(policy))
    except EntityError as exc:
        typer.echo(f"Cannot create student: {exc}")
        raise typer.Exit(code=1) from exc

    for score in scores or []:
        try:
            result = student.add_score(score)
        except ValidationRejected as exc:
            result = exc.result
        typer.echo(f"score {score:g}: {_outcome(result)}")
    typer.echo(f"Scores: {', '.join(f'{score:g}' for score in student.scores) or '-'}")
    typer.echo(f"Average: {student.average:g}")
    typer.echo(f"Letter grade: {student.letter_grade}")


__all__ = ["app"]
