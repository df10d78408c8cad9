"""
Typer CLI for formcraft.

Commands:
    formcraft types                       - List question types
    formcraft types cloze                 - Field contract of one type
    formcraft new "Title"                 - Create a draft form
    formcraft list                        - List forms
    formcraft show FORM_ID                - Preview a form
    formcraft question add FORM_ID TYPE   - Append a question
    formcraft question set FORM_ID 0 --field prompt="Name?"
    formcraft question move FORM_ID 2 0   - Reorder questions
    formcraft publish FORM_ID             - Open a form for responses
    formcraft lint FORM_ID                - Authoring warnings
    formcraft submit FORM_ID --answers '{"0": "Fox"}'
    formcraft responses FORM_ID           - Table of responses
    formcraft export FORM_ID -o out.csv   - Export responses as CSV
    formcraft serve                       - Run the API server

Storage backend and validation policy come from FORMCRAFT_* settings.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, NoReturn, Optional

import typer
from loguru import logger
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from config import get_settings
from formcraft import __version__
from formcraft.core.errors import FormcraftError, MalformedQuestionShape, ValidationFailed
from formcraft.core.export import export_filename
from formcraft.core.formatter import format_answer
from formcraft.core.forms import Form
from formcraft.db import create_repositories
from formcraft.logging_setup import configure_logging
from formcraft.questions import HANDLERS, get_handler, shape_of
from formcraft.services import FormService

app = typer.Typer(help="formcraft CLI: author forms, collect responses, export CSV")
question_app = typer.Typer(help="Question authoring")
app.add_typer(question_app, name="question")

console = Console()


def _service() -> FormService:
    settings = get_settings()
    forms, responses = create_repositories(settings)
    return FormService(forms, responses, policy=settings.validation_policy)


def _fail(exc: FormcraftError) -> NoReturn:
    rprint(f"[red]✗[/red] {exc}")
    if isinstance(exc, MalformedQuestionShape):
        for problem in exc.problems:
            rprint(f"  [dim]-[/dim] {problem}")
    if isinstance(exc, ValidationFailed):
        for index, reason in exc.reasons.items():
            rprint(f"  [yellow]Q{index + 1}[/yellow] {reason}")
    raise typer.Exit(code=1)


def _parse_fields(pairs: list[str]) -> dict[str, Any]:
    """``key=value`` pairs; values are parsed as JSON when possible."""
    fields: dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected key=value, got {pair!r}", param_hint="--field")
        try:
            fields[key.strip()] = json.loads(raw)
        except json.JSONDecodeError:
            fields[key.strip()] = raw
    return fields


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show info-level logs"),
) -> None:
    configure_logging(get_settings(), level="INFO" if verbose else "WARNING")


# ========================================
# REGISTRY
# ========================================


@app.command("types")
def list_types(
    tag: Optional[str] = typer.Argument(None, help="Show the fields of one type"),
) -> None:
    """List question types, or the field contract of one type."""
    if tag is None:
        table = Table(title="Question Types")
        table.add_column("Tag", style="cyan")
        table.add_column("Label")
        table.add_column("Fields", style="dim")
        for question_type, handler in HANDLERS.items():
            table.add_row(question_type.value, handler.label, ", ".join(handler.shape().field_names()))
        console.print(table)
        return

    try:
        shape = shape_of(tag)
    except FormcraftError as e:
        _fail(e)
    table = Table(title=f"{shape.label} ({shape.type.value})")
    table.add_column("Field", style="cyan")
    table.add_column("Kind")
    table.add_column("Required")
    table.add_column("Constraints", style="dim")
    for spec in shape.fields:
        constraints = ", ".join(f"{k}={v}" for k, v in spec.constraints.items())
        table.add_row(spec.name, spec.kind, "yes" if spec.required else "", constraints)
    console.print(table)


# ========================================
# FORMS
# ========================================


@app.command("new")
def new_form(
    title: str = typer.Argument(..., help="Form title"),
    description: Optional[str] = typer.Option(None, "--description", "-d"),
) -> None:
    """Create a draft form and print its id."""
    try:
        form = _service().save_form(Form(title=title, description=description))
    except ValueError as e:
        rprint(f"[red]✗[/red] {e}")
        raise typer.Exit(code=1)
    rprint(f"[green]✓[/green] Created form [bold]{form.title}[/bold]")
    print(form.id)


@app.command("list")
def list_forms() -> None:
    """List forms, newest first."""
    forms = _service().list_forms()
    if not forms:
        rprint("[dim]No forms yet[/dim]")
        return
    table = Table(title=f"Forms ({len(forms)})")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Title", style="cyan")
    table.add_column("Questions", justify="right")
    table.add_column("Status")
    for form in forms:
        status = "[green]published[/green]" if form.is_published else "[yellow]draft[/yellow]"
        table.add_row(form.id, form.title, str(len(form.questions)), status)
    console.print(table)


@app.command("show")
def show_form(form_id: str = typer.Argument(..., help="Form id")) -> None:
    """Preview a form as respondents would see it."""
    try:
        form = _service().form_by_id(form_id)
    except FormcraftError as e:
        _fail(e)

    subtitle = "published" if form.is_published else "draft"
    console.print(
        Panel(
            form.description or "",
            title=f"[bold]{form.title}[/bold]",
            subtitle=f"[dim]{subtitle}[/dim]",
            border_style="magenta",
        )
    )
    if form.header_image_ref:
        console.print(f"[dim]Header image: {form.header_image_ref}[/dim]")
    for index, question in enumerate(form.questions):
        console.print(f"[dim]Q{index + 1}[/dim]")
        get_handler(question.type).render(question, console)


@app.command("publish")
def publish_form(form_id: str = typer.Argument(..., help="Form id")) -> None:
    """Open a form for responses."""
    try:
        form = _service().publish(form_id)
    except FormcraftError as e:
        _fail(e)
    rprint(f"[green]✓[/green] {form.title} is published")


@app.command("lint")
def lint_form(form_id: str = typer.Argument(..., help="Form id")) -> None:
    """Show authoring warnings. Warnings never block saving or publishing."""
    try:
        report = _service().form_by_id(form_id).lint()
    except FormcraftError as e:
        _fail(e)
    if not report:
        rprint("[green]✓[/green] No warnings")
        return
    for index, warnings in report.items():
        for warning in warnings:
            rprint(f"[yellow]⚠[/yellow] Q{index + 1}: {warning}")


@app.command("delete")
def delete_form(
    form_id: str = typer.Argument(..., help="Form id"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a form."""
    if not yes:
        typer.confirm(f"Delete form {form_id}?", abort=True)
    try:
        _service().delete_form(form_id)
    except FormcraftError as e:
        _fail(e)
    rprint("[green]✓[/green] Deleted")


# ========================================
# QUESTION COMMANDS
# ========================================


@question_app.command("add")
def add_question(
    form_id: str = typer.Argument(..., help="Form id"),
    question_type: str = typer.Argument(..., help="Question type tag"),
    field: list[str] = typer.Option([], "--field", "-f", help="key=value (JSON values allowed)"),
) -> None:
    """Append a question of the given type."""
    try:
        form, question = _service().add_question(form_id, question_type, _parse_fields(field))
    except FormcraftError as e:
        _fail(e)
    rprint(f"[green]✓[/green] Added {question.type.value} question as Q{len(form.questions)}")


@question_app.command("set")
def set_question(
    form_id: str = typer.Argument(..., help="Form id"),
    index: int = typer.Argument(..., help="Question index (0-based)"),
    field: list[str] = typer.Option(..., "--field", "-f", help="key=value (JSON values allowed)"),
) -> None:
    """Update fields of a question. Setting ``type`` changes its type."""
    try:
        _service().update_question(form_id, index, _parse_fields(field))
    except FormcraftError as e:
        _fail(e)
    rprint(f"[green]✓[/green] Updated Q{index + 1}")


@question_app.command("delete")
def delete_question(
    form_id: str = typer.Argument(..., help="Form id"),
    index: int = typer.Argument(..., help="Question index (0-based)"),
) -> None:
    try:
        _service().delete_question(form_id, index)
    except FormcraftError as e:
        _fail(e)
    rprint(f"[green]✓[/green] Deleted Q{index + 1}")


@question_app.command("duplicate")
def duplicate_question(
    form_id: str = typer.Argument(..., help="Form id"),
    index: int = typer.Argument(..., help="Question index (0-based)"),
) -> None:
    """Append a copy of a question."""
    try:
        form = _service().duplicate_question(form_id, index)
    except FormcraftError as e:
        _fail(e)
    rprint(f"[green]✓[/green] Copied Q{index + 1} to Q{len(form.questions)}")


@question_app.command("move")
def move_question(
    form_id: str = typer.Argument(..., help="Form id"),
    from_index: int = typer.Argument(..., help="Current index (0-based)"),
    to_index: int = typer.Argument(..., help="New index (0-based)"),
) -> None:
    try:
        _service().move_question(form_id, from_index, to_index)
    except FormcraftError as e:
        _fail(e)
    rprint(f"[green]✓[/green] Moved Q{from_index + 1} to Q{to_index + 1}")


# ========================================
# RESPONSES
# ========================================


@app.command("submit")
def submit(
    form_id: str = typer.Argument(..., help="Form id"),
    answers: str = typer.Option("{}", "--answers", "-a", help='JSON object: {"<index>": value}'),
    name: Optional[str] = typer.Option(None, "--name", help="Respondent name"),
    email: Optional[str] = typer.Option(None, "--email", help="Respondent email"),
) -> None:
    """Submit a response (for testing forms from the terminal)."""
    try:
        parsed = json.loads(answers)
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"invalid JSON: {e}", param_hint="--answers")
    if not isinstance(parsed, dict):
        raise typer.BadParameter("expected a JSON object", param_hint="--answers")

    user_info = {"name": name, "email": email} if name or email else None
    try:
        response = _service().submit_response(form_id, parsed, user_info=user_info)
    except FormcraftError as e:
        _fail(e)
    except ValueError as e:
        rprint(f"[red]✗[/red] {e}")
        raise typer.Exit(code=1)
    rprint("[green]✓[/green] Response recorded")
    print(response.id)


@app.command("responses")
def list_responses(form_id: str = typer.Argument(..., help="Form id")) -> None:
    """Show a form's responses in submission order."""
    service = _service()
    try:
        form = service.form_by_id(form_id)
    except FormcraftError as e:
        _fail(e)
    responses = service.responses_for_form(form_id)
    if not responses:
        rprint("[dim]No responses yet[/dim]")
        return

    table = Table(title=f"{form.title} ({len(responses)} responses)")
    table.add_column("Submitted", style="dim")
    table.add_column("Respondent", style="cyan")
    for index, question in enumerate(form.questions):
        table.add_column(f"Q{index + 1}", overflow="fold")
    for response in responses:
        cells = [
            format_answer(response.answer_for(index), question.type)
            for index, question in enumerate(form.questions)
        ]
        table.add_row(
            response.submitted_at.strftime("%Y-%m-%d %H:%M"),
            response.respondent_label(),
            *cells,
        )
    console.print(table)


@app.command("export")
def export_responses(
    form_id: str = typer.Argument(..., help="Form id"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Default: <title>_responses.csv"),
) -> None:
    """Export responses to CSV."""
    try:
        form, payload = _service().export_csv(form_id)
    except FormcraftError as e:
        _fail(e)
    target = output or Path(export_filename(form))
    target.write_bytes(payload)
    logger.info(f"Wrote {len(payload)} bytes to {target}")
    rprint(f"[green]✓[/green] Exported responses to {target}")


# ========================================
# SERVER
# ========================================


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Default: api_host setting"),
    port: Optional[int] = typer.Option(None, "--port", help="Default: api_port setting"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on code changes"),
) -> None:
    """Run the REST API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "formcraft.api.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@app.command("version")
def show_version() -> None:
    """Show version information."""
    rprint(f"[bold]formcraft[/bold] v{__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
