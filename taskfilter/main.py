from __future__ import annotations

import json
from pathlib import Path
from typing import NoReturn, Optional

import typer

from taskfilter.config import SETTINGS
from taskfilter.domain.entities import TaskRecord
from taskfilter.domain.errors import FilterError, FilterValidationError
from taskfilter.domain.filters import FilterGroup, FilterNode, deserialize_query
from taskfilter.infra.db import init_db
from taskfilter.infra.logging import setup_logging
from taskfilter.infra.repository import SavedViewRepository
from taskfilter.services.extractor import PropertyExtractor
from taskfilter.services.filter_service import FilterService
from taskfilter.services.status import StatusManager
from taskfilter.services.view_service import ViewService

app = typer.Typer(help="Evaluate task filter trees against task records.")
views_app = typer.Typer(help="Manage saved filter views.")
app.add_typer(views_app, name="views")


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, help="Override LOG_LEVEL."),
    log_file: bool = typer.Option(True, help="Also write to the rotating log file."),
) -> None:
    setup_logging(log_level, log_to_file=log_file)


def _load_query(path: Path) -> FilterNode:
    return deserialize_query(path.read_text(encoding="utf-8"))


def _load_tasks(path: Path) -> list[TaskRecord]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise typer.BadParameter(
            f"Tasks file is not valid JSON: {exc}", param_hint="TASKS_FILE"
        ) from exc
    if not isinstance(data, list):
        raise typer.BadParameter("Tasks file must contain a JSON array", param_hint="TASKS_FILE")

    tasks = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise typer.BadParameter(
                f"Task {index} must be a JSON object", param_hint="TASKS_FILE"
            )
        try:
            tasks.append(TaskRecord.from_dict(item))
        except (TypeError, ValueError) as exc:
            raise typer.BadParameter(f"Task {index}: {exc}", param_hint="TASKS_FILE") from exc
    return tasks


def _build_filters(completed_statuses: list[str] | None) -> FilterService:
    statuses = StatusManager.from_completed_values(
        completed_statuses or SETTINGS.completed_statuses
    )
    return FilterService(PropertyExtractor(status_resolver=statuses.is_task_completed))


def _fail(exc: FilterError) -> NoReturn:
    field = getattr(exc, "field", None)
    suffix = f" [{field}]" if field else ""
    typer.echo(f"Error: {exc}{suffix}", err=True)
    raise typer.Exit(code=1)


def _echo_matches(tasks: list[TaskRecord]) -> None:
    typer.echo(json.dumps([task.path or task.title for task in tasks], indent=2))


@app.command()
def validate(
    query_file: Path = typer.Argument(..., exists=True, dir_okay=False),
    lenient: bool = typer.Option(False, help="Allow in-progress conditions."),
) -> None:
    """Check QUERY_FILE for malformed or incomplete nodes."""
    try:
        FilterService().validate(_load_query(query_file), strict=not lenient)
    except FilterValidationError as exc:
        _fail(exc)
    typer.echo("ok")


@app.command()
def run(
    query_file: Path = typer.Argument(..., exists=True, dir_okay=False),
    tasks_file: Path = typer.Argument(..., exists=True, dir_okay=False),
    completed_status: Optional[list[str]] = typer.Option(
        None, "--completed-status", help="Status values counted as completed."
    ),
) -> None:
    """Print the tasks in TASKS_FILE that match QUERY_FILE."""
    filters = _build_filters(completed_status)
    try:
        query = _load_query(query_file)
        filters.validate(query, strict=False)
        _echo_matches(filters.filter_tasks(query, _load_tasks(tasks_file)))
    except FilterError as exc:
        _fail(exc)


def _view_service(completed_status: list[str] | None = None) -> ViewService:
    init_db()
    return ViewService(SavedViewRepository(), _build_filters(completed_status))


@views_app.command("save")
def save_view(
    name: str,
    query_file: Path = typer.Argument(..., exists=True, dir_okay=False),
) -> None:
    """Store QUERY_FILE under NAME, replacing any view with that name."""
    try:
        query = _load_query(query_file)
        if not isinstance(query, FilterGroup):
            raise FilterValidationError("Saved view query must be a group", "type")
        view = _view_service().save_view(name, query)
    except FilterError as exc:
        _fail(exc)
    typer.echo(f"saved {view.name} ({view.id})")


@views_app.command("list")
def list_views() -> None:
    for view in _view_service().list_views():
        typer.echo(f"{view.id}\t{view.name}\t{view.updated_at:%Y-%m-%d %H:%M}")


@views_app.command("run")
def run_view(
    name: str,
    tasks_file: Path = typer.Argument(..., exists=True, dir_okay=False),
    completed_status: Optional[list[str]] = typer.Option(None, "--completed-status"),
) -> None:
    """Print the tasks in TASKS_FILE matched by the saved view NAME."""
    try:
        _echo_matches(_view_service(completed_status).run_view(name, _load_tasks(tasks_file)))
    except FilterError as exc:
        _fail(exc)


@views_app.command("delete")
def delete_view(name: str) -> None:
    service = _view_service()
    view = service.get_by_name(name)
    if not view or not service.delete_view(view.id):
        typer.echo(f"No saved view named {name!r}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"deleted {name}")


if __name__ == "__main__":
    app()
