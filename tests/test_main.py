from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from taskfilter import main
from taskfilter.domain.filters import FilterCondition, FilterGroup, serialize_query

runner = CliRunner()


class _EmptyRepository:
    def list_views(self) -> list:
        return []


@pytest.fixture()
def init_calls(monkeypatch) -> list[object]:
    calls: list[object] = []
    monkeypatch.setattr(main, "setup_logging", lambda *args, **kwargs: None)
    monkeypatch.setattr(main, "init_db", lambda bind=None: calls.append(bind))
    monkeypatch.setattr(main, "SavedViewRepository", _EmptyRepository)
    return calls


@pytest.fixture()
def query_file(tmp_path: Path) -> Path:
    query = FilterGroup(
        id="root",
        children=(FilterCondition(id="c1", property="status", operator="is", value="open"),),
    )
    path = tmp_path / "query.json"
    path.write_text(serialize_query(query), encoding="utf-8")
    return path


def _tasks_file(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "tasks.json"
    path.write_text(content, encoding="utf-8")
    return path


def test_run_prints_matches_without_touching_the_database(
    init_calls, query_file: Path, tmp_path: Path
) -> None:
    tasks = [
        {"path": "a.md", "status": "open"},
        {"path": "b.md", "status": "done", "blockedBy": [{"uid": "a.md"}]},
    ]
    tasks_file = _tasks_file(tmp_path, json.dumps(tasks))

    result = runner.invoke(main.app, ["run", str(query_file), str(tasks_file)])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == ["a.md"]
    assert init_calls == []


def test_validate_does_not_touch_the_database(init_calls, query_file: Path) -> None:
    result = runner.invoke(main.app, ["validate", str(query_file)])
    assert result.exit_code == 0, result.output
    assert init_calls == []


def test_views_commands_initialize_the_database(init_calls) -> None:
    result = runner.invoke(main.app, ["views", "list"])
    assert result.exit_code == 0, result.output
    assert init_calls == [None]


def test_run_rejects_malformed_json_tasks_file(
    init_calls, query_file: Path, tmp_path: Path
) -> None:
    tasks_file = _tasks_file(tmp_path, "[{")
    result = runner.invoke(main.app, ["run", str(query_file), str(tasks_file)])
    assert result.exit_code == 2
    assert "not valid JSON" in result.output
    assert not isinstance(result.exception, json.JSONDecodeError)


def test_run_rejects_dependency_without_uid(
    init_calls, query_file: Path, tmp_path: Path
) -> None:
    tasks_file = _tasks_file(tmp_path, json.dumps([{"path": "a.md", "blockedBy": [{}]}]))
    result = runner.invoke(main.app, ["run", str(query_file), str(tasks_file)])
    assert result.exit_code == 2
    assert "needs a uid" in result.output


def test_run_rejects_non_object_task(init_calls, query_file: Path, tmp_path: Path) -> None:
    tasks_file = _tasks_file(tmp_path, json.dumps(["a.md"]))
    result = runner.invoke(main.app, ["run", str(query_file), str(tasks_file)])
    assert result.exit_code == 2
    assert "must be a JSON object" in result.output
