"""Tests for the command-line interface."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from sevenday.cli import main
from sevenday.config import Config


@pytest.fixture
def runner(tmp_path):
    config = Config(tasks_file=str(tmp_path / "tasks.json"))
    with patch("sevenday.cli.load_config", return_value=config):
        yield CliRunner()


def _add(runner, *args):
    result = runner.invoke(main, ["add", *args])
    assert result.exit_code == 0, result.output
    return result


class TestCli:
    def test_add_and_list(self, runner):
        result = _add(runner, "Buy milk", "--day", "soon", "--time", "09:30")
        assert "Added task 1" in result.output

        result = runner.invoke(main, ["list"])
        assert result.exit_code == 0
        assert "### Soon" in result.output
        assert "09:30  Buy milk" in result.output

    def test_list_empty(self, runner):
        result = runner.invoke(main, ["list"])
        assert "No tasks." in result.output

    def test_list_json(self, runner):
        _add(runner, "Buy milk", "--day", "waiting")
        result = runner.invoke(main, ["list", "--json"])
        (category,) = json.loads(result.output)
        assert category["category"] == "Waiting"
        assert category["tasks"][0]["description"] == "Buy milk"

    def test_done_toggles(self, runner):
        _add(runner, "Buy milk")
        assert "completed" in runner.invoke(main, ["done", "1"]).output
        assert "reopened" in runner.invoke(main, ["done", "1"]).output

    def test_move(self, runner):
        _add(runner, "Buy milk")
        result = runner.invoke(main, ["move", "1", "friday"])
        assert result.exit_code == 0
        assert "moved to Friday" in result.output

    def test_move_into_completed_fails(self, runner):
        _add(runner, "Buy milk")
        result = runner.invoke(main, ["move", "1", "completed"])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_invalid_time(self, runner):
        result = runner.invoke(main, ["add", "Buy milk", "--time", "9am"])
        assert result.exit_code == 1
        assert "Invalid time of day" in result.output

    def test_reorder_and_unpin(self, runner):
        _add(runner, "first", "--day", "soon", "--time", "08:00")
        _add(runner, "second", "--day", "soon", "--time", "10:00")
        result = runner.invoke(main, ["reorder", "2", "0"])
        assert "Updated 1 task(s)." in result.output
        assert "(pinned)" in runner.invoke(main, ["list"]).output

        runner.invoke(main, ["unpin", "2"])
        assert "(pinned)" not in runner.invoke(main, ["list"]).output

    def test_remove_missing(self, runner):
        result = runner.invoke(main, ["remove", "9"])
        assert result.exit_code == 1
        assert "Task 9 not found" in result.output

    def test_next_reminder(self, runner):
        _add(runner, "Pills", "--time", "09:00", "--remind", "15")
        result = runner.invoke(main, ["next-reminder", "1"])
        assert result.exit_code == 0
        assert "08:45" in result.output

    def test_next_reminder_none(self, runner):
        _add(runner, "Pills")
        result = runner.invoke(main, ["next-reminder", "1"])
        assert "No reminder: task has no due time" in result.output
