from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from storygraph.cli import EXIT_OK, EXIT_STORY_ERRORS, EXIT_USAGE, app
from storygraph.modules.story.export import sample_story

runner = CliRunner()


def _write(tmp_path: Path, payload, name: str = "story.json") -> Path:
    path = tmp_path / name
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_missing_argument_prints_usage() -> None:
    result = runner.invoke(app, [])
    assert result.exit_code == EXIT_USAGE
    assert "Usage: storygraph-validate" in result.output


def test_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(app, [str(tmp_path / "nope.json")])
    assert result.exit_code == EXIT_USAGE
    assert "File not found" in result.output


def test_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    result = runner.invoke(app, [str(path)])
    assert result.exit_code == EXIT_USAGE
    assert "Failed to read/parse JSON" in result.output


def test_non_object_root_exits_one(tmp_path: Path) -> None:
    for payload in ([1, 2, 3], "just a string"):
        result = runner.invoke(app, [str(_write(tmp_path, payload))])
        assert result.exit_code == EXIT_STORY_ERRORS
        assert "Normalization failed" in result.output


def test_clean_story_exits_zero_and_prints_summary(tmp_path: Path) -> None:
    path = _write(tmp_path, sample_story())
    result = runner.invoke(app, [str(path)])

    assert result.exit_code == EXIT_OK
    lines = result.output.splitlines()
    assert f"File: {path.resolve()}" in lines
    assert "[WARN] W_DEAD_END (scene=S03): Scene has no choices with targets (`to`). Ignore this warning if the scene is an ending." in lines
    assert "Summary" in lines
    assert "Scenes:      4" in lines
    assert "Reachable:   4" in lines
    assert "Cycles:      0" in lines
    assert "Errors:      0" in lines
    assert "Warnings:    2" in lines
    assert "Info:        0" in lines


def test_story_with_errors_exits_one(tmp_path: Path) -> None:
    payload = {"start": "A", "scenes": {"A": {"text": "a", "choices": [{"label": "x", "to": "Z"}]}}}
    result = runner.invoke(app, [str(_write(tmp_path, payload))])

    assert result.exit_code == EXIT_STORY_ERRORS
    assert "[ERROR] E_DANGLING_TO (scene=A, choice=A.choice0): Choice points to missing scene \"Z\"." in result.output


def test_info_only_story_exits_zero(tmp_path: Path) -> None:
    payload = {"start": "A", "scenes": {"A": {"text": "a", "choices": [{"to": "A"}]}}}
    result = runner.invoke(app, [str(_write(tmp_path, payload))])

    assert result.exit_code == EXIT_OK
    assert "[INFO] I_CYCLES_DETECTED: Cycles detected (1 total, up to 10 shown): A -> A" in result.output
    assert "No issues found." not in result.output


def test_json_output(tmp_path: Path) -> None:
    payload = {"start": "A", "scenes": {"A": {"text": "a", "choices": [{"to": "B"}]}, "B": {"text": "b", "choices": [{"to": "A"}]}}}
    result = runner.invoke(app, [str(_write(tmp_path, payload)), "--json"])

    assert result.exit_code == EXIT_OK
    body = json.loads(result.stdout)
    assert body["summary"]["cycles"] == 1
    assert body["cycles"] == [["A", "B", "A"]]
    assert body["issues"][0]["code"] == "I_CYCLES_DETECTED"
