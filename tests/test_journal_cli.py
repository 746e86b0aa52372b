"""Journal CLI tests"""

import json
import subprocess
import sys
from pathlib import Path


def run_cli(args: list[str], data_path: Path) -> subprocess.CompletedProcess:
    """CLI helper"""
    cmd = [
        sys.executable,
        "-m",
        "src.journal",
        "--data-path",
        str(data_path),
    ] + args
    return subprocess.run(
        cmd,
        capture_output=True,
        text=True,
        cwd=Path(__file__).parent.parent,
    )


def add_entry(data_path: Path, *extra: str) -> dict:
    result = run_cli(["add", "--format", "json", *extra], data_path)
    assert result.returncode == 0, result.stderr
    return json.loads(result.stdout)


def test_cli_list_empty(tmp_path):
    data_path = tmp_path / "journal.json"

    result = run_cli(["list", "--format", "json"], data_path)
    assert result.returncode == 0
    assert json.loads(result.stdout) == []

    result = run_cli(["list"], data_path)
    assert "No reflections yet" in result.stdout


def test_cli_add_and_list(tmp_path):
    data_path = tmp_path / "journal.json"

    added = add_entry(
        data_path,
        "--mood",
        "amazing",
        "--highlights",
        "Finished the project",
        "--tag",
        "calm",
        "--tag",
        "focus",
    )
    assert added["mood"] == "amazing"
    assert added["tags"] == ["calm", "focus"]

    result = run_cli(["list", "--format", "json"], data_path)
    assert result.returncode == 0
    items = json.loads(result.stdout)
    assert [item["id"] for item in items] == [added["id"]]

    result = run_cli(["list", "--tag", "calm"], data_path)
    assert "Finished the project" in result.stdout


def test_cli_sqlite_backend(tmp_path):
    db_path = tmp_path / "journal.db"

    added = add_entry(db_path, "--mood", "good")

    result = run_cli(["get", "--id", added["id"], "--format", "json"], db_path)
    assert result.returncode == 0
    assert json.loads(result.stdout)["mood"] == "good"


def test_cli_update_and_delete(tmp_path):
    data_path = tmp_path / "journal.json"
    added = add_entry(data_path, "--mood", "okay", "--tag", "work")

    result = run_cli(
        ["update", "--id", added["id"], "--mood", "good", "--clear-tags", "--format", "json"],
        data_path,
    )
    assert result.returncode == 0
    updated = json.loads(result.stdout)
    assert updated["id"] == added["id"]
    assert updated["createdAt"] == added["createdAt"]
    assert updated["mood"] == "good"
    assert updated["tags"] == []

    result = run_cli(["delete", "--id", added["id"], "--format", "json"], data_path)
    assert json.loads(result.stdout) == {"deleted": True, "id": added["id"]}

    result = run_cli(["delete", "--id", added["id"], "--format", "json"], data_path)
    assert result.returncode == 0
    assert json.loads(result.stdout)["deleted"] is False


def test_cli_get_missing(tmp_path):
    result = run_cli(["get", "--id", "nope"], tmp_path / "journal.json")
    assert result.returncode == 1
    assert "not found" in result.stderr


def test_cli_export_import(tmp_path):
    source = tmp_path / "source.json"
    target = tmp_path / "target.json"
    backup = tmp_path / "backup.json"
    first = add_entry(source, "--mood", "good", "--gratitude", "Sunshine")
    second = add_entry(source, "--mood", "difficult")

    result = run_cli(["export", "--output", str(backup)], source)
    assert result.returncode == 0
    assert [item["id"] for item in json.loads(backup.read_text(encoding="utf-8"))] == [
        first["id"],
        second["id"],
    ]

    result = run_cli(["import", "--input", str(backup)], target)
    assert result.returncode == 0
    assert "2 entries" in result.stdout

    result = run_cli(["list", "--format", "json"], target)
    assert {item["id"] for item in json.loads(result.stdout)} == {first["id"], second["id"]}


def test_cli_import_invalid_file_keeps_data(tmp_path):
    data_path = tmp_path / "journal.json"
    added = add_entry(data_path, "--mood", "good")
    bad = tmp_path / "bad.json"
    bad.write_text("not json", encoding="utf-8")

    result = run_cli(["import", "--input", str(bad)], data_path)
    assert result.returncode == 1
    assert "Error" in result.stderr

    result = run_cli(["list", "--format", "json"], data_path)
    assert [item["id"] for item in json.loads(result.stdout)] == [added["id"]]


def test_cli_insights(tmp_path):
    data_path = tmp_path / "journal.json"
    add_entry(data_path, "--mood", "amazing", "--tag", "calm", "--tag", "focus")

    result = run_cli(["stats", "--format", "json"], data_path)
    assert result.returncode == 0
    stats = json.loads(result.stdout)
    assert stats["weeklyStats"]["totalEntries"] == 1
    assert stats["weeklyStats"]["moodDistribution"]["amazing"] == 1
    assert stats["totalEntries"] == 1

    result = run_cli(["trend", "--days", "3", "--format", "json"], data_path)
    trend = json.loads(result.stdout)
    assert len(trend) == 3
    assert trend[-1]["moodScore"] == 5

    result = run_cli(["achievements", "--format", "json"], data_path)
    assert [a["id"] for a in json.loads(result.stdout)] == ["first_entry"]

    result = run_cli(["tags", "--format", "json"], data_path)
    assert json.loads(result.stdout) == ["calm", "focus"]


def test_cli_summary_requires_entries(tmp_path):
    result = run_cli(["summary", "--relay-url", "http://127.0.0.1:9"], tmp_path / "journal.json")
    assert result.returncode == 1
    assert "Error" in result.stderr


def test_cli_summary_relay_unreachable(tmp_path):
    data_path = tmp_path / "journal.json"
    add_entry(data_path, "--mood", "good")

    result = run_cli(["summary", "--relay-url", "http://127.0.0.1:9"], data_path)
    assert result.returncode == 1
    assert "AI summary unavailable" in result.stderr
