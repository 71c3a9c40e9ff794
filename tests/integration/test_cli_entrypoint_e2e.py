from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path


def _run(config_path: Path, *args: str) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, "-m", "focuswrite", "--config", str(config_path), "--log-level", "ERROR", *args],
        capture_output=True,
        text=True,
        check=False,
        stdin=subprocess.DEVNULL,
    )


def test_read_registers_recent_file_across_processes(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    doc = tmp_path / "chapter.txt"
    doc.write_text("one\ntwo\n", encoding="utf-8")

    read = _run(config_path, "read", str(doc))
    assert read.returncode == 0, read.stderr
    assert json.loads(read.stdout)["content"] == "one\ntwo\n"

    listed = _run(config_path, "recent", "list")
    files = json.loads(listed.stdout)["files"]
    assert [item["path"] for item in files] == [str(doc)]

    doc.unlink()
    pruned = _run(config_path, "recent", "list")
    assert json.loads(pruned.stdout)["files"] == []
    assert json.loads(config_path.read_text(encoding="utf-8"))["recentFiles"] == []


def test_write_loop_on_closed_stdin_exits_cleanly(tmp_path: Path) -> None:
    result = _run(tmp_path / "config.json", "write")

    assert result.returncode == 0, result.stderr
    assert "Type a line" in result.stdout
