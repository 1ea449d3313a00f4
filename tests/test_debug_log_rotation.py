from __future__ import annotations

import json

from termfolio.kernel.debug_log import DebugLogWriter
from termfolio.kernel.types import EventEnvelope


def test_debug_log_rotation_respects_size_and_max_files(tmp_path):
    writer = DebugLogWriter(
        logs_dir=tmp_path / "logs",
        enabled=True,
        max_file_bytes=256,
        max_files=2,
    )

    for idx in range(40):
        writer.write_entry(
            level="info",
            component="terminal",
            kind="diagnostic",
            message="rotation-{0}".format(idx),
            data={"blob": "x" * 80, "idx": idx},
        )

    status = writer.status()
    assert status["logs_enabled"] is True
    assert status["logs_active_size_bytes"] > 0
    assert status["logs_max_file_bytes"] == 256
    assert status["logs_max_files"] == 2
    assert len(status["logs_rotated_files"]) <= 2
    assert not (tmp_path / "logs" / "debug.log.jsonl.3").exists()


def test_debug_log_fail_open_tracks_write_errors(tmp_path):
    blocked_path = tmp_path / "not-a-dir"
    blocked_path.write_text("file", encoding="utf-8")
    writer = DebugLogWriter(
        logs_dir=blocked_path,
        enabled=True,
        max_file_bytes=1024,
        max_files=2,
    )

    writer.write_entry(
        level="info",
        component="terminal",
        kind="diagnostic",
        message="should not raise",
    )

    status = writer.status()
    assert status["logs_write_errors"] >= 1


def test_disabled_writer_creates_nothing(tmp_path):
    writer = DebugLogWriter(logs_dir=tmp_path / "logs", enabled=False)

    writer.write_entry(level="info", component="terminal", kind="diagnostic", message="ignored")

    assert not (tmp_path / "logs").exists()
    assert writer.status()["logs_active_size_bytes"] == 0


def test_events_are_written_with_levels(tmp_path):
    writer = DebugLogWriter(logs_dir=tmp_path / "logs", enabled=True)

    writer.write_event(EventEnvelope("command.unknown", {"command": "sudo"}, ts_ms=1, source="dispatcher"))
    writer.write_event(EventEnvelope("cell.updated", {"cell_id": 1, "status": "failed"}, ts_ms=2, source="cells"))
    writer.write_event(EventEnvelope("window.changed", {"mode": "minimized"}, ts_ms=3))

    lines = writer.active_log_file.read_text(encoding="utf-8").splitlines()
    records = [json.loads(line) for line in lines]
    assert [record["level"] for record in records] == ["error", "warn", "info"]
    assert records[0]["component"] == "dispatcher"
    assert records[0]["event_type"] == "command.unknown"
    assert records[0]["data"] == {"command": "sudo"}
    assert records[2]["component"] == "terminal"
    assert records[2]["ts_ms"] == 3
