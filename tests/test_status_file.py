import json
from datetime import datetime, timezone

from status_checker.persistence import save_results, write_status_file
from status_checker.results import Result, ResultCollector

STAMP = datetime(2024, 5, 1, 12, 30, 15, tzinfo=timezone.utc)


def test_write_status_file_creates_parent_dirs(tmp_path):
    target = tmp_path / "out" / "status.json"

    written = write_status_file([{"url": "https://a.test", "status": 200}], target)

    assert written == target
    assert json.loads(target.read_text(encoding="utf-8")) == [{"url": "https://a.test", "status": 200}]
    assert not (tmp_path / "out" / "status.json.tmp").exists()


def test_save_results_writes_collector_document(tmp_path):
    collector = ResultCollector()
    collector.add(1, Result(url="https://b.test", status_code=None, error="timeout: x", time_ms=1000, timestamp=STAMP))
    collector.add(0, Result(url="https://a.test", status_code=301, error=None, time_ms=12, timestamp=STAMP))

    path = save_results(collector, tmp_path / "status.json")

    document = json.loads(path.read_text(encoding="utf-8"))
    assert document == [
        {"url": "https://a.test", "status": 301, "time_ms": 12, "timestamp": "2024-05-01T12:30:15.000+00:00"},
        {"url": "https://b.test", "error": "timeout: x", "time_ms": 1000, "timestamp": "2024-05-01T12:30:15.000+00:00"},
    ]


def test_write_empty_document(tmp_path):
    path = write_status_file([], tmp_path / "status.json")

    assert json.loads(path.read_text(encoding="utf-8")) == []
