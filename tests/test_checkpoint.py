import json
import threading

from schoolsync.models.record import MigrationResult, ResultStatus
from schoolsync.services.checkpoint import CheckpointStore


def _result(index, uid, status=ResultStatus.SUCCESS, **kwargs):
    return MigrationResult(index=index, uid=uid, status=status, **kwargs)


def test_missing_file_is_fresh_run(checkpoint):
    assert checkpoint.load() == []
    assert not checkpoint.path.exists()


def test_flush_writes_complete_snapshot(checkpoint):
    results = []
    checkpoint.append_and_flush(results, _result(0, "a", email="a@x.test"))
    checkpoint.append_and_flush(results, _result(1, "b", ResultStatus.SKIPPED, reason="exists"))
    checkpoint.append_and_flush(results, _result(2, "", ResultStatus.FAILURE, error="Missing uid/id in Firestore user"))

    on_disk = json.loads(checkpoint.path.read_text())
    assert on_disk == [
        {"index": 0, "uid": "a", "email": "a@x.test", "status": "success"},
        {"index": 1, "uid": "b", "status": "skipped", "reason": "exists"},
        {"index": 2, "uid": "", "status": "failure", "error": "Missing uid/id in Firestore user"},
    ]
    assert CheckpointStore(checkpoint.path).load() == results


def test_dry_run_status_is_camel_case(checkpoint):
    checkpoint.append_and_flush([], _result(0, "a", ResultStatus.DRY_RUN))
    assert json.loads(checkpoint.path.read_text())[0]["status"] == "dryRun"


def test_no_temp_files_left_behind(checkpoint):
    results = []
    for i in range(5):
        checkpoint.append_and_flush(results, _result(i, f"u{i}"))
    assert [p.name for p in checkpoint.path.parent.iterdir()] == [checkpoint.path.name]


def test_seen_success_keys_only_counts_success():
    results = [
        _result(0, "a"),
        _result(1, "b", ResultStatus.SKIPPED, reason="exists"),
        _result(2, "c", ResultStatus.FAILURE, error="boom"),
        _result(3, "d", ResultStatus.DRY_RUN),
    ]
    assert CheckpointStore.seen_success_keys(results) == {"a"}


def test_corrupt_file_is_set_aside(checkpoint):
    checkpoint.path.write_text("[{\"index\": 0, \"uid\": ")

    assert checkpoint.load() == []

    assert not checkpoint.path.exists()
    backups = list(checkpoint.path.parent.glob("migration-results.json.corrupt-*"))
    assert len(backups) == 1
    assert backups[0].read_text().startswith("[{")


def test_wrong_shape_is_set_aside(checkpoint):
    checkpoint.path.write_text(json.dumps({"index": 0}))
    assert checkpoint.load() == []
    assert len(list(checkpoint.path.parent.glob("*.corrupt-*"))) == 1


def test_unknown_status_is_unreadable(checkpoint):
    checkpoint.path.write_text(json.dumps([{"index": 0, "uid": "a", "status": "done"}]))
    assert checkpoint.load(set_aside=False) == []
    assert checkpoint.path.exists()


def test_concurrent_appends_keep_every_entry(checkpoint):
    results = []

    def append(start):
        for i in range(start, start + 20):
            checkpoint.append_and_flush(results, _result(i, f"u{i}"))

    threads = [threading.Thread(target=append, args=(n * 20,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    loaded = CheckpointStore(checkpoint.path).load()
    assert len(loaded) == 80
    assert sorted(r.index for r in loaded) == list(range(80))
