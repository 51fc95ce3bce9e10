import threading

from fitcoach.models.outcome import FailureReason
from fitcoach.models.schemas import Source
from fitcoach.services.decoder.stats import ParseStats

def test_snapshot_shape():
    snap = ParseStats().snapshot()
    assert snap["totalCalls"] == 0
    assert set(snap) == {"directSuccess", "repairedSuccess", "heuristicFallback", "totalCalls", "failures"}
    assert set(snap["failures"]) == {r.value for r in FailureReason}

def test_record_and_reset():
    stats = ParseStats()
    stats.record_call()
    stats.record_success(Source.REPAIRED)
    stats.record_failure(FailureReason.CONTENT)
    snap = stats.snapshot()
    assert snap["totalCalls"] == 1
    assert snap["repairedSuccess"] == 1
    assert snap["failures"]["content"] == 1

    stats.reset()
    assert stats.snapshot()["totalCalls"] == 0
    assert stats.snapshot()["repairedSuccess"] == 0

def test_snapshot_is_a_copy():
    stats = ParseStats()
    snap = stats.snapshot()
    snap["failures"]["schema"] = 99
    assert stats.snapshot()["failures"]["schema"] == 0

def test_concurrent_updates():
    stats = ParseStats()

    def work():
        for _ in range(1000):
            stats.record_call()
            stats.record_success(Source.DIRECT)

    threads = [threading.Thread(target=work) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    snap = stats.snapshot()
    assert snap["totalCalls"] == 8000
    assert snap["directSuccess"] == 8000
