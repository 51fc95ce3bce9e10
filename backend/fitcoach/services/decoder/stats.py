# fitcoach/services/decoder/stats.py
# 파싱 통계 집계: 호출마다 주입 가능, 기본은 프로세스 전역 인스턴스
# 멀티스레드 호스트(uvicorn worker 스레드 등) 대비 Lock으로만 갱신

from __future__ import annotations
import threading
from typing import Dict

from fitcoach.models.outcome import FailureReason
from fitcoach.models.schemas import Source

class ParseStats:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._total = 0
        self._success: Dict[Source, int] = {s: 0 for s in Source}
        self._failures: Dict[FailureReason, int] = {r: 0 for r in FailureReason}

    def record_call(self) -> None:
        with self._lock:
            self._total += 1

    def record_success(self, source: Source) -> None:
        with self._lock:
            self._success[source] += 1

    def record_failure(self, reason: FailureReason) -> None:
        with self._lock:
            self._failures[reason] += 1

    def reset(self) -> None:
        with self._lock:
            self._total = 0
            self._success = {s: 0 for s in Source}
            self._failures = {r: 0 for r in FailureReason}

    def snapshot(self) -> Dict[str, object]:
        """읽기 전용 사본 (프론트/모니터링용 camelCase)"""
        with self._lock:
            return {
                "directSuccess": self._success[Source.DIRECT],
                "repairedSuccess": self._success[Source.REPAIRED],
                "heuristicFallback": self._success[Source.HEURISTIC],
                "totalCalls": self._total,
                "failures": {r.value: n for r, n in self._failures.items()},
            }

# 프로세스 전역 기본 집계기
default_stats = ParseStats()
