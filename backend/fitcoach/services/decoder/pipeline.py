# fitcoach/services/decoder/pipeline.py
# 최상위 진입점: LLM/스크랩 원문 → 표준 Recipe 리스트
# RAW → EXTRACTED → CLEANED → PARSED|REPAIRING → REPARSED → VALIDATED → NORMALIZED → DONE
# 어느 단계든 실패하면 FAILED (Failure 값): 예외는 밖으로 나가지 않는다

from __future__ import annotations
import logging
from typing import Any, Dict, Optional, TypeVar, Union

from fitcoach.core.config import settings
from fitcoach.models.outcome import Failure, FailureReason, ParseOutcome, Parsed, Stage, Success
from fitcoach.models.schemas import HeuristicContext, SchemaHint, Source
from fitcoach.services.decoder.clean import clean_json
from fitcoach.services.decoder.extract import extract_json
from fitcoach.services.decoder.heuristics import extract_from_prose
from fitcoach.services.decoder.normalize import normalize_records
from fitcoach.services.decoder.repair import parse_direct, repair_and_parse
from fitcoach.services.decoder.stats import ParseStats, default_stats
from fitcoach.services.decoder.validate import validate_structure

log = logging.getLogger(__name__)

T = TypeVar("T")

__all__ = ["decode", "safe_parse", "normalize_records", "get_stats"]

def _snippet(text: Any) -> str:
    s = text if isinstance(text, str) else repr(text)
    n = settings.DECODER_LOG_SNIPPET
    return s if len(s) <= n else s[:n] + "…"

def _fail(
    stats: ParseStats,
    reason: FailureReason,
    stage: Optional[Stage],
    detail: str,
    text: Any,
) -> Failure:
    stats.record_failure(reason)
    log.warning("decode failed reason=%s stage=%s detail=%s input=%r",
                reason.value, stage.value if stage else None, detail, _snippet(text))
    return Failure(reason=reason, detail=detail, stage=stage)

def _heuristic(text: str, context: Optional[HeuristicContext], stats: ParseStats) -> ParseOutcome:
    records = extract_from_prose(text, context)
    if not records:
        return _fail(stats, FailureReason.EXTRACTION, Stage.EXTRACTED, "no JSON candidate and nothing detected in prose", text)
    stats.record_success(Source.HEURISTIC)
    log.debug("stage=%s source=heuristic count=%d", Stage.DONE.value, len(records))
    return Success(records=records, source=Source.HEURISTIC)

def decode(
    text: Any,
    schema_hint: Optional[SchemaHint] = None,
    context: Optional[HeuristicContext] = None,
    stats: Optional[ParseStats] = None,
) -> ParseOutcome:
    """
    단계별 결과를 ParseOutcome으로 반환 (실패 사유까지 보고 싶을 때).
    stats를 주입하지 않으면 프로세스 전역 집계기에 기록한다.
    """
    stats = stats or default_stats
    stats.record_call()

    if not isinstance(text, str) or not text.strip():
        return _fail(stats, FailureReason.INVALID_INPUT, Stage.RAW, "empty or non-text input", text)

    candidate = extract_json(text)
    if candidate is None:
        # JSON 흔적이 없으면 산문 휴리스틱 경로
        return _heuristic(text, context, stats)
    log.debug("stage=%s len=%d", Stage.EXTRACTED.value, len(candidate))

    cleaned = clean_json(candidate)
    log.debug("stage=%s len=%d", Stage.CLEANED.value, len(cleaned))

    parsed: Union[Parsed, Failure] = parse_direct(cleaned)
    if isinstance(parsed, Failure):
        log.debug("stage=%s direct parse failed: %s", Stage.REPAIRING.value, parsed.detail)
        parsed = repair_and_parse(cleaned)
        if isinstance(parsed, Failure):
            return _fail(stats, parsed.reason, parsed.stage, parsed.detail, candidate)
        log.debug("stage=%s applied=%s", Stage.REPARSED.value, parsed.applied)
    else:
        log.debug("stage=%s", Stage.PARSED.value)

    if not validate_structure(parsed.value, schema_hint):
        return _fail(stats, FailureReason.SCHEMA, Stage.VALIDATED, "value does not match an accepted shape", candidate)
    log.debug("stage=%s", Stage.VALIDATED.value)

    records = normalize_records(parsed.value, source=parsed.source)
    if not records:
        return _fail(stats, FailureReason.CONTENT, Stage.NORMALIZED, "every element was invalid", candidate)
    log.debug("stage=%s count=%d", Stage.NORMALIZED.value, len(records))

    stats.record_success(parsed.source)
    log.debug("stage=%s source=%s", Stage.DONE.value, parsed.source.value)
    return Success(records=records, source=parsed.source)

def safe_parse(
    text: Any,
    default: T,
    schema_hint: Optional[SchemaHint] = None,
    *,
    context: Optional[HeuristicContext] = None,
    stats: Optional[ParseStats] = None,
) -> Union[list, T]:
    """복구된 레코드 리스트 또는 default (그대로, 복사 없이). 절대 raise 하지 않음"""
    try:
        outcome = decode(text, schema_hint=schema_hint, context=context, stats=stats)
    except Exception:  # 호출자 계약: 어떤 입력이든 default로 떨어진다
        log.exception("unexpected decoder error input=%r", _snippet(text))
        return default
    if isinstance(outcome, Success):
        return outcome.records
    return default

def get_stats(stats: Optional[ParseStats] = None) -> Dict[str, object]:
    return (stats or default_stats).snapshot()
