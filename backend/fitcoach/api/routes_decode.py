# fitcoach/api/routes_decode.py
# LLM 응답/스크랩 원문 → 표준 레시피 카드 (디코더 파이프라인의 얇은 HTTP 래퍼)
# 입력 크기 상한은 여기서만 건다 (파이프라인은 크기 가정 없음)

from __future__ import annotations
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, HTTPException

from fitcoach.core.config import settings
from fitcoach.models.schemas import DecodeIn, DecodeOut, HeuristicContext, ProgramsOut
from fitcoach.services.decoder.heuristics import extract_programs
from fitcoach.services.decoder.pipeline import get_stats, normalize_records, safe_parse

log = logging.getLogger(__name__)

router = APIRouter(prefix="/decode", tags=["decode"])

def _check_size(text: Optional[str]) -> None:
    size = len((text or "").encode("utf-8"))
    if size > settings.DECODER_MAX_INPUT_BYTES:
        log.info("decode rejected: %d bytes > %d", size, settings.DECODER_MAX_INPUT_BYTES)
        raise HTTPException(413, f"input too large ({size} bytes)")

def _context(body: DecodeIn) -> HeuristicContext:
    return HeuristicContext(goal=body.goal, time_preference=body.time_preference)

@router.post("", response_model=DecodeOut)
def decode_text(body: DecodeIn):
    """원문 → 레시피 리스트. 복구 실패면 ok=False + 빈 리스트 (에러 아님)"""
    _check_size(body.text)
    records = safe_parse(body.text, [], body.schema_hint, context=_context(body))
    return DecodeOut(ok=bool(records), count=len(records), records=records)

@router.post("/normalize", response_model=DecodeOut)
def normalize_payload(payload: Any = Body(...)):
    # 이미 JSON으로 파싱된 값(레코드/배열/래퍼) 정규화만 수행
    records = normalize_records(payload)
    return DecodeOut(ok=bool(records), count=len(records), records=records)

@router.post("/programs", response_model=ProgramsOut)
def decode_programs(body: DecodeIn):
    _check_size(body.text)
    programs = extract_programs(body.text or "", _context(body))
    return ProgramsOut(ok=bool(programs), count=len(programs), programs=programs)

@router.get("/stats")
def decode_stats() -> Dict[str, Any]:
    return get_stats()
