# fitcoach/models/outcome.py
# 파이프라인 단계 결과 타입: 예외 대신 값으로 실패를 전달
from __future__ import annotations
from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field

from fitcoach.models.schemas import Recipe, Source

class Stage(str, Enum):
    RAW = "raw"
    EXTRACTED = "extracted"
    CLEANED = "cleaned"
    PARSED = "parsed"
    REPAIRING = "repairing"
    REPARSED = "reparsed"
    VALIDATED = "validated"
    NORMALIZED = "normalized"
    DONE = "done"
    FAILED = "failed"

class FailureReason(str, Enum):
    INVALID_INPUT = "invalid_input"   # None/빈 문자열/비텍스트
    EXTRACTION = "extraction"         # JSON 후보 없음
    STRUCTURAL = "structural"         # 수리 후에도 파싱 불가
    SCHEMA = "schema"                 # 파싱은 됐지만 형태 불일치
    CONTENT = "content"               # 정규화 결과 전부 무효

class Parsed(BaseModel):
    value: Any = None
    source: Source = Source.DIRECT
    # 수리 단계에서 실제로 적용된 규칙 이름
    applied: List[str] = Field(default_factory=list)

class Success(BaseModel):
    records: List[Recipe] = Field(default_factory=list)
    source: Source = Source.DIRECT

class Failure(BaseModel):
    reason: FailureReason
    detail: str = ""
    stage: Optional[Stage] = None

ParseOutcome = Union[Success, Failure]
