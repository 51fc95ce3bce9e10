# fitcoach/services/decoder/repair.py
# 직접 파싱 + 휴리스틱 수리
# - 규칙은 순서가 고정된 테이블, 각 규칙은 str -> Optional[str] 순수 함수 (None = 해당 없음)
# - 테이블은 한 번만 돈다 (재시도 루프 없음) → 수리 후 재파싱 1회
# - 모든 규칙은 "..." 문자열 리터럴 바깥에만 적용

from __future__ import annotations
import json
import logging
import re
from typing import Callable, List, Optional, Tuple, Union

from pydantic import BaseModel, Field

from fitcoach.models.outcome import Failure, FailureReason, Parsed, Stage
from fitcoach.models.schemas import Source
from fitcoach.services.decoder.clean import normalize_curly_quotes, outside_strings, strip_trailing_commas

log = logging.getLogger(__name__)

Rule = Callable[[str], Optional[str]]

# 토큰 위치('{' '[' ',' ':' 뒤)의 '...' 리터럴
SINGLE_QUOTED_RE = re.compile(r"(?<=[{\[,:])(\s*)'((?:[^'\\]|\\.)*)'(?=\s*[:,}\]])")
MISSING_COMMA_OBJ_RE = re.compile(r"}\s*{")
MISSING_COMMA_ARR_RE = re.compile(r"]\s*\[")
BARE_KEY_RE = re.compile(r"([{,]\s*)([A-Za-z_$][A-Za-z0-9_$]*)\s*:")
MULTI_COMMA_RE = re.compile(r",(?:\s*,)+")
# 콜론 ~ 다음 , 또는 } 사이의 맨 값 (콜론/따옴표/괄호 제외 → 시작 위치마다 선형)
BARE_VALUE_RE = re.compile(r":(\s*)([^\",\[\]{}:]*[^\",\[\]{}:\s])(?=\s*[,}])")
LITERAL_RE = re.compile(r"-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?|true|false|null|NaN|-?Infinity")

class RepairResult(BaseModel):
    text: str
    applied: List[str] = Field(default_factory=list)

def _changed(before: str, after: str) -> Optional[str]:
    return after if after != before else None

# ------------------------------
# 규칙들
# ------------------------------

def normalize_quotes(text: str) -> Optional[str]:
    s = normalize_curly_quotes(text)
    s = outside_strings(s, lambda seg: SINGLE_QUOTED_RE.sub(lambda m: f'{m.group(1)}"{m.group(2)}"', seg))
    return _changed(text, s)

def insert_missing_commas(text: str) -> Optional[str]:
    def fix(seg: str) -> str:
        seg = MISSING_COMMA_OBJ_RE.sub("}, {", seg)
        return MISSING_COMMA_ARR_RE.sub("], [", seg)
    return _changed(text, outside_strings(text, fix))

def quote_bare_keys(text: str) -> Optional[str]:
    return _changed(text, outside_strings(text, lambda seg: BARE_KEY_RE.sub(r'\1"\2":', seg)))

def collapse_commas(text: str) -> Optional[str]:
    return _changed(text, outside_strings(text, lambda seg: MULTI_COMMA_RE.sub(",", seg)))

def strip_trailing_commas_rule(text: str) -> Optional[str]:
    return _changed(text, strip_trailing_commas(text))

def looks_literal(value: str) -> bool:
    v = value.strip()
    if not v:
        return True
    if v[0] in '{["':
        return True
    return LITERAL_RE.fullmatch(v) is not None

def quote_bare_values(text: str) -> Optional[str]:
    # 숫자/불리언/null/구조 시작은 절대 감싸지 않는다
    def fix(seg: str) -> str:
        def sub(m: re.Match) -> str:
            value = m.group(2)
            if looks_literal(value):
                return m.group(0)
            return ':%s"%s"' % (m.group(1), value.strip())
        return BARE_VALUE_RE.sub(sub, seg)
    return _changed(text, outside_strings(text, fix))

REPAIR_RULES: List[Tuple[str, Rule]] = [
    ("normalize_quotes", normalize_quotes),
    ("insert_missing_commas", insert_missing_commas),
    ("quote_bare_keys", quote_bare_keys),
    ("collapse_commas", collapse_commas),
    ("strip_trailing_commas", strip_trailing_commas_rule),
    ("quote_bare_values", quote_bare_values),
]

# ------------------------------
# 파싱
# ------------------------------

def has_closed_shape(text: str) -> bool:
    # '{'로 시작하면 '}'로, '['로 시작하면 ']'로 끝나야 한다
    if len(text) < 2:
        return False
    return (text[0] == "{" and text[-1] == "}") or (text[0] == "[" and text[-1] == "]")

def parse_direct(text: str, source: Source = Source.DIRECT) -> Union[Parsed, Failure]:
    try:
        return Parsed(value=json.loads(text), source=source)
    except (ValueError, RecursionError) as e:
        return Failure(reason=FailureReason.STRUCTURAL, detail=str(e)[:200], stage=Stage.PARSED)

def repair_text(text: str, rules: Optional[List[Tuple[str, Rule]]] = None) -> Union[RepairResult, Failure]:
    s = text or ""
    applied: List[str] = []
    for name, rule in (rules if rules is not None else REPAIR_RULES):
        out = rule(s)
        if out is not None:
            s = out
            applied.append(name)
    s = s.strip()

    if not has_closed_shape(s):
        return Failure(
            reason=FailureReason.STRUCTURAL,
            detail="repaired text does not start/end with matching brackets",
            stage=Stage.REPAIRING,
        )
    return RepairResult(text=s, applied=applied)

def repair_and_parse(text: str) -> Union[Parsed, Failure]:
    repaired = repair_text(text)
    if isinstance(repaired, Failure):
        return repaired

    log.debug("repair applied=%s", repaired.applied)
    parsed = parse_direct(repaired.text, source=Source.REPAIRED)
    if isinstance(parsed, Failure):
        return Failure(reason=FailureReason.STRUCTURAL, detail=parsed.detail, stage=Stage.REPARSED)
    parsed.applied = repaired.applied
    return parsed
