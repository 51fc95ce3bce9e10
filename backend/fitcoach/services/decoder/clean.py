# fitcoach/services/decoder/clean.py
# 파싱 전 정리: 항상 문자열을 돌려주는 total 함수
# 둥근 따옴표/꼬리 콤마 정리는 "..." 문자열 리터럴 바깥에만 적용 (값 안의 “bowl” 은 그대로)

from __future__ import annotations
import re
from typing import Callable, List

# 0x00-0x1F, 0x7F-0x9F
CONTROL_RE = re.compile(r"[\x00-\x1f\x7f-\x9f]")
# 유효한 이스케이프는 통째로 소비하고, 나머지 역슬래시만 제거
ESCAPE_RE = re.compile(r'\\(["\\/bfnrt]|u[0-9a-fA-F]{4})|\\')
TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")
STRING_RE = re.compile(r'"(?:[^"\\]|\\.)*"')

CURLY_DOUBLE = "“”„‟"
CURLY_SINGLE = "‘’‚‛"
_QUOTE_TABLE = str.maketrans({**{c: '"' for c in CURLY_DOUBLE}, **{c: "'" for c in CURLY_SINGLE}})

def outside_strings(text: str, fn: Callable[[str], str]) -> str:
    # 문자열 리터럴은 그대로 두고 그 사이 구간에만 fn 적용
    out: List[str] = []
    pos = 0
    for m in STRING_RE.finditer(text):
        out.append(fn(text[pos:m.start()]))
        out.append(m.group(0))
        pos = m.end()
    out.append(fn(text[pos:]))
    return "".join(out)

def remove_control_chars(text: str) -> str:
    if not text or not isinstance(text, str):
        return ""
    return CONTROL_RE.sub("", text)

def normalize_curly_quotes(text: str) -> str:
    return outside_strings(text or "", lambda seg: seg.translate(_QUOTE_TABLE))

def strip_invalid_escapes(text: str) -> str:
    return ESCAPE_RE.sub(lambda m: m.group(0) if m.group(1) else "", text or "")

def strip_trailing_commas(text: str) -> str:
    return outside_strings(text or "", lambda seg: TRAILING_COMMA_RE.sub(r"\1", seg))

def clean_json(text: str) -> str:
    # 1) 제어문자 제거 → 2) 둥근 따옴표 → 직선 → 3) 잘못된 이스케이프 제거 → 4) 꼬리 콤마 제거
    s = remove_control_chars(text)
    s = normalize_curly_quotes(s)
    s = strip_invalid_escapes(s)
    s = strip_trailing_commas(s)
    return s.strip()
