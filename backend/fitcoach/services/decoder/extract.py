# fitcoach/services/decoder/extract.py
# 임의 텍스트(설명문 + 코드펜스 + JSON)에서 JSON 후보 문자열을 찾는다.
# 우선순위: ```json 펜스 → 일반 펜스 → 최상위 배열 → 최상위 객체 → 전체 텍스트({/[로 시작할 때)

from __future__ import annotations
import re
from typing import Iterator, List, Optional, Tuple

JSON_FENCE_RE = re.compile(r"```json\s*(.*?)\s*```", re.I | re.S)
# 언어 태그(```python 등)는 줄바꿈이 뒤따를 때만 떼어낸다
GENERIC_FENCE_RE = re.compile(r"```(?:[A-Za-z0-9_+\-]+[ \t]*\n)?\s*(.*?)\s*```", re.S)

_CLOSE = {"{": "}", "[": "]"}

def _fenced(text: str) -> Optional[str]:
    for rx in (JSON_FENCE_RE, GENERIC_FENCE_RE):
        m = rx.search(text)
        if m and m.group(1).strip():
            return m.group(1).strip()
    return None

# 끝까지 안 닫힌 여는 괄호 다음부터 다시 훑는 횟수 상한 (최악에도 선형의 상수배)
MAX_RESTARTS = 16

def _scan(text: str, pos: int, spans: List[Tuple[int, int]]) -> int:
    # pos부터 훑어 닫힌 구간은 spans에 추가, 끝까지 안 닫힌 여는 괄호 위치 반환 (없으면 -1)
    stack: List[str] = []
    start = -1
    in_string = False
    escape = False
    for i in range(pos, len(text)):
        ch = text[i]
        if not stack:
            if ch in _CLOSE:
                stack.append(ch)
                start = i
            continue
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in _CLOSE:
            stack.append(ch)
        elif ch in ("}", "]") and ch == _CLOSE[stack[-1]]:
            stack.pop()
            if not stack:
                spans.append((start, i + 1))
    return start if stack else -1

def top_level_spans(text: str) -> Iterator[Tuple[int, int]]:
    """
    depth 0에서 열린 {..}/[..] 중 균형이 맞는 구간을 (start, end) 로 순서대로 반환.
    - 구간 밖(산문)의 따옴표는 무시, 구간 안에서는 "..." 문자열을 존중
    - 짝이 안 맞는 닫는 괄호는 무시
    - 산문 속 "[v2" 나 잘린 배열처럼 끝까지 안 닫힌 괄호는 건너뛰고 그 다음부터 다시 훑는다
    """
    pos = 0
    for _ in range(MAX_RESTARTS + 1):
        spans: List[Tuple[int, int]] = []
        open_at = _scan(text, pos, spans)
        yield from spans
        if open_at < 0:
            return
        pos = open_at + 1

def _first_span(text: str, opener: str) -> Optional[str]:
    for start, end in top_level_spans(text):
        if text[start] == opener:
            cand = text[start:end].strip()
            if cand:
                return cand
    return None

def extract_json(text: Optional[str]) -> Optional[str]:
    """가장 그럴듯한 JSON 후보를 반환. 못 찾으면 None (부작용 없음)"""
    if not text or not isinstance(text, str):
        return None

    fenced = _fenced(text)
    if fenced:
        return fenced

    for opener in ("[", "{"):
        cand = _first_span(text, opener)
        if cand:
            return cand

    trimmed = text.strip()
    if trimmed.startswith(("{", "[")):
        return trimmed
    return None
