# fitcoach/services/utils.py
# 재료명 정규화/동의어 처리 유틸
# - 산문에서 뽑은 "200g de poulet" / "poulet" → 같은 키 "poulet"로 수렴 (중복 제거용)
# - 매핑에 없으면 원문(소문자, 공백 정리) 그대로 사용

from __future__ import annotations
import re
import unicodedata

# 영문/변형 표기 → 대표키
_SYNONYMS = {
    "oeuf": "œuf", "oeufs": "œuf", "œufs": "œuf", "egg": "œuf", "eggs": "œuf",
    "boeuf": "bœuf", "beef": "bœuf",
    "chicken": "poulet", "turkey": "dinde", "salmon": "saumon", "tuna": "thon",
    "pates": "pâtes", "pasta": "pâtes", "rice": "riz", "oats": "avoine",
    "brocoli": "brocolis", "broccoli": "brocolis",
    "epinards": "épinards", "spinach": "épinards",
    "tomate": "tomates", "tomatoes": "tomates",
    "courgette": "courgettes", "zucchini": "courgettes",
    "avocado": "avocat", "nuts": "noix",
}

_UNITS = r"(g|kg|mg|ml|cl|l|cs|cc|cuillères?|tasses?|pincées?|cups?|tsp|tbsp)"
_MODIFIERS = r"(grillée?s?|hachée?s?|frais|fraîches?|cuite?s?|émincée?s?|râpée?s?|grilled|chopped|fresh|cooked)"
_PUNCT = r"[·•,()\[\]\{\}\-_/\\\.:;!?]"

def _nfkc(s: str) -> str:
    return unicodedata.normalize("NFKC", s or "")

def normalize_name(name: str) -> str:
    # 1) NFKC/소문자 → 구두점 제거 → 수량/단위 제거 → 연결어/수식어 제거 → 공백 정리
    # 2) 동의어 매핑(_SYNONYMS) 적용
    s = _nfkc((name or "").strip().lower())
    s = re.sub(_PUNCT, " ", s)

    # 숫자+단위 제거 (예: 200g, 20 cl, 2 cs)
    s = re.sub(rf"\b\d+(?:[.,]\d+)?\s*{_UNITS}?\b", " ", s)

    # 연결어 제거 (de/d'/of)
    s = re.sub(r"\b(?:de|du|des|of)\b|\bd'", " ", s)
    s = re.sub(rf"\b{_MODIFIERS}\b", " ", s)

    s = re.sub(r"\s+", " ", s).strip()
    return _SYNONYMS.get(s, s)
