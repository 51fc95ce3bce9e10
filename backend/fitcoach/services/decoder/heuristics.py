# fitcoach/services/decoder/heuristics.py
# JSON이 전혀 없는 산문(스크랩/LLM 설명문) → 신뢰도 낮은 레코드 추출
# - 재료: 수량+식품명 / 식품명 패턴 (어휘 사전 기반), 중복 제거 후 상한
# - 영양: 명시 수치 우선, 없으면 목표별 기본값 + 키워드 보정 (결정적)
# - 시간: 명시 시/분 우선, 없으면 시간 선호 버킷
# - 품질 점수: 정렬용일 뿐 채택 여부 판단에는 쓰지 않음

from __future__ import annotations
import logging
import re
from typing import Iterable, List, Optional

from pydantic import BaseModel, Field

from fitcoach.core.config import settings, Settings
from fitcoach.models.schemas import (
    Goal, HeuristicContext, MealCategory, Nutrition, Provenance, Recipe, Source, WorkoutProgram,
)
from fitcoach.models.tags import (
    CANON, CATEGORY_SYNONYMS, EXERCISE_WORDS, FOOD_GROUPS, LEVELS, LIGHT_WORDS, MUSCLE_GROUPS,
    PROGRAM_KEYWORDS, QUALITY_KEYWORDS, RICH_WORDS, STARCH_WORDS, build_tags,
)
from fitcoach.services.decoder.normalize import parse_number
from fitcoach.services.utils import normalize_name

log = logging.getLogger(__name__)

MAX_NAME = 80
MAX_DESCRIPTION = 300
MAX_MUSCLE_GROUPS = 4

def _alternation(words: Iterable[str]) -> str:
    # 긴 단어 먼저 (pois chiches > pois)
    return "|".join(re.escape(w) for w in sorted(set(words), key=len, reverse=True))

_FOODS = _alternation(w for g in FOOD_GROUPS for w in CANON[g])
_LIQUIDS = _alternation(CANON["liquid"])
_LINK = r"(?:de\s+|d'|of\s+)?"

INGREDIENT_PATTERNS = [
    re.compile(rf"\b\d+(?:[.,]\d+)?\s*(?:g|kg)?\s*{_LINK}(?:{_FOODS})(?![\w'])"),
    re.compile(rf"(?<![\w'])(?:{_FOODS})(?![\w'])"),
    re.compile(rf"\b\d+\s*(?:ml|cl|l)\s*{_LINK}(?:{_LIQUIDS})(?![\w'])"),
]

_NUM = r"(\d+(?:[.,]\d+)?)"
CALORIES_RE = re.compile(rf"{_NUM}\s*(?:kcal|calories?|cal)\b")
PROTEIN_RE = re.compile(rf"{_NUM}\s*g\s*{_LINK}(?:prot[éeè]ines?|proteins?)\b")
CARBS_RE = re.compile(rf"{_NUM}\s*g\s*{_LINK}(?:glucides|carbs|carbohydrates)\b")
FATS_RE = re.compile(rf"{_NUM}\s*g\s*{_LINK}(?:lipides|fats?|matières grasses)\b")

HOURS_RE = re.compile(r"(\d+)\s*(?:heures?|hours?|hrs?|h)(?![a-zà-ÿ])\s*(\d{1,2})?")
MINUTES_RE = re.compile(r"(\d+)\s*(?:minutes?|mins?|mn)\b")

TIME_BUCKETS = {"quick": 15, "rapide": 15, "express": 15, "medium": 30, "moyen": 30, "long": 45}
DEFAULT_TIME_BUCKET = 30

BASE_CALORIES = {Goal.GAIN_MUSCLE: 600.0, Goal.LOSE_WEIGHT: 300.0}
BASE_PROTEIN = {Goal.GAIN_MUSCLE: 35.0, Goal.LOSE_WEIGHT: 25.0}
DEFAULT_CALORIES = 400.0
DEFAULT_PROTEIN = 20.0
MAX_ESTIMATED_PROTEIN = 60.0
LEAN_PROTEIN_WORDS = ["poulet", "thon", "saumon", "chicken", "tuna", "salmon"]
EGG_WORDS = ["œuf", "oeuf", "egg"]
PLANT_PROTEIN_WORDS = ["quinoa", "lentilles", "lentils"]
SUPPLEMENT_WORDS = ["whey", "protéine"]

EXERCISE_RE = re.compile(
    rf"(?<![\w'])(?:{_alternation(EXERCISE_WORDS)})s?(?![\w'])"
    r"(?:\s*[:\-]?\s*\d+\s*(?:x|×|séries?\s+de)\s*\d+)?"
)
SETS_RE = re.compile(r"\b\d+\s*(?:séries?|sets?)\s*(?:de\s*)?\d+\s*(?:répétitions?|reps?)\b")
SETS_HINTS = ["4x", "3x", "sets"]

class QualityWeights(BaseModel):
    """품질 점수 가중치: 튜닝값 (기본값은 settings)"""
    ingredient: float = 8.0
    keyword: float = 7.0
    length_steps: List[int] = Field(default_factory=lambda: [100, 200])
    length_bonus: float = 10.0
    max_score: float = 100.0

    @classmethod
    def from_settings(cls, cfg: Settings = settings) -> "QualityWeights":
        return cls(
            ingredient=cfg.QUALITY_INGREDIENT_WEIGHT,
            keyword=cfg.QUALITY_KEYWORD_WEIGHT,
            length_steps=list(cfg.QUALITY_LENGTH_STEPS),
            length_bonus=cfg.QUALITY_LENGTH_BONUS,
            max_score=cfg.QUALITY_MAX,
        )

PROGRAM_WEIGHTS = QualityWeights(ingredient=10.0, keyword=8.0, length_steps=[150], length_bonus=15.0)
SETS_BONUS = 10.0

# ------------------------------
# 하위 알고리즘
# ------------------------------

def _has_any(text: str, words: Iterable[str]) -> bool:
    return any(w in text for w in words)

def detect_ingredients(text: str, limit: Optional[int] = None) -> List[str]:
    t = (text or "").lower()
    cap = settings.HEURISTIC_MAX_INGREDIENTS if limit is None else limit
    out: List[str] = []
    seen = set()
    for rx in INGREDIENT_PATTERNS:
        for m in rx.finditer(t):
            found = re.sub(r"\s+", " ", m.group(0)).strip()
            key = normalize_name(found)
            if len(found) <= 2 or not key or key in seen:
                continue
            seen.add(key)
            out.append(found)
    return out[:cap]

def food_groups(text: str) -> List[str]:
    t = (text or "").lower()
    return [g for g in FOOD_GROUPS if any(re.search(rf"(?<![\w']){re.escape(w)}(?![\w'])", t) for w in CANON[g])]

def estimate_calories(text: str, goal: Optional[Goal] = None) -> float:
    t = (text or "").lower()
    kcal = BASE_CALORIES.get(goal, DEFAULT_CALORIES)
    if _has_any(t, RICH_WORDS):
        kcal += 100
    if _has_any(t, STARCH_WORDS):
        kcal += 80
    if _has_any(t, LIGHT_WORDS):
        kcal -= 50
    return kcal

def estimate_protein(text: str, goal: Optional[Goal] = None) -> float:
    t = (text or "").lower()
    protein = BASE_PROTEIN.get(goal, DEFAULT_PROTEIN)
    if _has_any(t, LEAN_PROTEIN_WORDS):
        protein += 15
    if _has_any(t, EGG_WORDS):
        protein += 10
    if _has_any(t, PLANT_PROTEIN_WORDS):
        protein += 8
    if _has_any(t, SUPPLEMENT_WORDS):
        protein += 20
    return min(protein, MAX_ESTIMATED_PROTEIN)

def _capture(rx: re.Pattern, text: str) -> Optional[float]:
    m = rx.search(text)
    if not m:
        return None
    return parse_number(m.group(1), 0.0)

def extract_nutrition(text: str, goal: Optional[Goal] = None) -> Nutrition:
    t = (text or "").lower()
    calories = _capture(CALORIES_RE, t)
    protein = _capture(PROTEIN_RE, t)
    return Nutrition(
        calories=calories if calories is not None else estimate_calories(t, goal),
        protein=protein if protein is not None else estimate_protein(t, goal),
        carbs=_capture(CARBS_RE, t) or 0.0,
        fats=_capture(FATS_RE, t) or 0.0,
    )

def has_explicit_nutrition(text: str) -> bool:
    t = (text or "").lower()
    return any(rx.search(t) for rx in (CALORIES_RE, PROTEIN_RE, CARBS_RE, FATS_RE))

def explicit_minutes(text: str, cap: int) -> Optional[int]:
    t = (text or "").lower()
    m = HOURS_RE.search(t)
    if m:
        minutes = int(m.group(1)) * 60 + int(m.group(2) or 0)
        return min(minutes, cap)
    m = MINUTES_RE.search(t)
    if m:
        return min(int(m.group(1)), cap)
    return None

def extract_time(text: str, time_preference: Optional[str] = None) -> int:
    found = explicit_minutes(text, settings.HEURISTIC_MAX_MINUTES)
    if found is not None:
        return found
    return TIME_BUCKETS.get((time_preference or "").strip().lower(), DEFAULT_TIME_BUCKET)

def quality_score(
    text: str,
    ingredient_count: int,
    weights: Optional[QualityWeights] = None,
    keywords: Iterable[str] = QUALITY_KEYWORDS,
) -> float:
    w = weights or QualityWeights.from_settings()
    t = (text or "").lower()
    score = ingredient_count * w.ingredient
    score += sum(w.keyword for k in keywords if k in t)
    score += sum(w.length_bonus for n in w.length_steps if len(t) > n)
    return min(score, w.max_score)

def detect_category(text: str) -> MealCategory:
    t = (text or "").lower()
    for key in sorted(CATEGORY_SYNONYMS, key=len, reverse=True):
        if re.search(rf"(?<![\w-]){re.escape(key)}(?![\w-])", t):
            return MealCategory(CATEGORY_SYNONYMS[key])
    return MealCategory.SNACK

def clean_name(block: str) -> str:
    lines = [ln for ln in (block or "").strip().splitlines() if ln.strip()]
    if not lines:
        return ""
    s = lines[0].strip().lstrip("#*>- ").strip()
    s = re.sub(r"^\[[^\]]*\]\s*", "", s)                           # [Vidéo] 같은 접두 제거
    s = re.sub(r"^(?:recette|recipe)\s*(?:de\s+|d'|:|-)?\s*", "", s, flags=re.I)
    s = re.sub(r"\s+[-|–]\s+.*$", "", s)                           # "... - Marmiton" 꼬리 제거
    s = re.split(r"[,.;:!?]", s, maxsplit=1)[0]
    s = re.sub(r"\s+", " ", s).strip(" *_#")
    return s[:MAX_NAME].rstrip()

def clean_description(block: str) -> str:
    s = re.sub(r"\s+", " ", (block or "")).strip()
    s = re.sub(r"(?:\.\.\.|…)$", "", s).strip()
    return s if len(s) <= MAX_DESCRIPTION else s[:MAX_DESCRIPTION].rstrip() + "…"

def split_blocks(text: str) -> List[str]:
    # 빈 줄 기준 문단 = 후보 하나
    return [b.strip() for b in re.split(r"\n\s*\n", text or "") if b.strip()]

def rank(candidates: List[BaseModel]) -> List[BaseModel]:
    # 점수 내림차순, 동점은 원래 순서 유지 (sorted는 stable)
    return sorted(candidates, key=lambda c: -(c.provenance.quality_score or 0.0))

# ------------------------------
# 레시피
# ------------------------------

def extract_recipe(block: str, context: Optional[HeuristicContext] = None) -> Optional[Recipe]:
    """문단 하나 → Recipe. 재료도 명시 영양 수치도 없으면 None"""
    ctx = context or HeuristicContext()
    ingredients = detect_ingredients(block)
    if not ingredients and not has_explicit_nutrition(block):
        return None

    name = clean_name(block)
    if not name:
        return None

    t = block.lower()
    return Recipe(
        name=name,
        description=clean_description(block),
        category=detect_category(t),
        nutrition=extract_nutrition(t, ctx.goal),
        time=extract_time(t, ctx.time_preference),
        ingredients=ingredients,
        tags=build_tags(food_groups(t), _has_any(t, LIGHT_WORDS)),
        provenance=Provenance(
            source=Source.HEURISTIC,
            quality_score=quality_score(t, len(ingredients)),
        ),
    )

def extract_candidates(blocks: Iterable[str], context: Optional[HeuristicContext] = None) -> List[Recipe]:
    out = [r for r in (extract_recipe(b, context) for b in blocks) if r is not None]
    return rank(out)

def extract_from_prose(text: str, context: Optional[HeuristicContext] = None) -> List[Recipe]:
    recipes = extract_candidates(split_blocks(text), context)
    log.debug("heuristic recipes=%d", len(recipes))
    return recipes

# ------------------------------
# 운동 프로그램
# ------------------------------

def detect_exercises(text: str, limit: Optional[int] = None) -> List[str]:
    t = (text or "").lower()
    cap = settings.HEURISTIC_MAX_EXERCISES if limit is None else limit
    out: List[str] = []
    for rx in (EXERCISE_RE, SETS_RE):
        for m in rx.finditer(t):
            found = re.sub(r"\s+", " ", m.group(0)).strip()
            if len(found) > 3 and found not in out:
                out.append(found)
    return out[:cap]

def detect_level(text: str) -> str:
    t = (text or "").lower()
    for level, words in LEVELS.items():
        if _has_any(t, words):
            return level
    return "intermédiaire"

def program_quality(text: str, exercise_count: int) -> float:
    t = (text or "").lower()
    score = quality_score(t, exercise_count, weights=PROGRAM_WEIGHTS, keywords=PROGRAM_KEYWORDS)
    if _has_any(t, SETS_HINTS):
        score += SETS_BONUS
    return min(score, PROGRAM_WEIGHTS.max_score)

def extract_program(block: str, context: Optional[HeuristicContext] = None) -> Optional[WorkoutProgram]:
    exercises = detect_exercises(block)
    title = clean_name(block)
    if not exercises or not title:
        return None

    t = block.lower()
    duration = explicit_minutes(t, settings.HEURISTIC_MAX_WORKOUT_MINUTES)
    return WorkoutProgram(
        title=title,
        description=clean_description(block),
        level=detect_level(t),
        duration=duration if duration is not None else settings.HEURISTIC_DEFAULT_WORKOUT_MINUTES,
        exercises=exercises,
        muscle_groups=[m for m in MUSCLE_GROUPS if m in t][:MAX_MUSCLE_GROUPS],
        provenance=Provenance(source=Source.HEURISTIC, quality_score=program_quality(t, len(exercises))),
    )

def extract_programs(text: str, context: Optional[HeuristicContext] = None) -> List[WorkoutProgram]:
    out = [p for p in (extract_program(b, context) for b in split_blocks(text)) if p is not None]
    return rank(out)
