# fitcoach/services/decoder/normalize.py
# 검증된 값 → 표준 Recipe 레코드
# - 절대 예외를 던지지 않음
# - 배열 원소 하나가 깨져도 나머지는 살린다 (원소 단위로 독립 검증 후 포함)

from __future__ import annotations
import json
import logging
import math
import re
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from fitcoach.models.schemas import (
    IngredientItem, MealCategory, Nutrition, Provenance, Recipe, Source,
)
from fitcoach.models.tags import canonical_category, is_placeholder
from fitcoach.services.decoder.validate import is_record, wrapped_items

log = logging.getLogger(__name__)

DEFAULT_TIME = 15
DEFAULT_SERVINGS = 1
DEFAULT_DIFFICULTY = "facile"

NUM_STRIP_RE = re.compile(r"[^\d.\-]")
DECIMAL_COMMA_RE = re.compile(r"(\d),(\d{1,2})(?!\d)")   # 1,5 g → 1.5 (1,200 은 그대로)
LEADING_NUM_RE = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")
STRAY_MARK_RE = re.compile(r"(?<=[^\W\d_])\.|[.\-](?!\d)")   # "env. 300" / "ca.12" 의 마침표
SPLIT_RE = re.compile(r"[,\n]")

# 입력 키 후보 (LLM마다 제각각이라 다 받아줌)
CALORIE_KEYS = ["calories", "kcal", "calorie", "energy"]
PROTEIN_KEYS = ["protein", "proteins", "proteines", "protéines"]
CARB_KEYS = ["carbs", "carbohydrates", "glucides"]
FAT_KEYS = ["fats", "fat", "lipides"]
CATEGORY_KEYS = ["category", "mealType", "meal_type", "type"]
TIME_KEYS = ["time", "prepTime", "prep_time", "duration"]
MASS_GAIN_KEYS = ["massGainScore", "mass_gain_score"]
TEXT_KEYS = ["text", "instruction", "description", "step", "tip", "name", "value"]

# ------------------------------
# 스칼라
# ------------------------------

def parse_number(value: Any, default: float = 0.0) -> float:
    """숫자/문자열 → 음수 아닌 float. 실패하면 default"""
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, (int, float)):
        try:
            v = float(value)
        except OverflowError:
            return default
    elif isinstance(value, str):
        s = DECIMAL_COMMA_RE.sub(r"\1.\2", value)
        s = NUM_STRIP_RE.sub("", STRAY_MARK_RE.sub("", s))
        m = LEADING_NUM_RE.match(s)
        if not m:
            return default
        try:
            v = float(m.group(0))
        except ValueError:
            return default
    else:
        return default
    if not math.isfinite(v) or v < 0:
        return default
    return v

def parse_int(value: Any, default: int) -> int:
    return int(round(parse_number(value, default)))

def _text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list, tuple)):
        return ""
    if isinstance(value, Enum):
        value = value.value
    return str(value).strip()

def _first(d: Dict[str, Any], keys: List[str]) -> Any:
    for k in keys:
        v = d.get(k)
        if v is not None and v != "":
            return v
    return None

# ------------------------------
# 리스트
# ------------------------------

def _coerce_items(value: Any) -> List[Any]:
    # list / JSON 문자열 / 콤마·줄바꿈 구분 문자열 모두 리스트로
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, str) and value.strip():
        s = value.strip()
        if s.startswith("["):
            try:
                parsed = json.loads(s)
            except (ValueError, RecursionError):
                parsed = None
            if isinstance(parsed, list):
                return parsed
        return SPLIT_RE.split(s)
    return []

def _item_text(item: Any) -> str:
    if isinstance(item, dict):
        for k in TEXT_KEYS:
            v = item.get(k)
            if isinstance(v, str) and v.strip():
                return v.strip()
        return ""
    return _text(item)

def normalize_list(value: Any) -> List[str]:
    out: List[str] = []
    for item in _coerce_items(value):
        s = _item_text(item)
        if s and not is_placeholder(s):
            out.append(s)
    return out

def _quantity(value: Any) -> Optional[Union[float, str]]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        v = parse_number(value, -1.0)
        return v if v >= 0 else None
    s = _text(value)
    return s or None

def normalize_ingredient(item: Any) -> Optional[Union[str, IngredientItem]]:
    if isinstance(item, IngredientItem):
        item = item.model_dump()
    if isinstance(item, dict):
        name = _text(item.get("name") or item.get("ingredient") or item.get("item"))
        if not name or is_placeholder(name):
            return None
        qty = _first(item, ["quantity", "qty", "amount"])
        try:
            return IngredientItem(name=name, quantity=_quantity(qty), unit=_text(item.get("unit")) or None)
        except ValidationError:
            return None
    s = _item_text(item)
    return s if s and not is_placeholder(s) else None

def normalize_ingredients(value: Any) -> List[Union[str, IngredientItem]]:
    out: List[Union[str, IngredientItem]] = []
    for item in _coerce_items(value):
        ing = normalize_ingredient(item)
        if ing is not None:
            out.append(ing)
    return out

# ------------------------------
# 레코드
# ------------------------------

def _provenance(raw: Dict[str, Any], source: Optional[Source]) -> Provenance:
    if source is not None:
        return Provenance(source=source)
    prev = raw.get("provenance")
    if isinstance(prev, Provenance):
        return prev
    if isinstance(prev, dict):
        try:
            return Provenance.model_validate(prev)
        except ValidationError:
            pass
    return Provenance()

def _build(raw: Any, source: Optional[Source]) -> Optional[Recipe]:
    if isinstance(raw, Recipe):
        raw = raw.model_dump(mode="json", by_alias=True)
    if not isinstance(raw, dict):
        return None

    name = _text(raw.get("name"))
    if not name:
        return None

    nested = raw.get("nutrition") if isinstance(raw.get("nutrition"), dict) else {}

    def nutrient(keys: List[str]) -> float:
        v = _first(nested, keys)
        if v is None:
            v = _first(raw, keys)
        return parse_number(v, 0.0)

    category = canonical_category(_text(_first(raw, CATEGORY_KEYS))) or MealCategory.SNACK.value

    return Recipe(
        name=name,
        description=_text(raw.get("description")),
        category=MealCategory(category),
        difficulty=_text(raw.get("difficulty")) or DEFAULT_DIFFICULTY,
        nutrition=Nutrition(
            calories=nutrient(CALORIE_KEYS),
            protein=nutrient(PROTEIN_KEYS),
            carbs=nutrient(CARB_KEYS),
            fats=nutrient(FAT_KEYS),
        ),
        time=parse_int(_first(raw, TIME_KEYS), DEFAULT_TIME),
        servings=max(DEFAULT_SERVINGS, parse_int(raw.get("servings"), DEFAULT_SERVINGS)),
        ingredients=normalize_ingredients(raw.get("ingredients")),
        instructions=normalize_list(_first(raw, ["instructions", "steps", "directions"])),
        tips=normalize_list(raw.get("tips")),
        tags=normalize_list(raw.get("tags")),
        mass_gain_score=parse_number(_first(raw, MASS_GAIN_KEYS), 0.0),
        provenance=_provenance(raw, source),
    )

def normalize_record(value: Any, source: Optional[Source] = None) -> Optional[Recipe]:
    """
    단일 원소 → Recipe. 무효면 None.
    source를 안 주면 입력의 provenance를 그대로 유지 (재정규화해도 결과 동일)
    """
    try:
        return _build(value, source)
    except Exception as e:  # 원소 하나 때문에 배치 전체를 잃지 않는다
        log.debug("record dropped: %s", e)
        return None

def normalize_records(value: Any, source: Optional[Source] = None) -> List[Recipe]:
    # 레코드 / 배열 / 래퍼 객체 모두 허용
    if isinstance(value, (list, tuple)):
        items = list(value)
    elif isinstance(value, Recipe) or is_record(value):
        items = [value]
    else:
        items = wrapped_items(value)
        if items is None:
            items = [value] if isinstance(value, dict) else []

    out: List[Recipe] = []
    for i, item in enumerate(items):
        rec = normalize_record(item, source)
        if rec is None:
            log.debug("element #%d dropped during normalization", i)
            continue
        out.append(rec)
    return out
