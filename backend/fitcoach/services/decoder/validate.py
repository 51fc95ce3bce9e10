# fitcoach/services/decoder/validate.py
# 파싱된 값이 허용 형태인지 판정하는 순수 predicate 모음
# (a) 단일 레코드 (b) 레코드 배열 (c) recipes/records 래퍼 객체

from __future__ import annotations
from enum import Enum
from typing import Any, Optional

from fitcoach.models.schemas import SchemaHint

REQUIRED_FIELDS = ("name",)
OPTIONAL_FIELDS = (
    "description", "ingredients", "instructions", "calories", "protein", "carbs", "fats",
    "time", "difficulty", "mealType", "category", "nutrition", "servings", "tips", "tags",
)
WRAPPER_KEYS = ("recipes", "records", "meals", "items")

class Shape(str, Enum):
    RECORD = "record"
    COLLECTION = "collection"
    WRAPPED = "wrapped"

def _present(value: Any) -> bool:
    if isinstance(value, str):
        return bool(value.strip())
    return bool(value)

def is_record(value: Any) -> bool:
    """name이 비어있지 않고, 선택 필드가 하나 이상 채워져 있으면 레코드"""
    if not isinstance(value, dict):
        return False
    if not all(_present(value.get(f)) for f in REQUIRED_FIELDS):
        return False
    return any(_present(value.get(f)) for f in OPTIONAL_FIELDS)

def is_named(value: Any) -> bool:
    # 배열 원소용 최소 조건: name만 있으면 된다 (나머지는 정규화 기본값)
    return isinstance(value, dict) and all(_present(value.get(f)) for f in REQUIRED_FIELDS)

def is_collection(value: Any) -> bool:
    return isinstance(value, list) and all(is_named(x) for x in value)

def wrapped_items(value: Any) -> Optional[list]:
    # 래퍼 키 중 처음 발견되는 리스트
    if not isinstance(value, dict):
        return None
    for k in WRAPPER_KEYS:
        v = value.get(k)
        if isinstance(v, list):
            return v
    return None

def detect_shape(value: Any) -> Optional[Shape]:
    if isinstance(value, list):
        return Shape.COLLECTION if is_collection(value) else None
    if is_record(value):
        return Shape.RECORD
    items = wrapped_items(value)
    if items is not None and is_collection(items):
        return Shape.WRAPPED
    return None

def validate_structure(value: Any, hint: Optional[SchemaHint] = None) -> bool:
    shape = detect_shape(value)
    if shape is None:
        return False
    if hint is None or hint == SchemaHint.ANY:
        return True
    return shape.value == hint.value
