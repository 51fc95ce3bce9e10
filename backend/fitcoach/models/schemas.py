# fitcoach/models/schemas.py
# 표준 레코드(레시피/운동 프로그램) + API 입출력 스키마
from __future__ import annotations
from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fitcoach.models.tags import is_placeholder

MAX_DESCRIPTION = 500

# 공통 유틸
def _clip_text(s: str, limit: int) -> str:
    s = (s or "").strip().replace("\n", " ")
    return s if len(s) <= limit else s[:limit - 1].rstrip() + "…"

class Source(str, Enum):
    DIRECT = "direct"
    REPAIRED = "repaired"
    HEURISTIC = "heuristic"

class MealCategory(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"

class Goal(str, Enum):
    LOSE_WEIGHT = "lose_weight"
    GAIN_MUSCLE = "gain_muscle"
    MAINTAIN = "maintain"

class SchemaHint(str, Enum):
    ANY = "any"
    RECORD = "record"
    COLLECTION = "collection"
    WRAPPED = "wrapped"

class Provenance(BaseModel):
    # 프론트는 camelCase(qualityScore)로 읽음
    model_config = ConfigDict(populate_by_name=True)

    source: Source = Source.DIRECT
    quality_score: Optional[float] = Field(default=None, alias="qualityScore")

class Nutrition(BaseModel):
    calories: float = Field(default=0.0, ge=0)
    protein: float = Field(default=0.0, ge=0)
    carbs: float = Field(default=0.0, ge=0)
    fats: float = Field(default=0.0, ge=0)

class IngredientItem(BaseModel):
    name: str = Field(..., min_length=1)
    quantity: Optional[Union[float, str]] = None
    unit: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _v_name(cls, v: str) -> str:
        v = v.strip()
        if not v or is_placeholder(v):
            raise ValueError("empty or placeholder ingredient name")
        return v

# 레시피 표준 레코드: 파이프라인 끝에서만 생성
class Recipe(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    description: str = ""
    category: MealCategory = MealCategory.SNACK
    difficulty: str = "facile"
    nutrition: Nutrition = Field(default_factory=Nutrition)
    time: int = Field(default=15, ge=0)        # 분
    servings: int = Field(default=1, ge=1)
    ingredients: List[Union[str, IngredientItem]] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    tips: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    mass_gain_score: float = Field(default=0.0, ge=0, alias="massGainScore")
    provenance: Provenance = Field(default_factory=Provenance)

    @field_validator("name", mode="before")
    @classmethod
    def _v_name(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("description", mode="before")
    @classmethod
    def _v_desc(cls, v: Any) -> str:
        return _clip_text(str(v or ""), MAX_DESCRIPTION)

class WorkoutProgram(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    level: str = "intermédiaire"
    duration: int = Field(default=60, ge=0)    # 분
    exercises: List[str] = Field(default_factory=list)
    muscle_groups: List[str] = Field(default_factory=list)
    provenance: Provenance = Field(default_factory=lambda: Provenance(source=Source.HEURISTIC))

# 휴리스틱 추정용 컨텍스트 (목표/조리시간 선호)
class HeuristicContext(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    goal: Optional[Goal] = None
    time_preference: Optional[str] = Field(default=None, alias="timePreference")

# ------------------------------
# API 입출력
# ------------------------------

class DecodeIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = None
    schema_hint: Optional[SchemaHint] = Field(default=None, alias="schemaHint")
    goal: Optional[Goal] = None
    time_preference: Optional[str] = Field(default=None, alias="timePreference")

class DecodeOut(BaseModel):
    ok: bool
    count: int
    records: List[Recipe] = Field(default_factory=list)

class ProgramsOut(BaseModel):
    ok: bool
    count: int
    programs: List[WorkoutProgram] = Field(default_factory=list)
