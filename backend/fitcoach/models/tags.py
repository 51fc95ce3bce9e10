# fitcoach/models/tags.py
# 휴리스틱 추출용 어휘 사전 (프랑스어 우선 + 영어 보조)
# - 재료/키워드/식사 구분/운동 용어를 한 곳에서 관리
from typing import Dict, List, Optional
import re

# === 재료 어휘 =================================================================
CANON: Dict[str, List[str]] = {
    # 단백질 (영양 추정에서 단백질 가산)
    "protein": [
        "poulet", "bœuf", "boeuf", "porc", "dinde", "saumon", "thon", "cabillaud",
        "crevettes", "œufs", "œuf", "oeufs", "oeuf", "tofu", "lentilles", "pois chiches",
        "haricots", "fromage blanc", "skyr", "whey",
        "chicken", "beef", "pork", "turkey", "salmon", "tuna", "eggs", "egg", "beans",
    ],
    # 탄수화물
    "starch": [
        "quinoa", "riz", "pâtes", "pates", "avoine", "flocons d'avoine", "patate douce",
        "pommes de terre", "pain complet", "semoule",
        "rice", "pasta", "oats", "sweet potato", "potatoes", "bread",
    ],
    # 채소/과일
    "veg": [
        "brocolis", "brocoli", "épinards", "epinards", "tomates", "tomate", "courgettes",
        "courgette", "carottes", "poivrons", "champignons", "salade", "concombre", "banane",
        "broccoli", "spinach", "tomatoes", "zucchini", "carrots", "mushrooms", "banana",
    ],
    # 지방원 (칼로리 가산)
    "fat": [
        "avocat", "noix", "amandes", "huile d'olive", "beurre de cacahuète",
        "avocado", "nuts", "almonds", "olive oil", "peanut butter",
    ],
    # 액체 (수량 단위 ml/cl/l 패턴 전용)
    "liquid": ["lait", "eau", "bouillon", "huile", "milk", "water", "broth", "oil"],
}
FOOD_GROUPS = ["protein", "starch", "veg", "fat"]

# 플레이스홀더 토큰 (LLM이 빈 칸 대신 넣는 값): 비교는 casefold
PLACEHOLDER_TOKENS = {"ingrédient", "ingredient", "ingrédients", "ingredients"}

def is_placeholder(s: str) -> bool:
    return (s or "").strip().casefold() in PLACEHOLDER_TOKENS

# === 품질/추정 키워드 ===========================================================
QUALITY_KEYWORDS = [
    "ingrédients", "préparation", "cuisson", "étapes", "minutes", "calories", "protéines",
    "ingredients", "preparation", "steps", "protein",
]
LIGHT_WORDS = ["salade", "légumes", "léger", "light", "salad", "vapeur", "minceur"]
RICH_WORDS = ["avocat", "noix", "huile", "avocado", "nuts", "fromage", "crème", "cream"]
STARCH_WORDS = ["quinoa", "riz", "pâtes", "rice", "pasta"]

# === 식사 구분 =================================================================
# 입력 라벨(프/영) → MealCategory 값
CATEGORY_SYNONYMS: Dict[str, str] = {
    "breakfast": "breakfast", "petit-déjeuner": "breakfast", "petit-dejeuner": "breakfast",
    "petit déjeuner": "breakfast", "petit dejeuner": "breakfast", "brunch": "breakfast",
    "lunch": "lunch", "déjeuner": "lunch", "dejeuner": "lunch",
    "dinner": "dinner", "dîner": "dinner", "diner": "dinner", "souper": "dinner",
    "snack": "snack", "collation": "snack", "goûter": "snack", "gouter": "snack",
    "en-cas": "snack", "dessert": "snack",
}

def canonical_category(label: str) -> Optional[str]:
    """라벨을 식사 구분 값으로 변환. 모르면 None."""
    s = re.sub(r"\s+", " ", (label or "").strip().lower())
    if not s:
        return None
    if s in CATEGORY_SYNONYMS:
        return CATEGORY_SYNONYMS[s]
    # "Déjeuner rapide" 같은 꼬리말 허용 (긴 키 먼저)
    for key in sorted(CATEGORY_SYNONYMS, key=len, reverse=True):
        if s.startswith(key):
            return CATEGORY_SYNONYMS[key]
    return None

# === 운동 ======================================================================
EXERCISE_WORDS = [
    "squat", "pompes", "pompe", "tractions", "traction", "développé", "curl", "rowing",
    "dips", "planche", "burpees", "burpee", "fentes", "fente", "soulevé de terre",
    "push-ups", "pull-ups", "deadlift", "lunges", "plank",
]
MUSCLE_GROUPS = ["pectoraux", "dos", "jambes", "épaules", "bras", "abdominaux", "fessiers", "triceps", "biceps"]
PROGRAM_KEYWORDS = ["programme", "exercices", "séries", "répétitions", "semaines", "progression", "entraînement"]
LEVELS = {
    "débutant": ["débutant", "facile", "novice", "beginner"],
    "avancé": ["avancé", "expert", "confirmé", "advanced"],
}

# === 표시 태그 =================================================================
MAX_TAGS = 4

def build_tags(groups: List[str], light: bool, max_tags: int = MAX_TAGS) -> List[str]:
    """감지된 재료 그룹 → 카드 칩용 태그 (우선순위 고정)"""
    labels = {"protein": "protéiné", "starch": "féculents", "veg": "légumes", "fat": "bons gras"}
    out: List[str] = []
    for g in FOOD_GROUPS:
        if g in groups and labels[g] not in out:
            out.append(labels[g])
    if light:
        out.append("léger")
    return out[:max_tags]
