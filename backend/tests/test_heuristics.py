# 산문 휴리스틱 추출 (레시피 + 운동 프로그램)
import pytest

from fitcoach.core.config import settings
from fitcoach.models.schemas import Goal, HeuristicContext, MealCategory, Source
from fitcoach.services.decoder.heuristics import (
    QualityWeights, clean_name, detect_category, detect_ingredients, extract_candidates,
    extract_from_prose, extract_nutrition, extract_program, extract_programs, extract_recipe,
    extract_time, quality_score,
)

SENTENCE = "Poulet grillé, 30g de protéines, 450 kcal, prêt en 20 minutes"

def test_explicit_captures_from_sentence():
    rec = extract_recipe(SENTENCE)
    assert rec is not None
    assert rec.name == "Poulet grillé"
    assert rec.nutrition.protein == 30
    assert rec.nutrition.calories == 450
    assert rec.time == 20
    assert rec.ingredients == ["poulet"]
    assert rec.provenance.source == Source.HEURISTIC
    assert rec.provenance.quality_score is not None

def test_ingredients_dedup_by_normalized_name():
    assert detect_ingredients("200g de poulet et encore du poulet") == ["200g de poulet"]

def test_ingredients_capped():
    text = "poulet, riz, brocolis, tomates, avocat, thon, saumon, quinoa"
    found = detect_ingredients(text)
    assert found == ["poulet", "riz", "brocolis", "tomates", "avocat", "thon"]
    assert len(detect_ingredients(text, limit=2)) == 2

def test_liquid_needs_quantity():
    assert detect_ingredients("250 ml de lait") == ["250 ml de lait"]
    assert detect_ingredients("un verre de lait") == []

def test_nutrition_fallback_by_goal_and_keywords():
    n = extract_nutrition("salade de quinoa", Goal.LOSE_WEIGHT)
    assert n.calories == 300 + 80 - 50
    assert n.protein == 25 + 8
    assert n.carbs == 0
    base = extract_nutrition("omelette")
    assert (base.calories, base.protein) == (400, 20)
    rich = extract_nutrition("omelette avocat", Goal.GAIN_MUSCLE)
    assert rich.calories == 700

def test_estimated_protein_is_capped():
    n = extract_nutrition("poulet, oeuf, lentilles, whey", Goal.GAIN_MUSCLE)
    assert n.protein == 60

def test_explicit_macros():
    n = extract_nutrition("520 kcal - 35 g protein, 40 g carbs, 12 g lipides")
    assert (n.calories, n.protein, n.carbs, n.fats) == (520, 35, 40, 12)

@pytest.mark.parametrize("text,pref,minutes", [
    ("cuisson 1h30", None, 90),
    ("compter 2 heures", None, 120),
    ("mijoter 3 heures", None, 120),
    ("prêt en 25 min", None, 25),
    ("sans indication", "quick", 15),
    ("sans indication", "long", 45),
    ("sans indication", None, 30),
])
def test_extract_time(text, pref, minutes):
    assert extract_time(text, pref) == minutes

def test_quality_score_weights():
    assert quality_score("", 0) == 0
    w = QualityWeights(ingredient=1, keyword=0, length_steps=[], length_bonus=0, max_score=3)
    assert quality_score("x", 2, weights=w) == 2
    assert quality_score("x", 10, weights=w) == 3

def test_quality_weights_from_settings():
    w = QualityWeights.from_settings()
    assert w.ingredient == 8.0
    assert w.length_steps == [100, 200]

def test_detect_category():
    assert detect_category("Idée de petit-déjeuner protéiné") == MealCategory.BREAKFAST
    assert detect_category("pour le dîner") == MealCategory.DINNER
    assert detect_category("rien") == MealCategory.SNACK

@pytest.mark.parametrize("block,name", [
    ("[Vidéo] Recette de Bowl poulet - Marmiton\nsuite", "Bowl poulet"),
    ("## Salade niçoise: fraîche", "Salade niçoise"),
    ("\n\n  **Porridge avoine**  \n", "Porridge avoine"),
])
def test_clean_name(block, name):
    assert clean_name(block) == name

def test_nothing_detected_is_none():
    assert extract_recipe("n'importe quoi sans JSON") is None

def test_richer_candidate_sorts_first():
    poor = "Snack rapide\nUne banane."
    rich = "Bowl protéiné\nIngrédients : 200g de poulet, riz, brocolis. Préparation : cuisson 20 minutes."
    out = extract_candidates([poor, rich])
    assert [r.name for r in out] == ["Bowl protéiné", "Snack rapide"]

def test_ties_keep_original_order():
    out = extract_candidates(["Snack A\nbanane", "Snack B\ntomate"])
    assert [r.name for r in out] == ["Snack A", "Snack B"]
    assert out[0].provenance.quality_score == out[1].provenance.quality_score

def test_extract_from_prose_splits_blocks_and_uses_context():
    text = "Salade de thon\nthon, tomates\n\nblabla sans rien\n\nPorridge\navoine et banane"
    out = extract_from_prose(text, HeuristicContext(goal=Goal.LOSE_WEIGHT, time_preference="quick"))
    assert {r.name for r in out} == {"Salade de thon", "Porridge"}
    assert all(r.time == 15 for r in out)

PROGRAM = (
    "Programme débutant pectoraux\n"
    "Pompes 3x12, développé 4x10, planche. Séance de 45 minutes pour les pectoraux et les bras."
)

def test_extract_program():
    prog = extract_program(PROGRAM)
    assert prog is not None
    assert prog.title == "Programme débutant pectoraux"
    assert prog.level == "débutant"
    assert prog.duration == 45
    assert prog.exercises == ["pompes 3x12", "développé 4x10", "planche"]
    assert prog.muscle_groups == ["pectoraux", "bras"]
    assert prog.provenance.source == Source.HEURISTIC
    assert 0 < prog.provenance.quality_score <= 100

def test_program_defaults_and_ranking():
    short = "Routine\nsquat"
    out = extract_programs(short + "\n\n" + PROGRAM + "\n\nrien ici")
    assert [p.title for p in out] == ["Programme débutant pectoraux", "Routine"]
    assert out[1].duration == 60
    assert out[1].level == "intermédiaire"

def test_program_default_duration_comes_from_settings(monkeypatch):
    monkeypatch.setattr(settings, "HEURISTIC_DEFAULT_WORKOUT_MINUTES", 40)
    prog = extract_program("Routine\nsquat")
    assert prog.duration == 40

def test_program_without_exercises_is_none():
    assert extract_program("Juste une phrase") is None
