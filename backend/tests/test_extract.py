# JSON 후보 추출 (펜스 → 배열 → 객체 → 전체 텍스트)
import pytest

from fitcoach.services.decoder.extract import extract_json, top_level_spans

def test_json_fence_wins_over_surrounding_prose():
    text = 'Voici ta recette {pas du json}\n```json\n{"name": "A"}\n```\nBon appétit [x]'
    assert extract_json(text) == '{"name": "A"}'

def test_json_fence_is_case_insensitive():
    assert extract_json('```JSON\n[1, 2]\n```') == "[1, 2]"

def test_generic_fence_drops_language_tag():
    assert extract_json("intro\n```python\n[1]\n```") == "[1]"

def test_generic_fence_without_tag():
    assert extract_json("```[1, 2]```") == "[1, 2]"

def test_array_preferred_over_object():
    assert extract_json('x {"a": 1} y [1, 2] z') == "[1, 2]"

def test_object_when_no_array():
    assert extract_json('Résultat : {"name": "Bowl", "time": 10} voilà') == '{"name": "Bowl", "time": 10}'

def test_brackets_inside_strings_do_not_close_span():
    assert extract_json('prefix {"a": "}"} suffix') == '{"a": "}"}'

def test_quotes_in_prose_are_ignored():
    assert extract_json('He said "hi" then {"a": 1}') == '{"a": 1}'

def test_unbalanced_falls_back_to_trimmed_text():
    assert extract_json('  [{"a": 1  ') == '[{"a": 1'

def test_unclosed_bracket_in_prose_does_not_hide_object():
    assert extract_json('Recette [v2 :\n{"name": "Bowl", "time": 10}') == '{"name": "Bowl", "time": 10}'

def test_truncated_array_yields_first_complete_object():
    text = '[{"name": "A", "time": 1}, {"name": "B", "ti'
    assert extract_json(text) == '{"name": "A", "time": 1}'

def test_restarts_are_bounded():
    spans = list(top_level_spans("[" * 1000 + '{"a": 1}'))
    assert spans == []

@pytest.mark.parametrize("text", [None, "", "   ", "n'importe quoi sans JSON", 42])
def test_no_candidate(text):
    assert extract_json(text) is None

def test_top_level_spans_skip_mismatched_closers():
    text = '] {"a": [1]} ] [2]'
    spans = [text[s:e] for s, e in top_level_spans(text)]
    assert spans == ['{"a": [1]}', "[2]"]
