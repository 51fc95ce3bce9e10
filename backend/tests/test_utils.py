import pytest

from fitcoach.services.utils import normalize_name

@pytest.mark.parametrize("raw,key", [
    ("200g de poulet grillé", "poulet"),
    ("Poulet", "poulet"),
    ("chicken", "poulet"),
    ("Eggs", "œuf"),
    ("2 cs de riz cuit", "riz"),
    ("dessert", "dessert"),
    ("", ""),
])
def test_normalize_name(raw, key):
    assert normalize_name(raw) == key
