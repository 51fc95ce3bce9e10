import pytest

from fitcoach.models.schemas import SchemaHint
from fitcoach.services.decoder.validate import (
    Shape, detect_shape, is_collection, is_record, validate_structure, wrapped_items,
)

def test_record_needs_name_and_one_optional_field():
    assert is_record({"name": "Bowl", "time": 10})
    assert not is_record({"name": "Bowl"})
    assert not is_record({"name": "   ", "time": 10})
    assert not is_record({"time": 10})
    assert not is_record(["name"])

def test_collection_elements_need_a_name():
    assert is_collection([{"name": "A"}, {"name": "B", "time": 5}])
    assert not is_collection([{"name": "A"}, {"title": "B"}])

def test_wrapped_items():
    assert wrapped_items({"recipes": [1]}) == [1]
    assert wrapped_items({"meals": []}) == []
    assert wrapped_items({"recipes": "x"}) is None
    assert wrapped_items([1]) is None

@pytest.mark.parametrize("value,shape", [
    ({"name": "A", "calories": 100}, Shape.RECORD),
    ([{"name": "A"}], Shape.COLLECTION),
    ({"recipes": [{"name": "A"}]}, Shape.WRAPPED),
    ({"records": [{"name": "A"}]}, Shape.WRAPPED),
    ({"foo": 1}, None),
    ("text", None),
    (42, None),
    ({"recipes": [{"foo": 1}]}, None),
])
def test_detect_shape(value, shape):
    assert detect_shape(value) == shape

def test_schema_hint_restricts_shape():
    record = {"name": "A", "time": 5}
    assert validate_structure(record)
    assert validate_structure(record, SchemaHint.ANY)
    assert validate_structure(record, SchemaHint.RECORD)
    assert not validate_structure(record, SchemaHint.COLLECTION)
    assert validate_structure([record], SchemaHint.COLLECTION)
