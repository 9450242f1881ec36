import json
from decimal import Decimal

import pytest

from bill_splitter import BillSplitter
from errors import EmptyAllocationError, MalformedResponseError, SplitResponseError
from response_parser import ResponseParser, strip_code_fences


@pytest.fixture
def parser():
    return ResponseParser()


@pytest.mark.parametrize("text", [
    '```json\n{"a": 1}\n```',
    '```\n{"a": 1}\n```',
    '  {"a": 1}  ',
    '```JSON {"a": 1}```',
])
def test_strip_code_fences(text):
    assert strip_code_fences(text) == '{"a": 1}'


def test_normalize_builds_typed_split(parser, split_payload):
    split = parser.normalize(split_payload)

    assert split.total == Decimal("108.00")
    alex = split.individuals[0]
    assert alex.name == "Alex"
    assert alex.items[1].name == "Beer"
    assert alex.items[1].quantity == 2
    assert alex.items[1].price == Decimal("6.00")
    assert alex.tax_share == Decimal("2.40")
    assert alex.owed == Decimal("32.40")


def test_normalize_passes_amounts_through_unchanged(parser, split_payload):
    split_payload["individuals"][1]["owed"] = 1.00
    split = parser.normalize(split_payload)
    assert split.individuals[1].owed == Decimal("1.00")


def test_parse_text_round_trips_wire_names(parser, split_text):
    split = parser.parse_text(split_text)
    wire = split.to_dict()
    assert set(wire) == {"total", "individuals"}
    assert set(wire["individuals"][0]) == {"name", "items", "subtotal", "taxShare", "tipShare", "owed"}
    assert set(wire["individuals"][0]["items"][0]) == {"name", "price", "quantity"}


@pytest.mark.parametrize("payload", [
    {"total": 100},
    {"total": 100, "individuals": None},
    {"total": 100, "individuals": {"name": "Alex"}},
    {"total": 100, "individuals": "Alex"},
])
def test_missing_individuals_list(parser, payload):
    with pytest.raises(MalformedResponseError) as excinfo:
        parser.normalize(payload)
    assert excinfo.value.kind == "MalformedResponse"
    assert excinfo.value.field == "individuals"
    assert "missing individuals list" in str(excinfo.value)


def test_empty_individuals_is_empty_allocation(parser):
    with pytest.raises(EmptyAllocationError) as excinfo:
        parser.normalize({"total": 100, "individuals": []})
    assert excinfo.value.kind == "EmptyAllocation"


def test_individuals_checked_before_total(parser):
    with pytest.raises(EmptyAllocationError):
        parser.normalize({"individuals": []})


def test_missing_total(parser):
    with pytest.raises(MalformedResponseError) as excinfo:
        parser.normalize({"individuals": [{"name": "Alex"}]})
    assert excinfo.value.field == "total"


@pytest.mark.parametrize("payload", [[], "text", 42, None])
def test_payload_not_an_object(parser, payload):
    with pytest.raises(MalformedResponseError):
        parser.normalize(payload)


@pytest.mark.parametrize("person, field", [
    ("Alex", "individuals[0]"),
    ({"items": []}, "individuals[0].name"),
    ({"name": "  "}, "individuals[0].name"),
    ({"name": "Alex", "items": "burger"}, "individuals[0].items"),
    ({"name": "Alex", "items": [{"price": 3}]}, "individuals[0].items[0].name"),
    ({"name": "Alex", "items": [{"name": "Tea"}]}, "individuals[0].items[0].price"),
    ({"name": "Alex", "items": [{"name": "Tea", "price": "free"}]}, "individuals[0].items[0].price"),
    ({"name": "Alex", "items": [{"name": "Tea", "price": -1}]}, "individuals[0].items[0].price"),
    ({"name": "Alex", "items": [{"name": "Tea", "price": 2, "quantity": 0}]}, "individuals[0].items[0].quantity"),
    ({"name": "Alex", "items": [{"name": "Tea", "price": 2, "quantity": 1.5}]}, "individuals[0].items[0].quantity"),
    ({"name": "Alex", "owed": "lots"}, "individuals[0].owed"),
])
def test_malformed_person_or_item(parser, person, field):
    with pytest.raises(MalformedResponseError) as excinfo:
        parser.normalize({"total": 10, "individuals": [person]})
    assert excinfo.value.field == field


def test_optional_fields_default(parser):
    split = parser.normalize({
        "total": "12.50",
        "individuals": [{"name": "Jo", "items": [{"name": "Wine", "price": "12.5", "quantity": 1.0}]}],
    })
    jo = split.individuals[0]
    assert jo.items[0].quantity == 1
    assert jo.items[0].price == Decimal("12.50")
    assert jo.subtotal == 0
    assert jo.owed == 0
    assert split.total == Decimal("12.50")


def test_missing_items_means_no_items(parser):
    split = parser.normalize({"total": 5, "individuals": [{"name": "Jo"}]})
    assert split.individuals[0].items == []


def test_category_is_kept(parser):
    split = parser.normalize({
        "total": 5,
        "individuals": [{"name": "Jo", "items": [{"name": "IPA", "price": 5, "category": "alcohol"}]}],
    })
    assert split.individuals[0].items[0].category == "alcohol"


@pytest.mark.parametrize("text", ["", "   ", "not json", '{"total": 1,', None])
def test_parse_text_failures(parser, text):
    with pytest.raises(MalformedResponseError):
        parser.parse_text(text)


def test_error_carries_diagnostics(parser):
    with pytest.raises(SplitResponseError) as excinfo:
        parser.parse_text("```json\nnope\n```")
    details = excinfo.value.to_dict()
    assert details["kind"] == "MalformedResponse"
    assert details["excerpt"] == "nope"


def test_errors_are_value_errors(parser):
    with pytest.raises(ValueError):
        parser.normalize({"total": 1, "individuals": []})


def test_parse_text_fenced_payload(parser, split_payload):
    split = parser.parse_text("```json\n" + json.dumps(split_payload) + "\n```")
    assert len(split.individuals) == 2


@pytest.mark.parametrize("payload, field", [
    ({"total": 1e30, "individuals": [{"name": "A", "items": []}]}, "total"),
    ({"total": 10, "individuals": [{"name": "A", "items": [{"name": "Gold", "price": 1e40}]}]},
     "individuals[0].items[0].price"),
    ({"total": 10, "individuals": [{"name": "A", "items": [{"name": "Tea", "price": 2, "quantity": 1e29}]}]},
     "individuals[0].items[0].quantity"),
    ({"total": 10, "individuals": [{"name": "A", "taxShare": 10 ** 40}]}, "individuals[0].taxShare"),
])
def test_out_of_range_numbers_are_malformed(parser, payload, field):
    with pytest.raises(MalformedResponseError) as excinfo:
        parser.normalize(payload)
    assert excinfo.value.field == field


def test_out_of_range_quantity_never_reaches_the_pipeline(split_payload):
    split_payload["individuals"][0]["items"][0]["quantity"] = 1e29
    with pytest.raises(MalformedResponseError):
        BillSplitter().split_payload(split_payload)


def test_non_finite_json_numbers(parser):
    with pytest.raises(MalformedResponseError) as excinfo:
        parser.parse_text('{"total": Infinity, "individuals": [{"name": "A"}]}')
    assert excinfo.value.field == "total"


@pytest.mark.parametrize("item, field", [
    ({"name": "Tea", "price": True}, "individuals[0].items[0].price"),
    ({"name": "Tea", "price": 2, "quantity": True}, "individuals[0].items[0].quantity"),
])
def test_booleans_are_not_numbers(parser, item, field):
    with pytest.raises(MalformedResponseError) as excinfo:
        parser.normalize({"total": 2, "individuals": [{"name": "A", "items": [item]}]})
    assert excinfo.value.field == field


def test_wire_aliases_and_nulls(parser):
    split = parser.normalize({
        "total": 20,
        "individuals": [{
            "name": " Jo ",
            "items": None,
            "taxShare": "1.005",
            "tipShare": None,
        }],
    })
    jo = split.individuals[0]
    assert jo.name == "Jo"
    assert jo.items == []
    assert jo.tax_share == Decimal("1.01")
    assert jo.tip_share == Decimal("0.00")


def test_validation_error_excerpt_shows_offending_value(parser):
    with pytest.raises(MalformedResponseError) as excinfo:
        parser.normalize({"total": 2, "individuals": [{"name": "A", "owed": "lots"}]})
    assert excinfo.value.excerpt == "lots"
