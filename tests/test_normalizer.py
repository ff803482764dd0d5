import json

import pytest

from quote_portal.modules.moveware.normalizer import (
    adapt_inventory,
    adapt_job,
    adapt_options,
    adapt_quotation_measurements,
    adapt_quotation_options,
    empty_to_none,
    format_money,
    normalize_control_type,
    normalize_question,
    normalize_questions,
    normalize_responses,
    normalize_show_editor,
    split_bullets,
    to_num,
    unwrap_question_list,
)


# Question fields

@pytest.mark.parametrize("raw, expected", [
    ("checkbox", "checkbox"),
    (" CHECKBOX ", "checkbox"),
    ("combo", "Combo"),
    ("VALUATION", "Valuation"),
    ("signature", "Signature"),
    ("Image Feedback", "image feedback"),
    ("Rating", "rating"),
    ("Heading", "heading"),
    ("Y", "radio"),
    ("", "radio"),
    ("dropdown", "radio"),
    (None, "radio"),
    (3, "radio"),
])
def test_normalize_control_type(raw, expected):
    assert normalize_control_type(raw) == expected


def test_responses_from_comma_string():
    assert normalize_responses("Yes, No ,Maybe") == ["Yes", "No", "Maybe"]


def test_responses_drop_empty_parts_and_keep_duplicates():
    assert normalize_responses("A,,B, ,A") == ["A", "B", "A"]


def test_responses_list_passes_through():
    assert normalize_responses(["Good", "Bad"]) == ["Good", "Bad"]


def test_responses_list_entries_are_trimmed_strings():
    assert normalize_responses([" 1 ", 2, None, "", "  "]) == ["1", "2"]


@pytest.mark.parametrize("raw", [None, 5, {"a": 1}, True])
def test_responses_other_types_are_empty(raw):
    assert normalize_responses(raw) == []


@pytest.mark.parametrize("raw, expected", [
    ("Y", "Y"),
    ("y", "Y"),
    ("Yes", "Y"),
    (" yes ", "Y"),
    ("N", "N"),
    ("No", "N"),
    ("", "N"),
    (None, "N"),
    (True, "N"),
])
def test_normalize_show_editor(raw, expected):
    assert normalize_show_editor(raw) == expected


def test_empty_to_none():
    assert empty_to_none("") is None
    assert empty_to_none(None) is None
    assert empty_to_none("Q1") == "Q1"


# Question list decoding

def test_unwrap_prefers_questions_key():
    raw = {"questions": [{"id": 1}], "results": [{"id": 2}], "data": [{"id": 3}]}
    unwrapped = unwrap_question_list(raw)
    assert unwrapped.shape == "questions"
    assert unwrapped.items == [{"id": 1}]


def test_unwrap_results_before_data():
    unwrapped = unwrap_question_list({"results": [{"id": 2}], "data": [{"id": 3}]})
    assert unwrapped.shape == "results"


def test_unwrap_data_and_bare_list():
    assert unwrap_question_list({"data": [{"id": 3}]}).shape == "data"
    assert unwrap_question_list([{"id": 4}]).shape == "bare"



THREE_QUESTIONS = [
    {"id": 3, "question": "Third", "sort": "003"},
    {"id": 1, "question": "First", "sort": "001", "controlType": "checkbox"},
    {"id": 2, "question": "Second", "sort": "002", "responses": "A, B"},
]


@pytest.mark.parametrize("raw", [
    {"questions": THREE_QUESTIONS},
    {"results": THREE_QUESTIONS},
    {"data": THREE_QUESTIONS},
    THREE_QUESTIONS,
])
def test_every_wrapper_normalizes_identically(raw):
    expected = normalize_questions(THREE_QUESTIONS)
    assert len(expected) == 3
    assert normalize_questions(raw) == expected

@pytest.mark.parametrize("raw", [None, {}, {"questions": "nope"}, "text", 42])
def test_unwrap_falls_back_to_empty(raw):
    unwrapped = unwrap_question_list(raw)
    assert unwrapped.shape == "empty"
    assert unwrapped.items == []


def test_normalize_question_serializes_with_camel_keys():
    question = normalize_question({
        "id": 7,
        "question": "How was the crew?",
        "controlType": "rating",
        "responses": "1,2,3,4,5",
        "showEditor": "yes",
        "sort": "010",
        "conditionalParent": "",
        "conditionalAnswer": "Yes",
    })

    body = question.model_dump(by_alias=True)
    assert body["controlType"] == "rating"
    assert body["responses"] == ["1", "2", "3", "4", "5"]
    assert body["showEditor"] == "Y"
    assert body["sort"] == "010"
    assert body["conditionalParent"] is None
    assert body["conditionalAnswer"] == "Yes"


def test_show_editor_defaults_to_n():
    body = normalize_question({"id": 1}).model_dump(by_alias=True)
    assert body["showEditor"] == "N"
    assert body["controlType"] == "radio"
    assert body["responses"] == []


def test_questions_sorted_by_sort_string():
    raw = {"questions": [
        {"id": "c", "sort": "010"},
        {"id": "a", "sort": "002"},
        {"id": "b", "sort": "009"},
    ]}
    assert [q.id for q in normalize_questions(raw)] == ["a", "b", "c"]


def test_questions_sort_is_string_order_not_numeric():
    raw = [{"id": "ten", "sort": "10"}, {"id": "nine", "sort": "9"}]
    assert [q.id for q in normalize_questions(raw)] == ["ten", "nine"]


def test_questions_sort_is_stable_for_equal_keys():
    raw = [{"id": 1, "sort": "001"}, {"id": 2, "sort": "001"}, {"id": 3, "sort": "000"}]
    assert [q.id for q in normalize_questions(raw)] == [3, 1, 2]


def test_questions_skip_non_object_entries():
    assert [q.id for q in normalize_questions({"data": [{"id": 1}, "junk", None]})] == [1]


# Coercion helpers

def test_to_num_parses_leading_number():
    assert to_num("12.5kg") == 12.5
    assert to_num("abc") == 0
    assert to_num(None) == 0
    assert to_num(True) == 0


@pytest.mark.parametrize("raw", [float("nan"), float("inf"), float("-inf"), 10 ** 400, "1e400"])
def test_to_num_non_finite_is_zero(raw):
    assert to_num(raw) == 0


def test_format_money_uses_separators():
    assert format_money(2431.818) == "2,431.82"
    assert format_money(1050) == "1,050.00"


def test_split_bullets_strips_markers():
    assert split_bullets("• Packing\n- Loading\n* Transport\n\n  Storage ") == [
        "Packing",
        "Loading",
        "Transport",
        "Storage",
    ]


# Job

def test_adapt_job_maps_addresses_measures_and_manager():
    raw = {
        "data": {
            "id": "111505",
            "titleName": "Mr",
            "firstName": "Leigh",
            "lastName": "Morrow",
            "type": "LR",
            "addresses": {
                "Uplift": {"line1": "3 Spring Water Crescent", "city": "Cranbourne", "postcode": "3977"},
                "Delivery": {"line1": "12 Cato Street", "city": "Hawthorn East", "state": "VIC"},
            },
            "measures": [{"volume": {"gross": {"m3": 0.62}}, "weight": {"gross": {"kg": 70}}}],
            "roles": {"salesRepresentative": {"entity": {"firstName": "Sarah", "lastName": "Johnson"}}},
        }
    }

    job = adapt_job(raw)
    assert job.id == 111505
    assert job.first_name == "Leigh"
    assert job.move_manager == "Sarah Johnson"
    assert job.uplift_city == "Cranbourne"
    assert job.delivery_state == "VIC"
    assert job.measures_volume_gross_m3 == 0.62
    assert job.measures_weight_gross_kg == 70
    assert job.branding.company_name == "Moveware"


def test_adapt_job_tolerates_garbage():
    job = adapt_job("not a job")
    assert job.id == 0
    assert job.uplift_line1 == ""


# Options (older endpoint)

def test_adapt_options_with_keyed_charges():
    raw = {"data": [{
        "id": 55,
        "optionDescription": "Premium Move",
        "description": "Full service",
        "valueInclusive": 1155,
        "valueExclusive": 1050,
        "charges": {
            "I": {"type": "I", "description": "Packing materials"},
            "I2": {"type": "I", "description": "Transit insurance"},
            "X": {"type": "X", "description": "Storage"},
        },
        "exclusions": ["Piano moving", ""],
    }]}

    [costing] = adapt_options(raw)
    assert costing.id == "55"
    assert costing.name == "Premium Move"
    assert costing.description == "Full service"
    assert costing.total_price == 1155
    assert costing.net_total == "1,050.00"
    assert costing.inclusions == ["Packing materials", "Transit insurance"]
    assert costing.exclusions == ["Piano moving"]
    assert costing.tax_included is True


def test_adapt_options_net_total_derived_from_total():
    [costing] = adapt_options([{"totalPrice": 2675, "taxIncluded": False}])
    assert costing.net_total == "2,431.82"
    assert costing.tax_included is False
    assert costing.id == "opt-0"
    assert costing.name == "Option 1"


def test_adapt_options_malformed_input_is_empty():
    assert adapt_options(None) == []
    assert adapt_options({"data": "x"}) == []


# Quotation options

QUOTATION = {
    "measurements": {
        "volume": {"gross": {"meters": 12.5}},
        "weight": {"gross": {"kilograms": 900, "pounds": 1984.2}},
    },
    "options": [
        {
            "id": 1,
            "optionDescription": "Option A",
            "valueInclusive": 0,
            "details": "Door to door",
            "inclusions": "• Packing\n• Loading",
            "exclusions": "- Storage",
            "charges": [
                {"id": 3, "description": "Insurance", "sort": "030", "rateInclusive": 100, "included": False,
                 "currency": "NZD", "currencySymbol": "NZ$"},
                {"id": 1, "description": "Base", "sort": "010", "rateExclusive": 0, "rateInclusive": 950,
                 "included": True, "oneTotal": "Y", "currency": "NZD", "currencySymbol": "NZ$"},
                {"id": 2, "description": "Fuel", "sort": "020", "rateExclusive": 90, "rateInclusive": 100,
                 "included": True},
            ],
        },
        {"id": 2, "valueInclusive": 2200, "charges": []},
    ],
}


def test_quotation_charges_sorted_by_sort_string():
    first = adapt_quotation_options(QUOTATION)[0]
    assert [c.heading for c in first.charges] == ["Base", "Fuel", "Insurance"]


def test_quotation_total_falls_back_to_included_charges():
    first = adapt_quotation_options(QUOTATION)[0]
    assert first.total_price == 1050
    assert first.net_total == "954.55"


def test_quotation_charge_price_and_flags():
    base, fuel, insurance = adapt_quotation_options(QUOTATION)[0].charges
    assert base.price == 950
    assert base.is_base_charge is True
    assert fuel.price == 90
    assert insurance.included is False
    assert base.currency == "NZD"


def test_quotation_option_fields():
    first, second = adapt_quotation_options(QUOTATION)
    assert first.name == "Option A"
    assert first.description == "Door to door"
    assert first.currency == "NZD"
    assert first.currency_symbol == "NZ$"
    assert first.inclusions == ["Packing", "Loading"]
    assert first.exclusions == ["Storage"]
    assert second.total_price == 2200
    assert second.net_total == "2,000.00"
    assert second.currency == "AUD"


def test_quotation_without_options_is_empty():
    assert adapt_quotation_options({"options": None}) == []
    assert adapt_quotation_options([]) == []


def test_measurements_are_separate_from_costings():
    measurements = adapt_quotation_measurements(QUOTATION)
    assert measurements.model_dump(by_alias=True) == {
        "volumeGrossM3": 12.5,
        "weightGrossKg": 900,
        "weightGrossPounds": 1984.2,
    }
    for costing in adapt_quotation_options(QUOTATION):
        assert "measurements" not in costing.model_dump(by_alias=True)


def test_measurements_default_to_zero():
    assert adapt_quotation_measurements({}).volume_gross_m3 == 0


# Inventory

def test_inventory_from_inventory_usage():
    raw = {"inventoryUsage": [
        {"id": 9, "description": "Sofa", "room": "Lounge", "quantity": 2,
         "volume": {"meter": 1.5}, "weight": {"kg": 40}, "typeCode": "FUR"},
        {"id": 10, "description": "Boxes", "quantity": 3, "cubetot": 0.9, "cube": 5},
    ]}

    sofa, boxes = adapt_inventory(raw)
    assert sofa.cube == 3.0
    assert sofa.weight_kg == 40
    assert sofa.type_code == "FUR"
    assert boxes.cube == 0.9


def test_inventory_other_root_keys_and_defaults():
    [item] = adapt_inventory({"inventoryItems": [{"name": "Lamp"}]})
    assert item.id == 1
    assert item.description == "Lamp"
    assert item.quantity == 1
    assert item.cube == 0


def test_non_finite_numbers_never_raise():
    raw = json.loads('{"inventoryUsage": [{"id": NaN, "quantity": Infinity, "cubetot": -Infinity}]}')
    [item] = adapt_inventory(raw)
    assert item.id == 1
    assert item.quantity == 1
    assert item.cube == 0

    options = json.loads('{"options": [{"id": 1, "charges": [{"id": 1e400, "rateInclusive": NaN}]}]}')
    [costing] = adapt_quotation_options(options)
    assert costing.charges[0].id == 0
    assert costing.net_total == "0.00"

    job = adapt_job(json.loads('{"id": Infinity, "jobValue": NaN}'))
    assert job.id == 0
    assert job.job_value == 0
