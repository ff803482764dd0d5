"""
Moveware response normalizers.

The Moveware REST API is inconsistent between endpoints and between tenants
(field names drift, lists arrive as comma-joined strings, enum values arrive in
any casing). Every function here takes raw JSON and returns a stable internal
shape. None of them raise on malformed input: missing or odd values fall back
to defaults.
"""

import math
import re
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple

from .models import (
    Branding,
    CostingCharge,
    InventoryItem,
    Job,
    NormalizedCosting,
    NormalizedMeasurement,
    NormalizedQuestion,
)


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------

def to_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _finite(value: Any) -> float:
    # JSON bodies may carry NaN, Infinity or 1e400
    try:
        number = float(value)
    except OverflowError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def to_num(value: Any) -> float:
    """Coerce to a finite number, 0 when it cannot be parsed."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return _finite(value)
    if isinstance(value, str):
        match = re.match(r"\s*[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?", value)
        if match:
            try:
                return _finite(match.group(0))
            except ValueError:
                return 0.0
    return 0.0


def to_int(value: Any) -> int:
    return int(to_num(value))


def pick(obj: Any, *keys: str) -> Any:
    """Return the first value under `keys` that is not None."""
    if not isinstance(obj, dict):
        return None
    for key in keys:
        if obj.get(key) is not None:
            return obj[key]
    return None


def to_array(raw: Any, *extra_keys: str) -> List[Dict[str, Any]]:
    """Resolve a list from {data: []}, {items: []}, {results: []}, extra keys or a bare list."""
    if isinstance(raw, list):
        return [item for item in raw if isinstance(item, dict)]
    if isinstance(raw, dict):
        for key in ("data", "items", "results", *extra_keys):
            if isinstance(raw.get(key), list):
                return [item for item in raw[key] if isinstance(item, dict)]
    return []


def format_money(value: float) -> str:
    """2431.818 -> "2,431.82"."""
    return f"{value:,.2f}"


def split_bullets(text: str) -> List[str]:
    """Split a newline bullet list ("• a\\n- b\\n* c") into clean lines."""
    lines = []
    for line in text.split("\n"):
        line = re.sub(r"^[•\-*]\s*", "", line.strip()).strip()
        if line:
            lines.append(line)
    return lines


# ---------------------------------------------------------------------------
# Question field normalizers
# ---------------------------------------------------------------------------

CONTROL_TYPES = {
    "heading": "heading",
    "radio": "radio",
    "checkbox": "checkbox",
    "combo": "Combo",
    "valuation": "Valuation",
    "signature": "Signature",
    "image feedback": "image feedback",
    "rating": "rating",
    # Moveware's catch-all selectable type
    "y": "radio",
}

DEFAULT_CONTROL_TYPE = "radio"

TRUTHY_FLAGS = {"y", "yes"}


def normalize_control_type(value: Any) -> str:
    """
    Map a free-form control type onto the closed set the review page renders.

    Unknown and empty values fall back to "radio".

    Example:
        >>> normalize_control_type(" checkbox ")
        'checkbox'
        >>> normalize_control_type("bogus")
        'radio'
    """
    if not isinstance(value, str):
        return DEFAULT_CONTROL_TYPE
    return CONTROL_TYPES.get(value.strip().lower(), DEFAULT_CONTROL_TYPE)


def normalize_responses(value: Any) -> List[str]:
    """
    Normalize the `responses` field to a list of option labels.

    "Yes, No ,Maybe" -> ["Yes", "No", "Maybe"]. Lists pass through in order;
    duplicates are kept.
    """
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, list):
        labels = []
        for item in value:
            if item is None:
                continue
            label = item if isinstance(item, str) else str(item)
            if label.strip():
                labels.append(label.strip())
        return labels
    return []


def normalize_show_editor(value: Any) -> str:
    """"Y"/"yes" in any casing -> "Y", everything else -> "N"."""
    if isinstance(value, str) and value.strip().lower() in TRUTHY_FLAGS:
        return "Y"
    return "N"


def empty_to_none(value: Any) -> Optional[str]:
    """Moveware sends "" for an absent conditional; downstream checks for None."""
    if value is None or value == "":
        return None
    return value if isinstance(value, str) else str(value)


# ---------------------------------------------------------------------------
# Question list decoding
# ---------------------------------------------------------------------------

class UnwrappedList(NamedTuple):
    shape: str  # "questions" | "results" | "data" | "bare" | "empty"
    items: List[Any]


QUESTION_WRAPPER_KEYS: Tuple[str, ...] = ("questions", "results", "data")


def unwrap_question_list(raw: Any, wrapper_keys: Sequence[str] = QUESTION_WRAPPER_KEYS) -> UnwrappedList:
    """
    Decode the question list from whichever wrapper the tenant returns.

    Candidate shapes are checked in priority order: each wrapper key, then a
    bare list. Anything else decodes to the "empty" variant.
    """
    if isinstance(raw, dict):
        for key in wrapper_keys:
            if isinstance(raw.get(key), list):
                return UnwrappedList(key, raw[key])
    if isinstance(raw, list):
        return UnwrappedList("bare", raw)
    return UnwrappedList("empty", [])


def normalize_question(raw: Dict[str, Any]) -> NormalizedQuestion:
    return NormalizedQuestion(
        id=pick(raw, "id", "questionId"),
        question=to_str(pick(raw, "question", "text", "description")),
        control_type=normalize_control_type(raw.get("controlType")),
        responses=normalize_responses(raw.get("responses")),
        show_editor=normalize_show_editor(raw.get("showEditor")) == "Y",
        sort=to_str(raw.get("sort")),
        type=to_str(raw.get("type")),
        conditional_parent=empty_to_none(raw.get("conditionalParent")),
        conditional_answer=empty_to_none(raw.get("conditionalAnswer")),
        optional=raw.get("optional"),
        value=raw.get("value"),
        answer=raw.get("answer"),
    )


def normalize_questions(raw: Any) -> List[NormalizedQuestion]:
    """
    Normalize a raw questions response into an ordered question list.

    Ordering is a stable sort on the `sort` string. The keys are zero-padded,
    so string order matches the intended numeric order.
    """
    unwrapped = unwrap_question_list(raw)
    questions = [normalize_question(item) for item in unwrapped.items if isinstance(item, dict)]
    return sorted(questions, key=lambda q: q.sort)


# ---------------------------------------------------------------------------
# Job / costing / inventory adapters
# ---------------------------------------------------------------------------

def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def adapt_job(raw: Any, branding: Optional[Branding] = None) -> Job:
    """
    Map a raw GET /jobs/{id} response to a Job.

    Customer names sit at the root, addresses under `addresses` keyed by
    Uplift/Delivery (or origin/destination), measures is a list whose first
    entry holds gross volume and weight, and the move manager comes from
    roles.salesRepresentative.entity.
    """
    r = _as_dict(raw)
    d = r["data"] if isinstance(r.get("data"), dict) else r

    addresses = _as_dict(pick(d, "addresses"))
    origin = _as_dict(
        pick(addresses, "Uplift", "uplift", "origin")
        or pick(d, "uplift", "origin", "fromAddress", "pickupAddress")
    )
    dest = _as_dict(
        pick(addresses, "Delivery", "delivery", "destination")
        or pick(d, "delivery", "destination", "toAddress", "deliveryAddress")
    )

    volume_m3 = 0.0
    weight_kg = 0.0
    measures = d.get("measures")
    if isinstance(measures, list) and measures and isinstance(measures[0], dict):
        gross_volume = _as_dict(_as_dict(measures[0].get("volume")).get("gross"))
        gross_weight = _as_dict(_as_dict(measures[0].get("weight")).get("gross"))
        volume_m3 = to_num(pick(gross_volume, "m3", "meter"))
        weight_kg = to_num(gross_weight.get("kg"))

    move_manager = ""
    roles = _as_dict(pick(d, "roles"))
    sales_rep = _as_dict(pick(roles, "salesRepresentative", "consultant", "moveManager"))
    rep_entity = _as_dict(sales_rep.get("entity"))
    if rep_entity.get("firstName") or rep_entity.get("lastName"):
        move_manager = f"{to_str(rep_entity.get('firstName'))} {to_str(rep_entity.get('lastName'))}".strip()
    else:
        manager = pick(d, "moveManager", "consultant", "assignedTo")
        if isinstance(manager, str):
            move_manager = manager

    return Job(
        id=to_int(pick(d, "id", "jobId", "jobNumber")),
        title_name=to_str(pick(d, "titleName", "title")),
        first_name=to_str(pick(d, "firstName", "givenName")),
        last_name=to_str(pick(d, "lastName", "surname", "familyName")),
        move_manager=move_manager,
        move_type=to_str(pick(d, "type", "moveType", "moveCategory")),
        estimated_delivery_details=to_str(pick(d, "estimatedDeliveryDetails", "estimatedDeliveryDate", "deliveryDate")),
        job_value=to_num(pick(d, "jobValue", "totalValue", "value", "total")),
        brand_code=to_str(pick(d, "brandCode", "brand")),
        branch_code=to_str(pick(d, "branchCode", "branch")),
        uplift_line1=to_str(pick(origin, "line1", "address1", "street")),
        uplift_line2=to_str(pick(origin, "line2", "address2")),
        uplift_city=to_str(pick(origin, "city", "suburb", "town")),
        uplift_state=to_str(pick(origin, "state", "stateCode")),
        uplift_postcode=to_str(pick(origin, "postcode", "postalCode", "zip")),
        uplift_country=to_str(pick(origin, "country", "countryName", "countryCode")),
        delivery_line1=to_str(pick(dest, "line1", "address1", "street")),
        delivery_line2=to_str(pick(dest, "line2", "address2")),
        delivery_city=to_str(pick(dest, "city", "suburb", "town")),
        delivery_state=to_str(pick(dest, "state", "stateCode")),
        delivery_postcode=to_str(pick(dest, "postcode", "postalCode", "zip")),
        delivery_country=to_str(pick(dest, "country", "countryName", "countryCode")),
        measures_volume_gross_m3=volume_m3,
        measures_weight_gross_kg=weight_kg,
        branding=branding or Branding(),
    )


def _display_name(option: Dict[str, Any], idx: int) -> Tuple[str, str]:
    """(name, description): optionDescription is the customer-facing label."""
    description = to_str(pick(option, "description", "name", "title", "label"))
    name = to_str(option.get("optionDescription")) or description or f"Option {idx + 1}"
    return name, description


def adapt_options(raw: Any) -> List[NormalizedCosting]:
    """
    Map GET /jobs/{id}/options?include=charges to costings.

    Here `charges` is usually an object keyed by charge type code
    ({"I": {...}, "I2": {...}}), not a list.
    """
    costings = []
    for idx, item in enumerate(to_array(raw, "options", "costings")):
        charges_raw = pick(item, "charges", "lineItems", "items")
        if isinstance(charges_raw, list):
            charges = [c for c in charges_raw if isinstance(c, dict)]
        elif isinstance(charges_raw, dict):
            charges = [c for c in charges_raw.values() if isinstance(c, dict)]
        else:
            charges = []

        name, description = _display_name(item, idx)

        inclusions = [
            to_str(c.get("description"))
            for c in charges
            if to_str(c.get("type")) == "I" and to_str(c.get("description"))
        ]
        exclusions = []
        if isinstance(item.get("exclusions"), list):
            exclusions = [to_str(e) for e in item["exclusions"] if to_str(e)]

        total_price = to_num(pick(item, "valueInclusive", "totalAmount", "totalPrice", "amount", "total", "grossTotal"))
        net_raw = to_num(pick(item, "valueExclusive", "netAmount", "netTotal", "netPrice", "subTotal"))
        if net_raw > 0:
            net_total = format_money(net_raw)
        elif total_price > 0:
            net_total = format_money(total_price / 1.1)
        else:
            net_total = "0.00"

        costings.append(NormalizedCosting(
            id=to_str(pick(item, "id", "optionId", "costingId")) or f"opt-{idx}",
            name=name,
            category=to_str(pick(item, "category", "serviceType")),
            description=description,
            quantity=to_num(pick(item, "quantity", "qty")) or 1,
            rate=total_price,
            net_total=net_total,
            total_price=total_price,
            tax_included=pick(item, "taxIncluded", "gstIncluded", "includesTax") is not False,
            inclusions=inclusions,
            exclusions=exclusions,
        ))
    return costings


def _is_included(value: Any) -> bool:
    return value is True or value == "true" or value == "Y" or (value == 1 and not isinstance(value, bool))


def _adapt_charge(charge: Dict[str, Any]) -> CostingCharge:
    # the base "oneTotal" charge often has rateExclusive=0 but a rateInclusive
    rate_ex = to_num(pick(charge, "rateExclusive", "rateEx"))
    rate_in = to_num(pick(charge, "rateInclusive", "rate", "price"))
    return CostingCharge(
        id=to_int(charge.get("id")),
        heading=to_str(charge.get("description")),
        notes=to_str(charge.get("notes")),
        quantity=to_num(pick(charge, "quantity", "qty")) or 1,
        price=rate_ex if rate_ex > 0 else rate_in,
        currency=to_str(charge.get("currency")) or "AUD",
        currency_symbol=to_str(charge.get("currencySymbol")) or "$",
        tax_code=to_str(charge.get("taxCode")),
        sort=to_str(charge.get("sort")),
        included=_is_included(charge.get("included")),
        is_base_charge=charge.get("oneTotal") == "Y" or charge.get("oneTotal") is True,
    )


def adapt_quotation_options(raw: Any) -> List[NormalizedCosting]:
    """
    Map GET /jobs/{id}/quotations/{quoteId}?include=options to costings.

    Differences from the older /options endpoint:
      - options[].charges is a list
      - inclusions / exclusions are newline bullet strings
      - the option-level valueInclusive may be 0; the total is then the sum of
        the included charges
    """
    options = _as_dict(raw).get("options")
    if not isinstance(options, list):
        return []

    costings = []
    for idx, option in enumerate(o for o in options if isinstance(o, dict)):
        raw_charges = []
        if isinstance(option.get("charges"), list):
            raw_charges = [c for c in option["charges"] if isinstance(c, dict)]
        ordered = sorted(raw_charges, key=lambda c: to_str(c.get("sort")))
        charges = [_adapt_charge(c) for c in ordered]

        option_total = to_num(pick(option, "valueInclusive", "totalAmount"))
        charges_sum = sum(
            to_num(pick(c, "rateInclusive", "valueInclusive"))
            for c in raw_charges
            if c.get("included") is True
        )
        total_price = option_total if option_total > 0 else charges_sum
        net_total = format_money(total_price / 1.1) if total_price > 0 else "0.00"

        currency = charges[0].currency if charges else "AUD"
        currency_symbol = charges[0].currency_symbol if charges else "$"

        name, description = _display_name(option, idx)
        inclusions_text = to_str(option.get("inclusions"))
        exclusions_text = to_str(option.get("exclusions"))

        costings.append(NormalizedCosting(
            id=to_str(option.get("id")) or f"opt-{idx}",
            name=name,
            category=to_str(pick(option, "costCenter", "service", "jobType")),
            description=to_str(option.get("details")) or description,
            quantity=1,
            rate=total_price,
            net_total=net_total,
            total_price=total_price,
            tax_included=True,
            currency=currency,
            currency_symbol=currency_symbol,
            charges=charges,
            inclusions=split_bullets(inclusions_text) if inclusions_text else [],
            exclusions=split_bullets(exclusions_text) if exclusions_text else [],
        ))
    return costings


def adapt_quotation_measurements(raw: Any) -> NormalizedMeasurement:
    """Gross totals from the quotation-level `measurements` block."""
    measurements = _as_dict(_as_dict(raw).get("measurements"))
    volume_gross = _as_dict(_as_dict(measurements.get("volume")).get("gross"))
    weight_gross = _as_dict(_as_dict(measurements.get("weight")).get("gross"))
    return NormalizedMeasurement(
        volume_gross_m3=to_num(pick(volume_gross, "meters", "meter")),
        weight_gross_kg=to_num(pick(weight_gross, "kilograms", "kg")),
        weight_gross_pounds=to_num(pick(weight_gross, "pounds", "lbs")),
    )


def adapt_inventory(raw: Any) -> List[InventoryItem]:
    """
    Map GET /jobs/{id}/inventory to inventory line items.

    Volume comes from volume.meter (unit) or a flat cube field; a
    pre-multiplied cubetot wins over unit x quantity.
    """
    items = []
    for idx, item in enumerate(to_array(raw, "inventoryUsage", "inventory", "inventoryItems")):
        quantity = to_num(pick(item, "quantity", "qty", "count")) or 1

        volume = _as_dict(item.get("volume"))
        unit_cube = to_num(pick(volume, "meter", "other")) or to_num(pick(item, "cube", "cubicMetres", "m3"))
        cube_total = to_num(pick(item, "cubetot", "totalCube", "totalM3"))

        weight = _as_dict(item.get("weight"))
        weight_kg = to_num(pick(weight, "kg", "totalkg")) or to_num(
            pick(item, "weightKg", "grossWeight", "wtGross", "weightGross", "unitWeight")
        )

        items.append(InventoryItem(
            id=to_int(pick(item, "id", "inventoryId", "itemId")) or idx + 1,
            description=to_str(pick(item, "description", "itemDescription", "name", "number")),
            room=to_str(pick(item, "room", "roomName", "location", "area")),
            quantity=quantity,
            cube=cube_total if cube_total > 0 else unit_cube * quantity,
            type_code=to_str(pick(item, "typeCode", "type", "packType", "category", "code")),
            weight_kg=weight_kg,
        ))
    return items
