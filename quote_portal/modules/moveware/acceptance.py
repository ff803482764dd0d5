"""
Quote acceptance helpers: request shape and the diary notes written back to
Moveware when a customer signs a quote online.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AcceptedCharge(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True)

    id: int = 0
    heading: str = ""
    price: float = 0
    currency: str = "AUD"
    included: bool = False
    quantity: Optional[float] = None


class AcceptedCosting(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True)

    id: str
    name: Optional[str] = None
    total_price: Optional[float] = None
    currency: Optional[str] = None
    currency_symbol: Optional[str] = None
    charges: List[AcceptedCharge] = Field(default_factory=list)


class QuoteAcceptanceRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True)

    quote_number: str = ""
    job_id: str = ""
    co_id: str = ""
    quote_id: str = ""
    signature_data: str = ""
    signature_name: str = ""
    customer_name: str = ""
    agreed_to_terms: bool = False
    relo_from_date: str = ""
    insured_value: str = ""
    purchase_order_number: str = ""
    special_requirements: str = ""
    branch_code: str = ""
    selected_costing: Optional[AcceptedCosting] = None
    all_costings: List[AcceptedCosting] = Field(default_factory=list)

    def missing_fields(self) -> List[str]:
        missing = []
        if not (self.quote_number or self.job_id):
            missing.append("quoteNumber / jobId")
        if not self.signature_data:
            missing.append("signatureData")
        return missing


def format_price(price: float) -> str:
    """1050 -> "1050", 1050.5 -> "1050.50"."""
    if price % 1 == 0:
        return str(int(round(price)))
    return f"{price:.2f}"


def _option_lines(label_index: int, costing: AcceptedCosting) -> List[str]:
    lines = [f"Option {label_index + 1:02d} - {costing.name or 'Unknown option'}"]
    for charge in costing.charges:
        lines.append(f"• {charge.heading}: {format_price(charge.price)} {charge.currency}")
    return lines


def build_acceptance_notes(request: QuoteAcceptanceRequest) -> str:
    """Diary notes listing the accepted option, then every declined one."""
    lines = [
        f"Accepted Terms and Conditions: {'yes' if request.agreed_to_terms else 'no'}",
        "Signed Online: Yes",
    ]
    if request.purchase_order_number:
        lines.append(f"Order Number: {request.purchase_order_number}")
    if request.relo_from_date:
        lines.append(f"Load Date: {request.relo_from_date}")
    if request.insured_value:
        lines.append(f"Insurance Value: {request.insured_value}")
    if request.special_requirements:
        lines.append(f"Special Requirements: {request.special_requirements}")

    ids = [c.id for c in request.all_costings]
    selected = request.selected_costing

    if selected:
        idx = ids.index(selected.id) if selected.id in ids else 0
        lines.append("")
        lines.append("Accepted Option(s):")
        lines.extend(_option_lines(idx, selected))

    declined = [c for c in request.all_costings if not selected or c.id != selected.id]
    if declined:
        lines.append("")
        lines.append("Declined Option(s):")
        for costing in declined:
            lines.extend(_option_lines(ids.index(costing.id), costing))

    return "\n".join(lines)
