"""
Internal shapes produced by the Moveware normalizers.

Everything here is built fresh per request and serialised with camelCase keys
(`model_dump(by_alias=True)`), which is what the quote and review pages read.
"""

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel


ControlType = Literal[
    "heading",
    "radio",
    "checkbox",
    "Combo",
    "Valuation",
    "Signature",
    "image feedback",
    "rating",
]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Credentials(BaseModel):
    """Per-tenant Moveware credentials. Never serialised to the browser."""

    model_config = ConfigDict(frozen=True)

    co_id: str
    username: str
    password: str
    base_url: str


class NormalizedQuestion(_CamelModel):
    id: Any = None
    question: str = ""
    control_type: ControlType = "radio"
    responses: List[str] = Field(default_factory=list)
    show_editor: bool = False
    # zero-padded ("001", "010"); compared as a string, never as a number
    sort: str = ""
    type: str = ""
    conditional_parent: Optional[str] = None
    conditional_answer: Optional[str] = None
    optional: Any = None
    value: Any = None
    answer: Any = None

    @field_serializer("show_editor")
    def _show_editor_flag(self, value: bool) -> str:
        return "Y" if value else "N"


class CostingCharge(_CamelModel):
    id: int = 0
    heading: str = ""
    notes: str = ""
    quantity: float = 1
    price: float = 0
    currency: str = "AUD"
    currency_symbol: str = "$"
    tax_code: str = ""
    sort: str = ""
    included: bool = False
    is_base_charge: bool = False


class NormalizedCosting(_CamelModel):
    id: str
    name: str
    category: str = ""
    description: str = ""
    quantity: float = 1
    rate: float = 0
    # display string with separators, e.g. "2,431.82"
    net_total: str = "0.00"
    total_price: float = 0
    tax_included: bool = True
    currency: str = "AUD"
    currency_symbol: str = "$"
    charges: List[CostingCharge] = Field(default_factory=list)
    inclusions: List[str] = Field(default_factory=list)
    exclusions: List[str] = Field(default_factory=list)


class NormalizedMeasurement(_CamelModel):
    volume_gross_m3: float = 0
    weight_gross_kg: float = 0
    weight_gross_pounds: float = 0


class InventoryItem(_CamelModel):
    id: int
    description: str = ""
    room: str = ""
    quantity: float = 1
    cube: float = 0
    type_code: str = ""
    weight_kg: float = 0


class Branding(_CamelModel):
    company_name: str = "Moveware"
    logo_url: str = ""
    hero_banner_url: str = ""
    footer_image_url: str = ""
    primary_color: str = "#1E40AF"
    secondary_color: str = "#FFFFFF"
    font_family: str = "Inter"
    inventory_weight_unit: Literal["kg", "lbs"] = "kg"
    footer_bg_color: str = "#ffffff"
    footer_text_color: str = "#374151"
    footer_address_line1: str = ""
    footer_address_line2: str = ""
    footer_phone: str = ""
    footer_email: str = ""
    footer_abn: str = ""


class Job(_CamelModel):
    id: int
    title_name: str = ""
    first_name: str = ""
    last_name: str = ""
    move_manager: str = ""
    move_type: str = ""
    estimated_delivery_details: str = ""
    job_value: float = 0
    brand_code: str = ""
    branch_code: str = ""
    uplift_line1: str = ""
    uplift_line2: str = ""
    uplift_city: str = ""
    uplift_state: str = ""
    uplift_postcode: str = ""
    uplift_country: str = ""
    delivery_line1: str = ""
    delivery_line2: str = ""
    delivery_city: str = ""
    delivery_state: str = ""
    delivery_postcode: str = ""
    delivery_country: str = ""
    measures_volume_gross_m3: float = 0
    measures_weight_gross_kg: float = 0
    branding: Branding = Field(default_factory=Branding)
