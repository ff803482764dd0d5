"""
Request bodies and the response envelope shared by the API routers.

Every JSON response is shaped {success, data?, error?, source?, count?}.
"""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Source = Literal["moveware", "mock", "local"]


class _CamelModel(BaseModel):
    # job ids arrive as numbers or strings depending on the page
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True)


def envelope(
    data: Any = None,
    source: Optional[Source] = None,
    count: Optional[int] = None,
    **extra: Any,
) -> Dict[str, Any]:
    """Success envelope; optional keys are omitted when None."""
    body: Dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    if source is not None:
        body["source"] = source
    if count is not None:
        body["count"] = count
    body.update({k: v for k, v in extra.items() if v is not None})
    return body


def error_envelope(error: str, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "error": error}
    body.update({k: v for k, v in extra.items() if v is not None})
    return body


# Bot

class BotRequestContext(_CamelModel):
    job_id: Optional[str] = None
    company_id: Optional[str] = None
    user_id: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def as_metadata(self) -> Dict[str, Any]:
        """Flatten into the camelCase metadata the workflow handlers read."""
        merged = dict(self.metadata)
        for key, value in (("jobId", self.job_id), ("companyId", self.company_id), ("userId", self.user_id)):
            if value:
                merged[key] = value
        return merged


class BotMessageRequest(_CamelModel):
    message: Any = None
    session_id: Any = None
    idempotency_key: Optional[str] = None
    context: Optional[BotRequestContext] = None


# Companies

class CompanyCreate(_CamelModel):
    name: str = ""
    brand_code: str = ""
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    tertiary_color: Optional[str] = None
    logo_url: Optional[str] = None
    hero_content: Optional[str] = None
    copy_content: Optional[str] = None
    is_active: bool = True


class CompanyUpdate(_CamelModel):
    name: Optional[str] = None
    brand_code: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    tertiary_color: Optional[str] = None
    logo_url: Optional[str] = None
    hero_content: Optional[str] = None
    copy_content: Optional[str] = None
    is_active: Optional[bool] = None


class BrandingUpdate(_CamelModel):
    logo_url: Optional[str] = None
    hero_banner_url: Optional[str] = None
    footer_image_url: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    font_family: Optional[str] = None
    inventory_weight_unit: Optional[str] = None
    footer_bg_color: Optional[str] = None
    footer_text_color: Optional[str] = None
    footer_address_line1: Optional[str] = None
    footer_address_line2: Optional[str] = None
    footer_phone: Optional[str] = None
    footer_email: Optional[str] = None
    footer_abn: Optional[str] = None
    mw_username: Optional[str] = None
    mw_password: Optional[str] = None


# Reviews

class ReviewSubmitRequest(_CamelModel):
    job_id: Optional[str] = None
    token: Optional[str] = None
    # the tenant coId, not the local company uuid
    company_id: Optional[str] = None
    review_types: Any = None
    answers: Any = None
