"""Services guide API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class ServiceItem(BaseModel):
    """One service entry under a category."""

    id: str
    created_at: datetime
    data: dict[str, Any] = Field(default_factory=dict)


class SubCategoryItem(BaseModel):
    sub_category: str
    services: list[ServiceItem] = Field(default_factory=list)


class ServiceCategoryResponse(BaseModel):
    """A services category with its items grouped by sub-category."""

    category_id: str
    category_label: str
    services_count: int
    sub_categories: list[SubCategoryItem] = Field(default_factory=list)


class ServicesOverviewResponse(BaseModel):
    locale: str
    categories: list[ServiceCategoryResponse] = Field(default_factory=list)
