"""DTOs for the services guide overview (categories -> sub-categories -> items)."""

from dataclasses import dataclass

from city_dashboard.application.dtos.records import TimestampedRecord


@dataclass(frozen=True)
class SubCategoryGroup:
    """Service items sharing one sub-category inside a category."""

    sub_category: str
    services: tuple[TimestampedRecord, ...]


@dataclass(frozen=True)
class ServiceCategoryOverview:
    """One top-level services category with its items grouped by sub-category."""

    category_id: str
    category_label: str
    sub_categories: tuple[SubCategoryGroup, ...]

    @property
    def services_count(self) -> int:
        return sum(len(group.services) for group in self.sub_categories)
