"""Services guide overview: categories, then their nested items grouped by sub-category."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from city_dashboard.application.dtos.records import TimestampedRecord
from city_dashboard.application.dtos.services_overview import (
    ServiceCategoryOverview,
    SubCategoryGroup,
)
from city_dashboard.application.services.localization import (
    category_label,
    resolve_locale,
)
from city_dashboard.application.services.record_mapper import to_timestamped_records
from city_dashboard.core.constants import (
    COLLECTION_SERVICES,
    SUBCOLLECTION_SERVICE_ITEMS,
)
from city_dashboard.domain.enums import Locale
from city_dashboard.application.use_cases.dashboard import fan_out
from city_dashboard.domain.exceptions import (
    AggregationFailure,
    DashboardException,
    FetchFailure,
)
from city_dashboard.shared.telemetry.tracing import traced
from city_dashboard.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from city_dashboard.application.interfaces.record_fetcher import IRecordFetcher

logger = logging.getLogger(__name__)

UNCATEGORIZED = "uncategorized"


def sub_category_of(record: TimestampedRecord) -> str:
    """Sub-category key; older items spell it ``subcategory``."""
    value = record.data.get("subCategory") or record.data.get("subcategory")
    return str(value) if value else UNCATEGORIZED


def group_by_sub_category(records: list[TimestampedRecord]) -> tuple[SubCategoryGroup, ...]:
    """Group items by sub-category, keeping first-seen order of both groups and items."""
    grouped: dict[str, list[TimestampedRecord]] = {}
    for record in records:
        grouped.setdefault(sub_category_of(record), []).append(record)
    return tuple(
        SubCategoryGroup(sub_category=key, services=tuple(items))
        for key, items in grouped.items()
    )


class ServicesOverviewService:
    """Read the two-level services hierarchy: services/{category}/items/{service}."""

    def __init__(self, fetcher: "IRecordFetcher") -> None:
        self.fetcher = fetcher

    @traced("services.get_overview")
    async def get_services_overview(
        self, locale: str | Locale = Locale.AR
    ) -> list[ServiceCategoryOverview]:
        """Return every category with its items grouped by sub-category.

        Items of all categories are fetched concurrently once the category
        list is known. The first failure cancels the fetches still in flight.

        Raises:
            AggregationFailure: If the category list or any category's items fail to load.
        """
        resolved = resolve_locale(locale)
        try:
            categories = await self.fetcher.fetch_collection(COLLECTION_SERVICES)
            items_by_category = await fan_out(
                {
                    category.id: self.fetcher.fetch_nested_collection(
                        COLLECTION_SERVICES, category.id, SUBCOLLECTION_SERVICE_ITEMS
                    )
                    for category in categories
                }
            )
        except FetchFailure as e:
            logger.warning("Services overview aborted: %s", e.message)
            raise AggregationFailure(source=e.source, reason=e.message) from e
        except DashboardException as e:
            logger.warning("Services overview aborted: %s", e.message)
            raise AggregationFailure(reason=e.message) from e
        except Exception as e:
            logger.exception("Services overview aborted by unexpected error")
            raise AggregationFailure(reason=str(e)) from e

        now = utc_now()
        return [
            ServiceCategoryOverview(
                category_id=category.id,
                category_label=category_label(category.id, resolved),
                sub_categories=group_by_sub_category(
                    to_timestamped_records(items_by_category[category.id], now)
                ),
            )
            for category in categories
        ]
