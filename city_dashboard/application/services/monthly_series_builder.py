"""Monthly user growth: new users per calendar month and a running total."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from city_dashboard.application.dtos.dashboard import MonthlyUserStat
from city_dashboard.application.dtos.records import UserJoinRecord
from city_dashboard.application.services.localization import month_name, resolve_locale
from city_dashboard.domain.enums import Locale
from city_dashboard.domain.exceptions import ValidationException
from city_dashboard.shared.utils.datetime import add_months, start_of_month

DEFAULT_MONTHS_BACK = 6


class MonthlySeriesBuilder:
    """Buckets users by effective join month over a trailing window of calendar months."""

    def build(
        self,
        users: Sequence[UserJoinRecord],
        now: datetime,
        months_back: int = DEFAULT_MONTHS_BACK,
        locale: str | Locale = Locale.AR,
    ) -> list[MonthlyUserStat]:
        """Return ``months_back`` slots ending at the current month, oldest first.

        Slots are half-open ``[month start, next month start)`` in UTC.
        ``cumulative_users`` starts from zero at the first slot; users who
        joined before the window are not included.
        """
        if months_back < 1:
            raise ValidationException("months_back must be at least 1", field="months_back")
        resolved = resolve_locale(locale)

        join_instants = [
            user.effective_join for user in users if user.effective_join is not None
        ]
        current_month = start_of_month(now)

        series: list[MonthlyUserStat] = []
        cumulative = 0
        for offset in range(months_back - 1, -1, -1):
            slot_start = add_months(current_month, -offset)
            slot_end = add_months(slot_start, 1)
            new_users = sum(1 for joined in join_instants if slot_start <= joined < slot_end)
            cumulative += new_users
            series.append(
                MonthlyUserStat(
                    month_label=month_name(slot_start.month, resolved),
                    year=slot_start.year,
                    month=slot_start.month,
                    new_users_in_month=new_users,
                    cumulative_users=cumulative,
                )
            )
        return series
