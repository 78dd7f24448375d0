"""Localized display strings: activity descriptions, month names, category labels.

Arabic is the product default; English is provided for API consumers and tests.
"""

from __future__ import annotations

from city_dashboard.domain.enums import ActivityType, Locale
from city_dashboard.domain.exceptions import ValidationException

ACTIVITY_TEMPLATES: dict[Locale, dict[ActivityType, str]] = {
    Locale.AR: {
        ActivityType.NEW_SERVICE: "تمت إضافة خدمة جديدة: {label}",
        ActivityType.NEW_PROPERTY: "تمت إضافة عقار جديد: {label}",
        ActivityType.NEWS_PUBLISHED: "تم نشر خبر جديد: {label}",
        ActivityType.EMERGENCY_REPORT: "تم إبلاغ عن طوارئ: {label}",
    },
    Locale.EN: {
        ActivityType.NEW_SERVICE: "New service added: {label}",
        ActivityType.NEW_PROPERTY: "New property added: {label}",
        ActivityType.NEWS_PUBLISHED: "News published: {label}",
        ActivityType.EMERGENCY_REPORT: "Emergency reported: {label}",
    },
}

MONTH_NAMES: dict[Locale, tuple[str, ...]] = {
    Locale.AR: (
        "يناير", "فبراير", "مارس", "أبريل", "مايو", "يونيو",
        "يوليو", "أغسطس", "سبتمبر", "أكتوبر", "نوفمبر", "ديسمبر",
    ),
    Locale.EN: (
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ),
}

CATEGORY_LABELS: dict[Locale, dict[str, str]] = {
    Locale.AR: {
        "activities": "أنشطة و فعاليات",
        "beauty": "الجمال و العناية الشخصية",
        "education": "التعليم",
        "finishing": "التشطيبات",
        "fitness": "اللياقة البدنية",
        "food": "المطاعم و  المقاهى",
        "health": "الصحة",
        "home_services": "الخدمات المنزلية",
        "shopping": "التسوق",
        "technology": "تكنولوجيا و اتصالات",
        "others": "خدمات آخرى",
    },
    Locale.EN: {
        "activities": "Activities & Events",
        "beauty": "Beauty & Personal Care",
        "education": "Education",
        "finishing": "Finishing",
        "fitness": "Fitness",
        "food": "Restaurants & Cafes",
        "health": "Health",
        "home_services": "Home Services",
        "shopping": "Shopping",
        "technology": "Technology & Telecom",
        "others": "Other Services",
    },
}


def resolve_locale(locale: str | Locale) -> Locale:
    """Return the Locale for a code; raise ValidationException if unsupported."""
    try:
        return Locale(locale)
    except ValueError:
        raise ValidationException(
            f"Unsupported locale {locale!r}; expected one of {Locale.values()}",
            field="locale",
        ) from None


def describe_activity(activity_type: ActivityType, label: str, locale: Locale) -> str:
    return ACTIVITY_TEMPLATES[locale][activity_type].format(label=label)


def month_name(month: int, locale: Locale) -> str:
    """Month name for a 1-based calendar month."""
    return MONTH_NAMES[locale][month - 1]


def category_label(category_id: str, locale: Locale) -> str:
    """Display label for a services category id; unknown ids pass through."""
    return CATEGORY_LABELS[locale].get(category_id, category_id)
