"""Engine policy values built from application settings"""

from app.config import Settings, settings as default_settings
from app.engine.types import WEEKDAYS, BillingPolicy, EligibilityPolicy, ResourcePool


def resource_pool(settings: Settings = default_settings) -> ResourcePool:
    return ResourcePool(
        unit_count=settings.unit_count,
        table_count=settings.table_count,
        attendees_per_table=settings.attendees_per_table,
    )


def eligibility_policy(settings: Settings = default_settings) -> EligibilityPolicy:
    rest_days = frozenset(
        WEEKDAYS.index(day) for day in settings.concierge_rest_days_list if day in WEEKDAYS
    )
    return EligibilityPolicy(
        short_notice_days=settings.short_notice_days,
        rest_days=rest_days,
    )


def billing_policy(settings: Settings = default_settings) -> BillingPolicy:
    return BillingPolicy(
        off_season_start_month=settings.off_season_start_month,
        off_season_end_month=settings.off_season_end_month,
        short_notice_days=settings.billing_short_notice_days,
        short_notice_amount=settings.billing_short_notice_amount,
        minimum_amount=settings.billing_minimum_amount,
        per_person_rate=settings.billing_per_person_rate,
        timezone=settings.timezone,
    )
