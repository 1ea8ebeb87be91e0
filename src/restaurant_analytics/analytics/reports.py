"""
Assembly of every dashboard report from one snapshot of the collections.
"""
import logging

from restaurant_analytics.analytics.models import AnalyticsReport
from restaurant_analytics.analytics.performance import top_performing_foods, category_performance
from restaurant_analytics.analytics.revenue import (
    calculate_revenue_by_time_range,
    calculate_order_counts_by_time_range,
)
from restaurant_analytics.analytics.schema import resolve_now
from restaurant_analytics.analytics.sources import ReportSource, select_source
from restaurant_analytics.analytics.summary import (
    average_order_value,
    order_status_distribution,
    verify_totals,
)
from restaurant_analytics.analytics.time_series import (
    daily_revenue,
    daily_revenue_from_items,
    hourly_revenue,
    hourly_revenue_from_items,
)

logger = logging.getLogger(__name__)


def build_analytics_report(orders, order_items, foods=None, categories=None,
                           now=None, days=7, top_limit=10, tz=None, verify=False):
    """
    Compute all reports, taking time-based ones from orders when there are any
    and from order items otherwise.

    Rankings always come from order items, which carry the historical prices.
    """
    now = resolve_now(now, tz)
    source = select_source(orders, order_items)
    logger.info(
        f"Building analytics report from {source.value}: "
        f"{0 if orders is None else len(orders)} orders, "
        f"{0 if order_items is None else len(order_items)} order items"
    )

    time_data = orders if source is ReportSource.ORDERS else order_items
    if source is ReportSource.ORDERS:
        daily = daily_revenue(orders, order_items, days=days, now=now, tz=tz)
        hourly = hourly_revenue(orders, order_items, tz=tz)
    else:
        daily = daily_revenue_from_items(order_items, days=days, now=now, tz=tz)
        hourly = hourly_revenue_from_items(order_items, tz=tz)

    discrepancies = None
    if verify and source is ReportSource.ORDERS and order_items is not None and len(order_items) > 0:
        discrepancies = verify_totals(orders, order_items)

    return AnalyticsReport(
        source=source.value,
        generated_at=now,
        revenue_by_time_range=calculate_revenue_by_time_range(time_data, source, now, tz),
        order_counts_by_time_range=calculate_order_counts_by_time_range(time_data, source, now, tz),
        top_performing_foods=top_performing_foods(order_items, foods, limit=top_limit),
        category_performance=category_performance(order_items, categories),
        daily_revenue=daily,
        hourly_revenue=hourly,
        average_order_value=average_order_value(orders, order_items),
        order_status_distribution=order_status_distribution(orders),
        total_discrepancies=discrepancies,
    )
