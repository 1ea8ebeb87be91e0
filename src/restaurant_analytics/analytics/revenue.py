"""
Revenue and order counts per time bucket.
"""
import logging

from restaurant_analytics.analytics.models import RevenueByTimeRange, OrderCountsByTimeRange
from restaurant_analytics.analytics.schema import resolve_now
from restaurant_analytics.analytics.sources import ReportSource, revenue_frame, order_frame
from restaurant_analytics.analytics.time_buckets import TimeBucket, bucket_mask

logger = logging.getLogger(__name__)


def _sum_by_time_range(sales, now):
    """
    Sum the amount of each bucket independently; total covers every record.
    """
    totals = {
        bucket.value: float(sales.loc[bucket_mask(sales['timestamp'], bucket, now), 'amount'].sum())
        for bucket in TimeBucket
    }
    return RevenueByTimeRange(total=float(sales['amount'].sum()), **totals)


def _count_by_time_range(orders, now):
    counts = {
        bucket.value: int(bucket_mask(orders['timestamp'], bucket, now).sum())
        for bucket in TimeBucket
    }
    return OrderCountsByTimeRange(total=len(orders), **counts)


def calculate_revenue_by_time_range(data, source=ReportSource.ORDERS, now=None, tz=None):
    """
    Revenue per time bucket from either orders or order items.
    """
    now = resolve_now(now, tz)
    report = _sum_by_time_range(revenue_frame(data, source, tz), now)
    logger.info(f"Revenue by time range from {ReportSource(source).value}: today={report.today}, total={report.total}")
    return report


def calculate_order_counts_by_time_range(data, source=ReportSource.ORDERS, now=None, tz=None):
    """
    Order counts per time bucket from either orders or order items.
    """
    now = resolve_now(now, tz)
    report = _count_by_time_range(order_frame(data, source, tz), now)
    logger.info(f"Order counts by time range from {ReportSource(source).value}: today={report.today}, total={report.total}")
    return report


def revenue_by_time_range(orders, now=None, tz=None):
    return calculate_revenue_by_time_range(orders, ReportSource.ORDERS, now, tz)


def revenue_by_time_range_from_items(order_items, now=None, tz=None):
    return calculate_revenue_by_time_range(order_items, ReportSource.ORDER_ITEMS, now, tz)


def order_counts_by_time_range(orders, now=None, tz=None):
    return calculate_order_counts_by_time_range(orders, ReportSource.ORDERS, now, tz)


def order_counts_by_time_range_from_items(order_items, now=None, tz=None):
    """
    Distinct orders referenced by the items, not the number of items.
    """
    return calculate_order_counts_by_time_range(order_items, ReportSource.ORDER_ITEMS, now, tz)
