"""
Daily and hourly revenue series for charts.
"""
import logging

import numpy as np
import pandas as pd

from restaurant_analytics.analytics.schema import resolve_now
from restaurant_analytics.analytics.sources import ReportSource, revenue_frame

logger = logging.getLogger(__name__)

HOURS_IN_DAY = 24


def day_windows(days, now):
    """
    The last ``days`` local calendar days ending today, oldest first.

    Each row holds the day's local midnight, the next midnight, and the
    ``"{month}/{day}"`` chart label. No rows when ``days`` is not positive.
    """
    today = resolve_now(now).normalize()
    starts = pd.Series(pd.date_range(end=today, periods=max(int(days), 0), freq='D'))
    return pd.DataFrame({
        'date': [f"{start.month}/{start.day}" for start in starts],
        'day': starts,
        'day_end': starts + pd.Timedelta(days=1),
    })


def _sum_in_window(sales, start, end):
    in_window = sales['timestamp'].ge(start) & sales['timestamp'].lt(end)
    return float(sales.loc[in_window, 'amount'].sum()), bool(in_window.any())


def _parent_order_dates(items, orders, tz=None):
    """
    Creation time of each item's parent order, NaT when unknown.
    """
    dated = revenue_frame(orders, ReportSource.ORDERS, tz).dropna(subset=['order_id', 'timestamp'])
    created = dated.drop_duplicates(subset=['order_id'], keep='last').set_index('order_id')['timestamp']
    return pd.to_datetime(items['order_id'].map(created), errors='coerce')


def _series(windows, revenues):
    series = windows[['date', 'day']].copy()
    series['revenue'] = revenues
    return series[['date', 'revenue', 'day']]


def daily_revenue(orders, order_items, days=7, now=None, tz=None):
    """
    Revenue of each of the last ``days`` days, from items when there are any.

    For each day the items stamped that day are summed; when no item carries a
    timestamp in the day, the items whose parent order was created that day
    are used instead. Without any item, order totals are summed.
    """
    windows = day_windows(days, resolve_now(now, tz))
    items = revenue_frame(order_items, ReportSource.ORDER_ITEMS, tz)
    orders_sales = revenue_frame(orders, ReportSource.ORDERS, tz)

    if items.empty and orders_sales.empty:
        logger.info(f"No orders or order items, returning {days} empty days")
        return _series(windows, [0.0] * len(windows))

    # Items re-dated by the creation time of their parent order
    by_parent = items.assign(timestamp=_parent_order_dates(items, orders, tz))

    revenues = []
    for window in windows.itertuples(index=False):
        if items.empty:
            revenue, _ = _sum_in_window(orders_sales, window.day, window.day_end)
        else:
            revenue, matched = _sum_in_window(items, window.day, window.day_end)
            if not matched:
                revenue, _ = _sum_in_window(by_parent, window.day, window.day_end)
        revenues.append(revenue)

    logger.info(f"Calculated daily revenue for {len(windows)} days")
    return _series(windows, revenues)


def daily_revenue_from_items(order_items, days=7, now=None, tz=None):
    """
    Revenue of each of the last ``days`` days from the items' own timestamps.
    """
    windows = day_windows(days, resolve_now(now, tz))
    items = revenue_frame(order_items, ReportSource.ORDER_ITEMS, tz)

    revenues = [
        _sum_in_window(items, window.day, window.day_end)[0]
        for window in windows.itertuples(index=False)
    ]
    logger.info(f"Calculated daily revenue from items for {len(windows)} days")
    return _series(windows, revenues)


def _by_hour(sales):
    """
    Sum amounts per hour of day; always 24 rows indexed 0..23.
    """
    dated = sales.dropna(subset=['timestamp'])
    totals = dated.groupby(dated['timestamp'].dt.hour)['amount'].sum()
    totals = totals.reindex(np.arange(HOURS_IN_DAY), fill_value=0.0).astype(float)

    hourly = pd.DataFrame({'hour': np.arange(HOURS_IN_DAY), 'revenue': totals.to_numpy()})
    hourly.index = hourly['hour'].to_numpy()
    return hourly


def hourly_revenue(orders, order_items, tz=None):
    """
    Revenue per hour of day across all dates, to spot peak hours.

    Items are dated by their own timestamp, falling back to their parent
    order's creation time. Without any item, orders are used directly.
    """
    items = revenue_frame(order_items, ReportSource.ORDER_ITEMS, tz)

    if items.empty:
        hourly = _by_hour(revenue_frame(orders, ReportSource.ORDERS, tz))
    else:
        parent_dates = _parent_order_dates(items, orders, tz)
        hourly = _by_hour(items.assign(timestamp=items['timestamp'].fillna(parent_dates)))

    logger.info(f"Calculated hourly revenue, peak hour {int(hourly['revenue'].idxmax())}")
    return hourly


def hourly_revenue_from_items(order_items, tz=None):
    """
    Revenue per hour of day from the items' own timestamps only.
    """
    return _by_hour(revenue_frame(order_items, ReportSource.ORDER_ITEMS, tz))
