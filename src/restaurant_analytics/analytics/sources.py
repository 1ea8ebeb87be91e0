"""
Order-level and item-level views of the same sales data.

Revenue, counts, time series and averages can be computed either from orders
(authoritative when present) or from order items. Both paths are reduced here
to the same two shapes so every report has a single implementation:

- a revenue frame: one row per sale with ``order_id``, ``timestamp``, ``amount``
- an order frame: one row per countable order with ``order_id``, ``timestamp``
"""
import logging
from enum import Enum

import pandas as pd

from restaurant_analytics.analytics.schema import prepare_orders, prepare_order_items

logger = logging.getLogger(__name__)


class ReportSource(str, Enum):
    ORDERS = 'orders'
    ORDER_ITEMS = 'order_items'


def select_source(orders, order_items):
    """
    Orders are authoritative; items are used only when there are no orders.
    """
    has_orders = orders is not None and len(orders) > 0
    has_items = order_items is not None and len(order_items) > 0
    if not has_orders and has_items:
        return ReportSource.ORDER_ITEMS
    return ReportSource.ORDERS


def revenue_frame(data, source, tz=None):
    """
    Monetary contribution of each record of the collection.

    Orders contribute their total, items ``unit_price * quantity``; missing
    amounts count as zero, missing timestamps stay NaT.
    """
    if ReportSource(source) is ReportSource.ORDERS:
        orders = prepare_orders(data, tz)
        return pd.DataFrame({
            'order_id': orders['order_id'],
            'timestamp': orders['created_at'],
            'amount': orders['total_price'].fillna(0.0).astype(float),
        })

    items = prepare_order_items(data, tz)
    return pd.DataFrame({
        'order_id': items['order_id'],
        'timestamp': items['added_at'],
        'amount': items['revenue'].astype(float),
    })


def order_frame(data, source, tz=None):
    """
    The orders that can be counted, each with the timestamp dating it.

    From orders every row counts. From items an order is a distinct non-null
    ``order_id``, dated by the first of its items that carries a timestamp.
    """
    if ReportSource(source) is ReportSource.ORDERS:
        orders = prepare_orders(data, tz)
        return pd.DataFrame({
            'order_id': orders['order_id'],
            'timestamp': orders['created_at'],
        })

    items = prepare_order_items(data, tz)
    attached = items[items['order_id'].notna()]
    order_ids = pd.unique(attached['order_id'])

    dated = attached[attached['added_at'].notna()]
    first_dates = dated.groupby('order_id', sort=False)['added_at'].first()

    return pd.DataFrame({
        'order_id': order_ids,
        'timestamp': pd.to_datetime(pd.Series(order_ids, dtype='object').map(first_dates), errors='coerce'),
    })
