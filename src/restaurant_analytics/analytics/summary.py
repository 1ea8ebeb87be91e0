"""
Summary statistics: average order value, status distribution and the
reconciliation of order totals against their items.
"""
import logging
import traceback

import pandas as pd

from restaurant_analytics.analytics.models import OrderStatus, OrderStatusDistribution
from restaurant_analytics.analytics.schema import prepare_orders
from restaurant_analytics.analytics.sources import ReportSource, revenue_frame, select_source

logger = logging.getLogger(__name__)

DISCREPANCY_COLUMNS = ['order_id', 'total_price', 'calculated_total', 'difference']


def average_order_value(orders, order_items=None):
    """
    Mean value of an order.

    With orders, the mean of their totals (a missing total counts as zero).
    With items only, the items are grouped by their order id and the per-order
    sums are averaged; unattached items are ignored. Zero without data.
    """
    source = select_source(orders, order_items)
    data = orders if source is ReportSource.ORDERS else order_items
    sales = revenue_frame(data, source)

    if source is ReportSource.ORDER_ITEMS:
        sales = sales.dropna(subset=['order_id'])
        sales = sales.groupby('order_id', sort=False)['amount'].sum().reset_index()

    if sales.empty:
        return 0.0

    value = float(sales['amount'].mean())
    logger.info(f"Average order value from {len(sales)} {source.value}-based orders: {value:.2f}")
    return value


def order_status_distribution(orders):
    """
    Completed, in-progress and canceled order counts.

    Orders with any other or missing status only count toward the total.
    """
    frame = prepare_orders(orders)
    codes = frame['status_code']
    return OrderStatusDistribution(
        completed=int(codes.eq(OrderStatus.COMPLETED.code).sum()),
        in_progress=int(codes.eq(OrderStatus.IN_PROGRESS.code).sum()),
        canceled=int(codes.eq(OrderStatus.CANCELLED.code).sum()),
        total=len(frame),
    )


def verify_totals(orders, order_items, tolerance=0.01):
    """
    Verify that order totals match the sum of their items.

    Only orders present on both sides are compared, so this tells whether the
    order-level and the item-level reports agree where both are available.
    """
    try:
        logger.info("Verifying order total amounts")

        calculated = revenue_frame(order_items, ReportSource.ORDER_ITEMS).dropna(subset=['order_id'])
        calculated = calculated.groupby('order_id')['amount'].sum().reset_index(name='calculated_total')

        totals = prepare_orders(orders).dropna(subset=['order_id'])[['order_id', 'total_price']]
        totals = totals.assign(total_price=totals['total_price'].fillna(0.0))

        merged = pd.merge(totals, calculated, on='order_id', how='inner')
        merged['difference'] = (merged['total_price'] - merged['calculated_total']).abs()

        # Differences under the tolerance are float noise
        discrepancies = merged[merged['difference'] > tolerance].reset_index(drop=True)

        if len(discrepancies) > 0:
            logger.warning(f"Found {len(discrepancies)} orders with total amount discrepancies")
        else:
            logger.info("All order total amounts match calculated totals")

        return discrepancies[DISCREPANCY_COLUMNS]
    except Exception as e:
        logger.error(f"Error verifying order totals: {str(e)}")
        logger.error(traceback.format_exc())
        raise
