import pandas as pd
import pytest

from restaurant_analytics.analytics.models import OrderStatus, OrderStatusDistribution
from restaurant_analytics.analytics.summary import average_order_value, order_status_distribution, verify_totals

from conftest import NOW, make_items, make_orders


def test_average_order_value_from_orders(orders, order_items):
    # Missing total counts as zero, every order counts
    assert average_order_value(orders, order_items) == pytest.approx(170.5 / 6)


def test_average_order_value_falls_back_to_items(order_items):
    # o1: 40, o2: 25, o3: 60, o4: 15.5; the unattached item is ignored
    assert average_order_value(make_orders([]), order_items) == pytest.approx(140.5 / 4)


def test_average_order_value_single_item_example():
    items = make_items([('i1', 'o1', 'f1', 'Burger', 50.0, 3, NOW.normalize() + pd.Timedelta(hours=14))])

    assert average_order_value(None, items) == pytest.approx(150.0)


def test_average_order_value_without_data_is_zero():
    assert average_order_value(None, None) == 0.0
    assert average_order_value(make_orders([]), make_items([])) == 0.0
    # Items that belong to no order give no average either
    assert average_order_value(None, make_items([('i1', None, 'f1', 'A', 5.0, 1, None)])) == 0.0


def test_order_status_distribution():
    orders = make_orders([
        ('o1', 't1', 10.0, 4, None),
        ('o2', 't1', 10.0, 4, None),
        ('o3', 't1', 10.0, 3, None),
        ('o4', 't1', 10.0, 5, None),
        ('o5', 't1', 10.0, 99, None),
    ])

    assert order_status_distribution(orders) == OrderStatusDistribution(
        completed=2, in_progress=1, canceled=1, total=5
    )


def test_order_status_distribution_is_zero_filled_when_empty():
    assert order_status_distribution(None) == OrderStatusDistribution(0, 0, 0, 0)


def test_unknown_status_code_reads_as_pending():
    assert OrderStatus.from_code(99) is OrderStatus.PENDING
    assert OrderStatus.from_code(5) is OrderStatus.CANCELLED
    assert OrderStatus.CANCELLED.display_name == 'Cancelled'


def test_verify_totals_reports_mismatching_orders(orders, order_items):
    discrepancies = verify_totals(orders, order_items)

    # o1 items sum to 40, o2 to 25, o3 to 60, o4 to 15.5: all consistent
    assert discrepancies.empty

    changed = orders.copy()
    changed.loc[changed['order_id'] == 'o2', 'total_price'] = 30.0
    discrepancies = verify_totals(changed, order_items)

    assert discrepancies['order_id'].tolist() == ['o2']
    assert discrepancies['difference'].iloc[0] == pytest.approx(5.0)
