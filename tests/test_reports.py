import json

import pandas as pd
import pytest

from restaurant_analytics.analytics.reports import build_analytics_report
from restaurant_analytics.analytics.sources import ReportSource, select_source

from conftest import NOW, make_items, make_orders


def test_select_source_prefers_orders(orders, order_items):
    assert select_source(orders, order_items) is ReportSource.ORDERS
    assert select_source(make_orders([]), order_items) is ReportSource.ORDER_ITEMS
    assert select_source(None, None) is ReportSource.ORDERS


def test_report_from_orders(orders, order_items, foods, categories):
    report = build_analytics_report(orders, order_items, foods, categories, now=NOW)

    assert report.source == 'orders'
    assert report.revenue_by_time_range.today == pytest.approx(40.0)
    assert report.order_counts_by_time_range.total == 6
    assert report.order_status_distribution.completed == 3
    assert report.top_performing_foods['food_id'].iloc[0] == 'f3'
    assert len(report.daily_revenue) == 7
    assert len(report.hourly_revenue) == 24


def test_report_falls_back_to_items(order_items, foods, categories):
    report = build_analytics_report(make_orders([]), order_items, foods, categories, now=NOW)

    assert report.source == 'order_items'
    assert report.revenue_by_time_range.today == pytest.approx(60.0)
    assert report.order_counts_by_time_range.total == 4
    assert report.order_status_distribution.total == 0
    assert report.daily_revenue['revenue'].iloc[-1] == pytest.approx(60.0)


def test_single_item_example_through_report():
    items = make_items([('i1', 'o1', 'f1', 'Burger', 50.0, 3, NOW.normalize() + pd.Timedelta(hours=14))])

    report = build_analytics_report(None, items, now=NOW)

    assert report.revenue_by_time_range.today == pytest.approx(150.0)
    assert report.hourly_revenue['revenue'][14] == pytest.approx(150.0)
    assert report.average_order_value == pytest.approx(150.0)


def test_empty_report_is_zero_valued():
    report = build_analytics_report(None, None, now=NOW)

    assert report.revenue_by_time_range.total == 0.0
    assert report.order_counts_by_time_range.total == 0
    assert report.average_order_value == 0.0
    assert report.top_performing_foods.empty
    assert report.category_performance.empty
    assert len(report.daily_revenue) == 7
    assert (report.hourly_revenue['revenue'] == 0).all()


def test_top_helpers_take_the_first_rows(orders, order_items, foods, categories):
    report = build_analytics_report(orders, order_items, foods, categories, now=NOW)

    assert report.top_foods_by_revenue(2)['food_id'].tolist() == ['f3', 'f1']
    assert report.top_categories_by_revenue(1)['category_name'].tolist() == ['Mains']


def test_report_serializes_to_json(orders, order_items, foods, categories):
    report = build_analytics_report(orders, order_items, foods, categories, now=NOW)

    payload = json.loads(json.dumps(report.to_dict()))

    assert payload['source'] == 'orders'
    assert payload['daily_revenue'][-1] == {'date': '10/14', 'revenue': 60.0}
    assert payload['order_status_distribution']['total'] == 6
    assert len(payload['hourly_revenue']) == 24


def test_verify_attaches_discrepancies(orders, order_items):
    report = build_analytics_report(orders, order_items, now=NOW, verify=True)

    assert report.total_discrepancies is not None
    assert report.total_discrepancies.empty


def test_report_without_days_has_empty_daily_series(orders, order_items):
    report = build_analytics_report(orders, order_items, now=NOW, days=0)

    assert report.daily_revenue.empty
    assert report.revenue_by_time_range.today == pytest.approx(40.0)
    assert report.to_dict()['daily_revenue'] == []
