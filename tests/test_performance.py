import pandas as pd
import pytest

from restaurant_analytics.analytics.performance import (
    top_performing_foods,
    category_performance,
    build_category_index,
)

from conftest import make_items


def test_top_foods_ranked_by_revenue(order_items, foods):
    ranked = top_performing_foods(order_items, foods)

    assert ranked['food_id'].tolist() == ['f3', 'f1', 'f2']
    assert ranked['revenue'].tolist() == pytest.approx([60.0, 45.0, 40.0])
    assert ranked['order_count'].tolist() == [1, 2, 2]
    assert ranked['quantity_sold'].tolist() == [2, 4, 2]


def test_food_name_resolution_order(order_items, foods):
    ranked = top_performing_foods(order_items, foods).set_index('food_id')

    # Stored historical name wins over the current menu name
    assert ranked.loc['f1', 'food_name'] == 'Margherita'
    # No stored name: looked up on the menu
    assert ranked.loc['f3', 'food_name'] == 'Lasagna'


def test_food_missing_everywhere_is_unknown():
    items = make_items([('i1', 'o1', 'gone', None, 8.0, 1, None)])

    ranked = top_performing_foods(items, foods=None)

    assert ranked['food_name'].tolist() == ['Unknown']


def test_items_without_food_are_skipped(order_items, foods):
    ranked = top_performing_foods(order_items, foods)

    assert ranked['revenue'].sum() == pytest.approx(145.0)
    assert 'Mystery' not in ranked['food_name'].tolist()


def test_limit_caps_without_padding(order_items, foods):
    assert len(top_performing_foods(order_items, foods, limit=2)) == 2
    assert len(top_performing_foods(order_items, foods, limit=10)) == 3


def test_revenue_is_non_increasing(order_items, foods):
    revenues = top_performing_foods(order_items, foods)['revenue']

    assert revenues.is_monotonic_decreasing


def test_ties_keep_first_sold_order():
    items = make_items([
        ('i1', 'o1', 'b', 'B', 10.0, 1, None),
        ('i2', 'o1', 'a', 'A', 10.0, 1, None),
    ])

    assert top_performing_foods(items)['food_id'].tolist() == ['b', 'a']


def test_no_items_gives_empty_ranking():
    ranked = top_performing_foods(make_items([]), None)

    assert ranked.empty
    assert list(ranked.columns) == ['food_id', 'food_name', 'revenue', 'order_count', 'quantity_sold']


def test_category_performance(order_items, categories):
    ranked = category_performance(order_items, categories)

    assert ranked['category_name'].tolist() == ['Mains', 'Vegetarian', 'Desserts']
    assert ranked['revenue'].tolist() == pytest.approx([105.0, 85.0, 40.0])
    assert ranked['order_count'].tolist() == [3, 4, 2]
    assert ranked['quantity_sold'].tolist() == [6, 6, 2]


def test_categories_without_sales_are_omitted(order_items, categories):
    ranked = category_performance(order_items, categories)

    assert 'c4' not in ranked['category_id'].tolist()


def test_sale_counts_fully_in_every_category_of_the_food():
    items = make_items([('i1', 'o1', 'f1', 'Soup', 10.0, 1, None)])
    categories = pd.DataFrame([
        ('c1', 'Starters', ['f1']),
        ('c2', 'Vegan', ['f1']),
    ], columns=['id', 'name', 'food_ids'])

    ranked = category_performance(items, categories).set_index('category_id')

    assert ranked.loc['c1', 'revenue'] == pytest.approx(10.0)
    assert ranked.loc['c2', 'revenue'] == pytest.approx(10.0)


def test_category_index_maps_food_to_many_categories(categories):
    index = build_category_index(categories)

    assert sorted(index.loc[index['food_id'] == 'f1', 'category_id']) == ['c1', 'c3']
    assert index.loc[index['food_id'] == 'f3', 'category_id'].tolist() == ['c1']


def test_category_food_ids_may_be_pipe_separated(order_items):
    categories = pd.DataFrame([('c1', 'Mains', 'f1|f3')], columns=['id', 'name', 'food_ids'])

    ranked = category_performance(order_items, categories)

    assert ranked['revenue'].tolist() == pytest.approx([105.0])


def test_category_limit(order_items, categories):
    assert category_performance(order_items, categories, limit=1)['category_id'].tolist() == ['c1']


def test_food_name_comes_from_its_first_item(foods):
    items = make_items([
        ('i1', 'o1', 'f1', None, 10.0, 1, None),
        ('i2', 'o2', 'f1', 'Margherita', 10.0, 1, None),
        ('i3', 'o3', 'gone', None, 5.0, 1, None),
        ('i4', 'o3', 'gone', 'Old Special', 5.0, 1, None),
    ])

    ranked = top_performing_foods(items, foods).set_index('food_id')

    assert ranked.loc['f1', 'food_name'] == 'Pizza Margherita'
    assert ranked.loc['gone', 'food_name'] == 'Unknown'


def test_food_listed_twice_in_a_category_counts_once():
    items = make_items([('i1', 'o1', 'f1', 'Soup', 10.0, 1, None)])
    categories = pd.DataFrame([('c1', 'Starters', ['f1', 'f1'])], columns=['id', 'name', 'food_ids'])

    ranked = category_performance(items, categories)

    assert ranked['revenue'].tolist() == pytest.approx([10.0])
    assert ranked['order_count'].tolist() == [1]
