"""
Food and category performance rankings from order items.
"""
import logging
import traceback

import pandas as pd

from restaurant_analytics.analytics.schema import prepare_order_items, prepare_foods, prepare_categories

logger = logging.getLogger(__name__)

UNKNOWN_FOOD_NAME = 'Unknown'

FOOD_PERFORMANCE_COLUMNS = ['food_id', 'food_name', 'revenue', 'order_count', 'quantity_sold']
CATEGORY_PERFORMANCE_COLUMNS = ['category_id', 'category_name', 'revenue', 'order_count', 'quantity_sold']


def _empty(columns):
    return pd.DataFrame({
        'revenue': pd.Series(dtype='float'),
        'order_count': pd.Series(dtype='int'),
        'quantity_sold': pd.Series(dtype='int'),
    }).reindex(columns=columns)


def _rank(performance, limit=None):
    # Stable sort: ties keep the order in which they were first sold
    ranked = performance.sort_values('revenue', ascending=False, kind='mergesort')
    if limit is not None:
        ranked = ranked.head(max(int(limit), 0))
    return ranked.reset_index(drop=True)


def _aggregate_sales(sold, key):
    grouped = sold.groupby(key, sort=False).agg(
        revenue=('revenue', 'sum'),
        order_count=('revenue', 'size'),
        quantity_sold=('quantity', 'sum'),
    ).reset_index()
    grouped['revenue'] = grouped['revenue'].astype(float)
    grouped['quantity_sold'] = grouped['quantity_sold'].astype(int)
    return grouped


def top_performing_foods(order_items, foods=None, limit=10):
    """
    Foods ranked by the revenue of their order items.

    Revenue uses the unit price stored on each item, so it stays correct after
    a price change or a deletion of the food. ``order_count`` is the number of
    line items, not of distinct orders. Returns at most ``limit`` rows.
    """
    try:
        logger.info("Identifying top performing foods")

        items = prepare_order_items(order_items)
        sold = items[items['food_id'].notna()].copy()
        if sold.empty:
            logger.info("No order items with a food to rank")
            return _empty(FOOD_PERFORMANCE_COLUMNS)

        sold['quantity'] = sold['quantity'].fillna(0)
        performance = _aggregate_sales(sold, 'food_id')

        # Name from the first item of the food, then from the menu, then a placeholder
        stored_names = sold.drop_duplicates(subset=['food_id']).set_index('food_id')['food_name']
        menu = prepare_foods(foods).dropna(subset=['food_id']).drop_duplicates(subset=['food_id'])
        menu_names = menu.set_index('food_id')['name']

        performance['food_name'] = (
            performance['food_id'].map(stored_names)
            .fillna(performance['food_id'].map(menu_names))
            .fillna(UNKNOWN_FOOD_NAME)
        )

        ranked = _rank(performance[FOOD_PERFORMANCE_COLUMNS], limit)
        logger.info(f"Ranked {len(ranked)} of {len(performance)} foods")
        return ranked
    except Exception as e:
        logger.error(f"Error identifying top performing foods: {str(e)}")
        logger.error(traceback.format_exc())
        raise


def build_category_index(categories):
    """
    Reverse index of food id -> category ids, one row per membership.

    A food may belong to several categories or to none.
    """
    frame = prepare_categories(categories)
    frame = frame[frame['id'].notna()]

    index = frame[['id', 'food_ids']].explode('food_ids').dropna(subset=['food_ids'])
    index = index.rename(columns={'id': 'category_id', 'food_ids': 'food_id'})
    # A food listed twice in one category still counts once for it
    return index.drop_duplicates().reset_index(drop=True)


def category_performance(order_items, categories, limit=None):
    """
    Categories ranked by the revenue of the foods they contain.

    A sale adds its full revenue to every category holding the food, so
    category revenues are not a partition of total revenue. Categories without
    any sale are left out.
    """
    try:
        logger.info("Calculating category performance")

        items = prepare_order_items(order_items)
        sold = items[items['food_id'].notna()].copy()
        sold['quantity'] = sold['quantity'].fillna(0)

        index = build_category_index(categories)
        memberships = pd.merge(sold, index, on='food_id', how='inner')
        if memberships.empty:
            logger.info("No sales matched any category")
            return _empty(CATEGORY_PERFORMANCE_COLUMNS)

        performance = _aggregate_sales(memberships, 'category_id')

        names = prepare_categories(categories).dropna(subset=['id']).drop_duplicates(subset=['id'])
        performance['category_name'] = performance['category_id'].map(names.set_index('id')['name'])

        ranked = _rank(performance[CATEGORY_PERFORMANCE_COLUMNS], limit)
        logger.info(f"Calculated performance for {len(ranked)} categories")
        return ranked
    except Exception as e:
        logger.error(f"Error calculating category performance: {str(e)}")
        logger.error(traceback.format_exc())
        raise
