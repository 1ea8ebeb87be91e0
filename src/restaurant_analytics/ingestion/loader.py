"""
Data access for the analytics reports: the order store read accessors and the
concurrent fetch of the collections.
"""
import os
import logging
import time
import traceback
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError

import pandas as pd
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from restaurant_analytics.analytics.schema import (
    ORDER_COLUMNS,
    ORDER_ITEM_COLUMNS,
    FOOD_COLUMNS,
    CATEGORY_COLUMNS,
)
from restaurant_analytics.db.engine import create_db_engine
from restaurant_analytics.db.models import (
    OrderRecord,
    OrderItemRecord,
    FoodRecord,
    FoodCategoryRecord,
    CategoryFoodRecord,
)

logger = logging.getLogger(__name__)


def empty_collection(name):
    """
    Empty DataFrame with the columns of the named collection.
    """
    columns = {
        'orders': ORDER_COLUMNS,
        'order_items': ORDER_ITEM_COLUMNS,
        'foods': FOOD_COLUMNS,
        'categories': CATEGORY_COLUMNS,
    }[name]
    return pd.DataFrame(columns=columns)


class DatabaseRepository:
    """Read accessors over the order store tables."""

    def __init__(self, engine):
        self.engine = engine

    def _read(self, statement, table_name):
        try:
            with self.engine.connect() as conn:
                df = pd.read_sql(statement, conn)
            logger.info(f"Loaded {len(df)} rows from {table_name}")
            return df
        except SQLAlchemyError as e:
            logger.error(f"Failed to read {table_name}: {str(e)}")
            logger.error(traceback.format_exc())
            raise

    def list_all_orders(self):
        return self._read(select(OrderRecord.__table__), 'orders')

    def list_all_order_items(self):
        return self._read(select(OrderItemRecord.__table__), 'order_items')

    def list_all_foods(self):
        return self._read(select(FoodRecord.__table__), 'foods')

    def list_all_categories(self):
        """
        Categories with the ordered list of their food ids.
        """
        categories = self._read(select(FoodCategoryRecord.__table__), 'food_categories')
        memberships = self._read(
            select(CategoryFoodRecord.category_id, CategoryFoodRecord.food_id)
            .order_by(CategoryFoodRecord.category_id, CategoryFoodRecord.position, CategoryFoodRecord.id),
            'category_foods'
        )

        food_ids = memberships.groupby('category_id', sort=False)['food_id'].agg(list)
        categories['food_ids'] = categories['id'].map(food_ids)
        categories['food_ids'] = categories['food_ids'].apply(lambda ids: ids if isinstance(ids, list) else [])
        return categories[CATEGORY_COLUMNS]


class CsvRepository:
    """Read accessors over a directory of exported CSV files."""

    FILES = {
        'orders': 'orders.csv',
        'order_items': 'order_items.csv',
        'foods': 'foods.csv',
        'categories': 'categories.csv',
    }

    DTYPES = {
        'orders': {'order_id': 'str', 'table_id': 'str'},
        'order_items': {
            'item_id': 'str', 'order_id': 'str', 'food_id': 'str',
            'food_name': 'str', 'chef_id': 'str', 'table_number': 'str'
        },
        'foods': {'food_id': 'str', 'name': 'str'},
        'categories': {'id': 'str', 'name': 'str', 'food_ids': 'str'},
    }

    def __init__(self, input_dir):
        self.input_dir = input_dir

    def _read(self, name):
        file_path = os.path.join(self.input_dir, self.FILES[name])

        if not os.path.exists(file_path):
            logger.warning(f"File not found: {file_path}, using an empty {name} collection")
            return empty_collection(name)

        df = pd.read_csv(file_path, dtype=self.DTYPES[name])
        logger.info(f"Loaded {len(df)} rows from {file_path}")

        missing_values = df.isnull().sum().sum()
        if missing_values > 0:
            logger.warning(f"Found {missing_values} missing values in {file_path}")
        return df

    def list_all_orders(self):
        return self._read('orders')

    def list_all_order_items(self):
        return self._read('order_items')

    def list_all_foods(self):
        return self._read('foods')

    def list_all_categories(self):
        categories = self._read('categories')
        # food_ids are stored as "f1|f2|f3"
        categories['food_ids'] = categories['food_ids'].apply(
            lambda value: [part.strip() for part in value.split('|') if part.strip()]
            if isinstance(value, str) else []
        )
        return categories


def create_repository(config, engine=None):
    """
    Repository for the configured source.
    """
    if config.get_source() == 'csv':
        return CsvRepository(config.get_input_path())

    if engine is None:
        engine = create_db_engine(config)
    return DatabaseRepository(engine)


def fetch_collections(repository, timeout=5.0):
    """
    Fetch every collection the reports need.

    The fetches run concurrently since none depends on another, and all of
    them share the same deadline. A fetch that fails or times out yields an
    empty collection, so the reports fall back as if there was no data; the
    reason is returned in the error map.

    Returns:
        tuple: (dict of DataFrames keyed by collection name, dict of errors)
    """
    accessors = {
        'orders': repository.list_all_orders,
        'order_items': repository.list_all_order_items,
        'foods': repository.list_all_foods,
        'categories': repository.list_all_categories,
    }
    data, errors = {}, {}

    executor = ThreadPoolExecutor(max_workers=len(accessors))
    try:
        futures = {name: executor.submit(accessor) for name, accessor in accessors.items()}
        deadline = time.monotonic() + timeout

        for name, future in futures.items():
            try:
                data[name] = future.result(timeout=max(deadline - time.monotonic(), 0))
            except FutureTimeoutError:
                logger.warning(f"Fetching {name} timed out after {timeout}s, treating it as empty")
                data[name] = empty_collection(name)
                errors[name] = f"timed out after {timeout}s"
            except Exception as e:
                logger.error(f"Error fetching {name}: {str(e)}")
                data[name] = empty_collection(name)
                errors[name] = str(e)
    finally:
        # Return without waiting on a timed-out fetch; its thread still finishes
        # in the background and is joined at interpreter exit
        executor.shutdown(wait=False, cancel_futures=True)

    logger.info("Fetched collections: " + ", ".join(f"{name}={len(df)}" for name, df in data.items()))
    return data, errors
