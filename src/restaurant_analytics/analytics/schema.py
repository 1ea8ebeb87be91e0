"""
Column layout of the input collections and their normalization.

Every report calls one of the ``prepare_*`` functions on its input, which
returns a new DataFrame with the expected columns and dtypes. The caller's
frames are never modified.
"""
import logging
from datetime import datetime

import pandas as pd

logger = logging.getLogger(__name__)

ORDER_COLUMNS = ['order_id', 'table_id', 'total_price', 'status_code', 'created_at']

ORDER_ITEM_COLUMNS = [
    'item_id', 'order_id', 'food_id', 'food_name', 'unit_price',
    'quantity', 'status_code', 'chef_id', 'table_number', 'added_at'
]

FOOD_COLUMNS = ['food_id', 'name', 'price', 'availability']

CATEGORY_COLUMNS = ['id', 'name', 'food_ids']


def _with_columns(df, columns):
    """
    Copy of df holding at least the given columns; missing ones are all-null.
    """
    if df is None:
        return pd.DataFrame({col: pd.Series(dtype='object') for col in columns})

    frame = df.rename(columns=lambda x: x.strip() if isinstance(x, str) else x).copy()
    for col in columns:
        if col not in frame.columns:
            frame[col] = pd.Series([None] * len(frame), index=frame.index, dtype='object')
    return frame


def _to_numeric(series):
    return pd.to_numeric(series, errors='coerce')


def to_local_time(values, tz=None):
    """
    Parse timestamps into naive local wall-clock time.

    Naive values are taken as already local. Timezone-aware values are
    converted to ``tz`` (or the system local zone) before the zone is dropped.
    Anything unparseable becomes NaT.
    """
    series = values if isinstance(values, pd.Series) else pd.Series(values)

    try:
        stamps = pd.to_datetime(series, errors='coerce')
    except (ValueError, TypeError):
        stamps = None

    # Mixed offsets, or naive and aware values together, only parse as UTC
    if stamps is None or not pd.api.types.is_datetime64_any_dtype(stamps):
        stamps = pd.to_datetime(series, errors='coerce', utc=True)

    if stamps.dt.tz is None:
        return stamps

    if tz is not None:
        return stamps.dt.tz_convert(tz).dt.tz_localize(None)

    local = pd.Series(pd.NaT, index=stamps.index, dtype='datetime64[ns]')
    present = stamps.dropna()
    if len(present) > 0:
        local.loc[present.index] = [
            ts.to_pydatetime().astimezone().replace(tzinfo=None) for ts in present
        ]
    return local


def resolve_now(now=None, tz=None):
    """
    The reference instant for time buckets as a naive local Timestamp.
    """
    if now is None:
        if tz is not None:
            return pd.Timestamp.now(tz=tz).tz_localize(None)
        return pd.Timestamp(datetime.now())

    stamp = pd.Timestamp(now)
    if stamp.tzinfo is not None:
        if tz is not None:
            return stamp.tz_convert(tz).tz_localize(None)
        return pd.Timestamp(stamp.to_pydatetime().astimezone().replace(tzinfo=None))
    return stamp


def prepare_orders(orders, tz=None):
    frame = _with_columns(orders, ORDER_COLUMNS)
    frame['total_price'] = _to_numeric(frame['total_price'])
    frame['status_code'] = _to_numeric(frame['status_code'])
    frame['created_at'] = to_local_time(frame['created_at'], tz)
    return frame


def prepare_order_items(order_items, tz=None):
    frame = _with_columns(order_items, ORDER_ITEM_COLUMNS)
    frame['unit_price'] = _to_numeric(frame['unit_price'])
    frame['quantity'] = _to_numeric(frame['quantity'])
    frame['added_at'] = to_local_time(frame['added_at'], tz)
    # Historical price times quantity, missing parts count as zero
    frame['revenue'] = frame['unit_price'].fillna(0.0) * frame['quantity'].fillna(0)
    return frame


def prepare_foods(foods):
    frame = _with_columns(foods, FOOD_COLUMNS)
    frame['price'] = _to_numeric(frame['price'])
    return frame


def _as_food_list(value):
    if isinstance(value, (list, tuple, set)):
        return [food_id for food_id in value if pd.notna(food_id)]
    if isinstance(value, str):
        return [part.strip() for part in value.split('|') if part.strip()]
    return []


def prepare_categories(categories):
    frame = _with_columns(categories, CATEGORY_COLUMNS)
    frame['food_ids'] = frame['food_ids'].apply(_as_food_list)
    return frame
