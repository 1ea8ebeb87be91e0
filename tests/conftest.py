import pandas as pd
import pytest

# Wednesday of week 42 (Sunday-first weeks)
NOW = pd.Timestamp('2026-10-14 15:30:00')


def make_orders(rows):
    return pd.DataFrame(rows, columns=['order_id', 'table_id', 'total_price', 'status_code', 'created_at'])


def make_items(rows):
    columns = ['item_id', 'order_id', 'food_id', 'food_name', 'unit_price', 'quantity', 'added_at']
    return pd.DataFrame(rows, columns=columns)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def orders():
    return make_orders([
        ('o1', 't1', 40.0, 4, '2026-10-14 09:00:00'),   # today
        ('o2', 't2', 25.0, 3, '2026-10-13 20:15:00'),   # yesterday, this week
        ('o3', 't1', 60.0, 4, '2026-10-06 12:00:00'),   # last week
        ('o4', 't3', 15.5, 5, '2026-09-20 13:00:00'),   # last month
        ('o5', 't2', None, 0, '2026-02-01 10:00:00'),   # this year, no total
        ('o6', 't4', 30.0, 4, None),                    # undated
    ])


@pytest.fixture
def order_items():
    return make_items([
        ('i1', 'o1', 'f1', 'Margherita', 10.0, 2, '2026-10-14 09:05:00'),
        ('i2', 'o1', 'f2', 'Tiramisu', 20.0, 1, '2026-10-14 09:06:00'),
        ('i3', 'o2', 'f1', 'Margherita', 12.5, 2, '2026-10-13 20:20:00'),
        ('i4', 'o3', 'f3', None, 30.0, 2, '2026-10-06 12:10:00'),
        ('i5', None, 'f2', 'Tiramisu', 20.0, 1, '2026-10-14 14:00:00'),
        ('i6', 'o4', None, 'Mystery', 15.5, 1, '2026-09-20 13:05:00'),
    ])


@pytest.fixture
def foods():
    return pd.DataFrame([
        ('f1', 'Pizza Margherita', 13.0, True),
        ('f2', 'Tiramisu', 6.0, True),
        ('f3', 'Lasagna', 16.0, False),
    ], columns=['food_id', 'name', 'price', 'availability'])


@pytest.fixture
def categories():
    return pd.DataFrame([
        ('c1', 'Mains', ['f1', 'f3']),
        ('c2', 'Desserts', ['f2']),
        ('c3', 'Vegetarian', ['f1', 'f2']),
        ('c4', 'Drinks', ['f9']),
    ], columns=['id', 'name', 'food_ids'])
