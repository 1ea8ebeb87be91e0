"""
Database models for the order store read by the analytics reports.
"""
from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class OrderRecord(Base):
    """A submitted order with its aggregate total and status."""
    __tablename__ = 'orders'

    order_id = Column(String(64), primary_key=True)
    table_id = Column(String(64))
    total_price = Column(Float, nullable=True)
    status_code = Column(Integer, nullable=True)
    created_at = Column(DateTime, nullable=True)


class OrderItemRecord(Base):
    """One food line, priced at the time it was ordered."""
    __tablename__ = 'order_items'

    item_id = Column(String(64), primary_key=True)
    # Items can exist before they are attached to an order
    order_id = Column(String(64), nullable=True)
    food_id = Column(String(64), nullable=True)
    food_name = Column(String(200), nullable=True)
    unit_price = Column(Float, nullable=True)
    quantity = Column(Integer, nullable=True)
    status_code = Column(Integer, nullable=True)
    chef_id = Column(String(64), nullable=True)
    table_number = Column(String(32))
    added_at = Column(DateTime, nullable=True)


class FoodRecord(Base):
    """Menu food with its current price."""
    __tablename__ = 'foods'

    food_id = Column(String(64), primary_key=True)
    name = Column(String(200))
    price = Column(Float, nullable=True)
    availability = Column(Boolean, default=True)


class FoodCategoryRecord(Base):
    """Menu category."""
    __tablename__ = 'food_categories'

    id = Column(String(64), primary_key=True)
    name = Column(String(200))


class CategoryFoodRecord(Base):
    """Membership of a food in a category, ordered by position."""
    __tablename__ = 'category_foods'

    id = Column(Integer, primary_key=True, autoincrement=True)
    category_id = Column(String(64), ForeignKey('food_categories.id'))
    food_id = Column(String(64))
    position = Column(Integer, default=0)
